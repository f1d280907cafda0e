"""Local PDF text extraction."""

from __future__ import annotations

import os

import pdfplumber

from portfolio_mcp.providers.http import ProviderError


def extract_pdf_pages(file_path: str, max_pages: int | None = None) -> list[str]:
    """Return the text of each page, in order; pages without text yield ''."""
    if not os.path.isfile(file_path):
        raise ProviderError("pdf", "NOT_FOUND", f"PDF file not found: {file_path}")
    try:
        with pdfplumber.open(file_path) as pdf:
            pages = pdf.pages if max_pages is None else pdf.pages[:max_pages]
            return [(page.extract_text() or "").strip() for page in pages]
    except ProviderError:
        raise
    except Exception as error:
        raise ProviderError("pdf", "BAD_RESPONSE", f"Could not read PDF: {error}") from error


def join_pages(pages: list[str]) -> str:
    return "\n\n".join(f"--- Page {idx} ---\n{text}" for idx, text in enumerate(pages, start=1) if text)
