"""PDF portfolio report generation."""

from __future__ import annotations

import logging
from typing import Any

from portfolio_mcp.prompts.ai_prompts import REPORT_SYSTEM_INSTRUCTION, build_report_prompt
from portfolio_mcp.providers.http import ProviderError
from portfolio_mcp.providers.pdf_text import extract_pdf_pages, join_pages
from portfolio_mcp.services.ai_service import PROVIDER_LABELS, CompletionFactory
from portfolio_mcp.services.base import ServiceContext, ServiceResult
from portfolio_mcp.services.fallback_manager import PLACEHOLDER_KEY, FallbackManager, ProviderAttempt
from portfolio_mcp.services.provider_status import ProviderStatus

LOGGER = logging.getLogger(__name__)
REPORT_FAILURE_MESSAGE = "Failed to generate report. Please try again."
REPORT_MAX_TOKENS = 4000


class ReportService:
    def __init__(self, ctx: ServiceContext, completion_factory: CompletionFactory, max_pages: int | None = 50) -> None:
        self.ctx = ctx
        self.completion_factory = completion_factory
        self.max_pages = max_pages
        status = self.ctx.get_provider("provider_status")
        if not isinstance(status, ProviderStatus):
            status = ProviderStatus()
            self.ctx.providers["provider_status"] = status
        self.fallback_manager = FallbackManager(provider_status=status)

    def generate_report(
        self,
        file_path: str,
        instructions: str | None = None,
        model: str | None = None,
    ) -> ServiceResult[dict[str, Any]]:
        """Extract the PDF text, embed it in a prompt and return the answer verbatim."""
        try:
            pages = extract_pdf_pages(file_path, max_pages=self.max_pages)
        except ProviderError as error:
            LOGGER.warning("report document unreadable: path=%s code=%s message=%s", file_path, error.code, error.message)
            return self._failure(error.message)
        document_text = join_pages(pages)
        if not document_text:
            LOGGER.warning("report document has no extractable text: path=%s pages=%s", file_path, len(pages))
            return self._failure("The PDF contains no extractable text.")

        client = self.completion_factory(model=model)
        if client is None:
            return self._failure("AI is disabled.")
        prompt = build_report_prompt(document_text, instructions)

        def _complete() -> dict[str, Any] | None:
            text = client.complete(prompt, system=REPORT_SYSTEM_INSTRUCTION, max_tokens=REPORT_MAX_TOKENS)
            if text is None:
                return None
            return {"report": text, "generated": True, "pages": len(pages), "model": client.model}

        result = self.fallback_manager.execute(
            "generate_report",
            file_path,
            [ProviderAttempt(client.provider, PROVIDER_LABELS.get(client.provider, client.provider), _complete)],
        )
        if result.data is None:
            return self._failure(result.error.message if result.error else None)
        return result

    @staticmethod
    def _failure(detail: str | None) -> ServiceResult[dict[str, Any]]:
        return ServiceResult(
            data={"report": REPORT_FAILURE_MESSAGE, "generated": False, "detail": detail},
            source=PLACEHOLDER_KEY,
            warning=REPORT_FAILURE_MESSAGE,
            data_provider=PLACEHOLDER_KEY,
        )
