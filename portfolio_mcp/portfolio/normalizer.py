"""Normalization of free-text language-model answers into structured payloads.

Three attempts, first success wins:

1. strict parse of the first fenced ```json block (or the first brace-delimited
   substring when there is no fence);
2. strict parse after cumulative structural repairs of that candidate;
3. scraping of markdown headings, recommendation bullets and a
   current-vs-target table.

Everything here is a pure text transform; no I/O, no retries.
"""

from __future__ import annotations

import json
import logging
import re
from typing import Any, Iterator

LOGGER = logging.getLogger(__name__)

FENCED_JSON = re.compile(r"```json\s*([\s\S]*?)```", re.IGNORECASE)
OPEN_FENCED_JSON = re.compile(r"```json\s*([\s\S]*)$", re.IGNORECASE)

CLOSERS = {"{": "}", "[": "]"}
PARTIAL_LITERAL = re.compile(r"[:\[,]\s*(t|tr|tru|f|fa|fal|fals|n|nu|nul)$")
LITERAL_COMPLETIONS = {"t": "true", "f": "false", "n": "null"}
DANGLING_KEY = re.compile(r"[{,]\s*\"(?:[^\"\\]|\\.)*\"$")
MISSING_COMMA = re.compile(r"([}\]])(\s*)([{\[])")
TRAILING_COMMA = re.compile(r",\s*([}\]])")

HEADING = re.compile(r"^\s{0,3}#{1,6}\s+(.*?)\s*#*\s*$")
BULLET = re.compile(r"^\s*[-*•+]\s+(.*)$")
TABLE_SEPARATOR_CELL = re.compile(r"^:?-{2,}:?$")
FIRST_NUMBER = re.compile(r"\d+(?:[.,]\d+)?")
TABLE_COLUMNS = ("asset", "current", "target", "action")
# `[` followed by an object, array, string or `]`; keeps markdown links and footnotes out.
BARE_ARRAY_START = re.compile(r'\[\s*[\[{"\]]')


class UnparsableAIResponse(ValueError):
    """Raised when no structured payload can be recovered from a model answer."""

    code = "UNPARSABLE_AI_RESPONSE"


def extract_json_candidate(text: str) -> str | None:
    """Return the text most likely to hold the JSON payload, or None."""
    if not text:
        return None
    fence = FENCED_JSON.search(text)
    if fence:
        return fence.group(1).strip()
    open_fence = OPEN_FENCED_JSON.search(text)
    if open_fence:
        return open_fence.group(1).strip()
    brace = text.find("{")
    array = BARE_ARRAY_START.search(text)
    if array and (brace == -1 or array.start() < brace):
        start, opener, closer = array.start(), "[", "]"
    elif brace != -1:
        start, opener, closer = brace, "{", "}"
    else:
        return None
    end = text.rfind(closer)
    if end > start:
        sliced = text[start : end + 1]
        if sliced.count(opener) <= sliced.count(closer):
            return sliced
    return text[start:].strip()


def _balance(text: str) -> tuple[str, list[str]]:
    """Close mismatched or missing braces/brackets and an unterminated string.

    A closer that does not match the innermost open container gets the missing
    closers inserted in front of it; a closer with no opener at all is dropped.
    Returns the rewritten text and the containers still open at the end.
    """
    out: list[str] = []
    stack: list[str] = []
    in_string = False
    escaped = False
    for ch in text:
        if in_string:
            out.append(ch)
            if escaped:
                escaped = False
            elif ch == "\\":
                escaped = True
            elif ch == '"':
                in_string = False
            continue
        if ch == '"':
            in_string = True
            out.append(ch)
        elif ch in CLOSERS:
            stack.append(ch)
            out.append(ch)
        elif ch in "}]":
            opener = "{" if ch == "}" else "["
            if opener not in stack:
                continue
            while stack[-1] != opener:
                out.append(CLOSERS[stack.pop()])
            stack.pop()
            out.append(ch)
        else:
            out.append(ch)
    if in_string:
        if escaped:
            out.pop()
        out.append('"')
    return "".join(out), stack


def _close_dangling_value(tail: str, stack: list[str]) -> str:
    tail = re.sub(r"(\d)[.eE+\-]+$", r"\1", tail.rstrip())
    tail = re.sub(r"([:\[,]\s*)-$", r"\1", tail).rstrip()
    partial = PARTIAL_LITERAL.search(tail)
    if partial:
        tail = tail[: partial.start(1)] + LITERAL_COMPLETIONS[partial.group(1)[0]]
    while tail.endswith(","):
        tail = tail[:-1].rstrip()
    if tail.endswith(":"):
        tail += " null"
    elif stack and stack[-1] == "{" and DANGLING_KEY.search(tail):
        tail += ": null"
    return tail


def balance_structure(text: str) -> str:
    balanced, stack = _balance(text)
    if not stack:
        return balanced
    balanced = _close_dangling_value(balanced, stack)
    return balanced + "".join(CLOSERS[opener] for opener in reversed(stack))


def insert_missing_commas(text: str) -> str:
    return MISSING_COMMA.sub(r"\1,\2\3", text)


def remove_trailing_commas(text: str) -> str:
    return TRAILING_COMMA.sub(r"\1", text)


def repair_json(candidate: str) -> Iterator[str]:
    """Yield the candidate after each cumulative batch of repairs."""
    repaired = balance_structure(candidate)
    yield repaired
    repaired = insert_missing_commas(repaired)
    yield repaired
    yield remove_trailing_commas(repaired)


def _strict_parse(candidate: str) -> dict[str, Any] | list[Any] | None:
    try:
        value = json.loads(candidate)
    except (json.JSONDecodeError, TypeError):
        return None
    if isinstance(value, (dict, list)) and value:
        return value
    return None


def _clean_inline(text: str) -> str:
    return re.sub(r"[*_`]{1,3}", "", text).strip()


def _first_number(cell: str) -> float:
    match = FIRST_NUMBER.search(cell)
    return float(match.group(0).replace(",", ".")) if match else 0.0


def _split_row(line: str) -> list[str]:
    return [cell.strip() for cell in line.strip().strip("|").split("|")]


def _scrape_summary(lines: list[str]) -> str | None:
    for idx, line in enumerate(lines):
        if not HEADING.match(line):
            continue
        paragraph: list[str] = []
        for follow in lines[idx + 1 :]:
            stripped = follow.strip()
            if not stripped:
                if paragraph:
                    break
                continue
            if HEADING.match(follow) or BULLET.match(follow) or stripped.startswith("|"):
                break
            paragraph.append(_clean_inline(stripped))
        if paragraph:
            return " ".join(paragraph)
    return None


def _scrape_recommendations(lines: list[str]) -> list[str]:
    items: list[str] = []
    inside = False
    for line in lines:
        heading = HEADING.match(line)
        if heading:
            inside = "recommendation" in heading.group(1).lower()
            continue
        if not inside:
            continue
        bullet = BULLET.match(line)
        if bullet:
            text = _clean_inline(bullet.group(1))
            if text:
                items.append(text)
    return items


def _scrape_table(lines: list[str]) -> list[dict[str, Any]]:
    rows: list[dict[str, Any]] = []
    columns: dict[str, int] | None = None
    for line in lines:
        stripped = line.strip()
        if not stripped.startswith("|"):
            if columns is not None and rows:
                break
            columns = None
            continue
        cells = _split_row(stripped)
        if columns is None:
            lowered = [cell.lower() for cell in cells]
            found = {}
            for name in TABLE_COLUMNS:
                index = next((i for i, cell in enumerate(lowered) if name in cell), None)
                if index is not None:
                    found[name] = index
            if len(found) == len(TABLE_COLUMNS):
                columns = found
            continue
        if all(TABLE_SEPARATOR_CELL.match(cell) for cell in cells if cell):
            continue

        def cell_at(name: str) -> str:
            index = columns[name]
            return cells[index] if index < len(cells) else ""

        rows.append(
            {
                "ticker": _clean_inline(cell_at("asset")),
                "current": _first_number(cell_at("current")),
                "target": _first_number(cell_at("target")),
                "action": _clean_inline(cell_at("action")),
            }
        )
    return rows


def scrape_markdown(text: str) -> dict[str, Any]:
    """Scrape summary, recommendations and a current-vs-target table from markdown."""
    lines = text.splitlines()
    if not any(HEADING.match(line) or BULLET.match(line) for line in lines):
        return {}
    result: dict[str, Any] = {}
    summary = _scrape_summary(lines)
    if summary:
        result["summary"] = summary
    recommendations = _scrape_recommendations(lines)
    if recommendations:
        result["recommendations"] = recommendations
    table = _scrape_table(lines)
    if table:
        result["current_vs_target"] = table
    return result


def normalize_ai_response(text: str) -> dict[str, Any] | list[Any]:
    """Convert a model answer into a structured payload or raise UnparsableAIResponse."""
    if not isinstance(text, str) or not text.strip():
        raise UnparsableAIResponse("AI response is empty.")
    candidate = extract_json_candidate(text)
    if candidate:
        parsed = _strict_parse(candidate)
        if parsed is not None:
            return parsed
        for batch, repaired in enumerate(repair_json(candidate), start=1):
            parsed = _strict_parse(repaired)
            if parsed is not None:
                LOGGER.info("ai response recovered by structural repair: batch=%s", batch)
                return parsed
    scraped = scrape_markdown(text)
    if scraped:
        LOGGER.info("ai response recovered by markdown scrape: keys=%s", sorted(scraped))
        return scraped
    raise UnparsableAIResponse("AI response could not be parsed as JSON or markdown.")
