"""JSON envelopes returned by every tool.

Success: `{"data", "source", "data_provider", "placeholder", "fetched_at",
"disclaimer"}` plus `warning` when the data is degraded.
Failure: `{"error": true, "code", "message", "retriable"}`.
"""

from __future__ import annotations

import json
import time
from dataclasses import asdict, is_dataclass
from datetime import datetime, timezone
from typing import Any

from portfolio_mcp.services.base import ServiceResult
from portfolio_mcp.services.fallback_manager import PLACEHOLDER_KEY

DISCLAIMER = "Portfolio data and AI output are for informational purposes only and do not constitute financial advice."


def to_jsonable(data: Any) -> Any:
    if is_dataclass(data) and not isinstance(data, type):
        return asdict(data)
    if isinstance(data, dict):
        return {key: to_jsonable(value) for key, value in data.items()}
    if isinstance(data, (list, tuple)):
        return [to_jsonable(item) for item in data]
    return data


def _iso(ts: float | None) -> str:
    return datetime.fromtimestamp(ts or time.time(), tz=timezone.utc).isoformat()


def success_response(result: ServiceResult[Any]) -> str:
    provider = result.data_provider or result.source or "unknown"
    payload: dict[str, Any] = {
        "data": to_jsonable(result.data),
        "source": result.source or provider,
        "data_provider": provider,
        "placeholder": provider == PLACEHOLDER_KEY,
        "fetched_at": _iso(result.fetched_at),
        "disclaimer": DISCLAIMER,
    }
    if result.warning:
        payload["warning"] = result.warning
    return json.dumps(payload, ensure_ascii=True)


def error_response(code: str, message: str, retriable: bool = False) -> str:
    return json.dumps({"error": True, "code": code, "message": message, "retriable": retriable}, ensure_ascii=True)


def result_response(result: ServiceResult[Any]) -> str:
    if result.data is not None:
        return success_response(result)
    if result.error is None:
        return error_response("NOT_FOUND", "No data returned.")
    return error_response(result.error.code, result.error.message, result.error.retriable)
