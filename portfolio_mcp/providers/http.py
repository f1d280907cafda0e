"""HTTP utilities and normalized provider errors."""

from __future__ import annotations

import json
from dataclasses import dataclass
from typing import Any, Literal

import requests
from requests.adapters import HTTPAdapter

from portfolio_mcp.providers.models import ProviderName

ProviderErrorCode = Literal["RATE_LIMIT", "AUTH", "NOT_FOUND", "UPSTREAM", "NETWORK", "BAD_RESPONSE"]

_SESSION = requests.Session()
_SESSION.mount("https://", HTTPAdapter(pool_connections=10, pool_maxsize=20))
_SESSION.mount("http://", HTTPAdapter(pool_connections=10, pool_maxsize=20))


@dataclass
class ProviderError(Exception):
    provider: ProviderName
    code: ProviderErrorCode
    message: str
    status: int | None = None

    def __str__(self) -> str:
        return self.message


def map_status_to_code(status: int) -> ProviderErrorCode:
    if status in {401, 403}:
        return "AUTH"
    if status == 404:
        return "NOT_FOUND"
    if status == 429:
        return "RATE_LIMIT"
    return "UPSTREAM"


def upstream_detail(response: requests.Response) -> str | None:
    """Best-effort extraction of the error message an endpoint put in its body."""
    try:
        body = response.json()
    except ValueError:
        text = (response.text or "").strip()
        return text[:300] or None
    if not isinstance(body, dict):
        return None
    error = body.get("error")
    if isinstance(error, dict):
        message = error.get("message")
        return str(message) if message else json.dumps(error)[:300]
    if isinstance(error, str):
        return error
    message = body.get("message")
    return str(message) if message else None


def raise_for_status(provider: ProviderName, response: requests.Response, label: str) -> None:
    if response.ok:
        return
    code = map_status_to_code(response.status_code)
    message = f"{label} request failed with status {response.status_code}."
    if code == "AUTH":
        detail = upstream_detail(response)
        message = f"{label} authentication failed (status {response.status_code})"
        message = f"{message}: {detail}" if detail else f"{message}."
    elif code == "RATE_LIMIT":
        message = f"{label} rate limit reached."
    raise ProviderError(provider, code, message, response.status_code)


def post_json(
    url: str,
    payload: dict[str, Any],
    provider: ProviderName,
    label: str,
    headers: dict[str, str] | None = None,
    timeout_seconds: float | None = None,
) -> Any:
    """POST a JSON body and return the decoded JSON response. Single attempt, no retries."""
    try:
        response = _SESSION.post(url, data=json.dumps(payload), headers=headers, timeout=timeout_seconds)
    except requests.RequestException as error:
        raise ProviderError(provider, "NETWORK", f"{label} request failed: {error}") from error
    raise_for_status(provider, response, label)
    try:
        return response.json()
    except ValueError as error:
        raise ProviderError(
            provider, "BAD_RESPONSE", f"{label} returned non-JSON response.", response.status_code
        ) from error


def fetch_text(
    url: str,
    provider: ProviderName,
    label: str,
    params: dict[str, Any] | None = None,
    timeout_seconds: float | None = None,
) -> str:
    """GET a plain-text body. Single attempt, no retries."""
    try:
        response = _SESSION.get(url, params=params, timeout=timeout_seconds)
    except requests.RequestException as error:
        raise ProviderError(provider, "NETWORK", f"{label} request failed: {error}") from error
    raise_for_status(provider, response, label)
    return response.text or ""
