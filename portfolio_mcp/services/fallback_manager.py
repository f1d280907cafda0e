"""Ordered provider attempts for AI and feed calls.

Services hand the manager a list of `ProviderAttempt`s, typically risk-profile
feed, then the completion endpoint, then a static placeholder. The first attempt
that returns a value wins; every failure is logged, counted on the provider and
skipped over.
"""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass
from typing import Callable, Generic, TypeVar

from portfolio_mcp.portfolio.normalizer import UnparsableAIResponse
from portfolio_mcp.providers.http import ProviderError
from portfolio_mcp.services.base import ErrorEnvelope, ServiceResult
from portfolio_mcp.services.provider_status import ProviderStatus

T = TypeVar("T")
LOGGER = logging.getLogger(__name__)

RATE_LIMIT_PATTERNS = ("rate limit", "rate-limited", "too many requests", "quota", "credits")
DEFAULT_RATE_LIMIT_DISABLE_SECONDS = 300
PLACEHOLDER_KEY = "placeholder"
PLACEHOLDER_WARNING = "AI provider unavailable; showing placeholder data."
FALLBACK_WARNING = "Used fallback provider due to upstream issue."


@dataclass(frozen=True)
class ProviderAttempt(Generic[T]):
    key: str
    label: str
    call: Callable[[], T | None]


class FallbackManager:
    def __init__(
        self,
        provider_status: ProviderStatus,
        rate_limit_disable_seconds: dict[str, int] | None = None,
    ) -> None:
        self._provider_status = provider_status
        self._rate_limit_disable_seconds = rate_limit_disable_seconds or {}

    def execute(self, operation: str, subject: str, attempts: list[ProviderAttempt[T]]) -> ServiceResult[T]:
        last_code: str | None = None
        skipped = False
        for attempt in attempts:
            disabled_until = self._provider_status.get_disabled_until(attempt.key)
            if disabled_until is not None:
                skipped = True
                LOGGER.info(
                    "provider skipped: op=%s subject=%s provider=%s disabled_until=%s",
                    operation,
                    subject,
                    attempt.key,
                    disabled_until,
                )
                continue

            started = time.perf_counter()
            outcome = self._run(operation, subject, attempt)
            if isinstance(outcome, _Success):
                LOGGER.info(
                    "provider answered: op=%s subject=%s provider=%s latency_ms=%.2f",
                    operation,
                    subject,
                    attempt.key,
                    (time.perf_counter() - started) * 1000,
                )
                return self._result(operation, subject, attempt, outcome.value, skipped, last_code)
            skipped = True
            if outcome is not None:
                last_code = outcome

        LOGGER.error("no provider returned data: op=%s subject=%s last_error=%s", operation, subject, last_code)
        return ServiceResult(
            data=None,
            error=ErrorEnvelope(code="UPSTREAM", message=f"{operation} failed: no provider returned data."),
        )

    def _run(self, operation: str, subject: str, attempt: ProviderAttempt[T]) -> "_Success[T] | str | None":
        """Run one attempt; return the value wrapped, or the failure code (None for an empty answer)."""
        try:
            value = attempt.call()
        except ProviderError as error:
            LOGGER.warning(
                "provider failed: op=%s subject=%s provider=%s code=%s status=%s message=%s",
                operation,
                subject,
                attempt.key,
                error.code,
                error.status,
                error.message,
            )
            self._provider_status.record_failure(attempt.key, error.code)
            if self.is_rate_limited(error):
                ttl = self._rate_limit_disable_seconds.get(attempt.key, DEFAULT_RATE_LIMIT_DISABLE_SECONDS)
                until = self._provider_status.disable_provider(attempt.key, ttl)
                LOGGER.warning("provider disabled after rate limit: provider=%s disabled_until=%s", attempt.key, until)
            return error.code
        except UnparsableAIResponse as error:
            LOGGER.warning(
                "provider answer unparsable: op=%s subject=%s provider=%s message=%s",
                operation,
                subject,
                attempt.key,
                error,
            )
            self._provider_status.record_failure(attempt.key, error.code)
            return error.code
        except Exception:
            LOGGER.exception("provider attempt crashed: op=%s subject=%s provider=%s", operation, subject, attempt.key)
            self._provider_status.record_failure(attempt.key, "UNEXPECTED")
            return "UNEXPECTED"
        if value is None:
            LOGGER.info("provider returned nothing: op=%s subject=%s provider=%s", operation, subject, attempt.key)
            return None
        return _Success(value)

    @staticmethod
    def _result(
        operation: str,
        subject: str,
        attempt: ProviderAttempt[T],
        value: T,
        skipped: bool,
        last_code: str | None,
    ) -> ServiceResult[T]:
        warning = FALLBACK_WARNING if skipped else None
        if attempt.key == PLACEHOLDER_KEY:
            warning = PLACEHOLDER_WARNING
            LOGGER.warning(
                "placeholder data served: op=%s subject=%s last_error=%s",
                operation,
                subject,
                last_code or "NO_PROVIDER",
            )
        return ServiceResult(
            data=value,
            source=attempt.label,
            warning=warning,
            fetched_at=time.time(),
            data_provider=attempt.key,
        )

    @staticmethod
    def is_rate_limited(error: ProviderError) -> bool:
        if error.code == "RATE_LIMIT" or error.status == 429:
            return True
        message = (error.message or "").lower()
        return any(pattern in message for pattern in RATE_LIMIT_PATTERNS)


@dataclass(frozen=True)
class _Success(Generic[T]):
    value: T
