"""Per-provider health: rate-limit disable windows and the last failure seen."""

from __future__ import annotations

import threading
import time
from dataclasses import dataclass
from typing import Any, Callable


@dataclass
class ProviderState:
    disabled_until: float | None = None
    failures: int = 0
    last_error: str | None = None
    last_error_at: float | None = None


class ProviderStatus:
    def __init__(self, clock: Callable[[], float] = time.time) -> None:
        self._clock = clock
        self._lock = threading.Lock()
        self._states: dict[str, ProviderState] = {}

    def _state(self, provider: str) -> ProviderState:
        return self._states.setdefault(provider, ProviderState())

    def record_failure(self, provider: str, code: str) -> None:
        with self._lock:
            state = self._state(provider)
            state.failures += 1
            state.last_error = code
            state.last_error_at = self._clock()

    def disable_provider(self, provider: str, ttl_seconds: int) -> float:
        """Open (or extend) a disable window; an earlier window is never shortened."""
        until = self._clock() + max(1, ttl_seconds)
        with self._lock:
            state = self._state(provider)
            state.disabled_until = max(state.disabled_until or 0.0, until)
            return state.disabled_until

    def get_disabled_until(self, provider: str) -> float | None:
        with self._lock:
            state = self._states.get(provider)
            if state is None or state.disabled_until is None:
                return None
            if state.disabled_until <= self._clock():
                state.disabled_until = None
            return state.disabled_until

    def is_disabled(self, provider: str) -> bool:
        return self.get_disabled_until(provider) is not None

    def snapshot(self, providers: list[str] | tuple[str, ...]) -> dict[str, dict[str, Any]]:
        snapshot: dict[str, dict[str, Any]] = {}
        for provider in providers:
            disabled_until = self.get_disabled_until(provider)
            with self._lock:
                state = self._states.get(provider, ProviderState())
                snapshot[provider] = {
                    "disabled_until": disabled_until,
                    "failures": state.failures,
                    "last_error": state.last_error,
                    "last_error_at": state.last_error_at,
                }
        return snapshot
