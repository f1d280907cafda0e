"""Coarse bucket allocation: slider coupling and request validation."""

from __future__ import annotations

import math
from dataclasses import asdict, dataclass, replace

from portfolio_mcp.portfolio.models import BUCKETS, DEFAULT_RISK_LEVEL, STRATEGIES, AllocationRequest


@dataclass(frozen=True)
class AllocationState:
    stocks: int
    bonds: int
    alternatives: int

    def as_dict(self) -> dict[str, int]:
        return asdict(self)

    def total(self) -> int:
        return self.stocks + self.bonds + self.alternatives


def _round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def _validate_percent(name: str, value: object) -> None:
    if isinstance(value, bool) or not isinstance(value, (int, float)) or not 0 <= value <= 100:
        raise ValueError(f"{name} must be a number between 0 and 100.")


def adjust_allocation(state: AllocationState, bucket: str, value: int) -> AllocationState:
    """Set one bucket and rescale the other two so the three always sum to 100.

    The untouched buckets keep their ratio (half-up rounding); any rounding
    drift lands on the first untouched bucket in stocks/bonds/alternatives
    order. When both untouched buckets are zero the remainder is split evenly,
    with the integer-division remainder on the first.
    """
    if bucket not in BUCKETS:
        raise ValueError(f"bucket must be one of: {', '.join(BUCKETS)}.")
    if isinstance(value, bool) or not isinstance(value, int):
        raise ValueError("value must be an integer between 0 and 100.")
    _validate_percent("value", value)
    values = state.as_dict()
    for name, current in values.items():
        _validate_percent(name, current)

    values[bucket] = value
    if sum(values.values()) == 100:
        return AllocationState(**values)

    others = [name for name in BUCKETS if name != bucket]
    remaining = 100 - value
    other_total = sum(values[name] for name in others)
    if other_total > 0:
        factor = remaining / other_total
        for name in others:
            values[name] = _round_half_up(values[name] * factor)
        values[others[0]] += 100 - sum(values.values())
    else:
        share, leftover = divmod(remaining, len(others))
        for idx, name in enumerate(others):
            values[name] = share + (leftover if idx == 0 else 0)
    return AllocationState(**values)


def validate_strategy(strategy: str, risk_level: int | None) -> int | None:
    """Check the strategy selector; return the effective tier (only meaningful for `risk_level`)."""
    if strategy not in STRATEGIES:
        raise ValueError(f"optimization_strategy must be one of: {', '.join(STRATEGIES)}.")
    if strategy != "risk_level":
        return None
    level = DEFAULT_RISK_LEVEL if risk_level is None else risk_level
    if isinstance(level, bool) or not isinstance(level, int) or not 1 <= level <= 5:
        raise ValueError("risk_level must be an integer between 1 and 5.")
    return level


def validate_allocation_request(request: AllocationRequest) -> tuple[AllocationRequest, list[str]]:
    """Return a cleaned request plus non-fatal warnings.

    Percentages outside [0, 100], an unknown strategy or a tier outside [1, 5]
    are rejected. A total other than 100 only produces a warning.
    """
    _validate_percent("stocks_percentage", request.stocks_percentage)
    _validate_percent("bonds_percentage", request.bonds_percentage)
    _validate_percent("alternatives_percentage", request.alternatives_percentage)
    risk_level = validate_strategy(request.optimization_strategy, request.risk_level)

    warnings: list[str] = []
    total = request.total()
    if abs(total - 100) > 1e-9:
        warnings.append(f"Bucket percentages sum to {total:g}, not 100.")
    return replace(request, risk_level=risk_level), warnings
