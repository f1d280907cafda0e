"""Risk-profile feed adapter.

The feed takes a single `risk` query parameter (tier 1-5) and answers with
newline-delimited plain text such as::

    VTI: 35.0%
    BND: 40.5%
    Expected Return: 5.8%
    Risk Score: 3.2
"""

from __future__ import annotations

import re

from portfolio_mcp.providers.http import fetch_text
from portfolio_mcp.providers.models import RiskProfileAllocation, RiskProfileFeed

ALLOCATION_LINE = re.compile(r"^\s*([A-Z0-9][A-Z0-9.\-]{0,11})\s*:\s*(-?\d+(?:\.\d+)?)\s*%\s*$")
EXPECTED_RETURN_LINE = re.compile(r"expected\s+return\s*:\s*(-?\d+(?:\.\d+)?)", re.IGNORECASE)
RISK_SCORE_LINE = re.compile(r"risk\s+score\s*:\s*(-?\d+(?:\.\d+)?)", re.IGNORECASE)


def validate_risk_level(risk_level: int) -> int:
    if isinstance(risk_level, bool) or not isinstance(risk_level, int) or not 1 <= risk_level <= 5:
        raise ValueError("risk_level must be an integer between 1 and 5.")
    return risk_level


def parse_risk_profile(text: str, risk_level: int) -> RiskProfileFeed:
    feed = RiskProfileFeed(risk_level=risk_level)
    for line in text.splitlines():
        match = ALLOCATION_LINE.match(line)
        if match:
            feed.allocations.append(RiskProfileAllocation(ticker=match.group(1), allocation=float(match.group(2))))
            continue
        expected = EXPECTED_RETURN_LINE.search(line)
        if expected and feed.expected_return is None:
            feed.expected_return = float(expected.group(1))
            continue
        risk = RISK_SCORE_LINE.search(line)
        if risk and feed.risk_score is None:
            feed.risk_score = float(risk.group(1))
    return feed


class RiskProfileClient:
    def __init__(self, base_url: str, timeout_seconds: float | None = None) -> None:
        self.base_url = base_url
        self.timeout_seconds = timeout_seconds

    def get_profile(self, risk_level: int) -> RiskProfileFeed | None:
        risk_level = validate_risk_level(risk_level)
        text = fetch_text(
            self.base_url,
            provider="riskprofile",
            label="Risk profile feed",
            params={"risk": risk_level},
            timeout_seconds=self.timeout_seconds,
        )
        feed = parse_risk_profile(text, risk_level)
        return feed if feed.allocations else None
