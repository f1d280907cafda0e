"""Portfolio domain: models, normalization, reconciliation and storage."""

from portfolio_mcp.portfolio.allocation import AllocationState, adjust_allocation, validate_allocation_request
from portfolio_mcp.portfolio.normalizer import UnparsableAIResponse, normalize_ai_response
from portfolio_mcp.portfolio.reconciler import compute_portfolio_metrics, reconcile

__all__ = [
    "AllocationState",
    "UnparsableAIResponse",
    "adjust_allocation",
    "compute_portfolio_metrics",
    "normalize_ai_response",
    "reconcile",
    "validate_allocation_request",
]
