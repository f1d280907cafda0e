from portfolio_mcp.portfolio.normalizer import UnparsableAIResponse
from portfolio_mcp.providers.http import ProviderError
from portfolio_mcp.services.fallback_manager import (
    FALLBACK_WARNING,
    PLACEHOLDER_KEY,
    PLACEHOLDER_WARNING,
    FallbackManager,
    ProviderAttempt,
)
from portfolio_mcp.services.provider_status import ProviderStatus


def test_fallback_manager_disables_rate_limited_provider_and_skips_while_disabled() -> None:
    status = ProviderStatus()
    manager = FallbackManager(provider_status=status, rate_limit_disable_seconds={"openrouter": 60})
    calls = {"openrouter": 0, "riskprofile": 0}

    def completion_call():
        calls["openrouter"] += 1
        raise ProviderError("openrouter", "RATE_LIMIT", "OpenRouter rate limit reached.", 429)

    def feed_call():
        calls["riskprofile"] += 1
        return {"suggestions": [{"ticker": "VTI", "allocation": 100.0}]}

    attempts = [
        ProviderAttempt("openrouter", "OpenRouter", completion_call),
        ProviderAttempt("riskprofile", "Risk profile feed", feed_call),
    ]

    first = manager.execute(operation="get_portfolio_suggestion", subject="sharpe_ratio", attempts=attempts)
    assert first.data is not None
    assert first.source == "Risk profile feed"
    assert first.warning == FALLBACK_WARNING
    assert status.is_disabled("openrouter") is True
    assert calls == {"openrouter": 1, "riskprofile": 1}

    second = manager.execute(operation="get_portfolio_suggestion", subject="sharpe_ratio", attempts=attempts)
    assert second.source == "Risk profile feed"
    assert calls == {"openrouter": 1, "riskprofile": 2}


def test_placeholder_attempt_carries_placeholder_warning() -> None:
    manager = FallbackManager(provider_status=ProviderStatus())

    def unparsable():
        raise UnparsableAIResponse("model answered with prose")

    result = manager.execute(
        operation="get_portfolio_analysis",
        subject="1:performance",
        attempts=[
            ProviderAttempt("openrouter", "OpenRouter", unparsable),
            ProviderAttempt(PLACEHOLDER_KEY, "placeholder", lambda: {"summary": "canned"}),
        ],
    )
    assert result.data == {"summary": "canned"}
    assert result.warning == PLACEHOLDER_WARNING
    assert result.data_provider == PLACEHOLDER_KEY


def test_none_and_unexpected_errors_move_to_next_attempt() -> None:
    manager = FallbackManager(provider_status=ProviderStatus())

    def broken():
        raise KeyError("choices")

    result = manager.execute(
        operation="get_market_sentiment_analysis",
        subject="market",
        attempts=[
            ProviderAttempt("riskprofile", "Risk profile feed", lambda: None),
            ProviderAttempt("openrouter", "OpenRouter", broken),
            ProviderAttempt("anthropic", "Anthropic", lambda: {"sentiment_score": 0.4}),
        ],
    )
    assert result.data == {"sentiment_score": 0.4}
    assert result.source == "Anthropic"
    assert result.warning == FALLBACK_WARNING


def test_first_success_has_no_warning() -> None:
    manager = FallbackManager(provider_status=ProviderStatus())
    result = manager.execute(
        operation="op", subject="s", attempts=[ProviderAttempt("openrouter", "OpenRouter", lambda: [1])]
    )
    assert result.data == [1]
    assert result.warning is None
    assert result.error is None


def test_fallback_manager_returns_generic_error_without_upstream_leakage() -> None:
    manager = FallbackManager(provider_status=ProviderStatus())

    def failing_call():
        raise ProviderError("openrouter", "UPSTREAM", "sensitive upstream payload: api_key=secret")

    result = manager.execute(
        operation="get_portfolio_suggestion",
        subject="risk_level",
        attempts=[ProviderAttempt("openrouter", "OpenRouter", failing_call)],
    )
    assert result.data is None
    assert result.error is not None
    assert result.error.code == "UPSTREAM"
    assert result.error.message == "get_portfolio_suggestion failed: no provider returned data."
    assert "secret" not in result.error.message


def test_rate_limit_detection_from_message() -> None:
    assert FallbackManager.is_rate_limited(ProviderError("openrouter", "UPSTREAM", "Insufficient credits"))
    assert not FallbackManager.is_rate_limited(ProviderError("openrouter", "UPSTREAM", "Bad gateway", 502))


def test_provider_status_tracks_failures_and_expires_disable_window() -> None:
    now = [500.0]
    status = ProviderStatus(clock=lambda: now[0])

    status.record_failure("anthropic", "AUTH")
    assert status.disable_provider("anthropic", 30) == 530.0
    assert status.disable_provider("anthropic", 5) == 530.0

    snapshot = status.snapshot(("anthropic", "openrouter"))
    assert snapshot["anthropic"] == {
        "disabled_until": 530.0,
        "failures": 1,
        "last_error": "AUTH",
        "last_error_at": 500.0,
    }
    assert snapshot["openrouter"]["failures"] == 0

    now[0] = 531.0
    assert status.is_disabled("anthropic") is False
