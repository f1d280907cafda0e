from types import SimpleNamespace

import pytest

from portfolio_mcp.providers import completion_client, risk_profile
from portfolio_mcp.providers.completion_client import AnthropicClient, OpenRouterClient, build_completion_client
from portfolio_mcp.providers.http import ProviderError, map_status_to_code, raise_for_status
from portfolio_mcp.providers.models import JSON_ONLY_INSTRUCTION, AISettings
from portfolio_mcp.providers.pdf_text import extract_pdf_pages, join_pages
from portfolio_mcp.providers.risk_profile import RiskProfileClient, parse_risk_profile

FEED_TEXT = """VTI: 35.0%
BND: 40.5%
  GLD : 24.5 %
not a line
Expected Return: 5.8%
Risk Score: 3.2
"""


def test_parse_risk_profile_lines() -> None:
    feed = parse_risk_profile(FEED_TEXT, 2)
    assert [(item.ticker, item.allocation) for item in feed.allocations] == [
        ("VTI", 35.0),
        ("BND", 40.5),
        ("GLD", 24.5),
    ]
    assert feed.expected_return == 5.8
    assert feed.risk_score == 3.2
    assert feed.risk_level == 2


def test_risk_profile_client_sends_tier_parameter(monkeypatch) -> None:
    captured = {}

    def fake_fetch_text(url, provider, label, params=None, timeout_seconds=None):
        captured.update(url=url, provider=provider, params=params, timeout=timeout_seconds)
        return FEED_TEXT

    monkeypatch.setattr(risk_profile, "fetch_text", fake_fetch_text)
    feed = RiskProfileClient("https://feed.example/profile", timeout_seconds=5).get_profile(4)

    assert feed is not None
    assert len(feed.allocations) == 3
    assert captured == {"url": "https://feed.example/profile", "provider": "riskprofile", "params": {"risk": 4}, "timeout": 5}


def test_risk_profile_client_returns_none_without_allocations(monkeypatch) -> None:
    monkeypatch.setattr(risk_profile, "fetch_text", lambda *args, **kwargs: "Service temporarily unavailable")
    assert RiskProfileClient("https://feed.example/profile").get_profile(1) is None


@pytest.mark.parametrize("level", [0, 6, True])
def test_risk_profile_client_rejects_invalid_tier(level) -> None:
    with pytest.raises(ValueError):
        RiskProfileClient("https://feed.example/profile").get_profile(level)


def test_openrouter_client_builds_chat_completion_request(monkeypatch) -> None:
    captured = {}

    def fake_post_json(url, payload, provider, label, headers=None, timeout_seconds=None):
        captured.update(url=url, payload=payload, provider=provider, headers=headers)
        return {"choices": [{"message": {"content": "  ```json\n{}\n```  "}}]}

    monkeypatch.setattr(completion_client, "post_json", fake_post_json)
    client = OpenRouterClient("sk-or-1", "google/gemini", base_url="https://router.example/v1/chat/completions")

    assert client.complete("Build a portfolio") == "```json\n{}\n```"
    assert captured["url"] == "https://router.example/v1/chat/completions"
    assert captured["provider"] == "openrouter"
    assert captured["headers"]["Authorization"] == "Bearer sk-or-1"
    assert captured["payload"]["model"] == "google/gemini"
    assert captured["payload"]["messages"] == [
        {"role": "system", "content": JSON_ONLY_INSTRUCTION},
        {"role": "user", "content": "Build a portfolio"},
    ]


def test_openrouter_client_returns_none_for_empty_choices(monkeypatch) -> None:
    monkeypatch.setattr(completion_client, "post_json", lambda *args, **kwargs: {"choices": []})
    assert OpenRouterClient("sk-or-1", "m").complete("hi") is None


def test_anthropic_client_joins_text_blocks(monkeypatch) -> None:
    captured = {}

    def fake_post_json(url, payload, provider, label, headers=None, timeout_seconds=None):
        captured.update(payload=payload, headers=headers)
        return {"content": [{"type": "text", "text": "part one"}, {"type": "text", "text": "part two"}]}

    monkeypatch.setattr(completion_client, "post_json", fake_post_json)
    client = AnthropicClient("sk-ant-1", "claude-test")

    assert client.complete("hi", system="be brief") == "part one\npart two"
    assert captured["payload"]["system"] == "be brief"
    assert captured["headers"]["x-api-key"] == "sk-ant-1"


@pytest.mark.parametrize("client", [OpenRouterClient("", "m"), AnthropicClient("", "m")])
def test_missing_api_key_raises_auth_error(client) -> None:
    with pytest.raises(ProviderError) as exc:
        client.complete("hi")
    assert exc.value.code == "AUTH"


def test_build_completion_client_selects_provider() -> None:
    assert isinstance(build_completion_client(AISettings("anthropic", "claude", "k")), AnthropicClient)
    client = build_completion_client(AISettings("openrouter", "model-x", "k"), timeout_seconds=3)
    assert isinstance(client, OpenRouterClient)
    assert client.model == "model-x"
    assert client.timeout_seconds == 3


def test_map_status_to_code() -> None:
    assert map_status_to_code(401) == "AUTH"
    assert map_status_to_code(403) == "AUTH"
    assert map_status_to_code(404) == "NOT_FOUND"
    assert map_status_to_code(429) == "RATE_LIMIT"
    assert map_status_to_code(502) == "UPSTREAM"


def test_auth_error_carries_upstream_detail() -> None:
    response = SimpleNamespace(
        ok=False,
        status_code=401,
        text='{"error": {"message": "No auth credentials found"}}',
        json=lambda: {"error": {"message": "No auth credentials found", "code": 401}},
    )
    with pytest.raises(ProviderError) as exc:
        raise_for_status("openrouter", response, "OpenRouter")
    assert exc.value.code == "AUTH"
    assert exc.value.status == 401
    assert "No auth credentials found" in exc.value.message


def test_rate_limit_error_is_normalized() -> None:
    response = SimpleNamespace(ok=False, status_code=429, text="", json=lambda: {})
    with pytest.raises(ProviderError) as exc:
        raise_for_status("openrouter", response, "OpenRouter")
    assert exc.value.code == "RATE_LIMIT"
    assert exc.value.message == "OpenRouter rate limit reached."


def test_extract_pdf_pages_missing_file(tmp_path) -> None:
    with pytest.raises(ProviderError) as exc:
        extract_pdf_pages(str(tmp_path / "missing.pdf"))
    assert exc.value.code == "NOT_FOUND"


def test_extract_pdf_pages_unreadable_file(tmp_path) -> None:
    broken = tmp_path / "broken.pdf"
    broken.write_bytes(b"this is not a pdf")
    with pytest.raises(ProviderError) as exc:
        extract_pdf_pages(str(broken))
    assert exc.value.code == "BAD_RESPONSE"


def test_join_pages_numbers_non_empty_pages() -> None:
    assert join_pages(["alpha", "", "gamma"]) == "--- Page 1 ---\nalpha\n\n--- Page 3 ---\ngamma"
