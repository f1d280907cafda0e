import asyncio

import pytest
from starlette.testclient import TestClient

from portfolio_mcp.config.settings import Settings
from portfolio_mcp.main import build_server, resolve_transport


@pytest.fixture
def local_env(monkeypatch):
    monkeypatch.delenv("RENDER", raising=False)
    monkeypatch.delenv("PORT", raising=False)


def test_auto_mode_serves_stdio_locally(local_env) -> None:
    assert resolve_transport("auto") == "stdio"


def test_auto_mode_serves_http_when_port_is_set(monkeypatch, local_env) -> None:
    monkeypatch.setenv("PORT", "10000")
    assert resolve_transport("auto") == "sse"
    assert resolve_transport("auto", "streamable") == "streamable"


def test_render_overrides_explicit_stdio(monkeypatch, local_env) -> None:
    monkeypatch.setenv("RENDER", "true")
    assert resolve_transport("stdio") == "sse"


def test_explicit_stdio_wins_over_port(monkeypatch, local_env) -> None:
    monkeypatch.setenv("PORT", "10000")
    assert resolve_transport("stdio") == "stdio"


def test_unknown_http_transport_falls_back_to_sse(local_env) -> None:
    assert resolve_transport("http", "websocket") == "sse"


def test_build_server_registers_tools_and_health_route(tmp_path, local_env) -> None:
    settings = Settings(ai_settings_path=str(tmp_path / "settings.json"), enable_ai=False)
    mcp = build_server(settings)

    tools = asyncio.run(mcp.list_tools())
    assert "get_portfolio_suggestion" in {tool.name for tool in tools}

    response = TestClient(mcp.sse_app()).get("/health")
    assert response.status_code == 200
    body = response.json()
    assert body["status"] == "ok"
    assert body["transport"] == "stdio"
    assert body["ai_enabled"] is False
    assert body["portfolio_count"] == 6
    assert body["tool_count"] == len(tools)
    assert body["prompt_count"] == 2
    assert body["resource_template_count"] == 1
