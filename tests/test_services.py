import json
from datetime import date, datetime, timezone

import pytest

from conftest import FakeCompletionClient
from portfolio_mcp.portfolio.fixtures import sentiment_history
from portfolio_mcp.portfolio.models import AllocationRequest
from portfolio_mcp.portfolio.repository import InMemorySentimentRepository
from portfolio_mcp.prompts.ai_prompts import DEFAULT_REPORT_PROMPT, REPORT_SYSTEM_INSTRUCTION
from portfolio_mcp.providers.http import ProviderError
from portfolio_mcp.services import report_service
from portfolio_mcp.services.fallback_manager import PLACEHOLDER_WARNING
from portfolio_mcp.services.market_service import MarketService
from portfolio_mcp.services.report_service import REPORT_FAILURE_MESSAGE

NOW = datetime(2025, 5, 6, 12, 0, tzinfo=timezone.utc)


def _market(services) -> MarketService:
    return MarketService(
        InMemorySentimentRepository(sentiment_history(now=NOW)),
        services.ai,
        today=lambda: date(2025, 5, 6),
    )


def test_seeded_portfolios_have_reconciled_holdings(make_services) -> None:
    portfolios = make_services().portfolio.list_portfolios().data

    assert [portfolio.id for portfolio in portfolios] == [1, 2, 3, 4, 5, 6]
    for portfolio in portfolios:
        assert portfolio.metrics.allocation_total == pytest.approx(100.0)
        assert all(holding.catalog_match for holding in portfolio.holdings)
    assert [holding.ticker for holding in portfolios[2].holdings] == ["VTI", "VXUS", "BND"]


def test_get_portfolio_returns_copy(make_services) -> None:
    services = make_services()
    first = services.portfolio.get_portfolio(1).data
    first.holdings.clear()
    assert len(services.portfolio.get_portfolio(1).data.holdings) == 4
    assert services.portfolio.get_portfolio(77).error.code == "NOT_FOUND"


def test_create_portfolio_assigns_next_id(make_services) -> None:
    services = make_services()
    created = services.portfolio.create_portfolio("  Retirement  ", "Long horizon").data

    assert created.id == 7
    assert created.name == "Retirement"
    assert created.holdings == []
    assert created.metrics.asset_count == 0
    assert services.portfolio.get_portfolio(7).data.description == "Long horizon"
    with pytest.raises(ValueError):
        services.portfolio.create_portfolio("   ")


def test_create_ai_portfolio_persists_suggestion(make_services) -> None:
    client = FakeCompletionClient(
        ["```json\n" + json.dumps({"suggestions": [{"ticker": "VTI", "allocation": 60}, {"ticker": "BND", "allocation": 40}]}) + "\n```"]
    )
    services = make_services(client=client)

    result = services.portfolio.create_ai_portfolio(AllocationRequest(60, 40, 0, optimization_strategy="risk_level", risk_level=2))

    portfolio = result.data
    assert portfolio.is_ai_generated is True
    assert portfolio.name.startswith("AI Portfolio ")
    assert portfolio.description == "AI-generated portfolio based on 60% stocks, 40% bonds, 0% alternatives with risk level 2"
    assert portfolio.metrics.return_1y == pytest.approx(15.18)
    assert services.portfolio.get_portfolio(portfolio.id).data.name == portfolio.name


def test_apply_rebalance_replaces_holdings_and_recomputes_metrics(make_services) -> None:
    services = make_services()
    updated = services.portfolio.apply_rebalance(
        3,
        [{"ticker": "VTI", "allocation": 40}, {"ticker": "VXUS", "allocation": 30}, {"ticker": "BND", "allocation": 30}],
        {"risk_score": 4.0},
    ).data

    assert [(holding.ticker, holding.allocation) for holding in updated.holdings] == [
        ("VTI", 40.0),
        ("VXUS", 30.0),
        ("BND", 30.0),
    ]
    assert updated.metrics.return_1y == pytest.approx(0.4 * 24.1 + 0.3 * 11.4 + 0.3 * 1.8)
    assert updated.metrics.risk_score == 4.0
    assert services.portfolio.get_portfolio(3).data.holdings[0].allocation == 40.0


def test_apply_rebalance_rejects_empty_rows(make_services) -> None:
    services = make_services()
    with pytest.raises(ValueError):
        services.portfolio.apply_rebalance(3, [{"ticker": "VTI"}])
    assert services.portfolio.apply_rebalance(99, [{"ticker": "VTI", "allocation": 100}]).error.code == "NOT_FOUND"


def test_asset_lookup(make_services) -> None:
    services = make_services()
    assert len(services.portfolio.list_assets().data) == 15
    assert services.portfolio.get_asset(asset_id=3).data.ticker == "BND"
    assert services.portfolio.get_asset(ticker="US78463V1070").data.ticker == "GLD"
    assert services.portfolio.get_asset(ticker="QQQ").error.code == "NOT_FOUND"
    with pytest.raises(ValueError):
        services.portfolio.get_asset()


def test_latest_market_sentiment(make_services) -> None:
    latest = _market(make_services()).get_market_sentiment().data
    assert latest.sentiment_score == 0.7


def test_sentiment_history_is_ascending_and_today_adopts_ai_score(make_services) -> None:
    result = _market(make_services(client=None)).get_market_sentiment_history(days=7)

    assert [record.sentiment_score for record in result.data["history"]] == [0.5, 0.3, 0.65]
    assert result.data["analysis"]["overall_sentiment"] == "Moderately Positive"
    assert result.warning == PLACEHOLDER_WARNING


def test_sentiment_history_without_ai(make_services) -> None:
    client = FakeCompletionClient([])
    result = _market(make_services(client=client)).get_market_sentiment_history(days=2, include_ai=False)

    assert [record.sentiment_score for record in result.data["history"]] == [0.3, 0.7]
    assert result.data["analysis"] is None
    assert client.prompts == []
    with pytest.raises(ValueError):
        _market(make_services()).get_market_sentiment_history(days=0)


def test_market_news_is_static(make_services) -> None:
    news = _market(make_services()).get_market_news()
    assert news.source == "static"
    assert [item.source for item in news.data] == ["Financial Times", "Wall Street Journal", "Bloomberg", "Reuters"]


def test_report_embeds_document_text_and_returns_answer_verbatim(make_services, monkeypatch) -> None:
    monkeypatch.setattr(report_service, "extract_pdf_pages", lambda path, max_pages=None: ["VTI 40%", "BND 60%"])
    client = FakeCompletionClient(["# Report\n\n| Asset | Weight |"])

    result = make_services(client=client).report.generate_report("/tmp/portfolio.pdf")

    assert result.data == {"report": "# Report\n\n| Asset | Weight |", "generated": True, "pages": 2, "model": "test-model"}
    assert "--- Page 1 ---\nVTI 40%" in client.prompts[0]
    assert DEFAULT_REPORT_PROMPT in client.prompts[0]
    assert client.systems == [REPORT_SYSTEM_INSTRUCTION]


def test_report_uses_custom_instructions(make_services, monkeypatch) -> None:
    monkeypatch.setattr(report_service, "extract_pdf_pages", lambda path, max_pages=None: ["text"])
    client = FakeCompletionClient(["ok"])
    make_services(client=client).report.generate_report("/tmp/p.pdf", instructions="Focus on fees.")
    assert "Focus on fees." in client.prompts[0]
    assert DEFAULT_REPORT_PROMPT not in client.prompts[0]


@pytest.mark.parametrize(
    ("pages", "answers", "detail"),
    [
        (["", ""], ["unused"], "The PDF contains no extractable text."),
        (["text"], [None], "generate_report failed: no provider returned data."),
        (["text"], [ProviderError("openrouter", "AUTH", "OpenRouter API key is not configured.")], None),
    ],
)
def test_report_failures_return_fixed_message(make_services, monkeypatch, pages, answers, detail) -> None:
    monkeypatch.setattr(report_service, "extract_pdf_pages", lambda path, max_pages=None: pages)
    result = make_services(client=FakeCompletionClient(answers)).report.generate_report("/tmp/p.pdf")

    assert result.data["report"] == REPORT_FAILURE_MESSAGE
    assert result.data["generated"] is False
    if detail is not None:
        assert result.data["detail"] == detail


def test_report_for_missing_file(make_services, tmp_path) -> None:
    result = make_services(client=FakeCompletionClient(["unused"])).report.generate_report(str(tmp_path / "nope.pdf"))
    assert result.data["generated"] is False
    assert "not found" in result.data["detail"]


def test_report_without_client(make_services, monkeypatch) -> None:
    monkeypatch.setattr(report_service, "extract_pdf_pages", lambda path, max_pages=None: ["text"])
    result = make_services(client=None).report.generate_report("/tmp/p.pdf")
    assert result.data["detail"] == "AI is disabled."
