"""Tests for the offline CLI commands."""

import csv

import structlog
from typer.testing import CliRunner

from polyarb.adapters.odds_api import OddsAPIAdapter
from polyarb.cli import app
from polyarb.errors import AdapterError
from polyarb.observability.logging import bind_scan_context
from polyarb.report import write_quotes_csv

from conftest import book_quote, market_quote

runner = CliRunner()


def test_devig():
    # "--" keeps negative odds from being read as options
    result = runner.invoke(app, ["devig", "--", "-110", "-110"])
    assert result.exit_code == 0
    assert "50.00%" in result.output
    assert "4.76%" in result.output


def test_devig_rejects_zero():
    result = runner.invoke(app, ["devig", "0", "150"])
    assert result.exit_code == 1


def test_hedge():
    result = runner.invoke(app, ["hedge", "--stake", "100", "150", "160"])
    assert result.exit_code == 0
    assert "Guaranteed return" in result.output
    assert "profit" in result.output


def test_leagues():
    result = runner.invoke(app, ["leagues"])
    assert result.exit_code == 0
    assert "basketball_nba" in result.output


def test_analyze(tmp_path):
    books = tmp_path / "books.csv"
    markets = tmp_path / "markets.csv"
    output = tmp_path / "arb.csv"
    write_quotes_csv(books, [book_quote("DraftKings", +150, -200), book_quote("FanDuel", +140, -180)])
    write_quotes_csv(markets, [market_quote(0.45, 0.56)])

    result = runner.invoke(app, ["analyze", str(books), str(markets), "--league", "nba", "--output", str(output)])

    assert result.exit_code == 0, result.output
    with open(output, newline="") as f:
        rows = list(csv.DictReader(f))
    assert len(rows) == 1
    assert rows[0]["Arb Opportunity"] == "YES"


def test_book_arbs_from_csv(tmp_path):
    books = tmp_path / "books.csv"
    write_quotes_csv(books, [book_quote("DraftKings", +150, -140), book_quote("FanDuel", -180, +160)])

    result = runner.invoke(app, ["book-arbs", "--from-csv", str(books)])

    assert result.exit_code == 0, result.output
    assert "DraftKings" in result.output
    assert "FanDuel" in result.output


def test_book_arbs_adapter_failure(monkeypatch):
    async def rejected(self, sport, regions="us"):
        raise AdapterError("odds_api", "GET /sports/basketball_nba/odds failed: 401 Unauthorized")

    monkeypatch.setenv("POLYARB_ODDS_API_KEY", "bad-key")
    monkeypatch.setattr(OddsAPIAdapter, "fetch_quotes", rejected)

    result = runner.invoke(app, ["book-arbs", "--league", "nba"])

    assert result.exit_code == 1
    assert "401" in result.output


def test_bind_scan_context():
    run_id = bind_scan_context("nba", "scan")
    assert len(run_id) == 8
    assert structlog.contextvars.get_contextvars() == {"run_id": run_id, "league": "nba", "command": "scan"}
    structlog.contextvars.clear_contextvars()
