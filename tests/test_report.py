"""Tests for CSV quote and result files."""

import csv
from datetime import date

import pytest

from polyarb.core.scanner import ArbScanner
from polyarb.models.odds import PriceFormat, Source
from polyarb.report import (
    QUOTE_COLUMNS,
    RESULT_COLUMNS,
    default_report_path,
    load_quotes_csv,
    quote_to_row,
    write_quotes_csv,
    write_results_csv,
)

from conftest import GAME_TIME, book_quote, market_quote


def _read(path):
    with open(path, newline="") as f:
        return list(csv.DictReader(f))


class TestQuoteRows:
    def test_sportsbook_row(self):
        row = quote_to_row(book_quote("DraftKings", -110, -110))
        assert row["Date"] == "2025-01-15"
        assert row["Time"] == "00:30"
        assert row["Away Odds"] == "-110"
        assert row["Away Implied Prob (%)"] == "52.38"
        assert row["Away True Prob (%)"] == "50.00"
        assert row["Vig (%)"] == "4.76"

    def test_market_row_has_american_equivalent(self):
        row = quote_to_row(market_quote(0.4, 0.6))
        assert row["Bookmaker"] == "Polymarket"
        assert row["Away Odds"] == "+150"
        assert row["Home Odds"] == "-150"
        assert row["Away Implied Prob (%)"] == "40.00"


class TestQuotesFile:
    def test_write_and_load_sportsbook(self, tmp_path, book_quotes):
        path = tmp_path / "nba" / "games.csv"
        assert write_quotes_csv(path, book_quotes) == 3

        rows = _read(path)
        assert list(rows[0]) == QUOTE_COLUMNS

        loaded = load_quotes_csv(path, Source.SPORTSBOOK)
        assert [q.venue for q in loaded] == ["DraftKings", "FanDuel", "BetMGM"]
        assert loaded[0].side_a_price == 120
        assert loaded[0].side_b_price == -135
        assert loaded[0].price_format == PriceFormat.AMERICAN
        assert loaded[0].commence_time == GAME_TIME

    def test_load_market_uses_probabilities(self, tmp_path):
        path = tmp_path / "polymarket.csv"
        write_quotes_csv(path, [market_quote(0.48, 0.53)])

        loaded = load_quotes_csv(path, Source.PREDICTION_MARKET)
        assert loaded[0].side_a_price == pytest.approx(0.48)
        assert loaded[0].side_b_price == pytest.approx(0.53)
        assert loaded[0].price_format == PriceFormat.PROBABILITY

    def test_invalid_quotes_not_written(self, tmp_path):
        path = tmp_path / "games.csv"
        assert write_quotes_csv(path, [book_quote("Broken", 0, -110), book_quote("DK", -110, -110)]) == 1

    def test_bad_rows_skipped(self, tmp_path):
        path = tmp_path / "games.csv"
        path.write_text(
            ",".join(QUOTE_COLUMNS) + "\n"
            "2025-01-15,00:30,evt1,Lakers,Celtics,upcoming,DK,+120,-135,,,,,\n"
            "2025-01-15,00:30,evt2,Heat,Knicks,upcoming,DK,,-135,,,,,\n"
        )
        loaded = load_quotes_csv(path, Source.SPORTSBOOK)
        assert [q.event_id for q in loaded] == ["evt1"]


class TestResultsFile:
    def test_write(self, tmp_path, nba_matcher):
        report = ArbScanner(matcher=nba_matcher).scan(
            [book_quote("DraftKings", +150, -200)],
            [market_quote(0.45, 0.56)],
        )
        path = tmp_path / "out" / "arb.csv"
        assert write_results_csv(path, report.results) == 1

        rows = _read(path)
        assert list(rows[0]) == RESULT_COLUMNS
        assert rows[0]["Arb Opportunity"] == "YES"
        assert rows[0]["Away Leg Source"] == "DraftKings"
        assert rows[0]["Home Leg Source"] == "Polymarket"
        assert float(rows[0]["Profit %"]) == pytest.approx(4.17)

    def test_default_path(self, tmp_path):
        assert default_report_path(tmp_path, "nba", date(2025, 1, 15)) == tmp_path / "arb_nba_2025-01-15.csv"
