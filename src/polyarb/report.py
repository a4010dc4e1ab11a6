"""
CSV persistence for quotes and ranked results.

Quote files use one row per (event, venue) with the moneyline, implied and
de-vigged probabilities and the vig; result files use
``ArbitrageResult.to_record()`` rows. Quote files can be read back for an
offline run.
"""

from __future__ import annotations

import csv
from datetime import date, datetime, timezone
from pathlib import Path
from typing import Iterable, Optional

import structlog

from polyarb.core.odds_math import devig_market, prob_to_american
from polyarb.errors import PolyArbError
from polyarb.models.comparison import ArbitrageResult
from polyarb.models.odds import MarketQuote, PriceFormat, Source

logger = structlog.get_logger()

QUOTE_COLUMNS = [
    "Date",
    "Time",
    "Game ID",
    "Away Team",
    "Home Team",
    "Status",
    "Bookmaker",
    "Away Odds",
    "Home Odds",
    "Away Implied Prob (%)",
    "Home Implied Prob (%)",
    "Away True Prob (%)",
    "Home True Prob (%)",
    "Vig (%)",
]

RESULT_COLUMNS = [
    "Date",
    "Time",
    "Game ID",
    "Away Team",
    "Home Team",
    "Status",
    "Arb Opportunity",
    "Lowest Away Bookmaker",
    "Lowest Away Implied Prob (%)",
    "Lowest Home Bookmaker",
    "Lowest Home Implied Prob (%)",
    "Market Away Implied Prob (%)",
    "Market Home Implied Prob (%)",
    "Away Leg Source",
    "Home Leg Source",
    "Profit %",
    "Best Option Cost",
]


def _format_american(odds: float) -> str:
    return f"{int(odds):+d}"


def quote_to_row(quote: MarketQuote) -> dict[str, object]:
    """Flat row for one quote. Raises if the quote cannot be de-vigged."""
    market = devig_market(quote)
    if quote.price_format == PriceFormat.AMERICAN:
        away_odds, home_odds = quote.side_a_price, quote.side_b_price
    else:
        away_odds = prob_to_american(quote.side_a_price)
        home_odds = prob_to_american(quote.side_b_price)

    when = quote.commence_time
    return {
        "Date": when.strftime("%Y-%m-%d") if when else "",
        "Time": when.strftime("%H:%M") if when else "",
        "Game ID": quote.event_id,
        "Away Team": quote.side_a_name,
        "Home Team": quote.side_b_name,
        "Status": quote.status,
        "Bookmaker": quote.venue,
        "Away Odds": _format_american(away_odds),
        "Home Odds": _format_american(home_odds),
        "Away Implied Prob (%)": f"{market.side_a.implied_probability * 100:.2f}",
        "Home Implied Prob (%)": f"{market.side_b.implied_probability * 100:.2f}",
        "Away True Prob (%)": f"{market.side_a.true_probability * 100:.2f}",
        "Home True Prob (%)": f"{market.side_b.true_probability * 100:.2f}",
        "Vig (%)": f"{market.margin_percent:.2f}",
    }


def write_quotes_csv(path: Path, quotes: Iterable[MarketQuote]) -> int:
    """Write quotes; those that cannot be de-vigged are logged and left out."""
    path.parent.mkdir(parents=True, exist_ok=True)
    written = 0
    with open(path, "w", newline="", encoding="utf-8") as f:
        writer = csv.DictWriter(f, fieldnames=QUOTE_COLUMNS)
        writer.writeheader()
        for quote in quotes:
            try:
                row = quote_to_row(quote)
            except PolyArbError as e:
                logger.warning("quote_not_written", event_id=quote.event_id, venue=quote.venue, error=str(e))
                continue
            writer.writerow(row)
            written += 1
    return written


def write_results_csv(path: Path, results: Iterable[ArbitrageResult]) -> int:
    """Write ranked results in the order given."""
    path.parent.mkdir(parents=True, exist_ok=True)
    written = 0
    with open(path, "w", newline="", encoding="utf-8") as f:
        writer = csv.DictWriter(f, fieldnames=RESULT_COLUMNS)
        writer.writeheader()
        for result in results:
            writer.writerow(result.to_record())
            written += 1
    return written


def _parse_when(day: str, clock: str) -> Optional[datetime]:
    if not day:
        return None
    try:
        return datetime.fromisoformat(f"{day}T{clock or '00:00'}").replace(tzinfo=timezone.utc)
    except ValueError:
        return None


def _parse_float(value: str) -> Optional[float]:
    try:
        return float(value.replace("+", "").strip())
    except (AttributeError, ValueError):
        return None


def load_quotes_csv(path: Path, source: Source) -> list[MarketQuote]:
    """
    Read a quote file back.

    Sportsbook rows are priced from the American odds columns; prediction
    market rows from the implied probability columns. Rows with missing or
    unparseable prices are logged and skipped.
    """
    quotes: list[MarketQuote] = []
    with open(path, newline="", encoding="utf-8") as f:
        for line_no, row in enumerate(csv.DictReader(f), start=2):
            if source == Source.PREDICTION_MARKET:
                away = _parse_float(row.get("Away Implied Prob (%)", ""))
                home = _parse_float(row.get("Home Implied Prob (%)", ""))
                price_format = PriceFormat.PROBABILITY
                if away is not None and home is not None:
                    away, home = away / 100.0, home / 100.0
            else:
                away = _parse_float(row.get("Away Odds", ""))
                home = _parse_float(row.get("Home Odds", ""))
                price_format = PriceFormat.AMERICAN

            if away is None or home is None or not row.get("Game ID"):
                logger.warning("csv_row_skipped", path=str(path), line=line_no)
                continue

            quotes.append(MarketQuote(
                source=source,
                venue=row.get("Bookmaker", "") or ("Polymarket" if source == Source.PREDICTION_MARKET else ""),
                event_id=row["Game ID"],
                side_a_name=row.get("Away Team", ""),
                side_b_name=row.get("Home Team", ""),
                side_a_price=away,
                side_b_price=home,
                price_format=price_format,
                commence_time=_parse_when(row.get("Date", ""), row.get("Time", "")),
                status=row.get("Status", "") or "upcoming",
            ))
    return quotes


def default_report_path(output_dir: Path, league: str, day: Optional[date] = None) -> Path:
    """outputs/final_arb/arb_<league>_<YYYY-MM-DD>.csv"""
    day = day or datetime.now(timezone.utc).date()
    return output_dir / f"arb_{league}_{day.isoformat()}.csv"
