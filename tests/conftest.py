"""
Pytest fixtures for testing.
"""

from datetime import datetime, timezone

import pytest

from polyarb.core.aliases import alias_table_for
from polyarb.core.matcher import EventMatcher
from polyarb.models.odds import MarketQuote, PriceFormat, Source

GAME_TIME = datetime(2025, 1, 15, 0, 30, tzinfo=timezone.utc)


def book_quote(
    venue: str,
    away_odds: float,
    home_odds: float,
    event_id: str = "evt1",
    away: str = "Los Angeles Lakers",
    home: str = "Boston Celtics",
    commence_time: datetime | None = GAME_TIME,
) -> MarketQuote:
    return MarketQuote(
        source=Source.SPORTSBOOK,
        venue=venue,
        event_id=event_id,
        side_a_name=away,
        side_b_name=home,
        side_a_price=away_odds,
        side_b_price=home_odds,
        price_format=PriceFormat.AMERICAN,
        commence_time=commence_time,
    )


def market_quote(
    away_price: float,
    home_price: float,
    event_id: str = "pm1",
    away: str = "Lakers",
    home: str = "Celtics",
    commence_time: datetime | None = GAME_TIME,
) -> MarketQuote:
    return MarketQuote(
        source=Source.PREDICTION_MARKET,
        venue="Polymarket",
        event_id=event_id,
        side_a_name=away,
        side_b_name=home,
        side_a_price=away_price,
        side_b_price=home_price,
        price_format=PriceFormat.PROBABILITY,
        commence_time=commence_time,
    )


@pytest.fixture
def nba_matcher() -> EventMatcher:
    """Matcher with the built-in NBA alias table."""
    return EventMatcher(aliases=alias_table_for("nba"))


@pytest.fixture
def book_quotes() -> list[MarketQuote]:
    """Three books on one game; FanDuel has the best away price, DraftKings the best home price."""
    return [
        book_quote("DraftKings", +120, -135),
        book_quote("FanDuel", +125, -145),
        book_quote("BetMGM", +115, -140),
    ]
