"""
Polymarket Gamma API adapter.

Fetches open game events for a league and extracts their moneyline market.
https://gamma-api.polymarket.com
"""

from __future__ import annotations

import json
import re
from datetime import datetime
from typing import Any, Optional

import httpx
import structlog

from polyarb.adapters.base import JSONAPIClient
from polyarb.errors import AdapterError
from polyarb.models.odds import MarketQuote, PriceFormat, Source

logger = structlog.get_logger()

VENUE = "Polymarket"

_TITLE_PATTERNS = (
    re.compile(r"(.+?)\s+(?:vs\.?|@|v\.|versus)\s+(.+)", re.IGNORECASE),
    re.compile(r"(.+?)\s+at\s+(.+)", re.IGNORECASE),
)


def extract_teams_from_title(title: str) -> Optional[tuple[str, str]]:
    """
    Split an event title into (away, home).

    Handles "A vs B", "A vs. B", "A @ B", "A v. B", "A versus B", "A at B".
    """
    if not title:
        return None
    for pattern in _TITLE_PATTERNS:
        m = pattern.match(title.strip())
        if m:
            return m.group(1).strip(), m.group(2).strip()
    return None


def _json_list(value: Any) -> Optional[list]:
    """Gamma returns some list fields as JSON-encoded strings."""
    if isinstance(value, list):
        return value
    if isinstance(value, str):
        try:
            decoded = json.loads(value)
        except json.JSONDecodeError:
            return None
        return decoded if isinstance(decoded, list) else None
    return None


def parse_tag_ids(tags: Any) -> list[str]:
    """Tag ids from a sport entry: list, JSON list string or comma-separated string."""
    if isinstance(tags, list):
        return [str(t).strip() for t in tags if str(t).strip()]
    if isinstance(tags, str):
        decoded = _json_list(tags) if tags.lstrip().startswith("[") else None
        if decoded is not None:
            return [str(t).strip() for t in decoded if str(t).strip()]
        return [t.strip() for t in tags.split(",") if t.strip()]
    return []


def _ask_prices(market: dict, outcome_count: int) -> Optional[tuple[float, float]]:
    """
    Prices to buy each outcome.

    bestBid/bestAsk refer to outcome 0, so buying outcome 1 costs 1 - bestBid.
    Falls back to outcomePrices (mid) when the book fields are missing.
    """
    if market.get("bestBid") is not None and market.get("bestAsk") is not None:
        try:
            best_bid = float(market["bestBid"])
            best_ask = float(market["bestAsk"])
        except (TypeError, ValueError):
            return None
        return best_ask, 1.0 - best_bid

    prices = _json_list(market.get("outcomePrices"))
    if prices is None or len(prices) != outcome_count:
        return None
    try:
        return float(prices[0]), float(prices[1])
    except (TypeError, ValueError):
        return None


def _names_overlap(a: str, b: str) -> bool:
    a, b = a.lower(), b.lower()
    return a in b or b in a


def parse_event(event: dict) -> Optional[MarketQuote]:
    """
    Moneyline quote for one Gamma event, or None if it has no usable one.

    Only head-to-head markets (exactly two outcomes) are kept. Away/home
    orientation comes from the title when it can be read, else from the
    outcome order.
    """
    markets = event.get("markets")
    if not isinstance(markets, list):
        return None

    moneyline = next((m for m in markets if m.get("sportsMarketType") == "moneyline"), None)
    if moneyline is None:
        return None

    outcomes = _json_list(moneyline.get("outcomes"))
    if outcomes is None or len(outcomes) != 2:
        return None

    prices = _ask_prices(moneyline, len(outcomes))
    if prices is None:
        return None

    away, home = str(outcomes[0]), str(outcomes[1])
    away_price, home_price = prices

    teams = extract_teams_from_title(event.get("title", ""))
    if teams is not None:
        title_away = teams[0]
        if not _names_overlap(away, title_away) and _names_overlap(home, title_away):
            away, home = home, away
            away_price, home_price = home_price, away_price

    start = None
    if event.get("startDate"):
        try:
            start = datetime.fromisoformat(str(event["startDate"]).replace("Z", "+00:00"))
        except ValueError:
            start = None

    if event.get("live"):
        status = "live"
    elif event.get("closed"):
        status = "closed"
    else:
        status = "upcoming"

    return MarketQuote(
        source=Source.PREDICTION_MARKET,
        venue=VENUE,
        event_id=str(event.get("id", "")),
        side_a_name=away,
        side_b_name=home,
        side_a_price=away_price,
        side_b_price=home_price,
        price_format=PriceFormat.PROBABILITY,
        commence_time=start,
        status=status,
    )


def parse_events(events: list[dict]) -> list[MarketQuote]:
    """Moneyline quotes for every event that has one."""
    quotes: list[MarketQuote] = []
    for event in events:
        quote = parse_event(event)
        if quote is not None:
            quotes.append(quote)
    return quotes


class PolymarketAdapter(JSONAPIClient):
    """Read-only Gamma API adapter. No authentication needed for market data."""

    name = "polymarket"

    def __init__(
        self,
        base_url: str = "https://gamma-api.polymarket.com",
        requests_per_second: float = 10.0,
        page_size: int = 100,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        super().__init__(base_url, requests_per_second, transport)
        self._page_size = page_size

    async def get_league_tag_id(self, league: str) -> str:
        """
        Tag id for a league from /sports.

        The first tag is usually a generic sports tag, so the second one is
        preferred when present.
        """
        sports = await self._get("/sports")
        if not isinstance(sports, list):
            raise AdapterError("polymarket", "unexpected /sports payload")

        entry = next(
            (s for s in sports if str(s.get("sport", "")).lower() == league.lower()),
            None,
        )
        if entry is None:
            raise AdapterError("polymarket", f"sport {league!r} not found")

        tag_ids = parse_tag_ids(entry.get("tags"))
        if not tag_ids:
            raise AdapterError("polymarket", f"no tags for sport {league!r}")

        tag_id = tag_ids[1] if len(tag_ids) > 1 else tag_ids[0]
        logger.debug("polymarket_tag_resolved", league=league, tags=tag_ids, tag_id=tag_id)
        return tag_id

    async def list_events(self, tag_id: str) -> list[dict]:
        """All open events for a tag, following offset pagination."""
        events: list[dict] = []
        offset = 0

        while True:
            page = await self._get("/events", params={
                "tag_id": tag_id,
                "closed": "false",
                "limit": self._page_size,
                "offset": offset,
                "order": "id",
                "ascending": "false",
            })
            if not isinstance(page, list) or not page:
                break

            events.extend(page)
            if len(page) < self._page_size:
                break
            offset += self._page_size

        return events

    async def fetch_quotes(self, league: str) -> list[MarketQuote]:
        """Resolve the league tag, fetch its events and parse moneylines."""
        tag_id = await self.get_league_tag_id(league)
        events = await self.list_events(tag_id)
        quotes = parse_events(events)
        logger.info("market_quotes_fetched", league=league, events=len(events), quotes=len(quotes))
        return quotes
