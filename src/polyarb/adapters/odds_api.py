"""
The Odds API adapter.

h2h moneylines for many US sportsbooks from one aggregator
(https://the-odds-api.com/). Needs an API key; the free tier allows
500 requests a month.
"""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Optional

import httpx
import structlog

from polyarb.adapters.base import JSONAPIClient
from polyarb.models.odds import MarketQuote, PriceFormat, Source

logger = structlog.get_logger()


def _parse_time(value: Optional[str]) -> Optional[datetime]:
    if not value:
        return None
    try:
        return datetime.fromisoformat(value.replace("Z", "+00:00"))
    except (ValueError, TypeError):
        return None


def parse_odds_to_quotes(
    raw_events: list[dict],
    now: Optional[datetime] = None,
) -> list[MarketQuote]:
    """
    Parse a /sports/{sport}/odds response into two-sided sportsbook quotes.

    One quote per (event, bookmaker) whose h2h market prices both the away
    and the home team. Games already started are marked "live".
    """
    now = now or datetime.now(timezone.utc)
    quotes: list[MarketQuote] = []

    for event in raw_events:
        event_id = event.get("id", "")
        away = event.get("away_team", "")
        home = event.get("home_team", "")
        if not event_id or not away or not home:
            continue

        commence_time = _parse_time(event.get("commence_time"))
        status = "live" if commence_time is not None and commence_time < now else "upcoming"

        for bookmaker in event.get("bookmakers", []):
            h2h = next((m for m in bookmaker.get("markets", []) if m.get("key") == "h2h"), None)
            if h2h is None:
                continue

            prices = {o.get("name"): o.get("price") for o in h2h.get("outcomes", [])}
            away_price = prices.get(away)
            home_price = prices.get(home)
            if away_price is None or home_price is None:
                continue

            quotes.append(MarketQuote(
                source=Source.SPORTSBOOK,
                venue=bookmaker.get("title") or bookmaker.get("key", ""),
                event_id=event_id,
                side_a_name=away,
                side_b_name=home,
                side_a_price=float(away_price),
                side_b_price=float(home_price),
                price_format=PriceFormat.AMERICAN,
                commence_time=commence_time,
                status=status,
            ))

    return quotes


class OddsAPIAdapter(JSONAPIClient):
    """
    Sportsbook moneylines from The Odds API.

    Every request carries the API key; the remaining monthly quota reported
    by the service is kept in ``requests_remaining``.
    """

    name = "odds_api"

    def __init__(
        self,
        api_key: str,
        base_url: str = "https://api.the-odds-api.com/v4",
        requests_per_second: float = 1.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        super().__init__(base_url, requests_per_second, transport)
        self._api_key = api_key
        self.requests_remaining: Optional[str] = None

    def _default_params(self) -> dict[str, str]:
        return {"apiKey": self._api_key}

    def _on_response(self, resp: httpx.Response) -> None:
        remaining = resp.headers.get("x-requests-remaining")
        if remaining is None:
            return
        self.requests_remaining = remaining
        logger.debug("odds_api_quota", remaining=remaining, used=resp.headers.get("x-requests-used"))

    async def get_odds(
        self,
        sport: str,
        regions: str = "us",
        odds_format: str = "american",
        bookmakers: Optional[str] = None,
    ) -> list[dict]:
        """
        Raw h2h odds for every upcoming and live event of ``sport``.

        Each event has ``id``, ``commence_time``, ``away_team``, ``home_team``
        and a ``bookmakers`` list whose ``markets`` hold the h2h outcomes.
        """
        params = {"regions": regions, "markets": "h2h", "oddsFormat": odds_format}
        if bookmakers:
            params["bookmakers"] = bookmakers
        return await self._get(f"/sports/{sport}/odds", params=params)

    async def fetch_quotes(self, sport: str, regions: str = "us") -> list[MarketQuote]:
        raw_events = await self.get_odds(sport, regions=regions)
        quotes = parse_odds_to_quotes(raw_events)
        logger.info("sportsbook_quotes_fetched", sport=sport, events=len(raw_events), quotes=len(quotes))
        return quotes
