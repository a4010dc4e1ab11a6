"""
Quote aggregator – reduces many venues' quotes for one event to a line per side.

The lowest implied probability for a side is the cheapest price at which that
side can be bought, so it is the one the arbitrage math uses; the highest is
kept for reporting.
"""

from __future__ import annotations

from typing import Iterable, Optional

import structlog

from polyarb.core.aliases import AliasTable
from polyarb.core.matcher import teams_match
from polyarb.core.odds_math import implied_prob
from polyarb.errors import EmptyQuoteSetError, QuoteError
from polyarb.models.lines import PriceLine, SideLines, SourceLines
from polyarb.models.odds import MarketQuote, Side

logger = structlog.get_logger()


def orient_quotes(quotes: list[MarketQuote], aliases: Optional[AliasTable] = None) -> list[MarketQuote]:
    """
    Flip any quote that lists the teams the other way round from the first one.

    Venues occasionally disagree on which team is "away", and on how a team is
    named; ``aliases`` lets "LA Lakers" and "Los Angeles Lakers" compare equal.
    """
    if not quotes:
        return []
    first = quotes[0]
    oriented = [first]
    for quote in quotes[1:]:
        same = (
            teams_match(quote.side_a_name, first.side_a_name, aliases)
            and teams_match(quote.side_b_name, first.side_b_name, aliases)
        )
        flipped = (
            teams_match(quote.side_a_name, first.side_b_name, aliases)
            and teams_match(quote.side_b_name, first.side_a_name, aliases)
        )
        oriented.append(quote.flipped() if flipped and not same else quote)
    return oriented


def aggregate_quotes(
    quotes: Iterable[MarketQuote],
    aliases: Optional[AliasTable] = None,
) -> SourceLines:
    """
    Lowest and highest implied probability per side across all quotes.

    Ties keep the first-seen venue. Quotes with an unusable price are
    skipped and logged.

    Raises:
        EmptyQuoteSetError: no quotes, or none with usable prices
    """
    quotes = orient_quotes(list(quotes), aliases)
    if not quotes:
        raise EmptyQuoteSetError()

    source = quotes[0].source
    event_id = quotes[0].event_id

    lowest: dict[Side, Optional[PriceLine]] = {Side.SIDE_A: None, Side.SIDE_B: None}
    highest: dict[Side, Optional[PriceLine]] = {Side.SIDE_A: None, Side.SIDE_B: None}
    used = 0

    for quote in quotes:
        try:
            priced = [(outcome, implied_prob(outcome.price, outcome.price_format)) for outcome in quote.outcomes()]
        except QuoteError as e:
            logger.warning(
                "quote_skipped",
                event_id=quote.event_id,
                venue=quote.venue,
                error=str(e),
            )
            continue

        used += 1
        for outcome, prob in priced:
            side = outcome.side
            line = PriceLine(implied_probability=prob, venue=outcome.venue, price=outcome.price)
            low = lowest[side]
            high = highest[side]
            # Strict comparisons: first-seen wins ties
            if low is None or prob < low.implied_probability:
                lowest[side] = line
            if high is None or prob > high.implied_probability:
                highest[side] = line

    if used == 0:
        raise EmptyQuoteSetError(event_id=event_id, source=source.value)

    first = quotes[0]
    return SourceLines(
        source=source,
        event_id=event_id,
        side_a=SideLines(
            side=Side.SIDE_A,
            team=first.side_a_name,
            lowest=lowest[Side.SIDE_A],  # type: ignore[arg-type]
            highest=highest[Side.SIDE_A],  # type: ignore[arg-type]
        ),
        side_b=SideLines(
            side=Side.SIDE_B,
            team=first.side_b_name,
            lowest=lowest[Side.SIDE_B],  # type: ignore[arg-type]
            highest=highest[Side.SIDE_B],  # type: ignore[arg-type]
        ),
        quote_count=used,
    )
