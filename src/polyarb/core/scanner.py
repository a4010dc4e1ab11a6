"""
Scanner – runs the full pipeline over one run's quotes.

Sportsbook events are matched against prediction-market events, each side
is aggregated, both cross-source hedges are evaluated and the verdicts are
ranked. Failures are isolated per quote, market and event.
"""

from __future__ import annotations

from typing import Iterable

import structlog

from polyarb.config import MatchPolicy
from polyarb.core.aggregator import aggregate_quotes
from polyarb.core.arbitrage import evaluate_pair
from polyarb.core.matcher import EventMatcher
from polyarb.core.odds_math import devig_market
from polyarb.core.ranker import rank_results
from polyarb.errors import DegenerateMarketError, EmptyQuoteSetError, QuoteError
from polyarb.models.comparison import ArbitrageResult, ScanReport, SkippedItem
from polyarb.models.event import Event, MatchedPair, MatchStatus
from polyarb.models.odds import MarketQuote, Source
from polyarb.models.probability import DeviggedMarket

logger = structlog.get_logger()


def group_by_event(quotes: Iterable[MarketQuote]) -> dict[str, list[MarketQuote]]:
    """Group quotes by event id, keeping first-seen order of events and quotes."""
    groups: dict[str, list[MarketQuote]] = {}
    for quote in quotes:
        groups.setdefault(quote.event_id, []).append(quote)
    return groups


class ArbScanner:
    """
    Core pipeline for detecting sportsbook vs prediction-market hedges.

    Detection only, no execution.
    """

    def __init__(
        self,
        matcher: EventMatcher | None = None,
        match_policy: MatchPolicy = MatchPolicy.FIRST,
    ) -> None:
        self.matcher = matcher or EventMatcher()
        self.match_policy = match_policy

    def scan(
        self,
        book_quotes: Iterable[MarketQuote],
        market_quotes: Iterable[MarketQuote],
    ) -> ScanReport:
        """
        Evaluate every sportsbook event that has a prediction-market counterpart.

        Returns a report with ranked results plus unmatched, ambiguous and
        skipped items. Empty input gives an empty report.
        """
        skipped: list[SkippedItem] = []
        markets: list[DeviggedMarket] = []

        book_groups = group_by_event(self._usable(book_quotes, markets, skipped))
        market_groups = group_by_event(self._usable(market_quotes, markets, skipped))
        candidates = [group[0].event() for group in market_groups.values()]

        results: list[ArbitrageResult] = []
        unmatched: list[Event] = []
        ambiguous: list[Event] = []

        for event_id, group in book_groups.items():
            target = group[0].event()

            pair = self._match(target, candidates, unmatched, ambiguous)
            if pair is None:
                continue

            try:
                book_lines = aggregate_quotes(group, self.matcher.aliases)
                market_lines = aggregate_quotes(market_groups[pair.counterpart.id], self.matcher.aliases)
            except EmptyQuoteSetError as e:
                logger.warning("event_skipped", event_id=event_id, error=str(e))
                skipped.append(SkippedItem(
                    event_id=event_id,
                    source=Source(e.source) if e.source else Source.SPORTSBOOK,
                    error_type=type(e).__name__,
                    reason=str(e),
                ))
                continue

            result = evaluate_pair(pair, book_lines, market_lines)
            if result.has_opportunity:
                logger.info(
                    "arbitrage_found",
                    event_id=event_id,
                    game=target.label,
                    cost=round(result.best_combined_cost, 4),
                    profit_pct=round(result.profit_percent, 2),
                    legs=[result.chosen.side_a_leg.venue, result.chosen.side_b_leg.venue],
                )
            results.append(result)

        ranked = rank_results(results)
        logger.info(
            "scan_complete",
            events=len(book_groups),
            evaluated=len(ranked),
            opportunities=sum(1 for r in ranked if r.has_opportunity),
            unmatched=len(unmatched),
            ambiguous=len(ambiguous),
            skipped=len(skipped),
        )

        return ScanReport(
            results=ranked,
            markets=markets,
            unmatched=unmatched,
            ambiguous=ambiguous,
            skipped=skipped,
        )

    def _usable(
        self,
        quotes: Iterable[MarketQuote],
        markets: list[DeviggedMarket],
        skipped: list[SkippedItem],
    ) -> list[MarketQuote]:
        """De-vig every quote; quotes that fail are recorded and dropped."""
        usable: list[MarketQuote] = []
        for quote in quotes:
            try:
                markets.append(devig_market(quote))
            except (QuoteError, DegenerateMarketError) as e:
                logger.warning(
                    "quote_skipped",
                    event_id=quote.event_id,
                    venue=quote.venue,
                    error=str(e),
                )
                skipped.append(SkippedItem(
                    event_id=quote.event_id,
                    source=quote.source,
                    venue=quote.venue,
                    error_type=type(e).__name__,
                    reason=str(e),
                ))
                continue
            usable.append(quote)
        return usable

    def _match(
        self,
        target: Event,
        candidates: list[Event],
        unmatched: list[Event],
        ambiguous: list[Event],
    ) -> MatchedPair | None:
        if self.match_policy == MatchPolicy.BEST:
            resolution = self.matcher.resolve(target, candidates)
            if resolution.status == MatchStatus.AMBIGUOUS:
                ambiguous.append(target)
                return None
            pair = resolution.pair
        else:
            pair = self.matcher.find_match(target, candidates)

        if pair is None:
            logger.info("event_unmatched", event_id=target.id, game=target.label)
            unmatched.append(target)
        return pair
