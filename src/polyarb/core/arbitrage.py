"""
Arbitrage evaluator – finds guaranteed-profit hedges across two prices.

A hedge buys both outcomes of a two-way market; when the implied
probabilities of the two legs sum below 1.0 the payout exceeds the cost
whatever the result.
"""

from __future__ import annotations

from itertools import combinations
from typing import Iterable, Optional

import structlog

from polyarb.core.aggregator import orient_quotes
from polyarb.core.aliases import AliasTable
from polyarb.core.odds_math import american_to_decimal, american_to_prob
from polyarb.errors import InvalidOddsError, QuoteError
from polyarb.models.comparison import (
    ArbitrageCheck,
    ArbitrageResult,
    BookmakerArbitrage,
    HedgeBet,
    Leg,
    LegCombination,
    StakeSplit,
)
from polyarb.models.event import MatchedPair
from polyarb.models.lines import SideLines, SourceLines
from polyarb.models.odds import MarketQuote, PriceFormat, Side

logger = structlog.get_logger()


def evaluate(prob_a: float, prob_b: float) -> ArbitrageCheck:
    """
    Check one pair of complementary leg prices.

    An opportunity exists iff prob_a + prob_b < 1.0 (strictly). No
    opportunity is the common case and is not an error.

    Examples:
        >>> evaluate(0.48, 0.49).profit_percent
        3.0927...
    """
    combined_cost = prob_a + prob_b
    has_opportunity = combined_cost < 1.0
    profit_percent = (1.0 - combined_cost) / combined_cost * 100.0 if has_opportunity else 0.0
    return ArbitrageCheck(
        combined_cost=combined_cost,
        has_opportunity=has_opportunity,
        profit_percent=profit_percent,
    )


def stake_split(d1: float, d2: float, total_stake: float = 100.0) -> StakeSplit:
    """
    Split ``total_stake`` over two decimal prices so both legs pay the same.

    stake_1 = S * d2 / (d1 + d2), stake_2 = S - stake_1, hence
    stake_1 * d1 == stake_2 * d2.

    Args:
        d1: Decimal payout multiplier of leg 1 (stake included)
        d2: Decimal payout multiplier of leg 2
        total_stake: Amount to spread over both legs
    """
    if d1 <= 1 or d2 <= 1:
        raise InvalidOddsError(min(d1, d2), f"Decimal odds must be > 1, got {d1}, {d2}")
    if total_stake <= 0:
        raise ValueError(f"Total stake must be > 0, got {total_stake}")

    stake_1 = total_stake * d2 / (d1 + d2)
    stake_2 = total_stake - stake_1
    payout_1 = stake_1 * d1
    payout_2 = stake_2 * d2
    guaranteed_return = min(payout_1, payout_2)

    return StakeSplit(
        total_stake=total_stake,
        stake_1=stake_1,
        stake_2=stake_2,
        payout_1=payout_1,
        payout_2=payout_2,
        guaranteed_return=guaranteed_return,
        profit=guaranteed_return - total_stake,
    )


def split_for(combination: LegCombination, total_stake: float = 100.0) -> StakeSplit:
    """Stake split for a leg combination, buying each leg at its implied price."""
    return stake_split(
        1.0 / combination.side_a_leg.implied_probability,
        1.0 / combination.side_b_leg.implied_probability,
        total_stake,
    )


def _leg(lines: SideLines, side: Side, source_lines: SourceLines) -> Leg:
    return Leg(
        side=side,
        team=lines.team,
        source=source_lines.source,
        venue=lines.lowest.venue,
        implied_probability=lines.lowest.implied_probability,
    )


def _combine(leg_a: Leg, leg_b: Leg) -> LegCombination:
    check = evaluate(leg_a.implied_probability, leg_b.implied_probability)
    return LegCombination(
        side_a_leg=leg_a,
        side_b_leg=leg_b,
        combined_cost=check.combined_cost,
        has_opportunity=check.has_opportunity,
        profit_percent=check.profit_percent,
    )


def align_lines(lines: SourceLines, pair: MatchedPair) -> SourceLines:
    """Re-label the counterpart's lines so side A is the primary's side A team."""
    if not pair.swapped:
        return lines
    return lines.model_copy(update={
        "side_a": lines.side_b.model_copy(update={"side": Side.SIDE_A}),
        "side_b": lines.side_a.model_copy(update={"side": Side.SIDE_B}),
    })


def evaluate_pair(
    pair: MatchedPair,
    book_lines: SourceLines,
    market_lines: SourceLines,
) -> ArbitrageResult:
    """
    Evaluate both cross-source hedges for one matched event.

    Combination 1 buys side A on the prediction market and side B at the
    sportsbook; combination 2 the reverse. The cheaper one is reported as
    ``chosen`` (combination 1 on a tie), the other as ``alternative``.

    ``pair.primary`` is the sportsbook event, ``pair.counterpart`` the
    prediction-market event; ``market_lines`` are in the counterpart's
    orientation.
    """
    market = align_lines(market_lines, pair)

    market_a = _leg(market.side_a, Side.SIDE_A, market)
    market_b = _leg(market.side_b, Side.SIDE_B, market)
    book_a = _leg(book_lines.side_a, Side.SIDE_A, book_lines)
    book_b = _leg(book_lines.side_b, Side.SIDE_B, book_lines)

    option_1 = _combine(market_a, book_b)
    option_2 = _combine(book_a, market_b)
    chosen, alternative = (option_1, option_2) if option_1.combined_cost <= option_2.combined_cost else (option_2, option_1)

    event = pair.primary
    return ArbitrageResult(
        event_id=event.id,
        counterpart_event_id=pair.counterpart.id,
        side_a=event.side_a,
        side_b=event.side_b,
        scheduled_time=event.scheduled_time,
        status=event.status,
        has_opportunity=chosen.has_opportunity,
        best_combined_cost=chosen.combined_cost,
        profit_percent=chosen.profit_percent,
        chosen=chosen,
        alternative=alternative,
        book_lines=book_lines,
        market_lines=market,
    )


# ── Bookmaker vs bookmaker ─────────────────────────────────────────────────


def _hedge_bet(quote: MarketQuote, side: Side) -> HedgeBet:
    odds = quote.price_for(side)
    return HedgeBet(
        venue=quote.venue,
        side=side,
        team=quote.team_for(side),
        odds=int(odds),
        implied_probability=american_to_prob(odds),
    )


def _check_bets(event_id: str, bet_1: HedgeBet, bet_2: HedgeBet, total_stake: float) -> BookmakerArbitrage | None:
    total_implied_percent = (bet_1.implied_probability + bet_2.implied_probability) * 100.0
    if total_implied_percent >= 100.0:
        return None
    split = stake_split(
        american_to_decimal(bet_1.odds),
        american_to_decimal(bet_2.odds),
        total_stake,
    )
    return BookmakerArbitrage(
        event_id=event_id,
        bet_1=bet_1,
        bet_2=bet_2,
        total_implied_percent=total_implied_percent,
        split=split,
    )


def find_bookmaker_arbitrage(
    quotes: Iterable[MarketQuote],
    total_stake: float = 100.0,
    aliases: Optional[AliasTable] = None,
) -> list[BookmakerArbitrage]:
    """
    Hedges across every pair of bookmakers quoting one event.

    For bookmakers i < j, side A of i is crossed with side B of j and side B
    of i with side A of j. Sorted by profit percent, highest first.
    """
    usable: list[MarketQuote] = []
    for quote in orient_quotes([q for q in quotes if q.price_format == PriceFormat.AMERICAN], aliases):
        try:
            american_to_prob(quote.side_a_price)
            american_to_prob(quote.side_b_price)
        except QuoteError as e:
            logger.warning("quote_skipped", event_id=quote.event_id, venue=quote.venue, error=str(e))
            continue
        usable.append(quote)

    opportunities: list[BookmakerArbitrage] = []
    for first, second in combinations(usable, 2):
        for side in (Side.SIDE_A, Side.SIDE_B):
            arb = _check_bets(
                first.event_id,
                _hedge_bet(first, side),
                _hedge_bet(second, side.other),
                total_stake,
            )
            if arb is not None:
                opportunities.append(arb)

    opportunities.sort(key=lambda a: a.profit_percent, reverse=True)
    return opportunities
