"""
Price conversions and margin removal.

Probabilities are floats in (0, 1); American prices are whole numbers such
as -110 or +150; decimal prices include the stake (2.50 pays 2.5x).
Prediction-market contract prices are probabilities already.
"""

from __future__ import annotations

import math

from polyarb.errors import (
    DegenerateMarketError,
    InvalidOddsError,
    InvalidPriceError,
    InvalidProbabilityError,
)
from polyarb.models.odds import MarketQuote, PriceFormat, Side
from polyarb.models.probability import DeviggedMarket, DeviggedOutcome


def _check_american(odds: float) -> None:
    if not math.isfinite(odds):
        raise InvalidOddsError(odds, f"American odds must be finite, got {odds}")
    if odds == 0:
        raise InvalidOddsError(odds)


def american_to_prob(odds: float) -> float:
    """
    Implied probability of an American price, bookmaker margin included.

    Raises:
        InvalidOddsError: odds == 0, which is not a price, or odds not finite

    Examples:
        >>> american_to_prob(-110)
        0.5238...
        >>> american_to_prob(+150)
        0.4
    """
    _check_american(odds)
    if odds > 0:
        return 100 / (odds + 100)
    risk = -odds
    return risk / (risk + 100)


def market_price_to_prob(price: float) -> float:
    """
    Convert a prediction-market price to implied probability.

    The price of a binary contract already is the probability; a price at
    or beyond 0/1 means the market has settled and cannot be traded. NaN
    fails the range check too.
    """
    if not 0 < price < 1:
        raise InvalidPriceError(price)
    return float(price)


def prob_to_american(prob: float) -> int:
    """
    Nearest whole American price for a probability in (0, 1).

    0.5 and above gives a favourite (negative) price, so even money comes
    back as -100.
    """
    if not 0 < prob < 1:
        raise InvalidProbabilityError(prob)
    if prob < 0.5:
        return round(100 * (1 - prob) / prob)
    return round(-100 * prob / (1 - prob))


def american_to_decimal(odds: float) -> float:
    """
    Convert American odds to decimal payout multiplier (stake included).

    Examples:
        >>> american_to_decimal(+150)
        2.5
        >>> american_to_decimal(-200)
        1.5
    """
    _check_american(odds)
    if odds > 0:
        return odds / 100 + 1
    return 100 / abs(odds) + 1


def implied_prob(price: float, price_format: PriceFormat) -> float:
    """Implied probability of a raw quoted price in either format."""
    if price_format == PriceFormat.AMERICAN:
        return american_to_prob(price)
    return market_price_to_prob(price)


def no_vig_two_way(p_a: float, p_b: float) -> tuple[float, float, float]:
    """
    Proportional de-vig of a two-outcome market.

    Each implied probability is divided by their sum, so the true
    probabilities add up to 1. Returns ``(true_a, true_b, margin)`` with
    margin = p_a + p_b - 1; it is negative when the quote is already
    under-round, which is reported as is.

    Raises:
        DegenerateMarketError: p_a + p_b <= 0
    """
    total = p_a + p_b
    if total <= 0:
        raise DegenerateMarketError(total)
    return p_a / total, p_b / total, total - 1.0


def devig_market(quote: MarketQuote) -> DeviggedMarket:
    """Convert both prices of a two-sided quote and strip the margin."""
    p_a = implied_prob(quote.side_a_price, quote.price_format)
    p_b = implied_prob(quote.side_b_price, quote.price_format)
    true_a, true_b, margin = no_vig_two_way(p_a, p_b)

    return DeviggedMarket(
        venue=quote.venue,
        event_id=quote.event_id,
        side_a=DeviggedOutcome(
            side=Side.SIDE_A,
            team=quote.side_a_name,
            venue=quote.venue,
            price=quote.side_a_price,
            implied_probability=p_a,
            true_probability=true_a,
        ),
        side_b=DeviggedOutcome(
            side=Side.SIDE_B,
            team=quote.side_b_name,
            venue=quote.venue,
            price=quote.side_b_price,
            implied_probability=p_b,
            true_probability=true_b,
        ),
        margin=margin,
    )
