"""Tests for odds conversion and vig removal math."""

import pytest

from polyarb.core.odds_math import (
    american_to_decimal,
    american_to_prob,
    devig_market,
    implied_prob,
    market_price_to_prob,
    no_vig_two_way,
    prob_to_american,
)
from polyarb.errors import (
    DegenerateMarketError,
    InvalidOddsError,
    InvalidPriceError,
    InvalidProbabilityError,
    QuoteError,
)
from polyarb.models.odds import PriceFormat

from conftest import book_quote, market_quote


class TestAmericanOdds:
    """Test American odds conversions."""

    def test_favorite_odds(self):
        assert american_to_prob(-110) == pytest.approx(0.5238, abs=0.001)
        assert american_to_prob(-200) == pytest.approx(0.6667, abs=0.001)

    def test_underdog_odds(self):
        assert american_to_prob(+150) == pytest.approx(0.4)
        assert american_to_prob(+200) == pytest.approx(0.3333, abs=0.001)

    def test_even_odds(self):
        assert american_to_prob(+100) == pytest.approx(0.5)
        assert american_to_prob(-100) == pytest.approx(0.5)

    def test_zero_odds_rejected(self):
        with pytest.raises(InvalidOddsError):
            american_to_prob(0)

    def test_quote_errors_are_value_errors(self):
        with pytest.raises(ValueError):
            american_to_prob(0)

    def test_prob_to_american(self):
        assert prob_to_american(0.6) == -150
        assert prob_to_american(0.4) == 150
        # 50% maps to -100 (both ±100 are even money)
        assert abs(prob_to_american(0.5)) == 100

    def test_prob_to_american_out_of_range(self):
        for prob in (0.0, 1.0, -0.1, 1.5):
            with pytest.raises(InvalidProbabilityError):
                prob_to_american(prob)

    def test_roundtrip(self):
        # +100 excluded: it comes back as -100, the same price
        for odds in [-500, -250, -150, -110, -105, +105, +110, +150, +250, +500]:
            assert prob_to_american(american_to_prob(odds)) == odds

    def test_american_to_decimal(self):
        assert american_to_decimal(+150) == pytest.approx(2.5)
        assert american_to_decimal(-200) == pytest.approx(1.5)
        assert american_to_decimal(+100) == pytest.approx(2.0)
        with pytest.raises(InvalidOddsError):
            american_to_decimal(0)

    def test_non_finite_odds_rejected(self):
        for odds in (float("nan"), float("inf"), float("-inf")):
            with pytest.raises(InvalidOddsError, match="finite"):
                american_to_prob(odds)
            with pytest.raises(InvalidOddsError):
                american_to_decimal(odds)


class TestMarketPrice:
    """Prediction-market prices are probabilities."""

    def test_identity(self):
        assert market_price_to_prob(0.52) == pytest.approx(0.52)

    def test_settled_prices_rejected(self):
        for price in (0.0, 1.0, 1.2, -0.3):
            with pytest.raises(InvalidPriceError):
                market_price_to_prob(price)

    def test_non_finite_prices_rejected(self):
        for price in (float("nan"), float("inf"), float("-inf")):
            with pytest.raises(InvalidPriceError):
                market_price_to_prob(price)
        with pytest.raises(InvalidProbabilityError):
            prob_to_american(float("nan"))

    def test_implied_prob_dispatch(self):
        assert implied_prob(+150, PriceFormat.AMERICAN) == pytest.approx(0.4)
        assert implied_prob(0.4, PriceFormat.PROBABILITY) == pytest.approx(0.4)
        with pytest.raises(QuoteError):
            implied_prob(1.0, PriceFormat.PROBABILITY)


class TestVigRemoval:
    """Test vig removal methods."""

    def test_balanced_market(self):
        p = american_to_prob(-110)
        a, b, margin = no_vig_two_way(p, p)
        assert p == pytest.approx(0.5238, abs=0.0001)
        assert a == pytest.approx(0.5)
        assert b == pytest.approx(0.5)
        assert margin * 100 == pytest.approx(4.76, abs=0.01)

    def test_fair_market(self):
        a, b, margin = no_vig_two_way(american_to_prob(+150), american_to_prob(-150))
        assert a == pytest.approx(0.4)
        assert b == pytest.approx(0.6)
        assert margin == pytest.approx(0.0)

    def test_true_probs_sum_to_one(self):
        for p_a, p_b in [(0.3, 0.8), (0.55, 0.5), (0.45, 0.5), (0.01, 0.99)]:
            a, b, _ = no_vig_two_way(p_a, p_b)
            assert a + b == pytest.approx(1.0)

    def test_negative_margin_is_valid(self):
        a, b, margin = no_vig_two_way(0.45, 0.5)
        assert margin == pytest.approx(-0.05)
        assert a + b == pytest.approx(1.0)

    def test_degenerate_market(self):
        with pytest.raises(DegenerateMarketError):
            no_vig_two_way(0.0, 0.0)


class TestDevigMarket:
    def test_sportsbook_quote(self):
        market = devig_market(book_quote("DraftKings", -110, -110))
        assert market.venue == "DraftKings"
        assert market.side_a.team == "Los Angeles Lakers"
        assert market.side_a.true_probability == pytest.approx(0.5)
        assert market.margin_percent == pytest.approx(4.76, abs=0.01)
        assert market.overround == pytest.approx(1.0476, abs=0.0001)

    def test_market_quote(self):
        market = devig_market(market_quote(0.48, 0.49))
        assert market.side_a.implied_probability == pytest.approx(0.48)
        assert market.margin == pytest.approx(-0.03)
        assert market.side_a.true_probability + market.side_b.true_probability == pytest.approx(1.0)

    def test_invalid_price(self):
        with pytest.raises(InvalidOddsError):
            devig_market(book_quote("DraftKings", 0, -110))

    def test_nan_market_price(self):
        with pytest.raises(InvalidPriceError):
            devig_market(market_quote(float("nan"), 0.5))
