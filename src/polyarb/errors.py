"""Error taxonomy for quote normalisation and arbitrage detection."""

from __future__ import annotations


class PolyArbError(Exception):
    """Base class for all polyarb errors."""
    pass


class QuoteError(PolyArbError, ValueError):
    """A single quoted price could not be converted."""
    pass


class InvalidOddsError(QuoteError):
    """American odds of zero (or otherwise unusable)."""

    def __init__(self, odds: float, message: str = ""):
        self.odds = odds
        super().__init__(message or f"American odds must be non-zero, got {odds}")


class InvalidPriceError(QuoteError):
    """Prediction-market price outside (0, 1), i.e. a settled market."""

    def __init__(self, price: float):
        self.price = price
        super().__init__(f"Market price must be in (0, 1), got {price}")


class InvalidProbabilityError(QuoteError):
    """Probability outside (0, 1)."""

    def __init__(self, prob: float):
        self.prob = prob
        super().__init__(f"Probability must be in (0, 1), got {prob}")


class DegenerateMarketError(PolyArbError):
    """A market whose implied probabilities sum to zero."""

    def __init__(self, overround: float):
        self.overround = overround
        super().__init__(f"Overround must be > 0, got {overround}")


class EmptyQuoteSetError(PolyArbError):
    """No usable quotes for an event from one source."""

    def __init__(self, event_id: str = "", source: str = ""):
        self.event_id = event_id
        self.source = source
        where = f" for event {event_id}" if event_id else ""
        by = f" from {source}" if source else ""
        super().__init__(f"No quotes{where}{by}")


class AdapterError(PolyArbError):
    """Raised when a fetch adapter gets an unusable response."""

    def __init__(self, adapter: str, message: str):
        self.adapter = adapter
        self.message = message
        super().__init__(f"{adapter}: {message}")
