"""Quote models for sportsbook and prediction-market prices."""

from __future__ import annotations

from datetime import datetime
from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from polyarb.models.event import Event, Side


class Source(str, Enum):
    """Where a quote came from."""
    SPORTSBOOK = "sportsbook"
    PREDICTION_MARKET = "prediction_market"


class PriceFormat(str, Enum):
    """Price representation."""
    AMERICAN = "american"        # e.g., -110, +150
    PROBABILITY = "probability"  # e.g., 0.52


class OutcomeQuote(BaseModel):
    """
    A single observed price for one side of one event.
    
    Raw price as delivered by the venue.
    """
    model_config = ConfigDict(frozen=True)

    source: Source
    venue: str = Field(description="Bookmaker or venue name (e.g., 'DraftKings')")
    event_id: str
    side: Side
    team: str = ""
    price: float = Field(description="American odds or probability in (0, 1)")
    price_format: PriceFormat


class MarketQuote(BaseModel):
    """
    One venue's two-sided moneyline for one event.

    This is the shape the fetch layer hands to the core.
    """
    model_config = ConfigDict(frozen=True)

    source: Source
    venue: str
    event_id: str

    side_a_name: str = Field(description="Away team")
    side_b_name: str = Field(description="Home team")
    side_a_price: float
    side_b_price: float
    price_format: PriceFormat

    commence_time: Optional[datetime] = None
    status: str = "upcoming"

    def outcomes(self) -> tuple[OutcomeQuote, OutcomeQuote]:
        """Split into the two per-side quotes."""
        return (
            self._outcome(Side.SIDE_A),
            self._outcome(Side.SIDE_B),
        )

    def _outcome(self, side: Side) -> OutcomeQuote:
        return OutcomeQuote(
            source=self.source,
            venue=self.venue,
            event_id=self.event_id,
            side=side,
            team=self.team_for(side),
            price=self.price_for(side),
            price_format=self.price_format,
        )

    def price_for(self, side: Side) -> float:
        return self.side_a_price if side is Side.SIDE_A else self.side_b_price

    def team_for(self, side: Side) -> str:
        return self.side_a_name if side is Side.SIDE_A else self.side_b_name

    def flipped(self) -> MarketQuote:
        """Same quote with the two sides swapped."""
        return self.model_copy(update={
            "side_a_name": self.side_b_name,
            "side_b_name": self.side_a_name,
            "side_a_price": self.side_b_price,
            "side_b_price": self.side_a_price,
        })

    def event(self) -> Event:
        return Event(
            id=self.event_id,
            side_a=self.side_a_name,
            side_b=self.side_b_name,
            scheduled_time=self.commence_time,
            status=self.status,
        )
