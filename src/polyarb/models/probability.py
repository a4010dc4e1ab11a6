"""Normalized probability models after vig removal."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field

from polyarb.models.odds import Side


class DeviggedOutcome(BaseModel):
    """
    One outcome of a market after vig removal.
    
    Contains both raw implied prob and no-vig prob.
    """
    model_config = ConfigDict(frozen=True)

    side: Side
    team: str
    venue: str
    price: float = Field(description="Raw quoted price")

    implied_probability: float = Field(ge=0, le=1, description="Raw implied probability (includes margin)")
    true_probability: float = Field(ge=0, le=1, description="Probability after vig removal")


class DeviggedMarket(BaseModel):
    """Both outcomes of one venue's market for one event."""
    model_config = ConfigDict(frozen=True)

    venue: str
    event_id: str
    side_a: DeviggedOutcome
    side_b: DeviggedOutcome
    margin: float = Field(description="Sum of implied probabilities minus 1 (may be negative)")

    @property
    def margin_percent(self) -> float:
        return self.margin * 100.0

    @property
    def overround(self) -> float:
        return self.margin + 1.0
