"""Aggregated per-source price lines."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field

from polyarb.models.odds import Side, Source


class PriceLine(BaseModel):
    """An implied probability tagged with the venue that offered it."""
    model_config = ConfigDict(frozen=True)

    implied_probability: float = Field(ge=0, le=1)
    venue: str
    price: float = Field(description="Raw quoted price")


class SideLines(BaseModel):
    """Lowest and highest implied probability seen for one side."""
    model_config = ConfigDict(frozen=True)

    side: Side
    team: str
    lowest: PriceLine = Field(description="Price used when buying this side")
    highest: PriceLine = Field(description="Informational only")


class SourceLines(BaseModel):
    """All quotes for one event from one source, reduced to a line per side."""
    model_config = ConfigDict(frozen=True)

    source: Source
    event_id: str
    side_a: SideLines
    side_b: SideLines
    quote_count: int = Field(ge=0)