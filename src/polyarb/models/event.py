"""Event and cross-source match models."""

from __future__ import annotations

from datetime import datetime
from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class Side(str, Enum):
    """Canonical role of a team within a two-outcome market."""
    SIDE_A = "side_a"  # away
    SIDE_B = "side_b"  # home

    @property
    def other(self) -> Side:
        return Side.SIDE_B if self is Side.SIDE_A else Side.SIDE_A


class Event(BaseModel):
    """A scheduled two-team game as listed by one source."""
    model_config = ConfigDict(frozen=True)

    id: str
    side_a: str = Field(description="Away team as listed")
    side_b: str = Field(description="Home team as listed")
    scheduled_time: Optional[datetime] = None
    status: str = "upcoming"

    @property
    def label(self) -> str:
        return f"{self.side_a} @ {self.side_b}"


class MatchedPair(BaseModel):
    """
    An event from one source joined to the same real event from the other.

    ``swapped`` is True when the counterpart lists the teams in the
    opposite orientation, so the primary's side A is the counterpart's side B.
    """
    model_config = ConfigDict(frozen=True)

    primary: Event
    counterpart: Event
    swapped: bool = False
    score: Optional[float] = Field(default=None, description="Similarity score when resolved by scoring")

    def counterpart_side(self, side: Side) -> Side:
        """Side of the counterpart event holding the same team as ``side`` of the primary."""
        return side.other if self.swapped else side


class MatchStatus(str, Enum):
    """Outcome of a scored match."""
    MATCHED = "matched"
    AMBIGUOUS = "ambiguous"
    UNMATCHED = "unmatched"


class MatchResolution(BaseModel):
    """Result of scoring every equivalent candidate for one event."""
    model_config = ConfigDict(frozen=True)

    status: MatchStatus
    pair: Optional[MatchedPair] = None
    candidates: list[MatchedPair] = Field(default_factory=list)
