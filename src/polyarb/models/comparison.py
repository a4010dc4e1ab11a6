"""Arbitrage result models."""

from __future__ import annotations

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from polyarb.models.event import Event
from polyarb.models.lines import SourceLines
from polyarb.models.odds import Side, Source
from polyarb.models.probability import DeviggedMarket


class ArbitrageCheck(BaseModel):
    """Verdict for one pair of complementary leg prices."""
    model_config = ConfigDict(frozen=True)

    combined_cost: float
    has_opportunity: bool
    profit_percent: float = Field(ge=0)


class Leg(BaseModel):
    """One side of a two-outcome hedge, sourced from one venue."""
    model_config = ConfigDict(frozen=True)

    side: Side
    team: str
    source: Source
    venue: str
    implied_probability: float = Field(ge=0, le=1)


class LegCombination(BaseModel):
    """Side A from one source crossed with side B from the other."""
    model_config = ConfigDict(frozen=True)

    side_a_leg: Leg
    side_b_leg: Leg
    combined_cost: float
    has_opportunity: bool
    profit_percent: float = Field(ge=0)


class ArbitrageResult(BaseModel):
    """
    Per-event verdict for one matched sportsbook / prediction-market pair.

    Computed once per run and never mutated.
    """
    model_config = ConfigDict(frozen=True)

    event_id: str
    counterpart_event_id: str
    side_a: str
    side_b: str
    scheduled_time: Optional[datetime] = None
    status: str = "upcoming"

    has_opportunity: bool
    best_combined_cost: float
    profit_percent: float = Field(ge=0)

    chosen: LegCombination
    alternative: Optional[LegCombination] = None

    book_lines: SourceLines
    market_lines: SourceLines

    @property
    def chosen_price_source_per_side(self) -> dict[Side, str]:
        return {
            Side.SIDE_A: self.chosen.side_a_leg.venue,
            Side.SIDE_B: self.chosen.side_b_leg.venue,
        }

    def to_record(self) -> dict[str, object]:
        """Flat row for tabular reports."""
        when = self.scheduled_time
        return {
            "Date": when.strftime("%Y-%m-%d") if when else "",
            "Time": when.strftime("%H:%M") if when else "",
            "Game ID": self.event_id,
            "Away Team": self.side_a,
            "Home Team": self.side_b,
            "Status": self.status,
            "Arb Opportunity": "YES" if self.has_opportunity else "NO",
            "Lowest Away Bookmaker": self.book_lines.side_a.lowest.venue,
            "Lowest Away Implied Prob (%)": round(self.book_lines.side_a.lowest.implied_probability * 100, 2),
            "Lowest Home Bookmaker": self.book_lines.side_b.lowest.venue,
            "Lowest Home Implied Prob (%)": round(self.book_lines.side_b.lowest.implied_probability * 100, 2),
            "Market Away Implied Prob (%)": round(self.market_lines.side_a.lowest.implied_probability * 100, 2),
            "Market Home Implied Prob (%)": round(self.market_lines.side_b.lowest.implied_probability * 100, 2),
            "Away Leg Source": self.chosen.side_a_leg.venue,
            "Home Leg Source": self.chosen.side_b_leg.venue,
            "Profit %": round(self.profit_percent, 2),
            "Best Option Cost": round(self.best_combined_cost, 4),
        }


class StakeSplit(BaseModel):
    """Equal-payout split of a fixed stake over two decimal prices."""
    model_config = ConfigDict(frozen=True)

    total_stake: float = Field(gt=0)
    stake_1: float
    stake_2: float
    payout_1: float
    payout_2: float
    guaranteed_return: float
    profit: float

    @property
    def profit_percent(self) -> float:
        return self.profit / self.total_stake * 100.0


class HedgeBet(BaseModel):
    """One bet of a bookmaker-vs-bookmaker hedge."""
    model_config = ConfigDict(frozen=True)

    venue: str
    side: Side
    team: str
    odds: int
    implied_probability: float = Field(ge=0, le=1)


class BookmakerArbitrage(BaseModel):
    """A hedge across two bookmakers quoting the same event."""
    model_config = ConfigDict(frozen=True)

    event_id: str
    bet_1: HedgeBet
    bet_2: HedgeBet
    total_implied_percent: float
    split: StakeSplit

    @property
    def arb_margin_percent(self) -> float:
        return 100.0 - self.total_implied_percent

    @property
    def profit_percent(self) -> float:
        return self.split.profit_percent


class SkippedItem(BaseModel):
    """A quote, market or event left out of a scan, with the reason."""
    model_config = ConfigDict(frozen=True)

    event_id: str
    source: Source
    venue: str = ""
    error_type: str
    reason: str


class ScanReport(BaseModel):
    """Everything one pipeline run produced."""
    model_config = ConfigDict(frozen=True)

    results: list[ArbitrageResult] = Field(default_factory=list)
    markets: list[DeviggedMarket] = Field(default_factory=list)
    unmatched: list[Event] = Field(default_factory=list)
    ambiguous: list[Event] = Field(default_factory=list)
    skipped: list[SkippedItem] = Field(default_factory=list)

    @property
    def opportunities(self) -> list[ArbitrageResult]:
        return [r for r in self.results if r.has_opportunity]
