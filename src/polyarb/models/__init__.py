"""Normalized data models for sportsbook vs prediction-market comparison."""

from polyarb.models.event import Event, MatchedPair, MatchResolution, MatchStatus
from polyarb.models.odds import MarketQuote, OutcomeQuote, PriceFormat, Side, Source
from polyarb.models.probability import DeviggedMarket, DeviggedOutcome
from polyarb.models.lines import PriceLine, SideLines, SourceLines
from polyarb.models.comparison import (
    ArbitrageCheck,
    ArbitrageResult,
    BookmakerArbitrage,
    HedgeBet,
    Leg,
    LegCombination,
    ScanReport,
    SkippedItem,
    StakeSplit,
)

__all__ = [
    "Event",
    "MatchedPair",
    "MatchResolution",
    "MatchStatus",
    "MarketQuote",
    "OutcomeQuote",
    "PriceFormat",
    "Side",
    "Source",
    "DeviggedMarket",
    "DeviggedOutcome",
    "PriceLine",
    "SideLines",
    "SourceLines",
    "ArbitrageCheck",
    "ArbitrageResult",
    "BookmakerArbitrage",
    "HedgeBet",
    "Leg",
    "LegCombination",
    "ScanReport",
    "SkippedItem",
    "StakeSplit",
]
