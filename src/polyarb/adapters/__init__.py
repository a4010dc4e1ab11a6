"""Data source adapters."""

from polyarb.adapters.base import JSONAPIClient
from polyarb.adapters.odds_api import OddsAPIAdapter
from polyarb.adapters.polymarket import PolymarketAdapter

__all__ = ["JSONAPIClient", "OddsAPIAdapter", "PolymarketAdapter"]
