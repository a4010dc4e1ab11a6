"""Sportsbook vs prediction-market moneyline arbitrage scanner."""

__version__ = "0.1.0"
