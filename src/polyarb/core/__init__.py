"""Core utilities."""

from polyarb.core.odds_math import (
    american_to_prob,
    market_price_to_prob,
    prob_to_american,
    american_to_decimal,
    no_vig_two_way,
    devig_market,
)
from polyarb.core.aliases import AliasTable, alias_table_for
from polyarb.core.matcher import EventMatcher, normalize_team_name, teams_match
from polyarb.core.aggregator import aggregate_quotes
from polyarb.core.arbitrage import evaluate, evaluate_pair, stake_split, find_bookmaker_arbitrage
from polyarb.core.ranker import rank_results
from polyarb.core.scanner import ArbScanner

__all__ = [
    "american_to_prob",
    "market_price_to_prob",
    "prob_to_american",
    "american_to_decimal",
    "no_vig_two_way",
    "devig_market",
    "AliasTable",
    "alias_table_for",
    "EventMatcher",
    "normalize_team_name",
    "teams_match",
    "aggregate_quotes",
    "evaluate",
    "evaluate_pair",
    "stake_split",
    "find_bookmaker_arbitrage",
    "rank_results",
    "ArbScanner",
]
