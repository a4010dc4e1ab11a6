"""Result ranker – orders per-event verdicts for reporting."""

from __future__ import annotations

from typing import Iterable

from polyarb.models.comparison import ArbitrageResult


def rank_results(results: Iterable[ArbitrageResult]) -> list[ArbitrageResult]:
    """
    Opportunities first, highest profit first; the rest keep their input order.

    Python's sort is stable, so equal keys (every non-opportunity, and
    opportunities with equal profit) stay in input order.
    """
    return sorted(
        results,
        key=lambda r: (0, -r.profit_percent) if r.has_opportunity else (1, 0.0),
    )
