"""
Event matcher – pairs sportsbook events with prediction-market events.

Team names are normalised through a league alias table and compared with a
substring test, in either orientation. ``find_match`` keeps the simple
first-match scan; ``resolve`` scores every equivalent candidate and reports
ambiguity instead of guessing.
"""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Iterable, Optional

import structlog
from rapidfuzz import fuzz

from polyarb.core.aliases import AliasTable
from polyarb.models.event import Event, MatchedPair, MatchResolution, MatchStatus

logger = structlog.get_logger()


def _as_utc(when: datetime) -> datetime:
    return when if when.tzinfo is not None else when.replace(tzinfo=timezone.utc)


def normalize_team_name(name: str, aliases: Optional[AliasTable] = None) -> str:
    """Lowercase, collapse whitespace and reduce to the canonical nickname."""
    if not name:
        return ""
    norm = " ".join(name.lower().split())
    if aliases is not None:
        norm = aliases.canonical(norm)
    return norm


def teams_match(team_1: str, team_2: str, aliases: Optional[AliasTable] = None) -> bool:
    """True if two names refer to the same team (exact or substring after normalising)."""
    norm_1 = normalize_team_name(team_1, aliases)
    norm_2 = normalize_team_name(team_2, aliases)
    if not norm_1 or not norm_2:
        return False
    if norm_1 == norm_2:
        return True
    return norm_1 in norm_2 or norm_2 in norm_1


class EventMatcher:
    """
    Maps events from one source onto events from the other.

    Stateless apart from the injected alias table.
    """

    def __init__(
        self,
        aliases: Optional[AliasTable] = None,
        max_hours_apart: float = 48.0,
        tie_tolerance: float = 0.01,
    ) -> None:
        self.aliases = aliases or AliasTable()
        self.max_hours_apart = max_hours_apart
        self.tie_tolerance = tie_tolerance

    def orientation(self, target: Event, candidate: Event) -> Optional[bool]:
        """
        None if the events differ, else whether the candidate is swapped.

        Same orientation is checked first.
        """
        if (
            teams_match(target.side_a, candidate.side_a, self.aliases)
            and teams_match(target.side_b, candidate.side_b, self.aliases)
        ):
            return False
        if (
            teams_match(target.side_a, candidate.side_b, self.aliases)
            and teams_match(target.side_b, candidate.side_a, self.aliases)
        ):
            return True
        return None

    def find_match(self, target: Event, candidates: Iterable[Event]) -> Optional[MatchedPair]:
        """
        First candidate representing the same game, or None.

        Linear scan; when several candidates qualify the earliest one wins.
        """
        for candidate in candidates:
            swapped = self.orientation(target, candidate)
            if swapped is not None:
                return MatchedPair(primary=target, counterpart=candidate, swapped=swapped)
        return None

    # ── Scored resolution ──────────────────────────────────────────────────

    def score(self, pair: MatchedPair) -> float:
        """
        Similarity of a matched pair in [0, 1].

        70% name similarity of the aligned sides, 30% schedule proximity
        (neutral 0.5 when either side has no scheduled time).
        """
        target, candidate = pair.primary, pair.counterpart
        other_a, other_b = (
            (candidate.side_b, candidate.side_a) if pair.swapped else (candidate.side_a, candidate.side_b)
        )
        name_score = (
            fuzz.token_sort_ratio(
                normalize_team_name(target.side_a, self.aliases),
                normalize_team_name(other_a, self.aliases),
            )
            + fuzz.token_sort_ratio(
                normalize_team_name(target.side_b, self.aliases),
                normalize_team_name(other_b, self.aliases),
            )
        ) / 200.0

        if target.scheduled_time is not None and candidate.scheduled_time is not None:
            hours = abs((_as_utc(target.scheduled_time) - _as_utc(candidate.scheduled_time)).total_seconds()) / 3600.0
            time_score = max(0.0, 1.0 - hours / self.max_hours_apart)
        else:
            time_score = 0.5

        return round(0.7 * name_score + 0.3 * time_score, 6)

    def resolve(self, target: Event, candidates: Iterable[Event]) -> MatchResolution:
        """
        Score every equivalent candidate and pick the best.

        Two or more candidates within ``tie_tolerance`` of the best score
        make the resolution ambiguous; no pair is chosen then.
        """
        scored: list[MatchedPair] = []
        for candidate in candidates:
            swapped = self.orientation(target, candidate)
            if swapped is None:
                continue
            pair = MatchedPair(primary=target, counterpart=candidate, swapped=swapped)
            scored.append(pair.model_copy(update={"score": self.score(pair)}))

        if not scored:
            return MatchResolution(status=MatchStatus.UNMATCHED)

        scored.sort(key=lambda p: p.score or 0.0, reverse=True)
        best = scored[0]
        contenders = [p for p in scored if (best.score or 0.0) - (p.score or 0.0) <= self.tie_tolerance]

        if len(contenders) > 1:
            logger.warning(
                "event_match_ambiguous",
                event_id=target.id,
                game=target.label,
                candidates=[p.counterpart.id for p in contenders],
            )
            return MatchResolution(status=MatchStatus.AMBIGUOUS, candidates=contenders)

        return MatchResolution(status=MatchStatus.MATCHED, pair=best, candidates=scored)
