"""
Team-name alias tables, keyed by league.

An alias is either a full team name or a city/metro prefix; it maps to the
canonical franchise nickname used for matching. Tables are plain data and
can be replaced or extended from YAML:

    leagues:
      nba:
        "los angeles lakers": lakers
        "la lakers": lakers
"""

from __future__ import annotations

from pathlib import Path
from typing import Mapping, Optional

import yaml


# League -> The Odds API sport key
LEAGUE_TO_SPORT: dict[str, str] = {
    "nba": "basketball_nba",
    "nfl": "americanfootball_nfl",
    "nhl": "icehockey_nhl",
    "ncaab": "basketball_ncaab",
}

# League -> sport name as listed by the Polymarket /sports endpoint
LEAGUE_TO_POLYMARKET: dict[str, str] = {
    "nba": "nba",
    "nfl": "nfl",
    "nhl": "nhl",
    "ncaab": "cbb",
}

NBA_ALIASES: dict[str, str] = {
    "atlanta": "hawks",
    "boston": "celtics",
    "brooklyn": "nets",
    "charlotte": "hornets",
    "chicago": "bulls",
    "cleveland": "cavaliers",
    "dallas": "mavericks",
    "denver": "nuggets",
    "detroit": "pistons",
    "golden state": "warriors",
    "houston": "rockets",
    "indiana": "pacers",
    "la clippers": "clippers",
    "la lakers": "lakers",
    "los angeles clippers": "clippers",
    "los angeles lakers": "lakers",
    "memphis": "grizzlies",
    "miami": "heat",
    "milwaukee": "bucks",
    "minnesota": "timberwolves",
    "new orleans": "pelicans",
    "new york": "knicks",
    "oklahoma city": "thunder",
    "orlando": "magic",
    "philadelphia": "76ers",
    "sixers": "76ers",
    "phoenix": "suns",
    "portland": "trail blazers",
    "sacramento": "kings",
    "san antonio": "spurs",
    "toronto": "raptors",
    "utah": "jazz",
    "washington": "wizards",
}

NFL_ALIASES: dict[str, str] = {
    "arizona": "cardinals",
    "atlanta": "falcons",
    "baltimore": "ravens",
    "buffalo": "bills",
    "carolina": "panthers",
    "chicago": "bears",
    "cincinnati": "bengals",
    "cleveland": "browns",
    "dallas": "cowboys",
    "denver": "broncos",
    "detroit": "lions",
    "green bay": "packers",
    "houston": "texans",
    "indianapolis": "colts",
    "jacksonville": "jaguars",
    "kansas city": "chiefs",
    "las vegas": "raiders",
    "los angeles chargers": "chargers",
    "los angeles rams": "rams",
    "miami": "dolphins",
    "minnesota": "vikings",
    "new england": "patriots",
    "new orleans": "saints",
    "new york giants": "giants",
    "new york jets": "jets",
    "philadelphia": "eagles",
    "pittsburgh": "steelers",
    "san francisco": "49ers",
    "seattle": "seahawks",
    "tampa bay": "buccaneers",
    "tennessee": "titans",
    "washington": "commanders",
}

DEFAULT_ALIASES: dict[str, dict[str, str]] = {
    "nba": NBA_ALIASES,
    "nfl": NFL_ALIASES,
}


class AliasTable:
    """
    Alias -> canonical nickname lookup for one league.

    Longest alias wins, so "los angeles lakers" is tried before a bare
    "los angeles" entry would be.
    """

    def __init__(self, aliases: Optional[Mapping[str, str]] = None, league: str = "") -> None:
        self.league = league
        self._aliases: dict[str, str] = {}
        self._ordered: list[str] = []
        for alias, canonical in (aliases or {}).items():
            self.add(alias, canonical)

    def add(self, alias: str, canonical: str) -> None:
        key = " ".join(alias.lower().split())
        if key:
            self._aliases[key] = " ".join(canonical.lower().split())
        self._ordered = sorted(self._aliases, key=len, reverse=True)

    def canonical(self, name: str) -> str:
        """Map an already lowercased, whitespace-collapsed name to its nickname."""
        for alias in self._ordered:
            if name == alias or name.startswith(alias + " "):
                return self._aliases[alias]
        return name

    def merged(self, other: Mapping[str, str]) -> AliasTable:
        """New table with ``other`` layered over this one."""
        return AliasTable({**self._aliases, **other}, league=self.league)

    def __len__(self) -> int:
        return len(self._aliases)

    def __contains__(self, alias: object) -> bool:
        return isinstance(alias, str) and " ".join(alias.lower().split()) in self._aliases


def load_alias_file(path: Path) -> dict[str, dict[str, str]]:
    """Read league alias overrides from YAML. Missing file -> empty."""
    if not path.exists():
        return {}

    with open(path) as f:
        data = yaml.safe_load(f) or {}

    leagues = data.get("leagues", {}) or {}
    return {
        str(league).lower(): {str(k): str(v) for k, v in (entries or {}).items()}
        for league, entries in leagues.items()
    }


def alias_table_for(league: str, alias_file: Optional[Path] = None) -> AliasTable:
    """Built-in table for ``league``, with overrides from ``alias_file`` layered on top."""
    league = league.lower()
    table = AliasTable(DEFAULT_ALIASES.get(league, {}), league=league)
    if alias_file is not None:
        overrides = load_alias_file(alias_file).get(league)
        if overrides:
            table = table.merged(overrides)
    return table
