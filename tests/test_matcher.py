"""Tests for team normalisation, alias tables and event matching."""

from datetime import timedelta

import pytest

from polyarb.core.aliases import AliasTable, alias_table_for, load_alias_file
from polyarb.core.matcher import EventMatcher, normalize_team_name, teams_match
from polyarb.models.event import Event, MatchStatus, Side

from conftest import GAME_TIME


def _event(event_id: str, away: str, home: str, when=GAME_TIME) -> Event:
    return Event(id=event_id, side_a=away, side_b=home, scheduled_time=when)


class TestNormalization:
    def test_prefix_alias(self):
        aliases = alias_table_for("nba")
        assert normalize_team_name("Los Angeles Lakers", aliases) == "lakers"
        assert normalize_team_name("LA Clippers", aliases) == "clippers"
        assert normalize_team_name("Boston Celtics", aliases) == "celtics"

    def test_whitespace_and_case(self):
        assert normalize_team_name("  Boston   CELTICS ") == "boston celtics"

    def test_unknown_name_passes_through(self):
        assert normalize_team_name("Lakers", alias_table_for("nba")) == "lakers"

    def test_empty(self):
        assert normalize_team_name("") == ""

    def test_longest_alias_wins(self):
        table = AliasTable({"new york": "knicks", "new york jets": "jets"})
        assert table.canonical("new york jets") == "jets"
        assert table.canonical("new york knicks") == "knicks"

    def test_alias_must_end_on_word_boundary(self):
        table = AliasTable({"utah": "jazz"})
        assert table.canonical("utahn stars") == "utahn stars"


class TestTeamsMatch:
    def test_exact(self):
        assert teams_match("Lakers", "lakers")

    def test_substring(self):
        assert teams_match("Celtics", "Boston Celtics")
        assert teams_match("Boston Celtics", "Celtics")

    def test_alias(self):
        aliases = alias_table_for("nba")
        assert teams_match("Los Angeles Lakers", "Lakers", aliases)
        assert teams_match("Philadelphia 76ers", "Sixers", aliases)

    def test_different_teams(self):
        aliases = alias_table_for("nba")
        assert not teams_match("Los Angeles Lakers", "Los Angeles Clippers", aliases)

    def test_empty_never_matches(self):
        assert not teams_match("", "Lakers")
        assert not teams_match("", "")

    def test_symmetric(self):
        aliases = alias_table_for("nba")
        pairs = [
            ("Los Angeles Lakers", "Lakers"),
            ("Celtics", "Boston Celtics"),
            ("Lakers", "Clippers"),
            ("Philadelphia 76ers", "Sixers"),
        ]
        for a, b in pairs:
            assert teams_match(a, b, aliases) == teams_match(b, a, aliases)


class TestAliasFile:
    def test_load(self, tmp_path):
        path = tmp_path / "aliases.yaml"
        path.write_text(
            "leagues:\n"
            "  NBA:\n"
            "    \"okc\": thunder\n"
            "  nhl:\n"
            "    \"tampa bay\": lightning\n"
        )
        data = load_alias_file(path)
        assert data == {"nba": {"okc": "thunder"}, "nhl": {"tampa bay": "lightning"}}

    def test_missing_file(self, tmp_path):
        assert load_alias_file(tmp_path / "nope.yaml") == {}

    def test_overrides_layer_on_defaults(self, tmp_path):
        path = tmp_path / "aliases.yaml"
        path.write_text("leagues:\n  nba:\n    okc: thunder\n")
        table = alias_table_for("nba", path)
        assert "okc" in table
        assert "boston" in table
        assert len(table) == len(alias_table_for("nba")) + 1
        assert teams_match("OKC Thunder", "Oklahoma City Thunder", table)

    def test_unknown_league_empty(self):
        assert len(alias_table_for("cricket")) == 0


class TestEventMatcher:
    def test_same_orientation(self, nba_matcher):
        target = _event("b1", "Los Angeles Lakers", "Boston Celtics")
        candidate = _event("p1", "Lakers", "Celtics")
        pair = nba_matcher.find_match(target, [candidate])
        assert pair is not None
        assert pair.counterpart.id == "p1"
        assert pair.swapped is False
        assert pair.counterpart_side(Side.SIDE_A) == Side.SIDE_A

    def test_reversed_orientation(self, nba_matcher):
        target = _event("b1", "Los Angeles Lakers", "Boston Celtics")
        candidate = _event("p1", "Celtics", "Lakers")
        pair = nba_matcher.find_match(target, [candidate])
        assert pair is not None
        assert pair.swapped is True
        assert pair.counterpart_side(Side.SIDE_A) == Side.SIDE_B

    def test_no_match(self, nba_matcher):
        target = _event("b1", "Los Angeles Lakers", "Boston Celtics")
        assert nba_matcher.find_match(target, [_event("p1", "Heat", "Knicks")]) is None
        assert nba_matcher.find_match(target, []) is None

    def test_first_match_wins(self, nba_matcher):
        target = _event("b1", "Los Angeles Lakers", "Boston Celtics")
        candidates = [
            _event("p1", "Lakers", "Celtics"),
            _event("p2", "Lakers", "Celtics", GAME_TIME + timedelta(days=3)),
        ]
        assert nba_matcher.find_match(target, candidates).counterpart.id == "p1"

    def test_matching_is_symmetric(self, nba_matcher):
        a = _event("b1", "Los Angeles Lakers", "Boston Celtics")
        b = _event("p1", "Celtics", "Lakers")
        c = _event("p2", "Heat", "Lakers")
        assert (nba_matcher.orientation(a, b) is None) == (nba_matcher.orientation(b, a) is None)
        assert (nba_matcher.orientation(a, c) is None) == (nba_matcher.orientation(c, a) is None)


class TestResolve:
    def test_unmatched(self, nba_matcher):
        target = _event("b1", "Los Angeles Lakers", "Boston Celtics")
        resolution = nba_matcher.resolve(target, [_event("p1", "Heat", "Knicks")])
        assert resolution.status == MatchStatus.UNMATCHED
        assert resolution.pair is None

    def test_prefers_closer_schedule(self, nba_matcher):
        target = _event("b1", "Los Angeles Lakers", "Boston Celtics")
        candidates = [
            _event("p_far", "Lakers", "Celtics", GAME_TIME + timedelta(hours=40)),
            _event("p_near", "Lakers", "Celtics", GAME_TIME + timedelta(minutes=5)),
        ]
        resolution = nba_matcher.resolve(target, candidates)
        assert resolution.status == MatchStatus.MATCHED
        assert resolution.pair.counterpart.id == "p_near"
        assert resolution.pair.score == pytest.approx(1.0, abs=0.01)

    def test_ambiguous_duplicates(self, nba_matcher):
        target = _event("b1", "Los Angeles Lakers", "Boston Celtics")
        candidates = [
            _event("p1", "Lakers", "Celtics"),
            _event("p2", "Lakers", "Celtics"),
        ]
        resolution = nba_matcher.resolve(target, candidates)
        assert resolution.status == MatchStatus.AMBIGUOUS
        assert resolution.pair is None
        assert {p.counterpart.id for p in resolution.candidates} == {"p1", "p2"}

    def test_unknown_time_is_neutral(self, nba_matcher):
        target = _event("b1", "Los Angeles Lakers", "Boston Celtics", when=None)
        pair = nba_matcher.find_match(target, [_event("p1", "Lakers", "Celtics")])
        # Names identical after normalising: 0.7 * 1.0 + 0.3 * 0.5
        assert nba_matcher.score(pair) == pytest.approx(0.85)

    def test_naive_and_aware_times(self, nba_matcher):
        target = _event("b1", "Lakers", "Celtics", when=GAME_TIME.replace(tzinfo=None))
        pair = nba_matcher.find_match(target, [_event("p1", "Lakers", "Celtics")])
        assert nba_matcher.score(pair) == pytest.approx(1.0)
