from __future__ import annotations

import random

import pytest

from models import FilterSet, Place, SelectionPath
from services.selector import pick_suggestion


class FixedRandom:
    """Random source that replays the given values."""

    def __init__(self, *values: float) -> None:
        self.values = list(values)
        self.calls = 0

    def random(self) -> float:
        value = self.values[min(self.calls, len(self.values) - 1)]
        self.calls += 1
        return value


def _place(pid: str, **kwargs) -> Place:
    return Place(id=pid, name=pid.title(), address="", lat=0.0, lng=0.0, **kwargs)


def _fixed_scores(*scores: float):
    by_id = {f"p{i}": s for i, s in enumerate(scores)}
    return lambda ev, _filters: by_id[ev.place.id]


def _places(n: int) -> list[Place]:
    return [_place(f"p{i}", rating=4.0) for i in range(n)]


def test_no_match_returns_empty_result():
    places = [_place("a", rating=4.6), _place("b", rating=4.9)]
    for mode in ("random", "weighted"):
        result = pick_suggestion(places, FilterSet(min_rating=5.0), mode, rng=FixedRandom(0.5))
        assert result.place is None
        assert result.debug.filtered_count == 0
        assert result.debug.total_candidates == 2
        assert result.debug.path is SelectionPath.NO_MATCH
        assert len(result.debug.entries) == 2


def test_empty_candidate_list():
    result = pick_suggestion([], FilterSet(), "weighted")
    assert result.place is None
    assert result.debug.path is SelectionPath.NO_MATCH


def test_random_mode_uses_injected_source():
    places = _places(4)
    result = pick_suggestion(places, FilterSet(), "random", rng=FixedRandom(0.5))
    assert result.place is places[2]
    assert result.debug.path is SelectionPath.RANDOM
    assert "index 2" in result.debug.note
    assert all(entry.score is None for entry in result.debug.entries)


def test_random_index_never_overflows():
    places = _places(3)
    result = pick_suggestion(places, FilterSet(), "random", rng=FixedRandom(1.0))
    assert result.place is places[2]


def test_weighted_draw_at_zero_picks_first():
    places = _places(2)
    result = pick_suggestion(
        places, FilterSet(), "weighted", rng=FixedRandom(0.0), scorer=_fixed_scores(3, 1)
    )
    assert result.place is places[0]
    assert result.debug.path is SelectionPath.WEIGHTED
    assert "4.00" in result.debug.note


def test_weighted_draw_near_one_picks_last():
    places = _places(2)
    result = pick_suggestion(
        places, FilterSet(), "weighted", rng=FixedRandom(0.9999999), scorer=_fixed_scores(3, 1)
    )
    assert result.place is places[1]
    assert result.debug.path is SelectionPath.WEIGHTED


def test_weighted_zero_scores_fall_back_to_uniform():
    places = _places(3)
    result = pick_suggestion(
        places, FilterSet(), "weighted", rng=FixedRandom(0.4), scorer=_fixed_scores(0, 0, 0)
    )
    assert result.place is places[1]
    assert result.debug.path is SelectionPath.WEIGHTED_ZERO_FALLBACK
    assert "reverted to uniform" in result.debug.note


def test_non_finite_total_falls_back_to_uniform():
    places = _places(2)
    result = pick_suggestion(
        places, FilterSet(), "weighted", rng=FixedRandom(0.0), scorer=_fixed_scores(float("nan"), 1.0)
    )
    assert result.place is places[0]
    assert result.debug.path is SelectionPath.WEIGHTED_ZERO_FALLBACK


def test_walk_exhaustion_picks_highest_score():
    # 0.1 + 0.2 rounds up, so the walk leaves a positive sliver behind
    places = _places(2)
    result = pick_suggestion(
        places, FilterSet(), "weighted", rng=FixedRandom(1.0), scorer=_fixed_scores(0.1, 0.2)
    )
    assert result.place is places[1]
    assert result.debug.path is SelectionPath.WEIGHTED_WALK_FALLBACK


def test_weighted_entries_carry_scores_for_every_candidate():
    places = [_place("a", rating=4.6, cuisine=["cocktails"]), _place("b", rating=4.9, theme=["music"])]
    filters = FilterSet(cuisines=["cocktails"])
    result = pick_suggestion(places, filters, "weighted", rng=FixedRandom(0.3))
    assert result.place is places[0]
    assert result.debug.filtered_count == 1
    assert [e.id for e in result.debug.entries] == ["a", "b"]
    assert all(e.score is not None and e.score > 0 for e in result.debug.entries)
    assert not result.debug.entries[1].matches.cuisine


def test_scenario_single_passing_place_in_random_mode():
    places = [_place("a", rating=4.6, cuisine=["cocktails"]), _place("b", rating=4.9, theme=["music"])]
    result = pick_suggestion(places, FilterSet(cuisines=["cocktails"]), "random")
    assert result.place is places[0]
    assert result.debug.filtered_count == 1


def test_weighted_favours_higher_scores():
    places = _places(2)
    rng = random.Random(7)
    picks = [
        pick_suggestion(places, FilterSet(), "weighted", rng=rng, scorer=_fixed_scores(9, 1)).place.id
        for _ in range(400)
    ]
    assert picks.count("p0") > picks.count("p1") * 3


def test_unknown_mode_is_rejected():
    with pytest.raises(ValueError):
        pick_suggestion(_places(1), FilterSet(), "greedy")
