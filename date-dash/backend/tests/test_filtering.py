from __future__ import annotations

from models import FilterSet, Place
from services.filtering import apply_filters, filter_places


def _places() -> list[Place]:
    return [
        Place(id="a", name="A", address="", lat=0, lng=0, rating=4.6, cuisine=["cocktails"]),
        Place(id="b", name="B", address="", lat=0, lng=0, rating=4.9, theme=["music"]),
        Place(id="c", name="C", address="", lat=0, lng=0, rating=3.0, cuisine=["Cocktails", "tapas"]),
    ]


def test_filter_keeps_input_order():
    passing = filter_places(_places(), FilterSet(cuisines=["cocktails"]))
    assert [p.id for p in passing] == ["a", "c"]


def test_apply_filters_returns_passing_evaluations():
    evaluations = apply_filters(_places(), FilterSet(min_rating=4.0))
    assert [ev.place.id for ev in evaluations] == ["a", "b"]
    assert all(ev.passes for ev in evaluations)


def test_empty_inputs():
    assert filter_places([], FilterSet(min_rating=4.0)) == []
    assert filter_places(_places(), FilterSet(min_rating=5.0)) == []


def test_scenario_cocktails_only():
    places = _places()[:2]
    assert [p.id for p in filter_places(places, FilterSet(cuisines=["cocktails"]))] == ["a"]
