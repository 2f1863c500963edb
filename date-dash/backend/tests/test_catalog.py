from __future__ import annotations

import json

import pytest

from models import FilterSet
from services.catalog import SEED_PLACES, CatalogError, PlaceCatalog, load_places


def test_list_without_filters_returns_copy():
    catalog = PlaceCatalog()
    places = catalog.list()
    assert len(places) == len(SEED_PLACES) == 7
    places.clear()
    assert len(catalog.list()) == 7


def test_list_with_filters_orders_by_rating():
    catalog = PlaceCatalog()
    places = catalog.list(FilterSet(themes=["adventure"]))
    assert [p.id for p in places] == ["latin-dance-lab", "midnight-mini-golf"]


def test_get_by_id():
    catalog = PlaceCatalog()
    assert catalog.get_by_id("gelato-stroll").name == "Gelato & Gallery Stroll"
    assert catalog.get_by_id("nope") is None


def test_evaluate_covers_every_place():
    evaluations = PlaceCatalog().evaluate(FilterSet(open_now=True))
    assert len(evaluations) == 7
    closed = {ev.place.id for ev in evaluations if not ev.passes}
    assert closed == {"brooklyn-noodle-bar", "latin-dance-lab"}


def test_load_places_from_json(tmp_path):
    path = tmp_path / "places.json"
    path.write_text(
        json.dumps(
            [
                {
                    "id": "pier-picnic",
                    "name": "Pier Picnic",
                    "address": "Pier 45",
                    "lat": 40.733,
                    "lng": -74.012,
                    "rating": 4.1,
                    "theme": ["outdoors"],
                    "isOpenNow": True,
                    "priceLevel": 0,
                }
            ]
        )
    )
    [place] = load_places(path)
    assert place.id == "pier-picnic"
    assert place.is_open_now is True
    assert place.price_level == 0
    assert place.cuisine == []


def test_load_places_rejects_bad_records(tmp_path):
    path = tmp_path / "places.json"
    path.write_text(json.dumps([{"id": "x", "name": "X", "lat": 95, "lng": 0}]))
    with pytest.raises(CatalogError):
        load_places(path)


def test_load_places_rejects_duplicates(tmp_path):
    path = tmp_path / "places.json"
    record = {"id": "x", "name": "X", "lat": 1, "lng": 1}
    path.write_text(json.dumps([record, record]))
    with pytest.raises(CatalogError, match="duplicate"):
        load_places(path)


def test_load_places_missing_file(tmp_path):
    with pytest.raises(CatalogError):
        load_places(tmp_path / "missing.json")
