from models import Place
from services.bbox_builder import expand_bbox_from_center, to_feature_collection


def test_expand_bbox_basic():
    lon, lat = -74.006, 40.7128  # New York
    bbox = expand_bbox_from_center(lon, lat, 5.0)
    min_lon, min_lat, max_lon, max_lat = bbox
    assert min_lon < max_lon
    assert min_lat < max_lat
    # center must lie within bbox
    assert min_lon < lon < max_lon
    assert min_lat < lat < max_lat


def test_feature_collection_uses_lng_lat_order():
    places = [
        Place(id="a", name="A", address="", lat=40.1, lng=-74.2),
        Place(id="b", name="B", address="", lat=40.3, lng=-74.4),
    ]
    fc = to_feature_collection(places, selected_id="b")
    assert fc["type"] == "FeatureCollection"
    assert fc["features"][0]["geometry"]["coordinates"] == [-74.2, 40.1]
    assert [f["properties"]["selected"] for f in fc["features"]] == [False, True]
