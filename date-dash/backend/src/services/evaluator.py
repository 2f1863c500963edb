from __future__ import annotations

from typing import Iterable, Optional

from models import Coordinate, Evaluation, FilterSet, MatchRecord, Place
from utils import distance_km, is_positive_finite


def compute_distance(place: Place, center: Optional[Coordinate]) -> Optional[float]:
    if center is None:
        return None
    return distance_km(center, place.coordinate)


def matches_rating(rating: Optional[float], min_rating: Optional[float]) -> bool:
    if not min_rating:
        return True
    return (rating or 0.0) >= min_rating


def matches_radius(dist_km: Optional[float], radius_km: Optional[float]) -> bool:
    # NaN, negative and zero radii all mean "no radius constraint"
    if not is_positive_finite(radius_km):
        return True
    if dist_km is None:
        return True
    return dist_km <= float(radius_km)


def normalize_tags(values: Optional[Iterable[str]]) -> set[str]:
    return {v.lower() for v in values or []}


def matches_affinity(values: Optional[Iterable[str]], wanted: Optional[Iterable[str]]) -> bool:
    wanted = list(wanted or [])
    if not wanted:
        return True
    have = normalize_tags(values)
    if not have:
        return False
    return bool(have & normalize_tags(wanted))


def matches_open_state(is_open_now: Optional[bool], open_now: Optional[bool]) -> bool:
    if not open_now:
        return True
    return bool(is_open_now)


def matches_price_level(price_level: Optional[int], levels: Optional[Iterable[int]]) -> bool:
    levels = list(levels or [])
    if not levels:
        return True
    if price_level is None:
        return False
    return price_level in levels


def evaluate_place(place: Place, filters: FilterSet) -> Evaluation:
    """Evaluate a place against every filter dimension.

    Missing place data never disqualifies a candidate, except for the open-now
    and price dimensions when the caller actively filters on them.
    """
    dist = compute_distance(place, filters.center)
    matches = MatchRecord(
        rating=matches_rating(place.rating, filters.min_rating),
        radius=matches_radius(dist, filters.radius_km),
        cuisine=matches_affinity(place.cuisine, filters.cuisines),
        theme=matches_affinity(place.theme, filters.themes),
        open_now=matches_open_state(place.is_open_now, filters.open_now),
        price_level=matches_price_level(place.price_level, filters.price_levels),
    )
    return Evaluation(place=place, distance_km=dist, matches=matches, passes=matches.all())
