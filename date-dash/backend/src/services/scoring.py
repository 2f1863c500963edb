from __future__ import annotations

from typing import Dict, Iterable, Optional

from models import Evaluation, FilterSet, ScoreBreakdown
from services.evaluator import normalize_tags
from utils import is_positive_finite

SCORE_WEIGHTS: Dict[str, float] = {
    "rating": 0.35,
    "distance": 0.25,
    "combined_affinity": 0.2,
    "average_affinity": 0.1,
    "open_now": 0.05,
    "price": 0.05,
}

NEUTRAL_RATING = 0.5
NEUTRAL_DISTANCE = 0.75
NEUTRAL_OPEN = 0.5
NEUTRAL_PRICE = 0.6
TAGGED_AFFINITY = 0.6
UNTAGGED_AFFINITY = 0.4


def _clamp(value: float, low: float, high: float) -> float:
    return min(max(value, low), high)


def normalize_rating(rating: Optional[float]) -> float:
    if rating is None or rating <= 0:
        return NEUTRAL_RATING
    return _clamp(rating / 5.0, 0.0, 1.0)


def normalize_distance(dist_km: Optional[float], radius_km: Optional[float]) -> float:
    if dist_km is None or not is_positive_finite(radius_km):
        return NEUTRAL_DISTANCE
    radius = float(radius_km)
    return 1.0 - _clamp(dist_km, 0.0, radius) / radius


def affinity_score(values: Optional[Iterable[str]], wanted: Optional[Iterable[str]]) -> float:
    """Share of the requested tags the place carries.

    With no request, places that carry any tags get a mild bonus.
    """
    wanted = list(wanted or [])
    have = normalize_tags(values)
    if not wanted:
        return TAGGED_AFFINITY if have else UNTAGGED_AFFINITY
    if not have:
        return 0.0
    matched = sum(1 for tag in wanted if tag.lower() in have)
    return matched / len(wanted)


def score_breakdown(evaluation: Evaluation, filters: FilterSet) -> ScoreBreakdown:
    place = evaluation.place

    rating_score = normalize_rating(place.rating)
    distance_score = normalize_distance(evaluation.distance_km, filters.radius_km)
    cuisine_score = affinity_score(place.cuisine, filters.cuisines)
    theme_score = affinity_score(place.theme, filters.themes)
    if filters.open_now:
        open_score = 1.0 if place.is_open_now else 0.0
    else:
        open_score = NEUTRAL_OPEN
    if filters.price_levels:
        price_score = 1.0 if place.price_level in filters.price_levels else 0.0
    else:
        price_score = NEUTRAL_PRICE

    total = (
        rating_score * SCORE_WEIGHTS["rating"]
        + distance_score * SCORE_WEIGHTS["distance"]
        + max(cuisine_score, theme_score) * SCORE_WEIGHTS["combined_affinity"]
        + (cuisine_score + theme_score) / 2 * SCORE_WEIGHTS["average_affinity"]
        + open_score * SCORE_WEIGHTS["open_now"]
        + price_score * SCORE_WEIGHTS["price"]
    )
    return ScoreBreakdown(
        rating=rating_score,
        distance=distance_score,
        cuisine=cuisine_score,
        theme=theme_score,
        open_now=open_score,
        price=price_score,
        total=total,
    )


def weighted_score(evaluation: Evaluation, filters: FilterSet) -> float:
    return score_breakdown(evaluation, filters).total
