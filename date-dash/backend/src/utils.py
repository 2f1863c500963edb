"""Utility helpers for the DateDash suggestion engine."""

from __future__ import annotations

import math
import sys
from typing import Optional

from loguru import logger

from models import Coordinate

EARTH_RADIUS_KM = 6371.0


def haversine_km(lat1: float, lon1: float, lat2: float, lon2: float) -> float:
    """Great-circle distance in kilometers."""
    phi1 = math.radians(lat1)
    phi2 = math.radians(lat2)
    dphi = math.radians(lat2 - lat1)
    dlambda = math.radians(lon2 - lon1)
    h = math.sin(dphi / 2) ** 2 + math.cos(phi1) * math.cos(phi2) * math.sin(dlambda / 2) ** 2
    # rounding can push sqrt(h) past 1 near antipodes
    return 2 * EARTH_RADIUS_KM * math.asin(min(1.0, math.sqrt(h)))


def distance_km(a: Coordinate, b: Coordinate) -> float:
    return haversine_km(a.lat, a.lng, b.lat, b.lng)


def is_positive_finite(value: Optional[float]) -> bool:
    if value is None:
        return False
    try:
        number = float(value)
    except (TypeError, ValueError):
        return False
    return math.isfinite(number) and number > 0


def configure_logging(level: str = "INFO") -> None:
    """Route loguru output to stderr at the requested level."""
    logger.remove()
    logger.add(sys.stderr, level=level.upper())
