from __future__ import annotations

import os
from typing import Any, List, Optional

from dotenv import load_dotenv
from pydantic import BaseModel, Field, field_validator

from models import SELECTION_MODES, Coordinate, FilterSet


class Configuration(BaseModel):
    # Filter defaults applied when a request leaves a field out
    default_radius_km: float = Field(default=5.0)
    default_min_rating: float = Field(default=4.0, ge=0.0, le=5.0)
    default_price_levels: List[int] = Field(default_factory=lambda: [1, 2, 3])
    default_mode: str = Field(default="weighted")

    # Map center used when the caller has no location
    fallback_lat: float = Field(default=40.7128)
    fallback_lng: float = Field(default=-74.006)

    # Place source
    places_path: Optional[str] = Field(default=None)

    # seeds one process-wide generator, so a run of picks replays after restart
    random_seed: Optional[int] = Field(default=None)
    log_level: str = Field(default="INFO")

    @field_validator("default_price_levels", mode="before")
    @classmethod
    def _split_levels(cls, value: Any) -> Any:
        if isinstance(value, str):
            return [int(v) for v in value.split(",") if v.strip()]
        return value

    @field_validator("default_mode")
    @classmethod
    def _check_mode(cls, value: str) -> str:
        value = value.strip().lower()
        if value not in SELECTION_MODES:
            raise ValueError(f"default_mode must be one of {SELECTION_MODES}")
        return value

    @classmethod
    def from_env(cls, overrides: Optional[dict[str, Any]] = None) -> "Configuration":
        load_dotenv()
        raw: dict[str, Any] = {}

        env_map = {
            "default_radius_km": os.getenv("DEFAULT_RADIUS_KM"),
            "default_min_rating": os.getenv("DEFAULT_MIN_RATING"),
            "default_price_levels": os.getenv("DEFAULT_PRICE_LEVELS"),
            "default_mode": os.getenv("DEFAULT_MODE"),
            "fallback_lat": os.getenv("FALLBACK_LAT"),
            "fallback_lng": os.getenv("FALLBACK_LNG"),
            "places_path": os.getenv("PLACES_PATH"),
            "random_seed": os.getenv("RANDOM_SEED"),
            "log_level": os.getenv("LOG_LEVEL"),
        }

        for k, v in env_map.items():
            if v is None or v == "":
                continue
            raw[k] = v

        if overrides:
            raw.update({k: v for k, v in overrides.items() if v is not None})

        return cls(**raw)

    @property
    def fallback_center(self) -> Coordinate:
        return Coordinate(lat=self.fallback_lat, lng=self.fallback_lng)

    def default_filters(self) -> FilterSet:
        return FilterSet(
            center=None,
            radius_km=self.default_radius_km,
            min_rating=self.default_min_rating,
            cuisines=[],
            themes=[],
            open_now=False,
            price_levels=list(self.default_price_levels),
        )

    def log_summary(self) -> str:
        return (
            "radius_km=%s min_rating=%s price_levels=%s mode=%s places=%s seed=%s"
            % (
                self.default_radius_km,
                self.default_min_rating,
                ",".join(str(v) for v in self.default_price_levels) or "any",
                self.default_mode,
                self.places_path or "seed",
                self.random_seed if self.random_seed is not None else "unset",
            )
        )
