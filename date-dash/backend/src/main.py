from __future__ import annotations

import random
from functools import lru_cache
from typing import Any, Dict, List, Literal, Optional, Tuple

from fastapi import FastAPI, HTTPException
from fastapi.middleware.cors import CORSMiddleware
from loguru import logger
from pydantic import BaseModel, Field

from config import Configuration
from models import Coordinate, DebugTrace, FilterSet, Place
from services.bbox_builder import expand_bbox_from_center, to_feature_collection
from services.catalog import PlaceCatalog, load_places
from services.filtering import filter_places
from services.report import build_report
from services.selector import pick_suggestion
from utils import configure_logging, is_positive_finite

NO_MATCH_MESSAGE = "Try widening your filters to see more places."

app = FastAPI(title="DateDash Suggestions")
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


def setup_logging() -> None:
    configure_logging(Configuration.from_env().log_level)


setup_logging()


class LatLngPayload(BaseModel):
    lat: float = Field(..., ge=-90, le=90)
    lng: float = Field(..., ge=-180, le=180)


class FiltersPayload(BaseModel):
    """Filter fields left out (None) fall back to the configured defaults."""

    center: Optional[LatLngPayload] = None
    radius_km: Optional[float] = None
    min_rating: Optional[float] = Field(None, ge=0.0, le=5.0)
    cuisines: List[str] = []
    themes: List[str] = []
    open_now: bool = False
    price_levels: Optional[List[int]] = None

    def to_filter_set(self, cfg: Configuration) -> FilterSet:
        defaults = cfg.default_filters()
        return FilterSet(
            center=Coordinate(lat=self.center.lat, lng=self.center.lng) if self.center else None,
            radius_km=defaults.radius_km if self.radius_km is None else self.radius_km,
            min_rating=defaults.min_rating if self.min_rating is None else self.min_rating,
            cuisines=list(self.cuisines),
            themes=list(self.themes),
            open_now=self.open_now,
            price_levels=defaults.price_levels if self.price_levels is None else list(self.price_levels),
        )


class SuggestionRequest(BaseModel):
    filters: FiltersPayload = Field(default_factory=FiltersPayload)
    mode: Optional[Literal["random", "weighted"]] = Field(None, description="Defaults to DEFAULT_MODE")


class PlacePayload(BaseModel):
    id: str
    name: str
    address: str
    lat: float
    lng: float
    rating: Optional[float] = None
    cuisine: List[str] = []
    theme: List[str] = []
    is_open_now: Optional[bool] = None
    price_level: Optional[int] = None
    description: Optional[str] = None
    website: Optional[str] = None


class DebugEntryPayload(BaseModel):
    id: str
    score: Optional[float] = None
    distance_km: Optional[float] = None
    matches: Dict[str, bool]


class DebugPayload(BaseModel):
    mode: str
    total_candidates: int
    filtered_count: int
    path: str
    note: str
    entries: List[DebugEntryPayload]


class FilterResponse(BaseModel):
    places: List[PlacePayload]
    total_candidates: int
    bbox: Tuple[float, float, float, float]
    features: Dict[str, Any]


class SuggestionResponse(BaseModel):
    place: Optional[PlacePayload]
    debug: DebugPayload
    message: Optional[str] = None
    report_markdown: str


def to_payload(p: Place) -> PlacePayload:
    return PlacePayload(
        id=p.id,
        name=p.name,
        address=p.address,
        lat=p.lat,
        lng=p.lng,
        rating=p.rating,
        cuisine=list(p.cuisine),
        theme=list(p.theme),
        is_open_now=p.is_open_now,
        price_level=p.price_level,
        description=p.description,
        website=p.website,
    )


def to_debug_payload(debug: DebugTrace) -> DebugPayload:
    return DebugPayload(
        mode=debug.mode,
        total_candidates=debug.total_candidates,
        filtered_count=debug.filtered_count,
        path=debug.path.value,
        note=debug.note,
        entries=[
            DebugEntryPayload(
                id=e.id,
                score=round(e.score, 4) if e.score is not None else None,
                distance_km=round(e.distance_km, 3) if e.distance_km is not None else None,
                matches=e.matches.as_dict(),
            )
            for e in debug.entries
        ],
    )


@lru_cache(maxsize=None)
def seeded_rng(seed: int) -> random.Random:
    """One generator per seed for the whole process."""
    return random.Random(seed)


@lru_cache(maxsize=4)
def get_catalog(places_path: Optional[str] = None) -> PlaceCatalog:
    if places_path:
        return PlaceCatalog(load_places(places_path))
    return PlaceCatalog()


def _load(cfg: Configuration) -> PlaceCatalog:
    try:
        return get_catalog(cfg.places_path)
    except Exception as exc:
        logger.exception("place catalog unavailable: {}", exc)
        raise HTTPException(status_code=500, detail="place catalog unavailable")


@app.get("/healthz")
def healthz() -> dict:
    cfg = Configuration.from_env()
    logger.info("cfg: {}", cfg.log_summary())
    return {"status": "ok"}


@app.get("/places", response_model=List[PlacePayload])
def list_places() -> List[PlacePayload]:
    catalog = _load(Configuration.from_env())
    return [to_payload(p) for p in catalog.list()]


@app.get("/places/{place_id}", response_model=PlacePayload)
def get_place(place_id: str) -> PlacePayload:
    catalog = _load(Configuration.from_env())
    place = catalog.get_by_id(place_id)
    if place is None:
        raise HTTPException(status_code=404, detail=f"unknown place: {place_id}")
    return to_payload(place)


@app.post("/places/filter", response_model=FilterResponse)
def filter_endpoint(req: FiltersPayload) -> FilterResponse:
    cfg = Configuration.from_env()
    catalog = _load(cfg)
    filters = req.to_filter_set(cfg)
    candidates = catalog.list()
    passing = filter_places(candidates, filters)

    center = filters.center or cfg.fallback_center
    radius = float(filters.radius_km) if is_positive_finite(filters.radius_km) else cfg.default_radius_km
    bbox = expand_bbox_from_center(center.lng, center.lat, radius)
    logger.info("filter candidates={} passing={}", len(candidates), len(passing))

    return FilterResponse(
        places=[to_payload(p) for p in passing],
        total_candidates=len(candidates),
        bbox=bbox,
        features=to_feature_collection(passing),
    )


@app.post("/suggestion", response_model=SuggestionResponse)
def suggestion(req: SuggestionRequest) -> SuggestionResponse:
    cfg = Configuration.from_env()
    catalog = _load(cfg)
    filters = req.filters.to_filter_set(cfg)
    mode = req.mode or cfg.default_mode
    rng = seeded_rng(cfg.random_seed) if cfg.random_seed is not None else None

    try:
        result = pick_suggestion(catalog.list(), filters, mode, rng=rng)
        md = build_report(filters, result)
    except ValueError as exc:
        raise HTTPException(status_code=400, detail=str(exc))
    except Exception as exc:
        logger.exception("suggestion failed: {}", exc)
        raise HTTPException(status_code=500, detail="internal error")

    logger.info(
        "suggestion mode={} candidates={} passing={} path={} place={}",
        mode,
        result.debug.total_candidates,
        result.debug.filtered_count,
        result.debug.path.value,
        result.place.id if result.place else None,
    )
    return SuggestionResponse(
        place=to_payload(result.place) if result.place else None,
        debug=to_debug_payload(result.debug),
        message=None if result.place else NO_MATCH_MESSAGE,
        report_markdown=md,
    )


if __name__ == "__main__":
    import uvicorn

    uvicorn.run("main:app", host="0.0.0.0", port=8010, reload=True)
