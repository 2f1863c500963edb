"""Data models for the DateDash suggestion engine."""

from __future__ import annotations

import enum
from dataclasses import asdict, dataclass, field
from typing import Literal, Optional

SelectionMode = Literal["random", "weighted"]
SELECTION_MODES: tuple[str, ...] = ("random", "weighted")


@dataclass(frozen=True)
class Coordinate:
    lat: float
    lng: float


@dataclass(frozen=True)
class Place:
    id: str
    name: str
    address: str
    lat: float
    lng: float
    rating: Optional[float] = None
    cuisine: list[str] = field(default_factory=list)
    theme: list[str] = field(default_factory=list)
    is_open_now: Optional[bool] = None
    price_level: Optional[int] = None  # 0 = free, 4 = premium
    description: Optional[str] = None
    website: Optional[str] = None

    @property
    def coordinate(self) -> Coordinate:
        return Coordinate(lat=self.lat, lng=self.lng)


@dataclass
class FilterSet:
    center: Optional[Coordinate] = None
    radius_km: Optional[float] = None
    min_rating: Optional[float] = None
    cuisines: list[str] = field(default_factory=list)
    themes: list[str] = field(default_factory=list)
    open_now: Optional[bool] = None
    price_levels: list[int] = field(default_factory=list)


@dataclass
class MatchRecord:
    rating: bool = True
    radius: bool = True
    cuisine: bool = True
    theme: bool = True
    open_now: bool = True
    price_level: bool = True

    def all(self) -> bool:
        return (
            self.rating
            and self.radius
            and self.cuisine
            and self.theme
            and self.open_now
            and self.price_level
        )

    def as_dict(self) -> dict[str, bool]:
        return asdict(self)


@dataclass
class Evaluation:
    place: Place
    distance_km: Optional[float]
    matches: MatchRecord
    passes: bool


@dataclass
class ScoreBreakdown:
    rating: float
    distance: float
    cuisine: float
    theme: float
    open_now: float
    price: float
    total: float

    def as_dict(self) -> dict[str, float]:
        return {k: round(v, 4) for k, v in asdict(self).items()}


class SelectionPath(str, enum.Enum):
    NO_MATCH = "no_match"
    RANDOM = "random"
    WEIGHTED = "weighted"
    WEIGHTED_ZERO_FALLBACK = "weighted_zero_fallback"
    WEIGHTED_WALK_FALLBACK = "weighted_walk_fallback"


@dataclass
class DebugEntry:
    id: str
    matches: MatchRecord
    score: Optional[float] = None
    distance_km: Optional[float] = None


@dataclass
class DebugTrace:
    mode: str
    total_candidates: int
    filtered_count: int
    entries: list[DebugEntry] = field(default_factory=list)
    path: SelectionPath = SelectionPath.NO_MATCH
    note: str = ""


@dataclass
class SelectionResult:
    place: Optional[Place]
    debug: DebugTrace
