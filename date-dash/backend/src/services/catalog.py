from __future__ import annotations

import json
from pathlib import Path
from typing import Iterable, List, Optional

from loguru import logger
from pydantic import BaseModel, Field, ValidationError

from models import Evaluation, FilterSet, Place
from services.evaluator import evaluate_place
from services.filtering import filter_places


class CatalogError(Exception):
    """Raised when place records cannot be loaded."""


class PlaceRecord(BaseModel):
    id: str = Field(..., min_length=1)
    name: str
    address: str = ""
    lat: float = Field(..., ge=-90, le=90)
    lng: float = Field(..., ge=-180, le=180)
    rating: Optional[float] = Field(default=None, ge=0.0, le=5.0)
    cuisine: List[str] = Field(default_factory=list)
    theme: List[str] = Field(default_factory=list)
    isOpenNow: Optional[bool] = None
    priceLevel: Optional[int] = Field(default=None, ge=0, le=4)
    description: Optional[str] = None
    website: Optional[str] = None

    def to_place(self) -> Place:
        return Place(
            id=self.id,
            name=self.name,
            address=self.address,
            lat=self.lat,
            lng=self.lng,
            rating=self.rating,
            cuisine=list(self.cuisine),
            theme=list(self.theme),
            is_open_now=self.isOpenNow,
            price_level=self.priceLevel,
            description=self.description,
            website=self.website,
        )


SEED_PLACES: List[Place] = [
    Place(
        id="sunset-rooftop-lounge",
        name="Sunset Rooftop Lounge",
        address="123 Skyline Ave, New York, NY",
        lat=40.7242,
        lng=-74.0018,
        rating=4.6,
        cuisine=["cocktails", "small plates"],
        theme=["romantic", "rooftop"],
        is_open_now=True,
        price_level=3,
        description="Panoramic skyline views, live jazz on weekends, and a sparkling cocktail menu.",
    ),
    Place(
        id="brooklyn-noodle-bar",
        name="Brooklyn Noodle Bar",
        address="456 River St, Brooklyn, NY",
        lat=40.7063,
        lng=-73.9903,
        rating=4.4,
        cuisine=["ramen", "asian"],
        theme=["comfort food", "casual"],
        is_open_now=False,
        price_level=2,
        description="Steamy bowls, cozy booths, and an indie vinyl soundtrack for laid-back evenings.",
    ),
    Place(
        id="midnight-mini-golf",
        name="Midnight Mini Golf",
        address="89 Harbor Way, Jersey City, NJ",
        lat=40.7124,
        lng=-74.0381,
        rating=4.8,
        theme=["playful", "adventure"],
        is_open_now=True,
        price_level=2,
        description="Glow-in-the-dark putting, neon murals, and mocktail flights until 1 AM.",
    ),
    Place(
        id="greenhouse-cafe",
        name="Greenhouse Cafe & Conservatory",
        address="301 Botanical Ln, Queens, NY",
        lat=40.7412,
        lng=-73.8462,
        rating=4.7,
        cuisine=["vegetarian", "brunch"],
        theme=["nature", "relaxed"],
        is_open_now=True,
        price_level=2,
        description="Lush indoor greenhouse with seasonal plates and fresh-pressed juices.",
    ),
    Place(
        id="art-house-cinema",
        name="Art House Cinema & Lounge",
        address="57 Mercer St, New York, NY",
        lat=40.7204,
        lng=-74.0023,
        rating=4.5,
        theme=["artsy", "cozy"],
        is_open_now=True,
        price_level=1,
        description="Indie films, plush sofas, and curated snacks perfect for a quiet night out.",
    ),
    Place(
        id="latin-dance-lab",
        name="Latin Dance Lab",
        address="12 Grove St, Hoboken, NJ",
        lat=40.7372,
        lng=-74.0307,
        rating=4.9,
        theme=["adventure", "music"],
        is_open_now=False,
        price_level=2,
        description="Beginner-friendly salsa and bachata classes with a post-lesson social hour.",
    ),
    Place(
        id="gelato-stroll",
        name="Gelato & Gallery Stroll",
        address="220 Water St, Brooklyn, NY",
        lat=40.7038,
        lng=-73.9901,
        rating=4.3,
        cuisine=["dessert", "italian"],
        theme=["artsy", "walkable"],
        is_open_now=True,
        price_level=1,
        description="Small-batch gelato next to a rotating local art gallery for sweet conversation starters.",
    ),
]


def load_places(path: Path | str) -> List[Place]:
    """Read a JSON array of place records."""
    try:
        raw = json.loads(Path(path).read_text(encoding="utf-8"))
    except (OSError, json.JSONDecodeError) as exc:
        raise CatalogError(f"cannot read places from {path}: {exc}") from exc
    if not isinstance(raw, list):
        raise CatalogError(f"expected a JSON array in {path}")

    places: List[Place] = []
    seen: set[str] = set()
    for idx, item in enumerate(raw):
        try:
            record = PlaceRecord.model_validate(item)
        except ValidationError as exc:
            raise CatalogError(f"invalid place record #{idx} in {path}: {exc}") from exc
        if record.id in seen:
            raise CatalogError(f"duplicate place id {record.id!r} in {path}")
        seen.add(record.id)
        places.append(record.to_place())
    logger.info("loaded {} places from {}", len(places), path)
    return places


class PlaceCatalog:
    """In-memory place source."""

    def __init__(self, places: Optional[Iterable[Place]] = None) -> None:
        self._places: List[Place] = list(SEED_PLACES if places is None else places)

    def list(self, filters: Optional[FilterSet] = None) -> List[Place]:
        """All places, or the passing ones ordered by rating (best first)."""
        if filters is None:
            return list(self._places)
        passing = filter_places(self._places, filters)
        return sorted(passing, key=lambda p: p.rating if p.rating is not None else 0.0, reverse=True)

    def get_by_id(self, place_id: str) -> Optional[Place]:
        for place in self._places:
            if place.id == place_id:
                return place
        return None

    def evaluate(self, filters: FilterSet) -> List[Evaluation]:
        return [evaluate_place(place, filters) for place in self._places]
