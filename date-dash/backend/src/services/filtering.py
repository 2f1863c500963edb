from __future__ import annotations

from typing import Iterable, List

from models import Evaluation, FilterSet, Place
from services.evaluator import evaluate_place


def apply_filters(places: Iterable[Place], filters: FilterSet) -> List[Evaluation]:
    """Return the passing evaluations, in input order."""
    return [ev for ev in (evaluate_place(p, filters) for p in places) if ev.passes]


def filter_places(places: Iterable[Place], filters: FilterSet) -> List[Place]:
    return [ev.place for ev in apply_filters(places, filters)]
