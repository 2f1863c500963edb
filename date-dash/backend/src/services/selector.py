"""Pick one date suggestion out of a candidate list.

Two modes are supported:

- ``random``: uniform draw over the places that pass every filter.
- ``weighted``: draw proportional to :func:`services.scoring.weighted_score`,
  using a cumulative subtraction walk (inverse-CDF sampling) over the passing
  places in input order.

Every outcome, including "nothing matched", comes back as a
:class:`models.SelectionResult` whose debug trace records which path fired.
"""

from __future__ import annotations

import math
import random
from typing import Callable, List, Optional, Protocol, Sequence, Tuple

from loguru import logger

from models import (
    SELECTION_MODES,
    DebugEntry,
    DebugTrace,
    Evaluation,
    FilterSet,
    Place,
    SelectionPath,
    SelectionResult,
)
from services.evaluator import evaluate_place
from services.scoring import weighted_score


class RandomSource(Protocol):
    def random(self) -> float: ...


Scorer = Callable[[Evaluation, FilterSet], float]

_default_rng = random.Random()


def _uniform_index(rng: RandomSource, count: int) -> int:
    return min(int(rng.random() * count), count - 1)


def _weighted_walk(
    weighted: Sequence[Tuple[Evaluation, float]], threshold: float
) -> Optional[Evaluation]:
    for evaluation, score in weighted:
        threshold -= score
        if threshold <= 0:
            return evaluation
    return None


def pick_suggestion(
    places: Sequence[Place],
    filters: FilterSet,
    mode: str = "random",
    *,
    rng: Optional[RandomSource] = None,
    scorer: Scorer = weighted_score,
) -> SelectionResult:
    if mode not in SELECTION_MODES:
        raise ValueError(f"unknown selection mode: {mode!r}")
    rng = rng or _default_rng

    evaluations = [evaluate_place(place, filters) for place in places]
    scores: List[Optional[float]] = [
        scorer(ev, filters) if mode == "weighted" else None for ev in evaluations
    ]
    entries = [
        DebugEntry(
            id=ev.place.id,
            matches=ev.matches,
            score=score,
            distance_km=ev.distance_km,
        )
        for ev, score in zip(evaluations, scores)
    ]
    passing = [(ev, score) for ev, score in zip(evaluations, scores) if ev.passes]

    def result(place: Optional[Place], path: SelectionPath, note: str) -> SelectionResult:
        logger.debug(
            "suggestion mode={} candidates={} passing={} path={}",
            mode,
            len(evaluations),
            len(passing),
            path.value,
        )
        return SelectionResult(
            place=place,
            debug=DebugTrace(
                mode=mode,
                total_candidates=len(evaluations),
                filtered_count=len(passing),
                entries=entries,
                path=path,
                note=note,
            ),
        )

    if not passing:
        return result(None, SelectionPath.NO_MATCH, "No places matched the active filters.")

    if mode == "random":
        index = _uniform_index(rng, len(passing))
        return result(
            passing[index][0].place,
            SelectionPath.RANDOM,
            f"Randomly selected index {index}.",
        )

    weighted = [(ev, float(score or 0.0)) for ev, score in passing]
    total_score = 0.0
    for _, score in weighted:
        total_score += score

    if not math.isfinite(total_score) or total_score <= 0:
        index = _uniform_index(rng, len(weighted))
        return result(
            weighted[index][0].place,
            SelectionPath.WEIGHTED_ZERO_FALLBACK,
            f"Weighted scores were zero; reverted to uniform random selection (index {index}).",
        )

    picked = _weighted_walk(weighted, rng.random() * total_score)
    if picked is not None:
        return result(
            picked.place,
            SelectionPath.WEIGHTED,
            f"Weighted pick with totalScore {total_score:.2f}.",
        )

    # rounding can leave a sliver of threshold after the last item
    best, _ = sorted(weighted, key=lambda item: item[1], reverse=True)[0]
    return result(
        best.place,
        SelectionPath.WEIGHTED_WALK_FALLBACK,
        "Fallback to highest-scoring place after distribution walk-through.",
    )
