from __future__ import annotations

from typing import List

from models import FilterSet, SelectionResult
from utils import is_positive_finite

PRICE_SIGNS = {0: "Free", 1: "$", 2: "$$", 3: "$$$", 4: "$$$$"}
MATCH_COLUMNS = ("rating", "radius", "cuisine", "theme", "open_now", "price_level")


def _describe_filters(filters: FilterSet) -> List[str]:
    center = (
        f"{filters.center.lat:.4f}, {filters.center.lng:.4f}" if filters.center else "Not set (radius ignored)"
    )
    radius = f"{filters.radius_km:.1f} km" if is_positive_finite(filters.radius_km) else "Any distance"
    rating = f"{filters.min_rating:.1f}★ & up" if filters.min_rating else "Any rating"
    prices = ", ".join(PRICE_SIGNS.get(v, str(v)) for v in sorted(filters.price_levels)) or "Any price"
    return [
        f"- Center: {center}",
        f"- Radius: {radius}",
        f"- Rating: {rating}",
        f"- Cuisines: {', '.join(filters.cuisines) if filters.cuisines else 'Any'}",
        f"- Themes: {', '.join(filters.themes) if filters.themes else 'Any'}",
        f"- Open now: {'Required' if filters.open_now else 'Not required'}",
        f"- Price: {prices}",
    ]


def build_report(filters: FilterSet, result: SelectionResult) -> str:
    debug = result.debug
    lines = [
        "## Date Suggestion Report",
        "",
        "### Active Filters",
        *_describe_filters(filters),
        "",
        "### Decision",
        f"- Mode: {debug.mode}",
        f"- Candidates: {debug.total_candidates}",
        f"- Passing filters: {debug.filtered_count}",
        f"- Path: {debug.path.value}",
        f"- Note: {debug.note or 'None'}",
        "",
    ]

    place = result.place
    if place is None:
        lines += [
            "### Pick",
            "No place matched. Relax the filters or expand the radius, then try again.",
            "",
        ]
    else:
        rating = f"{place.rating:.1f}/5" if place.rating is not None else "Unrated"
        lines += [
            "### Pick",
            f"#### {place.name}",
            f"- Address: {place.address or 'Not provided'}",
            f"- Rating: {rating}",
            f"- Price: {PRICE_SIGNS.get(place.price_level, 'Unknown') if place.price_level is not None else 'Unknown'}",
            f"- Tags: {', '.join([*place.cuisine, *place.theme]) or 'None'}",
        ]
        if place.description:
            lines.append(f"- About: {place.description}")
        if place.website:
            lines.append(f"- Website: [{place.website}]({place.website})")
        lines.append("")

    lines += [
        "### Candidates",
        "| id | score | distance | " + " | ".join(MATCH_COLUMNS) + " |",
        "|---|---|---|" + "---|" * len(MATCH_COLUMNS),
    ]
    for entry in debug.entries:
        score = f"{entry.score:.3f}" if entry.score is not None else "-"
        distance = f"{entry.distance_km:.2f} km" if entry.distance_km is not None else "-"
        flags = entry.matches.as_dict()
        marks = " | ".join("✓" if flags[col] else "✗" for col in MATCH_COLUMNS)
        lines.append(f"| {entry.id} | {score} | {distance} | {marks} |")

    return "\n".join(lines)
