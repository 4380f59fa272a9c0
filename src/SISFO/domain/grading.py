"""
Pure grading arithmetic: score normalisation, weighted averages and the
letter-grade lookup. No I/O; the grading and report card services feed
these from the repositories.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, Optional, Sequence


@dataclass(frozen=True)
class GradeBand:
    grade: str
    min_score: float
    max_score: float
    points: float


# Used when the semester has no curriculum bound, or the curriculum has no rules.
DEFAULT_LADDER: tuple[GradeBand, ...] = (
    GradeBand("A", 90.0, 100.0, 4.0),
    GradeBand("B", 80.0, 90.0, 3.0),
    GradeBand("C", 70.0, 80.0, 2.0),
    GradeBand("D", 60.0, 70.0, 1.0),
    GradeBand("E", 0.0, 60.0, 0.0),
)


def normalize_score(score: float, max_score: float) -> float:
    """Raw score on a 0-100 scale."""
    if max_score <= 0:
        return 0.0
    return score / max_score * 100.0


def weighted_average(entries: Iterable[tuple[float, float]]) -> float:
    """
    ``entries`` are ``(normalised_score, weight)`` pairs. Weights are
    relative; the result is 0 when the total weight is not positive.
    """
    total = 0.0
    weight_sum = 0.0
    for value, weight in entries:
        total += value * weight
        weight_sum += weight
    if weight_sum <= 0:
        return 0.0
    return total / weight_sum


def default_letter(score: float) -> tuple[str, float]:
    for band in DEFAULT_LADDER:
        if score >= band.min_score:
            return band.grade, band.points
    return "E", 0.0


def resolve_letter(score: float, rules: Optional[Sequence[GradeBand]] = None) -> tuple[str, float]:
    """
    Letter grade and points for ``score``.

    ``rules`` must be ordered by ``min_score`` descending. A score inside a
    band takes that band; a score falling in a gap between bands takes the
    band below it, and one under every band takes the lowest band. The
    default ladder is used only when there are no rules.
    """
    if not rules:
        return default_letter(score)
    for rule in rules:
        if rule.min_score <= score <= rule.max_score:
            return rule.grade, rule.points
    for rule in rules:
        if rule.min_score <= score:
            return rule.grade, rule.points
    lowest = rules[-1]
    return lowest.grade, lowest.points


def max_points(rules: Optional[Sequence[GradeBand]] = None) -> float:
    bands = rules or DEFAULT_LADDER
    return max(b.points for b in bands)


def compute_gpa(lines: Iterable[tuple[float, int]]) -> tuple[float, int]:
    """``lines`` are ``(points, credit)``; returns ``(gpa, total_credits)``."""
    total_points = 0.0
    total_credits = 0
    for points, credit in lines:
        total_points += points * credit
        total_credits += credit
    if total_credits <= 0:
        return 0.0, 0
    return total_points / total_credits, total_credits


__all__ = [
    "GradeBand",
    "DEFAULT_LADDER",
    "normalize_score",
    "weighted_average",
    "default_letter",
    "resolve_letter",
    "max_points",
    "compute_gpa",
]
