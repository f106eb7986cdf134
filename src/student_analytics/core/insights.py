from __future__ import annotations

from dataclasses import dataclass
from typing import List, Optional, Sequence

from student_analytics.config import TOP_CORRELATIONS
from student_analytics.core.analytics import (
    ClassAverage,
    SkillCorrelation,
    average_score_by_class,
    rank_skill_correlations,
)
from student_analytics.core.records import Student


@dataclass(frozen=True)
class CorrelationFact:
    """
    One skill/score relationship as shown in the insights panel.
    """
    skill: str
    r: float
    direction: str  # 'positive', 'negative', 'none'


@dataclass(frozen=True)
class InsightSnapshot:
    """
    Canonical facts derived from the record set.

    The insights panel only states what is represented here, so every line
    can be traced back to a computed number.
    """
    total_students: int
    top_correlations: List[CorrelationFact]
    strongest_class: Optional[ClassAverage]
    weakest_class: Optional[ClassAverage]
    lines: List[str]


def _direction_from_r(r: float, tolerance: float = 0.05) -> str:
    """
    Interpret a coefficient as 'positive', 'negative' or 'none'.

    Coefficients within the tolerance of zero read as 'none'; this includes
    the 0 returned for zero-variance columns.
    """
    if r > tolerance:
        return "positive"
    if r < -tolerance:
        return "negative"
    return "none"


def snapshot_from_aggregates(
    total_students: int,
    correlations: Sequence[SkillCorrelation],
    class_averages: Sequence[ClassAverage],
    tolerance: float = 0.05,
) -> InsightSnapshot:
    """
    Build the insights panel facts from already computed aggregates.

    This function:
      - labels each ranked correlation with its direction
      - picks the best and worst scoring classes (first seen wins ties)
      - renders one text line per correlation
    """
    facts = [
        CorrelationFact(skill=c.skill, r=c.r, direction=_direction_from_r(c.r, tolerance=tolerance))
        for c in correlations
    ]

    strongest: Optional[ClassAverage] = None
    weakest: Optional[ClassAverage] = None
    for ca in class_averages:
        if strongest is None or ca.avg_score > strongest.avg_score:
            strongest = ca
        if weakest is None or ca.avg_score < weakest.avg_score:
            weakest = ca

    lines = [f"{f.skill} correlation with score: {f.r} ({f.direction})" for f in facts]

    return InsightSnapshot(
        total_students=total_students,
        top_correlations=facts,
        strongest_class=strongest,
        weakest_class=weakest,
        lines=lines,
    )


def build_insight_snapshot(
    students: Sequence[Student],
    limit: int = TOP_CORRELATIONS,
    tolerance: float = 0.05,
) -> InsightSnapshot:
    """Rank the top `limit` correlations and class averages, then snapshot them."""
    return snapshot_from_aggregates(
        total_students=len(students),
        correlations=rank_skill_correlations(students, limit=limit),
        class_averages=average_score_by_class(students),
        tolerance=tolerance,
    )
