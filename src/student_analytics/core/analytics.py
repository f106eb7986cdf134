from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Dict, List, Optional, Sequence, Tuple

from student_analytics.config import TOP_CORRELATIONS
from student_analytics.core.records import Student


# (label, attribute) pairs correlated against assessment_score, in display order
SKILL_FIELDS: List[Tuple[str, str]] = [
    ("Attention", "attention"),
    ("Focus", "focus"),
    ("Comprehension", "comprehension"),
    ("Retention", "retention"),
    ("Engagement", "engagement_time"),
]

# Radar chart axes for the student profile
PROFILE_FIELDS: List[Tuple[str, str]] = [
    ("Comprehension", "comprehension"),
    ("Attention", "attention"),
    ("Focus", "focus"),
    ("Retention", "retention"),
    ("Engagement", "engagement_time"),
]


@dataclass(frozen=True)
class OverviewStats:
    total_students: int
    avg_score: float
    avg_comprehension: float
    avg_attention: float
    avg_focus: float
    avg_retention: float
    avg_engagement: float


@dataclass(frozen=True)
class SkillCorrelation:
    skill: str   # display label, e.g. 'Attention'
    field: str   # Student attribute
    r: float     # rounded to 2 places


@dataclass(frozen=True)
class ClassAverage:
    class_name: str
    avg_score: float
    count: int


def round_half_up(value: float, digits: int) -> float:
    """
    Round like the dashboard does (halves go toward +infinity), not Python's
    round-half-even. Non-finite values, or values too large to scale, are
    returned unchanged.
    """
    factor = 10 ** digits
    scaled = value * factor + 0.5
    if not math.isfinite(scaled):
        return value
    return math.floor(scaled) / factor


# ---------------------------------------------------------------------------
# Correlation
# ---------------------------------------------------------------------------

def compute_correlation(a: Sequence[float], b: Sequence[float]) -> float:
    """
    Pearson correlation over the first min(len(a), len(b)) pairs.

    Returns 0.0 for empty input, when either side has zero variance, or when
    the sums overflow.
    """
    n = min(len(a), len(b))
    if n == 0:
        return 0.0

    ax = [float(v) for v in a[:n]]
    bx = [float(v) for v in b[:n]]
    mean_a = sum(ax) / n
    mean_b = sum(bx) / n

    num = 0.0
    den_a = 0.0
    den_b = 0.0
    for va, vb in zip(ax, bx):
        da = va - mean_a
        db = vb - mean_b
        num += da * db
        den_a += da * da
        den_b += db * db

    den = math.sqrt(den_a) * math.sqrt(den_b)
    if den == 0:
        return 0.0
    r = num / den
    # huge inputs overflow the sums to inf/nan
    if not math.isfinite(r):
        return 0.0
    return r


def rank_skill_correlations(
    students: Sequence[Student],
    limit: Optional[int] = TOP_CORRELATIONS,
) -> List[SkillCorrelation]:
    """
    Correlate each skill column with assessment_score and rank by strength.

    Coefficients are rounded to 2 places before ranking; ties keep the
    SKILL_FIELDS order. `limit=None` returns all five.
    """
    scores = [s.assessment_score for s in students]
    ranked: List[SkillCorrelation] = []
    for label, attr in SKILL_FIELDS:
        values = [getattr(s, attr) for s in students]
        r = round_half_up(compute_correlation(values, scores), 2)
        ranked.append(SkillCorrelation(skill=label, field=attr, r=r))

    ranked.sort(key=lambda c: abs(c.r), reverse=True)
    if limit is None:
        return ranked
    return ranked[: max(0, int(limit))]


# ---------------------------------------------------------------------------
# Aggregation
# ---------------------------------------------------------------------------

def _mean(students: Sequence[Student], attr: str) -> float:
    return round_half_up(sum(getattr(s, attr) for s in students) / len(students), 1)


def compute_overview(students: Sequence[Student]) -> Optional[OverviewStats]:
    """Dataset-wide averages, or None when there are no students."""
    if len(students) == 0:
        return None

    return OverviewStats(
        total_students=len(students),
        avg_score=_mean(students, "assessment_score"),
        avg_comprehension=_mean(students, "comprehension"),
        avg_attention=_mean(students, "attention"),
        avg_focus=_mean(students, "focus"),
        avg_retention=_mean(students, "retention"),
        avg_engagement=_mean(students, "engagement_time"),
    )


def average_score_by_class(students: Sequence[Student]) -> List[ClassAverage]:
    """
    Mean assessment score per raw class label, in first-seen order.

    Labels are not normalized: 'A' and 'a' are separate groups.
    """
    totals: Dict[str, float] = {}
    counts: Dict[str, int] = {}
    for s in students:
        if s.class_name not in totals:
            totals[s.class_name] = 0.0
            counts[s.class_name] = 0
        totals[s.class_name] += s.assessment_score
        counts[s.class_name] += 1

    return [
        ClassAverage(
            class_name=name,
            avg_score=round_half_up(total / max(1, counts[name]), 1),
            count=counts[name],
        )
        for name, total in totals.items()
    ]


def persona_counts(students: Sequence[Student]) -> List[Tuple[str, int]]:
    """Number of students per persona, in first-seen order."""
    counts: Dict[str, int] = {}
    for s in students:
        counts[s.persona] = counts.get(s.persona, 0) + 1
    return list(counts.items())


def skill_profile(student: Student) -> List[Tuple[str, float]]:
    return [(label, getattr(student, attr)) for label, attr in PROFILE_FIELDS]
