"""
Memoized derived views.

Each view is a pure function of its inputs, cached by those inputs. The record
set is a tuple of frozen Students, so reloading the dataset produces a new key
and the dashboard views are rebuilt; changing the search text or sort
directive only rebuilds the table view.
"""
from __future__ import annotations

from dataclasses import dataclass
from functools import lru_cache
from typing import List, Optional, Tuple

from student_analytics.core.analytics import (
    ClassAverage,
    OverviewStats,
    SkillCorrelation,
    average_score_by_class,
    compute_overview,
    persona_counts,
    rank_skill_correlations,
)
from student_analytics.core.insights import InsightSnapshot, snapshot_from_aggregates
from student_analytics.core.query_engine import QueryResult, SortDirective, run_query
from student_analytics.core.records import Student


@dataclass(frozen=True)
class DashboardViews:
    overview: Optional[OverviewStats]
    correlations: List[SkillCorrelation]
    class_averages: List[ClassAverage]
    persona_counts: List[Tuple[str, int]]
    insights: InsightSnapshot


@lru_cache(maxsize=8)
def build_dashboard_views(students: Tuple[Student, ...]) -> DashboardViews:
    correlations = rank_skill_correlations(students)
    class_averages = average_score_by_class(students)
    return DashboardViews(
        overview=compute_overview(students),
        correlations=correlations,
        class_averages=class_averages,
        persona_counts=persona_counts(students),
        insights=snapshot_from_aggregates(len(students), correlations, class_averages),
    )


@lru_cache(maxsize=64)
def build_table_view(
    students: Tuple[Student, ...],
    query: str = "",
    directive: Optional[SortDirective] = None,
) -> QueryResult:
    return run_query(students, query, directive)


def clear_view_caches() -> None:
    build_dashboard_views.cache_clear()
    build_table_view.cache_clear()
