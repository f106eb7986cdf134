from __future__ import annotations

from student_analytics.core.insights import build_insight_snapshot
from student_analytics.core.views import build_dashboard_views

from conftest import make_student


def _students():
    scores = [50, 60, 70, 80]
    return [
        make_student(
            class_name=cls,
            assessment_score=score,
            attention=score,            # r = 1
            focus=100 - score,          # r = -1
            comprehension=60,           # no variance
            retention=[60, 50, 80, 70][i],
            engagement_time=30,         # no variance
        )
        for i, (cls, score) in enumerate(zip(["A", "B", "A", "C"], scores))
    ]


def test_snapshot_lines_follow_ranking():
    snapshot = build_insight_snapshot(_students())
    assert snapshot.total_students == 4
    assert snapshot.lines[:2] == [
        "Attention correlation with score: 1.0 (positive)",
        "Focus correlation with score: -1.0 (negative)",
    ]
    assert len(snapshot.lines) == 3


def test_snapshot_directions():
    snapshot = build_insight_snapshot(_students())
    directions = {f.skill: f.direction for f in snapshot.top_correlations}
    assert directions["Attention"] == "positive"
    assert directions["Focus"] == "negative"


def test_snapshot_class_extremes():
    snapshot = build_insight_snapshot(_students())
    # A: (50 + 70) / 2 = 60, B: 60, C: 80
    assert snapshot.strongest_class.class_name == "C"
    assert snapshot.weakest_class.class_name == "A"


def test_snapshot_of_empty_set():
    snapshot = build_insight_snapshot([])
    assert snapshot.total_students == 0
    assert snapshot.strongest_class is None
    assert snapshot.weakest_class is None
    assert all(f.direction == "none" for f in snapshot.top_correlations)


def test_dashboard_views_carry_the_same_snapshot():
    students = tuple(_students())
    views = build_dashboard_views(students)
    assert views.insights == build_insight_snapshot(students)
    # cached with the rest of the dashboard, not rebuilt per render
    assert build_dashboard_views(students).insights is views.insights


def test_snapshot_line_for_a_flat_column_reads_none():
    students = [make_student(assessment_score=s, attention=50) for s in (40, 60, 80)]
    snapshot = build_insight_snapshot(students, limit=1)
    assert snapshot.lines == ["Attention correlation with score: 0.0 (none)"]
