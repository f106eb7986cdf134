from __future__ import annotations

import math

import pytest

from student_analytics.core.analytics import (
    ClassAverage,
    average_score_by_class,
    compute_correlation,
    compute_overview,
    persona_counts,
    rank_skill_correlations,
    round_half_up,
    skill_profile,
)

from conftest import make_student


# ---------------------------------------------------------------------------
# compute_correlation
# ---------------------------------------------------------------------------

def test_correlation_with_itself_is_one():
    a = [3.0, 7.0, 1.0, 9.0, 4.0]
    assert compute_correlation(a, a) == pytest.approx(1.0)


def test_perfect_negative_correlation():
    assert compute_correlation([1, 2, 3, 4], [8, 6, 4, 2]) == pytest.approx(-1.0)


def test_constant_sequence_gives_zero():
    assert compute_correlation([1, 2, 3, 4], [5, 5, 5, 5]) == 0
    assert compute_correlation([5, 5, 5, 5], [1, 2, 3, 4]) == 0


def test_empty_sequences_give_zero():
    assert compute_correlation([], []) == 0
    assert compute_correlation([1, 2, 3], []) == 0


def test_only_paired_prefix_is_used():
    # the trailing 100 has no partner and must be ignored
    assert compute_correlation([1, 2, 3, 100], [2, 4, 6]) == pytest.approx(1.0)


def test_correlation_is_bounded():
    a = [12, 45, 33, 80, 61, 7, 90, 54]
    b = [30, 41, 20, 77, 65, 15, 70, 60]
    r = compute_correlation(a, b)
    assert -1.0 <= r <= 1.0
    assert r > 0.8


def test_overflowing_sums_give_zero():
    assert compute_correlation([1e300, -1e300], [1e300, -1e300]) == 0.0


# ---------------------------------------------------------------------------
# rank_skill_correlations
# ---------------------------------------------------------------------------

def _ranking_students():
    scores = [10, 20, 30, 40, 50, 60]
    attention = [10, 20, 30, 40, 50, 60]       # r = 1.0
    focus = [50, 50, 50, 50, 50, 50]           # r = 0 (no variance)
    comprehension = [60, 50, 40, 30, 20, 10]   # r = -1.0
    retention = [10, 20, 30, 40, 60, 50]       # r = 1650 / 1750 -> 0.94
    engagement = [30, 10, 20, 50, 40, 60]      # r = 1350 / 1750 -> 0.77
    return [
        make_student(
            student_id=f"S{i}",
            assessment_score=scores[i],
            attention=attention[i],
            focus=focus[i],
            comprehension=comprehension[i],
            retention=retention[i],
            engagement_time=engagement[i],
        )
        for i in range(6)
    ]


def test_ranking_orders_by_absolute_strength_and_keeps_top_three():
    ranked = rank_skill_correlations(_ranking_students())
    assert [c.skill for c in ranked] == ["Attention", "Comprehension", "Retention"]
    assert [c.r for c in ranked] == [1.0, -1.0, 0.94]


def test_ranking_without_limit_returns_all_skills():
    ranked = rank_skill_correlations(_ranking_students(), limit=None)
    assert [c.skill for c in ranked] == ["Attention", "Comprehension", "Retention", "Engagement", "Focus"]
    assert [c.r for c in ranked] == [1.0, -1.0, 0.94, 0.77, 0.0]
    assert ranked[3].field == "engagement_time"


def test_ranking_of_empty_set_is_all_zero():
    ranked = rank_skill_correlations([])
    assert [c.skill for c in ranked] == ["Attention", "Focus", "Comprehension"]
    assert all(c.r == 0 for c in ranked)


def test_ranking_survives_huge_values():
    students = [
        make_student(student_id="S1", attention=1e300, assessment_score=1e300),
        make_student(student_id="S2", attention=-1e300, assessment_score=-1e300),
    ]
    ranked = rank_skill_correlations(students, limit=None)
    attention = next(c for c in ranked if c.skill == "Attention")
    assert attention.r == 0.0


# ---------------------------------------------------------------------------
# compute_overview
# ---------------------------------------------------------------------------

def test_overview_of_empty_set_is_none():
    assert compute_overview([]) is None


def test_overview_averages_are_rounded_to_one_place():
    students = [
        make_student(assessment_score=80, attention=70, focus=60, comprehension=50, retention=90, engagement_time=10),
        make_student(assessment_score=61, attention=71, focus=60, comprehension=50, retention=90, engagement_time=20),
        make_student(assessment_score=70, attention=71, focus=60, comprehension=50, retention=90, engagement_time=33),
    ]
    overview = compute_overview(students)
    assert overview is not None
    assert overview.total_students == 3
    assert overview.avg_score == 70.3
    assert overview.avg_attention == 70.7
    assert overview.avg_focus == 60.0
    assert overview.avg_comprehension == 50.0
    assert overview.avg_retention == 90.0
    assert overview.avg_engagement == 21.0


def test_zero_valued_students_pull_averages_down():
    students = [make_student(assessment_score=80), make_student(assessment_score=0)]
    assert compute_overview(students).avg_score == 40.0


# ---------------------------------------------------------------------------
# average_score_by_class
# ---------------------------------------------------------------------------

def test_class_averages_in_first_seen_order():
    students = [
        make_student(class_name="A", assessment_score=80),
        make_student(class_name="B", assessment_score=60),
        make_student(class_name="A", assessment_score=40),
    ]
    assert average_score_by_class(students) == [
        ClassAverage(class_name="A", avg_score=60.0, count=2),
        ClassAverage(class_name="B", avg_score=60.0, count=1),
    ]


def test_class_labels_are_not_normalized():
    students = [
        make_student(class_name="A", assessment_score=90),
        make_student(class_name="a", assessment_score=50),
        make_student(class_name="A ", assessment_score=70),
    ]
    result = average_score_by_class(students)
    assert [ca.class_name for ca in result] == ["A", "a", "A "]


def test_class_averages_of_empty_set():
    assert average_score_by_class([]) == []


# ---------------------------------------------------------------------------
# Misc helpers
# ---------------------------------------------------------------------------

def test_persona_counts_in_first_seen_order():
    students = [
        make_student(persona="General"),
        make_student(persona="Needs Guidance"),
        make_student(persona="General"),
    ]
    assert persona_counts(students) == [("General", 2), ("Needs Guidance", 1)]
    assert persona_counts([]) == []


def test_skill_profile_axes():
    s = make_student(comprehension=1, attention=2, focus=3, retention=4, engagement_time=5)
    assert skill_profile(s) == [
        ("Comprehension", 1),
        ("Attention", 2),
        ("Focus", 3),
        ("Retention", 4),
        ("Engagement", 5),
    ]


@pytest.mark.parametrize(
    "value, digits, expected",
    [
        (0.125, 2, 0.13),
        (-0.125, 2, -0.12),
        (70.25, 1, 70.3),
        (2.0, 1, 2.0),
    ],
)
def test_round_half_up(value, digits, expected):
    assert round_half_up(value, digits) == expected


@pytest.mark.parametrize("value", [1e308, -1e308, math.inf, -math.inf])
def test_round_half_up_passes_through_values_it_cannot_scale(value):
    assert round_half_up(value, 1) == value


def test_round_half_up_keeps_nan():
    assert math.isnan(round_half_up(math.nan, 2))


def test_overview_with_overflowing_scores_does_not_raise():
    students = [make_student(assessment_score=1e308), make_student(assessment_score=1e308)]
    overview = compute_overview(students)
    assert overview.avg_score == math.inf
