from __future__ import annotations

from typing import Any

import pytest

from student_analytics.core.records import Student
from student_analytics.core.views import clear_view_caches


def make_student(**overrides: Any) -> Student:
    fields = dict(
        student_id="S1",
        name="Student",
        class_name="A",
        comprehension=60.0,
        attention=60.0,
        focus=60.0,
        retention=60.0,
        assessment_score=60.0,
        engagement_time=30.0,
        persona="General",
    )
    fields.update(overrides)
    return Student(**fields)


@pytest.fixture(autouse=True)
def _fresh_view_caches():
    clear_view_caches()
    yield
    clear_view_caches()
