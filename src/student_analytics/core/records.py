from __future__ import annotations

import math
from dataclasses import dataclass, replace
from typing import Any, Dict, Iterable, Mapping, Tuple

from student_analytics.core.personas import infer_persona

# CSV column names, in file order
STUDENT_ID_COL = "student_id"
NAME_COL = "name"
CLASS_COL = "class"
COMPREHENSION_COL = "comprehension"
ATTENTION_COL = "attention"
FOCUS_COL = "focus"
RETENTION_COL = "retention"
SCORE_COL = "assessment_score"
ENGAGEMENT_COL = "engagement_time"
PERSONA_COL = "persona"

COLUMNS = [
    STUDENT_ID_COL,
    NAME_COL,
    CLASS_COL,
    COMPREHENSION_COL,
    ATTENTION_COL,
    FOCUS_COL,
    RETENTION_COL,
    SCORE_COL,
    ENGAGEMENT_COL,
    PERSONA_COL,
]

NUMERIC_COLUMNS = [
    COMPREHENSION_COL,
    ATTENTION_COL,
    FOCUS_COL,
    RETENTION_COL,
    SCORE_COL,
    ENGAGEMENT_COL,
]

# `class` is a keyword, so the attribute differs from the column name.
COLUMN_TO_ATTR: Dict[str, str] = {c: c for c in COLUMNS}
COLUMN_TO_ATTR[CLASS_COL] = "class_name"


@dataclass(frozen=True)
class Student:
    """
    One row of the dataset after normalization.

    Frozen so a tuple of students can be used as a cache key for the derived
    views.
    """
    student_id: str
    name: str
    class_name: str
    comprehension: float
    attention: float
    focus: float
    retention: float
    assessment_score: float
    engagement_time: float
    persona: str

    def to_row(self) -> Dict[str, Any]:
        return {col: getattr(self, attr) for col, attr in COLUMN_TO_ATTR.items()}


def _to_text(value: Any) -> str:
    if value is None:
        return ""
    return str(value)


def _to_number(value: Any) -> float:
    """
    Lenient numeric parse. Missing, blank, unparseable or non-finite input
    becomes 0.0.
    """
    if value is None or isinstance(value, bool):
        return 0.0
    if isinstance(value, (int, float)):
        number = float(value)
    else:
        text = str(value).strip()
        if not text:
            return 0.0
        try:
            number = float(text)
        except (TypeError, ValueError):
            return 0.0
    if math.isnan(number) or math.isinf(number):
        return 0.0
    return number


def student_from_row(row: Mapping[str, Any]) -> Student:
    """
    Build a fully populated Student from one raw row.

    Missing string columns become "" and missing or invalid numbers become 0.
    An empty persona is filled in by `infer_persona`; any other value is kept
    verbatim.
    """
    fields: Dict[str, Any] = {}
    for col, attr in COLUMN_TO_ATTR.items():
        raw = row.get(col)
        if col in NUMERIC_COLUMNS:
            fields[attr] = _to_number(raw)
        else:
            fields[attr] = _to_text(raw)

    student = Student(**fields)
    if student.persona == "":
        student = replace(student, persona=infer_persona(student))
    return student


def students_from_rows(rows: Iterable[Mapping[str, Any]]) -> Tuple[Student, ...]:
    return tuple(student_from_row(row) for row in rows)
