from __future__ import annotations

import locale
import logging
import unicodedata
from dataclasses import dataclass
from enum import Enum
from operator import attrgetter
from typing import Any, List, Optional, Sequence, Tuple

from fuzzywuzzy import fuzz

from student_analytics.config import SEARCH_SCORE_CUTOFF
from student_analytics.core.records import COLUMN_TO_ATTR, NUMERIC_COLUMNS, Student

logger = logging.getLogger(__name__)

# Columns matched by the free-text search box
SEARCH_ATTRS = ["name", "class_name", "persona"]


class QueryEngineError(Exception):
    """Raised when a table query cannot be resolved (e.g. unknown sort column)."""


class SortField(str, Enum):
    """Sortable table columns. Values are the CSV column names."""

    STUDENT_ID = "student_id"
    NAME = "name"
    CLASS = "class"
    COMPREHENSION = "comprehension"
    ATTENTION = "attention"
    FOCUS = "focus"
    RETENTION = "retention"
    ASSESSMENT_SCORE = "assessment_score"
    ENGAGEMENT_TIME = "engagement_time"
    PERSONA = "persona"

    @property
    def attr(self) -> str:
        return COLUMN_TO_ATTR[self.value]

    @property
    def is_numeric(self) -> bool:
        return self.value in NUMERIC_COLUMNS

    @classmethod
    def from_column(cls, column: str) -> "SortField":
        try:
            return cls(str(column).strip())
        except ValueError as exc:
            raise QueryEngineError(f"Unknown sort column: {column!r}") from exc


class SortDirection(str, Enum):
    ASC = "asc"
    DESC = "desc"

    def flipped(self) -> "SortDirection":
        return SortDirection.DESC if self is SortDirection.ASC else SortDirection.ASC


@dataclass(frozen=True)
class SortDirective:
    field: SortField
    direction: SortDirection = SortDirection.ASC


@dataclass(frozen=True)
class QueryResult:
    query: str
    directive: Optional[SortDirective]
    students: Tuple[Student, ...]


def toggle_sort(current: Optional[SortDirective], field: SortField) -> SortDirective:
    """
    Header-click semantics: a new column starts ascending, clicking the
    active column again flips its direction.
    """
    if current is None or current.field is not field:
        return SortDirective(field=field, direction=SortDirection.ASC)
    return SortDirective(field=field, direction=current.direction.flipped())


# ---------------------------------------------------------------------------
# Search
# ---------------------------------------------------------------------------

def _field_score(query: str, text: str) -> int:
    if not text:
        return 0
    # partial_ratio compares the shorter string against windows of the longer
    # one, so it only helps when the query is the shorter side.
    if len(query) <= len(text):
        return fuzz.partial_ratio(query, text)
    return fuzz.ratio(query, text)


def match_score(student: Student, query: str) -> int:
    """Best fuzzy score (0-100) of a normalized query over the searched fields."""
    return max(_field_score(query, getattr(student, attr).lower()) for attr in SEARCH_ATTRS)


def search_students(students: Sequence[Student], query: Optional[str]) -> Tuple[Student, ...]:
    """
    Fuzzy search over name, class and persona.

    A blank query returns the students unchanged. Otherwise only records
    scoring at least SEARCH_SCORE_CUTOFF are kept, best match first; equal
    scores keep their original order.
    """
    needle = (query or "").strip().lower()
    if not needle:
        return tuple(students)

    scored: List[Tuple[int, Student]] = []
    for s in students:
        score = match_score(s, needle)
        if score >= SEARCH_SCORE_CUTOFF:
            scored.append((score, s))

    scored.sort(key=lambda pair: pair[0], reverse=True)
    logger.debug("Search %r matched %s of %s students", needle, len(scored), len(students))
    return tuple(s for _, s in scored)


# ---------------------------------------------------------------------------
# Sort
# ---------------------------------------------------------------------------

def _text_key(value: Any) -> Tuple[str, str, str]:
    """
    Collation key for text columns.

    Accents and case are compared last, so "Émile" sorts with the Es even
    when the process runs under the C locale.
    """
    text = str(value)
    decomposed = unicodedata.normalize("NFKD", text)
    base = "".join(ch for ch in decomposed if not unicodedata.combining(ch)).casefold()
    return locale.strxfrm(base), text.casefold(), text


def sort_students(
    students: Sequence[Student],
    directive: Optional[SortDirective],
) -> Tuple[Student, ...]:
    """
    Order students by one column. Numeric columns compare by value, text
    columns by locale collation. Ties keep their incoming order in both
    directions.
    """
    if directive is None:
        return tuple(students)

    attr = directive.field.attr
    if directive.field.is_numeric:
        key = attrgetter(attr)
    else:
        def key(s: Student) -> Tuple[str, str, str]:
            return _text_key(getattr(s, attr))

    return tuple(sorted(students, key=key, reverse=directive.direction is SortDirection.DESC))


def run_query(
    students: Sequence[Student],
    query: Optional[str] = None,
    directive: Optional[SortDirective] = None,
) -> QueryResult:
    """Search first, then sort the matches."""
    matched = search_students(students, query)
    ordered = sort_students(matched, directive)
    return QueryResult(query=(query or ""), directive=directive, students=ordered)


# ---------------------------------------------------------------------------
# Single-record lookup
# ---------------------------------------------------------------------------

def find_student(students: Sequence[Student], index: int) -> Optional[Student]:
    if 0 <= index < len(students):
        return students[index]
    return None


def find_student_by_id(students: Sequence[Student], student_id: str) -> Optional[Student]:
    """First student with this id (ids are not guaranteed unique)."""
    for s in students:
        if s.student_id == student_id:
            return s
    return None
