from __future__ import annotations

import locale
import logging
from typing import Optional, Tuple

import pandas as pd
import plotly.graph_objects as go
import streamlit as st

from student_analytics.config import (
    APP_NAME,
    APP_VERSION,
    BASE_DATASET,
    ENRICHED_DATASET,
    LOG_LEVEL,
)
from student_analytics.core.analytics import skill_profile
from student_analytics.core.data_loader import timed_load_students
from student_analytics.core.query_engine import (
    SortDirection,
    SortDirective,
    SortField,
    find_student,
    toggle_sort,
)
from student_analytics.core.records import Student
from student_analytics.core.views import build_dashboard_views, build_table_view

logger = logging.getLogger(__name__)

# (label, column) of the sortable table headers
TABLE_COLUMNS = [
    ("ID", SortField.STUDENT_ID),
    ("Name", SortField.NAME),
    ("Class", SortField.CLASS),
    ("Score", SortField.ASSESSMENT_SCORE),
    ("Persona", SortField.PERSONA),
]

SORT_STATE_KEY = "sort_directive"
QUERY_STATE_KEY = "search_query"


@st.cache_data(show_spinner=False)
def _load_students(enriched_source: str, base_source: str) -> Tuple[Student, ...]:
    students, elapsed = timed_load_students(enriched_source=enriched_source, base_source=base_source)
    logger.info("Loaded %s students in %.2fs", len(students), elapsed)
    return students


def _render_overview(students: Tuple[Student, ...]) -> None:
    views = build_dashboard_views(students)
    snapshot = views.insights

    col_overview, col_insights = st.columns([1, 2])

    with col_overview:
        st.subheader("Overview")
        st.write(f"Total Students: {snapshot.total_students}")
        if views.overview is not None:
            st.write(f"Avg Score: {views.overview.avg_score}")
            st.write(f"Avg Attention: {views.overview.avg_attention}")
            st.write(f"Avg Focus: {views.overview.avg_focus}")
            st.write(f"Avg Comprehension: {views.overview.avg_comprehension}")

    with col_insights:
        st.subheader("Insights")
        for line in snapshot.lines:
            st.markdown(f"- {line}")
        if snapshot.strongest_class is not None and snapshot.weakest_class is not None:
            st.caption(
                f"Highest class average: {snapshot.strongest_class.class_name} "
                f"({snapshot.strongest_class.avg_score}); lowest: "
                f"{snapshot.weakest_class.class_name} ({snapshot.weakest_class.avg_score})"
            )


def _render_charts(students: Tuple[Student, ...]) -> None:
    views = build_dashboard_views(students)

    st.subheader("Average Assessment Score by Class")
    class_df = pd.DataFrame(
        [{"class": ca.class_name, "avg_score": ca.avg_score} for ca in views.class_averages]
    )
    if class_df.empty:
        st.info("No class data to chart.")
    else:
        st.bar_chart(class_df, x="class", y="avg_score")

    st.subheader("Attention vs Assessment Score")
    scatter_df = pd.DataFrame(
        [{"attention": s.attention, "assessment_score": s.assessment_score} for s in students]
    )
    if not scatter_df.empty:
        st.scatter_chart(scatter_df, x="attention", y="assessment_score")

    if views.persona_counts:
        st.subheader("Personas")
        persona_df = pd.DataFrame(views.persona_counts, columns=["persona", "students"])
        st.bar_chart(persona_df, x="persona", y="students")


def _render_profile(students: Tuple[Student, ...]) -> None:
    if not students:
        return

    st.subheader("Student Profile")
    index = st.selectbox(
        "Select student:",
        options=list(range(len(students))),
        format_func=lambda i: f"{students[i].name} ({students[i].class_name})",
        key="selected_student",
    )
    student = find_student(students, int(index))
    if student is None:
        return

    profile = skill_profile(student)
    labels = [label for label, _ in profile]
    values = [value for _, value in profile]

    fig = go.Figure(
        go.Scatterpolar(
            r=values + values[:1],
            theta=labels + labels[:1],
            fill="toself",
            name=student.name,
        )
    )
    fig.update_layout(polar=dict(radialaxis=dict(visible=True, range=[0, 100])), showlegend=False)
    st.plotly_chart(fig, use_container_width=True)
    st.caption(f"Persona: {student.persona}")


def _header_label(label: str, field: SortField, directive: Optional[SortDirective]) -> str:
    if directive is None or directive.field is not field:
        return label
    return f"{label} {'▲' if directive.direction is SortDirection.ASC else '▼'}"


def _render_table(students: Tuple[Student, ...]) -> None:
    st.subheader("Student Table")

    query = st.text_input("Search name, class, persona...", key=QUERY_STATE_KEY)
    directive: Optional[SortDirective] = st.session_state.get(SORT_STATE_KEY)

    header_cols = st.columns(len(TABLE_COLUMNS))
    for col, (label, field) in zip(header_cols, TABLE_COLUMNS):
        if col.button(_header_label(label, field, directive), key=f"sort_{field.value}"):
            directive = toggle_sort(directive, field)
            st.session_state[SORT_STATE_KEY] = directive
            st.rerun()

    result = build_table_view(students, query or "", directive)

    rows = [
        {label: s.to_row()[field.value] for label, field in TABLE_COLUMNS}
        for s in result.students
    ]
    st.dataframe(pd.DataFrame(rows, columns=[label for label, _ in TABLE_COLUMNS]), use_container_width=True)
    st.caption(f"{len(result.students)} of {len(students)} students")


def run_app() -> None:
    logging.basicConfig(level=LOG_LEVEL, format="%(asctime)s %(levelname)s %(name)s: %(message)s")

    # text columns sort by the user's collation when the platform provides one
    try:
        locale.setlocale(locale.LC_COLLATE, "")
    except locale.Error as exc:
        logger.warning("Could not set collation locale, using the default: %s", exc)

    st.set_page_config(page_title=APP_NAME, page_icon="📊", layout="wide")
    st.title(f"📊 {APP_NAME}")
    st.caption(f"Version {APP_VERSION}")

    students = _load_students(ENRICHED_DATASET, BASE_DATASET)
    if not students:
        st.warning(
            "No student records found. Generate the dataset first: "
            "`python -m student_analytics.offline.make_synthetic_data`."
        )

    _render_overview(students)
    _render_charts(students)
    _render_profile(students)
    _render_table(students)
