from __future__ import annotations

import io
import logging
import time
from pathlib import Path
from typing import Dict, List, Optional, Tuple, Union

import pandas as pd
import requests
from requests.adapters import HTTPAdapter
from urllib3.util.retry import Retry

from student_analytics.config import (
    BASE_DATASET,
    ENRICHED_DATASET,
    HTTP_TIMEOUT_SECONDS,
)
from student_analytics.core.records import Student, students_from_rows

logger = logging.getLogger(__name__)

Source = Union[str, Path]


class DataLoaderError(Exception):
    """Raised when a dataset source is missing, unreadable or not a CSV."""


def _build_retry_session() -> requests.Session:
    """
    Build a requests Session with conservative retries for remote CSV sources.
    """
    session = requests.Session()

    retry = Retry(
        total=3,
        connect=3,
        read=3,
        status=3,
        backoff_factor=0.5,
        status_forcelist=(429, 500, 502, 503, 504),
        allowed_methods=frozenset({"GET"}),
        raise_on_status=False,
    )

    adapter = HTTPAdapter(max_retries=retry)
    session.mount("https://", adapter)
    session.mount("http://", adapter)

    return session


_SESSION: Optional[requests.Session] = None


def _get_session() -> requests.Session:
    global _SESSION
    if _SESSION is None:
        _SESSION = _build_retry_session()
    return _SESSION


def is_remote(source: Source) -> bool:
    return str(source).lower().startswith(("http://", "https://"))


def _fetch_text(url: str, timeout_seconds: int) -> str:
    try:
        resp = _get_session().get(url, timeout=timeout_seconds)
    except requests.RequestException as exc:
        raise DataLoaderError(f"HTTP error while downloading {url}: {exc}") from exc

    if resp.status_code != 200:
        raise DataLoaderError(f"Download of {url} failed with status {resp.status_code}")
    return resp.text


def _read_frame(source: Source, timeout_seconds: int) -> pd.DataFrame:
    # Every column stays text; empty cells stay "" instead of NaN so the
    # record normalizer sees exactly what the file holds.
    read_kwargs = dict(dtype=str, keep_default_na=False, skip_blank_lines=True)

    try:
        if is_remote(source):
            text = _fetch_text(str(source), timeout_seconds)
            return pd.read_csv(io.StringIO(text), **read_kwargs)

        path = Path(source)
        if not path.is_file():
            raise DataLoaderError(f"Dataset not found: {path}")
        return pd.read_csv(path, **read_kwargs)
    except pd.errors.EmptyDataError:
        # Zero bytes or no header: a valid "no records" source.
        return pd.DataFrame()
    except (pd.errors.ParserError, UnicodeDecodeError, OSError) as exc:
        raise DataLoaderError(f"Could not parse CSV from {source}: {exc}") from exc


def read_csv_rows(
    source: Source,
    timeout_seconds: int = HTTP_TIMEOUT_SECONDS,
) -> List[Dict[str, str]]:
    """
    Read a CSV (path or http(s) URL) into an ordered list of raw rows.

    Each row maps column name to its text. Raises DataLoaderError when the
    source is missing or unreadable.
    """
    df = _read_frame(source, timeout_seconds)
    if df.empty:
        return []
    df.columns = [str(c).strip() for c in df.columns]
    return df.to_dict(orient="records")


def load_students_from(source: Source, timeout_seconds: int = HTTP_TIMEOUT_SECONDS) -> Tuple[Student, ...]:
    """
    Load and normalize one source. A failed load is logged and treated as an
    empty dataset.
    """
    try:
        rows = read_csv_rows(source, timeout_seconds=timeout_seconds)
    except DataLoaderError as exc:
        logger.warning("Could not load %s: %s", source, exc)
        return ()

    students = students_from_rows(rows)
    logger.info("Loaded %s students from %s", len(students), source)
    return students


def load_students(
    enriched_source: Optional[Source] = ENRICHED_DATASET,
    base_source: Optional[Source] = BASE_DATASET,
    timeout_seconds: int = HTTP_TIMEOUT_SECONDS,
) -> Tuple[Student, ...]:
    """
    Load the working record set.

    The enriched dataset wins when it loads and has at least one row;
    otherwise the base dataset is used. If both fail the result is empty.
    """
    if enriched_source:
        students = load_students_from(enriched_source, timeout_seconds=timeout_seconds)
        if students:
            return students
        logger.info("Enriched dataset %s unavailable or empty; falling back to %s", enriched_source, base_source)

    if base_source:
        return load_students_from(base_source, timeout_seconds=timeout_seconds)

    return ()


def timed_load_students(
    enriched_source: Optional[Source] = ENRICHED_DATASET,
    base_source: Optional[Source] = BASE_DATASET,
    timeout_seconds: int = HTTP_TIMEOUT_SECONDS,
) -> Tuple[Tuple[Student, ...], float]:
    """
    Convenience helper for UI timing logs.
    """
    t0 = time.perf_counter()
    students = load_students(
        enriched_source=enriched_source,
        base_source=base_source,
        timeout_seconds=timeout_seconds,
    )
    return students, (time.perf_counter() - t0)
