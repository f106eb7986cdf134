from __future__ import annotations

import os
from pathlib import Path

# ---------------------------------------------------------------------------
# Project paths
# ---------------------------------------------------------------------------

# Root of the project (repo root)
PROJECT_ROOT = Path(__file__).resolve().parents[2]

# Data directory holding the base and enriched CSV files
DATA_DIR = Path(os.getenv("STUDENT_DATA_DIR", str(PROJECT_ROOT / "data")))

BASE_DATASET_NAME = "synthetic_students.csv"
ENRICHED_DATASET_NAME = "synthetic_students_with_personas.csv"

# ---------------------------------------------------------------------------
# App identity
# ---------------------------------------------------------------------------

APP_NAME = "Student Analytics Dashboard"
APP_VERSION = "0.1.0"

LOG_LEVEL = os.getenv("STUDENT_LOG_LEVEL", "INFO").strip().upper() or "INFO"

# ---------------------------------------------------------------------------
# Dataset sources
#
# Each source may be a filesystem path or an http(s):// URL. The enriched
# dataset (personas from the offline clustering) is tried first; the base
# dataset is the fallback.
# ---------------------------------------------------------------------------

BASE_DATASET = os.getenv("STUDENT_BASE_DATASET", str(DATA_DIR / BASE_DATASET_NAME)).strip()
ENRICHED_DATASET = os.getenv("STUDENT_ENRICHED_DATASET", str(DATA_DIR / ENRICHED_DATASET_NAME)).strip()

# Timeout for remote CSV downloads
HTTP_TIMEOUT_SECONDS = int(os.getenv("STUDENT_HTTP_TIMEOUT_SECONDS", "30"))

# ---------------------------------------------------------------------------
# Analytics constants
# ---------------------------------------------------------------------------

# fuzzywuzzy scores are 0-100; a record is kept when its best field scores at
# least this much against the query.
SEARCH_SCORE_CUTOFF = 75

# Number of skill correlations shown in the insights panel
TOP_CORRELATIONS = 3
