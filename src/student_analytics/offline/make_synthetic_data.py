"""
student_analytics/offline/make_synthetic_data.py

Creates the synthetic student dataset read by the dashboard.

Outputs:
  data/synthetic_students.csv   (no persona column; the dashboard infers one)

Run
---
python -m student_analytics.offline.make_synthetic_data --n-students 500
"""

from __future__ import annotations

import argparse
import logging
from pathlib import Path

import numpy as np
import pandas as pd

from student_analytics.config import BASE_DATASET_NAME, DATA_DIR, LOG_LEVEL

logger = logging.getLogger(__name__)

CLASSES = ["A", "B", "C", "D"]

FIRST_NAMES = [
    "Alice", "Ben", "Chloe", "Daniel", "Ella", "Farid", "Grace", "Hiro",
    "Isla", "Jonah", "Kemi", "Liam", "Maya", "Noah", "Olivia", "Priya",
    "Quinn", "Rosa", "Sami", "Tara", "Uma", "Victor", "Wen", "Yusuf", "Zara",
]
LAST_NAMES = [
    "Adams", "Brown", "Chen", "Diaz", "Evans", "Fischer", "Garcia", "Haddad",
    "Ito", "Jones", "Khan", "Lopez", "Moreau", "Nguyen", "Okafor", "Patel",
]


def generate_students(n_students: int = 500, random_state: int = 42) -> pd.DataFrame:
    rng = np.random.default_rng(random_state)

    # --- Latent "engagement" drives attention/focus and, through them, the score
    engagement = rng.normal(0, 1, size=n_students)

    attention = np.clip(65 + 12 * engagement + rng.normal(0, 8, size=n_students), 0, 100)
    focus = np.clip(62 + 10 * engagement + rng.normal(0, 10, size=n_students), 0, 100)
    comprehension = np.clip(rng.normal(68, 14, size=n_students), 0, 100)
    retention = np.clip(0.5 * comprehension + 30 + rng.normal(0, 10, size=n_students), 0, 100)
    engagement_time = np.clip(45 + 15 * engagement + rng.normal(0, 12, size=n_students), 0, None)

    assessment_score = np.clip(
        0.35 * attention
        + 0.25 * comprehension
        + 0.20 * retention
        + 0.10 * focus
        + 0.05 * engagement_time
        + rng.normal(0, 4, size=n_students),      # noise so it's not too clean
        0,
        100,
    )

    names = [
        f"{rng.choice(FIRST_NAMES)} {rng.choice(LAST_NAMES)}"
        for _ in range(n_students)
    ]

    df = pd.DataFrame(
        {
            "student_id": [f"S{1000 + i}" for i in range(n_students)],
            "name": names,
            "class": rng.choice(CLASSES, size=n_students),
            "comprehension": np.round(comprehension, 1),
            "attention": np.round(attention, 1),
            "focus": np.round(focus, 1),
            "retention": np.round(retention, 1),
            "assessment_score": np.round(assessment_score, 1),
            "engagement_time": np.round(engagement_time, 1),
        }
    )

    return df


def parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Generate the synthetic student dataset.")
    parser.add_argument(
        "--n-students",
        type=int,
        default=500,
        help="Number of student rows to generate.",
    )
    parser.add_argument(
        "--random-state",
        type=int,
        default=42,
        help="Random seed for reproducibility.",
    )
    parser.add_argument(
        "--out",
        type=str,
        default=str(DATA_DIR / BASE_DATASET_NAME),
        help="Output CSV path.",
    )
    return parser.parse_args()


def main() -> None:
    logging.basicConfig(level=LOG_LEVEL, format="%(asctime)s %(levelname)s %(name)s: %(message)s")
    args = parse_args()

    if args.n_students <= 0:
        raise ValueError(f"--n-students must be positive, got {args.n_students}")

    out_path = Path(args.out)
    out_path.parent.mkdir(parents=True, exist_ok=True)

    df = generate_students(n_students=args.n_students, random_state=args.random_state)
    df.to_csv(out_path, index=False)

    logger.info("Wrote %s rows to %s", len(df), out_path)
    logger.info("Mean assessment score: %.1f", df["assessment_score"].mean())


if __name__ == "__main__":
    main()
