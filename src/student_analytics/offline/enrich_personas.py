"""
student_analytics/offline/enrich_personas.py

Offline analysis behind the dashboard's enriched dataset:
  1) regress assessment_score on the skill columns (reported, not saved)
  2) cluster students on the four cognitive skills with KMeans
  3) name each cluster by running the persona rules on its centroid
  4) write the base rows plus `persona` and `cluster` columns

Run
---
python -m student_analytics.offline.enrich_personas
python -m student_analytics.offline.enrich_personas --data data/synthetic_students.csv --n-clusters 5
"""

from __future__ import annotations

import argparse
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, List

import pandas as pd
from sklearn.cluster import KMeans
from sklearn.linear_model import LinearRegression
from sklearn.preprocessing import StandardScaler

from student_analytics.config import (
    BASE_DATASET_NAME,
    DATA_DIR,
    ENRICHED_DATASET_NAME,
    LOG_LEVEL,
)
from student_analytics.core.analytics import SKILL_FIELDS
from student_analytics.core.personas import infer_persona

logger = logging.getLogger(__name__)

CLUSTER_FEATURES = ["comprehension", "attention", "focus", "retention"]
REGRESSION_FEATURES = [attr for _, attr in SKILL_FIELDS]
TARGET_COL = "assessment_score"


@dataclass(frozen=True)
class Centroid:
    comprehension: float
    attention: float
    focus: float
    retention: float


@dataclass(frozen=True)
class RegressionSummary:
    coefficients: Dict[str, float]
    intercept: float
    r2: float


def _numeric_frame(df: pd.DataFrame, columns: List[str]) -> pd.DataFrame:
    missing = [c for c in columns if c not in df.columns]
    if missing:
        raise ValueError(f"Missing required columns: {missing}")

    X = df[columns].copy()
    for c in columns:
        X[c] = pd.to_numeric(X[c], errors="coerce")
    # Same lenient policy as the dashboard: unparseable values count as 0.
    return X.fillna(0.0)


def fit_skill_regression(df: pd.DataFrame) -> RegressionSummary:
    """
    Ordinary least squares of assessment_score on the five skill columns.
    """
    X = _numeric_frame(df, REGRESSION_FEATURES)
    y = _numeric_frame(df, [TARGET_COL])[TARGET_COL]

    model = LinearRegression()
    model.fit(X, y)

    return RegressionSummary(
        coefficients={c: float(v) for c, v in zip(REGRESSION_FEATURES, model.coef_)},
        intercept=float(model.intercept_),
        r2=float(model.score(X, y)),
    )


def assign_cluster_personas(
    df: pd.DataFrame,
    n_clusters: int = 5,
    random_state: int = 42,
) -> pd.DataFrame:
    """
    Return a copy of df with `cluster` and `persona` columns.

    Clustering runs on standardized skills; centroids are mapped back to the
    original 0-100 units before the persona rules are applied, so two clusters
    may share a persona.
    """
    if len(df) < n_clusters:
        raise ValueError(f"Need at least {n_clusters} rows to build {n_clusters} clusters, got {len(df)}.")

    X = _numeric_frame(df, CLUSTER_FEATURES)

    scaler = StandardScaler()
    X_scaled = scaler.fit_transform(X)

    km = KMeans(n_clusters=n_clusters, random_state=random_state, n_init=10)
    labels = km.fit_predict(X_scaled)

    centers = scaler.inverse_transform(km.cluster_centers_)
    cluster_persona: Dict[int, str] = {}
    for idx, center in enumerate(centers):
        centroid = Centroid(**{c: float(v) for c, v in zip(CLUSTER_FEATURES, center)})
        cluster_persona[idx] = infer_persona(centroid)
        logger.info("Cluster %s centroid=%s -> %s", idx, centroid, cluster_persona[idx])

    out = df.copy()
    out["cluster"] = labels.astype(int)
    out["persona"] = [cluster_persona[int(label)] for label in labels]
    return out


def parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Enrich the student dataset with cluster personas.")
    parser.add_argument(
        "--data",
        type=str,
        default=str(DATA_DIR / BASE_DATASET_NAME),
        help="Path to the base CSV dataset.",
    )
    parser.add_argument(
        "--out",
        type=str,
        default=str(DATA_DIR / ENRICHED_DATASET_NAME),
        help="Path of the enriched CSV to write.",
    )
    parser.add_argument(
        "--n-clusters",
        type=int,
        default=5,
        help="Number of KMeans clusters.",
    )
    parser.add_argument(
        "--random-state",
        type=int,
        default=42,
        help="Random seed for reproducibility.",
    )
    return parser.parse_args()


def main() -> None:
    logging.basicConfig(level=LOG_LEVEL, format="%(asctime)s %(levelname)s %(name)s: %(message)s")
    args = parse_args()

    data_path = Path(args.data)
    if not data_path.exists():
        raise FileNotFoundError(
            f"Base dataset not found at {data_path}. "
            f"Generate it first: python -m student_analytics.offline.make_synthetic_data"
        )

    df = pd.read_csv(data_path)

    summary = fit_skill_regression(df)
    logger.info("Regression R2=%.3f intercept=%.2f", summary.r2, summary.intercept)
    for feature, coef in summary.coefficients.items():
        logger.info("  %s: %+.3f", feature, coef)

    enriched = assign_cluster_personas(df, n_clusters=args.n_clusters, random_state=args.random_state)

    out_path = Path(args.out)
    out_path.parent.mkdir(parents=True, exist_ok=True)
    enriched.to_csv(out_path, index=False)

    logger.info("Wrote %s rows to %s", len(enriched), out_path)
    logger.info("Persona counts: %s", enriched["persona"].value_counts().to_dict())


if __name__ == "__main__":
    main()
