from __future__ import annotations

from typing import Any, List

# Skill thresholds: ">= HIGH" is high, "< LOW" is low.
HIGH = 70
LOW = 50

ENGAGED_ACHIEVER = "Engaged Achiever"
INDEPENDENT_LEARNER = "Independent Learner"
ACTIVE_BUT_FORGETFUL = "Active but Forgetful"
NEEDS_GUIDANCE = "Needs Guidance"
GENERAL = "General"

# In rule order; GENERAL is the fallback.
PERSONAS: List[str] = [
    ENGAGED_ACHIEVER,
    INDEPENDENT_LEARNER,
    ACTIVE_BUT_FORGETFUL,
    NEEDS_GUIDANCE,
    GENERAL,
]


def _high(value: float) -> bool:
    return value >= HIGH


def _low(value: float) -> bool:
    return value < LOW


def infer_persona(record: Any) -> str:
    """
    Assign a persona from the fixed rule table, first match wins.

    `record` only needs `comprehension`, `attention`, `focus` and `retention`
    attributes, so a Student or a cluster centroid both work.
    """
    if _high(record.attention) and _high(record.focus) and _high(record.retention):
        return ENGAGED_ACHIEVER
    if _high(record.comprehension) and _low(record.attention):
        return INDEPENDENT_LEARNER
    if _low(record.retention) and _high(record.attention):
        return ACTIVE_BUT_FORGETFUL
    if _low(record.focus) and _low(record.attention):
        return NEEDS_GUIDANCE
    return GENERAL
