"""Compliance scoring: point values and aggregation of violations."""

from __future__ import annotations

from typing import Iterable

from daritana.compliance.clauses import Severity
from daritana.compliance.models import Violation

MAX_SCORE = 100
MIN_SCORE = 0

# Points deducted per violation
CRITICAL_PENALTY = 15
STANDARD_PENALTY = 5

# Points restored when a violation is resolved
RESOLVE_CREDIT = 10


def score_delta(severity: Severity | str) -> int:
    """Return the points a violation of *severity* deducts."""
    return CRITICAL_PENALTY if Severity(severity) == Severity.CRITICAL else STANDARD_PENALTY


def clamp_score(value: float) -> int:
    """Clamp a score into ``[MIN_SCORE, MAX_SCORE]``."""
    return int(max(MIN_SCORE, min(MAX_SCORE, value)))


def aggregate_score(violations: Iterable[Violation]) -> int:
    """Start from ``MAX_SCORE`` and deduct per violation, floored at zero."""
    total = sum(score_delta(v.severity) for v in violations)
    return clamp_score(MAX_SCORE - total)


def rank_violations(violations: Iterable[Violation]) -> list[Violation]:
    """Order violations most severe first, keeping input order within a tier."""
    return sorted(violations, key=lambda v: Severity(v.severity).rank)
