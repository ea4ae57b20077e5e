"""Clause-level threshold checking and result aggregation."""

from __future__ import annotations

from daritana.compliance.clauses import (
    BuildingParameters,
    Clause,
    RequirementResult,
    evaluate_requirement,
    suggest_action,
)
from daritana.compliance.models import ComplianceResult, Violation
from daritana.compliance.scoring import aggregate_score, rank_violations


def check_clause(
    clause: Clause,
    params: BuildingParameters,
) -> tuple[bool, list[RequirementResult]]:
    """Evaluate every requirement of *clause*.

    A clause passes iff all of its requirements pass; a clause without
    requirements always passes.
    """
    results = [evaluate_requirement(req, params) for req in clause.requirements]
    return all(r.passed for r in results), results


def build_violation(clause: Clause, results: list[RequirementResult]) -> Violation:
    """Turn the failed requirements of a clause into a single violation."""
    failed = [r for r in results if not r.passed]
    detail = " ".join(r.message for r in failed)
    actions = [suggest_action(clause, r) for r in failed]
    return Violation(
        clause_id=clause.id,
        severity=clause.effective_severity,
        description=f"{clause.title}: {detail}" if detail else clause.title,
        required_action=" ".join(actions),
    )


def check_clauses(
    clauses: list[Clause],
    params: BuildingParameters,
) -> ComplianceResult:
    """Check building parameters against the applicable clauses.

    Parameters
    ----------
    clauses:
        Clauses already filtered to the building type.
    params:
        The building parameters to check.

    Returns
    -------
    ComplianceResult
        Score, applicable clause ids, violations ranked most severe first
        and the static recommendations of the failing clauses.
    """
    by_id: dict[str, Clause] = {}
    violations: list[Violation] = []

    for clause in clauses:
        by_id[clause.id] = clause
        passed, results = check_clause(clause, params)
        if not passed:
            violations.append(build_violation(clause, results))

    ranked = rank_violations(violations)

    recommendations: list[str] = []
    for violation in ranked:
        text = by_id[violation.clause_id].recommendation
        if text and text not in recommendations:
            recommendations.append(text)

    return ComplianceResult(
        compliance_score=aggregate_score(ranked),
        applicable_clauses=[c.id for c in clauses],
        violations=ranked,
        recommendations=recommendations,
    )
