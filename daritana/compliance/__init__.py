"""UBBL Compliance Evaluator — check buildings against by-law clauses."""

from daritana.compliance.clauses import Clause, Requirement
from daritana.compliance.engine import ComplianceEngine
from daritana.compliance.models import ComplianceResult, Violation
from daritana.compliance.report import ComplianceReport

__all__ = [
    "Clause",
    "ComplianceEngine",
    "ComplianceReport",
    "ComplianceResult",
    "Requirement",
    "Violation",
]
