"""Violation and ComplianceResult models."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from daritana.compliance.clauses import Severity


class Violation(BaseModel):
    """A failed clause on a compliance check."""

    model_config = ConfigDict(populate_by_name=True, alias_generator=to_camel)

    clause_id: str
    severity: Severity = Severity.MINOR
    description: str = ""
    required_action: str = ""


class ComplianceResult(BaseModel):
    """Scored outcome of evaluating a building against the clause table."""

    compliance_score: int = Field(default=100, ge=0, le=100)
    applicable_clauses: list[str] = Field(default_factory=list)
    """Ids of every clause that applied to the building type."""

    violations: list[Violation] = Field(default_factory=list)
    recommendations: list[str] = Field(default_factory=list)

    @property
    def is_compliant(self) -> bool:
        return not self.violations

    def critical_count(self) -> int:
        return sum(1 for v in self.violations if v.severity == Severity.CRITICAL)
