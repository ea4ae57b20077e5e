"""ComplianceReport model with plain-text and Markdown rendering."""

from __future__ import annotations

import uuid
from datetime import datetime, timedelta, timezone
from typing import Optional

from pydantic import BaseModel, Field

from daritana.compliance.clauses import Severity
from daritana.compliance.models import Violation
from daritana.config import REPORT_VALIDITY_DAYS


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


def _new_report_id() -> str:
    return f"report-{uuid.uuid4().hex[:12]}"


class ComplianceReport(BaseModel):
    """Snapshot of a compliance check, valid for a fixed window."""

    id: str = Field(default_factory=_new_report_id)
    check_id: str = ""
    project_id: str = ""
    generated_date: datetime = Field(default_factory=_utc_now)
    compliance_score: int = Field(default=100, ge=0, le=100)
    total_clauses: int = 0
    """Size of the clause table at generation time."""

    applicable_clauses: int = 0
    """Number of clauses that applied to the checked building."""

    violations: list[Violation] = Field(default_factory=list)
    recommendations: list[str] = Field(default_factory=list)
    certified_by: Optional[str] = None
    valid_until: Optional[datetime] = None

    @classmethod
    def validity_end(cls, generated: datetime) -> datetime:
        return generated + timedelta(days=REPORT_VALIDITY_DAYS)

    def is_valid(self, at: datetime | None = None) -> bool:
        """True while *at* (default now) is before ``valid_until``."""
        if self.valid_until is None:
            return False
        return (at or _utc_now()) < self.valid_until

    def to_text(self) -> str:
        """Render the plain-text compliance report document."""
        valid = self.valid_until.strftime("%Y-%m-%d") if self.valid_until else "N/A"
        lines: list[str] = [
            "UBBL COMPLIANCE REPORT",
            "======================",
            f"Report ID: {self.id}",
            f"Project ID: {self.project_id}",
            f"Generated: {self.generated_date.strftime('%Y-%m-%d')}",
            f"Valid Until: {valid}",
        ]
        if self.certified_by:
            lines.append(f"Certified By: {self.certified_by}")
        lines.extend([
            "",
            f"COMPLIANCE SCORE: {self.compliance_score}%",
            f"Total UBBL Clauses: {self.total_clauses}",
            f"Applicable Clauses: {self.applicable_clauses}",
            "",
            f"VIOLATIONS ({len(self.violations)}):",
        ])
        for v in self.violations:
            lines.append(f"- {v.clause_id} [{Severity(v.severity).value}]: {v.description}")
        lines.append("")
        lines.append("RECOMMENDATIONS:")
        for r in self.recommendations:
            lines.append(f"- {r}")
        lines.append("")
        return "\n".join(lines)

    def to_markdown(self) -> str:
        """Render the report as a Markdown document."""
        lines: list[str] = []

        lines.append(f"# UBBL Compliance Report — {self.project_id or 'Unknown'}")
        lines.append("")
        lines.append(f"**Report:** `{self.id}`")
        lines.append(f"**Score:** {self.compliance_score}%")
        lines.append(f"**Generated:** {self.generated_date.strftime('%Y-%m-%d %H:%M UTC')}")
        if self.valid_until:
            lines.append(f"**Valid Until:** {self.valid_until.strftime('%Y-%m-%d')}")
        if self.certified_by:
            lines.append(f"**Certified By:** {self.certified_by}")
        lines.append("")
        lines.append(
            f"**Clauses:** {self.applicable_clauses} applicable of {self.total_clauses}"
        )
        lines.append("")

        if self.violations:
            lines.append("## Violations")
            lines.append("")
            lines.append("| Clause | Severity | Description | Required Action |")
            lines.append("|--------|----------|-------------|-----------------|")
            for v in self.violations:
                desc = v.description.replace("|", "\\|")
                action = v.required_action.replace("|", "\\|")
                lines.append(
                    f"| {v.clause_id} | {Severity(v.severity).value.upper()} | {desc} | {action} |"
                )
            lines.append("")

        if self.recommendations:
            lines.append("## Recommendations")
            lines.append("")
            for rec in self.recommendations:
                lines.append(f"- {rec}")
            lines.append("")

        return "\n".join(lines)
