"""ComplianceManager — lifecycle of compliance checks and reports."""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from pathlib import Path
from typing import Any

from pydantic import ValidationError

from daritana.compliance.engine import ComplianceEngine
from daritana.compliance.models import Violation
from daritana.compliance.report import ComplianceReport
from daritana.compliance.scoring import RESOLVE_CREDIT, clamp_score, score_delta
from daritana.config import SYSTEM_REVIEWER
from daritana.exceptions import (
    CheckNotFoundError,
    InvalidInputError,
    ReportNotFoundError,
    ViolationNotFoundError,
)
from daritana.lifecycle.exporter import ReportExporter
from daritana.lifecycle.locking import KeyedLockManager
from daritana.lifecycle.models import CheckRequest, CheckStatus, ComplianceCheck
from daritana.lifecycle.store import CheckRepository, InMemoryCheckRepository

logger = logging.getLogger(__name__)


def validate_model(model: Any, data: Any) -> Any:
    """Validate *data* into *model*, converting pydantic errors."""
    if isinstance(data, model):
        return data
    try:
        return model.model_validate(data)
    except ValidationError as e:
        raise InvalidInputError(f"Invalid {model.__name__}: {e}") from e


def parse_status(status: CheckStatus | str) -> CheckStatus:
    try:
        return CheckStatus(status)
    except ValueError:
        raise InvalidInputError(
            f"Unknown status {status!r}; expected one of "
            f"{', '.join(s.value for s in CheckStatus)}."
        ) from None


class ComplianceManager:
    """Run compliance checks and manage their violations and reports.

    Every mutation of an existing check or report runs under a
    per-identifier lock so that concurrent edits to the same record are
    serialised.  Report
    rendering and file I/O happen outside those locks.

    Parameters
    ----------
    engine:
        The compliance engine used for evaluation and clause lookups.
    repository:
        Storage for checks and reports.  Defaults to an in-memory store.
    exporter:
        Report renderer.  Defaults to :class:`ReportExporter`.
    """

    def __init__(
        self,
        engine: ComplianceEngine | None = None,
        repository: CheckRepository | None = None,
        exporter: ReportExporter | None = None,
    ) -> None:
        self.engine = engine or ComplianceEngine()
        self.repository = repository or InMemoryCheckRepository()
        self.exporter = exporter or ReportExporter()
        self.locks = KeyedLockManager()

    # -- Checks ---------------------------------------------------------------

    def run_compliance_check(self, params: CheckRequest | dict[str, Any]) -> ComplianceCheck:
        """Evaluate a project's building and store the resulting check.

        The initial status is ``failed`` when the evaluation found
        violations and ``completed`` otherwise.

        Raises
        ------
        InvalidInputError
            If the request is malformed or the building parameters are
            out of range.
        """
        request = validate_model(CheckRequest, params)
        result = self.engine.check_compliance(
            request.building_type,
            request.building_height,
            request.floor_area,
            request.occupancy,
        )

        check = ComplianceCheck(
            project_id=request.project_id,
            project_name=request.project_name,
            building_type=request.building_type,
            building_height=request.building_height,
            floor_area=request.floor_area,
            occupancy=request.occupancy,
            result=result,
            reviewer=SYSTEM_REVIEWER,
        )
        check.status = check.derive_status()
        # Fresh id: no other caller can reference it yet
        self.repository.save_check(check)

        logger.info(
            "Compliance check %s for project %s: score %d, %d violation(s), %s",
            check.id,
            check.project_id,
            result.compliance_score,
            len(result.violations),
            check.status.value,
        )
        return check

    def get_check(self, check_id: str) -> ComplianceCheck:
        """Return a check or raise CheckNotFoundError."""
        check = self.repository.get_check(check_id)
        if check is None:
            raise CheckNotFoundError(check_id)
        return check

    def list_checks(
        self,
        project_id: str | None = None,
        status: CheckStatus | str | None = None,
    ) -> list[ComplianceCheck]:
        """List checks, optionally filtered by project and status."""
        wanted = parse_status(status) if status else None
        result: list[ComplianceCheck] = []
        for check in self.repository.list_checks():
            if project_id and check.project_id != project_id:
                continue
            if wanted and check.status != wanted:
                continue
            result.append(check)
        return result

    def update_check_status(self, check_id: str, status: CheckStatus | str) -> ComplianceCheck:
        """Manually set a check's workflow status (reviewer override)."""
        new_status = parse_status(status)

        with self.locks.hold(check_id):
            check = self.get_check(check_id)
            old = check.status
            check.status = new_status
            self.repository.save_check(check)

        logger.info("Check %s status %s -> %s", check_id, old.value, new_status.value)
        return check

    def assign_reviewer(
        self,
        check_id: str,
        reviewer: str,
        comments: str | None = None,
    ) -> ComplianceCheck:
        """Record the reviewer of a check and optional review comments."""
        with self.locks.hold(check_id):
            check = self.get_check(check_id)
            check.reviewer = reviewer
            if comments is not None:
                check.comments = comments
            self.repository.save_check(check)

        logger.info("Check %s assigned to reviewer %s", check_id, reviewer)
        return check

    # -- Violations -----------------------------------------------------------

    def add_violation(
        self,
        check_id: str,
        violation: Violation | dict[str, Any],
    ) -> ComplianceCheck:
        """Append a violation, deduct its score and mark the check failed.

        A violation whose clause is not among the check's applicable
        clauses is accepted with a data-integrity warning.

        Raises
        ------
        CheckNotFoundError
            If *check_id* does not exist.
        """
        violation = validate_model(Violation, violation)

        with self.locks.hold(check_id):
            check = self.get_check(check_id)
            if violation.clause_id not in check.result.applicable_clauses:
                logger.warning(
                    "Data integrity: violation on clause %s is outside the "
                    "applicable clauses of check %s",
                    violation.clause_id,
                    check_id,
                )
            result = check.result
            result.violations.append(violation)
            result.compliance_score = clamp_score(
                result.compliance_score - score_delta(violation.severity)
            )
            check.status = CheckStatus.FAILED
            self.repository.save_check(check)

        logger.info(
            "Added %s violation %s to check %s (score %d)",
            violation.severity.value,
            violation.clause_id,
            check_id,
            check.result.compliance_score,
        )
        return check

    def resolve_violation(self, check_id: str, clause_id: str) -> ComplianceCheck:
        """Remove the violation(s) for *clause_id* and restore score.

        The score rises by ``RESOLVE_CREDIT`` (capped at 100).  The check
        is marked ``completed`` when at most one violation remains.  That
        threshold is inherited from the existing workflow and still awaits
        product confirmation; a single outstanding violation may be meant
        to keep the check ``failed``.

        Raises
        ------
        CheckNotFoundError
            If *check_id* does not exist.
        ViolationNotFoundError
            If the check has no violation for *clause_id*.
        """
        with self.locks.hold(check_id):
            check = self.get_check(check_id)
            result = check.result
            remaining = [v for v in result.violations if v.clause_id != clause_id]
            if len(remaining) == len(result.violations):
                raise ViolationNotFoundError(clause_id)

            result.violations = remaining
            result.compliance_score = clamp_score(result.compliance_score + RESOLVE_CREDIT)
            # TODO: confirm with product whether one outstanding violation
            # should still count as completed.
            check.status = CheckStatus.COMPLETED if len(remaining) <= 1 else CheckStatus.FAILED
            self.repository.save_check(check)

        logger.info(
            "Resolved violation %s on check %s (score %d, %s)",
            clause_id,
            check_id,
            check.result.compliance_score,
            check.status.value,
        )
        return check

    # -- Reports --------------------------------------------------------------

    def generate_report(self, check_id: str) -> ComplianceReport:
        """Snapshot a check into a report valid for 90 days.

        Raises
        ------
        CheckNotFoundError
            If *check_id* does not exist; no report is created.
        """
        with self.locks.hold(check_id):
            check = self.get_check(check_id)

        generated = datetime.now(timezone.utc)
        result = check.result
        report = ComplianceReport(
            check_id=check.id,
            project_id=check.project_id,
            generated_date=generated,
            compliance_score=result.compliance_score,
            total_clauses=self.engine.total_clauses(),
            applicable_clauses=len(result.applicable_clauses),
            violations=[v.model_copy() for v in result.violations],
            recommendations=list(result.recommendations),
            valid_until=ComplianceReport.validity_end(generated),
        )
        self.repository.save_report(report)

        logger.info("Generated report %s for check %s", report.id, check_id)
        return report

    def get_report(self, report_id: str) -> ComplianceReport:
        """Return a report or raise ReportNotFoundError."""
        report = self.repository.get_report(report_id)
        if report is None:
            raise ReportNotFoundError(report_id)
        return report

    def list_reports(self, project_id: str | None = None) -> list[ComplianceReport]:
        reports = self.repository.list_reports()
        if project_id:
            reports = [r for r in reports if r.project_id == project_id]
        return reports

    def certify_report(self, report_id: str, certifier: str) -> ComplianceReport:
        """Record the professional certifying a report."""
        with self.locks.hold(report_id):
            report = self.get_report(report_id)
            report.certified_by = certifier
            self.repository.save_report(report)

        logger.info("Report %s certified by %s", report_id, certifier)
        return report

    def export_report(self, report_id: str, fmt: str = "text") -> bytes:
        """Render a stored report as a downloadable artifact.

        Raises
        ------
        ReportNotFoundError
            If *report_id* does not exist.
        InvalidInputError
            If *fmt* is not a supported format.
        """
        report = self.get_report(report_id)
        return self.exporter.export(report, fmt)

    def write_report(self, report_id: str, path: str | Path, fmt: str = "text") -> Path:
        """Render a stored report and write it to *path*."""
        report = self.get_report(report_id)
        return self.exporter.write(report, path, fmt)
