"""Repositories holding compliance checks and reports.

The lifecycle manager only talks to :class:`CheckRepository`; pick the
in-memory implementation for tests and ephemeral use, or the JSON file
implementation to persist under ``.daritana/compliance.json``.
"""

from __future__ import annotations

import json
import logging
import threading
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Any

from pydantic import ValidationError

from daritana.compliance.report import ComplianceReport
from daritana.lifecycle.models import ComplianceCheck

logger = logging.getLogger(__name__)


def _record_id(record: Any) -> Any:
    return record.get("id") if isinstance(record, dict) else record


class CheckRepository(ABC):
    """Storage interface for checks and reports.

    Implementations return copies: mutating a returned record has no
    effect until it is passed back to a ``save_*`` method.
    """

    @abstractmethod
    def get_check(self, check_id: str) -> ComplianceCheck | None: ...

    @abstractmethod
    def save_check(self, check: ComplianceCheck) -> None: ...

    @abstractmethod
    def list_checks(self) -> list[ComplianceCheck]: ...

    @abstractmethod
    def get_report(self, report_id: str) -> ComplianceReport | None: ...

    @abstractmethod
    def save_report(self, report: ComplianceReport) -> None: ...

    @abstractmethod
    def list_reports(self) -> list[ComplianceReport]: ...


class InMemoryCheckRepository(CheckRepository):
    """Process-local repository backed by dicts (insertion ordered)."""

    def __init__(self) -> None:
        self._checks: dict[str, ComplianceCheck] = {}
        self._reports: dict[str, ComplianceReport] = {}
        self._lock = threading.Lock()

    def get_check(self, check_id: str) -> ComplianceCheck | None:
        with self._lock:
            check = self._checks.get(check_id)
            return check.model_copy(deep=True) if check else None

    def save_check(self, check: ComplianceCheck) -> None:
        with self._lock:
            self._checks[check.id] = check.model_copy(deep=True)

    def list_checks(self) -> list[ComplianceCheck]:
        with self._lock:
            return [c.model_copy(deep=True) for c in self._checks.values()]

    def get_report(self, report_id: str) -> ComplianceReport | None:
        with self._lock:
            report = self._reports.get(report_id)
            return report.model_copy(deep=True) if report else None

    def save_report(self, report: ComplianceReport) -> None:
        with self._lock:
            self._reports[report.id] = report.model_copy(deep=True)

    def list_reports(self) -> list[ComplianceReport]:
        with self._lock:
            return [r.model_copy(deep=True) for r in self._reports.values()]


class JsonCheckRepository(CheckRepository):
    """Repository persisted to a single JSON file.

    Parameters
    ----------
    path:
        JSON file holding ``{"checks": [...], "reports": [...]}``.
        Parent directories are created on first write.
    """

    def __init__(self, path: str | Path) -> None:
        self.path = Path(path)
        self._lock = threading.Lock()

    def _load(self) -> dict[str, list[dict[str, Any]]]:
        """Load raw records from disk."""
        if not self.path.is_file():
            return {"checks": [], "reports": []}
        try:
            data = json.loads(self.path.read_text(encoding="utf-8"))
        except (json.JSONDecodeError, OSError):
            logger.warning("Could not read compliance store %s; starting empty", self.path, exc_info=True)
            return {"checks": [], "reports": []}
        checks = data.get("checks", []) if isinstance(data, dict) else None
        reports = data.get("reports", []) if isinstance(data, dict) else None
        if not isinstance(checks, list) or not isinstance(reports, list):
            logger.warning("Compliance store %s has an unexpected layout; starting empty", self.path)
            return {"checks": [], "reports": []}
        return {"checks": list(checks), "reports": list(reports)}

    def _save(self, data: dict[str, list[dict[str, Any]]]) -> None:
        """Persist raw records to disk."""
        self.path.parent.mkdir(parents=True, exist_ok=True)
        tmp = self.path.with_suffix(self.path.suffix + ".tmp")
        tmp.write_text(json.dumps(data, indent=2), encoding="utf-8")
        tmp.replace(self.path)

    @staticmethod
    def _upsert(records: list[dict[str, Any]], record: dict[str, Any]) -> None:
        for i, existing in enumerate(records):
            if isinstance(existing, dict) and existing.get("id") == record["id"]:
                records[i] = record
                return
        records.append(record)

    def _parse_checks(self, records: list[dict[str, Any]]) -> list[ComplianceCheck]:
        checks: list[ComplianceCheck] = []
        for record in records:
            try:
                checks.append(ComplianceCheck.model_validate(record))
            except ValidationError:
                logger.warning("Skipping malformed check record %r", _record_id(record), exc_info=True)
        return checks

    def _parse_reports(self, records: list[dict[str, Any]]) -> list[ComplianceReport]:
        reports: list[ComplianceReport] = []
        for record in records:
            try:
                reports.append(ComplianceReport.model_validate(record))
            except ValidationError:
                logger.warning("Skipping malformed report record %r", _record_id(record), exc_info=True)
        return reports

    def get_check(self, check_id: str) -> ComplianceCheck | None:
        for check in self.list_checks():
            if check.id == check_id:
                return check
        return None

    def save_check(self, check: ComplianceCheck) -> None:
        with self._lock:
            data = self._load()
            self._upsert(data["checks"], check.model_dump(mode="json"))
            self._save(data)

    def list_checks(self) -> list[ComplianceCheck]:
        with self._lock:
            return self._parse_checks(self._load()["checks"])

    def get_report(self, report_id: str) -> ComplianceReport | None:
        for report in self.list_reports():
            if report.id == report_id:
                return report
        return None

    def save_report(self, report: ComplianceReport) -> None:
        with self._lock:
            data = self._load()
            self._upsert(data["reports"], report.model_dump(mode="json"))
            self._save(data)

    def list_reports(self) -> list[ComplianceReport]:
        with self._lock:
            return self._parse_reports(self._load()["reports"])
