"""Daritana — JSON-in/JSON-out entry point for the compliance subsystem.

Each method mirrors one REST endpoint of the surrounding API::

    POST   /compliance/checks                          create_check(body)
    GET    /compliance/checks/:id                      get_check(check_id)
    GET    /compliance/checks/:id/report               check_report(check_id)
    PATCH  /compliance/checks/:id                      update_check(check_id, body)
    POST   /compliance/checks/:id/violations           add_violation(check_id, body)
    DELETE /compliance/checks/:id/violations/:clause   delete_violation(check_id, clause_id)
    GET    /compliance/clauses?search=&buildingType=&section=
                                                       list_clauses(...)
    GET    /compliance/clauses/:id                     get_clause(clause_id)
    GET    /compliance/reports/:id/export?format=      export_report(report_id, format)

Usage::

    from daritana import Daritana

    api = Daritana.from_config("/path/to/project")
    check = api.create_check({"projectId": "proj-1", "buildingType": "residential",
                              "buildingHeight": 12, "floorArea": 500, "occupancy": 20})
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

from daritana.compliance.engine import ComplianceEngine
from daritana.config import ConfigManager
from daritana.exceptions import InvalidInputError, NotFoundError
from daritana.lifecycle.exporter import CONTENT_TYPES, resolve_format
from daritana.lifecycle.manager import ComplianceManager, validate_model
from daritana.lifecycle.store import CheckRepository, InMemoryCheckRepository, JsonCheckRepository

logger = logging.getLogger(__name__)


class CheckUpdate(BaseModel):
    """Body of a reviewer update to a check."""

    model_config = ConfigDict(populate_by_name=True, alias_generator=to_camel)

    status: Optional[str] = None
    reviewer: Optional[str] = None
    comments: Optional[str] = None


def status_code(exc: Exception) -> int:
    """Map a Daritana error to the HTTP status the API should return."""
    if isinstance(exc, NotFoundError):
        return 404
    if isinstance(exc, InvalidInputError):
        return 400
    return 500


def _dump(model: BaseModel) -> dict[str, Any]:
    return model.model_dump(mode="json")


class Daritana:
    """The public interface of the compliance subsystem.

    Parameters
    ----------
    engine:
        Compliance engine; defaults to one seeded with the bundled clauses.
    repository:
        Check/report store; defaults to an in-memory store.
    """

    def __init__(
        self,
        engine: ComplianceEngine | None = None,
        repository: CheckRepository | None = None,
    ) -> None:
        self.engine = engine or ComplianceEngine()
        self.manager = ComplianceManager(self.engine, repository)

    @classmethod
    def from_config(cls, project_path: str | Path) -> Daritana:
        """Build a facade from the merged configuration of *project_path*.

        Clause file load errors propagate as ``ClauseDataError``.
        """
        root = Path(project_path)
        cfg_manager = ConfigManager()
        config = cfg_manager.load_config(root)
        cfg_manager.configure_logging(config)

        clause_file = config.get("DARITANA_CLAUSE_FILE") or None
        if clause_file and not Path(clause_file).is_absolute():
            clause_file = str(root / clause_file)
        engine = ComplianceEngine(config.get("DARITANA_CLAUSE_DB", ":memory:"), clause_file=clause_file)

        store_path = config.get("DARITANA_STORE_PATH", "")
        repository: CheckRepository
        if store_path:
            path = Path(store_path)
            repository = JsonCheckRepository(path if path.is_absolute() else root / path)
        else:
            repository = InMemoryCheckRepository()

        logger.info(
            "Daritana compliance ready (%s profile, %d clauses)",
            config.get("DARITANA_ENV"),
            engine.total_clauses(),
        )
        return cls(engine, repository)

    # -- Checks ---------------------------------------------------------------

    def create_check(self, body: dict[str, Any]) -> dict[str, Any]:
        return _dump(self.manager.run_compliance_check(body))

    def get_check(self, check_id: str) -> dict[str, Any]:
        return _dump(self.manager.get_check(check_id))

    def list_checks(self, project_id: str | None = None, status: str | None = None) -> list[dict[str, Any]]:
        return [_dump(c) for c in self.manager.list_checks(project_id, status)]

    def update_check(self, check_id: str, body: dict[str, Any]) -> dict[str, Any]:
        """Apply a reviewer's status change and/or review assignment."""
        update = validate_model(CheckUpdate, body)
        check = None
        if update.reviewer is not None:
            check = self.manager.assign_reviewer(check_id, update.reviewer, update.comments)
        if update.status is not None:
            check = self.manager.update_check_status(check_id, update.status)
        if check is None:
            check = self.manager.get_check(check_id)
        return _dump(check)

    def check_report(self, check_id: str) -> dict[str, Any]:
        return _dump(self.manager.generate_report(check_id))

    # -- Violations -----------------------------------------------------------

    def add_violation(self, check_id: str, body: dict[str, Any]) -> dict[str, Any]:
        return _dump(self.manager.add_violation(check_id, body))

    def delete_violation(self, check_id: str, clause_id: str) -> dict[str, Any]:
        """Resolve every violation for *clause_id* on a check.

        Raises ``CheckNotFoundError`` for an unknown check and
        ``ViolationNotFoundError`` when the check has no violation for
        the clause; both map to 404 through :func:`status_code`.  No
        score credit is applied in either case.
        """
        return _dump(self.manager.resolve_violation(check_id, clause_id))

    # -- Clauses --------------------------------------------------------------

    def list_clauses(
        self,
        search: str = "",
        building_type: str | None = None,
        section: str | None = None,
        category: str | None = None,
    ) -> list[dict[str, Any]]:
        clauses = self.engine.search_clauses(
            search, building_type=building_type, section=section, category=category,
        )
        return [_dump(c) for c in clauses]

    def get_clause(self, clause_id: str) -> dict[str, Any]:
        return _dump(self.engine.require_clause(clause_id))

    def clause_explainer(self, clause_id: str, language: str = "en") -> dict[str, Any]:
        return {
            "clauseId": clause_id,
            "language": language,
            "text": self.engine.get_explainer(clause_id, language),
        }

    # -- Reports --------------------------------------------------------------

    def get_report(self, report_id: str) -> dict[str, Any]:
        return _dump(self.manager.get_report(report_id))

    def export_report(self, report_id: str, format: str = "pdf") -> tuple[bytes, str]:
        """Return the report artifact and its content type."""
        payload = self.manager.export_report(report_id, format)
        return payload, CONTENT_TYPES[resolve_format(format)]
