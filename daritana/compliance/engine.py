"""ComplianceEngine — main entry point for UBBL compliance checking.

Usage::

    from daritana.compliance import ComplianceEngine

    engine = ComplianceEngine()
    result = engine.check_compliance("residential", 12, 500, 20)
"""

from __future__ import annotations

import logging
import math
from pathlib import Path
from typing import Any

from daritana.compliance.checker import check_clauses
from daritana.compliance.clauses import BuildingParameters, BuildingType, Clause
from daritana.compliance.database import ClauseDatabase
from daritana.compliance.models import ComplianceResult
from daritana.exceptions import ClauseNotFoundError, InvalidInputError

logger = logging.getLogger(__name__)


def validate_parameters(
    building_type: Any,
    height: Any,
    floor_area: Any,
    occupancy: Any,
) -> BuildingParameters:
    """Validate raw building parameters before scoring.

    Raises
    ------
    InvalidInputError
        For an unrecognised building type, or a height, floor area or
        occupancy that is not a finite, non-negative number.
    """
    type_value = building_type.value if isinstance(building_type, BuildingType) else building_type
    if type_value not in BuildingType.values():
        raise InvalidInputError(
            f"Unknown building type {building_type!r}; expected one of "
            f"{', '.join(BuildingType.values())}."
        )

    numbers: dict[str, float] = {}
    for name, raw in (("building_height", height), ("floor_area", floor_area), ("occupancy", occupancy)):
        if isinstance(raw, bool):
            raise InvalidInputError(f"{name} must be a number, got {raw!r}.")
        try:
            value = float(raw)
        except (TypeError, ValueError):
            raise InvalidInputError(f"{name} must be a number, got {raw!r}.") from None
        if math.isnan(value) or math.isinf(value) or value < 0:
            raise InvalidInputError(f"{name} must be a finite non-negative number, got {raw!r}.")
        numbers[name] = value

    return BuildingParameters(building_type=type_value, **numbers)


class ComplianceEngine:
    """Check buildings against the UBBL clause database.

    Parameters
    ----------
    db_path:
        Path to the SQLite database.  Defaults to ``':memory:'`` for an
        ephemeral database.
    clause_file:
        Optional JSON clause file.  When given, the database is loaded
        from it instead of the bundled seed table; load failures raise
        :class:`~daritana.exceptions.ClauseDataError` immediately.
    database:
        An existing :class:`ClauseDatabase` to use as-is.
    """

    def __init__(
        self,
        db_path: str | Path = ":memory:",
        *,
        clause_file: str | Path | None = None,
        database: ClauseDatabase | None = None,
    ) -> None:
        if database is not None:
            self.db = database
        elif clause_file:
            self.db = ClauseDatabase(db_path, auto_seed=False)
            if self.db.count() == 0:
                self.db.load_file(clause_file)
        else:
            self.db = ClauseDatabase(db_path, auto_seed=True)

    # -- Applicability ---------------------------------------------------------

    def get_applicable_clauses(self, building_type: str) -> list[Clause]:
        """Return every clause that applies to *building_type*.

        Unrecognised types yield an empty list and a warning rather than
        an exception.
        """
        type_value = building_type.value if isinstance(building_type, BuildingType) else building_type
        if type_value not in BuildingType.values():
            logger.warning(
                "Unrecognised building type %r; no clauses apply.", building_type,
            )
            return []
        return self.db.get_clauses(building_type=type_value)

    # -- Evaluation ------------------------------------------------------------

    def check_compliance(
        self,
        building_type: str,
        height: float,
        floor_area: float,
        occupancy: float,
    ) -> ComplianceResult:
        """Evaluate a building against its applicable clauses.

        Deterministic for fixed inputs and a fixed clause table.

        Raises
        ------
        InvalidInputError
            If the parameters fail :func:`validate_parameters`.
        """
        params = validate_parameters(building_type, height, floor_area, occupancy)
        return self.evaluate(params)

    def evaluate(self, params: BuildingParameters) -> ComplianceResult:
        """Evaluate already-validated parameters."""
        clauses = self.get_applicable_clauses(params.building_type)
        result = check_clauses(clauses, params)
        logger.debug(
            "Checked %s building against %d clauses: score %d, %d violation(s)",
            params.building_type,
            len(clauses),
            result.compliance_score,
            len(result.violations),
        )
        return result

    # -- Clause browsing -------------------------------------------------------

    def search_clauses(
        self,
        query: str = "",
        *,
        building_type: str | None = None,
        section: str | None = None,
        category: str | None = None,
    ) -> list[Clause]:
        """Search clauses by text, narrowed by optional filters."""
        matches = self.db.search_clauses(query) if query.strip() else self.db.get_clauses()
        if building_type:
            matches = [c for c in matches if c.applies_to(building_type)]
        if section:
            matches = [c for c in matches if c.section == section]
        if category:
            matches = [c for c in matches if c.category.value == category]
        return matches

    def get_clause_by_id(self, clause_id: str) -> Clause | None:
        """Return the clause with *clause_id*, or *None*."""
        return self.db.get_clause(clause_id)

    def require_clause(self, clause_id: str) -> Clause:
        """Return the clause with *clause_id* or raise ClauseNotFoundError."""
        clause = self.db.get_clause(clause_id)
        if clause is None:
            raise ClauseNotFoundError(clause_id)
        return clause

    def get_explainer(self, clause_id: str, language: str = "en") -> str | None:
        """Return the clause explainer in *language*.

        Falls back to the first available language; *None* when the clause
        has no explainers.
        """
        clause = self.require_clause(clause_id)
        if not clause.explainers:
            return None
        if language in clause.explainers:
            return clause.explainers[language]
        return next(iter(clause.explainers.values()))

    def clauses_with_explainers(self) -> list[Clause]:
        return [c for c in self.db.get_clauses() if c.explainers]

    def sections(self) -> list[str]:
        return self.db.sections()

    def total_clauses(self) -> int:
        return self.db.count()
