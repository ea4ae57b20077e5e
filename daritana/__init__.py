"""Daritana Compliance — UBBL building-code compliance evaluation for Malaysian projects."""

__version__ = "1.0.0"

from daritana.api.facade import Daritana
from daritana.compliance.clauses import (
    BuildingType,
    Clause,
    ClauseCategory,
    Comparator,
    Requirement,
    Severity,
)
from daritana.compliance.engine import ComplianceEngine
from daritana.compliance.models import ComplianceResult, Violation
from daritana.compliance.report import ComplianceReport
from daritana.config import ConfigManager
from daritana.exceptions import (
    CheckNotFoundError,
    ClauseDataError,
    ClauseNotFoundError,
    DaritanaError,
    InvalidInputError,
    NotFoundError,
    ReportNotFoundError,
    ViolationNotFoundError,
)
from daritana.lifecycle.manager import ComplianceManager
from daritana.lifecycle.models import CheckStatus, ComplianceCheck

__all__ = [
    "__version__",
    # Facade
    "Daritana",
    # Evaluator
    "BuildingType",
    "Clause",
    "ClauseCategory",
    "Comparator",
    "ComplianceEngine",
    "ComplianceResult",
    "Requirement",
    "Severity",
    "Violation",
    # Lifecycle
    "CheckStatus",
    "ComplianceCheck",
    "ComplianceManager",
    "ComplianceReport",
    # Config and errors
    "CheckNotFoundError",
    "ClauseDataError",
    "ClauseNotFoundError",
    "ConfigManager",
    "DaritanaError",
    "InvalidInputError",
    "NotFoundError",
    "ReportNotFoundError",
    "ViolationNotFoundError",
]
