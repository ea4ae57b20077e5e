"""Compliance-check lifecycle: storage, violation management and reports."""

from daritana.lifecycle.exporter import ReportExporter
from daritana.lifecycle.manager import ComplianceManager
from daritana.lifecycle.models import CheckRequest, CheckStatus, ComplianceCheck
from daritana.lifecycle.store import CheckRepository, InMemoryCheckRepository, JsonCheckRepository

__all__ = [
    "CheckRepository",
    "CheckRequest",
    "CheckStatus",
    "ComplianceCheck",
    "ComplianceManager",
    "InMemoryCheckRepository",
    "JsonCheckRepository",
    "ReportExporter",
]
