"""Pydantic models for compliance-check records."""

from __future__ import annotations

import uuid
from datetime import datetime, timezone
from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from daritana.compliance.models import ComplianceResult


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


def _new_check_id() -> str:
    return f"check-{uuid.uuid4().hex[:12]}"


class CheckStatus(str, Enum):
    PENDING = "pending"
    IN_PROGRESS = "in-progress"
    COMPLETED = "completed"
    FAILED = "failed"


class CheckRequest(BaseModel):
    """Parameters for running a compliance check on a project."""

    model_config = ConfigDict(populate_by_name=True, alias_generator=to_camel)

    project_id: str
    project_name: str = ""
    building_type: str
    building_height: float
    floor_area: float
    occupancy: float


class ComplianceCheck(BaseModel):
    """One evaluation run of a project's building against the clause table."""

    id: str = Field(default_factory=_new_check_id)
    project_id: str
    project_name: str = ""
    check_date: datetime = Field(default_factory=_utc_now)
    building_type: str
    building_height: float
    floor_area: float
    occupancy: float
    result: ComplianceResult = Field(default_factory=ComplianceResult)
    status: CheckStatus = CheckStatus.PENDING
    reviewer: Optional[str] = None
    comments: Optional[str] = None
    attachments: list[str] = Field(default_factory=list)

    def derive_status(self) -> CheckStatus:
        """``failed`` when violations exist, ``completed`` otherwise."""
        return CheckStatus.FAILED if self.result.violations else CheckStatus.COMPLETED
