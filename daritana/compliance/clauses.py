"""Clause model, requirement predicates and their evaluation."""

from __future__ import annotations

import math
from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, model_validator

from daritana.config import ALL_TYPES


class BuildingType(str, Enum):
    """Building types recognised by the UBBL clause table."""

    RESIDENTIAL = "residential"
    COMMERCIAL = "commercial"
    INDUSTRIAL = "industrial"
    INSTITUTIONAL = "institutional"
    ASSEMBLY = "assembly"
    MIXED_USE = "mixed-use"
    HIGH_RISE = "high-rise"
    LOW_RISE = "low-rise"

    @classmethod
    def values(cls) -> list[str]:
        return [member.value for member in cls]


class ClauseCategory(str, Enum):
    MANDATORY = "mandatory"
    CONDITIONAL = "conditional"
    RECOMMENDED = "recommended"


class Severity(str, Enum):
    """Violation severity, most severe first."""

    CRITICAL = "critical"
    MAJOR = "major"
    MINOR = "minor"

    @property
    def rank(self) -> int:
        """0 for critical; higher numbers are less severe."""
        return list(Severity).index(self)


class Parameter(str, Enum):
    """Building parameters a requirement can constrain."""

    BUILDING_TYPE = "building_type"
    BUILDING_HEIGHT = "building_height"
    FLOOR_AREA = "floor_area"
    OCCUPANCY = "occupancy"


class Comparator(str, Enum):
    AT_MOST = "at_most"
    AT_LEAST = "at_least"
    EQUALS = "equals"
    IN_RANGE = "in_range"


_UNITS: dict[Parameter, str] = {
    Parameter.BUILDING_TYPE: "",
    Parameter.BUILDING_HEIGHT: "m",
    Parameter.FLOOR_AREA: "m²",
    Parameter.OCCUPANCY: "persons",
}


class Requirement(BaseModel):
    """A single predicate: ``parameter comparator threshold``."""

    model_config = ConfigDict(frozen=True)

    parameter: Parameter
    comparator: Comparator
    threshold: Any
    """Number, string (``equals`` only) or ``[low, high]`` for ``in_range``."""

    unit: str = ""

    @model_validator(mode="after")
    def _check_threshold(self) -> Requirement:
        if self.comparator == Comparator.IN_RANGE:
            pair = self.threshold
            if (
                not isinstance(pair, (list, tuple))
                or len(pair) != 2
                or _coerce_numeric(pair[0]) is None
                or _coerce_numeric(pair[1]) is None
            ):
                raise ValueError("in_range threshold must be a [low, high] pair of numbers")
            if float(pair[0]) > float(pair[1]):
                raise ValueError(f"in_range threshold {pair} has low > high")
        elif self.comparator in (Comparator.AT_MOST, Comparator.AT_LEAST):
            if _coerce_numeric(self.threshold) is None:
                raise ValueError(
                    f"{self.comparator.value} threshold must be numeric, got {self.threshold!r}"
                )
        return self

    @property
    def display_unit(self) -> str:
        return self.unit or _UNITS[self.parameter]

    def describe(self) -> str:
        """Human-readable form, e.g. ``occupancy at most 15 persons``."""
        unit = f" {self.display_unit}" if self.display_unit else ""
        if self.comparator == Comparator.IN_RANGE:
            low, high = self.threshold
            return f"{self.parameter.value} between {low} and {high}{unit}"
        label = self.comparator.value.replace("_", " ")
        return f"{self.parameter.value} {label} {self.threshold}{unit}"


class Clause(BaseModel):
    """A UBBL by-law clause. Immutable reference data."""

    model_config = ConfigDict(frozen=True)

    id: str
    """Clause identifier, e.g. ``'ubbl-166'``."""

    title: str
    description: str = ""
    section: str = ""
    """Owning part of the by-laws, e.g. ``'Part VII'``."""

    category: ClauseCategory = ClauseCategory.MANDATORY
    applicable_types: list[str] = Field(default_factory=lambda: [ALL_TYPES])
    """Building types this clause applies to; ``'*'`` means all types."""

    requirements: list[Requirement] = Field(default_factory=list)
    severity: Severity | None = None
    """Declared severity; failures of clauses without one are ``minor``."""

    recommendation: str = ""
    """Static guidance attached to the result when the clause fails."""

    keywords: list[str] = Field(default_factory=list)
    explainers: dict[str, str] = Field(default_factory=dict)
    """Plain-language explanations keyed by language code (``en``, ``ms``)."""

    @property
    def effective_severity(self) -> Severity:
        return self.severity or Severity.MINOR

    def applies_to(self, building_type: str) -> bool:
        return ALL_TYPES in self.applicable_types or building_type in self.applicable_types


class BuildingParameters(BaseModel):
    """The four building parameters the evaluator checks."""

    building_type: str
    building_height: float
    floor_area: float
    occupancy: float

    def value(self, parameter: Parameter) -> Any:
        return getattr(self, parameter.value)


class RequirementResult(BaseModel):
    """Outcome of evaluating one requirement."""

    requirement: Requirement
    passed: bool
    actual_value: Any = None
    message: str = ""


def _coerce_numeric(value: Any) -> float | None:
    """Try to coerce a value to a finite float."""
    if value is None or isinstance(value, bool):
        return None
    try:
        number = float(value)
    except (ValueError, TypeError):
        return None
    if math.isnan(number) or math.isinf(number):
        return None
    return number


def _fmt(value: Any) -> str:
    """Render numbers without a trailing ``.0``."""
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


def evaluate_requirement(
    requirement: Requirement,
    params: BuildingParameters,
) -> RequirementResult:
    """Evaluate a single requirement against the building parameters."""
    name = requirement.parameter.value
    actual = params.value(requirement.parameter)
    unit = f" {requirement.display_unit}" if requirement.display_unit else ""
    comparator = requirement.comparator
    shown = _fmt(actual)

    if comparator == Comparator.EQUALS:
        expected = requirement.threshold
        actual_num = _coerce_numeric(actual)
        expected_num = _coerce_numeric(expected)
        if actual_num is not None and expected_num is not None:
            passed = actual_num == expected_num
        else:
            passed = str(actual).lower() == str(expected).lower()
        verdict = "equals" if passed else "does not equal"
        message = f"{name} = {shown} {verdict} required {expected}{unit}."
        return RequirementResult(
            requirement=requirement, passed=passed, actual_value=actual, message=message,
        )

    actual_num = _coerce_numeric(actual)
    if actual_num is None:
        return RequirementResult(
            requirement=requirement,
            passed=False,
            actual_value=actual,
            message=f"{name} = {shown} is not a number; {requirement.describe()} required.",
        )

    if comparator == Comparator.AT_MOST:
        limit = float(requirement.threshold)
        passed = actual_num <= limit
        verdict = "within maximum" if passed else "exceeds maximum"
        message = f"{name} = {shown}{unit} {verdict} {requirement.threshold}{unit}."
    elif comparator == Comparator.AT_LEAST:
        limit = float(requirement.threshold)
        passed = actual_num >= limit
        verdict = "meets minimum" if passed else "below minimum"
        message = f"{name} = {shown}{unit} {verdict} {requirement.threshold}{unit}."
    elif comparator == Comparator.IN_RANGE:
        low, high = (float(v) for v in requirement.threshold)
        passed = low <= actual_num <= high
        verdict = "within" if passed else "outside"
        low_s, high_s = requirement.threshold
        message = f"{name} = {shown}{unit} {verdict} range {low_s}-{high_s}{unit}."
    else:
        raise ValueError(f"Unhandled comparator: {comparator!r}")

    return RequirementResult(
        requirement=requirement, passed=passed, actual_value=actual, message=message,
    )


def suggest_action(clause: Clause, result: RequirementResult) -> str:
    """Generate an actionable suggestion for a failed requirement."""
    req = result.requirement
    unit = f" {req.display_unit}" if req.display_unit else ""
    name = req.parameter.value.replace("_", " ")
    if req.comparator == Comparator.AT_MOST:
        return f"Reduce {name} to at most {req.threshold}{unit} per {clause.section} {clause.id}."
    if req.comparator == Comparator.AT_LEAST:
        return f"Increase {name} to at least {req.threshold}{unit} per {clause.section} {clause.id}."
    if req.comparator == Comparator.IN_RANGE:
        low, high = req.threshold
        return f"Bring {name} within {low}-{high}{unit} per {clause.section} {clause.id}."
    return f"Review {clause.section} {clause.id}: {clause.title}."
