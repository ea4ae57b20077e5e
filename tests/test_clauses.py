"""Tests for clause models and requirement evaluation."""

from __future__ import annotations

import pytest
from pydantic import ValidationError

from daritana.compliance.clauses import (
    BuildingParameters,
    BuildingType,
    Clause,
    Comparator,
    Parameter,
    Requirement,
    Severity,
    evaluate_requirement,
    suggest_action,
)


def _params(
    building_type: str = "residential",
    height: float = 12,
    floor_area: float = 500,
    occupancy: float = 20,
) -> BuildingParameters:
    return BuildingParameters(
        building_type=building_type,
        building_height=height,
        floor_area=floor_area,
        occupancy=occupancy,
    )


# ---------------------------------------------------------------------------
# Models
# ---------------------------------------------------------------------------


class TestClauseModel:
    def test_defaults(self) -> None:
        clause = Clause(id="ubbl-x", title="Test")
        assert clause.applicable_types == ["*"]
        assert clause.requirements == []
        assert clause.severity is None
        assert clause.effective_severity == Severity.MINOR

    def test_wildcard_applies_to_all(self) -> None:
        clause = Clause(id="ubbl-x", title="Test", applicable_types=["*"])
        for building_type in BuildingType.values():
            assert clause.applies_to(building_type)

    def test_applies_to_listed_types_only(self) -> None:
        clause = Clause(id="ubbl-x", title="Test", applicable_types=["residential"])
        assert clause.applies_to("residential")
        assert not clause.applies_to("commercial")

    def test_clause_is_immutable(self) -> None:
        clause = Clause(id="ubbl-x", title="Test")
        with pytest.raises(ValidationError):
            clause.title = "Changed"  # type: ignore[misc]

    def test_string_enums_are_coerced(self) -> None:
        clause = Clause(
            id="ubbl-x",
            title="Test",
            category="conditional",
            severity="critical",
            requirements=[{"parameter": "occupancy", "comparator": "at_most", "threshold": 15}],
        )
        assert clause.severity == Severity.CRITICAL
        assert clause.requirements[0].comparator == Comparator.AT_MOST


class TestRequirementModel:
    def test_in_range_requires_pair(self) -> None:
        with pytest.raises(ValidationError):
            Requirement(parameter="building_height", comparator="in_range", threshold=10)

    def test_in_range_rejects_inverted_bounds(self) -> None:
        with pytest.raises(ValidationError):
            Requirement(parameter="building_height", comparator="in_range", threshold=[18, 0])

    def test_at_most_requires_number(self) -> None:
        with pytest.raises(ValidationError):
            Requirement(parameter="occupancy", comparator="at_most", threshold="many")

    def test_unknown_parameter_rejected(self) -> None:
        with pytest.raises(ValidationError):
            Requirement(parameter="parking_spaces", comparator="at_least", threshold=1)

    def test_describe_uses_default_unit(self) -> None:
        req = Requirement(parameter="building_height", comparator="at_most", threshold=15)
        assert req.describe() == "building_height at most 15 m"

    def test_describe_range(self) -> None:
        req = Requirement(parameter="occupancy", comparator="in_range", threshold=[10, 50])
        assert req.describe() == "occupancy between 10 and 50 persons"


# ---------------------------------------------------------------------------
# Evaluation
# ---------------------------------------------------------------------------


class TestEvaluateRequirement:
    def test_at_most_pass(self) -> None:
        req = Requirement(parameter="building_height", comparator="at_most", threshold=15)
        result = evaluate_requirement(req, _params(height=12))
        assert result.passed
        assert result.actual_value == 12

    def test_at_most_boundary_passes(self) -> None:
        req = Requirement(parameter="building_height", comparator="at_most", threshold=12)
        assert evaluate_requirement(req, _params(height=12)).passed

    def test_at_most_fail(self) -> None:
        req = Requirement(parameter="occupancy", comparator="at_most", threshold=15)
        result = evaluate_requirement(req, _params(occupancy=20))
        assert not result.passed
        assert "exceeds maximum 15" in result.message

    def test_at_least_pass(self) -> None:
        req = Requirement(parameter="floor_area", comparator="at_least", threshold=36)
        assert evaluate_requirement(req, _params(floor_area=500)).passed

    def test_at_least_fail(self) -> None:
        req = Requirement(parameter="floor_area", comparator="at_least", threshold=36)
        result = evaluate_requirement(req, _params(floor_area=30))
        assert not result.passed
        assert "below minimum 36" in result.message

    def test_in_range(self) -> None:
        req = Requirement(parameter="building_height", comparator="in_range", threshold=[0, 18])
        assert evaluate_requirement(req, _params(height=0)).passed
        assert evaluate_requirement(req, _params(height=18)).passed
        assert not evaluate_requirement(req, _params(height=18.5)).passed

    def test_equals_numeric(self) -> None:
        req = Requirement(parameter="occupancy", comparator="equals", threshold=20)
        assert evaluate_requirement(req, _params(occupancy=20.0)).passed
        assert not evaluate_requirement(req, _params(occupancy=21)).passed

    def test_equals_categorical_is_case_insensitive(self) -> None:
        req = Requirement(parameter="building_type", comparator="equals", threshold="Residential")
        assert evaluate_requirement(req, _params(building_type="residential")).passed
        assert not evaluate_requirement(req, _params(building_type="commercial")).passed

    def test_non_numeric_actual_fails_numeric_comparator(self) -> None:
        req = Requirement(parameter="building_type", comparator="at_most", threshold=3)
        result = evaluate_requirement(req, _params())
        assert not result.passed
        assert "not a number" in result.message

    def test_every_comparator_is_handled(self) -> None:
        thresholds = {
            Comparator.AT_MOST: 100,
            Comparator.AT_LEAST: 1,
            Comparator.EQUALS: 20,
            Comparator.IN_RANGE: [1, 100],
        }
        for comparator in Comparator:
            req = Requirement(
                parameter=Parameter.OCCUPANCY,
                comparator=comparator,
                threshold=thresholds[comparator],
            )
            assert evaluate_requirement(req, _params(occupancy=20)).passed


class TestSuggestAction:
    def test_at_most_suggestion(self) -> None:
        req = Requirement(parameter="occupancy", comparator="at_most", threshold=15)
        clause = Clause(id="ubbl-168", title="Single staircase", section="Part VII", requirements=[req])
        result = evaluate_requirement(req, _params(occupancy=20))
        action = suggest_action(clause, result)
        assert action == "Reduce occupancy to at most 15 persons per Part VII ubbl-168."

    def test_equals_suggestion_refers_to_clause(self) -> None:
        req = Requirement(parameter="building_type", comparator="equals", threshold="industrial")
        clause = Clause(id="ubbl-9", title="Industrial only", section="Part IX", requirements=[req])
        result = evaluate_requirement(req, _params())
        assert suggest_action(clause, result) == "Review Part IX ubbl-9: Industrial only."
