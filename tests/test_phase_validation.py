"""Phase payload validation before a phase submission is persisted."""

import pytest

from maintflow.core.exceptions import ValidationError
from maintflow.models.workflow import PhaseKind, WorkItem
from maintflow.services.phase_validation import (
    validate_diagnostic,
    validate_phase_payload,
    validate_planning,
    validate_quality_control,
)


class TestValidateDiagnostic:

    def test_empty_work_list(self):
        result = validate_diagnostic({"required_work": []})
        assert result.is_valid is False
        assert result.errors == ["At least one required work item must be specified"]

    @pytest.mark.parametrize("payload", [None, {}])
    def test_missing_payload(self, payload):
        assert validate_diagnostic(payload).is_valid is False

    def test_valid(self):
        result = validate_diagnostic({"required_work": [{"description": "Check oil level"}]})
        assert result.is_valid is True
        assert result.errors == []

    def test_exactly_five_characters_after_trim(self):
        assert validate_diagnostic({"required_work": [{"description": "  Clean  "}]}).is_valid is True

    def test_one_error_per_short_entry(self):
        result = validate_diagnostic({"required_work": [
            {"description": "Oil"},
            {"description": "Replace bearing"},
            {"description": "    "},
            {},
        ]})
        assert result.is_valid is False
        assert result.errors == [
            "Description of required work item 1 is too short (minimum 5 characters)",
            "Description of required work item 3 is too short (minimum 5 characters)",
            "Description of required work item 4 is too short (minimum 5 characters)",
        ]

    def test_accepts_work_item_objects(self):
        result = validate_diagnostic({"required_work": [WorkItem("Replace bearing"), WorkItem("Oil")]})
        assert result.errors == ["Description of required work item 2 is too short (minimum 5 characters)"]

    def test_to_dict(self):
        assert validate_diagnostic({"required_work": [{"description": "Check oil level"}]}).to_dict() == {
            "is_valid": True, "errors": [],
        }


class TestNonDiagnosticPhases:

    def test_planning_non_empty_accepted(self):
        assert validate_planning({"parts_available": False}).is_valid is True

    def test_quality_control_non_empty_accepted(self):
        assert validate_quality_control({"overall_evaluation": "OK"}).is_valid is True

    @pytest.mark.parametrize("payload", [None, {}])
    def test_empty_rejected(self, payload):
        assert validate_planning(payload).errors == ["Planning payload is empty"]
        assert validate_quality_control(payload).errors == ["Quality control payload is empty"]


class TestDispatch:

    @pytest.mark.parametrize("kind", ["diagnostic", PhaseKind.DIAGNOSTIC])
    def test_diagnostic(self, kind):
        assert validate_phase_payload(kind, {"required_work": []}).is_valid is False

    @pytest.mark.parametrize("kind", ["quality_control", "qualityControl"])
    def test_quality_control_spellings(self, kind):
        assert validate_phase_payload(kind, {"test_results": "pass"}).is_valid is True

    def test_unknown_kind_raises(self):
        with pytest.raises(ValidationError, match="Unknown phase kind"):
            validate_phase_payload("execution", {"x": 1})


class TestMalformedDiagnostic:

    @pytest.mark.parametrize("required_work", [5, "Replace bearing", {"description": "Replace bearing"}])
    def test_non_list_is_one_error(self, required_work):
        result = validate_diagnostic({"required_work": required_work})
        assert result.is_valid is False
        assert result.errors == ["Required work must be a list"]
