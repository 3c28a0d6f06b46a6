"""
Phase payload validation, run before a phase submission is handed to the
persistence collaborator.

Only the diagnostic form has codified rules:
  - at least one required-work entry
  - every entry description is at least 5 characters once trimmed

Planning and quality-control payloads are accepted as long as they are not
empty; no further rules are implied.

Usage:
    from maintflow.services.phase_validation import validate_phase_payload

    result = validate_phase_payload("diagnostic", payload)
    # -> PhaseValidationResult(is_valid=False, errors=["..."])
"""

import logging

from maintflow.models.workflow import PhaseKind, PhaseValidationResult, WorkItem

logger = logging.getLogger(__name__)

MIN_WORK_DESCRIPTION_LEN = 5


def _entry_description(entry) -> str:
    if isinstance(entry, WorkItem):
        return entry.description
    if isinstance(entry, dict):
        return str(entry.get("description") or "")
    return ""


def validate_diagnostic(payload: dict | None) -> PhaseValidationResult:
    errors = []
    required_work = (payload or {}).get("required_work") or []

    if not isinstance(required_work, (list, tuple)):
        return PhaseValidationResult(is_valid=False, errors=["Required work must be a list"])
    if not required_work:
        errors.append("At least one required work item must be specified")

    for index, entry in enumerate(required_work, start=1):
        if len(_entry_description(entry).strip()) < MIN_WORK_DESCRIPTION_LEN:
            errors.append(
                f"Description of required work item {index} is too short "
                f"(minimum {MIN_WORK_DESCRIPTION_LEN} characters)"
            )

    return PhaseValidationResult(is_valid=not errors, errors=errors)


def _validate_non_empty(payload: dict | None, label: str) -> PhaseValidationResult:
    if not payload:
        return PhaseValidationResult(is_valid=False, errors=[f"{label} payload is empty"])
    return PhaseValidationResult(is_valid=True, errors=[])


def validate_planning(payload: dict | None) -> PhaseValidationResult:
    return _validate_non_empty(payload, "Planning")


def validate_quality_control(payload: dict | None) -> PhaseValidationResult:
    return _validate_non_empty(payload, "Quality control")


_VALIDATORS = {
    PhaseKind.DIAGNOSTIC: validate_diagnostic,
    PhaseKind.PLANNING: validate_planning,
    PhaseKind.QUALITY_CONTROL: validate_quality_control,
}


def validate_phase_payload(phase_kind, payload: dict | None) -> PhaseValidationResult:
    """Dispatch on the phase kind. Raises ValidationError for an unknown kind."""
    kind = PhaseKind.coerce(phase_kind)
    result = _VALIDATORS[kind](payload)
    if not result.is_valid:
        logger.debug("Rejected %s payload: %s", kind.value, "; ".join(result.errors))
    return result
