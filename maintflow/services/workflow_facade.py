"""
Workflow facade: the one entry point forms and detail views consume.

Composes the transition table, phase deriver, completion calculator,
next-action advisor and description parser into an enriched read model, and
prepares the write-side decisions (status change, diagnostic submission) that
the persistence collaborator then applies.

Nothing here performs I/O or keeps state: every call recomputes from the
snapshot it is given, so staleness is the caller's concern (re-fetch after
write).

Usage:
    from maintflow.services.workflow_facade import enrich, can_transition

    view = enrich(intervention, diagnostic, planning, quality_control)
    view.to_dict()
"""

import logging
from datetime import datetime, timezone

from maintflow.models.workflow import (
    DiagnosticRecord,
    EnrichedIntervention,
    Intervention,
    InterventionSnapshot,
    InterventionStatus,
    InterventionType,
    PlanningRecord,
    QualityControlRecord,
    WorkItemPriority,
    WorkflowPhase,
    status_value,
)
from maintflow.services.completion import calculate_completion
from maintflow.services.description_parser import (
    append_status_change,
    append_workflow_sections,
    parse_spare_parts,
    parse_work_items,
)
from maintflow.services.next_actions import next_actions
from maintflow.services.phase_deriver import derive_phase
from maintflow.services.phase_validation import validate_diagnostic
from maintflow.services.status_transitions import (
    get_available_transitions,
    is_legal_transition,
    validate_status_transition,
)

logger = logging.getLogger(__name__)

# Keyword → intervention type, first match wins
_TYPE_KEYWORDS = (
    (("preventive", "préventive"), InterventionType.PREVENTIVE_MAINTENANCE),
    (("corrective",), InterventionType.CORRECTIVE_MAINTENANCE),
    (("repair", "réparation", "reparation"), InterventionType.REPAIR),
    (("renovation", "rénovation"), InterventionType.RENOVATION),
    (("inspection",), InterventionType.INSPECTION),
)

_QC_FAILURE_KEYWORDS = ("fail", "échec", "problem", "problème")

# Capacity above which a diagnostic tool is booked alongside the technician
TOOL_CAPACITY_THRESHOLD = 50


# ═════════════════════════════════════════════════════════════════════════════
# Derived attributes
# ═════════════════════════════════════════════════════════════════════════════

def derive_intervention_type(intervention: Intervention) -> InterventionType:
    text = (intervention.description or "").lower()
    for keywords, intervention_type in _TYPE_KEYWORDS:
        if any(kw in text for kw in keywords):
            return intervention_type
    return InterventionType.CORRECTIVE_MAINTENANCE


def derive_priority(intervention: Intervention) -> WorkItemPriority:
    return WorkItemPriority.HIGH if intervention.urgent else WorkItemPriority.NORMAL


def is_quality_validated(quality_control: QualityControlRecord | None) -> bool:
    """Results recorded and the test results report no failure or problem."""
    if quality_control is None:
        return False
    if not (quality_control.test_results or quality_control.vibration_analysis):
        return False
    results = (quality_control.test_results or "").lower()
    return not any(kw in results for kw in _QC_FAILURE_KEYWORDS)


def derive_resources(planning: PlanningRecord | None) -> list[dict]:
    if planning is None:
        return []
    resources = [{
        "resource_type": "TECHNICIAN",
        "description": "Specialised technician",
        "quantity": 1,
        "available": planning.parts_available,
    }]
    if planning.execution_capacity > TOOL_CAPACITY_THRESHOLD:
        resources.append({
            "resource_type": "TOOL",
            "description": "Diagnostic equipment",
            "quantity": 1,
            "available": True,
        })
    return resources


def summarize_phases(
    diagnostic: DiagnosticRecord | None,
    planning: PlanningRecord | None,
    quality_control: QualityControlRecord | None,
) -> dict:
    """Per-phase summary shown in the workflow pipeline."""
    return {
        "diagnostic": {
            "completed": diagnostic.completed if diagnostic else False,
            "created_at": diagnostic.created_at.isoformat() if diagnostic and diagnostic.created_at else None,
            "required_work": [w.to_dict() for w in diagnostic.required_work] if diagnostic else [],
            "spare_parts": [p.to_dict() for p in diagnostic.spare_parts] if diagnostic else [],
        },
        "planning": {
            "completed": planning.completed if planning else False,
            "created_at": planning.created_at.isoformat() if planning and planning.created_at else None,
            "execution_capacity": planning.execution_capacity if planning else 0,
            "parts_available": planning.parts_available if planning else False,
            "urgency_taken": planning.urgency_taken if planning else False,
            "required_resources": derive_resources(planning),
        },
        "quality_control": {
            "completed": quality_control.completed if quality_control else False,
            "validated_at": (
                quality_control.validated_at.isoformat()
                if quality_control and quality_control.validated_at else None
            ),
            "test_results": quality_control.test_results if quality_control else None,
            "vibration_analysis": quality_control.vibration_analysis if quality_control else None,
            "technical_validation": is_quality_validated(quality_control),
        },
    }


def build_timeline(
    intervention: Intervention,
    diagnostic: DiagnosticRecord | None = None,
    planning: PlanningRecord | None = None,
    quality_control: QualityControlRecord | None = None,
) -> list[dict]:
    created = intervention.created_at or intervention.scheduled_date
    timeline = [{
        "phase": "CREATION",
        "date": created.isoformat() if created else None,
        "description": "Intervention created",
    }]
    if diagnostic is not None:
        timeline.append({
            "phase": WorkflowPhase.DIAGNOSTIC.value,
            "date": diagnostic.created_at.isoformat() if diagnostic.created_at else None,
            "description": "Diagnostic phase completed",
        })
    if planning is not None:
        timeline.append({
            "phase": WorkflowPhase.PLANNING.value,
            "date": planning.created_at.isoformat() if planning.created_at else None,
            "description": "Planning updated",
        })
    if quality_control is not None:
        timeline.append({
            "phase": WorkflowPhase.QUALITY_CONTROL.value,
            "date": quality_control.validated_at.isoformat() if quality_control.validated_at else None,
            "description": "Quality control performed",
        })
    return timeline


# ═════════════════════════════════════════════════════════════════════════════
# Read side
# ═════════════════════════════════════════════════════════════════════════════

def enrich(
    intervention: Intervention,
    diagnostic: DiagnosticRecord | None = None,
    planning: PlanningRecord | None = None,
    quality_control: QualityControlRecord | None = None,
) -> EnrichedIntervention:
    """Compose the enriched read model. Pure: identical inputs give equal outputs."""
    return EnrichedIntervention(
        intervention=intervention,
        phase=derive_phase(intervention, diagnostic, planning, quality_control),
        completion_percentage=calculate_completion(intervention, diagnostic, planning, quality_control),
        next_actions=next_actions(intervention, diagnostic, planning),
        work_items=parse_work_items(intervention.description),
        spare_parts=parse_spare_parts(intervention.description),
        intervention_type=derive_intervention_type(intervention),
        priority=derive_priority(intervention),
        available_transitions=get_available_transitions(intervention.status),
        phases=summarize_phases(diagnostic, planning, quality_control),
        timeline=build_timeline(intervention, diagnostic, planning, quality_control),
    )


def enrich_snapshot(snapshot: InterventionSnapshot) -> EnrichedIntervention:
    return enrich(snapshot.intervention, snapshot.diagnostic, snapshot.planning, snapshot.quality_control)


def can_transition(intervention: Intervention, target_status) -> bool:
    return is_legal_transition(intervention.status, target_status)


def summarize_workflow(snapshots: list[InterventionSnapshot]) -> dict:
    """
    Dashboard figures over a list of snapshots.

    Returns:
        {"overview", "status_distribution", "phase_distribution",
         "current_phase_distribution", "metrics"}
    """
    total = len(snapshots)
    status_distribution: dict[str, int] = {}
    current_phase_distribution: dict[str, int] = {}
    with_diagnostic = with_planning = with_quality = completed = 0

    for snap in snapshots:
        status = status_value(snap.intervention.status)
        status_distribution[status] = status_distribution.get(status, 0) + 1

        phase = derive_phase(snap.intervention, snap.diagnostic, snap.planning, snap.quality_control).value
        current_phase_distribution[phase] = current_phase_distribution.get(phase, 0) + 1

        if snap.diagnostic is not None:
            with_diagnostic += 1
        if snap.planning is not None:
            with_planning += 1
        if snap.quality_control is not None:
            with_quality += 1
        if status == InterventionStatus.DONE.value:
            completed += 1

    def _rate(count: int) -> float:
        return round(count / total * 100, 1) if total > 0 else 0.0

    return {
        "overview": {"total_interventions": total},
        "status_distribution": status_distribution,
        "phase_distribution": {
            "diagnostic": with_diagnostic,
            "planning": with_planning,
            "quality_control": with_quality,
            "completed": completed,
        },
        "current_phase_distribution": current_phase_distribution,
        "metrics": {
            "completion_rate": _rate(completed),
            "diagnostic_coverage": _rate(with_diagnostic),
            "planning_coverage": _rate(with_planning),
            "quality_coverage": _rate(with_quality),
        },
    }


# ═════════════════════════════════════════════════════════════════════════════
# Write side: decisions only, persisted by the collaborator
# ═════════════════════════════════════════════════════════════════════════════

def request_status_change(
    intervention: Intervention,
    target_status,
    *,
    reason: str | None = None,
    now: datetime | None = None,
) -> dict:
    """
    Decide a status change.

    Returns:
        {"intervention_id", "allowed", "previous_status", "new_status",
         "reason", "description"}

    On refusal ``new_status`` is the unchanged status and ``reason`` explains
    why. On success ``description`` carries the status-change log entry when a
    reason was supplied.
    """
    validation = validate_status_transition(intervention.status, target_status)
    previous = validation["from"]

    if not validation["valid"]:
        return {
            "intervention_id": intervention.id,
            "allowed": False,
            "previous_status": previous,
            "new_status": previous,
            "reason": validation["reason"],
            "description": intervention.description,
        }

    description = intervention.description
    if reason:
        description = append_status_change(
            description, previous, validation["to"], reason, now or datetime.now(timezone.utc),
        )
    logger.info("Intervention %s transition approved: %s → %s", intervention.id, previous, validation["to"])
    return {
        "intervention_id": intervention.id,
        "allowed": True,
        "previous_status": previous,
        "new_status": validation["to"],
        "reason": None,
        "description": description,
    }


def prepare_diagnostic_submission(
    intervention: Intervention,
    payload: dict | None,
    *,
    now: datetime | None = None,
) -> dict:
    """
    Validate a diagnostic form submission and compute what to persist.

    A PLANNED intervention moves to AWAITING_PARTS once at least one
    required-work item is submitted.

    Returns:
        {"valid": False, "errors": [...]} on validation failure, otherwise
        {"valid": True, "errors": [], "previous_status", "new_status",
         "description", "diagnostic"}

    Raises:
        ValidationError when an entry is structurally malformed (unknown
        priority, non-positive quantity, ...).
    """
    result = validate_diagnostic(payload)
    if not result.is_valid:
        return {"valid": False, "errors": list(result.errors)}

    record = DiagnosticRecord.from_dict({**payload, "created_at": now or datetime.now(timezone.utc)})
    description = append_workflow_sections(
        intervention.description, record.required_work, record.spare_parts, record.observations,
    )

    previous = status_value(intervention.status)
    new_status = previous
    if previous == InterventionStatus.PLANNED.value and record.required_work:
        new_status = InterventionStatus.AWAITING_PARTS.value

    return {
        "valid": True,
        "errors": [],
        "previous_status": previous,
        "new_status": new_status,
        "description": description,
        "diagnostic": record.to_dict(),
    }
