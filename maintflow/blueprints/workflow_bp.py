"""
Workflow Blueprint: stateless JSON surface over the intervention workflow core.

The caller (dashboard back end or front end) posts the snapshot it fetched
from the persistence collaborator; nothing is stored here.

Endpoints:
  Reference:     GET  /workflow/statuses
  Read model:    POST /workflow/interventions/<id>/enrich
  Status change: POST /workflow/interventions/<id>/transition
  Phase forms:   POST /workflow/interventions/<id>/phases/<phase_kind>/validate
                 POST /workflow/interventions/<id>/diagnostic
  Dashboard:     POST /workflow/dashboard
"""

import logging

from flask import Blueprint, current_app, jsonify, request

from maintflow.blueprints import json_object
from maintflow.core.exceptions import ValidationError
from maintflow.models.workflow import (
    Intervention,
    InterventionSnapshot,
    InterventionStatus,
    PhaseKind,
)
from maintflow.services.phase_validation import validate_phase_payload
from maintflow.services.status_transitions import STATUS_TRANSITIONS, TERMINAL_STATUSES
from maintflow.services.workflow_facade import (
    enrich_snapshot,
    prepare_diagnostic_submission,
    request_status_change,
    summarize_workflow,
)
from maintflow.utils.errors import E, api_error

logger = logging.getLogger(__name__)

workflow_bp = Blueprint("workflow", __name__, url_prefix="/api/v1/workflow")


@workflow_bp.errorhandler(ValidationError)
def _handle_validation_error(exc):
    return api_error(E.VALIDATION_INVALID, str(exc), details=exc.details)


def _intervention_payload(intervention_id: int, data) -> dict:
    """Intervention object with the URL id filled in; a conflicting body id is rejected."""
    if not isinstance(data, dict):
        raise ValidationError("intervention must be a JSON object", details={"intervention": "required"})
    body_id = data.get("id")
    if body_id is not None and str(body_id) != str(intervention_id):
        raise ValidationError(
            f"Intervention id {body_id!r} does not match URL id {intervention_id}",
            details={"id": "must match the URL"},
        )
    return {**data, "id": intervention_id}


def _snapshot(intervention_id: int, data: dict) -> InterventionSnapshot:
    if "intervention" not in data:
        raise ValidationError("intervention is required", details={"intervention": "required"})
    return InterventionSnapshot.from_dict({
        **data,
        "intervention": _intervention_payload(intervention_id, data["intervention"]),
    })


# ═════════════════════════════════════════════════════════════════════════════
# Reference data
# ═════════════════════════════════════════════════════════════════════════════

@workflow_bp.route("/statuses", methods=["GET"])
def list_statuses():
    """Status values and the legal transition table."""
    return jsonify({
        "statuses": [s.value for s in InterventionStatus],
        "transitions": STATUS_TRANSITIONS,
        "terminal": sorted(TERMINAL_STATUSES),
    })


# ═════════════════════════════════════════════════════════════════════════════
# Read model
# ═════════════════════════════════════════════════════════════════════════════

@workflow_bp.route("/interventions/<int:intervention_id>/enrich", methods=["POST"])
def enrich_intervention(intervention_id):
    """Enriched read model of the posted snapshot."""
    snapshot = _snapshot(intervention_id, json_object())
    return jsonify(enrich_snapshot(snapshot).to_dict())


# ═════════════════════════════════════════════════════════════════════════════
# Write-side decisions
# ═════════════════════════════════════════════════════════════════════════════

@workflow_bp.route("/interventions/<int:intervention_id>/transition", methods=["POST"])
def transition_intervention(intervention_id):
    """Check a status change; 409 when the transition table forbids it."""
    data = json_object()
    current = data.get("current_status")
    target = data.get("target_status")
    if not current or not target:
        return api_error(E.VALIDATION_REQUIRED, "current_status and target_status are required")

    intervention = Intervention(
        id=intervention_id,
        status=InterventionStatus.coerce(current),
        description=data.get("description") or "",
    )
    decision = request_status_change(
        intervention,
        InterventionStatus.coerce(target),
        reason=data.get("reason"),
    )
    if not decision["allowed"]:
        logger.info("Rejected status change for intervention %s: %s", intervention_id, decision["reason"])
        return api_error(E.CONFLICT_STATE, decision["reason"], details=decision)
    return jsonify(decision)


@workflow_bp.route("/interventions/<int:intervention_id>/phases/<phase_kind>/validate", methods=["POST"])
def validate_phase(intervention_id, phase_kind):
    """Structural validation of a phase form before it is persisted."""
    kind = PhaseKind.coerce(phase_kind)
    payload = request.get_json(silent=True)
    if payload is not None and not isinstance(payload, dict):
        raise ValidationError("Phase payload must be a JSON object")
    result = validate_phase_payload(kind, payload)
    return jsonify({
        "intervention_id": intervention_id,
        "phase_kind": kind.value,
        **result.to_dict(),
    })


@workflow_bp.route("/interventions/<int:intervention_id>/diagnostic", methods=["POST"])
def submit_diagnostic(intervention_id):
    """Prepare a diagnostic submission: new description and (auto-advanced) status."""
    data = json_object()
    intervention = Intervention.from_dict(_intervention_payload(intervention_id, data.get("intervention")))
    payload = data.get("diagnostic")
    if payload is not None and not isinstance(payload, dict):
        raise ValidationError("diagnostic must be a JSON object")

    result = prepare_diagnostic_submission(intervention, payload)
    if not result["valid"]:
        return api_error(E.VALIDATION_INVALID, "Diagnostic validation failed",
                         details={"errors": result["errors"]})
    return jsonify(result)


# ═════════════════════════════════════════════════════════════════════════════
# Dashboard
# ═════════════════════════════════════════════════════════════════════════════

@workflow_bp.route("/dashboard", methods=["POST"])
def dashboard_summary():
    """Workflow figures over a list of snapshots."""
    items = json_object().get("interventions")
    if not isinstance(items, list):
        return api_error(E.VALIDATION_REQUIRED, "interventions must be a list")

    max_items = current_app.config.get("WORKFLOW_DASHBOARD_MAX_ITEMS", 500)
    if len(items) > max_items:
        return api_error(E.VALIDATION_CONSTRAINT, f"At most {max_items} interventions per request",
                         details={"max_items": max_items, "received": len(items)})

    snapshots = []
    for index, item in enumerate(items):
        try:
            snapshots.append(InterventionSnapshot.from_dict(item))
        except ValidationError as exc:
            raise ValidationError(f"interventions[{index}]: {exc}", details=exc.details) from exc
    return jsonify(summarize_workflow(snapshots))
