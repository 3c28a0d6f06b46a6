"""
Workflow phase derivation.

The current phase is never stored. It is recomputed from which phase
sub-records exist plus the coarse intervention status, first matching rule
wins:

    1. no diagnostic                                  → DIAGNOSTIC
    2. no planning, or planning.parts_available false → PLANNING
    3. status IN_PROGRESS | PAUSED                    → EXECUTION
    4. quality control present, status ≠ DONE         → QUALITY_CONTROL
    5. status DONE                                    → COMPLETE
    6. otherwise                                      → UNKNOWN

Rule 2 keeps a fully diagnosed intervention in PLANNING while parts are
unavailable, even when its status already says IN_PROGRESS.
"""

from maintflow.models.workflow import (
    DiagnosticRecord,
    Intervention,
    InterventionStatus,
    PlanningRecord,
    QualityControlRecord,
    WorkflowPhase,
    status_value,
)

_EXECUTION_STATUSES = frozenset({InterventionStatus.IN_PROGRESS.value, InterventionStatus.PAUSED.value})


def derive_phase(
    intervention: Intervention,
    diagnostic: DiagnosticRecord | None = None,
    planning: PlanningRecord | None = None,
    quality_control: QualityControlRecord | None = None,
) -> WorkflowPhase:
    status = status_value(intervention.status)

    if diagnostic is None:
        return WorkflowPhase.DIAGNOSTIC
    if planning is None or not planning.parts_available:
        return WorkflowPhase.PLANNING
    if status in _EXECUTION_STATUSES:
        return WorkflowPhase.EXECUTION
    if quality_control is not None and status != InterventionStatus.DONE.value:
        return WorkflowPhase.QUALITY_CONTROL
    if status == InterventionStatus.DONE.value:
        return WorkflowPhase.COMPLETE
    return WorkflowPhase.UNKNOWN
