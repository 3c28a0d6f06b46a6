"""Coarse completion indicator: four disjoint 25-point contributions, no partial credit."""

from maintflow.models.workflow import (
    DiagnosticRecord,
    Intervention,
    InterventionStatus,
    PlanningRecord,
    QualityControlRecord,
    status_value,
)

PHASE_WEIGHT = 25


def calculate_completion(
    intervention: Intervention,
    diagnostic: DiagnosticRecord | None = None,
    planning: PlanningRecord | None = None,
    quality_control: QualityControlRecord | None = None,
) -> int:
    """Return 0, 25, 50, 75 or 100."""
    percentage = 0
    if diagnostic is not None:
        percentage += PHASE_WEIGHT
    if planning is not None and planning.parts_available:
        percentage += PHASE_WEIGHT
    if quality_control is not None:
        percentage += PHASE_WEIGHT
    if status_value(intervention.status) == InterventionStatus.DONE.value:
        percentage += PHASE_WEIGHT
    return percentage
