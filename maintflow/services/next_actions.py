"""
Next-action recommendations.

Order encodes priority: the first action is the one shown first to the
operator. Statuses without recommendations (DONE, CANCELLED, FAILED, or an
unknown value) yield an empty list.
"""

from maintflow.models.workflow import (
    DiagnosticRecord,
    Intervention,
    InterventionStatus,
    NextAction,
    PlanningRecord,
    status_value,
)

START_DIAGNOSTIC = NextAction(
    action="START_DIAGNOSTIC",
    label="Start diagnostic",
    description="Inspect the equipment and identify the required work",
)
UPDATE_PLANNING = NextAction(
    action="UPDATE_PLANNING",
    label="Update planning",
    description="Check resources and schedule the work",
)
START_WORK = NextAction(
    action="START_WORK",
    label="Start work",
    description="Begin the intervention",
)
QUALITY_CONTROL = NextAction(
    action="QUALITY_CONTROL",
    label="Quality control",
    description="Run the checks and tests",
)
PAUSE_WORK = NextAction(
    action="PAUSE_WORK",
    label="Pause",
    description="Suspend the work temporarily",
)
RESUME_WORK = NextAction(
    action="RESUME_WORK",
    label="Resume",
    description="Continue the intervention",
)


def next_actions(
    intervention: Intervention,
    diagnostic: DiagnosticRecord | None = None,
    planning: PlanningRecord | None = None,
) -> list[NextAction]:
    status = status_value(intervention.status)
    actions: list[NextAction] = []

    if status == InterventionStatus.PLANNED.value:
        if diagnostic is None:
            actions.append(START_DIAGNOSTIC)
    elif status == InterventionStatus.AWAITING_PARTS.value:
        actions.append(UPDATE_PLANNING)
        if planning is not None and planning.parts_available:
            actions.append(START_WORK)
    elif status == InterventionStatus.IN_PROGRESS.value:
        actions.extend([QUALITY_CONTROL, PAUSE_WORK])
    elif status == InterventionStatus.PAUSED.value:
        actions.append(RESUME_WORK)

    return actions
