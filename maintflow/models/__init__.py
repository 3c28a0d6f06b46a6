"""
Maintenance workflow record types.

Persistence belongs to an external collaborator; these are plain dataclasses
decoded from the snapshots it hands over.
"""

from maintflow.models.workflow import (  # noqa: F401
    DiagnosticRecord,
    EnrichedIntervention,
    Intervention,
    InterventionSnapshot,
    InterventionStatus,
    InterventionType,
    NextAction,
    PhaseKind,
    PhaseValidationResult,
    PlanningRecord,
    QualityControlRecord,
    SparePart,
    WorkItem,
    WorkItemPriority,
    WorkflowPhase,
)
