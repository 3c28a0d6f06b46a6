"""
Maintenance Intervention Workflow: record types.

Records:
    - Intervention:          a maintenance work order snapshot (id, status, urgent, description, dates)
    - DiagnosticRecord:      diagnostic phase sub-record (required work, spare parts, observations)
    - PlanningRecord:        planning phase sub-record (duration, capacity, parts availability)
    - QualityControlRecord:  quality-control phase sub-record (test results, evaluation)
    - WorkItem / SparePart:  entries parsed from (or serialized into) the description text
    - NextAction:            recommended operator action
    - EnrichedIntervention:  composed read model returned by the workflow facade

Architecture:
    Intervention ──1:0..1──▶ DiagnosticRecord
    Intervention ──1:0..1──▶ PlanningRecord
    Intervention ──1:0..1──▶ QualityControlRecord

Lifecycle states:
    Intervention:  PLANNED → AWAITING_PARTS → IN_PROGRESS ⇄ PAUSED → DONE
                   | CANCELLED | FAILED → IN_PROGRESS

``from_dict`` is the boundary decoder for snapshots supplied by the
persistence collaborator. It rejects unknown status values and malformed
fields with ``ValidationError``; everything downstream of it is pure.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime
from enum import Enum
from typing import Any

from maintflow.core.exceptions import ValidationError


# ═════════════════════════════════════════════════════════════════════════════
# Enums
# ═════════════════════════════════════════════════════════════════════════════

class InterventionStatus(str, Enum):
    """Persisted lifecycle state. Values match the collaborator's stored strings."""
    PLANNED = "PLANNED"
    AWAITING_PARTS = "AWAITING_PARTS"
    IN_PROGRESS = "IN_PROGRESS"
    PAUSED = "PAUSED"
    DONE = "DONE"
    CANCELLED = "CANCELLED"
    FAILED = "FAILED"

    @classmethod
    def coerce(cls, value: Any) -> InterventionStatus:
        """Return the enum member for a wire value, or raise ValidationError."""
        if isinstance(value, cls):
            return value
        try:
            return cls(value)
        except ValueError:
            raise ValidationError(
                f"Unknown intervention status: {value!r}",
                details={"status": f"must be one of {', '.join(s.value for s in cls)}"},
            ) from None


class WorkflowPhase(str, Enum):
    DIAGNOSTIC = "DIAGNOSTIC"
    PLANNING = "PLANNING"
    EXECUTION = "EXECUTION"
    QUALITY_CONTROL = "QUALITY_CONTROL"
    COMPLETE = "COMPLETE"
    UNKNOWN = "UNKNOWN"


class WorkItemPriority(str, Enum):
    LOW = "LOW"
    NORMAL = "NORMAL"
    HIGH = "HIGH"
    CRITICAL = "CRITICAL"


class InterventionType(str, Enum):
    PREVENTIVE_MAINTENANCE = "PREVENTIVE_MAINTENANCE"
    CORRECTIVE_MAINTENANCE = "CORRECTIVE_MAINTENANCE"
    REPAIR = "REPAIR"
    RENOVATION = "RENOVATION"
    INSPECTION = "INSPECTION"


class PhaseKind(str, Enum):
    """Phase-submission kinds accepted from the forms."""
    DIAGNOSTIC = "diagnostic"
    PLANNING = "planning"
    QUALITY_CONTROL = "quality_control"

    @classmethod
    def coerce(cls, value: Any) -> PhaseKind:
        if isinstance(value, cls):
            return value
        # camelCase spelling used by the dashboard front end
        if value == "qualityControl":
            return cls.QUALITY_CONTROL
        try:
            return cls(value)
        except ValueError:
            raise ValidationError(
                f"Unknown phase kind: {value!r}",
                details={"phase_kind": "must be diagnostic, planning or quality_control"},
            ) from None


def status_value(status: Any) -> Any:
    """Plain wire string for an enum member; anything else passes through."""
    return getattr(status, "value", status)


# ═════════════════════════════════════════════════════════════════════════════
# Boundary helpers
# ═════════════════════════════════════════════════════════════════════════════

def _parse_dt(val, field_name: str) -> datetime | None:
    """Convert ISO-format string to datetime; pass through None/datetime."""
    if val is None or isinstance(val, datetime):
        return val
    if isinstance(val, date):
        return datetime(val.year, val.month, val.day)
    if isinstance(val, str):
        val = val.strip()
        if not val:
            return None
        for fmt in ("%Y-%m-%dT%H:%M:%S", "%Y-%m-%dT%H:%M", "%Y-%m-%d %H:%M:%S", "%Y-%m-%d"):
            try:
                return datetime.strptime(val, fmt)
            except ValueError:
                continue
        try:
            return datetime.fromisoformat(val.replace("Z", "+00:00"))
        except ValueError:
            pass
    raise ValidationError(f"Invalid timestamp for {field_name}: {val!r}",
                          details={field_name: "expected an ISO-8601 date or datetime"})


def _iso(val: datetime | None) -> str | None:
    return val.isoformat() if val else None


def _int(val, field_name: str, default: int | None = None) -> int | None:
    if val is None or val == "":
        return default
    if isinstance(val, bool):
        raise ValidationError(f"Invalid integer for {field_name}: {val!r}",
                              details={field_name: "expected an integer"})
    try:
        return int(val)
    except (TypeError, ValueError):
        raise ValidationError(f"Invalid integer for {field_name}: {val!r}",
                              details={field_name: "expected an integer"}) from None


def _bool(val, field_name: str, default: bool) -> bool:
    if val is None:
        return default
    if not isinstance(val, bool):
        raise ValidationError(f"Invalid boolean for {field_name}: {val!r}",
                              details={field_name: "expected true or false"})
    return val


def _str(val, field_name: str, default: str | None = "") -> str | None:
    """Text field; empty or missing gives ``default``."""
    if val is None or val == "":
        return default
    if not isinstance(val, str):
        raise ValidationError(f"Invalid text for {field_name}: {val!r}",
                              details={field_name: "expected a string"})
    return val


def _list(val, field_name: str) -> list:
    if val is None:
        return []
    if not isinstance(val, list):
        raise ValidationError(f"{field_name} must be a list", details={field_name: "expected a list"})
    return val


def _mapping(data, label: str) -> dict:
    if not isinstance(data, dict):
        raise ValidationError(f"{label} must be a JSON object")
    return data


# ═════════════════════════════════════════════════════════════════════════════
# Derived entries
# ═════════════════════════════════════════════════════════════════════════════

@dataclass(frozen=True)
class WorkItem:
    """A discrete task with priority and estimated duration."""
    description: str
    priority: WorkItemPriority = WorkItemPriority.NORMAL
    estimated_minutes: int = 30
    completed: bool = False

    @classmethod
    def from_dict(cls, data: dict) -> WorkItem:
        data = _mapping(data, "Work item")
        priority = data.get("priority") or WorkItemPriority.NORMAL
        try:
            priority = WorkItemPriority(priority)
        except ValueError:
            raise ValidationError(f"Unknown work item priority: {priority!r}",
                                  details={"priority": "must be LOW, NORMAL, HIGH or CRITICAL"}) from None
        minutes = _int(data.get("estimated_minutes"), "estimated_minutes", 30)
        if minutes <= 0:
            raise ValidationError("estimated_minutes must be positive",
                                  details={"estimated_minutes": "must be > 0"})
        return cls(
            description=_str(data.get("description"), "description"),
            priority=priority,
            estimated_minutes=minutes,
            completed=_bool(data.get("completed"), "completed", False),
        )

    def to_dict(self) -> dict:
        return {
            "description": self.description,
            "priority": self.priority.value,
            "estimated_minutes": self.estimated_minutes,
            "completed": self.completed,
        }


@dataclass(frozen=True)
class SparePart:
    """A parts requirement with quantity and optional supplier."""
    name: str
    quantity: int = 1
    supplier: str | None = None
    available: bool = True

    @classmethod
    def from_dict(cls, data: dict) -> SparePart:
        data = _mapping(data, "Spare part")
        name = _str(data.get("name"), "name").strip()
        if not name:
            raise ValidationError("Spare part name is required", details={"name": "required"})
        quantity = _int(data.get("quantity"), "quantity", 1)
        if quantity <= 0:
            raise ValidationError("Spare part quantity must be positive",
                                  details={"quantity": "must be > 0"})
        return cls(
            name=name,
            quantity=quantity,
            supplier=_str(data.get("supplier"), "supplier", None),
            available=_bool(data.get("available"), "available", True),
        )

    def to_dict(self) -> dict:
        return {
            "name": self.name,
            "quantity": self.quantity,
            "supplier": self.supplier,
            "available": self.available,
        }


@dataclass(frozen=True)
class NextAction:
    """Recommended operator action, shown in priority order."""
    action: str
    label: str
    description: str

    def to_dict(self) -> dict:
        return {"action": self.action, "label": self.label, "description": self.description}


# ═════════════════════════════════════════════════════════════════════════════
# Intervention & phase records
# ═════════════════════════════════════════════════════════════════════════════

@dataclass
class Intervention:
    id: int
    status: InterventionStatus | str = InterventionStatus.PLANNED
    urgent: bool = False
    description: str = ""
    scheduled_date: datetime | None = None
    created_at: datetime | None = None

    @classmethod
    def from_dict(cls, data: dict) -> Intervention:
        data = _mapping(data, "Intervention")
        if data.get("id") is None:
            raise ValidationError("Intervention id is required", details={"id": "required"})
        return cls(
            id=_int(data["id"], "id"),
            status=InterventionStatus.coerce(data.get("status", InterventionStatus.PLANNED)),
            urgent=_bool(data.get("urgent"), "urgent", False),
            description=_str(data.get("description"), "description"),
            scheduled_date=_parse_dt(data.get("scheduled_date"), "scheduled_date"),
            created_at=_parse_dt(data.get("created_at"), "created_at"),
        )

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "status": status_value(self.status),
            "urgent": self.urgent,
            "description": self.description,
            "scheduled_date": _iso(self.scheduled_date),
            "created_at": _iso(self.created_at),
        }


@dataclass
class DiagnosticRecord:
    completed: bool = True
    created_at: datetime | None = None
    required_work: list[WorkItem] = field(default_factory=list)
    spare_parts: list[SparePart] = field(default_factory=list)
    observations: str = ""

    @classmethod
    def from_dict(cls, data: dict) -> DiagnosticRecord:
        data = _mapping(data, "Diagnostic")
        return cls(
            completed=_bool(data.get("completed"), "completed", True),
            created_at=_parse_dt(data.get("created_at"), "created_at"),
            required_work=[WorkItem.from_dict(w) for w in _list(data.get("required_work"), "required_work")],
            spare_parts=[SparePart.from_dict(p) for p in _list(data.get("spare_parts"), "spare_parts")],
            observations=_str(data.get("observations"), "observations"),
        )

    def to_dict(self) -> dict:
        return {
            "completed": self.completed,
            "created_at": _iso(self.created_at),
            "required_work": [w.to_dict() for w in self.required_work],
            "spare_parts": [p.to_dict() for p in self.spare_parts],
            "observations": self.observations,
        }


@dataclass
class PlanningRecord:
    completed: bool = True
    created_at: datetime | None = None
    estimated_duration: int | None = None
    execution_capacity: int = 0
    parts_available: bool = False
    urgency_taken: bool = False

    @classmethod
    def from_dict(cls, data: dict) -> PlanningRecord:
        data = _mapping(data, "Planning")
        capacity = _int(data.get("execution_capacity"), "execution_capacity", 0)
        if capacity < 0:
            raise ValidationError("execution_capacity cannot be negative",
                                  details={"execution_capacity": "must be >= 0"})
        return cls(
            completed=_bool(data.get("completed"), "completed", True),
            created_at=_parse_dt(data.get("created_at"), "created_at"),
            estimated_duration=_int(data.get("estimated_duration"), "estimated_duration"),
            execution_capacity=capacity,
            parts_available=_bool(data.get("parts_available"), "parts_available", False),
            urgency_taken=_bool(data.get("urgency_taken"), "urgency_taken", False),
        )

    def to_dict(self) -> dict:
        return {
            "completed": self.completed,
            "created_at": _iso(self.created_at),
            "estimated_duration": self.estimated_duration,
            "execution_capacity": self.execution_capacity,
            "parts_available": self.parts_available,
            "urgency_taken": self.urgency_taken,
        }


@dataclass
class QualityControlRecord:
    completed: bool = True
    validated_at: datetime | None = None
    test_results: str | None = None
    vibration_analysis: str | None = None
    overall_evaluation: str | None = None

    @classmethod
    def from_dict(cls, data: dict) -> QualityControlRecord:
        data = _mapping(data, "Quality control")
        return cls(
            completed=_bool(data.get("completed"), "completed", True),
            validated_at=_parse_dt(data.get("validated_at"), "validated_at"),
            test_results=_str(data.get("test_results"), "test_results", None),
            vibration_analysis=_str(data.get("vibration_analysis"), "vibration_analysis", None),
            overall_evaluation=_str(data.get("overall_evaluation"), "overall_evaluation", None),
        )

    def to_dict(self) -> dict:
        return {
            "completed": self.completed,
            "validated_at": _iso(self.validated_at),
            "test_results": self.test_results,
            "vibration_analysis": self.vibration_analysis,
            "overall_evaluation": self.overall_evaluation,
        }


@dataclass(frozen=True)
class InterventionSnapshot:
    """Intervention plus whichever phase sub-records the collaborator returned."""
    intervention: Intervention
    diagnostic: DiagnosticRecord | None = None
    planning: PlanningRecord | None = None
    quality_control: QualityControlRecord | None = None

    @classmethod
    def from_dict(cls, data: dict) -> InterventionSnapshot:
        """Decode ``{"intervention": {...}, "diagnostic": {...}|null, ...}``."""
        data = _mapping(data, "Snapshot")
        if "intervention" not in data:
            raise ValidationError("intervention is required", details={"intervention": "required"})
        qc = data.get("quality_control")
        return cls(
            intervention=Intervention.from_dict(data["intervention"]),
            diagnostic=DiagnosticRecord.from_dict(data["diagnostic"]) if data.get("diagnostic") is not None else None,
            planning=PlanningRecord.from_dict(data["planning"]) if data.get("planning") is not None else None,
            quality_control=QualityControlRecord.from_dict(qc) if qc is not None else None,
        )


# ═════════════════════════════════════════════════════════════════════════════
# Results
# ═════════════════════════════════════════════════════════════════════════════

@dataclass(frozen=True)
class PhaseValidationResult:
    is_valid: bool
    errors: list[str] = field(default_factory=list)

    def to_dict(self) -> dict:
        return {"is_valid": self.is_valid, "errors": list(self.errors)}


@dataclass(frozen=True)
class EnrichedIntervention:
    """Read model: the intervention plus everything derived from its phase records."""
    intervention: Intervention
    phase: WorkflowPhase
    completion_percentage: int
    next_actions: list[NextAction]
    work_items: list[WorkItem]
    spare_parts: list[SparePart]
    intervention_type: InterventionType = InterventionType.CORRECTIVE_MAINTENANCE
    priority: WorkItemPriority = WorkItemPriority.NORMAL
    available_transitions: list[str] = field(default_factory=list)
    phases: dict = field(default_factory=dict)
    timeline: list[dict] = field(default_factory=list)

    def to_dict(self) -> dict:
        result = self.intervention.to_dict()
        result.update({
            "intervention_type": self.intervention_type.value,
            "priority": self.priority.value,
            "workflow": {
                "current_phase": self.phase.value,
                "completion_percentage": self.completion_percentage,
                "next_actions": [a.to_dict() for a in self.next_actions],
                "available_transitions": list(self.available_transitions),
                "phases": self.phases,
                "timeline": self.timeline,
            },
            "parsed_data": {
                "work_items": [w.to_dict() for w in self.work_items],
                "spare_parts": [p.to_dict() for p in self.spare_parts],
            },
        })
        return result
