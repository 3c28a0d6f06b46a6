"""
Intervention Status Transition Table

Static map of legal status → status edges:

    PLANNED         → AWAITING_PARTS | CANCELLED
    AWAITING_PARTS  → IN_PROGRESS | CANCELLED
    IN_PROGRESS     → PAUSED | DONE | FAILED
    PAUSED          → IN_PROGRESS | CANCELLED
    DONE            → (terminal)
    CANCELLED       → (terminal)
    FAILED          → IN_PROGRESS   (recovery)

Lookups never raise. Unknown statuses (on either side) are simply illegal,
so callers decide whether to surface a validation error.

Usage:
    from maintflow.services.status_transitions import is_legal_transition

    if not is_legal_transition("PLANNED", "IN_PROGRESS"):
        ...
"""

import logging

from maintflow.models.workflow import InterventionStatus, status_value

logger = logging.getLogger(__name__)

_S = InterventionStatus

STATUS_TRANSITIONS: dict[str, list[str]] = {
    _S.PLANNED.value:        [_S.AWAITING_PARTS.value, _S.CANCELLED.value],
    _S.AWAITING_PARTS.value: [_S.IN_PROGRESS.value, _S.CANCELLED.value],
    _S.IN_PROGRESS.value:    [_S.PAUSED.value, _S.DONE.value, _S.FAILED.value],
    _S.PAUSED.value:         [_S.IN_PROGRESS.value, _S.CANCELLED.value],
    _S.DONE.value:           [],
    _S.CANCELLED.value:      [],
    _S.FAILED.value:         [_S.IN_PROGRESS.value],
}

TERMINAL_STATUSES = frozenset(s for s, targets in STATUS_TRANSITIONS.items() if not targets)


def is_legal_transition(from_status, to_status) -> bool:
    """True when ``from_status → to_status`` is an edge of the table."""
    targets = STATUS_TRANSITIONS.get(status_value(from_status))
    if targets is None:
        return False
    return status_value(to_status) in targets


def validate_status_transition(from_status, to_status) -> dict:
    """
    Validate a status change and explain a refusal.

    Returns:
        {"valid": bool, "from": str, "to": str, "reason": str|None}
    """
    current = status_value(from_status)
    target = status_value(to_status)

    if current not in STATUS_TRANSITIONS:
        reason = f"Unknown current status: {current}"
    elif target not in STATUS_TRANSITIONS:
        reason = f"Unknown target status: {target}"
    elif current in TERMINAL_STATUSES:
        reason = f"Status '{current}' is terminal"
    elif not is_legal_transition(current, target):
        reason = f"Invalid status transition from {current} to {target}"
    else:
        return {"valid": True, "from": current, "to": target, "reason": None}

    logger.debug("Rejected intervention transition %s → %s: %s", current, target, reason)
    return {"valid": False, "from": current, "to": target, "reason": reason}


def get_available_transitions(status) -> list[str]:
    """Legal target statuses from ``status``, in table order."""
    return list(STATUS_TRANSITIONS.get(status_value(status), []))
