"""
Description parser: work items & spare parts embedded in free text.

Diagnostic submissions are stored as marker-delimited sections appended to the
intervention description:

    Pump makes a grinding noise.

    --- REQUIRED WORK ---
    - Replace bearing (HIGH, 45min)
    - Check alignment (NORMAL, 30min)

    --- SPARE PARTS ---
    • Bearing x2 (SKF)
    • Seal kit x1

    --- OBSERVATIONS ---
    Vibration above threshold on the drive end.

Reading is lenient: lines that do not match the entry pattern keep their text
with default values, and malformed text never raises. When no work item is
found at all a two-entry checklist is returned instead, because the detail
view always renders one. Spare parts have no such fallback.

Usage:
    from maintflow.services.description_parser import parse_work_items, parse_spare_parts

    items = parse_work_items(intervention.description)
    parts = parse_spare_parts(intervention.description)
"""

import logging
import re
from datetime import datetime

from maintflow.models.workflow import SparePart, WorkItem, WorkItemPriority, status_value

logger = logging.getLogger(__name__)

# Section markers
REQUIRED_WORK_MARKER = "REQUIRED WORK"
SPARE_PARTS_MARKER = "SPARE PARTS"
OBSERVATIONS_MARKER = "OBSERVATIONS"
STATUS_CHANGE_MARKER = "STATUS CHANGE"

_WORKFLOW_MARKERS = (REQUIRED_WORK_MARKER, SPARE_PARTS_MARKER, OBSERVATIONS_MARKER)

_BULLET_PREFIXES = ("- ", "• ")

# "<description> (<PRIORITY>, <N>min)"
_WORK_ITEM_RE = re.compile(r"^(.+?)\s*\((\w+),\s*(\d+)min\)$")
# "<name> x<N>" with an optional " (<supplier>)"
_SPARE_PART_RE = re.compile(r"^(.+?)\s*x(\d+)(?:\s*\((.+?)\))?$")
_MARKER_LINE_RE = re.compile(r"^---\s+(.+?)\s+---$")

DEFAULT_PRIORITY = WorkItemPriority.NORMAL
DEFAULT_DURATION_MIN = 30
DEFAULT_QUANTITY = 1

DEFAULT_WORK_ITEMS = (
    WorkItem(description="General visual inspection", priority=WorkItemPriority.HIGH, estimated_minutes=30),
    WorkItem(description="Functional test", priority=WorkItemPriority.NORMAL, estimated_minutes=45),
)


def _bullet_text(line: str) -> str | None:
    """Entry text of a bulleted line, or None when the line is not an entry."""
    stripped = line.strip()
    for prefix in _BULLET_PREFIXES:
        if stripped.startswith(prefix):
            return stripped[len(prefix):]
    return None


# ═════════════════════════════════════════════════════════════════════════════
# Reading
# ═════════════════════════════════════════════════════════════════════════════

def _parse_work_item(text: str) -> WorkItem:
    match = _WORK_ITEM_RE.match(text)
    if not match:
        return WorkItem(description=text, priority=DEFAULT_PRIORITY, estimated_minutes=DEFAULT_DURATION_MIN)

    description, raw_priority, raw_minutes = match.groups()
    try:
        priority = WorkItemPriority(raw_priority.upper())
    except ValueError:
        priority = DEFAULT_PRIORITY
    minutes = int(raw_minutes) or DEFAULT_DURATION_MIN
    return WorkItem(description=description, priority=priority, estimated_minutes=minutes)


def _parse_spare_part(text: str) -> SparePart:
    match = _SPARE_PART_RE.match(text)
    if not match:
        return SparePart(name=text, quantity=DEFAULT_QUANTITY, supplier=None, available=True)

    name, raw_quantity, supplier = match.groups()
    return SparePart(
        name=name,
        quantity=int(raw_quantity) or DEFAULT_QUANTITY,
        supplier=supplier,
        available=True,
    )


def parse_work_items(text: str | None) -> list[WorkItem]:
    """Work items of the REQUIRED WORK section; the default checklist when there are none."""
    items: list[WorkItem] = []
    in_section = False

    for line in (text or "").split("\n"):
        # substring match: a marker anywhere on the line toggles the section
        if REQUIRED_WORK_MARKER in line:
            in_section = True
            continue
        if SPARE_PARTS_MARKER in line or OBSERVATIONS_MARKER in line:
            in_section = False
            continue
        if not in_section:
            continue
        entry = _bullet_text(line)
        if entry:
            items.append(_parse_work_item(entry))

    if not items:
        logger.debug("No work items found in description, using default checklist")
        return list(DEFAULT_WORK_ITEMS)
    return items


def parse_spare_parts(text: str | None) -> list[SparePart]:
    """Spare parts of the SPARE PARTS section; empty when there are none."""
    parts: list[SparePart] = []
    in_section = False

    for line in (text or "").split("\n"):
        if SPARE_PARTS_MARKER in line:
            in_section = True
            continue
        if OBSERVATIONS_MARKER in line:
            in_section = False
            continue
        if not in_section:
            continue
        entry = _bullet_text(line)
        if entry:
            parts.append(_parse_spare_part(entry))

    return parts


# ═════════════════════════════════════════════════════════════════════════════
# Writing
# ═════════════════════════════════════════════════════════════════════════════

def serialize_work_items(items: list[WorkItem]) -> str:
    return "\n".join(
        f"- {item.description} ({item.priority.value}, {item.estimated_minutes}min)"
        for item in items
    )


def serialize_spare_parts(parts: list[SparePart]) -> str:
    lines = []
    for part in parts:
        line = f"• {part.name} x{part.quantity}"
        if part.supplier:
            line += f" ({part.supplier})"
        lines.append(line)
    return "\n".join(lines)


def strip_workflow_sections(description: str | None) -> str:
    """Drop previously written REQUIRED WORK / SPARE PARTS / OBSERVATIONS blocks.

    A block runs from its marker line to the next marker line. Status-change
    blocks and the free text before the first marker are kept.
    """
    kept: list[str] = []
    skipping = False
    for line in (description or "").split("\n"):
        marker = _MARKER_LINE_RE.match(line.strip())
        if marker:
            skipping = marker.group(1) in _WORKFLOW_MARKERS
        if not skipping:
            kept.append(line)
    return "\n".join(kept).rstrip()


def append_workflow_sections(
    description: str | None,
    required_work: list[WorkItem],
    spare_parts: list[SparePart],
    observations: str = "",
) -> str:
    """Rewrite the structured sections of a description from a diagnostic submission.

    A resubmission replaces the sections of the previous one. Empty inputs
    produce no section.
    """
    result = strip_workflow_sections(description)

    if required_work:
        result += f"\n\n--- {REQUIRED_WORK_MARKER} ---\n"
        result += serialize_work_items(required_work)
    if spare_parts:
        result += f"\n\n--- {SPARE_PARTS_MARKER} ---\n"
        result += serialize_spare_parts(spare_parts)
    if observations:
        result += f"\n\n--- {OBSERVATIONS_MARKER} ---\n"
        result += observations

    return result


def append_status_change(
    description: str | None,
    old_status,
    new_status,
    reason: str,
    at: datetime,
) -> str:
    """Append a status-change log block."""
    return (
        f"{description or ''}\n--- {STATUS_CHANGE_MARKER} ({at.isoformat()}) ---\n"
        f"{status_value(old_status)} → {status_value(new_status)}: {reason}"
    )
