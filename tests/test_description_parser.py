"""
Description parser: reading work items and spare parts out of free text,
and writing diagnostic sections / status-change blocks back into it.
"""

from datetime import datetime

import pytest

from maintflow.models.workflow import SparePart, WorkItem, WorkItemPriority
from maintflow.services.description_parser import (
    DEFAULT_WORK_ITEMS,
    append_status_change,
    append_workflow_sections,
    parse_spare_parts,
    parse_work_items,
    serialize_spare_parts,
    serialize_work_items,
    strip_workflow_sections,
)

P = WorkItemPriority

FULL_DESCRIPTION = """Pump makes a grinding noise.

--- REQUIRED WORK ---
- Replace bearing (HIGH, 45min)
- Check alignment (normal, 20min)
- Clean the housing

--- SPARE PARTS ---
• Bearing x2 (SKF)
• Seal kit x1
• Grease

--- OBSERVATIONS ---
- Vibration above threshold on the drive end."""


class TestParseWorkItems:

    @pytest.mark.parametrize("text", ["", None, "Pump makes a grinding noise."])
    def test_no_section_returns_default_checklist(self, text):
        items = parse_work_items(text)
        assert items == list(DEFAULT_WORK_ITEMS)
        assert len(items) == 2

    def test_single_entry(self):
        items = parse_work_items("--- REQUIRED WORK ---\n- Replace bearing (HIGH, 45min)")
        assert items == [WorkItem("Replace bearing", P.HIGH, 45)]

    def test_full_description(self):
        items = parse_work_items(FULL_DESCRIPTION)
        assert [i.description for i in items] == ["Replace bearing", "Check alignment", "Clean the housing"]
        assert [i.priority for i in items] == [P.HIGH, P.NORMAL, P.NORMAL]
        assert [i.estimated_minutes for i in items] == [45, 20, 30]

    def test_section_ends_at_spare_parts(self):
        """Bullets of later sections are not read as work items."""
        items = parse_work_items(FULL_DESCRIPTION)
        assert all("Bearing x2" not in i.description for i in items)
        assert all("Vibration" not in i.description for i in items)

    def test_marker_inside_a_line_ends_the_section(self):
        text = "--- REQUIRED WORK ---\n- Inspect SPARE PARTS shelf\n- Tighten bolts (LOW, 10min)"
        assert parse_work_items(text) == list(DEFAULT_WORK_ITEMS)

    def test_non_bullet_lines_are_ignored(self):
        text = "--- REQUIRED WORK ---\nfree text line\n- Tighten bolts (LOW, 10min)"
        assert parse_work_items(text) == [WorkItem("Tighten bolts", P.LOW, 10)]

    def test_unknown_priority_falls_back(self):
        (item,) = parse_work_items("--- REQUIRED WORK ---\n- Tighten bolts (SOON, 10min)")
        assert item.priority == P.NORMAL
        assert item.estimated_minutes == 10

    def test_zero_minutes_falls_back(self):
        (item,) = parse_work_items("--- REQUIRED WORK ---\n- Tighten bolts (LOW, 0min)")
        assert item.estimated_minutes == 30

    def test_empty_section_returns_default_checklist(self):
        assert parse_work_items("--- REQUIRED WORK ---\n\n--- SPARE PARTS ---\n• Bearing x2") == list(DEFAULT_WORK_ITEMS)


class TestParseSpareParts:

    def test_empty_has_no_fallback(self):
        assert parse_spare_parts("") == []
        assert parse_spare_parts(None) == []

    def test_single_entry(self):
        parts = parse_spare_parts("--- SPARE PARTS ---\n• Bearing x2 (SKF)")
        assert parts == [SparePart("Bearing", 2, "SKF", True)]

    def test_full_description(self):
        parts = parse_spare_parts(FULL_DESCRIPTION)
        assert parts == [
            SparePart("Bearing", 2, "SKF"),
            SparePart("Seal kit", 1, None),
            SparePart("Grease", 1, None),
        ]

    def test_section_ends_at_observations(self):
        assert all("Vibration" not in p.name for p in parse_spare_parts(FULL_DESCRIPTION))

    def test_dash_bullets_accepted(self):
        assert parse_spare_parts("--- SPARE PARTS ---\n- Filter x3") == [SparePart("Filter", 3)]

    def test_zero_quantity_falls_back(self):
        (part,) = parse_spare_parts("--- SPARE PARTS ---\n• Filter x0")
        assert part.quantity == 1


class TestSerialize:

    def test_work_items(self):
        text = serialize_work_items([WorkItem("Replace bearing", P.HIGH, 45), WorkItem("Check oil level")])
        assert text == "- Replace bearing (HIGH, 45min)\n- Check oil level (NORMAL, 30min)"

    def test_spare_parts(self):
        text = serialize_spare_parts([SparePart("Bearing", 2, "SKF"), SparePart("Seal kit")])
        assert text == "• Bearing x2 (SKF)\n• Seal kit x1"

    def test_written_sections_read_back(self):
        work = [WorkItem("Replace bearing", P.CRITICAL, 90), WorkItem("Check alignment", P.LOW, 15)]
        parts = [SparePart("Bearing", 2, "SKF"), SparePart("Seal kit", 1)]
        text = append_workflow_sections("Pump noise.", work, parts, "Drive end hot")
        assert parse_work_items(text) == work
        assert parse_spare_parts(text) == parts


class TestAppendWorkflowSections:

    def test_layout(self):
        text = append_workflow_sections(
            "Pump noise.", [WorkItem("Replace bearing", P.HIGH, 45)], [SparePart("Bearing", 2, "SKF")], "Hot",
        )
        assert text == (
            "Pump noise.\n\n"
            "--- REQUIRED WORK ---\n- Replace bearing (HIGH, 45min)\n\n"
            "--- SPARE PARTS ---\n• Bearing x2 (SKF)\n\n"
            "--- OBSERVATIONS ---\nHot"
        )

    def test_empty_inputs_write_nothing(self):
        assert append_workflow_sections("Pump noise.", [], []) == "Pump noise."

    def test_resubmission_replaces_previous_sections(self):
        first = append_workflow_sections("Pump noise.", [WorkItem("Old task here")], [SparePart("Old part")], "old")
        second = append_workflow_sections(first, [WorkItem("New task here")], [], "")
        assert "Old task here" not in second
        assert "Old part" not in second
        assert second.count("--- REQUIRED WORK ---") == 1
        assert parse_work_items(second) == [WorkItem("New task here")]
        assert parse_spare_parts(second) == []


class TestStripWorkflowSections:

    def test_keeps_free_text(self):
        assert strip_workflow_sections(FULL_DESCRIPTION) == "Pump makes a grinding noise."

    def test_keeps_status_change_blocks(self):
        logged = append_status_change("Pump noise.", "PLANNED", "AWAITING_PARTS", "parts ordered",
                                      datetime(2024, 3, 1, 8, 0))
        text = append_workflow_sections(logged, [WorkItem("Replace bearing")], [])
        stripped = strip_workflow_sections(text)
        assert "--- STATUS CHANGE (2024-03-01T08:00:00) ---" in stripped
        assert "REQUIRED WORK" not in stripped

    def test_none(self):
        assert strip_workflow_sections(None) == ""


class TestAppendStatusChange:

    def test_block_format(self):
        text = append_status_change("Pump noise.", "IN_PROGRESS", "PAUSED", "waiting for crane",
                                    datetime(2024, 3, 1, 14, 30))
        assert text == (
            "Pump noise.\n--- STATUS CHANGE (2024-03-01T14:30:00) ---\n"
            "IN_PROGRESS → PAUSED: waiting for crane"
        )

    def test_status_change_does_not_disturb_parsing(self):
        text = append_status_change(FULL_DESCRIPTION, "PLANNED", "AWAITING_PARTS", "diagnosed",
                                    datetime(2024, 3, 1))
        assert len(parse_work_items(text)) == 3
        assert len(parse_spare_parts(text)) == 3
