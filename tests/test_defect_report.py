#!/usr/bin/env python3
"""Tests for defect grouping and report lines (bible_tools/defect_report.py)"""

import sys
from pathlib import Path

import pytest

sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

from bible_tools.defect_report import (
    count_by_kind,
    format_defect,
    format_range,
    format_report,
    group_defects,
)
from bible_tools.verse_repair import DEFECT_EMPTY, DEFECT_MISSING, DefectEntry


def empty(start, end=None, ctx="Genesis 1"):
    return DefectEntry(DEFECT_EMPTY, start, start if end is None else end, ctx)


def missing(start, end=None, ctx="Genesis 1"):
    return DefectEntry(DEFECT_MISSING, start, start if end is None else end, ctx)


# ─── Grouping ──────────────────────────────────────────────────────────────

class TestGroupDefects:
    def test_contiguous_same_context_merged(self):
        grouped = group_defects([empty(5), empty(6)])
        assert grouped == [empty(5, 6)]

    def test_long_run_merged(self):
        grouped = group_defects([empty(n) for n in range(2, 9)])
        assert grouped == [empty(2, 8)]

    def test_non_contiguous_not_merged(self):
        grouped = group_defects([empty(5), empty(7)])
        assert grouped == [empty(5), empty(7)]

    def test_different_context_not_merged(self):
        grouped = group_defects([empty(5, ctx="Genesis 1"), empty(6, ctx="Genesis 2")])
        assert len(grouped) == 2

    def test_different_kind_not_merged(self):
        grouped = group_defects([missing(3, 4), empty(5)])
        assert grouped == [missing(3, 4), empty(5)]

    def test_only_adjacent_entries_merge(self):
        """An unrelated entry in between blocks merging, even if numbers touch."""
        grouped = group_defects([empty(5), missing(10, ctx="Exodus 1"), empty(6)])
        assert grouped == [empty(5), missing(10, ctx="Exodus 1"), empty(6)]

    def test_range_entries_merge(self):
        grouped = group_defects([missing(3, 4), missing(5, 9)])
        assert grouped == [missing(3, 9)]

    def test_input_not_mutated(self):
        entries = [empty(5), empty(6)]
        group_defects(entries)
        assert entries == [empty(5), empty(6)]

    def test_empty_input(self):
        assert group_defects([]) == []

    def test_idempotent(self):
        entries = [empty(1), empty(2), missing(4, 5), empty(1, ctx="Exodus 3"), empty(3, ctx="Exodus 3")]
        once = group_defects(entries)
        assert group_defects(once) == once


# ─── Formatting ────────────────────────────────────────────────────────────

class TestFormatting:
    def test_single_number_range(self):
        assert format_range(4, 4) == "4"

    def test_span_range(self):
        assert format_range(3, 7) == "3-7"

    def test_empty_label(self):
        assert format_defect(empty(2)) == "Empty verse 2 at Genesis 1"

    def test_missing_label(self):
        assert format_defect(missing(3, 4, ctx="Exodus 20")) == "Missing verses 3-4 at Exodus 20"

    def test_report_groups_then_formats(self):
        lines = format_report([empty(5), empty(6), missing(9, 10, ctx="Genesis 2")])
        assert lines == [
            "Empty verse 5-6 at Genesis 1",
            "Missing verses 9-10 at Genesis 2",
        ]


class TestCountByKind:
    def test_counts_every_verse_in_ranges(self):
        counts = count_by_kind([empty(2), missing(3, 5), empty(8, 9)])
        assert counts == {DEFECT_EMPTY: 3, DEFECT_MISSING: 3}

    def test_no_defects(self):
        assert count_by_kind([]) == {DEFECT_EMPTY: 0, DEFECT_MISSING: 0}
