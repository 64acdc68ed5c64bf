#!/usr/bin/env python3
"""Group repaired defects into display ranges and format report lines.

The repair pass emits one entry per defective verse or gap. For reporting,
consecutive entries of the same kind in the same chapter whose ranges touch
are coalesced, so that five empty verses in a row read as one line:

    Empty verse 5-9 at Genesis 1

Only neighbours in the input sequence are merged; an entry of another kind or
context in between always starts a new group.
"""

from __future__ import annotations

import dataclasses

from bible_tools.verse_repair import DEFECT_EMPTY, DEFECT_MISSING, DefectEntry


LABELS = {
    DEFECT_EMPTY: "Empty verse",
    DEFECT_MISSING: "Missing verses",
}


def group_defects(defects: list[DefectEntry]) -> list[DefectEntry]:
    """Coalesce adjacent, contiguous, same-kind, same-context entries.

    Input entries are left untouched; the returned entries are copies.
    """
    grouped: list[DefectEntry] = []
    for entry in defects:
        last = grouped[-1] if grouped else None
        if (last is not None
                and last.kind == entry.kind
                and last.context == entry.context
                and last.end + 1 == entry.start):
            last.end = entry.end
        else:
            grouped.append(dataclasses.replace(entry))
    return grouped


def format_range(start: int, end: int) -> str:
    return str(start) if start == end else f"{start}-{end}"


def format_defect(entry: DefectEntry) -> str:
    label = LABELS.get(entry.kind, entry.kind)
    return f"{label} {format_range(entry.start, entry.end)} at {entry.context}"


def format_report(defects: list[DefectEntry]) -> list[str]:
    """Group ``defects`` and render one display line per group."""
    return [format_defect(g) for g in group_defects(defects)]


def count_by_kind(defects: list[DefectEntry]) -> dict[str, int]:
    """Number of affected verses per defect kind (ranges count every verse)."""
    counts = {DEFECT_EMPTY: 0, DEFECT_MISSING: 0}
    for d in defects:
        counts[d.kind] = counts.get(d.kind, 0) + (d.end - d.start + 1)
    return counts
