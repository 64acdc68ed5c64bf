#!/usr/bin/env python3
"""Verse repair: merge empty verses and numbering gaps into the previous verse.

Converted Bibles often come out with verses that have no text, or with verse
numbers that skip ahead. Both are repaired the same way: the nearest previous
verse that has text absorbs the defective numbers by extending its
``endNumber`` range marker.

The heuristic only ever merges backwards. A chapter that starts with an empty
verse, or whose first verse number is above 1, has no previous verse to absorb
the defect: the empty verse is dropped and the leading gap is ignored, and
neither is reported. Attributing such defects to the *following* verse is not
supported.

Input verses are never mutated. Retained verses are returned as shallow copies
of the input objects, so any extra fields a converter wrote are preserved.
"""

from __future__ import annotations

import copy
from dataclasses import dataclass, field
from typing import Any, Optional


DEFECT_EMPTY = "empty"
DEFECT_MISSING = "missing"

END_NUMBER_KEY = "endNumber"


# ─── Data classes ────────────────────────────────────────────────────────────

@dataclass
class DefectEntry:
    """One repaired defect, located by verse range and book+chapter context."""
    kind: str                     # DEFECT_EMPTY or DEFECT_MISSING
    start: int                    # First affected verse number
    end: int                      # Last affected verse number (inclusive)
    context: str                  # e.g. "Genesis 1"

    def to_dict(self) -> dict:
        return {"kind": self.kind, "start": self.start, "end": self.end, "context": self.context}


@dataclass
class RepairResult:
    """Outcome of repairing one chapter."""
    verses: list[dict]
    defects: list[DefectEntry] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)

    @property
    def modified(self) -> bool:
        return bool(self.defects)


@dataclass
class DocumentRepair:
    """Outcome of repairing every chapter of one Bible document."""
    document: dict
    defects: list[DefectEntry] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)

    @property
    def modified(self) -> bool:
        return bool(self.defects)


# ─── Verse helpers ───────────────────────────────────────────────────────────

def is_empty_text(text: Any) -> bool:
    """True when a verse has no text, or only whitespace.

    Any falsy value (None, "", 0, false) counts as no text. Other non-string
    values count as text.
    """
    if not text:
        return True
    if isinstance(text, str):
        return not text.strip()
    return False


def verse_number(verse: dict) -> Optional[int]:
    """Return the verse's integer number, or None when it is missing/malformed."""
    num = verse.get("number")
    if isinstance(num, bool) or not isinstance(num, int):
        return None
    return num


def _extend_range(verse: dict, end: int) -> None:
    """Raise ``verse['endNumber']`` to ``end``. Never lowers an existing value."""
    current = verse.get(END_NUMBER_KEY)
    if isinstance(current, int) and not isinstance(current, bool) and current >= end:
        return
    verse[END_NUMBER_KEY] = end


def chapter_context(book: dict, chapter: dict) -> str:
    """Human-readable location of a chapter, e.g. ``"Genesis 1"``."""
    return f"{book.get('name')} {chapter.get('number')}"


# ─── Repair ──────────────────────────────────────────────────────────────────

def repair_verses(verses: list[dict], context: str) -> RepairResult:
    """Repair one chapter's verses in a single forward pass.

    Gap and empty-text checks are independent: a verse can close a numbering
    gap behind it and be empty itself, producing two defects.
    """
    kept: list[dict] = []
    defects: list[DefectEntry] = []
    warnings: list[str] = []
    last_kept: Optional[dict] = None
    expected: Optional[int] = None

    for verse in verses:
        num = verse_number(verse)
        if num is None:
            # Nothing to compare against or merge into; pass it through.
            warnings.append(f"Verse without a valid number kept unchanged at {context}")
            kept.append(copy.copy(verse))
            continue

        if expected is None:
            expected = num

        if num > expected and last_kept is not None:
            _extend_range(last_kept, num - 1)
            defects.append(DefectEntry(DEFECT_MISSING, expected, num - 1, context))
        elif num < expected:
            warnings.append(f"Verse {num} out of order (expected {expected}) at {context}")

        if is_empty_text(verse.get("text")):
            if last_kept is not None:
                _extend_range(last_kept, num)
                defects.append(DefectEntry(DEFECT_EMPTY, num, num, context))
        else:
            last_kept = copy.copy(verse)
            kept.append(last_kept)

        expected = num + 1

    return RepairResult(verses=kept, defects=defects, warnings=warnings)


def repair_document(document: dict) -> DocumentRepair:
    """Repair every chapter of a parsed Bible document.

    Returns a new document; only modified chapters get a new ``verses`` list,
    everything else is shared with the input. Missing or null ``books``, ``chapters``
    or ``verses`` fields count as empty.
    """
    result = DocumentRepair(document=dict(document))
    books_out = []

    for book in document.get("books") or []:
        chapters_out = []
        for chapter in book.get("chapters") or []:
            context = chapter_context(book, chapter)
            repaired = repair_verses(chapter.get("verses") or [], context)
            result.defects.extend(repaired.defects)
            result.warnings.extend(repaired.warnings)
            if repaired.modified:
                chapter = {**chapter, "verses": repaired.verses}
            chapters_out.append(chapter)
        if isinstance(book.get("chapters"), list):
            book = {**book, "chapters": chapters_out}
        books_out.append(book)

    if isinstance(document.get("books"), list):
        result.document["books"] = books_out
    return result
