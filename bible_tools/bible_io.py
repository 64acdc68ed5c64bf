#!/usr/bin/env python3
"""Read and write Bible documents in plain JSON and FSB form.

Two on-disk shapes are accepted:
  - JSON: a top-level object ``{"books": [...], ...}``
  - FSB:  a two-item array ``["<id>", {"books": [...], ...}]``

Repair always works on the inner object. On output the FSB wrapper (with its
original id) is put back, so a file comes out in the shape it went in.
"""

from __future__ import annotations

import json
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

import jsonschema


KIND_JSON = "json"
KIND_FSB = "fsb"

_OBJECT_ARRAY = {"type": ["array", "null"], "items": {"type": "object"}}

BIBLE_DATA_SCHEMA = {
    "type": "object",
    "properties": {
        "books": {
            "type": ["array", "null"],
            "items": {
                "type": "object",
                "properties": {
                    "chapters": {
                        "type": ["array", "null"],
                        "items": {
                            "type": "object",
                            "properties": {"verses": _OBJECT_ARRAY},
                        },
                    },
                },
            },
        },
    },
}

FSB_WRAPPER_SCHEMA = {
    "type": "array",
    "prefixItems": [{"type": "string"}, {"type": "object"}],
    "minItems": 2,
    "maxItems": 2,
}


class InputParseError(Exception):
    """A file could not be read as a Bible document."""

    def __init__(self, message: str, line: Optional[int] = None, column: Optional[int] = None):
        super().__init__(message)
        self.message = message
        self.line = line
        self.column = column

    def location(self) -> str:
        if self.line is None:
            return ""
        if self.column is None:
            return f"line {self.line}"
        return f"line {self.line}, column {self.column}"

    def __str__(self) -> str:
        loc = self.location()
        return f"{self.message} ({loc})" if loc else self.message


@dataclass
class BibleFile:
    """A parsed document plus what is needed to write it back in the same shape."""
    kind: str                     # KIND_JSON or KIND_FSB
    data: dict                    # The inner Bible object
    wrapper_id: Optional[str] = None

    def to_raw(self):
        if self.kind == KIND_FSB:
            return [self.wrapper_id, self.data]
        return self.data


def _schema_error_path(err: jsonschema.ValidationError) -> str:
    parts = [str(p) for p in err.absolute_path]
    return "/" + "/".join(parts) if parts else "/"


def _validate_data(data: dict) -> None:
    try:
        jsonschema.validate(data, BIBLE_DATA_SCHEMA)
    except jsonschema.ValidationError as e:
        raise InputParseError(f"Invalid Bible structure at {_schema_error_path(e)}: {e.message}") from e


def parse_bible_text(text: str) -> BibleFile:
    """Parse document text, detecting JSON vs FSB shape."""
    try:
        raw = json.loads(text)
    except json.JSONDecodeError as e:
        raise InputParseError(f"Invalid JSON syntax: {e.msg}", line=e.lineno, column=e.colno) from e
    except RecursionError as e:
        raise InputParseError("JSON is nested too deeply to parse") from e

    if isinstance(raw, list):
        try:
            jsonschema.validate(raw, FSB_WRAPPER_SCHEMA)
        except jsonschema.ValidationError as e:
            raise InputParseError(
                'Unknown structure. Expected {object} or ["id", {object}].'
            ) from e
        bible = BibleFile(kind=KIND_FSB, data=raw[1], wrapper_id=raw[0])
    elif isinstance(raw, dict):
        bible = BibleFile(kind=KIND_JSON, data=raw)
    else:
        raise InputParseError('Unknown structure. Expected {object} or ["id", {object}].')

    _validate_data(bible.data)
    return bible


def read_bible_file(path: str | os.PathLike) -> BibleFile:
    try:
        text = Path(path).read_text(encoding="utf-8-sig")
    except UnicodeDecodeError as e:
        raise InputParseError(f"File is not valid UTF-8 (byte offset {e.start})") from e
    except OSError as e:
        raise InputParseError(f"Cannot read file: {e.strerror or e}") from e
    return parse_bible_text(text)


def dump_bible(bible: BibleFile, pretty: bool = False) -> str:
    if pretty:
        return json.dumps(bible.to_raw(), ensure_ascii=False, indent=2)
    return json.dumps(bible.to_raw(), ensure_ascii=False, separators=(",", ":"))


def write_bible_file(path: str | os.PathLike, bible: BibleFile, pretty: bool = False) -> None:
    os.makedirs(os.path.dirname(os.path.abspath(path)) or ".", exist_ok=True)
    with open(path, "w", encoding="utf-8") as f:
        f.write(dump_bible(bible, pretty=pretty))
