#!/usr/bin/env python3
"""Console logging with an optional log-file copy.

Every message goes to the console. When file logging is on, messages are also
buffered and written in one go by ``flush()`` to
``<logs_dir>/fix-log-<timestamp>.txt``.
"""

from __future__ import annotations

import os
import sys
from datetime import datetime, timezone
from typing import Optional


def log_timestamp(now: Optional[datetime] = None) -> str:
    """ISO-8601 UTC timestamp that is safe in file names (no ':' or '.')."""
    now = now or datetime.now(timezone.utc)
    stamp = now.astimezone(timezone.utc).isoformat(timespec="milliseconds")
    return stamp.replace("+00:00", "Z").replace(":", "-").replace(".", "-")


class RunLog:
    def __init__(self, logs_dir: str = "logs", write_file: bool = False):
        self.logs_dir = logs_dir
        self.write_file = write_file
        self.lines: list[str] = []
        self.path = os.path.join(logs_dir, f"fix-log-{log_timestamp()}.txt")

    def log(self, msg: str = "", level: str = "INFO"):
        stream = sys.stderr if level in ("WARN", "ERROR") else sys.stdout
        print(msg, file=stream, flush=True)
        if self.write_file:
            self.lines.append(msg)

    def info(self, msg: str = ""):
        self.log(msg)

    def warn(self, msg: str):
        self.log(msg, "WARN")

    def error(self, msg: str):
        self.log(msg, "ERROR")

    def flush(self) -> Optional[str]:
        """Write buffered lines to the log file. Returns its path, or None."""
        if not self.write_file or not self.lines:
            return None
        os.makedirs(self.logs_dir, exist_ok=True)
        with open(self.path, "w", encoding="utf-8") as f:
            f.write("\n".join(self.lines) + "\n")
        self.lines = []
        print(f"\nLog written to {self.path}")
        return self.path
