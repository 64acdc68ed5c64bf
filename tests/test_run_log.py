"""Tests for the run log (bible_tools/run_log.py)"""

import os
import re
import sys
from datetime import datetime, timezone
from pathlib import Path

sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

from bible_tools.run_log import RunLog, log_timestamp


class TestLogTimestamp:
    def test_filename_safe(self):
        stamp = log_timestamp(datetime(2024, 3, 1, 12, 30, 5, 123000, tzinfo=timezone.utc))
        assert stamp == "2024-03-01T12-30-05-123Z"
        assert not re.search(r"[:.]", stamp)


class TestRunLog:
    def test_console_routing(self, capsys):
        log = RunLog()
        log.info("hello")
        log.warn("careful")
        log.error("broken")
        captured = capsys.readouterr()
        assert captured.out == "hello\n"
        assert captured.err == "careful\nbroken\n"

    def test_no_file_unless_enabled(self, tmp_path):
        log = RunLog(logs_dir=str(tmp_path / "logs"))
        log.info("line")
        assert log.flush() is None
        assert not (tmp_path / "logs").exists()

    def test_flush_writes_all_levels(self, tmp_path):
        log = RunLog(logs_dir=str(tmp_path / "logs"), write_file=True)
        log.info("one")
        log.error("two")
        path = log.flush()
        assert path is not None
        assert os.path.basename(path).startswith("fix-log-")
        assert Path(path).read_text(encoding="utf-8") == "one\ntwo\n"

    def test_flush_empty_buffer(self, tmp_path):
        log = RunLog(logs_dir=str(tmp_path / "logs"), write_file=True)
        assert log.flush() is None
