#!/usr/bin/env python3
"""Fix empty verses and verse-number gaps in converted JSON/FSB Bibles.

Scans an input directory for ``.json`` / ``.fsb`` Bibles, merges every empty
verse and every numbering gap into the preceding verse (see verse_repair.py),
prints a grouped report per Bible, and writes fixed copies of the Bibles that
needed changes. Files that cannot be parsed are skipped and counted.

Merging is a heuristic: always double-check the reported verse ranges against
the original/reference Bible.

Usage:
  python bible_tools/fix_bible.py \\
    [--input-dir ../Converted] [--output-dir ../Fixed] [--logs-dir logs] \\
    [--config fixer.yaml] [--prefix fixed_] \\
    [--dry-run] [--pretty] [--log] [--json-report report.json]
"""

from __future__ import annotations

import argparse
import json
import os
import sys
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional

# Add repo root to path
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))
from bible_tools.bible_io import InputParseError, read_bible_file, write_bible_file
from bible_tools.defect_report import count_by_kind, format_report, group_defects
from bible_tools.fix_config import ConfigError, FixConfig, load_config
from bible_tools.run_log import RunLog
from bible_tools.verse_repair import DefectEntry, repair_document


STATUS_FIXED = "fixed"
STATUS_CLEAN = "clean"
STATUS_SKIPPED = "skipped"
STATUS_FAILED = "failed"


@dataclass
class FileOutcome:
    name: str
    status: str                   # STATUS_FIXED, STATUS_CLEAN, STATUS_SKIPPED or STATUS_FAILED
    defects: list[DefectEntry] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)
    output_path: Optional[str] = None
    error: Optional[str] = None


@dataclass
class BatchSummary:
    outcomes: list[FileOutcome] = field(default_factory=list)
    exit_code: int = 0

    @property
    def fixed(self) -> int:
        return sum(1 for o in self.outcomes if o.status == STATUS_FIXED)

    @property
    def clean(self) -> int:
        return sum(1 for o in self.outcomes if o.status == STATUS_CLEAN)

    @property
    def skipped(self) -> int:
        return sum(1 for o in self.outcomes if o.status == STATUS_SKIPPED)

    @property
    def failed(self) -> int:
        return sum(1 for o in self.outcomes if o.status == STATUS_FAILED)

    @property
    def outputs(self) -> list[str]:
        return [o.output_path for o in self.outcomes if o.output_path]


def discover_inputs(config: FixConfig) -> list[Path]:
    exts = {e.lower() for e in config.extensions}
    return sorted(p for p in Path(config.input_dir).iterdir()
                  if p.is_file() and p.suffix.lower() in exts)


def output_path_for(path: Path, config: FixConfig) -> Path:
    return Path(config.output_dir) / f"{config.output_prefix}{path.name}"


def process_file(path: Path, config: FixConfig, log: RunLog) -> FileOutcome:
    """Read, repair and (unless dry-run) write one Bible file.

    Parse failures are reported and turned into a skipped outcome, write
    failures into a failed one.
    """
    try:
        bible = read_bible_file(path)
    except InputParseError as e:
        log.error(f"Skipped {path.name}: {e}")
        return FileOutcome(name=path.name, status=STATUS_SKIPPED, error=str(e))

    repair = repair_document(bible.data)
    outcome = FileOutcome(name=path.name, status=STATUS_CLEAN,
                          defects=repair.defects, warnings=repair.warnings)

    if repair.modified:
        outcome.status = STATUS_FIXED
        log.info(f"{'Needs fixing' if config.dry_run else 'Fixed'}: {path.name}")
        for line in format_report(repair.defects):
            log.info(f"   {line}")

    for w in repair.warnings:
        log.warn(f"   ⚠ {w} ({path.name})")

    if repair.modified:
        if not config.dry_run:
            bible.data = repair.document
            out = output_path_for(path, config)
            try:
                write_bible_file(out, bible, pretty=config.pretty_print)
            except OSError as e:
                log.error(f"Could not write {out}: {e}")
                outcome.status = STATUS_FAILED
                outcome.error = str(e)
            else:
                outcome.output_path = str(out)
        log.info("")

    return outcome


def summary_lines(summary: BatchSummary, config: FixConfig) -> list[str]:
    verb = "would need fixing" if config.dry_run else "needed fixing"
    affect = "would affect" if config.dry_run else "affected"
    return [
        "Done.",
        f"{summary.fixed} Bible(s) {verb}",
        f"{summary.skipped} file(s) had invalid JSON/FSB and were skipped.",
        f"{summary.failed} file(s) could not be written.",
        f"Reminder: these changes {affect} verse ranges. "
        "Please double-check them against the original/reference Bible.",
        f"Output format: {'Pretty-printed JSON' if config.pretty_print else 'Compact JSON'}",
    ]


def run(config: FixConfig, log: RunLog) -> BatchSummary:
    summary = BatchSummary()

    if not os.path.isdir(config.input_dir):
        log.error(f"Input folder not found: {os.path.abspath(config.input_dir)}")
        log.warn("Create the folder or pass --input-dir.")
        summary.exit_code = 1
        return summary

    inputs = discover_inputs(config)
    if not inputs:
        log.warn(f"No {'/'.join(config.extensions)} files found in {os.path.abspath(config.input_dir)}")
        return summary

    log.info(f"Input:  {os.path.abspath(config.input_dir)}")
    log.info(f"Output: {os.path.abspath(config.output_dir)}")
    if config.dry_run:
        log.info("DRY-RUN MODE: No files will be written.\n")
    else:
        os.makedirs(config.output_dir, exist_ok=True)
        log.info("Fix mode enabled. Writing output files.\n")

    for path in inputs:
        summary.outcomes.append(process_file(path, config, log))

    for line in summary_lines(summary, config):
        log.info(line)
    return summary


def build_json_report(summary: BatchSummary, config: FixConfig) -> dict:
    return {
        "dry_run": config.dry_run,
        "fixed": summary.fixed,
        "clean": summary.clean,
        "skipped": summary.skipped,
        "failed": summary.failed,
        "files": [
            {
                "name": o.name,
                "status": o.status,
                "output_path": o.output_path,
                "error": o.error,
                "defects": [g.to_dict() for g in group_defects(o.defects)],
                "verse_counts": count_by_kind(o.defects),
                "warnings": o.warnings,
            }
            for o in summary.outcomes
        ],
    }


def main(argv: Optional[list[str]] = None):
    ap = argparse.ArgumentParser(description="Fix empty and missing verses in JSON/FSB Bibles.")
    ap.add_argument("--config", default=None, help="YAML config file (CLI flags override it)")
    ap.add_argument("--input-dir", default=None, help="Folder with .json/.fsb Bibles (default: ../Converted)")
    ap.add_argument("--output-dir", default=None, help="Folder for fixed Bibles (default: ../Fixed)")
    ap.add_argument("--logs-dir", default=None, help="Folder for --log files (default: logs)")
    ap.add_argument("--prefix", default=None, help="Output file name prefix (default: fixed_)")
    ap.add_argument("--dry-run", action="store_true", default=None,
                    help="Analyze files without writing output")
    ap.add_argument("--pretty", action="store_true", default=None,
                    help="Write formatted (pretty-printed) JSON")
    ap.add_argument("--log", action="store_true", default=None,
                    help="Also write the report to a timestamped log file")
    ap.add_argument("--json-report", default=None,
                    help="Optional: write a machine-readable report to this JSON path")
    args = ap.parse_args(argv)

    try:
        config = load_config(args.config) if args.config else FixConfig()
    except ConfigError as e:
        print(f"ERROR: {e}", file=sys.stderr)
        sys.exit(1)

    config = config.with_overrides(
        input_dir=args.input_dir,
        output_dir=args.output_dir,
        logs_dir=args.logs_dir,
        output_prefix=args.prefix,
        dry_run=args.dry_run,
        pretty_print=args.pretty,
        write_log=args.log,
    )

    log = RunLog(logs_dir=config.logs_dir, write_file=config.write_log)
    summary = run(config, log)
    log.flush()

    if args.json_report:
        os.makedirs(os.path.dirname(os.path.abspath(args.json_report)) or ".", exist_ok=True)
        with open(args.json_report, "w", encoding="utf-8") as f:
            json.dump(build_json_report(summary, config), f, ensure_ascii=False, indent=2)
        print(f"Wrote: {args.json_report}")

    sys.exit(summary.exit_code)


if __name__ == "__main__":
    main()
