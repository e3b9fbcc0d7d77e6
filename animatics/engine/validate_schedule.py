#!/usr/bin/env python3
"""
Schedule Linter - Check a scene schedule before it is composed

Reports overflow past the declared duration as an error, and gaps or
unflagged overlaps between consecutive scenes as warnings.
"""

import argparse
import json
import sys
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

from pydantic import ValidationError

# Ensure repo root on path
ROOT = Path(__file__).parent.parent.parent
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from animatics.engine.sdk import Schedule, validate_schedule


@dataclass
class LintReport:
    errors: List[str] = field(default_factory=list)
    warnings: List[str] = field(default_factory=list)

    def ok(self, strict: bool = False) -> bool:
        if self.errors:
            return False
        return not (strict and self.warnings)


def lint_schedule(data: Union[Schedule, Dict[str, Any]], duration_in_frames: Optional[int] = None) -> LintReport:
    """Lint a schedule; raises pydantic ValidationError for malformed input."""
    schedule = validate_schedule(data)
    report = LintReport()

    duration = duration_in_frames if duration_in_frames is not None else schedule.duration_in_frames
    ordered = schedule.ordered()

    if duration is not None:
        for name, window in ordered:
            if window.end > duration:
                report.errors.append(
                    f"Scene '{name}' ends at frame {window.end}, past declared duration {duration}"
                )

    first_name, first = ordered[0]
    if first.start > 0:
        report.warnings.append(f"Gap of {first.start} frames before first scene '{first_name}'")

    covered_until = first.end
    previous = first_name
    for name, window in ordered[1:]:
        if window.start > covered_until:
            report.warnings.append(
                f"Gap of {window.start - covered_until} frames between '{previous}' and '{name}' "
                f"(frames {covered_until}-{window.start - 1})"
            )
        elif window.start < covered_until and not window.crossfade:
            report.warnings.append(
                f"Scene '{name}' overlaps '{previous}' by {covered_until - window.start} frames "
                f"without crossfade"
            )
        if window.end >= covered_until:
            covered_until = window.end
            previous = name

    if duration is not None and covered_until < duration:
        report.warnings.append(f"Gap of {duration - covered_until} frames after last scene")

    for name, window in ordered:
        if window.act is not None and schedule.acts and window.act not in schedule.acts:
            report.warnings.append(f"Scene '{name}' names undeclared act '{window.act}'")

    return report


def main(argv=None):
    """Main entry point for schedule linting."""
    parser = argparse.ArgumentParser(description="Lint scene schedule files")
    parser.add_argument("--in", dest="input_file", required=True, help="Input schedule JSON file")
    parser.add_argument("--duration", type=int, default=None, help="Composition length in frames")
    parser.add_argument("--strict", action="store_true", help="Treat warnings as failures")
    parser.add_argument("--verbose", "-v", action="store_true", help="Verbose output")
    args = parser.parse_args(argv)

    input_path = Path(args.input_file)
    if not input_path.exists():
        print(f"Error: Input file not found: {input_path}")
        return 1

    try:
        with open(input_path, "r", encoding="utf-8") as f:
            data = json.load(f)
    except json.JSONDecodeError as e:
        print(f"Error: Invalid JSON in {input_path}: {e}")
        return 1

    print(f"Linting schedule: {input_path}")

    try:
        report = lint_schedule(data, args.duration)
    except (ValidationError, TypeError) as e:
        print(f"\n❌ Schedule is malformed: {e}")
        return 1

    for error in report.errors:
        print(f"  ERROR: {error}")
    for warning in report.warnings:
        print(f"  WARNING: {warning}")

    if args.verbose:
        schedule = validate_schedule(data)
        print("\nSchedule details:")
        print(f"  Scenes: {len(schedule.scenes)}")
        print(f"  Acts: {', '.join(schedule.acts) or '-'}")
        print(f"  End frame: {schedule.end_frame}")
        for name, window in schedule.ordered():
            print(f"    {name}: {window.start}-{window.end - 1} ({window.duration} frames)")

    if report.ok(strict=args.strict):
        print(f"\n✅ Schedule OK ({len(report.warnings)} warnings)")
        return 0
    print(f"\n❌ Schedule lint failed: {len(report.errors)} errors, {len(report.warnings)} warnings")
    return 1


if __name__ == "__main__":
    sys.exit(main())
