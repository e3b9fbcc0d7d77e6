"""
Tests for the schedule linter and its CLI.
"""

import json

import pytest
from pydantic import ValidationError

from animatics.engine.sdk import Paths, load_schedule, save_schedule, validate_schedule
from animatics.engine.validate_schedule import LintReport, lint_schedule, main


class TestLintSchedule:
    def test_production_schedules_are_clean(self):
        for name in ("brick_by_brick", "brandos_promo"):
            report = lint_schedule(load_schedule(Paths.schedule(name)))
            assert report.errors == []
            assert report.warnings == []
            assert report.ok(strict=True)

    def test_overflow_is_error(self):
        report = lint_schedule({"a": {"start": 0, "duration": 50}}, duration_in_frames=40)
        assert len(report.errors) == 1
        assert "past declared duration 40" in report.errors[0]
        assert not report.ok()

    def test_leading_gap(self):
        report = lint_schedule({"a": {"start": 10, "duration": 10}})
        assert report.warnings == ["Gap of 10 frames before first scene 'a'"]
        assert report.ok()
        assert not report.ok(strict=True)

    def test_gap_between_scenes(self):
        report = lint_schedule({"a": {"start": 0, "duration": 10}, "b": {"start": 15, "duration": 10}})
        assert report.warnings == ["Gap of 5 frames between 'a' and 'b' (frames 10-14)"]

    def test_overlap_without_crossfade(self):
        report = lint_schedule({"a": {"start": 0, "duration": 10}, "b": {"start": 5, "duration": 10}})
        assert len(report.warnings) == 1
        assert "overlaps 'a' by 5 frames" in report.warnings[0]

    def test_crossfade_overlap_is_allowed(self):
        report = lint_schedule(
            {"a": {"start": 0, "duration": 10}, "b": {"start": 5, "duration": 10, "crossfade": True}}
        )
        assert report.warnings == []

    def test_trailing_gap(self):
        report = lint_schedule({"scenes": {"a": {"start": 0, "duration": 10}}, "duration_in_frames": 30})
        assert report.warnings == ["Gap of 20 frames after last scene"]

    def test_explicit_zero_duration_is_checked(self):
        data = {"scenes": {"a": {"start": 0, "duration": 10}}, "duration_in_frames": 20}
        report = lint_schedule(data, duration_in_frames=0)
        assert report.errors == ["Scene 'a' ends at frame 10, past declared duration 0"]

    def test_undeclared_act(self):
        data = {
            "scenes": {"a": {"start": 0, "duration": 10, "act": "x"}},
            "acts": {"y": "Act Y"},
        }
        report = lint_schedule(data)
        assert report.warnings == ["Scene 'a' names undeclared act 'x'"]

    def test_malformed_schedule(self):
        with pytest.raises(ValidationError):
            lint_schedule({"a": {"start": -1, "duration": 0}})

    def test_empty_report_ok(self):
        assert LintReport().ok(strict=True)


class TestMain:
    def _write(self, tmp_path, data):
        path = tmp_path / "schedule.json"
        path.write_text(json.dumps(data), encoding="utf-8")
        return str(path)

    def test_clean_schedule(self, tmp_path, capsys):
        path = self._write(tmp_path, {"a": {"start": 0, "duration": 10}})
        assert main(["--in", path, "-v"]) == 0
        out = capsys.readouterr().out
        assert "Schedule OK" in out
        assert "a: 0-9 (10 frames)" in out

    def test_warnings_fail_in_strict_mode(self, tmp_path):
        path = self._write(tmp_path, {"a": {"start": 5, "duration": 10}})
        assert main(["--in", path]) == 0
        assert main(["--in", path, "--strict"]) == 1

    def test_overflow_fails(self, tmp_path, capsys):
        path = self._write(tmp_path, {"a": {"start": 0, "duration": 10}})
        assert main(["--in", path, "--duration", "5"]) == 1
        assert "ERROR" in capsys.readouterr().out

    def test_missing_file(self, tmp_path):
        assert main(["--in", str(tmp_path / "missing.json")]) == 1

    def test_invalid_json(self, tmp_path):
        path = tmp_path / "bad.json"
        path.write_text("{not json", encoding="utf-8")
        assert main(["--in", str(path)]) == 1

    def test_malformed(self, tmp_path):
        path = self._write(tmp_path, {"a": {"start": 0}})
        assert main(["--in", path]) == 1


class TestScheduleFiles:
    def test_save_and_load(self, tmp_path):
        schedule = load_schedule(Paths.schedule("brick_by_brick"))
        path = tmp_path / "nested" / "bbb.json"
        save_schedule(schedule, path)
        assert load_schedule(path) == schedule
        assert "crossfade" in json.loads(path.read_text(encoding="utf-8"))["scenes"]["scene1"]

    def test_bare_table_accepted(self):
        schedule = validate_schedule({"a": {"start": 0, "duration": 10}})
        assert schedule.scenes["a"].end == 10
        assert schedule.acts == {}

    def test_bare_table_with_scene_named_scenes(self):
        schedule = validate_schedule({"scenes": {"start": 0, "duration": 10}})
        assert list(schedule.scenes) == ["scenes"]
        assert schedule.scenes["scenes"].end == 10

        schedule = validate_schedule(
            {"scenes": {"start": 0, "duration": 10}, "outro": {"start": 10, "duration": 5}}
        )
        assert list(schedule.scenes) == ["scenes", "outro"]

    def test_rejects_non_mapping(self):
        with pytest.raises(TypeError):
            validate_schedule(["a"])

    def test_rejects_empty(self):
        with pytest.raises(ValidationError):
            validate_schedule({"scenes": {}})
