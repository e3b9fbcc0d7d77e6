"""
Tests for the frame-range renderer and its CLI.
"""

import json
import logging

import pytest

from animatics.engine.errors import UnknownCompositionError
from animatics.render_frames import main, render_range


class TestRenderRange:
    def test_inclusive_range_in_order(self, registry):
        results = render_range(registry, "Small", 10, 12)
        assert [r.frame for r in results] == [10, 11, 12]

    def test_single_frame(self, registry):
        results = render_range(registry, "Small", 45)
        assert len(results) == 1
        assert results[0].tree.find("outro_marker").props["frame"] == 15

    def test_workers_do_not_change_output(self, registry):
        serial = [r.to_dict() for r in render_range(registry, "Small", 0, 59)]
        threaded = [r.to_dict() for r in render_range(registry, "Small", 0, 59, workers=4)]
        assert threaded == serial

    def test_range_past_end_yields_empty_frames(self, registry):
        results = render_range(registry, "Small", 58, 61)
        assert [r.is_empty for r in results] == [False, False, True, True]

    def test_end_before_start(self, registry):
        with pytest.raises(ValueError):
            render_range(registry, "Small", 10, 5)

    def test_unknown_composition(self, registry):
        with pytest.raises(UnknownCompositionError):
            render_range(registry, "Nope", 0)


class TestMain:
    def _args(self, tmp_path, *extra):
        return ["--config", str(tmp_path / "missing.yaml"), *extra]

    def test_writes_json(self, tmp_path):
        out = tmp_path / "out" / "frames.json"
        code = main(self._args(tmp_path, "--composition", "BrickByBrick", "--frame", "45", "--end", "46", "--out", str(out)))
        assert code == 0
        payload = json.loads(out.read_text(encoding="utf-8"))
        assert [p["frame"] for p in payload] == [45, 46]
        assert payload[0]["composition"] == "BrickByBrick"
        assert payload[0]["errors"] == []

    def test_log_file_written(self, tmp_path):
        log_file = tmp_path / "logs" / "render.log"
        out = tmp_path / "frames.json"
        code = main(
            self._args(
                tmp_path,
                "--composition", "BrickByBrick",
                "--frame", "45",
                "--out", str(out),
                "--log-file", str(log_file),
            )
        )
        assert code == 0
        for handler in logging.getLogger("render_frames").handlers:
            handler.flush()
        assert log_file.exists()
        text = log_file.read_text(encoding="utf-8")
        assert '"step":"render_frames"' in text
        assert "Wrote 1 frame(s) of BrickByBrick" in text

    def test_list(self, tmp_path, capsys):
        assert main(self._args(tmp_path, "--list")) == 0
        out = capsys.readouterr().out
        assert "BrickByBrick: 840 frames @ 30fps, 1920x1080" in out
        assert "BrandOSPromo: 810 frames @ 30fps, 1080x1080" in out

    def test_unknown_composition(self, tmp_path):
        assert main(self._args(tmp_path, "--composition", "Nope", "--out", str(tmp_path / "x.json"))) == 1

    def test_bad_range(self, tmp_path):
        assert main(self._args(tmp_path, "--composition", "BrickByBrick", "--frame", "10", "--end", "5")) == 1

    def test_composition_required(self, tmp_path):
        with pytest.raises(SystemExit):
            main(self._args(tmp_path))

    def test_subtree_errors_fail(self, tmp_path):
        out = tmp_path / "frames.json"
        code = main(
            self._args(
                tmp_path,
                "--composition", "BrandOSPromo",
                "--frame", "250",
                "--assets-root", str(tmp_path / "empty"),
                "--out", str(out),
            )
        )
        assert code == 1
        payload = json.loads(out.read_text(encoding="utf-8"))
        assert payload[0]["errors"][0]["type"] == "MissingAssetReferenceError"
        assert payload[0]["errors"][0]["path"] == "BrandOSPromo/logo/logo_layers/image"

    def test_asset_check_can_be_disabled(self, tmp_path):
        out = tmp_path / "frames.json"
        code = main(
            self._args(
                tmp_path,
                "--composition", "BrandOSPromo",
                "--frame", "250",
                "--assets-root", str(tmp_path / "empty"),
                "--no-asset-check",
                "--out", str(out),
            )
        )
        assert code == 0
