"""
Tests for frame timing helpers.
"""

import pytest

from animatics.engine.sdk import Paths, SceneWindow, load_schedule
from animatics.timing_utils import (
    distribute_frames_uniform,
    distribute_frames_weighted,
    frames_to_seconds,
    get_scene_end,
    retime_schedule,
    schedule_from_durations,
    seconds_to_frames,
)


class TestConversions:
    def test_seconds_to_frames(self):
        assert seconds_to_frames(28) == 840
        assert seconds_to_frames(1.5) == 45
        assert seconds_to_frames(0.05) == 2
        assert seconds_to_frames(1, fps=24) == 24

    def test_frames_to_seconds(self):
        assert frames_to_seconds(840) == 28.0
        assert frames_to_seconds(45, fps=30) == 1.5

    def test_scene_end(self):
        assert get_scene_end(SceneWindow(start=100, duration=50)) == 150


class TestDistribution:
    def test_uniform(self):
        assert distribute_frames_uniform(10, 3) == [4, 3, 3]
        assert distribute_frames_uniform(9, 3) == [3, 3, 3]
        assert distribute_frames_uniform(5, 0) == []

    def test_uniform_too_short(self):
        with pytest.raises(ValueError):
            distribute_frames_uniform(2, 3)

    def test_weighted(self):
        assert distribute_frames_weighted(100, [1, 1, 2]) == [25, 25, 50]
        frames = distribute_frames_weighted(10, [1, 1, 1])
        assert sum(frames) == 10
        assert sorted(frames) == [3, 3, 4]

    def test_weighted_rejects_bad_weights(self):
        with pytest.raises(ValueError):
            distribute_frames_weighted(10, [1, 0])

    def test_weighted_too_short(self):
        with pytest.raises(ValueError):
            distribute_frames_weighted(2, [1, 1, 1])


class TestSchedules:
    def test_from_durations(self):
        schedule = schedule_from_durations(
            [("intro", 30), ("body", 60)],
            acts={"main": "Main"},
            scene_acts={"body": "main"},
        )
        assert schedule.scenes["body"].start == 30
        assert schedule.scenes["body"].act == "main"
        assert schedule.scenes["intro"].act is None
        assert schedule.duration_in_frames == 90

    def test_duplicate_names(self):
        with pytest.raises(ValueError):
            schedule_from_durations([("a", 10), ("a", 10)])

    def test_retime(self):
        schedule = schedule_from_durations([("a", 30), ("b", 60)])
        retimed = retime_schedule(schedule, 45)
        assert retimed.scenes["a"].duration == 15
        assert retimed.scenes["b"].start == 15
        assert retimed.scenes["b"].duration == 30
        assert retimed.duration_in_frames == 45

    def test_retime_production_keeps_labels(self):
        schedule = load_schedule(Paths.schedule("brick_by_brick"))
        retimed = retime_schedule(schedule, 900)
        assert retimed.end_frame == 900
        assert retimed.scenes["scene1"].label == "Nobody taught you this."
        assert retimed.acts == schedule.acts
