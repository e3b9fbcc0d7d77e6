#!/usr/bin/env python3
"""
Timing Utilities for Frame Schedules

Conversions between seconds and frames, and helpers that lay scenes out on a
frame timeline so that durations sum exactly to a target length.
"""

import logging
import math
from typing import Dict, List, Optional, Sequence, Tuple

from animatics.engine.sdk import FPS, SceneWindow, Schedule

log = logging.getLogger(__name__)


def seconds_to_frames(seconds: float, fps: int = FPS) -> int:
    """Round half up to the nearest frame."""
    return int(math.floor(seconds * fps + 0.5))


def frames_to_seconds(frames: int, fps: int = FPS) -> float:
    return frames / fps


def get_scene_end(window: SceneWindow) -> int:
    """First frame after the scene (exclusive end)."""
    return window.start + window.duration


def distribute_frames_uniform(total_frames: int, count: int) -> List[int]:
    """
    Split ``total_frames`` into ``count`` near-equal durations.

    The first ``total_frames % count`` scenes get one extra frame, so the
    result always sums to ``total_frames``.
    """
    if count <= 0:
        return []
    if total_frames < count:
        raise ValueError(f"Cannot give {count} scenes at least one frame each from {total_frames} frames")
    base, remainder = divmod(total_frames, count)
    return [base + (1 if i < remainder else 0) for i in range(count)]


def distribute_frames_weighted(total_frames: int, weights: Sequence[float]) -> List[int]:
    """
    Split ``total_frames`` proportionally to ``weights`` (largest remainder).
    """
    if not weights:
        return []
    if any(w <= 0 for w in weights):
        raise ValueError("weights must be positive")
    total_weight = float(sum(weights))
    exact = [total_frames * w / total_weight for w in weights]
    frames = [int(math.floor(x)) for x in exact]
    leftover = total_frames - sum(frames)
    order = sorted(range(len(weights)), key=lambda i: exact[i] - frames[i], reverse=True)
    for i in order[:leftover]:
        frames[i] += 1
    if any(f <= 0 for f in frames):
        raise ValueError(f"{total_frames} frames is too short for {len(weights)} weighted scenes")
    return frames


def schedule_from_durations(
    durations: Sequence[Tuple[str, int]],
    start: int = 0,
    acts: Optional[Dict[str, str]] = None,
    scene_acts: Optional[Dict[str, str]] = None,
) -> Schedule:
    """Lay scenes back to back; returns a Schedule whose end is start + sum(durations)."""
    scenes: Dict[str, SceneWindow] = {}
    cursor = start
    for name, duration in durations:
        if name in scenes:
            raise ValueError(f"Duplicate scene name: {name}")
        scenes[name] = SceneWindow(start=cursor, duration=duration, act=(scene_acts or {}).get(name))
        cursor += duration
    log.debug(f"Laid out {len(scenes)} scenes ending at frame {cursor}")
    return Schedule(scenes=scenes, acts=acts or {}, duration_in_frames=cursor if cursor > 0 else None)


def retime_schedule(schedule: Schedule, target_frames: int) -> Schedule:
    """
    Scale a back-to-back schedule to ``target_frames`` keeping scene order and
    relative lengths.
    """
    ordered = schedule.ordered()
    weights = [w.duration for _, w in ordered]
    frames = distribute_frames_weighted(target_frames, weights)
    scenes: Dict[str, SceneWindow] = {}
    cursor = ordered[0][1].start
    for (name, window), duration in zip(ordered, frames):
        scenes[name] = window.model_copy(update={"start": cursor, "duration": duration})
        cursor += duration
    return Schedule(scenes=scenes, acts=dict(schedule.acts), duration_in_frames=cursor, fps=schedule.fps)
