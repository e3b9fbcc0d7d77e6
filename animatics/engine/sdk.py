#!/usr/bin/env python3
"""
Core SDK for the Animatics Frame Engine

This module provides the single source of truth for types, constants, paths and
schedule models. Engine modules import from here to avoid drift.
"""

import json
from enum import Enum
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple, Union

from pydantic import BaseModel, Field, field_validator

from animatics.core import BASE


# ============================================================================
# CONSTANTS
# ============================================================================

VIDEO_W = 1920
VIDEO_H = 1080
FPS = 30
GOLDEN_ANGLE_DEG = 137.5
PARTICLE_LIFETIME_FRAMES = 60


# ============================================================================
# ENUMS
# ============================================================================

class Extrapolate(str, Enum):
    """What interpolate() does outside the input range."""

    CLAMP = "clamp"
    EXTEND = "extend"
    IDENTITY = "identity"


class ParticleDirection(str, Enum):
    UP = "up"
    RADIAL = "radial"
    CONVERGE = "converge"


class TextRevealStyle(str, Enum):
    TYPEWRITER = "typewriter"
    FADE = "fade"
    WORD_BY_WORD = "word_by_word"
    IMPACT = "impact"


class FigureVariant(str, Enum):
    STANDING = "standing"
    WORKING = "working"
    ASCENDING = "ascending"
    ARRIVED = "arrived"


class GlowLevel(str, Enum):
    NONE = "none"
    SUBTLE = "subtle"
    MEDIUM = "medium"
    STRONG = "strong"
    INTENSE = "intense"


class BlurType(str, Enum):
    IN = "in"
    OUT = "out"
    THROUGH = "through"


class SpeedLineDirection(str, Enum):
    LEFT = "left"
    RIGHT = "right"
    CENTER = "center"


# ============================================================================
# PATH HELPERS
# ============================================================================

class Paths:
    """Centralized path management for engine configuration."""

    @staticmethod
    def conf_dir() -> Path:
        return Path(BASE) / "conf"

    @staticmethod
    def schedules_dir() -> Path:
        return Paths.conf_dir() / "schedules"

    @staticmethod
    def schedule(name: str) -> Path:
        """Get the schedule JSON path for a production."""
        return Paths.schedules_dir() / f"{name}.json"


# ============================================================================
# PYDANTIC MODELS
# ============================================================================

class SceneWindow(BaseModel):
    """A scene's fixed {start, duration} slot on the timeline."""

    start: int = Field(..., ge=0, description="First frame of the scene")
    duration: int = Field(..., gt=0, description="Length of the scene in frames")
    label: Optional[str] = Field(None, description="Human-readable label")
    act: Optional[str] = Field(None, description="Act this scene belongs to")
    crossfade: bool = Field(False, description="Overlap with the previous scene is intended")

    @property
    def end(self) -> int:
        return self.start + self.duration


class Schedule(BaseModel):
    """Static scene schedule; the engine's only config-file surface."""

    scenes: Dict[str, SceneWindow] = Field(..., description="Scene name -> window")
    acts: Dict[str, str] = Field(default_factory=dict, description="Act name -> label")
    duration_in_frames: Optional[int] = Field(None, gt=0, description="Declared total length")
    fps: Optional[int] = Field(None, gt=0, description="Frame rate the schedule was authored for")

    @field_validator("scenes")
    @classmethod
    def validate_scenes(cls, v):
        if not v:
            raise ValueError("schedule must contain at least one scene")
        return v

    def ordered(self) -> List[Tuple[str, SceneWindow]]:
        """Scenes by start frame; ties keep declaration order."""
        return sorted(self.scenes.items(), key=lambda item: item[1].start)

    @property
    def end_frame(self) -> int:
        return max(window.end for window in self.scenes.values())


class CompositionConfig(BaseModel):
    """Registration metadata the external renderer consumes."""

    id: str = Field(..., min_length=1)
    duration_in_frames: int = Field(..., gt=0)
    fps: int = Field(FPS, gt=0)
    width: int = Field(VIDEO_W, gt=0)
    height: int = Field(VIDEO_H, gt=0)

    @property
    def duration_seconds(self) -> float:
        return self.duration_in_frames / self.fps


# ============================================================================
# HELPER FUNCTIONS
# ============================================================================

def _is_wrapped(data: Dict[str, Any]) -> bool:
    # a bare table may name a scene "scenes"; its value is then a window, not a table
    scenes = data.get("scenes")
    if not isinstance(scenes, dict) or not set(data) <= set(Schedule.model_fields):
        return False
    return all(isinstance(v, (dict, SceneWindow)) for v in scenes.values())


def validate_schedule(data: Union[Dict[str, Any], Schedule]) -> Schedule:
    """Accept a bare {name: {start, duration}} table or the wrapped form."""
    if isinstance(data, Schedule):
        return data
    if isinstance(data, dict):
        if _is_wrapped(data):
            return Schedule(**data)
        return Schedule(scenes=data)
    raise TypeError("Data must be a dict or Schedule instance")


def load_schedule(path: Union[str, Path]) -> Schedule:
    """Load a schedule from a JSON file."""
    with open(path, "r", encoding="utf-8") as f:
        data = json.load(f)
    return validate_schedule(data)


def save_schedule(schedule: Schedule, path: Union[str, Path]) -> None:
    """Save a schedule to a JSON file."""
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    with open(path, "w", encoding="utf-8") as f:
        json.dump(schedule.model_dump(exclude_none=True), f, indent=2)


__all__ = [
    # Constants
    "VIDEO_W", "VIDEO_H", "FPS", "GOLDEN_ANGLE_DEG", "PARTICLE_LIFETIME_FRAMES",

    # Enums
    "Extrapolate", "ParticleDirection", "TextRevealStyle", "FigureVariant",
    "GlowLevel", "BlurType", "SpeedLineDirection",

    # Path helpers
    "Paths",

    # Models
    "SceneWindow", "Schedule", "CompositionConfig",

    # Helper functions
    "validate_schedule", "load_schedule", "save_schedule",
]
