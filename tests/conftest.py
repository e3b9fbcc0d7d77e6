"""
Test configuration and shared fixtures.

Provides a small two-scene composition, a fresh registry holding the
productions, and an environment with no ANIMATICS_* overrides leaking in.
"""

import os
import sys

import pytest

# Ensure repo root is on sys.path
ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))
if ROOT not in sys.path:
    sys.path.insert(0, ROOT)

from animatics.engine.components import TextReveal
from animatics.engine.composer import CompositionRegistry, SceneComposer
from animatics.engine.particles import field_cache
from animatics.engine.sdk import TextRevealStyle
from animatics.engine.timeline import RenderNode
from animatics.productions import build_registry

ENV_VARS = [
    "ANIMATICS_LOG_LEVEL",
    "ANIMATICS_LOG_FILE",
    "ANIMATICS_WORKERS",
    "ANIMATICS_ASSETS_ROOT",
    "ANIMATICS_SCHEDULES_DIR",
]


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    """Keep developer ANIMATICS_* settings out of tests."""
    for name in ENV_VARS:
        monkeypatch.delenv(name, raising=False)


@pytest.fixture
def empty_field_cache():
    field_cache.clear()
    yield field_cache
    field_cache.clear()


class Marker:
    """Leaf that reports the frame it was evaluated at."""

    def __init__(self, name="marker"):
        self.name = name

    def render(self, ctx):
        return RenderNode(kind="marker", props={"frame": ctx.frame, "absolute": ctx.absolute_frame}, name=self.name)


@pytest.fixture
def marker():
    return Marker


@pytest.fixture
def small_schedule():
    return {
        "intro": {"start": 0, "duration": 30},
        "outro": {"start": 30, "duration": 30},
    }


@pytest.fixture
def small_composer(small_schedule):
    return SceneComposer(
        small_schedule,
        {
            "intro": TextReveal(text="Hello there", start_frame=5, style=TextRevealStyle.FADE),
            "outro": Marker("outro_marker"),
        },
        composition_id="Small",
        fps=30,
        width=640,
        height=360,
    )


@pytest.fixture
def registry(small_composer):
    reg = CompositionRegistry()
    reg.register(small_composer)
    return reg


@pytest.fixture(scope="session")
def productions():
    """Registry with every production (no asset checks)."""
    return build_registry()
