"""
Animatics Frame Engine - Engine Package

Deterministic frame -> visual-parameter primitives (easing, interpolation,
springs, particle fields) and the timeline model that composes them into
scenes, acts and compositions.
"""

from .assets import AssetRef, AssetResolver, static_file
from .composer import (
    Composition,
    CompositionRegistry,
    FrameResult,
    SceneComposer,
    default_registry,
    register_composition,
)
from .easing import EASINGS, bezier, ease_in, ease_in_out, ease_out, get_easing
from .errors import (
    AnimaticsError,
    InvalidRangeError,
    InvalidSpringConfigError,
    MissingAssetReferenceError,
    SceneConfigurationError,
    ScheduleOverflowError,
    UnknownCompositionError,
)
from .interpolate import InterpolationSpec, clamp, interpolate, interpolate_colors
from .particles import (
    Particle,
    burst_field,
    burst_state,
    generate_field,
    generate_field_uncached,
    particle_state,
    seeded_random,
)
from .sdk import (
    FPS,
    VIDEO_H,
    VIDEO_W,
    Extrapolate,
    ParticleDirection,
    Paths,
    SceneWindow,
    Schedule,
    TextRevealStyle,
    load_schedule,
    save_schedule,
    validate_schedule,
)
from .spring import DEFAULT_SPRING, SPRING_PRESETS, SpringConfig, measure_spring, spring
from .timeline import Evaluation, FrameContext, RenderNode, Sequence, evaluate, series

__all__ = [
    # Primitives
    "EASINGS", "bezier", "ease_in", "ease_out", "ease_in_out", "get_easing",
    "interpolate", "interpolate_colors", "clamp", "InterpolationSpec",
    "spring", "measure_spring", "SpringConfig", "DEFAULT_SPRING", "SPRING_PRESETS",

    # Particles
    "Particle", "generate_field", "generate_field_uncached", "particle_state",
    "burst_field", "burst_state", "seeded_random",

    # Timeline
    "FrameContext", "RenderNode", "Sequence", "Evaluation", "evaluate", "series",

    # Composition
    "SceneComposer", "Composition", "CompositionRegistry", "FrameResult",
    "default_registry", "register_composition",

    # Assets
    "AssetRef", "AssetResolver", "static_file",

    # SDK
    "FPS", "VIDEO_W", "VIDEO_H", "Extrapolate", "ParticleDirection", "TextRevealStyle",
    "Paths", "SceneWindow", "Schedule", "load_schedule", "save_schedule", "validate_schedule",

    # Errors
    "AnimaticsError", "InvalidRangeError", "InvalidSpringConfigError",
    "MissingAssetReferenceError", "SceneConfigurationError", "ScheduleOverflowError",
    "UnknownCompositionError",
]
