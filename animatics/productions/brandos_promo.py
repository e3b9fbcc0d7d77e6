"""
BrandOS Promo

27 seconds @ 30fps, square 1080x1080. Seven scenes back to back, each faded
in and out over 10 frames (the hook has no fade-in, the CTA fades out over 15).
"""

import math
from typing import Any, Dict, Optional

from pydantic import BaseModel, Field

from animatics.engine import palette
from animatics.engine.assets import static_file
from animatics.engine.components import (
    Backdrop,
    FloatingParticles,
    GlitchText,
    GlowEffect,
    GridBackground,
    ImageLayer,
    ScanLines,
    ScoreCounter,
    TextBlock,
    TypewriterText,
    fade_transition,
)
from animatics.engine.composer import SceneComposer
from animatics.engine.interpolate import InterpolationSpec, interpolate
from animatics.engine.sdk import FPS, Paths, load_schedule
from animatics.engine.spring import SPRING_PRESETS, spring
from animatics.engine.timeline import Sequence

COMPOSITION_ID = "BrandOSPromo"
SCHEDULE_NAME = "brandos_promo"
WIDTH = 1080
HEIGHT = 1080
DURATION_IN_FRAMES = 810

_clamped = InterpolationSpec.clamped


class PromoProps(BaseModel):
    """Input props for the promo."""

    handle: str = "@bawsaxbt"
    brand_score: int = Field(87, ge=0, le=100)
    archetype: str = "The Prophet"


def _pulse(period: float, low: float, high: float):
    def value(frame: int) -> float:
        return interpolate(math.sin((frame / period) * math.pi * 2), [-1, 1], [low, high])

    return value


def _spring_in(delay: int, preset: str = "smooth"):
    def value(frame: int) -> float:
        return spring(frame, FPS, SPRING_PRESETS[preset], delay=delay)

    return value


def hook() -> Sequence:
    return Sequence(
        name="hook_layers",
        children=(
            Backdrop(color=palette.BACKGROUND),
            GridBackground(opacity=0.1, perspective=True),
            FloatingParticles(count=25, seed="hook"),
            TextBlock(
                text="Your brand has a score.",
                opacity=_clamped([10, 30], [0, 1]),
                scale=_clamped([10, 35], [0.9, 1]),
                glow=_pulse(20, 0.4, 0.8),
                name="headline",
            ),
            ScanLines(opacity=0.02),
        ),
    )


def problem() -> Sequence:
    return Sequence(
        name="problem_layers",
        children=(
            Backdrop(color=palette.BACKGROUND, opacity=_clamped([0, 60], [0.5, 0.8]), name="vignette"),
            GlitchText(text="Scattered. Inconsistent. Invisible.", intensity=0.3, name="glitch"),
            TextBlock(
                text="But most creators have no idea what it is.",
                opacity=_clamped([30, 50], [0, 1]),
                font_size=36,
                color=palette.TEXT_MUTED,
                y="70%",
                name="subline",
            ),
            ScanLines(opacity=0.02, speed=3),
        ),
    )


def logo() -> Sequence:
    return Sequence(
        name="logo_layers",
        children=(
            Backdrop(color=palette.BACKGROUND),
            GridBackground(opacity=0.08, perspective=False),
            FloatingParticles(count=40, seed="logo", speed=1.5),
            GlowEffect(intensity=_clamped([0, 40], [0.1, 0.6]), size=1.5, color=palette.PRIMARY),
            ImageLayer(asset=static_file("brandos/mark.svg"), opacity=_clamped([10, 25], [0, 1]), scale=_spring_in(10, "bouncy")),
            TextBlock(text="BrandOS", opacity=_clamped([20, 35], [0, 1]), scale=1.8, y="65%", name="wordmark"),
            ScanLines(opacity=0.02),
        ),
    )


def input_demo(props: PromoProps) -> Sequence:
    return Sequence(
        name="input_layers",
        children=(
            Backdrop(color=palette.BACKGROUND),
            GridBackground(opacity=0.06, perspective=True),
            FloatingParticles(count=20, seed="input"),
            TextBlock(text="< Enter your X handle />", font_size=18, color=palette.TEXT_MUTED, y="40%", name="label"),
            TypewriterText(text=props.handle, start_frame=20, chars_per_frame=0.5, font_size=32, name="handle"),
            TextBlock(
                text="Analyze Brand",
                opacity=_clamped([20 + len(props.handle) * 2 + 10, 20 + len(props.handle) * 2 + 25], [0, 1]),
                font_size=20,
                y="62%",
                name="analyze_button",
            ),
            ScanLines(opacity=0.02),
        ),
    )


def processing() -> Sequence:
    return Sequence(
        name="processing_layers",
        children=(
            Backdrop(color=palette.BACKGROUND),
            GridBackground(opacity=0.08, perspective=True),
            FloatingParticles(count=35, seed="processing", speed=2),
            GlowEffect(intensity=_pulse(30, 0.3, 0.6), size=1.2, color=palette.PRIMARY, pulse=True, pulse_speed=0.2),
            TextBlock(text="Analyzing brand DNA...", opacity=_pulse(15, 0.5, 1), font_size=28, name="status"),
            ScanLines(opacity=0.02, speed=4),
        ),
    )


def score_reveal(props: PromoProps) -> Sequence:
    return Sequence(
        name="score_layers",
        children=(
            Backdrop(color=palette.BACKGROUND),
            GridBackground(opacity=0.06, perspective=False),
            FloatingParticles(count=30, seed="score", speed=0.8),
            ScoreCounter(target_score=props.brand_score, start_frame=15, font_size=110),
            TextBlock(
                text=props.archetype,
                opacity=_spring_in(50),
                scale=_clamped([50, 70], [0.9, 1]),
                font_size=40,
                y="68%",
                name="archetype",
            ),
            ScanLines(opacity=0.02),
        ),
    )


def cta() -> Sequence:
    return Sequence(
        name="cta_layers",
        children=(
            Backdrop(color=palette.BACKGROUND),
            GridBackground(opacity=0.1, perspective=True),
            FloatingParticles(count=40, seed="cta", speed=1.2),
            TextBlock(text="Discover your Brand DNA", opacity=_spring_in(10), font_size=44, y="45%", name="headline"),
            TextBlock(
                text="Join the waitlist",
                opacity=_spring_in(30),
                scale=_pulse(40, 0.98, 1.02),
                font_size=24,
                y="60%",
                name="button",
            ),
            ScanLines(opacity=0.02),
        ),
    )


def build(props: Optional[PromoProps] = None, schedule_path=None) -> SceneComposer:
    props = props or PromoProps()
    schedule = load_schedule(schedule_path or Paths.schedule(SCHEDULE_NAME))
    scenes: Dict[str, Any] = {
        "hook": hook(),
        "problem": problem(),
        "logo": logo(),
        "input": input_demo(props),
        "processing": processing(),
        "score_reveal": score_reveal(props),
        "cta": cta(),
    }
    styles = {}
    for name, window in schedule.scenes.items():
        fade_in = 0 if name == "hook" else 10
        fade_out = 15 if name == "cta" else 10
        styles[name] = fade_transition(window.duration, fade_in=fade_in, fade_out=fade_out)
    return SceneComposer(
        schedule,
        scenes,
        composition_id=COMPOSITION_ID,
        fps=FPS,
        width=WIDTH,
        height=HEIGHT,
        duration_in_frames=DURATION_IN_FRAMES,
        scene_styles=styles,
        background=Backdrop(color=palette.BACKGROUND, name="composition_background"),
    )
