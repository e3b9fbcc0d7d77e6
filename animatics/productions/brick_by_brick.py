"""
Brick by Brick

28 seconds @ 30fps, 1920x1080, in three acts:
  weight - slow, contemplative (scenes 1-3)
  build  - accelerating, momentum (scenes 4-7)
  rise   - fast, triumph, brand reveal (scenes 8-12)
"""

import math
from typing import Any, Dict

from animatics.engine import palette
from animatics.engine.components import (
    AuraEffect,
    Backdrop,
    BrandReveal,
    Figure,
    GlowEffect,
    LightTrail,
    ParticleBurst,
    Particles,
    SpeedLines,
    Tagline,
    TextReveal,
    layer_opacity,
    motion_blur,
    transition_blur,
)
from animatics.engine.composer import SceneComposer
from animatics.engine.interpolate import InterpolationSpec, interpolate
from animatics.engine.sdk import (
    FPS,
    VIDEO_H,
    VIDEO_W,
    BlurType,
    FigureVariant,
    GlowLevel,
    ParticleDirection,
    Paths,
    SpeedLineDirection,
    TextRevealStyle,
    load_schedule,
)
from animatics.engine.timeline import Sequence, series

COMPOSITION_ID = "BrickByBrick"
SCHEDULE_NAME = "brick_by_brick"
DURATION_IN_FRAMES = 840

_clamped = InterpolationSpec.clamped


def _right_clamped(input_range, output_range) -> InterpolationSpec:
    return InterpolationSpec(tuple(input_range), tuple(output_range), extrapolate_right="clamp")


def _void() -> Backdrop:
    return Backdrop(
        color=palette.DARK,
        gradient=f"radial-gradient(ellipse at center, {palette.DARK_BLUE} 0%, {palette.DARK} 70%)",
    )


def _vignette(low: float = 0.8) -> Backdrop:
    def pulse(frame: int) -> float:
        return interpolate(math.sin(frame * 0.02), [-1, 1], [low, 1])

    return Backdrop(color="transparent", gradient=palette.DARK_VIGNETTE, opacity=pulse, name="vignette")


# ============================================================================
# ACT 1: THE WEIGHT
# ============================================================================


def scene1() -> Sequence:
    """Dark frame fades in; the figure emerges; the line types on."""
    return Sequence(
        name="scene1_layers",
        style=layer_opacity(_right_clamped([0, 45], [0, 1])),
        children=(
            _void(),
            _vignette(),
            GlowEffect(intensity=0.1, size=2, pulse=True, pulse_speed=0.015, y="55%"),
            Figure(
                variant=FigureVariant.STANDING,
                opacity=_right_clamped([20, 60], [0, 0.7]),
                scale=0.8,
                glow=GlowLevel.NONE,
                translate_y=50,
            ),
            TextReveal(
                text="Nobody taught you this.",
                start_frame=30,
                style=TextRevealStyle.TYPEWRITER,
                font_size=52,
                color=palette.WHITE,
                y="75%",
            ),
        ),
    )


def scene2() -> Sequence:
    return Sequence(
        name="scene2_layers",
        children=(
            _void(),
            GlowEffect(intensity=_right_clamped([0, 75], [0.1, 0.2]), size=2, y="55%"),
            AuraEffect(opacity=0.2, scale=0.6, rings=2),
            Figure(variant=FigureVariant.STANDING, opacity=0.75, scale=0.8, glow=GlowLevel.SUBTLE, translate_y=50),
            TextReveal(text="How to keep going.", start_frame=15, style=TextRevealStyle.FADE, font_size=52, y="75%"),
        ),
    )


def scene3() -> Sequence:
    return Sequence(
        name="scene3_layers",
        children=(
            _void(),
            _vignette(0.9),
            GlowEffect(intensity=0.25, size=2, pulse=True, pulse_speed=0.02, y="50%"),
            AuraEffect(opacity=0.3, scale=0.7, rings=3),
            Figure(variant=FigureVariant.STANDING, opacity=0.85, scale=0.85, glow=GlowLevel.SUBTLE, translate_y=40),
            TextReveal(text="When it's just you.", start_frame=10, style=TextRevealStyle.WORD_BY_WORD, font_size=52, y="75%"),
        ),
    )


# ============================================================================
# ACT 2: THE BUILD
# ============================================================================


def scene4() -> Sequence:
    return Sequence(
        name="scene4_layers",
        children=(
            _void(),
            GlowEffect(intensity=_right_clamped([0, 75], [0.2, 0.4]), size=2, y="50%"),
            Particles(count=20, intensity=0.4, direction=ParticleDirection.UP, start_frame=30),
            Figure(variant=FigureVariant.WORKING, opacity=0.9, scale=0.85, glow=GlowLevel.MEDIUM, translate_y=30),
            TextReveal(text="So you learn.", start_frame=10, style=TextRevealStyle.WORD_BY_WORD, font_size=56, y="75%"),
        ),
    )


def scene5() -> Sequence:
    return Sequence(
        name="scene5_layers",
        style=transition_blur(0, 10, BlurType.IN),
        children=(
            _void(),
            GlowEffect(intensity=0.45, size=2, pulse=True, pulse_speed=0.05, y="50%"),
            LightTrail(start=(200, 900), end=(960, 540), start_frame=0, duration=20, name="trail_left"),
            LightTrail(start=(1720, 900), end=(960, 540), start_frame=5, duration=20, name="trail_right"),
            ParticleBurst(x=VIDEO_W / 2, y=VIDEO_H / 2, start_frame=0, count=24, duration=25),
            Particles(count=25, intensity=0.5, direction=ParticleDirection.UP, start_frame=10),
            Figure(variant=FigureVariant.WORKING, scale=0.9, glow=GlowLevel.MEDIUM, translate_y=20),
            TextReveal(text="One day.", start_frame=5, style=TextRevealStyle.IMPACT, font_size=72, y="75%"),
        ),
    )


def scene6() -> Sequence:
    bricks = [(760, 700, 0), (960, 700, 8), (1160, 700, 16), (860, 620, 24), (1060, 620, 32)]
    layers = [
        _void(),
        GlowEffect(intensity=0.5, size=2.2, y="50%"),
    ]
    for i, (x, y, delay) in enumerate(bricks):
        layers.append(ParticleBurst(x=x, y=y, start_frame=delay, count=12, duration=15, name=f"brick_burst_{i}"))
    layers += [
        Particles(count=30, intensity=0.55, direction=ParticleDirection.UP, start_frame=0),
        Figure(variant=FigureVariant.WORKING, scale=0.9, glow=GlowLevel.STRONG, translate_y=20),
        TextReveal(text="One brick.", start_frame=5, style=TextRevealStyle.IMPACT, font_size=72, y="75%"),
    ]
    return Sequence(name="scene6_layers", children=tuple(layers))


def scene7() -> Sequence:
    """Quick-cut montage."""
    cut1 = Sequence(
        name="cut1_layers",
        children=(
            _void(),
            GlowEffect(intensity=0.6, size=1.5, x="30%", y="50%"),
            Figure(variant=FigureVariant.WORKING, scale=0.9, glow=GlowLevel.STRONG),
            SpeedLines(intensity=0.3, direction=SpeedLineDirection.RIGHT, count=15),
        ),
    )
    cut2 = Sequence(
        name="cut2_layers",
        children=(
            _void(),
            GlowEffect(intensity=0.5, size=2, y="55%"),
            Particles(count=25, intensity=0.5, direction=ParticleDirection.UP),
        ),
    )
    cut3 = Sequence(
        name="cut3_layers",
        children=(
            _void(),
            GlowEffect(intensity=0.7, size=2.5, y="40%", pulse=True, pulse_speed=0.15),
            Figure(variant=FigureVariant.ASCENDING, scale=0.95, glow=GlowLevel.STRONG),
            Particles(count=40, intensity=0.6, direction=ParticleDirection.RADIAL, origin=(VIDEO_W / 2, 430)),
        ),
    )
    cut4 = Sequence(
        name="cut4_layers",
        style=motion_blur(0.4, radial=True),
        children=(
            _void(),
            GlowEffect(intensity=0.8, size=3, pulse=True, pulse_speed=0.2),
            Particles(count=50, intensity=0.7, direction=ParticleDirection.RADIAL),
            SpeedLines(intensity=0.4, direction=SpeedLineDirection.CENTER, count=25),
        ),
    )
    return series("scene7_cuts", [("cut1", 26, cut1), ("cut2", 26, cut2), ("cut3", 26, cut3), ("cut4", 27, cut4)])


# ============================================================================
# ACT 3: THE RISE
# ============================================================================


def scene8() -> Sequence:
    """Rapid rise montage."""
    rise1 = Sequence(
        name="rise1_layers",
        children=(
            _void(),
            GlowEffect(intensity=_right_clamped([0, 50], [0.5, 0.8]), size=2.5, y="35%", pulse=True, pulse_speed=0.12),
            Figure(
                variant=FigureVariant.ASCENDING,
                glow=GlowLevel.STRONG,
                translate_y=_right_clamped([0, 50], [40, 0]),
            ),
            Particles(count=35, intensity=0.6, direction=ParticleDirection.UP),
            SpeedLines(intensity=0.3, count=20),
        ),
    )
    rise2 = Sequence(
        name="rise2_layers",
        children=(
            _void(),
            GlowEffect(intensity=0.8, size=3, pulse=True, pulse_speed=0.15),
            Particles(count=50, intensity=0.7, direction=ParticleDirection.RADIAL),
        ),
    )
    rise3 = Sequence(
        name="rise3_layers",
        style=transition_blur(40, 10, BlurType.OUT),
        children=(
            _void(),
            GlowEffect(intensity=0.7, size=2.5, y="50%"),
            Figure(variant=FigureVariant.ASCENDING, scale=1.05, glow=GlowLevel.INTENSE),
            Particles(count=40, intensity=0.6, direction=ParticleDirection.UP),
        ),
    )
    return series("scene8_cuts", [("rise1", 50, rise1), ("rise2", 50, rise2), ("rise3", 50, rise3)])


def scene11() -> Sequence:
    return Sequence(
        name="scene11_layers",
        style=layer_opacity(_clamped([0, 20], [0.9, 1])),
        children=(
            _void(),
            GlowEffect(intensity=0.6, size=2.5, pulse=True, pulse_speed=0.05, y="45%"),
            AuraEffect(opacity=0.3, scale=0.9, rings=4),
            Figure(
                variant=FigureVariant.ARRIVED,
                scale=_clamped([0, 10], [1.2, 1]),
                glow=GlowLevel.INTENSE,
            ),
            TextReveal(text="Until it's built.", start_frame=10, style=TextRevealStyle.WORD_BY_WORD, font_size=60, y="78%"),
        ),
    )


def scene12() -> Sequence:
    return Sequence(
        name="scene12_layers",
        children=(
            BrandReveal(start_frame=0),
            Tagline(text="Keep building.", start_frame=40),
        ),
    )


SCENES = {
    "scene1": scene1,
    "scene2": scene2,
    "scene3": scene3,
    "scene4": scene4,
    "scene5": scene5,
    "scene6": scene6,
    "scene7": scene7,
    "scene8": scene8,
    "scene11": scene11,
    "scene12": scene12,
}


def build(schedule_path=None) -> SceneComposer:
    schedule = load_schedule(schedule_path or Paths.schedule(SCHEDULE_NAME))
    scenes: Dict[str, Any] = {name: factory() for name, factory in SCENES.items()}
    return SceneComposer(
        schedule,
        scenes,
        composition_id=COMPOSITION_ID,
        fps=FPS,
        width=VIDEO_W,
        height=VIDEO_H,
        duration_in_frames=DURATION_IN_FRAMES,
        background=Backdrop(color=palette.DARK, name="composition_background"),
    )
