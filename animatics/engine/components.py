#!/usr/bin/env python3
"""
Leaf Renderers

Each component is a frozen dataclass with ``render(ctx)``. It reads only the
FrameContext and its own fields and returns a RenderNode describing the
visual parameters for that frame (or None when nothing is drawn yet).

Numeric fields marked ``Animatable`` accept either a constant or a callable of
the local frame, typically an InterpolationSpec.
"""

import math
from dataclasses import dataclass
from typing import Any, Callable, Dict, List, Optional, Tuple, Union

from animatics.core import get_logger

from . import palette
from .assets import AssetRef, resolve_optional
from .easing import ease_out_quart
from .interpolate import clamp, interpolate
from .particles import (
    burst_field,
    burst_state,
    floating_field,
    floating_state,
    generate_field,
    particle_state,
    seeded_random,
)
from .sdk import (
    GOLDEN_ANGLE_DEG,
    VIDEO_H,
    VIDEO_W,
    BlurType,
    Extrapolate,
    FigureVariant,
    GlowLevel,
    ParticleDirection,
    SpeedLineDirection,
    TextRevealStyle,
)
from .spring import SPRING_PRESETS, spring
from .timeline import FrameContext, RenderNode, StyleFn

log = get_logger("components")

Animatable = Union[float, Callable[[int], float]]

CLAMP = Extrapolate.CLAMP

TYPEWRITER_CHARS_PER_FRAME = 0.8
CARET_BLINK_RATE = 0.3
WORD_STAGGER_FRAMES = 8


def _at(value: Animatable, frame: int) -> float:
    return value(frame) if callable(value) else value


def _round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


# ============================================================================
# TEXT
# ============================================================================


@dataclass(frozen=True)
class TextReveal:
    """Caption that appears at ``start_frame`` using one of four reveal styles."""

    text: str
    start_frame: int = 0
    style: TextRevealStyle = TextRevealStyle.WORD_BY_WORD
    font_size: int = 48
    color: str = palette.WHITE
    font_family: str = palette.FONT_INTER
    align: str = "center"
    y: str = "70%"
    name: str = "text_reveal"

    def render(self, ctx: FrameContext) -> Optional[RenderNode]:
        rel = ctx.frame - self.start_frame
        if rel < 0:
            return None
        style = TextRevealStyle(self.style)
        if style == TextRevealStyle.TYPEWRITER:
            content = self._typewriter(ctx, rel)
        elif style == TextRevealStyle.FADE:
            content = {"text": self.text, "opacity": interpolate(rel, [0, 20], [0, 1], extrapolate_right=CLAMP)}
        elif style == TextRevealStyle.IMPACT:
            content = self._impact(rel)
        else:
            content = self._word_by_word(ctx, rel)
        props = {
            "style": style.value,
            "font_size": self.font_size,
            "font_family": self.font_family,
            "color": self.color,
            "align": self.align,
            "y": self.y,
        }
        props.update(content)
        return RenderNode(kind="text", props=props, name=self.name)

    def _typewriter(self, ctx: FrameContext, rel: int) -> Dict[str, Any]:
        visible = math.floor(rel * TYPEWRITER_CHARS_PER_FRAME)
        typing = visible < len(self.text)
        return {
            "text": self.text[:visible],
            "visible_chars": min(visible, len(self.text)),
            "caret": typing,
            # caret blinks on the scene's frame, not the reveal's
            "caret_visible": typing and math.sin(ctx.frame * CARET_BLINK_RATE) > 0,
        }

    def _word_by_word(self, ctx: FrameContext, rel: int) -> Dict[str, Any]:
        words = []
        for index, word in enumerate(self.text.split(" ")):
            progress = spring(rel - index * WORD_STAGGER_FRAMES, ctx.fps, SPRING_PRESETS["word"])
            words.append(
                {
                    "word": word,
                    "opacity": interpolate(progress, [0, 1], [0, 1]),
                    "translate_y": interpolate(progress, [0, 1], [20, 0]),
                }
            )
        return {"text": self.text, "words": words}

    def _impact(self, rel: int) -> Dict[str, Any]:
        scale = interpolate(rel, [0, 8, 15], [1.5, 0.95, 1], easing=ease_out_quart, extrapolate_right=CLAMP)
        opacity = interpolate(rel, [0, 5], [0, 1], extrapolate_right=CLAMP)
        return {"text": self.text, "scale": scale, "opacity": opacity}


@dataclass(frozen=True)
class TypewriterText:
    text: str
    start_frame: int = 0
    chars_per_frame: float = 0.5
    font_size: int = 48
    color: str = palette.TEXT
    font_family: str = palette.FONT_MONO
    show_cursor: bool = True
    name: str = "typewriter"

    def render(self, ctx: FrameContext) -> Optional[RenderNode]:
        rel = ctx.frame - self.start_frame
        visible = min(math.floor(max(0, rel) * self.chars_per_frame), len(self.text))
        complete = visible >= len(self.text)
        # 15 frames on, 15 off once typing has finished
        cursor = self.show_cursor and (not complete or rel % 30 < 15)
        return RenderNode(
            kind="text",
            props={
                "style": "typewriter",
                "text": self.text[:visible],
                "visible_chars": visible,
                "complete": complete,
                "cursor_visible": cursor,
                "cursor_height": self.font_size * 0.8,
                "font_size": self.font_size,
                "font_family": self.font_family,
                "color": self.color,
            },
            name=self.name,
        )


@dataclass(frozen=True)
class GlitchText:
    """Text that jitters on seeded 4-frame windows."""

    text: str
    intensity: float = 0.3
    font_size: int = 48
    color: str = palette.TEXT
    font_family: str = palette.FONT_HEADING
    name: str = "glitch_text"

    def render(self, ctx: FrameContext) -> RenderNode:
        frame = ctx.frame
        glitching = seeded_random(f"glitch-{frame // 4}") < self.intensity
        offset = (seeded_random(f"offset-{frame}") - 0.5) * 10 if glitching else 0.0
        skew = (seeded_random(f"skew-{frame}") - 0.5) * 5 if glitching else 0.0
        layers: List[Dict[str, Any]] = []
        if glitching:
            layers = [
                {"color": palette.GLITCH_RED, "opacity": 0.7, "translate_x": offset - 3, "clip": "top"},
                {"color": palette.GLITCH_CYAN, "opacity": 0.7, "translate_x": offset + 3, "clip": "bottom"},
            ]
        return RenderNode(
            kind="text",
            props={
                "style": "glitch",
                "text": self.text,
                "glitching": glitching,
                "translate_x": offset,
                "skew_x": skew,
                "aberration": layers,
                "font_size": self.font_size,
                "font_family": self.font_family,
                "color": self.color,
            },
            name=self.name,
        )


@dataclass(frozen=True)
class ScoreCounter:
    target_score: int
    start_frame: int = 0
    duration: int = 45
    font_size: int = 120
    name: str = "score_counter"

    def render(self, ctx: FrameContext) -> RenderNode:
        progress = spring(
            ctx.frame - self.start_frame,
            ctx.fps,
            SPRING_PRESETS["counter"],
            duration_in_frames=self.duration,
        )
        score = _round_half_up(interpolate(progress, [0, 1], [0, self.target_score]))
        glow = interpolate(progress, [0.8, 1], [0.4, 0.8], extrapolate_left=CLAMP, extrapolate_right=CLAMP)
        return RenderNode(
            kind="counter",
            props={
                "value": score,
                "progress": progress,
                "glow": glow,
                "font_size": self.font_size,
                "font_family": palette.FONT_MONO,
                "color": palette.PRIMARY,
            },
            name=self.name,
        )


@dataclass(frozen=True)
class TextBlock:
    """Static copy with animatable opacity, scale and glow."""

    text: str
    opacity: Animatable = 1.0
    scale: Animatable = 1.0
    glow: Animatable = 0.0
    font_size: int = 56
    color: str = palette.TEXT
    font_family: str = palette.FONT_HEADING
    y: str = "50%"
    name: str = "text"

    def render(self, ctx: FrameContext) -> RenderNode:
        return RenderNode(
            kind="text",
            props={
                "style": "block",
                "text": self.text,
                "opacity": _at(self.opacity, ctx.frame),
                "scale": _at(self.scale, ctx.frame),
                "glow": _at(self.glow, ctx.frame),
                "glow_color": palette.ACCENT_GLOW,
                "font_size": self.font_size,
                "font_family": self.font_family,
                "color": self.color,
                "y": self.y,
            },
            name=self.name,
        )


@dataclass(frozen=True)
class BrandReveal:
    start_frame: int = 0
    words: Tuple[str, ...] = ("BRICK", "BY", "BRICK")
    name: str = "brand_reveal"

    def render(self, ctx: FrameContext) -> Optional[RenderNode]:
        rel = ctx.frame - self.start_frame
        if rel < 0:
            return None
        words = []
        for index, word in enumerate(self.words):
            word_frame = rel - index * WORD_STAGGER_FRAMES
            progress = spring(word_frame, ctx.fps, SPRING_PRESETS["brand"])
            small = word == "BY"
            words.append(
                {
                    "word": word,
                    "scale": interpolate(progress, [0, 1], [1.3, 1]),
                    "translate_y": interpolate(progress, [0, 1], [20, 0]),
                    "opacity": interpolate(word_frame, [0, 10], [0, 1], extrapolate_left=CLAMP, extrapolate_right=CLAMP),
                    "font_size": 60 if small else 90,
                    "font_weight": 700 if small else 900,
                }
            )
        glow = interpolate(rel, [20, 50], [0, 0.15], extrapolate_left=CLAMP, extrapolate_right=CLAMP)
        return RenderNode(
            kind="brand_reveal",
            props={"words": words, "glow_opacity": glow, "background": palette.DARK},
            name=self.name,
        )


@dataclass(frozen=True)
class Tagline:
    text: str
    start_frame: int = 0
    y: str = "65%"
    name: str = "tagline"

    def render(self, ctx: FrameContext) -> Optional[RenderNode]:
        rel = ctx.frame - self.start_frame
        if rel < 0:
            return None
        return RenderNode(
            kind="text",
            props={
                "style": "tagline",
                "text": self.text,
                "opacity": interpolate(rel, [0, 20], [0, 1], extrapolate_right=CLAMP),
                "font_size": 24,
                "color": palette.WHITE_SUBTLE,
                "y": self.y,
            },
            name=self.name,
        )


# ============================================================================
# LIGHT
# ============================================================================


@dataclass(frozen=True)
class GlowEffect:
    intensity: Animatable = 0.5
    size: float = 1.0
    pulse: bool = False
    pulse_speed: float = 0.03
    color: str = palette.CYAN
    x: str = "50%"
    y: str = "50%"
    name: str = "glow"

    def render(self, ctx: FrameContext) -> RenderNode:
        pulse = interpolate(math.sin(ctx.frame * self.pulse_speed), [-1, 1], [0.7, 1]) if self.pulse else 1.0
        final = _at(self.intensity, ctx.frame) * pulse
        alpha = clamp(_round_half_up(final * 60), 0, 255)
        return RenderNode(
            kind="glow",
            props={
                "intensity": final,
                "color": f"{self.color}{int(alpha):02x}",
                "diameter": 400 * self.size,
                "blur": 30 * self.size,
                "x": self.x,
                "y": self.y,
            },
            name=self.name,
        )


@dataclass(frozen=True)
class AuraEffect:
    opacity: float = 0.5
    scale: float = 1.0
    rings: int = 3
    name: str = "aura"

    def render(self, ctx: FrameContext) -> RenderNode:
        rings = []
        for i in range(self.rings):
            breathe = interpolate(math.sin(ctx.frame * 0.02 + i * 0.5), [-1, 1], [0.95, 1.05])
            rings.append(
                {
                    "scale": self.scale * breathe * (1 + i * 0.3),
                    "opacity": self.opacity * (1 - i * 0.2),
                }
            )
        return RenderNode(kind="aura", props={"rings": rings, "color": palette.CYAN}, name=self.name)


@dataclass(frozen=True)
class LightTrail:
    start: Tuple[float, float]
    end: Tuple[float, float]
    start_frame: int = 0
    duration: int = 20
    width: float = 3
    name: str = "light_trail"

    def render(self, ctx: FrameContext) -> RenderNode:
        (x0, y0), (x1, y1) = self.start, self.end
        progress = interpolate(
            ctx.frame,
            [self.start_frame, self.start_frame + self.duration],
            [0, 1],
            easing=ease_out_quart,
            extrapolate_left=CLAMP,
            extrapolate_right=CLAMP,
        )
        length = math.hypot(x1 - x0, y1 - y0)
        return RenderNode(
            kind="light_trail",
            props={
                "x": x0,
                "y": y0,
                "length": length * progress,
                "angle_deg": math.degrees(math.atan2(y1 - y0, x1 - x0)),
                "width": self.width,
                "progress": progress,
            },
            name=self.name,
        )


@dataclass(frozen=True)
class SpeedLines:
    intensity: float = 0.5
    direction: SpeedLineDirection = SpeedLineDirection.CENTER
    count: int = 20
    name: str = "speed_lines"

    def render(self, ctx: FrameContext) -> RenderNode:
        direction = SpeedLineDirection(self.direction)
        frame = ctx.frame
        lines = []
        for i in range(self.count):
            seed = i * GOLDEN_ANGLE_DEG
            speed = 10 + math.cos(seed * 2) * 5
            if direction == SpeedLineDirection.LEFT:
                x = (frame * speed) % 2200 - 200
            elif direction == SpeedLineDirection.RIGHT:
                x = VIDEO_W - (frame * speed) % 2200 + 200
            else:
                side = 1 if math.sin(seed * 3) > 0 else -1
                x = VIDEO_W / 2 + side * ((frame * speed) % 1100)
            lines.append(
                {
                    "x": x,
                    "y": (i / self.count) * VIDEO_H,
                    "length": 100 + math.sin(seed) * 200,
                    "opacity": (0.1 + math.sin(seed * 4) * 0.1) * self.intensity,
                }
            )
        return RenderNode(kind="speed_lines", props={"lines": lines}, name=self.name)


# ============================================================================
# FIGURE
# ============================================================================

FIGURE_PATHS: Dict[FigureVariant, Dict[str, Any]] = {
    FigureVariant.STANDING: {
        "head": {"cx": 200, "cy": 110, "rx": 35, "ry": 40},
        "body": "M200 150 L200 280 Q200 300 185 330 L170 400 M200 280 Q200 300 215 330 L230 400",
        "arms": "M200 170 Q160 190 150 260 M200 170 Q240 190 250 260",
        "body_stroke": 20,
        "arms_stroke": 16,
    },
    FigureVariant.WORKING: {
        "head": {"cx": 200, "cy": 120, "rx": 35, "ry": 40},
        "body": "M200 160 L200 280 Q200 300 180 320 L160 380 M200 280 Q200 300 220 320 L240 380",
        "arms": "M200 180 Q160 200 140 240 M200 180 Q240 200 280 220",
        "body_stroke": 20,
        "arms_stroke": 18,
    },
    FigureVariant.ASCENDING: {
        "head": {"cx": 200, "cy": 100, "rx": 35, "ry": 40},
        "body": "M200 140 L200 260 Q200 280 190 300 L175 360 M200 260 Q200 280 210 300 L225 360",
        "arms": "M200 160 Q170 140 150 80 M200 160 Q230 140 250 80",
        "body_stroke": 20,
        "arms_stroke": 18,
    },
    FigureVariant.ARRIVED: {
        "head": {"cx": 200, "cy": 100, "rx": 38, "ry": 42},
        "body": "M200 142 L200 280 Q200 300 185 330 L170 400 M200 280 Q200 300 215 330 L230 400",
        "arms": "M200 165 Q165 180 145 240 M200 165 Q235 180 255 240",
        "body_stroke": 22,
        "arms_stroke": 18,
    },
}


@dataclass(frozen=True)
class Figure:
    """Silhouette picked by variant, with a slow breathing scale."""

    variant: FigureVariant = FigureVariant.STANDING
    opacity: Animatable = 1.0
    scale: Animatable = 1.0
    glow: GlowLevel = GlowLevel.SUBTLE
    blur: Animatable = 0.0
    translate_y: Animatable = 0.0
    name: str = "figure"

    def render(self, ctx: FrameContext) -> RenderNode:
        frame = ctx.frame
        variant = FigureVariant(self.variant)
        glow = GlowLevel(self.glow)
        breathe = interpolate(math.sin(frame * 0.05), [-1, 1], [0.98, 1.02])
        props = {
            "variant": variant.value,
            "paths": FIGURE_PATHS[variant],
            "view_box": [0, 0, 400, 500],
            "opacity": _at(self.opacity, frame),
            "scale": _at(self.scale, frame) * breathe,
            "translate_y": _at(self.translate_y, frame),
            "blur": _at(self.blur, frame),
            "color": palette.CYAN,
            "glow": glow.value,
        }
        if glow != GlowLevel.NONE:
            props["drop_shadow"] = palette.GLOW_SHADOWS[glow]
            props["backdrop_opacity"] = palette.GLOW_BACKDROP_OPACITY[glow]
        return RenderNode(kind="figure", props=props, name=self.name)


# ============================================================================
# PARTICLES
# ============================================================================


@dataclass(frozen=True)
class Particles:
    count: int = 30
    intensity: float = 0.5
    direction: ParticleDirection = ParticleDirection.UP
    start_frame: int = 0
    origin: Tuple[float, float] = (VIDEO_W / 2, VIDEO_H / 2)
    seed_multiplier: float = GOLDEN_ANGLE_DEG
    name: str = "particles"

    def render(self, ctx: FrameContext) -> Optional[RenderNode]:
        rel = ctx.frame - self.start_frame
        if rel < 0:
            return None
        states = []
        for particle in generate_field(self.count, self.seed_multiplier):
            state = particle_state(particle, rel, self.direction, self.origin, self.intensity)
            if state is not None:
                states.append(state.to_dict())
        return RenderNode(
            kind="particles",
            props={"direction": ParticleDirection(self.direction).value, "color": palette.CYAN, "particles": states},
            name=self.name,
        )


@dataclass(frozen=True)
class ParticleBurst:
    x: float
    y: float
    start_frame: int
    count: int = 20
    duration: int = 30
    name: str = "burst"

    def render(self, ctx: FrameContext) -> Optional[RenderNode]:
        rel = ctx.frame - self.start_frame
        field = burst_field(self.x, self.y, self.start_frame, self.count)
        states = burst_state(field, self.x, self.y, rel, self.duration)
        if not states:
            return None
        return RenderNode(
            kind="burst",
            props={"color": palette.CYAN_LIGHT, "particles": [s.to_dict() for s in states]},
            name=self.name,
        )


@dataclass(frozen=True)
class FloatingParticles:
    count: int = 30
    speed: float = 1.0
    seed: str = "particles"
    name: str = "floating_particles"

    def render(self, ctx: FrameContext) -> RenderNode:
        states = [floating_state(p, ctx.frame, self.speed) for p in floating_field(self.count, self.seed)]
        return RenderNode(kind="particles", props={"color": palette.PRIMARY, "particles": states}, name=self.name)


# ============================================================================
# BACKGROUNDS
# ============================================================================


@dataclass(frozen=True)
class Backdrop:
    color: str = palette.DARK
    gradient: Optional[str] = None
    opacity: Animatable = 1.0
    name: str = "backdrop"

    def render(self, ctx: FrameContext) -> RenderNode:
        props: Dict[str, Any] = {"color": self.color, "opacity": _at(self.opacity, ctx.frame)}
        if self.gradient:
            props["gradient"] = self.gradient
        return RenderNode(kind="backdrop", props=props, name=self.name)


@dataclass(frozen=True)
class GridBackground:
    cell_size: int = 60
    opacity: float = 0.15
    animated: bool = True
    perspective: bool = True
    name: str = "grid"

    def render(self, ctx: FrameContext) -> RenderNode:
        pulse = interpolate(math.sin((ctx.frame / 60) * math.pi * 2), [-1, 1], [0.8, 1.2])
        return RenderNode(
            kind="grid",
            props={
                "cell_size": self.cell_size,
                "offset_y": ctx.frame % self.cell_size if self.animated else 0,
                "opacity": self.opacity * pulse,
                "perspective": self.perspective,
                "color": palette.PRIMARY,
            },
            name=self.name,
        )


@dataclass(frozen=True)
class ScanLines:
    opacity: float = 0.08
    speed: float = 2
    line_height: int = 2
    name: str = "scan_lines"

    def render(self, ctx: FrameContext) -> RenderNode:
        return RenderNode(
            kind="scan_lines",
            props={
                "opacity": self.opacity,
                "line_height": self.line_height,
                "scan_position_pct": (ctx.frame * self.speed) % 100,
            },
            name=self.name,
        )


@dataclass(frozen=True)
class ImageLayer:
    """A static image; the resolver (when configured) must find the file."""

    asset: AssetRef
    opacity: Animatable = 1.0
    scale: Animatable = 1.0
    name: str = "image"

    def render(self, ctx: FrameContext) -> RenderNode:
        return RenderNode(
            kind="image",
            props={
                "src": self.asset.path,
                "resolved": resolve_optional(ctx.assets, self.asset),
                "opacity": _at(self.opacity, ctx.frame),
                "scale": _at(self.scale, ctx.frame),
            },
            name=self.name,
        )


# ============================================================================
# LAYER STYLES
# ============================================================================


def fade_transition(scene_length: int, fade_in: int = 10, fade_out: int = 10) -> StyleFn:
    """Layer opacity that fades in from 0 and out to 0 at the scene's end."""

    def style(ctx: FrameContext) -> Dict[str, Any]:
        opacity_in = (
            interpolate(ctx.frame, [0, fade_in], [0, 1], extrapolate_left=CLAMP, extrapolate_right=CLAMP)
            if fade_in > 0
            else 1.0
        )
        opacity_out = (
            interpolate(
                ctx.frame,
                [scene_length - fade_out, scene_length],
                [1, 0],
                extrapolate_left=CLAMP,
                extrapolate_right=CLAMP,
            )
            if fade_out > 0
            else 1.0
        )
        return {"opacity": min(opacity_in, opacity_out)}

    return style


def transition_blur(start_frame: int, duration: int = 10, blur_type: BlurType = BlurType.THROUGH) -> StyleFn:
    blur_type = BlurType(blur_type)
    if blur_type == BlurType.IN:
        points, values = [0, duration], [20, 0]
    elif blur_type == BlurType.OUT:
        points, values = [0, duration], [0, 20]
    else:
        points, values = [0, duration / 2, duration], [0, 15, 0]

    def style(ctx: FrameContext) -> Dict[str, Any]:
        blur = interpolate(ctx.frame - start_frame, points, values, extrapolate_left=CLAMP, extrapolate_right=CLAMP)
        return {"blur": blur} if blur > 0 else {}

    return style


def motion_blur(intensity: float = 0.5, radial: bool = False) -> StyleFn:
    amount = intensity * 15 * (0.7 if radial else 1)

    def style(ctx: FrameContext) -> Dict[str, Any]:
        return {"blur": amount} if amount > 0 else {}

    return style


def layer_opacity(opacity: Animatable) -> StyleFn:
    def style(ctx: FrameContext) -> Dict[str, Any]:
        return {"opacity": _at(opacity, ctx.frame)}

    return style


__all__ = [
    # Text
    "TextReveal", "TypewriterText", "GlitchText", "ScoreCounter", "TextBlock",
    "BrandReveal", "Tagline",

    # Light
    "GlowEffect", "AuraEffect", "LightTrail", "SpeedLines",

    # Figure
    "Figure", "FIGURE_PATHS",

    # Particles
    "Particles", "ParticleBurst", "FloatingParticles",

    # Backgrounds
    "Backdrop", "GridBackground", "ScanLines", "ImageLayer",

    # Layer styles
    "fade_transition", "transition_blur", "motion_blur", "layer_opacity",
]
