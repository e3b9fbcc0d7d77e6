"""
Seeded Procedural Field Generator

Particle attributes are derived from (index, seed multiplier) only, using
phase-shifted trig functions of ``s = index * seed_multiplier``. Generating the
field twice (or in another process) yields the same particles, and growing the
count never changes the particles that already exist.
"""

import math
import random
import threading
from collections import OrderedDict
from dataclasses import dataclass
from typing import Optional, Tuple, Union

from animatics.core import get_logger

from .interpolate import interpolate
from .sdk import (
    GOLDEN_ANGLE_DEG,
    PARTICLE_LIFETIME_FRAMES,
    VIDEO_H,
    VIDEO_W,
    Extrapolate,
    ParticleDirection,
)

log = get_logger("particles")

Number = Union[int, float]

BURST_DURATION_FRAMES = 30
CONVERGE_FRAMES = 60
UP_SPEED_FACTOR = 3
RADIAL_SPEED_FACTOR = 2
SWAY_PIXELS = 20

DEFAULT_CACHE_SIZE = 128

_FADE_INPUT = (0, 0.2, 0.8, 1)
_FADE_OUTPUT = (0, 1, 1, 0)
_BURST_FADE_INPUT = (0, 0.3, 1)
_BURST_FADE_OUTPUT = (1, 1, 0)


@dataclass(frozen=True)
class Particle:
    id: int
    x: float
    y: float
    size: float
    speed: float
    opacity: float
    delay: float
    angle: float


@dataclass(frozen=True)
class ParticleState:
    """Where one particle is drawn on a given frame."""

    id: int
    x: float
    y: float
    size: float
    opacity: float

    def to_dict(self):
        return {"id": self.id, "x": self.x, "y": self.y, "size": self.size, "opacity": self.opacity}


@dataclass(frozen=True)
class BurstParticle:
    id: int
    angle: float
    speed: float
    size: float


def _unit(value: float) -> float:
    """Map [-1, 1] onto [0, 1]."""
    return value * 0.5 + 0.5


def _make_particle(index: int, seed_multiplier: float) -> Particle:
    s = index * seed_multiplier
    return Particle(
        id=index,
        x=_unit(math.sin(s)) * VIDEO_W,
        y=_unit(math.cos(s * 2)) * VIDEO_H,
        size=2 + _unit(math.sin(s * 3)) * 4,
        speed=0.5 + _unit(math.cos(s * 4)) * 2,
        opacity=0.3 + _unit(math.sin(s * 5)) * 0.7,
        delay=_unit(math.cos(s * 6)) * 30,
        angle=math.sin(s * 7) * math.pi * 2,
    )


def generate_field_uncached(count: int, seed_multiplier: float = GOLDEN_ANGLE_DEG) -> Tuple[Particle, ...]:
    if count < 0:
        raise ValueError(f"count must be non-negative, got {count}")
    return tuple(_make_particle(i, seed_multiplier) for i in range(count))


class FieldCache:
    """Bounded, lock-protected memo of generated fields keyed by (count, seed)."""

    def __init__(self, max_size: int = DEFAULT_CACHE_SIZE):
        self.max_size = max_size
        self._fields: "OrderedDict[Tuple[int, float], Tuple[Particle, ...]]" = OrderedDict()
        self._lock = threading.Lock()
        self.hits = 0
        self.misses = 0

    def get(self, count: int, seed_multiplier: float) -> Tuple[Particle, ...]:
        key = (count, float(seed_multiplier))
        with self._lock:
            field = self._fields.get(key)
            if field is not None:
                self._fields.move_to_end(key)
                self.hits += 1
                return field
        # Generation is pure, so a racing duplicate fill stores an equal value
        field = generate_field_uncached(count, seed_multiplier)
        with self._lock:
            self.misses += 1
            self._fields[key] = field
            self._fields.move_to_end(key)
            while len(self._fields) > self.max_size:
                self._fields.popitem(last=False)
        log.debug(f"[particles] generated field count={count} seed={seed_multiplier}")
        return field

    def clear(self) -> None:
        with self._lock:
            self._fields.clear()
            self.hits = 0
            self.misses = 0

    def __len__(self) -> int:
        return len(self._fields)


field_cache = FieldCache()


def generate_field(count: int, seed_multiplier: float = GOLDEN_ANGLE_DEG) -> Tuple[Particle, ...]:
    """Deterministic particle field of ``count`` particles (memoized)."""
    return field_cache.get(count, seed_multiplier)


def particle_state(
    particle: Particle,
    relative_frame: Number,
    direction: Union[ParticleDirection, str] = ParticleDirection.UP,
    origin: Tuple[float, float] = (VIDEO_W / 2, VIDEO_H / 2),
    intensity: float = 1.0,
) -> Optional[ParticleState]:
    """
    Position and opacity of ``particle`` at a frame relative to the field start.

    Returns None while the particle is still waiting out its delay.
    """
    direction = ParticleDirection(direction)
    f = relative_frame - particle.delay
    if f < 0:
        return None

    origin_x, origin_y = origin
    if direction == ParticleDirection.UP:
        x = particle.x + math.sin(f * 0.1 + particle.angle) * SWAY_PIXELS
        y = particle.y - f * particle.speed * UP_SPEED_FACTOR
    elif direction == ParticleDirection.RADIAL:
        distance = f * particle.speed * RADIAL_SPEED_FACTOR
        x = origin_x + math.cos(particle.angle) * distance
        y = origin_y + math.sin(particle.angle) * distance
    else:
        progress = min(f / CONVERGE_FRAMES, 1)
        x = interpolate(progress, [0, 1], [particle.x, origin_x])
        y = interpolate(progress, [0, 1], [particle.y, origin_y])

    age = f / PARTICLE_LIFETIME_FRAMES
    fade = interpolate(age, _FADE_INPUT, _FADE_OUTPUT, extrapolate_right=Extrapolate.CLAMP)
    return ParticleState(
        id=particle.id,
        x=x,
        y=y,
        size=particle.size,
        opacity=particle.opacity * fade * intensity,
    )


# ---------------------------------------------------------------------------
# Bursts
# ---------------------------------------------------------------------------


def seeded_random(key: Union[str, int, float]) -> float:
    """
    Stable pseudo-random number in [0, 1) for a key.

    ``random.Random`` seeds strings via SHA-512, so the value does not depend on
    PYTHONHASHSEED or the process.
    """
    return random.Random(str(key)).random()


def burst_field(
    origin_x: float, origin_y: float, start_frame: int, count: int = 20
) -> Tuple[BurstParticle, ...]:
    """Evenly spread burst directions with seeded speed and size."""
    if count < 0:
        raise ValueError(f"count must be non-negative, got {count}")
    particles = []
    for i in range(count):
        key = f"burst:{origin_x}:{origin_y}:{start_frame}:{i}"
        particles.append(
            BurstParticle(
                id=i,
                angle=(i / count) * math.pi * 2,
                speed=3 + seeded_random(key + ":speed") * 5,
                size=2 + seeded_random(key + ":size") * 3,
            )
        )
    return tuple(particles)


def burst_state(
    particles: Tuple[BurstParticle, ...],
    origin_x: float,
    origin_y: float,
    relative_frame: Number,
    duration: int = BURST_DURATION_FRAMES,
) -> Tuple[ParticleState, ...]:
    """Burst particles on a frame; empty outside [0, duration]."""
    if duration <= 0:
        raise ValueError(f"duration must be positive, got {duration}")
    if relative_frame < 0 or relative_frame > duration:
        return ()
    progress = relative_frame / duration
    opacity = interpolate(progress, _BURST_FADE_INPUT, _BURST_FADE_OUTPUT)
    states = []
    for p in particles:
        distance = p.speed * relative_frame
        states.append(
            ParticleState(
                id=p.id,
                x=origin_x + math.cos(p.angle) * distance,
                y=origin_y + math.sin(p.angle) * distance,
                size=p.size,
                opacity=opacity,
            )
        )
    return tuple(states)


# ---------------------------------------------------------------------------
# Floating ambient particles
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class FloatingParticle:
    id: int
    x_pct: float
    y_pct: float
    size: float
    speed_multiplier: float
    opacity: float
    delay: float


def floating_field(count: int = 30, seed: str = "particles") -> Tuple[FloatingParticle, ...]:
    """Ambient particles positioned in percent of the frame, keyed by ``seed``."""
    return tuple(
        FloatingParticle(
            id=i,
            x_pct=seeded_random(f"{seed}-x-{i}") * 100,
            y_pct=seeded_random(f"{seed}-y-{i}") * 100,
            size=seeded_random(f"{seed}-size-{i}") * 3 + 1,
            speed_multiplier=seeded_random(f"{seed}-speed-{i}") * 0.5 + 0.5,
            opacity=seeded_random(f"{seed}-opacity-{i}") * 0.5 + 0.2,
            delay=seeded_random(f"{seed}-delay-{i}") * 100,
        )
        for i in range(count)
    )


def floating_state(particle: FloatingParticle, frame: Number, speed: float = 1.0) -> dict:
    t = frame + particle.delay
    phase = t * speed * particle.speed_multiplier
    pulse = interpolate(math.sin((t / 40) * math.pi * 2), [-1, 1], [0.5, 1])
    return {
        "id": particle.id,
        "x_pct": particle.x_pct,
        "y_pct": particle.y_pct,
        "dx": math.cos(phase / 70) * 10,
        "dy": math.sin(phase / 50) * 20,
        "size": particle.size,
        "opacity": particle.opacity * pulse,
    }
