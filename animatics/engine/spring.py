"""
Spring Solver

Closed-form damped harmonic oscillator. The spring's progress is evaluated
directly at t = frame / fps seconds, so frame 200 costs the same as frame 1 and
no solver state is carried between calls.

Progress starts at 0 and moves toward 1. Underdamped configurations overshoot
and settle; critically and overdamped ones approach 1 monotonically (for zero
initial velocity).
"""

import math
from dataclasses import dataclass
from functools import lru_cache
from typing import Dict, Optional, Tuple, Union

from animatics.core import get_logger

from .errors import InvalidSpringConfigError

log = get_logger("spring")

Number = Union[int, float]

REST_THRESHOLD = 0.005
MAX_MEASURE_FRAMES = 100_000
CRITICAL_TOLERANCE = 1e-9


@dataclass(frozen=True)
class SpringConfig:
    """Physical constants for a spring; defaults match a lively UI spring."""

    damping: float = 10.0
    stiffness: float = 100.0
    mass: float = 1.0
    initial_velocity: float = 0.0
    overshoot_clamping: bool = False

    def __post_init__(self):
        for name in ("damping", "stiffness", "mass"):
            value = getattr(self, name)
            if not isinstance(value, (int, float)) or not math.isfinite(value) or value <= 0:
                raise InvalidSpringConfigError(
                    f"Spring {name} must be a positive finite number, got {value!r}",
                    {"field": name, "value": value},
                )
        if not math.isfinite(self.initial_velocity):
            raise InvalidSpringConfigError(
                f"Spring initial_velocity must be finite, got {self.initial_velocity!r}",
                {"field": "initial_velocity", "value": self.initial_velocity},
            )

    @property
    def natural_frequency(self) -> float:
        return math.sqrt(self.stiffness / self.mass)

    @property
    def damping_ratio(self) -> float:
        return self.damping / (2 * math.sqrt(self.stiffness * self.mass))

    @property
    def regime(self) -> str:
        zeta = self.damping_ratio
        if abs(zeta - 1) < CRITICAL_TOLERANCE:
            return "critical"
        return "under" if zeta < 1 else "over"


DEFAULT_SPRING = SpringConfig()

SPRING_PRESETS: Dict[str, SpringConfig] = {
    "default": DEFAULT_SPRING,
    "smooth": SpringConfig(damping=200),
    "bouncy": SpringConfig(damping=100, mass=0.8),
    "snappy": SpringConfig(damping=300, stiffness=200),
    "word": SpringConfig(damping=20, stiffness=100, mass=0.5),
    "brand": SpringConfig(damping=15, stiffness=80, mass=0.8),
    "counter": SpringConfig(damping=50),
}


def _validate_fps(fps: Number) -> None:
    if not isinstance(fps, (int, float)) or not math.isfinite(fps) or fps <= 0:
        raise InvalidSpringConfigError(f"fps must be a positive number, got {fps!r}", {"fps": fps})


def _coefficients(config: SpringConfig) -> Tuple[str, Tuple[float, ...]]:
    """Per-regime constants of the displacement d(t) = progress(t) - 1."""
    w0 = config.natural_frequency
    zeta = config.damping_ratio
    d0 = -1.0
    v0 = config.initial_velocity
    regime = config.regime
    if regime == "under":
        w1 = w0 * math.sqrt(1 - zeta * zeta)
        return regime, (zeta * w0, w1, d0, (v0 + zeta * w0 * d0) / w1)
    if regime == "critical":
        return regime, (w0, d0, v0 + w0 * d0)
    root = math.sqrt(zeta * zeta - 1)
    # r1 * r2 == w0 ** 2; the division keeps r1 accurate for heavy damping
    r2 = -w0 * (zeta + root)
    r1 = -w0 / (zeta + root)
    b = (v0 - r1 * d0) / (r2 - r1)
    a = d0 - b
    return regime, (r1, r2, a, b)


def _displacement(t: float, config: SpringConfig) -> float:
    regime, c = _coefficients(config)
    if regime == "under":
        decay, w1, d0, k = c
        return math.exp(-decay * t) * (d0 * math.cos(w1 * t) + k * math.sin(w1 * t))
    if regime == "critical":
        w0, d0, k = c
        return math.exp(-w0 * t) * (d0 + k * t)
    r1, r2, a, b = c
    return a * math.exp(r1 * t) + b * math.exp(r2 * t)


def _envelope(t: float, config: SpringConfig) -> float:
    """Upper bound of |d(s)| for every s >= t."""
    regime, c = _coefficients(config)
    if regime == "under":
        decay, _w1, d0, k = c
        return math.exp(-decay * t) * math.hypot(d0, k)
    if regime == "critical":
        w0, d0, k = c
        # (|d0| + |k| s) e^{-w0 s} is decreasing once s > 1/w0
        if t < 1 / w0:
            return abs(d0) + abs(k) / w0
        return math.exp(-w0 * t) * (abs(d0) + abs(k) * t)
    r1, r2, a, b = c
    return abs(a) * math.exp(r1 * t) + abs(b) * math.exp(r2 * t)


def spring_progress(seconds: float, config: SpringConfig = DEFAULT_SPRING) -> float:
    """Raw spring progress at ``seconds`` of elapsed time (0 before start)."""
    if seconds <= 0:
        return 0.0
    progress = 1.0 + _displacement(seconds, config)
    if config.overshoot_clamping:
        progress = min(progress, 1.0)
    return progress


@lru_cache(maxsize=256)
def measure_spring(fps: Number, config: SpringConfig = DEFAULT_SPRING, threshold: float = REST_THRESHOLD) -> int:
    """
    Frames until the spring comes to rest.

    Returns the first frame after which progress stays within ``threshold`` of
    1 for every later frame.
    """
    _validate_fps(fps)
    if threshold <= 0:
        raise ValueError("threshold must be positive")
    last_unsettled = -1
    frame = 0
    while frame < MAX_MEASURE_FRAMES:
        t = frame / fps
        if abs(1.0 - spring_progress(t, config)) >= threshold:
            last_unsettled = frame
        elif _envelope(t, config) < threshold:
            break
        frame += 1
    else:
        log.warning(f"Spring {config} did not settle within {MAX_MEASURE_FRAMES} frames")
    return last_unsettled + 1


def spring(
    frame: Number,
    fps: Number,
    config: Optional[SpringConfig] = None,
    *,
    from_value: float = 0.0,
    to_value: float = 1.0,
    delay: Number = 0,
    duration_in_frames: Optional[Number] = None,
    reverse: bool = False,
) -> float:
    """
    Evaluate a spring animation at a frame.

    Args:
        frame: Relative frame (frames before 0 have not started)
        fps: Frames per second of the composition
        config: Spring constants; DEFAULT_SPRING when omitted
        from_value: Value at rest before the spring starts
        to_value: Value the spring settles at
        delay: Frames to wait before starting
        duration_in_frames: Stretch time so the spring settles at this frame
        reverse: Play the spring backwards over its duration

    Returns:
        Interpolated value between from_value and to_value (may overshoot)

    Raises:
        InvalidSpringConfigError: For non-positive fps or duration
    """
    cfg = config or DEFAULT_SPRING
    _validate_fps(fps)
    if not isinstance(frame, (int, float)) or not math.isfinite(frame):
        raise InvalidSpringConfigError(f"spring() frame must be finite, got {frame!r}")

    f = frame - delay
    if duration_in_frames is not None:
        if duration_in_frames <= 0:
            raise InvalidSpringConfigError(
                f"duration_in_frames must be positive, got {duration_in_frames!r}"
            )
        natural = measure_spring(fps, cfg)
        if reverse:
            f = duration_in_frames - f
        if natural > 0:
            f = f * natural / duration_in_frames
    elif reverse:
        f = measure_spring(fps, cfg) - f

    progress = spring_progress(f / fps, cfg)
    if progress == 0.0:
        return from_value
    if progress == 1.0:
        return to_value
    return (1 - progress) * from_value + progress * to_value
