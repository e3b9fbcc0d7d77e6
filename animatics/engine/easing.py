"""
Easing Library

Pure shaping functions applied to normalized progress before interpolation.
Every registered easing maps 0 -> 0 and 1 -> 1 exactly; values in between may
leave [0, 1] (back / elastic overshoot). No clamping happens here.
"""

import math
from typing import Callable, Dict

EasingFn = Callable[[float], float]

BACK_C1 = 1.70158
BACK_C3 = BACK_C1 + 1
ELASTIC_C4 = (2 * math.pi) / 3


def _pin_endpoints(fn: EasingFn) -> EasingFn:
    """Guarantee exact endpoints for curves that only approximate them."""

    def pinned(t: float) -> float:
        if t == 0:
            return 0.0
        if t == 1:
            return 1.0
        return fn(t)

    pinned.__name__ = getattr(fn, "__name__", "easing")
    pinned.__doc__ = fn.__doc__
    return pinned


def linear(t: float) -> float:
    return t


def ease_in_quad(t: float) -> float:
    return t * t


def ease_out_quad(t: float) -> float:
    return 1 - (1 - t) * (1 - t)


def ease_in_quart(t: float) -> float:
    """Slow start, fast end - for building momentum."""
    return t * t * t * t


def ease_out_quart(t: float) -> float:
    """Fast start, slow end - for impactful arrivals."""
    return 1 - math.pow(1 - t, 4)


def ease_in_out_quart(t: float) -> float:
    """Slow start and end - for contemplative moments."""
    return 8 * t * t * t * t if t < 0.5 else 1 - math.pow(-2 * t + 2, 4) / 2


def ease_in_quint(t: float) -> float:
    """Very slow start - for a heavy, weighted feeling."""
    return t * t * t * t * t


@_pin_endpoints
def ease_out_back(t: float) -> float:
    """Pulls past the target and settles back."""
    return 1 + BACK_C3 * math.pow(t - 1, 3) + BACK_C1 * math.pow(t - 1, 2)


@_pin_endpoints
def ease_out_elastic(t: float) -> float:
    return math.pow(2, -10 * t) * math.sin((t * 10 - 0.75) * ELASTIC_C4) + 1


# ---------------------------------------------------------------------------
# Combinators
# ---------------------------------------------------------------------------


def ease_in(fn: EasingFn) -> EasingFn:
    return fn


def ease_out(fn: EasingFn) -> EasingFn:
    def out(t: float) -> float:
        return 1 - fn(1 - t)

    return _pin_endpoints(out)


def ease_in_out(fn: EasingFn) -> EasingFn:
    def in_out(t: float) -> float:
        if t < 0.5:
            return fn(t * 2) / 2
        return 1 - fn((1 - t) * 2) / 2

    return _pin_endpoints(in_out)


def bezier(x1: float, y1: float, x2: float, y2: float) -> EasingFn:
    """
    Cubic bezier timing curve through (0,0), (x1,y1), (x2,y2), (1,1).

    Solves x(s) = t for the curve parameter with Newton steps and falls back to
    bisection, so the result depends only on t.
    """
    if not (0 <= x1 <= 1 and 0 <= x2 <= 1):
        raise ValueError("bezier x values must be in [0, 1]")

    cx = 3 * x1
    bx = 3 * (x2 - x1) - cx
    ax = 1 - cx - bx
    cy = 3 * y1
    by = 3 * (y2 - y1) - cy
    ay = 1 - cy - by

    def sample_x(s: float) -> float:
        return ((ax * s + bx) * s + cx) * s

    def sample_y(s: float) -> float:
        return ((ay * s + by) * s + cy) * s

    def slope_x(s: float) -> float:
        return (3 * ax * s + 2 * bx) * s + cx

    def solve(t: float) -> float:
        s = t
        for _ in range(8):
            err = sample_x(s) - t
            if abs(err) < 1e-7:
                return s
            d = slope_x(s)
            if abs(d) < 1e-6:
                break
            s -= err / d
        lo, hi = 0.0, 1.0
        s = t
        while lo < hi:
            x = sample_x(s)
            if abs(x - t) < 1e-7:
                return s
            if t > x:
                lo = s
            else:
                hi = s
            s = (hi + lo) / 2
            if hi - lo < 1e-12:
                break
        return s

    def curve(t: float) -> float:
        return sample_y(solve(t))

    curve.__name__ = f"bezier({x1}, {y1}, {x2}, {y2})"
    return _pin_endpoints(curve)


# Standard CSS "ease" and friends
ease = bezier(0.25, 0.1, 0.25, 1.0)
ease_in_cubic = bezier(0.42, 0.0, 1.0, 1.0)
ease_out_cubic = bezier(0.0, 0.0, 0.58, 1.0)
ease_in_out_cubic = bezier(0.42, 0.0, 0.58, 1.0)


EASINGS: Dict[str, EasingFn] = {
    "linear": linear,
    "ease": ease,
    "ease_in": ease_in(ease),
    "ease_out": ease_out(ease),
    "ease_in_out": ease_in_out(ease),
    "ease_in_quad": ease_in_quad,
    "ease_out_quad": ease_out_quad,
    "ease_in_cubic": ease_in_cubic,
    "ease_out_cubic": ease_out_cubic,
    "ease_in_out_cubic": ease_in_out_cubic,
    "ease_in_quart": ease_in_quart,
    "ease_out_quart": ease_out_quart,
    "ease_in_out_quart": ease_in_out_quart,
    "ease_in_quint": ease_in_quint,
    "ease_out_back": ease_out_back,
    "ease_out_elastic": ease_out_elastic,
}


def get_easing(name: str) -> EasingFn:
    """Look up a registered easing by name."""
    try:
        return EASINGS[name]
    except KeyError:
        raise KeyError(f"Unknown easing '{name}'. Available: {sorted(EASINGS)}") from None
