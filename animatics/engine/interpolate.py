"""
Interpolator

Maps a frame (or any progress value) through a piecewise-linear, optionally
eased, mapping from an input range to an output range.
"""

import math
import sys
from dataclasses import dataclass
from typing import Callable, Optional, Sequence, Tuple, Union

from .errors import InvalidRangeError
from .sdk import Extrapolate

Number = Union[int, float]
EasingFn = Callable[[float], float]
ExtrapolateLike = Union[Extrapolate, str]


def _coerce_extrapolate(value: ExtrapolateLike) -> Extrapolate:
    if isinstance(value, Extrapolate):
        return value
    try:
        return Extrapolate(value)
    except ValueError:
        allowed = [e.value for e in Extrapolate]
        raise ValueError(f"extrapolate must be one of {allowed}, got {value!r}") from None


def _validate_ranges(input_range: Sequence[Number], output_range: Sequence[Number]) -> None:
    if len(input_range) != len(output_range):
        raise InvalidRangeError(
            "inputRange and outputRange must have the same length",
            {"input_len": len(input_range), "output_len": len(output_range)},
        )
    if len(input_range) < 2:
        raise InvalidRangeError("inputRange must have at least 2 elements")
    for value in list(input_range) + list(output_range):
        if not math.isfinite(value):
            raise InvalidRangeError(f"ranges must contain finite numbers, got {value!r}")
    for i in range(1, len(input_range)):
        if input_range[i] <= input_range[i - 1]:
            raise InvalidRangeError(
                "inputRange must be strictly increasing",
                {"index": i, "previous": input_range[i - 1], "value": input_range[i]},
            )


def _find_segment(value: float, input_range: Sequence[Number]) -> int:
    i = 1
    while i < len(input_range) - 1:
        if input_range[i] >= value:
            break
        i += 1
    return i - 1


def _lerp(a: float, b: float, p: float) -> float:
    if p == 0:
        return a
    if p == 1:
        return b
    value = a + p * (b - a)
    if math.isinf(value):
        # far extrapolation saturates instead of overflowing
        return math.copysign(sys.float_info.max, value)
    if math.isnan(value):
        raise InvalidRangeError("easing produced NaN", {"from": a, "to": b, "progress": p})
    return value


def _interpolate_segment(
    value: float,
    x0: float,
    x1: float,
    y0: float,
    y1: float,
    easing: Optional[EasingFn],
    extrapolate_left: Extrapolate,
    extrapolate_right: Extrapolate,
) -> float:
    result = value
    if result < x0:
        if extrapolate_left == Extrapolate.IDENTITY:
            return result
        if extrapolate_left == Extrapolate.CLAMP:
            result = x0
    if result > x1:
        if extrapolate_right == Extrapolate.IDENTITY:
            return result
        if extrapolate_right == Extrapolate.CLAMP:
            result = x1

    if y0 == y1:
        return y0

    p = (result - x0) / (x1 - x0)
    if easing is not None:
        p = easing(p)
    return _lerp(y0, y1, p)


def interpolate(
    frame: Number,
    input_range: Sequence[Number],
    output_range: Sequence[Number],
    *,
    easing: Optional[EasingFn] = None,
    extrapolate_left: ExtrapolateLike = Extrapolate.EXTEND,
    extrapolate_right: ExtrapolateLike = Extrapolate.EXTEND,
) -> float:
    """
    Interpolate ``frame`` through ``input_range`` -> ``output_range``.

    Args:
        frame: Input value, usually a relative frame
        input_range: Strictly increasing control points (at least two)
        output_range: Output value for each control point
        easing: Optional shaping function applied to segment progress
        extrapolate_left: Behaviour below input_range[0]
        extrapolate_right: Behaviour above input_range[-1]

    Returns:
        Interpolated value

    Raises:
        InvalidRangeError: For degenerate ranges, a non-finite frame or an easing that yields NaN
    """
    if not isinstance(frame, (int, float)) or not math.isfinite(frame):
        raise InvalidRangeError(f"interpolate() input must be a finite number, got {frame!r}")
    _validate_ranges(input_range, output_range)
    left = _coerce_extrapolate(extrapolate_left)
    right = _coerce_extrapolate(extrapolate_right)

    i = _find_segment(frame, input_range)
    return _interpolate_segment(
        frame,
        input_range[i],
        input_range[i + 1],
        output_range[i],
        output_range[i + 1],
        easing,
        left,
        right,
    )


def clamp(value: Number, low: Number = 0.0, high: Number = 1.0) -> float:
    return max(low, min(high, value))


@dataclass(frozen=True)
class InterpolationSpec:
    """
    Reusable, validated interpolation curve.

    Ranges and extrapolation modes are checked when the curve is built, so an
    invalid configuration fails at construction rather than on a frame query.
    """

    input_range: Tuple[float, ...]
    output_range: Tuple[float, ...]
    extrapolate_left: Extrapolate = Extrapolate.EXTEND
    extrapolate_right: Extrapolate = Extrapolate.EXTEND
    easing: Optional[EasingFn] = None

    def __post_init__(self):
        object.__setattr__(self, "input_range", tuple(self.input_range))
        object.__setattr__(self, "output_range", tuple(self.output_range))
        object.__setattr__(self, "extrapolate_left", _coerce_extrapolate(self.extrapolate_left))
        object.__setattr__(self, "extrapolate_right", _coerce_extrapolate(self.extrapolate_right))
        _validate_ranges(self.input_range, self.output_range)

    def __call__(self, frame: Number) -> float:
        return interpolate(
            frame,
            self.input_range,
            self.output_range,
            easing=self.easing,
            extrapolate_left=self.extrapolate_left,
            extrapolate_right=self.extrapolate_right,
        )

    @classmethod
    def clamped(cls, input_range, output_range, easing=None) -> "InterpolationSpec":
        return cls(
            input_range=tuple(input_range),
            output_range=tuple(output_range),
            extrapolate_left=Extrapolate.CLAMP,
            extrapolate_right=Extrapolate.CLAMP,
            easing=easing,
        )


# ---------------------------------------------------------------------------
# Colors
# ---------------------------------------------------------------------------


def _hex_to_rgb(color: str) -> Tuple[int, int, int]:
    s = color.strip().lstrip("#")
    if len(s) == 3:
        s = "".join(c * 2 for c in s)
    if len(s) != 6:
        raise ValueError(f"Expected #rgb or #rrggbb color, got {color!r}")
    return int(s[0:2], 16), int(s[2:4], 16), int(s[4:6], 16)


def _rgb_to_hex(rgb: Sequence[float]) -> str:
    return "#" + "".join(f"{int(round(clamp(c, 0, 255))):02x}" for c in rgb)


def interpolate_colors(
    frame: Number, input_range: Sequence[Number], colors: Sequence[str]
) -> str:
    """Blend hex colors channel by channel; always clamped at both ends."""
    rgbs = [_hex_to_rgb(c) for c in colors]
    channels = []
    for channel in range(3):
        channels.append(
            interpolate(
                frame,
                input_range,
                [rgb[channel] for rgb in rgbs],
                extrapolate_left=Extrapolate.CLAMP,
                extrapolate_right=Extrapolate.CLAMP,
            )
        )
    return _rgb_to_hex(channels)
