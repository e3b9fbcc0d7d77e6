"""
Error taxonomy for the frame engine.

Every error is deterministic: the same inputs raise the same error with the same
message. Each class also derives from the matching builtin so callers that only
know about ValueError / KeyError / FileNotFoundError still catch them.
"""

from typing import Any, Dict, Optional


class AnimaticsError(Exception):
    """Base class for engine errors."""

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        self.message = message
        self.details = details or {}
        super().__init__(self.message)

    def to_dict(self) -> Dict[str, Any]:
        return {"type": type(self).__name__, "message": self.message, "details": self.details}


class InvalidRangeError(AnimaticsError, ValueError):
    """Interpolation ranges are degenerate, mismatched or non-monotonic."""


class InvalidSpringConfigError(AnimaticsError, ValueError):
    """Spring constants or fps are not strictly positive."""


class ScheduleOverflowError(AnimaticsError, ValueError):
    """A scene window extends past the composition's duration."""


class MissingAssetReferenceError(AnimaticsError, FileNotFoundError):
    """A static file reference cannot be found by the asset resolver."""

    def __str__(self) -> str:
        return self.message


class UnknownCompositionError(AnimaticsError, KeyError):
    """Render requested for a composition id that was never registered."""

    def __str__(self) -> str:
        return self.message


class SceneConfigurationError(AnimaticsError, ValueError):
    """Schedule entries and scene renderers do not match one to one."""
