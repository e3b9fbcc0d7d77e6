"""
Scene Composer

Builds a composition's root timeline from a schedule table plus one renderer
per scene, and keeps a registry of named compositions that the external
renderer queries frame by frame.
"""

import threading
from dataclasses import dataclass, field
from typing import Any, Dict, List, Mapping, Optional, Tuple, Union

from animatics.core import get_logger

from .errors import (
    SceneConfigurationError,
    ScheduleOverflowError,
    UnknownCompositionError,
)
from .sdk import FPS, VIDEO_H, VIDEO_W, CompositionConfig, Schedule, SceneWindow, validate_schedule
from .timeline import FrameContext, NodeError, RenderNode, Sequence, StyleFn, evaluate

log = get_logger("composer")


@dataclass
class FrameResult:
    """What one render call hands back to the orchestrator."""

    composition_id: str
    frame: int
    tree: Optional[RenderNode] = None
    errors: List[NodeError] = field(default_factory=list)

    @property
    def is_empty(self) -> bool:
        return self.tree is None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "composition": self.composition_id,
            "frame": self.frame,
            "tree": self.tree.to_dict() if self.tree is not None else None,
            "errors": [e.to_dict() for e in self.errors],
        }


@dataclass(frozen=True)
class Composition:
    config: CompositionConfig
    root: Sequence

    @property
    def id(self) -> str:
        return self.config.id

    @property
    def duration_in_frames(self) -> int:
        return self.config.duration_in_frames

    def render(self, frame: int, assets=None, prune_inactive: bool = True) -> FrameResult:
        """
        Render one absolute frame.

        Frames outside [0, duration_in_frames) produce an empty result.
        """
        if isinstance(frame, bool) or not isinstance(frame, int):
            raise TypeError(f"frame must be an int, got {type(frame).__name__}")
        if frame < 0 or frame >= self.config.duration_in_frames:
            log.debug(f"[composer] {self.id} frame {frame} outside composition, empty result")
            return FrameResult(composition_id=self.id, frame=frame)
        ctx = FrameContext.root(
            frame,
            fps=self.config.fps,
            width=self.config.width,
            height=self.config.height,
            assets=assets,
        )
        result = evaluate(self.root, ctx, prune_inactive=prune_inactive)
        return FrameResult(composition_id=self.id, frame=frame, tree=result.tree, errors=result.errors)


class SceneComposer:
    """
    Assemble scenes into acts and acts into a composition.

    Scene windows come from the schedule; when a scene names an act, it is
    placed inside that act's node with its start re-based to the act's start.
    Overflowing windows are rejected here, at construction.
    """

    def __init__(
        self,
        schedule: Union[Schedule, Mapping[str, Any]],
        scenes: Mapping[str, Any],
        *,
        composition_id: str,
        fps: int = FPS,
        width: int = VIDEO_W,
        height: int = VIDEO_H,
        duration_in_frames: Optional[int] = None,
        scene_styles: Optional[Mapping[str, StyleFn]] = None,
        background: Any = None,
    ):
        self.schedule = validate_schedule(dict(schedule) if not isinstance(schedule, Schedule) else schedule)
        self.scenes = dict(scenes)
        self.scene_styles = dict(scene_styles or {})
        self.background = background

        self._check_scene_names()

        duration = duration_in_frames
        if duration is None:
            duration = self.schedule.duration_in_frames or self.schedule.end_frame
        self.config = CompositionConfig(
            id=composition_id,
            duration_in_frames=duration,
            fps=fps,
            width=width,
            height=height,
        )
        self._check_overflow()
        self.root = self._build_root()
        log.info(
            f"[composer] {composition_id}: {len(self.scenes)} scenes, "
            f"{duration} frames @ {fps}fps ({width}x{height})"
        )

    # ------------------------------------------------------------------
    # Validation
    # ------------------------------------------------------------------

    def _check_scene_names(self) -> None:
        scheduled = set(self.schedule.scenes)
        provided = set(self.scenes)
        missing = sorted(scheduled - provided)
        extra = sorted(provided - scheduled)
        if missing or extra:
            raise SceneConfigurationError(
                "Scene renderers and schedule entries do not match",
                {"without_renderer": missing, "without_schedule": extra},
            )
        unknown_styles = sorted(set(self.scene_styles) - scheduled)
        if unknown_styles:
            raise SceneConfigurationError(
                "Scene styles reference unscheduled scenes", {"scenes": unknown_styles}
            )

    def _check_overflow(self) -> None:
        duration = self.config.duration_in_frames
        for name, window in self.schedule.ordered():
            if window.end > duration:
                raise ScheduleOverflowError(
                    f"Scene '{name}' ends at frame {window.end}, past composition end {duration}",
                    {"scene": name, "start": window.start, "end": window.end, "duration_in_frames": duration},
                )

    # ------------------------------------------------------------------
    # Tree
    # ------------------------------------------------------------------

    def _scene_node(self, name: str, window: SceneWindow, offset: int = 0) -> Sequence:
        return Sequence(
            name=name,
            start=window.start - offset,
            duration=window.duration,
            children=(self.scenes[name],),
            style=self.scene_styles.get(name),
            label=window.label,
        )

    def _build_root(self) -> Sequence:
        # layering follows declaration order, not start order; an act sits
        # where its first declared scene does
        groups: List[Tuple[Optional[str], List[Tuple[str, SceneWindow]]]] = []
        act_index: Dict[str, int] = {}
        for name, window in self.schedule.scenes.items():
            if window.act is None:
                groups.append((None, [(name, window)]))
                continue
            if window.act not in act_index:
                act_index[window.act] = len(groups)
                groups.append((window.act, []))
            groups[act_index[window.act]][1].append((name, window))

        children: List[Any] = []
        if self.background is not None:
            children.append(self.background)
        for act, members in groups:
            if act is None:
                name, window = members[0]
                children.append(self._scene_node(name, window))
                continue
            act_start = min(w.start for _, w in members)
            act_end = max(w.end for _, w in members)
            children.append(
                Sequence(
                    name=act,
                    start=act_start,
                    duration=act_end - act_start,
                    children=tuple(self._scene_node(n, w, act_start) for n, w in members),
                    label=self.schedule.acts.get(act),
                )
            )
        return Sequence(
            name=self.config.id,
            start=0,
            duration=self.config.duration_in_frames,
            children=tuple(children),
        )

    # ------------------------------------------------------------------
    # Public surface
    # ------------------------------------------------------------------

    @property
    def duration_in_frames(self) -> int:
        return self.config.duration_in_frames

    @property
    def fps(self) -> int:
        return self.config.fps

    @property
    def width(self) -> int:
        return self.config.width

    @property
    def height(self) -> int:
        return self.config.height

    def composition(self) -> Composition:
        return Composition(config=self.config, root=self.root)


class CompositionRegistry:
    """Named compositions; read-only once the productions are registered."""

    def __init__(self, assets=None):
        self._compositions: Dict[str, Composition] = {}
        self._lock = threading.Lock()
        self.assets = assets

    def register(self, composition: Union[Composition, SceneComposer], replace: bool = False) -> Composition:
        if isinstance(composition, SceneComposer):
            composition = composition.composition()
        with self._lock:
            if composition.id in self._compositions and not replace:
                raise ValueError(f"Composition '{composition.id}' is already registered")
            self._compositions[composition.id] = composition
        log.info(f"[registry] registered {composition.id} ({composition.duration_in_frames} frames)")
        return composition

    def get(self, composition_id: str) -> Composition:
        try:
            return self._compositions[composition_id]
        except KeyError:
            raise UnknownCompositionError(
                f"Unknown composition '{composition_id}'. Available: {self.ids()}",
                {"composition": composition_id},
            ) from None

    def ids(self) -> List[str]:
        return sorted(self._compositions)

    def __contains__(self, composition_id: str) -> bool:
        return composition_id in self._compositions

    def __len__(self) -> int:
        return len(self._compositions)

    def render(self, composition_id: str, frame: int, prune_inactive: bool = True) -> FrameResult:
        composition = self.get(composition_id)
        result = composition.render(frame, assets=self.assets, prune_inactive=prune_inactive)
        if result.errors:
            log.warning(f"[registry] {composition_id} frame {frame}: {len(result.errors)} subtree error(s)")
        return result


default_registry = CompositionRegistry()


def register_composition(composer: Union[Composition, SceneComposer], registry: Optional[CompositionRegistry] = None):
    target = registry if registry is not None else default_registry
    return target.register(composer)


__all__ = [
    "Composition",
    "CompositionRegistry",
    "FrameResult",
    "SceneComposer",
    "default_registry",
    "register_composition",
]
