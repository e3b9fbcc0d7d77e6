"""
Timeline Composition

A timeline is an explicit tree of frozen nodes. ``Sequence`` nodes own a
window ``[start, start + duration)`` in their parent's frame space and shift
the frame seen by their children so that every child starts counting at 0.
Leaves are renderers: objects with ``render(ctx)`` (or plain callables) that
turn a FrameContext into a RenderNode, or None when nothing is drawn.

``evaluate`` walks the tree for one frame. The walk is pure: the same node and
context always yield the same tree.
"""

from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Any, Callable, Dict, Iterable, List, Optional, Tuple, Union

from animatics.core import get_logger

from .errors import AnimaticsError
from .sdk import FPS, VIDEO_H, VIDEO_W

log = get_logger("timeline")


@dataclass(frozen=True)
class FrameContext:
    """Everything a renderer may depend on for one frame."""

    frame: int
    absolute_frame: int
    fps: int = FPS
    width: int = VIDEO_W
    height: int = VIDEO_H
    assets: Any = None

    @classmethod
    def root(cls, frame: int, fps: int = FPS, width: int = VIDEO_W, height: int = VIDEO_H, assets=None):
        return cls(frame=frame, absolute_frame=frame, fps=fps, width=width, height=height, assets=assets)

    def rebase(self, offset: int) -> "FrameContext":
        """Context for a child whose window starts ``offset`` frames in."""
        return replace(self, frame=self.frame - offset)


@dataclass(frozen=True)
class RenderNode:
    """Pure-data output of one node for one frame."""

    kind: str
    props: Dict[str, Any] = field(default_factory=dict)
    children: Tuple["RenderNode", ...] = ()
    name: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {"kind": self.kind}
        if self.name is not None:
            data["name"] = self.name
        data["props"] = _plain(self.props)
        if self.children:
            data["children"] = [child.to_dict() for child in self.children]
        return data

    def find(self, name: str) -> Optional["RenderNode"]:
        """Depth-first search by node name."""
        if self.name == name:
            return self
        for child in self.children:
            found = child.find(name)
            if found is not None:
                return found
        return None

    def walk(self) -> Iterable["RenderNode"]:
        yield self
        for child in self.children:
            yield from child.walk()


def _plain(value: Any) -> Any:
    if isinstance(value, dict):
        return {k: _plain(v) for k, v in value.items()}
    if isinstance(value, (list, tuple)):
        return [_plain(v) for v in value]
    if hasattr(value, "to_dict"):
        return value.to_dict()
    if isinstance(value, Enum):
        return value.value
    return value


StyleFn = Callable[[FrameContext], Dict[str, Any]]


@dataclass(frozen=True)
class Sequence:
    """
    A clipped, time-shifted layer.

    Args:
        name: Node name, carried into the render tree
        start: First frame of the window in the parent's frame space
        duration: Window length; None means open-ended (until the parent ends)
        children: Nested sequences or renderers, drawn in order (later on top)
        style: Optional frame-dependent layer style (opacity, transform, filter)
        label: Human-readable label
    """

    name: str
    start: int = 0
    duration: Optional[int] = None
    children: Tuple[Any, ...] = ()
    style: Optional[StyleFn] = None
    label: Optional[str] = None

    def __post_init__(self):
        if self.duration is not None and self.duration <= 0:
            raise ValueError(f"Sequence '{self.name}' duration must be positive, got {self.duration}")
        object.__setattr__(self, "children", tuple(self.children))

    @property
    def end(self) -> Optional[int]:
        return None if self.duration is None else self.start + self.duration

    def is_active(self, frame: int) -> bool:
        if frame < self.start:
            return False
        return self.duration is None or frame < self.start + self.duration

    def local_frame(self, frame: int) -> int:
        return frame - self.start


@dataclass(frozen=True)
class NodeError:
    """An engine error that aborted one subtree."""

    path: Tuple[str, ...]
    error: AnimaticsError

    def to_dict(self) -> Dict[str, Any]:
        data = self.error.to_dict()
        data["path"] = "/".join(self.path)
        return data


@dataclass
class Evaluation:
    tree: Optional[RenderNode]
    errors: List[NodeError] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.errors


def _node_name(node: Any) -> str:
    name = getattr(node, "name", None)
    if isinstance(name, str):
        return name
    return getattr(node, "__name__", type(node).__name__)


def _render_leaf(node: Any, ctx: FrameContext) -> Optional[RenderNode]:
    render = getattr(node, "render", None)
    if callable(render):
        return render(ctx)
    if callable(node):
        return node(ctx)
    raise TypeError(f"Timeline child {node!r} is neither a Sequence nor a renderer")


def _evaluate(
    node: Any,
    ctx: FrameContext,
    prune_inactive: bool,
    errors: List[NodeError],
    path: Tuple[str, ...],
) -> Optional[RenderNode]:
    path = path + (_node_name(node),)
    if not isinstance(node, Sequence):
        try:
            return _render_leaf(node, ctx)
        except AnimaticsError as e:
            log.warning(f"[timeline] {'/'.join(path)} @ {ctx.absolute_frame}: {e.message}")
            errors.append(NodeError(path, e))
            return None

    active = node.is_active(ctx.frame)
    if not active:
        if not prune_inactive:
            # Walked for parity only; nothing from an inactive window is kept
            local = ctx.rebase(node.start)
            for child in node.children:
                _evaluate(child, local, prune_inactive, [], path)
        return None

    local = ctx.rebase(node.start)
    try:
        style = node.style(local) if node.style is not None else None
    except AnimaticsError as e:
        log.warning(f"[timeline] {'/'.join(path)} @ {ctx.absolute_frame}: {e.message}")
        errors.append(NodeError(path, e))
        return None

    children = []
    for child in node.children:
        rendered = _evaluate(child, local, prune_inactive, errors, path)
        if rendered is not None:
            children.append(rendered)

    props: Dict[str, Any] = {"start": node.start, "duration": node.duration, "frame": local.frame}
    if node.label is not None:
        props["label"] = node.label
    if style:
        props["style"] = style
    return RenderNode(kind="sequence", props=props, children=tuple(children), name=node.name)


def evaluate(node: Any, ctx: FrameContext, prune_inactive: bool = True) -> Evaluation:
    """
    Evaluate a timeline tree at ``ctx.frame``.

    Engine errors raised by a renderer or a layer style abort that subtree
    only; they are collected in ``Evaluation.errors`` while siblings keep
    rendering. Any other exception propagates.
    """
    errors: List[NodeError] = []
    tree = _evaluate(node, ctx, prune_inactive, errors, ())
    return Evaluation(tree=tree, errors=errors)


def series(
    name: str,
    cuts: Iterable[Tuple[str, int, Any]],
    start: int = 0,
    style: Optional[StyleFn] = None,
) -> Sequence:
    """
    Back-to-back cuts: each (name, duration, child) starts where the previous ends.
    """
    offset = 0
    windows = []
    for cut_name, duration, child in cuts:
        if duration <= 0:
            raise ValueError(f"series cut '{cut_name}' duration must be positive, got {duration}")
        windows.append(Sequence(name=cut_name, start=offset, duration=duration, children=(child,)))
        offset += duration
    if not windows:
        raise ValueError(f"series '{name}' needs at least one cut")
    return Sequence(name=name, start=start, duration=offset, children=tuple(windows), style=style)


Node = Union[Sequence, Any]
