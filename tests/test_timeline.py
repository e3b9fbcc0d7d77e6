"""
Unit tests for timeline sequences and the frame walker.
"""

import pytest

from animatics.engine.errors import InvalidRangeError
from animatics.engine.interpolate import interpolate
from animatics.engine.sdk import Extrapolate
from animatics.engine.timeline import (
    FrameContext,
    RenderNode,
    Sequence,
    evaluate,
    series,
)


def _ctx(frame):
    return FrameContext.root(frame)


class Broken:
    name = "broken"

    def render(self, ctx):
        return RenderNode(kind="broken", props={"v": interpolate(ctx.frame, [0, 0], [0, 1])})


class Crashing:
    name = "crashing"

    def render(self, ctx):
        raise RuntimeError("not an engine error")


class TestSequence:
    def test_window(self):
        seq = Sequence(name="s", start=100, duration=50)
        assert not seq.is_active(99)
        assert seq.is_active(100)
        assert seq.is_active(149)
        assert not seq.is_active(150)
        assert seq.end == 150

    def test_local_frame(self):
        seq = Sequence(name="s", start=100, duration=50)
        assert seq.local_frame(100) == 0
        assert seq.local_frame(149) == 49

    def test_open_ended(self):
        seq = Sequence(name="s", start=10)
        assert seq.end is None
        assert seq.is_active(10_000)
        assert not seq.is_active(9)

    def test_non_positive_duration(self):
        with pytest.raises(ValueError):
            Sequence(name="s", duration=0)

    def test_children_frozen_to_tuple(self):
        seq = Sequence(name="s", children=[1, 2])
        assert seq.children == (1, 2)


class TestEvaluate:
    def test_child_sees_local_frame(self, marker):
        tree = Sequence(name="root", children=(Sequence(name="inner", start=100, duration=50, children=(marker(),)),))
        result = evaluate(tree, _ctx(120))
        leaf = result.tree.find("marker")
        assert leaf.props == {"frame": 20, "absolute": 120}

    def test_nested_offsets_compose(self, marker):
        inner = Sequence(name="inner", start=5, duration=10, children=(marker(),))
        outer = Sequence(name="outer", start=20, duration=30, children=(inner,))
        tree = evaluate(Sequence(name="root", children=(outer,)), _ctx(27)).tree
        assert tree.find("marker").props["frame"] == 2
        assert tree.find("outer").props["frame"] == 7

    def test_inactive_subtree_pruned(self, marker):
        root = Sequence(name="root", children=(Sequence(name="inner", start=100, duration=50, children=(marker(),)),))
        for frame in (99, 150):
            result = evaluate(root, _ctx(frame))
            assert result.tree.children == ()
            assert result.tree.find("marker") is None

    def test_inactive_root_yields_none(self, marker):
        result = evaluate(Sequence(name="root", start=10, duration=5, children=(marker(),)), _ctx(3))
        assert result.tree is None
        assert result.ok

    def test_children_keep_order(self, marker):
        root = Sequence(name="root", children=(marker("a"), marker("b"), marker("c")))
        tree = evaluate(root, _ctx(0)).tree
        assert [c.name for c in tree.children] == ["a", "b", "c"]

    def test_plain_callable_leaf(self):
        def dot(ctx):
            return RenderNode(kind="dot", props={"f": ctx.frame}, name="dot")

        tree = evaluate(Sequence(name="root", start=4, children=(dot,)), _ctx(10)).tree
        assert tree.find("dot").props["f"] == 6

    def test_leaf_returning_none_is_skipped(self):
        tree = evaluate(Sequence(name="root", children=(lambda ctx: None,)), _ctx(0)).tree
        assert tree.children == ()

    def test_style_evaluated_on_local_frame(self, marker):
        def style(ctx):
            return {"opacity": interpolate(ctx.frame, [0, 10], [0, 1], extrapolate_right=Extrapolate.CLAMP)}

        root = Sequence(name="root", children=(Sequence(name="s", start=10, duration=20, style=style, children=(marker(),)),))
        tree = evaluate(root, _ctx(15)).tree
        assert tree.find("s").props["style"] == {"opacity": pytest.approx(0.5)}

    def test_pure(self, marker):
        root = series("cuts", [("a", 5, marker("m1")), ("b", 5, marker("m2"))])
        assert evaluate(root, _ctx(7)).tree == evaluate(root, _ctx(7)).tree

    def test_invalid_child(self):
        with pytest.raises(TypeError):
            evaluate(Sequence(name="root", children=(42,)), _ctx(0))


class TestErrorIsolation:
    def test_engine_error_aborts_only_its_subtree(self, marker):
        root = Sequence(
            name="root",
            children=(
                Sequence(name="left", children=(Broken(),)),
                Sequence(name="right", children=(marker(),)),
            ),
        )
        result = evaluate(root, _ctx(3))
        assert not result.ok
        assert len(result.errors) == 1
        error = result.errors[0]
        assert error.path == ("root", "left", "broken")
        assert isinstance(error.error, InvalidRangeError)
        assert error.to_dict()["path"] == "root/left/broken"
        assert result.tree.find("marker") is not None
        assert result.tree.find("left").children == ()

    def test_failing_style_drops_sequence(self, marker):
        def bad_style(ctx):
            return {"opacity": interpolate(ctx.frame, [1, 0], [0, 1])}

        root = Sequence(name="root", children=(Sequence(name="s", style=bad_style, children=(marker(),)),))
        result = evaluate(root, _ctx(0))
        assert result.tree.find("s") is None
        assert [e.path for e in result.errors] == [("root", "s")]

    def test_other_exceptions_propagate(self):
        with pytest.raises(RuntimeError):
            evaluate(Sequence(name="root", children=(Crashing(),)), _ctx(0))

    def test_inactive_errors_not_reported_without_pruning(self):
        root = Sequence(name="root", children=(Sequence(name="later", start=50, duration=10, children=(Broken(),)),))
        result = evaluate(root, _ctx(0), prune_inactive=False)
        assert result.ok
        assert result.tree.children == ()


class TestSeries:
    def test_back_to_back(self, marker):
        root = series("cuts", [("a", 26, marker("ma")), ("b", 26, marker("mb")), ("c", 27, marker("mc"))])
        assert root.duration == 79
        assert [c.start for c in root.children] == [0, 26, 52]

        tree = evaluate(root, _ctx(26)).tree
        assert tree.find("ma") is None
        assert tree.find("mb").props["frame"] == 0

        tree = evaluate(root, _ctx(78)).tree
        assert tree.find("mc").props["frame"] == 26

    def test_rejects_empty_and_bad_cuts(self, marker):
        with pytest.raises(ValueError):
            series("cuts", [])
        with pytest.raises(ValueError):
            series("cuts", [("a", 0, marker())])


class TestRenderNode:
    def test_to_dict(self):
        node = RenderNode(
            kind="sequence",
            props={"mode": Extrapolate.CLAMP, "pts": (1, 2)},
            children=(RenderNode(kind="leaf"),),
            name="n",
        )
        assert node.to_dict() == {
            "kind": "sequence",
            "name": "n",
            "props": {"mode": "clamp", "pts": [1, 2]},
            "children": [{"kind": "leaf", "props": {}}],
        }

    def test_walk(self):
        node = RenderNode(kind="a", children=(RenderNode(kind="b"), RenderNode(kind="c")))
        assert [n.kind for n in node.walk()] == ["a", "b", "c"]
