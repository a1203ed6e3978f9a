"""Tests for layout/annotations.py — note/strategy placement beside targets."""

from __future__ import annotations

from flow_layout.graph import build_graph
from flow_layout.layout.annotations import place_annotations
from flow_layout.layout.types import PositionedNode
from flow_layout.options import LayoutOptions
from flow_layout.types import FlowEdge, FlowNode

# ─── Helpers ──────────────────────────────────────────────────────────────────


def main_node(node_id: str, lane: float, y: float = 300.0, height: float = 185) -> PositionedNode:
    """A 280-wide main node centred on ``lane`` at the default lane spacing."""
    return PositionedNode(
        id=node_id,
        type="message",
        title=node_id,
        width=280,
        height=height,
        x=lane * 400 - 140,
        y=y,
        lane=lane,
    )


def place(side: list[tuple[str, str, list[str]]], mains: list[PositionedNode]) -> dict[str, PositionedNode]:
    """Place side nodes given as (id, type, target ids) next to ``mains``."""
    nodes = [FlowNode(id=m.id, type="message") for m in mains]
    edges: list[FlowEdge] = []
    for sid, stype, targets in side:
        nodes.append(FlowNode(id=sid, type=stype))
        edges.extend(FlowEdge(id=f"{sid}-{t}", source=sid, target=t) for t in targets)
    placed = place_annotations(build_graph(nodes, edges), mains, LayoutOptions())
    return {n.id: n for n in placed}


# ─── Tests ────────────────────────────────────────────────────────────────────


class TestPlaceAnnotations:
    def test_left_of_negative_lane(self):
        placed = place([("n", "note", ["m"])], [main_node("m", -0.5)])
        note = placed["n"]
        assert note.x == -340 - 380
        assert note.y == 300.0
        assert note.lane == -1.5
        assert (note.width, note.height) == (320, 160)

    def test_right_of_positive_lane(self):
        placed = place([("s", "strategy", ["m"])], [main_node("m", 0.5)])
        card = placed["s"]
        assert card.x == 60 + 280 + 60
        assert card.y == 300.0
        assert card.lane == 1.5
        assert card.height == 200

    def test_lane_zero_goes_left(self):
        placed = place([("n", "note", ["m"])], [main_node("m", 0.0)])
        assert placed["n"].x == -140 - 380

    def test_stacks_on_same_side(self):
        """A second annotation on the same side of one target sits below the first."""
        placed = place(
            [("n1", "note", ["m"]), ("n2", "note", ["m"])],
            [main_node("m", -0.5)],
        )
        assert placed["n1"].x == placed["n2"].x
        assert placed["n2"].y == placed["n1"].y + 160 + 44

    def test_disconnected_below_everything(self):
        mains = [main_node("a", 0.0, y=0.0), main_node("b", 0.5, y=500.0)]
        placed = place([("n", "note", [])], mains)
        note = placed["n"]
        assert note.x == 0.0
        assert note.y == 500 + 185 + 44

    def test_disconnected_stack(self):
        mains = [main_node("a", 0.0, y=0.0)]
        placed = place([("n1", "note", []), ("n2", "strategy", [])], mains)
        assert placed["n1"].y == 185 + 44
        assert placed["n2"].y == placed["n1"].y + 160 + 44

    def test_several_targets_means_disconnected(self):
        mains = [main_node("a", -0.5, y=0.0), main_node("b", 0.5, y=0.0)]
        placed = place([("n", "note", ["a", "b"])], mains)
        assert placed["n"].x == 0.0
        assert placed["n"].y == 185 + 44

    def test_target_missing_means_disconnected(self):
        placed = place([("n", "note", ["ghost"])], [main_node("a", 0.0, y=0.0)])
        assert placed["n"].x == 0.0
        assert placed["n"].y == 185 + 44

    def test_no_main_nodes(self):
        placed = place([("n", "note", [])], [])
        assert placed["n"].y == 0.0

    def test_only_side_nodes_returned(self):
        placed = place([("n", "note", ["m"])], [main_node("m", 0.0)])
        assert list(placed) == ["n"]
