"""Layout types shared across the layout stages and the flow API."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from flow_layout.types import Point


@dataclass
class PositionedNode:
    """A node with its size and top-left position.

    ``lane`` is the horizontal slot the node was allocated; it is fractional
    while the lane allocator runs and only a placement key afterwards.
    """

    id: str
    type: str
    title: str
    width: float
    height: float
    x: float
    y: float
    lane: float

    @property
    def center_x(self) -> float:
        return self.x + self.width / 2

    @property
    def bottom(self) -> float:
        return self.y + self.height

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "type": self.type,
            "title": self.title,
            "width": self.width,
            "height": self.height,
            "x": self.x,
            "y": self.y,
            "lane": self.lane,
        }


@dataclass
class RoutedEdge:
    """An edge with its rendered polyline.

    ``waypoints`` is empty when an endpoint does not resolve to a node.
    """

    id: str
    source: str
    target: str
    label: str | None
    waypoints: list[Point] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {"id": self.id, "from": self.source, "to": self.target}
        if self.label is not None:
            data["label"] = self.label
        data["points"] = [p.to_dict() for p in self.waypoints]
        return data


@dataclass
class LayoutResult:
    """Self-contained layout output — everything the canvas needs."""

    nodes: list[PositionedNode] = field(default_factory=list)
    edges: list[RoutedEdge] = field(default_factory=list)

    def node(self, node_id: str) -> PositionedNode | None:
        for n in self.nodes:
            if n.id == node_id:
                return n
        return None

    def edge(self, edge_id: str) -> RoutedEdge | None:
        for e in self.edges:
            if e.id == edge_id:
                return e
        return None

    def to_dict(self) -> dict[str, Any]:
        return {
            "nodes": [n.to_dict() for n in self.nodes],
            "edges": [e.to_dict() for e in self.edges],
        }
