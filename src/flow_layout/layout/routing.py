"""Normalisation, position overrides and orthogonal edge routing."""

from __future__ import annotations

import logging
from dataclasses import replace

from flow_layout.layout.types import PositionedNode, RoutedEdge
from flow_layout.options import LayoutOptions
from flow_layout.types import FlowEdge, Point

logger = logging.getLogger(__name__)

# Source and target centres closer than this are joined by a straight line.
STRAIGHT_TOLERANCE: float = 1.0


# ─── Normalisation ────────────────────────────────────────────────────────────


def normalize(nodes: list[PositionedNode], options: LayoutOptions) -> list[PositionedNode]:
    """Shift every node so the minimum x is ``padding_x`` and the minimum y is ``padding_y``."""
    if not nodes:
        return []
    min_x = min(n.x for n in nodes)
    min_y = min(n.y for n in nodes)
    dx = options.padding_x - min_x
    dy = options.padding_y - min_y
    return [replace(n, x=n.x + dx, y=n.y + dy) for n in nodes]


def apply_overrides(nodes: list[PositionedNode], overrides: dict[str, Point]) -> list[PositionedNode]:
    """Replace computed positions with caller-supplied ones (e.g. dragged nodes)."""
    if not overrides:
        return list(nodes)
    result: list[PositionedNode] = []
    for n in nodes:
        pos = overrides.get(n.id)
        result.append(n if pos is None else replace(n, x=pos.x, y=pos.y))
    return result


# ─── Edge Routing ─────────────────────────────────────────────────────────────


def route_edges(
    edges: list[FlowEdge],
    nodes: list[PositionedNode],
    side_ids: set[str],
    options: LayoutOptions,
) -> list[RoutedEdge]:
    """Route every edge against the final node positions.

    - An endpoint that does not resolve → no waypoints (the edge is kept).
    - Edge leaving an annotation → source right-middle to target left-middle.
    - Centres within STRAIGHT_TOLERANCE → straight drop, bottom-centre to
      top-centre.
    - Otherwise → down, across on a turn line, down into the target.

    The turn line sits ``edge_turn_offset`` above the target, so edges
    converging on one node share it. When a source fans out to several
    targets its edges turn together just above the highest of them, and that
    shared line takes precedence: an edge from a fanning-out source into a
    merge turns on the source's line, not the merge's, so edges converging on
    one merge may turn at different heights.
    """
    node_map = {n.id: n for n in nodes}

    # Highest top among the targets of each fanning-out source.
    fan_out_top: dict[str, float] = {}
    fan_out_count: dict[str, int] = {}
    for edge in edges:
        if edge.source in side_ids or edge.source not in node_map or edge.target not in node_map:
            continue
        if edge.source == edge.target:
            continue
        fan_out_count[edge.source] = fan_out_count.get(edge.source, 0) + 1
        top = node_map[edge.target].y
        fan_out_top[edge.source] = min(fan_out_top.get(edge.source, top), top)

    routes: list[RoutedEdge] = []
    for edge in edges:
        source = node_map.get(edge.source)
        target = node_map.get(edge.target)
        if source is None or target is None:
            routes.append(RoutedEdge(id=edge.id, source=edge.source, target=edge.target, label=edge.label))
            continue

        if edge.source in side_ids:
            waypoints = [
                Point(x=source.x + source.width, y=source.y + source.height / 2),
                Point(x=target.x, y=target.y + target.height / 2),
            ]
        else:
            target_top = target.y
            if fan_out_count.get(edge.source, 0) > 1:
                target_top = fan_out_top[edge.source]
            waypoints = compute_orthogonal_waypoints(source, target, target_top - options.edge_turn_offset)

        routes.append(
            RoutedEdge(id=edge.id, source=edge.source, target=edge.target, label=edge.label, waypoints=waypoints)
        )

    return routes


def compute_orthogonal_waypoints(
    from_node: PositionedNode,
    to_node: PositionedNode,
    turn_y: float,
) -> list[Point]:
    """Waypoints for a top-to-bottom edge.

    Exit = bottom-centre of ``from_node``; entry = top-centre of ``to_node``.
    Aligned centres give a 2-point straight line. Otherwise the path turns on
    ``turn_y``, or halfway between exit and entry when ``turn_y`` is not below
    the exit.
    """
    start = Point(x=from_node.center_x, y=from_node.bottom)
    end = Point(x=to_node.center_x, y=to_node.y)

    if abs(start.x - end.x) < STRAIGHT_TOLERANCE:
        return [start, end]

    if turn_y <= start.y:
        turn_y = start.y + (end.y - start.y) / 2

    return [
        start,
        Point(x=start.x, y=turn_y),
        Point(x=end.x, y=turn_y),
        end,
    ]
