"""Vertical placement and collision relaxation for main-flow nodes."""

from __future__ import annotations

import logging
from dataclasses import dataclass, replace

from flow_layout.graph import FlowGraph
from flow_layout.layout.types import PositionedNode
from flow_layout.options import LayoutOptions
from flow_layout.types import NodeType

logger = logging.getLogger(__name__)

# Vertical overlap (canvas units) below which two nodes count as different bands.
OVERLAP_TOLERANCE: float = 1.0

# Smallest horizontal move that counts as movement within a collision pass.
_MOVE_EPSILON: float = 1e-6


# ─── Vertical Placement ───────────────────────────────────────────────────────


def place_vertically(graph: FlowGraph, order: list[str], options: LayoutOptions) -> dict[str, float]:
    """Compute the top y of every scheduled node.

    A node with no placed parents sits at y = 0. Otherwise it sits one gap
    below the lowest bottom among its placed real parents; the gap is
    ``row_spacing``, stretched by ``split_gap_multiplier`` below a split.
    Depth in the graph plays no part, so branches of unequal length are not
    aligned row by row.
    """
    ys: dict[str, float] = {}
    for node_id in order:
        y = 0.0
        for edge in graph.in_edges(node_id):
            parent_y = ys.get(edge.source)
            if parent_y is None:
                continue
            parent = graph.flow_node(edge.source)
            gap = options.row_spacing
            if parent.type == NodeType.SPLIT:
                gap *= options.split_gap_multiplier
            y = max(y, parent_y + options.node_size(parent).height + gap)
        ys[node_id] = y
    return ys


def position_main_nodes(
    graph: FlowGraph,
    order: list[str],
    lanes: dict[str, float],
    ys: dict[str, float],
    options: LayoutOptions,
) -> list[PositionedNode]:
    """Turn lanes and tops into positioned nodes centred on their lane."""
    positioned: list[PositionedNode] = []
    for node_id in order:
        node = graph.flow_node(node_id)
        size = options.node_size(node)
        lane = lanes.get(node_id, 0.0)
        positioned.append(
            PositionedNode(
                id=node_id,
                type=node.type,
                title=node.display_title,
                width=size.width,
                height=size.height,
                x=lane * options.lane_spacing - size.width / 2,
                y=ys.get(node_id, 0.0),
                lane=lane,
            )
        )
    return positioned


# ─── Collision Resolution ─────────────────────────────────────────────────────


@dataclass
class CollisionResult:
    """Outcome of collision relaxation.

    ``converged`` is False when the pass budget ran out while nodes were still
    moving; residual overlap is then possible and accepted.
    """

    nodes: list[PositionedNode]
    passes: int
    converged: bool


def vertical_overlap(a: PositionedNode, b: PositionedNode) -> float:
    """Length of the shared y-range of two nodes (negative when apart)."""
    return min(a.bottom, b.bottom) - max(a.y, b.y)


def resolve_collisions(nodes: list[PositionedNode], options: LayoutOptions) -> CollisionResult:
    """Push horizontally crowded nodes apart, symmetrically, in bounded passes.

    Every pair whose vertical ranges overlap needs a centre distance of at
    least half their summed widths plus ``collision_padding``. A pair short of
    that moves apart by half the deficit each: the left node further left, the
    right node further right; on equal centres the node earlier in ``nodes``
    goes left. Passes repeat until nothing moves or ``collision_passes`` is
    spent. The input list is not modified.
    """
    centers = [n.center_x for n in nodes]
    passes = 0
    converged = True
    budget = max(0, options.collision_passes)

    if len(nodes) > 1:
        converged = False
        for _pass in range(budget):
            passes += 1
            moved = False
            for i in range(len(nodes)):
                for j in range(i + 1, len(nodes)):
                    a, b = nodes[i], nodes[j]
                    if vertical_overlap(a, b) <= OVERLAP_TOLERANCE:
                        continue
                    required = (a.width + b.width) / 2 + options.collision_padding
                    distance = abs(centers[i] - centers[j])
                    deficit = required - distance
                    if deficit <= _MOVE_EPSILON:
                        continue
                    half = deficit / 2
                    if centers[i] <= centers[j]:
                        centers[i] -= half
                        centers[j] += half
                    else:
                        centers[i] += half
                        centers[j] -= half
                    moved = True
            if not moved:
                converged = True
                break

    if not converged:
        logger.warning("Collision resolution stopped after %d passes with nodes still moving", passes)
    else:
        logger.debug("Collision resolution settled after %d pass(es)", passes)

    resolved = [replace(n, x=centers[i] - n.width / 2) for i, n in enumerate(nodes)]
    return CollisionResult(nodes=resolved, passes=passes, converged=converged)
