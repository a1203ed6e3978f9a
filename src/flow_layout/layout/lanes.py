"""Lane allocator — top-down horizontal slots from subtree sizes."""

from __future__ import annotations

import logging

from flow_layout.graph import FlowGraph
from flow_layout.layout.tree import TreeReduction
from flow_layout.types import NodeType

logger = logging.getLogger(__name__)


def allocate_lanes(
    graph: FlowGraph,
    order: list[str],
    reduction: TreeReduction,
    sizes: dict[str, float],
) -> dict[str, float]:
    """Assign a (fractional) lane to every scheduled node.

    Processing follows ``order``:
      1. The entry node (first in ``order``) is pinned to lane 0.
      2. A merge (more than one real incoming edge) is re-centred on the mean
         lane of its real parents processed so far, before its own children
         are placed.
      3. A split with two or more tree children fans them out left to right,
         centred under the split, each child taking a width equal to its size.
      4. Any other node hands its lane to all of its tree children.

    Nodes never assigned default to lane 0.
    """
    lanes: dict[str, float] = {}
    if not order:
        return lanes
    lanes[order[0]] = 0.0

    processed: set[str] = set()
    for node_id in order:
        lane = lanes.get(node_id, 0.0)

        incoming = graph.in_edges(node_id)
        if len(incoming) > 1:
            parents = dict.fromkeys(e.source for e in incoming)
            parent_lanes = [lanes.get(p, 0.0) for p in parents if p in processed]
            if parent_lanes:
                lane = sum(parent_lanes) / len(parent_lanes)
        lanes[node_id] = lane
        processed.add(node_id)

        children = reduction.children(node_id)
        if graph.flow_node(node_id).type == NodeType.SPLIT and len(children) >= 2:
            total = sum(sizes.get(c, 1) for c in children)
            left = lane - total / 2
            for child in children:
                width = sizes.get(child, 1)
                lanes[child] = left + width / 2
                left += width
        else:
            for child in children:
                lanes[child] = lane

    logger.debug("Allocated %d lanes", len(lanes))
    return lanes
