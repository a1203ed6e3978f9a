"""Topological scheduler — deterministic processing order for main-flow nodes."""

from __future__ import annotations

import heapq
import logging

from flow_layout.graph import FlowGraph
from flow_layout.types import NodeType

logger = logging.getLogger(__name__)


def schedule(graph: FlowGraph) -> list[str]:
    """Order main nodes so every node follows all of its parents.

    Kahn's algorithm with fixed tie-breaks:
      - The first ``trigger`` node (input order) is popped first when it has no
        incoming edges.
      - After that the smallest id in the ready set is always popped, so the
        order depends on ids alone, not on insertion order.
      - A popped node releases its targets in branch order ("yes", "no",
        others; then target id, then edge id). A target becomes ready once its
        remaining in-degree drops to exactly 0.

    Nodes never released (cycles, parents that never become ready) are appended
    in input order, so every main node appears exactly once.
    """
    g = graph.main
    remaining: dict[str, int] = {nid: g.in_degree(nid) for nid in g.nodes}

    ready: list[str] = [nid for nid in g.nodes if remaining[nid] == 0]
    heapq.heapify(ready)

    trigger = next(
        (nid for nid in g.nodes if graph.flow_node(nid).type == NodeType.TRIGGER and remaining[nid] == 0),
        None,
    )

    order: list[str] = []
    scheduled: set[str] = set()

    def release(node_id: str) -> None:
        order.append(node_id)
        scheduled.add(node_id)
        for edge in graph.sorted_out_edges(node_id):
            remaining[edge.target] -= 1
            if remaining[edge.target] == 0:
                heapq.heappush(ready, edge.target)

    if trigger is not None:
        ready.remove(trigger)
        heapq.heapify(ready)
        release(trigger)

    while ready:
        release(heapq.heappop(ready))

    if len(order) < g.number_of_nodes():
        stalled = [nid for nid in g.nodes if nid not in scheduled]
        logger.debug("Scheduler stalled; appending %d node(s) in input order: %s", len(stalled), stalled)
        order.extend(stalled)

    return order
