"""Full layout pipeline."""

from __future__ import annotations

import logging
from collections.abc import Iterable

from flow_layout.graph import FlowGraph, build_graph
from flow_layout.layout.annotations import place_annotations
from flow_layout.layout.lanes import allocate_lanes
from flow_layout.layout.placement import place_vertically, position_main_nodes, resolve_collisions
from flow_layout.layout.routing import apply_overrides, normalize, route_edges
from flow_layout.layout.scheduler import schedule
from flow_layout.layout.tree import reduce_to_tree, size_subtrees
from flow_layout.layout.types import LayoutResult, RoutedEdge
from flow_layout.options import LayoutOptions
from flow_layout.types import FlowEdge, FlowNode

logger = logging.getLogger(__name__)


def build_layout(
    nodes: Iterable[FlowNode],
    edges: Iterable[FlowEdge],
    options: LayoutOptions | None = None,
) -> LayoutResult:
    """Lay out a flow: positioned nodes and routed edges, both in input order.

    Every call recomputes from scratch; the only caller state that survives is
    ``options.position_overrides``, applied last.
    """
    options = options or LayoutOptions()
    graph = build_graph(nodes, edges)

    if not graph.nodes:
        return LayoutResult(
            nodes=[],
            edges=[RoutedEdge(id=e.id, source=e.source, target=e.target, label=e.label) for e in graph.edges],
        )

    return layout_graph(graph, options)


def layout_graph(graph: FlowGraph, options: LayoutOptions) -> LayoutResult:
    """Run the layout stages over an already-built graph."""
    order = schedule(graph)
    reduction = reduce_to_tree(graph, order)
    sizes = size_subtrees(graph, order, reduction)
    lanes = allocate_lanes(graph, order, reduction, sizes)
    ys = place_vertically(graph, order, options)

    main_nodes = position_main_nodes(graph, order, lanes, ys, options)
    collisions = resolve_collisions(main_nodes, options)
    side_nodes = place_annotations(graph, collisions.nodes, options)

    placed = normalize(collisions.nodes + side_nodes, options)
    placed = apply_overrides(placed, options.position_overrides)

    by_id = {n.id: n for n in placed}
    ordered = [by_id[n.id] for n in graph.nodes]
    routed = route_edges(graph.edges, ordered, graph.side_ids, options)

    logger.debug(
        "Laid out %d node(s) and %d edge(s); collision passes=%d converged=%s",
        len(ordered),
        len(routed),
        collisions.passes,
        collisions.converged,
    )
    return LayoutResult(nodes=ordered, edges=routed)
