"""Graph builder — turns flat node/edge lists into the layout's graph IR.

Main-flow nodes live in a networkx ``MultiDiGraph`` keyed by edge id, so parallel
edges between the same pair of nodes are kept apart. Annotation ("side") nodes
are split off and only remember the single node they point at.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from dataclasses import dataclass, field

import networkx as nx

from flow_layout.types import FlowEdge, FlowNode

logger = logging.getLogger(__name__)


def branch_priority(label: str | None) -> int:
    """Sort rank of a branch label: "yes" first, "no" second, everything else after."""
    normalized = (label or "").strip().lower()
    if normalized == "yes":
        return 0
    if normalized == "no":
        return 1
    return 2


@dataclass
class FlowGraph:
    """Graph IR for one layout call.

    Attributes:
        nodes: Unique input nodes in input order (later duplicates dropped).
        edges: Every input edge in input order, resolvable or not.
        main: MultiDiGraph of main-flow nodes; each edge carries ``edge=FlowEdge``.
        side_nodes: Annotation nodes in input order.
        side_targets: side node id → id of the node it annotates.
        disconnected_side: Annotation ids with zero or several outgoing edges.
    """

    nodes: list[FlowNode]
    edges: list[FlowEdge]
    main: nx.MultiDiGraph
    side_nodes: list[FlowNode] = field(default_factory=list)
    side_targets: dict[str, str] = field(default_factory=dict)
    disconnected_side: list[str] = field(default_factory=list)

    @property
    def side_ids(self) -> set[str]:
        return {n.id for n in self.side_nodes}

    def flow_node(self, node_id: str) -> FlowNode:
        return self.main.nodes[node_id]["node"]

    def out_edges(self, node_id: str) -> list[FlowEdge]:
        """Main outgoing edges of ``node_id`` in insertion order."""
        return [data["edge"] for _, _, data in self.main.out_edges(node_id, data=True)]

    def in_edges(self, node_id: str) -> list[FlowEdge]:
        """Main incoming edges of ``node_id`` in insertion order."""
        return [data["edge"] for _, _, data in self.main.in_edges(node_id, data=True)]

    def sorted_out_edges(self, node_id: str) -> list[FlowEdge]:
        """Outgoing edges ordered by branch priority, then target id, then edge id."""
        return sorted(
            self.out_edges(node_id),
            key=lambda e: (branch_priority(e.label), e.target, e.id),
        )


def build_graph(nodes: Iterable[FlowNode], edges: Iterable[FlowEdge]) -> FlowGraph:
    """Build the graph IR from node and edge lists.

    Never raises: duplicate node ids keep their first occurrence, edges whose
    endpoints are unknown or not both main nodes stay out of the main adjacency,
    and self-loops are left out of it as well. All edges remain in ``edges`` so
    the router can still report them.
    """
    unique: list[FlowNode] = []
    seen: set[str] = set()
    for node in nodes:
        if node.id in seen:
            logger.warning("Dropping duplicate node id %r", node.id)
            continue
        seen.add(node.id)
        unique.append(node)

    edge_list = list(edges)

    main: nx.MultiDiGraph = nx.MultiDiGraph()
    side_nodes: list[FlowNode] = []
    for node in unique:
        if node.is_side:
            side_nodes.append(node)
        else:
            main.add_node(node.id, node=node)

    side_ids = {n.id for n in side_nodes}
    side_out: dict[str, list[FlowEdge]] = {sid: [] for sid in side_ids}
    edge_keys: set[str] = set()

    for edge in edge_list:
        if edge.source in side_ids:
            side_out[edge.source].append(edge)
            continue
        if edge.source not in main or edge.target not in main:
            if edge.source not in seen or edge.target not in seen:
                logger.debug("Edge %r has an unresolved endpoint (%r -> %r)", edge.id, edge.source, edge.target)
            continue
        if edge.source == edge.target:
            logger.debug("Self-loop %r on %r left out of scheduling", edge.id, edge.source)
            continue
        if edge.id in edge_keys:
            logger.warning("Duplicate edge id %r left out of scheduling", edge.id)
            continue
        edge_keys.add(edge.id)
        main.add_edge(edge.source, edge.target, key=edge.id, edge=edge)

    side_targets: dict[str, str] = {}
    disconnected: list[str] = []
    for side in side_nodes:
        outgoing = side_out[side.id]
        if len(outgoing) == 1:
            side_targets[side.id] = outgoing[0].target
        else:
            disconnected.append(side.id)

    return FlowGraph(
        nodes=unique,
        edges=edge_list,
        main=main,
        side_nodes=side_nodes,
        side_targets=side_targets,
        disconnected_side=disconnected,
    )
