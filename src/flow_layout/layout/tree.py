"""Tree reduction and subtree sizing.

The flow graph is a DAG with merges. For sizing we reduce it to a forest where
every node keeps only its first parent ("first parent wins"); merges keep their
other parents in the real adjacency of ``FlowGraph.main``, which the lane
allocator uses for averaging.
"""

from __future__ import annotations

from dataclasses import dataclass, field

import networkx as nx

from flow_layout.graph import FlowGraph
from flow_layout.types import FlowEdge, NodeType


@dataclass
class TreeReduction:
    """Single-parent forest over the scheduled main nodes.

    Attributes:
        tree: DiGraph with one edge per tree-parent link, children in branch order.
        parent_edge: child id → the FlowEdge chosen as its tree-parent edge.
    """

    tree: nx.DiGraph
    parent_edge: dict[str, FlowEdge] = field(default_factory=dict)

    def children(self, node_id: str) -> list[str]:
        return list(self.tree.successors(node_id))

    def parent(self, node_id: str) -> str | None:
        edge = self.parent_edge.get(node_id)
        return edge.source if edge is not None else None


def reduce_to_tree(graph: FlowGraph, order: list[str]) -> TreeReduction:
    """Pick a tree-parent edge for every node reachable by a forward edge.

    Walks ``order`` and each node's branch-sorted outgoing edges; the first edge
    reaching a target that has no tree parent yet becomes its tree-parent edge.
    Only edges pointing later in ``order`` qualify, which keeps the result a
    forest even when cycles forced nodes onto the end of the schedule.
    """
    position = {nid: i for i, nid in enumerate(order)}
    tree: nx.DiGraph = nx.DiGraph()
    tree.add_nodes_from(order)
    parent_edge: dict[str, FlowEdge] = {}

    for node_id in order:
        for edge in graph.sorted_out_edges(node_id):
            target = edge.target
            if target in parent_edge or position[target] <= position[node_id]:
                continue
            parent_edge[target] = edge
            tree.add_edge(node_id, target, edge=edge)

    return TreeReduction(tree=tree, parent_edge=parent_edge)


def size_subtrees(graph: FlowGraph, order: list[str], reduction: TreeReduction) -> dict[str, float]:
    """Bottom-up lane-width requirement for every scheduled node.

    - Leaf: 1.
    - Split with two or more tree children: sum of the children's sizes, so
      each branch gets width in proportion to what hangs below it.
    - Any other node with children: max of the children's sizes; a chain does
      not widen.
    """
    sizes: dict[str, float] = {}
    for node_id in reversed(order):
        children = reduction.children(node_id)
        if not children:
            sizes[node_id] = 1
            continue
        child_sizes = [sizes.get(c, 1) for c in children]
        if graph.flow_node(node_id).type == NodeType.SPLIT and len(children) >= 2:
            sizes[node_id] = sum(child_sizes)
        else:
            sizes[node_id] = max(child_sizes)
    return sizes
