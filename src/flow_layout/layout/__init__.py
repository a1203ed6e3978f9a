"""Layout module — flow auto-layout pipeline.

Stages:
  1. Graph building (side/main split)       — flow_layout.graph
  2. Topological scheduling                 — scheduler
  3. Tree reduction + subtree sizing        — tree
  4. Lane allocation                        — lanes
  5. Vertical placement + collision passes  — placement
  6. Annotation placement                   — annotations
  7. Normalisation + edge routing           — routing
"""

from __future__ import annotations

from flow_layout.layout.annotations import place_annotations
from flow_layout.layout.engine import build_layout, layout_graph
from flow_layout.layout.lanes import allocate_lanes
from flow_layout.layout.placement import (
    OVERLAP_TOLERANCE,
    CollisionResult,
    place_vertically,
    position_main_nodes,
    resolve_collisions,
    vertical_overlap,
)
from flow_layout.layout.routing import (
    STRAIGHT_TOLERANCE,
    apply_overrides,
    compute_orthogonal_waypoints,
    normalize,
    route_edges,
)
from flow_layout.layout.scheduler import schedule
from flow_layout.layout.tree import TreeReduction, reduce_to_tree, size_subtrees
from flow_layout.layout.types import LayoutResult, PositionedNode, RoutedEdge

__all__ = [
    "OVERLAP_TOLERANCE",
    "STRAIGHT_TOLERANCE",
    "CollisionResult",
    "LayoutResult",
    "PositionedNode",
    "RoutedEdge",
    "TreeReduction",
    "allocate_lanes",
    "apply_overrides",
    "build_layout",
    "compute_orthogonal_waypoints",
    "layout_graph",
    "normalize",
    "place_annotations",
    "place_vertically",
    "position_main_nodes",
    "reduce_to_tree",
    "resolve_collisions",
    "route_edges",
    "schedule",
    "size_subtrees",
    "vertical_overlap",
]
