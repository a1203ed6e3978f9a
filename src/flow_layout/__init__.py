"""flow-layout — deterministic auto-layout for typed flow graphs."""

from __future__ import annotations

from flow_layout.api import layout_flow, layout_flow_json
from flow_layout.layout import LayoutResult, PositionedNode, RoutedEdge, build_layout
from flow_layout.options import LayoutOptions, NodeSize
from flow_layout.types import FlowEdge, FlowNode, NodeType, Point

__all__ = [
    "FlowEdge",
    "FlowNode",
    "LayoutOptions",
    "LayoutResult",
    "NodeSize",
    "NodeType",
    "Point",
    "PositionedNode",
    "RoutedEdge",
    "build_layout",
    "layout_flow",
    "layout_flow_json",
]
