"""Public API — lay out whole flow-description documents."""

from __future__ import annotations

import json
import logging
from collections.abc import Mapping
from dataclasses import replace
from typing import Any

from flow_layout.layout.engine import build_layout
from flow_layout.layout.types import LayoutResult
from flow_layout.options import LayoutOptions, parse_positions
from flow_layout.types import FlowEdge, FlowNode, Point

logger = logging.getLogger(__name__)


def parse_nodes(records: Any) -> list[FlowNode]:
    """Convert raw node records, skipping the ones that cannot name a node."""
    if not isinstance(records, list):
        if records is not None:
            logger.warning("Expected a list of nodes, got %s", type(records).__name__)
        return []
    return [n for n in (FlowNode.from_dict(r) for r in records) if n is not None]


def parse_edges(records: Any) -> list[FlowEdge]:
    """Convert raw edge records, skipping the ones without an id."""
    if not isinstance(records, list):
        if records is not None:
            logger.warning("Expected a list of edges, got %s", type(records).__name__)
        return []
    return [e for e in (FlowEdge.from_dict(r) for r in records) if e is not None]


def saved_positions(spec: Mapping[str, Any]) -> dict[str, Point]:
    """Manual node positions persisted with a flow under ``ui.nodePositions``."""
    ui = spec.get("ui")
    if not isinstance(ui, Mapping):
        return {}
    positions = ui.get("nodePositions")
    return parse_positions(positions) if positions is not None else {}


def layout_flow(spec: Mapping[str, Any], options: LayoutOptions | None = None) -> LayoutResult:
    """Lay out a flow document with ``nodes``, ``edges`` and optional ``ui``.

    Positions saved under ``ui.nodePositions`` act as position overrides;
    overrides passed in ``options`` take precedence over them.
    """
    options = options or LayoutOptions()
    if not isinstance(spec, Mapping):
        logger.warning("Flow document is not a mapping; laying out nothing")
        return LayoutResult()

    overrides = saved_positions(spec)
    if overrides:
        overrides.update(options.position_overrides)
        options = replace(options, position_overrides=overrides)

    return build_layout(parse_nodes(spec.get("nodes")), parse_edges(spec.get("edges")), options)


def layout_flow_json(src: str, options: LayoutOptions | None = None, indent: int | None = None) -> str:
    """Lay out a flow given as JSON text and return the layout as JSON text.

    Raises json.JSONDecodeError when ``src`` is not valid JSON.
    """
    result = layout_flow(json.loads(src), options)
    return json.dumps(result.to_dict(), indent=indent)
