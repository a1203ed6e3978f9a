"""Annotation placer — notes and strategy cards beside the node they describe."""

from __future__ import annotations

import logging

from flow_layout.graph import FlowGraph
from flow_layout.layout.types import PositionedNode
from flow_layout.options import LayoutOptions

logger = logging.getLogger(__name__)


def place_annotations(
    graph: FlowGraph,
    main_nodes: list[PositionedNode],
    options: LayoutOptions,
) -> list[PositionedNode]:
    """Position every side node; returns only the side nodes, in input order.

    A side node whose target was placed goes on the outside of the target's
    branch, at the target's y: right of it when the target's lane is positive,
    otherwise at ``side_left_offset`` from its left edge. Further annotations on
    the same side of the same target stack downward.

    Side nodes without a placed target stack below everything placed so far,
    one ``row_spacing`` apart, at x = 0.
    """
    by_id = {n.id: n for n in main_nodes}
    placed: list[PositionedNode] = []
    # (target id, side) → bottom of the last annotation stacked there.
    stack_bottom: dict[tuple[str, bool], float] = {}

    for side in graph.side_nodes:
        size = options.node_size(side)
        target = by_id.get(graph.side_targets.get(side.id, ""))

        if target is None:
            if side.id in graph.side_targets:
                logger.debug("Annotation %r points at unplaced node %r", side.id, graph.side_targets[side.id])
            everything = main_nodes + placed
            y = max((n.bottom for n in everything), default=-options.row_spacing) + options.row_spacing
            placed.append(
                PositionedNode(
                    id=side.id,
                    type=side.type,
                    title=side.display_title,
                    width=size.width,
                    height=size.height,
                    x=0.0,
                    y=y,
                    lane=0.0,
                )
            )
            continue

        place_right = target.lane > 0
        if place_right:
            x = target.x + target.width + options.side_gap
        else:
            x = target.x + options.side_left_offset

        key = (target.id, place_right)
        y = target.y
        if key in stack_bottom:
            y = stack_bottom[key] + options.row_spacing
        stack_bottom[key] = y + size.height

        placed.append(
            PositionedNode(
                id=side.id,
                type=side.type,
                title=side.display_title,
                width=size.width,
                height=size.height,
                x=x,
                y=y,
                lane=target.lane + 1 if place_right else target.lane - 1,
            )
        )

    return placed
