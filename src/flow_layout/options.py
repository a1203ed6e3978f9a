"""Layout options — spacing constants, node sizes and caller overrides."""

from __future__ import annotations

import logging
import math
from collections.abc import Mapping
from dataclasses import dataclass, field, fields
from typing import Any

from flow_layout.types import FlowNode, NodeType, Point

logger = logging.getLogger(__name__)

# ─── Defaults ─────────────────────────────────────────────────────────────────

ROW_SPACING: float = 44  # vertical gap between a parent's bottom and a child's top
LANE_SPACING: float = 400  # canvas units per lane
PADDING_X: float = 120
PADDING_Y: float = 80
SPLIT_GAP_MULTIPLIER: float = 2.25  # longer drop below a split before its branches
EDGE_TURN_OFFSET: float = 24  # horizontal edge segment sits this far above the target
COLLISION_PADDING: float = 40  # minimum horizontal clearance between nodes in one band
COLLISION_PASSES: int = 12
SIDE_GAP: float = 60  # gap between a target and an annotation placed to its right
SIDE_LEFT_OFFSET: float = -380  # annotation x relative to a target when placed left

# Extra height of a message card that shows its strategy block.
STRATEGY_EXTRA_HEIGHT: float = 96


@dataclass(frozen=True)
class NodeSize:
    """Width and height of a rendered node card."""

    width: float
    height: float


NODE_SIZE_MAP: dict[str, NodeSize] = {
    NodeType.TRIGGER.value: NodeSize(280, 94),
    NodeType.PROFILE_FILTER.value: NodeSize(280, 100),
    NodeType.SPLIT.value: NodeSize(280, 100),
    NodeType.WAIT.value: NodeSize(280, 48),
    NodeType.MESSAGE.value: NodeSize(280, 185),
    NodeType.OUTCOME.value: NodeSize(72, 22),
    NodeType.NOTE.value: NodeSize(320, 160),
    NodeType.STRATEGY.value: NodeSize(320, 200),
    NodeType.MERGE.value: NodeSize(120, 40),
}

DEFAULT_NODE_SIZE = NodeSize(280, 100)

# camelCase keys used by the flow-description format → LayoutOptions field names.
_CAMEL_KEYS: dict[str, str] = {
    "rowSpacing": "row_spacing",
    "laneSpacing": "lane_spacing",
    "paddingX": "padding_x",
    "paddingY": "padding_y",
    "splitGapMultiplier": "split_gap_multiplier",
    "edgeTurnOffset": "edge_turn_offset",
    "collisionPadding": "collision_padding",
    "collisionPasses": "collision_passes",
    "sideGap": "side_gap",
    "sideLeftOffset": "side_left_offset",
    "nodeSizeOverrides": "node_sizes",
    "nodeSizes": "node_sizes",
    "positionOverrides": "position_overrides",
}

# Options that only make sense as sizes, gaps or counts.
_NON_NEGATIVE: frozenset[str] = frozenset(
    {
        "row_spacing",
        "lane_spacing",
        "split_gap_multiplier",
        "collision_padding",
        "collision_passes",
        "side_gap",
    }
)


@dataclass
class LayoutOptions:
    """Options bag for a single layout call.

    ``node_sizes`` maps a node type to a replacement size; ``position_overrides``
    maps a node id to a position that replaces the computed one outright.
    """

    row_spacing: float = ROW_SPACING
    lane_spacing: float = LANE_SPACING
    padding_x: float = PADDING_X
    padding_y: float = PADDING_Y
    split_gap_multiplier: float = SPLIT_GAP_MULTIPLIER
    edge_turn_offset: float = EDGE_TURN_OFFSET
    collision_padding: float = COLLISION_PADDING
    collision_passes: int = COLLISION_PASSES
    side_gap: float = SIDE_GAP
    side_left_offset: float = SIDE_LEFT_OFFSET
    node_sizes: dict[str, NodeSize] = field(default_factory=dict)
    position_overrides: dict[str, Point] = field(default_factory=dict)

    def node_size(self, node: FlowNode) -> NodeSize:
        """Size of ``node``: type override, else the built-in table, else the default.

        A message carrying a ``strategy`` payload grows by STRATEGY_EXTRA_HEIGHT
        unless its size comes from an override.
        """
        override = self.node_sizes.get(node.type)
        if override is not None:
            return override
        size = NODE_SIZE_MAP.get(node.type, DEFAULT_NODE_SIZE)
        if node.type == NodeType.MESSAGE and node.payload.get("strategy"):
            return NodeSize(size.width, size.height + STRATEGY_EXTRA_HEIGHT)
        return size

    @classmethod
    def from_dict(cls, data: Mapping[str, Any] | None) -> LayoutOptions:
        """Build options from a camelCase or snake_case mapping.

        Unknown keys, values that are not finite numbers and negative spacings,
        multipliers or pass counts are ignored with a warning; the layout itself
        never fails on a bad option.
        """
        options = cls()
        if not data:
            return options
        numeric = {f.name for f in fields(cls)} - {"node_sizes", "position_overrides"}
        for key, value in data.items():
            name = _CAMEL_KEYS.get(key, key)
            if name == "node_sizes":
                options.node_sizes = _parse_node_sizes(value)
            elif name == "position_overrides":
                options.position_overrides = parse_positions(value)
            elif name in numeric:
                number = _as_number(value)
                if number is None:
                    logger.warning("Ignoring unusable layout option %s=%r", key, value)
                    continue
                if number < 0 and name in _NON_NEGATIVE:
                    logger.warning("Ignoring negative layout option %s=%r", key, value)
                    continue
                setattr(options, name, int(number) if name == "collision_passes" else number)
            else:
                logger.warning("Ignoring unknown layout option %r", key)
        return options


def _as_number(value: Any) -> float | None:
    """``value`` as a finite number, or None (bools, NaN and infinities included)."""
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return None
    if isinstance(value, float) and not math.isfinite(value):
        return None
    return value


def _parse_node_sizes(value: Any) -> dict[str, NodeSize]:
    sizes: dict[str, NodeSize] = {}
    if not isinstance(value, Mapping):
        logger.warning("Ignoring node size overrides that are not a mapping: %r", value)
        return sizes
    for node_type, size in value.items():
        if isinstance(size, NodeSize):
            sizes[node_type] = size
            continue
        if isinstance(size, Mapping):
            width, height = _as_number(size.get("width")), _as_number(size.get("height"))
            if width is not None and height is not None:
                sizes[node_type] = NodeSize(width, height)
                continue
        logger.warning("Ignoring unusable size override for %r: %r", node_type, size)
    return sizes


def parse_positions(value: Any) -> dict[str, Point]:
    """Parse a ``{node_id: {x, y}}`` mapping, skipping unusable entries."""
    positions: dict[str, Point] = {}
    if not isinstance(value, Mapping):
        logger.warning("Ignoring position overrides that are not a mapping: %r", value)
        return positions
    for node_id, pos in value.items():
        if isinstance(pos, Point):
            positions[node_id] = pos
            continue
        if isinstance(pos, Mapping):
            x, y = _as_number(pos.get("x")), _as_number(pos.get("y"))
            if x is not None and y is not None:
                positions[node_id] = Point(x=x, y=y)
                continue
        logger.warning("Ignoring unusable position override for %r: %r", node_id, pos)
    return positions
