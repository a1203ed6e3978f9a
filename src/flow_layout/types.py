"""Flow description types — the nodes and edges the layout engine consumes."""

from __future__ import annotations

import logging
from collections.abc import Mapping
from dataclasses import dataclass, field
from enum import Enum
from types import MappingProxyType
from typing import Any

logger = logging.getLogger(__name__)


class NodeType(str, Enum):
    """Closed set of node type tags known to the layout engine.

    Node types are stored as plain strings on ``FlowNode`` so that unknown tags
    pass through untouched; the enum members compare equal to their values.
    """

    TRIGGER = "trigger"
    PROFILE_FILTER = "profileFilter"
    SPLIT = "split"
    WAIT = "wait"
    MESSAGE = "message"
    OUTCOME = "outcome"
    NOTE = "note"
    STRATEGY = "strategy"
    MERGE = "merge"


# Annotation node types: laid out beside their target, not in the main flow.
SIDE_NODE_TYPES: frozenset[str] = frozenset({NodeType.NOTE.value, NodeType.STRATEGY.value})


@dataclass
class Point:
    """A 2D point in canvas units."""

    x: float
    y: float

    def to_dict(self) -> dict[str, float]:
        return {"x": self.x, "y": self.y}


@dataclass(frozen=True)
class FlowNode:
    """A typed vertex of the flow graph.

    ``payload`` keeps the type-specific fields (split labels, wait duration,
    message channel/strategy, ...) as they arrived, behind a read-only view.
    ``type`` is always stored as a plain string, also when a ``NodeType``
    member is passed in.
    """

    id: str
    type: str
    title: str | None = None
    payload: Mapping[str, Any] = field(default_factory=dict, hash=False)

    def __post_init__(self) -> None:
        object.__setattr__(self, "type", getattr(self.type, "value", self.type))
        object.__setattr__(self, "payload", MappingProxyType(dict(self.payload)))

    @property
    def is_side(self) -> bool:
        return self.type in SIDE_NODE_TYPES

    @property
    def display_title(self) -> str:
        return self.title if self.title else str(self.type)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> FlowNode | None:
        """Build a node from a raw flow-description record.

        Returns None for records that cannot name a node (no ``id``); every
        other key besides ``id``/``type``/``title`` lands in ``payload``.
        """
        if not isinstance(data, Mapping):
            logger.warning("Skipping node record that is not a mapping: %r", data)
            return None
        node_id = data.get("id")
        if not isinstance(node_id, str) or not node_id:
            logger.warning("Skipping node record without an id: %r", data)
            return None
        node_type = data.get("type")
        title = data.get("title")
        payload = {k: v for k, v in data.items() if k not in ("id", "type", "title")}
        return cls(
            id=node_id,
            type=str(node_type) if node_type is not None else "",
            title=title if isinstance(title, str) else None,
            payload=payload,
        )


@dataclass(frozen=True)
class FlowEdge:
    """A directed, optionally labelled connection between two nodes."""

    id: str
    source: str
    target: str
    label: str | None = None

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> FlowEdge | None:
        """Build an edge from a raw ``{id, from, to, label}`` record."""
        if not isinstance(data, Mapping):
            logger.warning("Skipping edge record that is not a mapping: %r", data)
            return None
        edge_id = data.get("id")
        if not isinstance(edge_id, str) or not edge_id:
            logger.warning("Skipping edge record without an id: %r", data)
            return None
        source = data.get("from", data.get("source"))
        target = data.get("to", data.get("target"))
        label = data.get("label")
        return cls(
            id=edge_id,
            source=str(source) if source is not None else "",
            target=str(target) if target is not None else "",
            label=label if isinstance(label, str) else None,
        )
