"""
Data models for canvas conversion.

This module contains the dataclasses that represent a JSON Canvas document
and the containment hierarchy derived from it. Nodes form a closed tagged
union over the four canvas node types, sharing a common geometry record.

Classes:
    CanvasNode: Shared geometry and styling for every node variant.
    TextNode: Node holding a text body.
    FileNode: Node pointing at a file, optionally at a subpath within it.
    LinkNode: Node pointing at a URL.
    GroupNode: Container node that may enclose other nodes.
    CanvasEdge: Connection between two nodes.
    Canvas: A validated canvas document.
    Hierarchy: Canvas nodes with resolved ``children`` plus the edges.
"""

from dataclasses import dataclass, field
from typing import Any, ClassVar, Dict, List, Mapping, Optional, Tuple, Type

import networkx as nx

Point = Tuple[float, float]

NODE_TYPES = ("text", "file", "link", "group")
EDGE_SIDES = ("top", "right", "bottom", "left")
EDGE_ENDS = ("none", "arrow")

GEOMETRY_KEYS = ("x", "y", "width", "height")

# camelCase canvas keys -> CanvasEdge attribute names
EDGE_KEYS = {
    "id": "id",
    "fromNode": "from_node",
    "toNode": "to_node",
    "fromSide": "from_side",
    "toSide": "to_side",
    "fromEnd": "from_end",
    "toEnd": "to_end",
    "color": "color",
    "label": "label",
}


@dataclass
class CanvasNode:
    """
    Geometry and styling shared by all node variants.

    A bare ``CanvasNode`` (``type == ""``) stands for a variant the
    serializer does not know how to draw; it contributes no output.

    Attributes:
        id: Unique node id.
        x: Left edge.
        y: Top edge.
        width: Rectangle width.
        height: Rectangle height.
        color: Palette index "1".."6" or a literal color string.
        children: Child ids for groups after hierarchy construction,
                  ``None`` for everything that is not a container.
        extra: Input keys the model does not interpret, kept verbatim.
    """

    id: str
    x: float
    y: float
    width: float
    height: float
    color: Optional[str] = None
    children: Optional[List[str]] = None
    extra: Dict[str, Any] = field(default_factory=dict)

    type: ClassVar[str] = ""
    payload_keys: ClassVar[Tuple[str, ...]] = ()

    @property
    def is_group(self) -> bool:
        return False

    @property
    def area(self) -> float:
        return self.width * self.height

    def midpoint(self) -> Point:
        """Return the center of the node's rectangle."""
        return (self.x + self.width / 2, self.y + self.height / 2)

    def contains(self, point: Point) -> bool:
        """Check whether a point lies inside the rectangle, edges included."""
        px, py = point
        return (
            px >= self.x
            and px <= self.x + self.width
            and py >= self.y
            and py <= self.y + self.height
        )

    def payload(self) -> Dict[str, Any]:
        """Type-specific fields, omitting optional ones that are unset."""
        result = {}
        for key in self.payload_keys:
            value = getattr(self, key)
            if value is not None:
                result[key] = value
        return result

    def to_dict(self, include_children: bool = True) -> Dict[str, Any]:
        data: Dict[str, Any] = {
            "id": self.id,
            "type": self.type,
            "x": self.x,
            "y": self.y,
            "width": self.width,
            "height": self.height,
        }
        data.update(self.payload())
        if self.color is not None:
            data["color"] = self.color
        data.update(self.extra)
        if include_children:
            data["children"] = (
                list(self.children) if self.children is not None else None
            )
        return data


@dataclass
class TextNode(CanvasNode):
    text: str = ""

    type: ClassVar[str] = "text"
    payload_keys: ClassVar[Tuple[str, ...]] = ("text",)


@dataclass
class FileNode(CanvasNode):
    file: str = ""
    subpath: Optional[str] = None

    type: ClassVar[str] = "file"
    payload_keys: ClassVar[Tuple[str, ...]] = ("file", "subpath")


@dataclass
class LinkNode(CanvasNode):
    url: str = ""

    type: ClassVar[str] = "link"
    payload_keys: ClassVar[Tuple[str, ...]] = ("url",)


@dataclass
class GroupNode(CanvasNode):
    label: Optional[str] = None

    type: ClassVar[str] = "group"
    payload_keys: ClassVar[Tuple[str, ...]] = ("label",)

    @property
    def is_group(self) -> bool:
        return True


NODE_CLASSES: Dict[str, Type[CanvasNode]] = {
    "text": TextNode,
    "file": FileNode,
    "link": LinkNode,
    "group": GroupNode,
}


def node_from_dict(data: Mapping[str, Any]) -> CanvasNode:
    """
    Build the typed node for an already validated node mapping.

    Any ``children`` key in the input is dropped; containment is always
    recomputed by the hierarchy builder.
    """
    node_cls = NODE_CLASSES[data["type"]]
    known = {"id", "type", "color", "children"} | set(GEOMETRY_KEYS)
    known.update(node_cls.payload_keys)

    kwargs = {key: data[key] for key in node_cls.payload_keys if key in data}
    return node_cls(
        id=data["id"],
        x=data["x"],
        y=data["y"],
        width=data["width"],
        height=data["height"],
        color=data.get("color"),
        extra={key: value for key, value in data.items() if key not in known},
        **kwargs,
    )


@dataclass
class CanvasEdge:
    """
    A connection between two nodes.

    Optional attributes stay ``None`` when absent from the input; defaults
    for the end markers are applied where they matter (see ``ends``).
    """

    id: str
    from_node: str
    to_node: str
    from_side: Optional[str] = None
    to_side: Optional[str] = None
    from_end: Optional[str] = None
    to_end: Optional[str] = None
    color: Optional[str] = None
    label: Optional[str] = None
    extra: Dict[str, Any] = field(default_factory=dict)

    def ends(self) -> Tuple[str, str]:
        """Return ``(from_end, to_end)`` with canvas defaults applied."""
        return (self.from_end or "none", self.to_end or "arrow")

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "CanvasEdge":
        kwargs = {attr: data[key] for key, attr in EDGE_KEYS.items() if key in data}
        extra = {key: value for key, value in data.items() if key not in EDGE_KEYS}
        return cls(extra=extra, **kwargs)

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {}
        for key, attr in EDGE_KEYS.items():
            value = getattr(self, attr)
            if value is not None:
                data[key] = value
        data.update(self.extra)
        return data


@dataclass
class Canvas:
    """A validated canvas document."""

    nodes: List[CanvasNode] = field(default_factory=list)
    edges: List[CanvasEdge] = field(default_factory=list)


@dataclass
class Hierarchy:
    """
    Result of hierarchy construction.

    ``nodes`` is in working order (groups by ascending area); every group's
    ``children`` lists its direct child ids in discovery order. ``edges``
    is the input edge sequence, unchanged.
    """

    nodes: List[CanvasNode] = field(default_factory=list)
    edges: List[CanvasEdge] = field(default_factory=list)
    _index: Dict[str, CanvasNode] = field(init=False, repr=False, compare=False)

    def __post_init__(self):
        self._index = {node.id: node for node in self.nodes}

    def get(self, node_id: str) -> Optional[CanvasNode]:
        return self._index.get(node_id)

    def parent_of(self, node_id: str) -> Optional[str]:
        """Return the id of the group that directly contains ``node_id``."""
        for node in self.nodes:
            if node.children and node_id in node.children:
                return node.id
        return None

    def roots(self) -> List[str]:
        """Ids of nodes that no group contains, in hierarchy order."""
        contained = set()
        for node in self.nodes:
            if node.children:
                contained.update(node.children)
        return [node.id for node in self.nodes if node.id not in contained]

    def to_graph(self) -> nx.DiGraph:
        """
        Build the containment graph.

        Every node becomes a graph node; each ``parent -> child`` relation
        becomes a directed edge. Child ids with no matching node are left
        out.
        """
        graph = nx.DiGraph()
        graph.add_nodes_from(node.id for node in self.nodes)
        for node in self.nodes:
            for child_id in node.children or []:
                if child_id in self._index:
                    graph.add_edge(node.id, child_id)
        return graph

    def to_dict(self) -> Dict[str, Any]:
        return {
            "nodes": [node.to_dict() for node in self.nodes],
            "edges": [edge.to_dict() for edge in self.edges],
        }
