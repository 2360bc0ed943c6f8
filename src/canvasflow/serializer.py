"""
Mermaid flowchart serializer.

Turns a canvas hierarchy into Mermaid flowchart syntax: one block per node
(``subgraph`` blocks for groups, nested by containment), one line per edge,
then the accumulated ``style``/``linkStyle`` directives.
"""

from typing import Any, FrozenSet, List, Mapping, Optional

import networkx as nx

from .colors import ColorMap
from .errors import CyclicHierarchyError
from .hierarchy import HierarchyBuilder
from .logging import get_logger
from .models import (
    CanvasEdge,
    CanvasNode,
    FileNode,
    GroupNode,
    Hierarchy,
    LinkNode,
    TextNode,
)
from .validator import parse_canvas, validate_custom_colors, validate_direction

LOG = get_logger(__name__)

# (fromEnd, toEnd) -> Mermaid connector
CONNECTORS = {
    ("none", "arrow"): "-->",
    ("arrow", "none"): "<--",
    ("arrow", "arrow"): "<-->",
    ("none", "none"): "---",
}
DEFAULT_CONNECTOR = "---"


def escape_label(text: str) -> str:
    """Make text safe inside a quoted Mermaid label."""
    if text == "":
        # An empty label would collapse the ["..."] token
        return " "
    return text.replace('"', "#quot;")


class FlowchartSerializer:
    """
    Serializes a hierarchy to Mermaid flowchart text.

    Example:
        >>> serializer = FlowchartSerializer(ColorMap({"1": "#ff0000"}), "LR")
        >>> print(serializer.serialize(hierarchy))
    """

    def __init__(self, color_map: Optional[ColorMap] = None, direction: str = "TB"):
        """
        Initialize the serializer.

        Args:
            color_map: Palette used to resolve node and edge colors
            direction: Flow direction, one of "TB", "LR", "BT", "RL"

        Raises:
            ConfigError: If the direction is not recognized.
        """
        self.color_map = color_map or ColorMap()
        self.direction = validate_direction(direction)

    def serialize(self, hierarchy: Hierarchy) -> str:
        """
        Generate Mermaid flowchart syntax for a hierarchy.

        Every node in the hierarchy sequence is emitted at the top level,
        and nested nodes are emitted again inside their group's block.

        Raises:
            CyclicHierarchyError: If group containment forms a cycle.
        """
        self._check_acyclic(hierarchy)

        lines: List[str] = [f"graph {self.direction}"]
        styles: List[str] = []

        for node in hierarchy.nodes:
            self._emit_node(node, hierarchy, lines, styles, frozenset())

        for index, edge in enumerate(hierarchy.edges):
            lines.append(self._edge_line(edge))
            if edge.color:
                styles.append(self._edge_style(edge, index))

        lines.extend(styles)
        LOG.debug(
            "Serialized %d nodes and %d edges into %d lines",
            len(hierarchy.nodes),
            len(hierarchy.edges),
            len(lines),
        )
        return "\n".join(lines) + "\n"

    def _check_acyclic(self, hierarchy: Hierarchy) -> None:
        graph = hierarchy.to_graph()
        try:
            cycle = nx.find_cycle(graph)
        except nx.NetworkXNoCycle:
            return
        path = " -> ".join([source for source, _ in cycle] + [cycle[0][0]])
        raise CyclicHierarchyError(f"Cyclic group containment: {path}")

    def _emit_node(
        self,
        node: CanvasNode,
        hierarchy: Hierarchy,
        lines: List[str],
        styles: List[str],
        ancestors: FrozenSet[str],
    ) -> None:
        """
        Append the block for ``node`` to ``lines`` and its style to ``styles``.

        ``ancestors`` holds the ids of the groups currently being emitted.
        """
        if node.color:
            styles.append(self._node_style(node))

        if isinstance(node, GroupNode):
            if node.id in ancestors:
                raise CyclicHierarchyError(
                    f"Cyclic group containment at node {node.id}"
                )
            label = escape_label(node.label or "")
            lines.append(f'subgraph {node.id}["{label}"]')
            inner = ancestors | {node.id}
            for child_id in node.children or []:
                child = hierarchy.get(child_id)
                if child is None:
                    LOG.debug(
                        "Skipping unknown child %s of group %s", child_id, node.id
                    )
                    continue
                self._emit_node(child, hierarchy, lines, styles, inner)
            lines.append("end")
        elif isinstance(node, TextNode):
            lines.append(f'{node.id}["{escape_label(node.text)}"]')
        elif isinstance(node, FileNode):
            label = node.file + node.subpath if node.subpath else node.file
            lines.append(f'{node.id}["{escape_label(label)}"]')
        elif isinstance(node, LinkNode):
            lines.append(f'{node.id}["{escape_label(node.url)}"]')
        # Unrecognized variants produce no block

    def _edge_line(self, edge: CanvasEdge) -> str:
        connector = CONNECTORS.get(edge.ends(), DEFAULT_CONNECTOR)
        label = f" |{edge.label}|" if edge.label else ""
        return f"{edge.from_node} {connector}{label} {edge.to_node}"

    def _node_style(self, node: CanvasNode) -> str:
        fill = self.color_map.resolve(node.color)
        stroke = self.color_map.outline(node.color)
        return f"style {node.id} fill:{fill}, stroke:{stroke}"

    def _edge_style(self, edge: CanvasEdge, index: int) -> str:
        return f"linkStyle {index} stroke:{self.color_map.resolve(edge.color)}"


def render_flowchart(
    data: Any,
    custom_colors: Optional[Mapping[Any, str]] = None,
    direction: str = "TB",
) -> str:
    """
    Convert JSON Canvas data to a Mermaid flowchart.

    Args:
        data: Mapping with ``nodes`` and ``edges`` lists.
        custom_colors: Optional overrides for palette indices "1".."6",
            e.g. ``{"1": "#ff0000"}``. At most 6 entries.
        direction: "TB" (default), "LR", "BT" or "RL".

    Returns:
        Mermaid flowchart syntax.

    Raises:
        ConfigError: If the colors or direction are invalid.
        ValidationError: If the canvas data is invalid.
    """
    overrides = validate_custom_colors(
        {} if custom_colors is None else custom_colors
    )
    serializer = FlowchartSerializer(ColorMap(overrides), direction)

    hierarchy = HierarchyBuilder().build(parse_canvas(data))
    return serializer.serialize(hierarchy)
