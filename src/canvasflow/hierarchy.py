"""
Hierarchy module for canvas conversion.

Resolves which group encloses each node purely from geometry:
- Groups are ordered by ascending area into a working sequence
- A group's parent is the first later group containing its midpoint
- Any other node's parent is the first group, from the start of the
  sequence, containing its center (i.e. the smallest enclosing group)
"""

import dataclasses
from typing import Any, Dict, List, Optional

from .logging import get_logger
from .models import Canvas, CanvasNode, Hierarchy
from .validator import parse_canvas

LOG = get_logger(__name__)


class HierarchyBuilder:
    """
    Builds the group containment hierarchy of a canvas.

    Example:
        >>> builder = HierarchyBuilder()
        >>> hierarchy = builder.build(parse_canvas(data))
        >>> hierarchy.parent_of("node-id")
    """

    def build(self, canvas: Canvas) -> Hierarchy:
        """
        Compute ``children`` for every node of an already validated canvas.

        The input canvas is not modified; nodes in the result are copies.

        Args:
            canvas: Validated canvas document.

        Returns:
            Hierarchy with nodes in working order and the edges unchanged.
        """
        working = self._order_by_area(canvas.nodes)

        nodes = [
            dataclasses.replace(node, children=[] if node.is_group else None)
            for node in working
        ]
        node_map: Dict[str, CanvasNode] = {node.id: node for node in nodes}

        for index, node in enumerate(working):
            if node.is_group:
                parent = self._find_enclosing_group(node, working, index)
            else:
                parent = self._find_smallest_group(node, working)
            if parent is not None:
                node_map[parent.id].children.append(node.id)

        LOG.debug(
            "Built hierarchy for %d nodes (%d groups), %d edges",
            len(nodes),
            sum(1 for node in nodes if node.is_group),
            len(canvas.edges),
        )
        return Hierarchy(nodes=nodes, edges=list(canvas.edges))

    def _order_by_area(self, nodes: List[CanvasNode]) -> List[CanvasNode]:
        """
        Sort groups by ascending area, leaving other nodes where they are.

        Groups are sorted stably (equal areas keep input order) and put back
        into the positions groups held in the input.
        """
        group_slots = [i for i, node in enumerate(nodes) if node.is_group]
        sorted_groups = sorted(
            (nodes[i] for i in group_slots), key=lambda node: node.area
        )

        working = list(nodes)
        for slot, group in zip(group_slots, sorted_groups):
            working[slot] = group
        return working

    def _find_enclosing_group(
        self, group: CanvasNode, working: List[CanvasNode], index: int
    ) -> Optional[CanvasNode]:
        """
        Find the parent of a group.

        Only groups after ``index`` in the working sequence (same size or
        larger) are candidates; the first one containing the midpoint wins.
        """
        midpoint = group.midpoint()
        for candidate in working[index + 1 :]:
            if candidate.is_group and candidate.contains(midpoint):
                return candidate
        return None

    def _find_smallest_group(
        self, node: CanvasNode, working: List[CanvasNode]
    ) -> Optional[CanvasNode]:
        """
        Find the parent of a non-group node.

        Scans the whole working sequence, so the smallest group containing
        the node's center wins.
        """
        center = node.midpoint()
        for candidate in working:
            if candidate.is_group and candidate.contains(center):
                return candidate
        return None


def build_hierarchy(data: Any) -> Dict[str, List[Any]]:
    """
    Validate JSON Canvas data and build its containment hierarchy.

    Args:
        data: Mapping with ``nodes`` and ``edges`` lists.

    Returns:
        ``{"nodes": [...], "edges": [...]}`` where every node mapping gains a
        ``children`` key (list of ids for groups, ``None`` otherwise) and
        ``edges`` holds the input edge mappings in their original order.

    Raises:
        ValidationError: If the data is invalid.
    """
    canvas = parse_canvas(data)
    hierarchy = HierarchyBuilder().build(canvas)
    return {
        "nodes": [node.to_dict() for node in hierarchy.nodes],
        "edges": list(data["edges"]),
    }
