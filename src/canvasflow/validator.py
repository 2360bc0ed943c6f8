"""
Validator module for canvas conversion.

Checks JSON Canvas data and the two render parameters (color overrides and
graph direction) before any conversion work starts, and turns valid canvas
data into typed models.
"""

import math
import re
from typing import Any, Dict, Mapping

from .errors import ConfigError, ValidationError
from .models import (
    EDGE_ENDS,
    EDGE_SIDES,
    GEOMETRY_KEYS,
    NODE_TYPES,
    Canvas,
    CanvasEdge,
    node_from_dict,
)

VALID_DIRECTIONS = ("TB", "LR", "BT", "RL")
MAX_CUSTOM_COLORS = 6

COLOR_KEY_PATTERN = re.compile(r"[1-6]")
HEX_COLOR_PATTERN = re.compile(r"#[0-9A-Fa-f]{6}")


def _is_non_empty_string(value: Any) -> bool:
    return isinstance(value, str) and value.strip() != ""


def _is_finite_number(value: Any) -> bool:
    # bool is an int subclass but never a coordinate
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return False
    return math.isfinite(value)


def _check_optional_string(
    item: Mapping[str, Any], key: str, message: str
) -> None:
    value = item.get(key)
    if value is not None and not isinstance(value, str):
        raise ValidationError(message)


def _validate_node(node: Any, index: int, node_ids: set) -> None:
    if not isinstance(node, Mapping):
        raise ValidationError(f"Invalid node at index {index}: must be an object")

    node_id = node.get("id")
    if not _is_non_empty_string(node_id):
        raise ValidationError(
            f"Invalid node at index {index}: id must be a non-empty string"
        )
    if node_id in node_ids:
        raise ValidationError(f"Duplicate node id: {node_id}")
    node_ids.add(node_id)

    node_type = node.get("type")
    if node_type not in NODE_TYPES:
        raise ValidationError(f"Invalid node type at index {index}: {node_type}")

    for key in GEOMETRY_KEYS:
        if not _is_finite_number(node.get(key)):
            raise ValidationError(
                f"Invalid node dimensions at index {index}: "
                f"{key} must be a finite number"
            )

    _check_optional_string(
        node, "color", f"Invalid node color at index {index}: must be a string"
    )

    if node_type == "text":
        if not isinstance(node.get("text"), str):
            raise ValidationError(
                f"Invalid text node at index {index}: text must be a string"
            )
    elif node_type == "file":
        if not _is_non_empty_string(node.get("file")):
            raise ValidationError(
                f"Invalid file node at index {index}: "
                "file must be a non-empty string"
            )
        _check_optional_string(
            node,
            "subpath",
            f"Invalid file node at index {index}: subpath must be a string",
        )
    elif node_type == "link":
        if not _is_non_empty_string(node.get("url")):
            raise ValidationError(
                f"Invalid link node at index {index}: "
                "url must be a non-empty string"
            )
    elif node_type == "group":
        _check_optional_string(
            node,
            "label",
            f"Invalid group node at index {index}: label must be a string",
        )


def _validate_edge(edge: Any, index: int, node_ids: set) -> None:
    if not isinstance(edge, Mapping):
        raise ValidationError(f"Invalid edge at index {index}: must be an object")

    if not _is_non_empty_string(edge.get("id")):
        raise ValidationError(
            f"Invalid edge at index {index}: id must be a non-empty string"
        )

    from_node = edge.get("fromNode")
    to_node = edge.get("toNode")
    if not isinstance(from_node, str) or from_node not in node_ids:
        raise ValidationError(
            f"Invalid edge at index {index}: fromNode {from_node!r} does not exist"
        )
    if not isinstance(to_node, str) or to_node not in node_ids:
        raise ValidationError(
            f"Invalid edge at index {index}: toNode {to_node!r} does not exist"
        )

    for key in ("fromSide", "toSide"):
        value = edge.get(key)
        if value is not None and value not in EDGE_SIDES:
            raise ValidationError(f"Invalid edge {key} at index {index}: {value}")

    for key in ("fromEnd", "toEnd"):
        value = edge.get(key)
        if value is not None and value not in EDGE_ENDS:
            raise ValidationError(f"Invalid edge {key} at index {index}: {value}")

    _check_optional_string(
        edge, "color", f"Invalid edge color at index {index}: must be a string"
    )
    _check_optional_string(
        edge, "label", f"Invalid edge label at index {index}: must be a string"
    )


def validate_canvas_data(data: Any) -> None:
    """
    Validate the structure and content of JSON Canvas data.

    Args:
        data: Mapping with ``nodes`` and ``edges`` lists.

    Raises:
        ValidationError: On the first structural or field-level defect. The
            message names the offending node/edge index and field.
    """
    if not isinstance(data, Mapping):
        raise ValidationError("Invalid data: must be an object")

    nodes = data.get("nodes")
    edges = data.get("edges")
    if not isinstance(nodes, list):
        raise ValidationError("Invalid data: nodes must be an array")
    if not isinstance(edges, list):
        raise ValidationError("Invalid data: edges must be an array")

    node_ids: set = set()
    for index, node in enumerate(nodes):
        _validate_node(node, index, node_ids)

    for index, edge in enumerate(edges):
        _validate_edge(edge, index, node_ids)


def validate_custom_colors(custom_colors: Any) -> Dict[str, str]:
    """
    Validate a palette override mapping.

    Keys may be given as strings or integers; they are returned as strings.

    Args:
        custom_colors: Mapping of palette index ("1".."6") to "#rrggbb".

    Returns:
        The overrides with normalized string keys.

    Raises:
        ConfigError: If the mapping is malformed.
    """
    if not isinstance(custom_colors, Mapping):
        raise ConfigError("Invalid custom colors: must be an object")

    if len(custom_colors) > MAX_CUSTOM_COLORS:
        raise ConfigError(
            f"Invalid custom colors: maximum of {MAX_CUSTOM_COLORS} colors allowed"
        )

    normalized: Dict[str, str] = {}
    for key, value in custom_colors.items():
        str_key = key if isinstance(key, str) else str(key)
        if isinstance(key, bool) or not COLOR_KEY_PATTERN.fullmatch(str_key):
            raise ConfigError(
                f"Invalid color key: {key}. Must be a number from 1 to 6."
            )
        if not isinstance(value, str) or not HEX_COLOR_PATTERN.fullmatch(value):
            raise ConfigError(
                f"Invalid color value for key {key}: {value}. "
                "Must be a valid hex color code."
            )
        if str_key in normalized:
            raise ConfigError(f"Duplicate color key: {key}")
        normalized[str_key] = value

    return normalized


def validate_direction(direction: Any) -> str:
    """
    Validate the flowchart direction token.

    Raises:
        ConfigError: Unless ``direction`` is exactly one of TB, LR, BT, RL.
    """
    if direction not in VALID_DIRECTIONS:
        raise ConfigError(
            f"Invalid graph direction {direction}. "
            'Only "TB", "LR", "BT", and "RL" are allowed.'
        )
    return direction


def parse_canvas(data: Any) -> Canvas:
    """
    Validate canvas data and convert it to typed models.

    Raises:
        ValidationError: If the data is invalid.
    """
    validate_canvas_data(data)
    return Canvas(
        nodes=[node_from_dict(node) for node in data["nodes"]],
        edges=[CanvasEdge.from_dict(edge) for edge in data["edges"]],
    )
