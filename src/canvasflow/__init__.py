"""
canvasflow - JSON Canvas to Mermaid flowcharts

Resolves which nodes of a JSON Canvas document sit inside which groups,
purely from geometry, and writes the result as Mermaid flowchart syntax.

Example:
    >>> from canvasflow import render_flowchart
    >>> print(render_flowchart(data, {"1": "#ff0000"}, "LR"))

Hierarchy Example:
    >>> from canvasflow import build_hierarchy
    >>> hierarchy = build_hierarchy(data)
    >>> [node["children"] for node in hierarchy["nodes"]]
"""

from .colors import DEFAULT_COLORS, ColorMap, adjust_brightness
from .errors import (
    CanvasFlowError,
    ConfigError,
    CyclicHierarchyError,
    ValidationError,
)
from .hierarchy import HierarchyBuilder, build_hierarchy
from .loader import load_canvas
from .models import (
    Canvas,
    CanvasEdge,
    CanvasNode,
    FileNode,
    GroupNode,
    Hierarchy,
    LinkNode,
    TextNode,
)
from .serializer import FlowchartSerializer, render_flowchart
from .validator import (
    parse_canvas,
    validate_canvas_data,
    validate_custom_colors,
    validate_direction,
)

__version__ = "0.1.0"

__all__ = [
    # Main API
    "build_hierarchy",
    "render_flowchart",
    "load_canvas",
    # Validation
    "parse_canvas",
    "validate_canvas_data",
    "validate_custom_colors",
    "validate_direction",
    # Pipeline stages
    "HierarchyBuilder",
    "FlowchartSerializer",
    "ColorMap",
    "DEFAULT_COLORS",
    "adjust_brightness",
    # Models
    "Canvas",
    "CanvasEdge",
    "CanvasNode",
    "TextNode",
    "FileNode",
    "LinkNode",
    "GroupNode",
    "Hierarchy",
    # Errors
    "CanvasFlowError",
    "ValidationError",
    "ConfigError",
    "CyclicHierarchyError",
]
