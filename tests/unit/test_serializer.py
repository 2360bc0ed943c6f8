"""Unit tests for the serializer module."""

import pytest

from canvasflow.colors import ColorMap
from canvasflow.errors import ConfigError, CyclicHierarchyError, ValidationError
from canvasflow.models import (
    CanvasEdge,
    CanvasNode,
    FileNode,
    GroupNode,
    Hierarchy,
    LinkNode,
    TextNode,
)
from canvasflow.serializer import FlowchartSerializer, escape_label, render_flowchart


@pytest.fixture
def serializer():
    """FlowchartSerializer with the default palette."""
    return FlowchartSerializer()


@pytest.fixture
def two_nodes(make_node):
    """Two text nodes, no edges yet."""
    return {
        "nodes": [
            make_node("node1", "text", 0, 0, 100, 50, text="Node 1"),
            make_node("node2", "text", 200, 0, 100, 50, text="Node 2"),
        ],
        "edges": [],
    }


class TestFlowchartSerializerInit:
    """Tests for FlowchartSerializer initialization."""

    def test_default_direction(self, serializer):
        """Test that the default direction is TB."""
        assert serializer.direction == "TB"

    def test_all_directions_accepted(self):
        """Test that every valid direction is accepted."""
        for direction in ("TB", "LR", "BT", "RL"):
            assert FlowchartSerializer(direction=direction).direction == direction

    def test_invalid_direction(self):
        """Test that an unknown direction raises ConfigError."""
        with pytest.raises(ConfigError):
            FlowchartSerializer(direction="XX")

    def test_direction_is_case_sensitive(self):
        """Test that lowercase direction tokens are rejected."""
        with pytest.raises(ConfigError):
            FlowchartSerializer(direction="lr")


class TestNodeBlocks:
    """Tests for node block syntax."""

    def test_header_line(self, serializer):
        """Test that output starts with the graph header."""
        result = serializer.serialize(Hierarchy())
        assert result == "graph TB\n"

    def test_text_node(self, serializer):
        """Test text node syntax."""
        node = TextNode(id="t", x=0, y=0, width=1, height=1, text="Hello")
        result = serializer.serialize(Hierarchy(nodes=[node]))
        assert result == 'graph TB\nt["Hello"]\n'

    def test_empty_text_becomes_space(self, serializer):
        """Test that empty text renders as a single space."""
        node = TextNode(id="t", x=0, y=0, width=1, height=1, text="")
        assert 't[" "]' in serializer.serialize(Hierarchy(nodes=[node]))

    def test_file_node(self, serializer):
        """Test file node syntax without subpath."""
        node = FileNode(id="f", x=0, y=0, width=1, height=1, file="example.txt")
        assert 'f["example.txt"]' in serializer.serialize(Hierarchy(nodes=[node]))

    def test_file_node_with_subpath(self, serializer):
        """Test that the subpath is appended to the file name."""
        node = FileNode(
            id="f", x=0, y=0, width=1, height=1, file="notes.md", subpath="#Heading"
        )
        assert 'f["notes.md#Heading"]' in serializer.serialize(Hierarchy(nodes=[node]))

    def test_link_node(self, serializer):
        """Test link node syntax."""
        node = LinkNode(id="l", x=0, y=0, width=1, height=1, url="https://example.com")
        result = serializer.serialize(Hierarchy(nodes=[node]))
        assert 'l["https://example.com"]' in result

    def test_unrecognized_variant_has_no_block(self, serializer):
        """Test that a bare CanvasNode contributes nothing."""
        node = CanvasNode(id="x", x=0, y=0, width=1, height=1)
        assert serializer.serialize(Hierarchy(nodes=[node])) == "graph TB\n"

    def test_quotes_escaped(self, serializer):
        """Test that double quotes cannot end the label early."""
        node = TextNode(id="t", x=0, y=0, width=1, height=1, text='say "hi"')
        result = serializer.serialize(Hierarchy(nodes=[node]))
        assert 't["say #quot;hi#quot;"]' in result

    def test_escape_label(self):
        """Test escape_label directly."""
        assert escape_label("") == " "
        assert escape_label("plain") == "plain"
        assert escape_label('a"b') == "a#quot;b"


class TestGroupBlocks:
    """Tests for subgraph emission."""

    def test_empty_group(self, serializer):
        """Test a group with no children."""
        group = GroupNode(id="g", x=0, y=0, width=1, height=1, label="G", children=[])
        result = serializer.serialize(Hierarchy(nodes=[group]))
        assert result == 'graph TB\nsubgraph g["G"]\nend\n'

    def test_empty_label_becomes_space(self, serializer):
        """Test that an empty group label renders as a single space."""
        group = GroupNode(id="g", x=0, y=0, width=1, height=1, label="", children=[])
        assert 'subgraph g[" "]' in serializer.serialize(Hierarchy(nodes=[group]))

    def test_missing_label_becomes_space(self, serializer):
        """Test that a group without a label renders as a single space."""
        group = GroupNode(id="g", x=0, y=0, width=1, height=1, children=[])
        assert 'subgraph g[" "]' in serializer.serialize(Hierarchy(nodes=[group]))

    def test_children_nested_and_repeated_at_top_level(self, serializer):
        """Test that children appear inside the group and again on their own."""
        group = GroupNode(
            id="g", x=0, y=0, width=100, height=100, label="G", children=["t"]
        )
        text = TextNode(id="t", x=10, y=10, width=10, height=10, text="T")
        result = serializer.serialize(Hierarchy(nodes=[group, text]))
        assert result == (
            "graph TB\n"
            'subgraph g["G"]\n'
            't["T"]\n'
            "end\n"
            't["T"]\n'
        )

    def test_nested_groups(self, build, nested_canvas, serializer):
        """Test that nested groups produce nested subgraph blocks."""
        result = serializer.serialize(build(nested_canvas))
        lines = result.splitlines()
        # A is emitted at top level after C and B; its block holds B holding C
        start = lines.index('subgraph A["Outer"]')
        assert lines[start : start + 8] == [
            'subgraph A["Outer"]',
            'subgraph B["Middle"]',
            'subgraph C["Inner"]',
            'leaf["leaf"]',
            "end",
            "end",
            "end",
            'leaf["leaf"]',
        ]

    def test_unknown_child_skipped(self, serializer):
        """Test that an unresolvable child id is skipped silently."""
        group = GroupNode(
            id="g", x=0, y=0, width=1, height=1, label="G", children=["ghost"]
        )
        result = serializer.serialize(Hierarchy(nodes=[group]))
        assert result == 'graph TB\nsubgraph g["G"]\nend\n'

    def test_cycle_raises(self, serializer):
        """Test that cyclic containment raises instead of recursing."""
        first = GroupNode(id="a", x=0, y=0, width=1, height=1, children=["b"])
        second = GroupNode(id="b", x=0, y=0, width=1, height=1, children=["a"])
        with pytest.raises(CyclicHierarchyError) as exc_info:
            serializer.serialize(Hierarchy(nodes=[first, second]))
        assert "a" in str(exc_info.value)

    def test_self_containment_raises(self, serializer):
        """Test that a group listing itself as a child raises."""
        group = GroupNode(id="g", x=0, y=0, width=1, height=1, children=["g"])
        with pytest.raises(CyclicHierarchyError):
            serializer.serialize(Hierarchy(nodes=[group]))


class TestEdgeLines:
    """Tests for edge syntax."""

    @pytest.mark.parametrize(
        "from_end,to_end,connector",
        [
            ("none", "arrow", "-->"),
            ("arrow", "none", "<--"),
            ("arrow", "arrow", "<-->"),
            ("none", "none", "---"),
            (None, None, "-->"),
            ("arrow", None, "<-->"),
            (None, "none", "---"),
        ],
    )
    def test_connectors(self, serializer, from_end, to_end, connector):
        """Test connector lookup, including canvas defaults."""
        edge = CanvasEdge(
            id="e", from_node="a", to_node="b", from_end=from_end, to_end=to_end
        )
        result = serializer.serialize(Hierarchy(edges=[edge]))
        assert f"a {connector} b" in result

    def test_unknown_end_pair_falls_back(self, serializer):
        """Test that an unexpected end combination renders a plain line."""
        edge = CanvasEdge(id="e", from_node="a", to_node="b", from_end="circle")
        assert "a --- b" in serializer.serialize(Hierarchy(edges=[edge]))

    def test_edge_label(self, serializer):
        """Test that a label is placed next to the connector."""
        edge = CanvasEdge(id="e", from_node="a", to_node="b", label="Connection")
        assert "a --> |Connection| b" in serializer.serialize(Hierarchy(edges=[edge]))

    def test_empty_edge_label_omitted(self, serializer):
        """Test that an empty label adds nothing."""
        edge = CanvasEdge(id="e", from_node="a", to_node="b", label="")
        assert "a --> b\n" in serializer.serialize(Hierarchy(edges=[edge]))


class TestStyles:
    """Tests for style directive accumulation."""

    def test_node_style_uses_default_palette(self, serializer):
        """Test node style with a default palette index."""
        node = TextNode(id="t", x=0, y=0, width=1, height=1, text="T", color="1")
        result = serializer.serialize(Hierarchy(nodes=[node]))
        assert "style t fill:#fb464c, stroke:#c81319" in result

    def test_node_style_literal_color(self, serializer):
        """Test that a literal color passes through."""
        node = TextNode(id="t", x=0, y=0, width=1, height=1, text="T", color="#248a42")
        result = serializer.serialize(Hierarchy(nodes=[node]))
        assert "style t fill:#248a42, stroke:#00570f" in result

    def test_node_style_override(self):
        """Test that an override replaces only its own index."""
        serializer = FlowchartSerializer(ColorMap({"1": "#ff0000"}))
        nodes = [
            TextNode(id="a", x=0, y=0, width=1, height=1, text="A", color="1"),
            TextNode(id="b", x=0, y=0, width=1, height=1, text="B", color="3"),
        ]
        result = serializer.serialize(Hierarchy(nodes=nodes))
        assert "style a fill:#ff0000, stroke:#cc0000" in result
        assert "style b fill:#e0de71" in result

    def test_uncolored_node_has_no_style(self, serializer):
        """Test that nodes without color add no style line."""
        node = TextNode(id="t", x=0, y=0, width=1, height=1, text="T")
        assert "style" not in serializer.serialize(Hierarchy(nodes=[node]))

    def test_edge_style_index_counts_uncolored_edges(self, serializer):
        """Test that the edge style index is the edge's position."""
        edges = [
            CanvasEdge(id="e0", from_node="a", to_node="b"),
            CanvasEdge(id="e1", from_node="b", to_node="a", color="5"),
        ]
        result = serializer.serialize(Hierarchy(edges=edges))
        assert "linkStyle 1 stroke:#53dfdd" in result
        assert "linkStyle 0" not in result

    def test_styles_follow_edges(self, serializer):
        """Test that node styles come after edges and before edge styles."""
        node = TextNode(id="t", x=0, y=0, width=1, height=1, text="T", color="2")
        edge = CanvasEdge(id="e", from_node="t", to_node="t", color="4")
        result = serializer.serialize(Hierarchy(nodes=[node], edges=[edge]))
        assert result.splitlines() == [
            "graph TB",
            't["T"]',
            "t --> t",
            "style t fill:#e9973f, stroke:#b6640c",
            "linkStyle 0 stroke:#44cf6e",
        ]

    def test_nested_colored_node_styled_per_visit(self, serializer):
        """Test that a nested node gets a style line for each emission."""
        group = GroupNode(
            id="g", x=0, y=0, width=100, height=100, children=["t"], color="6"
        )
        text = TextNode(id="t", x=10, y=10, width=10, height=10, text="T", color="4")
        result = serializer.serialize(Hierarchy(nodes=[group, text]))
        styles = [line for line in result.splitlines() if line.startswith("style")]
        assert styles == [
            "style g fill:#a882ff, stroke:#754fcc",
            "style t fill:#44cf6e, stroke:#119c3b",
            "style t fill:#44cf6e, stroke:#119c3b",
        ]


class TestRenderFlowchart:
    """Tests for the render_flowchart convenience function."""

    def test_simple_graph(self, two_nodes):
        """Test a two-node graph with one edge."""
        two_nodes["edges"].append({"id": "e", "fromNode": "node1", "toNode": "node2"})
        result = render_flowchart(two_nodes)
        assert result == (
            "graph TB\n"
            'node1["Node 1"]\n'
            'node2["Node 2"]\n'
            "node1 --> node2\n"
        )

    def test_direction(self, two_nodes):
        """Test that the direction reaches the header."""
        assert render_flowchart(two_nodes, {}, "LR").startswith("graph LR\n")

    def test_invalid_direction(self, two_nodes):
        """Test that an invalid direction raises before any output."""
        with pytest.raises(ConfigError):
            render_flowchart(two_nodes, {}, "XX")

    def test_custom_color_override(self, two_nodes):
        """Test that custom colors apply to nodes."""
        two_nodes["nodes"][0]["color"] = "1"
        result = render_flowchart(two_nodes, {"1": "#ff0000"})
        assert "style node1 fill:#ff0000" in result

    def test_integer_color_keys(self, two_nodes):
        """Test that integer palette keys are accepted."""
        two_nodes["edges"].append(
            {"id": "e", "fromNode": "node1", "toNode": "node1", "color": "2"}
        )
        result = render_flowchart(two_nodes, {2: "#00ff00"})
        assert "linkStyle 0 stroke:#00ff00" in result

    def test_invalid_colors_checked_before_data(self):
        """Test that color overrides are validated before the data."""
        with pytest.raises(ConfigError):
            render_flowchart("not a canvas", {"7": "#000000"})

    def test_invalid_data(self):
        """Test that invalid data raises ValidationError."""
        with pytest.raises(ValidationError):
            render_flowchart({"nodes": [], "edges": None})

    def test_colors_not_a_mapping(self, two_nodes):
        """Test that a non-mapping color argument raises ConfigError."""
        with pytest.raises(ConfigError):
            render_flowchart(two_nodes, ["#ff0000"])
