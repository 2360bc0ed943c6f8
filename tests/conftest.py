"""Pytest configuration and shared fixtures for canvasflow tests."""

import copy

import pytest

from canvasflow import HierarchyBuilder, parse_canvas


def _make_node(node_id, node_type, x, y, width, height, **fields):
    """Build a raw canvas node mapping."""
    node = {
        "id": node_id,
        "type": node_type,
        "x": x,
        "y": y,
        "width": width,
        "height": height,
    }
    if node_type == "text":
        node.setdefault("text", node_id)
    node.update(fields)
    return node


@pytest.fixture
def example_canvas():
    """One labeled group holding two colored text nodes joined by an edge."""
    return {
        "nodes": [
            {
                "id": "6f002d2b0257ffa4",
                "x": -1601,
                "y": -826,
                "width": 631,
                "height": 100,
                "color": "#248a42",
                "type": "group",
                "label": "Group One",
            },
            {
                "id": "5696e6f4d7feef3b",
                "x": -1581,
                "y": -806,
                "width": 250,
                "height": 60,
                "color": "4",
                "type": "text",
                "text": "Node One",
            },
            {
                "id": "eb886f14ff2b15a1",
                "x": -1240,
                "y": -806,
                "width": 250,
                "height": 60,
                "color": "6",
                "type": "text",
                "text": "Node Two",
            },
        ],
        "edges": [
            {
                "id": "ed452a5525485f24",
                "fromNode": "5696e6f4d7feef3b",
                "fromSide": "right",
                "toNode": "eb886f14ff2b15a1",
                "toSide": "left",
                "color": "2",
            }
        ],
    }


@pytest.fixture
def nested_canvas():
    """Groups A > B > C by area and geometry, with a leaf inside C."""
    return {
        "nodes": [
            _make_node("A", "group", 0, 0, 600, 600, label="Outer"),
            _make_node("B", "group", 50, 50, 300, 300, label="Middle"),
            _make_node("C", "group", 100, 100, 100, 100, label="Inner"),
            _make_node("leaf", "text", 120, 120, 20, 20),
            _make_node("outside", "text", 1000, 1000, 50, 50),
        ],
        "edges": [],
    }


@pytest.fixture
def overlap_canvas():
    """
    Two overlapping groups of different area plus a mid-sized group and a
    leaf, both centered at (75, 75) inside the overlap.
    """
    return {
        "nodes": [
            _make_node("large", "group", 50, 50, 200, 200),
            _make_node("small", "group", 0, 0, 100, 100),
            _make_node("middle", "group", 15, 15, 120, 120),
            _make_node("leaf", "text", 70, 70, 10, 10),
        ],
        "edges": [],
    }


@pytest.fixture
def make_node():
    """Factory for raw canvas node mappings."""
    return _make_node


@pytest.fixture
def builder():
    """Default HierarchyBuilder instance."""
    return HierarchyBuilder()


@pytest.fixture
def build(builder):
    """Build a typed hierarchy from raw canvas data."""

    def _build(data):
        return builder.build(parse_canvas(copy.deepcopy(data)))

    return _build
