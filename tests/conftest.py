"""Pytest configuration and shared fixtures for techtree tests."""

import pytest

from techtree import GraphModel, Node, NodeType, TechTreeGenerator, TreeEditor


@pytest.fixture
def abc_model():
    """A starter with two nodes that follow it."""
    return GraphModel(
        [
            Node("A"),
            Node("B", relations=("A",)),
            Node("C", relations=("A",)),
        ]
    )


@pytest.fixture
def chain_model():
    """A -> B -> C -> D chain."""
    return GraphModel(
        [
            Node("A"),
            Node("B", relations=("A",)),
            Node("C", relations=("B",)),
            Node("D", relations=("C",)),
        ]
    )


@pytest.fixture
def tree_records():
    """Plain records as loaded from the static data source."""
    return [
        {"title": "Cell Biology", "type": "core-technology", "relations": []},
        {
            "title": "Gene Therapy",
            "type": "longevity-tech",
            "relations": ["Cell Biology"],
        },
        {
            "title": "Senolytics",
            "type": "longevity-tech",
            "relations": ["Cell Biology"],
        },
        {"title": "Computing", "type": "general-improvement", "relations": []},
        {
            "title": "Biomarkers",
            "type": "core-technology",
            "relations": ["Computing", "Gene Therapy"],
        },
    ]


@pytest.fixture
def two_starters_model():
    return GraphModel(
        [
            Node("Cell Biology"),
            Node("Computing", type=NodeType.GENERAL_IMPROVEMENT),
        ]
    )


@pytest.fixture
def generator():
    """Default TechTreeGenerator instance."""
    return TechTreeGenerator()


@pytest.fixture
def editor(abc_model):
    """Editor over the A/B/C model."""
    return TreeEditor(abc_model)
