"""Unit tests for the model module."""

import pytest

from techtree.model import (
    GraphModel,
    Node,
    NodeType,
    ValidationError,
    ValidationReport,
    derive_id,
)


class TestDeriveId:
    """Tests for id derivation from titles."""

    def test_lowercase_and_separator(self):
        assert derive_id("Gene Therapy") == "gene-therapy"

    def test_every_whitespace_character_replaced(self):
        assert derive_id("Multi  Space\tTab") == "multi--space-tab"

    def test_single_word(self):
        assert derive_id("AI") == "ai"


class TestNodeType:
    """Tests for NodeType enum."""

    def test_values(self):
        assert NodeType.CORE_TECHNOLOGY.value == "core-technology"
        assert NodeType.LONGEVITY_TECH.value == "longevity-tech"
        assert NodeType.GENERAL_IMPROVEMENT.value == "general-improvement"

    @pytest.mark.parametrize(
        "value,expected",
        [
            ("core-technology", NodeType.CORE_TECHNOLOGY),
            ("Longevity Tech", NodeType.LONGEVITY_TECH),
            (" general improvement ", NodeType.GENERAL_IMPROVEMENT),
            (NodeType.LONGEVITY_TECH, NodeType.LONGEVITY_TECH),
        ],
    )
    def test_parse(self, value, expected):
        assert NodeType.parse(value) == expected

    def test_parse_unknown(self):
        with pytest.raises(ValidationError):
            NodeType.parse("magic")
        with pytest.raises(ValueError):
            NodeType.parse(3)

    def test_label(self):
        assert NodeType.CORE_TECHNOLOGY.label == "Core Technology"


class TestNode:
    """Tests for Node dataclass."""

    def test_defaults(self):
        node = Node("A")
        assert node.type == NodeType.CORE_TECHNOLOGY
        assert node.relations == ()
        assert node.is_starter
        assert node.primary_relation is None

    def test_relations_stored_as_tuple(self):
        node = Node("B", "longevity-tech", ["A", "C"])
        assert node.relations == ("A", "C")
        assert node.type == NodeType.LONGEVITY_TECH
        assert node.primary_relation == "A"
        assert not node.is_starter

    def test_relations_text(self):
        assert Node("B", relations=("A", "Cell Biology")).relations_text == (
            "A, Cell Biology"
        )

    def test_to_dict(self):
        node = Node("Gene Therapy", NodeType.LONGEVITY_TECH, ("Cell Biology",))
        assert node.to_dict() == {
            "title": "Gene Therapy",
            "type": "longevity-tech",
            "relations": ["Cell Biology"],
        }

    def test_frozen(self):
        node = Node("A")
        with pytest.raises(AttributeError):
            node.title = "B"


class TestGraphModel:
    """Tests for GraphModel updates and lookups."""

    def test_lookups(self, abc_model):
        assert len(abc_model) == 3
        assert abc_model.index_of_title("B") == 1
        assert abc_model.index_of_id("c") == 2
        assert abc_model.find_by_title("Missing") is None
        assert abc_model.find_by_id("a").title == "A"

    def test_updates_return_new_models(self, abc_model):
        inserted = abc_model.insert(1, Node("X"))
        assert inserted.titles() == ["A", "X", "B", "C"]
        assert abc_model.titles() == ["A", "B", "C"]

        assert abc_model.remove_at(0).titles() == ["B", "C"]
        assert abc_model.replace_at(2, Node("Z")).titles() == ["A", "B", "Z"]
        assert abc_model.without_title("B").titles() == ["A", "C"]
        assert abc_model.without_id("c").titles() == ["A", "B"]

    def test_rename_relations(self, abc_model):
        renamed = abc_model.rename_relations("A", "A2", skip_index=2)
        assert renamed.find_by_title("B").relations == ("A2",)
        assert renamed.find_by_title("C").relations == ("A",)

    def test_equality(self, abc_model):
        assert abc_model == GraphModel(list(abc_model))
        assert abc_model != abc_model.remove_at(0)

    def test_to_records(self, abc_model):
        records = abc_model.to_records()
        assert records[1] == {
            "title": "B",
            "type": "core-technology",
            "relations": ["A"],
        }

    def test_to_networkx(self, abc_model):
        graph = abc_model.to_networkx()
        assert set(graph.edges()) == {("a", "b"), ("a", "c")}
        assert graph.nodes["b"]["title"] == "B"


class TestValidate:
    """Tests for structural validation."""

    def test_clean_model(self, abc_model):
        report = abc_model.validate()
        assert report == ValidationReport()
        assert not report.has_errors
        report.raise_for_errors()

    def test_duplicate_ids(self):
        report = GraphModel([Node("Gene Therapy"), Node("gene therapy")]).validate()
        assert report.duplicate_ids == ["gene-therapy"]
        with pytest.raises(ValidationError, match="Duplicate"):
            report.raise_for_errors()

    def test_self_reference(self):
        report = GraphModel([Node("A", relations=("A",))]).validate()
        assert report.self_references == ["A"]
        assert report.cycles == []
        assert report.has_errors

    def test_dangling_is_only_a_warning(self):
        report = GraphModel([Node("B", relations=("A",))]).validate()
        assert report.dangling == [("B", "A")]
        assert not report.has_errors
        assert report.warnings() == ["Node 'B' refers to missing node 'A'"]

    def test_cycle(self):
        report = GraphModel(
            [Node("A", relations=("B",)), Node("B", relations=("A",))]
        ).validate()
        assert report.cycles == [["a", "b"]]
        assert report.has_errors
