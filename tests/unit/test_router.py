"""Unit tests for the router module."""

import pytest

from techtree import load_nodes
from techtree.layout import ConnectorSource, NodePlacement, Position, TreeLayout
from techtree.model import Node
from techtree.router import (
    REVEAL_TIMINGS,
    Connector,
    ConnectorRouter,
    Segment,
    SegmentKind,
    connector_weight,
)


@pytest.fixture
def router():
    return ConnectorRouter()


def make_placement(title, top, left, *sources):
    return NodePlacement(Node(title), Position(top, left), tuple(sources))


class TestSegmentKind:
    """Tests for SegmentKind enum."""

    def test_segment_kind_values(self):
        assert SegmentKind.OUT.value == "out"
        assert SegmentKind.ACROSS.value == "across"
        assert SegmentKind.IN.value == "in"

    def test_reveal_is_staggered(self):
        """Each segment starts once the previous one has finished."""
        out_begin, out_duration = REVEAL_TIMINGS[SegmentKind.OUT]
        across_begin, across_duration = REVEAL_TIMINGS[SegmentKind.ACROSS]
        in_begin, _ = REVEAL_TIMINGS[SegmentKind.IN]
        assert out_begin == 0
        assert across_begin == out_begin + out_duration
        assert in_begin == across_begin + across_duration


class TestConnectorWeight:
    """Tests for distance based opacity."""

    @pytest.mark.parametrize(
        "distance,expected",
        [
            (0, 1.0),
            (199, 1.0),
            (200, 1.0),
            (201, 0.75),
            (399, 0.75),
            (400, 0.75),
            (401, 0.5),
            (599, 0.5),
            (600, 0.5),
            (601, 0.25),
            (2500, 0.25),
            (-250, 0.75),
        ],
    )
    def test_breakpoints(self, distance, expected):
        assert connector_weight(distance) == expected

    def test_monotonic(self):
        """Weight never increases with distance."""
        weights = [connector_weight(d) for d in range(0, 1000, 25)]
        assert weights == sorted(weights, reverse=True)


class TestAnchorOffsets:
    """Tests for vertical distribution of incoming connectors."""

    def test_single_connector_centered(self, router):
        assert router.anchor_offsets(1) == [17.5]

    def test_multiple_connectors_step_by_marker(self, router):
        assert router.anchor_offsets(3) == [5.5, 17.5, 29.5]

    def test_no_connectors(self, router):
        assert router.anchor_offsets(0) == []

    def test_custom_heights(self):
        router = ConnectorRouter(node_height=60, marker_height=10)
        assert router.anchor_offsets(2) == [20, 30]


class TestRoute:
    """Tests for elbow routing of a single node."""

    def test_elbow_geometry(self, router):
        """Out, across and in segments for B following A."""
        placement = make_placement("B", 100, 110, ConnectorSource("a", 100, 0))
        (connector,) = router.route(placement)

        assert connector.source_id == "a"
        assert connector.target_id == "b"
        assert connector.anchor_offset == 17.5
        assert connector.weight == 1.0
        assert connector.segments == (
            Segment(SegmentKind.OUT, 10, 117.5, 57.5, 117.5),
            Segment(SegmentKind.ACROSS, 57.5, 117.5, 57.5, 117.5),
            Segment(SegmentKind.IN, 57.5, 117.5, 110, 117.5),
        )

    def test_segment_orientation(self, router):
        """First and last segments are horizontal, the middle one vertical."""
        placement = make_placement("C", 300, 110, ConnectorSource("a", 100, 0))
        (connector,) = router.route(placement)
        out, across, into = connector.segments
        assert out.is_horizontal
        assert across.is_vertical
        assert into.is_horizontal
        assert (across.y1, across.y2) == (117.5, 317.5)
        assert into.x2 == 110

    def test_waypoints_are_continuous(self, router):
        placement = make_placement("C", 300, 110, ConnectorSource("a", 100, 0))
        (connector,) = router.route(placement)
        assert connector.waypoints == [
            (10, 117.5),
            (57.5, 117.5),
            (57.5, 317.5),
            (110, 317.5),
        ]

    def test_multiple_sources_keep_order(self, router):
        """Connectors follow source order and take successive anchors."""
        placement = make_placement(
            "Biomarkers",
            300,
            190,
            ConnectorSource("gene-therapy", 100, 220),
            ConnectorSource("computing", 300, 0),
        )
        first, second = router.route(placement)

        assert (first.source_id, first.anchor_offset) == ("gene-therapy", 11.5)
        assert (second.source_id, second.anchor_offset) == ("computing", 23.5)
        assert first.weight == 1.0
        assert second.weight == 1.0
        assert first.segments[0].x1 == 220 + 12 * 10
        assert first.segments[1].x1 == 190 - (11.5 + 35)
        assert second.segments[1].x1 == 190 - (23.5 + 35)

    def test_no_sources_no_connectors(self, router):
        assert router.route(make_placement("A", 100, 0)) == []

    def test_weight_fades_with_distance(self, router):
        placement = make_placement("Far", 800, 110, ConnectorSource("a", 100, 0))
        (connector,) = router.route(placement)
        assert connector.weight == 0.25


class TestRouteAll:
    """Tests for routing every node of a layout."""

    def test_route_all_matches_layout(self, router, tree_records):
        result = TreeLayout().layout(load_nodes(tree_records))
        routes = router.route_all(result)

        assert list(routes) == [p.id for p in result]
        assert routes["cell-biology"] == []
        assert [c.source_id for c in routes["biomarkers"]] == [
            "gene-therapy",
            "computing",
        ]

    def test_deterministic(self, router, tree_records):
        result = TreeLayout().layout(load_nodes(tree_records))
        assert router.route_all(result) == router.route_all(result)

    def test_connector_is_value_object(self):
        segment = Segment(SegmentKind.OUT, 0, 0, 1, 0)
        assert Connector("a", "b", 1, 1.0, (segment,)) == Connector(
            "a", "b", 1, 1.0, (segment,)
        )
