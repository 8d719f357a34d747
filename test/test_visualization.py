#!/usr/bin/env python3
"""Unit tests for FrontierVisualizer."""
import os
import sys

import pytest

sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..'))

from drobot_explore.frontier.blacklist import GoalBlacklist
from drobot_explore.types import Frontier, Position
from drobot_explore.visualization import (
    BLACKLISTED_COLOR,
    FrontierVisualizer,
    frontier_color,
)


def frontier_at(x, y, cost):
    return Frontier(centroid=Position(x, y), cost=cost, points=(Position(x, y),), size=1)


@pytest.fixture
def frontiers():
    return [frontier_at(0.0, 0.0, 1.0), frontier_at(5.0, 0.0, 2.0), frontier_at(10.0, 0.0, 3.0)]


@pytest.fixture
def blacklist():
    return GoalBlacklist(resolution=0.05)


class TestFrontierColor:
    def test_cheapest_end_of_gradient(self):
        assert frontier_color(0, 3) == (0.0, 1.0, 1.0, 1.0)

    def test_gradient(self):
        r, g, b, a = frontier_color(2, 3)
        assert r == pytest.approx(0.5)
        assert g == pytest.approx(0.5)
        assert (b, a) == (1.0, 1.0)


class TestRender:
    def test_records(self, frontiers, blacklist):
        records, stale_ids = FrontierVisualizer().render(frontiers, blacklist)
        assert [r.marker_id for r in records] == [0, 1, 2]
        assert records[1].points == (Position(5.0, 0.0),)
        assert stale_ids == []

    def test_blacklisted_red(self, frontiers, blacklist):
        blacklist.add(Position(5.0, 0.0))
        records, _ = FrontierVisualizer().render(frontiers, blacklist)
        assert records[1].color == BLACKLISTED_COLOR
        assert records[0].color == frontier_color(0, 3)
        assert records[2].color == frontier_color(2, 3)

    def test_stale_ids(self, frontiers, blacklist):
        visualizer = FrontierVisualizer()
        visualizer.render(frontiers, blacklist)
        records, stale_ids = visualizer.render(frontiers[:1], blacklist)
        assert len(records) == 1
        assert stale_ids == [1, 2]
        assert visualizer.last_markers_count == 1

    def test_empty_pass_clears_everything(self, frontiers, blacklist):
        visualizer = FrontierVisualizer()
        visualizer.render(frontiers, blacklist)
        records, stale_ids = visualizer.render([], blacklist)
        assert records == []
        assert stale_ids == [0, 1, 2]
