#!/usr/bin/env python3
"""Unit tests for ExplorationController."""
import os
import sys

import pytest

sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..'))

from drobot_explore.config import ExploreParams
from drobot_explore.controller import ExplorationController
from drobot_explore.errors import CollaboratorUnavailable
from drobot_explore.types import ExplorationState, Frontier, Position, RobotState


# ==================== Fakes ====================

class FakeClock:
    def __init__(self):
        self.now = 0.0

    def __call__(self):
        return self.now


class FakePoseProvider:
    def __init__(self):
        self.robot = RobotState(0.0, 0.0, 0.0)
        self.error = None

    def current_pose(self):
        if self.error:
            raise self.error
        return self.robot

    def resolution(self):
        return 0.05

    def global_frame_id(self):
        return 'map'


class FakeSearch:
    def __init__(self, frontiers=None):
        self.frontiers = frontiers or []
        self.calls = 0

    def search_from(self, robot):
        self.calls += 1
        return list(self.frontiers)


class FakeExecutor:
    def __init__(self):
        self.sent = []
        self.cancels = 0
        self.error = None

    def send_goal(self, target):
        self.sent.append(target)
        if self.error:
            raise self.error

    def cancel(self):
        self.cancels += 1


class FakeSink:
    def __init__(self):
        self.published = []

    def publish(self, records, stale_ids):
        self.published.append((records, stale_ids))


# ==================== Fixtures ====================

@pytest.fixture
def frontiers():
    return [
        Frontier(centroid=Position(5.0, 5.0), cost=1.0),
        Frontier(centroid=Position(10.0, 10.0), cost=2.0),
    ]


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def provider():
    return FakePoseProvider()


@pytest.fixture
def search(frontiers):
    return FakeSearch(frontiers)


@pytest.fixture
def executor():
    return FakeExecutor()


@pytest.fixture
def controller(provider, search, executor, clock):
    params = ExploreParams(progress_timeout=30.0)
    return ExplorationController(provider, search, executor, params=params, clock=clock)


# ==================== Tests ====================

class TestGoalSelection:
    def test_initial_state(self, controller):
        assert controller.state is ExplorationState.SEARCHING
        assert controller.current_goal is None

    def test_dispatches_cheapest(self, controller, executor):
        assert controller.tick() is ExplorationState.NAVIGATING
        assert controller.current_goal == Position(5.0, 5.0)
        assert executor.sent == [Position(5.0, 5.0)]
        assert controller.stats.dispatched_goals == 1

    def test_skips_blacklisted(self, controller, executor):
        controller.blacklist.add(Position(5.0, 5.0))
        controller.tick()
        assert executor.sent == [Position(10.0, 10.0)]

    def test_same_goal_not_resent(self, controller, executor):
        controller.tick()
        controller.tick()
        assert executor.sent == [Position(5.0, 5.0)]

    def test_centroid_within_epsilon_kept(self, controller, search, executor):
        controller.tick()
        search.frontiers = [Frontier(centroid=Position(5.005, 5.0), cost=1.0)]
        controller.tick()
        assert len(executor.sent) == 1
        assert controller.current_goal == Position(5.0, 5.0)

    def test_moved_centroid_replaces_goal(self, controller, search, executor):
        controller.tick()
        search.frontiers = [Frontier(centroid=Position(5.02, 5.0), cost=1.0)]
        controller.tick()
        assert executor.sent == [Position(5.0, 5.0), Position(5.02, 5.0)]
        assert controller.current_goal == Position(5.02, 5.0)

    def test_blacklist_uses_map_resolution(self, controller):
        controller.tick()
        assert controller.blacklist.resolution == 0.05


class TestCompletion:
    def test_all_blacklisted_is_done(self, controller, executor):
        controller.blacklist.add(Position(5.0, 5.0))
        controller.blacklist.add(Position(10.0, 10.0))
        assert controller.tick() is ExplorationState.DONE
        assert controller.is_done
        assert executor.sent == []

    def test_no_frontiers_is_done(self, controller, search):
        search.frontiers = []
        assert controller.tick() is ExplorationState.DONE

    def test_done_cancels_active_goal(self, controller, search, executor):
        controller.tick()
        search.frontiers = []
        controller.tick()
        assert executor.cancels == 1
        assert controller.current_goal is None

    def test_done_is_terminal(self, controller, search, executor):
        search.frontiers = []
        controller.tick()
        search.frontiers = [Frontier(centroid=Position(1.0, 1.0), cost=0.0)]
        assert controller.tick() is ExplorationState.DONE
        assert search.calls == 1
        assert executor.sent == []


class TestAbandonment:
    def test_stalled_goal_is_blacklisted(self, controller, executor, clock):
        controller.tick()
        clock.now = 31.0
        assert controller.tick() is ExplorationState.SEARCHING
        assert controller.blacklist.is_blacklisted(Position(5.0, 5.0))
        assert controller.current_goal is None
        assert controller.stats.abandoned_goals == 1

    def test_stalled_goal_is_cancelled(self, controller, provider, executor, clock):
        controller.tick()
        clock.now = 31.0
        controller.tick()
        assert executor.cancels == 1
        provider.error = CollaboratorUnavailable('no transform')
        controller.tick()
        assert executor.sent == [Position(5.0, 5.0)]

    def test_next_tick_selects_afresh(self, controller, executor, clock):
        controller.tick()
        clock.now = 31.0
        controller.tick()
        controller.tick()
        assert executor.sent == [Position(5.0, 5.0), Position(10.0, 10.0)]

    def test_not_abandoned_before_timeout(self, controller, clock):
        controller.tick()
        clock.now = 30.0
        assert controller.tick() is ExplorationState.NAVIGATING
        assert len(controller.blacklist) == 0

    def test_progress_keeps_goal(self, controller, provider, clock):
        controller.tick()
        clock.now = 20.0
        provider.robot = RobotState(2.0, 2.0, 0.0)
        controller.tick()
        clock.now = 45.0
        assert controller.tick() is ExplorationState.NAVIGATING

    def test_cycles_to_done(self, controller, clock):
        controller.tick()
        clock.now = 31.0
        controller.tick()
        controller.tick()
        clock.now = 62.0
        controller.tick()
        assert controller.tick() is ExplorationState.DONE


class TestCollaboratorFailures:
    def test_pose_unavailable_skips_tick(self, controller, provider, search, executor):
        provider.error = CollaboratorUnavailable('no transform')
        assert controller.tick() is ExplorationState.SEARCHING
        assert search.calls == 0
        assert executor.sent == []
        assert controller.stats.skipped_ticks == 1

    def test_recovers_next_tick(self, controller, provider, executor):
        provider.error = CollaboratorUnavailable('no transform')
        controller.tick()
        provider.error = None
        controller.tick()
        assert executor.sent == [Position(5.0, 5.0)]

    def test_dispatch_failure_keeps_goal(self, controller, executor, clock):
        executor.error = CollaboratorUnavailable('no action server')
        assert controller.tick() is ExplorationState.NAVIGATING
        assert controller.current_goal == Position(5.0, 5.0)
        clock.now = 31.0
        controller.tick()
        assert controller.blacklist.is_blacklisted(Position(5.0, 5.0))


class TestGoalResult:
    def test_failure_blacklists(self, controller):
        controller.tick()
        controller.on_goal_result(Position(5.0, 5.0), succeeded=False)
        assert controller.blacklist.is_blacklisted(Position(5.0, 5.0))
        assert controller.state is ExplorationState.SEARCHING
        assert controller.current_goal is None

    def test_success_clears_goal(self, controller):
        controller.tick()
        controller.on_goal_result(Position(5.0, 5.0), succeeded=True)
        assert len(controller.blacklist) == 0
        assert controller.state is ExplorationState.SEARCHING
        assert controller.stats.reached_goals == 1

    def test_stale_failure_ignored(self, controller):
        controller.tick()
        controller.on_goal_result(Position(1.0, 1.0), succeeded=False)
        assert controller.current_goal == Position(5.0, 5.0)
        assert len(controller.blacklist) == 0
        assert controller.stats.failed_goals == 0

    def test_replaced_goal_failure_keeps_frontier(self, controller, search, executor):
        search.frontiers = [Frontier(centroid=Position(5.0, 5.0), cost=1.0)]
        controller.tick()
        # Centroid drifts as the map grows; Nav2 aborts the preempted goal
        search.frontiers = [Frontier(centroid=Position(5.02, 5.0), cost=1.0)]
        controller.tick()
        controller.on_goal_result(Position(5.0, 5.0), succeeded=False)
        assert len(controller.blacklist) == 0
        assert controller.current_goal == Position(5.02, 5.0)
        assert controller.tick() is ExplorationState.NAVIGATING
        assert executor.sent == [Position(5.0, 5.0), Position(5.02, 5.0)]

    def test_result_without_goal_ignored(self, controller):
        controller.on_goal_result(Position(5.0, 5.0), succeeded=False)
        assert len(controller.blacklist) == 0
        assert controller.state is ExplorationState.SEARCHING

    def test_result_reported_during_tick(self, provider, search, clock):
        class FailingExecutor(FakeExecutor):
            def send_goal(self, target):
                super().send_goal(target)
                controller.on_goal_result(target, succeeded=False)

        controller = ExplorationController(
            provider, search, FailingExecutor(), params=ExploreParams(), clock=clock
        )
        assert controller.tick() is ExplorationState.SEARCHING
        assert controller.blacklist.is_blacklisted(Position(5.0, 5.0))
        assert controller.current_goal is None


class TestStopRestart:
    def test_stop_blocks_ticks(self, controller, search, executor):
        controller.stop()
        assert controller.tick() is ExplorationState.STOPPED
        assert search.calls == 0
        assert executor.cancels == 1

    def test_stop_twice(self, controller, executor):
        controller.stop()
        controller.stop()
        assert executor.cancels == 1

    def test_restart_after_done(self, controller, search, executor):
        controller.blacklist.add(Position(5.0, 5.0))
        controller.blacklist.add(Position(10.0, 10.0))
        controller.tick()
        controller.restart()
        assert len(controller.blacklist) == 0
        assert controller.tick() is ExplorationState.NAVIGATING
        assert executor.sent == [Position(5.0, 5.0)]


class TestVisualization:
    def test_sink_unused_when_disabled(self, provider, search, executor):
        sink = FakeSink()
        controller = ExplorationController(provider, search, executor, visualization_sink=sink)
        controller.tick()
        assert sink.published == []

    def test_sink_receives_records(self, provider, search, executor):
        sink = FakeSink()
        controller = ExplorationController(
            provider, search, executor,
            params=ExploreParams(visualize=True),
            visualization_sink=sink
        )
        controller.blacklist.add(Position(5.0, 5.0))
        controller.tick()
        records, stale_ids = sink.published[0]
        assert [r.marker_id for r in records] == [0, 1]
        assert records[0].color == (1.0, 0.0, 0.0, 1.0)
        assert stale_ids == []

    def test_stale_markers_cleared(self, provider, search, executor):
        sink = FakeSink()
        controller = ExplorationController(
            provider, search, executor,
            params=ExploreParams(visualize=True),
            visualization_sink=sink
        )
        controller.tick()
        search.frontiers = search.frontiers[:1]
        controller.tick()
        _, stale_ids = sink.published[1]
        assert stale_ids == [1]
