import numpy as np
import pytest

from conftest import make_swarm_state
from swarmsim.core import metrics
from swarmsim.core.mission import MissionState
from swarmsim.core.state import SwarmParameters, LOST
from swarmsim.tasks.mission_score import MissionScoreTask


def test_formation_accuracy_degenerate():
    assert metrics.formation_accuracy(make_swarm_state([]), 10.0) == 100.0
    assert metrics.formation_accuracy(make_swarm_state([(5, 100, 5)]), 10.0) == 100.0


@pytest.mark.parametrize("gap, expected", [(10.0, 100.0), (15.0, 50.0), (5.0, 50.0), (20.0, 0.0), (80.0, 0.0)])
def test_formation_accuracy_two_agents(gap, expected):
    state = make_swarm_state([(0, 100, 0), (gap, 100, 0)])
    assert metrics.formation_accuracy(state, 10.0) == pytest.approx(expected)


def test_formation_accuracy_bounded():
    rng = np.random.default_rng(9)
    for _ in range(50):
        n = int(rng.integers(2, 30))
        pts = rng.uniform(-300, 300, size=(n, 3))
        acc = metrics.formation_accuracy(make_swarm_state(pts), float(rng.uniform(1, 50)))
        assert 0.0 <= acc <= 100.0


def test_lost_agents_are_not_scored():
    state = make_swarm_state([(0, 100, 0), (10, 100, 0), (900, 100, 900)])
    state.agents[2].status = LOST
    assert metrics.formation_accuracy(state, 10.0) == pytest.approx(100.0)
    assert metrics.coverage_area(state) == 0.0


def test_coverage_area_km2():
    state = make_swarm_state([(0, 100, 0), (1000, 50, 2000), (500, 120, 100)])
    assert metrics.coverage_area(state) == pytest.approx(2.0)
    assert metrics.coverage_area(make_swarm_state([])) == 0.0


def test_collision_score_non_increasing():
    scores = [metrics.collision_score(c) for c in range(0, 2000, 37)]
    assert scores == sorted(scores, reverse=True)
    assert scores[0] == 100.0
    assert scores[-1] == 0.0


def test_completion_saturates():
    assert metrics.completion_score(0.0) == 0.0
    assert metrics.completion_score(10.0) == 20.0
    assert metrics.completion_score(50.0) == 100.0
    assert metrics.completion_score(500.0) == 100.0


def test_mission_score_weights():
    assert metrics.mission_score(100, 100, 100, 100) == 100
    assert metrics.mission_score(0, 0, 0, 0) == 0
    assert metrics.mission_score(50, 100, 70, 10) == 61


def test_average_speed():
    state = make_swarm_state([(0, 100, 0), (10, 100, 0)])
    state.agents[0].vel = np.array([3.0, 4.0, 0.0])
    assert metrics.average_speed(state) == pytest.approx(2.5)
    assert metrics.average_speed(make_swarm_state([])) is None


def test_mission_score_task_writes_score_fields_only():
    mission = MissionState(elapsed=10.0, collisions_avoided=100, signal_strength=70.0)
    state = make_swarm_state([(0, 100, 0), (10, 100, 0)])
    before = state.agents[0].pos.copy()
    result = MissionScoreTask(mission, SwarmParameters(spacing=10.0)).compute(state)

    assert result["formation"] == pytest.approx(100.0)
    assert result["collision"] == pytest.approx(90.0)
    assert result["communication"] == 70.0
    assert result["completion"] == 20.0
    # 30 + 27 + 14 + 4
    assert mission.mission_score == 75
    assert mission.elapsed == 10.0
    assert mission.collisions_avoided == 100
    assert np.array_equal(state.agents[0].pos, before)
