import numpy as np
import pytest

from swarmsim.core.state import AgentState, SwarmState
from swarmsim.config import build_simulator


def make_state(i, pos, vel=(0.0, 0.0, 0.0)):
    return AgentState(id=i, pos=np.array(pos, dtype=float), vel=np.array(vel, dtype=float))


def make_swarm_state(positions):
    return SwarmState(agents={i: make_state(i, p) for i, p in enumerate(positions)}, t=0.0)


@pytest.fixture
def sim():
    return build_simulator({
        "seed": 3,
        "agents": {"count": 4},
        "formation": "line",
        "obstacles": {"count": 0},
        "analytics": {"sample_prob": 1.0},
    })
