import math

import numpy as np
from .state import SwarmState

SQ_M_PER_SQ_KM = 1_000_000.0

FORMATION_WEIGHT = 0.30
COLLISION_WEIGHT = 0.30
COMM_WEIGHT = 0.20
COMPLETION_WEIGHT = 0.20


def _positions(state: SwarmState) -> np.ndarray:
    return np.array([a.pos for a in state.agents.values() if a.active], dtype=float).reshape(-1, 3)


def coverage_area(state: SwarmState) -> float:
    """
    Area of the horizontal (x, z) bounding box around all active agents, in km^2.
    """
    positions = _positions(state)
    if len(positions) == 0:
        return 0.0
    mins = positions.min(axis=0)
    maxs = positions.max(axis=0)
    return float((maxs[0] - mins[0]) * (maxs[2] - mins[2]) / SQ_M_PER_SQ_KM)


def pairwise_distances(state: SwarmState) -> np.ndarray:
    """Distances for every unordered pair of active agents (upper triangle, flattened)."""
    positions = _positions(state)
    n = len(positions)
    if n < 2:
        return np.zeros(0)
    dists = np.linalg.norm(positions[:, None, :] - positions[None, :, :], axis=-1)
    iu = np.triu_indices(n, k=1)
    return dists[iu]


def mean_pairwise_distance(state: SwarmState) -> float:
    d = pairwise_distances(state)
    return float(d.mean()) if len(d) else 0.0


def formation_accuracy(state: SwarmState, spacing: float) -> float:
    """
    100 minus the mean pairwise deviation from `spacing`, as a percentage of
    `spacing`, floored at 0. Fewer than two agents is a perfect formation.
    """
    d = pairwise_distances(state)
    if len(d) == 0:
        return 100.0
    avg_dev = float(np.abs(d - spacing).mean())
    return max(0.0, 100.0 - avg_dev / spacing * 100.0)


def collision_score(collisions_avoided: int) -> float:
    return max(0.0, 100.0 - 0.1 * collisions_avoided)


def communication_score(signal_strength: float) -> float:
    return float(signal_strength)


def completion_score(elapsed: float) -> float:
    return min(100.0, elapsed * 2.0)


def mission_score(formation: float, collision: float, comm: float, completion: float) -> int:
    score = (
        formation * FORMATION_WEIGHT
        + collision * COLLISION_WEIGHT
        + comm * COMM_WEIGHT
        + completion * COMPLETION_WEIGHT
    )
    return int(math.floor(score + 0.5))


def average_speed(state: SwarmState) -> float | None:
    speeds = [a.speed for a in state.agents.values() if a.active]
    if not speeds:
        return None
    return float(np.mean(speeds))
