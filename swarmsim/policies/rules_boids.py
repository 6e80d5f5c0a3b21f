from typing import NamedTuple

import numpy as np

from .base import Policy
from ..core.vecmath import clamp_length, normalize

OBSTACLE_WEIGHT = 3.0


class Steering(NamedTuple):
    force: np.ndarray
    avoid_events: int


def seek(pos, vel, target, params) -> np.ndarray:
    desired = normalize(np.asarray(target, dtype=float) - pos) * params.max_speed
    return clamp_length(desired - vel, params.max_force)


def _neighbor_arrays(pos, neighbor_msgs):
    if not neighbor_msgs:
        empty = np.zeros((0, 3))
        return empty, empty, np.zeros(0)
    ps = np.array([m.pos for m in neighbor_msgs], dtype=float)
    vs = np.array([m.vel for m in neighbor_msgs], dtype=float)
    dist = np.linalg.norm(ps - pos, axis=1)
    return ps, vs, dist


def separation(pos, vel, ps, dist, params) -> np.ndarray:
    mask = (dist > 0) & (dist < params.separation_radius)
    if not mask.any():
        return np.zeros(3)
    away = pos - ps[mask]
    d = dist[mask][:, None]
    # unit vector away from the neighbour, weighted by 1/d
    steer = (away / d / d).mean(axis=0)
    steer = normalize(steer) * params.max_speed - vel
    return clamp_length(steer, params.max_force)


def alignment(vel, vs, dist, params) -> np.ndarray:
    mask = (dist > 0) & (dist < params.perception_radius)
    if not mask.any():
        return np.zeros(3)
    desired = normalize(vs[mask].mean(axis=0)) * params.max_speed
    return clamp_length(desired - vel, params.max_force)


def cohesion(pos, vel, ps, dist, params) -> np.ndarray:
    mask = (dist > 0) & (dist < params.perception_radius)
    if not mask.any():
        return np.zeros(3)
    return seek(pos, vel, ps[mask].mean(axis=0), params)


def goal_seek(pos, vel, goal, params) -> np.ndarray:
    if goal is None:
        return np.zeros(3)
    return seek(pos, vel, goal, params)


def avoid_obstacles(pos, obstacles):
    force = np.zeros(3)
    events = 0
    for obs in obstacles or []:
        diff = pos - obs.center
        d = float(np.linalg.norm(diff))
        if d < obs.radius:
            force += normalize(diff) * (obs.radius - d)
            events += 1
    return force, events


def compute_forces(self_state, neighbor_msgs, obstacles, goal, params) -> Steering:
    """
    Weighted sum of the five steering terms for one agent.

    Pure: reads the agent's pre-tick state and the peer snapshot and returns
    the force together with the number of obstacle avoidance events.
    """
    pos = self_state.pos
    vel = self_state.vel
    ps, vs, dist = _neighbor_arrays(pos, neighbor_msgs)
    avoid, events = avoid_obstacles(pos, obstacles)

    force = (
        params.separation_weight * separation(pos, vel, ps, dist, params)
        + params.alignment_weight * alignment(vel, vs, dist, params)
        + params.cohesion_weight * cohesion(pos, vel, ps, dist, params)
        + params.goal_weight * goal_seek(pos, vel, goal, params)
        + OBSTACLE_WEIGHT * avoid
    )
    return Steering(force, events)


class BoidsPolicy(Policy):
    def build_observation(self, self_state, neighbor_msgs, obstacles=None, goal=None):
        return (self_state, neighbor_msgs, obstacles or [], goal)

    def act(self, obs, params):
        self_state, neighbor_msgs, obstacles, goal = obs
        return compute_forces(self_state, neighbor_msgs, obstacles, goal, params)
