from collections import deque

import numpy as np

from .errors import SwarmSimError
from .events import EventLog, INFO, WARNING, ERROR
from .mission import MissionControl, FaultConfig, COMM_FAILURE, PACKET_LOSS, DEFAULT_MISSION
from .state import SwarmParameters
from .swarm import SwarmController
from ..tasks.mission_score import MissionScoreTask


class Simulator:
    """
    Single owned context for one simulation: swarm, mission, analytics and
    event log. Every command here is safe to call between steps; commands
    that fail on bad input log an error event and leave state untouched.
    """

    def __init__(
        self,
        controller: SwarmController,
        faults: FaultConfig | None = None,
        sample_prob: float = 0.1,
        behavior_mode: str = "decentralized",
        metadata: dict | None = None,
        rng=None,
        history: int = 1000,
    ):
        self.controller = controller
        self.rng = rng or controller.rng
        self.mission = MissionControl(controller.params, faults)
        self.analytics = MissionScoreTask(self.mission.state, controller.params)
        self.events = EventLog()
        self.sample_prob = sample_prob
        self.behavior_mode = behavior_mode
        self.metadata = dict(metadata or {})
        self.samples: deque[dict] = deque(maxlen=history)

    @property
    def params(self) -> SwarmParameters:
        return self.controller.params

    @property
    def state(self):
        return self.mission.state

    def log(self, message: str, level: str = INFO):
        return self.events.emit(self.mission.state.elapsed, message, level)

    # -----------------------------
    # Swarm commands
    # -----------------------------
    def create_swarm(self, count: int):
        try:
            self.controller.create_swarm(count)
        except SwarmSimError as e:
            self.log(str(e), ERROR)
            return
        self._rebaseline()
        self.log(f"Swarm created: {self.controller.count} drones in {self.controller.formation_kind} formation")

    def set_formation(self, kind: str):
        try:
            self.controller.set_formation(kind)
        except SwarmSimError as e:
            self.log(str(e), ERROR)
            return
        self._rebaseline()
        self.log(f"Swarm created: {self.controller.count} drones in {kind} formation")

    def set_behavior_mode(self, mode: str):
        self.behavior_mode = mode
        self.log(f"Behavior mode changed to: {mode}")

    def set_parameter(self, name: str, value: float):
        try:
            self.controller.set_parameter(name, value)
        except SwarmSimError as e:
            self.log(str(e), ERROR)
            return
        self.log(f"Parameter {name} set to {value:g}")

    def regroup(self):
        self.controller.regroup()
        self._rebaseline()
        self.log("Regroup command executed")

    def remove_agent_at(self, index: int):
        try:
            agent = self.controller.remove_agent(index)
        except SwarmSimError as e:
            self.log(str(e), ERROR)
            return None
        self._sync_active()
        self.log(f"Node failure: Drone {index} lost", ERROR)
        return agent

    def trigger_node_failure(self):
        """Lose one agent picked uniformly at random; nothing happens on an empty swarm."""
        if not self.controller.agents:
            return None
        index = int(self.rng.integers(len(self.controller.agents)))
        return self.remove_agent_at(index)

    # -----------------------------
    # Waypoints
    # -----------------------------
    def add_waypoint(self, position=None):
        wp = self.controller.add_waypoint(position)
        self.log(f"Waypoint added: ({wp[0]:.0f}, {wp[1]:.0f}, {wp[2]:.0f})")
        return wp

    def remove_waypoint(self, index: int):
        try:
            wp = self.controller.remove_waypoint(index)
        except SwarmSimError as e:
            self.log(str(e), ERROR)
            return None
        self.log(f"Waypoint {index} removed")
        return wp

    def recall(self):
        self.controller.recall()
        self.log("Recall command issued - returning to base", WARNING)

    # -----------------------------
    # Mission
    # -----------------------------
    def start(self, mission: str = DEFAULT_MISSION):
        self.mission.start(mission)
        self.analytics.reset(self.controller.state())
        self.log("Mission started")
        if not self.controller.waypoints:
            self.add_waypoint()

    def pause(self):
        paused = self.mission.pause()
        self.log(f"Mission {'paused' if paused else 'resumed'}", WARNING)

    def inject_comm_failure(self):
        self.mission.inject_comm_failure()
        self.log("Communication failure simulated - signal strength reduced", ERROR)

    def inject_packet_loss(self):
        self.mission.inject_packet_loss()
        self.log("Packet loss detected - latency increased", WARNING)

    def clear_event_log(self):
        self.events.clear()
        self.log("Event log cleared")

    # -----------------------------
    # Loop
    # -----------------------------
    def step(self, dt: float) -> dict | None:
        """
        One frame. Fault timers run every call; the swarm only moves while the
        mission is running and not paused. Returns the analytics sample if one
        was taken this step.
        """
        for kind in self.mission.advance(dt):
            if kind == COMM_FAILURE:
                self.log("Communication restored")
            elif kind == PACKET_LOSS:
                self.log("Network conditions improved")

        if not self.mission.state.active:
            return None

        events = self.controller.tick(dt)
        self.mission.record_avoidance(events)
        self._sync_active()

        if self.rng.random() < self.sample_prob:
            return self.sample()
        return None

    def sample(self) -> dict:
        result = self.analytics.compute(self.controller.state())
        self.samples.append(result)
        return result

    # -----------------------------
    # Queries
    # -----------------------------
    def agents(self) -> list[dict]:
        return [
            {
                "id": a.state.id,
                "position": a.state.pos.copy(),
                "velocity": a.state.vel.copy(),
                "battery": a.state.battery,
                "status": a.state.status,
            }
            for a in self.controller.agents
        ]

    def obstacles(self) -> list[dict]:
        return [{"id": o.id, "position": o.center.copy(), "radius": o.radius} for o in self.controller.obstacles]

    def waypoints(self) -> list[np.ndarray]:
        return [wp.copy() for wp in self.controller.waypoints]

    def telemetry(self) -> dict | None:
        """Lead-agent readout; None when the swarm is empty."""
        if not self.controller.agents:
            return None
        st = self.controller.agents[0].state
        return {
            "id": st.id,
            "heading": None if st.heading is None else abs(st.heading),
            "altitude": st.altitude,
            "speed": st.speed,
            "battery": st.battery,
        }

    def snapshot(self) -> dict:
        m = self.mission.state
        return {
            "phase": m.phase,
            "running": m.running,
            "paused": m.paused,
            "mission": m.mission,
            "elapsed": m.elapsed,
            "mission_score": m.mission_score,
            "formation_score": m.formation_score,
            "collision_score": m.collision_score,
            "comm_score": m.comm_score,
            "completion_score": m.completion_score,
            "signal_strength": m.signal_strength,
            "comm_latency": self.params.comm_latency,
            "collisions_avoided": m.collisions_avoided,
            "active_agents": m.active_agents,
            "coverage_area": m.coverage_area,
            "formation": self.controller.formation_kind,
            "behavior_mode": self.behavior_mode,
            **self.metadata,
        }

    def _sync_active(self):
        self.mission.state.active_agents = self.controller.active_count

    def _rebaseline(self):
        self._sync_active()
        self.analytics.reset(self.controller.state())
