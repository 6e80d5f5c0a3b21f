import logging

import numpy as np

from . import formation
from .agent import Agent
from .env import SwarmEnv
from .errors import InvalidIndex, InvalidParameter, UnknownFormation
from .state import AgentState, SwarmParameters, SwarmState, LOST
from ..comms.network import BroadcastNetwork
from ..policies.base import Policy
from ..policies.rules_boids import BoidsPolicy

logger = logging.getLogger(__name__)


class SwarmController:
    """
    Owns the agents, the obstacle field and the waypoint queue, and runs the
    per-tick update. Commands that reshape the swarm or its parameters while a
    tick is in flight are queued and applied once the tick has finished.
    """

    def __init__(
        self,
        params: SwarmParameters | None = None,
        env: SwarmEnv | None = None,
        formation_kind: str = formation.GRID,
        count: int = 0,
        policy: Policy | None = None,
        network: BroadcastNetwork | None = None,
        rng=None,
    ):
        self.params = params or SwarmParameters()
        self.env = env or SwarmEnv()
        self.formation_kind = formation_kind
        self.count = count
        self.policy = policy or BoidsPolicy()
        self.network = network or BroadcastNetwork()
        self.rng = rng or np.random.default_rng()
        self.agents: list[Agent] = []
        self.lost: list[Agent] = []
        self.waypoints: list[np.ndarray] = []
        self.t = 0.0
        self._ticking = False
        self._pending = []

    # -----------------------------
    # Queries
    # -----------------------------
    @property
    def active_count(self) -> int:
        return len(self.agents)

    @property
    def obstacles(self):
        return self.env.obstacles

    @property
    def goal(self) -> np.ndarray | None:
        return self.waypoints[0] if self.waypoints else None

    def state(self) -> SwarmState:
        return SwarmState(agents={a.state.id: a.state for a in self.agents}, t=self.t)

    # -----------------------------
    # Population commands
    # -----------------------------
    def create_swarm(self, count: int | None = None):
        if count is not None and int(count) < 0:
            raise InvalidParameter("count", count, "must not be negative")
        if self._defer(self.create_swarm, count):
            return
        if count is not None:
            self.count = int(count)
        positions = formation.generate(self.count, self.formation_kind, self.params.spacing, rng=self.rng)
        self.agents = []
        self.lost = []
        for i, pos in enumerate(positions):
            jitter = self.rng.uniform(-1.0, 1.0, size=2)
            st = AgentState(id=i, pos=np.array(pos, dtype=float), vel=np.array([jitter[0], 0.0, jitter[1]]))
            self.agents.append(Agent(st, self.policy))
        logger.debug("created %d agents in %s formation", len(self.agents), self.formation_kind)

    def regroup(self):
        self.create_swarm(self.count)

    def set_formation(self, kind: str):
        if kind not in formation.FORMATIONS:
            raise UnknownFormation(kind)
        if self._defer(self.set_formation, kind):
            return
        self.formation_kind = kind
        self.create_swarm(self.count)

    def set_parameter(self, name: str, value: float):
        value = SwarmParameters.validate(name, value)
        if self._defer(self.set_parameter, name, value):
            return
        setattr(self.params, name, value)

    def remove_agent(self, index: int) -> Agent:
        if not 0 <= index < len(self.agents):
            raise InvalidIndex("agent", index, len(self.agents))
        agent = self.agents.pop(index)
        agent.state.status = LOST
        self.lost.append(agent)
        return agent

    # -----------------------------
    # Waypoints
    # -----------------------------
    def add_waypoint(self, position=None) -> np.ndarray:
        if position is None:
            x, z = self.rng.uniform(-250.0, 250.0, size=2)
            y = self.rng.uniform(80.0, 160.0)
            position = (x, y, z)
        wp = np.array(position, dtype=float)
        self.waypoints.append(wp)
        return wp

    def remove_waypoint(self, index: int) -> np.ndarray:
        if not 0 <= index < len(self.waypoints):
            raise InvalidIndex("waypoint", index, len(self.waypoints))
        return self.waypoints.pop(index)

    def recall(self):
        self.waypoints = [np.array(self.env.world.home, dtype=float)]

    # -----------------------------
    # Tick
    # -----------------------------
    def tick(self, dt: float) -> int:
        """
        Advance every active agent by dt. Forces for all agents are computed
        from messages built before any agent moves, so update order does not
        matter. Returns the number of obstacle avoidance events this tick.
        """
        self._ticking = True
        try:
            outgoing = [(a.state.id, a.to_message(self.t)) for a in self.agents]
            inbox = self.network.deliver(outgoing)
            goal = self.goal
            events = 0
            for agent in self.agents:
                result = agent.steer(inbox[agent.state.id], self.env.obstacles, goal, self.params)
                events += result.avoid_events
            for agent in self.agents:
                agent.integrate(dt, self.params, self.env)
            self.t += dt
        finally:
            self._ticking = False
        self._flush_pending()
        return events

    def _defer(self, fn, *args) -> bool:
        if not self._ticking:
            return False
        self._pending.append((fn, args))
        return True

    def _flush_pending(self):
        pending, self._pending = self._pending, []
        for fn, args in pending:
            fn(*args)
