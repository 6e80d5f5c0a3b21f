import math

import numpy as np

from .state import AgentState, SwarmParameters
from .vecmath import clamp_length
from ..policies.base import Policy
from ..comms.messages import SwarmMessage

HEADING_EPS = 0.1


class Agent:
    def __init__(self, state: AgentState, policy: Policy):
        self.state = state
        self.policy = policy

    def steer(self, neighbor_msgs: list[SwarmMessage], obstacles, goal, params: SwarmParameters):
        """
        Perception + decision against the pre-tick snapshot. The force lands in
        the acceleration accumulator; position and velocity are left alone
        until integrate().
        """
        obs = self.policy.build_observation(self.state, neighbor_msgs, obstacles, goal)
        result = self.policy.act(obs, params)
        self.state.acc = self.state.acc + result.force
        return result

    def integrate(self, dt: float, params: SwarmParameters, env):
        st = self.state
        st.vel = clamp_length(st.vel + st.acc, params.speed)
        st.pos = st.pos + st.vel * dt
        env.enforce_constraints(st)

        st.battery = max(0.0, st.battery - env.world.battery_drain * dt)
        if st.speed > HEADING_EPS:
            st.heading = math.degrees(math.atan2(st.vel[0], st.vel[2]))
        st.acc = np.zeros(3)

    def to_message(self, t: float = 0.0) -> SwarmMessage:
        return SwarmMessage.from_state(self.state, t)
