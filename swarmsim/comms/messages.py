from dataclasses import dataclass
import numpy as np
from ..core.state import AgentState


@dataclass(frozen=True)
class SwarmMessage:
    """Read-only view of a peer's kinematics as of the start of a tick."""
    sender_id: int
    pos: np.ndarray
    vel: np.ndarray
    t: float

    @classmethod
    def from_state(cls, state: AgentState, t: float = 0.0):
        pos = state.pos.copy()
        vel = state.vel.copy()
        pos.flags.writeable = False
        vel.flags.writeable = False
        return cls(sender_id=state.id, pos=pos, vel=vel, t=t)
