from abc import ABC, abstractmethod
from ..core.state import SwarmState


class ScoringTask(ABC):
    """
    Reads a swarm snapshot and writes derived figures back to the mission
    state it was built with. Never moves agents.
    """

    def reset(self, state: SwarmState) -> dict:
        """Rebaseline after the swarm is rebuilt or a mission starts."""
        return self.compute(state)

    @abstractmethod
    def compute(self, state: SwarmState) -> dict:
        ...
