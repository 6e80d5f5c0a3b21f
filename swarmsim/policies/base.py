from abc import ABC, abstractmethod


class Policy(ABC):
    @abstractmethod
    def build_observation(self, self_state, neighbor_msgs, obstacles=None, goal=None):
        ...

    @abstractmethod
    def act(self, obs, params):
        """Return (steering force, obstacle avoidance events). Must not mutate obs."""
        ...
