from ..core import metrics
from ..core.mission import MissionState
from ..core.state import SwarmParameters, SwarmState
from .base import ScoringTask


class MissionScoreTask(ScoringTask):
    """
    Scores the swarm against the training rubric. Reads agent state, writes
    only the score and coverage fields of the mission state.
    """

    def __init__(self, mission: MissionState, params: SwarmParameters):
        self.mission = mission
        self.params = params

    def compute(self, state: SwarmState) -> dict:
        m = self.mission
        formation = metrics.formation_accuracy(state, self.params.spacing)
        collision = metrics.collision_score(m.collisions_avoided)
        comm = metrics.communication_score(m.signal_strength)
        completion = metrics.completion_score(m.elapsed)
        score = metrics.mission_score(formation, collision, comm, completion)
        area = metrics.coverage_area(state)

        m.formation_score = formation
        m.collision_score = collision
        m.comm_score = comm
        m.completion_score = completion
        m.mission_score = score
        m.coverage_area = area
        return {
            "t": m.elapsed,
            "mission_score": score,
            "formation": formation,
            "collision": collision,
            "communication": comm,
            "completion": completion,
            "coverage_area": area,
            "mean_spacing": metrics.mean_pairwise_distance(state),
            "avg_speed": metrics.average_speed(state),
        }
