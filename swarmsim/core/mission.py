import heapq
from dataclasses import dataclass, field

from .state import SwarmParameters

STANDBY = "STANDBY"
DEFAULT_MISSION = "TRAINING EXERCISE ALPHA"

COMM_FAILURE = "comm_failure"
PACKET_LOSS = "packet_loss"


@dataclass
class MissionState:
    running: bool = False
    paused: bool = False
    mission: str = STANDBY
    elapsed: float = 0.0
    collisions_avoided: int = 0
    signal_strength: float = 100.0
    active_agents: int = 0
    coverage_area: float = 0.0
    # written by the analytics pass only
    mission_score: int = 0
    formation_score: float = 100.0
    collision_score: float = 100.0
    comm_score: float = 100.0
    completion_score: float = 0.0

    @property
    def active(self) -> bool:
        return self.running and not self.paused

    @property
    def phase(self) -> str:
        if not self.running:
            return "standby"
        return "paused" if self.paused else "running"


@dataclass
class FaultConfig:
    signal_drop: float = 30.0
    comm_restore_after: float = 5.0
    latency_spike: float = 200.0
    latency_restore_after: float = 3.0
    baseline_latency: float = 50.0

    @classmethod
    def from_dict(cls, cfg: dict | None) -> "FaultConfig":
        cfg = cfg or {}
        return cls(**{k: float(v) for k, v in cfg.items() if k in cls.__dataclass_fields__})


@dataclass(order=True)
class ScheduledFault:
    expires_at: float
    seq: int
    kind: str = field(compare=False)


class MissionControl:
    """
    Run/pause state machine plus timed fault effects.

    Fault expiry runs on `clock`, which advances on every step whether or not
    the mission is paused; `elapsed` on the mission state only advances while
    running. A fault injected while paused therefore still recovers on time.
    """

    def __init__(self, params: SwarmParameters, faults: FaultConfig | None = None, state: MissionState | None = None):
        self.params = params
        self.faults = faults or FaultConfig()
        self.state = state or MissionState()
        self.clock = 0.0
        self._scheduled: list[ScheduledFault] = []
        self._seq = 0

    # -----------------------------
    # Run / pause
    # -----------------------------
    def start(self, mission: str = DEFAULT_MISSION):
        self.state.running = True
        self.state.paused = False
        self.state.mission = mission

    def pause(self) -> bool:
        """Flip paused; returns the new paused flag."""
        self.state.paused = not self.state.paused
        return self.state.paused

    def advance(self, dt: float) -> list[str]:
        """Move both clocks forward and return the kinds of faults that just expired."""
        self.clock += dt
        if self.state.active:
            self.state.elapsed += dt
        return self._expire()

    # -----------------------------
    # Faults
    # -----------------------------
    def inject_comm_failure(self) -> float:
        s = self.state
        s.signal_strength = max(0.0, s.signal_strength - self.faults.signal_drop)
        self._schedule(COMM_FAILURE, self.faults.comm_restore_after)
        return s.signal_strength

    def inject_packet_loss(self) -> float:
        p = self.params
        p.comm_latency += self.faults.latency_spike
        self._schedule(PACKET_LOSS, self.faults.latency_restore_after)
        return p.comm_latency

    def record_avoidance(self, events: int):
        self.state.collisions_avoided += int(events)

    @property
    def pending_faults(self) -> list[ScheduledFault]:
        return sorted(self._scheduled)

    def _schedule(self, kind: str, delay: float):
        self._seq += 1
        heapq.heappush(self._scheduled, ScheduledFault(self.clock + delay, self._seq, kind))

    def _expire(self) -> list[str]:
        expired = []
        while self._scheduled and self._scheduled[0].expires_at <= self.clock:
            fault = heapq.heappop(self._scheduled)
            self._revert(fault.kind)
            expired.append(fault.kind)
        return expired

    def _revert(self, kind: str):
        s = self.state
        if kind == COMM_FAILURE:
            s.signal_strength = min(100.0, s.signal_strength + self.faults.signal_drop)
        elif kind == PACKET_LOSS:
            p = self.params
            p.comm_latency = max(self.faults.baseline_latency, p.comm_latency - self.faults.latency_spike)
