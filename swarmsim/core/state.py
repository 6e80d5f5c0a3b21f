from dataclasses import dataclass, field, fields
import numpy as np

from .errors import InvalidParameter


ACTIVE = "active"
LOST = "lost"


@dataclass
class AgentState:
    id: int
    pos: np.ndarray      # shape (3,), y is altitude
    vel: np.ndarray      # shape (3,)
    acc: np.ndarray = field(default_factory=lambda: np.zeros(3))
    battery: float = 100.0   # 0..100
    status: str = ACTIVE
    heading: float | None = None  # degrees, last value while moving

    @property
    def active(self) -> bool:
        return self.status == ACTIVE

    @property
    def speed(self) -> float:
        return float(np.linalg.norm(self.vel))

    @property
    def altitude(self) -> float:
        return float(self.pos[1])


# divisors in steering and scoring
POSITIVE_PARAMS = ("speed", "spacing", "perception_radius", "separation_radius", "max_speed")


@dataclass
class SwarmParameters:
    speed: float = 5.0
    spacing: float = 10.0
    comm_latency: float = 50.0
    separation_weight: float = 1.5
    alignment_weight: float = 1.0
    cohesion_weight: float = 1.0
    goal_weight: float = 2.0
    perception_radius: float = 30.0
    separation_radius: float = 15.0
    max_speed: float = 20.0
    max_force: float = 0.5

    @classmethod
    def names(cls) -> list[str]:
        return [f.name for f in fields(cls)]

    @classmethod
    def validate(cls, name: str, value) -> float:
        if name not in cls.names():
            raise InvalidParameter(name)
        value = float(value)
        if name in POSITIVE_PARAMS and not value > 0:
            raise InvalidParameter(name, value, "must be positive")
        if value < 0:
            raise InvalidParameter(name, value, "must not be negative")
        return value

    @classmethod
    def from_dict(cls, cfg: dict | None) -> "SwarmParameters":
        cfg = cfg or {}
        known = set(cls.names())
        return cls(**{k: cls.validate(k, v) for k, v in cfg.items() if k in known})


@dataclass
class WorldBounds:
    boundary: float = 900.0
    min_altitude: float = 30.0
    max_altitude: float = 200.0
    battery_drain: float = 0.01   # percent per second
    home: tuple = (0.0, 100.0, 0.0)


@dataclass
class SwarmState:
    agents: dict[int, AgentState]
    t: float
