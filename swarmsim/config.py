import copy
import pathlib

import numpy as np
import yaml

from .core.env import SwarmEnv, Obstacle
from .core.mission import FaultConfig
from .core.simulator import Simulator
from .core.state import SwarmParameters, WorldBounds
from .core.swarm import SwarmController


DEFAULT_CONFIG = {
    "dt": 1.0 / 60.0,
    "steps": 3000,
    "seed": None,
    "agents": {"count": 50},
    "formation": "grid",
    "behavior_mode": "decentralized",
    "params": {
        "speed": 5.0,
        "spacing": 10.0,
        "comm_latency": 50.0,
        "separation_weight": 1.5,
        "alignment_weight": 1.0,
        "cohesion_weight": 1.0,
        "goal_weight": 2.0,
        "perception_radius": 30.0,
        "separation_radius": 15.0,
        "max_speed": 20.0,
        "max_force": 0.5,
    },
    "world": {
        "boundary": 900.0,
        "min_altitude": 30.0,
        "max_altitude": 200.0,
        "battery_drain": 0.01,
        "home": [0.0, 100.0, 0.0],
    },
    "obstacles": {
        "count": 10,
        "radius": 50.0,
        "extent": 500.0,
        "altitude": [50.0, 150.0],
        "list": None,  # explicit [{"center": [x, y, z], "radius": r}, ...] overrides count
    },
    "faults": {
        "signal_drop": 30.0,
        "comm_restore_after": 5.0,
        "latency_spike": 200.0,
        "latency_restore_after": 3.0,
        "baseline_latency": 50.0,
    },
    "analytics": {"sample_prob": 0.1, "history": 1000},
    "terrain": {"type": "urban", "time_of_day": "day", "weather": "clear"},
}


def deep_update(base: dict, override: dict) -> dict:
    out = dict(base)
    for k, v in override.items():
        if isinstance(v, dict) and isinstance(out.get(k), dict):
            out[k] = deep_update(out[k], v)
        else:
            out[k] = v
    return out


def load_config(path: pathlib.Path | None) -> dict:
    if path is None:
        return copy.deepcopy(DEFAULT_CONFIG)
    path = pathlib.Path(path)
    cfg = yaml.safe_load(path.read_text())
    if cfg is None:
        return copy.deepcopy(DEFAULT_CONFIG)
    if "inherits" in cfg:
        base_path = path.parent / cfg["inherits"]
        base_cfg = load_config(base_path)
        cfg = {k: v for k, v in cfg.items() if k != "inherits"}
        return deep_update(base_cfg, cfg)
    return deep_update(DEFAULT_CONFIG, cfg)


def build_env(cfg, rng) -> SwarmEnv:
    w = cfg.get("world", {})
    world = WorldBounds(
        boundary=float(w.get("boundary", 900.0)),
        min_altitude=float(w.get("min_altitude", 30.0)),
        max_altitude=float(w.get("max_altitude", 200.0)),
        battery_drain=float(w.get("battery_drain", 0.01)),
        home=tuple(w.get("home", (0.0, 100.0, 0.0))),
    )
    obs_cfg = cfg.get("obstacles", {})
    explicit = obs_cfg.get("list")
    if explicit is not None:
        obstacles = [
            Obstacle(i, o["center"], o.get("radius", obs_cfg.get("radius", 50.0)))
            for i, o in enumerate(explicit)
        ]
        return SwarmEnv(world=world, obstacles=obstacles)
    return SwarmEnv.with_obstacle_field(
        world=world,
        count=int(obs_cfg.get("count", 10)),
        radius=float(obs_cfg.get("radius", 50.0)),
        extent=float(obs_cfg.get("extent", 500.0)),
        altitude=tuple(obs_cfg.get("altitude", (50.0, 150.0))),
        rng=rng,
    )


def build_simulator(cfg: dict | None = None) -> Simulator:
    """Assemble a simulator with its swarm created but the mission in standby."""
    cfg = deep_update(DEFAULT_CONFIG, cfg or {})
    rng = np.random.default_rng(cfg.get("seed"))
    controller = SwarmController(
        params=SwarmParameters.from_dict(cfg.get("params")),
        env=build_env(cfg, rng),
        formation_kind=cfg.get("formation", "grid"),
        rng=rng,
    )
    sim = Simulator(
        controller,
        faults=FaultConfig.from_dict(cfg.get("faults")),
        sample_prob=float(cfg.get("analytics", {}).get("sample_prob", 0.1)),
        history=int(cfg.get("analytics", {}).get("history", 1000)),
        behavior_mode=cfg.get("behavior_mode", "decentralized"),
        metadata={"terrain": dict(cfg.get("terrain", {}))},
        rng=rng,
    )
    sim.create_swarm(int(cfg["agents"]["count"]))
    return sim
