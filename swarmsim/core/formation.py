import math

import numpy as np

from .errors import UnknownFormation


BASE_ALTITUDE = 100.0

GRID = "grid"
V_FORMATION = "v-formation"
CIRCLE = "circle"
SPHERE = "sphere"
LINE = "line"
RANDOM = "random"

FORMATIONS = (GRID, V_FORMATION, CIRCLE, SPHERE, LINE, RANDOM)


def generate(count: int, kind: str, spacing: float, rng=None) -> list[np.ndarray]:
    """
    Initial layout for `count` agents.

    Every kind except `random` is deterministic. `rng` is only drawn from by
    `random`; pass a seeded np.random.Generator to make it reproducible.
    """
    if kind not in _GENERATORS:
        raise UnknownFormation(kind)
    if count <= 0:
        return []
    if kind == RANDOM:
        return _random(count, spacing, rng or np.random.default_rng())
    return _GENERATORS[kind](count, spacing)


def _grid(count, spacing):
    side = math.ceil(math.sqrt(count))
    half = (side - 1) / 2.0
    positions = []
    for i in range(count):
        x = (i % side - half) * spacing
        z = (i // side - half) * spacing
        positions.append(np.array([x, BASE_ALTITUDE, z]))
    return positions


def _v_formation(count, spacing):
    positions = []
    row = 0
    while len(positions) < count:
        in_row = min(2 * row + 1, count - len(positions))
        # row is centred on its full width so the apex stays on x=0
        half = row
        for col in range(in_row):
            x = (col - half) * spacing
            positions.append(np.array([x, BASE_ALTITUDE, -row * spacing]))
        row += 1
    return positions


def _circle(count, spacing):
    radius = spacing * count / (2 * math.pi)
    positions = []
    for i in range(count):
        angle = i / count * 2 * math.pi
        positions.append(np.array([math.cos(angle) * radius, BASE_ALTITUDE, math.sin(angle) * radius]))
    return positions


def _sphere(count, spacing):
    phi = math.pi * (3.0 - math.sqrt(5.0))
    scale = spacing * 5
    positions = []
    for i in range(count):
        y = 1 - (i / (count - 1)) * 2 if count > 1 else 0.0
        r = math.sqrt(1 - y * y)
        theta = phi * i
        positions.append(np.array([
            math.cos(theta) * r * scale,
            BASE_ALTITUDE + y * scale,
            math.sin(theta) * r * scale,
        ]))
    return positions


def _line(count, spacing):
    half = (count - 1) / 2.0
    return [np.array([(i - half) * spacing, BASE_ALTITUDE, 0.0]) for i in range(count)]


def _random(count, spacing, rng):
    side = spacing * count / 2
    xz = rng.uniform(-0.5, 0.5, size=(count, 2)) * side
    alt = rng.uniform(80.0, 120.0, size=count)
    return [np.array([xz[i, 0], alt[i], xz[i, 1]]) for i in range(count)]


_GENERATORS = {
    GRID: _grid,
    V_FORMATION: _v_formation,
    CIRCLE: _circle,
    SPHERE: _sphere,
    LINE: _line,
    RANDOM: _random,
}
