import math

import numpy as np
import pytest

from swarmsim.core import formation
from swarmsim.core.errors import UnknownFormation


@pytest.mark.parametrize("kind", formation.FORMATIONS)
def test_zero_count_is_empty(kind):
    assert formation.generate(0, kind, 10.0) == []


@pytest.mark.parametrize("kind", formation.FORMATIONS)
def test_returns_exact_count(kind):
    rng = np.random.default_rng(0)
    for n in (1, 2, 7, 50):
        assert len(formation.generate(n, kind, 10.0, rng=rng)) == n


@pytest.mark.parametrize("n", [1, 2, 3, 10, 99, 1000, 10000])
def test_grid_has_no_duplicate_cells(n):
    pts = formation.generate(n, formation.GRID, 10.0)
    cells = {(round(p[0], 6), round(p[2], 6)) for p in pts}
    assert len(cells) == n
    assert all(p[1] == formation.BASE_ALTITUDE for p in pts)


def test_grid_is_centred():
    pts = np.array(formation.generate(9, formation.GRID, 10.0))
    assert pts[:, 0].mean() == pytest.approx(0.0)
    assert pts[:, 2].mean() == pytest.approx(0.0)


def test_line_four_agents():
    pts = formation.generate(4, formation.LINE, 10.0)
    assert np.allclose([p[0] for p in pts], [-15.0, -5.0, 5.0, 15.0])
    assert all(p[2] == 0.0 for p in pts)
    assert len({p[1] for p in pts}) == 1


def test_v_formation_rows():
    pts = formation.generate(4, formation.V_FORMATION, 10.0)
    assert np.allclose(pts[0], [0.0, formation.BASE_ALTITUDE, 0.0])
    assert np.allclose([p[0] for p in pts[1:]], [-10.0, 0.0, 10.0])
    assert all(p[2] == pytest.approx(-10.0) for p in pts[1:])


def test_v_formation_stops_mid_row():
    pts = formation.generate(6, formation.V_FORMATION, 5.0)
    assert len(pts) == 6
    # rows of 1 and 3, then two slots of the five-wide third row
    assert np.allclose([p[2] for p in pts], [0.0, -5.0, -5.0, -5.0, -10.0, -10.0])


def test_circle_radius_matches_arc_spacing():
    n, spacing = 12, 10.0
    pts = formation.generate(n, formation.CIRCLE, spacing)
    expected = spacing * n / (2 * math.pi)
    for p in pts:
        assert math.hypot(p[0], p[2]) == pytest.approx(expected)


def test_sphere_points_are_distinct_and_on_shell():
    spacing = 4.0
    pts = formation.generate(40, formation.SPHERE, spacing)
    centre = np.array([0.0, formation.BASE_ALTITUDE, 0.0])
    for p in pts:
        assert np.linalg.norm(p - centre) == pytest.approx(spacing * 5)
    keys = {tuple(np.round(p, 6)) for p in pts}
    assert len(keys) == 40


def test_sphere_single_agent():
    pts = formation.generate(1, formation.SPHERE, 10.0)
    assert len(pts) == 1
    assert np.all(np.isfinite(pts[0]))


def test_random_is_reproducible_with_seed():
    a = formation.generate(20, formation.RANDOM, 10.0, rng=np.random.default_rng(42))
    b = formation.generate(20, formation.RANDOM, 10.0, rng=np.random.default_rng(42))
    assert np.allclose(a, b)


def test_random_stays_in_box():
    n, spacing = 30, 10.0
    half = spacing * n / 4
    for p in formation.generate(n, formation.RANDOM, spacing, rng=np.random.default_rng(1)):
        assert -half <= p[0] <= half
        assert -half <= p[2] <= half
        assert 80.0 <= p[1] <= 120.0


def test_unknown_kind():
    with pytest.raises(UnknownFormation):
        formation.generate(3, "diamond", 10.0)
