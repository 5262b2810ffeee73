from itertools import product

import numpy as np
import pytest

from hullbox.geom import Pt


@pytest.fixture
def tetra_points():
    """Правильний тетраедр, вписаний у куб [-1, 1]^3."""
    return [Pt(1, 1, 1), Pt(1, -1, -1), Pt(-1, 1, -1), Pt(-1, -1, 1)]


@pytest.fixture
def cube_points():
    return [Pt(x, y, z) for x in (0, 1) for y in (0, 1) for z in (0, 1)]


@pytest.fixture
def random_cloud():
    rng = np.random.default_rng(42)
    return [Pt(*(float(c) for c in row)) for row in rng.normal(size=(60, 3))]


@pytest.fixture
def slanted_box_points():
    """
    Коробка з ребрами u=(3,4,0), v=(-4,3,0), w=(0,0,1) (об'єм 25) плюс
    внутрішні точки; усі координати точно представні.
    """
    u, v, w = (3, 4, 0), (-4, 3, 0), (0, 0, 1)

    def at(a, b, c):
        return Pt(*(a*u[k] + b*v[k] + c*w[k] for k in range(3)))

    corners = [at(a, b, c) for a in (0, 1) for b in (0, 1) for c in (0, 1)]
    inner = [at(a, b, c) for a in (0.25, 0.75) for b in (0.25, 0.5) for c in (0.25, 0.75)]
    return inner[:4] + corners + inner[4:]


@pytest.fixture
def rotated_grid_cube():
    """
    98 точок сітки 5x5 на кожній грані одиничного куба, повернутого на 0.3 рад
    навколо осі z: багато копланарних точок з неточними координатами.
    """
    c, s = np.cos(0.3), np.sin(0.3)
    pts = []
    for x, y, z in product(np.linspace(0.0, 1.0, 5), repeat=3):
        if min(x, y, z) == 0.0 or max(x, y, z) == 1.0:
            pts.append(Pt(float(c*x - s*y), float(s*x + c*y), float(z)))
    return pts
