"""
Тести інкрементальної опуклої оболонки.
"""

import numpy as np
import pytest

from hullbox.errors import DegenerateGeometryError, InsufficientPointsError
from hullbox.geom import Pt, centroid
from hullbox.hull import ConvexHull3D, akl_toussaint_filter, akl_toussaint_points, convex_hull
from hullbox.predicates import orient3d


def vertex_set(mesh):
    return {tuple(p) for p in mesh.vertex_points()}


def test_regular_tetrahedron(tetra_points):
    hull = ConvexHull3D(tetra_points)
    report = hull.validate()
    assert report["faces"] == 4
    assert report["edges"] == 6
    assert report["unique_vertices"] == 4
    assert report["bad_edges"] == []
    assert report["bad_orient"] == []
    O = centroid(tetra_points)
    for f in hull.faces():
        a, b, c = (tetra_points[i] for i in f)
        assert orient3d(a, b, c, O) < 0


def test_seed_is_reoriented_when_fourth_point_is_visible():
    pts = [Pt(0, 0, 0), Pt(1, 0, 0), Pt(0, 1, 0), Pt(0, 0, 1)]
    hull = ConvexHull3D(pts)
    assert hull.faces()[0] == (2, 1, 0)
    assert hull.validate()["bad_orient"] == []


def test_cube(cube_points):
    hull = ConvexHull3D(cube_points)
    report = hull.validate()
    assert report["faces"] == 12
    assert report["edges"] == 18
    assert report["bad_edges"] == []
    assert report["bad_directed_edges"] == []
    assert report["bad_orient"] == []
    assert vertex_set(hull.mesh) == {tuple(p) for p in cube_points}


def test_duplicates_and_interior_points_are_dropped(cube_points):
    pts = cube_points + cube_points + [Pt(0.5, 0.5, 0.5), Pt(0.2, 0.8, 0.3)]
    hull = ConvexHull3D(pts)
    assert vertex_set(hull.mesh) == {tuple(p) for p in cube_points}
    assert hull.validate()["bad_edges"] == []


def test_collinear_points_are_reprocessed():
    """5 колінеарних точок + 3 точки, що утворюють з ними тетраедр."""
    pts = [Pt(0, 0, 0), Pt(1, 0, 0), Pt(2, 0, 0), Pt(3, 0, 0), Pt(4, 0, 0),
           Pt(0, 1, 0), Pt(0, 0, 1), Pt(1, 1, 1)]
    hull = ConvexHull3D(pts)
    assert hull.co_vertices == [2, 3, 4]
    report = hull.validate()
    assert report["bad_edges"] == []
    assert report["bad_directed_edges"] == []
    assert report["bad_orient"] == []
    extremal = {(0, 0, 0), (4, 0, 0), (0, 1, 0), (0, 0, 1), (1, 1, 1)}
    assert extremal <= vertex_set(hull.mesh)
    for p in pts:
        assert hull.mesh.contains(p)


def test_coplanar_point_on_face_is_not_inserted():
    """Нульовий об'єм = грань не видима: точка на грані не стає вершиною."""
    pts = [Pt(0, 0, 0), Pt(1, 0, 0), Pt(0, 1, 0), Pt(0, 0, 1), Pt(0.25, 0.25, 0)]
    hull = ConvexHull3D(pts)
    assert hull.vertices() == [0, 1, 2, 3]
    assert not hull.add_point(4)


def test_random_cloud_properties(random_cloud):
    hull = ConvexHull3D(random_cloud)
    report = hull.validate(eps=1e-9)
    assert report["bad_edges"] == []
    assert report["bad_directed_edges"] == []
    assert report["bad_orient"] == []
    # вершини оболонки є вхідними точками
    assert vertex_set(hull.mesh) <= {tuple(p) for p in random_cloud}
    # решта точок всередині або на межі
    for p in random_cloud:
        assert hull.mesh.contains(p, eps=1e-9)


def test_matches_scipy_hull(random_cloud):
    spatial = pytest.importorskip("scipy.spatial")
    arr = np.array([tuple(p) for p in random_cloud])
    expected = {tuple(arr[i]) for i in spatial.ConvexHull(arr).vertices}
    hull = ConvexHull3D(random_cloud)
    assert vertex_set(hull.mesh) == expected


def test_hull_of_hull_is_itself(random_cloud):
    first = ConvexHull3D(random_cloud)
    second = ConvexHull3D(first.vertex_points())
    assert vertex_set(second.mesh) == vertex_set(first.mesh)


def test_akl_toussaint_does_not_change_hull(random_cloud):
    plain = ConvexHull3D(random_cloud)
    filtered = ConvexHull3D(random_cloud, akl_toussaint=True)
    assert vertex_set(filtered.mesh) == vertex_set(plain.mesh)
    assert len(filtered.points) < len(random_cloud)


def test_akl_toussaint_filter(cube_points):
    inner = [Pt(0.5, 0.5, 0.5), Pt(0.1, 0.9, 0.4)]
    pts = inner[:1] + cube_points + inner[1:]
    assert akl_toussaint_points(pts) == cube_points
    assert akl_toussaint_filter(pts) == cube_points


def test_akl_toussaint_filter_keeps_input_when_extremes_are_flat():
    # екстремальні точки копланарні, фільтр нічого не відкидає
    pts = [Pt(0, 0, 0), Pt(2, 0, 0), Pt(0, 2, 0), Pt(2, 2, 0), Pt(1, 1, 0)]
    assert akl_toussaint_filter(pts) == pts


def test_accepts_tuples():
    hull = ConvexHull3D([(0, 0, 0), (1, 0, 0), (0, 1, 0), (0, 0, 1)])
    assert len(hull.faces()) == 4


@pytest.mark.parametrize("pts, error", [
    ([(0, 0, 0), (1, 0, 0), (0, 1, 0)], InsufficientPointsError),
    ([(1, 1, 1)] * 5, DegenerateGeometryError),
    ([(i, 2 * i, 3 * i) for i in range(6)], DegenerateGeometryError),
    ([(0, 0, 0), (1, 0, 0), (0, 1, 0), (1, 1, 0), (0.5, 0.5, 0)], DegenerateGeometryError),
])
def test_degenerate_inputs(pts, error):
    with pytest.raises(error):
        ConvexHull3D(pts)
    assert convex_hull(pts) is None
    assert convex_hull(pts, use_akl_toussaint=True) is None


def test_convex_hull_function(cube_points):
    mesh = convex_hull(cube_points, use_akl_toussaint=True)
    assert mesh is not None
    assert len(mesh) == 12


def test_rotated_grid_cube_is_closed_and_convex(rotated_grid_cube):
    """Копланарні точки з похибкою округлення не ламають сітку."""
    hull = ConvexHull3D(rotated_grid_cube)
    report = hull.validate(eps=1e-9)
    assert report["bad_edges"] == []
    assert report["bad_directed_edges"] == []
    assert report["bad_orient"] == []
    # замкнена трикутна сітка роду 0
    assert report["faces"] == 2 * report["unique_vertices"] - 4
    assert vertex_set(hull.mesh) <= {tuple(p) for p in rotated_grid_cube}
    for p in rotated_grid_cube:
        assert hull.mesh.contains(p, eps=1e-9)


@pytest.mark.parametrize("akl_toussaint", [False, True])
def test_rotated_grid_cube_keeps_all_cube_corners(rotated_grid_cube, akl_toussaint):
    c, s = np.cos(0.3), np.sin(0.3)
    corners = {(float(c*x - s*y), float(s*x + c*y), float(z))
               for x in (0.0, 1.0) for y in (0.0, 1.0) for z in (0.0, 1.0)}
    hull = ConvexHull3D(rotated_grid_cube, akl_toussaint=akl_toussaint)
    assert corners <= vertex_set(hull.mesh)
    assert hull.validate(eps=1e-9)["bad_edges"] == []


@pytest.mark.parametrize("k", [1e-4, 1e-3, 1e4])
def test_scaled_cloud(k):
    rng = np.random.default_rng(7)
    pts = [Pt(*(float(c) for c in row)) for row in rng.random((30, 3)) * k]
    hull = ConvexHull3D(pts)
    report = hull.validate(eps=1e-9 * k)
    assert report["bad_edges"] == []
    assert report["bad_orient"] == []
    for p in pts:
        assert hull.mesh.contains(p, eps=1e-9 * k)
    # та сама хмара в одиничному масштабі дає ті самі вершини
    unit = ConvexHull3D([Pt(p.x / k, p.y / k, p.z / k) for p in pts])
    assert hull.vertices() == unit.vertices()


def test_scaled_cloud_matches_scipy():
    spatial = pytest.importorskip("scipy.spatial")
    arr = np.random.default_rng(3).random((40, 3)) * 1e-4
    expected = {tuple(arr[i]) for i in spatial.ConvexHull(arr).vertices}
    hull = ConvexHull3D([Pt(*(float(c) for c in row)) for row in arr])
    assert vertex_set(hull.mesh) == expected


@pytest.mark.parametrize("seed", range(6))
def test_random_clouds_are_valid(seed):
    rng = np.random.default_rng(seed)
    pts = [Pt(*(float(c) for c in row)) for row in rng.normal(size=(80, 3))]
    hull = ConvexHull3D(pts, akl_toussaint=True)
    report = hull.validate(eps=1e-9)
    assert report["bad_edges"] == []
    assert report["bad_directed_edges"] == []
    assert report["bad_orient"] == []
    for p in pts:
        assert hull.mesh.contains(p, eps=1e-9)


def test_horizon_must_be_one_loop():
    ConvexHull3D._check_horizon(0, [(1, 2), (2, 3), (3, 1)])
    with pytest.raises(DegenerateGeometryError):
        # дві окремі петлі
        ConvexHull3D._check_horizon(0, [(1, 2), (2, 3), (3, 1), (4, 5), (5, 6), (6, 4)])
    with pytest.raises(DegenerateGeometryError):
        # вершина 2 має два вихідні ребра
        ConvexHull3D._check_horizon(0, [(1, 2), (2, 3), (3, 1), (2, 4), (4, 5), (5, 2)])
    with pytest.raises(DegenerateGeometryError):
        ConvexHull3D._check_horizon(0, [(1, 2), (2, 3)])
    with pytest.raises(DegenerateGeometryError):
        ConvexHull3D._check_horizon(0, [])


def test_failed_insertion_leaves_mesh_untouched(monkeypatch, cube_points):
    hull = ConvexHull3D(cube_points)
    before = hull.faces()

    def broken(p_idx, edges):
        raise DegenerateGeometryError("broken horizon")

    monkeypatch.setattr(hull, "_check_horizon", broken)
    hull.P.append(Pt(2.0, 2.0, 2.0))
    hull.mesh.points.append(Pt(2.0, 2.0, 2.0))
    with pytest.raises(DegenerateGeometryError):
        hull.add_point(len(hull.P) - 1)
    assert hull.faces() == before
