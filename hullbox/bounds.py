"""
Мінімальний охоплюючий паралелепіпед 3D множини точок.

Реалізація алгоритму F. Vivien, N. Wicker, "Minimal enclosing parallelepiped
in 3D", Computational Geometry 29 (2004), O(n log n + k):

  1. опукла оболонка C точок (з евристикою Акла–Туссена);
  2. для кожної грані f — антиподи (найвіддаленіші вершини C) і товщина;
  3. пари граней-кандидатів, що можуть бути сусідніми гранями паралелепіпеда;
  4. трійка кандидатів із мінімальним об'ємом t1·t2·t3 / |det(n1, n2, n3)|;
     без такої трійки додаються площини пар ребер, далі всі пари площин граней;
  5. 8 вершин — перетини трійок площин (по дві паралельні площини на грань).
"""
from __future__ import annotations
import logging
from dataclasses import dataclass, field
from itertools import product
from math import inf
from typing import Iterable, Iterator, List, Optional, Sequence, Tuple

from .errors import DegenerateResultError, NoSeparatingTripleError
from .geom import EPS, Pt, as_point, centroid, cross, dot, norm, scale, sub
from .hull import ConvexHull3D, coordinate_scale
from .mesh import Mesh
from .predicates import orient3d
from .solver import solve_linear

logger = logging.getLogger(__name__)

ZERO_LIMIT = 1e-6  # нижче цього значення величина вважається нулем

# (вісь трійки, бік) -> назва грані коробки
FACE_NAMES = {
    (0, 0): "left", (0, 1): "right",
    (1, 0): "front", (1, 1): "back",
    (2, 0): "bottom", (2, 1): "top",
}


@dataclass
class CandidatePlane:
    """
    Опорна площина, що несе грань оболонки (або ребро e1 для пари ребер).
    normal — одинична нормаль назовні від антиподів; thickness — відстань до них;
    vector = normal * thickness.
    """
    face: Optional[int]
    vertices: Tuple[int, ...]
    normal: Pt
    thickness: float
    antipodals: List[int] = field(default_factory=list)

    @property
    def vector(self) -> Pt:
        return scale(self.normal, self.thickness)

    def offsets(self, points: Sequence[Pt]) -> Tuple[float, float]:
        """Праві частини n·x = d для площини грані та паралельної їй через антипод."""
        d = dot(self.normal, points[self.vertices[0]])
        return d, d - self.thickness


def hull_extent(mesh: Mesh) -> float:
    """Найбільша сторона осі-вирівняної коробки вершин; масштаб для допусків."""
    box = axis_aligned_bounding_box(mesh.vertex_points())
    if box is None:
        return 0.0
    lo, hi = box
    return max(hi.x - lo.x, hi.y - lo.y, hi.z - lo.z)


def antipodal_planes(mesh: Mesh, eps: float = ZERO_LIMIT) -> List[CandidatePlane]:
    """
    Для кожної живої грані: нормаль, товщина і множина антиподів.
    Товщина — найбільша відстань вершини до площини грані; антиподи — вершини,
    відстань яких менша за неї не більше ніж на eps * (розмір оболонки).
    Грані нульової площі пропускаються.
    """
    P = mesh.points
    verts = mesh.vertices()
    tol = eps * hull_extent(mesh)
    planes: List[CandidatePlane] = []
    for fid in mesh.face_ids():
        f = mesh.face(fid)
        a, b, c = (P[i] for i in f.v[:3])
        n = cross(sub(b, a), sub(c, a))
        length = norm(n)
        if length <= EPS * norm(sub(b, a)) * norm(sub(c, a)):
            logger.debug("Skipping zero-area face %d", fid)
            continue
        unit = scale(n, 1.0 / length)

        dists = [(vi, abs(dot(unit, sub(P[vi], a)))) for vi in verts]
        dist_max = max(d for _, d in dists)
        antipodals = [vi for vi, d in dists if dist_max - d <= tol]
        # антиподи лежать з внутрішнього боку площини грані
        far = max(dists, key=lambda vd: vd[1])[0]
        if dot(unit, sub(P[far], a)) > 0.0:
            unit = scale(unit, -1.0)
        planes.append(CandidatePlane(fid, f.v, unit, dist_max, antipodals))
    return planes


def edge_pair_planes(mesh: Mesh, eps: float = ZERO_LIMIT) -> List[CandidatePlane]:
    """
    Пари непаралельних ребер оболонки (e1, e2): площини, паралельні обом
    ребрам, одна містить e1, інша e2. Пара береться, якщо вся оболонка лежить
    між цими площинами. face = None, vertices = кінці e1, antipodals = кінці e2.
    """
    P = mesh.points
    verts = mesh.vertices()
    extent = hull_extent(mesh)
    thin = eps * extent
    slack = EPS * max(extent, coordinate_scale(P))
    edges = sorted(mesh.edge_faces())
    planes: List[CandidatePlane] = []
    for i, (a1, b1) in enumerate(edges):
        d1 = sub(P[b1], P[a1])
        for a2, b2 in edges[i + 1:]:
            d2 = sub(P[b2], P[a2])
            n = cross(d1, d2)
            length = norm(n)
            if length <= EPS * norm(d1) * norm(d2):
                continue
            unit = scale(n, 1.0 / length)
            hi = dot(unit, P[a1])
            lo = dot(unit, P[a2])
            if hi < lo:
                unit = scale(unit, -1.0)
                hi, lo = -hi, -lo
            thickness = hi - lo
            if thickness <= thin:
                continue
            if all(lo - slack <= dot(unit, P[vi]) <= hi + slack for vi in verts):
                planes.append(CandidatePlane(None, (a1, b1), unit, thickness, [a2, b2]))
    return planes


def _face_antipodal_vectors(plane: CandidatePlane, points: Sequence[Pt]) -> List[Pt]:
    return [sub(points[fv], points[av]) for fv in plane.vertices for av in plane.antipodals]


def _straddles(vectors: Iterable[Pt], normal: Pt) -> bool:
    """Вектори не лежать строго по один бік площини з нормаллю normal."""
    all_pos = all_neg = True
    for v in vectors:
        s = dot(v, normal)
        if s <= 0.0:
            all_pos = False
        if s >= 0.0:
            all_neg = False
        if not (all_pos or all_neg):
            return True
    return False


def candidate_lists(mesh: Mesh, planes: Sequence[CandidatePlane]) -> List[List[int]]:
    """
    candidates[i] — відсортовані індекси j > i (у planes), для яких вектори
    «грань–антипод» кожної з пари перетинають напрям нормалі іншої.
    """
    vectors = [_face_antipodal_vectors(pl, mesh.points) for pl in planes]
    candidates: List[List[int]] = [[] for _ in planes]
    for i in range(len(planes)):
        for j in range(i + 1, len(planes)):
            if (_straddles(vectors[i], planes[j].normal)
                    and _straddles(vectors[j], planes[i].normal)):
                candidates[i].append(j)
    return candidates


def _common(a: Sequence[int], b: Sequence[int]) -> Iterator[int]:
    """Злиття двох відсортованих списків: спільні елементи."""
    i = j = 0
    while i < len(a) and j < len(b):
        if a[i] == b[j]:
            yield a[i]
            i += 1
            j += 1
        elif a[i] < b[j]:
            i += 1
        else:
            j += 1


def best_triple(planes: Sequence[CandidatePlane], candidates: Sequence[Sequence[int]],
                eps: float = ZERO_LIMIT) -> Tuple[Tuple[int, int, int], float]:
    """
    Трійка (i, j, k) взаємних кандидатів з мінімальним об'ємом.
    Трійки з |det(n_i, n_j, n_k)| <= eps пропускаються.
    """
    best: Optional[Tuple[int, int, int]] = None
    vol_min = inf
    for i, cand_i in enumerate(candidates):
        ni, ti = planes[i].normal, planes[i].thickness
        for pos, j in enumerate(cand_i):
            nij = cross(ni, planes[j].normal)
            tij = ti * planes[j].thickness
            for k in _common(cand_i[pos + 1:], candidates[j]):
                det = abs(dot(nij, planes[k].normal))
                if det <= eps:
                    continue
                volume = tij * planes[k].thickness / det
                if volume < vol_min:
                    vol_min = volume
                    best = (i, j, k)
    if best is None:
        raise NoSeparatingTripleError("No triple of candidate planes with independent normals")
    return best, vol_min


def box_corners(points: Sequence[Pt], triple: Sequence[CandidatePlane]) -> List[Pt]:
    """
    8 вершин: перетин площин {P1, P1'} x {P2, P2'} x {P3, P3'}.
    Вершина з індексом 4*b1 + 2*b2 + b3 лежить на площині антиподу осі m, якщо b_m = 1.
    Вироджена система дає SingularSystemError без часткових результатів.
    """
    rows = [[pl.normal.x, pl.normal.y, pl.normal.z] for pl in triple]
    offsets = [pl.offsets(points) for pl in triple]
    corners: List[Pt] = []
    for bits in product((0, 1), repeat=3):
        rhs = [offsets[m][bits[m]] for m in range(3)]
        x = solve_linear(rows, rhs)
        corners.append(Pt(float(x[0]), float(x[1]), float(x[2])))
    return corners


def box_mesh(corners: Sequence[Pt]) -> Mesh:
    """6 чотирикутних граней паралелепіпеда, орієнтованих назовні."""
    mesh = Mesh(corners)
    O = centroid(corners)
    cycle = ((0, 0), (1, 0), (1, 1), (0, 1))
    for axis in range(3):
        p, q = (m for m in range(3) if m != axis)
        for side in (0, 1):
            quad = []
            for bp, bq in cycle:
                bits = [0, 0, 0]
                bits[axis], bits[p], bits[q] = side, bp, bq
                quad.append(4 * bits[0] + 2 * bits[1] + bits[2])
            a, b, c = (corners[i] for i in quad[:3])
            # хочемо orient3d(a,b,c,O) < 0 (O всередині, нормаль назовні)
            if orient3d(a, b, c, O) > 0:
                quad.reverse()
            mesh.add_face(*quad, label=FACE_NAMES[(axis, side)])
    return mesh


def parallelepiped_volume(corners: Sequence[Pt]) -> float:
    """Об'єм за трьома ребрами з вершини 0 (порядок box_corners)."""
    o = corners[0]
    return abs(orient3d(o, corners[4], corners[2], corners[1]))


class MinimalEnclosingBox:
    """
    Мінімальний охоплюючий паралелепіпед.

    Усе обчислюється в конструкторі, відмови через DegenerateResultError і нащадків.
    hull: готова опукла оболонка (Mesh); якщо None — будується з points.
    use_edge_pairs: одразу додати площини пар ребер (кроки 8-14 алгоритму); за
    замовчуванням вони додаються лише тоді, коли площини граней не дають жодної
    трійки взаємних кандидатів.

    Якщо й тоді трійки немає, кандидатами стають усі пари площин граней: будь-які
    три шари з незалежними нормалями охоплюють оболонку.
    """

    def __init__(self, points: Iterable[Pt | Sequence[float]], eps: float = ZERO_LIMIT,
                 hull: Optional[Mesh] = None, use_edge_pairs: bool = False):
        self.eps = eps
        if hull is None:
            hull = ConvexHull3D(points, akl_toussaint=True).mesh
        self.hull: Mesh = hull

        (i, j, k), self.volume = self._search(use_edge_pairs)
        self.triple: Tuple[CandidatePlane, CandidatePlane, CandidatePlane] = (
            self.planes[i], self.planes[j], self.planes[k])
        logger.debug("Best triple: faces %s, volume %g",
                     [pl.face for pl in self.triple], self.volume)

        self.corners = box_corners(hull.points, self.triple)
        self.mesh = box_mesh(self.corners)

    def _searches(self, use_edge_pairs: bool
                  ) -> Iterator[Tuple[str, List[CandidatePlane], List[List[int]]]]:
        """Послідовні набори (назва, площини, кандидати) для пошуку трійки."""
        hull, eps = self.hull, self.eps
        faces = antipodal_planes(hull, eps)
        if not use_edge_pairs:
            yield "face planes", faces, candidate_lists(hull, faces)
        planes = faces + edge_pair_planes(hull, eps)
        yield "face and edge-pair planes", planes, candidate_lists(hull, planes)
        n = len(faces)
        yield "all pairs of face planes", faces, [list(range(i + 1, n)) for i in range(n)]

    def _search(self, use_edge_pairs: bool) -> Tuple[Tuple[int, int, int], float]:
        for name, planes, candidates in self._searches(use_edge_pairs):
            self.planes, self.candidates = planes, candidates
            try:
                return best_triple(planes, candidates, self.eps)
            except NoSeparatingTripleError as e:
                logger.debug("No triple among %s: %s", name, e)
        raise NoSeparatingTripleError("No triple of planes with independent normals")


def minimal_enclosing_box(points: Iterable[Pt | Sequence[float]], eps: float = ZERO_LIMIT,
                          use_edge_pairs: bool = False) -> Optional[Mesh]:
    """6-гранна сітка мінімального паралелепіпеда або None для виродженого входу."""
    try:
        return MinimalEnclosingBox(points, eps, use_edge_pairs=use_edge_pairs).mesh
    except DegenerateResultError as e:
        logger.debug("Degenerate enclosing box: %s", e)
        return None


def axis_aligned_bounding_box(points: Iterable[Pt | Sequence[float]]) -> Optional[Tuple[Pt, Pt]]:
    """(мінімальний кут, максимальний кут) або None для порожнього входу."""
    pts = [as_point(p) for p in points]
    if not pts:
        return None
    lo = Pt(min(p.x for p in pts), min(p.y for p in pts), min(p.z for p in pts))
    hi = Pt(max(p.x for p in pts), max(p.y for p in pts), max(p.z for p in pts))
    return lo, hi
