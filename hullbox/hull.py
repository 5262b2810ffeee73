from __future__ import annotations
import logging
from typing import Dict, Iterable, List, Optional, Sequence, Set

from .errors import DegenerateGeometryError, DegenerateResultError, InsufficientPointsError
from .geom import EPS, Pt, almost_equal, as_point, collinear, cross, norm, sub
from .mesh import Edge, Mesh, UEdge, edge_key
from .predicates import signed_distance_to_plane, visible_from_point, volume_sign

logger = logging.getLogger(__name__)


class ConvexHull3D:
    """
    Інкрементальна 3D опукла оболонка (Barber, Dobkin, Huhdanpaa, 1996).

    Вхід: послідовність точок (Pt або (x, y, z)), мінімум 4, не всі копланарні.
    Вихід: self.mesh — трикутна сітка, всі грані орієнтовані назовні.
    Порядок вставки = порядок вхідних точок; колінеарні/копланарні з затравкою
    точки відкладаються у co_vertices і вставляються наприкінці.

    eps — відносний допуск. Затравка порівнює синуси кутів з eps; при вставці
    точка, ближча до площини грані ніж tol = eps * (найбільша |координата|),
    вважається копланарною з нею і грань не бачить. eps=0 дає точний знак.
    """

    def __init__(self, points: Iterable[Pt | Sequence[float]], eps: float = EPS,
                 akl_toussaint: bool = False):
        pts = [as_point(p) for p in points]
        if len(pts) < 4:
            raise InsufficientPointsError(f"Need at least 4 points, got {len(pts)}")
        if akl_toussaint:
            before = len(pts)
            pts = akl_toussaint_filter(pts, eps)
            logger.debug("Akl-Toussaint filter kept %d of %d points", len(pts), before)
            if len(pts) < 4:
                raise InsufficientPointsError(
                    f"Only {len(pts)} points left after Akl-Toussaint filtering")

        self.P: List[Pt] = pts
        self.eps = eps
        self.tol = eps * coordinate_scale(pts)
        self.mesh = Mesh(pts)
        self.co_vertices: List[int] = []

        # 1) стартовий тетраедр
        first = self._build_initial_tetra()

        # 2) решта точок у вхідному порядку
        for pi in range(first, len(self.P)):
            self.add_point(pi)

        # 3) відкладені колінеарні/копланарні точки
        for pi in self.co_vertices:
            self.add_point(pi)

        if not self.mesh.face_ids():
            raise DegenerateGeometryError("Convex hull has no faces")
        logger.debug("Convex hull: %d points -> %d faces, %d vertices",
                     len(self.P), len(self.mesh), len(self.mesh.vertices()))

    # ---------------- Публічний API ----------------
    @property
    def points(self) -> List[Pt]:
        return self.P

    def faces(self) -> List[tuple]:
        """Активні грані (трикутники) як індекси вершин."""
        return self.mesh.faces()

    def vertices(self) -> List[int]:
        return self.mesh.vertices()

    def vertex_points(self) -> List[Pt]:
        return self.mesh.vertex_points()

    def validate(self, eps: float = 0.0) -> dict:
        return self.mesh.validate(eps)

    def add_point(self, p_idx: int) -> bool:
        """
        Додати точку p_idx до оболонки:
          1) знайти грані, видимі з точки (visible_from_point з допуском tol);
          2) від найглибше видимої грані зібрати зв'язну через ребра область
             видимих граней;
          3) ребра горизонту цієї області (спільне ребро двох її граней
             скасовується) мають утворювати один цикл;
          4) знести область і пришити нові грані (u, v, p) уздовж горизонту.
        Повертає False, якщо точка всередині (жодна грань не видима).
        Горизонт, що не є одним циклом, — DegenerateGeometryError; сітка тоді
        лишається незмінною.
        """
        p = self.P[p_idx]
        depth: Dict[int, float] = {}
        for fid in self.mesh.face_ids():
            a, b, c = self.mesh.face_points(fid)
            if visible_from_point(a, b, c, p, self.tol):
                depth[fid] = signed_distance_to_plane(a, b, c, p)
        if not depth:
            return False

        start = max(depth, key=depth.get)
        region = self._visible_region(start, set(depth))
        if len(region) < len(depth):
            logger.debug("Point %d: %d visible faces not connected to the deepest one",
                         p_idx, len(depth) - len(region))

        horizon: Dict[UEdge, Edge] = {}
        for fid in region:
            for u, v in self.mesh.face(fid).edges():
                key = edge_key(u, v)
                if key in horizon:
                    del horizon[key]
                else:
                    horizon[key] = (u, v)
        self._check_horizon(p_idx, list(horizon.values()))

        for fid in region:
            self.mesh.remove_face(fid)
        # орієнтація ребра береться з видимої грані, тож нова грань дивиться назовні
        for u, v in horizon.values():
            self.mesh.add_face(u, v, p_idx)
        return True

    # ---------------- Внутрішні методи ----------------
    def _visible_region(self, start: int, visible: Set[int]) -> List[int]:
        """Видимі грані, досяжні від start через спільні ребра."""
        region = [start]
        seen = {start}
        stack = [start]
        while stack:
            fid = stack.pop()
            for u, v in self.mesh.face(fid).edges():
                for g in self.mesh.edge2face.get(edge_key(u, v), ()):
                    if g in visible and g not in seen:
                        seen.add(g)
                        region.append(g)
                        stack.append(g)
        return region

    @staticmethod
    def _check_horizon(p_idx: int, edges: List[Edge]) -> None:
        """Кожна вершина горизонту має одне вихідне і одне вхідне ребро, цикл один."""
        if not edges:
            raise DegenerateGeometryError(f"Point {p_idx} sees every face of the hull")
        nxt: Dict[int, int] = {}
        incoming: Set[int] = set()
        for u, v in edges:
            if u in nxt or v in incoming:
                raise DegenerateGeometryError(
                    f"Horizon of point {p_idx} is not a simple loop at edge {(u, v)}")
            nxt[u] = v
            incoming.add(v)
        if set(nxt) != incoming:
            raise DegenerateGeometryError(f"Horizon of point {p_idx} is not closed")
        u = edges[0][0]
        steps = 0
        while True:
            u = nxt[u]
            steps += 1
            if u == edges[0][0]:
                break
        if steps != len(edges):
            raise DegenerateGeometryError(
                f"Horizon of point {p_idx} splits into several loops")

    def _build_initial_tetra(self) -> int:
        """
        Затравка за вхідним порядком:
          - p1: перша точка, що не збігається з p0 (у межах tol);
          - p2: перша точка, не колінеарна (p0, p1), колінеарні — у co_vertices;
          - p3: перша точка, не копланарна (p0, p1, p2), копланарні — у co_vertices.
        Колінеарність і копланарність відносні: |ab x ac| <= eps*|ab|*|ac| та
        |об'єм| <= eps*|ab x ac|*|ad|, тож не залежать від масштабу координат.
        Повертає індекс першої ще не обробленої точки.
        """
        n = len(self.P)
        p0 = 0
        i = 1
        while i < n and almost_equal(self.P[p0], self.P[i], self.tol):
            i += 1
        if i >= n:
            raise DegenerateGeometryError("All points coincide")
        p1 = i
        i += 1

        p2 = None
        while i < n:
            if collinear(self.P[p0], self.P[p1], self.P[i], self.eps):
                self.co_vertices.append(i)
            else:
                p2 = i
                i += 1
                break
            i += 1
        if p2 is None:
            raise DegenerateGeometryError("All points collinear: cannot form a base triangle")

        A, B, C = self.P[p0], self.P[p1], self.P[p2]
        base = norm(cross(sub(B, A), sub(C, A)))
        p3 = None
        sign = 0
        while i < n:
            D = self.P[i]
            sign = volume_sign(A, B, C, D, self.eps * base * norm(sub(D, A)))
            if sign == 0:
                self.co_vertices.append(i)
            else:
                p3 = i
                i += 1
                break
            i += 1
        if p3 is None:
            raise DegenerateGeometryError("All points coplanar: 3D hull is impossible")

        # p3 з видимого боку основи: перевертаємо її
        a, b, c = p0, p1, p2
        if sign < 0:
            a, c = c, a
        self.mesh.add_face(a, b, c)
        self.mesh.add_face(c, b, p3)
        self.mesh.add_face(b, a, p3)
        self.mesh.add_face(a, c, p3)
        return i


def coordinate_scale(points: Sequence[Pt]) -> float:
    """Найбільша абсолютна координата; від неї залежить похибка округлення."""
    return max((max(abs(p.x), abs(p.y), abs(p.z)) for p in points), default=0.0)


def akl_toussaint_points(points: Sequence[Pt]) -> List[Pt]:
    """
    Точки, на яких досягається мінімум або максимум хоча б однієї координати
    (рівні значення включаються). Вхідний порядок зберігається.
    """
    if not points:
        return []
    lo = [min(p.x for p in points), min(p.y for p in points), min(p.z for p in points)]
    hi = [max(p.x for p in points), max(p.y for p in points), max(p.z for p in points)]
    out = []
    for p in points:
        c = (p.x, p.y, p.z)
        if any(c[k] <= lo[k] or c[k] >= hi[k] for k in range(3)):
            out.append(p)
    return out


def akl_toussaint_filter(points: Sequence[Pt], eps: float = EPS) -> List[Pt]:
    """
    Евристика Акла–Туссена: відкинути точки строго всередині оболонки
    екстремальних точок. Якщо ця оболонка вироджена — повертає вхід без змін.
    """
    extremes = akl_toussaint_points(points)
    try:
        reduced = ConvexHull3D(extremes, eps=eps)
    except DegenerateResultError:
        return list(points)
    return [p for p in points if not reduced.mesh.strictly_contains(p)]


def convex_hull(points: Iterable[Pt | Sequence[float]], use_akl_toussaint: bool = False,
                eps: float = EPS) -> Optional[Mesh]:
    """Опукла оболонка як Mesh або None для виродженого входу."""
    try:
        return ConvexHull3D(points, eps=eps, akl_toussaint=use_akl_toussaint).mesh
    except DegenerateResultError as e:
        logger.debug("Degenerate convex hull input: %s", e)
        return None
