# hullbox/mesh.py
from __future__ import annotations
from dataclasses import dataclass
from typing import Dict, List, Optional, Sequence, Set, Tuple

from .geom import Pt
from .predicates import signed_distance_to_plane, volume_sign

Edge = Tuple[int, int]          # орієнтоване ребро (u, v)
UEdge = Tuple[int, int]         # неорієнтоване ребро (min(u,v), max(u,v))


def edge_key(u: int, v: int) -> UEdge:
    return (u, v) if u < v else (v, u)


@dataclass
class Face:
    """
    Плоский многокутник сітки.
    v: індекси вершин у порядку обходу (нормаль назовні за правилом правої руки).
    alive: чи грань належить сітці.
    label: необов'язкова назва (для граней коробки: "bottom", "top", ...).
    """
    v: Tuple[int, ...]
    alive: bool = True
    label: Optional[str] = None

    def edge(self, i: int) -> Edge:
        n = len(self.v)
        return (self.v[i % n], self.v[(i + 1) % n])

    def edges(self) -> List[Edge]:
        return [self.edge(i) for i in range(len(self.v))]

    def flip(self) -> None:
        self.v = tuple(reversed(self.v))


class Mesh:
    """
    Сітка з гранями-індексами у спільну таблицю точок.

      - points: список Pt (таблиця вершин, не змінюється)
      - faces_list: усі створені грані (видалені позначаються alive=False)
      - edge2face: (min,max) -> [face_id, ...] лише для живих граней
    """

    def __init__(self, points: Sequence[Pt]):
        self.points: List[Pt] = list(points)
        self.faces_list: List[Face] = []
        self.edge2face: Dict[UEdge, List[int]] = {}

    # ---------------- Мутації ----------------
    def add_face(self, *idx: int, label: Optional[str] = None) -> int:
        """Створити грань і зареєструвати її ребра. Некоректна грань — помилка виклику."""
        if len(idx) < 3:
            raise ValueError(f"Face needs at least 3 vertices, got {len(idx)}")
        if len(set(idx)) != len(idx):
            raise ValueError(f"Face has repeated vertices: {idx}")
        for i in idx:
            if not 0 <= i < len(self.points):
                raise ValueError(f"Vertex index {i} out of range")
        fid = len(self.faces_list)
        face = Face(tuple(idx), label=label)
        self.faces_list.append(face)
        for u, v in face.edges():
            self.edge2face.setdefault(edge_key(u, v), []).append(fid)
        return fid

    def remove_face(self, fid: int) -> None:
        f = self.faces_list[fid]
        if not f.alive:
            return
        f.alive = False
        for u, v in f.edges():
            key = edge_key(u, v)
            lst = [g for g in self.edge2face.get(key, []) if g != fid]
            if lst:
                self.edge2face[key] = lst
            else:
                self.edge2face.pop(key, None)

    def flip_face(self, fid: int) -> None:
        self.faces_list[fid].flip()

    # ---------------- Запити ----------------
    def face_ids(self) -> List[int]:
        return [fid for fid, f in enumerate(self.faces_list) if f.alive]

    def faces(self) -> List[Tuple[int, ...]]:
        """Активні грані як кортежі індексів вершин."""
        return [f.v for f in self.faces_list if f.alive]

    def face(self, fid: int) -> Face:
        return self.faces_list[fid]

    def face_points(self, fid: int) -> Tuple[Pt, ...]:
        return tuple(self.points[i] for i in self.faces_list[fid].v)

    def vertices(self) -> List[int]:
        """Індекси вершин, на які посилаються живі грані."""
        return sorted({i for f in self.faces_list if f.alive for i in f.v})

    def vertex_points(self) -> List[Pt]:
        return [self.points[i] for i in self.vertices()]

    def edge_faces(self) -> Dict[UEdge, List[int]]:
        return {k: lst[:] for k, lst in self.edge2face.items() if lst}

    def __len__(self) -> int:
        return len(self.face_ids())

    # ---------------- Геометричні перевірки ----------------
    def contains(self, p: Pt, eps: float = 0.0) -> bool:
        """p всередині або на межі опуклої сітки (відстань до кожної площини <= eps)."""
        faces = self.face_ids()
        if not faces:
            return False
        for fid in faces:
            a, b, c = self.face_points(fid)[:3]
            if signed_distance_to_plane(a, b, c, p) > eps:
                return False
        return True

    def strictly_contains(self, p: Pt) -> bool:
        """p строго по внутрішній стороні кожної грані (точний знак)."""
        faces = self.face_ids()
        if not faces:
            return False
        for fid in faces:
            a, b, c = self.face_points(fid)[:3]
            if volume_sign(a, b, c, p) <= 0:
                return False
        return True

    # ---------------- Діагностика ----------------
    def validate(self, eps: float = 0.0) -> dict:
        """
        Перевірка коректності опуклої сітки:
          - кожне неорієнтоване ребро зустрічається рівно у 2 живих гранях;
          - кожне орієнтоване ребро зустрічається один раз (узгоджена орієнтація);
          - жодна вершина не лежить строго зовні площини жодної грані
            (відстань > eps).
        Повертає словник із діагностикою (порожні списки = все ок).
        """
        faces = self.face_ids()
        verts = self.vertices()

        # 1) ребра мають кратність 2
        edge_count: Dict[UEdge, int] = {}
        directed: Set[Edge] = set()
        bad_directed: List[Edge] = []
        for fid in faces:
            for u, v in self.faces_list[fid].edges():
                key = edge_key(u, v)
                edge_count[key] = edge_count.get(key, 0) + 1
                if (u, v) in directed:
                    bad_directed.append((u, v))
                directed.add((u, v))
        bad_edges = [(e, k) for e, k in edge_count.items() if k != 2]

        # 2) опуклість: вершини не «бачать» жодної грані
        bad_orient: List[Tuple[int, int]] = []
        for fid in faces:
            f = self.faces_list[fid]
            a, b, c = self.face_points(fid)[:3]
            on_face = set(f.v)
            for vi in verts:
                if vi in on_face:
                    continue
                if signed_distance_to_plane(a, b, c, self.points[vi]) > eps:
                    bad_orient.append((fid, vi))

        return {
            "faces": len(faces),
            "unique_vertices": len(verts),
            "edges": len(edge_count),
            "bad_edges": bad_edges,
            "bad_directed_edges": bad_directed,
            "bad_orient": bad_orient,
        }
