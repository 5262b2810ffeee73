from __future__ import annotations
from dataclasses import dataclass
from math import sqrt
from typing import Iterable, Sequence, Tuple

EPS = 1e-10  # відносний допуск: збіг точок, колінеарність, копланарність


@dataclass(frozen=True)
class Pt:
    x: float
    y: float
    z: float
    def __iter__(self):
        yield self.x; yield self.y; yield self.z

def as_point(p: Pt | Sequence[float]) -> Pt:
    if isinstance(p, Pt):
        return p
    x, y, z = p
    return Pt(float(x), float(y), float(z))

def sub(a: Pt, b: Pt) -> Pt:
    return Pt(a.x - b.x, a.y - b.y, a.z - b.z)

def add(a: Pt, b: Pt) -> Pt:
    return Pt(a.x + b.x, a.y + b.y, a.z + b.z)

def scale(a: Pt, k: float) -> Pt:
    return Pt(a.x*k, a.y*k, a.z*k)

def dot(a: Pt, b: Pt) -> float:
    return a.x*b.x + a.y*b.y + a.z*b.z

def cross(a: Pt, b: Pt) -> Pt:
    return Pt(a.y*b.z - a.z*b.y,
              a.z*b.x - a.x*b.z,
              a.x*b.y - a.y*b.x)

def norm(a: Pt) -> float:
    return sqrt(dot(a, a))

def almost_equal(a: Pt, b: Pt, eps: float = EPS) -> bool:
    """Покоординатна рівність з допуском eps."""
    return abs(a.x - b.x) <= eps and abs(a.y - b.y) <= eps and abs(a.z - b.z) <= eps

def collinear(a: Pt, b: Pt, c: Pt, eps: float = EPS) -> bool:
    """Синус кута між ab та ac не більший за eps (не залежить від масштабу)."""
    ab, ac = sub(b, a), sub(c, a)
    return norm(cross(ab, ac)) <= eps * norm(ab) * norm(ac)

def centroid(points: Iterable[Pt]) -> Pt:
    xs = ys = zs = 0.0
    n = 0
    for p in points:
        xs += p.x; ys += p.y; zs += p.z; n += 1
    if n == 0:
        raise ValueError("empty set")
    inv = 1.0 / n
    return Pt(xs*inv, ys*inv, zs*inv)

def unique_points(points: Iterable[Pt | Tuple[float, float, float]], scale: float = 1e9) -> list[Pt]:
    """
    Груба дедуплікація з квантуванням (стабільніше для float).
    `scale=1e9` ≈ EPS=1e-9 на координату. Порядок першої появи зберігається.
    """
    seen: dict[Tuple[int, int, int], Pt] = {}
    for p in points:
        q = as_point(p)
        key = (int(round(q.x*scale)), int(round(q.y*scale)), int(round(q.z*scale)))
        if key not in seen:
            seen[key] = q
    return list(seen.values())
