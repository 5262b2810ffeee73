# hullbox/predicates.py
from __future__ import annotations
from .geom import Pt, sub, cross, dot, norm


def orient3d(a: Pt, b: Pt, c: Pt, d: Pt) -> float:
    """
    Потрійний добуток (b-a)x(c-a).(d-a), тобто шестикратний знаковий об'єм тетраедра.
    >0 якщо d лежить з боку нормалі (a,b,c) за правилом правої руки.
    """
    ab = sub(b, a)
    ac = sub(c, a)
    ad = sub(d, a)
    return dot(cross(ab, ac), ad)

def volume_sign(a: Pt, b: Pt, c: Pt, p: Pt, eps: float = 0.0) -> int:
    """
    Знак об'єму тетраедра (a-p, b-p, c-p).
      -1  p по зовнішній (видимій) стороні грані (a,b,c),
       0  p копланарна (|об'єм| <= eps),
      +1  p по внутрішній стороні.
    """
    ax, ay, az = a.x - p.x, a.y - p.y, a.z - p.z
    bx, by, bz = b.x - p.x, b.y - p.y, b.z - p.z
    cx, cy, cz = c.x - p.x, c.y - p.y, c.z - p.z
    vol = (ax * (by*cz - bz*cy)
           + ay * (bz*cx - bx*cz)
           + az * (bx*cy - by*cx))
    if vol > eps:
        return 1
    if vol < -eps:
        return -1
    return 0

def signed_distance_to_plane(a: Pt, b: Pt, c: Pt, p: Pt) -> float:
    n = cross(sub(b, a), sub(c, a))
    area2 = norm(n)
    if area2 == 0.0:
        return 0.0
    return orient3d(a, b, c, p) / area2

def visible_from_point(a: Pt, b: Pt, c: Pt, p: Pt, eps: float = 0.0) -> bool:
    """
    p бачить грань (a,b,c): лежить із зовнішнього боку її площини далі ніж на eps.
    eps задається як відстань; нульовий об'єм (копланарність) грань не робить видимою.
    """
    area2 = norm(cross(sub(b, a), sub(c, a)))
    return volume_sign(a, b, c, p, eps * area2) < 0
