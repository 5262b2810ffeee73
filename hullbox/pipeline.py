from __future__ import annotations
import logging
from dataclasses import dataclass
from typing import Iterable, List, Optional, Sequence, Tuple

from .bounds import MinimalEnclosingBox, axis_aligned_bounding_box
from .errors import DegenerateResultError
from .geom import Pt, centroid, unique_points
from .hull import ConvexHull3D
from .mesh import Mesh
from .predicates import orient3d

logger = logging.getLogger(__name__)


@dataclass
class Enclosure:
    """Результат enclose(): точки, оболонка і обидві коробки."""
    points: List[Pt]
    hull: Optional[Mesh]
    aabb: Optional[Tuple[Pt, Pt]]
    box: Optional[MinimalEnclosingBox]

    @property
    def volume(self) -> Optional[float]:
        return self.box.volume if self.box is not None else None


def scipy_hull(pts: Sequence[Pt]) -> Mesh:
    """Опукла оболонка через SciPy (Qhull), грані зорієнтовані назовні."""
    try:
        import numpy as np
        from scipy.spatial import ConvexHull, QhullError
    except ImportError as e:
        raise RuntimeError(
            "backend='scipy', але SciPy не встановлено. "
            "Встанови scipy або використай backend='internal'."
        ) from e

    arr = np.array([(p.x, p.y, p.z) for p in pts], dtype=float)
    try:
        qh = ConvexHull(arr)
    except QhullError as e:
        raise DegenerateResultError(f"Qhull failed: {e}") from e

    mesh = Mesh(pts)
    O = centroid(pts[int(i)] for i in qh.vertices)
    for simplex in qh.simplices:
        a, b, c = (int(i) for i in simplex)
        # хочемо orient3d(a,b,c,O) < 0 (O всередині, нормаль назовні)
        if orient3d(pts[a], pts[b], pts[c], O) > 0:
            b, c = c, b
        mesh.add_face(a, b, c)
    return mesh


def enclose(
    points: Iterable[Pt | Tuple[float, float, float]],
    backend: str = "internal",
    use_edge_pairs: bool = False,
) -> Enclosure:
    """
    Повний пайплайн:
      - прибирає дублікати точок;
      - будує опуклу оболонку (наш ConvexHull3D або SciPy) -> hull;
      - осі-вирівняну коробку -> aabb;
      - мінімальний охоплюючий паралелепіпед -> box.

    Вироджений вхід не є помилкою: hull/box стають None.
    """
    pts: List[Pt] = unique_points(points)
    aabb = axis_aligned_bounding_box(pts)

    b = backend.lower()
    if b not in ("internal", "scipy"):
        raise ValueError(f"Unknown backend: {backend}")

    try:
        if b == "scipy":
            if len(pts) < 4:
                raise DegenerateResultError(f"Need at least 4 points, got {len(pts)}")
            hull = scipy_hull(pts)
        else:
            hull = ConvexHull3D(pts, akl_toussaint=True).mesh
    except DegenerateResultError as e:
        logger.debug("No hull for %d points: %s", len(pts), e)
        return Enclosure(pts, None, aabb, None)

    try:
        box = MinimalEnclosingBox(pts, hull=hull, use_edge_pairs=use_edge_pairs)
    except DegenerateResultError as e:
        logger.debug("No enclosing box: %s", e)
        box = None
    return Enclosure(pts, hull, aabb, box)
