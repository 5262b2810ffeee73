"""
hullbox — 3D опукла оболонка (інкрементальний Quickhull) і мінімальний
охоплюючий паралелепіпед (Vivien–Wicker) для хмари точок.
"""
import logging

__version__ = "0.1.0"

from hullbox.geom import Pt, EPS, centroid, unique_points
from hullbox.predicates import orient3d, volume_sign, signed_distance_to_plane, visible_from_point
from hullbox.mesh import Face, Mesh, edge_key
from hullbox.hull import ConvexHull3D, convex_hull, akl_toussaint_filter
from hullbox.bounds import (
    ZERO_LIMIT, CandidatePlane, MinimalEnclosingBox, minimal_enclosing_box,
    axis_aligned_bounding_box, parallelepiped_volume,
)
from hullbox.solver import solve_linear
from hullbox.pipeline import Enclosure, enclose
from hullbox.errors import (
    DegenerateResultError, InsufficientPointsError, DegenerateGeometryError,
    SingularSystemError, NoSeparatingTripleError,
)

logging.getLogger(__name__).addHandler(logging.NullHandler())

__all__ = [
    "Pt", "EPS", "centroid", "unique_points",
    "orient3d", "volume_sign", "signed_distance_to_plane", "visible_from_point",
    "Face", "Mesh", "edge_key",
    "ConvexHull3D", "convex_hull", "akl_toussaint_filter",
    "ZERO_LIMIT", "CandidatePlane", "MinimalEnclosingBox", "minimal_enclosing_box",
    "axis_aligned_bounding_box", "parallelepiped_volume",
    "solve_linear", "Enclosure", "enclose",
    "DegenerateResultError", "InsufficientPointsError", "DegenerateGeometryError",
    "SingularSystemError", "NoSeparatingTripleError",
    "__version__",
]
