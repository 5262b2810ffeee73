# examples/demo_box.py
import random

from hullbox.bounds import axis_aligned_bounding_box, parallelepiped_volume
from hullbox.pipeline import enclose


def rotated_slab(n: int, seed: int = 7):
    """Точки у плиті 4 x 2 x 0.5, повернутій на 30° навколо осі z."""
    rnd = random.Random(seed)
    c, s = 0.8660254037844386, 0.5
    pts = []
    for _ in range(n):
        x, y, z = rnd.uniform(0, 4), rnd.uniform(0, 2), rnd.uniform(0, 0.5)
        pts.append((c*x - s*y, s*x + c*y, z))
    return pts


if __name__ == "__main__":
    pts = rotated_slab(200)
    result = enclose(pts)

    lo, hi = axis_aligned_bounding_box(result.points)
    aabb_volume = (hi.x - lo.x) * (hi.y - lo.y) * (hi.z - lo.z)
    print(f"Точок:              {len(result.points)}")
    print(f"Граней оболонки:    {len(result.hull)}")
    print(f"Об'єм AABB:         {aabb_volume:.4f}")
    if result.box is None:
        print("Мінімальна коробка: вироджений вхід")
    else:
        print(f"Об'єм коробки:      {result.volume:.4f}")
        print(f"Об'єм за вершинами: {parallelepiped_volume(result.box.corners):.4f}")
        for fid in result.box.mesh.face_ids():
            f = result.box.mesh.face(fid)
            print(f"  {f.label:>6}: {[tuple(round(c, 3) for c in p) for p in result.box.mesh.face_points(fid)]}")
