# examples/demo_hull.py
from hullbox.geom import unique_points
from hullbox.hull import ConvexHull3D, akl_toussaint_filter

if __name__ == "__main__":
    # куб + внутрішні точки + точка на грані
    raw = [
        (0.5,0.5,0.5), (0.2,0.8,0.3),
        (0,0,0), (1,0,0), (1,1,0), (0,1,0),
        (0,0,1), (1,0,1), (1,1,1), (0,1,1),
        (0.8,0.2,0.7), (0.5,0.5,0), (0,0,0)
    ]
    pts = unique_points(raw)
    kept = akl_toussaint_filter(pts)
    print(f"Akl-Toussaint: {len(kept)} of {len(pts)} points kept")

    hull = ConvexHull3D(pts, akl_toussaint=True)
    report = hull.validate()
    print("faces:", report["faces"], "edges:", report["edges"], "vertices:", report["unique_vertices"])
    print("closed:", not report["bad_edges"], "convex:", not report["bad_orient"])
    for f in hull.faces():
        print("  ", f, [tuple(hull.points[i]) for i in f])
