from __future__ import annotations

from typing import Callable, Sequence

from .arc import DEFAULT_ARC_RESOLUTION, create_arc_for_lwpolyline
from .entity import Point3D, Vertex

Tessellator = Callable[[Sequence[float], Sequence[float], float, float], Sequence[Sequence[float]]]


def build_polyline_points(
    vertices: Sequence[Vertex],
    closed: bool = False,
    *,
    tessellate: Tessellator = create_arc_for_lwpolyline,
    resolution: float = DEFAULT_ARC_RESOLUTION,
) -> list[Point3D]:
    """Ordered path through ``vertices`` with bulge arcs expanded.

    Each vertex is emitted once, as the leading vertex of its segment, except the last one
    which closes the final segment. A closed path repeats the first point at the end.
    """
    points: list[Point3D] = []
    last = len(vertices) - 2
    for i in range(len(vertices) - 1):
        from_point = vertices[i].point
        to_point = vertices[i + 1].point
        bulge = vertices[i].bulge

        points.append(from_point)
        if bulge:
            for arc in tessellate(from_point, to_point, bulge, resolution):
                z = arc[2] if len(arc) > 2 else from_point[2]
                points.append((float(arc[0]), float(arc[1]), float(z)))

        if i == last:
            points.append(to_point)

    if closed and points:
        points.append(points[0])

    return points
