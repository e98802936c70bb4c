from __future__ import annotations

import math
from typing import Sequence

Point2D = tuple[float, float]

DEFAULT_ARC_RESOLUTION = 5.0
_ANGLE_EPS = 1e-9


def create_arc_for_lwpolyline(
    from_point: Sequence[float],
    to_point: Sequence[float],
    bulge: float,
    resolution: float = DEFAULT_ARC_RESOLUTION,
) -> list[Point2D]:
    """Interior points of the bulge arc between two polyline vertices.

    ``bulge`` is tan(theta / 4) for the included angle theta; positive bulges run
    counter-clockwise from ``from_point`` to ``to_point``. Points sit on every multiple of
    ``resolution`` degrees strictly inside the arc, ordered from ``from_point`` to
    ``to_point``. Neither endpoint is returned.
    """
    if resolution <= 0:
        raise ValueError("arc resolution must be positive")

    # Build the arc counter-clockwise from b to a and reverse afterwards for clockwise bulges.
    if bulge < 0:
        theta = math.atan(-bulge) * 4.0
        ax, ay = float(from_point[0]), float(from_point[1])
        bx, by = float(to_point[0]), float(to_point[1])
    else:
        theta = math.atan(bulge) * 4.0
        ax, ay = float(to_point[0]), float(to_point[1])
        bx, by = float(from_point[0]), float(from_point[1])

    abx, aby = bx - ax, by - ay
    length_ab = math.hypot(abx, aby)
    if length_ab == 0.0 or theta == 0.0:
        return []

    cx, cy = ax + abx * 0.5, ay + aby * 0.5
    length_cd = abs((length_ab / 2.0) / math.tan(theta / 2.0))
    nx, ny = abx / length_ab, aby / length_ab
    # chord direction rotated by 90 degrees
    px, py = -ny, nx
    if theta < math.pi:
        dx, dy = cx - px * length_cd, cy - py * length_cd
    else:
        dx, dy = cx + px * length_cd, cy + py * length_cd

    start_angle = math.degrees(math.atan2(by - dy, bx - dx))
    end_angle = math.degrees(math.atan2(ay - dy, ax - dx))
    if end_angle < start_angle:
        end_angle += 360.0

    radius = math.hypot(bx - dx, by - dy)
    # angles within _ANGLE_EPS of a step count as on it, so endpoints are never emitted
    start_inter = (math.floor(start_angle / resolution + _ANGLE_EPS) + 1) * resolution
    end_inter = (math.ceil(end_angle / resolution - _ANGLE_EPS) - 1) * resolution

    points: list[Point2D] = []
    if end_inter >= start_inter:
        steps = int(round((end_inter - start_inter) / resolution))
        for i in range(steps + 1):
            angle = math.radians(start_inter + i * resolution)
            points.append((dx + math.cos(angle) * radius, dy + math.sin(angle) * radius))

    if bulge < 0:
        points.reverse()
    return points
