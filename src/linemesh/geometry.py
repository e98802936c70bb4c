from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Iterator, Sequence

import numpy as np

Point3D = tuple[float, float, float]


@dataclass(frozen=True)
class BoundingBox:
    min: Point3D
    max: Point3D

    @classmethod
    def from_points(cls, positions: np.ndarray) -> "BoundingBox | None":
        if len(positions) == 0:
            return None
        lo = positions.min(axis=0)
        hi = positions.max(axis=0)
        return cls(min=_to_point(lo), max=_to_point(hi))

    @property
    def center(self) -> Point3D:
        return tuple((lo + hi) * 0.5 for lo, hi in zip(self.min, self.max))

    @property
    def size(self) -> Point3D:
        return tuple(hi - lo for lo, hi in zip(self.min, self.max))

    @property
    def max_extent(self) -> float:
        return max(self.size)


@dataclass(frozen=True)
class NormalizationTransform:
    position: Point3D
    scale: Point3D

    @classmethod
    def identity(cls) -> "NormalizationTransform":
        return cls(position=(0.0, 0.0, 0.0), scale=(1.0, 1.0, 1.0))


class LineGeometry:
    """Point buffer with an optional index of segment pairs.

    ``positions`` is an ``(N, 3)`` float array. When ``index`` is set, each consecutive
    pair of entries names one segment; otherwise positions are read two at a time.
    """

    def __init__(self, positions=None, index=None) -> None:
        if positions is None:
            positions = np.zeros((0, 3), dtype=np.float64)
        self.positions = np.asarray(positions, dtype=np.float64).reshape(-1, 3)
        self.index: np.ndarray | None = None
        self.line_distances: np.ndarray | None = None
        self.bounding_box: BoundingBox | None = None
        if index is not None:
            self.set_index(index)

    @classmethod
    def from_points(cls, points: Sequence[Sequence[float]]) -> "LineGeometry":
        if len(points) == 0:
            return cls()
        return cls(np.array(points, dtype=np.float64))

    def __len__(self) -> int:
        return len(self.positions)

    def set_index(self, index) -> "LineGeometry":
        index = np.asarray(index, dtype=np.uint32).reshape(-1)
        if len(index) % 2:
            raise ValueError("segment index must contain pairs")
        if len(index) and int(index.max()) >= len(self.positions):
            raise ValueError("segment index refers past the end of positions")
        self.index = index
        return self

    def compute_bounding_box(self) -> BoundingBox | None:
        self.bounding_box = BoundingBox.from_points(self.positions)
        return self.bounding_box

    def translate(self, dx: float, dy: float, dz: float) -> "LineGeometry":
        self.positions += np.array([dx, dy, dz], dtype=np.float64)
        return self

    def scale(self, sx: float, sy: float, sz: float) -> "LineGeometry":
        self.positions *= np.array([sx, sy, sz], dtype=np.float64)
        return self

    def copy(self) -> "LineGeometry":
        clone = LineGeometry(self.positions.copy())
        if self.index is not None:
            clone.index = self.index.copy()
        if self.line_distances is not None:
            clone.line_distances = self.line_distances.copy()
        clone.bounding_box = self.bounding_box
        return clone

    def to_non_indexed(self) -> "LineGeometry":
        if self.index is None:
            return self.copy()
        clone = LineGeometry(self.positions[self.index])
        clone.bounding_box = self.bounding_box
        return clone

    def segments(self) -> Iterator[tuple[np.ndarray, np.ndarray]]:
        if self.index is not None:
            order = self.index
        else:
            order = np.arange(len(self.positions) - len(self.positions) % 2)
        for i in range(0, len(order), 2):
            yield self.positions[order[i]], self.positions[order[i + 1]]


def generate_point_index(points: Sequence) -> list[int]:
    """Returns the index pairs of an open path over ``points``."""
    index: list[int] = []
    for i in range(1, len(points)):
        index.append(i - 1)
        index.append(i)
    return index


def offset_by_bounding_box(geometry: LineGeometry) -> NormalizationTransform:
    """Centers ``geometry`` on the origin and scales it to a unit bounding box.

    The geometry is modified in place, so it must not be shared yet. The returned transform
    maps the normalized geometry back to its original placement when applied to the
    renderable object as position and scale.
    """
    box = geometry.compute_bounding_box()
    if box is None:
        return NormalizationTransform.identity()

    cx, cy, cz = box.center
    geometry.translate(-cx, -cy, -cz)

    max_size = box.max_extent
    if not math.isfinite(max_size) or max_size <= 0.0:
        max_size = 1.0
    geometry.scale(1.0 / max_size, 1.0 / max_size, 1.0 / max_size)
    geometry.compute_bounding_box()

    return NormalizationTransform(position=(cx, cy, cz), scale=(max_size, max_size, max_size))


def fix_mesh_to_draw_dashed_lines(line) -> None:
    """Gives ``line`` its own non-indexed geometry with per-point line distances."""
    line.geometry = line.geometry.to_non_indexed()
    line.compute_line_distances()


def _to_point(values) -> Point3D:
    return (float(values[0]), float(values[1]), float(values[2]))
