from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Iterator

import numpy as np

from .geometry import LineGeometry


class LineStyle(str, Enum):
    SOLID = "line"
    DASHED = "dashed"


@dataclass(frozen=True)
class Material:
    style: LineStyle = LineStyle.SOLID
    color: str = "#000000"
    line_width: float = 1.0
    dash_size: float = 1.0
    gap_size: float = 0.5

    @property
    def is_dashed(self) -> bool:
        return self.style is LineStyle.DASHED


class Line:
    """A renderable polyline: shared geometry placed by its own position and scale."""

    def __init__(self, geometry: LineGeometry, material: Material) -> None:
        self.geometry = geometry
        self.material = material
        self.name = ""
        self.user_data: dict[str, Any] = {}
        self._position = np.zeros(3, dtype=np.float64)
        self._scale = np.ones(3, dtype=np.float64)

    @property
    def position(self) -> np.ndarray:
        return self._position

    @position.setter
    def position(self, value) -> None:
        self._position = np.asarray(value, dtype=np.float64).reshape(3).copy()

    @property
    def scale(self) -> np.ndarray:
        return self._scale

    @scale.setter
    def scale(self, value) -> None:
        self._scale = np.asarray(value, dtype=np.float64).reshape(3).copy()

    def compute_line_distances(self) -> "Line":
        # Distances accumulate along the path; each segment's start repeats the
        # previous segment's end value.
        geometry = self.geometry
        count = len(geometry.positions)
        distances = np.zeros(count, dtype=np.float64)
        if geometry.index is None:
            for i in range(0, count - count % 2, 2):
                start = distances[i - 1] if i > 0 else 0.0
                distances[i] = start
                distances[i + 1] = start + float(
                    np.linalg.norm(geometry.positions[i + 1] - geometry.positions[i])
                )
        else:
            for i in range(1, count):
                distances[i] = distances[i - 1] + float(
                    np.linalg.norm(geometry.positions[i] - geometry.positions[i - 1])
                )
        geometry.line_distances = distances
        return self

    def world_segments(self) -> list[tuple[np.ndarray, np.ndarray]]:
        return [
            (start * self._scale + self._position, end * self._scale + self._position)
            for start, end in self.geometry.segments()
        ]


class Group:
    def __init__(self, name: str = "") -> None:
        self.name = name
        self.children: list[Line] = []

    def add(self, obj: Line) -> "Group":
        self.children.append(obj)
        return self

    def __iter__(self) -> Iterator[Line]:
        return iter(self.children)

    def __len__(self) -> int:
        return len(self.children)
