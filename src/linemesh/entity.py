from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Mapping

from .errors import EntityValidationError

Point3D = tuple[float, float, float]

_VERTEX_FIELDS = ("x", "y", "z", "bulge")


class EntityType(str, Enum):
    LINE = "LINE"
    POLYLINE = "POLYLINE"
    LWPOLYLINE = "LWPOLYLINE"


@dataclass(frozen=True)
class Vertex:
    x: float
    y: float
    z: float = 0.0
    bulge: float = 0.0

    @property
    def point(self) -> Point3D:
        return (float(self.x), float(self.y), float(self.z))


@dataclass(frozen=True)
class Entity:
    dxftype: str
    handle: Any
    dxf: dict[str, Any]

    @property
    def kind(self) -> EntityType | None:
        try:
            return EntityType(self.dxftype)
        except ValueError:
            return None

    @property
    def line_type_name(self) -> str | None:
        return self.dxf.get("line_type_name")

    @property
    def closed(self) -> bool:
        return bool(self.dxf.get("closed", False))

    def require(self, field: str) -> Any:
        value = self.dxf.get(field)
        if value is None:
            raise EntityValidationError(self.dxftype, self.handle, field)
        return value

    def point(self, field: str) -> Point3D:
        return _as_point(self.require(field), self, field)

    def vertices(self) -> list[Vertex]:
        return [
            as_vertex(self.dxftype, self.handle, idx, vertex)
            for idx, vertex in enumerate(self.require("vertices"))
        ]


def as_vertex(dxftype: str, handle: Any, idx: int, value: Any) -> Vertex:
    """Coerces a ``Vertex``, an ``{x, y, z, bulge}`` mapping or an ``(x, y[, z[, bulge]])``
    sequence into a :class:`Vertex`."""
    if isinstance(value, Vertex):
        return value
    field = f"vertices[{idx}]"
    if not isinstance(value, Mapping):
        try:
            values = list(value)
        except TypeError as exc:
            raise EntityValidationError(
                dxftype, handle, field, "expected a mapping or a sequence of numbers"
            ) from exc
        if not 2 <= len(values) <= len(_VERTEX_FIELDS):
            raise EntityValidationError(
                dxftype, handle, field, f"expected 2 to 4 values, got {len(values)}"
            )
        value = dict(zip(_VERTEX_FIELDS, values))

    x, y = value.get("x"), value.get("y")
    if x is None or y is None:
        raise EntityValidationError(dxftype, handle, field)
    try:
        return Vertex(
            x=float(x),
            y=float(y),
            z=float(value.get("z", 0.0) or 0.0),
            bulge=float(value.get("bulge", 0.0) or 0.0),
        )
    except (TypeError, ValueError) as exc:
        raise EntityValidationError(dxftype, handle, field, "expected numbers") from exc


def _as_point(value: Any, entity: Entity, field: str) -> Point3D:
    try:
        coords = [float(v) for v in value]
    except (TypeError, ValueError) as exc:
        raise EntityValidationError(
            entity.dxftype, entity.handle, field, "expected a sequence of numbers"
        ) from exc
    if len(coords) == 2:
        coords.append(0.0)
    if len(coords) != 3:
        raise EntityValidationError(
            entity.dxftype, entity.handle, field, f"expected 2 or 3 coordinates, got {len(coords)}"
        )
    return (coords[0], coords[1], coords[2])
