from __future__ import annotations

import fnmatch
import re
from dataclasses import dataclass, field
from typing import Any, Iterable, Iterator, Mapping

from .entity import Entity, as_vertex

# LWPOLYLINE "shape" and POLYLINE flag bit 1 both mark a closed path.
_CLOSED_FLAG = 1


@dataclass(frozen=True)
class LineType:
    name: str
    pattern: tuple[float, ...] = ()
    description: str = ""


@dataclass(frozen=True)
class Layer:
    name: str
    color_index: int | None = 7
    visible: bool = True
    frozen: bool = False


@dataclass(frozen=True)
class Tables:
    ltypes: dict[str, LineType] = field(default_factory=dict)
    layers: dict[str, Layer] = field(default_factory=dict)


@dataclass(frozen=True)
class Document:
    entities: tuple[Entity, ...] = ()
    tables: Tables = field(default_factory=Tables)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "Document":
        return read_dict(data)

    def query(self, types: str | Iterable[str] | None = None) -> Iterator[Entity]:
        type_set = set(_normalize_types(types, self.entity_types()))
        for entity in self.entities:
            if entity.dxftype in type_set:
                yield entity

    def entity_types(self) -> list[str]:
        seen: dict[str, None] = {}
        for entity in self.entities:
            seen.setdefault(entity.dxftype, None)
        return list(seen)

    def draw(self, **kwargs):
        from .drawer import draw

        return draw(self, **kwargs)

    def plot(self, *args, **kwargs):
        from .render import plot

        return plot(self, *args, **kwargs)


def read_dict(data: Mapping[str, Any]) -> Document:
    """Builds a :class:`Document` from an already parsed drawing mapping."""
    raw_tables = data.get("tables") or {}
    tables = Tables(
        ltypes={
            name: LineType(
                name=name,
                pattern=tuple(float(v) for v in (record.get("pattern") or ())),
                description=record.get("description", ""),
            )
            for name, record in (raw_tables.get("ltypes") or {}).items()
        },
        layers={
            name: Layer(
                name=name,
                color_index=record.get("colorNumber", 7),
                visible=record.get("visible", True),
                frozen=record.get("frozen", False),
            )
            for name, record in (raw_tables.get("layers") or {}).items()
        },
    )

    entities = []
    for record in data.get("entities") or ():
        dxftype = str(record.get("type", "")).upper()
        handle = record.get("handle")
        entities.append(
            Entity(dxftype=dxftype, handle=handle, dxf=_entity_dxf(dxftype, handle, record))
        )

    return Document(entities=tuple(entities), tables=tables)


def is_entity_hidden(entity: Entity, tables: Tables) -> bool:
    if entity.dxf.get("visible") is False:
        return True
    layer = tables.layers.get(entity.dxf.get("layer"))
    if layer is None:
        return False
    return not layer.visible or layer.frozen


def _entity_dxf(dxftype: str, handle: Any, record: Mapping[str, Any]) -> dict[str, Any]:
    dxf: dict[str, Any] = {
        "layer": record.get("layer"),
        "line_type_name": record.get("lineTypeName"),
        "color_index": record.get("colorNumber"),
        "true_color": record.get("trueColor"),
    }
    if "visible" in record:
        dxf["visible"] = bool(record["visible"])
    for name in ("start", "end"):
        if record.get(name) is not None:
            dxf[name] = _point(record[name])
    if record.get("vertices") is not None:
        dxf["vertices"] = [
            as_vertex(dxftype, handle, idx, vertex) for idx, vertex in enumerate(record["vertices"])
        ]
    closed = record.get("closed")
    if closed is None:
        closed = record.get("shape")
    if closed is None and "flags" in record:
        closed = int(record["flags"]) & _CLOSED_FLAG
    dxf["closed"] = bool(closed)
    return dxf


def _point(value: Any) -> Any:
    if isinstance(value, Mapping):
        return (value.get("x"), value.get("y"), value.get("z", 0.0) or 0.0)
    return value


def _normalize_types(types: str | Iterable[str] | None, available: list[str]) -> list[str]:
    if types is None:
        return list(available)
    if isinstance(types, str):
        tokens = re.split(r"[,\s]+", types.strip())
    else:
        tokens = list(types)

    normalized = [str(token).strip().upper() for token in tokens if token and str(token).strip()]
    if not normalized:
        return list(available)

    if any(token in {"*", "ALL"} for token in normalized):
        return list(available)

    selected: list[str] = []
    seen = set()

    for token in normalized:
        if any(ch in token for ch in "*?[]"):
            for name in available:
                if fnmatch.fnmatchcase(name, token) and name not in seen:
                    seen.add(name)
                    selected.append(name)
            continue

        if token not in seen:
            seen.add(token)
            selected.append(token)

    return selected
