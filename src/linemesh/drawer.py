from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Callable

from .arc import DEFAULT_ARC_RESOLUTION, create_arc_for_lwpolyline
from .cache import EntityCache
from .document import Document, is_entity_hidden, read_dict
from .entity import Entity, EntityType, Point3D
from .errors import EntityValidationError
from .geometry import (
    LineGeometry,
    fix_mesh_to_draw_dashed_lines,
    generate_point_index,
    offset_by_bounding_box,
)
from .materials import ColorHelper
from .polyline import Tessellator, build_polyline_points
from .scene import Group, Line, LineStyle, Material

logger = logging.getLogger(__name__)

SUPPORTED_ENTITY_TYPES = (EntityType.LINE, EntityType.POLYLINE, EntityType.LWPOLYLINE)
GROUP_NAME = "LINES"


@dataclass(frozen=True)
class DrawResult:
    geometry: LineGeometry
    material: Material
    position: Point3D
    scale: Point3D


class LineEntityDrawer:
    """Draws LINE, POLYLINE and LWPOLYLINE entities as :class:`Line` objects.

    Draw results are cached per entity for the lifetime of the drawer, so redrawing a
    document only builds geometry for entities it has not seen before.
    """

    def __init__(
        self,
        data: Document,
        *,
        color_helper: ColorHelper | None = None,
        hidden: Callable[[Entity], bool] | None = None,
        tessellate: Tessellator | None = None,
        cache: EntityCache[DrawResult] | None = None,
        arc_resolution: float = DEFAULT_ARC_RESOLUTION,
    ) -> None:
        self.data = data
        self._color_helper = color_helper or ColorHelper()
        self._hidden = hidden
        self._tessellate = tessellate or create_arc_for_lwpolyline
        self._cache = cache if cache is not None else EntityCache()
        self.arc_resolution = arc_resolution

    @property
    def cache(self) -> EntityCache[DrawResult]:
        return self._cache

    def draw(self, data: Document | None = None) -> Group | None:
        """Draws every supported entity of ``data``.

        Returns ``None`` when the document has no supported entities at all; hidden
        entities are skipped but still yield a (possibly empty) group.
        """
        if data is not None:
            self.data = data

        entities = list(self.data.query([kind.value for kind in SUPPORTED_ENTITY_TYPES]))
        if not entities:
            return None

        group = Group(GROUP_NAME)
        for entity in entities:
            if self._hide_entity(entity):
                logger.debug("skipping hidden %s %r", entity.dxftype, entity.handle)
                continue

            result, created = self._cache.get_or_create(entity, self._draw_entity)
            logger.debug(
                "%s %s %r", "built" if created else "cache hit for", entity.dxftype, entity.handle
            )

            mesh = Line(result.geometry, result.material)
            if result.material.is_dashed:
                fix_mesh_to_draw_dashed_lines(mesh)
            mesh.name = f"{entity.dxftype}:{entity.handle}"
            mesh.user_data = {"entity": entity}
            mesh.position = result.position
            mesh.scale = result.scale

            group.add(mesh)

        logger.debug("drew %d of %d line entities", len(group), len(entities))
        return group

    def draw_line(self, entity: Entity) -> DrawResult:
        if entity.kind is not EntityType.LINE:
            raise EntityValidationError(entity.dxftype, entity.handle, "type", "expected LINE")

        material = self._get_material(entity)
        geometry = LineGeometry.from_points([entity.point("start"), entity.point("end")])
        geometry.set_index([0, 1])
        return self._finish(geometry, material)

    def draw_poly_line(self, entity: Entity) -> DrawResult:
        if entity.kind not in (EntityType.POLYLINE, EntityType.LWPOLYLINE):
            raise EntityValidationError(
                entity.dxftype, entity.handle, "type", "expected POLYLINE or LWPOLYLINE"
            )

        material = self._get_material(entity)
        points = build_polyline_points(
            entity.vertices(),
            entity.closed,
            tessellate=self._tessellate,
            resolution=self.arc_resolution,
        )
        geometry = LineGeometry.from_points(points)
        geometry.set_index(generate_point_index(points))
        return self._finish(geometry, material)

    def _draw_entity(self, entity: Entity) -> DrawResult:
        if entity.kind is EntityType.LINE:
            return self.draw_line(entity)
        return self.draw_poly_line(entity)

    def _finish(self, geometry: LineGeometry, material: Material) -> DrawResult:
        transform = offset_by_bounding_box(geometry)
        return DrawResult(
            geometry=geometry,
            material=material,
            position=transform.position,
            scale=transform.scale,
        )

    def _get_material(self, entity: Entity) -> Material:
        return self._color_helper.get_material(
            entity, self._line_style(entity), self.data.tables
        )

    def _line_style(self, entity: Entity) -> LineStyle:
        name = entity.line_type_name
        if not name:
            return LineStyle.SOLID
        ltype = self.data.tables.ltypes.get(name)
        if ltype is None:
            logger.debug("unknown line type %r on %s %r", name, entity.dxftype, entity.handle)
            return LineStyle.SOLID
        if len(ltype.pattern) > 0:
            return LineStyle.DASHED
        return LineStyle.SOLID

    def _hide_entity(self, entity: Entity) -> bool:
        if self._hidden is not None:
            return self._hidden(entity)
        return is_entity_hidden(entity, self.data.tables)


def draw(data: Document | Any, **kwargs) -> Group | None:
    if not isinstance(data, Document):
        data = read_dict(data)
    return LineEntityDrawer(data, **kwargs).draw()
