from __future__ import annotations

import logging
from typing import Any

from .scene import LineStyle, Material

logger = logging.getLogger(__name__)

DEFAULT_LINE_WIDTH = 1.0
DEFAULT_COLOR = "#000000"
DEFAULT_DASH_SIZE = 1.0
DEFAULT_GAP_SIZE = 0.5

ACI_BYBLOCK = 0
ACI_BYLAYER = 256

# ACI 7 is drawn black on the light background used by the preview.
_ACI_COLORS = {
    1: "#ff0000",
    2: "#ffff00",
    3: "#00ff00",
    4: "#00ffff",
    5: "#0000ff",
    6: "#ff00ff",
    7: "#000000",
    8: "#808080",
    9: "#c0c0c0",
}


class ColorHelper:
    """Resolves entity colors and line types into shared :class:`Material` instances."""

    def __init__(self, line_width: float = DEFAULT_LINE_WIDTH) -> None:
        self.line_width = line_width
        self._materials: dict[tuple, Material] = {}

    def get_material(self, entity: Any, style: LineStyle | str, tables: Any) -> Material:
        style = LineStyle(style)
        color = self.resolve_color(entity, tables)
        dash_size, gap_size = DEFAULT_DASH_SIZE, DEFAULT_GAP_SIZE
        if style is LineStyle.DASHED:
            dash_size, gap_size = _dash_gap(_entity_pattern(entity, tables))

        key = (style, color, dash_size, gap_size)
        material = self._materials.get(key)
        if material is None:
            material = Material(
                style=style,
                color=color,
                line_width=self.line_width,
                dash_size=dash_size,
                gap_size=gap_size,
            )
            self._materials[key] = material
        return material

    def resolve_color(self, entity: Any, tables: Any) -> str:
        dxf = entity.dxf
        true_color = dxf.get("true_color")
        if true_color is not None:
            return _true_color_to_hex(true_color)

        index = dxf.get("color_index")
        if index is not None and index not in (ACI_BYBLOCK, ACI_BYLAYER):
            return _aci_to_hex(index)

        layer = _entity_layer(entity, tables)
        if layer is not None and layer.color_index is not None:
            return _aci_to_hex(layer.color_index)
        return DEFAULT_COLOR


def _entity_layer(entity: Any, tables: Any):
    name = entity.dxf.get("layer")
    layers = getattr(tables, "layers", None) or {}
    if name is None:
        return None
    return layers.get(name)


def _entity_pattern(entity: Any, tables: Any) -> tuple[float, ...]:
    ltypes = getattr(tables, "ltypes", None) or {}
    ltype = ltypes.get(entity.dxf.get("line_type_name"))
    if ltype is None:
        return ()
    return tuple(ltype.pattern)


def _dash_gap(pattern: tuple[float, ...]) -> tuple[float, float]:
    dash = next((float(v) for v in pattern if v > 0), DEFAULT_DASH_SIZE)
    gap = next((-float(v) for v in pattern if v < 0), DEFAULT_GAP_SIZE)
    return dash, gap


def _aci_to_hex(index: int) -> str:
    # negative ACI marks a layer that is switched off; the color itself is still abs(index)
    color = _ACI_COLORS.get(abs(int(index)))
    if color is None:
        logger.debug("no palette entry for ACI %s, using %s", index, DEFAULT_COLOR)
        return DEFAULT_COLOR
    return color


def _true_color_to_hex(value: int) -> str:
    rgb = int(value) & 0xFFFFFF
    return f"#{rgb:06x}"
