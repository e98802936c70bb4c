from __future__ import annotations

import numpy as np
import pytest

import linemesh
from linemesh import drawer as drawer_module
from linemesh.arc import create_arc_for_lwpolyline
from linemesh.entity import Entity, Vertex
from linemesh.scene import Group, LineStyle, Material


class _CountingTessellator:
    def __init__(self) -> None:
        self.calls = 0

    def __call__(self, from_point, to_point, bulge, resolution):
        self.calls += 1
        return create_arc_for_lwpolyline(from_point, to_point, bulge, resolution)


def _document(entities, ltypes=None, layers=None) -> linemesh.Document:
    return linemesh.Document(
        entities=tuple(entities),
        tables=linemesh.Tables(ltypes=ltypes or {}, layers=layers or {}),
    )


def _line(handle="L1", start=(0.0, 0.0, 0.0), end=(10.0, 0.0, 0.0), **dxf) -> Entity:
    return Entity(dxftype="LINE", handle=handle, dxf={"start": start, "end": end, **dxf})


def _lwpolyline(handle="P1", vertices=None, closed=False, **dxf) -> Entity:
    if vertices is None:
        vertices = [Vertex(0.0, 0.0, bulge=1.0), Vertex(4.0, 0.0), Vertex(4.0, 4.0)]
    return Entity(
        dxftype="LWPOLYLINE",
        handle=handle,
        dxf={"vertices": vertices, "closed": closed, **dxf},
    )


def _world_points(line) -> np.ndarray:
    return line.geometry.positions * line.scale + line.position


def test_draw_returns_none_without_supported_entities() -> None:
    doc = _document([Entity(dxftype="CIRCLE", handle="C1", dxf={})])

    assert linemesh.LineEntityDrawer(doc).draw() is None
    assert linemesh.LineEntityDrawer(_document([])).draw() is None


def test_draw_returns_empty_group_when_everything_is_hidden() -> None:
    doc = _document([_line()])

    group = linemesh.LineEntityDrawer(doc, hidden=lambda _entity: True).draw()

    assert isinstance(group, Group)
    assert group.name == "LINES"
    assert len(group) == 0


def test_draw_skips_entities_on_hidden_layers() -> None:
    doc = _document(
        [_line("A", layer="OFF"), _line("B", layer="ON")],
        layers={"OFF": linemesh.Layer("OFF", visible=False), "ON": linemesh.Layer("ON")},
    )

    group = linemesh.LineEntityDrawer(doc).draw()

    assert [line.user_data["entity"].handle for line in group] == ["B"]


def test_draw_line_normalizes_geometry_and_keeps_world_placement() -> None:
    doc = _document([_line(start=(100.0, 50.0, 0.0), end=(110.0, 55.0, 0.0))])
    drawer = linemesh.LineEntityDrawer(doc)

    result = drawer.draw_line(doc.entities[0])

    assert result.position == pytest.approx((105.0, 52.5, 0.0))
    assert result.scale == pytest.approx((10.0, 10.0, 10.0))
    assert result.geometry.index.tolist() == [0, 1]
    np.testing.assert_allclose(result.geometry.positions, [[-0.5, -0.25, 0.0], [0.5, 0.25, 0.0]])
    assert result.material.style is LineStyle.SOLID


def test_draw_applies_transform_to_line_not_geometry() -> None:
    doc = _document([_line(start=(100.0, 50.0, 0.0), end=(110.0, 55.0, 0.0))])

    (line,) = linemesh.LineEntityDrawer(doc).draw()

    np.testing.assert_allclose(line.position, [105.0, 52.5, 0.0])
    np.testing.assert_allclose(line.scale, [10.0, 10.0, 10.0])
    np.testing.assert_allclose(_world_points(line), [[100.0, 50.0, 0.0], [110.0, 55.0, 0.0]])
    assert line.user_data == {"entity": doc.entities[0]}
    assert line.name == "LINE:L1"


def test_draw_poly_line_expands_bulge_and_builds_index() -> None:
    tessellate = _CountingTessellator()
    entity = _lwpolyline()
    drawer = linemesh.LineEntityDrawer(_document([entity]), tessellate=tessellate)

    result = drawer.draw_poly_line(entity)

    count = len(result.geometry)
    assert tessellate.calls == 1
    assert count > 3
    assert result.geometry.index.tolist() == [i for k in range(1, count) for i in (k - 1, k)]
    world = result.geometry.positions * np.array(result.scale) + np.array(result.position)
    np.testing.assert_allclose(world[0], [0.0, 0.0, 0.0], atol=1e-9)
    np.testing.assert_allclose(world[-2:], [[4.0, 0.0, 0.0], [4.0, 4.0, 0.0]], atol=1e-9)


def test_closed_polyline_returns_to_start() -> None:
    entity = _lwpolyline(
        vertices=[Vertex(0.0, 0.0), Vertex(2.0, 0.0), Vertex(2.0, 2.0)], closed=True
    )

    result = linemesh.LineEntityDrawer(_document([entity])).draw_poly_line(entity)

    assert len(result.geometry) == 4
    np.testing.assert_allclose(result.geometry.positions[0], result.geometry.positions[-1])
    assert result.geometry.index.tolist() == [0, 1, 1, 2, 2, 3]


def test_redraw_reuses_cached_result_without_tessellating() -> None:
    tessellate = _CountingTessellator()
    doc = _document([_lwpolyline(), _line()])
    drawer = linemesh.LineEntityDrawer(doc, tessellate=tessellate)

    first = drawer.draw()
    second = drawer.draw()

    assert tessellate.calls == 1
    assert len(drawer.cache) == 2
    for a, b in zip(first, second):
        assert a is not b
        assert a.geometry is b.geometry
        assert a.material is b.material
        np.testing.assert_array_equal(a.position, b.position)
        np.testing.assert_array_equal(a.scale, b.scale)


def test_cache_is_keyed_by_handle() -> None:
    tessellate = _CountingTessellator()
    drawer = linemesh.LineEntityDrawer(_document([_lwpolyline("P9")]), tessellate=tessellate)

    drawer.draw()
    drawer.draw(_document([_lwpolyline("P9")]))

    assert tessellate.calls == 1


def test_dashed_line_type_gets_fixed_copy_of_cached_geometry() -> None:
    ltypes = {"DASHED": linemesh.LineType("DASHED", pattern=(0.5, -0.25))}
    doc = _document([_lwpolyline(line_type_name="DASHED")], ltypes=ltypes)
    drawer = linemesh.LineEntityDrawer(doc)

    (line,) = drawer.draw()
    cached = drawer.cache.get(doc.entities[0])

    assert line.material.is_dashed
    assert line.material.dash_size == 0.5
    assert line.material.gap_size == 0.25
    assert line.geometry is not cached.geometry
    assert line.geometry.index is None
    assert line.geometry.line_distances is not None
    assert len(line.geometry) == 2 * (len(cached.geometry) - 1)
    assert cached.geometry.index is not None
    assert cached.geometry.line_distances is None

    (again,) = drawer.draw()
    assert again.geometry is not line.geometry
    np.testing.assert_allclose(again.geometry.line_distances, line.geometry.line_distances)


@pytest.mark.parametrize(
    ("ltypes", "name"),
    [
        ({}, "MISSING"),
        ({"CONTINUOUS": linemesh.LineType("CONTINUOUS")}, "CONTINUOUS"),
        ({}, None),
    ],
)
def test_line_style_defaults_to_solid(ltypes, name) -> None:
    doc = _document([_line(line_type_name=name)], ltypes=ltypes)

    (line,) = linemesh.LineEntityDrawer(doc).draw()

    assert line.material.style is LineStyle.SOLID
    assert line.geometry.index is not None


def test_material_comes_from_injected_resolver() -> None:
    requests: list[tuple] = []

    class _Resolver:
        def get_material(self, entity, style, tables):
            requests.append((entity.handle, style, tables))
            return Material(style=style, color="#123456")

    doc = _document([_line()])
    (line,) = linemesh.LineEntityDrawer(doc, color_helper=_Resolver()).draw()

    assert requests == [("L1", LineStyle.SOLID, doc.tables)]
    assert line.material.color == "#123456"


def test_missing_endpoint_raises_validation_error() -> None:
    doc = _document([Entity(dxftype="LINE", handle="BAD", dxf={"start": (0.0, 0.0, 0.0)})])
    drawer = linemesh.LineEntityDrawer(doc)

    with pytest.raises(linemesh.EntityValidationError, match="'end'"):
        drawer.draw()
    assert len(drawer.cache) == 0


def test_missing_vertices_raises_validation_error() -> None:
    doc = _document([Entity(dxftype="POLYLINE", handle="BAD", dxf={})])

    with pytest.raises(linemesh.EntityValidationError, match="'vertices'"):
        linemesh.LineEntityDrawer(doc).draw()


def test_draw_line_rejects_polyline_entity() -> None:
    entity = _lwpolyline()
    drawer = linemesh.LineEntityDrawer(_document([entity]))

    with pytest.raises(linemesh.EntityValidationError):
        drawer.draw_line(entity)
    with pytest.raises(linemesh.EntityValidationError):
        drawer.draw_poly_line(_line())


def test_single_vertex_polyline_draws_empty_geometry() -> None:
    entity = _lwpolyline(vertices=[Vertex(3.0, 3.0)])

    result = linemesh.LineEntityDrawer(_document([entity])).draw_poly_line(entity)

    assert len(result.geometry) == 0
    assert result.geometry.index.tolist() == []
    assert result.position == (0.0, 0.0, 0.0)
    assert result.scale == (1.0, 1.0, 1.0)


def test_module_draw_accepts_parsed_mapping() -> None:
    group = drawer_module.draw(
        {
            "entities": [
                {"type": "LINE", "start": {"x": 0, "y": 0}, "end": {"x": 1, "y": 1}},
                {"type": "TEXT", "text": "ignored"},
            ]
        }
    )

    assert len(group) == 1
    assert group.children[0].user_data["entity"].handle is None


def test_handle_less_entity_does_not_reuse_numbered_entity() -> None:
    doc = linemesh.read_dict(
        {
            "entities": [
                {"type": "LINE", "handle": 2, "start": [0, 0], "end": [1, 0]},
                {"type": "LINE", "start": [50, 50], "end": [60, 70]},
                {"type": "LINE", "start": [-3, 0], "end": [-3, 8]},
            ]
        }
    )

    group = linemesh.LineEntityDrawer(doc).draw()

    assert len(group) == 3
    np.testing.assert_allclose(_world_points(group.children[0]), [[0, 0, 0], [1, 0, 0]])
    np.testing.assert_allclose(_world_points(group.children[1]), [[50, 50, 0], [60, 70, 0]])
    np.testing.assert_allclose(_world_points(group.children[2]), [[-3, 0, 0], [-3, 8, 0]])


def test_handle_less_entities_do_not_carry_over_between_documents() -> None:
    def doc(start, end) -> linemesh.Document:
        return linemesh.read_dict({"entities": [{"type": "LINE", "start": start, "end": end}]})

    first = doc([0, 0], [1, 0])
    drawer = linemesh.LineEntityDrawer(first)
    drawer.draw()

    (line,) = drawer.draw(doc([5, 5], [9, 9]))
    np.testing.assert_allclose(_world_points(line), [[5, 5, 0], [9, 9, 0]])

    (again,) = drawer.draw(first)
    np.testing.assert_allclose(_world_points(again), [[0, 0, 0], [1, 0, 0]])
    assert len(drawer.cache) == 2
