from linemesh.document import Document, Layer, LineType, Tables, read_dict
from linemesh.drawer import DrawResult, LineEntityDrawer, draw
from linemesh.entity import Entity, EntityType, Vertex
from linemesh.errors import EntityValidationError
from linemesh.render import plot

__all__ = [
    "read_dict",
    "draw",
    "Document",
    "Tables",
    "LineType",
    "Layer",
    "Entity",
    "EntityType",
    "Vertex",
    "LineEntityDrawer",
    "DrawResult",
    "EntityValidationError",
    "plot",
]
