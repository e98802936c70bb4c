from __future__ import annotations


class EntityValidationError(ValueError):
    """Raised when an entity lacks data required to build its geometry."""

    def __init__(self, dxftype: str, handle, field: str, detail: str | None = None) -> None:
        self.dxftype = dxftype
        self.handle = handle
        self.field = field
        message = f"{dxftype} entity {handle!r} missing required field {field!r}"
        if detail:
            message = f"{dxftype} entity {handle!r} has invalid field {field!r}: {detail}"
        super().__init__(message)
