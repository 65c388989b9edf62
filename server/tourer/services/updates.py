"""Helpers for applying partial updates to ORM entities."""

from typing import Any


def settable_changes(model, changes: dict[str, Any]) -> dict[str, Any]:
    """
    Filter a PATCH payload down to the values that can be written.

    An explicit null clears a nullable column. For a NOT NULL column it
    means "leave unchanged" and is dropped.

    Args:
        model: Mapped class the changes are applied to
        changes: Field values from ``model_dump(exclude_unset=True)``

    Returns:
        The changes to apply with ``setattr``
    """
    columns = model.__table__.columns
    return {
        field: value
        for field, value in changes.items()
        if value is not None or field not in columns or columns[field].nullable
    }
