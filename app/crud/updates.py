"""
Partial-update builder.

Turns the set fields of a pydantic partial-update schema into a parameterised
SQLAlchemy ``UPDATE`` for one row. Column names come from a whitelist, values
are always bound parameters.
"""

from typing import Any, Iterable, Mapping
from sqlalchemy import inspect, update
from sqlalchemy.sql.dml import Update
from app.core.errors import BadRequestError


def build_update(model, pk_value: Any, changes: Mapping[str, Any], editable: Iterable[str]) -> Update:
    """
    Build ``UPDATE <table> SET ... WHERE <pk> = :pk`` from a field mapping.

    Args:
        model: Mapped ORM class
        pk_value: Primary key of the row to update
        changes: Field name -> new value, typically ``schema.model_dump(exclude_unset=True)``
        editable: Field names the caller may write

    Raises:
        BadRequestError: If ``changes`` is empty or names a field outside ``editable``
    """
    editable = set(editable)
    columns = set(inspect(model).columns.keys())

    if not changes:
        raise BadRequestError("No fields provided", code="no_fields")

    rejected = sorted(name for name in changes if name not in editable or name not in columns)
    if rejected:
        raise BadRequestError(f"Fields not editable: {', '.join(rejected)}", code="field_not_editable")

    pk_column = inspect(model).primary_key[0]
    return (
        update(model)
        .where(pk_column == pk_value)
        .values(**dict(changes))
        .execution_options(synchronize_session="fetch")
    )
