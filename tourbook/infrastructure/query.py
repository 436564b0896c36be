# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

"""Translate a :class:`QuerySpec` into SQLAlchemy statements and serialise rows."""

from __future__ import annotations

from collections.abc import Collection
from datetime import date, datetime
from typing import Any

from sqlalchemy import Select, inspect, or_, select
from sqlalchemy.sql.elements import ColumnElement

from tourbook.domain.query import FilterTerm, Operator, Projection, QuerySpec
from tourbook.domain.query.spec import DEFAULT_PROJECTION
from tourbook.shared.errors.base import ValidationError

_TRUE = {"true", "1", "yes"}
_FALSE = {"false", "0", "no"}


def _columns(model: type) -> dict[str, Any]:
    return {attr.key: attr for attr in inspect(model).column_attrs}


def _column(model: type, name: str):
    attr = _columns(model).get(name)
    if attr is None:
        raise ValidationError(
            "unknown_field",
            f"Invalid field: {name}.",
            context={"field": name},
        )
    return getattr(model, name)


def _python_type(model: type, name: str) -> type | None:
    try:
        return inspect(model).columns[name].type.python_type
    except NotImplementedError:
        return None


def coerce_value(model: type, name: str, raw: Any) -> Any:
    if not isinstance(raw, str):
        return raw

    py_type = _python_type(model, name)
    if py_type is None or py_type in (dict, list):
        raise ValidationError(
            "unfilterable_field",
            f"Field {name} cannot be used in a filter.",
            context={"field": name},
        )

    value = raw.strip()
    try:
        if py_type is bool:
            lowered = value.lower()
            if lowered in _TRUE:
                return True
            if lowered in _FALSE:
                return False
            raise ValueError(value)
        if py_type is int:
            return int(value)
        if py_type is float:
            return float(value)
        if py_type is datetime:
            return datetime.fromisoformat(value.replace("Z", "+00:00"))
        if py_type is date:
            return date.fromisoformat(value)
    except ValueError:
        raise ValidationError(
            "invalid_filter_value",
            f"Invalid {name}: {raw}.",
            context={"field": name, "value": raw},
        ) from None
    return py_type(value)


def condition(model: type, term: FilterTerm) -> ColumnElement[bool]:
    column = _column(model, term.field)
    value = coerce_value(model, term.field, term.value)
    if term.op is Operator.EQ:
        return column.is_(None) if value is None else column == value
    if term.op is Operator.NE:
        # missing values do not equal anything
        return or_(column != value, column.is_(None))
    if term.op is Operator.GT:
        return column > value
    if term.op is Operator.GTE:
        return column >= value
    if term.op is Operator.LT:
        return column < value
    if term.op is Operator.LTE:
        return column <= value
    raise ValidationError("invalid_operator", context={"operator": str(term.op)})


def conditions(model: type, terms: Collection[FilterTerm]) -> list[ColumnElement[bool]]:
    return [condition(model, term) for term in terms]


def build_select(model: type, spec: QuerySpec) -> Select:
    stmt = select(model).where(*conditions(model, spec.predicate))
    order_by = []
    for key in spec.sort:
        column = _column(model, key.field)
        order_by.append(column.desc() if key.descending else column.asc())
    order_by.append(model.id.asc())
    return stmt.order_by(*order_by).offset(spec.skip).limit(spec.limit)


def _json_value(value: Any) -> Any:
    if isinstance(value, (datetime, date)):
        return value.isoformat()
    return value


def row_to_dict(
    row: Any,
    projection: Projection = DEFAULT_PROJECTION,
    *,
    hidden: Collection[str] = (),
    computed: Collection[str] = (),
) -> dict[str, Any]:
    payload: dict[str, Any] = {"id": row.id}
    for name in _columns(type(row)):
        if name == "id" or name in hidden or not projection.allows(name):
            continue
        payload[name] = _json_value(getattr(row, name))
    for name in computed:
        if projection.allows(name):
            payload[name] = _json_value(getattr(row, name))
    return payload


__all__ = [
    "build_select",
    "coerce_value",
    "condition",
    "conditions",
    "row_to_dict",
]
