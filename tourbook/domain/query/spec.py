# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

"""Query specification built from request query-string parameters.

A :class:`QuerySpec` is an immutable record. Each ``apply_*`` stage takes a
spec plus the raw parameter mapping and returns a new spec, so the stages
can be exercised independently and composed in any order::

    spec = build_query_spec({"price[lt]": "500", "sort": "-price"})

Filtering, sorting, projection and pagination each own a disjoint part of
the record. Base predicates (``where``/``exclude``) are supplied explicitly
by the caller, e.g. to hide secret tours or inactive users.
"""

from __future__ import annotations

import re
from collections.abc import Iterable, Mapping
from dataclasses import dataclass, replace
from enum import Enum
from typing import Any

from tourbook.shared.errors.base import ValidationError

PAGE_PARAM = "page"
SORT_PARAM = "sort"
LIMIT_PARAM = "limit"
FIELDS_PARAM = "fields"
RESERVED_PARAMS = frozenset({PAGE_PARAM, SORT_PARAM, LIMIT_PARAM, FIELDS_PARAM})

CREATED_AT_FIELD = "created_at"
VERSION_FIELD = "version"
DEFAULT_PAGE = 1
DEFAULT_LIMIT = 100

_SUFFIX_RE = re.compile(r"^(?P<field>.+)\[(?P<op>gte|gt|lte|lt)\]$")


class Operator(str, Enum):
    EQ = "eq"
    NE = "ne"
    GT = "gt"
    GTE = "gte"
    LT = "lt"
    LTE = "lte"


class ProjectionMode(str, Enum):
    INCLUDE = "include"
    EXCLUDE = "exclude"


@dataclass(slots=True, frozen=True)
class FilterTerm:
    field: str
    op: Operator
    value: Any


@dataclass(slots=True, frozen=True)
class SortKey:
    field: str
    descending: bool = False

    @classmethod
    def parse(cls, token: str) -> SortKey:
        token = token.strip()
        if token.startswith("-"):
            return cls(token[1:].strip(), descending=True)
        return cls(token.lstrip("+").strip())


@dataclass(slots=True, frozen=True)
class Projection:
    mode: ProjectionMode
    fields: tuple[str, ...]

    def allows(self, name: str) -> bool:
        if self.mode is ProjectionMode.INCLUDE:
            return name in self.fields
        return name not in self.fields


DEFAULT_SORT: tuple[SortKey, ...] = (SortKey(CREATED_AT_FIELD, descending=True),)
DEFAULT_PROJECTION = Projection(ProjectionMode.EXCLUDE, (VERSION_FIELD,))


@dataclass(slots=True, frozen=True)
class QuerySpec:
    base: tuple[FilterTerm, ...] = ()
    filters: tuple[FilterTerm, ...] = ()
    sort: tuple[SortKey, ...] = DEFAULT_SORT
    projection: Projection = DEFAULT_PROJECTION
    page: int = DEFAULT_PAGE
    limit: int = DEFAULT_LIMIT

    @property
    def skip(self) -> int:
        return (self.page - 1) * self.limit

    @property
    def predicate(self) -> tuple[FilterTerm, ...]:
        return self.base + self.filters


def where(field_name: str, op: Operator | str, value: Any) -> FilterTerm:
    return FilterTerm(field_name, Operator(op), value)


def exclude(field_name: str, value: Any) -> FilterTerm:
    """Predicate rejecting rows whose ``field_name`` equals ``value``."""
    return FilterTerm(field_name, Operator.NE, value)


def _last(value: Any) -> Any:
    if isinstance(value, (list, tuple)):
        return value[-1] if value else None
    return value


def _split_csv(raw: Any) -> list[str]:
    raw = _last(raw)
    if raw is None:
        return []
    return [part.strip() for part in str(raw).split(",") if part.strip()]


def _positive_int(raw: Any, default: int) -> int:
    raw = _last(raw)
    try:
        value = int(str(raw).strip())
    except (TypeError, ValueError):
        return default
    return value if value >= 1 else default


def parse_filter_key(key: str) -> tuple[str, Operator]:
    match = _SUFFIX_RE.match(key)
    if match is None:
        return key, Operator.EQ
    return match.group("field"), Operator(match.group("op"))


def apply_filter(spec: QuerySpec, params: Mapping[str, Any]) -> QuerySpec:
    terms: list[FilterTerm] = []
    for key, raw in params.items():
        if key in RESERVED_PARAMS:
            continue
        name, op = parse_filter_key(key)
        terms.append(FilterTerm(name, op, _last(raw)))
    return replace(spec, filters=tuple(terms))


def apply_sort(spec: QuerySpec, params: Mapping[str, Any]) -> QuerySpec:
    tokens = _split_csv(params.get(SORT_PARAM))
    keys = tuple(SortKey.parse(token) for token in tokens)
    keys = tuple(key for key in keys if key.field)
    return replace(spec, sort=keys or DEFAULT_SORT)


def apply_projection(spec: QuerySpec, params: Mapping[str, Any]) -> QuerySpec:
    tokens = _split_csv(params.get(FIELDS_PARAM))
    if not tokens:
        return replace(spec, projection=DEFAULT_PROJECTION)

    excluded = [token[1:] for token in tokens if token.startswith("-")]
    if excluded and len(excluded) != len(tokens):
        raise ValidationError(
            "invalid_projection",
            "Cannot mix included and excluded fields in a projection.",
            context={"fields": tokens},
        )
    if excluded:
        return replace(spec, projection=Projection(ProjectionMode.EXCLUDE, tuple(excluded)))
    return replace(spec, projection=Projection(ProjectionMode.INCLUDE, tuple(tokens)))


def apply_pagination(
    spec: QuerySpec, params: Mapping[str, Any], *, max_limit: int | None = None
) -> QuerySpec:
    page = _positive_int(params.get(PAGE_PARAM), DEFAULT_PAGE)
    limit = _positive_int(params.get(LIMIT_PARAM), DEFAULT_LIMIT)
    if max_limit is not None:
        limit = min(limit, max_limit)
    return replace(spec, page=page, limit=limit)


def build_query_spec(
    params: Mapping[str, Any],
    *,
    base: Iterable[FilterTerm] = (),
    max_limit: int | None = None,
) -> QuerySpec:
    spec = QuerySpec(base=tuple(base))
    spec = apply_filter(spec, params)
    spec = apply_sort(spec, params)
    spec = apply_projection(spec, params)
    return apply_pagination(spec, params, max_limit=max_limit)


__all__ = [
    "DEFAULT_LIMIT",
    "DEFAULT_PAGE",
    "DEFAULT_PROJECTION",
    "DEFAULT_SORT",
    "FilterTerm",
    "Operator",
    "Projection",
    "ProjectionMode",
    "QuerySpec",
    "RESERVED_PARAMS",
    "SortKey",
    "apply_filter",
    "apply_pagination",
    "apply_projection",
    "apply_sort",
    "build_query_spec",
    "exclude",
    "parse_filter_key",
    "where",
]
