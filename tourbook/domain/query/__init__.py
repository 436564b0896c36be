# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from .spec import (
    DEFAULT_LIMIT,
    DEFAULT_PAGE,
    FilterTerm,
    Operator,
    Projection,
    ProjectionMode,
    QuerySpec,
    SortKey,
    apply_filter,
    apply_pagination,
    apply_projection,
    apply_sort,
    build_query_spec,
    exclude,
    where,
)

__all__ = [
    "DEFAULT_LIMIT",
    "DEFAULT_PAGE",
    "FilterTerm",
    "Operator",
    "Projection",
    "ProjectionMode",
    "QuerySpec",
    "SortKey",
    "apply_filter",
    "apply_pagination",
    "apply_projection",
    "apply_sort",
    "build_query_spec",
    "exclude",
    "where",
]
