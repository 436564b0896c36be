# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

"""Generic CRUD executor shared by every resource route."""

from __future__ import annotations

from collections.abc import Callable, Iterable, Mapping
from typing import Any, Protocol

from tourbook.domain.query import FilterTerm, QuerySpec, build_query_spec
from tourbook.shared.errors.base import NotFoundError

Prepare = Callable[[dict[str, Any]], dict[str, Any]]


class ResourceRepository(Protocol):
    def list(self, spec: QuerySpec) -> list[dict[str, Any]]: ...
    def get(
        self, resource_id: int, *, base: Iterable[FilterTerm] = ()
    ) -> dict[str, Any] | None: ...
    def create(self, data: Mapping[str, Any]) -> dict[str, Any]: ...
    def update(
        self, resource_id: int, data: Mapping[str, Any], *, base: Iterable[FilterTerm] = ()
    ) -> dict[str, Any] | None: ...
    def delete(
        self, resource_id: int, *, base: Iterable[FilterTerm] = ()
    ) -> dict[str, Any] | None: ...


class ResourceService:
    def __init__(
        self,
        *,
        repository: ResourceRepository,
        max_limit: int,
        base: Iterable[FilterTerm] = (),
        prepare: Prepare | None = None,
    ) -> None:
        self._repository = repository
        self._max_limit = max_limit
        self._base = tuple(base)
        self._prepare = prepare

    @property
    def base(self) -> tuple[FilterTerm, ...]:
        return self._base

    def _prepared(self, data: Mapping[str, Any]) -> dict[str, Any]:
        payload = dict(data)
        return self._prepare(payload) if self._prepare else payload

    def list(
        self, params: Mapping[str, Any], *, base: Iterable[FilterTerm] = ()
    ) -> list[dict[str, Any]]:
        spec = build_query_spec(params, base=self._base + tuple(base), max_limit=self._max_limit)
        return self._repository.list(spec)

    def get(self, resource_id: int) -> dict[str, Any]:
        found = self._repository.get(resource_id, base=self._base)
        if found is None:
            raise NotFoundError()
        return found

    def create(self, data: Mapping[str, Any]) -> dict[str, Any]:
        return self._repository.create(self._prepared(data))

    def update(self, resource_id: int, data: Mapping[str, Any]) -> dict[str, Any]:
        updated = self._repository.update(resource_id, self._prepared(data), base=self._base)
        if updated is None:
            raise NotFoundError()
        return updated

    def delete(self, resource_id: int) -> dict[str, Any]:
        deleted = self._repository.delete(resource_id, base=self._base)
        if deleted is None:
            raise NotFoundError()
        return deleted
