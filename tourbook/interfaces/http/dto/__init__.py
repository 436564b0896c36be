# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from typing import Any, TypeVar

from flask import request
from pydantic import BaseModel
from pydantic import ValidationError as PydanticValidationError

from tourbook.shared.errors.validation import raise_validation_error

DTO = TypeVar("DTO", bound=BaseModel)


def parse_body(model: type[DTO]) -> DTO:
    try:
        return model.model_validate(request.get_json(silent=True) or {})
    except PydanticValidationError as exc:
        raise_validation_error(exc)


def changes(dto: BaseModel) -> dict[str, Any]:
    """Fields the client actually sent, JSON-ready."""
    return dto.model_dump(mode="json", exclude_unset=True, exclude_none=True)


__all__ = ["changes", "parse_body"]
