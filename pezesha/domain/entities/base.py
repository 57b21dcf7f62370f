"""Shared validation helpers for request payloads."""

import math
import re
from collections.abc import Mapping
from typing import Any, Type, TypeVar

from pydantic import BaseModel, ValidationError
from pydantic_core import PydanticCustomError

from pezesha.domain.exceptions import ValidationException

ModelT = TypeVar("ModelT", bound=BaseModel)

# Loose numeric strings: optional sign, decimals, exponent,
# surrounding whitespace.
NUMERIC_PATTERN = re.compile(
    r"[ \t\n\r\v\f]*[+-]?([0-9]+(\.[0-9]*)?|\.[0-9]+)([eE][+-]?[0-9]+)?[ \t\n\r\v\f]*"
)

_TYPE_MESSAGES = {
    "string_type": "{field} must be a string",
    "bool_type": "{field} must be a boolean",
    "list_type": "{field} must be a list",
    "dict_type": "{field} must be an object",
    "model_type": "{field} must be an object",
    "model_attributes_type": "{field} must be an object",
}


def is_numeric(value: Any) -> bool:
    """Check whether a value is a finite number or a numeric string."""
    if isinstance(value, bool):
        return False
    if isinstance(value, int):
        return True
    if isinstance(value, float):
        return math.isfinite(value)
    return isinstance(value, str) and NUMERIC_PATTERN.fullmatch(value) is not None


def check_format(value: str, pattern: re.Pattern, description: str) -> str:
    """Raise a format error unless the whole value matches pattern."""
    if pattern.fullmatch(value) is None:
        raise PydanticCustomError(
            "format_mismatch",
            "must be in {expected} format",
            {"expected": description},
        )
    return value


def _format_error(error: dict, name: str) -> ValidationException:
    """Turn the first pydantic error into a ValidationException."""
    field = ".".join(str(part) for part in error["loc"]) or name
    error_type = error["type"]

    if error_type == "missing":
        message = f"Missing required field: {field}"
    elif error_type in _TYPE_MESSAGES:
        message = _TYPE_MESSAGES[error_type].format(field=field)
    elif error_type in ("format_mismatch", "invalid_date", "not_numeric", "batch_size"):
        message = f"{field} {error['msg']}"
    else:
        message = f"Invalid value for {field}: {error['msg']}"

    return ValidationException(field=field, message=message)


def validate_payload(
    model: Type[ModelT],
    data: Any,
    name: str,
    **overrides: Any,
) -> ModelT:
    """
    Validate caller data against a request schema.

    Keys in overrides replace the caller's values before validation.
    Only the first error is reported; validation stops the call
    before anything is sent.

    Raises:
        ValidationException: If the data does not satisfy the schema
    """
    if not isinstance(data, Mapping):
        raise ValidationException(field=name, message=f"{name} must be an object")

    try:
        return model.model_validate({**data, **overrides})
    except ValidationError as e:
        raise _format_error(e.errors()[0], name) from e


def require_text(field: str, value: Any) -> str:
    """Ensure an identifier-style argument is a non-empty string."""
    if not isinstance(value, str):
        raise ValidationException(field=field, message=f"{field} must be a string")
    if not value.strip():
        raise ValidationException(field=field, message=f"{field} cannot be empty")
    return value


def require_flag(field: str, value: Any) -> bool:
    """Ensure an argument is a real boolean."""
    if not isinstance(value, bool):
        raise ValidationException(field=field, message=f"{field} must be a boolean")
    return value


def require_page(field: str, value: Any) -> int:
    """Ensure a page number is a positive integer."""
    if isinstance(value, bool) or not isinstance(value, int):
        raise ValidationException(field=field, message=f"{field} must be an integer")
    if value < 1:
        raise ValidationException(field=field, message=f"{field} must be at least 1")
    return value
