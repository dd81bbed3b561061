"""
Shared model configuration and input validation helpers.
"""

from collections.abc import Mapping, Sequence
from datetime import datetime, timezone
from typing import Any, TypeVar

from pydantic import BaseModel, ConfigDict
from pydantic import ValidationError as PydanticValidationError
from pydantic.alias_generators import to_camel

from taskmanager.core.errors import ValidationError

ModelT = TypeVar("ModelT", bound=BaseModel)

# Location prefixes FastAPI adds in front of the field name.
_REQUEST_LOCATIONS = {"body", "query", "path", "header", "cookie"}


def utcnow() -> datetime:
    """Get current UTC time as timezone-aware datetime."""
    return datetime.now(timezone.utc)


class CamelModel(BaseModel):
    """Base for models serialized to clients with camelCase keys."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )


def describe_first_error(errors: Sequence[Mapping[str, Any]]) -> tuple[str | None, str]:
    """
    Build a client-facing message from the first pydantic error.

    Returns:
        Tuple of (field name or None, message naming the field).
    """
    if not errors:
        return None, "Validation error"

    first = errors[0]
    loc = [str(part) for part in first.get("loc", ())]
    if loc and loc[0] in _REQUEST_LOCATIONS:
        loc = loc[1:]
    field = ".".join(loc) or None

    message = str(first.get("msg", "Invalid value"))
    if message.startswith("Value error, "):
        message = message[len("Value error, "):]

    if first.get("type") == "missing":
        message = "Field required"
    if field is None:
        return None, message
    return field, f"{field}: {message}"


def validate_input(model_cls: type[ModelT], data: Any) -> ModelT:
    """
    Validate raw input against a model.

    Raises:
        ValidationError: Naming the first violated field.
    """
    if isinstance(data, model_cls):
        return data
    try:
        return model_cls.model_validate(data)
    except PydanticValidationError as e:
        field, message = describe_first_error(e.errors())
        raise ValidationError(message, field=field) from e
