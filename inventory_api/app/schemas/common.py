"""
Shared pydantic building blocks.

All API payloads use camelCase keys (``createdAt``, ``customerName``)
while Python code works with snake_case attributes.  ``CamelModel``
provides the alias mapping and accepts either spelling on input.

``decode`` is the single entry point services use to turn an
untrusted mapping into a typed schema instance; every failure comes
out as :class:`~inventory_api.app.core.errors.ValidationError`.
"""

from datetime import datetime
from typing import Any, Mapping, Sequence, Type, TypeVar

from pydantic import BaseModel, ConfigDict
from pydantic import ValidationError as PydanticValidationError
from pydantic.alias_generators import to_camel

from ..core.errors import ValidationError

SchemaT = TypeVar("SchemaT", bound=BaseModel)


class CamelModel(BaseModel):
    """Base model exposing camelCase aliases."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class RecordBase(CamelModel):
    """Fields every stored record carries.

    Records are frozen: the store replaces a record on update instead
    of mutating it, so a record handed to a caller can never change the
    stored state.
    """

    model_config = ConfigDict(frozen=True)

    id: int
    status: str
    created_at: datetime
    updated_at: datetime


def describe_errors(errors: Sequence[Mapping[str, Any]]) -> str:
    """Summarise the first of a list of pydantic errors in one sentence."""
    if not errors:
        return "Invalid request"
    error = errors[0]
    location = error.get("loc") or ()
    field = str(location[-1]) if location else "body"
    if error.get("type") == "missing":
        return f"{field} is required"
    return f"{field}: {error.get('msg')}"


def decode(schema: Type[SchemaT], payload: Any) -> SchemaT:
    """Validate ``payload`` against ``schema``.

    Field validators raise our own ``ValidationError`` directly; type
    and presence errors detected by pydantic itself are converted to
    one with a short message naming the offending field.
    """
    if isinstance(payload, schema):
        return payload
    if isinstance(payload, BaseModel):
        payload = payload.model_dump(exclude_unset=True)
    if not isinstance(payload, Mapping):
        raise ValidationError("Request body must be a JSON object")
    try:
        return schema.model_validate(payload)
    except PydanticValidationError as exc:
        raise ValidationError(describe_errors(exc.errors())) from exc
