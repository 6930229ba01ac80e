"""Convert Pydantic validation errors to the project ValidationError contract."""

from __future__ import annotations

from typing import Any

from pydantic import ValidationError as PydanticValidationError

from jobboard.models.errors import ValidationError, create_validation_error


def _loc_to_field(loc: tuple[Any, ...]) -> str:
    parts = [str(part) for part in loc if part != "__root__"]
    return ".".join(parts)


def _clean_pydantic_message(message: str) -> str:
    if message.startswith("Value error, "):
        return message[len("Value error, ") :]
    return message


def map_pydantic_validation_error(error: PydanticValidationError) -> ValidationError:
    """Map a Pydantic ValidationError to a field-level ValidationError.

    Only the first issue is reported. Messages raised by our own validators
    already start with ``Invalid <field>`` and are passed through as-is.
    """
    issues = error.errors()
    if not issues:
        return create_validation_error("Invalid input")

    first = issues[0]
    field = _loc_to_field(first.get("loc", ()))
    message = _clean_pydantic_message(first.get("msg", "Invalid input"))

    if not field:
        return create_validation_error(message)
    if message.startswith("Invalid "):
        return create_validation_error(message, field=field)
    return create_validation_error(f"Invalid {field}: {message}", field=field)
