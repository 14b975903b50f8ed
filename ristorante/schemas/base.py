"""
Ristorante API: Request Body Base Model
========================================

What:  Shared validation entry point for JSON request bodies.
How:   `from_body(dict)` runs Pydantic validation and reports the first
       failure as one human-readable message:

           validator raised ValueError("...")  → that message
           required field missing or invalid   → the model's required_message
           optional field invalid              → "invalid <field>"
"""

from typing import Any, ClassVar, Dict, Set

from pydantic import BaseModel, ConfigDict
from pydantic import ValidationError as PydanticValidationError

from ristorante.exceptions import ValidationError

# Bounds of a PostgreSQL INTEGER column
PG_INT_MIN = -2_147_483_648
PG_INT_MAX = 2_147_483_647


class RequestBody(BaseModel):
    """Base class for request bodies validated from raw JSON dicts."""

    # Only the public key of an aliased field is accepted
    model_config = ConfigDict(populate_by_name=False, extra="ignore")

    required_message: ClassVar[str] = "invalid request body"

    @classmethod
    def required_keys(cls) -> Set[str]:
        """Body keys (aliases where declared) that must be present."""
        return {
            field.alias or name
            for name, field in cls.model_fields.items()
            if field.is_required()
        }

    @classmethod
    def from_body(cls, body: Dict[str, Any]):
        """
        Validates a decoded JSON object.

        Raises:
            ValidationError: with the message described in the module docstring
        """
        try:
            return cls.model_validate(body)
        except PydanticValidationError as exc:
            errors = exc.errors()
            first = errors[0]
            loc = first.get("loc") or ()
            field = str(loc[0]) if loc else None
            raise ValidationError(
                message=cls._message_for(first, field),
                field=field,
                context={
                    "errors": [
                        f"{'.'.join(str(p) for p in e.get('loc', ()))}: {e.get('msg')}"
                        for e in errors
                    ]
                },
            ) from exc

    @classmethod
    def _message_for(cls, error: Dict[str, Any], field) -> str:
        if error.get("type") == "value_error":
            cause = (error.get("ctx") or {}).get("error")
            if cause is not None:
                return str(cause)
        if field is None or field in cls.required_keys():
            return cls.required_message
        return f"invalid {field}"
