"""
Payload validation for product image operations.
Wraps the pydantic request schemas in a pure function that returns a
success/failure result instead of raising.
"""
from dataclasses import dataclass, field
from typing import Any, Dict, Generic, List, Sequence, Type, TypeVar, Union

from pydantic import BaseModel, ValidationError

T = TypeVar("T", bound=BaseModel)


@dataclass(frozen=True)
class ValidationSuccess(Generic[T]):
    value: T
    ok: bool = field(default=True, init=False)


@dataclass(frozen=True)
class ValidationFailure:
    errors: List[Dict[str, Any]]
    ok: bool = field(default=False, init=False)


ValidationResult = Union[ValidationSuccess[T], ValidationFailure]


def format_validation_errors(errors: Sequence[Dict[str, Any]]) -> List[Dict[str, Any]]:
    """
    Convert pydantic error dicts into per-field details.

    FastAPI prefixes body errors with "body" (and path errors with "path");
    that prefix is dropped so the field name matches the payload key.

    Returns:
        list: [{"field": "url", "message": "...", "type": "string_too_long"}, ...]
    """
    details = []
    for error in errors:
        loc = [str(part) for part in error.get("loc", ()) if part not in ("body", "path", "query")]
        details.append({
            "field": ".".join(loc) or "body",
            "message": error.get("msg", "Invalid value"),
            "type": error.get("type"),
        })
    return details


def validate_payload(model: Type[T], data: Any) -> ValidationResult:
    """
    Validate raw data against a request schema.

    Args:
        model: Request schema class (e.g. ProductImageCreate)
        data: Raw payload, usually a dict with camelCase keys

    Returns:
        ValidationSuccess with the parsed model, or ValidationFailure with per-field errors
    """
    try:
        return ValidationSuccess(model.model_validate(data))
    except ValidationError as e:
        return ValidationFailure(format_validation_errors(e.errors()))
