"""
Schema validation that reports failures as values.

``validate_payload`` runs a pydantic model over an arbitrary decoded JSON
value and returns a ``ValidationResult`` instead of raising, so callers can
decide how a bad payload is answered.
"""

from dataclasses import dataclass, field
from typing import Any, Generic, List, Optional, Type, TypeVar

from pydantic import BaseModel, ValidationError

ModelT = TypeVar("ModelT", bound=BaseModel)


@dataclass(frozen=True)
class FieldError:
    field: str
    message: str


@dataclass
class ValidationResult(Generic[ModelT]):
    value: Optional[ModelT] = None
    errors: List[FieldError] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return self.value is not None and not self.errors

    @property
    def invalid_fields(self) -> List[str]:
        return [e.field for e in self.errors]


def _field_name(loc: tuple) -> str:
    if not loc:
        return "body"
    return ".".join(str(part) for part in loc)


def validate_payload(schema: Type[ModelT], raw: Any) -> ValidationResult[ModelT]:
    """Validate ``raw`` against ``schema``; never raises for malformed input."""
    try:
        value = schema.model_validate(raw)
    except ValidationError as e:
        return ValidationResult(
            errors=[FieldError(_field_name(err["loc"]), err["msg"]) for err in e.errors()]
        )
    return ValidationResult(value=value)
