"""Pure validation entry points returning tagged results instead of raising.

    result = validate_descriptor(data)
    if result.ok:
        use(result.value)
    else:
        report(result.violations)
"""

from dataclasses import dataclass
from typing import Any, Generic, TypeVar

from pydantic import BaseModel, ValidationError

from api_catalog.schema.base import APIDescriptor, APIParameter, DescriptorInput, DescriptorPatch

ModelT = TypeVar("ModelT", bound=BaseModel)

# pydantic error type -> violation code
_CODES = {
    "string_too_short": "empty",
    "missing": "missing",
    "literal_error": "invalid_choice",
    "missing_leading_slash": "missing_leading_slash",
    "duplicate_id": "duplicate_id",
}


@dataclass(frozen=True)
class FieldViolation:
    field: str  # dotted path, e.g. "parameters.0.name"
    code: str  # empty / missing / invalid_choice / missing_leading_slash / duplicate_id / invalid_type
    message: str

    def __str__(self) -> str:
        return f"{self.field}: {self.message}"


@dataclass(frozen=True)
class Valid(Generic[ModelT]):
    value: ModelT

    @property
    def ok(self) -> bool:
        return True


@dataclass(frozen=True)
class Invalid:
    violations: tuple[FieldViolation, ...]

    @property
    def ok(self) -> bool:
        return False

    def fields(self) -> set[str]:
        return {v.field for v in self.violations}


def violations_from_error(error: ValidationError) -> tuple[FieldViolation, ...]:
    """Convert a pydantic ValidationError into field-level violations."""
    violations = []
    for err in error.errors():
        path = ".".join(str(part) for part in err["loc"]) or "(root)"
        code = _CODES.get(err["type"], "invalid_type")
        violations.append(FieldViolation(field=path, code=code, message=err["msg"]))
    return tuple(violations)


def _validate(model: type[ModelT], data: Any) -> "Valid[ModelT] | Invalid":
    try:
        return Valid(model.model_validate(data))
    except ValidationError as e:
        return Invalid(violations_from_error(e))


def validate_descriptor(data: Any) -> "Valid[DescriptorInput] | Invalid":
    """Check a complete descriptor (without id and timestamps)."""
    return _validate(DescriptorInput, data)


def validate_patch(data: Any) -> "Valid[DescriptorPatch] | Invalid":
    """Check only the fields present in a partial descriptor."""
    return _validate(DescriptorPatch, data)


def validate_parameter(data: Any) -> "Valid[APIParameter] | Invalid":
    return _validate(APIParameter, data)


def validate_stored(data: Any) -> "Valid[APIDescriptor] | Invalid":
    """Check a descriptor that already carries its id and timestamps."""
    return _validate(APIDescriptor, data)
