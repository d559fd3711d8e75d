"""Form and view state for the console.

Drafts are frozen pydantic models: editing a field produces a new draft.
The focus is either ``ComposingNew`` or ``Editing``; the new-descriptor draft
lives beside it and is untouched while an existing descriptor is edited.
"""

from dataclasses import dataclass, field
from typing import Any

from pydantic import BaseModel, ConfigDict

from api_catalog.schema.base import DEFAULT_STATUS, DEFAULT_VERSION, APIDescriptor, APIParameter

DESCRIPTOR_FIELDS = ("name", "endpoint", "method", "description", "response_example", "version", "tags", "status")
PARAMETER_FIELDS = ("name", "type", "required", "description", "default_value", "validation")

REQUIRED_DESCRIPTOR_FIELDS = ("name", "endpoint", "method", "description")

_TRUE = {"1", "true", "yes", "y", "on"}


def _parse_tags(value: Any) -> list[str]:
    if isinstance(value, str):
        return [t.strip() for t in value.split(",") if t.strip()]
    return list(value)


def _parse_bool(value: Any) -> bool:
    if isinstance(value, str):
        return value.strip().lower() in _TRUE
    return bool(value)


class DescriptorDraft(BaseModel):
    """An in-progress descriptor as typed into the form. Nothing is checked here."""

    model_config = ConfigDict(frozen=True)

    name: str = ""
    endpoint: str = ""
    method: str = "GET"
    description: str = ""
    parameters: tuple[APIParameter, ...] = ()
    response_example: str = ""
    version: str = DEFAULT_VERSION
    tags: tuple[str, ...] = ()
    status: str = DEFAULT_STATUS

    @classmethod
    def from_descriptor(cls, descriptor: APIDescriptor) -> "DescriptorDraft":
        return cls(
            name=descriptor.name,
            endpoint=descriptor.endpoint,
            method=descriptor.method,
            description=descriptor.description,
            parameters=tuple(descriptor.parameters),
            response_example=descriptor.response_example or "",
            version=descriptor.version,
            tags=tuple(descriptor.tags),
            status=descriptor.status,
        )

    def with_field(self, name: str, value: Any) -> "DescriptorDraft":
        if name not in DESCRIPTOR_FIELDS:
            raise KeyError(name)
        if name == "tags":
            value = tuple(_parse_tags(value))
        elif name == "method":
            value = str(value).upper()
        return self.model_copy(update={name: value})

    def with_parameters(self, parameters: tuple[APIParameter, ...]) -> "DescriptorDraft":
        return self.model_copy(update={"parameters": tuple(parameters)})

    def missing_required(self) -> list[str]:
        return [f for f in REQUIRED_DESCRIPTOR_FIELDS if not getattr(self, f)]

    def to_payload(self) -> dict[str, Any]:
        """The draft as service input; an empty response example means none."""
        return {
            "name": self.name,
            "endpoint": self.endpoint,
            "method": self.method,
            "description": self.description,
            "parameters": list(self.parameters),
            "response_example": self.response_example or None,
            "version": self.version,
            "tags": list(self.tags),
            "status": self.status,
        }


class ParameterDraft(BaseModel):
    """The parameter sub-form."""

    model_config = ConfigDict(frozen=True)

    name: str = ""
    type: str = "string"
    required: bool = False
    description: str = ""
    default_value: str = ""
    validation: str = ""

    def with_field(self, name: str, value: Any) -> "ParameterDraft":
        if name not in PARAMETER_FIELDS:
            raise KeyError(name)
        if name == "required":
            value = _parse_bool(value)
        elif name == "type":
            value = str(value).lower()
        return self.model_copy(update={name: value})

    def to_payload(self, parameter_id: str) -> dict[str, Any]:
        return {
            "id": parameter_id,
            "name": self.name,
            "type": self.type,
            "required": self.required,
            "description": self.description,
            "default_value": self.default_value or None,
            "validation": self.validation or None,
        }


@dataclass(frozen=True)
class ComposingNew:
    """Form actions target the new-descriptor draft."""


@dataclass(frozen=True)
class Editing:
    descriptor_id: str
    draft: DescriptorDraft


Focus = ComposingNew | Editing


@dataclass
class ConsoleState:
    descriptors: list[APIDescriptor] = field(default_factory=list)
    new_draft: DescriptorDraft = field(default_factory=DescriptorDraft)
    parameter_draft: ParameterDraft = field(default_factory=ParameterDraft)
    focus: Focus = field(default_factory=ComposingNew)

    @property
    def active_draft(self) -> DescriptorDraft:
        if isinstance(self.focus, Editing):
            return self.focus.draft
        return self.new_draft

    def replace_active_draft(self, draft: DescriptorDraft) -> None:
        if isinstance(self.focus, Editing):
            self.focus = Editing(self.focus.descriptor_id, draft)
        else:
            self.new_draft = draft

    def index_of(self, descriptor_id: str) -> int | None:
        for i, d in enumerate(self.descriptors):
            if d.id == descriptor_id:
                return i
        return None
