"""Data models for catalogued API descriptors.

Every layer (console drafts, the simulated service, catalog files) converts
its input into these models. Serialized form uses camelCase keys
(``responseExample``, ``createdAt``); snake_case field names are accepted too.
"""

import uuid
from datetime import date, datetime, timezone
from typing import Literal, get_args

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel
from pydantic_core import PydanticCustomError

ParameterType = Literal["string", "number", "boolean", "object", "array"]
APIMethod = Literal["GET", "POST", "PUT", "DELETE"]
DescriptorStatus = Literal["active", "deprecated", "draft"]

PARAMETER_TYPES: tuple[str, ...] = get_args(ParameterType)
API_METHODS: tuple[str, ...] = get_args(APIMethod)
DESCRIPTOR_STATUSES: tuple[str, ...] = get_args(DescriptorStatus)

DEFAULT_VERSION = "1.0.0"
DEFAULT_STATUS = "active"


def new_id() -> str:
    """Return a fresh collision-free identifier."""
    return uuid.uuid4().hex


def utc_now_iso() -> str:
    """Current time as an ISO-8601 string, e.g. ``2024-05-01T12:00:00.000Z``."""
    return datetime.now(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")


def to_iso(value):
    """Render YAML-parsed dates and datetimes as ISO-8601 strings."""
    if isinstance(value, datetime):
        if value.tzinfo is None:
            value = value.replace(tzinfo=timezone.utc)
        return value.astimezone(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")
    if isinstance(value, date):
        return value.isoformat()
    return value


def check_endpoint(value: str) -> str:
    if not value.startswith("/"):
        raise PydanticCustomError("missing_leading_slash", "endpoint must start with '/'")
    return value


def check_unique_parameter_ids(params: list["APIParameter"]) -> list["APIParameter"]:
    seen: set[str] = set()
    for p in params:
        if p.id in seen:
            raise PydanticCustomError(
                "duplicate_id",
                "duplicate parameter id '{param_id}'",
                {"param_id": p.id},
            )
        seen.add(p.id)
    return params


def dedupe_tags(tags: list[str]) -> list[str]:
    # tags behave as a set but keep first-seen order for display
    return list(dict.fromkeys(tags))


class CatalogModel(BaseModel):
    # YAML loads unquoted 7 or 2.0 as numbers
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, coerce_numbers_to_str=True)

    def to_wire(self) -> dict:
        """Dump with camelCase keys, the shape the REST contract exchanges."""
        return self.model_dump(by_alias=True, exclude_none=True)


class APIParameter(CatalogModel):
    """A single parameter accepted by a catalogued API."""

    id: str = Field(min_length=1)
    name: str = Field(min_length=1)
    type: ParameterType
    required: bool = False
    description: str = ""
    default_value: str | None = None
    validation: str | None = None  # free text such as "min:1,max:100", stored only


class DescriptorInput(CatalogModel):
    """An API descriptor before an identifier and timestamps are assigned."""

    name: str = Field(min_length=1)
    endpoint: str = Field(min_length=1)  # /api/users
    method: APIMethod
    description: str = Field(min_length=1)
    parameters: list[APIParameter] = Field(default_factory=list)
    response_example: str | None = None
    version: str = DEFAULT_VERSION
    tags: list[str] = Field(default_factory=list)
    status: DescriptorStatus = DEFAULT_STATUS

    @field_validator("endpoint")
    @classmethod
    def endpoint_has_leading_slash(cls, v: str) -> str:
        return check_endpoint(v)

    @field_validator("parameters")
    @classmethod
    def parameter_ids_unique(cls, v: list[APIParameter]) -> list[APIParameter]:
        return check_unique_parameter_ids(v)

    @field_validator("tags")
    @classmethod
    def tags_as_set(cls, v: list[str]) -> list[str]:
        return dedupe_tags(v)


class APIDescriptor(DescriptorInput):
    """A catalogued API descriptor with identity and timestamps."""

    id: str = Field(min_length=1)
    created_at: str = Field(default_factory=utc_now_iso)
    updated_at: str = Field(default_factory=utc_now_iso)

    @field_validator("created_at", "updated_at", mode="before")
    @classmethod
    def timestamp_as_iso(cls, v):
        return to_iso(v)


class DescriptorPatch(CatalogModel):
    """Partial descriptor for updates: only supplied fields are checked."""

    name: str | None = Field(default=None, min_length=1)
    endpoint: str | None = Field(default=None, min_length=1)
    method: APIMethod | None = None
    description: str | None = Field(default=None, min_length=1)
    parameters: list[APIParameter] | None = None
    response_example: str | None = None
    version: str | None = None
    tags: list[str] | None = None
    status: DescriptorStatus | None = None

    @field_validator("endpoint")
    @classmethod
    def endpoint_has_leading_slash(cls, v: str | None) -> str | None:
        return v if v is None else check_endpoint(v)

    @field_validator("parameters")
    @classmethod
    def parameter_ids_unique(cls, v: list[APIParameter] | None) -> list[APIParameter] | None:
        return v if v is None else check_unique_parameter_ids(v)

    @field_validator("tags")
    @classmethod
    def tags_as_set(cls, v: list[str] | None) -> list[str] | None:
        return v if v is None else dedupe_tags(v)

    def changes(self) -> dict:
        """Fields that were supplied, keyed by field name.

        An explicit None is kept: it clears the field when merged.
        """
        return {name: getattr(self, name) for name in self.model_fields_set}
