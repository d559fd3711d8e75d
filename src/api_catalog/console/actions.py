"""Console action handlers.

Each handler runs one user action to completion: it reads the current state,
calls the simulated service at most once, replaces the affected part of the
state and posts notices. Failures never escape a handler; they become notices.
"""

import fnmatch
import logging
from collections import Counter
from collections.abc import Callable, Iterable
from dataclasses import dataclass, field
from typing import Any

from api_catalog.console.notices import NoticeBoard
from api_catalog.console.state import ComposingNew, ConsoleState, DescriptorDraft, Editing, ParameterDraft
from api_catalog.errors import ServiceError
from api_catalog.schema.base import API_METHODS, DESCRIPTOR_STATUSES, APIDescriptor, new_id
from api_catalog.schema.validate import Invalid, validate_parameter, validate_stored
from api_catalog.service import DescriptorService

logger = logging.getLogger(__name__)

MISSING_FIELDS_MESSAGE = "Please fill in all required fields"
MISSING_PARAMETER_MESSAGE = "Please fill in the parameter name and type"


@dataclass(frozen=True)
class CatalogStats:
    total: int
    parameters: int
    by_method: dict[str, int] = field(default_factory=dict)
    by_status: dict[str, int] = field(default_factory=dict)


def compute_stats(descriptors: Iterable[APIDescriptor]) -> CatalogStats:
    descriptors = list(descriptors)
    methods = Counter(d.method for d in descriptors)
    statuses = Counter(d.status for d in descriptors)
    return CatalogStats(
        total=len(descriptors),
        parameters=sum(len(d.parameters) for d in descriptors),
        by_method={m: methods.get(m, 0) for m in API_METHODS},
        by_status={s: statuses.get(s, 0) for s in DESCRIPTOR_STATUSES},
    )


def filter_descriptors(descriptors: Iterable[APIDescriptor], patterns: Iterable[str]) -> list[APIDescriptor]:
    """Keep descriptors matching any pattern.

    Patterns look like "POST /api/users" (method and endpoint glob) or
    "/api/users/*" (endpoint glob only). No patterns keeps everything.
    """
    patterns = list(patterns)
    if not patterns:
        return list(descriptors)

    result = []
    for d in descriptors:
        for pattern in patterns:
            method, _, path = pattern.strip().rpartition(" ")
            if method and method.upper() != d.method:
                continue
            if fnmatch.fnmatchcase(d.endpoint, path):
                result.append(d)
                break
    return result


class Console:
    """The API catalog console: a descriptor collection plus its forms."""

    def __init__(
        self,
        service: DescriptorService | None = None,
        state: ConsoleState | None = None,
        id_factory: Callable[[], str] = new_id,
    ):
        self.service = service or DescriptorService()
        self.state = state or ConsoleState()
        self.notices = NoticeBoard()
        self.id_factory = id_factory

    @classmethod
    def with_descriptors(cls, descriptors: Iterable[APIDescriptor], **kwargs) -> "Console":
        console = cls(**kwargs)
        console.state.descriptors = list(descriptors)
        return console

    # -- queries ---------------------------------------------------------

    @property
    def descriptors(self) -> list[APIDescriptor]:
        return list(self.state.descriptors)

    @property
    def is_editing(self) -> bool:
        return isinstance(self.state.focus, Editing)

    def find(self, descriptor_id: str) -> APIDescriptor | None:
        index = self.state.index_of(descriptor_id)
        return None if index is None else self.state.descriptors[index]

    def filter(self, patterns: Iterable[str]) -> list[APIDescriptor]:
        return filter_descriptors(self.state.descriptors, patterns)

    def stats(self) -> CatalogStats:
        return compute_stats(self.state.descriptors)

    # -- new descriptor form ---------------------------------------------

    def set_new_field(self, name: str, value: Any) -> None:
        try:
            self.state.new_draft = self.state.new_draft.with_field(name, value)
        except KeyError:
            self.notices.error(f"Unknown field: {name}")

    async def create_descriptor(self) -> APIDescriptor | None:
        draft = self.state.new_draft
        if draft.missing_required():
            self.notices.error(MISSING_FIELDS_MESSAGE)
            return None

        try:
            descriptor = await self.service.create(draft.to_payload())
        except ServiceError as e:
            self.notices.error(e.message)
            return None

        self.state.descriptors = [*self.state.descriptors, descriptor]
        self.state.new_draft = DescriptorDraft()
        logger.info("created %s %s (%s)", descriptor.method, descriptor.endpoint, descriptor.id)
        self.notices.success("API created successfully")
        return descriptor

    # -- editing ---------------------------------------------------------

    def start_edit(self, descriptor_id: str) -> None:
        descriptor = self.find(descriptor_id)
        if descriptor is None:
            self.notices.error(f"No API with id {descriptor_id}")
            return
        self.state.focus = Editing(descriptor_id, DescriptorDraft.from_descriptor(descriptor))

    def set_edit_field(self, name: str, value: Any) -> None:
        focus = self.state.focus
        if not isinstance(focus, Editing):
            self.notices.error("No API is being edited")
            return
        try:
            self.state.focus = Editing(focus.descriptor_id, focus.draft.with_field(name, value))
        except KeyError:
            self.notices.error(f"Unknown field: {name}")

    def cancel_edit(self) -> None:
        self.state.focus = ComposingNew()

    async def save_edit(self) -> APIDescriptor | None:
        focus = self.state.focus
        if not isinstance(focus, Editing):
            self.notices.error("No API is being edited")
            return None

        index = self.state.index_of(focus.descriptor_id)
        if index is None:
            # deleted while being edited
            self.state.focus = ComposingNew()
            self.notices.error("Failed to update API")
            return None

        try:
            changes = await self.service.update(focus.descriptor_id, focus.draft.to_payload())
        except ServiceError as e:
            self.notices.error(e.message)
            return None

        stored = self.state.descriptors[index]
        merged = validate_stored({**dict(stored), **changes})
        if isinstance(merged, Invalid):
            logger.debug("merge of %s rejected: %s", stored.id, "; ".join(map(str, merged.violations)))
            self.notices.error("Failed to update API")
            return None

        descriptors = list(self.state.descriptors)
        descriptors[index] = merged.value
        self.state.descriptors = descriptors
        self.state.focus = ComposingNew()
        logger.info("updated %s", stored.id)
        self.notices.success("API updated successfully")
        return merged.value

    async def delete_descriptor(self, descriptor_id: str) -> bool:
        if self.state.index_of(descriptor_id) is None:
            return False
        await self.service.delete(descriptor_id)

        self.state.descriptors = [d for d in self.state.descriptors if d.id != descriptor_id]
        focus = self.state.focus
        if isinstance(focus, Editing) and focus.descriptor_id == descriptor_id:
            self.state.focus = ComposingNew()
        logger.info("deleted %s", descriptor_id)
        self.notices.success("API deleted successfully")
        return True

    # -- parameter sub-form ----------------------------------------------

    def set_parameter_field(self, name: str, value: Any) -> None:
        try:
            self.state.parameter_draft = self.state.parameter_draft.with_field(name, value)
        except KeyError:
            self.notices.error(f"Unknown parameter field: {name}")

    def add_parameter(self) -> None:
        form = self.state.parameter_draft
        if not form.name or not form.type:
            self.notices.error(MISSING_PARAMETER_MESSAGE)
            return

        result = validate_parameter(form.to_payload(self.id_factory()))
        if isinstance(result, Invalid):
            self.notices.error("Invalid parameter: " + "; ".join(map(str, result.violations)))
            return

        draft = self.state.active_draft
        self.state.replace_active_draft(draft.with_parameters((*draft.parameters, result.value)))
        self.state.parameter_draft = ParameterDraft()
        self.notices.success("Parameter added successfully")

    def delete_parameter(self, parameter_id: str) -> None:
        draft = self.state.active_draft
        remaining = tuple(p for p in draft.parameters if p.id != parameter_id)
        if len(remaining) == len(draft.parameters):
            return
        self.state.replace_active_draft(draft.with_parameters(remaining))
        self.notices.success("Parameter deleted successfully")
