"""YAML / JSON catalog files.

A catalog file holds either a list of descriptors or a mapping with an
``apis`` list. JSON is read through the YAML loader, which accepts it.
Entries without an ``id`` get one; timestamps default to load time.
"""

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any

import yaml

from api_catalog.errors import CatalogFileError
from api_catalog.schema.base import APIDescriptor, new_id
from api_catalog.schema.validate import FieldViolation, Invalid, Valid, validate_stored

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CatalogEntry:
    index: int
    label: str
    result: Valid[APIDescriptor] | Invalid


def load_catalog(file_path: Path) -> list[CatalogEntry]:
    """Read and validate every descriptor in a catalog file."""
    try:
        text = file_path.read_text(encoding="utf-8")
    except OSError as e:
        raise CatalogFileError(f"Cannot read {file_path}: {e}") from e
    return parse_catalog(text, source=str(file_path))


def parse_catalog(text: str, source: str = "<string>") -> list[CatalogEntry]:
    try:
        doc = yaml.safe_load(text)
    except yaml.YAMLError as e:
        raise CatalogFileError(f"{source} is not valid YAML/JSON: {e}") from e

    if doc is None:
        return []
    if isinstance(doc, dict):
        doc = doc.get("apis")
    if not isinstance(doc, list):
        raise CatalogFileError(f"{source}: expected a list of APIs or a mapping with an 'apis' list")

    entries = []
    seen_ids: set[str] = set()
    for index, item in enumerate(doc):
        entry = _parse_entry(index, item, seen_ids)
        entries.append(entry)
    logger.debug("loaded %d entries from %s", len(entries), source)
    return entries


def _parse_entry(index: int, item: Any, seen_ids: set[str]) -> CatalogEntry:
    label = f"#{index + 1}"
    if isinstance(item, dict):
        label = f"#{index + 1} {item.get('name') or ''}".rstrip()
        item = {"id": new_id(), **item}

    result = validate_stored(item)
    if isinstance(result, Valid):
        if result.value.id in seen_ids:
            result = Invalid((FieldViolation("id", "duplicate_id", f"duplicate API id {result.value.id!r}"),))
        else:
            seen_ids.add(result.value.id)
    return CatalogEntry(index=index, label=label, result=result)


def valid_descriptors(entries: list[CatalogEntry]) -> list[APIDescriptor]:
    return [e.result.value for e in entries if isinstance(e.result, Valid)]


def dump_catalog(descriptors: list[APIDescriptor]) -> str:
    """Render descriptors as a YAML catalog with camelCase keys."""
    doc = {"apis": [d.to_wire() for d in descriptors]}
    return yaml.safe_dump(doc, sort_keys=False, allow_unicode=True)
