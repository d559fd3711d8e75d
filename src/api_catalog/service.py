"""Simulated persistence service for API descriptors.

Stands in for the catalog REST API: it validates and shapes records the way
the server would, logs the request it would have sent, and performs no I/O.
"""

import logging
from collections.abc import Callable
from typing import Any

from api_catalog.config import BASE_URL
from api_catalog.errors import ServiceError
from api_catalog.schema.base import APIDescriptor, new_id, utc_now_iso
from api_catalog.schema.validate import Invalid, validate_descriptor, validate_patch

logger = logging.getLogger(__name__)


class DescriptorService:
    """Awaitable create/update/delete/validate calls against the catalog API."""

    def __init__(
        self,
        base_url: str = BASE_URL,
        id_factory: Callable[[], str] = new_id,
        clock: Callable[[], str] = utc_now_iso,
    ):
        self.base_url = base_url.rstrip("/")
        self.id_factory = id_factory
        self.clock = clock

    def url(self, *parts: str) -> str:
        return "/".join([self.base_url, *parts])

    async def create(self, data: Any) -> APIDescriptor:
        """Validate a full descriptor and return it with a new id and timestamps."""
        result = validate_descriptor(data)
        if isinstance(result, Invalid):
            logger.debug("create rejected: %s", "; ".join(map(str, result.violations)))
            raise ServiceError("Failed to create API", result.violations)

        logger.debug("simulated POST %s", self.url("apis"))
        now = self.clock()
        return APIDescriptor(
            **dict(result.value),
            id=self.id_factory(),
            created_at=now,
            updated_at=now,
        )

    async def update(self, descriptor_id: str, patch: Any) -> dict[str, Any]:
        """Validate a partial descriptor and return it with the id and a fresh updated_at.

        The stored record is not consulted: merging with it is up to the caller.
        """
        result = validate_patch(patch)
        if isinstance(result, Invalid):
            logger.debug("update of %s rejected: %s", descriptor_id, "; ".join(map(str, result.violations)))
            raise ServiceError("Failed to update API", result.violations)

        logger.debug("simulated PUT %s", self.url("apis", descriptor_id))
        return {**result.value.changes(), "id": descriptor_id, "updated_at": self.clock()}

    async def delete(self, descriptor_id: str) -> bool:
        logger.debug("simulated DELETE %s", self.url("apis", descriptor_id))
        return True

    async def validate_endpoint(self, endpoint: Any, method: str = "GET") -> bool:
        """True when ``endpoint`` is a non-root path beginning with '/'."""
        logger.debug("simulated POST %s (%s %s)", self.url("validate-endpoint"), method, endpoint)
        try:
            return endpoint.startswith("/") and len(endpoint) > 1
        except (AttributeError, TypeError):
            return False
