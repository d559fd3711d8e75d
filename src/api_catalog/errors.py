from __future__ import annotations

from api_catalog.schema.validate import FieldViolation


class CatalogError(Exception):
    pass


class ServiceError(CatalogError):
    """A simulated service call was rejected.

    ``message`` is the generic text shown to users; ``violations`` keeps the
    field-level reasons for logs and callers that want them.
    """

    def __init__(self, message: str, violations: tuple[FieldViolation, ...] = ()):
        super().__init__(message)
        self.message = message
        self.violations = violations


class CatalogFileError(CatalogError):
    pass
