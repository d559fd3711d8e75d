import asyncio
import itertools

import pytest

from api_catalog.errors import ServiceError
from api_catalog.schema.base import APIDescriptor
from api_catalog.service import DescriptorService

NOW = "2030-01-01T00:00:00.000Z"

GOOD = {
    "name": "List Users",
    "endpoint": "/api/users",
    "method": "GET",
    "description": "desc",
}


@pytest.fixture
def service():
    counter = itertools.count(1)
    return DescriptorService(id_factory=lambda: f"id-{next(counter)}", clock=lambda: NOW)


class TestCreate:
    def test_returns_descriptor_with_identity(self, service):
        d = asyncio.run(service.create(GOOD))
        assert isinstance(d, APIDescriptor)
        assert d.id == "id-1"
        assert d.created_at == NOW
        assert d.updated_at == NOW
        assert d.name == "List Users"

    def test_ids_are_distinct(self):
        service = DescriptorService()
        a = asyncio.run(service.create(GOOD))
        b = asyncio.run(service.create(GOOD))
        assert a.id != b.id

    def test_identity_fields_in_input_are_replaced(self, service):
        d = asyncio.run(service.create({**GOOD, "id": "mine", "createdAt": "1999"}))
        assert d.id == "id-1"
        assert d.created_at == NOW

    def test_invalid_input_raises_generic_error(self, service):
        with pytest.raises(ServiceError) as exc:
            asyncio.run(service.create({**GOOD, "endpoint": "api/users"}))
        assert exc.value.message == "Failed to create API"
        assert exc.value.violations[0].field == "endpoint"


class TestUpdate:
    def test_returns_partial_with_id_and_timestamp(self, service):
        result = asyncio.run(service.update("abc", {"method": "POST"}))
        assert result == {"method": "POST", "id": "abc", "updated_at": NOW}

    def test_unknown_fields_ignored(self, service):
        result = asyncio.run(service.update("abc", {"name": "New", "createdAt": "x"}))
        assert result == {"name": "New", "id": "abc", "updated_at": NOW}

    def test_invalid_partial_raises(self, service):
        with pytest.raises(ServiceError) as exc:
            asyncio.run(service.update("abc", {"name": ""}))
        assert exc.value.message == "Failed to update API"


class TestDelete:
    def test_always_succeeds(self, service):
        assert asyncio.run(service.delete("anything")) is True


class TestValidateEndpoint:
    @pytest.mark.parametrize("endpoint", ["/api/users", "/x"])
    def test_valid(self, service, endpoint):
        assert asyncio.run(service.validate_endpoint(endpoint, "GET")) is True

    @pytest.mark.parametrize("endpoint", ["", "/", "api/users", None, 42])
    def test_invalid(self, service, endpoint):
        assert asyncio.run(service.validate_endpoint(endpoint, "GET")) is False


class TestUrls:
    def test_resource_urls(self):
        service = DescriptorService(base_url="https://catalog.test/v1/")
        assert service.url("apis") == "https://catalog.test/v1/apis"
        assert service.url("apis", "42") == "https://catalog.test/v1/apis/42"
