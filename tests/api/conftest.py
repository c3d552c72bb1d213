"""Pytest fixtures for API tests.

Provides a TestClient whose outbound People API calls go to a mock
transport instead of the network.
"""

from collections.abc import Generator

import pytest
from fastapi.testclient import TestClient

from src.api.dependencies import get_transport
from src.api.main import app

PERSONS = "/people/2/persons"
CUSTOM = "/people/2/customAttributes"
LISTS = "/people/3/lists"


@pytest.fixture
def people_api(make_transport):
    """Default People API routes; tests may edit .routes before calling."""
    return make_transport({
        PERSONS: (200, {"persons": [{"firstName": "Ana"}], "totalCount": 3}),
        CUSTOM: (200, {"customAttributes": [{"name": "tier", "dataType": "ENUM"}]}),
        LISTS: (404, {}),
    })


@pytest.fixture
def client(people_api) -> Generator[TestClient, None, None]:
    """Create a TestClient with the outbound transport overridden.

    Args:
        people_api: Recording People API transport fixture.

    Yields:
        TestClient configured for testing.
    """
    app.dependency_overrides[get_transport] = lambda: people_api.transport
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()
