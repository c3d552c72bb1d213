"""Root-level pytest fixtures for all tests.

Provides shared fixtures:
- Sample attribute directory contents
- A People API mock transport recording every request
"""

import json
from collections.abc import Callable
from dataclasses import dataclass, field

import httpx
import pytest

from src.filters.models import LIST_SEPARATOR, Attribute, AttributeType, SchemaField


# ============================================================================
# Pytest Markers
# ============================================================================


def pytest_configure(config):
    """Register custom markers."""
    config.addinivalue_line(
        "markers", "integration: marks tests requiring a live People API account"
    )


# ============================================================================
# Attribute Fixtures
# ============================================================================


@pytest.fixture
def sample_attributes() -> list[Attribute]:
    """A small directory covering every attribute kind."""
    return [
        Attribute(name="firstName", type=AttributeType.string),
        Attribute(name="age", type=AttributeType.integer),
        Attribute(name="score", type=AttributeType.decimal),
        Attribute(name="vip", type=AttributeType.boolean),
        Attribute(name="tags", type=AttributeType.array),
        Attribute(
            name="customAttributes.tier",
            type=AttributeType.enum,
            is_custom=True,
            enum_values=["gold", "silver"],
        ),
        Attribute(
            name=f"data{LIST_SEPARATOR}Orders",
            type=AttributeType.list_,
            is_custom=True,
            display_name="Orders",
            list_schema={
                "color": SchemaField(type="string"),
                "quantity": SchemaField(type="integer"),
            },
        ),
    ]


# ============================================================================
# People API Transport
# ============================================================================


@dataclass
class RecordingTransport:
    """httpx.MockTransport wrapper that routes by path and records requests.

    Routes map a URL path to either a (status, json_body) tuple or a
    callable taking the request and returning an httpx.Response.
    """

    routes: dict[str, tuple[int, object] | Callable[[httpx.Request], httpx.Response]]
    requests: list[httpx.Request] = field(default_factory=list)

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        route = self.routes.get(request.url.path)
        if route is None:
            return httpx.Response(404, json={"error": "not found"})
        if callable(route):
            return route(request)
        status, body = route
        if isinstance(body, str):
            return httpx.Response(status, text=body)
        return httpx.Response(status, content=json.dumps(body).encode())

    @property
    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self.handler)

    def paths(self) -> list[str]:
        return [r.url.path for r in self.requests]


@pytest.fixture
def make_transport() -> Callable[..., RecordingTransport]:
    """Factory for a RecordingTransport with the given routes."""

    def _make(routes: dict) -> RecordingTransport:
        return RecordingTransport(routes=routes)

    return _make
