"""Tests for AttributeDirectory with mocked People API responses."""

import httpx
import pytest

from src.errors import FilterBuilderError
from src.filters.models import LIST_SEPARATOR, AttributeType
from src.services.attribute_directory import STANDARD_FIELDS, AttributeDirectory
from src.services.people_client import PeopleApiClient

BASE_URL = "https://api.example.com"
PERSONS = "/people/2/persons"
CUSTOM = "/people/2/customAttributes"
LISTS = "/people/3/lists"


def _paged(pages: list[list[dict]], key: str):
    """Route handler serving the given pages by the page query parameter."""

    def _handler(request: httpx.Request) -> httpx.Response:
        page = int(request.url.params["page"])
        items = pages[page - 1] if page <= len(pages) else []
        return httpx.Response(200, json={key: items})

    return _handler


async def _load(fake, page_limit: int = 1000):
    async with PeopleApiClient(BASE_URL, "k", transport=fake.transport) as client:
        return await AttributeDirectory(client, page_limit=page_limit).list_attributes()


class TestListAttributes:
    """Merging standard, custom and list attributes."""

    @pytest.mark.asyncio
    async def test_all_sources(self, make_transport):
        """Attributes arrive standard first, then custom, then lists."""
        fake = make_transport({
            PERSONS: (200, {"persons": []}),
            CUSTOM: (200, {"customAttributes": [
                {"name": "tier", "dataType": "ENUM", "enumValues": ["gold", "silver"]},
                {"name": "points", "dataType": "DECIMAL"},
            ]}),
            LISTS: (200, {"lists": [
                {"name": "Orders", "schema": {
                    "__id": {"type": "string"},
                    "color": {"type": "STRING"},
                    "quantity": {"type": "INTEGER"},
                }},
            ]}),
        })

        result = await _load(fake)

        names = [a.name for a in result.attributes]
        assert names[: len(STANDARD_FIELDS)] == [name for name, _ in STANDARD_FIELDS]
        assert names[len(STANDARD_FIELDS):] == [
            "customAttributes.tier",
            "customAttributes.points",
            f"data{LIST_SEPARATOR}Orders",
        ]
        assert result.warnings == []
        assert result.warning_message() is None

        by_name = {a.name: a for a in result.attributes}
        tier = by_name["customAttributes.tier"]
        assert tier.type == AttributeType.enum
        assert tier.is_custom
        assert tier.enum_values == ["gold", "silver"]
        assert by_name["customAttributes.points"].type == AttributeType.decimal

        orders = by_name[f"data{LIST_SEPARATOR}Orders"]
        assert orders.is_list
        assert orders.display_name == "Orders"
        assert orders.schema_fields() == [
            ("color", AttributeType.string),
            ("quantity", AttributeType.integer),
        ]

    @pytest.mark.asyncio
    async def test_standard_probe_request(self, make_transport):
        """The standard source probes one person record."""
        fake = make_transport({PERSONS: (200, {"persons": []}), CUSTOM: (404, {}), LISTS: (404, {})})
        await _load(fake)
        probe = next(r for r in fake.requests if r.url.path == PERSONS)
        assert probe.url.params["limit"] == "1"

    @pytest.mark.asyncio
    async def test_missing_features_are_not_warnings(self, make_transport):
        """404 for custom attributes and 400 for lists mean none exist."""
        fake = make_transport({
            PERSONS: (200, {"persons": []}),
            CUSTOM: (404, {}),
            LISTS: (400, {}),
        })
        result = await _load(fake)
        assert len(result.attributes) == len(STANDARD_FIELDS)
        assert result.warnings == []

    @pytest.mark.asyncio
    async def test_partial_failure_keeps_other_sources(self, make_transport):
        """A failing source becomes a warning."""
        fake = make_transport({
            PERSONS: (500, {}),
            CUSTOM: (200, {"customAttributes": [{"name": "tier", "dataType": "STRING"}]}),
            LISTS: (404, {}),
        })
        result = await _load(fake)

        assert [a.name for a in result.attributes] == ["customAttributes.tier"]
        assert result.is_partial
        assert result.warnings == [
            "Standard attributes: Failed to fetch person profile: 500 Internal Server Error"
        ]
        assert result.warning_message().startswith("Partial success: Standard attributes:")

    @pytest.mark.asyncio
    async def test_transport_failure_in_one_source(self, make_transport):
        """httpx errors are treated as a source failure."""

        def _boom(request: httpx.Request) -> httpx.Response:
            raise httpx.ReadTimeout("timed out", request=request)

        fake = make_transport({PERSONS: (200, {}), CUSTOM: _boom, LISTS: (404, {})})
        result = await _load(fake)
        assert len(result.attributes) == len(STANDARD_FIELDS)
        assert result.warnings == ["Custom attributes: timed out"]

    @pytest.mark.asyncio
    async def test_total_failure_raises(self, make_transport):
        """No attributes at all raises E-4002 with every message."""
        fake = make_transport({
            PERSONS: (401, {}),
            CUSTOM: (401, {}),
            LISTS: (500, {}),
        })
        with pytest.raises(FilterBuilderError) as exc_info:
            await _load(fake)

        error = exc_info.value
        assert error.code == "E-4002"
        assert error.message.startswith("Failed to fetch attributes: Standard attributes:")
        assert len(error.details["errors"]) == 3
        assert error.details["errors"][2] == (
            "List attributes: Failed to fetch list attributes: 500 Internal Server Error"
        )


class TestPagination:
    """Page-by-page loading of custom and list attributes."""

    @pytest.mark.asyncio
    async def test_stops_after_short_page(self, make_transport):
        """Pages are requested until one comes back short."""
        pages = [
            [{"name": "a"}, {"name": "b"}],
            [{"name": "c"}, {"name": "d"}],
            [{"name": "e"}],
        ]
        fake = make_transport({
            PERSONS: (200, {}),
            CUSTOM: _paged(pages, "customAttributes"),
            LISTS: (404, {}),
        })
        result = await _load(fake, page_limit=2)

        custom = [a.name for a in result.attributes if a.is_custom]
        assert custom == [f"customAttributes.{n}" for n in "abcde"]
        custom_requests = [r for r in fake.requests if r.url.path == CUSTOM]
        assert [r.url.params["page"] for r in custom_requests] == ["1", "2", "3"]
        assert all(r.url.params["limit"] == "2" for r in custom_requests)

    @pytest.mark.asyncio
    async def test_full_last_page_requests_one_more(self, make_transport):
        """A full page is followed by a request for the next one."""
        pages = [[{"name": "Orders"}]]
        fake = make_transport({
            PERSONS: (200, {}),
            CUSTOM: (404, {}),
            LISTS: _paged(pages, "lists"),
        })
        result = await _load(fake, page_limit=1)

        assert result.attributes[-1].name == f"data{LIST_SEPARATOR}Orders"
        list_requests = [r for r in fake.requests if r.url.path == LISTS]
        assert [r.url.params["page"] for r in list_requests] == ["1", "2"]

    @pytest.mark.asyncio
    async def test_page_cap(self, make_transport, monkeypatch):
        """Endpoints that ignore the page parameter stop at the cap."""
        monkeypatch.setattr("src.services.attribute_directory.MAX_PAGES", 3)
        fake = make_transport({
            PERSONS: (200, {}),
            CUSTOM: (200, {"customAttributes": [{"name": "same"}]}),
            LISTS: (404, {}),
        })
        await _load(fake, page_limit=1)
        assert fake.paths().count(CUSTOM) == 3
