"""Attribute discovery for the People API.

Merges three sources into one ordered attribute list:
1. Standard person fields (fixed list, confirmed with a one-record probe)
2. Custom attributes (paginated, names prefixed ``customAttributes.``)
3. List attributes (paginated, optional feature, addressed as data<SEP>Name)

Sources load concurrently. A failing source becomes a warning as long as
another source produced attributes; if nothing loads the whole call fails.
"""

import asyncio
import logging
from dataclasses import dataclass, field
from typing import Any

import httpx

from src.errors import AttributeFetchError, FilterBuilderError
from src.filters.models import LIST_SEPARATOR, Attribute, AttributeType, SchemaField
from src.services.people_client import PeopleApiClient

logger = logging.getLogger(__name__)

DEFAULT_PAGE_LIMIT = 1000
MAX_PAGES = 100

# Person profile fields available on every account
STANDARD_FIELDS: tuple[tuple[str, AttributeType], ...] = (
    ("id", AttributeType.string),
    ("externalId", AttributeType.string),
    ("firstName", AttributeType.string),
    ("lastName", AttributeType.string),
    ("middleName", AttributeType.string),
    ("gender", AttributeType.string),
    ("birthDate", AttributeType.date),
    ("address", AttributeType.string),
    ("city", AttributeType.string),
    ("country", AttributeType.string),
    ("preferredLanguage", AttributeType.string),
    ("profilePicture", AttributeType.string),
    ("tags", AttributeType.array),
    ("type", AttributeType.string),
    ("origin", AttributeType.string),
    ("createdAt", AttributeType.date),
    ("modifiedAt", AttributeType.date),
    ("modifiedFrom", AttributeType.string),
    ("contactInformation.email.address", AttributeType.string),
    ("contactInformation.phone.number", AttributeType.string),
)

# Status codes from the lists endpoint meaning "feature not enabled"
_LISTS_ABSENT_STATUSES = frozenset({400, 404})


@dataclass
class AttributeLoadResult:
    """Attributes that loaded plus per-source warnings."""

    attributes: list[Attribute]
    warnings: list[str] = field(default_factory=list)

    @property
    def is_partial(self) -> bool:
        return bool(self.warnings)

    def warning_message(self) -> str | None:
        """Combined partial-success message, None when every source loaded."""
        if not self.warnings:
            return None
        return FilterBuilderError.from_code("E-4001", reason="; ".join(self.warnings)).message


class AttributeDirectory:
    """Loads filterable attributes through a PeopleApiClient."""

    def __init__(self, client: PeopleApiClient, page_limit: int = DEFAULT_PAGE_LIMIT):
        """Initialize with an open client.

        Args:
            client: PeopleApiClient already entered as a context manager.
            page_limit: Page size for paginated listings.
        """
        self._client = client
        self._page_limit = page_limit

    async def list_attributes(self) -> AttributeLoadResult:
        """Fetch and merge standard, custom and list attributes.

        Returns:
            AttributeLoadResult with attributes in source order.

        Raises:
            FilterBuilderError: E-4002 when no source produced any attribute.
        """
        sources = (
            ("Standard", self.fetch_standard_attributes()),
            ("Custom", self.fetch_custom_attributes()),
            ("List", self.fetch_list_attributes()),
        )
        results = await asyncio.gather(
            *(coro for _, coro in sources), return_exceptions=True
        )

        attributes: list[Attribute] = []
        warnings: list[str] = []
        for (source, _), result in zip(sources, results):
            if isinstance(result, (AttributeFetchError, httpx.HTTPError)):
                logger.warning("%s attributes failed to load: %s", source, result)
                warnings.append(f"{source} attributes: {result}")
            elif isinstance(result, BaseException):
                raise result
            else:
                attributes.extend(result)

        if not attributes:
            reasons = warnings or ["No attributes were returned."]
            raise FilterBuilderError.from_code(
                "E-4002",
                reason="; ".join(reasons),
                details={"errors": reasons},
            )

        logger.info(
            "Loaded %d attributes (%d warning(s))", len(attributes), len(warnings)
        )
        return AttributeLoadResult(attributes=attributes, warnings=warnings)

    async def fetch_standard_attributes(self) -> list[Attribute]:
        """Probe the persons endpoint, then return the built-in field list."""
        resp = await self._client.get("/people/2/persons", params={"limit": 1})
        if not resp.is_success:
            raise AttributeFetchError(
                "Standard",
                f"Failed to fetch person profile: {resp.status_code} {resp.reason_phrase}",
                resp.status_code,
            )
        return [
            Attribute(name=name, type=attr_type, is_custom=False)
            for name, attr_type in STANDARD_FIELDS
        ]

    async def fetch_custom_attributes(self) -> list[Attribute]:
        """Paginate through account-defined custom attributes."""
        items = await self._paginate(
            "/people/2/customAttributes",
            key="customAttributes",
            source="Custom",
            absent_statuses=frozenset({404}),
        )
        return [_custom_attribute(item) for item in items if item.get("name")]

    async def fetch_list_attributes(self) -> list[Attribute]:
        """Paginate through list attributes; empty when the feature is off."""
        items = await self._paginate(
            "/people/3/lists",
            key="lists",
            source="List",
            absent_statuses=_LISTS_ABSENT_STATUSES,
        )
        return [_list_attribute(item) for item in items if item.get("name")]

    async def _paginate(
        self,
        path: str,
        key: str,
        source: str,
        absent_statuses: frozenset[int],
    ) -> list[dict[str, Any]]:
        """Collect items across 1-indexed pages while pages come back full.

        Args:
            path: Listing endpoint path.
            key: Response key holding the page items.
            source: Source name used in error messages.
            absent_statuses: Statuses meaning "nothing to list" rather than failure.

        Returns:
            All items in page order.

        Raises:
            AttributeFetchError: On any other non-success status.
        """
        items: list[dict[str, Any]] = []
        for page in range(1, MAX_PAGES + 1):
            resp = await self._client.get(
                path, params={"limit": self._page_limit, "page": page}
            )
            if resp.status_code in absent_statuses:
                logger.info("%s attributes not available (HTTP %d)", source, resp.status_code)
                return items
            if not resp.is_success:
                raise AttributeFetchError(
                    source,
                    f"Failed to fetch {source.lower()} attributes: "
                    f"{resp.status_code} {resp.reason_phrase}",
                    resp.status_code,
                )
            page_items = _page_items(resp, key)
            items.extend(page_items)
            if len(page_items) < self._page_limit:
                return items

        logger.warning("%s attributes truncated after %d pages", source, MAX_PAGES)
        return items


def _page_items(resp: httpx.Response, key: str) -> list[dict[str, Any]]:
    try:
        data = resp.json()
    except ValueError:
        return []
    if isinstance(data, list):
        page = data
    elif isinstance(data, dict):
        page = data.get(key) or data.get("results") or []
    else:
        return []
    return [item for item in page if isinstance(item, dict)]


def _custom_attribute(item: dict[str, Any]) -> Attribute:
    enum_values = item.get("enumValues")
    return Attribute(
        name=f"customAttributes.{item['name']}",
        type=item.get("dataType") or "string",
        is_custom=True,
        display_name=item["name"],
        enum_values=[str(v) for v in enum_values] if isinstance(enum_values, list) else None,
    )


def _list_attribute(item: dict[str, Any]) -> Attribute:
    raw_schema = item.get("schema")
    schema: dict[str, SchemaField] = {}
    if isinstance(raw_schema, dict):
        for sub_field, descriptor in raw_schema.items():
            if sub_field == "__id":
                continue
            sub_type = descriptor.get("type") if isinstance(descriptor, dict) else descriptor
            schema[sub_field] = SchemaField(type=sub_type or "string")
    return Attribute(
        name=f"data{LIST_SEPARATOR}{item['name']}",
        type=AttributeType.list_,
        is_custom=True,
        display_name=item["name"],
        list_schema=schema,
    )
