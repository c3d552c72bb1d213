"""People API client.

Thin wrapper around httpx that talks to the People profile API: runs
compiled filters against the persons search endpoint and exposes the raw
GET used by the attribute directory. Query failures are reported in the
returned QueryResult, never raised, so callers can render them directly.
"""

import logging
import time
from dataclasses import dataclass
from typing import Any

import httpx

from src.errors import FilterBuilderError, parse_error_message, translate_api_error
from src.filters.preview import build_request_path

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT_SECONDS = 30.0


@dataclass
class QueryResult:
    """Outcome of running a filter against the persons endpoint.

    error_kind is None on success, "http" when the API answered with a
    non-success status, and "network" when no response was received.
    error_code is the registry code for a failure (E-2001, E-3001 or
    E-3002) and remediation its suggested action.
    """

    success: bool
    status: int
    status_text: str
    body: Any
    elapsed_ms: int
    error: str | None = None
    error_kind: str | None = None
    error_code: str | None = None
    remediation: str | None = None


def sanitize_api_key(api_key: str | None) -> str:
    """Strip whitespace and drop non-ASCII characters from an API key."""
    if not api_key:
        return ""
    return "".join(ch for ch in api_key.strip() if ord(ch) < 128)


def validate_api_config(base_url: str | None, api_key: str | None) -> list[str]:
    """Check connection settings before any request is made.

    Returns:
        Human-readable problems; empty when the configuration is usable.
    """
    errors = []

    if not base_url or not base_url.strip():
        errors.append("Base URL is required")
    elif not _is_valid_url(base_url.strip()):
        errors.append("Base URL must be a valid URL")

    if not api_key or not api_key.strip():
        errors.append("API Key is required")

    return errors


def require_api_config(base_url: str | None, api_key: str | None) -> None:
    """Raise a configuration error listing every problem found.

    Raises:
        FilterBuilderError: E-1001/E-1002/E-1003 for the first problem, with
            all messages in details["errors"].
    """
    errors = validate_api_config(base_url, api_key)
    if not errors:
        return
    codes = {
        "Base URL is required": "E-1001",
        "Base URL must be a valid URL": "E-1002",
        "API Key is required": "E-1003",
    }
    raise FilterBuilderError.from_code(codes[errors[0]], details={"errors": errors})


def _is_valid_url(value: str) -> bool:
    try:
        url = httpx.URL(value)
    except (httpx.InvalidURL, TypeError):
        return False
    return url.scheme in ("http", "https") and bool(url.host)


class PeopleApiClient:
    """Async client for the People API."""

    def __init__(
        self,
        base_url: str,
        api_key: str,
        timeout: float = DEFAULT_TIMEOUT_SECONDS,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        """Initialize with connection settings.

        Args:
            base_url: API base URL, e.g. https://api.infobip.com.
            api_key: Raw API key; sanitized before use.
            timeout: Transport timeout in seconds.
            transport: Optional httpx transport (tests inject mocks here).
        """
        self._base_url = base_url.strip().rstrip("/")
        self._api_key = sanitize_api_key(api_key)
        self._timeout = timeout
        self._transport = transport
        self._client: httpx.AsyncClient | None = None

    @property
    def base_url(self) -> str:
        return self._base_url

    async def __aenter__(self) -> "PeopleApiClient":
        """Open httpx async client."""
        self._client = httpx.AsyncClient(
            base_url=self._base_url,
            timeout=self._timeout,
            headers={
                "Authorization": f"App {self._api_key}",
                "Content-Type": "application/json",
            },
            transport=self._transport,
        )
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        """Close httpx async client."""
        if self._client:
            await self._client.aclose()
            self._client = None

    def _require_client(self) -> httpx.AsyncClient:
        if self._client is None:
            raise RuntimeError("PeopleApiClient must be used as an async context manager")
        return self._client

    async def get(self, path: str, params: dict[str, Any] | None = None) -> httpx.Response:
        """Issue a GET relative to the base URL.

        Transport errors propagate as httpx exceptions.
        """
        client = self._require_client()
        logger.debug("GET %s params=%s", path, params)
        return await client.get(path, params=params)

    async def execute_filter(self, encoded_filter: str) -> QueryResult:
        """Run an encoded filter against GET /people/2/persons.

        Args:
            encoded_filter: Percent-encoded filter text ("" for no filter).

        Returns:
            QueryResult with status, timing, decoded body and error message.
        """
        client = self._require_client()
        path = build_request_path(encoded_filter)
        started = time.perf_counter()

        try:
            resp = await client.get(path)
        except httpx.TransportError as exc:
            elapsed_ms = _elapsed_ms(started)
            error = FilterBuilderError.from_code("E-2001", reason=str(exc) or type(exc).__name__)
            logger.warning("Filter query failed in transport after %dms: %s", elapsed_ms, exc)
            return QueryResult(
                success=False,
                status=0,
                status_text="Network Error",
                body=None,
                elapsed_ms=elapsed_ms,
                error=error.message,
                error_kind="network",
                error_code=error.code,
                remediation=error.remediation,
            )

        elapsed_ms = _elapsed_ms(started)
        body = _decode_body(resp)

        if resp.is_success:
            logger.info("Filter query succeeded: %d in %dms", resp.status_code, elapsed_ms)
            return QueryResult(
                success=True,
                status=resp.status_code,
                status_text=resp.reason_phrase,
                body=body,
                elapsed_ms=elapsed_ms,
            )

        code, _, remediation = translate_api_error(resp.status_code, body)
        logger.warning(
            "Filter query failed: %d %s (%s) in %dms",
            resp.status_code, resp.reason_phrase, code, elapsed_ms,
        )
        return QueryResult(
            success=False,
            status=resp.status_code,
            status_text=resp.reason_phrase,
            body=body,
            elapsed_ms=elapsed_ms,
            error=parse_error_message(body),
            error_kind="http",
            error_code=code,
            remediation=remediation or None,
        )


def _elapsed_ms(started: float) -> int:
    return round((time.perf_counter() - started) * 1000)


def _decode_body(resp: httpx.Response) -> Any:
    """JSON body when parseable, else the text (None when empty)."""
    try:
        return resp.json()
    except ValueError:
        return resp.text or None
