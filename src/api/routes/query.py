"""API routes for test queries against the People API.

All endpoints use /api/v1/query prefix.
"""

import httpx
from fastapi import APIRouter, Depends

from src.api.dependencies import get_connection_settings, get_transport
from src.api.schemas import QueryTestRequest, QueryTestResponse
from src.cli.config import ConnectionConfig
from src.filters.compiler import compile_filter_set
from src.filters.preview import build_request_path, summarize_results
from src.services.people_client import PeopleApiClient, require_api_config

router = APIRouter(prefix="/query", tags=["query"])


@router.post("/test", response_model=QueryTestResponse)
async def run_test_query(
    body: QueryTestRequest,
    settings: ConnectionConfig = Depends(get_connection_settings),
    transport: httpx.AsyncBaseTransport | None = Depends(get_transport),
) -> QueryTestResponse:
    """Run a filter against GET /people/2/persons.

    API and network failures are reported in the response body, not as
    HTTP errors, so clients can show status and timing either way.

    Args:
        body: Credentials plus a filter set or an encoded filter.
        settings: Connection defaults (injected).
        transport: Outbound transport (injected).

    Returns:
        Query outcome with a one-line result summary.

    Raises:
        FilterBuilderError: E-1001/E-1002/E-1003 for bad settings.
    """
    require_api_config(body.base_url, body.api_key)

    if body.encoded_filter is not None:
        encoded = body.encoded_filter
    elif body.filter is not None:
        encoded = compile_filter_set(body.filter, body.attributes).encoded
    else:
        encoded = ""

    async with PeopleApiClient(
        body.base_url,
        body.api_key,
        timeout=settings.timeout_seconds,
        transport=transport,
    ) as client:
        result = await client.execute_filter(encoded)

    return QueryTestResponse(
        success=result.success,
        status=result.status,
        status_text=result.status_text,
        body=result.body,
        elapsed_ms=result.elapsed_ms,
        error=result.error,
        error_kind=result.error_kind,
        error_code=result.error_code,
        remediation=result.remediation,
        request_path=build_request_path(encoded),
        summary=summarize_results(result.body) if result.success else None,
    )
