"""API routes for attribute discovery.

Loads the standard, custom and list attributes of a People API account.
All endpoints use /api/v1/attributes prefix.
"""

import httpx
from fastapi import APIRouter, Depends

from src.api.dependencies import get_connection_settings, get_transport
from src.api.schemas import AttributeLoadResponse, ConnectionRequest
from src.cli.config import ConnectionConfig
from src.services.attribute_directory import AttributeDirectory
from src.services.people_client import PeopleApiClient, require_api_config

router = APIRouter(prefix="/attributes", tags=["attributes"])


@router.post("/load", response_model=AttributeLoadResponse)
async def load_attributes(
    body: ConnectionRequest,
    settings: ConnectionConfig = Depends(get_connection_settings),
    transport: httpx.AsyncBaseTransport | None = Depends(get_transport),
) -> AttributeLoadResponse:
    """Load all filterable attributes for the given credentials.

    Args:
        body: Base URL and API key.
        settings: Connection defaults (injected).
        transport: Outbound transport (injected).

    Returns:
        Attributes plus warnings for sources that failed.

    Raises:
        FilterBuilderError: E-1001/E-1002/E-1003 for bad settings,
            E-4002 when no attribute could be loaded.
    """
    require_api_config(body.base_url, body.api_key)
    async with PeopleApiClient(
        body.base_url,
        body.api_key,
        timeout=settings.timeout_seconds,
        transport=transport,
    ) as client:
        result = await AttributeDirectory(client, page_limit=settings.page_limit).list_attributes()

    return AttributeLoadResponse(
        attributes=result.attributes,
        warnings=result.warnings,
        warning_message=result.warning_message(),
    )
