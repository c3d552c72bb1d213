"""API routes for filter compilation.

Compiles filter sets into People API filter text together with request
previews. All endpoints use /api/v1/filters prefix.
"""

import logging

from fastapi import APIRouter

from src.api.schemas import CompileRequest, CompileResponse
from src.filters.compiler import compile_filter_set
from src.filters.preview import build_api_example, build_curl_command, build_request_path

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/filters", tags=["filters"])


@router.post("/compile", response_model=CompileResponse)
def compile_filter(request: CompileRequest) -> CompileResponse:
    """Compile a filter set.

    Incomplete conditions are skipped, so this never fails on a
    half-edited filter; an empty filter compiles to empty strings.

    Args:
        request: Filter set, optional attributes and preview base URL.

    Returns:
        Raw and encoded filter text with explanation and request previews.
    """
    compiled = compile_filter_set(request.filter, request.attributes)
    logger.info(
        "Compiled filter: %d of %d condition(s) used",
        compiled.condition_count,
        len(request.filter.conditions),
    )
    return CompileResponse(
        raw=compiled.raw,
        encoded=compiled.encoded,
        explanation=compiled.explanation,
        condition_count=compiled.condition_count,
        request_path=build_request_path(compiled.encoded),
        api_example=build_api_example(compiled.encoded),
        curl=build_curl_command(compiled.encoded, base_url=request.base_url),
    )
