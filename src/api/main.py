"""HTTP service for the People filter builder.

Routes live under /api/v1; /health reports the package and compiler
versions. FilterBuilderError becomes a 400 with the error payload.
"""

import logging
import os
import sys
from importlib.metadata import PackageNotFoundError
from importlib.metadata import version as _pkg_version

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from src.api.routes import attributes, filters, operators, query
from src.cli.config import FilterBuilderConfig, load_config
from src.errors import FilterBuilderError
from src.filters.compiler import COMPILER_VERSION

logging.basicConfig(
    level=logging.INFO,
    format="%(levelname)s:%(name)s:%(message)s",
    handlers=[logging.StreamHandler(sys.stdout)],
)
logger = logging.getLogger(__name__)

# Set by `people-filter serve --config` for the uvicorn process
CONFIG_PATH_ENV = "PEOPLEFILTER_CONFIG_PATH"
API_PREFIX = "/api/v1"


def allowed_origins() -> list[str]:
    """Origins from the comma-separated ALLOWED_ORIGINS variable."""
    return [o.strip() for o in os.environ.get("ALLOWED_ORIGINS", "").split(",") if o.strip()]


def package_version() -> str:
    try:
        return _pkg_version("people-filter-builder")
    except PackageNotFoundError:
        return "unknown"


async def filter_builder_error_handler(request: Request, exc: FilterBuilderError) -> JSONResponse:
    logger.warning("%s %s failed: %s", request.method, request.url.path, exc)
    return JSONResponse(status_code=400, content=exc.to_payload())


def create_app(settings: FilterBuilderConfig) -> FastAPI:
    """Build the FastAPI application.

    Args:
        settings: Loaded configuration, exposed as ``app.state.settings``.
    """
    logging.getLogger("src").setLevel(settings.server.log_level.upper())

    application = FastAPI(
        title="People Filter Builder API",
        description="Build, preview and test People API profile filters",
        version=package_version(),
    )
    application.state.settings = settings

    # No ALLOWED_ORIGINS means same-origin only
    origins = allowed_origins()
    if origins:
        application.add_middleware(
            CORSMiddleware,
            allow_origins=origins,
            allow_credentials=True,
            allow_methods=["GET", "POST", "OPTIONS"],
            allow_headers=["Content-Type", "Authorization"],
        )

    application.add_exception_handler(FilterBuilderError, filter_builder_error_handler)
    for module in (operators, filters, attributes, query):
        application.include_router(module.router, prefix=API_PREFIX)

    @application.get("/health")
    def health_check() -> dict:
        return {
            "status": "ok",
            "version": package_version(),
            "compiler_version": COMPILER_VERSION,
        }

    return application


app = create_app(load_config(os.environ.get(CONFIG_PATH_ENV) or None))
