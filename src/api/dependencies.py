"""Shared FastAPI dependencies."""

import httpx
from fastapi import Request

from src.cli.config import ConnectionConfig


def get_connection_settings(request: Request) -> ConnectionConfig:
    """Connection defaults loaded at application startup."""
    return request.app.state.settings.connection


def get_transport() -> httpx.AsyncBaseTransport | None:
    """Transport for outbound People API calls; None uses the network.

    Tests override this dependency with an httpx.MockTransport.
    """
    return None
