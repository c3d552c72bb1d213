"""FastAPI route modules.

Exports all route modules for inclusion in the main application.
"""

from src.api.routes import attributes, filters, operators, query

__all__ = [
    "attributes",
    "filters",
    "operators",
    "query",
]
