"""Service layer for the People filter builder.

Provides the People API client and attribute discovery.
"""

from src.services.attribute_directory import (
    AttributeDirectory,
    AttributeLoadResult,
)
from src.services.people_client import (
    PeopleApiClient,
    QueryResult,
    require_api_config,
    validate_api_config,
)

__all__ = [
    "AttributeDirectory",
    "AttributeLoadResult",
    "PeopleApiClient",
    "QueryResult",
    "require_api_config",
    "validate_api_config",
]
