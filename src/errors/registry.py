"""E-XXXX error codes used across the filter builder.

The leading digit is the category:
- E-1xxx: configuration and input files
- E-2xxx: transport
- E-3xxx: People API responses
- E-4xxx: attribute discovery
"""

from dataclasses import dataclass
from enum import Enum


class ErrorCategory(str, Enum):
    """Error groups, one per leading code digit."""

    CONFIG = "config"
    NETWORK = "network"
    PEOPLE_API = "people_api"
    ATTRIBUTES = "attributes"


@dataclass(frozen=True)
class ErrorCode:
    """One registered error.

    ``message_template`` uses str.format placeholders filled from the
    context passed to FilterBuilderError.from_code. Non-blocking errors
    are reported alongside a usable result.
    """

    code: str
    category: ErrorCategory
    title: str
    message_template: str
    remediation: str
    is_blocking: bool = True


def _registry(*errors: ErrorCode) -> dict[str, ErrorCode]:
    return {error.code: error for error in errors}


ERROR_REGISTRY: dict[str, ErrorCode] = _registry(
    ErrorCode(
        "E-1001", ErrorCategory.CONFIG, "Missing Base URL",
        "Base URL is required",
        "Enter the People API base URL, e.g. https://api.infobip.com.",
    ),
    ErrorCode(
        "E-1002", ErrorCategory.CONFIG, "Invalid Base URL",
        "Base URL must be a valid URL",
        "Use an absolute http(s) URL including the host name.",
    ),
    ErrorCode(
        "E-1003", ErrorCategory.CONFIG, "Missing API Key",
        "API Key is required",
        "Enter an API key with access to the People API.",
    ),
    ErrorCode(
        "E-1004", ErrorCategory.CONFIG, "Unreadable Filter File",
        "Could not read filter file {path}: {reason}",
        "Provide a YAML or JSON file with 'conditions' and 'logic' keys.",
    ),
    ErrorCode(
        "E-2001", ErrorCategory.NETWORK, "Network Error",
        "Network error: {reason}. This might be a CORS issue or the host may be unreachable.",
        "Check the base URL and your network connection, then retry.",
    ),
    ErrorCode(
        "E-3001", ErrorCategory.PEOPLE_API, "People API Request Failed",
        "{api_message}",
        "Check your filter syntax and API credentials.",
    ),
    ErrorCode(
        "E-3002", ErrorCategory.PEOPLE_API, "Authentication Rejected",
        "The People API rejected the API key: {api_message}",
        "Verify the API key and that it is allowed to read person profiles.",
    ),
    ErrorCode(
        "E-4001", ErrorCategory.ATTRIBUTES, "Partial Attribute Load",
        "Partial success: {reason}",
        "Filters can be built with the attributes that did load.",
        is_blocking=False,
    ),
    ErrorCode(
        "E-4002", ErrorCategory.ATTRIBUTES, "Attribute Load Failed",
        "Failed to fetch attributes: {reason}",
        "Please check your API key and base URL.",
    ),
)


def get_error(code: str) -> ErrorCode | None:
    """Registry entry for ``code``, or None when it is not registered."""
    return ERROR_REGISTRY.get(code)


def get_errors_by_category(category: ErrorCategory) -> list[ErrorCode]:
    """Registered errors in ``category``, in code order."""
    return [error for error in ERROR_REGISTRY.values() if error.category == category]
