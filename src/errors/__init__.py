"""Error handling framework for the People filter builder.

This package provides:
- Error code registry with E-XXXX format codes
- People API error extraction and translation
- The FilterBuilderError type and its formatting

Error categories:
- E-1xxx: Configuration errors
- E-2xxx: Transport/network errors
- E-3xxx: People API errors
- E-4xxx: Attribute discovery errors
"""

from src.errors.api_translation import (
    FALLBACK_MESSAGE,
    extract_api_error,
    parse_error_message,
    translate_api_error,
)
from src.errors.domain import AttributeFetchError, DomainError
from src.errors.formatter import FilterBuilderError, format_error
from src.errors.registry import (
    ERROR_REGISTRY,
    ErrorCategory,
    ErrorCode,
    get_error,
    get_errors_by_category,
)

__all__ = [
    # Registry
    "ErrorCode",
    "ErrorCategory",
    "ERROR_REGISTRY",
    "get_error",
    "get_errors_by_category",
    # People API translation
    "FALLBACK_MESSAGE",
    "extract_api_error",
    "parse_error_message",
    "translate_api_error",
    # Domain
    "DomainError",
    "AttributeFetchError",
    # Formatter
    "FilterBuilderError",
    "format_error",
]
