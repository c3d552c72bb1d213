"""Unit tests for src/errors/registry.py and the error formatter.

Tests verify:
- Every error code is registered with the correct category and title
- FilterBuilderError.from_code fills message templates
- format_error renders nested messages and remediation
"""

import pytest

from src.errors import FilterBuilderError, format_error
from src.errors.registry import ERROR_REGISTRY, ErrorCategory, get_error, get_errors_by_category


@pytest.mark.parametrize(
    "code,category,title",
    [
        ("E-1001", ErrorCategory.CONFIG, "Missing Base URL"),
        ("E-1002", ErrorCategory.CONFIG, "Invalid Base URL"),
        ("E-1003", ErrorCategory.CONFIG, "Missing API Key"),
        ("E-1004", ErrorCategory.CONFIG, "Unreadable Filter File"),
        ("E-2001", ErrorCategory.NETWORK, "Network Error"),
        ("E-3001", ErrorCategory.PEOPLE_API, "People API Request Failed"),
        ("E-3002", ErrorCategory.PEOPLE_API, "Authentication Rejected"),
        ("E-4001", ErrorCategory.ATTRIBUTES, "Partial Attribute Load"),
        ("E-4002", ErrorCategory.ATTRIBUTES, "Attribute Load Failed"),
    ],
)
def test_error_codes_registered(code, category, title):
    """All filter builder error codes must be registered."""
    error = get_error(code)
    assert error is not None, f"{code} not found in registry"
    assert error.category == category
    assert error.title == title
    assert error.remediation


def test_codes_match_keys():
    """Registry keys and codes agree."""
    for key, error in ERROR_REGISTRY.items():
        assert key == error.code


def test_only_partial_load_is_non_blocking():
    """E-4001 is a warning; everything else blocks."""
    non_blocking = [e.code for e in ERROR_REGISTRY.values() if not e.is_blocking]
    assert non_blocking == ["E-4001"]


def test_errors_by_category():
    """Category lookup returns only that category."""
    codes = [e.code for e in get_errors_by_category(ErrorCategory.CONFIG)]
    assert codes == ["E-1001", "E-1002", "E-1003", "E-1004"]


class TestFromCode:
    """FilterBuilderError construction from registry codes."""

    def test_template_substitution(self):
        """Keyword arguments fill the message template."""
        error = FilterBuilderError.from_code("E-2001", reason="timed out")
        assert error.message == (
            "Network error: timed out. This might be a CORS issue or the host may be unreachable."
        )
        assert str(error) == f"E-2001: {error.message}"

    def test_details_kept_separate(self):
        """details is stored, not substituted."""
        error = FilterBuilderError.from_code("E-1001", details={"errors": ["a", "b"]})
        assert error.message == "Base URL is required"
        assert error.details == {"errors": ["a", "b"]}

    def test_missing_placeholder_keeps_template(self):
        """A missing context value leaves the template untouched."""
        error = FilterBuilderError.from_code("E-4002")
        assert error.message == "Failed to fetch attributes: {reason}"

    def test_unknown_code(self):
        """Unknown codes still produce an error."""
        error = FilterBuilderError.from_code("E-9999")
        assert error.message == "Unknown error: E-9999"


class TestFormatError:
    """User-facing error rendering."""

    def test_lists_other_messages_and_action(self):
        """Nested messages other than the headline are listed."""
        error = FilterBuilderError.from_code(
            "E-1001", details={"errors": ["Base URL is required", "API Key is required"]}
        )
        assert format_error(error).splitlines() == [
            "E-1001: Base URL is required",
            "  - API Key is required",
            f"  Action: {error.remediation}",
        ]

    def test_without_remediation(self):
        """Remediation can be omitted."""
        error = FilterBuilderError.from_code("E-1003")
        assert format_error(error, include_remediation=False) == "E-1003: API Key is required"

    def test_payload_for_http(self):
        """The API body carries code, message, remediation and details."""
        error = FilterBuilderError.from_code("E-1003")
        assert error.to_payload() == {
            "error_code": "E-1003",
            "message": "API Key is required",
            "remediation": error.remediation,
            "details": None,
        }
