"""People API error extraction and translation.

The People API reports failures as
`{"requestError": {"serviceException": {"messageId": ..., "text": ...}}}`;
other gateways return a flat `message` or `error` field. This module pulls
a human-readable message out of either shape and maps HTTP statuses onto
the filter builder's error codes.
"""

from typing import Any

from src.errors.registry import get_error

FALLBACK_MESSAGE = "Request failed. Please check your filter syntax and API credentials."

# HTTP statuses that mean the credentials were refused
AUTH_STATUSES = frozenset({401, 403})


def extract_api_error(body: Any) -> tuple[str | None, str | None]:
    """Extract message id and text from a People API error body.

    Args:
        body: Decoded response body (any JSON value).

    Returns:
        Tuple of (message_id, text), either may be None.
    """
    if not isinstance(body, dict):
        return (None, None)

    request_error = body.get("requestError")
    if isinstance(request_error, dict):
        exception = request_error.get("serviceException")
        if isinstance(exception, dict):
            return (exception.get("messageId"), exception.get("text"))

    return (None, None)


def parse_error_message(body: Any) -> str:
    """Human-readable message for a failed People API response.

    Checks the nested serviceException shape first, then generic `message`
    and `error` fields, then falls back to a fixed hint.
    """
    message_id, text = extract_api_error(body)
    if text or message_id:
        return f"{text} (Error code: {message_id})"

    if isinstance(body, dict):
        if body.get("message"):
            return str(body["message"])
        if body.get("error"):
            return str(body["error"])

    return FALLBACK_MESSAGE


def translate_api_error(status_code: int, body: Any) -> tuple[str, str, str]:
    """Translate a failed response into the builder's error code.

    Args:
        status_code: HTTP status of the response.
        body: Decoded response body.

    Returns:
        Tuple of (error_code, formatted_message, remediation).
    """
    api_message = parse_error_message(body)
    code = "E-3002" if status_code in AUTH_STATUSES else "E-3001"
    error = get_error(code)
    if error is None:
        return (code, api_message, "")
    return (error.code, error.message_template.format(api_message=api_message), error.remediation)
