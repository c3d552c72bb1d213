"""Request previews and result summaries for compiled filters."""

from __future__ import annotations

from typing import Any

PERSONS_PATH = "/people/2/persons"
PLACEHOLDER_BASE_URL = "https://your-base-url.api.infobip.com"
PLACEHOLDER_API_KEY = "YOUR_API_KEY"


def build_request_path(encoded_filter: str) -> str:
    """Path and query string for the persons search request."""
    path = f"{PERSONS_PATH}?includeTotalCount=true"
    if encoded_filter:
        path += f"&filter={encoded_filter}"
    return path


def build_api_example(encoded_filter: str) -> str:
    """Two-line HTTP request example with a placeholder key."""
    return (
        f"GET {build_request_path(encoded_filter)}\n"
        f"Authorization: App {PLACEHOLDER_API_KEY}"
    )


def build_curl_command(
    encoded_filter: str,
    base_url: str | None = None,
    api_key: str | None = None,
) -> str:
    """Ready-to-run curl command for the compiled filter.

    Args:
        encoded_filter: Percent-encoded filter text.
        base_url: API base URL; a placeholder is used when omitted.
        api_key: API key; a placeholder is used when omitted.

    Returns:
        Multi-line curl command.
    """
    url = (base_url or PLACEHOLDER_BASE_URL).rstrip("/") + build_request_path(encoded_filter)
    key = api_key or PLACEHOLDER_API_KEY
    return f'curl -X GET "{url}" \\\n  -H "Authorization: App {key}"'


def summarize_results(body: Any) -> str | None:
    """One-line summary of a persons search response.

    Returns None when the body is not a successful persons listing.
    """
    if not isinstance(body, dict):
        return None
    persons = body.get("persons")
    if not isinstance(persons, list):
        return None

    total = body.get("totalCount")
    if total is None:
        return f"Found {len(persons)} profile(s)"

    summary = f"Found {total} matching profile(s)"
    if isinstance(total, int) and len(persons) < total:
        summary += f" (showing {len(persons)} on this page)"
    return summary
