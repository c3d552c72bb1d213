"""Typed domain exceptions.

These exceptions let services signal specific failure kinds that callers
catch by type instead of matching message strings.

Usage:
    # In service layer
    raise AttributeFetchError("Custom", "Failed to fetch custom attributes: 500")

    # In the directory
    except AttributeFetchError as e:
        warnings.append(str(e))
"""


class DomainError(Exception):
    """Base exception for all domain errors."""

    def __init__(self, message: str) -> None:
        super().__init__(message)


class AttributeFetchError(DomainError):
    """One attribute source could not be loaded."""

    def __init__(self, source: str, message: str, status_code: int | None = None) -> None:
        super().__init__(message)
        self.source = source
        self.status_code = status_code
