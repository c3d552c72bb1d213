"""FilterBuilderError and its renderings for the terminal and the HTTP API."""

from dataclasses import dataclass, field
from typing import Any

from src.errors.registry import get_error

UNKNOWN_REMEDIATION = "Check the command and try again."


@dataclass
class FilterBuilderError(Exception):
    """Error raised with a registry code.

    Attributes:
        code: Registry code, E-XXXX.
        message: Message with context filled in.
        remediation: What the user can do about it.
        details: Extra structured context; ``errors`` holds nested messages.
    """

    code: str
    message: str
    remediation: str
    details: dict = field(default_factory=dict)

    def __str__(self) -> str:
        return f"{self.code}: {self.message}"

    @classmethod
    def from_code(cls, code: str, details: Any = None, **context: object) -> "FilterBuilderError":
        """Build an error from its registry entry.

        Args:
            code: Registry code, E-XXXX.
            details: Structured context stored on the error; ignored unless a dict.
            **context: Values for the message template placeholders. A
                template with unfilled placeholders is used as-is.
        """
        entry = get_error(code)
        details = details if isinstance(details, dict) else {}
        if entry is None:
            return cls(code, f"Unknown error: {code}", UNKNOWN_REMEDIATION, details)

        try:
            message = entry.message_template.format(**context)
        except KeyError:
            message = entry.message_template
        return cls(entry.code, message, entry.remediation, details)

    def to_payload(self) -> dict[str, Any]:
        """JSON body used by the HTTP API error handler."""
        return {
            "error_code": self.code,
            "message": self.message,
            "remediation": self.remediation,
            "details": self.details or None,
        }


def format_error(error: FilterBuilderError, include_remediation: bool = True) -> str:
    """Render an error for the terminal.

    Nested messages in ``details["errors"]`` that differ from the headline
    are listed under it, followed by the remediation line.
    """
    lines = [str(error)]
    lines.extend(
        f"  - {nested}" for nested in error.details.get("errors", []) if nested != error.message
    )
    if include_remediation:
        lines.append(f"  Action: {error.remediation}")
    return "\n".join(lines)
