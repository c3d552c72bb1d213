"""Pydantic schemas for API request/response validation.

This module defines the data contracts for the filter builder REST API:
operator lookup, filter compilation, attribute loading and test queries.
"""

from typing import Any

from pydantic import BaseModel, Field

from src.filters.models import Attribute, AttributeType, FilterSet
from src.filters.operators import OperatorDescriptor


# Operator schemas


class OperatorResponse(BaseModel):
    """Response schema for one operator descriptor."""

    code: str
    label: str
    description: str
    applicable_types: list[AttributeType]

    @classmethod
    def from_descriptor(cls, descriptor: OperatorDescriptor) -> "OperatorResponse":
        """Build a response from a catalog entry, types in declaration order."""
        return cls(
            code=descriptor.code.value,
            label=descriptor.label,
            description=descriptor.description,
            applicable_types=[t for t in AttributeType if t in descriptor.applicable_types],
        )


class OperatorListResponse(BaseModel):
    """Response schema for operator lookups."""

    operators: list[OperatorResponse]
    type: AttributeType | None = None
    field: str | None = None


# Filter schemas


class CompileRequest(BaseModel):
    """Request schema for compiling a filter set."""

    filter: FilterSet = Field(default_factory=FilterSet)
    attributes: list[Attribute] | None = Field(
        None, description="Known attributes used to resolve field types."
    )
    base_url: str | None = Field(None, description="Base URL used in the curl preview.")


class CompileResponse(BaseModel):
    """Response schema for a compiled filter with request previews."""

    raw: str
    encoded: str
    explanation: str
    condition_count: int
    request_path: str
    api_example: str
    curl: str


# Attribute schemas


class ConnectionRequest(BaseModel):
    """People API connection settings sent by the client."""

    base_url: str = ""
    api_key: str = ""


class AttributeLoadResponse(BaseModel):
    """Response schema for attribute discovery."""

    attributes: list[Attribute]
    warnings: list[str] = Field(default_factory=list)
    warning_message: str | None = None


# Query schemas


class QueryTestRequest(ConnectionRequest):
    """Request schema for running a filter against the People API.

    Either a filter set to compile or an already encoded filter may be
    given; encoded_filter wins when both are present.
    """

    filter: FilterSet | None = None
    encoded_filter: str | None = None
    attributes: list[Attribute] | None = None


class QueryTestResponse(BaseModel):
    """Response schema for a test query."""

    success: bool
    status: int
    status_text: str
    body: Any = None
    elapsed_ms: int
    error: str | None = None
    error_kind: str | None = None
    error_code: str | None = None
    remediation: str | None = None
    request_path: str
    summary: str | None = None
