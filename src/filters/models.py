"""Data models for the People filter builder.

Attribute (what can be filtered) → Condition / ItemCondition (what the user
authored) → FilterSet (conditions plus combining logic) → CompiledFilter
(canonical JSON text and its URL-encoded form). All models are Pydantic v2
so the HTTP service and the CLI can validate the same payloads.
"""

from __future__ import annotations

from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

# Reserved separator the People API uses to address list sub-fields.
LIST_SEPARATOR = "\u0001"

# ---------------------------------------------------------------------------
# Enums
# ---------------------------------------------------------------------------


class AttributeType(str, Enum):
    """Filterable attribute types."""

    string = "string"
    integer = "integer"
    decimal = "decimal"
    boolean = "boolean"
    date = "date"
    date_time = "date_time"
    enum = "enum"
    array = "array"
    list_ = "list"  # Python attribute is `list_`; VALUE is "list" (API-facing)


class ListMode(str, Enum):
    """How item-conditions apply to the elements of a list attribute."""

    match_any = "match-any"
    match_all = "match-all"


class FilterLogic(str, Enum):
    """Logic joining sibling conditions."""

    and_ = "and"
    or_ = "or"


_TYPE_ALIASES: dict[str, AttributeType] = {
    "number": AttributeType.decimal,
    "float": AttributeType.decimal,
    "double": AttributeType.decimal,
    "int": AttributeType.integer,
    "long": AttributeType.integer,
    "datetime": AttributeType.date_time,
    "bool": AttributeType.boolean,
    "text": AttributeType.string,
}

_LIST_MODE_ALIASES: dict[str, ListMode] = {
    "#any": ListMode.match_any,
    "any": ListMode.match_any,
    "#all": ListMode.match_all,
    "all": ListMode.match_all,
}


def normalize_attribute_type(raw: Any) -> AttributeType:
    """Map a remote or user-supplied type label onto AttributeType.

    Matching is case-insensitive. Unknown labels fall back to string, which
    is how the People API treats untyped custom attributes.

    Args:
        raw: Type label (e.g. "STRING", "Date_Time", "number") or AttributeType.

    Returns:
        The normalized AttributeType.
    """
    if isinstance(raw, AttributeType):
        return raw
    label = str(raw or "").strip().lower()
    if label in _TYPE_ALIASES:
        return _TYPE_ALIASES[label]
    try:
        return AttributeType(label)
    except ValueError:
        return AttributeType.string


def _normalize_logic(value: Any) -> Any:
    if isinstance(value, FilterLogic):
        return value
    if isinstance(value, str) and value.strip().lower() == "or":
        return FilterLogic.or_
    return FilterLogic.and_


# ---------------------------------------------------------------------------
# Attributes
# ---------------------------------------------------------------------------


class SchemaField(BaseModel):
    """Type descriptor for one sub-field of a list attribute."""

    type: AttributeType = AttributeType.string

    @field_validator("type", mode="before")
    @classmethod
    def _normalize_type(cls, value: Any) -> AttributeType:
        return normalize_attribute_type(value)


class Attribute(BaseModel):
    """A named, typed field of a person profile that can appear in a filter."""

    model_config = ConfigDict(populate_by_name=True)

    name: str = Field(..., description="Field path (dotted, or data<SEP>Name for lists).")
    type: AttributeType = Field(default=AttributeType.string)
    is_custom: bool = Field(default=False, alias="isCustom")
    display_name: str | None = Field(default=None, alias="displayName")
    enum_values: list[str] | None = Field(default=None, alias="enumValues")
    list_schema: dict[str, SchemaField] | None = Field(default=None, alias="schema")

    @field_validator("type", mode="before")
    @classmethod
    def _normalize_type(cls, value: Any) -> AttributeType:
        return normalize_attribute_type(value)

    @property
    def is_list(self) -> bool:
        return self.type == AttributeType.list_

    def schema_fields(self) -> list[tuple[str, AttributeType]]:
        """Ordered (sub-field, type) pairs of a list attribute, minus `__id`."""
        if not self.is_list or not self.list_schema:
            return []
        return [
            (key, descriptor.type)
            for key, descriptor in self.list_schema.items()
            if key != "__id"
        ]


# ---------------------------------------------------------------------------
# Conditions
# ---------------------------------------------------------------------------


class ItemCondition(BaseModel):
    """A predicate on one sub-field of each element of a list attribute."""

    id: str | int | None = Field(default=None, description="UI-local identifier.")
    field: str = Field(default="", description="Key in the parent list schema.")
    operator: str | None = Field(default="#eq")
    value: Any = None


class Condition(BaseModel):
    """One user-authored predicate on an Attribute.

    Flat conditions use operator/value. List conditions (field_type = list)
    carry no top-level operator; they are expressed through list_conditions.
    """

    model_config = ConfigDict(populate_by_name=True)

    id: str | int | None = Field(default=None, description="UI-local identifier.")
    field: str = Field(default="", description="Attribute name; empty = incomplete.")
    operator: str | None = Field(default=None)
    value: Any = None
    field_type: AttributeType | None = Field(default=None, alias="fieldType")
    list_mode: ListMode = Field(default=ListMode.match_any, alias="listMode")
    list_logic: FilterLogic = Field(default=FilterLogic.and_, alias="listLogic")
    list_conditions: list[ItemCondition] | None = Field(
        default=None, alias="listConditions"
    )
    list_schema: dict[str, SchemaField] | None = Field(default=None, alias="schema")

    @field_validator("field_type", mode="before")
    @classmethod
    def _normalize_type(cls, value: Any) -> AttributeType | None:
        if value is None or value == "":
            return None
        return normalize_attribute_type(value)

    @field_validator("list_mode", mode="before")
    @classmethod
    def _normalize_list_mode(cls, value: Any) -> Any:
        if isinstance(value, str):
            lowered = value.strip().lower()
            if lowered in _LIST_MODE_ALIASES:
                return _LIST_MODE_ALIASES[lowered]
            if lowered == ListMode.match_all.value:
                return ListMode.match_all
            return ListMode.match_any
        return value if value is not None else ListMode.match_any

    @field_validator("list_logic", mode="before")
    @classmethod
    def _normalize_list_logic(cls, value: Any) -> Any:
        return _normalize_logic(value)


class FilterSet(BaseModel):
    """Root compiler input: ordered conditions plus their combining logic."""

    conditions: list[Condition] = Field(default_factory=list)
    logic: FilterLogic = Field(default=FilterLogic.and_)

    @field_validator("logic", mode="before")
    @classmethod
    def _normalize_logic(cls, value: Any) -> Any:
        return _normalize_logic(value)


# ---------------------------------------------------------------------------
# Compilation output
# ---------------------------------------------------------------------------


class CompiledFilter(BaseModel):
    """Output of the filter compiler."""

    raw: str = Field(default="", description="Compact JSON filter text.")
    encoded: str = Field(default="", description="Percent-encoded filter text.")
    node: dict[str, Any] | None = Field(
        default=None, description="Root filter object, None when empty."
    )
    condition_count: int = Field(
        default=0, description="Number of conditions that reached the output."
    )
    explanation: str = Field(default="", description="Human-readable explanation.")

    @property
    def is_empty(self) -> bool:
        return not self.raw
