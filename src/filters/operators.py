"""Operator catalog for People API filters.

The catalog is a fixed, ordered table of operator descriptors with generic
type applicability. Field-specific narrowing (tags, enums, lists, numeric
types) is expressed as an ordered list of NarrowingRule objects applied
after the generic lookup.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Callable

from src.filters.models import Attribute, AttributeType

OPERATOR_MARKER = "#"


class OperatorCode(str, Enum):
    """Operator codes understood by the People API."""

    eq = "#eq"
    ne = "#ne"
    contains = "#contains"
    not_contain = "#notContain"
    starts_with = "#startsWith"
    ends_with = "#endsWith"
    gt = "#gt"
    gte = "#gte"
    lt = "#lt"
    lte = "#lte"
    in_ = "#in"
    not_in = "#notIn"
    exists = "#exists"
    not_exist = "#notExist"


@dataclass(frozen=True)
class OperatorDescriptor:
    """One catalog entry.

    Attributes:
        code: Marked operator code (e.g. "#eq").
        label: Short human label.
        description: One-line description for pickers and help output.
        applicable_types: Attribute types the operator applies to.
    """

    code: OperatorCode
    label: str
    description: str
    applicable_types: frozenset[AttributeType]


_T = AttributeType

_SCALAR_TYPES = frozenset({
    _T.string, _T.integer, _T.decimal, _T.boolean,
    _T.date, _T.date_time, _T.enum,
})
_ORDERABLE_TYPES = frozenset({_T.integer, _T.decimal, _T.date, _T.date_time})
NUMERIC_TYPES = frozenset({_T.integer, _T.decimal})

OPERATOR_CATALOG: tuple[OperatorDescriptor, ...] = (
    OperatorDescriptor(
        OperatorCode.eq, "equals",
        "Matches values that are equal to a specified value",
        _SCALAR_TYPES,
    ),
    OperatorDescriptor(
        OperatorCode.ne, "not equals",
        "Matches all values that are not equal to a specified value",
        _SCALAR_TYPES,
    ),
    OperatorDescriptor(
        OperatorCode.contains, "contains",
        "Matches records that contain the specified value",
        frozenset({_T.string, _T.array}),
    ),
    OperatorDescriptor(
        OperatorCode.not_contain, "not contain",
        "Matches records that do not contain the specified value",
        frozenset({_T.string, _T.array}),
    ),
    OperatorDescriptor(
        OperatorCode.starts_with, "starts with",
        "Matches records that start with a specified value",
        frozenset({_T.string}),
    ),
    OperatorDescriptor(
        OperatorCode.ends_with, "ends with",
        "Matches records that end with a specified value",
        frozenset({_T.string}),
    ),
    OperatorDescriptor(
        OperatorCode.gt, "greater than",
        "Matches values that are greater than a specified value",
        _ORDERABLE_TYPES,
    ),
    OperatorDescriptor(
        OperatorCode.gte, "greater than or equal",
        "Matches values that are greater than or equal to a specified value",
        _ORDERABLE_TYPES,
    ),
    OperatorDescriptor(
        OperatorCode.lt, "less than",
        "Matches values that are less than a specified value",
        _ORDERABLE_TYPES,
    ),
    OperatorDescriptor(
        OperatorCode.lte, "less than or equal",
        "Matches values that are less than or equal to a specified value",
        _ORDERABLE_TYPES,
    ),
    OperatorDescriptor(
        OperatorCode.in_, "is one of",
        "Matches any of the values in a comma-separated list",
        _SCALAR_TYPES - {_T.boolean},
    ),
    OperatorDescriptor(
        OperatorCode.not_in, "is not one of",
        "Matches none of the values in a comma-separated list",
        _SCALAR_TYPES - {_T.boolean},
    ),
    OperatorDescriptor(
        OperatorCode.exists, "exists",
        "Matches records where the field is present",
        frozenset(AttributeType),
    ),
    OperatorDescriptor(
        OperatorCode.not_exist, "does not exist",
        "Matches records where the field is absent",
        frozenset(AttributeType),
    ),
)

_BY_CODE: dict[str, OperatorDescriptor] = {op.code.value: op for op in OPERATOR_CATALOG}

# Operators whose value is a comma-separated list
LIST_VALUE_OPERATORS = frozenset({OperatorCode.in_.value, OperatorCode.not_in.value})

# Operators that never consult the value
EXISTENCE_OPERATORS = frozenset({OperatorCode.exists.value, OperatorCode.not_exist.value})

# Pattern-matching operators that only make sense on text
STRING_ONLY_OPERATORS = frozenset({
    OperatorCode.contains.value,
    OperatorCode.not_contain.value,
    OperatorCode.starts_with.value,
    OperatorCode.ends_with.value,
})

# Operators offered for item-conditions inside a list attribute
LIST_ITEM_OPERATORS: tuple[OperatorDescriptor, ...] = tuple(
    _BY_CODE[code.value]
    for code in (
        OperatorCode.eq,
        OperatorCode.ne,
        OperatorCode.contains,
        OperatorCode.gt,
        OperatorCode.lt,
        OperatorCode.in_,
        OperatorCode.not_in,
    )
)


def normalize_operator(code: str | None) -> str | None:
    """Return the marked form of an operator code.

    Bare catalog codes ("eq", "notIn") gain the "#" marker. Anything else is
    returned stripped but otherwise unchanged; empty input yields None.
    """
    if code is None:
        return None
    text = str(code).strip()
    if not text:
        return None
    if not text.startswith(OPERATOR_MARKER) and f"{OPERATOR_MARKER}{text}" in _BY_CODE:
        return f"{OPERATOR_MARKER}{text}"
    return text


def get_operator(code: str | None) -> OperatorDescriptor | None:
    """Look up a descriptor by (marked or bare) code."""
    normalized = normalize_operator(code)
    if normalized is None:
        return None
    return _BY_CODE.get(normalized)


def operators_for_type(attribute_type: AttributeType) -> list[OperatorDescriptor]:
    """Generic applicability lookup, in catalog order."""
    return [op for op in OPERATOR_CATALOG if attribute_type in op.applicable_types]


# ---------------------------------------------------------------------------
# Narrowing rules
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class NarrowingRule:
    """Override applied after the generic type lookup.

    A rule with `only` replaces the operator list with that subset of the
    catalog. A rule with `exclude` removes codes from the current list.
    """

    name: str
    matches: Callable[[Attribute], bool]
    only: frozenset[str] | None = None
    exclude: frozenset[str] = frozenset()

    def apply(self, operators: list[OperatorDescriptor]) -> list[OperatorDescriptor]:
        if self.only is not None:
            operators = [op for op in OPERATOR_CATALOG if op.code.value in self.only]
        return [op for op in operators if op.code.value not in self.exclude]


# Applied in order; later rules take precedence over earlier ones.
NARROWING_RULES: tuple[NarrowingRule, ...] = (
    NarrowingRule(
        name="enum-equality-only",
        matches=lambda attr: attr.type == AttributeType.enum,
        only=frozenset({OperatorCode.eq.value, OperatorCode.ne.value}),
    ),
    NarrowingRule(
        name="tags-membership-only",
        matches=lambda attr: attr.name == "tags",
        only=frozenset({OperatorCode.contains.value, OperatorCode.not_contain.value}),
    ),
    NarrowingRule(
        name="list-no-top-level-operator",
        matches=lambda attr: attr.type == AttributeType.list_,
        only=frozenset(),
    ),
    NarrowingRule(
        name="numeric-no-text-matching",
        matches=lambda attr: attr.type in NUMERIC_TYPES,
        exclude=STRING_ONLY_OPERATORS,
    ),
)


def operators_for_attribute(attribute: Attribute | None) -> list[OperatorDescriptor]:
    """Operators to offer for an attribute: generic lookup, then narrowing.

    Args:
        attribute: The selected attribute, or None when nothing is selected.

    Returns:
        Ordered operator descriptors; the full catalog for an unknown field.
    """
    if attribute is None:
        return list(OPERATOR_CATALOG)
    operators = operators_for_type(attribute.type)
    for rule in NARROWING_RULES:
        if rule.matches(attribute):
            operators = rule.apply(operators)
    return operators
