"""Filter compiler: deterministic People API filter generation.

Compiles a FilterSet into the nested JSON filter object the People API
expects, serializes it to compact JSON text and percent-encodes it for the
`filter` query parameter. Guarantees: identical FilterSet → identical
output, and no exceptions for malformed input. Incomplete conditions are
dropped silently.
"""

from __future__ import annotations

import json
import logging
from collections.abc import Iterable, Sequence
from typing import Any
from urllib.parse import quote, unquote

from src.filters.coercion import coerce_scalar, coerce_value
from src.filters.models import (
    LIST_SEPARATOR,
    Attribute,
    AttributeType,
    CompiledFilter,
    Condition,
    FilterLogic,
    FilterSet,
    ItemCondition,
    ListMode,
)
from src.filters.operators import (
    EXISTENCE_OPERATORS,
    LIST_VALUE_OPERATORS,
    OperatorCode,
    get_operator,
    normalize_operator,
)

logger = logging.getLogger(__name__)

COMPILER_VERSION = "people_filter_compiler_v1"

# Characters encodeURIComponent leaves untouched besides alphanumerics
_URI_COMPONENT_SAFE = "-_.!~*'()"

_EQ = OperatorCode.eq.value


def compile_filter_set(
    filter_set: FilterSet,
    attributes: Sequence[Attribute] | None = None,
) -> CompiledFilter:
    """Compile a filter set into raw and URL-encoded filter text.

    Args:
        filter_set: Conditions plus the logic joining them.
        attributes: Known attributes, used to resolve field types and list
            schemas that conditions do not carry themselves.

    Returns:
        CompiledFilter. Empty strings (not "{}") when no condition survives.
    """
    by_name = {attr.name: attr for attr in attributes or ()}

    nodes: list[dict[str, Any]] = []
    labels: list[str] = []
    for index, condition in enumerate(filter_set.conditions):
        if not is_condition_complete(condition, by_name):
            continue
        node = _compile_condition(condition, by_name)
        if node is None or not _is_serializable(node):
            logger.debug("Dropped condition %d: nothing serializable to send", index)
            continue
        nodes.append(node)
        labels.append(_explain_condition(condition, by_name))

    if not nodes:
        return CompiledFilter()

    if len(nodes) == 1:
        root = nodes[0]
    else:
        root = {_logic_key(filter_set.logic): nodes}

    raw = serialize_filter(root)
    logger.debug("Compiled %d condition(s) into %d chars", len(nodes), len(raw))
    return CompiledFilter(
        raw=raw,
        encoded=encode_filter(raw),
        node=root,
        condition_count=len(nodes),
        explanation=_join_labels(labels, filter_set.logic),
    )


# ---------------------------------------------------------------------------
# Validity
# ---------------------------------------------------------------------------


def _has_value(value: Any) -> bool:
    return value is not None and not (isinstance(value, str) and value == "")


def is_item_complete(item: ItemCondition) -> bool:
    """An item-condition needs a field, an operator and a value."""
    return bool(item.field) and bool(normalize_operator(item.operator)) and _has_value(
        item.value
    )


def is_condition_complete(
    condition: Condition,
    attributes: dict[str, Attribute] | None = None,
) -> bool:
    """Check whether a condition has everything it needs to compile.

    Flat conditions need a field, an operator and a value (existence checks
    need no value). List conditions need at least one complete item.
    """
    if not condition.field:
        return False
    if _field_type(condition, attributes or {}) == AttributeType.list_:
        return any(is_item_complete(item) for item in condition.list_conditions or ())
    operator = normalize_operator(condition.operator)
    if not operator:
        return False
    return operator in EXISTENCE_OPERATORS or _has_value(condition.value)


# ---------------------------------------------------------------------------
# Node construction
# ---------------------------------------------------------------------------


def nest_field_path(
    path: str,
    leaf: Any,
    operator: str | None = None,
    invert: bool = False,
) -> dict[str, Any]:
    """Build the nested object for a dotted field path.

    The path is split on "." and right-folded: the deepest segment maps to
    the leaf, each enclosing segment wraps the previous result.

    With an operator and invert=False the operator wraps the whole path:
        nest_field_path("a.b", 1, "#gt") → {"#gt": {"a": {"b": 1}}}
    With invert=True the operator object becomes the leaf instead:
        nest_field_path("a.b", 1, "#gt", invert=True) → {"a": {"b": {"#gt": 1}}}
    """
    if operator is not None and invert:
        leaf = {operator: leaf}
    node: Any = leaf
    for segment in reversed(path.split(".")):
        node = {segment: node}
    if operator is not None and not invert:
        node = {operator: node}
    return node


def list_field_name(path: str) -> str:
    """Address a list attribute by replacing "." with the reserved separator."""
    return path.replace(".", LIST_SEPARATOR)


def _compile_condition(
    condition: Condition,
    attributes: dict[str, Attribute],
) -> dict[str, Any] | None:
    field_type = _field_type(condition, attributes)
    if field_type == AttributeType.list_:
        return _compile_list_condition(condition, attributes)

    operator = normalize_operator(condition.operator)
    field = condition.field

    if operator in EXISTENCE_OPERATORS:
        return nest_field_path(field, True, operator)

    if operator in LIST_VALUE_OPERATORS:
        values = coerce_value(condition.value, field_type, operator)
        return nest_field_path(field, values, operator)

    value = coerce_value(condition.value, field_type, operator)

    if field_type == AttributeType.array:
        return nest_field_path(field, value, operator, invert=True)

    if operator == _EQ:
        return nest_field_path(field, value)

    return nest_field_path(field, value, operator)


def _compile_list_condition(
    condition: Condition,
    attributes: dict[str, Attribute],
) -> dict[str, Any] | None:
    schema = _list_schema(condition, attributes)
    item_nodes = []
    for item in condition.list_conditions or ():
        if not is_item_complete(item):
            continue
        operator = normalize_operator(item.operator)
        item_type = schema.get(item.field)
        if operator in LIST_VALUE_OPERATORS:
            value = coerce_value(item.value, item_type, operator)
        else:
            value = coerce_scalar(item.value, item_type)
        if operator == _EQ:
            item_nodes.append({item.field: value})
        else:
            item_nodes.append({operator: {item.field: value}})

    if not item_nodes:
        return None

    combined = {_logic_key(condition.list_logic): item_nodes}
    mode = "#all" if condition.list_mode == ListMode.match_all else "#any"
    return {mode: {list_field_name(condition.field): combined}}


# ---------------------------------------------------------------------------
# Serialization
# ---------------------------------------------------------------------------


def serialize_filter(node: dict[str, Any] | None) -> str:
    """Serialize a filter object to compact JSON; None/{} yields "".

    Raises:
        ValueError: If the node holds NaN or an infinity, which JSON cannot
            represent.
    """
    if not node:
        return ""
    return json.dumps(
        node, ensure_ascii=False, allow_nan=False, separators=(",", ":"), default=str
    )


def encode_filter(raw: str) -> str:
    """Percent-encode filter text the way encodeURIComponent does.

    Raises:
        UnicodeEncodeError: If the text holds a lone surrogate.
    """
    if not raw:
        return ""
    return quote(raw, safe=_URI_COMPONENT_SAFE)


def decode_filter(encoded: str) -> str:
    """Inverse of encode_filter."""
    if not encoded:
        return ""
    return unquote(encoded)


def _is_serializable(node: dict[str, Any]) -> bool:
    """Whether a condition node survives serialization and encoding."""
    try:
        encode_filter(serialize_filter(node))
    except ValueError as exc:
        # UnicodeEncodeError is a ValueError subclass
        logger.debug("Condition node rejected by serializer: %s", type(exc).__name__)
        return False
    return True


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _logic_key(logic: FilterLogic) -> str:
    return "#or" if logic == FilterLogic.or_ else "#and"


def _lookup_attribute(field: str, attributes: dict[str, Attribute]) -> Attribute | None:
    attribute = attributes.get(field)
    if attribute is None and "." in field:
        attribute = attributes.get(list_field_name(field))
    return attribute


def _field_type(
    condition: Condition,
    attributes: dict[str, Attribute],
) -> AttributeType | None:
    if condition.field_type is not None:
        return condition.field_type
    attribute = _lookup_attribute(condition.field, attributes)
    if attribute is not None:
        return attribute.type
    # Conditions built without type info but with item-conditions are lists
    if condition.list_conditions is not None and not normalize_operator(condition.operator):
        return AttributeType.list_
    return None


def _list_schema(
    condition: Condition,
    attributes: dict[str, Attribute],
) -> dict[str, AttributeType]:
    schema = condition.list_schema
    if not schema:
        attribute = _lookup_attribute(condition.field, attributes)
        schema = attribute.list_schema if attribute is not None else None
    return {key: descriptor.type for key, descriptor in (schema or {}).items()}


def _describe_value(value: Any) -> str:
    if isinstance(value, (list, tuple)):
        return "[" + ", ".join(_describe_value(v) for v in value) + "]"
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


def _operator_label(operator: str | None) -> str:
    descriptor = get_operator(operator)
    return descriptor.label if descriptor else str(operator)


def _explain_condition(
    condition: Condition,
    attributes: dict[str, Attribute],
) -> str:
    """Human-readable label for one compiled condition."""
    field_type = _field_type(condition, attributes)
    if field_type == AttributeType.list_:
        items = [
            f"{item.field} {_operator_label(item.operator)} {_describe_value(item.value)}"
            for item in condition.list_conditions or ()
            if is_item_complete(item)
        ]
        quantifier = "all items" if condition.list_mode == ListMode.match_all else "any item"
        inner = f" {condition.list_logic.value.upper()} ".join(items)
        return f"{condition.field} has {quantifier} where {inner}"

    operator = normalize_operator(condition.operator)
    label = _operator_label(operator)
    if operator in EXISTENCE_OPERATORS:
        return f"{condition.field} {label}"
    value = coerce_value(condition.value, field_type, operator)
    return f"{condition.field} {label} {_describe_value(value)}"


def _join_labels(labels: Iterable[str], logic: FilterLogic) -> str:
    return f" {logic.value.upper()} ".join(labels)
