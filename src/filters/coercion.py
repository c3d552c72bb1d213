"""Value coercion for filter conditions.

Converts raw user-entered values into the typed values the People API
expects. Coercion never fails: anything that cannot be parsed for the
attribute's type is passed through unchanged.
"""

from __future__ import annotations

import math
from collections.abc import Sequence
from typing import Any

from src.filters.models import AttributeType
from src.filters.operators import LIST_VALUE_OPERATORS, normalize_operator

_TRUE_WORDS = frozenset({"true", "1", "yes"})
_FALSE_WORDS = frozenset({"false", "0", "no"})


def split_list_value(raw: Any) -> list[Any]:
    """Split a comma-separated value into trimmed, non-empty pieces.

    Sequences are returned element-wise (strings inside are trimmed and
    empty ones dropped); other scalars become a one-element list.
    """
    if raw is None:
        return []
    if isinstance(raw, str):
        pieces: Sequence[Any] = raw.split(",")
    elif isinstance(raw, (list, tuple)):
        pieces = raw
    else:
        return [raw]

    result = []
    for piece in pieces:
        if isinstance(piece, str):
            piece = piece.strip()
            if not piece:
                continue
        result.append(piece)
    return result


def _parse_int(raw: Any) -> Any:
    if isinstance(raw, bool) or not isinstance(raw, str):
        return raw
    text = raw.strip()
    if "_" in text:
        return raw
    try:
        return int(text, 10)
    except ValueError:
        return raw


def _parse_decimal(raw: Any) -> Any:
    if isinstance(raw, bool) or not isinstance(raw, str):
        return raw
    text = raw.strip()
    if "_" in text:
        return raw
    try:
        parsed = float(text)
    except ValueError:
        return raw
    return parsed if math.isfinite(parsed) else raw


def _parse_bool(raw: Any) -> Any:
    if isinstance(raw, bool) or not isinstance(raw, str):
        return raw
    lowered = raw.strip().lower()
    if lowered in _TRUE_WORDS:
        return True
    if lowered in _FALSE_WORDS:
        return False
    return raw


def coerce_scalar(raw: Any, attribute_type: AttributeType | None) -> Any:
    """Coerce a single value by attribute type.

    Args:
        raw: The value as entered.
        attribute_type: Declared type, or None when unknown.

    Returns:
        int for integer, float for decimal, bool for boolean when parseable;
        otherwise the input unchanged.
    """
    if attribute_type == AttributeType.integer:
        return _parse_int(raw)
    if attribute_type == AttributeType.decimal:
        return _parse_decimal(raw)
    if attribute_type == AttributeType.boolean:
        return _parse_bool(raw)
    return raw


def coerce_value(
    raw: Any,
    attribute_type: AttributeType | None,
    operator: str | None,
) -> Any:
    """Coerce a condition value for its attribute type and operator.

    `#in` / `#notIn` values are split on commas into an ordered list whose
    elements are coerced one by one. With an unknown attribute type the
    elements stay strings.
    """
    if normalize_operator(operator) in LIST_VALUE_OPERATORS:
        return [coerce_scalar(piece, attribute_type) for piece in split_list_value(raw)]
    return coerce_scalar(raw, attribute_type)
