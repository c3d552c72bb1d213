"""Tests for condition value coercion."""

import pytest

from src.filters.coercion import coerce_scalar, coerce_value, split_list_value
from src.filters.models import AttributeType


class TestSplitListValue:
    """Comma splitting for #in/#notIn values."""

    def test_trims_and_drops_empty(self):
        """Whitespace is trimmed and empty segments dropped."""
        assert split_list_value("a, b ,c") == ["a", "b", "c"]
        assert split_list_value(" ,a,,b, ") == ["a", "b"]

    def test_sequence_used_element_wise(self):
        """Lists are not split again."""
        assert split_list_value(["x, y", 3, ""]) == ["x, y", 3]

    def test_scalars(self):
        """Non-string scalars become one-element lists; None is empty."""
        assert split_list_value(7) == [7]
        assert split_list_value(None) == []


class TestCoerceScalar:
    """Type-directed scalar coercion."""

    @pytest.mark.parametrize(
        "raw, expected",
        [("12", 12), (" 7 ", 7), ("-3", -3), ("12.5", "12.5"), ("12abc", "12abc"), ("1_000", "1_000")],
    )
    def test_integer(self, raw, expected):
        """Strict base-10 parsing; anything else passes through."""
        assert coerce_scalar(raw, AttributeType.integer) == expected

    def test_integer_keeps_booleans(self):
        """Booleans are not integers."""
        assert coerce_scalar(True, AttributeType.integer) is True

    @pytest.mark.parametrize(
        "raw, expected",
        [("4.5", 4.5), ("10", 10.0), ("1e3", 1000.0), ("nan", "nan"), ("inf", "inf"), ("abc", "abc")],
    )
    def test_decimal(self, raw, expected):
        """Finite floats parse; the rest passes through."""
        assert coerce_scalar(raw, AttributeType.decimal) == expected

    @pytest.mark.parametrize(
        "raw, expected",
        [("true", True), ("YES", True), ("1", True), ("false", False), ("No", False), ("0", False), ("maybe", "maybe")],
    )
    def test_boolean(self, raw, expected):
        """Boolean words map case-insensitively."""
        assert coerce_scalar(raw, AttributeType.boolean) == expected

    @pytest.mark.parametrize(
        "attr_type", [AttributeType.string, AttributeType.date, AttributeType.enum, None]
    )
    def test_other_types_unchanged(self, attr_type):
        """Strings, dates, enums and unknown types are not converted."""
        assert coerce_scalar("42", attr_type) == "42"


class TestCoerceValue:
    """Operator-aware coercion."""

    def test_in_coerces_each_element(self):
        """Elements of #in follow the field type."""
        assert coerce_value("1, 2, x", AttributeType.integer, "#in") == [1, 2, "x"]

    def test_not_in_without_type(self):
        """With no known type elements stay strings."""
        assert coerce_value("1,2", None, "notIn") == ["1", "2"]

    def test_scalar_operator(self):
        """Other operators coerce a single value."""
        assert coerce_value("3.5", AttributeType.decimal, "#gt") == 3.5
        assert coerce_value("a,b", AttributeType.string, "#eq") == "a,b"
