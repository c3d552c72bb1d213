"""Filter building for the People API.

Data model, operator catalog, value coercion and the filter compiler.
"""

from src.filters.compiler import (
    compile_filter_set,
    decode_filter,
    encode_filter,
    nest_field_path,
)
from src.filters.models import (
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
    OPERATOR_CATALOG,
    OperatorCode,
    operators_for_attribute,
)

__all__ = [
    # Models
    "Attribute",
    "AttributeType",
    "CompiledFilter",
    "Condition",
    "FilterLogic",
    "FilterSet",
    "ItemCondition",
    "ListMode",
    # Operators
    "OPERATOR_CATALOG",
    "OperatorCode",
    "operators_for_attribute",
    # Compiler
    "compile_filter_set",
    "decode_filter",
    "encode_filter",
    "nest_field_path",
]
