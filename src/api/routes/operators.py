"""API routes for the operator catalog.

Lists the operators that apply to an attribute so clients can build
their operator pickers. All endpoints use /api/v1/operators prefix.
"""

from fastapi import APIRouter

from src.api.schemas import OperatorListResponse, OperatorResponse
from src.filters.models import Attribute, AttributeType
from src.filters.operators import LIST_ITEM_OPERATORS, operators_for_attribute
from src.services.attribute_directory import STANDARD_FIELDS

router = APIRouter(prefix="/operators", tags=["operators"])

_STANDARD_TYPES = dict(STANDARD_FIELDS)


@router.get("", response_model=OperatorListResponse)
def list_operators(
    type: AttributeType | None = None,
    field: str | None = None,
) -> OperatorListResponse:
    """List operators applicable to an attribute.

    Args:
        type: Attribute type. When omitted, standard field types are used
            for known field names.
        field: Attribute name; enables name-based narrowing such as tags.

    Returns:
        Ordered operators; the full catalog when nothing is known.
    """
    attr_type = type or _STANDARD_TYPES.get(field or "")
    attribute = None
    if attr_type is not None:
        attribute = Attribute(name=field or "", type=attr_type)
    operators = operators_for_attribute(attribute)
    return OperatorListResponse(
        operators=[OperatorResponse.from_descriptor(op) for op in operators],
        type=attr_type,
        field=field,
    )


@router.get("/list-items", response_model=OperatorListResponse)
def list_item_operators() -> OperatorListResponse:
    """List operators offered for conditions on list attribute items."""
    return OperatorListResponse(
        operators=[OperatorResponse.from_descriptor(op) for op in LIST_ITEM_OPERATORS],
        type=AttributeType.list_,
    )
