"""Input schemas checked before anything reaches the store.

Every violation is collected and reported at once, keyed by the wire path of
the offending field (``customerName``, ``items[2].price``).
"""

from __future__ import annotations

import datetime as dt
from decimal import Decimal
from typing import Annotated, Any

import pydantic
from pydantic import Field, StringConstraints

from billbook.errors import ValidationError
from billbook.models.bill import Money, WireModel

# Amounts are stored as BIGINT paise; these caps keep every price x quantity
# product inside that column.
MAX_AMOUNT = Decimal("10000000000")
MAX_QUANTITY = 1_000_000
MAX_ID = 2**63 - 1

NonEmptyText = Annotated[str, StringConstraints(strip_whitespace=True, min_length=1)]
NonNegativeMoney = Annotated[Money, Field(ge=0, le=MAX_AMOUNT, decimal_places=2)]
BillId = Annotated[int, Field(gt=0, le=MAX_ID)]


class ItemInput(WireModel):
    name: NonEmptyText
    price: NonNegativeMoney
    quantity: int | None = Field(default=None, gt=0, le=MAX_QUANTITY)


class NewBillRequest(WireModel):
    customer_name: NonEmptyText
    date: dt.date
    total_amount: NonNegativeMoney
    items: list[ItemInput]


class UpdateBillRequest(WireModel):
    id: BillId
    customer_name: NonEmptyText | None = None
    date: dt.date | None = None
    # Required on the wire even though the stored total is recomputed.
    total_amount: NonNegativeMoney
    items: list[ItemInput] | None = None


class ReplaceItemsRequest(WireModel):
    id: BillId
    items: list[ItemInput]


class BillIdRequest(WireModel):
    id: BillId


def _format_path(loc: tuple[str | int, ...]) -> str:
    path = ""
    for part in loc:
        if isinstance(part, int):
            path += f"[{part}]"
        elif path:
            path += f".{part}"
        else:
            path = part
    return path or "input"


def _validate(model: type[WireModel], data: Any) -> Any:
    if isinstance(data, model):
        return data
    try:
        return model.model_validate(data)
    except pydantic.ValidationError as exc:
        fields: dict[str, str] = {}
        for error in exc.errors():
            fields.setdefault(_format_path(error["loc"]), error["msg"])
        raise ValidationError(fields) from exc


def validate_new_bill(data: Any) -> NewBillRequest:
    return _validate(NewBillRequest, data)


def validate_update_bill(data: Any) -> UpdateBillRequest:
    return _validate(UpdateBillRequest, data)


def validate_replace_items(data: Any) -> ReplaceItemsRequest:
    return _validate(ReplaceItemsRequest, data)


def validate_bill_id(data: Any) -> BillIdRequest:
    return _validate(BillIdRequest, data)
