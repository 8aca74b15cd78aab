"""Bill entry form state.

The form is an immutable value; every edit goes through :func:`apply_change`
(or :func:`add_item` / :func:`remove_item`) and yields a new form.
"""

from __future__ import annotations

import datetime as dt
from decimal import Decimal
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field, model_validator

from billbook.constants import IST
from billbook.totals import compute_total


def _today() -> dt.date:
    return dt.datetime.now(IST).date()


class FormField(str, Enum):
    CUSTOMER_NAME = "customerName"
    DATE = "date"
    ITEM_NAME = "itemName"
    ITEM_QUANTITY = "itemQuantity"
    ITEM_PRICE = "itemPrice"


ITEM_FIELDS = {FormField.ITEM_NAME, FormField.ITEM_QUANTITY, FormField.ITEM_PRICE}

_FIELD_TYPES: dict[FormField, type] = {
    FormField.CUSTOMER_NAME: str,
    FormField.DATE: dt.date,
    FormField.ITEM_NAME: str,
    FormField.ITEM_QUANTITY: int,
    FormField.ITEM_PRICE: Decimal,
}


class FormItem(BaseModel):
    model_config = ConfigDict(frozen=True)

    name: str = ""
    quantity: int = 1
    price: Decimal = Decimal("0")


class BillForm(BaseModel):
    model_config = ConfigDict(frozen=True)

    customer_name: str = ""
    date: dt.date = Field(default_factory=_today)
    items: tuple[FormItem, ...] = (FormItem(),)

    @property
    def total(self) -> Decimal:
        return compute_total(self.items)


class FieldChange(BaseModel):
    """One edit to one field. ``index`` selects the item for item fields."""

    model_config = ConfigDict(frozen=True)

    field: FormField
    value: str | int | Decimal | dt.date
    index: int | None = None

    @model_validator(mode="after")
    def _check(self) -> FieldChange:
        expected = _FIELD_TYPES[self.field]
        if not isinstance(self.value, expected) or (expected is int and isinstance(self.value, bool)):
            raise ValueError(f"{self.field.value} expects {expected.__name__}, got {type(self.value).__name__}")
        if (self.field in ITEM_FIELDS) != (self.index is not None):
            raise ValueError(f"index is required for item fields only ({self.field.value})")
        return self


def apply_change(form: BillForm, change: FieldChange) -> BillForm:
    if change.field == FormField.CUSTOMER_NAME:
        return form.model_copy(update={"customer_name": change.value})
    if change.field == FormField.DATE:
        return form.model_copy(update={"date": change.value})

    index = change.index
    if index is None or not 0 <= index < len(form.items):
        raise IndexError(f"No item at index {index}")
    attr = {
        FormField.ITEM_NAME: "name",
        FormField.ITEM_QUANTITY: "quantity",
        FormField.ITEM_PRICE: "price",
    }[change.field]
    items = list(form.items)
    items[index] = items[index].model_copy(update={attr: change.value})
    return form.model_copy(update={"items": tuple(items)})


def add_item(form: BillForm) -> BillForm:
    return form.model_copy(update={"items": (*form.items, FormItem())})


def remove_item(form: BillForm, index: int) -> BillForm:
    """Drop one item; the last remaining item cannot be removed."""
    if not 0 <= index < len(form.items):
        raise IndexError(f"No item at index {index}")
    if len(form.items) <= 1:
        return form
    items = form.items[:index] + form.items[index + 1:]
    return form.model_copy(update={"items": items})


def form_errors(form: BillForm) -> dict[str, str]:
    """Interactive checks shown while filling the form. Advisory only."""
    errors: dict[str, str] = {}
    if not form.customer_name.strip():
        errors["customerName"] = "Customer name is required"
    if not form.items:
        errors["items"] = "At least one item is required"
    for i, item in enumerate(form.items):
        if not item.name.strip():
            errors[f"items[{i}].name"] = "Item name is required"
        if item.quantity < 1:
            errors[f"items[{i}].quantity"] = "Quantity must be at least 1"
        if item.price <= 0:
            errors[f"items[{i}].price"] = "Price must be greater than 0"
    return errors


def to_request(form: BillForm) -> dict:
    """Wire payload for ``newBill``."""
    return {
        "customerName": form.customer_name,
        "date": form.date.isoformat(),
        "totalAmount": str(form.total),
        "items": [
            {"name": item.name, "quantity": item.quantity, "price": str(item.price)}
            for item in form.items
        ],
    }
