from __future__ import annotations

import datetime as dt
from decimal import Decimal
from typing import Annotated

from pydantic import BaseModel, ConfigDict, PlainSerializer
from pydantic.alias_generators import to_camel

# Money leaves the process as a JSON number, stays a Decimal inside it.
Money = Annotated[Decimal, PlainSerializer(float, return_type=float, when_used="json")]


class WireModel(BaseModel):
    """Base for models exchanged with the presentation layer (camelCase on the wire)."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    def to_wire(self) -> dict:
        return self.model_dump(mode="json", by_alias=True)


class Item(WireModel):
    id: int | None = None
    bill_id: int | None = None
    name: str
    quantity: int = 1
    price: Money  # unit price

    @property
    def line_total(self) -> Decimal:
        return self.price * self.quantity


class Bill(WireModel):
    id: int | None = None
    customer_name: str
    date: dt.date | None = None
    total_amount: Money = Decimal("0")
    items: list[Item] = []
    created_at: dt.datetime | None = None
    updated_at: dt.datetime | None = None
