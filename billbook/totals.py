from __future__ import annotations

from collections.abc import Iterable, Mapping
from decimal import Decimal
from typing import Any


def _field(item: Any, name: str) -> Any:
    if isinstance(item, Mapping):
        return item.get(name)
    return getattr(item, name, None)


def compute_total(items: Iterable[Any]) -> Decimal:
    """Sum of price x quantity over ``items``.

    A missing quantity (``None``) counts as 1; an explicit 0 stays 0.
    Items may be models or plain mappings.
    """
    total = Decimal("0")
    for item in items:
        price = Decimal(str(_field(item, "price") or 0))
        quantity = _field(item, "quantity")
        if quantity is None:
            quantity = 1
        total += price * quantity
    return total
