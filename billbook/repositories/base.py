from __future__ import annotations

import datetime as dt
from abc import ABC, abstractmethod

from billbook.models.bill import Bill, Item


class BillRepository(ABC):
    @abstractmethod
    def create(self, bill: Bill) -> Bill: ...

    @abstractmethod
    def get_by_id(self, bill_id: int) -> Bill | None: ...

    @abstractmethod
    def list_all(self, search: str | None = None) -> list[Bill]:
        """Bills without items, newest first; ``search`` filters on a case-insensitive
        substring of the customer name."""

    @abstractmethod
    def update(
        self,
        bill_id: int,
        *,
        customer_name: str | None = None,
        date: dt.date | None = None,
        items: list[Item] | None = None,
    ) -> Bill:
        """Update present scalar fields and append ``items`` to the existing ones."""

    @abstractmethod
    def replace_items(self, bill_id: int, items: list[Item]) -> Bill: ...

    @abstractmethod
    def delete(self, bill_id: int) -> None: ...
