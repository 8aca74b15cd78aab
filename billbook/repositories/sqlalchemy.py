from __future__ import annotations

import datetime as dt
import logging
from collections.abc import Iterator
from contextlib import contextmanager
from decimal import ROUND_HALF_UP, Decimal

from sqlalchemy import Connection, text
from sqlalchemy.engine import RowMapping
from sqlalchemy.exc import SQLAlchemyError

from billbook.constants import IST
from billbook.errors import NotFoundError, StoreError
from billbook.models.bill import Bill, Item
from billbook.repositories.base import BillRepository

logger = logging.getLogger(__name__)


def _now() -> dt.datetime:
    return dt.datetime.now(IST)


def _to_paise(amount: Decimal) -> int:
    return int((amount * 100).quantize(Decimal("1"), rounding=ROUND_HALF_UP))


def _from_paise(paise: int) -> Decimal:
    return Decimal(paise).scaleb(-2)


def _escape_like(term: str) -> str:
    return term.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")


class SQLAlchemyBillRepository(BillRepository):
    def __init__(self, conn: Connection) -> None:
        self.conn = conn

    @contextmanager
    def _unit_of_work(self, action: str) -> Iterator[None]:
        """Roll back everything done inside the block if any step fails.

        Driver and SQLAlchemy failures surface as ``StoreError``; anything else
        (``NotFoundError`` included) is re-raised after the rollback.
        """
        try:
            yield
        except (SQLAlchemyError, OverflowError) as exc:
            logger.exception("Store failure while trying to %s, rolling back", action)
            self.conn.rollback()
            raise StoreError(f"Failed to {action}") from exc
        except Exception:
            self.conn.rollback()
            raise

    def _insert_items(self, bill_id: int, items: list[Item]) -> None:
        for item in items:
            self.conn.execute(
                text("INSERT INTO items (bill_id, name, quantity, price) VALUES (:bill_id, :name, :quantity, :price)"),
                {
                    "bill_id": bill_id,
                    "name": item.name,
                    "quantity": item.quantity,
                    "price": _to_paise(item.price),
                },
            )

    def _stored_total(self, bill_id: int) -> int:
        total = self.conn.execute(
            text("SELECT COALESCE(SUM(price * quantity), 0) FROM items WHERE bill_id = :bill_id"),
            {"bill_id": bill_id},
        ).scalar_one()
        return int(total)

    def _exists(self, bill_id: int) -> bool:
        row = self.conn.execute(text("SELECT id FROM bills WHERE id = :id"), {"id": bill_id}).fetchone()
        return row is not None

    def create(self, bill: Bill) -> Bill:
        now = _now()
        bill_date = bill.date or now.date()
        with self._unit_of_work("create bill"):
            result = self.conn.execute(
                text(
                    "INSERT INTO bills (customer_name, date, total_amount, created_at, updated_at) "
                    "VALUES (:customer_name, :date, :total_amount, :created_at, :updated_at)"
                ),
                {
                    "customer_name": bill.customer_name,
                    "date": bill_date.isoformat(),
                    "total_amount": _to_paise(bill.total_amount),
                    "created_at": now,
                    "updated_at": now,
                },
            )
            bill_id = result.lastrowid
            self._insert_items(bill_id, bill.items)
            self.conn.commit()
        result = self.get_by_id(bill_id)
        if result is None:
            raise StoreError(f"Failed to retrieve bill after create (id={bill_id})")
        return result

    @staticmethod
    def _build_bill(row: RowMapping, item_rows: list[RowMapping]) -> Bill:
        return Bill(
            id=row["id"],
            customer_name=row["customer_name"],
            date=row["date"],
            total_amount=_from_paise(row["total_amount"]),
            items=[
                Item(
                    id=item_row["id"],
                    bill_id=item_row["bill_id"],
                    name=item_row["name"],
                    quantity=item_row["quantity"],
                    price=_from_paise(item_row["price"]),
                )
                for item_row in item_rows
            ],
            created_at=row["created_at"],
            updated_at=row["updated_at"],
        )

    def get_by_id(self, bill_id: int) -> Bill | None:
        with self._unit_of_work("fetch bill"):
            row = (
                self.conn.execute(
                    text("SELECT * FROM bills WHERE id = :id"),
                    {"id": bill_id},
                )
                .mappings()
                .fetchone()
            )
            if row is None:
                return None
            items = (
                self.conn.execute(
                    text("SELECT * FROM items WHERE bill_id = :bill_id ORDER BY id"),
                    {"bill_id": bill_id},
                )
                .mappings()
                .fetchall()
            )
        return self._build_bill(row, list(items))

    def list_all(self, search: str | None = None) -> list[Bill]:
        query = "SELECT * FROM bills"
        params: dict[str, str] = {}
        if search:
            query += " WHERE LOWER(customer_name) LIKE :pattern ESCAPE '\\'"
            params["pattern"] = f"%{_escape_like(search.lower())}%"
        query += " ORDER BY date DESC, id DESC"
        with self._unit_of_work("list bills"):
            rows = self.conn.execute(text(query), params).mappings().fetchall()
        return [self._build_bill(row, []) for row in rows]

    def update(
        self,
        bill_id: int,
        *,
        customer_name: str | None = None,
        date: dt.date | None = None,
        items: list[Item] | None = None,
    ) -> Bill:
        with self._unit_of_work("update bill"):
            if not self._exists(bill_id):
                raise NotFoundError(bill_id)
            values: dict[str, object] = {}
            if customer_name is not None:
                values["customer_name"] = customer_name
            if date is not None:
                values["date"] = date.isoformat()
            # Items are appended to the existing ones, never replaced here.
            if items:
                self._insert_items(bill_id, items)
            values["total_amount"] = self._stored_total(bill_id)
            values["updated_at"] = _now()
            assignments = ", ".join(f"{column} = :{column}" for column in values)
            self.conn.execute(text(f"UPDATE bills SET {assignments} WHERE id = :id"), {**values, "id": bill_id})
            self.conn.commit()
        result = self.get_by_id(bill_id)
        if result is None:
            raise StoreError(f"Failed to retrieve bill after update (id={bill_id})")
        return result

    def replace_items(self, bill_id: int, items: list[Item]) -> Bill:
        with self._unit_of_work("replace bill items"):
            if not self._exists(bill_id):
                raise NotFoundError(bill_id)
            self.conn.execute(text("DELETE FROM items WHERE bill_id = :bill_id"), {"bill_id": bill_id})
            self._insert_items(bill_id, items)
            self.conn.execute(
                text("UPDATE bills SET total_amount = :total_amount, updated_at = :updated_at WHERE id = :id"),
                {"total_amount": self._stored_total(bill_id), "updated_at": _now(), "id": bill_id},
            )
            self.conn.commit()
        result = self.get_by_id(bill_id)
        if result is None:
            raise StoreError(f"Failed to retrieve bill after replacing items (id={bill_id})")
        return result

    def delete(self, bill_id: int) -> None:
        with self._unit_of_work("delete bill"):
            result = self.conn.execute(text("DELETE FROM bills WHERE id = :id"), {"id": bill_id})
            if result.rowcount == 0:
                raise NotFoundError(bill_id)
            self.conn.commit()
