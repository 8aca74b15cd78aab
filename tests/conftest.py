"""Root conftest: in-memory SQLite engine and fixtures for the bill schema."""

from __future__ import annotations

import datetime as dt
from decimal import Decimal

import pytest
from sqlalchemy import Connection, create_engine, event, text
from sqlalchemy.engine import Engine

from billbook.models.bill import Bill, Item

# Matches Alembic head: 3f1c2b7a9d10 (create bills and items)
SCHEMA_DDL = """
CREATE TABLE bills (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    customer_name TEXT NOT NULL,
    date DATE NOT NULL,
    total_amount BIGINT NOT NULL DEFAULT 0,
    created_at DATETIME NOT NULL,
    updated_at DATETIME NOT NULL
);

CREATE TABLE items (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    bill_id INTEGER NOT NULL REFERENCES bills(id) ON DELETE CASCADE,
    name TEXT NOT NULL,
    quantity INTEGER NOT NULL DEFAULT 1,
    price BIGINT NOT NULL
);
"""


def _set_pragma(dbapi_connection, connection_record):
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys = ON")
    cursor.close()


def create_schema(conn: Connection) -> None:
    for statement in SCHEMA_DDL.strip().split(";"):
        stmt = statement.strip()
        if stmt:
            conn.execute(text(stmt))
    conn.commit()


@pytest.fixture()
def db_engine() -> Engine:
    engine = create_engine("sqlite:///:memory:")
    event.listen(engine, "connect", _set_pragma)
    return engine


@pytest.fixture()
def db_connection(db_engine: Engine) -> Connection:
    conn = db_engine.connect()
    create_schema(conn)
    yield conn
    conn.close()


def _sample_bill(**overrides) -> Bill:
    defaults = dict(
        customer_name="Asha Traders",
        date=dt.date(2025, 3, 10),
        total_amount=Decimal("350.00"),
        items=[
            Item(name="A4 printing", quantity=100, price=Decimal("2.00")),
            Item(name="Spiral binding", quantity=3, price=Decimal("50.00")),
        ],
    )
    defaults.update(overrides)
    return Bill(**defaults)


def _new_bill_payload(**overrides) -> dict:
    defaults = {
        "customerName": "Asha Traders",
        "date": "2025-03-10",
        "totalAmount": 25,
        "items": [
            {"name": "Lamination", "price": 10, "quantity": 2},
            {"name": "Photocopy", "price": 5, "quantity": 1},
        ],
    }
    defaults.update(overrides)
    return defaults


@pytest.fixture()
def sample_bill():
    return _sample_bill


@pytest.fixture()
def new_bill_payload():
    return _new_bill_payload
