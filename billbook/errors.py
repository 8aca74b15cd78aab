from __future__ import annotations


class BillbookError(Exception):
    """Base class for errors surfaced to callers of the bill operations."""


class ValidationError(BillbookError):
    """One or more invalid input fields, keyed by path (``items[2].price``)."""

    def __init__(self, fields: dict[str, str]) -> None:
        self.fields = fields
        summary = "; ".join(f"{path}: {message}" for path, message in fields.items())
        super().__init__(f"Invalid input: {summary}")


class NotFoundError(BillbookError):
    def __init__(self, bill_id: int) -> None:
        self.bill_id = bill_id
        super().__init__(f"Bill not found (id={bill_id})")


class StoreError(BillbookError):
    """The underlying store failed: connectivity, constraint violation, etc."""
