from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any

from billbook.errors import NotFoundError
from billbook.models.bill import Bill, Item
from billbook.models.requests import (
    ItemInput,
    validate_bill_id,
    validate_new_bill,
    validate_replace_items,
    validate_update_bill,
)
from billbook.pdf.invoice import InvoicePDF
from billbook.repositories.base import BillRepository
from billbook.settings import settings
from billbook.totals import compute_total
from billbook.upi import build_upi_uri, generate_invoice_number, generate_upi_qrcode_png

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Invoice:
    number: str
    bill: Bill
    upi_uri: str
    pdf: bytes


def _to_items(items: list[ItemInput]) -> list[Item]:
    return [
        Item(
            name=item.name,
            quantity=item.quantity if item.quantity is not None else 1,
            price=item.price,
        )
        for item in items
    ]


class BillService:
    """The operations the presentation layer calls.

    Every write validates its input first, whatever the caller already checked.
    """

    def __init__(self, bill_repo: BillRepository) -> None:
        self.bill_repo = bill_repo
        self.pdf_generator = InvoicePDF()

    def new_bill(self, data: Any) -> Bill:
        request = validate_new_bill(data)
        computed = compute_total(request.items)
        if settings.trust_client_total:
            total = request.total_amount
        else:
            total = computed
            if request.total_amount != computed:
                logger.warning(
                    "Ignoring client total %s for %r, items add up to %s",
                    request.total_amount,
                    request.customer_name,
                    computed,
                )
        bill = self.bill_repo.create(
            Bill(
                customer_name=request.customer_name,
                date=request.date,
                total_amount=total,
                items=_to_items(request.items),
            )
        )
        logger.info(
            "Bill created: id=%s, customer=%s, items=%d, total=%s",
            bill.id,
            bill.customer_name,
            len(bill.items),
            bill.total_amount,
        )
        return bill

    def update_bill(self, data: Any) -> Bill:
        """Update scalar fields and append any supplied items; the total is recomputed."""
        request = validate_update_bill(data)
        bill = self.bill_repo.update(
            request.id,
            customer_name=request.customer_name,
            date=request.date,
            items=_to_items(request.items) if request.items is not None else None,
        )
        logger.info(
            "Bill updated: id=%s, appended=%d, total=%s",
            bill.id,
            len(request.items or []),
            bill.total_amount,
        )
        return bill

    def replace_bill_items(self, data: Any) -> Bill:
        request = validate_replace_items(data)
        bill = self.bill_repo.replace_items(request.id, _to_items(request.items))
        logger.info("Bill items replaced: id=%s, items=%d, total=%s", bill.id, len(bill.items), bill.total_amount)
        return bill

    def delete_bill(self, data: Any) -> None:
        request = validate_bill_id(data)
        self.bill_repo.delete(request.id)
        logger.info("Bill %s deleted", request.id)

    def get_all_bills(self, search: str | None = None) -> list[Bill]:
        term = (search or "").strip() or None
        result = self.bill_repo.list_all(search=term)
        logger.debug("Listed %d bills (search=%r)", len(result), term)
        return result

    def get_bill_by_id(self, data: Any) -> Bill | None:
        request = validate_bill_id(data)
        result = self.bill_repo.get_by_id(request.id)
        logger.debug("get_bill_by_id id=%s found=%s", request.id, result is not None)
        return result

    def build_invoice(self, bill_id: int) -> Invoice:
        """Render the printable invoice, with a UPI QR code when a payee is configured."""
        bill = self.bill_repo.get_by_id(bill_id)
        if bill is None:
            raise NotFoundError(bill_id)

        number = generate_invoice_number(settings.invoice_prefix)
        upi_uri = ""
        qrcode_png = None
        if settings.upi_vpa:
            upi_uri = build_upi_uri(
                vpa=settings.upi_vpa,
                payee_name=settings.upi_payee_name or settings.business_name,
                amount=compute_total(bill.items),
                invoice_number=number,
                currency=settings.currency,
            )
            qrcode_png = generate_upi_qrcode_png(upi_uri)
        else:
            logger.debug("No UPI payee configured, invoice %s has no QR code", number)

        pdf = self.pdf_generator.generate(
            bill,
            invoice_number=number,
            business_name=settings.business_name,
            upi_qrcode_png=qrcode_png,
            upi_vpa=settings.upi_vpa,
        )
        logger.info("Invoice %s rendered for bill %s", number, bill.id)
        return Invoice(number=number, bill=bill, upi_uri=upi_uri, pdf=pdf)
