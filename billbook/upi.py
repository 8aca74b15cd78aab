"""UPI payment deep links and their QR codes.

Builds the ``upi://pay`` URI a payment app scans from the printed invoice and
renders it as a PNG image.
"""

from __future__ import annotations

from datetime import datetime
from decimal import Decimal
from io import BytesIO
from urllib.parse import quote

import qrcode
from qrcode.image.pil import PilImage

from billbook.constants import IST, UPI_SCHEME


def generate_invoice_number(prefix: str = "INV", now: datetime | None = None) -> str:
    """Invoice number from the last 6 digits of the epoch timestamp in milliseconds."""
    now = now or datetime.now(IST)
    millis = str(int(now.timestamp() * 1000))
    return f"{prefix}-{millis[-6:]}"


def build_upi_uri(
    *,
    vpa: str,
    payee_name: str,
    amount: Decimal,
    invoice_number: str,
    currency: str = "INR",
) -> str:
    """Build a UPI payment URI.

    Args:
        vpa: Payee virtual payment address (``name@bank``).
        payee_name: Name shown to the payer.
        amount: Amount to pay, rendered with two decimals.
        invoice_number: Referenced in the transaction note.
        currency: ISO currency code.

    Returns:
        ``upi://pay?pa=...&pn=...&am=...&cu=...&tn=Invoice%20<number>``
    """
    params = [
        ("pa", quote(vpa, safe="@")),
        ("pn", quote(payee_name)),
        ("am", f"{amount:.2f}"),
        ("cu", quote(currency)),
        ("tn", quote(f"Invoice {invoice_number}")),
    ]
    return UPI_SCHEME + "?" + "&".join(f"{key}={value}" for key, value in params)


def generate_upi_qrcode_png(uri: str, *, box_size: int = 10, border: int = 2) -> bytes:
    """Render a UPI URI as PNG bytes ready to be embedded in a PDF."""
    qr = qrcode.QRCode(
        version=None,
        error_correction=qrcode.constants.ERROR_CORRECT_M,
        box_size=box_size,
        border=border,
    )
    qr.add_data(uri)
    qr.make(fit=True)

    img: PilImage = qr.make_image(fill_color="black", back_color="white")

    buf = BytesIO()
    img.save(buf, format="PNG")
    return buf.getvalue()
