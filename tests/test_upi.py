import re
from datetime import datetime
from decimal import Decimal

from freezegun import freeze_time

from billbook.constants import IST
from billbook.upi import build_upi_uri, generate_invoice_number, generate_upi_qrcode_png


class TestInvoiceNumber:
    def test_uses_last_six_digits_of_millis(self):
        now = datetime.fromtimestamp(1741589123, tz=IST)
        assert generate_invoice_number("INV", now) == "INV-123000"

    def test_custom_prefix(self):
        now = datetime.fromtimestamp(1741589123, tz=IST)
        assert generate_invoice_number("BB", now) == "BB-123000"

    @freeze_time("2025-03-10 06:45:23")
    def test_defaults_to_now(self):
        assert generate_invoice_number() == "INV-123000"

    def test_shape(self):
        assert re.fullmatch(r"INV-\d{6}", generate_invoice_number())


class TestBuildUpiUri:
    def test_layout(self):
        uri = build_upi_uri(
            vpa="shop@okbank",
            payee_name="Vishnu Printers",
            amount=Decimal("25"),
            invoice_number="INV-123456",
        )
        assert uri == "upi://pay?pa=shop@okbank&pn=Vishnu%20Printers&am=25.00&cu=INR&tn=Invoice%20INV-123456"

    def test_amount_rounded_to_paise(self):
        uri = build_upi_uri(vpa="a@b", payee_name="A", amount=Decimal("1234.5"), invoice_number="INV-1")
        assert "&am=1234.50&" in uri

    def test_reserved_characters_escaped(self):
        uri = build_upi_uri(vpa="a@b", payee_name="Sharma & Sons", amount=Decimal("1"), invoice_number="INV-1")
        assert "pn=Sharma%20%26%20Sons" in uri

    def test_currency(self):
        uri = build_upi_uri(vpa="a@b", payee_name="A", amount=Decimal("1"), invoice_number="INV-1", currency="USD")
        assert "&cu=USD&" in uri


class TestQrCode:
    def test_png_bytes(self):
        png = generate_upi_qrcode_png("upi://pay?pa=shop@okbank&am=25.00")
        assert png[:8] == b"\x89PNG\r\n\x1a\n"

    def test_box_size_changes_image(self):
        uri = "upi://pay?pa=shop@okbank&am=25.00"
        assert len(generate_upi_qrcode_png(uri, box_size=4)) != len(generate_upi_qrcode_png(uri, box_size=12))
