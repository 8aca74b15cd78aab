from __future__ import annotations

import logging
from io import BytesIO

from fpdf import FPDF

from billbook.models import format_inr
from billbook.models.bill import Bill
from billbook.totals import compute_total

logger = logging.getLogger(__name__)

COLORS = {
    "primary": (30, 41, 59),
    "primary_light": (241, 245, 249),
    "accent": (37, 99, 235),
    "text_color": (15, 23, 42),
    "text_contrast": (255, 255, 255),
    "muted_text": (100, 116, 139),
    "row_alt": (248, 250, 252),
    "border_color": (203, 213, 225),
}

# Rows drawn even for short bills so the printed table keeps its height.
MIN_TABLE_ROWS = 6

FONT = "Helvetica"


def _latin1(text: str) -> str:
    """Core PDF fonts only cover latin-1."""
    return text.encode("latin-1", "replace").decode("latin-1")


class InvoicePDF:
    def generate(
        self,
        bill: Bill,
        *,
        invoice_number: str,
        business_name: str,
        upi_qrcode_png: bytes | None = None,
        upi_vpa: str = "",
    ) -> bytes:
        pdf = FPDF()
        pdf.add_page()
        pdf.set_auto_page_break(auto=True, margin=20)

        page_w = pdf.w - pdf.l_margin - pdf.r_margin
        total = compute_total(bill.items)

        self._draw_header(pdf, page_w, business_name)
        self._draw_info(pdf, page_w, bill, invoice_number)
        self._draw_table(pdf, page_w, bill)
        self._draw_total(pdf, page_w, format_inr(total))

        if upi_qrcode_png:
            self._draw_payment(pdf, page_w, upi_qrcode_png, upi_vpa)

        self._draw_footer(pdf, page_w)

        output = bytes(pdf.output())
        logger.debug(
            "PDF generated: bill=%s invoice=%s items=%d upi=%s size=%d bytes",
            bill.id,
            invoice_number,
            len(bill.items),
            bool(upi_qrcode_png),
            len(output),
        )
        return output

    def _draw_header(self, pdf: FPDF, page_w: float, business_name: str) -> None:
        c = COLORS
        x = pdf.l_margin
        y = pdf.get_y()

        pdf.set_fill_color(*c["primary"])
        pdf.rect(x, y, page_w, 34, "F")

        pdf.set_y(y + 8)
        pdf.set_text_color(*c["text_contrast"])
        pdf.set_font(FONT, "B", 26)
        pdf.cell(0, 12, "INVOICE", align="C", new_x="LMARGIN", new_y="NEXT")
        pdf.set_font(FONT, "", 10)
        pdf.cell(0, 7, _latin1(business_name), align="C", new_x="LMARGIN", new_y="NEXT")

        pdf.set_y(y + 34 + 10)

    def _draw_info_card(self, pdf: FPDF, x: float, y: float, w: float, label: str, value: str) -> None:
        c = COLORS
        h = 22
        pdf.set_fill_color(*c["primary_light"])
        pdf.rect(x, y, w, h, "F")
        pdf.set_fill_color(*c["accent"])
        pdf.rect(x, y, 2.5, h, "F")

        pdf.set_xy(x + 8, y + 3)
        pdf.set_font(FONT, "B", 7)
        pdf.set_text_color(*c["muted_text"])
        pdf.cell(w - 12, 5, label, new_x="LEFT", new_y="NEXT")
        pdf.set_x(x + 8)
        pdf.set_font(FONT, "B", 12)
        pdf.set_text_color(*c["text_color"])
        pdf.cell(w - 12, 9, _latin1(value))

    def _draw_info(self, pdf: FPDF, page_w: float, bill: Bill, invoice_number: str) -> None:
        x = pdf.l_margin
        y = pdf.get_y()
        card_w = page_w / 3 - 4
        issue_date = bill.date.strftime("%B %d, %Y") if bill.date else ""

        self._draw_info_card(pdf, x, y, card_w, "BILL TO", bill.customer_name)
        self._draw_info_card(pdf, x + card_w + 6, y, card_w, "INVOICE NO.", invoice_number)
        self._draw_info_card(pdf, x + 2 * (card_w + 6), y, card_w, "ISSUE DATE", issue_date)

        pdf.set_y(y + 22 + 12)

    def _draw_table(self, pdf: FPDF, page_w: float, bill: Bill) -> None:
        c = COLORS
        col_name = page_w * 0.46
        col_qty = page_w * 0.12
        col_price = page_w * 0.21
        col_amount = page_w * 0.21
        line_h = 10

        pdf.set_fill_color(*c["primary"])
        pdf.set_text_color(*c["text_contrast"])
        pdf.set_font(FONT, "B", 9)
        pdf.cell(col_name, line_h, "  Item", fill=True)
        pdf.cell(col_qty, line_h, "Qty", fill=True, align="C")
        pdf.cell(col_price, line_h, "Unit price", fill=True, align="R")
        pdf.cell(col_amount, line_h, "Amount  ", fill=True, align="R", new_x="LMARGIN", new_y="NEXT")

        pdf.set_text_color(*c["text_color"])
        pdf.set_font(FONT, "", 10)

        rows = max(len(bill.items), MIN_TABLE_ROWS)
        for i in range(rows):
            pdf.set_fill_color(*(c["row_alt"] if i % 2 == 0 else c["text_contrast"]))
            if i < len(bill.items):
                item = bill.items[i]
                name = item.name or f"Item {i + 1}"
                cells = (f"  {name}", str(item.quantity), format_inr(item.price), f"{format_inr(item.line_total)}  ")
            else:
                cells = ("", "", "", "")
            pdf.cell(col_name, line_h, _latin1(cells[0]), fill=True)
            pdf.cell(col_qty, line_h, cells[1], fill=True, align="C")
            pdf.cell(col_price, line_h, cells[2], fill=True, align="R")
            pdf.cell(col_amount, line_h, cells[3], fill=True, align="R", new_x="LMARGIN", new_y="NEXT")

        pdf.set_draw_color(*c["border_color"])
        pdf.set_line_width(0.3)
        y = pdf.get_y()
        pdf.line(pdf.l_margin, y, pdf.l_margin + page_w, y)

    def _draw_total(self, pdf: FPDF, page_w: float, total_label: str) -> None:
        c = COLORS
        pdf.ln(4)

        col_label = page_w * 0.72
        col_amount = page_w * 0.28

        pdf.set_fill_color(*c["accent"])
        pdf.set_text_color(*c["text_contrast"])
        pdf.set_font(FONT, "B", 11)
        pdf.cell(col_label, 12, "TOTAL  ", fill=True, align="R")
        pdf.set_font(FONT, "B", 13)
        pdf.cell(col_amount, 12, f"{total_label}  ", fill=True, align="R", new_x="LMARGIN", new_y="NEXT")

    def _draw_payment(self, pdf: FPDF, page_w: float, qrcode_png: bytes, upi_vpa: str) -> None:
        c = COLORS
        qr_size = 36
        pdf.ln(10)
        if pdf.get_y() + qr_size + 20 > pdf.h - 30:
            pdf.add_page()

        x = pdf.l_margin
        y = pdf.get_y()

        pdf.image(BytesIO(qrcode_png), x=x + page_w - qr_size, y=y, w=qr_size, h=qr_size)

        pdf.set_xy(x, y + 4)
        pdf.set_font(FONT, "B", 11)
        pdf.set_text_color(*c["primary"])
        pdf.cell(page_w - qr_size - 6, 7, "PAY WITH UPI", new_x="LMARGIN", new_y="NEXT")
        pdf.set_font(FONT, "", 9)
        pdf.set_text_color(*c["muted_text"])
        pdf.cell(page_w - qr_size - 6, 6, "Scan the QR code with any UPI app.", new_x="LMARGIN", new_y="NEXT")
        if upi_vpa:
            pdf.set_font(FONT, "B", 10)
            pdf.set_text_color(*c["text_color"])
            pdf.cell(page_w - qr_size - 6, 7, _latin1(upi_vpa), new_x="LMARGIN", new_y="NEXT")

        pdf.set_y(y + qr_size + 4)

    def _draw_footer(self, pdf: FPDF, page_w: float) -> None:
        c = COLORS
        pdf.set_y(-30)
        pdf.set_draw_color(*c["border_color"])
        pdf.set_line_width(0.3)
        y = pdf.get_y()
        pdf.line(pdf.l_margin, y, pdf.l_margin + page_w, y)
        pdf.ln(5)
        pdf.set_font(FONT, "", 7)
        pdf.set_text_color(*c["muted_text"])
        pdf.cell(0, 5, "Thank you for your business", align="C")
