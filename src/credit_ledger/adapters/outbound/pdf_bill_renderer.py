from __future__ import annotations

import io
from dataclasses import dataclass

from reportlab.lib.colors import HexColor
from reportlab.lib.pagesizes import A4
from reportlab.lib.units import mm
from reportlab.pdfgen import canvas
from returns.result import Failure, Result, Success

from credit_ledger.core.domain.model.errors import LedgerError, NotificationError
from credit_ledger.core.domain.model.money import Money
from credit_ledger.core.domain.model.order import Order
from credit_ledger.core.ports.outbound.notifications import BillRenderer

PAGE_WIDTH, PAGE_HEIGHT = A4
MARGIN = 20 * mm
ROW_HEIGHT = 7 * mm

INK = HexColor("#333333")
MUTED = HexColor("#777777")
HEADER_FILL = HexColor("#F2F2F2")
RULE = HexColor("#DDDDDD")

# right edges of the quantity / unit price / total columns
_COLS = (PAGE_WIDTH - MARGIN - 80 * mm, PAGE_WIDTH - MARGIN - 40 * mm, PAGE_WIDTH - MARGIN)


@dataclass(frozen=True)
class PdfBillRenderer(BillRenderer):
    """Draws an A4 invoice for an order with reportlab."""

    business_name: str = "DP Communication"

    def render_bill(self, order: Order) -> Result[bytes, LedgerError]:
        try:
            return Success(self._draw(order))
        except Exception as e:  # noqa: BLE001
            return Failure(NotificationError(message=f"bill rendering failed: {e}"))

    def _draw(self, order: Order) -> bytes:
        buf = io.BytesIO()
        c = canvas.Canvas(buf, pagesize=A4)
        c.setTitle(f"Invoice #{order.order_id.short()}")

        y = PAGE_HEIGHT - MARGIN
        c.setFillColor(INK)
        c.setFont("Helvetica-Bold", 20)
        c.drawCentredString(PAGE_WIDTH / 2, y, "Invoice")
        y -= 12 * mm

        c.setFont("Helvetica", 10)
        c.drawString(MARGIN, y, f"Order ID: #{order.order_id.short()}")
        c.drawRightString(PAGE_WIDTH - MARGIN, y, f"Customer: {order.customer.name}")
        y -= 5 * mm
        c.drawString(MARGIN, y, f"Date: {order.created_at.date().isoformat()}")
        c.drawRightString(PAGE_WIDTH - MARGIN, y, f"Email: {order.customer.email}")
        y -= 5 * mm
        c.drawRightString(PAGE_WIDTH - MARGIN, y, f"Phone: {order.customer.phone}")
        y -= 10 * mm

        if order.description:
            c.drawString(MARGIN, y, f"Description: {order.description}")
            y -= 10 * mm

        y = self._draw_header(c, y)
        for ln in order.lines:
            if y < MARGIN + 3 * ROW_HEIGHT:
                c.showPage()
                y = self._draw_header(c, PAGE_HEIGHT - MARGIN)
            c.setFont("Helvetica", 10)
            c.drawString(MARGIN + 2 * mm, y, ln.item_name)
            c.drawRightString(_COLS[0], y, str(ln.quantity))
            c.drawRightString(_COLS[1], y, _amount(ln.unit_price))
            c.drawRightString(_COLS[2] - 2 * mm, y, _amount(ln.subtotal()))
            y -= ROW_HEIGHT

        c.setStrokeColor(RULE)
        c.line(MARGIN, y + ROW_HEIGHT - 2 * mm, PAGE_WIDTH - MARGIN, y + ROW_HEIGHT - 2 * mm)
        c.setFont("Helvetica-Bold", 11)
        c.drawRightString(_COLS[1], y - 2 * mm, "Total Amount")
        c.drawRightString(_COLS[2] - 2 * mm, y - 2 * mm, order.total.format())

        c.setFillColor(MUTED)
        c.setFont("Helvetica", 8)
        c.drawCentredString(PAGE_WIDTH / 2, MARGIN, "Thank you for your business!")
        c.drawCentredString(PAGE_WIDTH / 2, MARGIN - 4 * mm, self.business_name)

        c.showPage()
        c.save()
        return buf.getvalue()

    @staticmethod
    def _draw_header(c: canvas.Canvas, y: float) -> float:
        c.setFillColor(HEADER_FILL)
        c.rect(MARGIN, y - 2 * mm, PAGE_WIDTH - 2 * MARGIN, ROW_HEIGHT, stroke=0, fill=1)
        c.setFillColor(INK)
        c.setFont("Helvetica-Bold", 10)
        c.drawString(MARGIN + 2 * mm, y, "Item")
        c.drawRightString(_COLS[0], y, "Quantity")
        c.drawRightString(_COLS[1], y, "Unit Price")
        c.drawRightString(_COLS[2] - 2 * mm, y, "Total")
        return y - ROW_HEIGHT


def _amount(m: Money) -> str:
    return f"{m.rounded_to_2_decimals():.2f}"
