import logging
import os
from pathlib import Path
from typing import Callable, List, Optional

from reportlab.lib.pagesizes import A4
from reportlab.pdfgen import canvas
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlmodel import Session, select

from app.config import settings
from app.constants.order_status import InvoiceStatus, PaymentStatus
from app.errors import InvoiceGenerationFailed
from app.models.invoice import Invoice
from app.models.order import Order
from app.models.order_item import OrderItem
from app.models.payment import Payment
from app.services.numbering import generate_invoice_number
from app.services.order_event_service import log_order_event
from app.services.pricing import format_money

logger = logging.getLogger(__name__)

MAX_NUMBER_ATTEMPTS = 3


def create_invoice(
    session: Session,
    order: Order,
    number_factory: Callable[[], str] = generate_invoice_number,
    max_attempts: int = MAX_NUMBER_ATTEMPTS,
) -> Invoice:
    """
    Snapshot the committed order totals into an invoice.

    Idempotent per order. Invoice numbers are regenerated on a uniqueness
    collision, at most `max_attempts` times.
    """
    existing = get_invoice_for_order(session, order.id)
    if existing:
        return existing

    payment = session.exec(
        select(Payment).where(Payment.order_id == order.id)
    ).first()
    status = (
        InvoiceStatus.paid
        if payment and payment.status == PaymentStatus.completed
        else InvoiceStatus.issued
    )

    for attempt in range(1, max_attempts + 1):
        invoice = Invoice(
            order_id=order.id,
            user_id=order.user_id,
            invoice_number=number_factory(),
            subtotal=order.subtotal,
            tax_amount=order.tax_amount,
            shipping_cost=order.shipping_cost,
            total_amount=order.total_amount,
            status=status,
        )

        invoice_number = invoice.invoice_number
        try:
            session.add(invoice)
            session.flush()
            log_order_event(
                session=session,
                order_id=order.id,
                event_type="invoice_generated",
                label=f"Invoice {invoice.invoice_number} generated",
            )
            session.commit()
        except IntegrityError as e:
            session.rollback()
            # the order may have been invoiced concurrently
            existing = get_invoice_for_order(session, order.id)
            if existing:
                return existing
            if not invoice_number_taken(session, invoice_number):
                logger.error(f"Invoice for order {order.id} violated a constraint: {e.orig}")
                raise InvoiceGenerationFailed(order.id, str(e.orig)) from e
            logger.warning(
                f"Invoice number collision for order {order.id} "
                f"(attempt {attempt}/{max_attempts}): {e}"
            )
            continue
        except SQLAlchemyError as e:
            session.rollback()
            logger.error(f"Invoice for order {order.id} failed: {e}")
            raise InvoiceGenerationFailed(order.id, str(e)) from e

        session.refresh(invoice)
        return invoice

    raise InvoiceGenerationFailed(order.id, f"no unique invoice number after {max_attempts} attempts")


def get_invoice_for_order(session: Session, order_id: int) -> Optional[Invoice]:
    return session.exec(
        select(Invoice).where(Invoice.order_id == order_id)
    ).first()


def invoice_number_taken(session: Session, invoice_number: str) -> bool:
    return session.exec(
        select(Invoice.id).where(Invoice.invoice_number == invoice_number)
    ).first() is not None


def invoice_pdf_path(invoice: Invoice) -> Path:
    return Path(settings.invoice_dir) / f"{invoice.invoice_number}.pdf"


def invoice_exists(invoice: Invoice) -> bool:
    """Check if invoice PDF exists"""
    return invoice_pdf_path(invoice).exists()


def render_invoice_pdf(invoice: Invoice, order: Order, items: List[OrderItem], file_path: Path) -> Path:
    os.makedirs(os.path.dirname(file_path) or ".", exist_ok=True)

    c = canvas.Canvas(str(file_path), pagesize=A4)
    c.setFont("Helvetica-Bold", 16)
    c.drawString(72, 790, f"Invoice {invoice.invoice_number}")

    c.setFont("Helvetica", 10)
    c.drawString(72, 770, f"Order: {order.order_number}")
    c.drawString(72, 756, f"Date: {invoice.created_at:%Y-%m-%d}")
    c.drawString(72, 742, f"Ship to: {order.shipping_address}, {order.shipping_city}")

    y = 710
    for item in items:
        c.drawString(72, y, f"{item.quantity} x {item.product_name}")
        c.drawRightString(520, y, format_money(item.line_total))
        y -= 16
        if y < 120:
            c.showPage()
            c.setFont("Helvetica", 10)
            y = 790

    y -= 10
    for label, amount in (
        ("Subtotal", invoice.subtotal),
        ("Tax", invoice.tax_amount),
        ("Shipping", invoice.shipping_cost),
        ("Total", invoice.total_amount),
    ):
        c.drawString(380, y, label)
        c.drawRightString(520, y, format_money(amount))
        y -= 16

    c.save()
    return file_path


def load_invoice_pdf(session: Session, invoice: Invoice, order: Order) -> Path:
    """Path to the invoice PDF, rendering it on first request."""
    file_path = invoice_pdf_path(invoice)

    if not invoice_exists(invoice):
        items = session.exec(
            select(OrderItem).where(OrderItem.order_id == order.id)
        ).all()
        render_invoice_pdf(invoice, order, items, file_path)

    return file_path
