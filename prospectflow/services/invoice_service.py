"""
Invoice PDF generation using ReportLab.
"""
import html
import io
import logging
from dataclasses import dataclass

from reportlab.lib import colors
from reportlab.lib.enums import TA_LEFT, TA_RIGHT
from reportlab.lib.pagesizes import A4
from reportlab.lib.styles import getSampleStyleSheet, ParagraphStyle
from reportlab.lib.units import mm
from reportlab.platypus import SimpleDocTemplate, Paragraph, Spacer, Table, TableStyle

from prospectflow.core.config import (
    INVOICE_COMPANY_NAME,
    INVOICE_COMPANY_ADDRESS,
    INVOICE_COMPANY_CONTACT,
)
from prospectflow.db.models.payment import Payment
from prospectflow.db.models.user import User

logger = logging.getLogger(__name__)

PRIMARY_COLOR = colors.Color(63 / 255, 81 / 255, 181 / 255)


@dataclass
class InvoiceData:
    invoice_number: str
    invoice_date: str
    payment_id: str
    user_name: str
    user_email: str
    plan_name: str
    plan_price: float
    currency: str = "INR"
    company_name: str = INVOICE_COMPANY_NAME
    company_address: str = INVOICE_COMPANY_ADDRESS
    company_contact: str = INVOICE_COMPANY_CONTACT


def build_invoice_data(payment: Payment, user: User) -> InvoiceData:
    """Invoice fields for a paid payment."""
    issued = payment.paid_at or payment.created_at
    return InvoiceData(
        invoice_number=payment.invoice_number,
        invoice_date=issued.strftime("%b %d, %Y") if issued else "",
        payment_id=payment.stripe_payment_intent_id or payment.stripe_session_id,
        user_name=user.full_name or user.email,
        user_email=user.email,
        plan_name=payment.plan_name,
        plan_price=payment.amount / 100,
        currency=payment.currency,
    )


def invoice_filename(invoice_number: str) -> str:
    return f"Invoice-{invoice_number}.pdf"


def generate_invoice_pdf(data: InvoiceData) -> bytes:
    """Render a single-item invoice and return the PDF bytes."""
    buffer = io.BytesIO()
    doc = SimpleDocTemplate(
        buffer,
        pagesize=A4,
        topMargin=15 * mm,
        bottomMargin=15 * mm,
        leftMargin=15 * mm,
        rightMargin=15 * mm,
        title=f"Invoice {data.invoice_number}",
    )

    styles = getSampleStyleSheet()
    company_style = ParagraphStyle("Company", parent=styles["Heading1"], fontSize=16, leading=20, spaceAfter=2)
    small_style = ParagraphStyle("Small", parent=styles["Normal"], fontSize=8, leading=10)
    title_style = ParagraphStyle("Title", parent=company_style, alignment=TA_RIGHT)
    right_style = ParagraphStyle("Right", parent=styles["Normal"], fontSize=10, leading=13, alignment=TA_RIGHT)
    normal_style = ParagraphStyle("Body", parent=styles["Normal"], fontSize=10, leading=13, alignment=TA_LEFT)
    footer_style = ParagraphStyle("Footer", parent=small_style, fontName="Helvetica-Oblique")

    def esc(value) -> str:
        return html.escape(str(value))

    # Header: issuer on the left, invoice details on the right
    issuer = [
        Paragraph(esc(data.company_name), company_style),
        Paragraph(esc(data.company_address), small_style),
        Paragraph(esc(data.company_contact), small_style),
    ]
    details = [
        Paragraph("INVOICE", title_style),
        Paragraph(f"Invoice #: {esc(data.invoice_number)}", right_style),
        Paragraph(f"Date: {esc(data.invoice_date)}", right_style),
        Paragraph(f"Payment ID: {esc(data.payment_id)}", right_style),
    ]
    header = Table([[issuer, details]], colWidths=[95 * mm, 85 * mm])
    header.setStyle(TableStyle([("VALIGN", (0, 0), (-1, -1), "TOP")]))

    story = [
        header,
        Spacer(1, 10 * mm),
        Paragraph("<b>Bill To:</b>", normal_style),
        Paragraph(esc(data.user_name), normal_style),
        Paragraph(esc(data.user_email), normal_style),
        Spacer(1, 8 * mm),
    ]

    price = f"{data.plan_price:.2f}"
    items = Table(
        [
            ["Description", "Quantity", "Unit Price", f"Amount ({data.currency})"],
            [data.plan_name, "1", price, price],
        ],
        colWidths=[85 * mm, 25 * mm, 35 * mm, 35 * mm],
    )
    items.setStyle(TableStyle([
        ("BACKGROUND", (0, 0), (-1, 0), PRIMARY_COLOR),
        ("TEXTCOLOR", (0, 0), (-1, 0), colors.white),
        ("FONTNAME", (0, 0), (-1, 0), "Helvetica-Bold"),
        ("FONTSIZE", (0, 0), (-1, -1), 9),
        ("ROWBACKGROUNDS", (0, 1), (-1, -1), [colors.whitesmoke]),
        ("ALIGN", (1, 0), (1, -1), "CENTER"),
        ("ALIGN", (2, 0), (3, -1), "RIGHT"),
        ("TOPPADDING", (0, 0), (-1, -1), 6),
        ("BOTTOMPADDING", (0, 0), (-1, -1), 6),
    ]))
    story.extend([items, Spacer(1, 6 * mm)])

    totals = Table(
        [
            ["Subtotal:", price],
            ["Total Amount:", f"{data.currency} {price}"],
        ],
        colWidths=[40 * mm, 35 * mm],
        hAlign="RIGHT",
    )
    totals.setStyle(TableStyle([
        ("FONTNAME", (0, 0), (-1, -1), "Helvetica-Bold"),
        ("FONTSIZE", (0, 0), (-1, -1), 10),
        ("ALIGN", (1, 0), (1, -1), "RIGHT"),
    ]))
    story.extend([
        totals,
        Spacer(1, 20 * mm),
        Paragraph("Thank you for your business!", footer_style),
        Paragraph("This is a computer-generated invoice and does not require a physical signature.", footer_style),
    ])

    doc.build(story)
    pdf = buffer.getvalue()
    logger.info(f"Generated invoice {data.invoice_number} ({len(pdf)} bytes)")
    return pdf
