"""
Quote PDF rendering.

build_quote_document() collects everything the printed quote shows;
render_quote_pdf() lays it out with reportlab and returns the PDF bytes.
"""

import io
import logging
from datetime import timedelta
from typing import Dict, Any
from xml.sax.saxutils import escape

from reportlab.lib import colors
from reportlab.lib.pagesizes import A4
from reportlab.lib.styles import getSampleStyleSheet, ParagraphStyle
from reportlab.lib.units import inch
from reportlab.platypus import SimpleDocTemplate, Paragraph, Spacer, Table, TableStyle
from sqlalchemy.orm import Session

from database.models import Quote, QuoteTermsMaster
from services.errors import NotFoundError
from services.quote_versioning import quote_totals
from services.settings import get_setting

logger = logging.getLogger(__name__)

BRAND_COLOR = '#1f4e79'


def _format_date(value):
    return value.strftime('%d %B %Y') if value else ''


def _terms_for(session: Session, quote: Quote) -> Dict[str, str]:
    if quote.terms_snapshot:
        return {'title': quote.terms_snapshot.title, 'body': quote.terms_snapshot.body}

    terms = (
        session.query(QuoteTermsMaster)
        .filter(QuoteTermsMaster.is_active.is_(True))
        .order_by(QuoteTermsMaster.effective_from.desc())
        .first()
    )
    if terms:
        return {'title': terms.title, 'body': terms.body}
    return {'title': None, 'body': None}


def build_quote_document(session: Session, quote_id: str) -> Dict[str, Any]:
    """Gather header, customer, sections, totals and terms for a quote."""
    quote = session.get(Quote, quote_id)
    if not quote:
        raise NotFoundError("Quote not found")

    gst_rate = get_setting('GST_RATE', 0.15)
    validity_days = quote.validity_days or get_setting('QUOTE_VALIDITY_DAYS', 30)

    sections = []
    for section in quote.sections:
        items = []
        for item in section.line_items:
            product = item.product
            items.append({
                'description': (product.product_description if product else None)
                or item.description or 'Custom Item',
                'area_sqm': item.area_sqm or 0,
                'unit_price': item.sell_price or 0,
                'line_total': item.line_sell or 0,
                'is_labour': bool(item.is_labour),
            })
        sections.append({'name': section.display_name, 'items': items})

    # Items without a section are still part of the quote
    loose = [item for item in quote.line_items if not item.section_id]
    if loose:
        items = []
        for item in loose:
            items.append({
                'description': item.description or 'Custom Item',
                'area_sqm': item.area_sqm or 0,
                'unit_price': item.sell_price or 0,
                'line_total': item.line_sell or 0,
                'is_labour': bool(item.is_labour),
            })
        sections.append({'name': 'Other', 'items': items})

    totals = quote_totals(quote.line_items, gst_rate)
    # Cost stays off the customer document
    totals.pop('cost')
    sales_rep = quote.sales_rep

    return {
        'quote_number': quote.quote_number,
        'version_number': quote.version_number,
        'is_draft': quote.is_draft,
        'status': quote.status,
        'quote_date': _format_date(quote.quote_date),
        'valid_until': _format_date(quote.quote_date + timedelta(days=validity_days)) if quote.quote_date else '',
        'validity_days': validity_days,
        'subject': quote.subject,
        'description_of_work': quote.description_of_work,
        'customer': {
            'name': f"{quote.customer_first_name or ''} {quote.customer_last_name or ''}".strip(),
            'company': quote.customer_company,
            'email': quote.customer_email,
            'phone': quote.customer_phone,
        },
        'site': {
            'address': quote.site_address,
            'city': quote.city,
            'postcode': quote.postcode,
        },
        'sales_rep': {
            'name': sales_rep.full_name,
            'email': sales_rep.email,
            'phone': sales_rep.phone,
        } if sales_rep else None,
        'sections': sections,
        'totals': totals,
        'terms': _terms_for(session, quote),
    }


def _text(value) -> str:
    return escape(str(value)) if value else ''


def render_quote_pdf(document: Dict[str, Any], company: Dict[str, str] = None) -> bytes:
    """Render a quote document (from build_quote_document) to PDF bytes."""
    company = company or get_setting('COMPANY_INFO', {})

    buffer = io.BytesIO()
    doc = SimpleDocTemplate(
        buffer,
        pagesize=A4,
        title=f"Quote {document['quote_number']}",
        leftMargin=0.7 * inch,
        rightMargin=0.7 * inch,
        topMargin=0.6 * inch,
        bottomMargin=0.6 * inch,
    )
    story = []
    styles = getSampleStyleSheet()

    title_style = ParagraphStyle(
        'QuoteTitle',
        parent=styles['Heading1'],
        fontSize=22,
        textColor=colors.HexColor(BRAND_COLOR),
        spaceAfter=6,
    )
    heading_style = ParagraphStyle(
        'QuoteHeading',
        parent=styles['Heading2'],
        fontSize=13,
        textColor=colors.HexColor(BRAND_COLOR),
        spaceBefore=10,
        spaceAfter=6,
    )
    small_style = ParagraphStyle('QuoteSmall', parent=styles['Normal'], fontSize=8, leading=10)

    # Company header
    story.append(Paragraph(_text(company.get('name', 'Premier Insulation')), title_style))
    contact = ' | '.join(_text(company.get(key)) for key in ('address', 'phone', 'email', 'website') if company.get(key))
    if contact:
        story.append(Paragraph(contact, styles['Normal']))
    story.append(Spacer(1, 0.25 * inch))

    # Quote details
    label = 'DRAFT QUOTE' if document.get('is_draft') else 'QUOTE'
    story.append(Paragraph(label, heading_style))
    quote_info = [
        ['Quote Number:', document['quote_number']],
        ['Version:', str(document.get('version_number') or 0)],
        ['Date:', document.get('quote_date', '')],
        ['Valid Until:', f"{document.get('valid_until', '')} ({document.get('validity_days')} days)"],
    ]
    info_table = Table(quote_info, colWidths=[1.6 * inch, 4.8 * inch])
    info_table.setStyle(TableStyle([
        ('FONTNAME', (0, 0), (0, -1), 'Helvetica-Bold'),
        ('FONTNAME', (1, 0), (1, -1), 'Helvetica'),
        ('FONTSIZE', (0, 0), (-1, -1), 10),
        ('TEXTCOLOR', (0, 0), (0, -1), colors.HexColor('#666666')),
        ('BOTTOMPADDING', (0, 0), (-1, -1), 4),
    ]))
    story.append(info_table)

    # Customer and site
    customer = document.get('customer', {})
    site = document.get('site', {})
    story.append(Paragraph("Prepared For", heading_style))
    customer_rows = [
        ['Customer:', customer.get('name') or 'N/A'],
        ['Company:', customer.get('company') or ''],
        ['Email:', customer.get('email') or ''],
        ['Phone:', customer.get('phone') or ''],
        ['Site:', ', '.join(v for v in (site.get('address'), site.get('city'), site.get('postcode')) if v)],
    ]
    sales_rep = document.get('sales_rep')
    if sales_rep:
        customer_rows.append(['Your Contact:', f"{sales_rep['name']} {sales_rep.get('email') or ''}".strip()])
    customer_table = Table(customer_rows, colWidths=[1.6 * inch, 4.8 * inch])
    customer_table.setStyle(TableStyle([
        ('FONTNAME', (0, 0), (0, -1), 'Helvetica-Bold'),
        ('FONTSIZE', (0, 0), (-1, -1), 10),
        ('TEXTCOLOR', (0, 0), (0, -1), colors.HexColor('#666666')),
        ('BOTTOMPADDING', (0, 0), (-1, -1), 4),
    ]))
    story.append(customer_table)

    if document.get('subject') or document.get('description_of_work'):
        story.append(Paragraph("Scope of Work", heading_style))
        if document.get('subject'):
            story.append(Paragraph(f"<b>{_text(document['subject'])}</b>", styles['Normal']))
        if document.get('description_of_work'):
            story.append(Paragraph(_text(document['description_of_work']).replace('\n', '<br/>'), styles['Normal']))

    # Sections
    for section in document.get('sections', []):
        story.append(Paragraph(_text(section['name']), heading_style))
        rows = [['Description', 'Area (m²)', 'Unit Price', 'Total']]
        for item in section['items']:
            rows.append([
                Paragraph(_text(item['description']), styles['Normal']),
                f"{item['area_sqm']:.2f}",
                f"${item['unit_price']:.2f}",
                f"${item['line_total']:.2f}",
            ])
        items_table = Table(rows, colWidths=[3.4 * inch, 1 * inch, 1 * inch, 1 * inch], repeatRows=1)
        items_table.setStyle(TableStyle([
            ('BACKGROUND', (0, 0), (-1, 0), colors.HexColor(BRAND_COLOR)),
            ('TEXTCOLOR', (0, 0), (-1, 0), colors.whitesmoke),
            ('FONTNAME', (0, 0), (-1, 0), 'Helvetica-Bold'),
            ('ALIGN', (1, 0), (-1, -1), 'RIGHT'),
            ('VALIGN', (0, 0), (-1, -1), 'MIDDLE'),
            ('FONTSIZE', (0, 0), (-1, -1), 9),
            ('GRID', (0, 0), (-1, -1), 0.5, colors.HexColor('#cccccc')),
        ]))
        story.append(items_table)

    # Totals
    totals = document['totals']
    story.append(Spacer(1, 0.2 * inch))
    totals_table = Table([
        ['Subtotal (excl. GST):', f"${totals['subtotal']:.2f}"],
        [f"GST ({totals['gst_rate'] * 100:.0f}%):", f"${totals['gst']:.2f}"],
        ['TOTAL (incl. GST):', f"${totals['total']:.2f}"],
    ], colWidths=[4.8 * inch, 1.6 * inch])
    totals_table.setStyle(TableStyle([
        ('ALIGN', (0, 0), (-1, -1), 'RIGHT'),
        ('FONTNAME', (0, -1), (-1, -1), 'Helvetica-Bold'),
        ('FONTSIZE', (0, -1), (-1, -1), 12),
        ('TEXTCOLOR', (0, -1), (-1, -1), colors.HexColor(BRAND_COLOR)),
        ('LINEABOVE', (0, -1), (-1, -1), 1.5, colors.HexColor(BRAND_COLOR)),
        ('BOTTOMPADDING', (0, 0), (-1, -1), 6),
    ]))
    story.append(totals_table)

    # Terms
    terms = document.get('terms') or {}
    if terms.get('body'):
        story.append(Paragraph(_text(terms.get('title') or 'Terms & Conditions'), heading_style))
        for paragraph in terms['body'].split('\n\n'):
            if paragraph.strip():
                story.append(Paragraph(_text(paragraph.strip()).replace('\n', '<br/>'), small_style))
                story.append(Spacer(1, 4))

    doc.build(story)
    pdf = buffer.getvalue()
    buffer.close()
    logger.info(f"Rendered quote {document['quote_number']} PDF ({len(pdf)} bytes)")
    return pdf
