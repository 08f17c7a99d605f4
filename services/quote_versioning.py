"""
Quote versioning helpers.

Quotes sharing a quote_number form a version chain: version 0 is the
working draft, finalized versions are numbered from 1 and exactly one of
them is current at a time.
"""

import logging
from datetime import datetime
from typing import Optional

from sqlalchemy import func
from sqlalchemy.orm import Session

from database.models import (
    Quote, QuoteSection, QuoteLineItem, QuoteTermsMaster, QuoteTermsSnapshot
)
from services.errors import NotFoundError
from services.settings import get_setting
from services.statuses import QuoteStatus

logger = logging.getLogger(__name__)


def get_next_quote_version(session: Session, quote_number: str) -> int:
    """
    Return the next finalized version number for a quote number.

    Drafts (version 0) are ignored, so the first finalized version is 1.
    The finalized rows are locked while they are read.
    """
    finalized = (
        session.query(Quote.id)
        .filter(Quote.quote_number == quote_number, Quote.is_draft.is_(False))
        .with_for_update()
        .all()
    )
    if not finalized:
        return 1

    highest = (
        session.query(func.max(Quote.version_number))
        .filter(Quote.quote_number == quote_number, Quote.is_draft.is_(False))
        .scalar()
    )
    return (highest or 0) + 1


def supersede_current_final_quote(session: Session, quote_number: str) -> int:
    """Mark the current finalized version(s) as superseded. Returns rows changed."""
    now = datetime.utcnow()
    current = (
        session.query(Quote)
        .filter(
            Quote.quote_number == quote_number,
            Quote.is_draft.is_(False),
            Quote.is_current.is_(True),
        )
        .all()
    )
    for quote in current:
        quote.is_current = False
        quote.superseded_at = now

    if current:
        session.flush()
        logger.info(f"Superseded {len(current)} final version(s) of quote {quote_number}")
    return len(current)


def snapshot_quote_terms(session: Session, quote_id: str) -> Optional[QuoteTermsSnapshot]:
    """Freeze the newest active terms document onto a quote, if one exists."""
    terms = (
        session.query(QuoteTermsMaster)
        .filter(QuoteTermsMaster.is_active.is_(True))
        .order_by(QuoteTermsMaster.effective_from.desc())
        .first()
    )
    if not terms:
        logger.warning(f"No active terms found; quote {quote_id} finalized without a terms snapshot")
        return None

    snapshot = QuoteTermsSnapshot(quote_id=quote_id, title=terms.title, body=terms.body)
    session.add(snapshot)
    session.flush()
    return snapshot


def quote_totals(line_items, gst_rate: float) -> dict:
    """
    Subtotal, cost, GST and total for a set of line items.

    Labour lines are priced into the product lines, so they are listed on
    the quote but never added to its totals.
    """
    subtotal = 0.0
    cost = 0.0
    for item in line_items:
        if item.is_labour:
            continue
        subtotal += item.line_sell or 0
        cost += item.line_cost or 0

    gst = round(subtotal * gst_rate, 2)
    return {
        'subtotal': round(subtotal, 2),
        'cost': round(cost, 2),
        'gst_rate': gst_rate,
        'gst': gst,
        'total': round(round(subtotal, 2) + gst, 2),
    }


def recalculate_quote_totals(quote: Quote, gst_rate: float = None) -> Quote:
    """Recompute the header totals from the quote's line items."""
    rate = get_setting('GST_RATE') if gst_rate is None else gst_rate
    totals = quote_totals(quote.line_items, rate)

    quote.total_cost_ex_gst = totals['cost']
    quote.total_sell_ex_gst = totals['subtotal']
    quote.gst_amount = totals['gst']
    quote.total_inc_gst = totals['total']
    return quote


# Header fields carried from the source quote onto a new version
_COPIED_FIELDS = (
    'quote_number', 'client_id', 'company_id', 'opportunity_id', 'assessment_id',
    'recommendation_id', 'sales_rep_id', 'customer_first_name', 'customer_last_name',
    'customer_email', 'customer_phone', 'customer_company', 'site_address', 'city',
    'postcode', 'validity_days', 'subject', 'description_of_work', 'pricing_tier',
    'markup_percent', 'labour_rate_per_sqm', 'waste_percent',
)

_SECTION_FIELDS = ('app_type_id', 'section_name', 'custom_name', 'section_color', 'sort_order')

_ITEM_FIELDS = (
    'product_id', 'description', 'quantity', 'area_sqm', 'packs_required', 'is_labour',
    'unit_price', 'cost_price', 'sell_price', 'line_cost', 'line_sell', 'line_total',
    'margin_percent', 'sort_order',
)


def create_final_quote_version(session: Session, source_quote_id: str) -> Quote:
    """
    Finalize a quote: supersede the current final version and insert the
    next one as a full copy of the source, with a terms snapshot.

    Supersede and insert share a savepoint so they land together or not at
    all. Database errors propagate.
    """
    source = session.get(Quote, source_quote_id)
    if not source:
        raise NotFoundError("Quote not found")

    with session.begin_nested():
        version = get_next_quote_version(session, source.quote_number)
        supersede_current_final_quote(session, source.quote_number)

        now = datetime.utcnow()
        final = Quote(**{field: getattr(source, field) for field in _COPIED_FIELDS})
        final.version_number = version
        final.is_draft = False
        final.is_current = True
        final.status = QuoteStatus.SENT.value
        final.quote_date = now
        final.finalised_at = now
        session.add(final)
        session.flush()

        section_map = {}
        for section in source.sections:
            copy = QuoteSection(quote_id=final.id, **{f: getattr(section, f) for f in _SECTION_FIELDS})
            session.add(copy)
            session.flush()
            section_map[section.id] = copy.id

        for item in source.line_items:
            session.add(QuoteLineItem(
                quote_id=final.id,
                section_id=section_map.get(item.section_id),
                **{f: getattr(item, f) for f in _ITEM_FIELDS}
            ))
        session.flush()
        session.refresh(final)

        recalculate_quote_totals(final)
        snapshot_quote_terms(session, final.id)
        session.flush()

    logger.info(f"Created final version {version} of quote {final.quote_number}")
    return final
