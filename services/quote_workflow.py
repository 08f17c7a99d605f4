"""
Quote workflow: customer acceptance and finalization.
"""

import logging
from datetime import datetime

from sqlalchemy.orm import Session

from database.models import Quote, Job
from services.errors import NotFoundError, InvalidTransitionError, WorkflowError
from services.job_conversion import create_job_from_quote
from services.notifications import Notification
from services.outcome import WorkflowOutcome
from services.quote_pdf import build_quote_document, render_quote_pdf
from services.quote_versioning import create_final_quote_version
from services.statuses import QuoteStatus, ensure_transition

logger = logging.getLogger(__name__)

# Statuses a quote can be (re)finalized from
FINALIZABLE_STATUSES = (QuoteStatus.DRAFT.value, QuoteStatus.SENT.value)


def _lock_quote(session: Session, quote_id: str) -> Quote:
    quote = (
        session.query(Quote)
        .filter(Quote.id == quote_id)
        .with_for_update()
        .first()
    )
    if not quote:
        raise NotFoundError("Quote not found")
    return quote


def _lock_versions(session: Session, quote_number: str):
    return (
        session.query(Quote)
        .filter(Quote.quote_number == quote_number)
        .order_by(Quote.version_number)
        .with_for_update()
        .all()
    )


def _is_accepted(session: Session, quote: Quote) -> bool:
    if quote.job_id or quote.status in (QuoteStatus.ACCEPTED.value, QuoteStatus.WON.value):
        return True
    return session.query(Job.id).filter(Job.quote_id == quote.id).first() is not None


def accept_quote(session: Session, quote_id: str, accepted_by_user_id: str = None) -> WorkflowOutcome:
    """
    Mark a quote accepted and convert it into a job.

    Every version of the quote number stays locked until the request
    commits, so only one version can ever be accepted and converted.
    """
    quote = _lock_quote(session, quote_id)
    versions = _lock_versions(session, quote.quote_number)

    if any(_is_accepted(session, version) for version in versions):
        raise InvalidTransitionError("Quote has already been accepted")
    if quote.is_draft and any(not version.is_draft for version in versions):
        raise InvalidTransitionError("Quote has been finalized; accept the current version instead")
    if not quote.is_draft and not quote.is_current:
        raise InvalidTransitionError(
            f"Quote version {quote.version_number} has been superseded; accept the current version instead"
        )
    ensure_transition('quote', quote.status, QuoteStatus.ACCEPTED)

    quote.status = QuoteStatus.ACCEPTED.value
    quote.accepted_date = datetime.utcnow()
    quote.accepted_by_user_id = accepted_by_user_id
    session.flush()
    logger.info(f"Quote {quote.quote_number} v{quote.version_number} accepted")

    result = create_job_from_quote(session, quote.id, created_by_user_id=accepted_by_user_id)
    if not result['success']:
        raise WorkflowError(f"Quote accepted but job creation failed: {result['error']}")

    return WorkflowOutcome(
        message="Quote accepted and job created successfully",
        payload={
            'job': result['job'],
            'jobNumber': result['job_number'],
            'quote': quote.to_dict(),
        },
        warnings=list(result['warnings']),
    )


def _quote_email(session: Session, quote: Quote, outcome: WorkflowOutcome):
    attachments = []
    try:
        document = build_quote_document(session, quote.id)
        attachments.append((f"Quote-{quote.quote_number}.pdf", render_quote_pdf(document), 'pdf'))
    except Exception as e:
        logger.error(f"Failed to render PDF for quote {quote.quote_number}: {e}", exc_info=True)
        outcome.warn(f"Quote PDF could not be generated: {e}")

    sales_rep = quote.sales_rep
    customer = f"{quote.customer_first_name or ''} {quote.customer_last_name or ''}".strip()
    outcome.notifications.append(Notification(
        kind='quote',
        recipient=quote.customer_email,
        reply_to=sales_rep.email if sales_rep else None,
        attachments=attachments,
        description=f"quote {quote.quote_number}",
        params={
            'customer_name': customer or 'there',
            'quote_number': quote.quote_number,
            'version_number': quote.version_number,
            'total_inc_gst': quote.total_inc_gst or 0,
            'validity_days': quote.validity_days or 30,
            'sales_rep_name': sales_rep.full_name if sales_rep else None,
        },
    ))


def finalize_quote(session: Session, quote_id: str, send_email: bool = True) -> WorkflowOutcome:
    """Issue the next final version of a quote and queue it for the customer."""
    quote = session.get(Quote, quote_id)
    if not quote:
        raise NotFoundError("Quote not found")
    if quote.status not in FINALIZABLE_STATUSES:
        raise InvalidTransitionError(f"Quote cannot be finalized while {quote.status}")

    final = create_final_quote_version(session, quote.id)

    outcome = WorkflowOutcome(
        message=f"Quote {final.quote_number} version {final.version_number} finalized",
        payload={
            'quote': final.to_dict(),
            'quoteNumber': final.quote_number,
            'version': final.version_number,
        },
    )
    if send_email:
        _quote_email(session, final, outcome)
    return outcome
