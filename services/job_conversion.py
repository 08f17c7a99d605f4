"""
Quote -> Job conversion.

Turns an accepted quote into an installation job with its material line
items, marks the quote won and links the opportunity. Returns a result
dict instead of raising so callers can decide how to report failures.
"""

import logging
from typing import Dict, Any

from sqlalchemy.orm import Session

from database.models import Quote, Job, JobLineItem, Opportunity
from services.numbering import next_number
from services.settings import get_setting
from services.statuses import QuoteStatus, JobStatus, OpportunityStage, can_transition
from services.task_repository import TaskRepository

logger = logging.getLogger(__name__)


def _lock_quote(session: Session, quote_id: str):
    return (
        session.query(Quote)
        .filter(Quote.id == quote_id)
        .with_for_update()
        .first()
    )


def _copy_line_items(session: Session, quote: Quote, job: Job) -> int:
    count = 0
    for item in quote.line_items:
        if item.is_labour:
            continue

        product = item.product
        quantity = item.quantity or item.packs_required or 0
        session.add(JobLineItem(
            job_id=job.id,
            product_code=product.sku if product and product.sku else '',
            description=item.description,
            quantity_quoted=quantity,
            quantity_actual=0,
            unit=product.unit if product and product.unit else 'pack',
            unit_cost=item.cost_price or 0,
            line_cost=item.line_cost or 0,
        ))
        count += 1
    return count


def _link_opportunity(session: Session, quote: Quote, job: Job):
    if not quote.opportunity_id:
        return
    opportunity = session.get(Opportunity, quote.opportunity_id)
    if not opportunity:
        logger.warning(f"Quote {quote.quote_number} references missing opportunity {quote.opportunity_id}")
        return

    if can_transition('opportunity', opportunity.stage, OpportunityStage.WON):
        opportunity.stage = OpportunityStage.WON.value
    opportunity.job_id = job.id


def create_job_from_quote(session: Session, quote_id: str,
                          created_by_user_id: str = None) -> Dict[str, Any]:
    """
    Create a job from an accepted quote.

    Returns:
        {'success': True, 'job': {...}, 'job_number': str, 'warnings': [...]}
        or {'success': False, 'error': str}
    """
    try:
        quote = _lock_quote(session, quote_id)
        if not quote:
            return {'success': False, 'error': 'Quote not found'}
        if quote.job_id:
            return {'success': False, 'error': f'Quote {quote.quote_number} already has a job'}
        if quote.status != QuoteStatus.ACCEPTED.value:
            return {'success': False, 'error': f'Quote must be Accepted to create a job (status: {quote.status})'}

        with session.begin_nested():
            job_number = next_number(session, 'job')
            job = Job(
                job_number=job_number,
                quote_id=quote.id,
                assessment_id=quote.assessment_id,
                opportunity_id=quote.opportunity_id,
                customer_first_name=quote.customer_first_name,
                customer_last_name=quote.customer_last_name,
                customer_email=quote.customer_email,
                customer_phone=quote.customer_phone,
                customer_company=quote.customer_company,
                site_address=quote.site_address,
                city=quote.city,
                postcode=quote.postcode,
                status=JobStatus.DRAFT.value,
                quoted_amount=quote.total_inc_gst or 0,
                actual_amount=0,
                warranty_period_months=get_setting('WARRANTY_PERIOD_MONTHS', 12),
                created_by_user_id=created_by_user_id,
            )
            session.add(job)
            session.flush()

            item_count = _copy_line_items(session, quote, job)

            quote.status = QuoteStatus.WON.value
            quote.job_id = job.id
            _link_opportunity(session, quote, job)
            session.flush()

    except Exception as e:
        logger.error(f"Error creating job from quote {quote_id}: {e}", exc_info=True)
        return {'success': False, 'error': str(e)}

    logger.info(f"Created job {job_number} from quote {quote.quote_number} ({item_count} line items)")

    warnings = []
    if quote.sales_rep_id:
        _, warning = TaskRepository(session).create_task_safely(
            f"Assign installer crew for job {job_number}",
            assigned_to=quote.sales_rep_id,
            due_in_days=1,
            priority='High',
            status='Pending',
            opportunity_id=quote.opportunity_id,
            related_entity_type='job',
            related_entity_id=job.id,
        )
        if warning:
            warnings.append(warning)

    return {
        'success': True,
        'job': job.to_dict(),
        'job_number': job_number,
        'warnings': warnings,
    }
