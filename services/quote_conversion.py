"""
Recommendation -> Quote conversion.

Builds a draft quote (version 0) from a finalized product recommendation:
one quote section per recommendation section and one unpriced line item
per recommended product. Pricing is added later by the sales rep.
"""

import logging
from typing import Dict, Any, Optional

from sqlalchemy.orm import Session

from database.models import (
    ProductRecommendation, Opportunity, Quote, QuoteSection, QuoteLineItem
)
from services.numbering import next_number
from services.settings import get_setting
from services.statuses import QuoteStatus, OpportunityStage, can_transition
from services.task_repository import TaskRepository

logger = logging.getLogger(__name__)

DEFAULT_SECTION_COLOR = '#ffffff'


def _resolve_opportunity(session: Session, recommendation: ProductRecommendation) -> Optional[Opportunity]:
    opportunity_id = recommendation.opportunity_id
    if not opportunity_id and recommendation.assessment:
        opportunity_id = recommendation.assessment.opportunity_id
    return session.get(Opportunity, opportunity_id) if opportunity_id else None


def _unpriced_item(quote_id: str, section_id: str, item, sort_order: int) -> QuoteLineItem:
    return QuoteLineItem(
        quote_id=quote_id,
        section_id=section_id,
        product_id=item.product_id,
        description=item.product_description or 'Product',
        quantity=item.quantity or 0,
        area_sqm=item.area_sqm or 0,
        packs_required=item.quantity or 0,
        is_labour=False,
        unit_price=0,
        cost_price=0,
        sell_price=0,
        line_cost=0,
        line_sell=0,
        line_total=0,
        margin_percent=0,
        sort_order=sort_order,
    )


def create_quote_from_recommendation(session: Session, recommendation_id: str) -> Dict[str, Any]:
    """
    Create a draft quote from a product recommendation.

    Returns:
        {'success': True, 'quote': {...}, 'quote_number': str, 'warnings': [...]}
        or {'success': False, 'error': str}
    """
    try:
        recommendation = session.get(ProductRecommendation, recommendation_id)
        if not recommendation:
            return {'success': False, 'error': 'Recommendation not found'}

        opportunity = _resolve_opportunity(session, recommendation)
        if not opportunity:
            return {'success': False, 'error': 'Recommendation is not linked to an opportunity'}

        existing = session.query(Quote).filter(Quote.recommendation_id == recommendation.id).first()
        if existing:
            return {
                'success': False,
                'error': f'A quote ({existing.quote_number}) has already been created from this recommendation',
            }

        client = opportunity.client
        company = opportunity.company

        with session.begin_nested():
            quote_number = next_number(session, 'quote')
            quote = Quote(
                quote_number=quote_number,
                version_number=0,
                is_draft=True,
                is_current=True,
                status=QuoteStatus.DRAFT.value,
                client_id=opportunity.client_id,
                company_id=opportunity.company_id,
                opportunity_id=opportunity.id,
                assessment_id=recommendation.assessment_id,
                recommendation_id=recommendation.id,
                sales_rep_id=opportunity.sales_rep_id,
                customer_first_name=client.first_name if client else None,
                customer_last_name=client.last_name if client else None,
                customer_email=client.email if client else None,
                customer_phone=client.phone if client else None,
                customer_company=company.company_name if company else None,
                site_address=opportunity.site_address,
                city=opportunity.city,
                postcode=opportunity.postcode,
                validity_days=get_setting('QUOTE_VALIDITY_DAYS', 30),
                pricing_tier=get_setting('DEFAULT_PRICING_TIER'),
                markup_percent=get_setting('DEFAULT_MARKUP_PERCENT'),
                labour_rate_per_sqm=get_setting('DEFAULT_LABOUR_RATE_PER_SQM'),
                waste_percent=get_setting('DEFAULT_WASTE_PERCENT'),
                total_cost_ex_gst=0,
                total_sell_ex_gst=0,
                gst_amount=0,
                total_inc_gst=0,
            )
            session.add(quote)
            session.flush()

            item_count = 0
            ordered = sorted(recommendation.sections, key=lambda s: s.sort_order or 0)
            for index, rec_section in enumerate(ordered):
                section = QuoteSection(
                    quote_id=quote.id,
                    app_type_id=rec_section.app_type_id,
                    section_name=rec_section.section_name,
                    custom_name=rec_section.custom_name,
                    section_color=rec_section.section_color or DEFAULT_SECTION_COLOR,
                    sort_order=index + 1,
                )
                session.add(section)
                session.flush()

                items = sorted(rec_section.items, key=lambda i: i.sort_order or 0)
                for item_index, rec_item in enumerate(items):
                    session.add(_unpriced_item(quote.id, section.id, rec_item, item_index + 1))
                    item_count += 1

            if can_transition('opportunity', opportunity.stage, OpportunityStage.QUOTED):
                opportunity.stage = OpportunityStage.QUOTED.value
            session.flush()

    except Exception as e:
        logger.error(f"Error creating quote from recommendation {recommendation_id}: {e}", exc_info=True)
        return {'success': False, 'error': str(e)}

    logger.info(
        f"Created draft quote {quote_number} from recommendation {recommendation_id} "
        f"({len(ordered)} sections, {item_count} items)"
    )

    warnings = []
    if opportunity.sales_rep_id:
        _, warning = TaskRepository(session).create_task_safely(
            f"Add pricing to quote {quote_number}",
            assigned_to=opportunity.sales_rep_id,
            due_in_days=2,
            priority='High',
            status='Pending',
            opportunity_id=opportunity.id,
            related_entity_type='quote',
            related_entity_id=quote.id,
        )
        if warning:
            warnings.append(warning)

    return {
        'success': True,
        'quote': quote.to_dict(),
        'quote_number': quote_number,
        'warnings': warnings,
    }
