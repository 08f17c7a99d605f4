"""
Product recommendation workflow: approval round-trip between the VA and a
Premier user, then finalization into a draft quote.
"""

import logging
from datetime import datetime
from typing import Optional

from sqlalchemy.orm import Session

from database.models import ProductRecommendation, Opportunity, TeamMember
from services.errors import (
    NotFoundError, InvalidTransitionError, WorkflowValidationError, WorkflowError
)
from services.lookups import (
    ROLE_VA, ROLE_ADMIN, find_active_member, find_member_by_email, is_active,
    customer_name, dashboard_url
)
from services.notifications import Notification
from services.outcome import WorkflowOutcome
from services.quote_conversion import create_quote_from_recommendation
from services.statuses import (
    ApprovalStatus, RecommendationStatus, can_transition, ensure_transition
)
from services.task_repository import TaskRepository

logger = logging.getLogger(__name__)

REVIEW_ACTIONS = ('approve', 'reject')


def _get_recommendation(session: Session, recommendation_id: str) -> ProductRecommendation:
    recommendation = (
        session.query(ProductRecommendation)
        .filter(ProductRecommendation.id == recommendation_id)
        .with_for_update()
        .first()
    )
    if not recommendation:
        raise NotFoundError("Recommendation not found")
    return recommendation


def _opportunity_for(recommendation: ProductRecommendation) -> Optional[Opportunity]:
    if recommendation.opportunity:
        return recommendation.opportunity
    if recommendation.assessment:
        return recommendation.assessment.opportunity
    return None


def _va_for(session: Session, recommendation: ProductRecommendation) -> Optional[TeamMember]:
    """The VA who drafted the recommendation, else the first active VA."""
    return find_member_by_email(session, recommendation.created_by) or find_active_member(session, ROLE_VA)


def _set_opportunity_recommendation_status(opportunity: Optional[Opportunity], status: str):
    if opportunity:
        opportunity.recommendation_status = status


def submit_for_approval(session: Session, recommendation_id: str) -> WorkflowOutcome:
    """Send a draft (or rejected) recommendation to a Premier user for approval."""
    recommendation = _get_recommendation(session, recommendation_id)
    ensure_transition(
        'approval', recommendation.approval_status, ApprovalStatus.PENDING,
        message=f"Recommendation cannot be submitted while {recommendation.approval_status}",
    )

    opportunity = _opportunity_for(recommendation)
    approver = opportunity.sales_rep if opportunity else None
    if not is_active(approver):
        approver = find_active_member(session, ROLE_ADMIN)
    if not approver:
        raise WorkflowValidationError("No Premier user found for approval")

    va = find_member_by_email(session, recommendation.created_by)
    va_name = va.full_name if va and va.full_name else 'VA Team'
    customer = customer_name(opportunity)

    recommendation.approval_status = ApprovalStatus.PENDING.value
    recommendation.submitted_for_approval_at = datetime.utcnow()
    recommendation.rejection_reason = None
    recommendation.approved_by = None
    recommendation.approved_at = None
    _set_opportunity_recommendation_status(opportunity, 'Pending Approval')
    session.flush()

    task, warning = TaskRepository(session).create_task_safely(
        f"Review and approve product recommendation for {customer}",
        assigned_to=approver.id,
        due_in_days=1,
        priority='High',
        opportunity_id=opportunity.id if opportunity else None,
        related_entity_type='recommendation',
        related_entity_id=recommendation.id,
    )
    logger.info(f"Recommendation {recommendation.id} submitted for approval to {approver.email}")

    outcome = WorkflowOutcome(
        message="Recommendation submitted for approval",
        payload={
            'recommendation': recommendation.to_dict(),
            'approver': {'id': approver.id, 'name': approver.full_name, 'email': approver.email},
            'task': task,
        },
    )
    outcome.warn(warning)
    outcome.notifications.append(Notification(
        kind='recommendation_approval',
        recipient=approver.email,
        description=f"approval request for {customer}",
        params={
            'approver_name': approver.first_name or approver.full_name,
            'va_name': va_name,
            'customer_name': customer,
            'site_address': opportunity.site_address if opportunity else None,
            'dashboard_url': dashboard_url(f"recommendations/{recommendation.id}"),
        },
    ))
    return outcome


def review_recommendation(session: Session, recommendation_id: str, action: str,
                          approved_by: str = None, rejection_reason: str = None) -> WorkflowOutcome:
    """Approve or reject a recommendation that is pending approval."""
    if action not in REVIEW_ACTIONS:
        raise WorkflowValidationError("Invalid action. Must be 'approve' or 'reject'")
    if action == 'reject' and not (rejection_reason or '').strip():
        raise WorkflowValidationError("Rejection reason is required")

    recommendation = _get_recommendation(session, recommendation_id)
    if recommendation.approval_status != ApprovalStatus.PENDING.value:
        raise InvalidTransitionError("Recommendation is not pending approval")

    reviewer = approved_by or 'Premier Team'
    opportunity = _opportunity_for(recommendation)
    customer = customer_name(opportunity)
    va = _va_for(session, recommendation)
    va_email = recommendation.created_by or (va.email if va else None)
    va_name = va.first_name if va and va.first_name else 'VA Team'
    now = datetime.utcnow()

    if action == 'approve':
        recommendation.approval_status = ApprovalStatus.APPROVED.value
        recommendation.approved_by = reviewer
        recommendation.approved_at = now
        _set_opportunity_recommendation_status(opportunity, 'Approved')
        task_description = f"Finalize approved recommendation for {customer}"
        kind = 'recommendation_approved'
        params = {'approved_by': reviewer}
        message = "Recommendation approved"
    else:
        recommendation.approval_status = ApprovalStatus.REJECTED.value
        recommendation.rejection_reason = rejection_reason.strip()
        recommendation.approved_by = reviewer
        recommendation.approved_at = now
        _set_opportunity_recommendation_status(opportunity, 'Rejected')
        task_description = f"Revise recommendation for {customer}"
        kind = 'recommendation_rejected'
        params = {'rejected_by': reviewer, 'rejection_reason': recommendation.rejection_reason}
        message = "Recommendation rejected"
    session.flush()
    logger.info(f"Recommendation {recommendation.id} {recommendation.approval_status.lower()} by {reviewer}")

    outcome = WorkflowOutcome(
        message=message,
        payload={'recommendation': recommendation.to_dict()},
    )

    if va:
        task, warning = TaskRepository(session).create_task_safely(
            task_description,
            assigned_to=va.id,
            due_in_days=1,
            priority='High',
            opportunity_id=opportunity.id if opportunity else None,
            related_entity_type='recommendation',
            related_entity_id=recommendation.id,
            notes=recommendation.rejection_reason if action == 'reject' else None,
        )
        outcome.payload['task'] = task
        outcome.warn(warning)
    else:
        outcome.warn("No VA found to assign the follow-up task")

    params.update({
        'va_name': va_name,
        'customer_name': customer,
        'dashboard_url': dashboard_url(f"recommendations/{recommendation.id}"),
    })
    outcome.notifications.append(Notification(
        kind=kind,
        recipient=va_email,
        description=f"{message.lower()} notice for {customer}",
        params=params,
    ))
    return outcome


def finalize_recommendation(session: Session, recommendation_id: str) -> WorkflowOutcome:
    """Finalize an approved recommendation and build its draft quote."""
    recommendation = _get_recommendation(session, recommendation_id)
    if recommendation.approval_status != ApprovalStatus.APPROVED.value:
        raise InvalidTransitionError("Only approved recommendations can be submitted")
    if not can_transition('recommendation', recommendation.recommendation_status, RecommendationStatus.FINALIZED):
        raise InvalidTransitionError("Recommendation has already been finalized")

    opportunity = _opportunity_for(recommendation)
    if not opportunity:
        raise WorkflowValidationError("Recommendation is not linked to an opportunity")

    recommendation.recommendation_status = RecommendationStatus.FINALIZED.value
    recommendation.finalized_at = datetime.utcnow()
    _set_opportunity_recommendation_status(opportunity, 'Finalized')
    session.flush()

    result = create_quote_from_recommendation(session, recommendation.id)
    if not result['success']:
        raise WorkflowError(f"Failed to create quote: {result['error']}")

    return WorkflowOutcome(
        message="Recommendation submitted and quote created successfully",
        payload={
            'recommendation': recommendation.to_dict(),
            'quote': result['quote'],
            'quoteNumber': result['quote_number'],
        },
        warnings=list(result['warnings']),
    )
