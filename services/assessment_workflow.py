"""
Assessment workflow: completion and hand-off to the VA for a
product recommendation.
"""

import logging
from datetime import datetime

from sqlalchemy.orm import Session

from database.connection import get_db_session
from database.models import Assessment, TeamMember
from services.errors import NotFoundError, InvalidTransitionError, WorkflowValidationError
from services.lookups import ROLE_VA, find_active_member, customer_name, company_name, dashboard_url
from services.notifications import Notification
from services.outcome import WorkflowOutcome
from services.statuses import AssessmentStatus, TaskStatus, ensure_transition
from services.task_repository import TaskRepository

logger = logging.getLogger(__name__)

NO_OPPORTUNITY_MESSAGE = (
    "Assessment must be linked to an opportunity. "
    "Please edit the assessment and select an opportunity first."
)


def _get_assessment(session: Session, assessment_id: str) -> Assessment:
    assessment = session.get(Assessment, assessment_id)
    if not assessment:
        raise NotFoundError("Assessment not found")
    return assessment


def _mark_va_notified(assessment_id: str, email: str):
    def _stamp(result):
        with get_db_session() as db:
            assessment = db.get(Assessment, assessment_id)
            if assessment:
                assessment.va_notified_at = datetime.utcnow()
                assessment.va_notification_email = email
    return _stamp


def _va_notification(assessment: Assessment, va: TeamMember) -> Notification:
    opportunity = assessment.opportunity
    completed = assessment.completed_date or datetime.utcnow()
    return Notification(
        kind='assessment_completed',
        recipient=va.email,
        description=f"assessment {assessment.reference_number or assessment.id}",
        on_sent=_mark_va_notified(assessment.id, va.email),
        params={
            'va_name': va.first_name or 'VA Team',
            'reference_number': assessment.reference_number or assessment.id,
            'customer_name': customer_name(opportunity, client=assessment.client),
            'customer_company': company_name(opportunity),
            'site_address': assessment.site_address or (opportunity.site_address if opportunity else None),
            'completed_date': completed.strftime('%d %B %Y'),
            'dashboard_url': dashboard_url(f"assessments/{assessment.id}"),
        },
    )


def complete_assessment(session: Session, assessment_id: str) -> WorkflowOutcome:
    """Mark an assessment completed, create the VA's task and queue the VA email."""
    assessment = _get_assessment(session, assessment_id)
    opportunity = assessment.opportunity
    if not opportunity:
        raise WorkflowValidationError(NO_OPPORTUNITY_MESSAGE)
    if assessment.status == AssessmentStatus.COMPLETED.value:
        raise InvalidTransitionError("Assessment is already completed")
    ensure_transition('assessment', assessment.status, AssessmentStatus.COMPLETED)

    va = find_active_member(session, ROLE_VA)
    if not va:
        raise WorkflowValidationError("No active VA found")

    assessment.status = AssessmentStatus.COMPLETED.value
    assessment.completed_date = datetime.utcnow()
    session.flush()

    customer = customer_name(opportunity, client=assessment.client)
    notes = (
        f"Assessment: {assessment.reference_number or assessment.id}\n"
        f"Client: {customer}\n"
        f"Company: {company_name(opportunity) or 'N/A'}\n"
        f"Assessment ID: {assessment.id}"
    )
    task, warning = TaskRepository(session).create_task_safely(
        f"Create Recommendation - {customer}",
        assigned_to=va.id,
        due_in_days=2,
        priority='Normal',
        status=TaskStatus.NOT_STARTED.value,
        task_type='Create Recommendation',
        opportunity_id=opportunity.id,
        related_entity_type='assessment',
        related_entity_id=assessment.id,
        notes=notes,
    )
    logger.info(f"Assessment {assessment.reference_number} completed, VA {va.email} assigned")

    outcome = WorkflowOutcome(
        message="Assessment completed and sent to VA",
        payload={
            'assessment': assessment.to_dict(),
            'va': {'id': va.id, 'name': va.full_name, 'email': va.email},
            'task': task,
        },
    )
    outcome.warn(warning)
    outcome.notifications.append(_va_notification(assessment, va))
    return outcome


def notify_va_of_assessment(session: Session, assessment_id: str) -> WorkflowOutcome:
    """Resend the assessment email to the VA without changing any status."""
    assessment = _get_assessment(session, assessment_id)
    va = find_active_member(session, ROLE_VA)
    if not va:
        raise NotFoundError("No active VA found")

    outcome = WorkflowOutcome(
        message=f"Assessment sent to {va.full_name or va.email}",
        payload={'va': {'id': va.id, 'name': va.full_name, 'email': va.email}},
    )
    outcome.notifications.append(_va_notification(assessment, va))
    return outcome
