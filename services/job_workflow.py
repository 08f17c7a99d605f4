"""
Job workflow: status changes, completion and certificate issue.
"""

import calendar
import logging
from datetime import datetime, date

from sqlalchemy.orm import Session

from database.connection import get_db_session
from database.models import Job, Certificate
from services.errors import NotFoundError, InvalidTransitionError, WorkflowValidationError
from services.notifications import Notification
from services.numbering import next_number
from services.outcome import WorkflowOutcome
from services.settings import get_setting
from services.statuses import JobStatus, ensure_transition, is_terminal

logger = logging.getLogger(__name__)


def add_months(start: date, months: int) -> date:
    """Add calendar months, clamping to the last day of the target month."""
    month_index = start.month - 1 + months
    year = start.year + month_index // 12
    month = month_index % 12 + 1
    day = min(start.day, calendar.monthrange(year, month)[1])
    return date(year, month, day)


def _resolve_customer(job: Job):
    """(email, first_name, last_name) from the opportunity's client, its company, then the job."""
    opportunity = job.opportunity
    if opportunity:
        client = opportunity.client
        if client and client.email:
            return client.email, client.first_name, client.last_name
        company = opportunity.company
        if company and company.primary_email:
            return company.primary_email, company.company_name, None
    return job.customer_email, job.customer_first_name, job.customer_last_name


def _mark_certificate_sent(certificate_id: str, email: str):
    def _stamp(result):
        with get_db_session() as db:
            certificate = db.get(Certificate, certificate_id)
            if certificate:
                certificate.sent_at = datetime.utcnow()
                certificate.sent_to_email = email
    return _stamp


def complete_job(session: Session, job_id: str, completion_date: datetime = None,
                 completion_notes: str = None) -> WorkflowOutcome:
    """Complete a job, issue its certificate and queue the certificate email."""
    job = (
        session.query(Job)
        .filter(Job.id == job_id)
        .with_for_update()
        .first()
    )
    if not job:
        raise NotFoundError("Job not found")
    if job.status == JobStatus.COMPLETED.value:
        raise InvalidTransitionError("Job is already completed")
    ensure_transition('job', job.status, JobStatus.COMPLETED)

    completed_at = completion_date or datetime.utcnow()
    job.status = JobStatus.COMPLETED.value
    job.completed_at = completed_at
    if completion_notes is not None:
        job.completion_notes = completion_notes

    warranty_months = job.warranty_period_months or get_setting('WARRANTY_PERIOD_MONTHS', 12)
    email, first_name, last_name = _resolve_customer(job)

    certificate = Certificate(
        certificate_number=next_number(session, 'certificate'),
        job_id=job.id,
        customer_first_name=first_name,
        customer_last_name=last_name,
        customer_email=email,
        site_address=job.site_address,
        city=job.city,
        postcode=job.postcode,
        completion_date=completed_at,
        warranty_expiry_date=add_months(completed_at.date(), warranty_months),
        certificate_status='Issued',
        issued_date=datetime.utcnow(),
    )
    session.add(certificate)
    session.flush()
    logger.info(f"Job {job.job_number} completed, certificate {certificate.certificate_number} issued")

    outcome = WorkflowOutcome(
        message="Job completed and certificate issued",
        payload={
            'job': job.to_dict(),
            'certificate': certificate.to_dict(),
            'certificateNumber': certificate.certificate_number,
        },
    )

    if email:
        outcome.notifications.append(Notification(
            kind='certificate',
            recipient=email,
            description=f"certificate {certificate.certificate_number}",
            on_sent=_mark_certificate_sent(certificate.id, email),
            params={
                'customer_name': f"{first_name or ''} {last_name or ''}".strip() or 'there',
                'certificate_number': certificate.certificate_number,
                'job_number': job.job_number,
                'site_address': job.site_address,
                'completion_date': completed_at.strftime('%d %B %Y'),
                'warranty_expiry_date': certificate.warranty_expiry_date.strftime('%d %B %Y'),
            },
        ))
    else:
        logger.warning(f"No customer email for job {job.job_number}; certificate not emailed")
        outcome.warn("No customer email on file; certificate was not emailed")

    return outcome


# Statuses set through update_job_status; completion has its own operation
MANUAL_JOB_STATUSES = (JobStatus.SCHEDULED.value, JobStatus.IN_PROGRESS.value, JobStatus.CANCELLED.value)


def update_job_status(session: Session, job_id: str, status: str,
                      scheduled_date: datetime = None) -> WorkflowOutcome:
    """
    Move a job to Scheduled, In Progress or Cancelled.

    Starting a job stamps started_at; scheduling records scheduled_date
    when one is given. Completed and Cancelled jobs cannot be changed.
    """
    if status == JobStatus.COMPLETED.value:
        raise WorkflowValidationError("Use the job completion endpoint to complete a job")
    if status not in MANUAL_JOB_STATUSES:
        raise WorkflowValidationError(f"Invalid job status: {status}")

    job = (
        session.query(Job)
        .filter(Job.id == job_id)
        .with_for_update()
        .first()
    )
    if not job:
        raise NotFoundError("Job not found")
    if is_terminal('job', job.status):
        raise InvalidTransitionError(f"Job is already {job.status}")
    ensure_transition('job', job.status, status)

    previous = job.status
    job.status = status
    if status == JobStatus.IN_PROGRESS.value:
        job.started_at = datetime.utcnow()
    if scheduled_date is not None:
        job.scheduled_date = scheduled_date
    session.flush()
    logger.info(f"Job {job.job_number} moved from {previous} to {status}")

    return WorkflowOutcome(
        message=f"Job {job.job_number} is now {status}",
        payload={'job': job.to_dict()},
    )
