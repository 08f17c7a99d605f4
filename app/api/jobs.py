"""
Job Routes Blueprint

- /api/jobs/<job_id>/status: Schedule, start or cancel a job
- /api/jobs/<job_id>/complete: Complete a job and issue its certificate
"""

from flask import Blueprint
import logging

from app.utils.helpers import get_json_body, error_response, run_workflow
from security import require_api_key
from services.job_workflow import complete_job, update_job_status
from validators import (
    validate_job_completion_request, validate_job_status_request, parse_date, sanitize_string
)

logger = logging.getLogger(__name__)

# Create blueprint
jobs_bp = Blueprint('jobs_bp', __name__)


@jobs_bp.route('/api/jobs/<job_id>/complete', methods=['POST'])
@require_api_key
def complete(job_id):
    """Mark a job completed; the certificate email is sent after commit"""
    data = get_json_body()
    is_valid, error = validate_job_completion_request(data)
    if not is_valid:
        return error_response(error, 400)

    notes = data.get('completionNotes')
    return run_workflow(
        complete_job,
        job_id,
        completion_date=parse_date(data.get('completionDate')),
        completion_notes=sanitize_string(notes, max_length=5000) if notes is not None else None,
    )


@jobs_bp.route('/api/jobs/<job_id>/status', methods=['POST'])
@require_api_key
def change_status(job_id):
    """Move a job to Scheduled, In Progress or Cancelled"""
    data = get_json_body()
    is_valid, error = validate_job_status_request(data)
    if not is_valid:
        return error_response(error, 400)

    return run_workflow(
        update_job_status,
        job_id,
        data['status'],
        scheduled_date=parse_date(data.get('scheduledDate')),
    )
