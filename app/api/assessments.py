"""
Assessment Routes Blueprint

- /api/assessments/<assessment_id>/complete: Complete an assessment and hand it to the VA
- /api/send-to-va: Resend an assessment to the VA
"""

from flask import Blueprint
import logging

from app.utils.helpers import get_json_body, error_response, run_workflow
from security import require_api_key
from services.assessment_workflow import complete_assessment, notify_va_of_assessment
from validators import validate_required_fields

logger = logging.getLogger(__name__)

# Create blueprint
assessments_bp = Blueprint('assessments_bp', __name__)


@assessments_bp.route('/api/assessments/<assessment_id>/complete', methods=['POST'])
@require_api_key
def complete(assessment_id):
    """Complete an assessment, create the VA task and email the VA"""
    return run_workflow(complete_assessment, assessment_id)


@assessments_bp.route('/api/send-to-va', methods=['POST'])
@require_api_key
def send_to_va():
    """Email an assessment to the VA without changing its status"""
    data = get_json_body()
    is_valid, _ = validate_required_fields(data, ['assessmentId'])
    if not is_valid:
        return error_response("assessmentId is required", 400)

    return run_workflow(notify_va_of_assessment, data['assessmentId'])
