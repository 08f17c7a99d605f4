"""
Product Recommendation Routes Blueprint

Handles the recommendation approval round-trip:
- /api/product-recommendations/<id>/submit-for-approval: VA -> Premier user
- /api/product-recommendations/<id>/approve: Approve or reject
- /api/va-submit-recommendation: Finalize an approved recommendation into a draft quote
"""

from flask import Blueprint
import logging

from app.utils.helpers import get_json_body, error_response, run_workflow
from security import require_api_key
from services.recommendation_workflow import (
    submit_for_approval, review_recommendation, finalize_recommendation
)
from validators import validate_review_request, validate_required_fields, sanitize_string

logger = logging.getLogger(__name__)

# Create blueprint
recommendations_bp = Blueprint('recommendations_bp', __name__)


@recommendations_bp.route('/api/product-recommendations/<recommendation_id>/submit-for-approval', methods=['POST'])
@require_api_key
def submit(recommendation_id):
    """Submit a recommendation for approval"""
    return run_workflow(submit_for_approval, recommendation_id)


@recommendations_bp.route('/api/product-recommendations/<recommendation_id>/approve', methods=['POST'])
@require_api_key
def review(recommendation_id):
    """Approve or reject a recommendation (body: action, approvedBy, rejectionReason)"""
    data = get_json_body()
    is_valid, error = validate_review_request(data)
    if not is_valid:
        return error_response(error, 400)

    reason = data.get('rejectionReason')
    return run_workflow(
        review_recommendation,
        recommendation_id,
        data['action'],
        approved_by=data.get('approvedBy'),
        rejection_reason=sanitize_string(reason, max_length=2000) if reason else None,
    )


@recommendations_bp.route('/api/va-submit-recommendation', methods=['POST'])
@require_api_key
def va_submit():
    """Finalize an approved recommendation and create its draft quote"""
    data = get_json_body()
    is_valid, _ = validate_required_fields(data, ['recommendationId'])
    if not is_valid:
        return error_response("recommendationId is required", 400)

    return run_workflow(finalize_recommendation, data['recommendationId'])
