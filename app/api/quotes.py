"""
Quote Routes Blueprint

Handles the customer-facing quote lifecycle:
- /api/quotes/<quote_id>/accept: Accept a quote and create its job
- /api/quotes/<quote_id>/finalize: Issue the next final version and email it
- /api/quotes/<quote_id>/pdf: Render the quote as a PDF
"""

from flask import Blueprint, make_response
import logging

from app.utils.helpers import get_json_body, error_response, run_workflow
from database.connection import get_db_session
from security import require_api_key
from services.errors import WorkflowError
from services.quote_pdf import build_quote_document, render_quote_pdf
from services.quote_workflow import accept_quote, finalize_quote
from validators import validate_accept_request, validate_finalize_request

logger = logging.getLogger(__name__)

# Create blueprint
quotes_bp = Blueprint('quotes_bp', __name__)


@quotes_bp.route('/api/quotes/<quote_id>/accept', methods=['POST'])
@require_api_key
def accept(quote_id):
    """Accept a quote; converts it into a job in the same transaction"""
    data = get_json_body()
    is_valid, error = validate_accept_request(data)
    if not is_valid:
        return error_response(error, 400)

    return run_workflow(accept_quote, quote_id, accepted_by_user_id=data.get('acceptedBy'))


@quotes_bp.route('/api/quotes/<quote_id>/finalize', methods=['POST'])
@require_api_key
def finalize(quote_id):
    """Create the next final version of a quote and send it to the customer"""
    data = get_json_body()
    is_valid, error = validate_finalize_request(data)
    if not is_valid:
        return error_response(error, 400)

    return run_workflow(finalize_quote, quote_id, send_email=data.get('sendEmail', True))


@quotes_bp.route('/api/quotes/<quote_id>/pdf', methods=['GET'])
@require_api_key
def quote_pdf(quote_id):
    """Render a quote PDF inline"""
    try:
        with get_db_session() as session:
            document = build_quote_document(session, quote_id)

        pdf = render_quote_pdf(document)
        response = make_response(pdf)
        response.headers['Content-Type'] = 'application/pdf'
        response.headers['Content-Disposition'] = f'inline; filename="Quote-{document["quote_number"]}.pdf"'
        return response

    except WorkflowError as e:
        return error_response(e.message, e.status_code)
    except Exception as e:
        logger.error(f"Error generating PDF for quote {quote_id}: {e}", exc_info=True)
        return error_response(str(e), 500)
