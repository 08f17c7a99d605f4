"""
Helper functions shared by the API blueprints: request parsing and the
run-commit-notify sequence every workflow endpoint follows.
"""

import logging
from typing import Any, Callable, Dict

from flask import request, jsonify, current_app

from database.connection import get_db_session
from services.errors import WorkflowError
from services.notifications import dispatch

logger = logging.getLogger(__name__)


def get_json_body() -> Dict[str, Any]:
    """Request JSON body, or an empty dict when there is none."""
    data = request.get_json(silent=True)
    return data if isinstance(data, dict) else {}


def error_response(message: str, status_code: int):
    return jsonify({'ok': False, 'error': message}), status_code


def run_workflow(operation: Callable, *args, **kwargs):
    """
    Run a workflow service in one transaction, then send its emails.

    Emails go out only after the commit; delivery failures are appended to
    the response warnings and never change the status code.
    """
    name = getattr(operation, '__name__', 'workflow')
    try:
        with get_db_session() as session:
            outcome = operation(session, *args, **kwargs)
    except WorkflowError as e:
        logger.warning(f"{name} refused: {e.message}")
        return jsonify(e.to_dict()), e.status_code
    except Exception as e:
        logger.error(f"{name} failed: {e}", exc_info=True)
        return error_response(str(e), 500)

    if outcome.notifications:
        outcome.warnings.extend(dispatch(outcome.notifications, current_app.email_service))

    for warning in outcome.warnings:
        logger.warning(f"{name}: {warning}")

    return jsonify(outcome.to_response()), 200
