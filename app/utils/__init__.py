"""
Utilities Package

Shared helper functions used by the API blueprints.
"""

from app.utils.helpers import (
    get_json_body,
    error_response,
    run_workflow,
)

__all__ = [
    'get_json_body',
    'error_response',
    'run_workflow',
]
