"""
Premier Insulation Workflow - Application Package

This package contains the HTTP layer:
- api/: HTTP route handlers (Flask Blueprints)
- utils/: Shared request/response helpers

The app factory lives in app_init.py at the project root; business logic
lives in the top-level services package.
"""

import logging

logger = logging.getLogger(__name__)

# Import blueprints
from app.api.assessments import assessments_bp
from app.api.recommendations import recommendations_bp
from app.api.quotes import quotes_bp
from app.api.jobs import jobs_bp
from app.api.tasks import tasks_bp

BLUEPRINTS = (
    assessments_bp,
    recommendations_bp,
    quotes_bp,
    jobs_bp,
    tasks_bp,
)


def register_blueprints(app):
    """
    Register all API blueprints with the Flask app.
    Called from app_init.create_app after the database is configured.

    Args:
        app: Flask application instance
    """
    for blueprint in BLUEPRINTS:
        app.register_blueprint(blueprint)
    logger.info(f"Registered {len(BLUEPRINTS)} API blueprints")


__all__ = ['register_blueprints', 'assessments_bp', 'recommendations_bp', 'quotes_bp', 'jobs_bp', 'tasks_bp']
