"""
Application Initialization Module
Initializes the Flask app with configuration, logging, security, database,
email and the API blueprints
"""
import os
from flask import Flask
from config import get_config, validate_config
from logging_config import setup_logging
from security import setup_security
from health_checks import register_health_checks
from database.connection import configure_database, init_db
from services.email_service import EmailService
import logging

logger = logging.getLogger(__name__)


def create_app(config_name=None):
    """
    Application factory that creates and configures Flask app with all infrastructure

    Args:
        config_name: 'development', 'production' or 'testing' (defaults to FLASK_ENV)

    Returns:
        Configured Flask application instance
    """
    app = Flask(__name__)

    # Load configuration
    config_class = get_config(config_name)
    validate_config(config_class)
    app.config.from_object(config_class)

    setup_logging(app)

    logger.info("=" * 60)
    logger.info("Initializing Premier Insulation Workflow Service")
    logger.info("=" * 60)
    logger.info(f"Environment: {config_name or os.environ.get('FLASK_ENV', 'development')}")
    logger.info(f"Debug mode: {app.debug}")

    # Setup security (CORS, headers, error handlers)
    setup_security(app, app.config)

    initialize_database(app)

    app.email_service = initialize_email_service(app)

    # Register health check endpoints
    register_health_checks(app)

    from app import register_blueprints
    register_blueprints(app)

    logger.info("Application initialization complete")
    logger.info("=" * 60)

    return app


def initialize_database(app):
    """
    Bind the engine to DATABASE_URL and create tables when AUTO_CREATE_TABLES is set

    Args:
        app: Flask application instance
    """
    url = app.config['DATABASE_URL']
    engine_options = {} if url.startswith('sqlite') else dict(app.config.get('SQLALCHEMY_ENGINE_OPTIONS', {}))
    configure_database(url, **engine_options)

    if app.config.get('AUTO_CREATE_TABLES'):
        init_db()
    else:
        logger.info("AUTO_CREATE_TABLES disabled; schema is managed by Alembic")

    if app.config.get('SEED_DATABASE'):
        from database.seed import seed_database
        seed_database()


def initialize_email_service(app):
    """
    Create the SMTP email service from app config

    Args:
        app: Flask application instance

    Returns:
        EmailService instance
    """
    email_service = EmailService(app.config)

    if email_service.is_configured():
        logger.info(f"Email service configured ({app.config['SMTP_HOST']}:{app.config['SMTP_PORT']})")
    else:
        logger.warning("SMTP_HOST not set - workflow emails will be reported as warnings")

    return email_service
