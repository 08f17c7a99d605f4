"""
Security Utilities & Middleware
CORS, response headers, JSON error handlers, request logging and the
optional shared-secret API key guard for the workflow API.
"""
import os
import hmac
import secrets
import time
from functools import wraps
from typing import Callable, Dict, Any
from flask import Flask, request, jsonify, Response, current_app, g
from flask_cors import CORS
from werkzeug.exceptions import HTTPException
import logging

logger = logging.getLogger(__name__)

# Paths excluded from request logging
QUIET_PATHS = ('/api/health', '/api/ping')

# Settings a deployed instance warns about when unset
PRODUCTION_SETTINGS = ('SECRET_KEY', 'DATABASE_URL', 'SMTP_HOST', 'API_KEY')


class SecurityConfig:
    """Strength checks for SECRET_KEY and API_KEY"""

    MIN_KEY_LENGTH = 32
    WEAK_FRAGMENTS = ('dev', 'test', 'secret', 'password', 'premier', '12345')

    @staticmethod
    def generate_secret_key() -> str:
        return secrets.token_hex(32)

    @classmethod
    def validate_secret_key(cls, secret_key: str, label: str = 'Secret key') -> bool:
        """True when the key is long enough and contains no common fragment"""
        if not secret_key:
            return False

        if len(secret_key) < cls.MIN_KEY_LENGTH:
            logger.warning(f"{label} is shorter than {cls.MIN_KEY_LENGTH} characters")
            return False

        lowered = secret_key.lower()
        if any(fragment in lowered for fragment in cls.WEAK_FRAGMENTS):
            logger.warning(f"{label} contains a common word or sequence")
            return False

        return True

    @classmethod
    def ensure_secret_key(cls, config: Dict[str, Any]) -> str:
        """The configured SECRET_KEY, or a generated one when it is missing or weak"""
        secret_key = config.get('SECRET_KEY')
        if secret_key and cls.validate_secret_key(secret_key):
            return secret_key

        if os.environ.get('FLASK_ENV') == 'production':
            logger.error("SECRET_KEY is missing or weak in production; using a generated key")
        else:
            logger.warning("Using a generated SECRET_KEY")
        return cls.generate_secret_key()

    @classmethod
    def check_api_key(cls, config: Dict[str, Any]) -> bool:
        """Log whether the workflow API is protected; returns False for a weak key"""
        api_key = config.get('API_KEY')
        if not api_key:
            logger.warning("API_KEY not set - workflow endpoints accept unauthenticated requests")
            return True
        return cls.validate_secret_key(api_key, label='API_KEY')


def setup_security_headers(app: Flask):
    """Add security headers to all responses"""
    @app.after_request
    def add_security_headers(response: Response) -> Response:
        response.headers['X-Frame-Options'] = 'DENY'
        response.headers['X-Content-Type-Options'] = 'nosniff'

        if not app.debug:
            response.headers['Strict-Transport-Security'] = 'max-age=31536000; includeSubDomains'

        # JSON and PDF only; nothing here should load sub-resources
        response.headers['Content-Security-Policy'] = "default-src 'none'; frame-ancestors 'none'"
        response.headers['Referrer-Policy'] = 'strict-origin-when-cross-origin'
        return response

    logger.info("Security headers configured")


def setup_cors(app: Flask, config: Dict[str, Any]):
    """
    Configure CORS for the dashboard front end

    Args:
        app: Flask application instance
        config: Application configuration dictionary
    """
    cors_origins = config.get('CORS_ORIGINS', ['*'])
    cors_methods = config.get('CORS_METHODS', ['GET', 'POST', 'PUT', 'DELETE', 'OPTIONS'])
    cors_headers = config.get('CORS_ALLOW_HEADERS', ['Content-Type', 'Authorization'])

    if not app.debug and '*' in cors_origins:
        logger.warning("Using wildcard CORS in production! Set CORS_ORIGINS environment variable.")

    CORS(
        app,
        resources={r"/api/*": {"origins": cors_origins}},
        methods=cors_methods,
        allow_headers=cors_headers,
        max_age=3600
    )

    logger.info(f"CORS configured: origins={cors_origins}")


def require_api_key(f: Callable) -> Callable:
    """
    Require a matching X-API-Key header when API_KEY is configured.
    With no API_KEY configured every request is let through.

    Usage:
        @bp.route('/api/quotes/<quote_id>/accept', methods=['POST'])
        @require_api_key
        def accept(quote_id):
            ...
    """
    @wraps(f)
    def decorated_function(*args, **kwargs):
        expected_key = current_app.config.get('API_KEY')
        if not expected_key:
            return f(*args, **kwargs)

        api_key = request.headers.get('X-API-Key')
        if not api_key:
            logger.warning(f"Missing API key for {request.path}")
            return jsonify({'ok': False, 'error': 'API key required'}), 401

        if not hmac.compare_digest(api_key, expected_key):
            logger.warning(f"Invalid API key for {request.path}")
            return jsonify({'ok': False, 'error': 'Invalid API key'}), 403

        return f(*args, **kwargs)

    return decorated_function


def internal_error_body(error: Exception, include_details: bool = False) -> Dict[str, Any]:
    """500 body; the exception text is only exposed in debug mode"""
    body = {
        'ok': False,
        'error': 'Internal Server Error',
        'message': 'An error occurred while processing your request'
    }

    if include_details:
        body['details'] = str(error)
        body['type'] = type(error).__name__

    return body


def setup_error_handlers(app: Flask):
    """
    Answer every HTTP error with the API's JSON envelope instead of an HTML page

    Args:
        app: Flask application instance
    """
    include_details = app.debug

    @app.errorhandler(HTTPException)
    def http_error(error: HTTPException):
        return jsonify({'ok': False, 'error': error.name, 'message': error.description}), error.code

    @app.errorhandler(500)
    def internal_server_error(error):
        original = getattr(error, 'original_exception', None) or error
        logger.error(f"Unhandled error on {request.method} {request.path}: {original}", exc_info=True)
        return jsonify(internal_error_body(original, include_details)), 500

    logger.info("Error handlers registered")


def setup_request_logging(app: Flask):
    """
    Log each API request with its status and duration

    Args:
        app: Flask application instance
    """
    @app.before_request
    def start_timer():
        g.request_started = time.perf_counter()

    @app.after_request
    def log_response(response: Response) -> Response:
        if request.path in QUIET_PATHS:
            return response

        elapsed_ms = (time.perf_counter() - g.get('request_started', time.perf_counter())) * 1000
        logger.info(
            f"{request.method} {request.path} -> {response.status_code} "
            f"({elapsed_ms:.0f}ms, from {request.remote_addr})"
        )
        return response

    logger.info("Request logging configured")


def warn_missing_settings(app: Flask, names=PRODUCTION_SETTINGS) -> bool:
    """Log deployment settings that are unset; returns True when all are present"""
    missing = [name for name in names if not app.config.get(name) and not os.environ.get(name)]

    for name in missing:
        logger.warning(f"Missing setting: {name}")

    return not missing


def setup_security(app: Flask, config: Dict[str, Any]):
    """
    Setup all security features for the application

    Args:
        app: Flask application instance
        config: Application configuration dictionary
    """
    logger.info("Configuring application security...")

    app.secret_key = SecurityConfig.ensure_secret_key(config)
    setup_cors(app, config)
    setup_security_headers(app)
    setup_error_handlers(app)
    setup_request_logging(app)
    SecurityConfig.check_api_key(config)

    if not app.debug and not app.testing:
        warn_missing_settings(app)

    logger.info("Security configuration complete")
