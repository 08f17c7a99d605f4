"""
Health Check & Monitoring Endpoints
Provides endpoints for deployment health checks and monitoring
"""
import os
import sys
import time
import psutil
from datetime import datetime
from typing import Dict, Any
from flask import Blueprint, jsonify, current_app
import logging

from database.connection import check_db_connection

logger = logging.getLogger(__name__)

# Create Blueprint for health check routes
health_bp = Blueprint('health', __name__)

# Track application start time
START_TIME = time.time()

SERVICE_NAME = 'premier-insulation-workflow'


def get_system_metrics() -> Dict[str, Any]:
    """
    Get basic process metrics

    Returns:
        Dictionary of system metrics
    """
    try:
        process = psutil.Process()

        return {
            'cpu_percent': process.cpu_percent(interval=0.1),
            'memory_mb': process.memory_info().rss / 1024 / 1024,
            'memory_percent': process.memory_percent(),
            'threads': process.num_threads(),
        }
    except Exception as e:
        logger.warning(f"Failed to get system metrics: {e}")
        return {}


def get_uptime() -> Dict[str, Any]:
    """
    Get application uptime

    Returns:
        Dictionary with uptime information
    """
    uptime_seconds = time.time() - START_TIME

    return {
        'uptime_seconds': round(uptime_seconds, 2),
        'uptime_minutes': round(uptime_seconds / 60, 2),
        'uptime_hours': round(uptime_seconds / 3600, 2),
        'started_at': datetime.fromtimestamp(START_TIME).isoformat()
    }


def check_database() -> Dict[str, Any]:
    """Check that the database answers a trivial query"""
    try:
        check_db_connection()
        return {'healthy': True}
    except Exception as e:
        logger.error(f"Database health check failed: {e}")
        return {'healthy': False, 'error': str(e)}


def check_email(app) -> Dict[str, Any]:
    """
    Report whether outgoing email is configured

    Args:
        app: Flask application instance
    """
    return {
        'configured': bool(app.config.get('SMTP_HOST')),
        'from_email': app.config.get('FROM_EMAIL'),
    }


@health_bp.route('/health', methods=['GET'])
def health_check():
    """
    Health check endpoint
    Returns 200 when the database is reachable, 503 otherwise

    Used by: deployment health checks, monitoring tools
    """
    database = check_database()
    status_code = 200 if database['healthy'] else 503

    return jsonify({
        'status': 'healthy' if database['healthy'] else 'unhealthy',
        'timestamp': datetime.utcnow().isoformat(),
        'service': SERVICE_NAME,
        'environment': os.environ.get('FLASK_ENV', 'production'),
        'checks': {
            'database': database,
            'email': check_email(current_app),
        },
        'uptime': get_uptime(),
        'system': get_system_metrics(),
        'python_version': sys.version.split()[0]
    }), status_code


@health_bp.route('/ping', methods=['GET'])
def ping():
    """
    Simple ping endpoint
    Returns immediate response for basic connectivity tests
    """
    return 'pong', 200


def register_health_checks(app):
    """
    Register health check blueprint with Flask app

    Args:
        app: Flask application instance
    """
    app.register_blueprint(health_bp, url_prefix='/api')
    logger.info("Health check endpoints registered: /api/health, /api/ping")
