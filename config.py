"""
Centralized Configuration for the Premier Insulation workflow service
Manages environment-specific settings, secrets, and service configurations.
"""
import os
from datetime import timedelta


def _normalize_database_url(url):
    """Rewrite Heroku/Render style postgres:// URLs for SQLAlchemy"""
    if url and url.startswith('postgres://'):
        return url.replace('postgres://', 'postgresql://', 1)
    return url


class Config:
    """Base configuration with defaults"""

    # Flask Settings
    SECRET_KEY = os.environ.get('SECRET_KEY') or os.urandom(32).hex()
    MAX_CONTENT_LENGTH = 16 * 1024 * 1024  # 16MB max request body
    JSON_SORT_KEYS = False

    # Shared secret for API access (disabled when unset)
    API_KEY = os.environ.get('API_KEY')

    # CORS Settings
    CORS_ORIGINS = os.environ.get('CORS_ORIGINS', '*').split(',')
    CORS_METHODS = ['GET', 'POST', 'PUT', 'DELETE', 'OPTIONS']
    CORS_ALLOW_HEADERS = ['Content-Type', 'Authorization', 'X-Requested-With', 'X-API-Key']

    # Database Settings
    DATABASE_URL = _normalize_database_url(
        os.environ.get('DATABASE_URL', 'sqlite:///premier_insulation.db')
    )
    AUTO_CREATE_TABLES = os.environ.get('AUTO_CREATE_TABLES', 'false').lower() == 'true'
    SQLALCHEMY_ENGINE_OPTIONS = {
        'pool_pre_ping': True,
        'pool_recycle': 300,
    }

    # Email (SMTP) Settings
    SMTP_HOST = os.environ.get('SMTP_HOST', '')
    SMTP_PORT = int(os.environ.get('SMTP_PORT', '587'))
    SMTP_USER = os.environ.get('SMTP_USER', '')
    SMTP_PASSWORD = os.environ.get('SMTP_PASSWORD', '')
    SMTP_USE_TLS = os.environ.get('SMTP_USE_TLS', 'true').lower() == 'true'
    FROM_EMAIL = os.environ.get('FROM_EMAIL', 'noreply@whizrockpremier.co.nz')
    FROM_NAME = os.environ.get('FROM_NAME', 'Whizrock Premier')

    # Dashboard base URL used for links inside emails
    APP_URL = os.environ.get('APP_URL', 'http://localhost:3000')

    # Business Settings
    GST_RATE = 0.15
    QUOTE_VALIDITY_DAYS = 30
    WARRANTY_PERIOD_MONTHS = 12
    DEFAULT_PRICING_TIER = 'Retail'
    DEFAULT_MARKUP_PERCENT = 37.5
    DEFAULT_LABOUR_RATE_PER_SQM = 3.00
    DEFAULT_WASTE_PERCENT = 10

    COMPANY_INFO = {
        'name': os.environ.get('COMPANY_NAME', 'Premier Insulation'),
        'address': os.environ.get('COMPANY_ADDRESS', 'West Auckland - Rodney'),
        'phone': os.environ.get('COMPANY_PHONE', '0800 PREMIER'),
        'email': os.environ.get('COMPANY_EMAIL', 'quotes@premierinsulation.co.nz'),
        'website': os.environ.get('COMPANY_WEBSITE', 'www.premierinsulation.co.nz'),
    }

    # Logging Configuration
    LOG_LEVEL = os.environ.get('LOG_LEVEL', 'INFO')
    LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
    LOG_FILE = os.environ.get('LOG_FILE', 'app.log')
    LOG_DIR = os.environ.get('LOG_DIR', 'logs')

    # Seed default team members and terms on startup
    SEED_DATABASE = os.environ.get('SEED_DATABASE', 'false').lower() == 'true'

    PERMANENT_SESSION_LIFETIME = timedelta(days=7)


class DevelopmentConfig(Config):
    """Development-specific configuration"""
    DEBUG = True
    TESTING = False
    LOG_LEVEL = 'DEBUG'
    AUTO_CREATE_TABLES = True
    SEED_DATABASE = True
    # Allow all CORS in development
    CORS_ORIGINS = ['*']


class ProductionConfig(Config):
    """Production-specific configuration"""
    DEBUG = False
    TESTING = False
    CORS_ORIGINS = os.environ.get('CORS_ORIGINS', 'https://premier.whizrock.co.nz').split(',')
    PREFERRED_URL_SCHEME = 'https'
    SESSION_COOKIE_SECURE = True
    SESSION_COOKIE_HTTPONLY = True
    SESSION_COOKIE_SAMESITE = 'Lax'


class TestingConfig(Config):
    """Testing-specific configuration"""
    DEBUG = True
    TESTING = True
    DATABASE_URL = 'sqlite://'
    AUTO_CREATE_TABLES = True
    SQLALCHEMY_ENGINE_OPTIONS = {}
    SEED_DATABASE = False
    API_KEY = None
    # Never talk to a real mail server from tests
    SMTP_HOST = ''
    SMTP_USER = ''
    LOG_LEVEL = 'WARNING'
    LOG_DIR = os.environ.get('TEST_LOG_DIR', 'logs')


# Configuration selector
config_by_name = {
    'development': DevelopmentConfig,
    'production': ProductionConfig,
    'testing': TestingConfig,
    'default': DevelopmentConfig,
}


def get_config(name=None):
    """Get configuration by name, falling back to the FLASK_ENV environment variable"""
    env = name or os.environ.get('FLASK_ENV', 'development')
    return config_by_name.get(env, DevelopmentConfig)


def validate_config(config_class):
    """
    Check that the settings a given environment depends on are present

    Raises:
        RuntimeError: If production is missing DATABASE_URL
    """
    if config_class is ProductionConfig and not os.environ.get('DATABASE_URL'):
        raise RuntimeError(
            "DATABASE_URL environment variable is required in production"
        )
    return True
