"""
Tests for configuration system
"""
import pytest
from config import (
    Config,
    DevelopmentConfig,
    ProductionConfig,
    TestingConfig,
    get_config,
    validate_config,
    _normalize_database_url,
)


@pytest.mark.unit
class TestBaseConfig:
    """Tests for base configuration"""

    def test_base_config_has_secret_key(self):
        """Test that base config has a secret key"""
        assert Config.SECRET_KEY

    def test_base_config_has_max_content_length(self):
        """Test that base config caps request bodies at 16MB"""
        assert Config.MAX_CONTENT_LENGTH == 16 * 1024 * 1024

    def test_base_config_has_cors_settings(self):
        """Test that base config has CORS settings including the API key header"""
        assert 'POST' in Config.CORS_METHODS
        assert 'X-API-Key' in Config.CORS_ALLOW_HEADERS

    def test_business_settings(self):
        """Test the quoting and warranty defaults"""
        assert Config.GST_RATE == 0.15
        assert Config.QUOTE_VALIDITY_DAYS == 30
        assert Config.WARRANTY_PERIOD_MONTHS == 12
        assert Config.DEFAULT_PRICING_TIER == 'Retail'
        assert Config.DEFAULT_MARKUP_PERCENT == 37.5
        assert Config.DEFAULT_LABOUR_RATE_PER_SQM == 3.00
        assert Config.DEFAULT_WASTE_PERCENT == 10

    def test_logging_settings(self):
        """Test logging defaults"""
        assert Config.LOG_LEVEL in ('DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL')
        assert Config.LOG_FILE
        assert '%(levelname)s' in Config.LOG_FORMAT

    def test_company_info(self):
        """Test company details used on quotes"""
        assert set(Config.COMPANY_INFO) == {'name', 'address', 'phone', 'email', 'website'}


@pytest.mark.unit
class TestEnvironmentConfigs:
    """Tests for environment-specific configuration"""

    def test_development_config(self):
        """Test development creates tables and seeds"""
        assert DevelopmentConfig.DEBUG is True
        assert DevelopmentConfig.LOG_LEVEL == 'DEBUG'
        assert DevelopmentConfig.AUTO_CREATE_TABLES is True
        assert DevelopmentConfig.SEED_DATABASE is True
        assert DevelopmentConfig.CORS_ORIGINS == ['*']

    def test_production_config(self):
        """Test production security settings"""
        assert ProductionConfig.DEBUG is False
        assert ProductionConfig.SESSION_COOKIE_SECURE is True
        assert ProductionConfig.PREFERRED_URL_SCHEME == 'https'

    def test_testing_config(self):
        """Test that testing uses in-memory SQLite and never sends email"""
        assert TestingConfig.TESTING is True
        assert TestingConfig.DATABASE_URL == 'sqlite://'
        assert TestingConfig.SMTP_HOST == ''
        assert TestingConfig.API_KEY is None
        assert TestingConfig.SEED_DATABASE is False


@pytest.mark.unit
class TestGetConfig:
    """Tests for configuration selection"""

    def test_by_name(self):
        assert get_config('production') is ProductionConfig
        assert get_config('testing') is TestingConfig

    def test_from_environment(self, monkeypatch):
        """Test FLASK_ENV is used when no name is given"""
        monkeypatch.setenv('FLASK_ENV', 'testing')
        assert get_config() is TestingConfig

    def test_unknown_falls_back_to_development(self):
        assert get_config('staging') is DevelopmentConfig


@pytest.mark.unit
class TestValidateConfig:
    """Tests for validate_config"""

    def test_production_requires_database_url(self, monkeypatch):
        """Test that production without DATABASE_URL refuses to start"""
        monkeypatch.delenv('DATABASE_URL', raising=False)
        with pytest.raises(RuntimeError, match='DATABASE_URL'):
            validate_config(ProductionConfig)

    def test_production_with_database_url(self, monkeypatch):
        monkeypatch.setenv('DATABASE_URL', 'postgresql://premier@db/premier')
        assert validate_config(ProductionConfig) is True

    def test_other_environments_pass(self, monkeypatch):
        monkeypatch.delenv('DATABASE_URL', raising=False)
        assert validate_config(DevelopmentConfig) is True
        assert validate_config(TestingConfig) is True


@pytest.mark.unit
class TestDatabaseUrl:
    """Tests for DATABASE_URL normalization"""

    def test_postgres_scheme_is_rewritten(self):
        assert _normalize_database_url('postgres://u:p@host/db') == 'postgresql://u:p@host/db'

    def test_other_urls_unchanged(self):
        assert _normalize_database_url('sqlite://') == 'sqlite://'
        assert _normalize_database_url(None) is None
