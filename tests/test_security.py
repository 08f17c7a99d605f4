"""
Tests for security middleware: API key guard, headers and JSON errors
"""
import pytest

from security import SecurityConfig


@pytest.mark.unit
class TestSecurityConfig:
    """Tests for secret key validation"""

    def test_generated_key_is_valid(self):
        """Test that generated keys pass validation"""
        key = SecurityConfig.generate_secret_key()

        assert len(key) == 64
        assert SecurityConfig.validate_secret_key(key)

    def test_short_key_is_rejected(self):
        """Test that short keys fail validation"""
        assert not SecurityConfig.validate_secret_key('abc123')

    def test_weak_key_is_rejected(self):
        """Test that keys containing common words fail validation"""
        assert not SecurityConfig.validate_secret_key('my-secret-key-for-the-premier-workflow-api')

    def test_ensure_secret_key_replaces_weak_key(self):
        """Test that a weak key is replaced with a generated one"""
        key = SecurityConfig.ensure_secret_key({'SECRET_KEY': 'dev'})

        assert key != 'dev'
        assert SecurityConfig.validate_secret_key(key)

    def test_ensure_secret_key_keeps_strong_key(self):
        """Test that a strong configured key is used as is"""
        key = 'a9f3c1e07b5d4f2e8c6a1b0d9e7f5c3a2b4d6e8f0a1c3e5'
        assert SecurityConfig.ensure_secret_key({'SECRET_KEY': key}) == key

    def test_check_api_key(self):
        """Test API key strength reporting"""
        assert SecurityConfig.check_api_key({'API_KEY': None}) is True
        assert SecurityConfig.check_api_key({'API_KEY': 'short'}) is False
        assert SecurityConfig.check_api_key({'API_KEY': SecurityConfig.generate_secret_key()}) is True


@pytest.mark.integration
class TestApiKey:
    """Tests for the X-API-Key guard"""

    def test_open_when_no_key_configured(self, client):
        """Test that requests pass when API_KEY is unset"""
        response = client.get('/api/tasks')

        assert response.status_code == 200

    def test_missing_key(self, app, client):
        """Test 401 when the header is missing"""
        app.config['API_KEY'] = 'k3y-for-tests'

        response = client.get('/api/tasks')

        assert response.status_code == 401
        assert response.get_json() == {'ok': False, 'error': 'API key required'}

    def test_wrong_key(self, app, client):
        """Test 403 when the header does not match"""
        app.config['API_KEY'] = 'k3y-for-tests'

        response = client.get('/api/tasks', headers={'X-API-Key': 'nope'})

        assert response.status_code == 403
        assert response.get_json()['error'] == 'Invalid API key'

    def test_matching_key(self, app, client):
        """Test that a matching header is accepted"""
        app.config['API_KEY'] = 'k3y-for-tests'

        response = client.get('/api/tasks', headers={'X-API-Key': 'k3y-for-tests'})

        assert response.status_code == 200

    def test_health_is_not_guarded(self, app, client):
        """Test that the health endpoints ignore the API key"""
        app.config['API_KEY'] = 'k3y-for-tests'

        assert client.get('/api/ping').status_code == 200


@pytest.mark.integration
class TestResponses:
    """Tests for security headers and JSON error bodies"""

    def test_security_headers(self, client):
        """Test that every response carries the security headers"""
        response = client.get('/api/ping')

        assert response.headers['X-Frame-Options'] == 'DENY'
        assert response.headers['X-Content-Type-Options'] == 'nosniff'
        assert 'Content-Security-Policy' in response.headers

    def test_unknown_route_is_json(self, client):
        """Test that 404s are JSON, not HTML"""
        response = client.get('/api/not-a-route')

        assert response.status_code == 404
        body = response.get_json()
        assert body['ok'] is False
        assert body['error'] == 'Not Found'

    def test_wrong_method_is_json(self, client):
        """Test that 405s are JSON"""
        response = client.get('/api/jobs/abc/complete')

        assert response.status_code == 405
        assert response.get_json()['error'] == 'Method Not Allowed'
