"""
Tests for health check endpoints
"""
import pytest
import time
from unittest.mock import Mock, patch
from health_checks import (
    get_system_metrics,
    get_uptime,
    check_database,
    check_email,
    SERVICE_NAME,
)


@pytest.mark.unit
class TestSystemMetrics:
    """Tests for process metrics collection"""

    def test_metrics_have_cpu_and_memory(self):
        """Test that process metrics include CPU and memory figures"""
        metrics = get_system_metrics()
        assert isinstance(metrics['cpu_percent'], (int, float))
        assert metrics['memory_mb'] > 0
        assert 'memory_percent' in metrics
        assert metrics['threads'] >= 1

    @patch('health_checks.psutil.Process')
    def test_metrics_error_returns_empty(self, mock_process):
        """Test that a psutil failure yields an empty dict"""
        mock_process.side_effect = Exception("Access denied")
        assert get_system_metrics() == {}


@pytest.mark.unit
class TestUptime:
    """Tests for uptime calculation"""

    def test_uptime_fields(self):
        """Test that uptime reports seconds, minutes, hours and start time"""
        uptime = get_uptime()
        assert set(uptime) == {'uptime_seconds', 'uptime_minutes', 'uptime_hours', 'started_at'}
        assert uptime['uptime_seconds'] >= 0

    def test_uptime_increases(self):
        """Test that uptime grows between calls"""
        first = get_uptime()
        time.sleep(0.05)
        assert get_uptime()['uptime_seconds'] > first['uptime_seconds']


@pytest.mark.unit
class TestDependencyChecks:
    """Tests for the database and email checks"""

    @patch('health_checks.check_db_connection')
    def test_database_healthy(self, mock_check):
        """Test a reachable database"""
        assert check_database() == {'healthy': True}
        mock_check.assert_called_once()

    @patch('health_checks.check_db_connection')
    def test_database_unhealthy(self, mock_check):
        """Test that a connection error is reported, not raised"""
        mock_check.side_effect = Exception("could not connect to server")
        result = check_database()
        assert result['healthy'] is False
        assert 'could not connect' in result['error']

    def test_email_configured(self):
        """Test email check with an SMTP host"""
        app = Mock()
        app.config = {'SMTP_HOST': 'smtp.example.com', 'FROM_EMAIL': 'noreply@example.com'}
        assert check_email(app) == {'configured': True, 'from_email': 'noreply@example.com'}

    def test_email_not_configured(self):
        """Test email check without an SMTP host"""
        app = Mock()
        app.config = {'SMTP_HOST': ''}
        assert check_email(app)['configured'] is False


@pytest.mark.integration
class TestHealthEndpoints:
    """Integration tests for /api/health and /api/ping"""

    def test_health_endpoint(self, client):
        """Test that /api/health reports a healthy service"""
        response = client.get('/api/health')
        assert response.status_code == 200

        data = response.get_json()
        assert data['status'] == 'healthy'
        assert data['service'] == SERVICE_NAME
        assert data['checks']['database']['healthy'] is True
        assert data['checks']['email']['configured'] is False
        assert 'uptime' in data
        assert 'python_version' in data

    def test_health_endpoint_database_down(self, client):
        """Test that /api/health returns 503 when the database is unreachable"""
        with patch('health_checks.check_db_connection', side_effect=Exception("timeout")):
            response = client.get('/api/health')

        assert response.status_code == 503
        assert response.get_json()['status'] == 'unhealthy'

    def test_ping_endpoint(self, client):
        """Test /api/ping"""
        response = client.get('/api/ping')
        assert response.status_code == 200
        assert response.data == b'pong'
