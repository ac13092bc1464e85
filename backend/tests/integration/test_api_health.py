"""
Tests for health check endpoint.
"""


class TestHealthEndpoint:
    """Tests for GET /api/health endpoint."""

    def test_health_returns_200(self, client):
        """GET /api/health should return 200 OK."""
        response = client.get('/api/health')
        assert response.status_code == 200

    def test_health_returns_ok_status(self, client):
        """GET /api/health should report status ok."""
        data = client.get('/api/health').get_json()
        assert data['status'] == 'ok'
