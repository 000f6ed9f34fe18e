"""
Unit tests for the Kite login flow endpoints.
"""

from unittest.mock import AsyncMock, Mock

import pytest
from fastapi.testclient import TestClient

from src.api.dependencies.services import get_kite_client
from src.core.exceptions import AuthenticationError
from src.main import create_app
from src.services.kite.client import KiteSession

# ===== Fixtures =====


@pytest.fixture
def mock_kite():
    """Mock Kite client"""
    kite = Mock()
    kite.login_url = Mock(
        return_value="https://kite.zerodha.com/connect/login?v=3&api_key=test_key"
    )
    kite.generate_session = AsyncMock(
        return_value=KiteSession(access_token="tok_123", user_id="AB1234", user_name="Test User")
    )
    return kite


@pytest.fixture
def client(mock_kite):
    """Create test client with the Kite client overridden"""
    app = create_app()
    app.dependency_overrides[get_kite_client] = lambda: mock_kite
    return TestClient(app)


# ===== GET /api/kite/login-url =====


class TestLoginUrl:
    """Test the login URL endpoint"""

    def test_login_url(self, client):
        """Test URL carries the API key"""
        response = client.get("/api/kite/login-url")

        assert response.status_code == 200
        assert response.json() == {
            "login_url": "https://kite.zerodha.com/connect/login?v=3&api_key=test_key"
        }


# ===== POST /api/kite/session =====


class TestSession:
    """Test the request token exchange"""

    def test_session_created(self, client, mock_kite):
        """Test access token is returned"""
        response = client.post("/api/kite/session", json={"request_token": "req_abc"})

        assert response.status_code == 200
        assert response.json() == {
            "access_token": "tok_123",
            "user_id": "AB1234",
            "user_name": "Test User",
        }
        mock_kite.generate_session.assert_awaited_once_with("req_abc")

    def test_empty_request_token(self, client, mock_kite):
        """Test blank token is rejected before calling the broker"""
        response = client.post("/api/kite/session", json={"request_token": ""})

        assert response.status_code == 422
        mock_kite.generate_session.assert_not_called()

    def test_rejected_token(self, client, mock_kite):
        """Test broker rejection maps to 401"""
        mock_kite.generate_session.side_effect = AuthenticationError(
            "Token is invalid or has expired", kite_error_type="TokenException"
        )

        response = client.post("/api/kite/session", json={"request_token": "stale"})

        assert response.status_code == 401
        assert response.json()["detail"] == "Token is invalid or has expired"
