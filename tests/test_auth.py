import pytest

from healthconnect.core.config import settings
from healthconnect.core.security import UserRole

# Test data
test_user_data = {
    "email": "test@example.com",
    "password": "TestPassword123",
    "role": "patient",
    "first_name": "Test",
    "last_name": "User"
}

test_login_data = {
    "email": "test@example.com",
    "password": "TestPassword123"
}

class TestAuthentication:

    def test_register_user(self, client):
        """Test user registration."""
        response = client.post("/api/v1/auth/register", json=test_user_data)
        assert response.status_code == 201

        data = response.json()
        assert data["success"] is True
        assert data["user"]["email"] == test_user_data["email"]
        assert data["user"]["role"] == test_user_data["role"]
        assert data["token"]
        assert "password" not in data["user"]
        assert "password_hash" not in data["user"]

    def test_register_defaults_to_patient(self, client):
        data = {k: v for k, v in test_user_data.items() if k != "role"}
        response = client.post("/api/v1/auth/register", json=data)
        assert response.status_code == 201
        assert response.json()["user"]["role"] == "patient"

    def test_register_duplicate_email(self, client):
        """Test registration with duplicate email."""
        client.post("/api/v1/auth/register", json=test_user_data)

        response = client.post("/api/v1/auth/register", json=test_user_data)
        assert response.status_code == 400
        assert response.json()["success"] is False
        assert "already registered" in response.json()["message"]

    def test_register_invalid_password(self, client):
        """Test registration with invalid password."""
        invalid_data = test_user_data.copy()
        invalid_data["password"] = "weak"

        response = client.post("/api/v1/auth/register", json=invalid_data)
        assert response.status_code == 400
        assert "password" in response.json()["message"]

    def test_register_missing_field(self, client):
        invalid_data = {k: v for k, v in test_user_data.items() if k != "email"}

        response = client.post("/api/v1/auth/register", json=invalid_data)
        assert response.status_code == 400
        assert response.json()["success"] is False

    def test_register_admin_refused(self, client):
        admin_data = dict(test_user_data, role="admin")

        response = client.post("/api/v1/auth/register", json=admin_data)
        assert response.status_code == 400

    def test_register_is_rate_limited(self, client, monkeypatch):
        monkeypatch.setattr(settings, "RATE_LIMIT_REQUESTS", 2)

        for i in range(2):
            data = dict(test_user_data, email=f"user{i}@example.com")
            assert client.post("/api/v1/auth/register", json=data).status_code == 201

        data = dict(test_user_data, email="user9@example.com")
        response = client.post("/api/v1/auth/register", json=data)
        assert response.status_code == 429

    def test_login_success(self, client):
        """Test successful login."""
        client.post("/api/v1/auth/register", json=test_user_data)

        response = client.post("/api/v1/auth/login", json=test_login_data)
        assert response.status_code == 200

        data = response.json()
        assert data["success"] is True
        assert "token" in data
        assert "refresh_token" in data
        assert data["token_type"] == "bearer"
        assert data["user"]["email"] == test_user_data["email"]

    def test_login_invalid_credentials(self, client):
        """Test login with invalid credentials."""
        invalid_login = {
            "email": "nonexistent@example.com",
            "password": "wrongpassword"
        }

        response = client.post("/api/v1/auth/login", json=invalid_login)
        assert response.status_code == 401

    def test_login_wrong_password(self, client):
        """Test login with wrong password."""
        client.post("/api/v1/auth/register", json=test_user_data)

        wrong_login = test_login_data.copy()
        wrong_login["password"] = "wrongpassword"

        response = client.post("/api/v1/auth/login", json=wrong_login)
        assert response.status_code == 401

    def test_login_locks_account_after_repeated_failures(self, client, monkeypatch):
        monkeypatch.setattr(settings, "MAX_FAILED_LOGINS", 3)
        client.post("/api/v1/auth/register", json=test_user_data)

        wrong_login = dict(test_login_data, password="wrongpassword")
        for _ in range(3):
            assert client.post("/api/v1/auth/login", json=wrong_login).status_code == 401

        # Even the right password is refused while locked
        response = client.post("/api/v1/auth/login", json=test_login_data)
        assert response.status_code == 401
        assert "locked" in response.json()["message"]

    def test_login_deactivated_user(self, client, make_user):
        user = make_user(UserRole.PATIENT, is_active=False)

        response = client.post(
            "/api/v1/auth/login",
            json={"email": user.email, "password": "TestPassword123"}
        )
        assert response.status_code == 401

    def test_get_current_user(self, client):
        """Test getting current user info."""
        client.post("/api/v1/auth/register", json=test_user_data)
        login_response = client.post("/api/v1/auth/login", json=test_login_data)

        token = login_response.json()["token"]
        headers = {"Authorization": f"Bearer {token}"}

        response = client.get("/api/v1/auth/me", headers=headers)
        assert response.status_code == 200

        data = response.json()
        assert data["user"]["email"] == test_user_data["email"]

    def test_get_current_user_with_registration_token(self, client):
        token = client.post("/api/v1/auth/register", json=test_user_data).json()["token"]

        response = client.get("/api/v1/auth/me", headers={"Authorization": f"Bearer {token}"})
        assert response.status_code == 200

    def test_get_current_user_invalid_token(self, client):
        """Test get current user with invalid token."""
        headers = {"Authorization": "Bearer invalid_token"}

        response = client.get("/api/v1/auth/me", headers=headers)
        assert response.status_code == 401
        assert response.json()["success"] is False

    def test_get_current_user_without_token(self, client):
        response = client.get("/api/v1/auth/me")
        assert response.status_code == 401
        assert response.headers["WWW-Authenticate"] == "Bearer"

    def test_refresh_token_is_not_an_access_token(self, client):
        client.post("/api/v1/auth/register", json=test_user_data)
        refresh_token = client.post("/api/v1/auth/login", json=test_login_data).json()["refresh_token"]

        response = client.get("/api/v1/auth/me", headers={"Authorization": f"Bearer {refresh_token}"})
        assert response.status_code == 401

    def test_refresh_token(self, client):
        """Test token refresh."""
        client.post("/api/v1/auth/register", json=test_user_data)
        login_response = client.post("/api/v1/auth/login", json=test_login_data)

        refresh_token = login_response.json()["refresh_token"]

        response = client.post(
            "/api/v1/auth/refresh",
            json={"refresh_token": refresh_token}
        )
        assert response.status_code == 200

        data = response.json()
        assert "token" in data
        assert data["refresh_token"] != refresh_token

        # The old refresh token was rotated out
        reused = client.post("/api/v1/auth/refresh", json={"refresh_token": refresh_token})
        assert reused.status_code == 401

    def test_refresh_invalid_token(self, client):
        """Test refresh with invalid token."""
        response = client.post(
            "/api/v1/auth/refresh",
            json={"refresh_token": "invalid_token"}
        )
        assert response.status_code == 401

    def test_logout(self, client):
        """Test user logout."""
        client.post("/api/v1/auth/register", json=test_user_data)
        login_response = client.post("/api/v1/auth/login", json=test_login_data)

        refresh_token = login_response.json()["refresh_token"]
        headers = {"Authorization": f"Bearer {login_response.json()['token']}"}

        response = client.post(
            "/api/v1/auth/logout",
            json={"refresh_token": refresh_token},
            headers=headers
        )
        assert response.status_code == 200
        assert response.json()["success"] is True

        # Both tokens stop working
        assert client.get("/api/v1/auth/me", headers=headers).status_code == 401
        assert client.post(
            "/api/v1/auth/refresh", json={"refresh_token": refresh_token}
        ).status_code == 401

    def test_logout_without_credentials(self, client):
        response = client.post("/api/v1/auth/logout")
        assert response.status_code == 200

if __name__ == "__main__":
    pytest.main([__file__])
