"""
Tests for auth and user profile API endpoints
"""
from datetime import datetime, timedelta, timezone

from jose import jwt

from ecofinance.config import get_settings
from ecofinance.infrastructure.db.models import User


def _register(client, email="new@example.com", password="secret1"):
    return client.post(
        "/api/auth/register",
        json={"email": email, "password": password, "firstName": "Иван", "lastName": "Петров"},
    )


class TestRegisterLogin:
    def test_register_returns_token_and_user(self, client, email_sender):
        response = _register(client)

        assert response.status_code == 200
        data = response.json()
        assert data["user"]["email"] == "new@example.com"
        assert data["user"]["firstName"] == "Иван"
        assert data["user"]["lastName"] == "Петров"
        assert "password" not in data["user"]
        assert data["token"]
        assert len(email_sender.welcomes) == 1

        profile = client.get("/api/user/profile", headers={"Authorization": f"Bearer {data['token']}"})
        assert profile.status_code == 200
        assert profile.json()["id"] == data["user"]["id"]

    def test_token_valid_for_seven_days(self, client):
        token = _register(client).json()["token"]
        settings = get_settings()
        claims = jwt.decode(token, settings.SECRET_KEY, algorithms=[settings.JWT_ALGORITHM])
        assert claims["exp"] - claims["iat"] == 7 * 24 * 3600

    def test_register_twice_same_email(self, client, db_session):
        assert _register(client).status_code == 200
        response = _register(client)

        assert response.status_code == 400
        assert response.json()["message"] == "Пользователь с таким email уже существует"
        assert db_session.query(User).filter(User.email == "new@example.com").count() == 1

    def test_register_validation_message(self, client):
        response = _register(client, password="123")
        assert response.status_code == 400
        assert response.json()["message"] == "Пароль должен содержать минимум 6 символов"

        response = _register(client, email="not-an-email")
        assert response.status_code == 400
        assert response.json()["message"] == "Неверный формат email"

    def test_register_name_too_long(self, client, db_session):
        response = client.post(
            "/api/auth/register",
            json={"email": "new@example.com", "password": "secret1", "firstName": "И" * 256, "lastName": "Петров"},
        )
        assert response.status_code == 400
        assert response.json()["message"] == "Значение не может быть длиннее 255 символов"
        assert db_session.query(User).count() == 0

    def test_login(self, client, user):
        response = client.post("/api/auth/login", json={"email": user.email, "password": "password123"})
        assert response.status_code == 200
        assert response.json()["user"]["id"] == user.id

    def test_login_failures_are_uniform(self, client, user):
        wrong_password = client.post("/api/auth/login", json={"email": user.email, "password": "wrong-pass"})
        unknown_email = client.post("/api/auth/login", json={"email": "x@example.com", "password": "password123"})

        assert wrong_password.status_code == 401
        assert unknown_email.status_code == 401
        assert wrong_password.json() == unknown_email.json() == {"message": "Неверный email или пароль"}


class TestBearerAuth:
    def test_missing_token_is_401(self, client):
        response = client.get("/api/user/profile")
        assert response.status_code == 401
        assert response.json()["message"] == "Токен доступа отсутствует"

    def test_garbage_token_is_403(self, client):
        response = client.get("/api/user/profile", headers={"Authorization": "Bearer not.a.jwt"})
        assert response.status_code == 403

    def test_expired_token_is_403(self, client, user):
        settings = get_settings()
        past = datetime.now(timezone.utc) - timedelta(days=8)
        token = jwt.encode(
            {"sub": str(user.id), "email": user.email, "iat": past, "exp": past + timedelta(days=7)},
            settings.SECRET_KEY,
            algorithm=settings.JWT_ALGORITHM,
        )
        response = client.get("/api/user/profile", headers={"Authorization": f"Bearer {token}"})
        assert response.status_code == 403

    def test_wrong_signature_is_403(self, client, user):
        token = jwt.encode({"sub": str(user.id)}, "another-secret", algorithm="HS256")
        response = client.get("/api/user/profile", headers={"Authorization": f"Bearer {token}"})
        assert response.status_code == 403


class TestPasswordRecovery:
    def test_forgot_password_does_not_disclose_accounts(self, client, user, email_sender):
        known = client.post("/api/auth/forgot-password", json={"email": user.email})
        unknown = client.post("/api/auth/forgot-password", json={"email": "ghost@example.com"})

        assert known.status_code == unknown.status_code == 200
        assert known.json() == unknown.json()
        assert [m["to"] for m in email_sender.password_resets] == [user.email]

    def test_reset_password_flow(self, client, user, email_sender):
        client.post("/api/auth/forgot-password", json={"email": user.email})
        token = email_sender.password_resets[0]["token"]

        response = client.post("/api/auth/reset-password", json={"token": token, "newPassword": "fresh-pass"})
        assert response.status_code == 200

        login = client.post("/api/auth/login", json={"email": user.email, "password": "fresh-pass"})
        assert login.status_code == 200

        reused = client.post("/api/auth/reset-password", json={"token": token, "newPassword": "other-pass"})
        assert reused.status_code == 400


class TestProfile:
    def test_get_profile(self, client, user, auth_headers):
        response = client.get("/api/user/profile", headers=auth_headers)
        assert response.status_code == 200
        assert response.json() == {
            "id": user.id,
            "email": "anna@example.com",
            "firstName": "Анна",
            "lastName": "Иванова",
        }

    def test_patch_profile(self, client, auth_headers):
        response = client.patch("/api/user/profile", headers=auth_headers, json={"lastName": "Смирнова"})
        assert response.status_code == 200
        assert response.json()["lastName"] == "Смирнова"
        assert response.json()["firstName"] == "Анна"

    def test_patch_profile_email_taken(self, client, auth_headers, other_user):
        response = client.patch("/api/user/profile", headers=auth_headers, json={"email": other_user.email})
        assert response.status_code == 400

    def test_change_password(self, client, user, auth_headers):
        wrong = client.patch(
            "/api/user/password",
            headers=auth_headers,
            json={"currentPassword": "nope-nope", "newPassword": "newpass1"},
        )
        assert wrong.status_code == 400
        assert wrong.json()["message"] == "Неверный текущий пароль"

        ok = client.patch(
            "/api/user/password",
            headers=auth_headers,
            json={"currentPassword": "password123", "newPassword": "newpass1"},
        )
        assert ok.status_code == 200

        login = client.post("/api/auth/login", json={"email": user.email, "password": "newpass1"})
        assert login.status_code == 200

    def test_user_stats(self, client, auth_headers):
        client.post(
            "/api/transactions",
            headers=auth_headers,
            json={"type": "expense", "amount": "300", "category": "utilities", "date": "2024-01-15"},
        )
        response = client.get("/api/user/stats", headers=auth_headers)

        assert response.status_code == 200
        assert response.json() == {"totalTransactions": 1, "accountAge": 0, "ecoRating": "A"}
