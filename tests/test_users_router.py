"""Integration tests for /users endpoints (app/routers/users.py)"""
from unittest.mock import patch


class TestProfile:
    def test_get_me(self, client_with_student):
        client, mock_db, student = client_with_student

        response = client.get("/users/me")

        assert response.status_code == 200
        data = response.json()
        assert data["email"] == "student@test.com"
        assert data["role"] == "student"
        assert "password_hash" not in data

    def test_update_display_name(self, client_with_student):
        client, mock_db, student = client_with_student

        response = client.patch("/users/me", json={"display_name": "Ana María"})

        assert response.status_code == 200
        assert student.display_name == "Ana María"
        mock_db.commit.assert_called_once()

    def test_new_password_requires_current(self, client_with_student):
        client, mock_db, student = client_with_student

        response = client.patch("/users/me", json={"new_password": "newpassword123"})

        assert response.status_code == 400

    def test_wrong_current_password_returns_401(self, client_with_student):
        client, mock_db, student = client_with_student

        with patch("app.routers.users.verify_password", return_value=False):
            response = client.patch("/users/me", json={
                "current_password": "wrong",
                "new_password": "newpassword123",
            })

        assert response.status_code == 401
        mock_db.commit.assert_not_called()

    def test_change_password(self, client_with_student):
        client, mock_db, student = client_with_student

        with patch("app.routers.users.verify_password", return_value=True):
            with patch("app.routers.users.hash_password", return_value="new_hash"):
                response = client.patch("/users/me", json={
                    "current_password": "old-password",
                    "new_password": "newpassword123",
                })

        assert response.status_code == 200
        assert student.password_hash == "new_hash"


class TestHeartbeat:
    def test_heartbeat_records_last_seen(self, client_with_student):
        client, mock_db, student = client_with_student

        response = client.post("/users/me/heartbeat")

        assert response.status_code == 200
        assert student.last_seen_at is not None
        assert "last_seen_at" in response.json()
        mock_db.commit.assert_called_once()
