"""User endpoint tests: envelope, registration, login and profile."""

from api.utils.auth import decode_access_token
from conftest import TEST_PASSWORD, register

PHONE = "13800138000"


class TestRegisterAndLogin:

    def test_register_returns_user_and_token(self, client):
        body = register(client)
        assert body["code"] == 200
        user = body["data"]["user"]
        assert user["username"] == "trader1"
        assert user["phone"] == PHONE
        assert "password" not in user
        assert decode_access_token(body["data"]["token"]).user_id == user["id"]

    def test_duplicate_phone_is_conflict(self, client):
        register(client)
        body = register(client, username="trader2")
        assert body["code"] == 400
        assert body["data"] == {"field": "phone"}

    def test_validation_errors_use_envelope(self, client):
        body = register(client, phone="123")
        assert body["code"] == 400
        assert body["data"] is None

    def test_missing_fields(self, client):
        response = client.post("/api/user/register", json={})
        assert response.status_code == 200
        assert response.json()["code"] == 400

    def test_wrong_type_is_bad_request(self, client):
        response = client.post("/api/user/register", json={"username": ["x"]})
        assert response.status_code == 200
        assert response.json()["code"] == 400

    def test_login(self, client, registered_user):
        response = client.post("/api/user/login", json={"phone": PHONE, "password": TEST_PASSWORD})
        body = response.json()
        assert body["code"] == 200
        assert body["data"]["user"]["id"] == registered_user["id"]
        assert body["data"]["token"]

    def test_login_failures_are_indistinguishable(self, client, registered_user):
        wrong = client.post("/api/user/login", json={"phone": PHONE, "password": "wrongpass"}).json()
        unknown = client.post("/api/user/login", json={"phone": "13900139000", "password": TEST_PASSWORD}).json()
        assert wrong["code"] == unknown["code"] == 401
        assert wrong["message"] == unknown["message"]


class TestVerificationCodes:

    def test_send_code_mock_mode(self, client):
        body = client.post("/api/user/send-code", json={"phone": PHONE}).json()
        assert body["code"] == 200
        assert "123456" in body["message"]

    def test_send_code_requires_phone(self, client):
        assert client.post("/api/user/send-code", json={}).json()["code"] == 400
        assert client.post("/api/user/send-code", json={"phone": "12345"}).json()["code"] == 400

    def test_quick_register(self, client):
        client.post("/api/user/send-code", json={"phone": PHONE})
        body = client.post("/api/user/quick-register", json={"phone": PHONE, "code": "123456"}).json()
        assert body["code"] == 200
        assert body["data"]["user"]["username"].startswith("trader_")

        login = client.post("/api/user/login", json={"phone": PHONE, "password": "123456"}).json()
        assert login["code"] == 200

    def test_quick_register_code_is_single_use(self, client):
        client.post("/api/user/send-code", json={"phone": PHONE})
        client.post("/api/user/quick-register", json={"phone": PHONE, "code": "123456"})
        body = client.post("/api/user/quick-register", json={"phone": PHONE, "code": "123456"}).json()
        assert body["code"] == 400

    def test_quick_register_without_code_request(self, client):
        body = client.post("/api/user/quick-register", json={"phone": PHONE, "code": "123456"}).json()
        assert body["code"] == 400


class TestProfile:

    def test_info(self, client, registered_user, auth_headers):
        body = client.get("/api/user/info", headers=auth_headers).json()
        assert body["code"] == 200
        assert body["data"]["id"] == registered_user["id"]
        assert body["data"]["createdAt"]

    def test_change_username(self, client, auth_headers):
        body = client.put("/api/user/username", json={"username": "renamed"}, headers=auth_headers).json()
        assert body["code"] == 200
        assert body["data"]["username"] == "renamed"

    def test_change_username_too_long(self, client, auth_headers):
        body = client.put("/api/user/username", json={"username": "x" * 21}, headers=auth_headers).json()
        assert body["code"] == 400

    def test_change_password(self, client, auth_headers):
        body = client.put(
            "/api/user/password",
            json={"oldPassword": TEST_PASSWORD, "newPassword": "newpass1"},
            headers=auth_headers,
        ).json()
        assert body["code"] == 200

        login = client.post("/api/user/login", json={"phone": PHONE, "password": "newpass1"}).json()
        assert login["code"] == 200

    def test_change_password_wrong_old(self, client, auth_headers):
        body = client.put(
            "/api/user/password",
            json={"old_password": "wrongpass", "new_password": "newpass1"},
            headers=auth_headers,
        ).json()
        assert body["code"] == 401

    def test_logout_acknowledges(self, client, auth_headers):
        assert client.post("/api/user/logout", headers=auth_headers).json()["code"] == 200
        # Tokens are stateless and stay valid until they expire
        assert client.get("/api/user/info", headers=auth_headers).json()["code"] == 200


def test_root_and_health(client):
    assert client.get("/").json()["data"]["status"] == "running"
    health = client.get("/healthz").json()["data"]
    assert health["database"]["status"] == "healthy"
    assert health["sms"]["mock_mode"] is True
