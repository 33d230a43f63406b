from fintools.core.security import create_access_token
from tests.helpers import API, money


class TestRegisterAndLogin:
    def test_register_returns_token_and_founder_role(self, client):
        resp = client.post(f"{API}/auth/register", json={
            "email": "new@example.com", "password": "secret123", "name": "New Founder",
        })
        assert resp.status_code == 201
        body = resp.json()
        assert body["success"] is True
        assert body["tokenType"] == "bearer"

        me = client.get(f"{API}/auth/me", headers={"Authorization": f"Bearer {body['token']}"})
        assert me.status_code == 200
        assert me.json()["data"]["role"] == "founder"
        assert me.json()["data"]["userId"].startswith("FND-")

    def test_duplicate_email_is_rejected(self, client, founder):
        resp = client.post(f"{API}/auth/register", json={
            "email": founder.email, "password": "secret123", "name": "Again",
        })
        assert resp.status_code == 400
        assert resp.json() == {"success": False, "error": "User already exists"}

    def test_short_password_lists_field_errors(self, client):
        resp = client.post(f"{API}/auth/register", json={
            "email": "x@example.com", "password": "123", "name": "X",
        })
        assert resp.status_code == 400
        body = resp.json()
        assert body["success"] is False
        assert isinstance(body["error"], list)
        assert body["error"][0].startswith("password:")

    def test_login_with_valid_credentials(self, client, founder):
        resp = client.post(f"{API}/auth/login", json={"email": founder.email, "password": "secret123"})
        assert resp.status_code == 200
        assert resp.json()["token"]

    def test_login_with_wrong_password(self, client, founder):
        resp = client.post(f"{API}/auth/login", json={"email": founder.email, "password": "wrong-pass"})
        assert resp.status_code == 401
        assert resp.json() == {"success": False, "error": "Invalid credentials"}


class TestBearerAuth:
    def test_missing_token(self, client):
        resp = client.get(f"{API}/expenses")
        assert resp.status_code == 401
        assert resp.json()["error"] == "No token, authorization denied"

    def test_garbage_token(self, client):
        resp = client.get(f"{API}/expenses", headers={"Authorization": "Bearer not-a-jwt"})
        assert resp.status_code == 401
        assert resp.json()["error"] == "Token is not valid"

    def test_token_for_unknown_user(self, client, db_session):
        token = create_access_token({"sub": "ghost@example.com"})
        resp = client.get(f"{API}/auth/me", headers={"Authorization": f"Bearer {token}"})
        assert resp.status_code == 401
        assert resp.json()["error"] == "User not found"


class TestFundContribution:
    def test_founder_updates_own_contribution(self, client, founder, founder_headers):
        resp = client.put(
            f"{API}/auth/update-contribution/{founder.id}",
            json={"fundContribution": "7500.50"},
            headers=founder_headers,
        )
        assert resp.status_code == 200
        assert money(resp.json()["data"]["fundContribution"]) == money("7500.50")

    def test_founder_cannot_update_someone_else(self, client, second_founder, founder_headers):
        resp = client.put(
            f"{API}/auth/update-contribution/{second_founder.id}",
            json={"fundContribution": "1"},
            headers=founder_headers,
        )
        assert resp.status_code == 403
        assert resp.json()["success"] is False

    def test_admin_updates_anyone(self, client, founder, admin_headers):
        resp = client.put(
            f"{API}/auth/update-contribution/{founder.id}",
            json={"fundContribution": "100"},
            headers=admin_headers,
        )
        assert resp.status_code == 200

    def test_negative_amount_is_invalid(self, client, founder, founder_headers):
        resp = client.put(
            f"{API}/auth/update-contribution/{founder.id}",
            json={"fundContribution": "-5"},
            headers=founder_headers,
        )
        assert resp.status_code == 400


def test_root_message(client):
    resp = client.get("/")
    assert resp.status_code == 200
    assert "Fintools" in resp.json()["message"]
