"""End-to-end tests for the profile routes."""

import pytest

REGISTER_BODY = {
    "firstName": "Grace",
    "lastName": "Hopper",
    "email": "grace@example.com",
    "password": "cobol-forever",
}


@pytest.fixture
def token(client):
    response = client.post("/api/auth/register", json=REGISTER_BODY)
    assert response.status_code == 201, response.text
    return response.json()["token"]


@pytest.fixture
def headers(token):
    return {"Authorization": f"Bearer {token}"}


class TestReadProfile:

    def test_returns_current_user(self, client, headers):
        response = client.get("/api/user/profile", headers=headers)
        assert response.status_code == 200
        body = response.json()
        assert body["email"] == "grace@example.com"
        assert body["firstName"] == "Grace"
        assert body["currency"] == "USD"
        assert body["profileSetup"] is False
        assert "hashedPassword" not in body

    def test_lowercase_bearer_scheme(self, client, token):
        response = client.get("/api/user/profile", headers={"Authorization": f"bearer {token}"})
        assert response.status_code == 200


class TestUpdateProfile:

    def test_role_selection(self, client, headers):
        response = client.put("/api/user/profile", headers=headers,
                              json={"role": "business", "businessName": "Hopper & Co", "yearsInBusiness": 12})
        assert response.status_code == 200
        body = response.json()
        assert body["message"] == "Profile updated successfully"
        assert body["user"]["role"] == "business"
        assert body["user"]["businessName"] == "Hopper & Co"
        assert body["user"]["yearsInBusiness"] == 12

    def test_protected_fields_ignored(self, client, headers):
        response = client.put("/api/user/profile", headers=headers,
                              json={"email": "other@example.com", "isActive": False, "city": "Arlington"})
        assert response.status_code == 200
        assert response.json()["user"]["email"] == "grace@example.com"
        assert client.get("/api/user/profile", headers=headers).status_code == 200

    def test_nothing_to_update(self, client, headers):
        response = client.put("/api/user/profile", headers=headers, json={"email": "other@example.com"})
        assert response.status_code == 400
        assert response.json()["message"] == "No valid fields to update"

    @pytest.mark.parametrize("field", ["firstName", "lastName", "currency", "profileSetup", "organicCertified"])
    def test_null_for_required_column(self, client, headers, field):
        response = client.put("/api/user/profile", headers=headers, json={field: None})
        assert response.status_code == 400
        assert response.json()["details"][0]["field"] == field
        assert client.get("/api/user/profile", headers=headers).json()["firstName"] == "Grace"

    def test_null_clears_optional_field(self, client, headers):
        client.put("/api/user/profile", headers=headers, json={"city": "Arlington"})
        response = client.put("/api/user/profile", headers=headers, json={"city": None})
        assert response.status_code == 200
        assert response.json()["user"]["city"] is None

    def test_invalid_role(self, client, headers):
        response = client.put("/api/user/profile", headers=headers, json={"role": "admin"})
        assert response.status_code == 400

    def test_requires_token(self, client):
        assert client.put("/api/user/profile", json={"city": "Arlington"}).status_code == 401


class TestSessions:

    def test_lists_active_sessions(self, client, token, headers):
        client.post("/api/auth/login", json={"email": "grace@example.com", "password": "cobol-forever"})
        response = client.get("/api/user/sessions", headers=headers)
        assert response.status_code == 200
        sessions = response.json()
        assert len(sessions) == 2
        assert [entry["current"] for entry in sessions].count(True) == 1
        assert all("token" not in entry for entry in sessions)
        assert sessions[0]["userAgent"] == "testclient"


class TestChangePassword:

    def test_signs_out_everywhere(self, client, headers):
        response = client.put("/api/user/password", headers=headers,
                              json={"currentPassword": "cobol-forever", "newPassword": "flow-matic-1959"})
        assert response.status_code == 200
        assert response.json()["message"] == "Password changed; 1 session(s) signed out"

        assert client.get("/api/user/profile", headers=headers).status_code == 403
        old_login = client.post("/api/auth/login", json={"email": "grace@example.com", "password": "cobol-forever"})
        assert old_login.status_code == 401
        new_login = client.post("/api/auth/login", json={"email": "grace@example.com", "password": "flow-matic-1959"})
        assert new_login.status_code == 200

    def test_wrong_current_password(self, client, headers):
        response = client.put("/api/user/password", headers=headers,
                              json={"currentPassword": "nope-nope", "newPassword": "flow-matic-1959"})
        assert response.status_code == 401


class TestDeactivate:

    def test_account_is_closed(self, client, headers):
        assert client.delete("/api/user/profile", headers=headers).status_code == 204
        assert client.get("/api/user/profile", headers=headers).status_code == 403
        login = client.post("/api/auth/login", json={"email": "grace@example.com", "password": "cobol-forever"})
        assert login.status_code == 401


def test_root(client):
    assert client.get("/").json()["status"] == "healthy"
