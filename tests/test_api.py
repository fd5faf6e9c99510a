"""
HTTP-level tests for the student auth routes.
"""

import sqlite3

import pytest

from auth.jwt import TokenIssuer
from conftest import signup_payload

SIGNUP = "/api/auth/student/signup"
LOGIN = "/api/auth/student/login"
ME = "/api/auth/student/me"
PROFILE = "/api/auth/student/profile"


def _bearer(token: str) -> dict:
    return {"Authorization": f"Bearer {token}"}


def _set_role(settings, email: str, role: str) -> None:
    db_path = settings.database_url.split(":///", 1)[1]
    with sqlite3.connect(db_path) as conn:
        conn.execute("UPDATE users SET role = ? WHERE email = ?", (role, email))


class TestSignupRoute:
    def test_created(self, client):
        resp = client.post(SIGNUP, json=signup_payload())
        assert resp.status_code == 201
        body = resp.json()
        assert body["success"] is True
        assert body["token"]
        user = body["user"]
        assert user["email"] == "ada@uni.edu"
        assert user["studentId"] == "S-1001"
        assert user["role"] == "student"
        assert "password" not in user and "passwordHash" not in user
        assert set(user) == {
            "id", "fullName", "email", "institutionName", "studentId",
            "department", "course", "role", "isVerified", "createdAt",
        }

    def test_mismatched_passwords(self, client):
        resp = client.post(
            SIGNUP, json=signup_payload(password="Abcd1234", confirmPassword="Abcd1235"),
        )
        assert resp.status_code == 400
        assert resp.json() == {"success": False, "message": "Passwords do not match"}
        login = client.post(LOGIN, json={"email": "ada@uni.edu", "password": "Abcd1234"})
        assert login.status_code == 401

    def test_missing_field(self, client):
        payload = signup_payload()
        del payload["course"]
        resp = client.post(SIGNUP, json=payload)
        assert resp.status_code == 400
        assert resp.json()["message"] == "All fields are required"

    def test_duplicate_email_case_insensitive(self, client):
        assert client.post(SIGNUP, json=signup_payload(email="A@x.com")).status_code == 201
        resp = client.post(SIGNUP, json=signup_payload(email="a@x.com", studentId="S-2"))
        assert resp.status_code == 400
        assert resp.json()["message"] == "User already exists with this email or student ID"

    def test_invalid_email(self, client):
        resp = client.post(SIGNUP, json=signup_payload(email="ada-at-uni"))
        assert resp.status_code == 400
        assert resp.json()["message"] == "Please provide a valid email"

    def test_display_name_email_rejected(self, client):
        resp = client.post(SIGNUP, json=signup_payload(email="Ada <ada@uni.edu>"))
        assert resp.status_code == 400
        assert resp.json()["message"] == "Please provide a valid email"
        login = client.post(LOGIN, json={"email": "ada@uni.edu", "password": "Abcd1234"})
        assert login.status_code == 401

    def test_malformed_body(self, client):
        resp = client.post(SIGNUP, json=signup_payload(fullName=["not", "a", "string"]))
        assert resp.status_code == 400
        assert resp.json() == {"success": False, "message": "Invalid request body"}


class TestLoginRoute:
    def test_round_trip_same_account(self, client):
        created = client.post(SIGNUP, json=signup_payload()).json()
        resp = client.post(LOGIN, json={"email": "Ada@Uni.edu", "password": "Abcd1234"})
        assert resp.status_code == 200
        assert resp.json()["user"]["id"] == created["user"]["id"]

    def test_no_enumeration_signal(self, client):
        client.post(SIGNUP, json=signup_payload())
        unknown = client.post(LOGIN, json={"email": "nobody@uni.edu", "password": "Abcd1234"})
        wrong = client.post(LOGIN, json={"email": "ada@uni.edu", "password": "Wrong1234"})
        assert unknown.status_code == wrong.status_code == 401
        assert unknown.json() == wrong.json() == {
            "success": False, "message": "Invalid credentials",
        }

    def test_missing_fields(self, client):
        resp = client.post(LOGIN, json={"email": "ada@uni.edu"})
        assert resp.status_code == 400
        assert resp.json()["message"] == "Please provide email and password"

    def test_wrong_role(self, client, settings):
        client.post(SIGNUP, json=signup_payload())
        _set_role(settings, "ada@uni.edu", "teacher")
        resp = client.post(LOGIN, json={"email": "ada@uni.edu", "password": "Abcd1234"})
        assert resp.status_code == 403
        assert resp.json()["message"] == "Not authorized as student"


class TestMeRoute:
    def test_token_resolves_to_own_account(self, client):
        a = client.post(SIGNUP, json=signup_payload()).json()
        b = client.post(
            SIGNUP, json=signup_payload(email="grace@uni.edu", studentId="S-2", fullName="Grace"),
        ).json()

        resp_a = client.get(ME, headers=_bearer(a["token"]))
        resp_b = client.get(ME, headers=_bearer(b["token"]))
        assert resp_a.status_code == resp_b.status_code == 200
        assert resp_a.json()["user"]["id"] == a["user"]["id"]
        assert resp_b.json()["user"]["id"] == b["user"]["id"]
        assert resp_a.json()["user"]["createdAt"]

    def test_missing_token(self, client):
        resp = client.get(ME)
        assert resp.status_code == 401
        assert resp.json()["success"] is False

    def test_bad_token(self, client):
        resp = client.get(ME, headers=_bearer("garbage"))
        assert resp.status_code == 401

    def test_expired_token(self, client, settings):
        created = client.post(SIGNUP, json=signup_payload()).json()
        stale = TokenIssuer(settings.jwt_secret, -1).create_token(created["user"]["id"])
        resp = client.get(ME, headers=_bearer(stale))
        assert resp.status_code == 401
        assert resp.json()["message"] == "Token has expired"

    def test_token_for_unknown_account(self, client, settings):
        token = TokenIssuer(settings.jwt_secret, 60).create_token(
            "00000000-0000-0000-0000-000000000000"
        )
        resp = client.get(ME, headers=_bearer(token))
        assert resp.status_code == 401
        assert resp.json()["message"] == "No user found with this id"

    def test_non_student_rejected_by_gate(self, client, settings):
        created = client.post(SIGNUP, json=signup_payload()).json()
        _set_role(settings, "ada@uni.edu", "admin")
        resp = client.get(ME, headers=_bearer(created["token"]))
        assert resp.status_code == 403
        assert resp.json()["message"] == "User role admin is not authorized to access this route"


class TestProfileRoute:
    def test_updates_mutable_fields_only(self, client):
        created = client.post(SIGNUP, json=signup_payload()).json()
        resp = client.put(
            PROFILE,
            headers=_bearer(created["token"]),
            json={
                "fullName": "Augusta Ada King",
                "course": "Engines",
                "email": "evil@uni.edu",
                "studentId": "S-666",
                "role": "admin",
                "id": "00000000-0000-0000-0000-000000000000",
            },
        )
        assert resp.status_code == 200
        user = resp.json()["user"]
        assert user["fullName"] == "Augusta Ada King"
        assert user["course"] == "Engines"
        assert user["department"] == "Mathematics"
        for key in ("id", "email", "studentId", "role"):
            assert user[key] == created["user"][key]

        me = client.get(ME, headers=_bearer(created["token"])).json()["user"]
        assert me["fullName"] == "Augusta Ada King"
        assert me["email"] == "ada@uni.edu"

    def test_too_long_field(self, client):
        created = client.post(SIGNUP, json=signup_payload()).json()
        resp = client.put(
            PROFILE, headers=_bearer(created["token"]), json={"department": "x" * 101},
        )
        assert resp.status_code == 400
        assert resp.json()["message"] == "Department cannot exceed 100 characters"

    def test_requires_token(self, client):
        assert client.put(PROFILE, json={"course": "Engines"}).status_code == 401


class TestAppSurface:
    def test_index(self, client):
        resp = client.get("/")
        assert resp.status_code == 200
        assert resp.json()["success"] is True

    @pytest.mark.parametrize("path", ["/nope", "/api/auth/student/unknown"])
    def test_unknown_route(self, client, path):
        resp = client.get(path)
        assert resp.status_code == 404
        assert resp.json() == {"success": False, "message": f"Route {path} not found"}

    @pytest.mark.parametrize(
        "method, path",
        [
            ("GET", "/api/auth/student/signup"),
            ("POST", "/api/auth/student/me"),
            ("DELETE", "/api/auth/student/profile"),
        ],
    )
    def test_wrong_method_on_known_path(self, client, method, path):
        resp = client.request(method, path)
        assert resp.status_code == 404
        assert resp.json() == {"success": False, "message": f"Route {path} not found"}

    def test_process_time_header(self, client):
        assert "X-Process-Time" in client.get("/").headers

    def test_unexpected_error_is_generic_500(self, client, monkeypatch):
        from auth.service import SessionIssuer

        async def boom(self, req):
            raise RuntimeError("database exploded: secret details")

        monkeypatch.setattr(SessionIssuer, "login", boom)
        resp = client.post(LOGIN, json={"email": "ada@uni.edu", "password": "Abcd1234"})
        assert resp.status_code == 500
        assert resp.json() == {"success": False, "message": "Server error"}
