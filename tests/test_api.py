"""End-to-end tests through the HTTP API: sessions, RBAC and history ownership."""

import unittest

from fastapi.testclient import TestClient

from app.core.config import get_settings
from app.core.sessions import SessionStore
from app.main import app
from app.models import HistoryRecord, User
from app.services.users import bootstrap_admin_if_absent
from tests.support import DatabaseTestCase

PREFIX = get_settings().API_V1_PREFIX
ADMIN_EMAIL = "admin@energy.com"
ADMIN_PASSWORD = "Admin@123"

UNAUTHORIZED = {"status": "error", "message": "Unauthorized"}


class ApiTestCase(DatabaseTestCase):
    """Fresh tables, seeded admin and an empty session store for every test."""

    def setUp(self) -> None:
        super().setUp()
        bootstrap_admin_if_absent(self.db, get_settings())
        app.state.session_store = SessionStore()
        self.store = app.state.session_store

    def client(self) -> TestClient:
        return TestClient(app)

    def register(
        self,
        client: TestClient,
        username: str = "alice",
        email: str = "a@x.com",
        password: str = "secret1",
        location: str | None = "Home",
    ):
        body = {"username": username, "email": email, "password": password}
        if location is not None:
            body["location"] = location
        return client.post(f"{PREFIX}/auth/register", json=body)

    def login(self, client: TestClient, email: str = "a@x.com", password: str = "secret1"):
        return client.post(f"{PREFIX}/auth/login", json={"email": email, "password": password})

    def save(self, client: TestClient, kwh: float = 1.5, model: str = "linear"):
        return client.post(
            f"{PREFIX}/history",
            json={
                "appliances_json": '[{"name": "Heater", "watts": 1500, "hours": 1}]',
                "total_kwh": kwh,
                "total_cost": kwh * 0.2,
                "model_used": model,
            },
        )


class TestEndToEnd(ApiTestCase):
    """Register, log in, save, list, then admin purge."""

    def test_full_scenario(self) -> None:
        alice = self.client()
        r = self.register(alice, "alice", "a@x.com", "secret1", "Home")
        self.assertEqual(r.status_code, 200)
        self.assertEqual(r.json()["status"], "ok")

        r = self.login(alice, "a@x.com", "secret1")
        self.assertEqual(r.status_code, 200)
        self.assertEqual(r.json(), {"status": "ok", "message": "Login successful", "role": "user"})

        r = self.save(alice)
        self.assertEqual(r.status_code, 201)
        self.assertEqual(r.json()["status"], "ok")

        r = alice.get(f"{PREFIX}/history")
        self.assertEqual(r.json()["status"], "ok")
        self.assertEqual(len(r.json()["data"]), 1)

        admin = self.client()
        r = self.login(admin, ADMIN_EMAIL, ADMIN_PASSWORD)
        self.assertEqual(r.json()["role"], "admin")

        r = admin.get(f"{PREFIX}/admin/history")
        data = r.json()["data"]
        self.assertEqual(len(data), 1)
        self.assertEqual(data[0]["username"], "alice")
        self.assertEqual(data[0]["email"], "a@x.com")
        self.assertEqual(data[0]["location"], "Home")
        self.assertIsNotNone(data[0]["timestamp"])

        r = admin.delete(f"{PREFIX}/admin/history")
        self.assertEqual(r.json(), {"status": "ok", "message": "All history deleted", "deleted": 1})

        r = admin.get(f"{PREFIX}/admin/history")
        self.assertEqual(r.json(), {"status": "ok", "data": []})


class TestRegister(ApiTestCase):
    """Registration validation and duplicate handling."""

    def test_duplicate_email(self) -> None:
        client = self.client()
        self.assertEqual(self.register(client, "alice", "a@x.com", "secret1").status_code, 200)
        r = self.register(client, "mallory", "a@x.com", "hijack1", "Elsewhere")
        self.assertEqual(r.status_code, 409)
        self.assertEqual(r.json(), {"status": "error", "message": "Email already registered."})

        self.assertEqual(self.login(client, "a@x.com", "secret1").json()["status"], "ok")
        r = client.get(f"{PREFIX}/auth/me")
        self.assertEqual(r.json()["username"], "alice")
        self.assertEqual(r.json()["location"], "Home")

    def test_validation_errors(self) -> None:
        client = self.client()
        cases = [
            ("", "a@x.com", "secret1"),
            ("alice", "no-at-sign", "secret1"),
            ("alice", "a@x.com", "short"),
        ]
        for username, email, password in cases:
            r = self.register(client, username, email, password)
            self.assertEqual(r.status_code, 422)
            self.assertEqual(r.json()["status"], "error")
        self.assertEqual(self.db.query(User).count(), 1)

    def test_missing_fields(self) -> None:
        r = self.client().post(f"{PREFIX}/auth/register", json={"email": "a@x.com"})
        self.assertEqual(r.status_code, 422)
        self.assertEqual(r.json(), {"status": "error", "message": "Missing required fields"})

    def test_login_with_same_padded_email(self) -> None:
        client = self.client()
        self.assertEqual(self.register(client, email="a@x.com ").json()["status"], "ok")
        r = self.login(client, "a@x.com ", "secret1")
        self.assertEqual(r.status_code, 200)
        self.assertEqual(r.json()["role"], "user")

    def test_default_location(self) -> None:
        client = self.client()
        self.register(client, location=None)
        self.login(client)
        self.assertEqual(client.get(f"{PREFIX}/auth/me").json()["location"], "Not Provided")

    def test_registration_never_grants_admin(self) -> None:
        client = self.client()
        client.post(
            f"{PREFIX}/auth/register",
            json={"username": "eve", "email": "e@x.com", "password": "secret1", "role": "admin"},
        )
        self.assertEqual(self.login(client, "e@x.com", "secret1").json()["role"], "user")


class TestLogin(ApiTestCase):
    """Login failures are generic; success sets an HttpOnly session cookie."""

    def test_wrong_password_and_unknown_email_are_identical(self) -> None:
        client = self.client()
        self.register(client)
        wrong = self.login(client, "a@x.com", "wrong-pass")
        unknown = self.login(client, "nobody@x.com", "secret1")
        self.assertEqual(wrong.status_code, 401)
        self.assertEqual(wrong.status_code, unknown.status_code)
        self.assertEqual(wrong.json(), unknown.json())
        self.assertEqual(wrong.json()["status"], "error")
        self.assertEqual(len(self.store), 0)

    def test_cookie_is_http_only(self) -> None:
        client = self.client()
        self.register(client)
        r = self.login(client)
        cookie = r.headers["set-cookie"]
        self.assertIn(get_settings().SESSION_COOKIE_NAME, cookie)
        self.assertIn("httponly", cookie.lower())

    def test_relogin_replaces_previous_session(self) -> None:
        client = self.client()
        self.register(client)
        self.login(client)
        self.login(client)
        self.assertEqual(len(self.store), 1)

    def test_client_supplied_identity_is_ignored(self) -> None:
        client = self.client()
        self.register(client)
        self.login(client)
        r = client.post(
            f"{PREFIX}/history",
            json={"user_id": 1, "total_kwh": 1.0, "total_cost": 0.2, "model_used": "linear"},
        )
        self.assertEqual(r.status_code, 201)
        alice = self.db.query(User).filter(User.email == "a@x.com").one()
        record = self.db.query(HistoryRecord).one()
        self.assertEqual(record.user_id, alice.id)


class TestMeAndLogout(ApiTestCase):
    """Session introspection and idempotent logout."""

    def test_me_anonymous(self) -> None:
        r = self.client().get(f"{PREFIX}/auth/me")
        self.assertEqual(
            r.json(),
            {"logged_in": False, "role": None, "username": None, "location": None},
        )

    def test_me_logged_in(self) -> None:
        client = self.client()
        self.register(client)
        self.login(client)
        r = client.get(f"{PREFIX}/auth/me")
        self.assertEqual(
            r.json(),
            {"logged_in": True, "role": "user", "username": "alice", "location": "Home"},
        )

    def test_logout_twice(self) -> None:
        client = self.client()
        self.register(client)
        self.login(client)

        first = client.post(f"{PREFIX}/auth/logout")
        self.assertEqual(first.json(), {"status": "ok", "message": "Logged out"})
        second = client.get(f"{PREFIX}/auth/logout")
        self.assertEqual(second.status_code, 200)
        self.assertEqual(second.json(), {"status": "ok", "message": "No active session"})

        self.assertFalse(client.get(f"{PREFIX}/auth/me").json()["logged_in"])
        self.assertEqual(client.get(f"{PREFIX}/history").json(), UNAUTHORIZED)
        self.assertEqual(len(self.store), 0)

    def test_snapshot_survives_profile_change_until_relogin(self) -> None:
        client = self.client()
        self.register(client)
        self.login(client)

        user = self.db.query(User).filter(User.email == "a@x.com").one()
        user.location = "Cottage"
        self.db.commit()

        self.assertEqual(client.get(f"{PREFIX}/auth/me").json()["location"], "Home")
        self.login(client)
        self.assertEqual(client.get(f"{PREFIX}/auth/me").json()["location"], "Cottage")


class TestOwnership(ApiTestCase):
    """Users only see their own history."""

    def test_users_do_not_see_each_other(self) -> None:
        alice = self.client()
        bob = self.client()
        self.register(alice, "alice", "a@x.com")
        self.register(bob, "bob", "b@x.com", location="Office")
        self.login(alice, "a@x.com")
        self.login(bob, "b@x.com")

        self.save(alice, 1.0)
        self.save(bob, 2.0)
        self.save(alice, 3.0)

        alice_data = alice.get(f"{PREFIX}/history").json()["data"]
        bob_data = bob.get(f"{PREFIX}/history").json()["data"]
        self.assertEqual([d["total_kwh"] for d in alice_data], [3.0, 1.0])
        self.assertEqual([d["total_kwh"] for d in bob_data], [2.0])
        self.assertEqual(len({d["user_id"] for d in alice_data}), 1)

    def test_list_all_ordering(self) -> None:
        alice = self.client()
        self.register(alice)
        self.login(alice)
        ids = [self.save(alice, float(k)).json()["id"] for k in (1, 2, 3)]

        admin = self.client()
        self.login(admin, ADMIN_EMAIL, ADMIN_PASSWORD)
        data = admin.get(f"{PREFIX}/admin/history").json()["data"]
        self.assertEqual([d["id"] for d in data], list(reversed(ids)))

    def test_non_finite_numbers_are_rejected(self) -> None:
        alice = self.client()
        self.register(alice)
        self.login(alice)
        for body in ('{"total_kwh": 1e999, "total_cost": 0.2}', '{"total_kwh": 1.0, "total_cost": NaN}'):
            r = alice.post(
                f"{PREFIX}/history",
                content=body,
                headers={"Content-Type": "application/json"},
            )
            self.assertEqual(r.status_code, 422)
            self.assertEqual(r.json()["status"], "error")
        self.assertEqual(alice.get(f"{PREFIX}/history").json()["data"], [])

    def test_timestamps_carry_utc_offset(self) -> None:
        alice = self.client()
        self.register(alice)
        self.login(alice)
        self.save(alice)
        timestamp = alice.get(f"{PREFIX}/history").json()["data"][0]["timestamp"]
        self.assertTrue(timestamp.endswith(("Z", "+00:00")), timestamp)

    def test_json_payload_is_stored_as_text(self) -> None:
        alice = self.client()
        self.register(alice)
        self.login(alice)
        alice.post(
            f"{PREFIX}/history",
            json={"appliances_json": [{"name": "Fan"}], "total_kwh": 0.1, "total_cost": 0.02},
        )
        data = alice.get(f"{PREFIX}/history").json()["data"]
        self.assertEqual(data[0]["appliances_json"], '[{"name": "Fan"}]')


class TestAdminAccess(ApiTestCase):
    """Admin routes reject anonymous and non-admin callers identically."""

    def setUp(self) -> None:
        super().setUp()
        self.alice = self.client()
        self.register(self.alice)
        self.login(self.alice)
        self.record_id = self.save(self.alice).json()["id"]

    def _history_count(self) -> int:
        self.db.expire_all()
        return self.db.query(HistoryRecord).count()

    def test_anonymous_and_user_get_same_unauthorized(self) -> None:
        anonymous = self.client()
        for client in (anonymous, self.alice):
            for method, path in (
                ("GET", f"{PREFIX}/admin/history"),
                ("DELETE", f"{PREFIX}/admin/history/{self.record_id}"),
                ("DELETE", f"{PREFIX}/admin/history"),
            ):
                r = client.request(method, path)
                self.assertEqual(r.status_code, 401)
                self.assertEqual(r.json(), UNAUTHORIZED)
        self.assertEqual(self._history_count(), 1)

    def test_anonymous_cannot_use_user_routes(self) -> None:
        anonymous = self.client()
        self.assertEqual(anonymous.get(f"{PREFIX}/history").json(), UNAUTHORIZED)
        r = self.save(anonymous)
        self.assertEqual(r.status_code, 401)
        self.assertEqual(self._history_count(), 1)

    def test_forged_cookie_is_anonymous(self) -> None:
        forged = TestClient(app, cookies={get_settings().SESSION_COOKIE_NAME: "guessed-token"})
        self.assertEqual(forged.delete(f"{PREFIX}/admin/history").json(), UNAUTHORIZED)
        self.assertEqual(self._history_count(), 1)

    def test_admin_delete_one(self) -> None:
        admin = self.client()
        self.login(admin, ADMIN_EMAIL, ADMIN_PASSWORD)
        r = admin.delete(f"{PREFIX}/admin/history/{self.record_id}")
        self.assertEqual(r.json(), {"status": "ok", "message": "Entry deleted"})
        self.assertEqual(self._history_count(), 0)

        r = admin.delete(f"{PREFIX}/admin/history/{self.record_id}")
        self.assertEqual(r.status_code, 404)
        self.assertEqual(r.json()["status"], "error")

    def test_admin_can_use_user_routes(self) -> None:
        admin = self.client()
        self.login(admin, ADMIN_EMAIL, ADMIN_PASSWORD)
        self.assertEqual(self.save(admin).status_code, 201)
        self.assertEqual(len(admin.get(f"{PREFIX}/history").json()["data"]), 1)


class TestHealth(ApiTestCase):
    """Health endpoint reports database and session state."""

    def test_health(self) -> None:
        r = self.client().get(f"{PREFIX}/health/")
        self.assertEqual(r.status_code, 200)
        body = r.json()
        self.assertEqual(body["status"], "ok")
        self.assertEqual(body["database"], "connected")
        self.assertEqual(body["active_sessions"], 0)


if __name__ == "__main__":
    unittest.main()
