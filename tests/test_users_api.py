"""API tests for /api/v1/users: envelope shape, listing pipeline, CRUD, validation and errors."""

import random
import time
import unittest

from fastapi.testclient import TestClient

from app.main import app
from app.services.user_store import UserStore, get_user_store

BASE = "/api/v1/users"


class UsersApiTestCase(unittest.TestCase):
    """Each test gets its own seeded store through a dependency override."""

    def setUp(self) -> None:
        self.store = UserStore(seed=True, rng=random.Random(7))
        app.dependency_overrides[get_user_store] = lambda: self.store
        self.client = TestClient(app)

    def tearDown(self) -> None:
        app.dependency_overrides.clear()


class TestListUsers(UsersApiTestCase):

    def test_default_page(self) -> None:
        r = self.client.get(BASE)
        self.assertEqual(r.status_code, 200)
        body = r.json()
        self.assertTrue(body["success"])
        self.assertEqual(len(body["data"]), 10)
        self.assertEqual(
            body["pagination"],
            {"page": 1, "pageSize": 10, "total": 10, "totalPages": 1, "hasNext": False, "hasPrev": False},
        )
        self.assertIn("timestamp", body)
        self.assertEqual(body["requestId"], r.headers["X-Request-ID"])
        self.assertNotIn("error", body)
        self.assertIn("createdAt", body["data"][0])

    def test_paging(self) -> None:
        body = self.client.get(BASE, params={"page": 2, "pageSize": 3}).json()
        self.assertEqual([u["id"] for u in body["data"]], ["user_4", "user_5", "user_6"])
        self.assertEqual(body["pagination"]["totalPages"], 4)
        self.assertTrue(body["pagination"]["hasNext"])
        self.assertTrue(body["pagination"]["hasPrev"])

        last = self.client.get(BASE, params={"page": 4, "pageSize": 3}).json()
        self.assertEqual(len(last["data"]), 1)
        self.assertFalse(last["pagination"]["hasNext"])

    def test_page_past_end_is_empty(self) -> None:
        r = self.client.get(BASE, params={"page": 5, "pageSize": 3})
        self.assertEqual(r.status_code, 200)
        body = r.json()
        self.assertEqual(body["data"], [])
        self.assertEqual(body["pagination"]["total"], 10)

    def test_search(self) -> None:
        body = self.client.get(BASE, params={"search": "fiona.garcia"}).json()
        self.assertEqual([u["name"] for u in body["data"]], ["Fiona Garcia"])
        self.assertEqual(body["pagination"]["total"], 1)

    def test_role_filter(self) -> None:
        body = self.client.get(BASE, params={"role": "moderator"}).json()
        self.assertEqual(body["pagination"]["total"], 3)
        self.assertTrue(all(u["role"] == "moderator" for u in body["data"]))

    def test_search_and_role_combine(self) -> None:
        body = self.client.get(BASE, params={"search": "jo", "role": "admin"}).json()
        self.assertEqual([u["name"] for u in body["data"]], ["John Doe"])

    def test_sort_by_name_desc(self) -> None:
        body = self.client.get(BASE, params={"sortBy": "name", "sortOrder": "desc"}).json()
        names = [u["name"].lower() for u in body["data"]]
        self.assertEqual(names, sorted(names, reverse=True))

    def test_invalid_query_is_400_with_field_details(self) -> None:
        r = self.client.get(BASE, params={"pageSize": 0})
        self.assertEqual(r.status_code, 400)
        body = r.json()
        self.assertFalse(body["success"])
        self.assertEqual(body["error"], "Validation error")
        self.assertEqual(body["details"][0]["field"], "query.pageSize")

    def test_page_size_above_max_rejected(self) -> None:
        self.assertEqual(self.client.get(BASE, params={"pageSize": 101}).status_code, 400)

    def test_unknown_sort_field_rejected(self) -> None:
        self.assertEqual(self.client.get(BASE, params={"sortBy": "password"}).status_code, 400)


class TestUserCrud(UsersApiTestCase):

    def test_get_one(self) -> None:
        r = self.client.get(f"{BASE}/user_1")
        self.assertEqual(r.status_code, 200)
        self.assertEqual(r.json()["data"]["name"], "John Doe")

    def test_get_unknown_is_404(self) -> None:
        r = self.client.get(f"{BASE}/user_999")
        self.assertEqual(r.status_code, 404)
        body = r.json()
        self.assertFalse(body["success"])
        self.assertEqual(body["error"], "Resource not found")
        self.assertEqual(body["requestId"], r.headers["X-Request-ID"])

    def test_create(self) -> None:
        r = self.client.post(BASE, json={"name": "Test User", "email": "test.user@example.com"})
        self.assertEqual(r.status_code, 201)
        body = r.json()
        self.assertEqual(body["message"], "User created successfully")
        self.assertEqual(body["data"]["id"], "user_11")
        self.assertEqual(body["data"]["role"], "user")
        self.assertEqual(self.store.count(), 11)

    def test_create_invalid_email_and_short_name(self) -> None:
        r = self.client.post(BASE, json={"name": "X", "email": "not-an-email"})
        self.assertEqual(r.status_code, 400)
        fields = {d["field"] for d in r.json()["details"]}
        self.assertIn("body.email", fields)
        self.assertIn("body.name", fields)
        self.assertEqual(self.store.count(), 10)

    def test_create_bad_role(self) -> None:
        r = self.client.post(BASE, json={"name": "Ro Le", "email": "r@example.com", "role": "root"})
        self.assertEqual(r.status_code, 400)

    def test_update_partial(self) -> None:
        before = self.store.get("user_2")
        time.sleep(0.01)
        r = self.client.put(f"{BASE}/user_2", json={"role": "moderator"})
        self.assertEqual(r.status_code, 200)
        data = r.json()["data"]
        self.assertEqual(r.json()["message"], "User updated successfully")
        self.assertEqual(data["role"], "moderator")
        self.assertEqual(data["name"], before.name)
        self.assertEqual(data["createdAt"], before.created_at)
        self.assertGreater(data["updatedAt"], before.updated_at)

    def test_update_empty_body_rejected(self) -> None:
        self.assertEqual(self.client.put(f"{BASE}/user_2", json={}).status_code, 400)

    def test_update_explicit_null_rejected(self) -> None:
        before = self.store.get("user_1")
        for field in ("name", "email", "role"):
            with self.subTest(field=field):
                r = self.client.put(f"{BASE}/user_1", json={field: None})
                self.assertEqual(r.status_code, 400)
                self.assertEqual(r.json()["details"][0]["field"], f"body.{field}")
        self.assertEqual(self.store.get("user_1"), before)

    def test_update_null_alongside_valid_field_rejected(self) -> None:
        r = self.client.put(f"{BASE}/user_1", json={"name": "Renamed User", "role": None})
        self.assertEqual(r.status_code, 400)
        self.assertEqual(self.store.get("user_1").name, "John Doe")

    def test_update_unknown_is_404(self) -> None:
        r = self.client.put(f"{BASE}/user_999", json={"name": "Nobody Here"})
        self.assertEqual(r.status_code, 404)

    def test_delete(self) -> None:
        r = self.client.delete(f"{BASE}/user_3")
        self.assertEqual(r.status_code, 204)
        self.assertEqual(r.content, b"")
        self.assertEqual(self.client.get(f"{BASE}/user_3").status_code, 404)
        self.assertEqual(self.client.delete(f"{BASE}/user_3").status_code, 404)


class TestStatsGenerateProfileBooks(UsersApiTestCase):

    def test_stats(self) -> None:
        data = self.client.get(f"{BASE}/stats").json()["data"]
        self.assertEqual(data, {"total": 10, "byRole": {"admin": 1, "user": 6, "moderator": 3}})

    def test_generate(self) -> None:
        r = self.client.post(f"{BASE}/generate", json={"count": 5})
        self.assertEqual(r.status_code, 201)
        body = r.json()
        self.assertEqual(len(body["data"]), 5)
        self.assertEqual(body["message"], "5 users generated successfully")
        stats = self.client.get(f"{BASE}/stats").json()["data"]
        self.assertEqual(stats["total"], 15)
        self.assertEqual(sum(stats["byRole"].values()), 15)

    def test_generate_count_bounds(self) -> None:
        self.assertEqual(self.client.post(f"{BASE}/generate", json={"count": 0}).status_code, 400)
        self.assertEqual(self.client.post(f"{BASE}/generate", json={"count": 51}).status_code, 400)

    def test_update_profile_echo(self) -> None:
        payload = {
            "placeHolder": "Your name",
            "dummyData": ["a", "b"],
            "numericValue": 42,
            "objectValue": {"firstString": "top", "secondString": "bottom"},
        }
        r = self.client.post(f"{BASE}/updateProfile", json=payload)
        self.assertEqual(r.status_code, 200)
        data = r.json()["data"]
        self.assertEqual(data["response"], "Your name")
        self.assertEqual(data["dataList"], ["a", "b"])
        self.assertEqual(data["amount"], 42)
        self.assertEqual(data["tooltip"], {"header": "top", "footer": "bottom"})

    def test_book_list(self) -> None:
        body = self.client.get(f"{BASE}/bookList", params={"pageSize": 5}).json()
        self.assertEqual(len(body["data"]), 5)
        book = body["data"][0]
        self.assertEqual(set(book["bookName"]), {"my", "en", "zh"})
        self.assertGreater(body["pagination"]["total"], 5)

    def test_book_list_search(self) -> None:
        body = self.client.get(f"{BASE}/bookList", params={"searchKey": "orwell"}).json()
        self.assertEqual(body["pagination"]["total"], 1)
        self.assertEqual(body["data"][0]["author"], "George Orwell")


class TestAppLevelRoutes(UsersApiTestCase):

    def test_unknown_route(self) -> None:
        r = self.client.get("/api/v1/nope")
        self.assertEqual(r.status_code, 404)
        self.assertEqual(r.json()["error"], "Route not found")

    def test_health_versioned_and_root(self) -> None:
        for path in ("/health", "/api/v1/health"):
            r = self.client.get(path)
            self.assertEqual(r.status_code, 200)
            body = r.json()
            self.assertEqual(body["status"], "OK")
            self.assertGreaterEqual(body["uptime"], 0)
            self.assertIn("environment", body)

    def test_standard_headers(self) -> None:
        r = self.client.get(BASE)
        self.assertTrue(r.headers["X-Request-ID"].startswith("req_"))
        self.assertTrue(r.headers["X-Response-Time"].endswith("ms"))
        self.assertEqual(r.headers["X-API-Version"], "1.0.0")
        self.assertIn("X-Server-Time", r.headers)

    def test_caller_request_id_is_echoed(self) -> None:
        r = self.client.get(f"{BASE}/stats", headers={"X-Request-ID": "req_from_caller"})
        self.assertEqual(r.headers["X-Request-ID"], "req_from_caller")
        self.assertEqual(r.json()["requestId"], "req_from_caller")

    def test_unhandled_error_is_500_envelope(self) -> None:
        class BrokenStore(UserStore):
            def role_counts(self) -> dict[str, int]:
                raise RuntimeError("boom")

        app.dependency_overrides[get_user_store] = lambda: BrokenStore()
        client = TestClient(app, raise_server_exceptions=False)
        r = client.get(f"{BASE}/stats")
        self.assertEqual(r.status_code, 500)
        body = r.json()
        self.assertFalse(body["success"])
        self.assertEqual(body["error"], "Internal server error")
        self.assertNotIn("boom", r.text)


if __name__ == "__main__":
    unittest.main()
