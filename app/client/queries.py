"""Cached reads and cache-invalidating writes over ApiClient, mirroring the web UI's data hooks."""

from __future__ import annotations

from typing import Any

from app.client.api_client import ApiClient
from app.client.cache import QueryCache, QueryKey, make_key

MINUTE = 60.0

# (stale_time, gc_time) in seconds
LIST_TIMES = (5 * MINUTE, 10 * MINUTE)
DETAIL_TIMES = (5 * MINUTE, 10 * MINUTE)
STATS_TIMES = (2 * MINUTE, 5 * MINUTE)
BOOK_TIMES = (5 * MINUTE, 10 * MINUTE)


class UserKeys:
    all: QueryKey = ("users",)
    lists: QueryKey = ("users", "list")
    details: QueryKey = ("users", "detail")
    stats: QueryKey = ("users", "stats")

    @staticmethod
    def list(params: dict[str, Any]) -> QueryKey:
        return make_key(*UserKeys.lists, params=params)

    @staticmethod
    def detail(user_id: str) -> QueryKey:
        return (*UserKeys.details, user_id)


class BookKeys:
    lists: QueryKey = ("books", "list")

    @staticmethod
    def list(params: dict[str, Any]) -> QueryKey:
        return make_key(*BookKeys.lists, params=params)


class AuthKeys:
    user: QueryKey = ("auth", "user")
    tokens: QueryKey = ("auth", "tokens")


class UserQueries:
    """
    Reads go through the cache; writes go straight to the API and then invalidate.

    create/update/delete/generate invalidate every user list and the stats entry.
    update also stores the returned user under its detail key; delete drops that key.
    """

    def __init__(self, client: ApiClient, cache: QueryCache | None = None) -> None:
        self.client = client
        self.cache = cache or QueryCache()

    def _invalidate_lists_and_stats(self) -> None:
        self.cache.invalidate(UserKeys.lists)
        self.cache.invalidate(UserKeys.stats)

    # Reads

    def users(self, **params: Any) -> dict[str, Any]:
        stale, gc = LIST_TIMES
        return self.cache.fetch(
            UserKeys.list(params), lambda: self.client.get_users(**params), stale, gc
        )

    def user(self, user_id: str) -> dict[str, Any]:
        stale, gc = DETAIL_TIMES
        return self.cache.fetch(
            UserKeys.detail(user_id), lambda: self.client.get_user(user_id), stale, gc
        )

    def prefetch_user(self, user_id: str) -> None:
        self.user(user_id)

    def stats(self) -> dict[str, Any]:
        stale, gc = STATS_TIMES
        return self.cache.fetch(UserKeys.stats, self.client.get_users_stats, stale, gc)

    def books(self, **params: Any) -> dict[str, Any]:
        stale, gc = BOOK_TIMES
        return self.cache.fetch(
            BookKeys.list(params), lambda: self.client.get_book_list(**params), stale, gc
        )

    # Writes

    def create_user(self, name: str, email: str, role: str | None = None) -> dict[str, Any]:
        result = self.client.create_user(name, email, role)
        self._invalidate_lists_and_stats()
        return result

    def update_user(self, user_id: str, **fields: Any) -> dict[str, Any]:
        result = self.client.update_user(user_id, **fields)
        stale, gc = DETAIL_TIMES
        self.cache.set_data(UserKeys.detail(user_id), result, stale, gc)
        self._invalidate_lists_and_stats()
        return result

    def delete_user(self, user_id: str) -> dict[str, Any]:
        result = self.client.delete_user(user_id)
        self.cache.remove(UserKeys.detail(user_id))
        self._invalidate_lists_and_stats()
        return result

    def generate_users(self, count: int) -> dict[str, Any]:
        result = self.client.generate_users(count)
        self._invalidate_lists_and_stats()
        return result

    def update_profile(self, profile: dict[str, Any]) -> dict[str, Any]:
        return self.client.update_profile(profile)

    # Auth

    def login(self, user_name: str, password: str, expected_result: int = 200) -> dict[str, Any]:
        """Log in; on success keep the user and tokens and send the access token from now on."""
        result = self.client.login(user_name, password, expected_result)
        data = result.get("data") or {}
        if result.get("success") and data.get("accessToken"):
            self.cache.set_data(
                AuthKeys.tokens,
                {"accessToken": data["accessToken"], "refreshToken": data["refreshToken"]},
                stale_time=float("inf"),
                gc_time=float("inf"),
            )
            self.cache.set_data(AuthKeys.user, data.get("user"), float("inf"), float("inf"))
            self.client.set_auth_token(data["accessToken"])
        return result

    def refresh(self) -> dict[str, Any]:
        tokens = self.cache.get_data(AuthKeys.tokens) or {}
        result = self.client.refresh(tokens.get("refreshToken", ""))
        data = result.get("data") or {}
        if result.get("success") and data.get("accessToken"):
            self.cache.set_data(AuthKeys.tokens, data, float("inf"), float("inf"))
            self.client.set_auth_token(data["accessToken"])
        return result

    def logout(self) -> dict[str, Any]:
        result = self.client.logout()
        self.cache.remove(("auth",))
        self.client.clear_auth_token()
        return result

    def validate(self) -> dict[str, Any]:
        return self.client.validate()
