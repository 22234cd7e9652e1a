"""Thin HTTP client for the Userdesk API: envelope JSON in, ApiClientError out, retry on timeout."""

from __future__ import annotations

import logging
import time
from collections.abc import Callable
from typing import Any

import httpx
from tenacity import (
    RetryCallState,
    Retrying,
    retry_if_exception_type,
    stop_after_attempt,
    wait_incrementing,
)

from app.core.context import generate_request_id

logger = logging.getLogger(__name__)

DEFAULT_BASE_URL = "http://localhost:3001/api/v1"
DEFAULT_TIMEOUT_SEC = 10.0
RETRY_ATTEMPTS = 3
RETRY_DELAY_SEC = 1.0

# Python keyword -> query parameter name understood by the list endpoints.
_QUERY_NAMES = {
    "page": "page",
    "page_size": "pageSize",
    "search": "search",
    "role": "role",
    "sort_by": "sortBy",
    "sort_order": "sortOrder",
    "search_key": "searchKey",
}


class ApiClientError(Exception):
    """Raised when the API answers with an error status or cannot be reached."""

    def __init__(
        self,
        message: str,
        status_code: int | None = None,
        body: dict[str, Any] | None = None,
    ) -> None:
        self.message = message
        self.status_code = status_code
        self.body = body
        super().__init__(message)


def to_query_params(params: dict[str, Any] | None) -> dict[str, Any]:
    """Drop None values and rename snake_case keys to the API's camelCase names."""
    if not params:
        return {}
    out = {}
    for key, value in params.items():
        if value is None:
            continue
        out[_QUERY_NAMES.get(key, key)] = value
    return out


def _error_message(resp: httpx.Response) -> tuple[str, dict[str, Any] | None]:
    try:
        body = resp.json()
    except ValueError:
        return (resp.text[:500] if resp.text else f"HTTP {resp.status_code}"), None
    if isinstance(body, dict):
        return str(body.get("error") or body.get("message") or f"HTTP {resp.status_code}"), body
    return f"HTTP {resp.status_code}", None


def _log_timeout_retry(retry_state: RetryCallState) -> None:
    method, path = retry_state.args[:2]
    wait = retry_state.next_action.sleep if retry_state.next_action else 0
    logger.info(
        "Retrying %s %s after timeout (attempt %d, waiting %.1fs)",
        method,
        path,
        retry_state.attempt_number,
        wait,
    )


class ApiClient:
    """
    Synchronous client over httpx.Client.

    Every request carries a fresh X-Request-ID. Timeouts are retried RETRY_ATTEMPTS times
    with a linear delay (retry_delay * attempt); any other failure is raised immediately.
    """

    def __init__(
        self,
        base_url: str = DEFAULT_BASE_URL,
        timeout: float = DEFAULT_TIMEOUT_SEC,
        retry_attempts: int = RETRY_ATTEMPTS,
        retry_delay: float = RETRY_DELAY_SEC,
        http_client: httpx.Client | None = None,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.retry_attempts = retry_attempts
        self.retry_delay = retry_delay
        self._client = http_client or httpx.Client(timeout=timeout)
        self._owns_client = http_client is None
        self._sleep = sleep
        self._headers: dict[str, str] = {"Content-Type": "application/json"}

    def __enter__(self) -> ApiClient:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    def close(self) -> None:
        if self._owns_client:
            self._client.close()

    def set_auth_token(self, token: str) -> None:
        self._headers["Authorization"] = f"Bearer {token}"

    def clear_auth_token(self) -> None:
        self._headers.pop("Authorization", None)

    def _send(
        self,
        method: str,
        path: str,
        params: dict[str, Any] | None,
        json: Any,
    ) -> httpx.Response:
        headers = {**self._headers, "X-Request-ID": generate_request_id()}
        return self._client.request(
            method,
            f"{self.base_url}{path}",
            params=params or None,
            json=json,
            headers=headers,
            timeout=self.timeout,
        )

    def request(
        self,
        method: str,
        path: str,
        params: dict[str, Any] | None = None,
        json: Any = None,
    ) -> dict[str, Any]:
        """Send one request and return the decoded envelope ({} for 204)."""
        try:
            resp = self._retrying()(self._send, method, path, params, json)
        except httpx.TimeoutException as e:
            raise ApiClientError(
                f"Request timed out after {self.retry_attempts} retries"
            ) from e
        except httpx.HTTPError as e:
            raise ApiClientError(f"Request failed: {e}") from e

        if resp.status_code >= 400:
            message, body = _error_message(resp)
            raise ApiClientError(message, resp.status_code, body)
        if resp.status_code == 204 or not resp.content:
            return {}
        return resp.json()

    def _retrying(self) -> Retrying:
        """Timeouts only; waits retry_delay, 2 * retry_delay, ... between attempts."""
        return Retrying(
            stop=stop_after_attempt(self.retry_attempts + 1),
            wait=wait_incrementing(start=self.retry_delay, increment=self.retry_delay),
            retry=retry_if_exception_type(httpx.TimeoutException),
            sleep=self._sleep,
            before_sleep=_log_timeout_retry,
            reraise=True,
        )

    # Users

    def get_users(self, **params: Any) -> dict[str, Any]:
        return self.request("GET", "/users", params=to_query_params(params))

    def get_user(self, user_id: str) -> dict[str, Any]:
        return self.request("GET", f"/users/{user_id}")

    def create_user(self, name: str, email: str, role: str | None = None) -> dict[str, Any]:
        body = {"name": name, "email": email}
        if role is not None:
            body["role"] = role
        return self.request("POST", "/users", json=body)

    def update_user(self, user_id: str, **fields: Any) -> dict[str, Any]:
        """
        Send the given name/email/role. None means "leave unchanged" and is not sent:
        the API cannot clear a field, and a body with no fields is answered with 400.
        """
        body = {k: v for k, v in fields.items() if v is not None}
        return self.request("PUT", f"/users/{user_id}", json=body)

    def delete_user(self, user_id: str) -> dict[str, Any]:
        return self.request("DELETE", f"/users/{user_id}")

    def generate_users(self, count: int) -> dict[str, Any]:
        return self.request("POST", "/users/generate", json={"count": count})

    def get_users_stats(self) -> dict[str, Any]:
        return self.request("GET", "/users/stats")

    def get_book_list(self, **params: Any) -> dict[str, Any]:
        return self.request("GET", "/users/bookList", params=to_query_params(params))

    def update_profile(self, profile: dict[str, Any]) -> dict[str, Any]:
        return self.request("POST", "/users/updateProfile", json=profile)

    # Auth

    def login(self, user_name: str, password: str, expected_result: int = 200) -> dict[str, Any]:
        body = {"userName": user_name, "password": password, "expectedResult": expected_result}
        return self.request("POST", "/auth/login", json=body)

    def refresh(self, refresh_token: str) -> dict[str, Any]:
        return self.request("POST", "/auth/refresh", json={"refreshToken": refresh_token})

    def logout(self) -> dict[str, Any]:
        return self.request("POST", "/auth/logout")

    def validate(self) -> dict[str, Any]:
        return self.request("GET", "/auth/validate")

    def health_check(self) -> dict[str, Any]:
        return self.request("GET", "/health")
