"""Python client for the Userdesk API with a stale-time query cache."""

from app.client.api_client import ApiClient, ApiClientError
from app.client.cache import QueryCache, make_key
from app.client.queries import AuthKeys, BookKeys, UserKeys, UserQueries

__all__ = [
    "ApiClient",
    "ApiClientError",
    "AuthKeys",
    "BookKeys",
    "QueryCache",
    "UserKeys",
    "UserQueries",
    "make_key",
]
