"""In-memory user data service: seeded demo users plus create/update/delete/search."""

import logging
import random
import threading
from datetime import UTC, datetime, timedelta
from typing import Any

from app.core.config import get_settings
from app.schemas.envelope import Pagination
from app.schemas.user import USER_ROLES, User, UserRole
from app.services.listing import SortKey, paginate

logger = logging.getLogger(__name__)

SEED_USERS: tuple[tuple[str, str, UserRole], ...] = (
    ("John Doe", "john.doe@example.com", "admin"),
    ("Jane Smith", "jane.smith@example.com", "user"),
    ("Bob Johnson", "bob.johnson@example.com", "moderator"),
    ("Alice Brown", "alice.brown@example.com", "user"),
    ("Charlie Wilson", "charlie.wilson@example.com", "user"),
    ("Diana Davis", "diana.davis@example.com", "moderator"),
    ("Edward Miller", "edward.miller@example.com", "user"),
    ("Fiona Garcia", "fiona.garcia@example.com", "user"),
    ("George Martinez", "george.martinez@example.com", "user"),
    ("Helen Rodriguez", "helen.rodriguez@example.com", "moderator"),
)

RANDOM_NAMES: tuple[str, ...] = (
    "Alex Thompson", "Sarah Wilson", "Michael Chen", "Emily Davis", "David Brown",
    "Lisa Anderson", "James Taylor", "Maria Garcia", "Robert Johnson", "Jennifer Lee",
    "William White", "Amanda Clark", "Christopher Hall", "Jessica Moore", "Daniel Lewis",
    "Ashley Walker", "Matthew Young", "Nicole Allen", "Joshua King", "Stephanie Wright",
)

RANDOM_DOMAINS: tuple[str, ...] = (
    "gmail.com", "yahoo.com", "hotmail.com", "outlook.com", "example.com",
)

# Seed users were "created" within the last 30 days, generated ones within the last year.
SEED_AGE_DAYS = 30
GENERATED_AGE_DAYS = 365

UPDATABLE_FIELDS = frozenset({"name", "email", "role"})


def _iso(dt: datetime) -> str:
    return dt.isoformat(timespec="milliseconds").replace("+00:00", "Z")


def _parse_iso(value: str) -> datetime:
    return datetime.fromisoformat(value.replace("Z", "+00:00"))


USER_SORT_KEYS: dict[str, SortKey] = {
    "name": lambda u: u.name.lower(),
    "email": lambda u: u.email.lower(),
    "role": lambda u: u.role.lower(),
    "createdAt": lambda u: _parse_iso(u.created_at),
}


class UserStore:
    """
    Mutable list of users held in process memory.

    Lookups are linear scans. Ids are user_<n> from a counter that only grows,
    so an id is never handed out twice even after deletes. Reads return copies.
    """

    def __init__(self, seed: bool = True, rng: random.Random | None = None) -> None:
        self._lock = threading.Lock()
        self._rng = rng or random.Random()
        self._users: list[User] = []
        self._next_id = 1
        if seed:
            self._seed()

    def _seed(self) -> None:
        now = datetime.now(UTC)
        for name, email, role in SEED_USERS:
            created = now - timedelta(seconds=self._rng.uniform(0, SEED_AGE_DAYS * 86400))
            self._users.append(self._new_user(name, email, role, _iso(created), _iso(now)))

    def _new_user(
        self, name: str, email: str, role: UserRole, created_at: str, updated_at: str
    ) -> User:
        user = User(
            id=f"user_{self._next_id}",
            name=name,
            email=email,
            role=role,
            created_at=created_at,
            updated_at=updated_at,
        )
        self._next_id += 1
        return user

    def _index_of(self, user_id: str) -> int:
        for i, user in enumerate(self._users):
            if user.id == user_id:
                return i
        return -1

    def list_all(self) -> list[User]:
        with self._lock:
            return [u.model_copy() for u in self._users]

    def paginate(self, page: int, page_size: int) -> tuple[list[User], Pagination]:
        return paginate(self.list_all(), page, page_size)

    def get(self, user_id: str) -> User | None:
        with self._lock:
            i = self._index_of(user_id)
            return self._users[i].model_copy() if i >= 0 else None

    def create(self, name: str, email: str, role: UserRole = "user") -> User:
        with self._lock:
            now = _iso(datetime.now(UTC))
            user = self._new_user(name, email, role, now, now)
            self._users.append(user)
            return user.model_copy()

    def update(self, user_id: str, **fields: Any) -> User | None:
        """Apply the given name/email/role; None values are ignored. Always bumps updated_at."""
        unknown = set(fields) - UPDATABLE_FIELDS
        if unknown:
            raise ValueError(f"cannot update fields: {sorted(unknown)}")
        changes = {k: v for k, v in fields.items() if v is not None}
        with self._lock:
            i = self._index_of(user_id)
            if i < 0:
                return None
            changes["updated_at"] = _iso(datetime.now(UTC))
            updated = self._users[i].model_copy(update=changes)
            self._users[i] = updated
            return updated.model_copy()

    def delete(self, user_id: str) -> bool:
        with self._lock:
            i = self._index_of(user_id)
            if i < 0:
                return False
            del self._users[i]
            return True

    def search(self, query: str) -> list[User]:
        """Case-insensitive substring match over name, email and role."""
        needle = query.lower()
        return [
            u
            for u in self.list_all()
            if needle in u.name.lower() or needle in u.email.lower() or needle in u.role.lower()
        ]

    def filter_by_role(self, role: str) -> list[User]:
        return [u for u in self.list_all() if u.role == role]

    def count(self) -> int:
        with self._lock:
            return len(self._users)

    def count_by_role(self, role: str) -> int:
        with self._lock:
            return sum(1 for u in self._users if u.role == role)

    def role_counts(self) -> dict[str, int]:
        return {role: self.count_by_role(role) for role in USER_ROLES}

    def generate(self, count: int) -> list[User]:
        """Append count users with random names, domains, roles and creation dates."""
        if count < 1:
            raise ValueError("count must be >= 1")
        created: list[User] = []
        with self._lock:
            now = datetime.now(UTC)
            for _ in range(count):
                name = self._rng.choice(RANDOM_NAMES)
                domain = self._rng.choice(RANDOM_DOMAINS)
                role = self._rng.choice(USER_ROLES)
                email = f"{name.lower().replace(' ', '.', 1)}@{domain}"
                created_at = now - timedelta(
                    seconds=self._rng.uniform(0, GENERATED_AGE_DAYS * 86400)
                )
                user = self._new_user(name, email, role, _iso(created_at), _iso(now))
                self._users.append(user)
                created.append(user.model_copy())
        logger.info("Generated %d users", count, extra={"operation": "generate_users"})
        return created

    def reset(self, seed: bool = True) -> None:
        """Drop every user and restart ids at user_1."""
        with self._lock:
            self._users = []
            self._next_id = 1
            if seed:
                self._seed()


_store: UserStore | None = None


def get_user_store() -> UserStore:
    """Dependency: the process-wide store, created on first use."""
    global _store
    if _store is None:
        _store = UserStore(seed=get_settings().SEED_USERS)
    return _store
