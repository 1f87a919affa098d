from __future__ import annotations

import threading
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Callable, Dict, List, Optional


class UserStoreError(Exception):
    """Base class for registry lookups/writes that the HTTP layer maps to a status code."""


class UserAlreadyExists(UserStoreError):
    pass


class InvalidCredentials(UserStoreError):
    pass


class UserNotFound(UserStoreError):
    pass


@dataclass
class UserRecord:
    identifier: str
    password: str
    created_at: datetime
    display_name: Optional[str] = None

    def public_view(self) -> "PublicUserView":
        return PublicUserView(
            identifier=self.identifier,
            display_name=self.display_name,
            created_at=self.created_at,
        )


@dataclass(frozen=True)
class PublicUserView:
    identifier: str
    display_name: Optional[str]
    created_at: datetime


@dataclass(frozen=True)
class AuthenticatedUser:
    user: PublicUserView
    secret: str


@dataclass(frozen=True)
class RegistryStats:
    total_users: int
    last_signup: Optional[datetime]


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def _normalize(identifier: Optional[str]) -> str:
    return (identifier or "").strip()


class InMemoryUserStore:
    """Thread-safe in-memory user registry.

    Storage semantics:
    - Stored only in the API process memory (cleared on restart).
    - Not shared across multiple API instances.
    - Passwords are kept and compared as plaintext.
    - Identifiers have surrounding whitespace stripped before lookup. This is a
      deliberate deviation from a raw key lookup; matching is otherwise exact
      and case-sensitive.

    The plaintext point is inherited behaviour, not an endorsement. A real
    deployment should hash-and-compare instead.
    """

    def __init__(self, *, clock: Callable[[], datetime] = _utcnow):
        self._clock = clock
        self._lock = threading.Lock()
        # dict keeps insertion order, which stats() relies on.
        self._users: Dict[str, UserRecord] = {}

    def __len__(self) -> int:
        with self._lock:
            return len(self._users)

    def exists(self, *, identifier: str) -> bool:
        key = _normalize(identifier)
        if not key:
            return False
        with self._lock:
            return key in self._users

    def create(self, *, identifier: str, password: str, display_name: Optional[str] = None) -> UserRecord:
        key = _normalize(identifier)
        if not key:
            raise ValueError("Identifier is required")
        if not password:
            raise ValueError("Password is required")
        with self._lock:
            if key in self._users:
                raise UserAlreadyExists(key)
            record = UserRecord(
                identifier=key,
                password=password,
                created_at=self._clock(),
                display_name=display_name or None,
            )
            self._users[key] = record
            return record

    def authenticate(self, *, identifier: str, password: str, secret: str) -> AuthenticatedUser:
        key = _normalize(identifier)
        with self._lock:
            record = self._users.get(key)
            if record is None or record.password != password:
                raise InvalidCredentials(key)
            return AuthenticatedUser(user=record.public_view(), secret=secret)

    def list(self) -> List[PublicUserView]:
        with self._lock:
            return [r.public_view() for r in self._users.values()]

    def get(self, *, identifier: str) -> PublicUserView:
        key = _normalize(identifier)
        with self._lock:
            record = self._users.get(key)
            if record is None:
                raise UserNotFound(key)
            return record.public_view()

    def update_password(self, *, identifier: str, new_password: str) -> PublicUserView:
        key = _normalize(identifier)
        with self._lock:
            record = self._users.get(key)
            if record is None:
                raise UserNotFound(key)
            if not new_password:
                raise ValueError("Password is required")
            record.password = new_password
            return record.public_view()

    def delete(self, *, identifier: str) -> None:
        key = _normalize(identifier)
        with self._lock:
            if self._users.pop(key, None) is None:
                raise UserNotFound(key)

    def stats(self) -> RegistryStats:
        with self._lock:
            last: Optional[datetime] = None
            if self._users:
                last = next(reversed(self._users.values())).created_at
            return RegistryStats(total_users=len(self._users), last_signup=last)
