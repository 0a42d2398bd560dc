"""
User repository contract consumed by the auth services.

The auth core only reads user records. ``increment_token_version`` is the
single mutation it asks for, and the repository is responsible for making it
atomic.
"""

import threading
from dataclasses import dataclass, replace
from typing import Protocol


@dataclass(frozen=True)
class UserRecord:
    """Snapshot of the fields authentication needs."""
    id: str
    password_hash: str
    is_active: bool = True
    token_version: int = 0


class UserRepository(Protocol):
    async def find_by_identifier(self, identifier: str) -> UserRecord | None:
        ...

    async def find_by_id(self, user_id: str) -> UserRecord | None:
        ...

    async def increment_token_version(self, user_id: str) -> int | None:
        """Bump the stored version; returns the new value, or None if no such user."""
        ...


class InMemoryUserRepository:
    """Dict-backed repository for tests and embedded use."""

    def __init__(self, users: list[tuple[str, UserRecord]] | None = None):
        self._lock = threading.Lock()
        self._by_id: dict[str, UserRecord] = {}
        self._ids_by_identifier: dict[str, str] = {}
        for identifier, record in users or []:
            self.add(identifier, record)

    def add(self, identifier: str, record: UserRecord) -> None:
        with self._lock:
            self._by_id[record.id] = record
            self._ids_by_identifier[identifier] = record.id

    def set_token_version(self, user_id: str, version: int) -> None:
        with self._lock:
            self._by_id[user_id] = replace(self._by_id[user_id], token_version=version)

    def set_active(self, user_id: str, is_active: bool) -> None:
        with self._lock:
            self._by_id[user_id] = replace(self._by_id[user_id], is_active=is_active)

    async def find_by_identifier(self, identifier: str) -> UserRecord | None:
        user_id = self._ids_by_identifier.get(identifier)
        return self._by_id.get(user_id) if user_id is not None else None

    async def find_by_id(self, user_id: str) -> UserRecord | None:
        return self._by_id.get(user_id)

    async def increment_token_version(self, user_id: str) -> int | None:
        with self._lock:
            record = self._by_id.get(user_id)
            if record is None:
                return None
            updated = replace(record, token_version=record.token_version + 1)
            self._by_id[user_id] = updated
            return updated.token_version
