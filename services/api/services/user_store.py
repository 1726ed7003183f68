"""
User repository.

Defines the storage interface the handlers depend on. The only
implementation fabricates records: nothing is persisted, and a created
user cannot be fetched back.
"""

import time
from abc import ABC, abstractmethod
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional, Tuple

from ..models.user import User, UserRole

FIXED_CREATED_AT = "2024-01-01T00:00:00Z"
DEFAULT_EMAIL = "user@example.com"
DEFAULT_NAME = "DefaultUser"


def utc_timestamp() -> str:
    """ISO-8601 UTC timestamp with milliseconds, e.g. 2024-01-01T00:00:00.000Z."""
    now = datetime.now(timezone.utc)
    return now.isoformat(timespec="milliseconds").replace("+00:00", "Z")


class UserRepository(ABC):
    @abstractmethod
    def create(self, email: str, name: str, password: str, role: str) -> User: ...

    @abstractmethod
    def get(self, user_id: str) -> Optional[User]: ...

    @abstractmethod
    def list(self, page: int, limit: int) -> Tuple[List[User], int]:
        """Return (users, total)."""

    @abstractmethod
    def update(self, user_id: str, changes: Dict[str, Any]) -> Optional[User]: ...

    @abstractmethod
    def delete(self, user_id: str) -> bool: ...


class MockUserRepository(UserRepository):
    """Synthesizes plausible users without holding any state."""

    _FIXTURES = (
        {
            "id": "user-1",
            "email": "user@example.com",
            "name": "DefaultUser",
            "role": UserRole.USER.value,
            "createdAt": FIXED_CREATED_AT,
        },
        {
            "id": "admin-1",
            "email": "admin@example.com",
            "name": "SystemAdmin",
            "role": UserRole.ADMIN.value,
            "createdAt": FIXED_CREATED_AT,
        },
    )

    def create(self, email: str, name: str, password: str, role: str) -> User:
        # The password is accepted and dropped.
        return User(
            id=f"user-{int(time.time() * 1000)}",
            email=email,
            name=name,
            role=role,
            created_at=utc_timestamp(),
        )

    def get(self, user_id: str) -> Optional[User]:
        return User(
            id=user_id,
            email=DEFAULT_EMAIL,
            name=DEFAULT_NAME,
            role=UserRole.USER.value,
            created_at=FIXED_CREATED_AT,
        )

    def list(self, page: int, limit: int) -> Tuple[List[User], int]:
        users = [User.model_validate(data) for data in self._FIXTURES]
        return users, len(users)

    def update(self, user_id: str, changes: Dict[str, Any]) -> Optional[User]:
        return User(
            id=user_id,
            email=DEFAULT_EMAIL,
            name=changes.get("name") or DEFAULT_NAME,
            role=changes.get("role") or UserRole.USER.value,
            created_at=FIXED_CREATED_AT,
        )

    def delete(self, user_id: str) -> bool:
        return True
