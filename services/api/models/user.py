"""
Pydantic models for user records.
"""

from enum import Enum
from typing import List

from pydantic import BaseModel, ConfigDict, Field


class UserRole(str, Enum):
    USER = "user"
    ADMIN = "admin"
    READ_ONLY_ADMIN = "read-only-admin"


class User(BaseModel):
    """User record as returned on the wire."""

    model_config = ConfigDict(populate_by_name=True)

    id: str
    email: str
    name: str
    role: str = UserRole.USER.value
    created_at: str = Field(alias="createdAt")

    def to_wire(self) -> dict:
        return self.model_dump(by_alias=True)


class Pagination(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    page: int
    limit: int
    total: int
    total_pages: int = Field(alias="totalPages")


class UserList(BaseModel):
    users: List[User]
    pagination: Pagination

    def to_wire(self) -> dict:
        return self.model_dump(by_alias=True)
