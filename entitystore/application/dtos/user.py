"""DTOs for user use cases (no dependency on ORM)."""

from dataclasses import dataclass
from datetime import datetime


@dataclass(frozen=True)
class UserResult:
    """User read-model and cache wire representation. Never carries the password."""

    id: int
    name: str
    email: str
    age: int = 0
    created_at: datetime | None = None
    updated_at: datetime | None = None


@dataclass(frozen=True)
class UserCreate:
    """Values for a new user row (password already hashed)."""

    name: str
    email: str
    hashed_password: str
    age: int = 0


@dataclass(frozen=True)
class UserPatch:
    """Partial update. Zero values ("" / 0 / None) mean "not provided"."""

    name: str | None = None
    email: str | None = None
    hashed_password: str | None = None
    age: int | None = None
