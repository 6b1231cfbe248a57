"""
User Snapshot

The user record is owned by the remote directory service. Copies held here
(fetched or cached) are read-only snapshots.
"""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class User(BaseModel):
    """Read-only snapshot of a directory user"""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        frozen=True,
        extra="ignore",
    )

    id: str
    email: str
    first_name: str = ""
    last_name: str = ""
    phone: Optional[str] = None
    avatar: Optional[str] = None
    role: Optional[str] = None
    provider: Optional[str] = None
    is_active: bool = True
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class CachedUser(User):
    """User snapshot as stored in the cache, with the last issued refresh token"""

    refresh_token: Optional[str] = None

    def to_user(self) -> User:
        return User.model_validate(self.model_dump(exclude={"refresh_token"}))


# Fields the directory is authoritative for. A fresh fetch always wins here.
AUTHORITATIVE_FIELDS = frozenset({"id", "email", "role", "is_active", "provider"})


def merge_cached_user(fetched: User, cached: Optional[User]) -> User:
    """
    Combine a freshly fetched user with its cached snapshot.

    Precedence:
    - id, email, role, is_active, provider: always taken from ``fetched``
    - every other field: ``fetched`` unless it is None or empty, then ``cached``
    """
    if cached is None:
        return fetched

    merged = {}
    for name in User.model_fields:
        fresh = getattr(fetched, name)
        if name in AUTHORITATIVE_FIELDS or fresh not in (None, ""):
            merged[name] = fresh
        else:
            merged[name] = getattr(cached, name)
    return User.model_validate(merged)
