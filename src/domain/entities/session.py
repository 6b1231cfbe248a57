"""
Session Entity

Server-side record binding a refresh token to a user, device and expiry.
"""

from datetime import datetime
from typing import Optional
from uuid import UUID, uuid4

from sqlmodel import Column, DateTime, Field, Index, SQLModel

from src.domain.base import utcnow


class Session(SQLModel, table=True):
    """
    Session entity - one row per logged-in device.

    Business Rules:
    - Never persisted with expires_at in the past
    - refresh_token is empty while the login saga is still pending
    - Rotated on every refresh
    - Deleted on logout, or by the expiry sweep once expires_at <= now
    """

    __tablename__ = "sessions"

    id: UUID = Field(default_factory=uuid4, primary_key=True)

    # User ids are owned by the remote directory service
    user_id: str = Field(nullable=False, index=True, max_length=64)

    refresh_token: str = Field(default="", max_length=128)
    user_agent: str = Field(default="", max_length=512)
    ip_address: str = Field(default="", max_length=64)
    is_active: bool = Field(default=True)

    # Timestamps (naive UTC)
    expires_at: datetime = Field(sa_column=Column(DateTime, nullable=False))
    created_at: datetime = Field(default_factory=utcnow, sa_column=Column(DateTime))
    last_used_at: Optional[datetime] = Field(default=None, sa_column=Column(DateTime))
    updated_at: Optional[datetime] = Field(default=None, sa_column=Column(DateTime))

    __table_args__ = (
        Index("idx_session_expires_at", "expires_at"),
        Index("idx_session_refresh_token", "refresh_token"),
    )

    def is_expired(self, now: Optional[datetime] = None) -> bool:
        return self.expires_at <= (now or utcnow())

    def is_pending(self) -> bool:
        """True until the minted refresh token has been written back."""
        return not self.refresh_token
