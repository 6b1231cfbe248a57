"""
Session DTOs

Command objects accepted by SessionService.
"""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel


class SessionCreate(BaseModel):
    """Draft of a new session. refresh_token stays empty until tokens are minted."""

    user_id: str
    expires_at: datetime
    refresh_token: str = ""
    user_agent: str = ""
    ip_address: str = ""
    is_active: bool = True


class SessionUpdate(BaseModel):
    """Partial update. Only fields explicitly set are written; None can only clear last_used_at."""

    refresh_token: Optional[str] = None
    is_active: Optional[bool] = None
    last_used_at: Optional[datetime] = None
    expires_at: Optional[datetime] = None
