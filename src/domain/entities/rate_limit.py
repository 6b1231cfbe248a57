from datetime import datetime

from pydantic import BaseModel


class RateLimitRecord(BaseModel):
    """Outstanding failed attempts for one account key"""

    key: str
    count: int = 0
    last_attempt: datetime
