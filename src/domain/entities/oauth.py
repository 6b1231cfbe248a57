from typing import Optional

from pydantic import BaseModel


class OAuthClaims(BaseModel):
    """Claims extracted from a verified third-party identity token"""

    email: Optional[str] = None
    given_name: Optional[str] = None
    family_name: Optional[str] = None
    picture: Optional[str] = None
    subject: Optional[str] = None
    email_verified: Optional[bool] = None


class ClientInfo(BaseModel):
    """Device details stored on the session"""

    user_agent: str = ""
    ip_address: str = ""
