"""
Auth Service Domain Entities

All domain entities organized by model.
Each entity in its own file for better maintainability.
"""

# Export all enums
from .enums import AuthProvider, SignupOutcomeKind

# Export all entities
from .session import Session
from .user import CachedUser, User, merge_cached_user
from .tokens import AuthTokens, JwtPayload, SignedToken
from .rate_limit import RateLimitRecord
from .oauth import ClientInfo, OAuthClaims
from .signup_outcome import NeedsProfileCompletion, SignupOutcome, TokensIssued

__all__ = [
    # Enums
    "AuthProvider",
    "SignupOutcomeKind",
    # Entities
    "Session",
    "User",
    "CachedUser",
    "AuthTokens",
    "JwtPayload",
    "SignedToken",
    "RateLimitRecord",
    "ClientInfo",
    "OAuthClaims",
    "TokensIssued",
    "NeedsProfileCompletion",
    "SignupOutcome",
    # Helpers
    "merge_cached_user",
]
