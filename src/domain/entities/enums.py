"""
Domain Enums
"""

from enum import Enum


class AuthProvider(str, Enum):
    """Where an account's identity comes from"""

    local = "local"
    google = "google"


class SignupOutcomeKind(str, Enum):
    """Discriminator for the Google signup result"""

    tokens = "tokens"
    needs_profile_completion = "needs_profile_completion"
