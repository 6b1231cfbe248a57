import os
import yaml

ROOT_PATH = os.path.dirname(__file__)
CONFIG_FILE_PATH = os.path.join(ROOT_PATH, "env.yaml")

if os.path.exists(CONFIG_FILE_PATH):
    with open(CONFIG_FILE_PATH, "r") as r_file:
        data = yaml.safe_load(r_file) or dict()
else:
    data = dict()


class ApplicationConfig:
    DB_URI = data.get("DB_URI", "sqlite+aiosqlite:///./sessions.db")
    REDIS_URL = data.get("REDIS_URL", "redis://localhost:6379/0")
    API_PREFIX = data.get("API_PREFIX", "/api")
    API_PORT = data.get("API_PORT", 8000)
    API_HOST = data.get("API_HOST", "0.0.0.0")
    CORS_ORIGINS = data.get("CORS_ORIGINS", [])
    CORS_ALLOW_CREDENTIALS = data.get("CORS_ALLOW_CREDENTIALS", True)
    LOG_LEVEL = data.get("LOG_LEVEL", "INFO")
    ENABLE_SENTRY = data.get("ENABLE_SENTRY", 0)
    DSN_SENTRY = data.get("DSN_SENTRY", "")
    SENTRY_ENVIRONMENT = data.get("SENTRY_ENVIRONMENT", "dev")

    # Tokens
    JWT_SECRET = data.get("JWT_SECRET", "dev-secret-key-change-in-production")
    JWT_ALGORITHM = data.get("JWT_ALGORITHM", "HS256")
    JWT_ACCESS_EXPIRES_SECONDS = int(data.get("JWT_ACCESS_EXPIRES_SECONDS", 15 * 60))
    JWT_REFRESH_EXPIRES_SECONDS = int(
        data.get("JWT_REFRESH_EXPIRES_SECONDS", 7 * 24 * 60 * 60)
    )

    # Sessions
    SESSION_TTL_SECONDS = int(data.get("SESSION_TTL_SECONDS", 7 * 24 * 60 * 60))
    PENDING_SESSION_GRACE_SECONDS = int(data.get("PENDING_SESSION_GRACE_SECONDS", 300))
    SESSION_SWEEP_INTERVAL_SECONDS = float(data.get("SESSION_SWEEP_INTERVAL_SECONDS", 10))
    ENABLE_SESSION_SWEEP = bool(data.get("ENABLE_SESSION_SWEEP", True))

    # Login throttling
    RATE_LIMIT_BACKEND = data.get("RATE_LIMIT_BACKEND", "memory")
    RATE_LIMIT_MAX_ATTEMPTS = int(data.get("RATE_LIMIT_MAX_ATTEMPTS", 5))
    RATE_LIMIT_LOCKOUT_SECONDS = int(data.get("RATE_LIMIT_LOCKOUT_SECONDS", 15 * 60))

    # User cache
    CACHE_BACKEND = data.get("CACHE_BACKEND", "memory")
    USER_CACHE_TTL_SECONDS = int(data.get("USER_CACHE_TTL_SECONDS", 24 * 60 * 60))

    # Remote user directory
    USERS_SERVICE_URL = data.get("USERS_SERVICE_URL", "http://localhost:3000")
    USERS_SERVICE_TIMEOUT_SECONDS = float(data.get("USERS_SERVICE_TIMEOUT_SECONDS", 5))

    # Google identity
    GOOGLE_CLIENT_ID = data.get("GOOGLE_CLIENT_ID", "")
    GOOGLE_CERTS_URL = data.get(
        "GOOGLE_CERTS_URL", "https://www.googleapis.com/oauth2/v3/certs"
    )
    OAUTH_TIMEOUT_SECONDS = float(data.get("OAUTH_TIMEOUT_SECONDS", 5))
