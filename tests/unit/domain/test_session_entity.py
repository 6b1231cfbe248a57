from datetime import datetime, timedelta

from src.domain.entities import Session

NOW = datetime(2024, 1, 1, 12, 0, 0)


def test_expiry_is_inclusive():
    session = Session(user_id="u1", expires_at=NOW)

    assert session.is_expired(NOW) is True
    assert session.is_expired(NOW - timedelta(seconds=1)) is False


def test_pending_until_refresh_token_is_bound():
    session = Session(user_id="u1", expires_at=NOW)

    assert session.is_pending() is True
    session.refresh_token = "a" * 64
    assert session.is_pending() is False
