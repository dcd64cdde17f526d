"""
Tests for session tokens.
"""

from datetime import datetime, timedelta, timezone

from jose import jwt

from app.core.config import settings
from app.core.security import create_session_token, decode_session_token


class TestSessionTokens:

    def test_round_trip(self):
        token, session_id = create_session_token("owner@example.com")

        assert decode_session_token(token) == "owner@example.com"

        claims = jwt.get_unverified_claims(token)
        assert claims["type"] == "session"
        assert claims["jti"] == session_id

    def test_explicit_session_id(self):
        token, session_id = create_session_token("owner@example.com", session_id="abc")

        assert session_id == "abc"
        assert jwt.get_unverified_claims(token)["jti"] == "abc"

    def test_expired_token_is_rejected(self):
        token, _ = create_session_token("owner@example.com", expires_delta=timedelta(minutes=-1))

        assert decode_session_token(token) is None

    def test_wrong_key_is_rejected(self):
        token = jwt.encode(
            {
                "sub": "owner@example.com",
                "type": "session",
                "exp": datetime.now(timezone.utc) + timedelta(minutes=5),
            },
            "some-other-key",
            algorithm=settings.ALGORITHM,
        )

        assert decode_session_token(token) is None

    def test_other_token_type_is_rejected(self):
        token = jwt.encode(
            {
                "sub": "owner@example.com",
                "type": "access",
                "exp": datetime.now(timezone.utc) + timedelta(minutes=5),
            },
            settings.SECRET_KEY,
            algorithm=settings.ALGORITHM,
        )

        assert decode_session_token(token) is None

    def test_garbage_is_rejected(self):
        assert decode_session_token("not-a-token") is None
