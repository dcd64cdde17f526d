"""
Tests for GoogleAuthClient against a mocked Google (httpx.MockTransport).
"""

from urllib.parse import parse_qs, urlparse

import httpx
import pytest

from app.environments.base import AuthenticationError
from app.environments.google import DRIVE_CONNECT_SCOPES, GoogleAuthClient


def _client(handler) -> GoogleAuthClient:
    return GoogleAuthClient(
        client_id="cid",
        client_secret="secret",
        redirect_uri="https://copy.example.com/api/auth/google-drive/callback",
        transport=httpx.MockTransport(handler),
    )


class TestAuthorizationUrl:

    def test_scopes_are_not_duplicated(self):
        client = _client(lambda request: httpx.Response(404))

        url = client.get_authorization_url(DRIVE_CONNECT_SCOPES, state="s")

        scopes = parse_qs(urlparse(url).query)["scope"][0].split(" ")
        assert len(scopes) == len(set(scopes))
        assert "https://www.googleapis.com/auth/drive" in scopes

    def test_configuration_check(self):
        assert _client(lambda request: httpx.Response(404)).is_configured is True

        client = GoogleAuthClient(client_id="cid", client_secret="secret", redirect_uri="x")
        client.client_secret = ""
        assert client.is_configured is False
        assert client.missing_configuration() == ["GOOGLE_CLIENT_SECRET"]

    def test_states_are_random(self):
        assert GoogleAuthClient.generate_state() != GoogleAuthClient.generate_state()


class TestTokenExchange:

    @pytest.mark.asyncio
    async def test_exchange_posts_code_and_parses_tokens(self):
        seen = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(request)
            return httpx.Response(200, json={
                "access_token": "ya29.a",
                "refresh_token": "1//r",
                "expires_in": 3600,
                "scope": "https://www.googleapis.com/auth/drive openid",
                "token_type": "Bearer",
            })

        tokens = await _client(handler).exchange_code_for_tokens("4/code")

        assert tokens.access_token == "ya29.a"
        assert tokens.refresh_token == "1//r"
        assert tokens.expires_at is not None
        assert tokens.scope == "https://www.googleapis.com/auth/drive openid"

        form = parse_qs(seen[0].content.decode())
        assert form["code"] == ["4/code"]
        assert form["grant_type"] == ["authorization_code"]
        assert form["redirect_uri"] == ["https://copy.example.com/api/auth/google-drive/callback"]

    @pytest.mark.asyncio
    async def test_exchange_failure_raises(self):
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(400, json={"error": "invalid_grant", "error_description": "Bad Request"})

        with pytest.raises(AuthenticationError) as exc_info:
            await _client(handler).exchange_code_for_tokens("used")

        assert "Bad Request" in str(exc_info.value)

    @pytest.mark.asyncio
    async def test_network_error_raises(self):
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("no route to host")

        with pytest.raises(AuthenticationError):
            await _client(handler).exchange_code_for_tokens("4/code")


class TestUserInfo:

    @pytest.mark.asyncio
    async def test_user_info(self):
        def handler(request: httpx.Request) -> httpx.Response:
            assert request.headers["authorization"] == "Bearer ya29.a"
            return httpx.Response(200, json={
                "id": "google-123",
                "email": "owner@example.com",
                "name": "Sam Owner",
                "verified_email": True,
            })

        profile = await _client(handler).get_user_info("ya29.a")

        assert profile.provider_user_id == "google-123"
        assert profile.email == "owner@example.com"
        assert profile.name == "Sam Owner"

    @pytest.mark.asyncio
    async def test_user_info_failure_raises(self):
        with pytest.raises(AuthenticationError):
            await _client(lambda request: httpx.Response(401)).get_user_info("expired")
