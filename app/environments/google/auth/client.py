"""
Google OAuth Client - Handles the OAuth 2.0 flow with Google APIs.

Implements the authorization code flow used to connect a Google Drive:

1. get_authorization_url() → User redirected to Google
2. exchange_code_for_tokens() → Called in the callback, gets tokens
3. get_user_info() → Fetch the Google account's email, name and id

The tokens are not used by this app to call Drive; they are stored and
handed to the automation workflow with each generation request.

References:
===========
- OAuth 2.0: https://developers.google.com/identity/protocols/oauth2/web-server
- Token endpoint: https://oauth2.googleapis.com/token
- Userinfo: https://www.googleapis.com/oauth2/v2/userinfo
"""

import logging
import secrets
from typing import List, Optional
from urllib.parse import urlencode

import httpx

from app.core.config import settings
from app.environments.base import (
    EnvironmentProvider,
    OAuthTokens,
    UserInfo,
    AuthenticationError,
)
from app.environments.google.auth.schemas import (
    GoogleTokenResponse,
    GoogleUserInfo,
    PROFILE_SCOPES,
)


logger = logging.getLogger("tekton.environments.google.auth")


class GoogleAuthClient(EnvironmentProvider):
    """
    Google OAuth 2.0 Client implementation.

    Example Usage:
        client = GoogleAuthClient()

        # Step 1: Generate auth URL
        auth_url = client.get_authorization_url(
            scopes=DRIVE_CONNECT_SCOPES,
            state=client.generate_state(),
        )

        # Step 2: Handle callback
        tokens = await client.exchange_code_for_tokens(code="4/0Ab...")

        # Step 3: Get user info
        user_info = await client.get_user_info(tokens.access_token)
    """

    provider_name = "google"

    # Google OAuth endpoints
    AUTHORIZATION_URL = "https://accounts.google.com/o/oauth2/v2/auth"
    TOKEN_URL = "https://oauth2.googleapis.com/token"
    USERINFO_URL = "https://www.googleapis.com/oauth2/v2/userinfo"

    def __init__(
        self,
        client_id: Optional[str] = None,
        client_secret: Optional[str] = None,
        redirect_uri: Optional[str] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        """
        Initialize the Google OAuth client.

        Args:
            client_id: Google OAuth Client ID (defaults to settings)
            client_secret: Google OAuth Client Secret (defaults to settings)
            redirect_uri: OAuth callback URL (defaults to {APP_URL}/api/auth/google-drive/callback)
            transport: Optional httpx transport (tests pass httpx.MockTransport)
        """
        self.client_id = client_id or settings.GOOGLE_CLIENT_ID
        self.client_secret = client_secret or settings.GOOGLE_CLIENT_SECRET
        self.redirect_uri = redirect_uri or (
            settings.google_redirect_uri if settings.app_base_url else ""
        )
        self._transport = transport

    @property
    def is_configured(self) -> bool:
        """True when client id, client secret and redirect URI are all set."""
        return bool(self.client_id and self.client_secret and self.redirect_uri)

    def missing_configuration(self) -> List[str]:
        """Names of the settings that are missing (for the error log)."""
        missing = []
        if not self.client_id:
            missing.append("GOOGLE_CLIENT_ID")
        if not self.client_secret:
            missing.append("GOOGLE_CLIENT_SECRET")
        if not self.redirect_uri:
            missing.append("APP_URL")
        return missing

    # -------------------------------------------------------------------------
    # AUTHORIZATION URL
    # -------------------------------------------------------------------------

    def get_authorization_url(
        self,
        scopes: List[str],
        state: str,
        redirect_uri: Optional[str] = None,
        include_profile: bool = True,
        access_type: str = "offline",
        prompt: str = "consent",
        include_granted_scopes: bool = True,
    ) -> str:
        """
        Generate the Google OAuth authorization URL.

        Args:
            scopes: List of OAuth scopes to request
            state: Opaque value Google echoes back on the callback
            redirect_uri: Override default callback URL
            include_profile: Add profile scopes for user info (default: True)
            access_type: "offline" for refresh token, "online" for access only
            prompt: "consent" forces the consent screen, so Google returns a
                    refresh token on every connect
            include_granted_scopes: Incremental authorization

        Returns:
            Full authorization URL to redirect the user to
        """
        all_scopes = list(scopes)
        if include_profile:
            for scope in PROFILE_SCOPES:
                if scope not in all_scopes:
                    all_scopes.append(scope)

        params = {
            "client_id": self.client_id,
            "redirect_uri": redirect_uri or self.redirect_uri,
            "response_type": "code",
            "scope": " ".join(all_scopes),
            "state": state,
            "access_type": access_type,
            "prompt": prompt,
            "include_granted_scopes": "true" if include_granted_scopes else "false",
        }

        auth_url = f"{self.AUTHORIZATION_URL}?{urlencode(params)}"

        logger.info(
            f"Generated Google auth URL with {len(all_scopes)} scopes",
            extra={"scopes": all_scopes},
        )

        return auth_url

    # -------------------------------------------------------------------------
    # TOKEN EXCHANGE
    # -------------------------------------------------------------------------

    async def exchange_code_for_tokens(
        self,
        code: str,
        redirect_uri: Optional[str] = None,
    ) -> OAuthTokens:
        """
        Exchange authorization code for access and refresh tokens.

        Authorization codes are single-use: replaying one (e.g. a browser
        back-button resubmission of the callback) fails here with
        "invalid_grant".

        Args:
            code: Authorization code from Google callback
            redirect_uri: Must match the redirect_uri used in authorization

        Returns:
            OAuthTokens with access_token, refresh_token, expiration, etc.

        Raises:
            AuthenticationError: If token exchange fails
        """
        token_data = {
            "client_id": self.client_id,
            "client_secret": self.client_secret,
            "code": code,
            "grant_type": "authorization_code",
            "redirect_uri": redirect_uri or self.redirect_uri,
        }

        logger.info("Exchanging authorization code for tokens")

        async with httpx.AsyncClient(transport=self._transport) as client:
            try:
                response = await client.post(
                    self.TOKEN_URL,
                    data=token_data,
                    timeout=30.0,
                )
            except httpx.RequestError as e:
                logger.error(f"Network error during token exchange: {e}")
                raise AuthenticationError(f"Network error: {e}")

        if response.status_code != 200:
            error_msg = _error_description(response)
            logger.error(f"Token exchange failed: {error_msg}")
            raise AuthenticationError(f"Token exchange failed: {error_msg}")

        token_response = GoogleTokenResponse(**response.json())

        logger.info(
            "Obtained Google tokens",
            extra={
                "has_refresh_token": token_response.refresh_token is not None,
                "expires_in": token_response.expires_in,
                "scopes": token_response.get_scopes_list(),
            },
        )

        return OAuthTokens(
            access_token=token_response.access_token,
            token_type=token_response.token_type,
            refresh_token=token_response.refresh_token,
            expires_at=token_response.get_expires_at(),
            scopes=token_response.get_scopes_list(),
            extra_data={"id_token": token_response.id_token} if token_response.id_token else None,
        )

    # -------------------------------------------------------------------------
    # USER INFO
    # -------------------------------------------------------------------------

    async def get_user_info(self, access_token: str) -> UserInfo:
        """
        Get the Google account's profile (email, name, id).

        Args:
            access_token: Valid access token with the profile/email scopes

        Returns:
            UserInfo with Google account details

        Raises:
            AuthenticationError: If the profile cannot be fetched
        """
        logger.info("Fetching user info from Google")

        async with httpx.AsyncClient(transport=self._transport) as client:
            try:
                response = await client.get(
                    self.USERINFO_URL,
                    headers={"Authorization": f"Bearer {access_token}"},
                    timeout=30.0,
                )
            except httpx.RequestError as e:
                logger.error(f"Network error fetching user info: {e}")
                raise AuthenticationError(f"Network error: {e}")

        if response.status_code != 200:
            logger.error(f"Failed to fetch user info: {response.status_code} {response.text}")
            raise AuthenticationError("Failed to fetch user info")

        google_user = GoogleUserInfo(**response.json())

        logger.info(f"Fetched Google user info for {google_user.email}")

        return UserInfo(
            provider_user_id=google_user.id,
            email=google_user.email,
            name=google_user.name,
            picture_url=google_user.picture,
            extra_data={
                "given_name": google_user.given_name,
                "family_name": google_user.family_name,
                "verified_email": google_user.verified_email,
                "locale": google_user.locale,
            },
        )

    # -------------------------------------------------------------------------
    # UTILITY METHODS
    # -------------------------------------------------------------------------

    @staticmethod
    def generate_state() -> str:
        """
        Generate an opaque state parameter.

        Returns:
            Random URL-safe string
        """
        return secrets.token_urlsafe(32)


def _error_description(response: httpx.Response) -> str:
    """Best-effort error text from a Google error response."""
    try:
        error_data = response.json()
    except ValueError:
        return response.text
    if isinstance(error_data, dict):
        return error_data.get("error_description") or error_data.get("error") or response.text
    return response.text
