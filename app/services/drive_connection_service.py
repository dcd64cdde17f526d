"""
Drive Connection Service - persist and look up Google Drive tokens.

save_google_drive_connection() is the one write the OAuth callback performs.
It upserts on google_email, so connecting the same Google account again
updates the existing row with the newest tokens.

Lookups only return connections that are active and whose access token has
not expired (or has no expiry recorded).
"""

import logging
from datetime import datetime, timezone
from typing import Optional

from sqlalchemy import func, or_, select

from app.core.exceptions import MissingProfileEmailError, StoreError
from app.environments.base import OAuthTokens, UserInfo
from app.models.google_drive_connection import GoogleDriveConnection
from app.services.store_base import StoreService, insert_for
from app.services.user_service import UserService


logger = logging.getLogger("tekton.services.drive_connections")


class DriveConnectionService(StoreService):
    """
    Usage:
        connections = DriveConnectionService(db)
        connection = connections.save_google_drive_connection(tokens, profile)

        if connections.has_active_connection("owner@example.com"):
            credentials = connections.get_active_connection(
                "owner@example.com"
            ).to_webhook_credentials()
    """

    def save_google_drive_connection(
        self,
        tokens: OAuthTokens,
        profile: UserInfo,
    ) -> GoogleDriveConnection:
        """
        Get-or-create the user for the profile email, then upsert the connection.

        A token response without a refresh token keeps the stored one.

        Raises:
            MissingProfileEmailError: Google returned no email
            StoreError: No access token, or the database write failed
        """
        email = profile.email
        if not email:
            logger.error("No email found in Google OAuth response")
            raise MissingProfileEmailError("No email found in Google OAuth response")

        if not tokens.access_token:
            raise StoreError("Access token is required but not provided")

        logger.info(
            f"Saving Google Drive connection for {email}",
            extra={
                "has_refresh_token": tokens.refresh_token is not None,
                "has_expires_at": tokens.expires_at is not None,
            },
        )

        user = UserService(self.db).get_or_create_user_by_email(
            email,
            name=profile.name,
            google_user_id=profile.provider_user_id,
        )

        with self._translate_errors("save Google Drive connection"):
            table = GoogleDriveConnection.__table__
            stmt = insert_for(self.db, table).values(
                user_id=user.id,
                google_email=email,
                access_token=tokens.access_token,
                refresh_token=tokens.refresh_token,
                token_expires_at=tokens.expires_at,
                scope=tokens.scope,
                is_active=True,
            )
            stmt = stmt.on_conflict_do_update(
                index_elements=[table.c.google_email],
                set_={
                    "user_id": stmt.excluded.user_id,
                    "access_token": stmt.excluded.access_token,
                    "refresh_token": func.coalesce(
                        stmt.excluded.refresh_token, table.c.refresh_token
                    ),
                    "token_expires_at": stmt.excluded.token_expires_at,
                    "scope": stmt.excluded.scope,
                    "is_active": True,
                    "error_message": None,
                    "updated_at": datetime.now(timezone.utc),
                },
            )
            self.db.execute(stmt)
            self.db.commit()

            connection = self.db.scalars(
                select(GoogleDriveConnection).where(GoogleDriveConnection.google_email == email)
            ).one()

        logger.info(f"Google Drive connection upserted for {email}")
        return connection

    def get_active_connection(self, email: Optional[str]) -> Optional[GoogleDriveConnection]:
        """Active, unexpired connection for a Google email, or None."""
        if not email:
            return None

        now = datetime.now(timezone.utc)
        with self._translate_errors("fetch Google Drive connection"):
            return self.db.scalars(
                select(GoogleDriveConnection).where(
                    GoogleDriveConnection.google_email == email,
                    GoogleDriveConnection.is_active.is_(True),
                    or_(
                        GoogleDriveConnection.token_expires_at.is_(None),
                        GoogleDriveConnection.token_expires_at > now,
                    ),
                )
            ).first()

    def has_active_connection(self, email: Optional[str]) -> bool:
        return self.get_active_connection(email) is not None

    def mark_used(self, connection: GoogleDriveConnection) -> None:
        """Stamp last_used when the tokens are handed to the workflow."""
        with self._translate_errors("update Google Drive connection"):
            connection.last_used = datetime.now(timezone.utc)
            self.db.commit()
