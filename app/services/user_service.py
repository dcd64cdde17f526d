"""
User Service - get-or-create users by email.

Email is the identity key. Creation is a conditional insert on the unique
email column, so two first-time requests for the same email still end up
with one row.
"""

import logging
from datetime import datetime, timezone
from typing import Optional

from sqlalchemy import select

from app.models.user import User
from app.services.store_base import StoreService, insert_for


logger = logging.getLogger("tekton.services.users")


class UserService(StoreService):
    """
    Usage:
        users = UserService(db)
        user = users.get_or_create_user_by_email("owner@example.com", name="Sam")
    """

    def get_or_create_user_by_email(
        self,
        email: str,
        name: Optional[str] = None,
        google_user_id: Optional[str] = None,
    ) -> User:
        """
        Return the user with this email, creating it first if needed.

        An existing user is returned unchanged; name and google_user_id
        only apply to a newly created row.
        """
        with self._translate_errors("create user"):
            table = User.__table__
            stmt = (
                insert_for(self.db, table)
                .values(email=email, name=name, google_user_id=google_user_id)
                .on_conflict_do_nothing(index_elements=[table.c.email])
            )
            result = self.db.execute(stmt)
            self.db.commit()

            user = self.db.scalars(select(User).where(User.email == email)).one()

        if result.rowcount:
            logger.info(f"Created user {user.id} for {email}")
        else:
            logger.debug(f"Found existing user {user.id} for {email}")

        return user

    def record_session(self, user: User, session_id: str) -> User:
        """Remember the latest session token id issued to this user."""
        with self._translate_errors("record session"):
            user.session_id = session_id
            user.last_active = datetime.now(timezone.utc)
            self.db.commit()
            self.db.refresh(user)
        return user
