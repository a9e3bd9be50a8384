"""Server-side sessions stored in the `sessiondata` table.

The client only ever holds an opaque random token in the session cookie. All
session values live in the database row keyed by that token, so a token can
be rotated (on login and logout) and the old one stops working immediately.
"""
from __future__ import annotations

import enum
import logging
import secrets
from datetime import datetime, timedelta
from typing import Any, Dict, Optional

from sqlalchemy import delete, select, update
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import sessionmaker
from starlette.responses import Response

from snippetbox.db.base import utcnow
from snippetbox.db.models.session_store import SessionData
from snippetbox.db.session import session_scope
from snippetbox.stores.errors import StoreError

logger = logging.getLogger(__name__)

# Keys used by the application
AUTHENTICATED_USER_ID = "authenticatedUserID"
REDIRECT_PATH_AFTER_LOGIN = "redirectPathAfterLogin"
FLASH = "flash"
CSRF_SECRET = "csrfSecret"


class SessionStatus(enum.Enum):
    UNMODIFIED = "unmodified"
    MODIFIED = "modified"
    DESTROYED = "destroyed"


class Session:
    """Session values for one request. Changes are written back by the session stage."""

    def __init__(
        self,
        manager: "SessionManager",
        token: Optional[str],
        data: Optional[Dict[str, Any]],
        expiry: datetime,
    ):
        self.manager = manager
        self.token = token
        self.data: Dict[str, Any] = dict(data or {})
        self.expiry = expiry
        self.status = SessionStatus.UNMODIFIED

    def _touch(self) -> None:
        if self.status is not SessionStatus.DESTROYED:
            self.status = SessionStatus.MODIFIED

    def get(self, key: str, default: Any = None) -> Any:
        return self.data.get(key, default)

    def get_int(self, key: str) -> int:
        """Integer value for key, 0 when absent or not an integer."""
        value = self.data.get(key)
        if isinstance(value, bool) or not isinstance(value, int):
            return 0
        return value

    def get_string(self, key: str) -> str:
        value = self.data.get(key)
        return value if isinstance(value, str) else ""

    def put(self, key: str, value: Any) -> None:
        self.data[key] = value
        self._touch()

    def pop(self, key: str, default: Any = None) -> Any:
        if key not in self.data:
            return default
        self._touch()
        return self.data.pop(key)

    def pop_string(self, key: str) -> str:
        value = self.pop(key)
        return value if isinstance(value, str) else ""

    def remove(self, key: str) -> None:
        if key in self.data:
            del self.data[key]
            self._touch()

    def renew_token(self) -> None:
        """Replace the session token, invalidating the old one.

        Raises:
            StoreError: If the old token could not be deleted.
        """
        self.manager.renew(self)

    def destroy(self) -> None:
        self.manager.destroy(self)

    @property
    def modified(self) -> bool:
        return self.status is SessionStatus.MODIFIED

    @property
    def destroyed(self) -> bool:
        return self.status is SessionStatus.DESTROYED


class SessionManager:
    """Loads, saves and rotates sessions, and writes the session cookie."""

    def __init__(
        self,
        session_factory: sessionmaker,
        lifetime: timedelta = timedelta(hours=12),
        cookie_name: str = "session",
        cookie_secure: bool = True,
        cookie_path: str = "/",
        cookie_same_site: str = "lax",
    ):
        self.session_factory = session_factory
        self.lifetime = lifetime
        self.cookie_name = cookie_name
        self.cookie_secure = cookie_secure
        self.cookie_path = cookie_path
        self.cookie_same_site = cookie_same_site

    @staticmethod
    def generate_token() -> str:
        return secrets.token_urlsafe(32)

    def new(self) -> Session:
        return Session(self, None, None, utcnow() + self.lifetime)

    def load(self, token: Optional[str]) -> Session:
        """Load the session for a token; unknown or expired tokens give a fresh session."""
        if not token:
            return self.new()

        try:
            with session_scope(self.session_factory) as db:
                row = db.scalar(
                    select(SessionData).where(
                        SessionData.key == token,
                        SessionData.expires_at > utcnow(),
                    )
                )
        except SQLAlchemyError as e:
            raise StoreError(f"session load: {e}") from e

        if row is None:
            return self.new()

        return Session(self, token, row.data, row.expires_at)

    def commit(self, session: Session) -> str:
        """Write the session values and return the token to send to the client."""
        if session.token is None:
            session.token = self.generate_token()

        try:
            with session_scope(self.session_factory) as db:
                result = db.execute(
                    update(SessionData)
                    .where(SessionData.key == session.token)
                    .values(data=session.data, expires_at=session.expiry)
                )
                if result.rowcount == 0:
                    db.add(SessionData(key=session.token, data=session.data, expires_at=session.expiry))
        except SQLAlchemyError as e:
            raise StoreError(f"session commit: {e}") from e

        return session.token

    def renew(self, session: Session) -> None:
        old_token = session.token
        if old_token:
            self._delete(old_token)
        session.token = self.generate_token()
        session.status = SessionStatus.MODIFIED

    def destroy(self, session: Session) -> None:
        if session.token:
            self._delete(session.token)
        session.token = None
        session.data.clear()
        session.status = SessionStatus.DESTROYED

    def _delete(self, token: str) -> None:
        try:
            with session_scope(self.session_factory) as db:
                db.execute(delete(SessionData).where(SessionData.key == token))
        except SQLAlchemyError as e:
            raise StoreError(f"session delete: {e}") from e

    def delete_expired(self) -> int:
        """Purge expired session rows. Returns the number removed."""
        try:
            with session_scope(self.session_factory) as db:
                result = db.execute(delete(SessionData).where(SessionData.expires_at <= utcnow()))
        except SQLAlchemyError as e:
            raise StoreError(f"session cleanup: {e}") from e

        if result.rowcount:
            logger.info("Purged expired sessions", extra={"count": result.rowcount})
        return result.rowcount

    def write_cookie(self, response: Response, token: str, expiry: datetime) -> None:
        max_age = max(int((expiry - utcnow()).total_seconds()), 0)
        response.set_cookie(
            self.cookie_name,
            token,
            max_age=max_age,
            path=self.cookie_path,
            secure=self.cookie_secure,
            httponly=True,
            samesite=self.cookie_same_site,
        )

    def expire_cookie(self, response: Response) -> None:
        response.delete_cookie(
            self.cookie_name,
            path=self.cookie_path,
            secure=self.cookie_secure,
            httponly=True,
            samesite=self.cookie_same_site,
        )
