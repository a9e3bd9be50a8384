from datetime import datetime
from typing import Any, Optional

from sqlalchemy import JSON, DateTime, String
from sqlalchemy.orm import Mapped, mapped_column

from snippetbox.db.base import Base


class SessionData(Base):
    """Server-side session state, keyed by the token stored in the session cookie."""

    # Base provides: id, created_at
    key: Mapped[str] = mapped_column(String(64), unique=True, index=True, nullable=False)
    data: Mapped[Optional[dict[str, Any]]] = mapped_column(JSON, nullable=True)
    expires_at: Mapped[datetime] = mapped_column(DateTime, index=True, nullable=False)

    def __repr__(self) -> str:  # pragma: no cover - debug helper
        return f"<SessionData(expires_at={self.expires_at!r})>"
