from datetime import datetime
from typing import List

from sqlalchemy import DateTime, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from snippetbox.db.base import Base


class Snippet(Base):
    """A short text snippet, visible until it expires"""

    # Base provides: id, created_at
    title: Mapped[str] = mapped_column(String(100), nullable=False)
    content: Mapped[str] = mapped_column(Text, nullable=False)
    expires: Mapped[datetime] = mapped_column(DateTime, index=True, nullable=False)

    reviews: Mapped[List["Review"]] = relationship("Review", back_populates="snippet")  # noqa: F821

    def __repr__(self) -> str:
        return f"<Snippet(id={self.id}, title='{self.title}', expires={self.expires})>"
