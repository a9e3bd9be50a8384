from sqlalchemy import BigInteger, ForeignKey, Integer, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship

from snippetbox.db.base import Base


class Review(Base):
    """Per-user review counter for a snippet"""

    __table_args__ = (UniqueConstraint("user_id", "snippet_id"),)

    # Base provides: id, created_at
    user_id: Mapped[int] = mapped_column(Integer, ForeignKey("user.id"), nullable=False)
    snippet_id: Mapped[int] = mapped_column(Integer, ForeignKey("snippet.id"), nullable=False)
    review: Mapped[int] = mapped_column(BigInteger, default=0, server_default="0", nullable=False)

    user: Mapped["User"] = relationship("User", back_populates="reviews")  # noqa: F821
    snippet: Mapped["Snippet"] = relationship("Snippet", back_populates="reviews")  # noqa: F821

    def __repr__(self) -> str:
        return f"<Review(user_id={self.user_id}, snippet_id={self.snippet_id}, review={self.review})>"
