from typing import List

from sqlalchemy import Boolean, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from snippetbox.db.base import Base


class User(Base):
    """Registered account"""

    # Base provides: id, created_at
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    email: Mapped[str] = mapped_column(String(255), unique=True, index=True, nullable=False)
    hashed_password: Mapped[str] = mapped_column(String(60), nullable=False)
    # Owners may create snippets
    is_owner: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)

    reviews: Mapped[List["Review"]] = relationship("Review", back_populates="user")  # noqa: F821

    def __repr__(self) -> str:
        return f"<User(id={self.id}, email='{self.email}', is_owner={self.is_owner})>"
