"""Database models"""

from snippetbox.db.models.review import Review
from snippetbox.db.models.session_store import SessionData
from snippetbox.db.models.snippet import Snippet
from snippetbox.db.models.user import User

__all__ = [
    "Review",
    "SessionData",
    "Snippet",
    "User",
]
