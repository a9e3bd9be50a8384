"""Gateway interfaces.

Handlers and middleware stages depend on these abstract classes only, so the
SQLAlchemy implementations can be swapped for in-memory doubles in tests.
"""

from abc import ABC, abstractmethod
from typing import List

from snippetbox.db.models import Review, Snippet, User


class SnippetModelInterface(ABC):

    @abstractmethod
    def insert(self, title: str, content: str, expires: int) -> int:
        """Store a snippet expiring ``expires`` days from now and return its id."""

    @abstractmethod
    def get(self, snippet_id: int) -> Snippet:
        """Return an unexpired snippet.

        Raises:
            NoRecordError: If there is no such snippet or it has expired.
        """

    @abstractmethod
    def latest(self) -> List[Snippet]:
        """Return all unexpired snippets ordered by id."""


class UserModelInterface(ABC):

    @abstractmethod
    def insert(self, name: str, email: str, password: str) -> None:
        """Create a user.

        Raises:
            DuplicateEmailError: If the email address is already registered.
        """

    @abstractmethod
    def authenticate(self, email: str, password: str) -> int:
        """Return the id of the user with these credentials.

        Raises:
            InvalidCredentialsError: If no user matches.
        """

    @abstractmethod
    def exists(self, user_id: int) -> bool:
        pass

    @abstractmethod
    def authorize(self, user_id: int) -> bool:
        """True if the user exists and may create snippets."""

    @abstractmethod
    def get(self, user_id: int) -> User:
        pass

    @abstractmethod
    def password_update(self, user_id: int, current_password: str, new_password: str) -> None:
        pass


class ReviewModelInterface(ABC):

    @abstractmethod
    def insert(self, user_id: int, snippet_id: int) -> None:
        pass

    @abstractmethod
    def exists(self, user_id: int, snippet_id: int) -> bool:
        pass

    @abstractmethod
    def get(self, user_id: int, snippet_id: int) -> Review:
        """Return the review counter, creating a zero row on first touch."""

    @abstractmethod
    def update(self, user_id: int, snippet_id: int) -> None:
        """Atomically add one to the review counter."""
