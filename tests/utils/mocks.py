"""
In-memory doubles for the store gateways.

They implement the same interfaces as the SQLAlchemy gateways, record how
often the lookups used by the middleware stages are called, and can be told
to fail so that error paths can be exercised without a broken database.
"""

from datetime import timedelta
from typing import Dict, List, Optional

from snippetbox.db.base import utcnow
from snippetbox.db.models import Review, Snippet, User
from snippetbox.stores.errors import (
    DuplicateEmailError,
    InvalidCredentialsError,
    NoRecordError,
    StoreError,
)
from snippetbox.stores.interfaces import (
    ReviewModelInterface,
    SnippetModelInterface,
    UserModelInterface,
)

MOCK_PASSWORD = "pa$$word"


def new_mock_snippet() -> Snippet:
    now = utcnow()
    return Snippet(
        id=1,
        title="An old silent pond",
        content="An old silent pond...",
        created_at=now,
        expires=now + timedelta(days=365),
    )


class MockSnippetModel(SnippetModelInterface):
    def __init__(self):
        self.fault: Optional[Exception] = None
        self.inserted: List[tuple] = []

    def insert(self, title: str, content: str, expires: int) -> int:
        if self.fault:
            raise self.fault
        self.inserted.append((title, content, expires))
        return 2

    def get(self, snippet_id: int) -> Snippet:
        if self.fault:
            raise self.fault
        if snippet_id == 1:
            return new_mock_snippet()
        raise NoRecordError()

    def latest(self) -> List[Snippet]:
        if self.fault:
            raise self.fault
        return [new_mock_snippet()]


class MockUserModel(UserModelInterface):
    """
    Users known to the double:

    * id 1, alice@example.com, an owner
    * id 2, bob@example.com, not an owner
    """

    def __init__(self):
        self.users: Dict[int, User] = {
            1: User(id=1, name="Alice", email="alice@example.com", hashed_password="", is_owner=True,
                    created_at=utcnow()),
            2: User(id=2, name="Bob", email="bob@example.com", hashed_password="", is_owner=False,
                    created_at=utcnow()),
        }
        self.passwords: Dict[int, str] = {1: MOCK_PASSWORD, 2: MOCK_PASSWORD}
        self.fault: Optional[Exception] = None
        self.exists_calls = 0
        self.authorize_calls = 0
        self.get_calls = 0

    def _find(self, email: str) -> Optional[User]:
        for user in self.users.values():
            if user.email == email:
                return user
        return None

    def insert(self, name: str, email: str, password: str) -> None:
        if self._find(email) is not None:
            raise DuplicateEmailError()
        user_id = max(self.users) + 1
        self.users[user_id] = User(id=user_id, name=name, email=email, hashed_password="",
                                   is_owner=False, created_at=utcnow())
        self.passwords[user_id] = password

    def authenticate(self, email: str, password: str) -> int:
        user = self._find(email)
        if user is None or self.passwords[user.id] != password:
            raise InvalidCredentialsError()
        return user.id

    def exists(self, user_id: int) -> bool:
        self.exists_calls += 1
        if self.fault:
            raise self.fault
        return user_id in self.users

    def authorize(self, user_id: int) -> bool:
        self.authorize_calls += 1
        if self.fault:
            raise self.fault
        user = self.users.get(user_id)
        return bool(user and user.is_owner)

    def get(self, user_id: int) -> User:
        self.get_calls += 1
        if user_id not in self.users:
            raise NoRecordError()
        return self.users[user_id]

    def password_update(self, user_id: int, current_password: str, new_password: str) -> None:
        if user_id not in self.users:
            raise NoRecordError()
        if self.passwords[user_id] != current_password:
            raise InvalidCredentialsError()
        self.passwords[user_id] = new_password


class MockReviewModel(ReviewModelInterface):
    def __init__(self, users: MockUserModel):
        self.users = users
        self.counts: Dict[tuple, int] = {}
        self.fault: Optional[Exception] = None

    def _can_exist(self, user_id: int, snippet_id: int) -> bool:
        return user_id in self.users.users and snippet_id == 1

    def insert(self, user_id: int, snippet_id: int) -> None:
        if self._can_exist(user_id, snippet_id):
            self.counts.setdefault((user_id, snippet_id), 0)

    def exists(self, user_id: int, snippet_id: int) -> bool:
        return (user_id, snippet_id) in self.counts

    def get(self, user_id: int, snippet_id: int) -> Review:
        if self.fault:
            raise self.fault
        if not self.exists(user_id, snippet_id):
            self.insert(user_id, snippet_id)
            return Review(user_id=user_id, snippet_id=snippet_id, review=0)
        return Review(user_id=user_id, snippet_id=snippet_id, review=self.counts[(user_id, snippet_id)])

    def update(self, user_id: int, snippet_id: int) -> None:
        if self.fault:
            raise self.fault
        if not self._can_exist(user_id, snippet_id):
            raise NoRecordError()
        key = (user_id, snippet_id)
        self.counts[key] = self.counts.get(key, 0) + 1


def store_fault(message: str = "connection lost") -> StoreError:
    return StoreError(message)
