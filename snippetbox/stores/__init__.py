"""Data store gateways for users, snippets and review counters."""

from snippetbox.stores.errors import (
    DuplicateEmailError,
    InvalidCredentialsError,
    ModelError,
    NoRecordError,
    StoreError,
)
from snippetbox.stores.interfaces import (
    ReviewModelInterface,
    SnippetModelInterface,
    UserModelInterface,
)
from snippetbox.stores.reviews import ReviewModel
from snippetbox.stores.snippets import SnippetModel
from snippetbox.stores.users import UserModel

__all__ = [
    "DuplicateEmailError",
    "InvalidCredentialsError",
    "ModelError",
    "NoRecordError",
    "StoreError",
    "ReviewModelInterface",
    "SnippetModelInterface",
    "UserModelInterface",
    "ReviewModel",
    "SnippetModel",
    "UserModel",
]
