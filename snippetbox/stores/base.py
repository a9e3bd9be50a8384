from contextlib import contextmanager
from typing import Generator

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, sessionmaker

from snippetbox.db.session import session_scope
from snippetbox.stores.errors import StoreError


class SQLAlchemyModel:
    """Shared plumbing for the SQLAlchemy-backed gateways."""

    def __init__(self, session_factory: sessionmaker):
        self.session_factory = session_factory

    @contextmanager
    def transaction(self) -> Generator[Session, None, None]:
        """Run a unit of work, translating driver failures into StoreError."""
        try:
            with session_scope(self.session_factory) as db:
                yield db
        except SQLAlchemyError as e:
            raise StoreError(f"{type(self).__name__}: {e}") from e
