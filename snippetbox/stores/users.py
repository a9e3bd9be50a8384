import logging
from typing import Iterable

from passlib.context import CryptContext
from sqlalchemy import exists, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import sessionmaker

from snippetbox.db.models import User
from snippetbox.stores.base import SQLAlchemyModel
from snippetbox.stores.errors import DuplicateEmailError, InvalidCredentialsError, NoRecordError
from snippetbox.stores.interfaces import UserModelInterface

logger = logging.getLogger(__name__)


class UserModel(SQLAlchemyModel, UserModelInterface):
    """Users table gateway"""

    def __init__(
        self,
        session_factory: sessionmaker,
        pwd_context: CryptContext,
        owner_emails: Iterable[str] = (),
    ):
        super().__init__(session_factory)
        self.pwd_context = pwd_context
        self.owner_emails = {email.lower() for email in owner_emails}

    def insert(self, name: str, email: str, password: str) -> None:
        hashed_password = self.pwd_context.hash(password)
        user = User(
            name=name,
            email=email,
            hashed_password=hashed_password,
            is_owner=email.lower() in self.owner_emails,
        )

        with self.transaction() as db:
            db.add(user)
            try:
                db.flush()
            except IntegrityError as e:
                if "email" in str(e.orig).lower():
                    raise DuplicateEmailError() from e
                raise

        logger.info("Created user", extra={"user_id": user.id, "is_owner": user.is_owner})

    def authenticate(self, email: str, password: str) -> int:
        with self.transaction() as db:
            row = db.execute(
                select(User.id, User.hashed_password).where(User.email == email)
            ).first()

        if row is None:
            raise InvalidCredentialsError()

        user_id, hashed_password = row
        if not self.pwd_context.verify(password, hashed_password):
            raise InvalidCredentialsError()

        return user_id

    def exists(self, user_id: int) -> bool:
        with self.transaction() as db:
            return bool(db.scalar(select(exists().where(User.id == user_id))))

    def authorize(self, user_id: int) -> bool:
        with self.transaction() as db:
            is_owner = db.scalar(select(User.is_owner).where(User.id == user_id))
        return bool(is_owner)

    def get(self, user_id: int) -> User:
        with self.transaction() as db:
            user = db.get(User, user_id)
        if user is None:
            raise NoRecordError()
        return user

    def password_update(self, user_id: int, current_password: str, new_password: str) -> None:
        with self.transaction() as db:
            user = db.get(User, user_id)
            if user is None:
                raise NoRecordError()

            if not self.pwd_context.verify(current_password, user.hashed_password):
                raise InvalidCredentialsError()

            user.hashed_password = self.pwd_context.hash(new_password)
