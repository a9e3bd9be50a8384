import logging

from sqlalchemy import exists, select
from sqlalchemy import update as sql_update
from sqlalchemy.exc import IntegrityError

from snippetbox.db.models import Review, Snippet, User
from snippetbox.stores.base import SQLAlchemyModel
from snippetbox.stores.errors import NoRecordError
from snippetbox.stores.interfaces import ReviewModelInterface

logger = logging.getLogger(__name__)


class ReviewModel(SQLAlchemyModel, ReviewModelInterface):
    """
    Review counter gateway.

    Rows are created lazily with a zero counter the first time a
    (user, snippet) pair is touched, and only when both the user and the
    snippet exist. Anonymous viewers (user id 0) therefore always read 0.
    """

    def _create_row(self, user_id: int, snippet_id: int) -> bool:
        """Create the zero row if possible. Returns True if the row now exists."""
        with self.transaction() as db:
            if db.get(User, user_id) is None or db.get(Snippet, snippet_id) is None:
                return False

            db.add(Review(user_id=user_id, snippet_id=snippet_id, review=0))
            try:
                db.flush()
            except IntegrityError:
                # Another request created the row first
                db.rollback()
            return True

    def insert(self, user_id: int, snippet_id: int) -> None:
        self._create_row(user_id, snippet_id)

    def exists(self, user_id: int, snippet_id: int) -> bool:
        with self.transaction() as db:
            return bool(db.scalar(select(exists().where(
                Review.user_id == user_id,
                Review.snippet_id == snippet_id,
            ))))

    def get(self, user_id: int, snippet_id: int) -> Review:
        # TODO: fold the exists check into the insert to save a round trip on every view
        if not self.exists(user_id, snippet_id):
            self._create_row(user_id, snippet_id)
            return Review(user_id=user_id, snippet_id=snippet_id, review=0)

        with self.transaction() as db:
            count = db.scalar(select(Review.review).where(
                Review.user_id == user_id,
                Review.snippet_id == snippet_id,
            ))

        return Review(user_id=user_id, snippet_id=snippet_id, review=count or 0)

    def update(self, user_id: int, snippet_id: int) -> None:
        if not self.exists(user_id, snippet_id) and not self._create_row(user_id, snippet_id):
            raise NoRecordError(details={"user_id": user_id, "snippet_id": snippet_id})

        with self.transaction() as db:
            # The row lock is held until commit, so concurrent updates of
            # the same pair queue here while other pairs proceed.
            review_id = db.scalar(
                select(Review.id)
                .where(Review.user_id == user_id, Review.snippet_id == snippet_id)
                .with_for_update()
            )
            if review_id is None:
                raise NoRecordError(details={"user_id": user_id, "snippet_id": snippet_id})

            db.execute(
                sql_update(Review)
                .where(Review.id == review_id)
                .values(review=Review.review + 1)
            )

        logger.debug("Review counter incremented", extra={"user_id": user_id, "snippet_id": snippet_id})
