from datetime import timedelta
from typing import List

from sqlalchemy import select

from snippetbox.db.base import utcnow
from snippetbox.db.models import Snippet
from snippetbox.stores.base import SQLAlchemyModel
from snippetbox.stores.errors import NoRecordError
from snippetbox.stores.interfaces import SnippetModelInterface


class SnippetModel(SQLAlchemyModel, SnippetModelInterface):
    """Snippets table gateway. Expired snippets are filtered out, never deleted."""

    def insert(self, title: str, content: str, expires: int) -> int:
        now = utcnow()
        snippet = Snippet(
            title=title,
            content=content,
            created_at=now,
            expires=now + timedelta(days=expires),
        )
        with self.transaction() as db:
            db.add(snippet)
            db.flush()
            return snippet.id

    def get(self, snippet_id: int) -> Snippet:
        with self.transaction() as db:
            snippet = db.scalar(
                select(Snippet).where(Snippet.expires > utcnow(), Snippet.id == snippet_id)
            )
        if snippet is None:
            raise NoRecordError()
        return snippet

    def latest(self) -> List[Snippet]:
        with self.transaction() as db:
            return list(
                db.scalars(select(Snippet).where(Snippet.expires > utcnow()).order_by(Snippet.id))
            )
