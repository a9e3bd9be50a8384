"""
Tests for the snippets gateway
"""

from datetime import timedelta

import pytest
from sqlalchemy import update

from snippetbox.db.base import utcnow
from snippetbox.db.models import Snippet
from snippetbox.db.session import session_scope
from snippetbox.stores.errors import NoRecordError
from snippetbox.stores.snippets import SnippetModel

pytestmark = pytest.mark.unit


@pytest.fixture
def snippets(session_factory) -> SnippetModel:
    return SnippetModel(session_factory)


def expire(session_factory, snippet_id: int) -> None:
    with session_scope(session_factory) as db:
        db.execute(
            update(Snippet).where(Snippet.id == snippet_id).values(expires=utcnow() - timedelta(seconds=1))
        )


class TestSnippetModel:

    def test_insert_and_get(self, snippets):
        snippet_id = snippets.insert("O snail", "Climb Mount Fuji,\nBut slowly, slowly!", 7)

        snippet = snippets.get(snippet_id)

        assert snippet.title == "O snail"
        assert snippet.content == "Climb Mount Fuji,\nBut slowly, slowly!"
        assert timedelta(days=6, hours=23) < snippet.expires - snippet.created_at <= timedelta(days=7)

    def test_get_missing(self, snippets):
        with pytest.raises(NoRecordError):
            snippets.get(1)

    def test_expired_snippets_are_hidden(self, snippets, session_factory):
        snippet_id = snippets.insert("Gone", "soon", 1)
        expire(session_factory, snippet_id)

        with pytest.raises(NoRecordError):
            snippets.get(snippet_id)

    def test_latest_lists_unexpired_in_id_order(self, snippets, session_factory):
        first = snippets.insert("First", "1", 365)
        second = snippets.insert("Second", "2", 7)
        gone = snippets.insert("Gone", "3", 1)
        expire(session_factory, gone)

        assert [s.id for s in snippets.latest()] == [first, second]
