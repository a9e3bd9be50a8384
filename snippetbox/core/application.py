"""
Application container.

Everything a request needs beyond the request itself (settings, logger,
store gateways, the session manager and templates) is built once at startup
and hung off ``app.state.application``.
"""

import logging
from dataclasses import dataclass, field
from datetime import timedelta
from typing import Optional

from fastapi.templating import Jinja2Templates
from sqlalchemy.engine import Engine

from snippetbox.core.config import Settings
from snippetbox.core.security import create_password_context, get_or_create_secret_key
from snippetbox.core.sessions import SessionManager
from snippetbox.core.templates import templates as default_templates
from snippetbox.db.init_db import init_database
from snippetbox.db.session import create_db_engine, create_session_factory
from snippetbox.stores.interfaces import (
    ReviewModelInterface,
    SnippetModelInterface,
    UserModelInterface,
)
from snippetbox.stores.reviews import ReviewModel
from snippetbox.stores.snippets import SnippetModel
from snippetbox.stores.users import UserModel


@dataclass
class Application:
    settings: Settings
    snippets: SnippetModelInterface
    users: UserModelInterface
    reviews: ReviewModelInterface
    sessions: SessionManager
    secret_key: str
    templates: Jinja2Templates = default_templates
    logger: logging.Logger = field(default_factory=lambda: logging.getLogger("snippetbox"))
    engine: Optional[Engine] = None

    @property
    def debug(self) -> bool:
        return self.settings.DEBUG


def build_application(config: Settings) -> Application:
    """Wire the SQLAlchemy-backed gateways and session manager for a configuration."""
    config.ensure_data_directory()

    engine = create_db_engine(config.DATABASE_URL)
    init_database(engine)
    session_factory = create_session_factory(engine)

    pwd_context = create_password_context(config.PASSWORD_HASH_ROUNDS)

    return Application(
        settings=config,
        snippets=SnippetModel(session_factory),
        users=UserModel(session_factory, pwd_context, owner_emails=config.owner_emails),
        reviews=ReviewModel(session_factory),
        sessions=SessionManager(
            session_factory,
            lifetime=timedelta(hours=config.SESSION_LIFETIME_HOURS),
            cookie_name=config.SESSION_COOKIE_NAME,
            cookie_secure=config.SESSION_COOKIE_SECURE,
        ),
        secret_key=get_or_create_secret_key(config.SECRET_KEY),
        engine=engine,
    )
