from contextlib import contextmanager
from typing import Any, Dict, Generator

from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, sessionmaker


def get_connect_args(database_url: str) -> Dict[str, Any]:
    """Get database-specific connection arguments"""
    if database_url.startswith("sqlite"):
        # Requests are served from a thread pool
        return {"check_same_thread": False}
    return {}


def create_db_engine(database_url: str, echo: bool = False) -> Engine:
    """Create the engine (and its shared connection pool) for a database URL."""
    return create_engine(
        database_url,
        connect_args=get_connect_args(database_url),
        pool_pre_ping=not database_url.startswith("sqlite"),
        echo=echo,
    )


def create_session_factory(engine: Engine) -> sessionmaker:
    return sessionmaker(autocommit=False, autoflush=False, expire_on_commit=False, bind=engine)


@contextmanager
def session_scope(session_factory: sessionmaker) -> Generator[Session, None, None]:
    """One unit of work: commit on success, roll back on any failure."""
    db = session_factory()
    try:
        yield db
        db.commit()
    except BaseException:
        db.rollback()
        raise
    finally:
        db.close()
