"""Create the database schema"""

import logging

from sqlalchemy.engine import Engine

from snippetbox.db.base import Base

# Registers every model with Base.metadata
from snippetbox.db import models as _models  # noqa: F401

logger = logging.getLogger("snippetbox.database")


def init_database(engine: Engine) -> None:
    """Create all tables that don't exist yet."""
    try:
        Base.metadata.create_all(bind=engine)

        table_names = [table.name for table in Base.metadata.sorted_tables]
        logger.info("Database schema ready", extra={
            "table_count": len(table_names),
            "tables": table_names,
        })
    except Exception as e:
        logger.error(f"Error initializing database: {e}", extra={
            "error_type": type(e).__name__,
            "database_url": "[REDACTED]",  # Don't log connection strings
        })
        raise
