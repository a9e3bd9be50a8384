#!/usr/bin/env python3
"""
Database setup script for Snippetbox.

Creates the schema for the configured DATABASE_URL (SQLite, PostgreSQL or
MySQL) and purges expired sessions.
"""

import sys
from datetime import timedelta

from sqlalchemy import inspect, text
from sqlalchemy.exc import SQLAlchemyError

from snippetbox.core.config import settings
from snippetbox.core.sessions import SessionManager
from snippetbox.db.init_db import init_database
from snippetbox.db.session import create_db_engine, create_session_factory
from snippetbox.stores.errors import StoreError


def main() -> bool:
    """Initialize database based on configuration"""
    print("Snippetbox Database Setup")
    print("=" * 40)

    settings.ensure_data_directory()
    engine = create_db_engine(settings.DATABASE_URL)
    print(f"Database Type: {engine.dialect.name}")

    try:
        with engine.connect() as conn:
            conn.execute(text("SELECT 1"))
    except SQLAlchemyError as e:
        print(f"Connection Error: {e}")
        return False

    existing = inspect(engine).get_table_names()
    print(f"Existing Tables: {len(existing)}")
    for table in sorted(existing):
        print(f"  - {table}")

    print("\nInitializing database...")

    try:
        init_database(engine)
    except SQLAlchemyError as e:
        print(f"Database initialization failed: {e}")
        return False

    tables = inspect(engine).get_table_names()
    print(f"Database initialized successfully ({len(tables)} tables)")

    sessions = SessionManager(
        create_session_factory(engine),
        lifetime=timedelta(hours=settings.SESSION_LIFETIME_HOURS),
    )
    try:
        purged = sessions.delete_expired()
    except StoreError as e:
        print(f"Could not purge expired sessions: {e}")
        return False
    print(f"Expired sessions purged: {purged}")

    return True


if __name__ == "__main__":
    success = main()
    sys.exit(0 if success else 1)
