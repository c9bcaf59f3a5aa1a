"""Database engine, session factory and declarative base."""

from teamspace.db.session import (
    Base,
    SessionLocal,
    check_db_connection,
    engine,
    get_db,
    transaction,
)

__all__ = ["Base", "SessionLocal", "check_db_connection", "engine", "get_db", "transaction"]
