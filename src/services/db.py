"""Standalone database access for command-line billing runs.

The HTTP server shares the module-level engine from src.services; a CLI run
opens its own engine for the configured URL, checks that the billing schema
is in place and disposes of everything when the run ends.
"""

from typing import Generator

from sqlalchemy import create_engine, inspect
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, sessionmaker

from src.models import Base
from src.services.errors import SchemaNotReadyError


def missing_tables(engine: Engine) -> list[str]:
    """Billing tables declared on the models but absent from the database."""
    existing = set(inspect(engine).get_table_names())
    return sorted(name for name in Base.metadata.tables if name not in existing)


def create_session(database_url: str) -> Generator[Session, None, None]:
    """
    Open a session for one billing run.

    Args:
        database_url: SQLAlchemy database URL (e.g., "sqlite:///./parking.db")

    Yields:
        Session bound to a fresh engine; closing it discards uncommitted work

    Raises:
        SchemaNotReadyError: If migrations have not created the billing tables

    Example:
        ```python
        for session in create_session("sqlite:///./parking.db"):
            invoices = BillingService(session).generate("2024-02")
        ```
    """
    engine = create_engine(database_url, echo=False)
    try:
        missing = missing_tables(engine)
        if missing:
            raise SchemaNotReadyError(
                f"Database is missing tables {', '.join(missing)}; run 'alembic upgrade head'",
                missing=missing,
            )

        session = sessionmaker(bind=engine, autoflush=False)()
        try:
            yield session
        finally:
            session.close()
    finally:
        engine.dispose()
