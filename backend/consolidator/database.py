from pathlib import Path
from sqlalchemy import create_engine, event
from sqlalchemy.orm import sessionmaker, Session
from sqlalchemy.engine import Engine

from .logging_setup import get_logger
from .models import Base, Category, ImportProfile
from .services.rule_engine import UNCATEGORIZED

logger = get_logger(__name__)

# Global state for the open database
_current_engine: Engine | None = None
_current_session_factory: sessionmaker | None = None

# Profiles created for a new database
DEFAULT_PROFILES = [
    {
        "name": "Chase",
        "has_header": True,
        "date_column": "Transaction Date",
        "description_column": "Description",
        "amount_column": "Amount",
    },
    {
        "name": "Bank of America",
        "has_header": True,
        "date_column": "Date",
        "description_column": "Description",
        "amount_column": "Amount",
    },
    {
        "name": "Wells Fargo",
        "has_header": True,
        "date_column": "Date",
        "description_column": "Description",
        "amount_column": "Amount",
    },
    {
        "name": "Citibank (No Header)",
        "has_header": False,
        "date_column": "0",
        "description_column": "2",
        "amount_column": "3",
    },
]


@event.listens_for(Engine, "connect")
def set_sqlite_pragma(dbapi_connection, connection_record):
    """Enable foreign keys for SQLite."""
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


def open_database(db_path: Path) -> None:
    """
    Open the SQLite database file.

    Creates the file, tables and default data if they don't exist.
    """
    global _current_engine, _current_session_factory

    if _current_engine is not None:
        close_database()

    db_url = f"sqlite:///{db_path}"
    _current_engine = create_engine(db_url, echo=False)
    _current_session_factory = sessionmaker(bind=_current_engine)

    # Create tables if they don't exist
    Base.metadata.create_all(_current_engine)

    _seed_defaults(_current_engine)
    logger.info("Opened database %s", db_path)


def _seed_defaults(engine: Engine) -> None:
    """Make sure the Uncategorized category exists; add default profiles to an empty table."""
    with Session(engine) as session:
        uncategorized = session.query(Category).filter(
            Category.name == UNCATEGORIZED
        ).first()
        if uncategorized is None:
            session.add(Category(name=UNCATEGORIZED, display_order=0))

        if session.query(ImportProfile).count() == 0:
            for profile in DEFAULT_PROFILES:
                session.add(ImportProfile(**profile))

        session.commit()


def close_database() -> None:
    """Close the current database."""
    global _current_engine, _current_session_factory

    if _current_engine is not None:
        _current_engine.dispose()
        _current_engine = None
        _current_session_factory = None


def get_session() -> Session:
    """Get a session for the open database."""
    if _current_session_factory is None:
        raise RuntimeError("No database is currently open")
    return _current_session_factory()


def get_db():
    """FastAPI dependency for database sessions."""
    session = get_session()
    try:
        yield session
        session.commit()
    except Exception:
        session.rollback()
        raise
    finally:
        session.close()


def is_database_open() -> bool:
    """Check if a database is currently open."""
    return _current_engine is not None
