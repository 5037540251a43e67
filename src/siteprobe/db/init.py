"""Database initialization for siteprobe."""

from pathlib import Path

from sqlalchemy import create_engine
from sqlalchemy.engine import Engine

from siteprobe.db.models import Base


def get_engine(db_path: Path) -> Engine:
    return create_engine(f"sqlite:///{db_path}", echo=False)


def init_db(db_path: Path) -> Engine:
    """Initialize the SQLite database with all tables."""
    # Ensure parent directory exists
    db_path.parent.mkdir(parents=True, exist_ok=True)

    engine = get_engine(db_path)
    Base.metadata.create_all(engine)
    return engine
