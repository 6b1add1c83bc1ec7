"""
Database setup for the SQLite book store.
Provides SQLAlchemy engine/session utilities.
"""
from pathlib import Path
from typing import Union

from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import declarative_base, sessionmaker


Base = declarative_base()


def make_engine(db_path: Union[str, Path]) -> Engine:
    database_url = f"sqlite:///{Path(db_path)}"
    # check_same_thread=False allows usage across FastAPI threads
    return create_engine(
        database_url, connect_args={"check_same_thread": False}
    )


def make_session_factory(engine: Engine) -> sessionmaker:
    return sessionmaker(bind=engine, autoflush=False, autocommit=False)


def init_db(engine: Engine) -> None:
    """Create tables if they don't exist."""
    from repositories import models  # noqa: F401  Ensures models are registered

    Base.metadata.create_all(bind=engine)
