"""
Book repository backed by SQLAlchemy/SQLite.
"""
import logging
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

from sqlalchemy.orm import Session

from db import init_db, make_engine, make_session_factory
from domain.models import Book
from repositories.base import BooksRepository
from repositories.models import BookORM

logger = logging.getLogger(__name__)


def _book_from_orm(orm: BookORM) -> Book:
    return Book(
        id=orm.id,
        title=orm.title,
        author=orm.author,
        extra=dict(orm.extra or {}),
    )


def _update_orm_from_book(orm: BookORM, book: Book) -> None:
    orm.title = book.title
    orm.author = book.author
    # Assign a new dict so the JSON column is flagged dirty.
    orm.extra = dict(book.extra)


def _find(session: Session, book_id: str) -> Optional[BookORM]:
    return session.query(BookORM).filter(BookORM.id == book_id).one_or_none()


class SqlBooksRepository(BooksRepository):
    """Books stored in a SQLite table, ordered by insertion."""

    def __init__(self, db_path: Union[str, Path]):
        self.engine = make_engine(db_path)
        self.SessionLocal = make_session_factory(self.engine)

    def init_store(self) -> None:
        init_db(self.engine)

    def list_books(self) -> List[Book]:
        with self.SessionLocal() as session:
            books = session.query(BookORM).order_by(BookORM.seq).all()
            return [_book_from_orm(b) for b in books]

    def get_book(self, book_id: str) -> Optional[Book]:
        with self.SessionLocal() as session:
            orm = _find(session, book_id)
            if not orm:
                return None
            return _book_from_orm(orm)

    def create_book(self, book: Book) -> Book:
        with self.SessionLocal() as session:
            orm = BookORM(id=book.id)
            _update_orm_from_book(orm, book)
            session.add(orm)
            session.commit()
            session.refresh(orm)
            logger.debug("Created book %s", book.id)
            return _book_from_orm(orm)

    def update_book(self, book_id: str, changes: Dict[str, Any]) -> Optional[Book]:
        with self.SessionLocal() as session:
            orm = _find(session, book_id)
            if not orm:
                return None
            updated = _book_from_orm(orm).merged(changes)
            _update_orm_from_book(orm, updated)
            session.commit()
            logger.debug("Updated book %s", book_id)
            return updated

    def delete_book(self, book_id: str) -> int:
        with self.SessionLocal() as session:
            orm = _find(session, book_id)
            if not orm:
                return 0
            session.delete(orm)
            session.commit()
            logger.debug("Deleted book %s", book_id)
            return 1
