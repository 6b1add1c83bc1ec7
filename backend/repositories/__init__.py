from .base import BooksRepository
from .books import InMemoryBooksRepository, JsonBooksRepository
from .sql_books import SqlBooksRepository
from . import models

__all__ = [
    "BooksRepository",
    "InMemoryBooksRepository",
    "JsonBooksRepository",
    "SqlBooksRepository",
    "build_books_repository",
    "models",
]


def build_books_repository(settings) -> BooksRepository:
    """Pick the backend named by ``settings.BOOKS_STORE``."""
    if settings.BOOKS_STORE == "sqlite":
        return SqlBooksRepository(settings.BOOKS_SQLITE_PATH)
    if settings.BOOKS_STORE == "memory":
        return InMemoryBooksRepository()
    return JsonBooksRepository(settings.BOOKS_DB_PATH)
