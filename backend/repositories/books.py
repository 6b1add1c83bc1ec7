"""
Book repositories backed by a JSON document file or by memory.
"""
import logging
import threading
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

from domain.models import Book
from repositories.base import BooksRepository
from storage.file_storage import JsonFileStorage

logger = logging.getLogger(__name__)

COLLECTION = "books"


class JsonBooksRepository(BooksRepository):
    """
    Books stored as ``{"books": [...]}`` in a single JSON file.

    Every call loads the whole document; every mutation rewrites it. The lock
    serializes mutations inside this process only.
    """

    def __init__(self, path: Union[str, Path]):
        self.storage = JsonFileStorage(path)
        self._lock = threading.Lock()

    def init_store(self) -> None:
        self.storage.ensure_collection(COLLECTION)

    def _load(self) -> List[Dict[str, Any]]:
        return self.storage.read_collection(COLLECTION)

    def _save(self, records: List[Dict[str, Any]]) -> None:
        self.storage.write_collection(COLLECTION, records)

    def list_books(self) -> List[Book]:
        return [Book.from_dict(r) for r in self._load()]

    def get_book(self, book_id: str) -> Optional[Book]:
        for record in self._load():
            if record.get("id") == book_id:
                return Book.from_dict(record)
        return None

    def create_book(self, book: Book) -> Book:
        with self._lock:
            records = self._load()
            records.append(book.to_dict())
            self._save(records)
        logger.debug("Created book %s", book.id)
        return book

    def update_book(self, book_id: str, changes: Dict[str, Any]) -> Optional[Book]:
        with self._lock:
            records = self._load()
            for i, record in enumerate(records):
                if record.get("id") == book_id:
                    updated = Book.from_dict(record).merged(changes)
                    records[i] = updated.to_dict()
                    self._save(records)
                    logger.debug("Updated book %s", book_id)
                    return updated
        return None

    def delete_book(self, book_id: str) -> int:
        with self._lock:
            records = self._load()
            kept = [r for r in records if r.get("id") != book_id]
            removed = len(records) - len(kept)
            if removed:
                self._save(kept)
                logger.debug("Deleted book %s", book_id)
        return removed


class InMemoryBooksRepository(BooksRepository):
    """Books kept in a list for the lifetime of the process."""

    def __init__(self) -> None:
        self._records: List[Dict[str, Any]] = []
        self._lock = threading.Lock()

    def list_books(self) -> List[Book]:
        return [Book.from_dict(r) for r in self._records]

    def get_book(self, book_id: str) -> Optional[Book]:
        for record in self._records:
            if record["id"] == book_id:
                return Book.from_dict(record)
        return None

    def create_book(self, book: Book) -> Book:
        with self._lock:
            self._records.append(book.to_dict())
        return book

    def update_book(self, book_id: str, changes: Dict[str, Any]) -> Optional[Book]:
        with self._lock:
            for i, record in enumerate(self._records):
                if record["id"] == book_id:
                    updated = Book.from_dict(record).merged(changes)
                    self._records[i] = updated.to_dict()
                    return updated
        return None

    def delete_book(self, book_id: str) -> int:
        with self._lock:
            before = len(self._records)
            self._records = [r for r in self._records if r["id"] != book_id]
            return before - len(self._records)
