"""
Repository contract shared by every book store backend.
"""
from abc import ABC, abstractmethod
from typing import Any, Dict, List, Optional

from domain.models import Book


class BooksRepository(ABC):
    """CRUD operations for books."""

    def init_store(self) -> None:
        """Prepare the backing storage. Called once before serving requests."""

    @abstractmethod
    def list_books(self) -> List[Book]:
        """All books in insertion order."""

    @abstractmethod
    def get_book(self, book_id: str) -> Optional[Book]:
        ...

    @abstractmethod
    def create_book(self, book: Book) -> Book:
        """Append ``book`` to the collection and persist it."""

    @abstractmethod
    def update_book(self, book_id: str, changes: Dict[str, Any]) -> Optional[Book]:
        """Shallow-merge ``changes`` into the book. Returns None when it doesn't exist."""

    @abstractmethod
    def delete_book(self, book_id: str) -> int:
        """Remove the book. Returns how many records were removed (0 or 1)."""
