"""
Core domain models for the book API.
These are framework-agnostic and can be used by every repository backend.
"""
from dataclasses import dataclass, field
from typing import Any, Dict, Optional
import secrets

# Digits and letters without look-alikes (0/O, 1/l/I).
ID_ALPHABET = "23456789abcdefghijkmnopqrstuvwxyzABCDEFGHJKLMNPQRSTUVWXYZ"
ID_LENGTH = 5

CORE_FIELDS = ("id", "title", "author")


def _is_core(key: str, value: Any) -> bool:
    return key == "id" or (key in CORE_FIELDS and isinstance(value, str))


@dataclass
class Book:
    """
    A book record.

    ``title`` and ``author`` are the documented fields; anything else the
    client sent is kept in ``extra`` and written back verbatim. A title or
    author that is not a string (say a hand-edited null) also stays in
    ``extra`` so the key survives a rewrite.
    """
    id: str
    title: Optional[str] = None
    author: Optional[str] = None
    extra: Dict[str, Any] = field(default_factory=dict)

    @staticmethod
    def generate_id() -> str:
        return "".join(secrets.choice(ID_ALPHABET) for _ in range(ID_LENGTH))

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Book":
        title = data.get("title")
        author = data.get("author")
        return cls(
            id=data["id"],
            title=title if isinstance(title, str) else None,
            author=author if isinstance(author, str) else None,
            extra={k: v for k, v in data.items() if not _is_core(k, v)},
        )

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {"id": self.id}
        if self.title is not None:
            data["title"] = self.title
        if self.author is not None:
            data["author"] = self.author
        data.update(self.extra)
        return data

    def merged(self, changes: Dict[str, Any]) -> "Book":
        """Return a copy with ``changes`` shallow-merged in. ``id`` never changes."""
        data = self.to_dict()
        data.update({k: v for k, v in changes.items() if k != "id"})
        return Book.from_dict(data)
