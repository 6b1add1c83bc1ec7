import os

# Basic settings helper to read environment configuration.

STORE_CHOICES = ("json", "sqlite", "memory")


def _as_int(val: str | None, default: int, name: str) -> int:
    if val is None or val == "":
        return default
    try:
        return int(val)
    except ValueError:
        raise ValueError(f"{name} must be an integer, got {val!r}")


class Settings:
    def __init__(self) -> None:
        self.PORT: int = _as_int(os.getenv("PORT"), 4000, "PORT")
        self.HOST: str = os.getenv("HOST", "0.0.0.0")
        self.BOOKS_STORE: str = os.getenv("BOOKS_STORE", "json").lower()
        self.BOOKS_DB_PATH: str = os.getenv("BOOKS_DB_PATH", "db.json")
        self.BOOKS_SQLITE_PATH: str = os.getenv("BOOKS_SQLITE_PATH", "books.sqlite")
        self.LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO").upper()

        if self.BOOKS_STORE not in STORE_CHOICES:
            raise ValueError(
                f"BOOKS_STORE must be one of {', '.join(STORE_CHOICES)}, got {self.BOOKS_STORE!r}"
            )
