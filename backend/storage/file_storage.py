"""
JSON document storage.

Holds a single JSON object on disk and rewrites it whole on every write.
The rest of the application only sees the collections inside it.
"""
import json
import logging
import os
import tempfile
from pathlib import Path
from typing import Any, Dict, Union

logger = logging.getLogger(__name__)


class StorageError(Exception):
    """The backing document is unreadable or not shaped as expected."""


class JsonFileStorage:
    """
    Local JSON document storage.

    The document is laid out as:
    - {"<collection>": [record, record, ...], ...}
    """

    def __init__(self, path: Union[str, Path]):
        self.path = Path(path)

    def ensure_collection(self, name: str) -> None:
        """
        Make sure the document exists and has a list under ``name``.

        A missing or empty file, or one whose top level is not an object, is
        (re)initialized. Existing keys of an object are preserved.
        """
        if not self.path.exists():
            logger.info("Creating document store at %s", self.path)
            self.write({name: []})
            return

        document = self._parse()
        if not isinstance(document, dict):
            logger.warning("Document %s has no top-level object, initializing it", self.path)
            document = {}
        if not isinstance(document.get(name), list):
            logger.warning("Document %s has no %r collection, initializing it", self.path, name)
            document[name] = []
            self.write(document)

    def _parse(self) -> Any:
        """Decode the file. An empty file decodes to None."""
        with open(self.path, "r", encoding="utf-8") as f:
            text = f.read()
        if not text.strip():
            return None
        try:
            return json.loads(text)
        except json.JSONDecodeError as e:
            raise StorageError(f"{self.path} is not valid JSON: {e}") from e

    def read(self) -> Dict[str, Any]:
        document = self._parse()
        if not isinstance(document, dict):
            raise StorageError(f"{self.path} must contain a JSON object at the top level")
        return document

    def write(self, document: Dict[str, Any]) -> None:
        """Replace the whole document. The previous file survives a failed write."""
        self.path.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp_name = tempfile.mkstemp(
            prefix=f".{self.path.name}.", suffix=".tmp", dir=str(self.path.parent)
        )
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                json.dump(document, f, indent=2, ensure_ascii=False)
                f.write("\n")
            os.replace(tmp_name, self.path)
        except BaseException:
            if os.path.exists(tmp_name):
                os.unlink(tmp_name)
            raise

    def read_collection(self, name: str) -> list:
        return list(self.read().get(name) or [])

    def write_collection(self, name: str, records: list) -> None:
        document = self.read() if self.path.exists() else {}
        document[name] = records
        self.write(document)
