"""
Flat-file persistence for the book collection.

The whole collection lives in one JSON array on disk and is always read
and written as a unit: every request loads the full file, and every
mutation rewrites it. ``BookStore`` is deliberately forgiving on the read
side. A missing, empty, unparseable or non-array file is treated as an
empty collection rather than an error, so the service keeps answering even
when the data file has been damaged by hand. Genuine filesystem failures
(permissions, the path being a directory, a full disk on write) are not
swallowed and propagate to the caller.
"""

from __future__ import annotations

import json
import logging
import math
import os
import tempfile
import threading
from pathlib import Path
from typing import Any, Dict, List, Optional


logger = logging.getLogger(__name__)


SEED_BOOKS: List[Dict[str, Any]] = [
    {"id": 1, "title": "Atomic Habits", "author": "James Clear", "available": True},
    {"id": 2, "title": "Deep Work", "author": "Cal Newport", "available": False},
]


def _reject_constant(name: str) -> Any:
    raise ValueError(f"{name} is not valid JSON")


def _finite_float(token: str) -> float:
    value = float(token)
    if not math.isfinite(value):
        raise ValueError(f"{token} overflows a double")
    return value


def decode_json(data: bytes | str) -> Any:
    """Parse strict JSON.

    ``NaN``, ``Infinity`` and numbers too large for a double are rejected
    with ``ValueError``, and input nested too deeply to parse raises
    ``ValueError`` instead of ``RecursionError``.
    """
    try:
        return json.loads(data, parse_constant=_reject_constant, parse_float=_finite_float)
    except RecursionError as exc:
        raise ValueError("JSON nested too deeply") from exc


def _record_id(entry: Any) -> Optional[int]:
    """Return the integer id of ``entry`` or ``None``.

    Booleans are ints in Python but never valid ids in JSON terms. Integral
    floats (``2.0``) count as the matching integer, since JSON draws no
    distinction between them.
    """
    if not isinstance(entry, dict):
        return None
    value = entry.get("id")
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, float) and value.is_integer():
        return int(value)
    return None


def serialize(books: List[Any]) -> str:
    """Render the collection exactly as it is written to disk."""
    return json.dumps(books, ensure_ascii=False, indent=2) + "\n"


class BookStore:
    """Read-modify-write access to the JSON file at ``path``.

    ``lock`` is held by writers across a whole load/modify/save sequence.
    It only orders writers within this process; other processes writing
    the same file are not coordinated.
    """

    def __init__(self, path: os.PathLike | str):
        self.path = Path(path)
        self.lock = threading.RLock()

    def load(self) -> List[Any]:
        """Load the full collection.

        Returns
        -------
        List[Any]
            The parsed array. Entries are returned as stored, without
            validation. An empty list is returned when the file is absent,
            blank, not valid JSON, or holds something other than an array.

        Raises
        ------
        OSError
            For filesystem failures other than the file not existing.
        """
        try:
            raw = self.path.read_bytes()
        except FileNotFoundError:
            return []

        try:
            text = raw.decode("utf-8")
            if not text.strip():
                return []
            data = decode_json(text)
        except ValueError:
            logger.warning("Data file %s is not valid JSON; treating it as empty", self.path)
            return []

        if not isinstance(data, list):
            logger.warning("Data file %s does not hold a JSON array; treating it as empty", self.path)
            return []
        return data

    def save(self, books: List[Any]) -> None:
        """Replace the backing file with ``books``.

        The payload is written to a sibling temporary file which is then
        moved over the target, so readers never observe a partial write.
        """
        payload = serialize(books)
        self.path.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp_name = tempfile.mkstemp(
            dir=self.path.parent, prefix=f".{self.path.name}.", suffix=".tmp"
        )
        try:
            with os.fdopen(fd, "w", encoding="utf-8", newline="\n") as f:
                f.write(payload)
            os.replace(tmp_name, self.path)
        except BaseException:
            try:
                os.unlink(tmp_name)
            except FileNotFoundError:
                pass
            raise

    def ensure_seeded(self) -> bool:
        """Write the sample collection if no data file exists yet.

        Returns ``True`` when the seed was written. A failed seed write is
        logged and otherwise ignored; the service then starts with whatever
        ``load()`` can make of the path.
        """
        if self.path.exists():
            return False
        try:
            self.save(SEED_BOOKS)
        except OSError:
            logger.warning("Could not write seed data to %s", self.path, exc_info=True)
            return False
        logger.info("Seeded %s with %d sample books", self.path, len(SEED_BOOKS))
        return True

    @staticmethod
    def next_id(books: List[Any]) -> int:
        ids = [i for i in map(_record_id, books) if i is not None]
        return max([0, *ids]) + 1

    @staticmethod
    def find_index(books: List[Any], book_id: int) -> Optional[int]:
        for idx, entry in enumerate(books):
            if _record_id(entry) == book_id:
                return idx
        return None

    @staticmethod
    def without(books: List[Any], book_id: int) -> List[Any]:
        """Return ``books`` minus every entry whose id is ``book_id``."""
        return [entry for entry in books if _record_id(entry) != book_id]
