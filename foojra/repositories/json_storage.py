"""
JSON-file persistence adapter.

Each collection lives in its own file under the data directory and is always
read and written whole. load() and save() never raise: a missing or corrupt
file reads as an empty collection, a failed write returns False. Both cases
are logged so the soft failure stays visible.
"""

from __future__ import annotations

from contextlib import contextmanager
from pathlib import Path
from typing import Iterator
import copy
import json
import logging
import os
import stat
import tempfile
import threading

logger = logging.getLogger(__name__)

COLLECTION_FILES = {
    "users": "users.json",
    "shops": "shops.json",
    "menuItems": "menuItems.json",
    "orders": "orders.json",
    "reviews": "reviews.json",
    "menuItemReviews": "menuItemReviews.json",
}

DEFAULT_FILE_MODE = 0o644


def _file_mode(path: Path) -> int:
    """Keep an existing file's permissions; mkstemp would leave 0600."""
    try:
        return stat.S_IMODE(path.stat().st_mode)
    except OSError:
        return DEFAULT_FILE_MODE


class BaseStorage:
    """Storage handle contract: whole-collection load/save plus a per-collection lock."""

    def __init__(self) -> None:
        self._locks: dict[str, threading.RLock] = {}
        self._locks_guard = threading.Lock()

    def load(self, collection: str) -> list[dict]:
        raise NotImplementedError

    def save(self, collection: str, records: list[dict]) -> bool:
        raise NotImplementedError

    @contextmanager
    def lock(self, collection: str) -> Iterator[None]:
        """Serialize load-mutate-save cycles on one collection."""
        with self._locks_guard:
            lock = self._locks.setdefault(collection, threading.RLock())
        with lock:
            yield


class JsonStorage(BaseStorage):
    def __init__(self, data_dir: Path | str) -> None:
        super().__init__()
        self.data_dir = Path(data_dir)

    def path_for(self, collection: str) -> Path | None:
        filename = COLLECTION_FILES.get(collection)
        if not filename:
            return None
        return self.data_dir / filename

    def load(self, collection: str) -> list[dict]:
        path = self.path_for(collection)
        if path is None:
            logger.warning("load: unknown collection %r", collection)
            return []
        try:
            with path.open("r", encoding="utf-8") as f:
                data = json.load(f)
        except FileNotFoundError:
            logger.debug("load: %s has no backing file yet", collection)
            return []
        except (OSError, ValueError) as exc:
            logger.warning("load: could not read %s (%s): %s", collection, path, exc)
            return []
        if not isinstance(data, list):
            logger.warning("load: %s does not hold a list, treating as empty", path)
            return []
        if not all(isinstance(r, dict) for r in data):
            logger.warning("load: %s holds non-record entries, treating as empty", path)
            return []
        return data

    def save(self, collection: str, records: list[dict]) -> bool:
        path = self.path_for(collection)
        if path is None:
            logger.warning("save: unknown collection %r", collection)
            return False
        tmp_name = None
        try:
            payload = json.dumps(records, ensure_ascii=False, indent=2)
            path.parent.mkdir(parents=True, exist_ok=True)
            fd, tmp_name = tempfile.mkstemp(prefix=f".{path.name}.", dir=path.parent)
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                f.write(payload)
            os.chmod(tmp_name, _file_mode(path))
            os.replace(tmp_name, path)
            tmp_name = None
            return True
        except (OSError, TypeError, ValueError) as exc:
            logger.warning("save: could not write %s (%s): %s", collection, path, exc)
            return False
        finally:
            if tmp_name:
                try:
                    os.unlink(tmp_name)
                except OSError:
                    pass


class MemoryStorage(BaseStorage):
    """In-process storage with the same contract, for tests and throwaway stores."""

    def __init__(self, initial: dict[str, list[dict]] | None = None) -> None:
        super().__init__()
        self._data: dict[str, list[dict]] = copy.deepcopy(initial or {})
        self.writes = 0

    def load(self, collection: str) -> list[dict]:
        return copy.deepcopy(self._data.get(collection, []))

    def save(self, collection: str, records: list[dict]) -> bool:
        self.writes += 1
        self._data[collection] = copy.deepcopy(list(records))
        return True
