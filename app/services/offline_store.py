# app/services/offline_store.py
import json
import logging
import time
from pathlib import Path
from typing import Any, Callable, Optional

logger = logging.getLogger(__name__)

# Offline copies are trusted for one hour
OFFLINE_TTL = 60 * 60


class OfflineStore:
    """Last known copy of each document, kept on local disk.

    Used by the clients when the API cannot be reached. Entries older than
    ``ttl`` seconds are ignored.
    """

    def __init__(self, directory: Path, ttl: float = OFFLINE_TTL, clock: Callable[[], float] = time.time):
        self.directory = Path(directory)
        self.ttl = ttl
        self.clock = clock

    def _path(self, filename: str) -> Path:
        return self.directory / f"cafe_{filename}"

    def save(self, filename: str, data: Any) -> bool:
        try:
            self.directory.mkdir(parents=True, exist_ok=True)
            with open(self._path(filename), "w", encoding="utf-8") as f:
                json.dump({"timestamp": self.clock(), "data": data}, f, ensure_ascii=False)
            return True
        except (OSError, TypeError) as e:
            logger.error(f"Error saving offline copy of {filename}: {str(e)}")
            return False

    def load(self, filename: str) -> Optional[Any]:
        path = self._path(filename)
        if not path.exists():
            return None
        try:
            with open(path, "r", encoding="utf-8") as f:
                entry = json.load(f)
            if self.clock() - float(entry["timestamp"]) < self.ttl:
                return entry["data"]
            logger.debug(f"Offline copy of {filename} is stale")
        except (OSError, ValueError, KeyError, TypeError) as e:
            logger.error(f"Error reading offline copy of {filename}: {str(e)}")
        return None

    def clear(self):
        for path in self.directory.glob("cafe_*"):
            path.unlink()


__all__ = ["OfflineStore", "OFFLINE_TTL"]
