# app/services/file_store.py
import asyncio
import copy
import json
import logging
import shutil
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, List, Optional

from app.core.errors import (
    CafeError,
    DocumentNotFoundError,
    DocumentValidationError,
    InvalidFilenameError,
    ItemNotFoundError,
    StoreIOError,
    UnsupportedDocumentError,
)
from app.models.documents import DOCUMENT_TYPES, get_document_type, is_valid_filename

logger = logging.getLogger(__name__)


def backup_timestamp(now: Optional[datetime] = None) -> str:
    """Filesystem-safe ISO timestamp, e.g. 2026-10-18T09-30-00-000Z"""
    now = now or datetime.now(timezone.utc)
    stamp = now.astimezone(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")
    return stamp.replace(":", "-").replace(".", "-")


class FileStore:
    """JSON documents kept as one file each in the data directory.

    Writes are whole-file overwrites without locking, so concurrent writers
    to the same document race and the last one wins.
    """

    def __init__(self, data_dir: Path, backup_dir: Path):
        self.data_dir = Path(data_dir)
        self.backup_dir = Path(backup_dir)

    def _path(self, filename: str) -> Path:
        if not is_valid_filename(filename):
            logger.warning(f"Rejected invalid filename: {filename!r}")
            raise InvalidFilenameError(filename)
        return self.data_dir / filename

    # ---------- blocking helpers (run in a worker thread) ----------

    def _read(self, filename: str) -> Any:
        path = self._path(filename)
        try:
            with open(path, "r", encoding="utf-8") as f:
                return json.load(f)
        except FileNotFoundError:
            raise DocumentNotFoundError(filename)
        except (OSError, ValueError) as e:
            logger.error(f"Error reading {filename}: {str(e)}")
            raise StoreIOError("Failed to read file")

    def _write(self, filename: str, document: Any, error_message: str):
        path = self._path(filename)
        try:
            content = json.dumps(document, indent=2, ensure_ascii=False, allow_nan=False)
        except ValueError:
            raise DocumentValidationError("Data must not contain NaN or Infinity")
        try:
            self.data_dir.mkdir(parents=True, exist_ok=True)
            with open(path, "w", encoding="utf-8") as f:
                f.write(content)
        except OSError as e:
            logger.error(f"Error writing {filename}: {str(e)}")
            raise StoreIOError(error_message)

    def _item_document(self, filename: str, error_message: str):
        """Read a list document and return (descriptor, document, items)"""
        self._path(filename)
        doc_type = get_document_type(filename)
        if doc_type is None or not doc_type.has_items:
            raise UnsupportedDocumentError(error_message)

        document = self._read(filename)
        try:
            items = doc_type.items(document)
        except TypeError as e:
            logger.error(f"Malformed document {filename}: {str(e)}")
            raise StoreIOError("Failed to read file")
        return doc_type, document, items

    @staticmethod
    def _find(items: List[Dict[str, Any]], item_id: int) -> int:
        for index, item in enumerate(items):
            if isinstance(item, dict) and item.get("id") == item_id:
                return index
        return -1

    def _put(self, filename: str, document: Any):
        self._path(filename)
        doc_type = get_document_type(filename)
        if doc_type is not None:
            error = doc_type.validation_error(document)
            if error:
                logger.warning(f"Validation failed for {filename}: {error}")
                raise DocumentValidationError(error)
        self._write(filename, document, "Failed to save data")
        logger.info(f"Successfully saved {filename}")

    def _update_item(self, filename: str, item_id: int, patch: Dict[str, Any]) -> Dict[str, Any]:
        doc_type, document, items = self._item_document(filename, "Cannot update this file type")
        index = self._find(items, item_id)
        if index == -1:
            raise ItemNotFoundError(filename, item_id)

        # Ids are immutable; everything else is merged over the stored item
        changes = {key: value for key, value in patch.items() if key != "id"}
        updated = {**items[index], **changes}

        candidate = copy.deepcopy(document)
        candidate[doc_type.items_key][index] = updated
        error = doc_type.validation_error(candidate)
        if error:
            logger.warning(f"Update of item {item_id} in {filename} rejected: {error}")
            raise DocumentValidationError(error)

        self._write(filename, candidate, "Failed to update item")
        logger.info(f"Updated item {item_id} in {filename}")
        return updated

    def _delete_item(self, filename: str, item_id: int) -> Dict[str, Any]:
        doc_type, document, items = self._item_document(filename, "Cannot delete from this file type")
        index = self._find(items, item_id)
        if index == -1:
            raise ItemNotFoundError(filename, item_id)

        deleted = items.pop(index)
        self._write(filename, document, "Failed to delete item")
        logger.info(f"Deleted item {item_id} from {filename}")
        return deleted

    def _backup(self) -> Path:
        target = self.backup_dir / backup_timestamp()
        try:
            target.mkdir(parents=True, exist_ok=True)
            copied = 0
            for source in sorted(self.data_dir.glob("*.json")):
                shutil.copyfile(source, target / source.name)
                copied += 1
        except OSError as e:
            logger.error(f"Error creating backup: {str(e)}")
            raise StoreIOError("Failed to create backup")
        logger.info(f"Backed up {copied} files to {target}")
        return target

    # ---------- async API ----------

    async def get(self, filename: str) -> Any:
        return await asyncio.to_thread(self._read, filename)

    async def get_all(self) -> Dict[str, Optional[Any]]:
        """All four documents; a missing or unreadable one comes back as None"""
        data: Dict[str, Optional[Any]] = {}
        for doc_type in DOCUMENT_TYPES:
            try:
                data[doc_type.key] = await self.get(doc_type.filename)
            except CafeError as e:
                logger.error(f"Error reading {doc_type.filename}: {e.message}")
                data[doc_type.key] = None
        return data

    async def put(self, filename: str, document: Any):
        await asyncio.to_thread(self._put, filename, document)

    async def update_item(self, filename: str, item_id: int, patch: Dict[str, Any]) -> Dict[str, Any]:
        return await asyncio.to_thread(self._update_item, filename, item_id, patch)

    async def delete_item(self, filename: str, item_id: int) -> Dict[str, Any]:
        return await asyncio.to_thread(self._delete_item, filename, item_id)

    async def backup(self) -> Path:
        return await asyncio.to_thread(self._backup)

    def missing_documents(self) -> List[str]:
        return [
            doc_type.filename for doc_type in DOCUMENT_TYPES
            if not (self.data_dir / doc_type.filename).exists()
        ]


__all__ = ["FileStore", "backup_timestamp"]
