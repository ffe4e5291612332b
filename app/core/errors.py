# app/core/errors.py
from fastapi import status


class CafeError(Exception):
    """Base error for the data store, mapped to an HTTP status by the API"""

    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class InvalidFilenameError(CafeError):
    status_code = status.HTTP_400_BAD_REQUEST

    def __init__(self, filename: str):
        super().__init__("Invalid filename")
        self.filename = filename


class DocumentValidationError(CafeError):
    status_code = status.HTTP_400_BAD_REQUEST


class UnsupportedDocumentError(CafeError):
    """Item-level operation requested on a document without an item array"""

    status_code = status.HTTP_400_BAD_REQUEST


class DocumentNotFoundError(CafeError):
    status_code = status.HTTP_404_NOT_FOUND

    def __init__(self, filename: str):
        super().__init__("File not found")
        self.filename = filename


class ItemNotFoundError(CafeError):
    status_code = status.HTTP_404_NOT_FOUND

    def __init__(self, filename: str, item_id: int):
        super().__init__("Item not found")
        self.filename = filename
        self.item_id = item_id


class StoreIOError(CafeError):
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR


__all__ = [
    "CafeError",
    "InvalidFilenameError",
    "DocumentValidationError",
    "UnsupportedDocumentError",
    "DocumentNotFoundError",
    "ItemNotFoundError",
    "StoreIOError",
]
