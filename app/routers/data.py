# app/routers/data.py
from fastapi import APIRouter, Body, Depends, HTTPException, Request, status
from typing import Any, Dict, Optional
import logging
from datetime import datetime, timezone

from app.core.errors import CafeError, InvalidFilenameError
from app.models.documents import is_valid_filename
from app.models.responses import (
    AllDataResponse,
    BackupResponse,
    DeleteResponse,
    DocumentResponse,
    ItemResponse,
    SaveResponse,
)
from app.services.file_store import FileStore

router = APIRouter()
logger = logging.getLogger(__name__)


def get_file_store(request: Request) -> FileStore:
    return request.app.state.file_store


def check_filename(filename: str) -> str:
    if not is_valid_filename(filename):
        raise InvalidFilenameError(filename)
    return filename


def parse_item_id(item_id: str) -> int:
    try:
        return int(item_id)
    except ValueError:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Invalid item id"
        )


@router.get("/data", response_model=AllDataResponse)
async def get_all_data(store: FileStore = Depends(get_file_store)):
    """Get all four documents; missing ones are returned as null"""
    try:
        data = await store.get_all()
    except Exception as e:
        logger.error(f"Error getting all data: {str(e)}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to load data"
        )
    return AllDataResponse(success=True, data=data)


@router.get("/data/{filename}", response_model=DocumentResponse)
async def get_data(filename: str, store: FileStore = Depends(get_file_store)):
    """Get a single document"""
    check_filename(filename)
    data = await store.get(filename)
    return DocumentResponse(success=True, data=data)


@router.post("/data/{filename}", response_model=SaveResponse)
async def save_data(
    filename: str,
    document: Any = Body(None),
    store: FileStore = Depends(get_file_store)
):
    """Replace a whole document"""
    check_filename(filename)
    if document is None:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="No data provided"
        )

    try:
        await store.put(filename, document)
    except CafeError:
        raise
    except Exception as e:
        logger.error(f"Error saving {filename}: {str(e)}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to save data"
        )

    return SaveResponse(
        success=True,
        message="Data saved successfully",
        filename=filename,
        timestamp=datetime.now(timezone.utc)
    )


@router.put("/data/{filename}/{item_id}", response_model=ItemResponse)
async def update_item(
    filename: str,
    item_id: str,
    patch: Optional[Dict[str, Any]] = Body(None),
    store: FileStore = Depends(get_file_store)
):
    """Shallow-merge the request body into one item"""
    check_filename(filename)
    parsed_id = parse_item_id(item_id)
    if patch is None:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="No data provided"
        )

    try:
        item = await store.update_item(filename, parsed_id, patch)
    except CafeError:
        raise
    except Exception as e:
        logger.error(f"Error updating item in {filename}: {str(e)}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to update item"
        )

    return ItemResponse(success=True, message="Item updated successfully", item=item)


@router.delete("/data/{filename}/{item_id}", response_model=DeleteResponse)
async def delete_item(
    filename: str,
    item_id: str,
    store: FileStore = Depends(get_file_store)
):
    """Remove one item"""
    check_filename(filename)
    parsed_id = parse_item_id(item_id)

    try:
        deleted = await store.delete_item(filename, parsed_id)
    except CafeError:
        raise
    except Exception as e:
        logger.error(f"Error deleting item from {filename}: {str(e)}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to delete item"
        )

    return DeleteResponse(success=True, message="Item deleted successfully", deleted_item=deleted)


@router.post("/backup", response_model=BackupResponse)
async def create_backup(store: FileStore = Depends(get_file_store)):
    """Copy every .json document into a timestamped backup directory"""
    backup_path = await store.backup()
    return BackupResponse(
        success=True,
        message="Backup created successfully",
        backup_path=str(backup_path)
    )
