# app/models/responses.py
from pydantic import BaseModel, ConfigDict, Field
from typing import Any, Dict, Optional
from datetime import datetime


class HealthResponse(BaseModel):
    success: bool = True
    status: str
    message: str


class AllDataResponse(BaseModel):
    success: bool
    data: Dict[str, Optional[Any]]


class DocumentResponse(BaseModel):
    success: bool
    data: Any


class SaveResponse(BaseModel):
    success: bool
    message: str
    filename: str
    timestamp: datetime


class ItemResponse(BaseModel):
    success: bool
    message: str
    item: Dict[str, Any]


class DeleteResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    success: bool
    message: str
    deleted_item: Dict[str, Any] = Field(..., alias="deletedItem")


class BackupResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    success: bool
    message: str
    backup_path: str = Field(..., alias="backupPath")


class ErrorResponse(BaseModel):
    success: bool = False
    error: str
