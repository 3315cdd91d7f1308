# backend/vet_appointments/schemas/common.py
"""
Uniform response envelope.

Success: {"success": true,  "data": ..., "message": "..."}
Failure: {"success": false, "data": null, "message": "...", "error": "<code>"}
"""

from typing import Any, Generic, Optional, TypeVar
from pydantic import BaseModel

T = TypeVar("T")


class ApiResponse(BaseModel, Generic[T]):
    success: bool = True
    data: Optional[T] = None
    message: Optional[str] = None
    error: Optional[str] = None


def success(data: Any = None, message: str | None = None) -> dict:
    return {"success": True, "data": data, "message": message}


def failure(message: str, error: str | None = None, **extra: Any) -> dict:
    return {"success": False, "data": None, "message": message, "error": error, **extra}
