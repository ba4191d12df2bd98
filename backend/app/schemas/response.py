"""Uniform response envelope: {status, message, data}."""
from pydantic import BaseModel
from typing import Generic, Optional, TypeVar

T = TypeVar("T")


class ApiResponse(BaseModel, Generic[T]):
    status: str = "success"  # "success" or "error"
    message: str = ""
    data: Optional[T] = None


def success(message: str, data=None) -> ApiResponse:
    return ApiResponse(status="success", message=message, data=data)


def error_body(message: str) -> dict:
    # Error envelopes carry no data key
    return {"status": "error", "message": message}
