"""
Response envelope shared by every endpoint.
"""

from datetime import datetime
from typing import Any, Generic, Optional, TypeVar

from pydantic import BaseModel, Field

from taskmanager.models.base import CamelModel

T = TypeVar("T")


class ApiResponse(BaseModel, Generic[T]):
    """
    Success envelope.

    ``data`` carries the payload; ``message`` is a human readable summary.
    Either may be omitted.
    """

    success: bool = Field(default=True, description="Whether the request succeeded")
    data: Optional[T] = Field(default=None, description="Response payload")
    message: Optional[str] = Field(default=None, description="Human readable message")


class ErrorResponse(CamelModel):
    """Error envelope produced by the exception handlers."""

    success: bool = Field(default=False, description="Always false")
    message: str = Field(..., description="Client-safe error message")
    error: str = Field(..., description="Stable error code")
    field: Optional[str] = Field(default=None, description="Offending input field, if any")
    timestamp: datetime = Field(..., description="When the error occurred")
    path: str = Field(..., description="Request path")
    method: str = Field(..., description="Request method")
    details: Optional[dict[str, Any]] = Field(
        default=None,
        description="Original exception information (development only)",
    )
