"""Common schemas (errors, messages, pagination)."""
from typing import Any, Dict, Optional

from pydantic import BaseModel, Field


class ErrorResponse(BaseModel):
    """Standard error response."""

    detail: str = Field(..., description="Error message")
    code: Optional[str] = Field(None, description="Optional error code")
    extra: Optional[Dict[str, Any]] = Field(None, description="Extra context")


class MessageResponse(BaseModel):
    """Simple message response."""

    message: str = Field(..., description="Message text")


class Pagination(BaseModel):
    """Page window of a list endpoint; pages = ceil(total / limit)."""

    page: int
    limit: int
    total: int
    pages: int
