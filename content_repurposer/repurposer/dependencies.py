"""Shared FastAPI dependencies: caller identity, AI gateway, object storage."""
from typing import Optional
from uuid import UUID

from fastapi import Header, HTTPException, status

from repurposer.services.llm_service import LLMService
from repurposer.services.storage_service import LocalObjectStorage

HEADER_USER_ID = "X-User-ID"


def get_current_user_id(x_user_id: Optional[str] = Header(None, alias=HEADER_USER_ID)) -> UUID:
    """
    Authenticated caller's id, set by the auth proxy in front of the API.
    401 when the header is missing or not a UUID.
    """
    if not x_user_id or not x_user_id.strip():
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Unauthorized")
    try:
        return UUID(x_user_id.strip())
    except ValueError:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Unauthorized")


def get_llm_service() -> LLMService:
    return LLMService()


def get_storage() -> LocalObjectStorage:
    return LocalObjectStorage.from_settings()
