"""Legacy single-shot repurpose API: one platform per call, with history."""
from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from repurposer.db import get_db
from repurposer.dependencies import get_current_user_id, get_llm_service
from repurposer.exceptions import AIGatewayError
from repurposer.schemas.common import MessageResponse
from repurposer.schemas.content import (
    ContentHistoryResponse,
    RepurposedContentOut,
    RepurposeRequest,
    RepurposeResponse,
)
from repurposer.services.llm_service import LLMService
from repurposer.services.repurpose_service import delete_content, get_content_history, repurpose_content

router = APIRouter(prefix="/api/content", tags=["content"])


@router.post("/repurpose", response_model=RepurposeResponse)
async def post_repurpose(
    payload: RepurposeRequest,
    user_id: UUID = Depends(get_current_user_id),
    db: AsyncSession = Depends(get_db),
    llm: LLMService = Depends(get_llm_service),
) -> RepurposeResponse:
    """
    Repurpose originalContent for one platform and store it in history.
    500 when the AI call fails (no fallback content on this path).
    """
    try:
        record, row = await repurpose_content(db, llm, user_id, payload.originalContent, payload.platform)
    except AIGatewayError as e:
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=str(e))
    return RepurposeResponse(id=row.id, createdAt=row.created_at, **record)


@router.get("/history", response_model=ContentHistoryResponse)
async def get_history(
    page: int = Query(1, ge=1),
    limit: int = Query(10, ge=1, le=100),
    user_id: UUID = Depends(get_current_user_id),
    db: AsyncSession = Depends(get_db),
) -> ContentHistoryResponse:
    rows, pagination = await get_content_history(db, user_id, page=page, limit=limit)
    return ContentHistoryResponse(
        content=[RepurposedContentOut.model_validate(r) for r in rows],
        pagination=pagination,
    )


@router.delete("/{content_id}", response_model=MessageResponse)
async def delete_history_item(
    content_id: UUID,
    user_id: UUID = Depends(get_current_user_id),
    db: AsyncSession = Depends(get_db),
) -> MessageResponse:
    """404 when the id does not exist or belongs to another user."""
    try:
        await delete_content(db, user_id, content_id)
    except ValueError as e:
        if str(e) == "content_not_found":
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Content not found")
        raise
    return MessageResponse(message="Content deleted successfully")
