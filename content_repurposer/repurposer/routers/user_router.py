"""User analytics API."""
from uuid import UUID

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from repurposer.db import get_db
from repurposer.dependencies import get_current_user_id
from repurposer.schemas.user import UserStatsResponse
from repurposer.services.user_service import get_user_analytics

router = APIRouter(prefix="/api/user", tags=["user"])


@router.get("/stats", response_model=UserStatsResponse)
async def get_user_stats(
    user_id: UUID = Depends(get_current_user_id),
    db: AsyncSession = Depends(get_db),
) -> UserStatsResponse:
    """Content/project totals, this month's output, per-platform counts and estimated hours saved."""
    return UserStatsResponse(**await get_user_analytics(db, user_id))
