"""Legacy single-shot repurpose: one platform per request, stored in repurposed_content."""
import math
from typing import Any, Dict, List, Tuple
from uuid import UUID

from sqlalchemy import delete, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from repurposer.config import get_settings
from repurposer.logging_config import get_logger
from repurposer.models import RepurposedContent
from repurposer.services.llm_service import LLMService
from repurposer.services.normalizer import normalize_response
from repurposer.services.prompt_builder import build_repurpose_prompt

logger = get_logger(__name__)


async def repurpose_content(
    db: AsyncSession,
    llm: LLMService,
    user_id: UUID,
    original_content: str,
    platform: str,
) -> Tuple[Dict[str, Any], RepurposedContent]:
    """
    Generate and store one variant. Gateway errors propagate to the caller.
    Returns (normalized record as dict, stored row).
    """
    settings = get_settings()
    raw = await llm.generate(build_repurpose_prompt(original_content, platform))
    normalized = normalize_response(raw, platform, legacy=True)
    row = RepurposedContent(
        user_id=user_id,
        original_content=original_content[: settings.original_content_max_chars],
        platform=platform,
        repurposed_content=normalized.content,
        hashtags=normalized.hashtags,
        title=normalized.title,
    )
    db.add(row)
    await db.flush()
    logger.info("repurpose.stored", content_id=str(row.id), platform=platform, fallback=normalized.is_fallback)
    return normalized.to_dict(), row


async def get_content_history(
    db: AsyncSession,
    user_id: UUID,
    page: int = 1,
    limit: int = 10,
) -> Tuple[List[RepurposedContent], dict]:
    """Newest first, paginated."""
    q = (
        select(RepurposedContent)
        .where(RepurposedContent.user_id == user_id)
        .order_by(RepurposedContent.created_at.desc())
        .offset((page - 1) * limit)
        .limit(limit)
    )
    rows = list((await db.execute(q)).scalars().all())
    total = (
        await db.execute(select(func.count(RepurposedContent.id)).where(RepurposedContent.user_id == user_id))
    ).scalar() or 0
    return rows, {"page": page, "limit": limit, "total": total, "pages": math.ceil(total / limit)}


async def delete_content(db: AsyncSession, user_id: UUID, content_id: UUID) -> None:
    """Delete one history row owned by user_id. Raises ValueError("content_not_found")."""
    r = await db.execute(
        delete(RepurposedContent).where(
            RepurposedContent.id == content_id,
            RepurposedContent.user_id == user_id,
        )
    )
    if not r.rowcount:
        raise ValueError("content_not_found")
    logger.info("repurpose.deleted", content_id=str(content_id))
