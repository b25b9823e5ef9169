"""Per-user usage analytics."""
import math
from datetime import datetime, timezone
from uuid import UUID

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from repurposer.models import GeneratedContent, Project

# Estimated hours saved per generated piece.
HOURS_SAVED_PER_PIECE = 0.75


async def get_user_analytics(db: AsyncSession, user_id: UUID) -> dict:
    """Totals, projects created this month (UTC) and generated-content count per platform."""
    total_projects = (
        await db.execute(select(func.count(Project.id)).where(Project.user_id == user_id))
    ).scalar() or 0
    total_content = (
        await db.execute(select(func.count(GeneratedContent.id)).where(GeneratedContent.user_id == user_id))
    ).scalar() or 0

    start_of_month = datetime.now(timezone.utc).replace(day=1, hour=0, minute=0, second=0, microsecond=0)
    monthly_projects = (
        await db.execute(
            select(func.count(Project.id)).where(
                Project.user_id == user_id,
                Project.created_at >= start_of_month,
            )
        )
    ).scalar() or 0

    r = await db.execute(
        select(GeneratedContent.platform, func.count(GeneratedContent.id))
        .where(GeneratedContent.user_id == user_id)
        .group_by(GeneratedContent.platform)
    )
    platform_counts = {platform: count for platform, count in r.all()}

    return {
        "totalContent": total_content,
        "totalProjects": total_projects,
        "monthlyContent": monthly_projects,
        # half-up to one decimal
        "timeSaved": math.floor(total_content * HOURS_SAVED_PER_PIECE * 10 + 0.5) / 10,
        "platformCounts": platform_counts,
        "avgEngagement": 0,
    }
