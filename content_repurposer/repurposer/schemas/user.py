"""User analytics schema."""
from typing import Dict

from pydantic import BaseModel, Field


class UserStatsResponse(BaseModel):
    """Response for GET /api/user/stats. timeSaved is in hours."""

    totalContent: int = 0
    totalProjects: int = 0
    monthlyContent: int = 0
    timeSaved: float = 0.0
    platformCounts: Dict[str, int] = Field(default_factory=dict)
    avgEngagement: float = 0
