"""Generated content and legacy repurpose schemas."""
from datetime import datetime
from typing import Any, Dict, List, Optional
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field

from repurposer.schemas.common import Pagination


class GeneratedContentOut(BaseModel):
    """One generated variant (status generating | complete | error)."""

    model_config = ConfigDict(from_attributes=True)

    id: UUID
    project_id: UUID
    user_id: UUID
    platform: str
    title: Optional[str] = None
    content: Optional[str] = None
    hashtags: List[str] = Field(default_factory=list)
    guidance: Dict[str, Any] = Field(default_factory=dict)
    extras: Dict[str, Any] = Field(default_factory=dict)
    status: str
    error_message: Optional[str] = None
    approved: bool = False
    approved_at: Optional[datetime] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class GenerateRequest(BaseModel):
    """Body for POST /api/projects/{project_id}/generate."""

    platforms: List[str] = Field(default_factory=list, description="Platform ids, e.g. twitter, linkedin")


class GenerateResponse(BaseModel):
    """Per-platform outcomes plus the project's status after the batch."""

    projectId: UUID
    status: str
    succeeded: int
    failed: int
    results: List[GeneratedContentOut]


class ContentUpdateRequest(BaseModel):
    """Body for PUT /api/projects/content/{content_id}; omitted fields stay unchanged."""

    title: Optional[str] = None
    content: Optional[str] = None
    hashtags: Optional[List[str]] = None


class ApproveRequest(BaseModel):
    """Body for POST /api/projects/content/{content_id}/approve."""

    approved: bool


# --- Legacy single-shot repurpose ---


class RepurposeRequest(BaseModel):
    """Body for POST /api/content/repurpose."""

    originalContent: str = Field(..., min_length=1)
    platform: str = Field(..., min_length=1)


class RepurposeResponse(BaseModel):
    """Normalized record plus storage id; platform fields (tweetCount, keyPoints, ...) pass through."""

    model_config = ConfigDict(extra="allow")

    id: UUID
    createdAt: Optional[datetime] = None
    title: str
    content: str
    hashtags: List[str]


class RepurposedContentOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    user_id: UUID
    original_content: str
    platform: str
    repurposed_content: str
    hashtags: List[str] = Field(default_factory=list)
    title: Optional[str] = None
    created_at: Optional[datetime] = None


class ContentHistoryResponse(BaseModel):
    content: List[RepurposedContentOut]
    pagination: Pagination
