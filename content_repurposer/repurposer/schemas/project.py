"""Project request/response schemas."""
from datetime import datetime
from typing import Any, Dict, List, Optional
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field

from repurposer.schemas.analysis import ContentAnalysis, FileSummary, PlatformSuggestion
from repurposer.schemas.common import Pagination
from repurposer.schemas.content import GeneratedContentOut


class ProjectFileOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    project_id: UUID
    file_name: str
    file_path: str
    file_size: int
    file_type: str
    mime_type: str
    created_at: Optional[datetime] = None


class ProjectOut(BaseModel):
    """Project row as stored."""

    model_config = ConfigDict(from_attributes=True)

    id: UUID
    user_id: UUID
    name: str
    content_type: str
    original_content: str
    analysis_results: Optional[Dict[str, Any]] = None
    suggested_platforms: List[Dict[str, Any]] = Field(default_factory=list)
    selected_platforms: List[str] = Field(default_factory=list)
    status: str
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class ProjectCreateResponse(ProjectOut):
    """Response for POST /api/projects: the row plus the typed analysis."""

    analysis: ContentAnalysis
    suggestedPlatforms: List[PlatformSuggestion]
    files: List[ProjectFileOut] = Field(default_factory=list)


class ProjectDetailResponse(ProjectOut):
    """Response for GET /api/projects/{project_id}."""

    generatedContent: List[GeneratedContentOut] = Field(default_factory=list)
    files: List[ProjectFileOut] = Field(default_factory=list)
    fileSummary: Optional[FileSummary] = None


class ProjectListItem(ProjectOut):
    generated_content_count: int = 0


class ProjectListResponse(BaseModel):
    """Response for GET /api/projects."""

    projects: List[ProjectListItem]
    pagination: Pagination
