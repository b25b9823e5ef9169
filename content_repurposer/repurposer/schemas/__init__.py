"""Pydantic request/response schemas."""
from repurposer.schemas.common import ErrorResponse, MessageResponse, Pagination
from repurposer.schemas.analysis import (
    AnalysisResult,
    ContentAnalysis,
    FileMeta,
    PlatformSuggestion,
)
from repurposer.schemas.content import (
    GenerateRequest,
    GenerateResponse,
    GeneratedContentOut,
)
from repurposer.schemas.project import (
    ProjectCreateResponse,
    ProjectDetailResponse,
    ProjectListResponse,
)

__all__ = [
    "ErrorResponse",
    "MessageResponse",
    "Pagination",
    "AnalysisResult",
    "ContentAnalysis",
    "FileMeta",
    "PlatformSuggestion",
    "GenerateRequest",
    "GenerateResponse",
    "GeneratedContentOut",
    "ProjectCreateResponse",
    "ProjectDetailResponse",
    "ProjectListResponse",
]
