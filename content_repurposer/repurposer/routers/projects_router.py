"""Projects API: create with analysis, list, detail, per-platform generation, review edits."""
from typing import List, Optional
from uuid import UUID

from fastapi import APIRouter, Depends, File, Form, HTTPException, Query, UploadFile, status
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from repurposer.db import get_db, get_session_factory
from repurposer.dependencies import get_current_user_id, get_llm_service, get_storage
from repurposer.logging_config import get_logger
from repurposer.schemas.analysis import FileMeta
from repurposer.schemas.content import (
    ApproveRequest,
    ContentUpdateRequest,
    GenerateRequest,
    GenerateResponse,
    GeneratedContentOut,
)
from repurposer.schemas.project import (
    ProjectCreateResponse,
    ProjectDetailResponse,
    ProjectFileOut,
    ProjectListItem,
    ProjectListResponse,
    ProjectOut,
)
from repurposer.services.analysis_service import summarize_files
from repurposer.services.generation_service import GenerationBatch, generate_for_platforms, regenerate_content
from repurposer.services.llm_service import LLMService
from repurposer.services.project_service import (
    approve_content,
    create_project,
    get_project,
    list_projects,
    update_generated_content,
)
from repurposer.services.storage_service import IncomingFile, LocalObjectStorage
from repurposer.utils.query_params import ensure_bool_param

logger = get_logger(__name__)

router = APIRouter(prefix="/api/projects", tags=["projects"])

_ERRORS = {
    "project_not_found": (status.HTTP_404_NOT_FOUND, "Project not found"),
    "content_not_found": (status.HTTP_404_NOT_FOUND, "Content not found"),
    "name_required": (status.HTTP_400_BAD_REQUEST, "Project name is required"),
    "platforms_required": (status.HTTP_400_BAD_REQUEST, "At least one platform is required"),
    "content_required": (status.HTTP_400_BAD_REQUEST, "Title, content and hashtags cannot be empty"),
    "too_many_files": (status.HTTP_400_BAD_REQUEST, "Too many files"),
    "unsupported_file_type": (status.HTTP_400_BAD_REQUEST, "File type not supported"),
    "file_too_large": (status.HTTP_400_BAD_REQUEST, "File too large"),
}


def _http_error(e: ValueError) -> HTTPException:
    code = str(e)
    if code not in _ERRORS:
        raise e
    status_code, detail = _ERRORS[code]
    return HTTPException(status_code=status_code, detail=detail)


def _generate_response(batch: GenerationBatch) -> GenerateResponse:
    return GenerateResponse(
        projectId=batch.project_id,
        status=batch.status,
        succeeded=batch.succeeded,
        failed=batch.failed,
        results=[GeneratedContentOut.model_validate(i) for i in batch.items],
    )


@router.post("", response_model=ProjectCreateResponse, status_code=status.HTTP_201_CREATED)
async def post_project(
    name: str = Form(""),
    contentType: str = Form("text"),
    content: Optional[str] = Form(None),
    url: Optional[str] = Form(None),
    smartDetect: Optional[str] = Form(None, description="true to pre-select the top suggested platforms"),
    files: Optional[List[UploadFile]] = File(None),
    user_id: UUID = Depends(get_current_user_id),
    db: AsyncSession = Depends(get_db),
    llm: LLMService = Depends(get_llm_service),
    storage: LocalObjectStorage = Depends(get_storage),
) -> ProjectCreateResponse:
    """
    Create a project from text, a URL or uploaded files.
    The source is analyzed first (AI, or the keyword heuristic when AI is unavailable).
    400 on blank name or rejected files.
    """
    incoming = [
        IncomingFile(
            file_name=f.filename or "upload",
            mime_type=f.content_type or "application/octet-stream",
            data=await f.read(),
        )
        for f in files or []
    ]
    try:
        project, analysis, stored = await create_project(
            db,
            storage,
            llm,
            user_id,
            name=name,
            content_type=contentType,
            content=content,
            url=url,
            files=incoming,
            smart_detect=ensure_bool_param(smartDetect),
        )
    except ValueError as e:
        raise _http_error(e)
    return ProjectCreateResponse(
        **ProjectOut.model_validate(project).model_dump(),
        analysis=analysis.contentAnalysis,
        suggestedPlatforms=analysis.suggestedPlatforms,
        files=[ProjectFileOut.model_validate(f) for f in stored],
    )


@router.get("", response_model=ProjectListResponse)
async def get_projects(
    page: int = Query(1, ge=1),
    limit: int = Query(10, ge=1, le=100),
    status_filter: Optional[str] = Query(None, alias="status", description="draft | generating | review | all"),
    search: Optional[str] = Query(None, description="Case-insensitive match on project name"),
    user_id: UUID = Depends(get_current_user_id),
    db: AsyncSession = Depends(get_db),
) -> ProjectListResponse:
    """Caller's projects, most recently updated first, with generated content counts."""
    rows, pagination = await list_projects(db, user_id, page=page, limit=limit, status=status_filter, search=search)
    return ProjectListResponse(
        projects=[
            ProjectListItem(**ProjectOut.model_validate(p).model_dump(), generated_content_count=count)
            for p, count in rows
        ],
        pagination=pagination,
    )


@router.get("/{project_id}", response_model=ProjectDetailResponse)
async def get_project_detail(
    project_id: UUID,
    user_id: UUID = Depends(get_current_user_id),
    db: AsyncSession = Depends(get_db),
) -> ProjectDetailResponse:
    try:
        project, contents, files = await get_project(db, user_id, project_id)
    except ValueError as e:
        raise _http_error(e)
    metas = [FileMeta(type=f.file_type, file_name=f.file_name, size=f.file_size) for f in files]
    return ProjectDetailResponse(
        **ProjectOut.model_validate(project).model_dump(),
        generatedContent=[GeneratedContentOut.model_validate(c) for c in contents],
        files=[ProjectFileOut.model_validate(f) for f in files],
        fileSummary=summarize_files(metas),
    )


@router.post("/{project_id}/generate", response_model=GenerateResponse)
async def post_generate(
    project_id: UUID,
    payload: GenerateRequest,
    user_id: UUID = Depends(get_current_user_id),
    session_factory: async_sessionmaker[AsyncSession] = Depends(get_session_factory),
    llm: LLMService = Depends(get_llm_service),
) -> GenerateResponse:
    """
    Generate one variant per requested platform, concurrently.
    Per-platform failures come back as items with status=error; the request itself still succeeds.
    Project ends in review when every platform completed, otherwise draft.
    """
    try:
        batch = await generate_for_platforms(session_factory, llm, user_id, project_id, payload.platforms)
    except ValueError as e:
        raise _http_error(e)
    return _generate_response(batch)


@router.post("/content/{content_id}/regenerate", response_model=GenerateResponse)
async def post_regenerate(
    content_id: UUID,
    user_id: UUID = Depends(get_current_user_id),
    session_factory: async_sessionmaker[AsyncSession] = Depends(get_session_factory),
    llm: LLMService = Depends(get_llm_service),
) -> GenerateResponse:
    """Generate a fresh variant for the item's platform; the previous item is kept."""
    try:
        batch = await regenerate_content(session_factory, llm, user_id, content_id)
    except ValueError as e:
        raise _http_error(e)
    return _generate_response(batch)


@router.put("/content/{content_id}", response_model=GeneratedContentOut)
async def put_content(
    content_id: UUID,
    payload: ContentUpdateRequest,
    user_id: UUID = Depends(get_current_user_id),
    db: AsyncSession = Depends(get_db),
) -> GeneratedContentOut:
    try:
        item = await update_generated_content(
            db,
            user_id,
            content_id,
            title=payload.title,
            content=payload.content,
            hashtags=payload.hashtags,
        )
    except ValueError as e:
        raise _http_error(e)
    return GeneratedContentOut.model_validate(item)


@router.post("/content/{content_id}/approve", response_model=GeneratedContentOut)
async def post_approve(
    content_id: UUID,
    payload: ApproveRequest,
    user_id: UUID = Depends(get_current_user_id),
    db: AsyncSession = Depends(get_db),
) -> GeneratedContentOut:
    """Approve (approved=true) or revoke approval (approved=false)."""
    try:
        item = await approve_content(db, user_id, content_id, payload.approved)
    except ValueError as e:
        raise _http_error(e)
    return GeneratedContentOut.model_validate(item)
