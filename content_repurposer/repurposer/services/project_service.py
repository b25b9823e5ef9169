"""Projects: create (analysis + uploads), read, list, edit/approve generated content."""
import math
from datetime import datetime, timezone
from typing import List, Optional, Sequence, Tuple
from uuid import UUID

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from repurposer.config import get_settings
from repurposer.logging_config import get_logger
from repurposer.models import GeneratedContent, Project, ProjectFile
from repurposer.models.project import PROJECT_STATUS_DRAFT
from repurposer.schemas.analysis import AnalysisResult, FileMeta
from repurposer.services.analysis_service import analyze_content
from repurposer.services.llm_service import LLMService
from repurposer.services.storage_service import IncomingFile, LocalObjectStorage, validate_upload

logger = get_logger(__name__)


def _validate_files(files: Sequence[IncomingFile]) -> None:
    settings = get_settings()
    if len(files) > settings.max_upload_files:
        raise ValueError("too_many_files")
    for f in files:
        validate_upload(f.mime_type, f.size, settings)


async def create_project(
    db: AsyncSession,
    storage: LocalObjectStorage,
    llm: LLMService,
    user_id: UUID,
    name: str,
    content_type: str = "text",
    content: Optional[str] = None,
    url: Optional[str] = None,
    files: Sequence[IncomingFile] = (),
    smart_detect: bool = False,
) -> Tuple[Project, AnalysisResult, List[ProjectFile]]:
    """
    Analyze the source (content, else url), insert the project as draft, then upload files.
    smart_detect pre-selects the top suggested platforms.
    Raises ValueError("name_required" | "too_many_files" | "unsupported_file_type" | "file_too_large").
    """
    settings = get_settings()
    if not (name or "").strip():
        raise ValueError("name_required")
    _validate_files(files)

    source = content or url or ""
    metas = [FileMeta(type=f.file_type, file_name=f.file_name, size=f.size) for f in files]
    analysis = await analyze_content(llm, source, metas)

    selected: List[str] = []
    if smart_detect:
        selected = [p.id for p in analysis.suggestedPlatforms[: settings.smart_detect_platform_count]]

    project = Project(
        user_id=user_id,
        name=name.strip(),
        content_type=content_type or "text",
        original_content=source[: settings.original_content_max_chars],
        analysis_results=analysis.contentAnalysis.model_dump(),
        suggested_platforms=[p.model_dump() for p in analysis.suggestedPlatforms],
        selected_platforms=selected,
        status=PROJECT_STATUS_DRAFT,
    )
    db.add(project)
    await db.flush()

    stored: List[ProjectFile] = []
    for f in files:
        key = await storage.upload(user_id, project.id, f.file_name, f.data)
        record = ProjectFile(
            project_id=project.id,
            user_id=user_id,
            file_name=f.file_name,
            file_path=key,
            file_size=f.size,
            file_type=f.file_type,
            mime_type=f.mime_type,
        )
        db.add(record)
        stored.append(record)
    await db.flush()

    logger.info(
        "project.created",
        project_id=str(project.id),
        user_id=str(user_id),
        files=len(stored),
        used_fallback=analysis.used_fallback,
        selected=selected,
    )
    return project, analysis, stored


async def get_project(
    db: AsyncSession,
    user_id: UUID,
    project_id: UUID,
) -> Tuple[Project, List[GeneratedContent], List[ProjectFile]]:
    """Project with its generated content (oldest first) and files."""
    r = await db.execute(select(Project).where(Project.id == project_id, Project.user_id == user_id))
    project = r.scalar_one_or_none()
    if not project:
        raise ValueError("project_not_found")
    rc = await db.execute(
        select(GeneratedContent)
        .where(GeneratedContent.project_id == project_id)
        .order_by(GeneratedContent.created_at.asc())
    )
    rf = await db.execute(select(ProjectFile).where(ProjectFile.project_id == project_id))
    return project, list(rc.scalars().all()), list(rf.scalars().all())


async def list_projects(
    db: AsyncSession,
    user_id: UUID,
    page: int = 1,
    limit: int = 10,
    status: Optional[str] = None,
    search: Optional[str] = None,
) -> Tuple[List[Tuple[Project, int]], dict]:
    """
    Page of (project, generated_content_count), most recently updated first.
    status "all" or None: no status filter. search: case-insensitive match on name.
    """
    filters = [Project.user_id == user_id]
    if status and status != "all":
        filters.append(Project.status == status)
    if search and search.strip():
        filters.append(Project.name.ilike(f"%{search.strip()}%"))

    content_count = (
        select(func.count(GeneratedContent.id))
        .where(GeneratedContent.project_id == Project.id)
        .correlate(Project)
        .scalar_subquery()
    )
    q = (
        select(Project, content_count.label("content_count"))
        .where(*filters)
        .order_by(Project.updated_at.desc())
        .offset((page - 1) * limit)
        .limit(limit)
    )
    r = await db.execute(q)
    rows = [(p, int(c or 0)) for p, c in r.all()]

    total = (await db.execute(select(func.count(Project.id)).where(*filters))).scalar() or 0
    pagination = {"page": page, "limit": limit, "total": total, "pages": math.ceil(total / limit)}
    return rows, pagination


async def _get_content(db: AsyncSession, user_id: UUID, content_id: UUID) -> GeneratedContent:
    r = await db.execute(
        select(GeneratedContent).where(
            GeneratedContent.id == content_id,
            GeneratedContent.user_id == user_id,
        )
    )
    item = r.scalar_one_or_none()
    if not item:
        raise ValueError("content_not_found")
    return item


async def update_generated_content(
    db: AsyncSession,
    user_id: UUID,
    content_id: UUID,
    title: Optional[str] = None,
    content: Optional[str] = None,
    hashtags: Optional[List[str]] = None,
) -> GeneratedContent:
    """
    Edit title/content/hashtags; None leaves a field unchanged.
    Blank title or content, or a hashtag list with no non-blank tag, raises ValueError("content_required").
    """
    if title is not None and not title.strip():
        raise ValueError("content_required")
    if content is not None and not content.strip():
        raise ValueError("content_required")
    if hashtags is not None and not any(h.strip() for h in hashtags):
        raise ValueError("content_required")
    item = await _get_content(db, user_id, content_id)
    if title is not None:
        item.title = title
    if content is not None:
        item.content = content
    if hashtags is not None:
        item.hashtags = hashtags
    await db.flush()
    logger.info("content.updated", content_id=str(content_id), user_id=str(user_id))
    return item


async def approve_content(
    db: AsyncSession,
    user_id: UUID,
    content_id: UUID,
    approved: bool,
) -> GeneratedContent:
    """Set or clear approval; approved_at is now when approving, None otherwise."""
    item = await _get_content(db, user_id, content_id)
    item.approved = approved
    item.approved_at = datetime.now(timezone.utc) if approved else None
    await db.flush()
    logger.info("content.approval_changed", content_id=str(content_id), approved=approved)
    return item
