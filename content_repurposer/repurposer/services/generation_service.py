"""
Per-platform generation fan-out.

generate_for_platforms runs prompt -> AI -> normalize -> persist once per platform, all
platforms concurrently, each in its own session. A failure inside one platform's pipeline is
recorded on that platform's row (status=error) and never cancels the others. Once every
pipeline has settled the project moves to review (all complete) or back to draft.
"""
import asyncio
from dataclasses import dataclass, field
from typing import List, Sequence
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from repurposer.logging_config import get_logger
from repurposer.models import GeneratedContent, Project, ProjectFile
from repurposer.models.generated_content import (
    CONTENT_STATUS_COMPLETE,
    CONTENT_STATUS_ERROR,
    CONTENT_STATUS_GENERATING,
)
from repurposer.models.project import (
    PROJECT_STATUS_DRAFT,
    PROJECT_STATUS_GENERATING,
    PROJECT_STATUS_REVIEW,
)
from repurposer.schemas.analysis import FileMeta
from repurposer.services.llm_service import LLMService
from repurposer.services.normalizer import normalize_response
from repurposer.services.prompt_builder import build_repurpose_prompt

logger = get_logger(__name__)

GENERATION_CANCELLED_MESSAGE = "Generation cancelled before completion"


@dataclass
class GenerationBatch:
    """Outcome of one generate call: one row per requested platform, in request order."""

    project_id: UUID
    status: str
    items: List[GeneratedContent] = field(default_factory=list)

    @property
    def succeeded(self) -> int:
        return sum(1 for i in self.items if i.status == CONTENT_STATUS_COMPLETE)

    @property
    def failed(self) -> int:
        return sum(1 for i in self.items if i.status == CONTENT_STATUS_ERROR)


def final_project_status(requested: int, succeeded: int) -> str:
    """review only when every requested platform produced a complete item."""
    return PROJECT_STATUS_REVIEW if requested > 0 and succeeded == requested else PROJECT_STATUS_DRAFT


async def _get_project(db: AsyncSession, user_id: UUID, project_id: UUID) -> Project:
    r = await db.execute(select(Project).where(Project.id == project_id, Project.user_id == user_id))
    project = r.scalar_one_or_none()
    if not project:
        raise ValueError("project_not_found")
    return project


async def _set_project_status(
    session_factory: async_sessionmaker[AsyncSession],
    project_id: UUID,
    status: str,
) -> None:
    async with session_factory() as db:
        project = await db.get(Project, project_id)
        if project is not None:
            project.status = status
            await db.commit()


async def _generate_platform(
    session_factory: async_sessionmaker[AsyncSession],
    llm: LLMService,
    project_id: UUID,
    user_id: UUID,
    platform: str,
    original_content: str,
    files: Sequence[FileMeta],
) -> GeneratedContent:
    """
    One platform pipeline. Any error after the generating row exists is stored on that row.
    Cancellation is stored the same way and then re-raised. Errors writing the row itself propagate.
    """
    async with session_factory() as db:
        item = GeneratedContent(
            project_id=project_id,
            user_id=user_id,
            platform=platform,
            status=CONTENT_STATUS_GENERATING,
        )
        db.add(item)
        await db.commit()

        try:
            prompt = build_repurpose_prompt(original_content, platform, files)
            raw = await llm.generate(prompt)
            normalized = normalize_response(raw, platform)
            item.title = normalized.title
            item.content = normalized.content
            item.hashtags = normalized.hashtags
            item.guidance = normalized.guidance or {}
            item.extras = normalized.extras
            item.status = CONTENT_STATUS_COMPLETE
            await db.commit()
        except asyncio.CancelledError:
            await db.rollback()
            item.status = CONTENT_STATUS_ERROR
            item.error_message = GENERATION_CANCELLED_MESSAGE
            await db.commit()
            logger.warning("generation.platform_cancelled", project_id=str(project_id), platform=platform)
            raise
        except Exception as e:
            await db.rollback()
            item.status = CONTENT_STATUS_ERROR
            item.error_message = str(e) or type(e).__name__
            await db.commit()
            await db.refresh(item)
            logger.warning(
                "generation.platform_failed",
                project_id=str(project_id),
                platform=platform,
                error_type=type(e).__name__,
                error=item.error_message,
            )
            return item

        logger.info(
            "generation.platform_complete",
            project_id=str(project_id),
            platform=platform,
            fallback=normalized.is_fallback,
        )
        return item


async def generate_for_platforms(
    session_factory: async_sessionmaker[AsyncSession],
    llm: LLMService,
    user_id: UUID,
    project_id: UUID,
    platforms: Sequence[str],
) -> GenerationBatch:
    """
    Generate one variant per platform (duplicates collapsed, order kept).
    Marks the project generating and stores platforms as its selection, then waits for every
    pipeline to settle before setting review/draft. A persistence error in any pipeline is
    re-raised after the status update; rows already written stay. If the batch is cancelled
    the project goes back to draft before CancelledError propagates.
    """
    requested = list(dict.fromkeys(platforms))
    if not requested:
        raise ValueError("platforms_required")

    async with session_factory() as db:
        project = await _get_project(db, user_id, project_id)
        project.status = PROJECT_STATUS_GENERATING
        project.selected_platforms = requested
        original_content = project.original_content
        r = await db.execute(select(ProjectFile).where(ProjectFile.project_id == project_id))
        files = [FileMeta(type=f.file_type, file_name=f.file_name, size=f.file_size) for f in r.scalars().all()]
        await db.commit()

    logger.info("generation.started", project_id=str(project_id), platforms=requested)
    try:
        results = await asyncio.gather(
            *(
                _generate_platform(session_factory, llm, project_id, user_id, p, original_content, files)
                for p in requested
            ),
            return_exceptions=True,
        )
    except asyncio.CancelledError:
        # gather waits for every pipeline to record its row before this runs
        await _set_project_status(session_factory, project_id, PROJECT_STATUS_DRAFT)
        logger.warning("generation.cancelled", project_id=str(project_id))
        raise

    items = [r for r in results if isinstance(r, GeneratedContent)]
    errors = [r for r in results if isinstance(r, BaseException)]
    batch = GenerationBatch(project_id=project_id, status=PROJECT_STATUS_DRAFT, items=items)
    batch.status = final_project_status(len(requested), batch.succeeded)
    await _set_project_status(session_factory, project_id, batch.status)
    logger.info(
        "generation.finished",
        project_id=str(project_id),
        status=batch.status,
        succeeded=batch.succeeded,
        failed=len(requested) - batch.succeeded,
    )
    if errors:
        logger.error("generation.persistence_failed", project_id=str(project_id), error=str(errors[0]))
        raise errors[0]
    return batch


async def regenerate_content(
    session_factory: async_sessionmaker[AsyncSession],
    llm: LLMService,
    user_id: UUID,
    content_id: UUID,
) -> GenerationBatch:
    """Run the pipeline again for one item's platform. The old row is kept; a new row is added."""
    async with session_factory() as db:
        r = await db.execute(
            select(GeneratedContent).where(
                GeneratedContent.id == content_id,
                GeneratedContent.user_id == user_id,
            )
        )
        item = r.scalar_one_or_none()
        if not item:
            raise ValueError("content_not_found")
        project_id, platform = item.project_id, item.platform
    return await generate_for_platforms(session_factory, llm, user_id, project_id, [platform])
