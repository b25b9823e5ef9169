"""Project model: one repurposing job."""
import uuid
from datetime import datetime
from typing import Any, Optional

from sqlalchemy import DateTime, String, Text, Uuid, func
from sqlalchemy.orm import Mapped, mapped_column, relationship

from repurposer.db import Base
from repurposer.models.types import JSONType

PROJECT_STATUS_DRAFT = "draft"
PROJECT_STATUS_GENERATING = "generating"
PROJECT_STATUS_REVIEW = "review"
PROJECT_STATUSES = (PROJECT_STATUS_DRAFT, PROJECT_STATUS_GENERATING, PROJECT_STATUS_REVIEW, "scheduled", "published")


class Project(Base):
    """
    Source content plus analysis.
    content_type: text | url | file.
    status: draft | generating | review | scheduled | published.
    """

    __tablename__ = "projects"
    # Timestamps are fetched on flush; AsyncSession cannot lazy-load expired columns.
    __mapper_args__ = {"eager_defaults": True}

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    user_id: Mapped[uuid.UUID] = mapped_column(Uuid, nullable=False, index=True)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    content_type: Mapped[str] = mapped_column(String(16), default="text", nullable=False)
    original_content: Mapped[str] = mapped_column(Text, default="", nullable=False)
    analysis_results: Mapped[Optional[dict[str, Any]]] = mapped_column(JSONType, nullable=True)
    suggested_platforms: Mapped[list[dict[str, Any]]] = mapped_column(JSONType, default=list, nullable=False)
    selected_platforms: Mapped[list[str]] = mapped_column(JSONType, default=list, nullable=False)
    status: Mapped[str] = mapped_column(String(32), default=PROJECT_STATUS_DRAFT, nullable=False)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
        onupdate=func.now(),
    )

    generated_content = relationship(
        "GeneratedContent",
        back_populates="project",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )
    files = relationship(
        "ProjectFile",
        back_populates="project",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )
