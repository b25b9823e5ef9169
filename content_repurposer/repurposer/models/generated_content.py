"""Generated content model: one row per (project, platform) generation attempt."""
import uuid
from datetime import datetime
from typing import Any, Optional

from sqlalchemy import Boolean, DateTime, ForeignKey, String, Text, Uuid, func
from sqlalchemy.orm import Mapped, mapped_column, relationship

from repurposer.db import Base
from repurposer.models.types import JSONType

CONTENT_STATUS_GENERATING = "generating"
CONTENT_STATUS_COMPLETE = "complete"
CONTENT_STATUS_ERROR = "error"


class GeneratedContent(Base):
    """
    Platform variant of a project's content.
    status: generating (transient) | complete (title/content/hashtags set) | error (error_message set).
    A regenerate inserts a new row; earlier rows for the same platform are kept.
    """

    __tablename__ = "generated_content"
    __mapper_args__ = {"eager_defaults": True}

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    project_id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        ForeignKey("projects.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    user_id: Mapped[uuid.UUID] = mapped_column(Uuid, nullable=False, index=True)
    platform: Mapped[str] = mapped_column(String(64), nullable=False)
    title: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    content: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    hashtags: Mapped[list[str]] = mapped_column(JSONType, default=list, nullable=False)
    guidance: Mapped[dict[str, Any]] = mapped_column(JSONType, default=dict, nullable=False)
    # Platform-specific passthrough: tweetCount, keyPoints, visualSuggestions, visualCues, duration
    extras: Mapped[dict[str, Any]] = mapped_column(JSONType, default=dict, nullable=False)
    status: Mapped[str] = mapped_column(String(16), default=CONTENT_STATUS_GENERATING, nullable=False)
    error_message: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    approved: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    approved_at: Mapped[Optional[datetime]] = mapped_column(DateTime(timezone=True), nullable=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
        onupdate=func.now(),
    )

    project = relationship("Project", back_populates="generated_content")
