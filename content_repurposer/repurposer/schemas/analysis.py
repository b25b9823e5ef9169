"""Content analysis and platform suggestion schemas (camelCase on the wire)."""
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field


class FileMeta(BaseModel):
    """Metadata of an attached file as seen by prompts and the analysis heuristic."""

    type: str = Field(..., description="image | video | audio | document | text")
    file_name: Optional[str] = None
    size: int = 0


class ContentAnalysis(BaseModel):
    """
    Classification of a project's source content.
    Extra keys returned by the model are kept as-is.
    """

    model_config = ConfigDict(extra="allow")

    primaryCategory: str = "general"
    secondaryCategories: List[str] = Field(default_factory=list)
    contentType: str = "text"
    complexity: str = "beginner"
    targetAudience: str = ""
    tone: str = "professional"
    keyTopics: List[str] = Field(default_factory=list)
    contentLength: str = "short"
    engagementPotential: str = "medium"
    viralPotential: str = "medium"
    demographicAppeal: Optional[str] = None


class PostingGuidance(BaseModel):
    model_config = ConfigDict(extra="allow")

    optimalLength: str = ""
    bestTimes: List[str] = Field(default_factory=list)
    hashtags: str = ""
    formatting: List[str] = Field(default_factory=list)
    engagement: List[str] = Field(default_factory=list)
    bestPractices: List[str] = Field(default_factory=list)
    contentAdaptation: str = ""


class PlatformSuggestion(BaseModel):
    """Scored platform recommendation (relevanceScore 0-100)."""

    model_config = ConfigDict(extra="allow")

    id: str
    name: str
    category: str = ""
    icon: str = ""
    description: str = ""
    relevanceScore: int = Field(0, ge=0, le=100)
    audience: str = ""
    bestFor: str = ""
    contentFormat: str = ""
    engagementStyle: str = ""
    competitionLevel: str = ""
    organicReach: str = ""
    postingGuidance: Optional[PostingGuidance] = None


class AnalysisResult(BaseModel):
    """Output of the analysis step: analysis + suggestions in the order they were produced."""

    contentAnalysis: ContentAnalysis
    suggestedPlatforms: List[PlatformSuggestion] = Field(default_factory=list)
    used_fallback: bool = False


class FileSummary(BaseModel):
    """Counts/flags over a project's attachments."""

    totalFiles: int = 0
    types: List[str] = Field(default_factory=list)
    hasImages: bool = False
    hasDocuments: bool = False
    hasText: bool = False
    suggestedPlatforms: List[PlatformSuggestion] = Field(default_factory=list)
