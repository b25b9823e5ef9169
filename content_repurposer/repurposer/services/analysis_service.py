"""
Content analysis: classify source content and rank candidate platforms.

One AI call per project. If the call fails or its answer does not parse into
{contentAnalysis, suggestedPlatforms}, fallback_analysis builds a deterministic
result from keyword matching, word counts and a fixed platform list.
"""
import json
from typing import Any, Dict, List, Optional, Sequence

from repurposer.exceptions import AIGatewayError
from repurposer.logging_config import get_logger
from repurposer.schemas.analysis import (
    AnalysisResult,
    ContentAnalysis,
    FileMeta,
    FileSummary,
    PlatformSuggestion,
)
from repurposer.services.llm_service import LLMService
from repurposer.services.normalizer import strip_code_fence
from repurposer.services.prompt_builder import build_analysis_prompt

logger = get_logger(__name__)

# Checked in order; first hit wins.
CATEGORY_KEYWORDS = (
    ("business", ("business", "startup", "saas"), ["entrepreneurship", "business", "technology"]),
    ("technology", ("tech", "software", "ai"), ["tech", "innovation", "software"]),
    ("design", ("design", "creative"), ["design", "creative", "visual"]),
)
DEFAULT_CATEGORY = "general"
DEFAULT_SUBCATEGORIES = ["content"]

ADVANCED_WORD_COUNT = 500
INTERMEDIATE_WORD_COUNT = 200
KEY_TOPIC_WORDS = 8
KEY_TOPIC_MIN_LEN = 3

# Base relevance scores; producthunt/youtube/instagram are adjusted in _fallback_platforms.
FALLBACK_PLATFORMS: List[Dict[str, Any]] = [
    {
        "id": "linkedin",
        "name": "LinkedIn",
        "category": "Professional Network",
        "icon": "💼",
        "description": "Professional networking and business content",
        "relevanceScore": 95,
        "audience": "Professionals, business leaders, entrepreneurs",
        "bestFor": "Business insights, professional updates, industry content",
        "contentFormat": "1-3 paragraphs with professional tone",
        "engagementStyle": "Professional comments, shares, endorsements",
        "competitionLevel": "medium",
        "organicReach": "good for business content",
        "postingGuidance": {
            "optimalLength": "1200-2000 characters",
            "bestTimes": ["8 AM", "12 PM", "5 PM"],
            "hashtags": "3-5 professional hashtags",
            "formatting": ["Professional tone", "Clear structure", "Industry insights"],
            "engagement": ["Ask thought-provoking questions", "Share experiences", "Tag relevant people"],
            "bestPractices": ["Post consistently", "Engage with comments", "Share valuable insights"],
            "contentAdaptation": "Focus on professional value and business insights",
        },
    },
    {
        "id": "twitter",
        "name": "Twitter/X",
        "category": "Social Media",
        "icon": "🐦",
        "description": "Real-time social networking and microblogging",
        "relevanceScore": 88,
        "audience": "General public, news consumers, thought leaders",
        "bestFor": "Quick updates, breaking news, threads, conversations",
        "contentFormat": "280 characters per tweet, threads for longer content",
        "engagementStyle": "Fast-paced interactions, retweets, replies",
        "competitionLevel": "high",
        "organicReach": "moderate, depends on engagement",
        "postingGuidance": {
            "optimalLength": "Under 280 characters per tweet",
            "bestTimes": ["9 AM", "12 PM", "3 PM", "6 PM"],
            "hashtags": "2-3 relevant hashtags maximum",
            "formatting": ["Concise language", "Clear message", "Engaging hooks"],
            "engagement": ["Reply to comments", "Use trending hashtags", "Create polls"],
            "bestPractices": ["Tweet consistently", "Engage authentically", "Share timely content"],
            "contentAdaptation": "Break into tweet-sized chunks or create thread",
        },
    },
    {
        "id": "medium",
        "name": "Medium",
        "category": "Publishing Platform",
        "icon": "📝",
        "description": "Long-form content publishing and thought leadership",
        "relevanceScore": 85,
        "audience": "Readers, writers, professionals seeking in-depth content",
        "bestFor": "Detailed articles, thought leadership, tutorials",
        "contentFormat": "Long-form articles (5+ minute read)",
        "engagementStyle": "Thoughtful comments, claps, follows",
        "competitionLevel": "medium",
        "organicReach": "good for quality content",
        "postingGuidance": {
            "optimalLength": "1500-3000 words",
            "bestTimes": ["7 AM", "1 PM", "8 PM"],
            "hashtags": "Use Medium tags instead",
            "formatting": ["Clear headings", "Subheadings", "Images for breaks"],
            "engagement": ["Respond to comments", "Engage with other writers", "Join publications"],
            "bestPractices": ["Focus on quality", "Use compelling headlines", "Add value"],
            "contentAdaptation": "Expand into comprehensive article with examples",
        },
    },
    {
        "id": "reddit",
        "name": "Reddit",
        "category": "Community Platform",
        "icon": "🤖",
        "description": "Community-driven discussions and content sharing",
        "relevanceScore": 82,
        "audience": "Diverse communities with specific interests",
        "bestFor": "Community discussions, AMAs, sharing resources",
        "contentFormat": "Text posts, links, images with context",
        "engagementStyle": "Upvotes, detailed comments, community interaction",
        "competitionLevel": "high",
        "organicReach": "excellent if community embraces content",
        "postingGuidance": {
            "optimalLength": "200-500 words with context",
            "bestTimes": ["6 AM", "10 AM", "7 PM"],
            "hashtags": "Not applicable - use relevant subreddits",
            "formatting": ["Clear titles", "Provide context", "Follow subreddit rules"],
            "engagement": ["Respond to all comments", "Follow community guidelines", "Add genuine value"],
            "bestPractices": ["Know the community", "Provide value first", "Be authentic"],
            "contentAdaptation": "Tailor to specific subreddit interests and rules",
        },
    },
    {
        "id": "producthunt",
        "name": "Product Hunt",
        "category": "Product Discovery",
        "icon": "🚀",
        "description": "Platform for discovering and launching new products",
        "relevanceScore": 75,
        "audience": "Entrepreneurs, makers, early adopters, investors",
        "bestFor": "Product launches, tool discoveries, tech announcements",
        "contentFormat": "Product descriptions with visuals",
        "engagementStyle": "Upvotes, comments, maker interactions",
        "competitionLevel": "high",
        "organicReach": "excellent for featured products",
        "postingGuidance": {
            "optimalLength": "Brief description with key benefits",
            "bestTimes": ["12:01 AM PST launch day"],
            "hashtags": "Use relevant tags and categories",
            "formatting": ["Clear product value", "High-quality visuals", "Compelling tagline"],
            "engagement": ["Respond to comments", "Thank supporters", "Share updates"],
            "bestPractices": ["Build community first", "Prepare launch materials", "Follow up"],
            "contentAdaptation": "Focus on product value and innovation",
        },
    },
    {
        "id": "youtube",
        "name": "YouTube",
        "category": "Video Platform",
        "icon": "📺",
        "description": "Video content sharing and monetization platform",
        "relevanceScore": 75,
        "audience": "Global audience across all demographics",
        "bestFor": "Tutorials, explanations, entertainment, education",
        "contentFormat": "Video content with thumbnails and descriptions",
        "engagementStyle": "Views, likes, comments, subscriptions",
        "competitionLevel": "very high",
        "organicReach": "excellent for engaging content",
        "postingGuidance": {
            "optimalLength": "8-15 minutes for optimal retention",
            "bestTimes": ["2 PM", "8 PM", "9 PM"],
            "hashtags": "Use in description and tags",
            "formatting": ["Compelling thumbnails", "Clear titles", "Structured content"],
            "engagement": ["Reply to comments", "Create playlists", "Use community tab"],
            "bestPractices": ["Consistent upload schedule", "SEO optimization", "Audience retention"],
            "contentAdaptation": "Convert to video format with visual elements",
        },
    },
    {
        "id": "instagram",
        "name": "Instagram",
        "category": "Visual Social Media",
        "icon": "📸",
        "description": "Visual content sharing with photos and videos",
        "relevanceScore": 70,
        "audience": "Younger demographics, visual content consumers",
        "bestFor": "Visual storytelling, behind-the-scenes, lifestyle content",
        "contentFormat": "Images, videos, stories, reels",
        "engagementStyle": "Likes, comments, shares, saves",
        "competitionLevel": "very high",
        "organicReach": "declining but good for engaging content",
        "postingGuidance": {
            "optimalLength": "2200 characters max for captions",
            "bestTimes": ["11 AM", "1 PM", "5 PM"],
            "hashtags": "20-30 relevant hashtags",
            "formatting": ["High-quality visuals", "Engaging captions", "Story highlights"],
            "engagement": ["Use stories", "Respond to DMs", "Create reels"],
            "bestPractices": ["Visual consistency", "Use all features", "Engage with community"],
            "contentAdaptation": "Create visual representations and carousel posts",
        },
    },
]

PRODUCTHUNT_BOOSTED_SCORE = 90
YOUTUBE_WITH_IMAGES_SCORE = 85
INSTAGRAM_WITH_IMAGES_SCORE = 90


def _categorize(content_lower: str) -> tuple[str, List[str]]:
    for category, keywords, subcategories in CATEGORY_KEYWORDS:
        if any(k in content_lower for k in keywords):
            return category, list(subcategories)
    return DEFAULT_CATEGORY, list(DEFAULT_SUBCATEGORIES)


def _size_bucket(word_count: int, advanced: str, intermediate: str, basic: str) -> str:
    if word_count > ADVANCED_WORD_COUNT:
        return advanced
    if word_count > INTERMEDIATE_WORD_COUNT:
        return intermediate
    return basic


def _fallback_platforms(category: str, has_images: bool) -> List[PlatformSuggestion]:
    overrides = {}
    if category in ("technology", "business"):
        overrides["producthunt"] = PRODUCTHUNT_BOOSTED_SCORE
    if has_images:
        overrides["youtube"] = YOUTUBE_WITH_IMAGES_SCORE
        overrides["instagram"] = INSTAGRAM_WITH_IMAGES_SCORE
    out = []
    for entry in FALLBACK_PLATFORMS:
        data = dict(entry)
        if data["id"] in overrides:
            data["relevanceScore"] = overrides[data["id"]]
        out.append(PlatformSuggestion.model_validate(data))
    return out


def fallback_analysis(content: str, files: Optional[Sequence[FileMeta]] = None) -> AnalysisResult:
    """Deterministic analysis used whenever the AI analysis is unavailable."""
    files = files or []
    has_images = any(f.type == "image" for f in files)
    has_documents = any(f.type == "document" for f in files)
    words = content.split(" ")
    word_count = len(words)
    category, subcategories = _categorize(content.lower())

    if has_images:
        content_type = "mixed"
    elif has_documents:
        content_type = "document"
    else:
        content_type = "text"

    analysis = ContentAnalysis(
        primaryCategory=category,
        secondaryCategories=subcategories,
        contentType=content_type,
        complexity=_size_bucket(word_count, "advanced", "intermediate", "beginner"),
        targetAudience="professionals and enthusiasts in " + category,
        tone="professional",
        keyTopics=[w for w in words[:KEY_TOPIC_WORDS] if len(w) > KEY_TOPIC_MIN_LEN],
        contentLength=_size_bucket(word_count, "long", "medium", "short"),
        engagementPotential="high" if has_images else "medium",
        viralPotential="high" if category == "technology" else "medium",
    )
    return AnalysisResult(
        contentAnalysis=analysis,
        suggestedPlatforms=_fallback_platforms(category, has_images),
        used_fallback=True,
    )


async def analyze_content(
    llm: LLMService,
    content: str,
    files: Optional[Sequence[FileMeta]] = None,
) -> AnalysisResult:
    """
    Ask the model for {contentAnalysis, suggestedPlatforms}; keep its platform order.
    Gateway errors, unparsable JSON and schema mismatches all resolve to fallback_analysis.
    """
    prompt = build_analysis_prompt(content, files)
    try:
        raw = await llm.generate(prompt)
        data = json.loads(strip_code_fence(raw))
        result = AnalysisResult.model_validate(data)
    except (AIGatewayError, ValueError, TypeError) as e:
        logger.warning("analysis.fallback", reason=type(e).__name__, error=str(e))
        return fallback_analysis(content, files)
    logger.info(
        "analysis.ai_success",
        category=result.contentAnalysis.primaryCategory,
        platforms=len(result.suggestedPlatforms),
    )
    return result


def summarize_files(files: Sequence[FileMeta]) -> FileSummary:
    """Flags and type list over attachments (image/document/text only)."""
    summary = FileSummary(totalFiles=len(files))
    for f in files:
        if f.type == "image":
            summary.hasImages = True
            summary.types.append("image")
        elif f.type == "document":
            summary.hasDocuments = True
            summary.types.append("document")
        elif f.type == "text":
            summary.hasText = True
            summary.types.append("text")
    return summary
