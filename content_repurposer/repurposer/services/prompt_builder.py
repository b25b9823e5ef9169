"""
Prompt builder: (source content, platform, file metadata) -> prompt text.
Pure functions, no I/O. Each platform template asks the model for JSON:
{title, content, hashtags[], ...platform fields, guidance{formatting, engagement, bestPractices, postingSteps}}.
"""
from typing import Dict, Optional, Sequence

from repurposer.schemas.analysis import FileMeta

DEFAULT_PLATFORM = "twitter"

PLATFORM_TEMPLATES: Dict[str, str] = {
    "twitter": """Transform the following content into an engaging Twitter thread. Create 5-7 tweets that:
- Start with a hook tweet that grabs attention
- Break down key points into digestible tweets
- Include relevant hashtags (2-3 per tweet maximum)
- End with a call-to-action or engagement question
- Use emojis appropriately to increase engagement
- Keep each tweet under 280 characters

Format your response as JSON:
{
  "title": "Twitter Thread Title",
  "content": "Full thread text with tweet numbers (1/n format)",
  "hashtags": ["#hashtag1", "#hashtag2"],
  "tweetCount": 5,
  "guidance": {
    "formatting": ["Keep tweets under 280 characters", "Use line breaks for readability"],
    "engagement": ["Ask questions to encourage replies", "Use trending hashtags when relevant"],
    "bestPractices": ["Post consistently throughout the day", "Engage with your community regularly"],
    "postingSteps": ["Schedule tweets for optimal times", "Reply to comments quickly"]
  }
}""",
    "linkedin": """Transform the following content into a professional LinkedIn post that:
- Uses a professional yet engaging tone
- Starts with a compelling hook
- Includes industry insights or personal experiences
- Has clear paragraph breaks for readability
- Ends with a thought-provoking question
- Uses 3-5 relevant hashtags

Format your response as JSON:
{
  "title": "LinkedIn Post Title",
  "content": "Full LinkedIn post with proper formatting",
  "hashtags": ["#hashtag1", "#hashtag2"],
  "guidance": {
    "formatting": ["Use professional language", "Structure with clear paragraphs", "Include compelling hook"],
    "engagement": ["Ask thought-provoking questions", "Share industry insights", "Comment on others' posts"],
    "bestPractices": ["Post 1-2 times per day maximum", "Focus on value-driven content", "Use LinkedIn Analytics"],
    "postingSteps": ["Post during business hours", "Engage within first hour", "Use LinkedIn native features"]
  }
}""",
    "facebook": """Transform the following content into a Facebook post that:
- Creates engaging, conversational content
- Uses Facebook-specific features and formatting
- Includes community-building elements
- Has clear calls-to-action
- Uses 2-4 hashtags maximum
- Encourages comments and sharing

Format your response as JSON:
{
  "title": "Facebook Post Title",
  "content": "Full Facebook post content",
  "hashtags": ["#hashtag1", "#hashtag2"],
  "guidance": {
    "formatting": ["Write in conversational tone", "Use Facebook features like polls", "Tag relevant pages"],
    "engagement": ["Encourage comments with questions", "Share behind-the-scenes content", "Use Facebook Live"],
    "bestPractices": ["Post when audience is most active", "Share mix of content types", "Build community through Groups"],
    "postingSteps": ["Use Facebook Insights to optimize timing", "Create shareable content", "Respond to comments promptly"]
  }
}""",
    "instagram": """Transform the following content into an Instagram post that:
- Creates an engaging caption with line breaks
- Includes relevant hashtags (mix of popular and niche, 10-15 total)
- Suggests visual elements or carousel ideas
- Has a clear call-to-action
- Uses Instagram-friendly formatting

Format your response as JSON:
{
  "title": "Instagram Post Caption",
  "content": "Full Instagram caption with proper formatting",
  "hashtags": ["#hashtag1", "#hashtag2"],
  "visualSuggestions": ["High-quality lifestyle image", "Carousel with key points", "Behind-the-scenes content"],
  "guidance": {
    "formatting": ["Use line breaks for readability", "Lead with compelling visuals", "Include call-to-action"],
    "engagement": ["Use relevant and trending hashtags", "Post Stories regularly", "Use Instagram Reels"],
    "bestPractices": ["Maintain consistent visual aesthetic", "Post high-quality images", "Cross-promote on other platforms"],
    "postingSteps": ["Post at optimal times (11 AM, 2 PM, 5 PM)", "Engage within first hour", "Use Instagram Shopping if applicable"]
  }
}""",
    "youtube": """Transform the following content into YouTube video content that:
- Creates a compelling video title and description
- Includes video structure with timestamps
- Suggests thumbnail ideas
- Has SEO-optimized description
- Includes relevant tags and hashtags

Format your response as JSON:
{
  "title": "YouTube Video Title",
  "content": "Video description with timestamps and structure",
  "hashtags": ["#hashtag1", "#hashtag2"],
  "keyPoints": ["Introduction (0:00)", "Main content breakdown", "Conclusion and CTA"],
  "guidance": {
    "formatting": ["Create compelling titles", "Write detailed descriptions", "Use custom thumbnails", "Include timestamps"],
    "engagement": ["Ask viewers to like and subscribe", "Respond to comments actively", "Use end screens and cards"],
    "bestPractices": ["Maintain consistent upload schedule", "Optimize for YouTube SEO", "Create engaging thumbnails"],
    "postingSteps": ["Upload at optimal times (2-4 PM, 6-8 PM)", "Use YouTube Analytics", "Create playlists"]
  }
}""",
    "tiktok": """Transform the following content into a TikTok video script that:
- Creates a hook within first 3 seconds
- Uses trending sounds/music suggestions
- Includes visual cues and timing
- Has engaging captions
- Uses trending hashtags
- Includes a strong call-to-action

Format your response as JSON:
{
  "title": "TikTok Video Script",
  "content": "Full script with timing and visual cues",
  "hashtags": ["#hashtag1", "#hashtag2"],
  "duration": "30-60 seconds",
  "visualCues": ["Quick cuts for engagement", "Text overlays for key points", "Trending transition effects"],
  "guidance": {
    "formatting": ["Hook in first 3 seconds", "Use trending sounds", "Keep videos short and engaging"],
    "engagement": ["Participate in trending challenges", "Use popular hashtags", "Collaborate with other creators"],
    "bestPractices": ["Post consistently every day", "Study trending content", "Use TikTok's native editing tools"],
    "postingSteps": ["Post multiple times per day", "Engage with comments immediately", "Use trending sounds and effects"]
  }
}""",
}

SUPPORTED_PLATFORMS = tuple(PLATFORM_TEMPLATES)

ANALYSIS_PROMPT = """As an expert content strategist with deep knowledge of digital platforms and audience behavior, analyze the following content and recommend the most effective platforms for maximum reach and engagement.

CONTENT TO ANALYZE:
{content}{file_context}

COMPREHENSIVE ANALYSIS REQUIRED:
1. Content categorization and audience identification
2. Optimal platform selection from diverse digital ecosystem
3. Platform-specific adaptation strategies
4. Engagement optimization recommendations

Consider these platform categories:
- Professional Networks: LinkedIn, AngelList, Wellfound, Glassdoor
- Social Media: Twitter/X, Instagram, Facebook, TikTok, Snapchat, BeReal
- Content Communities: Reddit, Discord, Slack communities, Telegram
- Creative Platforms: Pinterest, Behance, Dribbble, DeviantArt, Figma Community
- Video Platforms: YouTube, Vimeo, Twitch, YouTube Shorts, Instagram Reels
- Publishing: Medium, Substack, Hashnode, Dev.to, Ghost, WordPress
- Professional Forums: Stack Overflow, GitHub, ProductHunt, Indie Hackers
- Niche Communities: Quora, Clubhouse, Spaces, specialized forums
- E-commerce/Review: Amazon, Etsy, Trustpilot, Google Reviews
- News/Discussion: Hacker News, Mastodon, Threads, Bluesky

Return response as JSON with this structure:
{{
  "contentAnalysis": {{
    "primaryCategory": "content main category",
    "secondaryCategories": ["related", "categories"],
    "contentType": "text/image/video/document/mixed",
    "complexity": "beginner/intermediate/advanced",
    "targetAudience": "detailed audience description",
    "tone": "professional/casual/educational/entertainment/inspirational",
    "keyTopics": ["main", "topics", "covered"],
    "contentLength": "short/medium/long",
    "engagementPotential": "low/medium/high",
    "viralPotential": "low/medium/high",
    "demographicAppeal": "age groups and interests most likely to engage"
  }},
  "suggestedPlatforms": [
    {{
      "id": "platform_identifier",
      "name": "Platform Name",
      "category": "Platform category",
      "icon": "appropriate emoji",
      "description": "Platform overview and unique value",
      "relevanceScore": 85,
      "audience": "Platform's primary user base",
      "bestFor": "Content types that perform best",
      "contentFormat": "Optimal content structure",
      "engagementStyle": "How users interact",
      "competitionLevel": "low/medium/high",
      "organicReach": "Platform's organic visibility",
      "postingGuidance": {{
        "optimalLength": "specific character/word limits",
        "bestTimes": ["optimal posting schedule"],
        "hashtags": "hashtag strategy and recommendations",
        "formatting": ["specific formatting tips"],
        "engagement": ["proven engagement tactics"],
        "bestPractices": ["platform-specific optimization tips"],
        "contentAdaptation": "how to modify content for this platform"
      }}
    }}
  ]
}}

Suggest 20-30 platforms with relevance scores above 70. Focus on platforms where this specific content type and audience would thrive. Provide actionable, specific guidance for each platform."""


def _file_context(files: Optional[Sequence[FileMeta]]) -> str:
    if not files:
        return ""
    lines = [f"- {f.type.upper()} file: {f.file_name or 'Unnamed'}" for f in files]
    return "\n\nAdditional context from uploaded files:\n" + "\n".join(lines)


def build_repurpose_prompt(
    original_content: str,
    platform: str,
    files: Optional[Sequence[FileMeta]] = None,
) -> str:
    """
    Prompt asking for one platform variant of original_content.
    Unknown platform ids use the twitter template.
    """
    template = PLATFORM_TEMPLATES.get(platform, PLATFORM_TEMPLATES[DEFAULT_PLATFORM])
    return f"{template}\n\nOriginal content:\n{original_content}{_file_context(files)}"


def _round_kb(size: int) -> int:
    # Half-up, matching how sizes are shown in the UI.
    return int(size / 1024 + 0.5)


def build_analysis_prompt(content: str, files: Optional[Sequence[FileMeta]] = None) -> str:
    """Single classification-and-ranking prompt: contentAnalysis + 20-30 scored suggestions."""
    file_context = ""
    if files:
        lines = [f'- {f.type.upper()} file: "{f.file_name}" ({_round_kb(f.size)}KB)' for f in files]
        file_context = "\n\nAttached Files Analysis:\n" + "\n".join(lines)
    return ANALYSIS_PROMPT.format(content=content, file_context=file_context)
