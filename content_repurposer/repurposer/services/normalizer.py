"""
Response normalizer: raw model text -> NormalizedContent with title, content and hashtags always set.

The model is told to answer in JSON but often wraps it in a markdown fence or answers in prose.
normalize_response never raises: anything that does not parse to a JSON object goes through
NormalizedContent.fallback.
"""
import json
import re
from dataclasses import dataclass, field
from typing import Any, Dict, List, Literal, Optional

from repurposer.logging_config import get_logger

logger = get_logger(__name__)

SOURCE_PARSED = "parsed"
SOURCE_FALLBACK = "fallback"

# Optional per-platform fields copied through untouched when the model returns them.
PASSTHROUGH_FIELDS = ("tweetCount", "keyPoints", "visualSuggestions", "visualCues", "duration")

_JSON_FENCE_OPEN = re.compile(r"```json\s*\n?")
_BARE_FENCE_OPEN = re.compile(r"```\s*\n?")
_FENCE_CLOSE = re.compile(r"\n?\s*```")


def platform_display_name(platform: str) -> str:
    """'linkedin' -> 'Linkedin' (only the first letter changes)."""
    return platform[:1].upper() + platform[1:]


def default_title(platform: str) -> str:
    return f"{platform_display_name(platform)} Post"


def default_hashtags(platform: str, legacy: bool = False) -> List[str]:
    tags = [f"#{platform}", "#content"]
    if legacy:
        tags.append("#AI")
    return tags


@dataclass(frozen=True)
class NormalizedContent:
    """
    Canonical content record.
    source: "parsed" when the model returned a JSON object, "fallback" otherwise.
    """

    title: str
    content: str
    hashtags: List[str]
    source: Literal["parsed", "fallback"]
    guidance: Optional[Dict[str, Any]] = None
    extras: Dict[str, Any] = field(default_factory=dict)

    @classmethod
    def fallback(cls, raw_text: str, platform: str, legacy: bool = False) -> "NormalizedContent":
        """Deterministic record built from the raw model text and the platform defaults."""
        return cls(
            title=default_title(platform),
            content=raw_text,
            hashtags=default_hashtags(platform, legacy),
            source=SOURCE_FALLBACK,
        )

    @property
    def is_fallback(self) -> bool:
        return self.source == SOURCE_FALLBACK

    def to_dict(self) -> Dict[str, Any]:
        out: Dict[str, Any] = {"title": self.title, "content": self.content, "hashtags": list(self.hashtags)}
        out.update(self.extras)
        if self.guidance is not None:
            out["guidance"] = self.guidance
        return out


def strip_code_fence(text: str) -> str:
    """Remove ```json (or bare ```) fences and surrounding whitespace."""
    if "```json" in text:
        text = _FENCE_CLOSE.sub("", _JSON_FENCE_OPEN.sub("", text))
    elif "```" in text:
        text = _FENCE_CLOSE.sub("", _BARE_FENCE_OPEN.sub("", text))
    return text.strip()


def _clean_title(value: Any) -> Optional[str]:
    if isinstance(value, str) and value.strip():
        return value.strip()
    return None


def _clean_content(value: Any) -> Optional[str]:
    if isinstance(value, str) and value.strip():
        return value
    # Some answers come back as a list of tweets/paragraphs.
    if isinstance(value, list):
        parts = [str(v) for v in value if str(v).strip()]
        if parts:
            return "\n\n".join(parts)
    return None


def _clean_hashtags(value: Any) -> Optional[List[str]]:
    if isinstance(value, str):
        value = value.split()
    if not isinstance(value, list):
        return None
    tags = [str(h).strip() for h in value if str(h).strip()]
    return tags or None


def normalize_response(raw_text: str, platform: str, legacy: bool = False) -> NormalizedContent:
    """
    Turn raw model output into a NormalizedContent for platform.
    legacy=True is the single-shot repurpose path, whose default hashtags also carry #AI.
    """
    stripped = strip_code_fence(raw_text or "")
    try:
        data = json.loads(stripped)
    except (json.JSONDecodeError, TypeError) as e:
        logger.info("normalizer.json_parse_failed", platform=platform, error=str(e))
        return NormalizedContent.fallback(raw_text or "", platform, legacy)
    if not isinstance(data, dict):
        logger.info("normalizer.not_an_object", platform=platform, kind=type(data).__name__)
        return NormalizedContent.fallback(raw_text or "", platform, legacy)

    content = _clean_content(data.get("content"))
    if content is None:
        logger.warning("normalizer.missing_content", platform=platform)
        content = stripped
    guidance = data.get("guidance")
    return NormalizedContent(
        title=_clean_title(data.get("title")) or default_title(platform),
        content=content,
        hashtags=_clean_hashtags(data.get("hashtags")) or default_hashtags(platform, legacy),
        source=SOURCE_PARSED,
        guidance=guidance if isinstance(guidance, dict) else None,
        extras={k: data[k] for k in PASSTHROUGH_FIELDS if k in data},
    )
