"""Business logic services."""
from repurposer.services.analysis_service import analyze_content, fallback_analysis
from repurposer.services.generation_service import generate_for_platforms, regenerate_content
from repurposer.services.llm_service import LLMService
from repurposer.services.normalizer import normalize_response
from repurposer.services.prompt_builder import build_repurpose_prompt

__all__ = [
    "analyze_content",
    "fallback_analysis",
    "generate_for_platforms",
    "regenerate_content",
    "LLMService",
    "normalize_response",
    "build_repurpose_prompt",
]
