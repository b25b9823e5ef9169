"""
AI gateway: one prompt in, raw model text out.
All provider calls go through LLMService.generate. No retry here: a 429 surfaces as
RateLimited, everything else as GenerationFailed, and the caller decides what to do.
"""
import asyncio
import time
from typing import Any, Optional

from openai import OpenAI, RateLimitError

from repurposer.config import Settings, get_settings
from repurposer.exceptions import GenerationFailed, RateLimited
from repurposer.logging_config import get_logger

logger = get_logger(__name__)

RATE_LIMIT_MESSAGE = "Rate limit exceeded - using fallback analysis"
GENERATION_FAILED_MESSAGE = "Failed to generate content with AI"


def _is_rate_limited(error: Exception) -> bool:
    if isinstance(error, RateLimitError):
        return True
    return getattr(error, "status_code", None) == 429


class LLMService:
    """OpenAI chat-completions wrapper used by analysis and generation."""

    def __init__(self, settings: Optional[Settings] = None) -> None:
        settings = settings or get_settings()
        self.api_key = settings.openai_api_key
        self.model = settings.openai_model
        self.timeout_seconds = settings.openai_timeout_seconds
        self.max_retries = settings.openai_max_retries
        self.temperature = settings.openai_temperature
        self._client: Any = None

    @property
    def is_configured(self) -> bool:
        return bool(self.api_key)

    def _get_client(self) -> OpenAI:
        """Lazy init of the OpenAI client."""
        if self._client is None:
            self._client = OpenAI(
                api_key=self.api_key,
                timeout=float(self.timeout_seconds),
                max_retries=self.max_retries,
            )
        return self._client

    async def generate(self, prompt: str) -> str:
        """
        Send prompt as a single user message and return the model's text.
        Raises RateLimited on HTTP 429, GenerationFailed on any other failure.
        """
        if not self.is_configured:
            logger.warning("llm.not_configured", model=self.model)
            raise GenerationFailed(GENERATION_FAILED_MESSAGE)

        start = time.perf_counter()
        try:
            client = self._get_client()
            resp = await asyncio.to_thread(
                client.chat.completions.create,
                model=self.model,
                messages=[{"role": "user", "content": prompt}],
                temperature=self.temperature,
            )
            text = resp.choices[0].message.content or ""
        except Exception as e:
            latency_ms = round((time.perf_counter() - start) * 1000)
            if _is_rate_limited(e):
                logger.warning("llm.rate_limited", model=self.model, latency_ms=latency_ms)
                raise RateLimited(RATE_LIMIT_MESSAGE) from e
            logger.warning("llm.generate_failed", model=self.model, latency_ms=latency_ms, error=str(e))
            raise GenerationFailed(GENERATION_FAILED_MESSAGE) from e

        latency_ms = round((time.perf_counter() - start) * 1000)
        if not text.strip():
            logger.warning("llm.empty_response", model=self.model, latency_ms=latency_ms)
            raise GenerationFailed(GENERATION_FAILED_MESSAGE)
        logger.info("llm.generate_success", model=self.model, latency_ms=latency_ms, chars=len(text))
        return text
