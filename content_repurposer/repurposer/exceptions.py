"""
Exception classes for the repurposer service.

Lookups inside services still signal with ValueError("<code>") so routers can
map them onto HTTP statuses; the classes here cover failures of the AI provider.
"""


class RepurposerError(Exception):
    """Base exception for all repurposer errors."""
    pass


class AIGatewayError(RepurposerError):
    """Base exception for a failed call to the generative-AI provider."""
    pass


class RateLimited(AIGatewayError):
    """Raised when the provider answers HTTP 429. Not retried by the gateway."""
    pass


class GenerationFailed(AIGatewayError):
    """Raised for any other provider or network failure."""
    pass
