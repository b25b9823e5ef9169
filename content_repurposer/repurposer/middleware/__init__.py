"""HTTP middleware."""
from repurposer.middleware.correlation_id import CorrelationIdMiddleware

__all__ = ["CorrelationIdMiddleware"]
