"""Resilience – bulkhead concurrency limiting."""
from secure_ingest.resilience.bulkhead.limiters import ConcurrencyLimiter

__all__ = ["ConcurrencyLimiter"]
