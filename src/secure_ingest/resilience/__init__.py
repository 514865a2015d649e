"""Resilience – deadlines, cancellable operations and concurrency limits."""
from secure_ingest.resilience.bulkhead import ConcurrencyLimiter
from secure_ingest.resilience.timeouts import Deadline, DeadlineExceededError, run_with_deadline

__all__ = ["ConcurrencyLimiter", "Deadline", "DeadlineExceededError", "run_with_deadline"]
