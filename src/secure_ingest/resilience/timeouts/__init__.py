"""Resilience – deadlines and deadline-bounded operations."""
from secure_ingest.resilience.timeouts.cancellable import run_with_deadline
from secure_ingest.resilience.timeouts.deadline import Deadline, DeadlineExceededError

__all__ = ["Deadline", "DeadlineExceededError", "run_with_deadline"]
