"""Kernel time – Clock port + implementations."""
from secure_ingest.kernel.time.clock import Clock, FrozenClock, SystemClock

__all__ = ["Clock", "FrozenClock", "SystemClock"]
