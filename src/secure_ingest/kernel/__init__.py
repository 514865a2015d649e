"""Kernel – errors, time and result types shared by every layer."""
from secure_ingest.kernel.errors import BaseError, FailureReason
from secure_ingest.kernel.time import Clock, FrozenClock, SystemClock
from secure_ingest.kernel.types import Err, Ok, Result

__all__ = [
    "BaseError",
    "Clock",
    "Err",
    "FailureReason",
    "FrozenClock",
    "Ok",
    "Result",
    "SystemClock",
]
