"""Testing helpers – in-memory doubles for the uploader's collaborators."""
from secure_ingest.testing.fakes import (
    FAKE_EPOCH,
    FakeClock,
    FakeScanner,
    FakeStripper,
    FrozenClock,
    InMemoryQuotaStore,
)

__all__ = [
    "FAKE_EPOCH",
    "FakeClock",
    "FakeScanner",
    "FakeStripper",
    "FrozenClock",
    "InMemoryQuotaStore",
]
