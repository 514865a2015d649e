"""Testing fakes – in-memory doubles for collaborator ports."""
from secure_ingest.kernel.time import FrozenClock
from secure_ingest.testing.fakes.clock import FAKE_EPOCH, FakeClock
from secure_ingest.testing.fakes.engines import FakeScanner, FakeStripper
from secure_ingest.testing.fakes.quota_store import InMemoryQuotaStore

__all__ = [
    "FAKE_EPOCH",
    "FakeClock",
    "FakeScanner",
    "FakeStripper",
    "FrozenClock",
    "InMemoryQuotaStore",
]
