"""Application quota – per-user byte accounting."""
from secure_ingest.application.quota.manager import QuotaManager
from secure_ingest.application.quota.store import QuotaStore

__all__ = ["QuotaManager", "QuotaStore"]
