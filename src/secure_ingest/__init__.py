"""
secure_ingest – chunked, scanned and quarantining file ingestion.

Import path convention::

    from secure_ingest.application.uploads import SecureUploader
    from secure_ingest.config.settings import UploaderSettings
    from secure_ingest.kernel.errors import FailureReason
"""

__version__ = "0.1.0"
__all__ = ["__version__"]
