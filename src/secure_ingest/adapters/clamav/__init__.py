"""ClamAV adapter."""
from secure_ingest.adapters.clamav.scanner import ClamdError, ClamdScanner, parse_reply

__all__ = ["ClamdError", "ClamdScanner", "parse_reply"]
