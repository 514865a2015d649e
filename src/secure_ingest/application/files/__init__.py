"""Application files – integrity, sniffing, scanning, stripping and placement."""
from secure_ingest.application.files.integrity import IntegrityVerifier, sha256_bytes, sha256_file
from secure_ingest.application.files.scanner import MalwareScanAdapter, MalwareScanner, ScanReport
from secure_ingest.application.files.signatures import DEFAULT_SIGNATURES, OCTET_STREAM
from secure_ingest.application.files.sniffer import ContentSniffer
from secure_ingest.application.files.storage import StoragePlacer, artifact_name, ensure_directories
from secure_ingest.application.files.stripper import MetadataStripAdapter, MetadataStripper

__all__ = [
    "DEFAULT_SIGNATURES",
    "OCTET_STREAM",
    "ContentSniffer",
    "IntegrityVerifier",
    "MalwareScanAdapter",
    "MalwareScanner",
    "MetadataStripAdapter",
    "MetadataStripper",
    "ScanReport",
    "StoragePlacer",
    "artifact_name",
    "ensure_directories",
    "sha256_bytes",
    "sha256_file",
]
