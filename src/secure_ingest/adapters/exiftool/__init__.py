"""ExifTool adapter."""
from secure_ingest.adapters.exiftool.stripper import ExifToolError, ExifToolStripper

__all__ = ["ExifToolError", "ExifToolStripper"]
