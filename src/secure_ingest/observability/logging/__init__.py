"""Observability – structured logging ports and helpers."""
from secure_ingest.observability.logging.factory import JsonLoggerFactory
from secure_ingest.observability.logging.processors import get_logger
from secure_ingest.observability.logging.protocol import Logger

__all__ = ["JsonLoggerFactory", "Logger", "get_logger"]
