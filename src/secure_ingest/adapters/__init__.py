"""Adapters – concrete malware engines and metadata tools."""
