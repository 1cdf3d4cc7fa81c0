"""
Exception hierarchy for torrent metadata handling.
"""
from typing import List, Optional


class TorrentError(Exception):
    """Base exception for torrent metadata errors."""

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class SchemaError(TorrentError):
    """The document decoded, but its mandatory torrent fields are missing or mistyped."""

    def __init__(self, message: str, key: Optional[str] = None):
        super().__init__(message)
        self.key = key
        # Filled in by the parser with a per-key summary of the raw document
        self.diagnostics: List[str] = []

    def __str__(self):
        if self.key:
            return f"{self.message} (key: {self.key!r})"
        return self.message


class FingerprintError(TorrentError):
    """The info dictionary could not be re-encoded for hashing."""
