"""
Torrent metainfo package: typed metadata, info hash and diagnostics.
"""
from .diagnostics import summarize
from .errors import FingerprintError, SchemaError, TorrentError
from .fingerprint import fingerprint, to_hex
from .metainfo import FileEntry, InfoDict, TorrentMeta, parse, read_bytes

__all__ = [
    'parse', 'read_bytes', 'fingerprint', 'to_hex', 'summarize',
    'TorrentMeta', 'InfoDict', 'FileEntry',
    'TorrentError', 'SchemaError', 'FingerprintError',
]
