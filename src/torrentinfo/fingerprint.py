"""
Info hash computation.

The info hash is the SHA-1 of the canonically bencoded 'info' dictionary.
It is computed from the raw decoded dictionary, so keys the typed model does
not know about still count towards the hash.
"""
import hashlib
import logging
from typing import Iterable, Union

from bencodec import BencodeDict, encode

from .errors import FingerprintError

logger = logging.getLogger(__name__)


def fingerprint(meta) -> bytes:
    """
    Returns the 20-byte SHA-1 info hash.

    Accepts a TorrentMeta (anything with a `raw_info` attribute) or the raw
    info BencodeDict itself.
    """
    info = getattr(meta, "raw_info", meta)
    if not isinstance(info, BencodeDict):
        raise FingerprintError(f"Info must be a BencodeDict, got {type(info).__name__}")

    try:
        info_bytes = encode(info)
    except (TypeError, ValueError, RecursionError) as exc:
        raise FingerprintError(f"Could not re-encode info dictionary: {exc}") from exc

    digest = hashlib.sha1(info_bytes).digest()
    logger.debug("Info hash over %d bytes: %s", len(info_bytes), digest.hex())
    return digest


def to_hex(data: Union[bytes, bytearray, Iterable[int]]) -> str:
    """Lowercase hex without separators, e.g. b'\\xff\\x00\\xaa' -> 'ff00aa'."""
    return bytes(data).hex()
