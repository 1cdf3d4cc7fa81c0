"""
Typed view of a torrent metainfo document.

The decoded 'info' dictionary is kept verbatim next to the typed fields,
because the info hash has to cover keys this model does not read.
"""
import logging
from pathlib import Path
from typing import List, Optional, Tuple

from bencodec import BencodeDict, BencodeInt, BencodeList, BencodeString, decode

from .diagnostics import summarize
from .errors import SchemaError, TorrentError
from .fingerprint import fingerprint, to_hex

logger = logging.getLogger(__name__)

HASH_LEN = 20  # SHA-1 piece hash size


def _text(b: bytes) -> str:
    return b.decode("utf-8", errors="replace")


def _opt_string(d: dict, key: bytes, where: str) -> Optional[str]:
    value = d.get(key)
    if value is None:
        return None
    if isinstance(value, BencodeString):
        return _text(value.value)
    logger.warning("Ignoring %r in %s: expected string, got %s", key, where, type(value).__name__)
    return None


def _opt_int(d: dict, key: bytes, where: str) -> Optional[int]:
    value = d.get(key)
    if value is None:
        return None
    if isinstance(value, BencodeInt):
        return value.value
    logger.warning("Ignoring %r in %s: expected int, got %s", key, where, type(value).__name__)
    return None


def _opt_string_list(d: dict, key: bytes, where: str) -> Optional[List[str]]:
    value = d.get(key)
    if value is None:
        return None
    if not isinstance(value, BencodeList):
        logger.warning("Ignoring %r in %s: expected list, got %s", key, where, type(value).__name__)
        return None
    items = []
    for item in value.value:
        if isinstance(item, BencodeString):
            items.append(_text(item.value))
        else:
            logger.warning("Skipping non-string item in %r of %s", key, where)
    return items


def read_bytes(path) -> bytes:
    """Reads a whole torrent file into memory."""
    path = Path(path)
    if not path.is_file():
        raise TorrentError(f"Torrent file not found: {path}")
    try:
        return path.read_bytes()
    except OSError as exc:
        raise TorrentError(f"Could not read torrent file {path}: {exc}") from exc


class FileEntry:
    """One file of a multi-file torrent."""

    def __init__(self, length: int, path: List[str], md5sum: Optional[str] = None):
        self.length = length
        self.path = list(path)
        self.md5sum = md5sum

    @property
    def display_path(self) -> str:
        return "/".join(self.path)

    @classmethod
    def from_bencode(cls, entry, index: int) -> "FileEntry":
        where = f"files[{index}]"
        if not isinstance(entry, BencodeDict):
            raise SchemaError(f"File entry {index} is not a dictionary", where)
        d = entry.value

        length_b = d.get(b"length")
        if not isinstance(length_b, BencodeInt):
            raise SchemaError(f"File entry {index} has no integer 'length'", f"{where}.length")
        if length_b.value < 0:
            raise SchemaError(f"File entry {index} has negative length {length_b.value}", f"{where}.length")

        path_b = d.get(b"path")
        if not isinstance(path_b, BencodeList):
            raise SchemaError(f"File entry {index} has no 'path' list", f"{where}.path")
        parts = []
        for part in path_b.value:
            if not isinstance(part, BencodeString):
                raise SchemaError(f"File entry {index} has a non-string path segment", f"{where}.path")
            parts.append(_text(part.value))

        return cls(length_b.value, parts, _opt_string(d, b"md5sum", where))

    def to_bencode(self) -> BencodeDict:
        d = {
            b"length": BencodeInt(self.length),
            b"path": BencodeList([BencodeString(p.encode()) for p in self.path]),
        }
        if self.md5sum is not None:
            d[b"md5sum"] = BencodeString(self.md5sum.encode())
        return BencodeDict(d)

    def __repr__(self):
        return f"FileEntry(length={self.length}, path={self.display_path!r})"


class InfoDict:
    """
    The 'info' section: piece layout plus either a single file length or a
    file list, never both.
    """

    def __init__(
        self,
        piece_length: int,
        pieces: bytes,
        length: Optional[int] = None,
        files: Optional[List[FileEntry]] = None,
        name: Optional[str] = None,
        md5sum: Optional[str] = None,
        path: Optional[List[str]] = None,
        private: Optional[int] = None,
        root_hash: Optional[str] = None,
    ):
        if length is not None and files is not None:
            raise ValueError("InfoDict takes either length or files, not both")
        self.piece_length = piece_length
        self.pieces = pieces
        self.length = length
        self.files = files
        self.name = name
        self.md5sum = md5sum
        self.path = path
        self.private = private
        self.root_hash = root_hash

    @property
    def is_multi_file(self) -> bool:
        return self.files is not None

    @property
    def piece_hashes(self) -> List[bytes]:
        return [self.pieces[i:i+HASH_LEN] for i in range(0, len(self.pieces), HASH_LEN)]

    @property
    def num_pieces(self) -> int:
        return len(self.pieces) // HASH_LEN

    @classmethod
    def from_bencode(cls, info_b) -> "InfoDict":
        if not isinstance(info_b, BencodeDict):
            raise SchemaError("Torrent 'info' is not a dictionary", "info")
        info = info_b.value

        # ------------------ PIECE LENGTH ------------------
        piece_len_b = info.get(b"piece length")
        if piece_len_b is None:
            raise SchemaError("Torrent info is missing 'piece length'", "piece length")
        if not isinstance(piece_len_b, BencodeInt):
            raise SchemaError("Torrent 'piece length' is not an integer", "piece length")

        # ------------------ PIECES ------------------
        pieces_b = info.get(b"pieces")
        if pieces_b is None:
            raise SchemaError("Torrent info is missing 'pieces'", "pieces")
        if not isinstance(pieces_b, BencodeString):
            raise SchemaError("Torrent 'pieces' is not a byte string", "pieces")

        # ------------------ FILES ------------------
        has_length = b"length" in info
        has_files = b"files" in info
        if has_length and has_files:
            raise SchemaError("Torrent info has both 'length' and 'files'", "files")
        if not has_length and not has_files:
            raise SchemaError("Torrent info has neither 'length' nor 'files'", "length")

        length = None
        files = None
        if has_files:
            files_b = info[b"files"]
            if not isinstance(files_b, BencodeList):
                raise SchemaError("Torrent 'files' is not a list", "files")
            files = [FileEntry.from_bencode(entry, i) for i, entry in enumerate(files_b.value)]
        else:
            length_b = info[b"length"]
            if not isinstance(length_b, BencodeInt) or length_b.value < 0:
                raise SchemaError("Torrent 'length' is not a non-negative integer", "length")
            length = length_b.value

        return cls(
            piece_length=piece_len_b.value,
            pieces=pieces_b.value,
            length=length,
            files=files,
            name=_opt_string(info, b"name", "info"),
            md5sum=_opt_string(info, b"md5sum", "info"),
            path=_opt_string_list(info, b"path", "info"),
            private=_opt_int(info, b"private", "info"),
            root_hash=_opt_string(info, b"root hash", "info"),
        )

    def to_bencode(self) -> BencodeDict:
        """Rebuilds an info dictionary from the typed fields (no unknown keys)."""
        d = {
            b"piece length": BencodeInt(self.piece_length),
            b"pieces": BencodeString(self.pieces),
        }
        if self.files is not None:
            d[b"files"] = BencodeList([f.to_bencode() for f in self.files])
        if self.length is not None:
            d[b"length"] = BencodeInt(self.length)
        if self.name is not None:
            d[b"name"] = BencodeString(self.name.encode())
        if self.md5sum is not None:
            d[b"md5sum"] = BencodeString(self.md5sum.encode())
        if self.path is not None:
            d[b"path"] = BencodeList([BencodeString(p.encode()) for p in self.path])
        if self.private is not None:
            d[b"private"] = BencodeInt(self.private)
        if self.root_hash is not None:
            d[b"root hash"] = BencodeString(self.root_hash.encode())
        return BencodeDict(d)


class TorrentMeta:
    """
    Parsed torrent metainfo.

    Instances built directly (rather than through parse()) hash an info
    dictionary rebuilt from the typed fields.
    """

    def __init__(
        self,
        info: InfoDict,
        raw_info: Optional[BencodeDict] = None,
        announce: Optional[str] = None,
        announce_list: Optional[List[List[str]]] = None,
        comment: Optional[str] = None,
        created_by: Optional[str] = None,
        creation_date: Optional[int] = None,
        encoding: Optional[str] = None,
        nodes: Optional[List[Tuple[str, int]]] = None,
        httpseeds: Optional[List[str]] = None,
    ):
        self.info = info
        self.raw_info = raw_info if raw_info is not None else info.to_bencode()
        self.announce = announce
        self.announce_list = announce_list
        self.comment = comment
        self.created_by = created_by
        self.creation_date = creation_date
        self.encoding = encoding
        self.nodes = nodes
        self.httpseeds = httpseeds

    @classmethod
    def from_bytes(cls, data: bytes) -> "TorrentMeta":
        return parse(data)

    @classmethod
    def from_file(cls, path) -> "TorrentMeta":
        return parse(read_bytes(path))

    @property
    def name(self) -> Optional[str]:
        return self.info.name

    @property
    def files(self) -> Optional[List[FileEntry]]:
        return self.info.files

    @property
    def file_count(self) -> int:
        if self.info.files is not None:
            return len(self.info.files)
        return 1 if self.info.length is not None else 0

    @property
    def total_size(self) -> int:
        if self.info.files is not None:
            return sum(f.length for f in self.info.files)
        return self.info.length or 0

    @property
    def info_hash(self) -> bytes:
        return fingerprint(self)

    @property
    def info_hash_hex(self) -> str:
        return to_hex(self.info_hash)

    def __repr__(self):
        return (
            f"TorrentMeta(name={self.name!r}, files={self.file_count}, "
            f"size={self.total_size}, announce={self.announce!r})"
        )


def _parse_announce_list(data: dict) -> Optional[List[List[str]]]:
    ann_list_b = data.get(b"announce-list")
    if ann_list_b is None:
        return None
    if not isinstance(ann_list_b, BencodeList):
        logger.warning("Ignoring 'announce-list': expected list, got %s", type(ann_list_b).__name__)
        return None

    tiers = []
    for tier in ann_list_b.value:
        if not isinstance(tier, BencodeList):
            logger.warning("Skipping announce-list tier that is not a list")
            continue
        urls = [_text(u.value) for u in tier.value if isinstance(u, BencodeString)]
        if urls:
            tiers.append(urls)
    return tiers


def _parse_nodes(data: dict) -> Optional[List[Tuple[str, int]]]:
    nodes_b = data.get(b"nodes")
    if nodes_b is None:
        return None
    if not isinstance(nodes_b, BencodeList):
        logger.warning("Ignoring 'nodes': expected list, got %s", type(nodes_b).__name__)
        return None

    nodes = []
    for node in nodes_b.value:
        pair = node.value if isinstance(node, BencodeList) else None
        if (
            pair is None
            or len(pair) != 2
            or not isinstance(pair[0], BencodeString)
            or not isinstance(pair[1], BencodeInt)
        ):
            logger.warning("Skipping malformed DHT node entry %r", node)
            continue
        nodes.append((_text(pair[0].value), pair[1].value))
    return nodes


def _parse_root(root) -> TorrentMeta:
    if not isinstance(root, BencodeDict):
        raise SchemaError(f"Torrent root must be a dictionary, got {type(root).__name__}")
    data = root.value

    # ------------------ INFO ------------------
    if b"info" not in data:
        raise SchemaError("Torrent missing 'info' dictionary", "info")
    raw_info = data[b"info"]
    info = InfoDict.from_bencode(raw_info)

    return TorrentMeta(
        info=info,
        raw_info=raw_info,
        announce=_opt_string(data, b"announce", "torrent"),
        announce_list=_parse_announce_list(data),
        comment=_opt_string(data, b"comment", "torrent"),
        created_by=_opt_string(data, b"created by", "torrent"),
        creation_date=_opt_int(data, b"creation date", "torrent"),
        encoding=_opt_string(data, b"encoding", "torrent"),
        nodes=_parse_nodes(data),
        httpseeds=_opt_string_list(data, b"httpseeds", "torrent"),
    )


def parse(data) -> TorrentMeta:
    """
    Builds a TorrentMeta from raw bytes or an already decoded value.

    Malformed Bencode raises BencodeDecodeError. A document that decodes
    but lacks mandatory torrent fields raises SchemaError, with
    `diagnostics` holding a per-key summary of what the document contains.
    """
    root = decode(data) if isinstance(data, (bytes, bytearray, memoryview)) else data

    try:
        meta = _parse_root(root)
    except SchemaError as exc:
        try:
            exc.diagnostics = summarize(root)
        except TypeError:
            exc.diagnostics = []
        raise

    logger.debug(
        "Parsed torrent %r: %d files, %d bytes, %d pieces",
        meta.name, meta.file_count, meta.total_size, meta.info.num_pieces,
    )
    return meta
