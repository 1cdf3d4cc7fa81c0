"""
Indented text rendering of Bencode value trees for raw dumps.
"""
from typing import List

from .decoder import decode
from .structure import BencodeDict, BencodeInt, BencodeList, BencodeString

BYTE_THRESHOLD = 80
INDENT = "    "


def render(value, depth: int = 0, indent: str = INDENT) -> List[str]:
    """
    Renders a value as display lines, one indent step per nesting level.

    Dictionary keys and list indices get their own line, and the value
    they hold follows one level deeper. Byte strings longer than
    BYTE_THRESHOLD are shown as a byte count instead of their content.
    """
    lines = []
    _render_value(value, depth, indent, lines)
    return lines


def _render_value(value, depth, indent, lines):
    if isinstance(value, BencodeDict):
        for key, item in value.value.items():
            lines.append(indent * depth + key.decode("utf-8", errors="replace"))
            _render_value(item, depth + 1, indent, lines)
    elif isinstance(value, BencodeList):
        for index, item in enumerate(value.value):
            lines.append(indent * depth + str(index))
            _render_value(item, depth + 1, indent, lines)
    elif isinstance(value, BencodeString):
        lines.append(indent * depth + _format_bytes(value.value))
    elif isinstance(value, BencodeInt):
        lines.append(indent * depth + str(value.value))
    else:
        raise TypeError(f"Cannot render object of type {type(value)}")


def _format_bytes(b: bytes) -> str:
    if len(b) > BYTE_THRESHOLD:
        return f"[{len(b)} Bytes]"
    try:
        return b.decode("utf-8")
    except UnicodeDecodeError:
        return "[invalid utf-8]"


def dump(data: bytes, indent: str = INDENT) -> List[str]:
    """Decodes raw Bencoded bytes and renders the whole tree, nested one level in."""
    return render(decode(data), depth=1, indent=indent)
