"""
Structural summaries of raw documents, for reporting on files that do not
parse as torrents.
"""
from typing import List

from bencodec.structure import BencodeDict, BencodeInt, BencodeList, BencodeString


def describe(value) -> str:
    """Short type-and-size description of a single value, e.g. 'list (3 items)'."""
    if isinstance(value, BencodeDict):
        return f"dict ({len(value.value)} keys)"
    if isinstance(value, BencodeList):
        return f"list ({len(value.value)} items)"
    if isinstance(value, BencodeString):
        return f"string ({len(value.value)} bytes)"
    if isinstance(value, BencodeInt):
        return "int"
    raise TypeError(f"Not a Bencode value: {type(value)}")


def summarize(value) -> List[str]:
    """One line per top-level key: '<key>: <describe(value)>'."""
    if not isinstance(value, BencodeDict):
        return [f"top level: {describe(value)}"]
    return [
        f"{key.decode('utf-8', errors='replace')}: {describe(item)}"
        for key, item in value.value.items()
    ]
