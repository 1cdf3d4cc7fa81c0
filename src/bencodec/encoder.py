"""
Bencode encoder for BitTorrent metainfo files.

Output is canonical: dictionary keys are always written in ascending raw byte
order, whatever order the mapping holds them in.
"""
from .structure import INT64_MAX, INT64_MIN, BencodeDict, BencodeInt, BencodeList, BencodeString


class BencodeEncodeError(TypeError):
    """Raised when an object cannot be represented in Bencode."""
    pass


def encode(obj) -> bytes:
    """Encodes a Python object or BencodeType into bencoded bytes."""
    try:
        return _encode(obj)
    except RecursionError as exc:
        raise BencodeEncodeError("Structure nested too deeply to encode") from exc


def _encode(obj) -> bytes:
    if isinstance(obj, bool):
        raise BencodeEncodeError("Cannot bencode a bool, use an int")

    if isinstance(obj, (int, BencodeInt)):
        value = obj if isinstance(obj, int) else obj.value
        return encode_int(value)

    if isinstance(obj, (str, BencodeString)):
        if isinstance(obj, str):
            return encode_str(obj)
        # BencodeString wraps bytes
        return encode_bytes(obj.value)

    if isinstance(obj, (bytes, bytearray)):
        return encode_bytes(bytes(obj))

    if isinstance(obj, (list, tuple, BencodeList)):
        value = obj.value if isinstance(obj, BencodeList) else obj
        return encode_list(value)

    if isinstance(obj, (dict, BencodeDict)):
        value = obj if isinstance(obj, dict) else obj.value
        return encode_dict(value)

    raise BencodeEncodeError(f"Cannot bencode object of type {type(obj)}")


# ------------------------------------------------------------
#   Encoding primitives
# ------------------------------------------------------------

def encode_int(n: int) -> bytes:
    """Encodes an integer to bencoded bytes (e.g., i123e)."""
    if not INT64_MIN <= n <= INT64_MAX:
        raise BencodeEncodeError(f"Integer {n} does not fit in 64 bits")
    return f"i{n:d}e".encode()


def encode_bytes(b: bytes) -> bytes:
    """Encodes bytes to bencoded bytes (e.g., 4:spam)."""
    return str(len(b)).encode() + b":" + b


def encode_str(s: str) -> bytes:
    """Encodes a string to bencoded bytes (e.g., 4:spam)."""
    return encode_bytes(s.encode("utf-8"))


def encode_list(lst: list) -> bytes:
    """Encodes a list to bencoded bytes (e.g., l4:spami3ee)."""
    parts = [b"l"]
    for item in lst:
        parts.append(_encode(item))
    parts.append(b"e")
    return b"".join(parts)


def _key_to_bytes(k) -> bytes:
    if isinstance(k, (bytes, bytearray)):
        return bytes(k)
    if isinstance(k, str):
        return k.encode("utf-8")
    if isinstance(k, BencodeString):
        return k.value
    raise BencodeEncodeError(f"Dictionary keys must be strings, got {type(k)}")


def encode_dict(d: dict) -> bytes:
    """Encodes a dictionary to bencoded bytes (e.g., d3:cow3:moo4:spam4:eggse)."""
    items = {}
    for key, value in d.items():
        key_bytes = _key_to_bytes(key)
        if key_bytes in items:
            raise BencodeEncodeError(f"Dictionary key {key_bytes!r} appears more than once")
        items[key_bytes] = value

    parts = [b"d"]
    for key_bytes in sorted(items):
        parts.append(encode_bytes(key_bytes))
        parts.append(_encode(items[key_bytes]))
    parts.append(b"e")
    return b"".join(parts)
