"""
Data structures for representing Bencoded types.
"""
__all__ = [
    "BencodeInt",
    "BencodeString",
    "BencodeList",
    "BencodeDict",
    "INT64_MIN",
    "INT64_MAX",
    "to_python",
]

INT64_MIN = -(2 ** 63)
INT64_MAX = 2 ** 63 - 1


class BencodeType:
    """Base class for all Bencode data types."""
    value = None

    def __eq__(self, other):
        if type(self) is not type(other):
            return NotImplemented
        return self.value == other.value

    __hash__ = None


class BencodeInt(BencodeType):
    """Represents a Bencoded integer (signed 64-bit)."""
    def __init__(self, value: int):
        if not isinstance(value, int) or isinstance(value, bool):
            raise TypeError("BencodeInt requires an integer.")
        if not INT64_MIN <= value <= INT64_MAX:
            raise TypeError("BencodeInt value does not fit in 64 bits.")
        self.value = value

    def __repr__(self):
        return f"BencodeInt({self.value})"


class BencodeString(BencodeType):
    """Represents a Bencoded byte string."""
    def __init__(self, value: bytes):
        if not isinstance(value, (bytes, bytearray)):
            raise TypeError("BencodeString requires bytes.")
        self.value = bytes(value)

    def __repr__(self):
        return f"BencodeString({self.value!r})"


class BencodeList(BencodeType):
    """Represents a Bencoded list."""
    def __init__(self, value: list):
        if not isinstance(value, list):
            raise TypeError("BencodeList requires a list.")
        self.value = value

    def __repr__(self):
        return f"BencodeList({self.value!r})"


class BencodeDict(BencodeType):
    """
    Represents a Bencoded dictionary.

    Insertion order is kept only for display; the encoder sorts keys itself.
    """
    def __init__(self, value: dict):
        if not isinstance(value, dict):
            raise TypeError("BencodeDict requires a dict.")
        # keys must be bytes (bencode requirement)
        for k in value.keys():
            if not isinstance(k, (bytes, bytearray)):
                raise TypeError("BencodeDict keys must be bytes.")
        self.value = value

    def __repr__(self):
        return f"BencodeDict({self.value!r})"


def to_python(obj):
    """Unwraps a Bencode value tree into plain ints, bytes, lists and dicts."""
    if isinstance(obj, (BencodeInt, BencodeString)):
        return obj.value
    if isinstance(obj, BencodeList):
        return [to_python(x) for x in obj.value]
    if isinstance(obj, BencodeDict):
        return {k: to_python(v) for k, v in obj.value.items()}
    raise TypeError(f"Not a Bencode value: {type(obj)}")
