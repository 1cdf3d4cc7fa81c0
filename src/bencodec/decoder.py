"""
Bencode decoder for BitTorrent metainfo files.
"""
from .structure import INT64_MAX, INT64_MIN, BencodeDict, BencodeInt, BencodeList, BencodeString

# Deepest list/dictionary nesting accepted
MAX_DEPTH = 200


class BencodeDecodeError(ValueError):
    """Raised when the input is not well-formed Bencode."""

    def __init__(self, message: str, offset: int = None):
        if offset is not None:
            message = f"{message} at offset {offset}"
        super().__init__(message)
        self.offset = offset


class BencodeDecoder:
    """
    Decodes Bencoded byte strings into Bencode value trees.

    The whole input must be exactly one value; anything left over after it
    is reported as an error.
    """
    def __init__(self, data: bytes):
        if not isinstance(data, (bytes, bytearray, memoryview)):
            raise TypeError(f"Cannot decode object of type {type(data)}, expected bytes")
        self.data = bytes(data)
        self.i = 0  # cursor index
        self.depth = 0

    def decode(self):
        """Main decode entry point. Decodes the entire Bencoded data."""
        try:
            result = self._parse_value()
        except RecursionError as exc:
            raise BencodeDecodeError("Structure nested too deeply", self.i) from exc

        if self.i != len(self.data):
            raise BencodeDecodeError(
                f"Trailing data after top-level value ({len(self.data) - self.i} bytes)", self.i
            )
        return result

    # --------------------------
    # Low-level utilities
    # --------------------------

    def _peek(self, expected="a value"):
        if self.i >= len(self.data):
            raise BencodeDecodeError(f"Unexpected end of input, expected {expected}", self.i)
        return self.data[self.i:self.i+1]

    def _consume(self, n=1):
        """Moves cursor forward by n bytes and returns the consumed chunk."""
        chunk = self.data[self.i:self.i+n]
        self.i += n
        return chunk

    def _enter(self):
        self.depth += 1
        if self.depth > MAX_DEPTH:
            raise BencodeDecodeError(f"Structure nested too deeply (limit {MAX_DEPTH})", self.i)

    def _read_digits(self):
        start = self.i
        while self.i < len(self.data) and self.data[self.i:self.i+1].isdigit():
            self.i += 1
        return self.data[start:self.i]

    # --------------------------
    # Parsing functions
    # --------------------------

    def _parse_value(self):
        ch = self._peek()

        if ch == b'i':
            return self._parse_int()

        if ch.isdigit(): # Bencode strings start with length, which is a digit
            return self._parse_string()

        if ch == b'l':
            return self._parse_list()

        if ch == b'd':
            return self._parse_dict()

        raise BencodeDecodeError(
            f"Invalid token {ch!r}, expected 'i', 'l', 'd' or a string length", self.i
        )

    def _parse_int(self):
        """Parses an integer from the Bencoded data."""
        start = self.i
        self._consume(1)  # skip 'i'

        negative = self._peek("an integer") == b'-'
        if negative:
            self._consume(1)

        digits = self._read_digits()
        if not digits:
            raise BencodeDecodeError("Invalid integer, expected digits", self.i)
        if digits[:1] == b'0' and (len(digits) > 1 or negative):
            raise BencodeDecodeError(f"Invalid integer {digits!r} with leading zero", start)
        if self._peek("'e' to terminate integer") != b'e':
            raise BencodeDecodeError("Expected 'e' to terminate integer", self.i)
        self._consume(1)  # skip 'e'

        num = -int(digits) if negative else int(digits)
        if not INT64_MIN <= num <= INT64_MAX:
            raise BencodeDecodeError("Integer does not fit in 64 bits", start)
        return BencodeInt(num)

    def _parse_string(self):
        """Parses a byte string from the Bencoded data."""
        start = self.i
        # read length until ':'
        length_bytes = self._read_digits()
        if not length_bytes:
            raise BencodeDecodeError("Invalid string length, expected digits", start)
        if self._peek("':' after string length") != b':':
            raise BencodeDecodeError("Invalid string length, expected ':'", self.i)
        self._consume(1)  # skip ':'

        length = int(length_bytes)
        if self.i + length > len(self.data):
            raise BencodeDecodeError(
                f"Unexpected end of input, string of length {length} is truncated", start
            )
        return BencodeString(self._consume(length))

    def _parse_list(self):
        """Parses a list from the Bencoded data."""
        self._enter()
        self._consume(1)  # skip 'l'
        items = []

        while self._peek("a list item or 'e' to terminate list") != b'e':
            items.append(self._parse_value())

        self._consume(1)  # skip 'e'
        self.depth -= 1
        return BencodeList(items)

    def _parse_dict(self):
        """Parses a dictionary from the Bencoded data."""
        self._enter()
        self._consume(1)  # skip 'd'
        obj = {}

        while self._peek("a dictionary key or 'e' to terminate dictionary") != b'e':
            key_pos = self.i
            # keys MUST be strings
            if not self._peek().isdigit():
                raise BencodeDecodeError("Dictionary key must be a string", key_pos)
            key = self._parse_string().value
            if key in obj:
                raise BencodeDecodeError(f"Duplicate dictionary key {key!r}", key_pos)
            obj[key] = self._parse_value()

        self._consume(1)  # skip 'e'
        self.depth -= 1
        return BencodeDict(obj)


def decode(data: bytes):
    """
    Convenience function to decode Bencoded data.
    """
    return BencodeDecoder(data).decode()
