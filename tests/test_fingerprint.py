import hashlib

import pytest

from bencodec.decoder import MAX_DEPTH
from bencodec.encoder import encode
from bencodec.structure import BencodeDict, BencodeInt
from torrentinfo.errors import FingerprintError
from torrentinfo.fingerprint import fingerprint, to_hex
from torrentinfo.metainfo import FileEntry, InfoDict, TorrentMeta, parse

SINGLE_INFO = b"d6:lengthi6000e4:name8:file.bin12:piece lengthi16384e6:pieces20:" + b"A" * 20 + b"e"
SINGLE_HASH = "07fe4dd4ce21c05b040af3ba2243bf3dcdf436f8"


def test_to_hex():
    assert to_hex(b"") == ""
    assert to_hex([]) == ""
    assert to_hex([0x00]) == "00"
    assert to_hex([0xff]) == "ff"
    assert to_hex([0xff, 0x00, 0xaa]) == "ff00aa"
    assert to_hex(b"foobar") == "666f6f626172"


def test_single_file_info_hash():
    meta = parse(b"d8:announce3:url4:info" + SINGLE_INFO + b"e")
    digest = fingerprint(meta)

    assert len(digest) == 20
    assert to_hex(digest) == SINGLE_HASH
    assert meta.info_hash == digest
    assert meta.info_hash_hex == SINGLE_HASH


def test_hash_ignores_input_key_order():
    unordered = b"d4:infod4:name8:file.bin6:lengthi6000e6:pieces20:" + b"A" * 20 + b"12:piece lengthi16384eee"
    assert parse(unordered).info_hash_hex == SINGLE_HASH


def test_hash_is_repeatable():
    meta = parse(b"d4:info" + SINGLE_INFO + b"e")
    assert fingerprint(meta) == fingerprint(meta) == fingerprint(parse(b"d4:info" + SINGLE_INFO + b"e"))


def test_unknown_info_keys_participate():
    info = b"d6:lengthi6000e4:name8:file.bin12:piece lengthi16384e6:pieces20:" + b"A" * 20 + b"7:privatei1e6:sourcei7ee"
    meta = parse(b"d4:info" + info + b"e")

    assert meta.info_hash_hex == "bab0d8a01e89d012d4e5309ca4cb02b4c4e7123f"
    assert meta.info_hash_hex != SINGLE_HASH


def test_multi_file_info_hash():
    data = encode({b"info": {
        b"files": [
            {b"length": 100, b"path": [b"a", b"x.txt"]},
            {b"length": 250, b"path": [b"b", b"y.bin"]},
        ],
        b"name": b"dir",
        b"piece length": 16384,
        b"pieces": b"B" * 20,
    }})
    assert to_hex(fingerprint(parse(data))) == "e8f73e5a1d33d2b45027dd2a89a9ad388dc40d05"


def test_synthetic_instance_matches_parsed():
    meta = TorrentMeta(InfoDict(piece_length=16384, pieces=b"A" * 20, length=6000, name="file.bin"))
    assert meta.info_hash_hex == SINGLE_HASH


def test_synthetic_multi_file_round_trips_through_parse():
    files = [FileEntry(100, ["a", "x.txt"]), FileEntry(250, ["b", "y.bin"])]
    meta = TorrentMeta(InfoDict(piece_length=16384, pieces=b"B" * 20, files=files, name="dir"))
    reparsed = parse(encode({b"info": meta.raw_info}))
    assert reparsed.info_hash == meta.info_hash


def test_fingerprint_of_raw_info_dict():
    info = BencodeDict({b"piece length": BencodeInt(1)})
    assert fingerprint(info) == fingerprint(BencodeDict({b"piece length": BencodeInt(1)}))


def test_unencodable_info_raises():
    with pytest.raises(FingerprintError):
        fingerprint(BencodeDict({b"bad": 1.5}))


def test_non_dict_info_raises():
    with pytest.raises(FingerprintError):
        fingerprint(b"not a dict")


def test_deeply_nested_unknown_key_still_hashes():
    # outer dict and info already use two levels
    depth = MAX_DEPTH - 2
    info = b"d6:lengthi1e12:piece lengthi1e6:pieces0:1:x" + b"l" * depth + b"e" * depth + b"e"
    meta = parse(b"d4:info" + info + b"e")
    assert meta.info_hash == hashlib.sha1(info).digest()
