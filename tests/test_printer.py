import pytest

from bencodec.decoder import BencodeDecodeError
from bencodec.printer import dump, render
from bencodec.structure import BencodeDict, BencodeInt, BencodeList, BencodeString


def test_dump_nested_document():
    lines = dump(b"d3:cow3:moo4:spaml1:ai5eee")
    print("\n".join(lines))
    assert lines == [
        "    cow",
        "        moo",
        "    spam",
        "        0",
        "            a",
        "        1",
        "            5",
    ]


def test_render_keeps_map_order():
    value = BencodeDict({b"z": BencodeInt(1), b"a": BencodeInt(2)})
    assert render(value, indent="  ") == ["z", "  1", "a", "  2"]


def test_long_strings_replaced_by_byte_count():
    pieces = BencodeString(b"\x00" * 81)
    assert render(pieces) == ["[81 Bytes]"]
    assert render(BencodeString(b"x" * 80)) == ["x" * 80]


def test_invalid_utf8_placeholder():
    assert render(BencodeString(b"\xff\xfe"), depth=2, indent="-") == ["--[invalid utf-8]"]


def test_render_scalar_and_empty_containers():
    assert render(BencodeInt(-4)) == ["-4"]
    assert render(BencodeList([])) == []
    assert render(BencodeDict({})) == []


def test_dump_does_not_need_torrent_fields():
    lines = dump(b"d7:commenti3ee")
    assert lines == ["    comment", "        3"]


def test_dump_propagates_decode_errors():
    with pytest.raises(BencodeDecodeError):
        dump(b"d3:cow")


def test_render_rejects_plain_values():
    with pytest.raises(TypeError):
        render({b"a": 1})
