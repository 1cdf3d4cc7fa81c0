"""
Bencode package for encoding and decoding BitTorrent data.
"""
from .decoder import BencodeDecodeError, decode
from .encoder import BencodeEncodeError, encode
from .printer import dump, render
from .structure import BencodeDict, BencodeInt, BencodeList, BencodeString, to_python

__all__ = [
    'decode', 'encode', 'render', 'dump', 'to_python',
    'BencodeDecodeError', 'BencodeEncodeError',
    'BencodeInt', 'BencodeString', 'BencodeList', 'BencodeDict',
]
