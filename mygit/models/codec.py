"""Canonical byte layout of stored objects.

Every object is framed as ``<kind> <size>\\0<payload>``. A blob payload is
the raw content. A tree payload is a run of entries, each one
``<mode> <name>\\0`` followed by the 20 raw bytes of the child digest.
"""

import binascii
import hashlib
import os
import re
from dataclasses import dataclass
from enum import StrEnum, auto
from typing import Iterable

from mygit.models.errors import InvalidHeader, SizeMismatch, TruncatedTree

__all__ = [
    "ObjectKind",
    "FileMode",
    "TreeEntry",
    "Header",
    "create_hash",
    "is_valid_hash",
    "encode",
    "encode_blob",
    "encode_tree",
    "decode_header",
    "decode_blob_payload",
    "decode_tree_payload",
    "decode_tree",
]

NULL_BYTE = b"\x00"
HASH_SIZE = 20

HASH_PATTERN = re.compile(r"[0-9a-fA-F]{40}")


class ObjectKind(StrEnum):
    BLOB = auto()
    TREE = auto()


class FileMode(StrEnum):
    DIRECTORY = "40000"
    REGULAR = "100644"
    EXECUTABLE = "100755"
    SYMLINK = "120000"

    @property
    def kind(self) -> ObjectKind:
        match self:
            case FileMode.DIRECTORY:
                return ObjectKind.TREE
            case _:
                return ObjectKind.BLOB

    @property
    def padded(self) -> str:
        # ls-tree prints modes six characters wide
        return self.value.zfill(6)


@dataclass(frozen=True, kw_only=True)
class TreeEntry:
    mode: FileMode
    name: str
    raw_hash: bytes

    def __post_init__(self):
        if len(self.raw_hash) != HASH_SIZE:
            raise ValueError(
                f"Tree entry {self.name!r} needs a {HASH_SIZE} byte hash, "
                f"got {len(self.raw_hash)}"
            )

    @property
    def kind(self) -> ObjectKind:
        return self.mode.kind

    @property
    def hash(self) -> str:
        return binascii.hexlify(self.raw_hash).decode()

    def encode(self) -> bytes:
        return f"{self.mode} ".encode() + os.fsencode(self.name) + NULL_BYTE + self.raw_hash


@dataclass(frozen=True)
class Header:
    kind: ObjectKind
    size: int
    offset: int


def create_hash(data: bytes, *, hasher=hashlib.sha1) -> bytes:
    return hasher(data).digest()


def is_valid_hash(hash_value: str) -> bool:
    return HASH_PATTERN.fullmatch(hash_value) is not None


def encode(kind: ObjectKind, payload: bytes) -> bytes:
    return f"{kind} {len(payload)}".encode() + NULL_BYTE + payload


def encode_blob(content: bytes) -> bytes:
    return encode(ObjectKind.BLOB, content)


def encode_tree(entries: Iterable[TreeEntry]) -> bytes:
    return encode(ObjectKind.TREE, b"".join(entry.encode() for entry in entries))


def decode_header(data: bytes) -> Header:
    header, sep, _ = data.partition(NULL_BYTE)
    if not sep:
        raise InvalidHeader("Object header is not NUL terminated")

    kind_token, sep, size_token = header.partition(b" ")
    if not sep:
        raise InvalidHeader(f"Malformed object header: {header!r}")
    try:
        kind = ObjectKind(kind_token.decode("ascii"))
    except (UnicodeDecodeError, ValueError):
        raise InvalidHeader(f"Unknown object kind: {kind_token!r}") from None
    # bytes.isdigit only accepts ASCII digits, so signs and spaces are rejected
    if not size_token.isdigit():
        raise InvalidHeader(f"Invalid object size: {size_token!r}")

    return Header(kind=kind, size=int(size_token), offset=len(header) + 1)


def decode_blob_payload(data: bytes, header: Header) -> bytes:
    payload = data[header.offset :]
    if len(payload) != header.size:
        raise SizeMismatch(header.size, len(payload))
    return payload


def decode_tree_payload(payload: bytes) -> tuple[TreeEntry, ...]:
    entries = []
    offset, end = 0, len(payload)
    while offset < end:
        space = payload.find(b" ", offset)
        if space < 0:
            raise InvalidHeader(f"Tree entry at offset {offset} has no mode")
        nul = payload.find(NULL_BYTE, space + 1)
        if nul < 0 or nul == space + 1:
            raise InvalidHeader(f"Tree entry at offset {offset} has no name")

        mode_token = payload[offset:space]
        try:
            mode = FileMode(mode_token.decode("ascii"))
        except (UnicodeDecodeError, ValueError):
            raise InvalidHeader(f"Unknown tree entry mode: {mode_token!r}") from None

        hash_start = nul + 1
        if end - hash_start < HASH_SIZE:
            raise TruncatedTree(
                f"Tree entry at offset {offset} ends after "
                f"{end - hash_start} of {HASH_SIZE} hash bytes"
            )
        entries.append(
            TreeEntry(
                mode=mode,
                name=os.fsdecode(payload[space + 1 : nul]),
                raw_hash=payload[hash_start : hash_start + HASH_SIZE],
            )
        )
        offset = hash_start + HASH_SIZE
    return tuple(entries)


def decode_tree(data: bytes, header: Header) -> tuple[TreeEntry, ...]:
    payload = data[header.offset :]
    if len(payload) != header.size:
        raise SizeMismatch(header.size, len(payload))
    return decode_tree_payload(payload)
