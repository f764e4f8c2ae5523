import binascii
import logging
import os
import pathlib
import stat
from dataclasses import dataclass
from functools import cached_property
from os import PathLike
from typing import Callable, Iterable

from mygit.models import codec
from mygit.models.blob import Blob
from mygit.models.codec import FileMode, ObjectKind, TreeEntry
from mygit.models.compression import compress, decompress
from mygit.models.errors import CorruptObject, InvalidHeader, UnsupportedFileType
from mygit.models.repository import Repository
from mygit.models.store import ObjectStore

__all__ = ["Tree", "TreeBuilder", "list_directory", "classify"]

logger = logging.getLogger(__name__)


@dataclass(frozen=True, kw_only=True)
class Tree:
    entries: tuple[TreeEntry, ...] = ()

    kind = ObjectKind.TREE

    @cached_property
    def payload(self) -> bytes:
        return b"".join(entry.encode() for entry in self.entries)

    @property
    def size(self) -> int:
        return len(self.payload)

    def encode(self) -> bytes:
        return codec.encode(ObjectKind.TREE, self.payload)

    @cached_property
    def raw_hash(self) -> bytes:
        return codec.create_hash(self.encode())

    @property
    def hash(self) -> str:
        return binascii.hexlify(self.raw_hash).decode()

    def render(self) -> bytes:
        return "".join(
            f"{entry.mode.padded} {entry.kind} {entry.hash}    {entry.name}\n"
            for entry in self.entries
        ).encode(errors="surrogateescape")

    def render_names_only(self) -> bytes:
        return "".join(f"{entry.name}\n" for entry in self.entries).encode(
            errors="surrogateescape"
        )

    def persist(self, store: ObjectStore) -> bool:
        level = store.repository.compression_level
        return store.write(self.hash, compress(self.encode(), level=level))

    @classmethod
    def from_bytes(cls, data: bytes) -> "Tree":
        header = codec.decode_header(data)
        if header.kind is not ObjectKind.TREE:
            raise InvalidHeader(f"Not a tree object: {header.kind}")
        return cls(entries=codec.decode_tree(data, header))

    @classmethod
    def from_hash(cls, store: ObjectStore, hash_value: str) -> "Tree":
        tree = cls.from_bytes(decompress(store.read(hash_value)))
        if tree.hash != hash_value.lower():
            raise CorruptObject(f"Object {hash_value} hashes to {tree.hash}")
        return tree


def _git_sort_key(path: pathlib.Path) -> bytes:
    # git compares directory names as if they ended with a slash
    name = os.fsencode(path.name)
    if stat.S_ISDIR(path.lstat().st_mode):
        return name + b"/"
    return name


def list_directory(path: pathlib.Path) -> list[pathlib.Path]:
    return sorted(path.iterdir(), key=_git_sort_key)


def classify(path: pathlib.Path) -> FileMode:
    mode = path.lstat().st_mode
    if stat.S_ISDIR(mode):
        return FileMode.DIRECTORY
    if stat.S_ISLNK(mode):
        return FileMode.SYMLINK
    if stat.S_ISREG(mode):
        if mode & (stat.S_IXUSR | stat.S_IXGRP | stat.S_IXOTH):
            return FileMode.EXECUTABLE
        return FileMode.REGULAR
    raise UnsupportedFileType(path)


class TreeBuilder:
    """Snapshot a directory hierarchy into trees and blobs.

    Every object produced is kept in ``objects``, a flat table keyed by hash.
    Its insertion order is post-order, so children always precede the trees
    that reference them. Entries keep the order given by ``lister``.
    """

    def __init__(
        self,
        repository: Repository,
        *,
        lister: Callable[[pathlib.Path], Iterable[pathlib.Path]] = list_directory,
    ):
        self.repository = repository
        self.store = ObjectStore(repository)
        self.lister = lister
        self.objects: dict[str, Blob | Tree] = {}

    def _add(self, obj: Blob | Tree) -> Blob | Tree:
        self.objects.setdefault(obj.hash, obj)
        return obj

    def build(self, working_directory: PathLike | str | None = None) -> Tree:
        dir_path = self.repository.root
        if working_directory is not None:
            # relative paths are taken from the repository root, not the process cwd
            dir_path = dir_path / working_directory
        return self._build(dir_path)

    def _build(self, dir_path: pathlib.Path) -> Tree:
        entries = []
        for entry in self.lister(dir_path):
            if entry.name == self.repository.git_dir_name:
                continue

            mode = classify(entry)
            match mode:
                case FileMode.DIRECTORY:
                    child = self._build(entry)
                case _:
                    child = self._add(Blob.from_path(entry))
            entries.append(TreeEntry(mode=mode, name=entry.name, raw_hash=child.raw_hash))

        tree = Tree(entries=tuple(entries))
        logger.debug("Built tree %s for %s (%d entries)", tree.hash, dir_path, len(entries))
        return self._add(tree)

    def persist(self) -> int:
        written = 0
        for obj in self.objects.values():
            written += obj.persist(self.store)
        logger.debug("Persisted %d of %d objects", written, len(self.objects))
        return written
