import binascii
import os
import pathlib
import stat
from dataclasses import dataclass
from functools import cached_property
from os import PathLike

from mygit.models import codec
from mygit.models.codec import ObjectKind
from mygit.models.compression import compress, decompress
from mygit.models.errors import CorruptObject, InvalidHeader
from mygit.models.store import ObjectStore

__all__ = ["Blob"]


@dataclass(frozen=True, kw_only=True)
class Blob:
    content: bytes

    kind = ObjectKind.BLOB

    @property
    def size(self) -> int:
        return len(self.content)

    def encode(self) -> bytes:
        return codec.encode_blob(self.content)

    @cached_property
    def raw_hash(self) -> bytes:
        return codec.create_hash(self.encode())

    @property
    def hash(self) -> str:
        return binascii.hexlify(self.raw_hash).decode()

    def render(self) -> bytes:
        return self.content

    def persist(self, store: ObjectStore) -> bool:
        level = store.repository.compression_level
        return store.write(self.hash, compress(self.encode(), level=level))

    @classmethod
    def from_path(cls, path: PathLike | str) -> "Blob":
        """Blob of a file's bytes, or of a symlink's target without following it."""
        path = pathlib.Path(path)
        mode = path.lstat().st_mode
        if stat.S_ISDIR(mode):
            raise IsADirectoryError(f"Cannot make a blob from directory {path}")
        if stat.S_ISLNK(mode):
            return cls(content=os.fsencode(os.readlink(path)))
        with path.open("rb") as f:
            return cls(content=f.read())

    @classmethod
    def from_bytes(cls, data: bytes) -> "Blob":
        header = codec.decode_header(data)
        if header.kind is not ObjectKind.BLOB:
            raise InvalidHeader(f"Not a blob object: {header.kind}")
        return cls(content=codec.decode_blob_payload(data, header))

    @classmethod
    def from_hash(cls, store: ObjectStore, hash_value: str) -> "Blob":
        blob = cls.from_bytes(decompress(store.read(hash_value)))
        if blob.hash != hash_value.lower():
            raise CorruptObject(f"Object {hash_value} hashes to {blob.hash}")
        return blob
