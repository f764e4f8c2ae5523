import logging
from dataclasses import dataclass

from mygit.models import codec
from mygit.models.blob import Blob
from mygit.models.codec import ObjectKind
from mygit.models.compression import decompress
from mygit.models.errors import CorruptObject
from mygit.models.store import ObjectStore
from mygit.models.tree import Tree

__all__ = ["ObjectInfo", "read_metadata", "read_object"]

logger = logging.getLogger(__name__)


@dataclass(frozen=True, kw_only=True)
class ObjectInfo:
    kind: ObjectKind
    size: int


def read_metadata(store: ObjectStore, hash_value: str) -> ObjectInfo:
    """Kind and declared size of a stored object; the payload is not checked."""
    header = codec.decode_header(decompress(store.read(hash_value)))
    return ObjectInfo(kind=header.kind, size=header.size)


def read_object(store: ObjectStore, hash_value: str) -> Blob | Tree:
    data = decompress(store.read(hash_value))
    header = codec.decode_header(data)
    logger.debug("Reading %s %s (%d bytes)", header.kind, hash_value, header.size)

    match header.kind:
        case ObjectKind.BLOB:
            obj = Blob(content=codec.decode_blob_payload(data, header))
        case ObjectKind.TREE:
            obj = Tree(entries=codec.decode_tree(data, header))

    if obj.hash != hash_value.lower():
        raise CorruptObject(f"Object {hash_value} hashes to {obj.hash}")
    return obj
