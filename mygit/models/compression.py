import zlib

from mygit.models.errors import CorruptObject

__all__ = ["compress", "decompress"]


def compress(data: bytes, *, level: int = zlib.Z_DEFAULT_COMPRESSION) -> bytes:
    return zlib.compress(data, level)


def decompress(data: bytes) -> bytes:
    """Inflate a single zlib stream.

    The whole input must be exactly one complete stream: a stream that stops
    early or carries bytes after its end is reported as corrupt.
    """
    decompressor = zlib.decompressobj()
    try:
        decompressed = decompressor.decompress(data)
        decompressed += decompressor.flush()
    except zlib.error as exc:
        raise CorruptObject(f"Cannot inflate object: {exc}") from exc
    if not decompressor.eof:
        raise CorruptObject("Object stream is truncated")
    if decompressor.unused_data:
        raise CorruptObject(
            f"Object stream has {len(decompressor.unused_data)} trailing bytes"
        )
    return decompressed
