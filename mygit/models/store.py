"""Loose object storage.

An object whose digest is ``d`` lives at ``objects/d[:2]/d[2:]``. Objects are
write-once: content determines the path, so an existing file is never
rewritten.
"""

import logging
import os
import pathlib
import tempfile

from mygit.models.codec import is_valid_hash
from mygit.models.errors import InvalidDigest, ObjectNotFound
from mygit.models.repository import Repository

__all__ = ["ObjectStore"]

logger = logging.getLogger(__name__)

OBJECT_FILE_MODE = 0o444


class ObjectStore:
    def __init__(self, repository: Repository):
        self.repository = repository
        self.objects_folder = repository.objects_dir

    @staticmethod
    def _normalize(hash_value: str) -> str:
        if not is_valid_hash(hash_value):
            raise InvalidDigest(hash_value)
        return hash_value.lower()

    def path_for(self, hash_value: str) -> pathlib.Path:
        hash_value = self._normalize(hash_value)
        return self.objects_folder / hash_value[:2] / hash_value[2:]

    def exists(self, hash_value: str) -> bool:
        return self.path_for(hash_value).is_file()

    def write(self, hash_value: str, data: bytes) -> bool:
        """Store compressed object bytes, returning False if they were already present."""
        path = self.path_for(hash_value)
        if path.exists():
            logger.debug("Object %s already stored, skipped", hash_value)
            return False

        path.parent.mkdir(exist_ok=True)
        fd, tmp_name = tempfile.mkstemp(dir=path.parent, prefix="tmp_obj_")
        try:
            with os.fdopen(fd, "wb") as f:
                f.write(data)
            os.chmod(tmp_name, OBJECT_FILE_MODE)
            # a concurrent writer of the same digest wrote identical bytes
            os.replace(tmp_name, path)
        except BaseException:
            pathlib.Path(tmp_name).unlink(missing_ok=True)
            raise
        logger.debug("Stored object %s (%d bytes)", hash_value, len(data))
        return True

    def read(self, hash_value: str) -> bytes:
        path = self.path_for(hash_value)
        try:
            with path.open("rb") as f:
                data = f.read()
        except (FileNotFoundError, NotADirectoryError):
            raise ObjectNotFound(hash_value) from None
        logger.debug("Read object %s (%d bytes)", hash_value, len(data))
        return data
