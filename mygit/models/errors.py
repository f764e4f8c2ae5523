__all__ = [
    "ObjectError",
    "ObjectNotFound",
    "InvalidDigest",
    "CorruptObject",
    "InvalidObject",
    "InvalidHeader",
    "SizeMismatch",
    "TruncatedTree",
    "UnsupportedFileType",
]


class ObjectError(Exception):
    """Base class for every failure raised by the object model."""


class ObjectNotFound(ObjectError):
    def __init__(self, hash_value: str):
        super().__init__(f"Not a valid object name {hash_value}")
        self.hash_value = hash_value


class InvalidDigest(ObjectError, ValueError):
    def __init__(self, hash_value: str):
        super().__init__(f"Invalid object hash: {hash_value!r}")
        self.hash_value = hash_value


class CorruptObject(ObjectError):
    pass


class InvalidObject(ObjectError):
    pass


class InvalidHeader(InvalidObject):
    pass


class SizeMismatch(InvalidObject):
    def __init__(self, declared: int, actual: int):
        super().__init__(f"Object declares {declared} bytes but holds {actual}")
        self.declared = declared
        self.actual = actual


class TruncatedTree(InvalidObject):
    pass


class UnsupportedFileType(ObjectError):
    def __init__(self, path):
        super().__init__(f"Unsupported file type: {path}")
        self.path = path
