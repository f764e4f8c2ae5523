import logging
import pathlib
import zlib
from dataclasses import dataclass
from os import PathLike

__all__ = ["Repository"]

logger = logging.getLogger(__name__)

DEFAULT_HEAD = "ref: refs/heads/main\n"


@dataclass(frozen=True)
class Repository:
    """Location and settings of a repository, passed explicitly to every operation."""

    root: pathlib.Path
    git_dir_name: str = ".git"
    compression_level: int = zlib.Z_DEFAULT_COMPRESSION

    def __post_init__(self):
        object.__setattr__(self, "root", pathlib.Path(self.root))

    @classmethod
    def at(cls, root: PathLike | str = ".", **kwargs) -> "Repository":
        return cls(pathlib.Path(root).resolve(), **kwargs)

    @property
    def git_dir(self) -> pathlib.Path:
        return self.root / self.git_dir_name

    @property
    def objects_dir(self) -> pathlib.Path:
        return self.git_dir / "objects"

    @property
    def refs_dir(self) -> pathlib.Path:
        return self.git_dir / "refs"

    @property
    def head_file(self) -> pathlib.Path:
        return self.git_dir / "HEAD"

    def init(self):
        for _dir in [self.git_dir, self.objects_dir, self.refs_dir]:
            _dir.mkdir(exist_ok=False, parents=True)
        self.head_file.write_text(DEFAULT_HEAD)
        logger.debug("Initialized repository in %s", self.git_dir)
