import sys
from os import PathLike

from mygit.models.blob import Blob
from mygit.models.reader import ObjectInfo, read_metadata, read_object
from mygit.models.repository import Repository
from mygit.models.store import ObjectStore
from mygit.models.tree import Tree, TreeBuilder

__all__ = ["Git"]


class Git:
    """Plumbing commands run against one explicit repository."""

    def __init__(self, root: PathLike | str = "."):
        self.repository = Repository.at(root)
        self.store = ObjectStore(self.repository)

    @staticmethod
    def _write_bytes(data: bytes):
        sys.stdout.flush()
        sys.stdout.buffer.write(data)
        sys.stdout.buffer.flush()

    def init_repo(self, *, pretty_print: bool = True):
        self.repository.init()
        if pretty_print:
            sys.stdout.write(f"Initialized empty repository in {self.repository.git_dir}\n")

    def cat_file(self, hash_: str, *, pretty_print: bool = False) -> Blob | Tree:
        obj = read_object(self.store, hash_)
        if pretty_print:
            self._write_bytes(obj.render())
        return obj

    def object_info(
        self, hash_: str, *, show_type: bool = False, show_size: bool = False
    ) -> ObjectInfo:
        info = read_metadata(self.store, hash_)
        if show_type:
            sys.stdout.write(f"{info.kind}\n")
        if show_size:
            sys.stdout.write(f"{info.size}\n")
        return info

    def hash_object(
        self,
        path: PathLike | str,
        *,
        write: bool = False,
        pretty_print: bool = True,
    ) -> str:
        blob = Blob.from_path(path)
        if write:
            blob.persist(self.store)
        if pretty_print:
            sys.stdout.write(f"{blob.hash}\n")
        return blob.hash

    def ls_tree(
        self, hash_value: str, *, name_only: bool = False, pretty_print: bool = True
    ) -> Tree:
        tree = Tree.from_hash(self.store, hash_value)
        if pretty_print:
            self._write_bytes(tree.render_names_only() if name_only else tree.render())
        return tree

    def write_tree(
        self, working_directory: PathLike | str | None = None, *, pretty_print: bool = True
    ) -> str:
        builder = TreeBuilder(self.repository)
        tree = builder.build(working_directory)
        builder.persist()
        if pretty_print:
            sys.stdout.write(f"{tree.hash}\n")
        return tree.hash
