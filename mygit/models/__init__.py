from .blob import Blob
from .codec import FileMode, ObjectKind, TreeEntry
from .errors import *  # noqa: F403
from .git import Git
from .reader import ObjectInfo, read_metadata, read_object
from .repository import Repository
from .store import ObjectStore
from .tree import Tree, TreeBuilder
