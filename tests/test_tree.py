import contextlib
import hashlib
import os
import pathlib

import pytest

from mygit.models import FileMode, ObjectKind, Repository, Tree, TreeBuilder, TreeEntry
from mygit.models.compression import compress
from mygit.models.errors import CorruptObject, UnsupportedFileType


def sha1(data: bytes) -> bytes:
    return hashlib.sha1(data).digest()


@pytest.fixture
def work_tree(repository):
    root = repository.root
    (root / "a").write_text("hello")
    (root / "b").mkdir()
    (root / "b" / "c").write_text("world")
    return root


@pytest.fixture
def expected(work_tree):
    blob_a = sha1(b"blob 5\x00hello")
    blob_c = sha1(b"blob 5\x00world")
    subtree_payload = b"100644 c\x00" + blob_c
    subtree_b = sha1(f"tree {len(subtree_payload)}\x00".encode() + subtree_payload)
    top_payload = b"100644 a\x00" + blob_a + b"40000 b\x00" + subtree_b
    top = sha1(f"tree {len(top_payload)}\x00".encode() + top_payload)
    return {
        "a": blob_a,
        "c": blob_c,
        "b": subtree_b,
        "top": top,
        "top_size": len(top_payload),
    }


class TestTreeBuilder:
    def test_build(self, repository, work_tree, expected):
        builder = TreeBuilder(repository)
        tree = builder.build()

        assert tree.raw_hash == expected["top"]
        assert [(e.mode, e.name, e.raw_hash) for e in tree.entries] == [
            (FileMode.REGULAR, "a", expected["a"]),
            (FileMode.DIRECTORY, "b", expected["b"]),
        ]
        assert tree.size == expected["top_size"]

    def test_metadata_directory_is_skipped(self, repository, work_tree):
        tree = TreeBuilder(repository).build()
        assert ".git" not in [entry.name for entry in tree.entries]

    def test_objects_are_in_post_order(self, repository, work_tree, expected):
        builder = TreeBuilder(repository)
        tree = builder.build()

        hashes = list(builder.objects)
        assert hashes[-1] == tree.hash
        assert set(hashes) == {expected[key].hex() for key in ["a", "b", "c", "top"]}
        for position, hash_value in enumerate(hashes):
            obj = builder.objects[hash_value]
            if obj.kind is ObjectKind.TREE:
                assert all(e.hash in hashes[:position] for e in obj.entries)

    def test_identical_content_is_stored_once(self, repository):
        (repository.root / "one").write_text("same")
        (repository.root / "two").write_text("same")
        builder = TreeBuilder(repository)
        tree = builder.build()

        assert tree.entries[0].raw_hash == tree.entries[1].raw_hash
        assert len(builder.objects) == 2
        assert builder.persist() == 2
        assert builder.persist() == 0

    def test_persist_writes_every_object(self, repository, store, work_tree, expected):
        builder = TreeBuilder(repository)
        builder.build()
        assert builder.persist() == 4
        for key in ["a", "b", "c", "top"]:
            assert store.exists(expected[key].hex())

    def test_file_modes(self, repository):
        root = repository.root
        (root / "plain").write_text("plain")
        script = root / "script.sh"
        script.write_text("#!/bin/sh\n")
        script.chmod(0o744)
        os.symlink("plain", root / "link")

        tree = TreeBuilder(repository).build()
        modes = {entry.name: entry.mode for entry in tree.entries}
        assert modes == {
            "link": FileMode.SYMLINK,
            "plain": FileMode.REGULAR,
            "script.sh": FileMode.EXECUTABLE,
        }

    def test_symlink_to_directory_is_not_followed(self, repository, work_tree):
        os.symlink("b", work_tree / "d")
        tree = TreeBuilder(repository).build()
        entry = next(e for e in tree.entries if e.name == "d")
        assert entry.mode is FileMode.SYMLINK
        assert entry.raw_hash == sha1(b"blob 1\x00b")

    @pytest.mark.skipif(not hasattr(os, "mkfifo"), reason="needs named pipes")
    def test_unsupported_file_type(self, repository):
        os.mkfifo(repository.root / "pipe")
        with pytest.raises(UnsupportedFileType):
            TreeBuilder(repository).build()

    def test_directories_sort_with_trailing_slash(self, repository):
        (repository.root / "a").mkdir()
        (repository.root / "a" / "f").write_text("f")
        (repository.root / "a.txt").write_text("txt")
        (repository.root / "a-b").write_text("dash")

        tree = TreeBuilder(repository).build()
        assert [entry.name for entry in tree.entries] == ["a-b", "a.txt", "a"]

    def test_lister_order_is_kept(self, repository, work_tree):
        builder = TreeBuilder(
            repository, lister=lambda path: sorted(path.iterdir(), reverse=True)
        )
        tree = builder.build()
        assert [entry.name for entry in tree.entries] == ["b", "a"]

    def test_empty_directory(self, repository):
        tree = TreeBuilder(repository).build()
        assert tree.entries == ()
        assert tree.hash == "4b825dc642cb6eb9a060e54bf8d69288fbee4904"

    def test_relative_root(self, tmp_path):
        with contextlib.chdir(tmp_path):
            repository = Repository(pathlib.Path("repo"))
            repository.init()
            (repository.root / "b").mkdir()
            (repository.root / "b" / "c").write_text("world")

            tree = TreeBuilder(repository).build()

        subtree_payload = b"100644 c\x00" + sha1(b"blob 5\x00world")
        assert [entry.name for entry in tree.entries] == ["b"]
        assert tree.entries[0].raw_hash == sha1(
            f"tree {len(subtree_payload)}\x00".encode() + subtree_payload
        )

    def test_build_subdirectory(self, repository, work_tree, expected):
        tree = TreeBuilder(repository).build(work_tree / "b")
        assert tree.raw_hash == expected["b"]


class TestTree:
    def test_render(self, repository, work_tree, expected):
        tree = TreeBuilder(repository).build()
        assert tree.render().decode().splitlines() == [
            f"100644 blob {expected['a'].hex()}    a",
            f"040000 tree {expected['b'].hex()}    b",
        ]

    def test_render_names_only(self, repository, work_tree):
        tree = TreeBuilder(repository).build()
        assert tree.render_names_only() == b"a\nb\n"

    def test_render_keeps_stored_order(self):
        tree = Tree(
            entries=(
                TreeEntry(mode=FileMode.REGULAR, name="z", raw_hash=bytes(20)),
                TreeEntry(mode=FileMode.REGULAR, name="a", raw_hash=bytes(20)),
            )
        )
        assert tree.render_names_only() == b"z\na\n"

    def test_persist_and_load(self, repository, store, work_tree):
        builder = TreeBuilder(repository)
        tree = builder.build()
        builder.persist()

        loaded = Tree.from_hash(store, tree.hash)
        assert loaded == tree
        assert loaded.hash == tree.hash

    def test_persist_only_writes_itself(self, repository, store, work_tree, expected):
        tree = TreeBuilder(repository).build()
        assert tree.persist(store) is True
        assert store.exists(tree.hash)
        assert not store.exists(expected["a"].hex())

    def test_hash_is_verified(self, store):
        tree = Tree()
        wrong_hash = "3b18e512dba79e4c8300dd08aeb37f8e728b8dad"
        store.write(wrong_hash, compress(tree.encode()))
        with pytest.raises(CorruptObject):
            Tree.from_hash(store, wrong_hash)
