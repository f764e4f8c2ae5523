import logging
import pathlib
from argparse import ArgumentParser, ArgumentTypeError

from mygit.models.codec import is_valid_hash


def object_hash(value: str) -> str:
    if not is_valid_hash(value):
        raise ArgumentTypeError(f"not a 40 character hex object hash: {value!r}")
    return value.lower()


def get_parser():
    parser = ArgumentParser(prog="mygit")
    parser.add_argument(
        "-C", "--root", type=pathlib.Path, default=pathlib.Path("."), help="repository root"
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="debug logging")
    subparsers = parser.add_subparsers(dest="command", required=True)

    # init
    _init_parser = subparsers.add_parser("init")

    # cat-file
    cat_file_parser = subparsers.add_parser("cat-file")
    cat_file_group = cat_file_parser.add_mutually_exclusive_group(required=True)
    cat_file_group.add_argument(
        "-p", "--pretty-print", action="store_true", help="pretty print"
    )
    cat_file_group.add_argument(
        "-t", dest="show_type", action="store_true", help="show object type"
    )
    cat_file_group.add_argument(
        "-s", dest="show_size", action="store_true", help="show object size"
    )
    cat_file_parser.add_argument("hash", type=object_hash)

    # hash_object
    hash_object_parser = subparsers.add_parser("hash-object")
    hash_object_parser.add_argument("path", type=pathlib.Path)
    hash_object_parser.add_argument("-w", "--write", action="store_true")

    # ls-tree
    ls_tree_parser = subparsers.add_parser("ls-tree")
    ls_tree_parser.add_argument("--name-only", action="store_true")
    ls_tree_parser.add_argument("hash_value", type=object_hash)

    # write-tree
    write_tree_parser = subparsers.add_parser("write-tree")
    write_tree_parser.add_argument("directory", nargs="?", type=pathlib.Path)

    return parser


def configure_logging(verbose: bool = False):
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )
