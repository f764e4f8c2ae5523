import sys

from mygit.models import Git, ObjectError
from mygit.utils import configure_logging, get_parser


def run(args) -> None:
    git = Git(args.root)
    match args.command:
        case "init":
            git.init_repo()
        case "cat-file" if args.pretty_print:
            git.cat_file(args.hash, pretty_print=True)
        case "cat-file":
            git.object_info(args.hash, show_type=args.show_type, show_size=args.show_size)
        case "hash-object":
            git.hash_object(args.path, write=args.write)
        case "ls-tree":
            git.ls_tree(args.hash_value, name_only=args.name_only)
        case "write-tree":
            git.write_tree(args.directory)
        case _:
            raise RuntimeError(f"Unknown command #{args.command}")


def main(argv=None) -> int:
    parser = get_parser()
    args = parser.parse_args(argv)
    configure_logging(args.verbose)
    try:
        run(args)
    except (ObjectError, OSError) as exc:
        sys.stderr.write(f"fatal: {exc}\n")
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
