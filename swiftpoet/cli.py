import argparse
import logging
import sys
from pathlib import Path

import yaml

from .code_writer import DEFAULT_INDENT
from .loader import load_file
from .name_allocator import NameAllocator
from .util import string_literal_with_quotes

logger = logging.getLogger(__name__)


def cmd_render(args: argparse.Namespace) -> None:
    for in_file in args.inputs:
        try:
            file_spec = load_file(in_file)
        except (OSError, ValueError, KeyError, yaml.YAMLError) as e:
            print(f"{in_file}: {e}", file=sys.stderr)
            raise SystemExit(2)

        if args.indent is not None:
            file_spec = file_spec.to_builder().indent(args.indent).build()

        if args.out:
            path = file_spec.write_to_path(Path(args.out))
            logger.info("Wrote %s", path)
        else:
            file_spec.write_to(sys.stdout)


def cmd_quote(args: argparse.Namespace) -> None:
    value: str = sys.stdin.read() if args.value is None else args.value
    print(string_literal_with_quotes(value, is_constant_context=args.constant))


def cmd_names(args: argparse.Namespace) -> None:
    allocator = NameAllocator()
    for suggestion in args.suggestions:
        print(f"{suggestion}\t{allocator.new_name(suggestion)}")


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser("swiftpoet")
    p.add_argument("-v", "--verbose", action="store_true", help="Log progress to stderr")
    sub = p.add_subparsers(required=True)

    s = sub.add_parser("render", help="Render JSON/YAML file descriptions to Swift source")
    s.add_argument("inputs", nargs="+", help="Description files (.json, .yaml)")
    s.add_argument("--out", help="Directory to write <file>.swift into. If omitted, print to stdout.")
    s.add_argument("--indent", help=f"Indent unit (default {DEFAULT_INDENT!r} unless the description sets one)")
    s.set_defaults(func=cmd_render)

    s = sub.add_parser("quote", help="Print a value as a Swift string literal")
    s.add_argument("value", nargs="?", help="Text to quote. If omitted, read stdin.")
    s.add_argument("--constant", action="store_true", help="Quote for a constant context (no multiline literals)")
    s.set_defaults(func=cmd_quote)

    s = sub.add_parser("names", help="Allocate unique Swift identifiers for the given suggestions")
    s.add_argument("suggestions", nargs="+")
    s.set_defaults(func=cmd_names)

    return p


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.WARNING, format="%(levelname)s %(name)s: %(message)s")
    args.func(args)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
