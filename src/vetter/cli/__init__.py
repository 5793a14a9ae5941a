"""Vetter CLI - validate JSON documents and list available rules.

Entry point registered as ``vetter`` in ``pyproject.toml``::

    [project.scripts]
    vetter = "vetter.cli:main"
"""

import argparse
import logging
import sys


def main(argv: list[str] | None = None) -> None:
    """CLI entry point for the ``vetter`` command."""
    parser = argparse.ArgumentParser(
        prog="vetter",
        description="Vetter - declarative field validation with textual rules.",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Log debug output to stderr")
    subparsers = parser.add_subparsers(dest="command")

    # -- vetter check -----------------------------------------------------
    check_parser = subparsers.add_parser("check", help="Validate a JSON document against JSON rules")
    check_parser.add_argument("data", help="JSON object of field values ('-' for stdin)")
    check_parser.add_argument("rules", help="JSON object of field -> rule list ('-' for stdin)")
    check_parser.add_argument(
        "--json",
        action="store_true",
        help="Print errors as a JSON object",
    )

    # -- vetter rules -----------------------------------------------------
    subparsers.add_parser("rules", help="List registered rules")

    args = parser.parse_args(argv)

    if args.verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(levelname)s %(name)s: %(message)s")

    if args.command is None:
        parser.print_help()
        sys.exit(0)

    if args.command == "check":
        from vetter.cli._check import run_check

        run_check(args)
    elif args.command == "rules":
        from vetter.cli._rules import run_rules

        run_rules(args)
