"""``vetter check`` - validate a JSON document from the command line.

Exit codes: 0 valid, 1 validation failed, 2 configuration or input error.
"""

import argparse
import json
import logging
import sys
from typing import Any, NoReturn

from vetter.errors import VetterError
from vetter.validator import Validator

logger = logging.getLogger("vetter.cli")

EXIT_INVALID = 1
EXIT_ERROR = 2


def run_check(args: argparse.Namespace) -> None:
    """Validate ``args.data`` against ``args.rules`` and print the errors."""
    if args.data == "-" and args.rules == "-":
        _fail("only one of DATA and RULES can be read from stdin")

    try:
        data = _load_object(args.data, "data")
        rules = _load_object(args.rules, "rules")
        validator = Validator(data).validate(rules)
    except (OSError, ValueError, VetterError) as exc:
        _fail(str(exc), exc)

    errors = validator.errors()
    logger.debug("%d field(s) failed", len(errors))

    if args.json:
        print(json.dumps(errors, indent=2, ensure_ascii=False))
    else:
        for field_name, messages in errors.items():
            for message in messages:
                print(f"{field_name}: {message}")
        if not errors:
            print("OK")

    if errors:
        raise SystemExit(EXIT_INVALID)


def _load_object(path: str, label: str) -> dict[str, Any]:
    if path == "-":
        text = sys.stdin.read()
    else:
        with open(path, encoding="utf-8") as fh:
            text = fh.read()

    try:
        loaded = json.loads(text)
    except json.JSONDecodeError as exc:
        msg = f"{label} file {path!r} is not valid JSON: {exc}"
        raise ValueError(msg) from exc
    if not isinstance(loaded, dict):
        msg = f"{label} file {path!r} must contain a JSON object, got {type(loaded).__name__}"
        raise ValueError(msg)
    return loaded


def _fail(message: str, exc: BaseException | None = None) -> NoReturn:
    print(f"Error: {message}", file=sys.stderr)
    raise SystemExit(EXIT_ERROR) from exc
