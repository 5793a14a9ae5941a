"""``vetter rules`` - list registered rules."""

import argparse

from vetter.registry import default_registry


def run_rules(args: argparse.Namespace) -> None:
    """Print a table of NAME, PARAMS and DESCRIPTION for the built-in rules."""
    rows = [(r.name, r.arity, r.description) for r in default_registry().rules()]

    max_name = max(max(len(r[0]) for r in rows), 4)  # "NAME" header
    max_params = max(max(len(r[1]) for r in rows), 6)  # "PARAMS" header

    fmt = f"{{:<{max_name}}}  {{:<{max_params}}}  {{}}"
    print(fmt.format("NAME", "PARAMS", "DESCRIPTION"))
    sep_len = max_name + max_params + 4 + max(len(r[2]) for r in rows)
    print("-" * min(sep_len, 80))
    for name, params, description in rows:
        print(fmt.format(name, params, description))
