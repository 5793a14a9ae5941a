"""Rule parser - turns ``"name:param1,param2"`` into a ``ParsedRule``.

Grammar::

    rule   := name [ ':' params ]
    params := param (',' param)*

Parameters are always strings here; each rule coerces its own. The plain
form has no escaping, so a parameter cannot contain a comma. Passing
``json_params=True`` (or ``ValidatorConfig(json_params=True)``) also accepts
a JSON array after the colon, which lifts that restriction::

    in:["a,b","c"]          ->  ("a,b", "c")
    regex:["/^\\d+,\\d+$/"]  ->  ("/^\\d+,\\d+$/",)

The JSON form is off by default. With it on, a remainder such as ``in:[1]``
or ``regex:[1]`` decodes as JSON instead of being taken literally. Anything
that does not decode as a JSON array of scalars still falls back to the comma
split, so ``regex:/[a-z]+/`` and ``in:[draft]`` keep their plain meaning.
"""

import json
from dataclasses import dataclass
from functools import lru_cache


@dataclass(frozen=True, slots=True)
class ParsedRule:
    """A rule name and its ordered string parameters."""

    name: str
    params: tuple[str, ...] = ()

    def __str__(self) -> str:
        if not self.params:
            return self.name
        return f"{self.name}:{','.join(self.params)}"


@lru_cache(maxsize=1024)
def parse_rule(spec: str, *, json_params: bool = False) -> ParsedRule:
    """Parse one rule specification.

    Splits on the first ``:`` only. An empty remainder (``"min:"``) yields
    no parameters rather than one empty-string parameter.
    """
    name, sep, remainder = spec.partition(":")
    if not sep or remainder == "":
        return ParsedRule(name)

    if json_params:
        decoded = _json_params(remainder)
        if decoded is not None:
            return ParsedRule(name, decoded)

    return ParsedRule(name, tuple(remainder.split(",")))


def _json_params(remainder: str) -> tuple[str, ...] | None:
    """Decode a JSON-array parameter list, or return None to fall back."""
    if not (remainder.startswith("[") and remainder.endswith("]")):
        return None
    try:
        items = json.loads(remainder)
    except ValueError:
        return None
    if not isinstance(items, list):
        return None

    params: list[str] = []
    for item in items:
        if isinstance(item, str):
            params.append(item)
        elif item is None:
            params.append("")
        elif isinstance(item, bool):
            params.append("true" if item else "false")
        elif isinstance(item, int | float):
            params.append(json.dumps(item))
        else:
            # Nested arrays/objects are not parameters
            return None
    return tuple(params)
