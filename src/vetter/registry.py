"""Rule registry - compiled rule table with dispatch.

``RuleDef`` is the frozen definition of one rule, ``RuleRegistry`` is the
compiled name -> definition lookup table. Dispatch is a dict lookup, never
attribute reflection, so only registered rules can ever run.

Thread safety:
    - RuleDef and RuleContext are frozen dataclasses (immutable)
    - RuleRegistry._rules is built once and never mutated; ``extend()``
      returns a new registry
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterable, Mapping
from dataclasses import dataclass, field
from functools import cache
from typing import Any, TypeAlias

from vetter.config import ValidatorConfig
from vetter.errors import ConfigurationError, RuleNotFound, RuleParameterError
from vetter.parser import ParsedRule

logger = logging.getLogger("vetter.registry")

_MISSING: Any = object()


@dataclass(frozen=True, slots=True)
class RuleContext:
    """Everything a rule may look at while checking one field.

    ``value`` is ``None`` when the field is absent from ``data``.
    """

    field: str
    value: Any
    data: Mapping[str, Any]
    rule: str = ""
    params: tuple[str, ...] = ()
    config: ValidatorConfig = field(default_factory=ValidatorConfig)

    @property
    def empty(self) -> bool:
        """True for absent, ``None`` and ``""`` values."""
        return self.value is None or self.value == ""

    def param(self, index: int, default: str = _MISSING) -> str:
        """Return the parameter at *index*, or *default* when not given."""
        if index < len(self.params):
            return self.params[index]
        if default is _MISSING:
            msg = f"missing parameter #{index + 1}"
            raise RuleParameterError(self.rule, msg)
        return default

    def int_param(self, index: int, label: str, default: int | None = None) -> int:
        """Return the parameter at *index* coerced to ``int``."""
        if index >= len(self.params):
            if default is None:
                msg = f"missing integer parameter {label!r}"
                raise RuleParameterError(self.rule, msg)
            return default
        raw = self.params[index].strip()
        try:
            return int(raw)
        except ValueError:
            msg = f"parameter {label!r} must be an integer, got {self.params[index]!r}"
            raise RuleParameterError(self.rule, msg) from None


# A rule returns the messages it produced, in order; [] means pass.
Check: TypeAlias = Callable[[RuleContext], list[str]]


@dataclass(frozen=True, slots=True)
class RuleDef:
    """A frozen rule definition.

    ``max_params=None`` makes the rule variadic.
    """

    name: str
    check: Check
    min_params: int = 0
    max_params: int | None = 0
    description: str = ""

    def accepts(self, count: int) -> bool:
        """Whether *count* parameters are within this rule's arity."""
        if count < self.min_params:
            return False
        return self.max_params is None or count <= self.max_params

    @property
    def arity(self) -> str:
        """Human-readable parameter count, e.g. ``0``, ``1-2``, ``1+``."""
        if self.max_params is None:
            return f"{self.min_params}+"
        if self.min_params == self.max_params:
            return str(self.min_params)
        return f"{self.min_params}-{self.max_params}"


def rule(
    name: str,
    *,
    min_params: int = 0,
    max_params: int | None = 0,
    description: str = "",
) -> Callable[[Check], RuleDef]:
    """Decorator turning a check function into a ``RuleDef``.

    Usage::

        @rule("slug", description="Lowercase letters, digits and dashes")
        def slug(ctx: RuleContext) -> list[str]:
            if ctx.empty or SLUG_RE.fullmatch(str(ctx.value)):
                return []
            return ["Invalid slug."]

        registry = default_registry().extend(slug)
    """

    def decorator(check: Check) -> RuleDef:
        return RuleDef(
            name=name,
            check=check,
            min_params=min_params,
            max_params=max_params,
            description=description or _first_line(check.__doc__),
        )

    return decorator


def _first_line(doc: str | None) -> str:
    lines = (doc or "").strip().splitlines()
    return lines[0] if lines else ""


class RuleRegistry:
    """Compiled rule table. Immutable once created."""

    __slots__ = ("_rules",)

    def __init__(self, rules: Iterable[RuleDef]) -> None:
        self._rules: dict[str, RuleDef] = {r.name: r for r in rules}

    def get(self, name: str) -> RuleDef | None:
        """Look up a rule by name. Returns ``None`` if not found."""
        return self._rules.get(name)

    def resolve(self, name: str) -> RuleDef:
        """Look up a rule by name, raising ``RuleNotFound`` if missing."""
        rule_def = self._rules.get(name)
        if rule_def is None:
            raise RuleNotFound(name)
        return rule_def

    def dispatch(self, parsed: ParsedRule, ctx: RuleContext) -> list[str]:
        """Resolve *parsed*, check its arity, and run it against *ctx*."""
        rule_def = self.resolve(parsed.name)
        if not rule_def.accepts(len(parsed.params)):
            msg = f"expects {rule_def.arity} parameter(s), got {len(parsed.params)}"
            raise RuleParameterError(parsed.name, msg)
        return list(rule_def.check(ctx))

    def extend(self, *rules: RuleDef) -> RuleRegistry:
        """Return a new registry with *rules* added (or replacing by name)."""
        merged = dict(self._rules)
        for rule_def in rules:
            if rule_def.name in merged:
                logger.debug("Replacing validation rule %r", rule_def.name)
            merged[rule_def.name] = rule_def
        return RuleRegistry(merged.values())

    def names(self) -> list[str]:
        return list(self._rules)

    def rules(self) -> list[RuleDef]:
        return list(self._rules.values())

    def __len__(self) -> int:
        return len(self._rules)

    def __contains__(self, name: object) -> bool:
        return name in self._rules


def compile_rules(rules: Iterable[RuleDef]) -> RuleRegistry:
    """Compile rule definitions into a ``RuleRegistry``.

    Duplicate names are a configuration error, so mistakes surface when the
    registry is built rather than on first use.
    """
    seen: set[str] = set()
    collected: list[RuleDef] = []
    for rule_def in rules:
        if rule_def.name in seen:
            msg = f"Duplicate rule name: {rule_def.name!r}"
            raise ConfigurationError(msg)
        seen.add(rule_def.name)
        collected.append(rule_def)
    return RuleRegistry(collected)


@cache
def default_registry() -> RuleRegistry:
    """The built-in rule catalog, compiled once."""
    from vetter.rules import BUILTIN_RULES

    return compile_rules(BUILTIN_RULES)
