"""Validator - rule evaluation over a flat field -> value mapping.

Usage::

    from vetter import Validator

    validator = Validator(form).validate({
        "name": ["required", "min:3"],
        "email": ["required", "email"],
        "role": ["in:admin,user"],
        "password": ["required", "password:8,strong", "confirmed"],
    })
    if validator.fails():
        return render("signup.html", errors=validator.errors())

Each field's rules run in declared order and all of them run; a failing
rule never skips the next one. Unknown rules and malformed parameters are
configuration errors and raise instead of producing messages.
"""

import logging
from collections.abc import Mapping, Sequence
from types import MappingProxyType
from typing import Any, Self, TypeAlias

from vetter.config import ValidatorConfig
from vetter.errors import ConfigurationError
from vetter.parser import parse_rule
from vetter.registry import RuleContext, RuleRegistry, default_registry
from vetter.result import ValidationResult

logger = logging.getLogger("vetter.validator")

RuleSet: TypeAlias = Mapping[str, Sequence[str]]


def evaluate(
    data: Mapping[str, Any],
    rules: RuleSet,
    *,
    registry: RuleRegistry | None = None,
    config: ValidatorConfig | None = None,
) -> dict[str, list[str]]:
    """Run every rule against *data* and return the collected messages.

    Args:
        data: Field name -> value. Read, never written.
        rules: Field name -> rule specifications such as ``"min:3"``.
            Fields are visited in mapping order, rules in list order.
        registry: Rule table to dispatch through. Defaults to the
            built-in catalog.
        config: Defaults for rules that take optional parameters.

    Returns:
        Field name -> messages in rule order. Fields with no messages are
        absent.

    Raises:
        RuleNotFound: A rule name is not registered.
        RuleParameterError: A rule got the wrong number or kind of
            parameters.
        ConfigurationError: A field's rules are not a sequence of strings.
    """
    registry = registry if registry is not None else default_registry()
    config = config if config is not None else ValidatorConfig()
    if not isinstance(data, MappingProxyType):
        data = MappingProxyType(dict(data))

    errors: dict[str, list[str]] = {}
    for field_name, specs in rules.items():
        if isinstance(specs, str) or not isinstance(specs, Sequence):
            msg = f"Rules for field {field_name!r} must be a list of strings, got {type(specs).__name__}"
            raise ConfigurationError(msg)

        value = data.get(field_name)
        messages: list[str] = []
        for spec in specs:
            if not isinstance(spec, str):
                msg = f"Rule for field {field_name!r} must be a string, got {spec!r}"
                raise ConfigurationError(msg)
            parsed = parse_rule(spec, json_params=config.json_params)
            ctx = RuleContext(
                field=field_name,
                value=value,
                data=data,
                rule=parsed.name,
                params=parsed.params,
                config=config,
            )
            messages.extend(registry.dispatch(parsed, ctx))

        if messages:
            errors[field_name] = messages

    logger.debug("Validated %d field(s), %d failed", len(rules), len(errors))
    return errors


class Validator:
    """A validation session over one input mapping.

    The input is copied once and exposed read-only. ``validate()`` may be
    called more than once: each call adds its messages to the ones already
    collected (use ``reset()`` to start over). A call that raises leaves the
    collected messages untouched.
    """

    __slots__ = ("_config", "_data", "_errors", "_registry")

    def __init__(
        self,
        data: Mapping[str, Any],
        *,
        registry: RuleRegistry | None = None,
        config: ValidatorConfig | None = None,
    ) -> None:
        self._data: Mapping[str, Any] = MappingProxyType(dict(data))
        self._registry = registry if registry is not None else default_registry()
        self._config = config if config is not None else ValidatorConfig()
        self._errors: dict[str, list[str]] = {}

    @property
    def data(self) -> Mapping[str, Any]:
        return self._data

    def validate(self, rules: RuleSet) -> Self:
        """Evaluate *rules* and add any messages to this session."""
        found = evaluate(self._data, rules, registry=self._registry, config=self._config)
        for field_name, messages in found.items():
            self._errors.setdefault(field_name, []).extend(messages)
        return self

    def fails(self) -> bool:
        return bool(self._errors)

    def passes(self) -> bool:
        return not self._errors

    def errors(self) -> dict[str, list[str]]:
        """Field -> messages collected so far. A fresh copy on every call."""
        return {name: list(messages) for name, messages in self._errors.items()}

    def result(self) -> ValidationResult:
        return ValidationResult(errors=self.errors(), data=self._data)

    def reset(self) -> Self:
        """Forget every collected message."""
        self._errors.clear()
        return self

    def __repr__(self) -> str:
        return f"Validator(fields={len(self._data)}, failed={sorted(self._errors)})"


def validate(
    data: Mapping[str, Any],
    rules: RuleSet,
    *,
    registry: RuleRegistry | None = None,
    config: ValidatorConfig | None = None,
) -> ValidationResult:
    """Validate *data* against *rules* in a fresh session.

    Example::

        result = validate(form, {
            "title": ["required", "max:200"],
            "body": ["required", "min:10"],
        })
        if not result:
            # result.errors == {"body": ["Minimum value is 10."]}
            ...
    """
    return Validator(data, registry=registry, config=config).validate(rules).result()
