"""Vetter - declarative field validation with textual rules.

Rules are short strings applied to a flat field -> value mapping; failures
come back as human-readable messages, never as exceptions.

Basic usage::

    from vetter import Validator

    validator = Validator({"name": "", "role": "guest"})
    validator.validate({
        "name": ["required", "min:3"],
        "role": ["in:admin,user"],
    })
    validator.fails()   # True
    validator.errors()  # {"name": ["The name field is required."],
                        #  "role": ["Invalid value selected."]}

Custom rules (see ``vetter.registry.rule``)::

    from vetter import Validator, default_registry, rule

    @rule("even")
    def even(ctx):
        return [] if ctx.empty or int(ctx.value) % 2 == 0 else ["Must be even."]

    Validator(data, registry=default_registry().extend(even))
"""

__version__ = "0.1.0"
__all__ = [
    "ConfigurationError",
    "ParsedRule",
    "RuleContext",
    "RuleDef",
    "RuleNotFound",
    "RuleParameterError",
    "RuleRegistry",
    "ValidationResult",
    "Validator",
    "ValidatorConfig",
    "VetterError",
    "compile_rules",
    "default_registry",
    "evaluate",
    "parse_rule",
    "rule",
    "validate",
]


# Public name -> defining module
_LAZY_IMPORTS: dict[str, str] = {
    "ConfigurationError": "vetter.errors",
    "ParsedRule": "vetter.parser",
    "RuleContext": "vetter.registry",
    "RuleDef": "vetter.registry",
    "RuleNotFound": "vetter.errors",
    "RuleParameterError": "vetter.errors",
    "RuleRegistry": "vetter.registry",
    "ValidationResult": "vetter.result",
    "Validator": "vetter.validator",
    "ValidatorConfig": "vetter.config",
    "VetterError": "vetter.errors",
    "compile_rules": "vetter.registry",
    "default_registry": "vetter.registry",
    "evaluate": "vetter.validator",
    "parse_rule": "vetter.parser",
    "rule": "vetter.registry",
    "validate": "vetter.validator",
}


def __getattr__(name: str) -> object:
    """Lazy imports for public API.

    Keeps ``import vetter`` fast while providing a clean top-level API.
    """
    module_path = _LAZY_IMPORTS.get(name)
    if module_path is None:
        msg = f"module {__name__!r} has no attribute {name!r}"
        raise AttributeError(msg)

    from importlib import import_module

    return getattr(import_module(module_path), name)
