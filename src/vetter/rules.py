"""Built-in validation rules.

Each rule is a ``RuleDef`` wrapping a check with the signature::

    def check(ctx: RuleContext) -> list[str]:
        '''Return error messages in order; [] if valid.'''

Every rule except ``required`` and ``confirmed`` passes on an empty value
(absent, ``None`` or ``""``). Pair a rule with ``required`` to make the
field mandatory.

Custom rules follow the same protocol and are added with
``default_registry().extend(...)``.
"""

import json
import math
import re
from datetime import datetime
from functools import lru_cache
from urllib.parse import urlsplit

from email_validator import EmailNotValidError, validate_email

from vetter.dates import parse_datetime, parse_strict
from vetter.errors import RuleParameterError
from vetter.registry import RuleContext, RuleDef, rule

# ---------------------------------------------------------------------------
# Presence
# ---------------------------------------------------------------------------


@rule("required", description="Present and not blank")
def required(ctx: RuleContext) -> list[str]:
    value = ctx.value
    if value is None or value is False:
        missing = True
    elif isinstance(value, str):
        missing = value.strip() == ""
    elif isinstance(value, list | tuple | dict | set | frozenset):
        missing = len(value) == 0
    else:
        missing = False
    if missing:
        return [f"The {ctx.field} field is required."]
    return []


# ---------------------------------------------------------------------------
# Format
# ---------------------------------------------------------------------------


@rule("email", description="Syntactically valid email address")
def email(ctx: RuleContext) -> list[str]:
    if ctx.empty:
        return []
    if isinstance(ctx.value, str):
        try:
            validate_email(ctx.value, check_deliverability=False, allow_smtputf8=False)
        except EmailNotValidError:
            pass
        else:
            return []
    return ["Invalid email format."]


_PASSWORD_CLASSES = (
    (re.compile(r"[a-z]"), "a lowercase letter"),
    (re.compile(r"[A-Z]"), "an uppercase letter"),
    (re.compile(r"[0-9]"), "a number"),
    (re.compile(r"[^a-zA-Z0-9]"), "a special character"),
)
_STRENGTHS = frozenset({"weak", "strong"})


@rule("password", max_params=2, description="Minimum length, optionally all character classes")
def password(ctx: RuleContext) -> list[str]:
    """Length check plus, for ``strong``, one message per missing class."""
    min_length = ctx.int_param(0, "minLength", ctx.config.password_min_length)
    strength = ctx.param(1, ctx.config.password_strength).strip()
    if strength not in _STRENGTHS:
        msg = f"strength must be 'weak' or 'strong', got {strength!r}"
        raise RuleParameterError(ctx.rule, msg)

    if ctx.empty:
        return []

    value = str(ctx.value)
    errors: list[str] = []
    if len(value) < min_length:
        errors.append(f"Password must be at least {min_length} characters.")
    if strength == "strong":
        for pattern, label in _PASSWORD_CLASSES:
            if not pattern.search(value):
                errors.append(f"Password must contain {label}.")
    return errors


_NON_DIGIT_RE = re.compile(r"\D")


@rule("phone", min_params=2, max_params=2, description="Digit count within [min, max]")
def phone(ctx: RuleContext) -> list[str]:
    low = ctx.int_param(0, "min")
    high = ctx.int_param(1, "max")
    if ctx.empty:
        return []
    digits = _NON_DIGIT_RE.sub("", str(ctx.value))
    if low <= len(digits) <= high:
        return []
    return [f"Phone number must be between {low} and {high} digits."]


@rule("regex", min_params=1, max_params=1, description="Matches a delimited pattern")
def regex(ctx: RuleContext) -> list[str]:
    pattern = compile_delimited(ctx.rule, ctx.param(0))
    if ctx.empty:
        return []
    text = _scalar_text(ctx.value)
    if text is not None and pattern.search(text):
        return []
    return ["Invalid format."]


_URL_SCHEME_RE = re.compile(r"^[A-Za-z][A-Za-z0-9+.\-]*$")
_HOST_LABEL_RE = re.compile(r"^(?!-)[A-Za-z0-9\-_]{1,63}(?<!-)$")
_HOST_SCHEMES = frozenset({"http", "https", "ftp", "ftps", "ws", "wss"})


@rule("url", description="Syntactically valid URL")
def url(ctx: RuleContext) -> list[str]:
    if ctx.empty:
        return []
    if isinstance(ctx.value, str) and _is_url(ctx.value):
        return []
    return ["Invalid URL."]


def _is_url(value: str) -> bool:
    if not value.isascii() or any(ch.isspace() for ch in value):
        return False
    try:
        parts = urlsplit(value)
        parts.port  # noqa: B018 - raises ValueError for a malformed port
    except ValueError:
        return False
    if not parts.scheme or not _URL_SCHEME_RE.match(parts.scheme):
        return False
    if parts.scheme.lower() in _HOST_SCHEMES:
        return _is_host(parts.hostname or "")
    return bool(parts.netloc or parts.path)


def _is_host(host: str) -> bool:
    if host.startswith("[") or ":" in host:
        # IPv6 literal; urlsplit already validated the brackets
        return True
    if not host or len(host) > 253:
        return False
    return all(_HOST_LABEL_RE.match(label) for label in host.rstrip(".").split("."))


def _reject_constant(name: str) -> object:
    msg = f"{name} is not valid JSON"
    raise ValueError(msg)


@rule("json", description="Valid JSON text")
def json_(ctx: RuleContext) -> list[str]:
    if ctx.empty:
        return []
    text = _scalar_text(ctx.value)
    if text is not None:
        try:
            json.loads(text, parse_constant=_reject_constant)
        except ValueError:
            pass
        else:
            return []
    return ["Invalid JSON string."]


# ---------------------------------------------------------------------------
# Dates
# ---------------------------------------------------------------------------


@rule("dateValidate", max_params=1, description="Real calendar date in the given format")
def date_validate(ctx: RuleContext) -> list[str]:
    fmt = ctx.param(0, ctx.config.date_format)
    if ctx.empty:
        return []
    if isinstance(ctx.value, str) and parse_strict(ctx.value, fmt) is not None:
        return []
    return ["Invalid date format."]


@rule("after", min_params=1, max_params=1, description="Not earlier than a date or 'today'")
def after(ctx: RuleContext) -> list[str]:
    reference = _reference_date(ctx)
    if ctx.empty:
        return []
    value = parse_datetime(ctx.value, ctx.config.clock)
    if value is not None and value >= reference:
        return []
    return [f"Date must be after {ctx.param(0)}."]


@rule("before", min_params=1, max_params=1, description="Not later than a date")
def before(ctx: RuleContext) -> list[str]:
    reference = _reference_date(ctx)
    if ctx.empty:
        return []
    value = parse_datetime(ctx.value, ctx.config.clock)
    if value is not None and value <= reference:
        return []
    return [f"Date must be before {ctx.param(0)}."]


def _reference_date(ctx: RuleContext) -> datetime:
    reference = parse_datetime(ctx.param(0), ctx.config.clock)
    if reference is None:
        msg = f"cannot parse reference date {ctx.param(0)!r}"
        raise RuleParameterError(ctx.rule, msg)
    return reference


# ---------------------------------------------------------------------------
# Types
# ---------------------------------------------------------------------------

_NUMERIC_RE = re.compile(r"^\s*[+-]?(\d+(\.\d*)?|\.\d+)([eE][+-]?\d+)?\s*$")
_INTEGER_RE = re.compile(r"^[+-]?(0|[1-9]\d*)$")


@rule("string", description="A string")
def string(ctx: RuleContext) -> list[str]:
    if ctx.empty or isinstance(ctx.value, str):
        return []
    return [f"The {ctx.field} must be a string."]


@rule("numeric", description="A number or numeric string")
def numeric(ctx: RuleContext) -> list[str]:
    if ctx.empty or is_numeric(ctx.value):
        return []
    return [f"The {ctx.field} must be numeric."]


@rule("integer", description="A whole number or integer string")
def integer(ctx: RuleContext) -> list[str]:
    if ctx.empty or _is_integer(ctx.value):
        return []
    return [f"The {ctx.field} must be an integer."]


@rule("boolean", description="One of true, false, 1, 0, '1', '0'")
def boolean(ctx: RuleContext) -> list[str]:
    if ctx.empty or _is_boolean(ctx.value):
        return []
    return [f"The {ctx.field} must be a boolean."]


def is_numeric(value: object) -> bool:
    """Native int/float (bool excluded) or a numeric string like ``" -1.5e3"``."""
    if isinstance(value, bool):
        return False
    if isinstance(value, int | float):
        return True
    return isinstance(value, str) and _NUMERIC_RE.match(value) is not None


def _is_integer(value: object) -> bool:
    if isinstance(value, bool):
        return False
    if isinstance(value, int):
        return True
    if isinstance(value, float):
        return math.isfinite(value) and value.is_integer()
    return isinstance(value, str) and _INTEGER_RE.match(value.strip()) is not None


def _is_boolean(value: object) -> bool:
    # Type-exact: 1.0 and "true" are rejected
    if type(value) is bool:
        return True
    if type(value) is int:
        return value in (0, 1)
    return isinstance(value, str) and value in ("0", "1")


# ---------------------------------------------------------------------------
# Size
# ---------------------------------------------------------------------------


def _sizes(ctx: RuleContext) -> tuple[float, ...]:
    """Every measure the value must satisfy.

    Strings are measured by character count. A numeric string is also
    measured by its value, so ``"1000"`` has to pass both checks. Native
    numbers are measured by value. Empty values and other kinds yield nothing.
    """
    value = ctx.value
    if ctx.empty or isinstance(value, bool):
        return ()
    if isinstance(value, str):
        if is_numeric(value):
            return (len(value), float(value))
        return (len(value),)
    if isinstance(value, int | float):
        return (value,)
    return ()


@rule("min", min_params=1, max_params=1, description="Length or value at least min")
def min_(ctx: RuleContext) -> list[str]:
    low = ctx.int_param(0, "min")
    if any(size < low for size in _sizes(ctx)):
        return [f"Minimum value is {low}."]
    return []


@rule("max", min_params=1, max_params=1, description="Length or value at most max")
def max_(ctx: RuleContext) -> list[str]:
    high = ctx.int_param(0, "max")
    if any(size > high for size in _sizes(ctx)):
        return [f"Maximum value is {high}."]
    return []


@rule("between", min_params=2, max_params=2, description="Length or value within [min, max]")
def between(ctx: RuleContext) -> list[str]:
    low = ctx.int_param(0, "min")
    high = ctx.int_param(1, "max")
    if any(not low <= size <= high for size in _sizes(ctx)):
        return [f"Must be between {low} and {high}."]
    return []


# ---------------------------------------------------------------------------
# Choice & cross-field
# ---------------------------------------------------------------------------


@rule("in", min_params=1, max_params=None, description="Exactly one of the listed values")
def in_(ctx: RuleContext) -> list[str]:
    if ctx.empty:
        return []
    # Strict: the native 1 does not match the parameter "1"
    if isinstance(ctx.value, str) and ctx.value in ctx.params:
        return []
    return ["Invalid value selected."]


@rule("confirmed", description="Equal to the <field>_confirmation field")
def confirmed(ctx: RuleContext) -> list[str]:
    other = ctx.data.get(ctx.field + ctx.config.confirmation_suffix)
    if _strict_equal(ctx.value, other):
        return []
    return ["Confirmation does not match."]


def _strict_equal(left: object, right: object) -> bool:
    return type(left) is type(right) and left == right


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

_FLAGS = {"i": re.IGNORECASE, "m": re.MULTILINE, "s": re.DOTALL, "x": re.VERBOSE, "u": 0}
_BRACKETS = {"(": ")", "[": "]", "{": "}", "<": ">"}


def compile_delimited(rule_name: str, spec: str) -> re.Pattern[str]:
    """Compile a ``/pattern/flags`` style regex.

    Any non-alphanumeric, non-backslash, non-whitespace character may be the
    delimiter, and ``()``, ``[]``, ``{}``, ``<>`` may be used as pairs.
    """
    spec = spec.strip()
    if len(spec) < 2 or spec[0].isalnum() or spec[0] == "\\" or spec[0].isspace():
        msg = f"pattern {spec!r} must be wrapped in delimiters, e.g. /^[a-z]+$/"
        raise RuleParameterError(rule_name, msg)

    closing = _BRACKETS.get(spec[0], spec[0])
    end = spec.rfind(closing)
    if end <= 0:
        msg = f"pattern {spec!r} has no closing delimiter {closing!r}"
        raise RuleParameterError(rule_name, msg)

    body, modifiers = spec[1:end], spec[end + 1 :]
    flags = 0
    for modifier in modifiers:
        if modifier not in _FLAGS:
            msg = f"unknown pattern modifier {modifier!r}"
            raise RuleParameterError(rule_name, msg)
        flags |= _FLAGS[modifier]
    try:
        return _compile_pattern(body, flags)
    except re.error as exc:
        msg = f"invalid pattern {body!r}: {exc}"
        raise RuleParameterError(rule_name, msg) from exc


@lru_cache(maxsize=256)
def _compile_pattern(body: str, flags: int) -> re.Pattern[str]:
    return re.compile(body, flags)


def _scalar_text(value: object) -> str | None:
    """Text form of a scalar, ``None`` for containers and other objects."""
    if isinstance(value, str):
        return value
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, int | float):
        return repr(value) if isinstance(value, float) else str(value)
    return None


BUILTIN_RULES: tuple[RuleDef, ...] = (
    required,
    email,
    password,
    phone,
    date_validate,
    after,
    before,
    string,
    numeric,
    integer,
    boolean,
    min_,
    max_,
    between,
    in_,
    confirmed,
    regex,
    url,
    json_,
)
