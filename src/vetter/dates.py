"""Date helpers for the ``dateValidate``, ``after`` and ``before`` rules.

Formats use PHP-style letters because that is what rule strings are
written in (``dateValidate:d/m/Y``). Supported letters:

=====  ===============================  =====  ===========================
``Y``  4-digit year                     ``H``  hour 00-23
``y``  2-digit year                     ``G``  hour 0-23
``m``  month 01-12                      ``h``  hour 01-12
``n``  month 1-12                       ``g``  hour 1-12
``d``  day 01-31                        ``i``  minutes 00-59
``j``  day 1-31                         ``s``  seconds 00-59
``D``  Mon-Sun                          ``A``  AM/PM
``l``  Monday-Sunday                    ``a``  am/pm
``M``  Jan-Dec                          ``F``  January-December
=====  ===============================  =====  ===========================

A backslash makes the next character literal; every other character is
literal as-is.
"""

import re
from collections.abc import Callable
from datetime import date, datetime, time, timedelta
from functools import lru_cache

_DAY_NAMES = ("Monday", "Tuesday", "Wednesday", "Thursday", "Friday", "Saturday", "Sunday")
_MONTH_NAMES = (
    "January",
    "February",
    "March",
    "April",
    "May",
    "June",
    "July",
    "August",
    "September",
    "October",
    "November",
    "December",
)

# letter -> (strptime directive, formatter)
_TOKENS: dict[str, tuple[str, Callable[[datetime], str]]] = {
    "Y": ("%Y", lambda dt: f"{dt.year:04d}"),
    "y": ("%y", lambda dt: f"{dt.year % 100:02d}"),
    "m": ("%m", lambda dt: f"{dt.month:02d}"),
    "n": ("%m", lambda dt: str(dt.month)),
    "d": ("%d", lambda dt: f"{dt.day:02d}"),
    "j": ("%d", lambda dt: str(dt.day)),
    "H": ("%H", lambda dt: f"{dt.hour:02d}"),
    "G": ("%H", lambda dt: str(dt.hour)),
    "h": ("%I", lambda dt: f"{(dt.hour % 12) or 12:02d}"),
    "g": ("%I", lambda dt: str((dt.hour % 12) or 12)),
    "i": ("%M", lambda dt: f"{dt.minute:02d}"),
    "s": ("%S", lambda dt: f"{dt.second:02d}"),
    "A": ("%p", lambda dt: "AM" if dt.hour < 12 else "PM"),
    "a": ("%p", lambda dt: "am" if dt.hour < 12 else "pm"),
    "D": ("%a", lambda dt: _DAY_NAMES[dt.weekday()][:3]),
    "l": ("%A", lambda dt: _DAY_NAMES[dt.weekday()]),
    "M": ("%b", lambda dt: _MONTH_NAMES[dt.month - 1][:3]),
    "F": ("%B", lambda dt: _MONTH_NAMES[dt.month - 1]),
}


@lru_cache(maxsize=128)
def _compile(fmt: str) -> tuple[str, tuple[tuple[bool, str], ...]]:
    """Split *fmt* into a strptime pattern and a token list.

    Tokens are ``(is_letter, text)`` pairs used to format the parsed value
    back.
    """
    pattern: list[str] = []
    tokens: list[tuple[bool, str]] = []
    chars = iter(fmt)
    for char in chars:
        if char == "\\":
            literal = next(chars, "\\")
            pattern.append(literal.replace("%", "%%"))
            tokens.append((False, literal))
        elif char in _TOKENS:
            pattern.append(_TOKENS[char][0])
            tokens.append((True, char))
        else:
            pattern.append(char.replace("%", "%%"))
            tokens.append((False, char))
    return "".join(pattern), tuple(tokens)


def format_date(value: datetime, fmt: str) -> str:
    """Render *value* with a PHP-style format string."""
    _, tokens = _compile(fmt)
    return "".join(_TOKENS[text][1](value) if is_letter else text for is_letter, text in tokens)


def parse_strict(value: str, fmt: str) -> datetime | None:
    """Parse *value* with *fmt*, requiring an exact round trip.

    Returns ``None`` when the value does not parse, names an impossible
    calendar date (``2023-02-30``), or does not format back to exactly the
    same string (``2025-1-4`` against ``Y-m-d``).
    """
    pattern, _ = _compile(fmt)
    try:
        parsed = datetime.strptime(value, pattern)
    except ValueError:
        return None
    if format_date(parsed, fmt) != value:
        return None
    return parsed


# ---------------------------------------------------------------------------
# Free-form reference dates (after/before)
# ---------------------------------------------------------------------------

_RELATIVE_DAYS = {"yesterday": -1, "today": 0, "tomorrow": 1}

# Tried in order after ISO-8601. Slashes read month first and dots/dashes
# read day first, matching the usual conventions for those separators.
_FALLBACK_FORMATS = (
    "%Y/%m/%d",
    "%Y/%m/%d %H:%M",
    "%Y/%m/%d %H:%M:%S",
    "%m/%d/%Y",
    "%d.%m.%Y",
    "%d-%m-%Y",
    "%d %B %Y",
    "%d %b %Y",
    "%B %d, %Y",
    "%b %d, %Y",
    "%B %d %Y",
    "%b %d %Y",
)

_WHITESPACE_RE = re.compile(r"\s+")


def parse_datetime(value: object, clock: Callable[[], datetime] = datetime.now) -> datetime | None:
    """Parse a date reference into a naive local ``datetime``.

    Accepts ``datetime``/``date`` instances, the keywords ``now``, ``today``,
    ``tomorrow`` and ``yesterday`` (resolved against *clock*), ISO-8601
    strings, and a few common written forms. Aware datetimes are converted
    to local time. Returns ``None`` when nothing matches.
    """
    if isinstance(value, datetime):
        return _naive(value)
    if isinstance(value, date):
        return datetime.combine(value, time.min)
    if not isinstance(value, str):
        return None

    text = _WHITESPACE_RE.sub(" ", value.strip())
    if not text:
        return None

    keyword = text.lower()
    if keyword == "now":
        return _naive(clock())
    if keyword in _RELATIVE_DAYS:
        midnight = datetime.combine(_naive(clock()).date(), time.min)
        return midnight + timedelta(days=_RELATIVE_DAYS[keyword])

    try:
        return _naive(datetime.fromisoformat(text))
    except ValueError:
        pass

    for fmt in _FALLBACK_FORMATS:
        try:
            return datetime.strptime(text, fmt)
        except ValueError:
            continue
    return None


def _naive(value: datetime) -> datetime:
    if value.tzinfo is None:
        return value
    return value.astimezone().replace(tzinfo=None)
