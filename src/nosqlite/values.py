"""
Canonical Scalar Codec

Every value is persisted as TEXT. Each scalar type has one canonical string
form, and each encoder here has a decoder that is its exact inverse:

- int:      decimal digits, optional leading minus ("42", "-7")
- float:    Python's shortest round-trip repr ("123.45", "1e+20")
- bool:     "1" / "0"
- datetime: "YYYY-MM-DD HH:MM:SS", 24-hour, zero padded
- str:      stored verbatim
"""

import math
import re
from datetime import date, datetime, time, timedelta, timezone
from typing import Optional, Union

from nosqlite.exceptions import DateParseError, InvalidValueError

Scalar = Union[str, bool, int, float, datetime, date]

DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

TRUE_TEXT = "1"
FALSE_TEXT = "0"

# ASCII decimal notation only; int() and float() also accept "1_000" and
# non-ASCII digits
_NUMERIC_RE = re.compile(r"^\s*[+-]?(\d+(\.\d*)?|\.\d+)([eE][+-]?\d+)?\s*$", re.ASCII)
_INTEGER_RE = re.compile(r"^\s*[+-]?\d+\s*$", re.ASCII)

# Layouts tried after ISO 8601, in order
_DATE_LAYOUTS = (
    "%Y/%m/%d %H:%M:%S",
    "%Y/%m/%d %H:%M",
    "%Y/%m/%d",
    "%m/%d/%Y %H:%M:%S",
    "%m/%d/%Y %H:%M",
    "%m/%d/%Y",
    "%d.%m.%Y %H:%M:%S",
    "%d.%m.%Y",
    "%d %B %Y %H:%M:%S",
    "%d %B %Y",
    "%d %b %Y %H:%M:%S",
    "%d %b %Y",
    "%B %d, %Y %H:%M:%S",
    "%B %d, %Y",
    "%b %d, %Y %H:%M:%S",
    "%b %d, %Y",
)

# Relative keywords, as day offsets from today's midnight ("now" is special-cased)
_DATE_KEYWORDS = {
    "today": 0,
    "yesterday": -1,
    "tomorrow": 1,
}


def is_scalar(value: object) -> bool:
    """True for the value types set() accepts."""
    return isinstance(value, (str, bool, int, float, datetime, date))


def encode(value: Scalar) -> str:
    """
    Convert any accepted scalar to its canonical string form.

    Raises:
        InvalidValueError: for None, containers, bytes and arbitrary objects
    """
    # bool before int: bool is an int subclass
    if isinstance(value, bool):
        return encode_bool(value)
    if isinstance(value, int):
        return encode_int(value)
    if isinstance(value, float):
        return encode_float(value)
    if isinstance(value, str):
        return str(value)
    if isinstance(value, (datetime, date)):
        return encode_date(value)
    raise InvalidValueError(
        f"Only scalar values can be stored, got {type(value).__name__}"
    )


# ========== INTEGER ==========

def encode_int(value: int) -> str:
    return str(int(value))


def decode_int(text: str) -> int:
    """Inverse of encode_int(); only the canonical form is accepted."""
    try:
        number = int(text, 10)
    except (TypeError, ValueError):
        raise InvalidValueError(f"Stored value {text!r} is not an integer")
    if encode_int(number) != text:
        raise InvalidValueError(f"Stored value {text!r} is not a canonical integer")
    return number


def to_integer(text: Optional[str]) -> Optional[int]:
    """
    Numeric text to int, truncating toward zero; None if not numeric.

    Numeric means ASCII decimal notation with optional sign, fraction,
    exponent and surrounding whitespace ("12", " 7 ", "3.9", "1e3"), and a
    finite value. Underscore separators and non-ASCII digits are not numeric.
    """
    if not text or not _NUMERIC_RE.match(text):
        return None
    if _INTEGER_RE.match(text):
        return int(text.strip(), 10)
    number = float(text)
    if not math.isfinite(number):
        return None
    return int(number)


# ========== FLOAT ==========

def encode_float(value: float) -> str:
    return repr(float(value))


def decode_float(text: str) -> float:
    """Inverse of encode_float(); only the canonical repr is accepted."""
    try:
        number = float(text)
    except (TypeError, ValueError):
        raise InvalidValueError(f"Stored value {text!r} is not a float")
    if encode_float(number) != text:
        raise InvalidValueError(f"Stored value {text!r} is not a canonical float")
    return number


# ========== BOOLEAN ==========

def encode_bool(value: bool) -> str:
    return TRUE_TEXT if value else FALSE_TEXT


def decode_bool(text: Optional[str]) -> bool:
    """None, "" and "0" are false; every other string is true."""
    return text not in (None, "", FALSE_TEXT)


# ========== DATE/TIME ==========

def encode_date(value: Union[datetime, date]) -> str:
    """
    Format a date or datetime canonically.

    A plain date is taken as midnight. Aware datetimes keep their wall-clock
    time; the offset is dropped.
    """
    if not isinstance(value, datetime):
        value = datetime.combine(value, time())
    # strftime does not zero-pad years below 1000 on every platform
    return (
        f"{value.year:04d}-{value.month:02d}-{value.day:02d} "
        f"{value.hour:02d}:{value.minute:02d}:{value.second:02d}"
    )


def decode_date(text: str) -> datetime:
    """Inverse of encode_date(); fields must be zero padded."""
    try:
        moment = datetime.strptime(text, DATE_FORMAT)
    except (TypeError, ValueError):
        raise InvalidValueError(f"Stored value {text!r} is not a date/time")
    if encode_date(moment) != text:
        raise InvalidValueError(f"Stored value {text!r} is not a canonical date/time")
    return moment


def parse_date(text: str) -> datetime:
    """
    Parse a date/time string in one of several common formats.

    Tried in order: the keywords now/today/yesterday/tomorrow, "@<unix
    seconds>" (UTC), ISO 8601, then the layouts in _DATE_LAYOUTS.

    Raises:
        DateParseError: if no format matches
    """
    candidate = text.strip()
    lowered = candidate.lower()

    if lowered == "now":
        return datetime.now().replace(microsecond=0)
    if lowered in _DATE_KEYWORDS:
        midnight = datetime.combine(date.today(), time())
        return midnight + timedelta(days=_DATE_KEYWORDS[lowered])

    if candidate.startswith("@"):
        try:
            seconds = float(candidate[1:])
            return datetime.fromtimestamp(seconds, tz=timezone.utc).replace(tzinfo=None)
        except (ValueError, OverflowError, OSError):
            raise DateParseError(text)

    try:
        return datetime.fromisoformat(candidate.replace("Z", "+00:00"))
    except ValueError:
        pass

    for layout in _DATE_LAYOUTS:
        try:
            return datetime.strptime(candidate, layout)
        except ValueError:
            continue

    raise DateParseError(text)
