import re
import uuid
from typing import Any

_ID_PATTERN = re.compile(r"^[0-9a-f]{32}$")


def generate_id() -> str:
    return uuid.uuid4().hex


def is_valid_id(value: Any) -> bool:
    """True when ``value`` looks like an ID produced by :func:`generate_id`."""
    return isinstance(value, str) and bool(_ID_PATTERN.match(value))


def parse_int_or_fallback(value: Any, fallback: int, minimum: int = 1) -> int:
    """Coerce query input to an int no smaller than ``minimum``.

    Anything unparsable (None, "abc", "2.5") or below the minimum yields the
    fallback instead of failing the request.
    """
    if isinstance(value, bool):
        return fallback
    try:
        parsed = int(str(value).strip())
    except (TypeError, ValueError):
        return fallback
    if parsed < minimum:
        return fallback
    return parsed


def is_blank(*values: Any) -> bool:
    """True if any value is missing or only whitespace."""
    return any(v is None or (isinstance(v, str) and not v.strip()) for v in values)
