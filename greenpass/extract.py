"""
Strict extraction from decoded CBOR maps.

Every extractor removes the key it reads, so that once an entity has taken
all of its fields, ``ensure_consumed`` can reject anything left behind.
"""

import logging
import re
from collections.abc import Mapping
from datetime import date, datetime
from typing import Any, Callable, Dict, List, Optional, TypeVar

from .errors import (
    InvalidFormatError,
    MalformedDateError,
    MalformedStringMapError,
    MissingKeyError,
    SpuriousDataError,
)

logger = logging.getLogger(__name__)

T = TypeVar("T")

StrMap = Dict[str, Any]

DATE_RE = re.compile(r"[0-9]{4}-[0-9]{2}-[0-9]{2}")

# Tried in order, first match wins. %z takes "Z", "+0100" and "+01:00";
# _normalize_isodatetime widens "+01" and trims sub-microsecond digits first.
DATETIME_FORMATS = (
    "%Y-%m-%dT%H:%M:%S%z",
    "%Y-%m-%dT%H:%M:%S.%f%z",
)

DATETIME_PARTS_RE = re.compile(
    r"(?P<base>[0-9]{4}-[0-9]{2}-[0-9]{2}T[0-9]{2}:[0-9]{2}:[0-9]{2})"
    r"(?:\.(?P<frac>[0-9]+))?"
    r"(?P<offset>Z|[+-][0-9]{2}(?::?[0-9]{2})?)"
)


def extract_key(m: StrMap, k: str) -> Any:
    try:
        return m.pop(k)
    except KeyError:
        raise MissingKeyError(k) from None


def _extract_typed(m: StrMap, k: str, check: Callable[[Any], bool]) -> Any:
    value = extract_key(m, k)
    if not check(value):
        raise InvalidFormatError(k)
    return value


def extract_string(m: StrMap, k: str) -> str:
    return _extract_typed(m, k, lambda v: isinstance(v, str))


def extract_int(m: StrMap, k: str) -> int:
    # bool is an int subclass, but CBOR true/false are not integers
    return _extract_typed(m, k, lambda v: isinstance(v, int) and not isinstance(v, bool))


def extract_array(m: StrMap, k: str) -> List[Any]:
    return list(_extract_typed(m, k, lambda v: isinstance(v, (list, tuple))))


def extract_string_map(m: StrMap, k: str) -> StrMap:
    return to_strmap(k, extract_key(m, k))


def extract_optional(extractor: Callable[[StrMap, str], T], m: StrMap, k: str) -> Optional[T]:
    """
    Try one of several mutually exclusive alternatives.

    Returns ``None`` when ``k`` is absent or holds a value of the wrong type,
    so the caller moves on to the next alternative. The key is removed from
    ``m`` either way.
    """
    if k not in m:
        return None
    try:
        return extractor(m, k)
    except InvalidFormatError:
        logger.debug(f"[hcert] Dropping alternative {k!r} with unexpected type")
        return None


def parse_date(raw: str) -> date:
    if not DATE_RE.fullmatch(raw):
        raise MalformedDateError(raw)
    try:
        return datetime.strptime(raw, "%Y-%m-%d").date()
    except ValueError:
        raise MalformedDateError(raw) from None


def _normalize_isodatetime(raw: str) -> str:
    parts = DATETIME_PARTS_RE.fullmatch(raw)
    if not parts:
        return raw

    out = parts["base"]
    if parts["frac"] is not None:
        out += "." + parts["frac"][:6]
    offset = parts["offset"]
    if len(offset) == 3:
        offset += "00"
    return out + offset


def parse_isodatetime(raw: str) -> datetime:
    text = _normalize_isodatetime(raw)
    for fmt in DATETIME_FORMATS:
        try:
            return datetime.strptime(text, fmt)
        except ValueError:
            continue
    raise MalformedDateError(raw)


def extract_date(m: StrMap, k: str) -> date:
    return parse_date(extract_string(m, k))


def extract_isodatetime(m: StrMap, k: str) -> datetime:
    return parse_isodatetime(extract_string(m, k))


def to_strmap(desc: str, value: Any) -> StrMap:
    """Copy a decoded CBOR map into a fresh dict keyed by text only."""
    if not isinstance(value, Mapping):
        raise InvalidFormatError(desc)

    out = {}
    for k, v in value.items():
        if not isinstance(k, str):
            raise MalformedStringMapError(k)
        out[k] = v
    return out


def ensure_consumed(m: StrMap) -> None:
    if m:
        raise SpuriousDataError(m)
