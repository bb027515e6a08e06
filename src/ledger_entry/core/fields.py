"""Typed access into a JSON-like request document.

Probes (`is_string`, `is_integral`, ...) never raise. Conversions
(`as_string`, `as_uint`) follow the permissive coercions of a JSON value
type: null reads as ``""`` or ``0``, scalars are stringified, but containers
cannot be read as scalars and negative or oversized numbers cannot be read as
unsigned. Those cases raise `RequestParseError`.
"""

from __future__ import annotations

from collections.abc import Mapping
import re
import typing

from ledger_entry.core.exceptions import RequestParseError

UINT32_MAX = 0xFFFFFFFF

_DECIMAL = re.compile(r"[0-9]+")


def is_member(obj: typing.Any, name: str) -> bool:
    return isinstance(obj, Mapping) and name in obj


def get(obj: typing.Any, name: str) -> typing.Any:
    """Return ``obj[name]`` or None when absent or when ``obj`` is not an object."""
    if isinstance(obj, Mapping):
        return obj.get(name)
    return None


def is_null(value: typing.Any) -> bool:
    return value is None


def is_object(value: typing.Any) -> bool:
    return isinstance(value, Mapping)


def is_array(value: typing.Any) -> bool:
    return isinstance(value, list | tuple)


def is_string(value: typing.Any) -> bool:
    return isinstance(value, str)


def is_integral(value: typing.Any) -> bool:
    """Integers only; a JSON boolean never counts as a number."""
    return isinstance(value, int) and not isinstance(value, bool)


def is_convertible_to_uint(value: typing.Any) -> bool:
    """True when `as_uint` would succeed without raising."""
    if value is None or isinstance(value, bool):
        return True
    if isinstance(value, int):
        return 0 <= value <= UINT32_MAX
    if isinstance(value, float):
        return value.is_integer() and 0 <= value <= UINT32_MAX
    return False


def as_string(value: typing.Any) -> str:
    if value is None:
        return ""
    if isinstance(value, str):
        return value
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, int | float):
        return str(value)
    raise RequestParseError(f"Type is not convertible to string: {type(value).__name__}")


def as_uint(value: typing.Any) -> int:
    if value is None:
        return 0
    if isinstance(value, bool):
        return int(value)
    if isinstance(value, int):
        if value < 0:
            raise RequestParseError(
                "Negative integer can not be converted to unsigned integer"
            )
        if value > UINT32_MAX:
            raise RequestParseError("Integer out of unsigned integer range")
        return value
    if isinstance(value, float):
        if not (0 <= value <= UINT32_MAX):
            raise RequestParseError("Real out of unsigned integer range")
        return int(value)
    raise RequestParseError(f"Type is not convertible to uint: {type(value).__name__}")


def as_bool(value: typing.Any) -> bool:
    """Truthiness of a JSON value: null, zero, and empty values are False."""
    if value is None:
        return False
    return bool(value)


def parse_uint32(text: str) -> int | None:
    """Parse a plain decimal string within the unsigned 32-bit range."""
    if not _DECIMAL.fullmatch(text) or len(text.lstrip("0")) > 10:
        return None
    number = int(text)
    return number if number <= UINT32_MAX else None
