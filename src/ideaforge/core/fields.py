"""Ordered candidate resolution over untyped JSON mappings.

A candidate is an extractor: a callable taking the payload and returning a
value or ``None``. Resolvers walk a candidate list in priority order and keep
the first value their coercion accepts, so field-priority policy lives in
plain lists that can be tested on their own.
"""

from __future__ import annotations

import math
from collections.abc import Callable, Iterable, Mapping
from typing import Any

Candidate = Callable[[Any], Any]

_NESTED_NUMBER_KEYS = ("total", "value", "amount")


def path(*keys: str) -> Candidate:
    """Extractor following ``keys`` through nested mappings."""

    def extract(payload: Any) -> Any:
        current = payload
        for k in keys:
            if not isinstance(current, Mapping):
                return None
            current = current.get(k)
        return current

    extract.__name__ = ".".join(keys)
    return extract


def key(name: str) -> Candidate:
    """Extractor for a top-level field."""
    return path(name)


def candidates(*dotted: str) -> list[Candidate]:
    """Build extractors from dotted names: ``"user.name"`` -> ``path("user", "name")``."""
    return [path(*name.split(".")) for name in dotted]


def stringify(value: Any) -> str:
    """Render a JSON value as text; ``None`` becomes the empty string."""
    if value is None:
        return ""
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    try:
        return str(value)
    except ValueError:
        # ints past the interpreter's digit limit
        return ""


def _resolve(payload: Any, extractors: Iterable[Candidate], coerce: Callable[[Any], Any]) -> Any:
    for extract in extractors:
        value = coerce(extract(payload))
        if value is not None:
            return value
    return None


def _present(value: Any) -> Any:
    if isinstance(value, str):
        return value.strip() or None
    return value


def _finite(value: int | float) -> float | int | None:
    # ints too large for a float are rejected along with inf and nan
    try:
        return value if math.isfinite(float(value)) else None
    except OverflowError:
        return None


def _as_number(value: Any) -> float | int | None:
    if isinstance(value, bool):
        return None
    if isinstance(value, int | float):
        return _finite(value)
    if isinstance(value, str):
        return parse_number(value)
    if isinstance(value, Mapping):
        for name in _NESTED_NUMBER_KEYS:
            entry = value.get(name)
            if isinstance(entry, bool) or not isinstance(entry, int | float):
                continue
            number = _finite(entry)
            if number is not None:
                return number
    return None


def parse_number(text: str) -> float | int | None:
    """Numeric strings only; blank, non-numeric and non-finite yield None."""
    stripped = text.strip()
    if not stripped or "_" in stripped:
        return None
    try:
        return _finite(int(stripped))
    except ValueError:
        pass
    try:
        return _finite(float(stripped))
    except ValueError:
        return None


def _as_text(value: Any) -> str | None:
    if isinstance(value, str):
        return value.strip() or None
    if isinstance(value, bool | int | float):
        return stringify(value)
    return None


def _as_string(value: Any) -> str | None:
    if isinstance(value, str):
        return value.strip() or None
    return None


def first_present(payload: Any, extractors: Iterable[Candidate]) -> Any:
    """First non-None value; strings must be non-blank and come back trimmed."""
    return _resolve(payload, extractors, _present)


def first_number(payload: Any, extractors: Iterable[Candidate]) -> float | int | None:
    """First finite number, numeric string, or mapping with total/value/amount."""
    return _resolve(payload, extractors, _as_number)


def first_text(payload: Any, extractors: Iterable[Candidate]) -> str | None:
    """First non-blank string, or a number/boolean rendered as text."""
    return _resolve(payload, extractors, _as_text)


def first_string(payload: Any, extractors: Iterable[Candidate]) -> str | None:
    """First non-blank string; other types are skipped."""
    return _resolve(payload, extractors, _as_string)
