"""Timestamp parsing for loosely typed server payloads.

Upstream services mix epoch numbers (seconds or milliseconds), ISO strings
with and without offsets, and bare dates. Only the formats enumerated here
are accepted; anything else becomes the Unix epoch so that callers always get
an aware ``datetime``.
"""

from __future__ import annotations

import logging
import math
import re
from datetime import UTC, date, datetime, timedelta, timezone
from email.utils import parsedate_to_datetime

from ideaforge.models.idea import EPOCH

logger = logging.getLogger(__name__)

# Numbers below this are epoch seconds, at or above it epoch milliseconds.
MILLIS_THRESHOLD = 1e12

_BARE_DATE = re.compile(r"^(\d{4})-(\d{2})-(\d{2})$")
_DATE_TIME = re.compile(
    r"^(?P<date>\d{4}-\d{2}-\d{2})[T ]"
    r"(?P<hour>\d{1,2}):(?P<minute>\d{2})"
    r"(?::(?P<second>\d{2})(?:\.(?P<fraction>\d+))?)?"
    r"(?P<tz>Z|[+-]\d{2}:?\d{2})?$",
    re.IGNORECASE,
)
_NUMERIC = re.compile(r"^[+-]?(\d+(\.\d*)?|\.\d+)$")


def parse_timestamp(value: object) -> datetime:
    """Convert a value of unknown shape into an aware datetime."""
    if isinstance(value, datetime):
        return value if value.tzinfo else _as_local(value)

    if isinstance(value, bool):
        return EPOCH

    if isinstance(value, int | float):
        return from_epoch(value)

    if isinstance(value, str):
        return _parse_string(value)

    return EPOCH


def from_epoch(value: float) -> datetime:
    """Epoch seconds or milliseconds, chosen by magnitude."""
    try:
        number = float(value)
        if not math.isfinite(number):
            return EPOCH
        millis = number if abs(number) >= MILLIS_THRESHOLD else number * 1000
        return EPOCH + timedelta(milliseconds=millis)
    except OverflowError:
        logger.warning("Epoch value out of range")
        return EPOCH


def _parse_string(raw: str) -> datetime:
    text = raw.strip().replace(",", ".")
    if not text:
        return EPOCH

    match = _BARE_DATE.match(text)
    if match:
        return _local_midnight(text)

    match = _DATE_TIME.match(text)
    if match:
        return _parse_date_time(match)

    if _NUMERIC.match(text):
        return from_epoch(float(text))

    try:
        # RFC 2822, e.g. "Fri, 01 Mar 2024 10:00:00 +0000"
        parsed = parsedate_to_datetime(raw.strip())
    except (TypeError, ValueError, IndexError, OverflowError):
        parsed = None
    if parsed is not None:
        return parsed if parsed.tzinfo else _as_local(parsed)

    logger.warning("Unrecognized timestamp format: %r", raw)
    return EPOCH


def _local_midnight(text: str) -> datetime:
    try:
        day = date.fromisoformat(text)
    except ValueError:
        logger.warning("Invalid calendar date: %r", text)
        return EPOCH
    return _as_local(datetime(day.year, day.month, day.day))


def _parse_date_time(match: re.Match[str]) -> datetime:
    fraction = match.group("fraction") or ""
    millis = int(fraction[:3].ljust(3, "0")) if fraction else 0
    tz = match.group("tz")

    try:
        day = date.fromisoformat(match.group("date"))
        fields = datetime(
            day.year,
            day.month,
            day.day,
            int(match.group("hour")),
            int(match.group("minute")),
            int(match.group("second") or 0),
            millis * 1000,
        )
        zone = _zone(tz) if tz else None
    except ValueError:
        logger.warning("Invalid date-time components: %r", match.string)
        return EPOCH

    if zone is None:
        return _as_local(fields)
    return fields.replace(tzinfo=zone)


def _as_local(naive: datetime) -> datetime:
    """Attach the local zone; instants the platform cannot place become the epoch."""
    try:
        return naive.astimezone()
    except (ValueError, OverflowError, OSError):
        logger.warning("Timestamp out of local time range: %r", naive)
        return EPOCH


def _zone(tz: str) -> timezone:
    if tz.upper() == "Z":
        return UTC
    sign = -1 if tz.startswith("-") else 1
    digits = tz[1:].replace(":", "")
    offset = timedelta(hours=int(digits[:2]), minutes=int(digits[2:]))
    return timezone(sign * offset)
