"""RFC 3339 rendering and parsing for commit timestamps.

Column values use the signature's own UTC offset, with ``Z`` for UTC.
Bound values must carry an explicit offset.
"""

from __future__ import annotations

import re
from datetime import datetime, timedelta, timezone

import pygit2

from gitql.exceptions import TimestampParseError

# Whole seconds and a fraction of any length, rewritten to six digits.
_FRACTION_RE = re.compile(r"(T\d{2}:\d{2}:\d{2})\.(\d+)")


def signature_datetime(signature: pygit2.Signature) -> datetime:
    """Aware datetime for a signature, in the signature's own offset."""
    tz = timezone(timedelta(minutes=signature.offset))
    return datetime.fromtimestamp(signature.time, tz)


def format_rfc3339(moment: datetime) -> str:
    text = moment.isoformat(timespec="seconds")
    if text.endswith("+00:00"):
        text = text[:-6] + "Z"
    return text


def format_signature_time(signature: pygit2.Signature) -> str:
    return format_rfc3339(signature_datetime(signature))


def _microseconds(match: re.Match[str]) -> str:
    digits = match.group(2)[:6].ljust(6, "0")
    return f"{match.group(1)}.{digits}"


def parse_timestamp(value: object) -> datetime:
    """Parse a bound argument as an RFC 3339 timestamp.

    Raises:
        TimestampParseError: Not text, not ISO 8601, or missing an offset.
    """
    if not isinstance(value, str):
        raise TimestampParseError(value)
    text = value.strip()
    if text[-1:] in ("Z", "z"):
        text = text[:-1] + "+00:00"
    # RFC 3339 allows a space or lowercase t between date and time.
    if len(text) > 10 and text[10] in (" ", "t"):
        text = text[:10] + "T" + text[11:]
    text = _FRACTION_RE.sub(_microseconds, text, count=1)
    try:
        moment = datetime.fromisoformat(text)
    except ValueError as exc:
        raise TimestampParseError(value) from exc
    if moment.tzinfo is None or "T" not in text:
        raise TimestampParseError(value)
    return moment
