"""Duration tokens used for dead-letter TTLs.

A token is the compact ``<n>h<n>m<n>s`` form the backend parses as a
duration, e.g. ``1h30m`` or ``45s``. Zero components are omitted and an
all-zero duration is written as ``0s``.
"""

import re
from typing import Any, NamedTuple

_UNIT_PATTERNS = {
    unit: re.compile(rf"(\d+){unit}") for unit in ("h", "m", "s")
}


class Duration(NamedTuple):
    hours: int = 0
    minutes: int = 0
    seconds: int = 0

    def total_seconds(self) -> int:
        return self.hours * 3600 + self.minutes * 60 + self.seconds


def encode(hours: int, minutes: int, seconds: int) -> str:
    """Encode an hours/minutes/seconds triple as a duration token.

    Minutes and seconds are not range-checked here; use ``clamp`` first.
    """
    token = ""
    if hours:
        token += f"{hours}h"
    if minutes:
        token += f"{minutes}m"
    if seconds:
        token += f"{seconds}s"
    return token or "0s"


def decode(token: Any) -> Duration:
    """Decode a duration token, never raising.

    The first integer directly preceding each unit letter is taken; a unit
    that does not appear decodes to 0.
    """
    if not token or not isinstance(token, str):
        return Duration()

    values = []
    for pattern in _UNIT_PATTERNS.values():
        match = pattern.search(token)
        values.append(int(match.group(1)) if match else 0)
    return Duration(*values)


def clamp(hours: int, minutes: int, seconds: int) -> Duration:
    """Clamp form input into the range ``encode`` expects."""
    return Duration(
        hours=max(0, hours),
        minutes=min(max(0, minutes), 59),
        seconds=min(max(0, seconds), 59),
    )


def to_milliseconds(token: Any) -> int:
    """Broker ``x-message-ttl`` value for a token."""
    return decode(token).total_seconds() * 1000
