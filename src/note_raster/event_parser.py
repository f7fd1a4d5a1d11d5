from __future__ import annotations

import re
from dataclasses import dataclass
from enum import Enum

U8_MAX = 0xFF
U64_MAX = 0xFFFF_FFFF_FFFF_FFFF

FIELD_SEPARATOR = ", "

_UNSIGNED_RE = re.compile(r"\+?[0-9]+", re.ASCII)


@dataclass(frozen=True)
class Event:
    """One ``(channel, timestamp, note)`` record read from the input stream.

    - ``channel`` selects a palette colour (0 to 255; only 0 to 15 render).
    - ``timestamp`` is an unsigned 64-bit tick value, in no particular order.
    - ``note`` is used directly as the vertical pixel coordinate.
    """

    channel: int
    timestamp: int
    note: int

    def __post_init__(self) -> None:
        if not (0 <= self.channel <= U8_MAX):
            raise ValueError("Event channel must be in [0,255].")
        if not (0 <= self.timestamp <= U64_MAX):
            raise ValueError("Event timestamp must be in [0,2**64-1].")
        if not (0 <= self.note <= U8_MAX):
            raise ValueError("Event note must be in [0,255].")


class BadEventKind(Enum):
    CHANNEL = "channel"
    TIMESTAMP = "timestamp"
    NOTE = "note"
    ENTIRE = "entire"


@dataclass(frozen=True)
class BadEvent:
    """Reason a line was rejected.

    For field kinds ``raw`` is the offending segment, or ``None`` when the
    segment was missing. For ``ENTIRE`` it is the whole line.
    """

    kind: BadEventKind
    raw: str | None = None

    def __str__(self) -> str:
        if self.kind is BadEventKind.ENTIRE:
            return f"bad event {self.raw!r}"
        return f"bad event: malformed {self.kind.value} {self.raw!r}"


def parse_unsigned(text: str, max_value: int) -> int | None:
    """Decode a decimal unsigned integer, or return ``None`` if it is not one.

    Accepts ASCII digits with an optional leading ``+``. Whitespace, ``-``,
    underscores and values above ``max_value`` are rejected.
    """
    if _UNSIGNED_RE.fullmatch(text) is None:
        return None
    value = int(text)
    if value > max_value:
        return None
    return value


def parse_event_line(line: str) -> Event | BadEvent:
    if not (line.startswith("(") and line.endswith(")")):
        return BadEvent(BadEventKind.ENTIRE, line)

    parts = line[1:-1].split(FIELD_SEPARATOR, 2)
    fields = (
        (BadEventKind.CHANNEL, U8_MAX),
        (BadEventKind.TIMESTAMP, U64_MAX),
        (BadEventKind.NOTE, U8_MAX),
    )
    values: list[int] = []
    for idx, (kind, max_value) in enumerate(fields):
        if idx >= len(parts):
            return BadEvent(kind, None)
        value = parse_unsigned(parts[idx], max_value)
        if value is None:
            return BadEvent(kind, parts[idx])
        values.append(value)

    channel, timestamp, note = values
    return Event(channel=channel, timestamp=timestamp, note=note)
