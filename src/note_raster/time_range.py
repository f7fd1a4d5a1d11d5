from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass

from note_raster.event_parser import Event


@dataclass(frozen=True)
class TimeRange:
    """Inclusive timestamp bounds of an event sequence.

    ``min_timestamp == max_timestamp`` is legal and means every event shares
    one timestamp.
    """

    min_timestamp: int
    max_timestamp: int

    def __post_init__(self) -> None:
        if self.max_timestamp < self.min_timestamp:
            raise ValueError("TimeRange max_timestamp must be >= min_timestamp.")

    @property
    def span(self) -> int:
        return self.max_timestamp - self.min_timestamp

    @property
    def is_degenerate(self) -> bool:
        return self.span == 0


def compute_time_range(events: Sequence[Event]) -> TimeRange | None:
    if not events:
        return None
    timestamps = [event.timestamp for event in events]
    return TimeRange(min_timestamp=min(timestamps), max_timestamp=max(timestamps))
