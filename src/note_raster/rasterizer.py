from __future__ import annotations

from collections.abc import Iterable

import numpy as np

from note_raster.event_parser import Event
from note_raster.palette import DEFAULT_PALETTE, palette_rgba
from note_raster.time_range import TimeRange

DEFAULT_WIDTH = 512
DEFAULT_HEIGHT = 128
BACKGROUND_RGBA = (0, 0, 0, 255)


class RasterRangeError(IndexError):
    """An event addresses a palette entry or row outside the framebuffer."""


def timestamp_to_x(timestamp: int, time_range: TimeRange, width: int) -> int:
    """Map a timestamp onto ``[0, width - 1]``, rounding half up.

    Integer arithmetic keeps full u64 precision. A degenerate range maps
    everything to column 0.
    """
    if width <= 0:
        raise ValueError("width must be > 0.")
    if time_range.is_degenerate:
        return 0
    offset = timestamp - time_range.min_timestamp
    span = time_range.span
    return (2 * offset * (width - 1) + span) // (2 * span)


def _put_pixel(img: np.ndarray, x: int, y: int, color: np.ndarray) -> None:
    img[y, x, :] = color


class EventRasterizer:
    def __init__(
        self,
        width: int = DEFAULT_WIDTH,
        height: int = DEFAULT_HEIGHT,
        palette: np.ndarray | None = None,
    ):
        if width <= 0 or height <= 0:
            raise ValueError("width and height must be > 0.")
        self.width = int(width)
        self.height = int(height)
        self.palette = palette_rgba(DEFAULT_PALETTE) if palette is None else palette

    def new_framebuffer(self) -> np.ndarray:
        img = np.zeros((self.height, self.width, 4), dtype=np.uint8)
        img[:, :, :] = np.array(BACKGROUND_RGBA, dtype=np.uint8)
        return img

    def pixel_for_event(self, event: Event, time_range: TimeRange) -> tuple[int, int, np.ndarray]:
        if event.channel >= len(self.palette):
            raise RasterRangeError(
                f"channel {event.channel} is outside the {len(self.palette)}-colour palette: {event}"
            )
        if event.note >= self.height:
            raise RasterRangeError(f"note {event.note} is outside the {self.height}-row image: {event}")
        x = timestamp_to_x(event.timestamp, time_range, self.width)
        if not (0 <= x < self.width):
            raise RasterRangeError(f"timestamp {event.timestamp} falls outside {time_range}: {event}")
        return x, event.note, self.palette[event.channel]

    def rasterize(self, events: Iterable[Event], time_range: TimeRange) -> np.ndarray:
        img = self.new_framebuffer()
        for event in events:
            x, y, color = self.pixel_for_event(event, time_range)
            _put_pixel(img, x, y, color)
        return img


def rasterize_events(
    events: Iterable[Event],
    time_range: TimeRange,
    width: int = DEFAULT_WIDTH,
    height: int = DEFAULT_HEIGHT,
    palette: np.ndarray | None = None,
) -> np.ndarray:
    return EventRasterizer(width=width, height=height, palette=palette).rasterize(events, time_range)
