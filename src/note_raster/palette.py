from __future__ import annotations

import numpy as np

# Packed 0xRRGGBBAA, indexed by channel.
DEFAULT_PALETTE: tuple[int, ...] = (
    0xAAAAAAFF,
    0x005500FF,
    0x00AA00FF,
    0x00FF00FF,
    0x0000FFFF,
    0x0055FFFF,
    0x00AAFFFF,
    0x00FFFFFF,
    0xFF0000FF,
    0xFF5500FF,
    0xFFAA00FF,
    0xFFFF00FF,
    0xFF00FFFF,
    0xFF55FFFF,
    0xFFAAFFFF,
    0xFFFFFFFF,
)


def unpack_rgba(color: int) -> tuple[int, int, int, int]:
    if not (0 <= color <= 0xFFFFFFFF):
        raise ValueError(f"Colour 0x{color:X} does not fit in 32 bits.")
    r, g, b, a = color.to_bytes(4, "big")
    return r, g, b, a


def palette_rgba(palette: tuple[int, ...] = DEFAULT_PALETTE) -> np.ndarray:
    """Unpack a packed palette into a read-only ``(n, 4)`` uint8 lookup table."""
    if not palette:
        raise ValueError("Palette must contain at least one colour.")
    table = np.array([unpack_rgba(color) for color in palette], dtype=np.uint8)
    table.setflags(write=False)
    return table
