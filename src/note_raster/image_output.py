from __future__ import annotations

import logging
from pathlib import Path

import numpy as np
from PIL import Image

logger = logging.getLogger(__name__)

DEFAULT_OUTPUT_PATH = "output.png"
DEFAULT_OUTPUT_SIZE = (512, 2048)


def resize_nearest(img: np.ndarray, width: int, height: int) -> np.ndarray:
    """Resize an RGBA framebuffer without mixing colours between pixels."""
    if width <= 0 or height <= 0:
        raise ValueError("width and height must be > 0.")
    if img.shape[1] == width and img.shape[0] == height:
        return img
    resized = Image.fromarray(img).resize((width, height), resample=Image.Resampling.NEAREST)
    return np.asarray(resized, dtype=np.uint8)


def save_png(img: np.ndarray, path: str | Path) -> Path:
    output = Path(path)
    output.parent.mkdir(parents=True, exist_ok=True)
    Image.fromarray(img).save(output, format="PNG")
    return output


def finalize_image(
    img: np.ndarray,
    path: str | Path = DEFAULT_OUTPUT_PATH,
    output_size: tuple[int, int] | None = DEFAULT_OUTPUT_SIZE,
) -> Path:
    if output_size is not None:
        img = resize_nearest(img, width=output_size[0], height=output_size[1])
    output = save_png(img, path)
    logger.debug("wrote %dx%d image to %s", img.shape[1], img.shape[0], output)
    return output
