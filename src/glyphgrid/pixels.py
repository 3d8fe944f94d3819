import logging
import numbers
from pathlib import Path

import numpy as np
from PIL import Image

from glyphgrid.config import LUMINANCE_WEIGHTS, WHITE
from glyphgrid.errors import InvalidResolutionError, RegionOutOfBoundsError

logger = logging.getLogger(__name__)

_WEIGHTS = np.array(LUMINANCE_WEIGHTS, dtype=np.float64)


def next_power_of_two(n: int) -> int:
    """Smallest power of two >= n, or 1 for n <= 0."""
    if n <= 0:
        return 1
    if n & (n - 1) == 0:
        return n
    return 1 << n.bit_length()


class PixelGrid:
    """Immutable RGB image held as a read-only (height, width, 3) uint8 array."""

    def __init__(self, pixels):
        arr = np.array(pixels, dtype=np.uint8)
        if arr.ndim != 3 or arr.shape[2] != 3:
            raise ValueError(f"Expected an array of shape (height, width, 3), got {arr.shape}")
        if arr.shape[0] == 0 or arr.shape[1] == 0:
            raise ValueError("PixelGrid needs width > 0 and height > 0")
        arr.setflags(write=False)
        self._pixels = arr

    @classmethod
    def from_rows(cls, rows) -> "PixelGrid":
        """Build from nested rows of (r, g, b) tuples; every row must be the same length."""
        rows = [list(row) for row in rows]
        if rows and any(len(row) != len(rows[0]) for row in rows):
            raise ValueError("All rows must have the same number of samples")
        return cls(rows)

    @classmethod
    def from_image(cls, image: Image.Image) -> "PixelGrid":
        return cls(np.asarray(image.convert("RGB")))

    @classmethod
    def solid(cls, width: int, height: int, colour=WHITE) -> "PixelGrid":
        return cls(np.full((height, width, 3), colour, dtype=np.uint8))

    @property
    def pixels(self) -> np.ndarray:
        return self._pixels

    @property
    def width(self) -> int:
        return self._pixels.shape[1]

    @property
    def height(self) -> int:
        return self._pixels.shape[0]

    @property
    def size(self) -> tuple[int, int]:
        return self.width, self.height

    def pixel(self, x: int, y: int) -> tuple[int, int, int]:
        r, g, b = self._pixels[y, x]
        return int(r), int(g), int(b)

    def to_image(self) -> Image.Image:
        return Image.fromarray(np.array(self._pixels))

    def __eq__(self, other):
        if not isinstance(other, PixelGrid):
            return NotImplemented
        return np.array_equal(self._pixels, other._pixels)

    def __repr__(self):
        return f"{type(self).__name__}(width={self.width}, height={self.height})"

    def extract_region(self, x_start: int, y_start: int, width: int, height: int) -> "Region":
        """Copy the rectangle starting at (x_start, y_start) into an independent Region."""
        if width <= 0 or height <= 0:
            raise RegionOutOfBoundsError(f"Region must be non-empty, got {width}x{height}")
        if x_start < 0 or y_start < 0 or x_start + width > self.width or y_start + height > self.height:
            raise RegionOutOfBoundsError(
                f"Region ({x_start}, {y_start}, {width}x{height}) exceeds {self.width}x{self.height} grid"
            )
        block = self._pixels[y_start : y_start + height, x_start : x_start + width]
        return Region(block)

    def partition(self, resolution: int) -> list[list["Region"]]:
        """Split into resolution x resolution regions, indexed [row][col].

        Spans are ``dimension // resolution``. The remainder is not dropped:
        the last row and column run to the edge, so they can be wider than a
        span and every pixel lands in exactly one region.
        """
        if isinstance(resolution, bool) or not isinstance(resolution, numbers.Integral) or resolution <= 0:
            raise InvalidResolutionError(f"Resolution must be a positive integer, got {resolution!r}")
        if resolution > self.width or resolution > self.height:
            raise InvalidResolutionError(
                f"Resolution {resolution} exceeds image size {self.width}x{self.height}"
            )

        span_w = self.width // resolution
        span_h = self.height // resolution
        grid = []
        for row in range(resolution):
            y = row * span_h
            h = self.height - y if row == resolution - 1 else span_h
            cells = []
            for col in range(resolution):
                x = col * span_w
                w = self.width - x if col == resolution - 1 else span_w
                cells.append(self.extract_region(x, y, w, h))
            grid.append(cells)
        return grid

    def pad_to_power_of_two(self) -> "PixelGrid":
        """Centre the image on a white canvas whose sides are powers of two.

        Odd padding puts the extra pixel at the bottom/right.
        """
        new_w = next_power_of_two(self.width)
        new_h = next_power_of_two(self.height)
        if (new_w, new_h) == self.size:
            return PixelGrid(self._pixels)

        top = (new_h - self.height) // 2
        left = (new_w - self.width) // 2
        canvas = np.full((new_h, new_w, 3), WHITE, dtype=np.uint8)
        canvas[top : top + self.height, left : left + self.width] = self._pixels
        logger.debug("Padded %dx%d to %dx%d", self.width, self.height, new_w, new_h)
        return PixelGrid(canvas)

    def brightness(self) -> float:
        """Mean perceptual luminance in [0, 1]."""
        luminance = self._pixels.astype(np.float64) @ _WEIGHTS
        value = luminance.sum() / (self.width * self.height * 255)
        # The weights sum to 1 only up to float rounding; snap so pure white is exactly 1.0
        return float(np.clip(round(value, 12), 0.0, 1.0))


class Region(PixelGrid):
    """A rectangular sub-grid. Construction copies the samples, so it never aliases its parent."""


def load_image(path: str | Path) -> PixelGrid:
    """Decode an image file into a PixelGrid. Decode and I/O errors propagate."""
    with Image.open(path) as image:
        grid = PixelGrid.from_image(image)
    logger.debug("Loaded %s (%dx%d)", path, grid.width, grid.height)
    return grid
