import logging
from collections.abc import Callable, Iterable
from dataclasses import dataclass
from functools import lru_cache

import numpy as np
from PIL import Image, ImageDraw, ImageFont

from glyphgrid.config import GLYPH_SIZE
from glyphgrid.errors import DegeneratePaletteError, PaletteTooSmallError

logger = logging.getLogger(__name__)

MIN_PALETTE_SIZE = 2

BitmapFn = Callable[[str], np.ndarray]


@lru_cache(maxsize=None)
def _load_font(font_path: str | None, size: int) -> ImageFont.ImageFont | ImageFont.FreeTypeFont:
    if font_path is None:
        return ImageFont.load_default(size=size)
    return ImageFont.truetype(font_path, size)


@lru_cache(maxsize=1024)
def _render_glyph(char: str, size: int, font_path: str | None) -> bytes:
    font = _load_font(font_path, size)
    img = Image.new("L", (size, size), 0)
    draw = ImageDraw.Draw(img)
    # Centre the glyph's ink box in the cell
    left, top, right, bottom = draw.textbbox((0, 0), char, font=font)
    x_offset = (size - (right - left)) // 2 - left
    y_offset = (size - (bottom - top)) // 2 - top
    draw.text((x_offset, y_offset), char, fill=255, font=font)
    return (np.asarray(img) >= 128).tobytes()


def glyph_bitmap(char: str, size: int = GLYPH_SIZE, font_path: str | None = None) -> np.ndarray:
    """Rasterize a character into a (size, size) boolean ink mask.

    Uses Pillow's built-in font unless ``font_path`` names a TrueType file.
    Results are memoized, so repeated calls for the same glyph are cheap.
    """
    if len(char) != 1:
        raise ValueError(f"Expected a single character, got {char!r}")
    mask = np.frombuffer(_render_glyph(char, size, font_path), dtype=bool)
    return mask.reshape(size, size)


def ink_ratio(bitmap: np.ndarray) -> float:
    """Fraction of cells set in a boolean bitmap."""
    return float(np.count_nonzero(bitmap)) / bitmap.size


@dataclass(frozen=True)
class GlyphEntry:
    char: str
    raw: float
    normalized: float | None = None


class GlyphPalette:
    """The active set of output characters with palette-relative brightness scores.

    Every insert or remove renormalizes the whole palette: the darkest raw
    brightness maps to 0 and the brightest to 1. When all raw values are equal
    the normalized scores are undefined and the palette is degenerate.
    """

    def __init__(self, characters: Iterable[str] = (), bitmap: BitmapFn = glyph_bitmap):
        self._bitmap = bitmap
        self._entries: dict[str, GlyphEntry] = {}
        for char in characters:
            self._entries[char] = GlyphEntry(char, self._raw_brightness(char))
        self.renormalize()

    def _raw_brightness(self, char: str) -> float:
        if len(char) != 1:
            raise ValueError(f"Expected a single character, got {char!r}")
        return ink_ratio(np.asarray(self._bitmap(char), dtype=bool))

    def insert(self, char: str) -> None:
        self._entries[char] = GlyphEntry(char, self._raw_brightness(char))
        self.renormalize()

    def remove(self, char: str) -> None:
        if self._entries.pop(char, None) is not None:
            self.renormalize()

    def renormalize(self) -> None:
        if not self._entries:
            return
        raws = [entry.raw for entry in self._entries.values()]
        lo, hi = min(raws), max(raws)
        if hi == lo:
            self._entries = {c: GlyphEntry(c, e.raw) for c, e in self._entries.items()}
            if len(self._entries) > 1:
                logger.warning("All %d palette characters share brightness %.4f", len(self._entries), lo)
            return
        span = hi - lo
        self._entries = {c: GlyphEntry(c, e.raw, (e.raw - lo) / span) for c, e in self._entries.items()}
        logger.debug("Renormalized %d glyphs over raw range [%.4f, %.4f]", len(self._entries), lo, hi)

    def size(self) -> int:
        return len(self._entries)

    def __len__(self):
        return len(self._entries)

    def __contains__(self, char):
        return char in self._entries

    def __iter__(self):
        return iter(self.characters())

    def characters(self) -> list[str]:
        return sorted(self._entries)

    def entries(self) -> list[GlyphEntry]:
        return [self._entries[c] for c in self.characters()]

    @property
    def is_degenerate(self) -> bool:
        return any(entry.normalized is None for entry in self._entries.values())

    def raw_brightness(self, char: str) -> float:
        return self._entries[char].raw

    def normalized_brightness(self, char: str) -> float:
        normalized = self._entries[char].normalized
        if normalized is None:
            raise DegeneratePaletteError("Palette brightness is undefined: all characters are equally dense")
        return normalized

    def check_usable(self) -> None:
        """Raise unless the palette can map brightness to characters."""
        if len(self._entries) < MIN_PALETTE_SIZE:
            raise PaletteTooSmallError(
                f"Palette needs at least {MIN_PALETTE_SIZE} characters, has {len(self._entries)}"
            )
        if self.is_degenerate:
            raise DegeneratePaletteError("Palette brightness is undefined: all characters are equally dense")
