import logging
import threading
from collections.abc import Callable

from glyphgrid.glyphs import GlyphPalette
from glyphgrid.pixels import PixelGrid, Region

logger = logging.getLogger(__name__)

RegionGrid = list[list[Region]]


class PartitionCache:
    """Single-slot memo of the last region partition.

    The key is (image, resolution, palette) compared by identity: a hit needs
    the very same image and palette objects as the previous call.
    """

    def __init__(self):
        self._lock = threading.Lock()
        self._key: tuple[PixelGrid, int, GlyphPalette] | None = None
        self._regions: RegionGrid | None = None
        self.hits = 0
        self.misses = 0

    def _matches(self, image, resolution, palette) -> bool:
        if self._key is None:
            return False
        last_image, last_resolution, last_palette = self._key
        return last_image is image and last_resolution == resolution and last_palette is palette

    def get_or_compute(
        self,
        image: PixelGrid,
        resolution: int,
        palette: GlyphPalette,
        compute: Callable[[], RegionGrid],
    ) -> RegionGrid:
        with self._lock:
            if self._matches(image, resolution, palette):
                self.hits += 1
                logger.debug("Partition cache hit (resolution %d)", resolution)
                return self._regions

            regions = compute()
            self._key = (image, resolution, palette)
            self._regions = regions
            self.misses += 1
            logger.debug("Partition cache miss, stored %dx%d regions", resolution, resolution)
            return regions

    def clear(self) -> None:
        with self._lock:
            self._key = None
            self._regions = None
