import logging

from glyphgrid.cache import PartitionCache
from glyphgrid.matcher import Matcher
from glyphgrid.pixels import PixelGrid

logger = logging.getLogger(__name__)


class RenderPipeline:
    """Turns an image into a resolution x resolution grid of characters."""

    def __init__(self, cache: PartitionCache | None = None):
        self.cache = cache if cache is not None else PartitionCache()

    def render(self, image: PixelGrid, resolution: int, matcher: Matcher) -> list[list[str]]:
        palette = matcher.palette
        palette.check_usable()

        regions = self.cache.get_or_compute(
            image,
            resolution,
            palette,
            lambda: image.pad_to_power_of_two().partition(resolution),
        )
        grid = [[matcher.match(region.brightness()) for region in row] for row in regions]
        logger.debug("Rendered %dx%d grid with %d characters", resolution, resolution, len(palette))
        return grid
