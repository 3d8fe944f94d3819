import argparse
import functools
import logging
import sys
from pathlib import Path

from glyphgrid.config import Settings
from glyphgrid.errors import GlyphGridError
from glyphgrid.glyphs import GlyphPalette, glyph_bitmap
from glyphgrid.matcher import Matcher, RoundingPolicy
from glyphgrid.output import ConsoleOutput, HtmlOutput
from glyphgrid.pipeline import RenderPipeline
from glyphgrid.pixels import load_image
from glyphgrid.shell import Shell

logger = logging.getLogger(__name__)

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def build_parser(settings: Settings) -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Render an image as brightness-matched ASCII art")
    parser.add_argument("image", help="Path to input image")
    parser.add_argument(
        "-r",
        "--resolution",
        type=int,
        default=settings.resolution,
        help=f"Characters per row and column (default: {settings.resolution})",
    )
    parser.add_argument(
        "-c", "--chars", default=settings.charset, help=f"Palette characters (default: {settings.charset!r})"
    )
    parser.add_argument(
        "--round",
        dest="policy",
        default=RoundingPolicy.NEAREST.value,
        choices=[p.value for p in RoundingPolicy],
        help="Rounding policy: nearest (abs), round up (up) or round down (down)",
    )
    parser.add_argument(
        "-o", "--output", default=settings.output, choices=["console", "html"], help="Where to write the result"
    )
    parser.add_argument("--html-path", default=settings.html_path, help="HTML output file")
    parser.add_argument("--font", default=settings.font_path, help="TrueType font used to measure glyphs")
    parser.add_argument("-i", "--interactive", action="store_true", help="Start the command shell")
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")
    return parser


def main(argv=None):
    settings = Settings.from_env()
    args = build_parser(settings).parse_args(argv)

    logging.basicConfig(level=logging.DEBUG if args.verbose else settings.log_level, format=LOG_FORMAT)

    image_path = Path(args.image)
    if not image_path.exists():
        print(f"File not found: {image_path}", file=sys.stderr)
        sys.exit(1)

    image = load_image(image_path)
    bitmap = functools.partial(glyph_bitmap, font_path=args.font)
    palette = GlyphPalette(args.chars, bitmap=bitmap)

    if args.interactive:
        shell = Shell(
            image,
            palette=palette,
            resolution=args.resolution,
            html_path=args.html_path,
            html_font=settings.html_font,
        )
        shell.matcher.set_policy(RoundingPolicy.from_tag(args.policy))
        shell.output_type = args.output
        shell.run()
        return

    matcher = Matcher(palette, RoundingPolicy.from_tag(args.policy))
    try:
        grid = RenderPipeline().render(image, args.resolution, matcher)
    except GlyphGridError as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(2)

    if args.output == "html":
        HtmlOutput(args.html_path, settings.html_font).out(grid)
    else:
        ConsoleOutput().out(grid)
