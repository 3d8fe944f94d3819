import logging
import sys
from collections.abc import Iterable

from glyphgrid import charsets
from glyphgrid.config import DEFAULT_CHARSET, DEFAULT_HTML_FONT, DEFAULT_HTML_PATH, DEFAULT_RESOLUTION
from glyphgrid.errors import BadArgumentsError, CommandError, GlyphGridError, UnknownCommandError
from glyphgrid.glyphs import MIN_PALETTE_SIZE, GlyphPalette
from glyphgrid.matcher import Matcher, RoundingPolicy
from glyphgrid.output import ConsoleOutput, HtmlOutput
from glyphgrid.pipeline import RenderPipeline
from glyphgrid.pixels import PixelGrid

logger = logging.getLogger(__name__)

PROMPT = ">>> "
EXIT_COMMAND = "exit"
OUTPUT_TYPES = ("console", "html")

MSG_UNKNOWN_COMMAND = "Did not execute due to incorrect command."
MSG_BAD_OUTPUT = "Did not change output method due to incorrect format."
MSG_BAD_ROUNDING = "Did not change rounding method due to incorrect format."
MSG_BAD_RESOLUTION = "Did not change resolution due to incorrect format."
MSG_RESOLUTION_BOUNDS = "Did not change resolution due to exceeding boundaries."
MSG_CHARSET_TOO_SMALL = "Did not execute. Charset is too small"


class Shell:
    """Line-oriented command loop around a render pipeline.

    Commands::

        chars                     list the palette
        add|remove <c|all|space|a-z>
        res [up|down]             show, double or halve the resolution
        round abs|up|down         choose the rounding policy
        output console|html       choose where asciiArt writes
        asciiArt                  render the image
        exit
    """

    def __init__(
        self,
        image: PixelGrid,
        palette: GlyphPalette | None = None,
        resolution: int = DEFAULT_RESOLUTION,
        pipeline: RenderPipeline | None = None,
        stdout=None,
        html_path=DEFAULT_HTML_PATH,
        html_font: str = DEFAULT_HTML_FONT,
    ):
        self.image = image
        self.palette = palette if palette is not None else GlyphPalette(DEFAULT_CHARSET)
        self.matcher = Matcher(self.palette)
        self.resolution = resolution
        self.pipeline = pipeline if pipeline is not None else RenderPipeline()
        self.stdout = stdout if stdout is not None else sys.stdout
        self.output_type = "console"
        self.outputs = {
            "console": ConsoleOutput(self.stdout),
            "html": HtmlOutput(html_path, html_font),
        }
        self._commands = {
            "chars": self._chars,
            "add": self._add,
            "remove": self._remove,
            "res": self._res,
            "round": self._round,
            "output": self._output,
            "asciiArt": self._ascii_art,
        }

    def _say(self, message: str = "") -> None:
        print(message, file=self.stdout)

    def run(self, lines: Iterable[str] | None = None) -> None:
        """Execute commands until ``exit`` or the input runs out."""
        source = iter(lines if lines is not None else sys.stdin)
        while True:
            self.stdout.write(PROMPT)
            self.stdout.flush()
            line = next(source, None)
            if line is None:
                return
            line = line.rstrip("\r\n")
            if line == EXIT_COMMAND:
                return
            try:
                self.execute(line)
            except CommandError as e:
                self._say(str(e))

    def execute(self, line: str) -> None:
        parts = line.split(" ", 2)
        command = parts[0]
        argument = parts[1] if len(parts) > 1 else ""
        handler = self._commands.get(command)
        if handler is None:
            raise UnknownCommandError(MSG_UNKNOWN_COMMAND)
        logger.debug("Command %r with argument %r", command, argument)
        handler(argument)

    def _chars(self, _argument: str) -> None:
        self._say(" ".join(self.palette.characters()))

    def _update_palette(self, argument: str, action: str) -> None:
        try:
            chars = charsets.expand(argument)
        except ValueError:
            raise BadArgumentsError(f"Did not {action} due to incorrect format.") from None
        update = self.palette.insert if action == "add" else self.palette.remove
        for char in chars:
            update(char)

    def _add(self, argument: str) -> None:
        self._update_palette(argument, "add")

    def _remove(self, argument: str) -> None:
        self._update_palette(argument, "remove")

    def _res(self, argument: str) -> None:
        max_resolution = self.image.width
        min_resolution = max(1, self.image.width // self.image.height)
        if argument == "":
            pass
        elif argument == "up":
            if self.resolution * 2 > max_resolution:
                raise BadArgumentsError(MSG_RESOLUTION_BOUNDS)
            self.resolution *= 2
        elif argument == "down":
            if self.resolution / 2 < min_resolution:
                raise BadArgumentsError(MSG_RESOLUTION_BOUNDS)
            self.resolution //= 2
        else:
            raise BadArgumentsError(MSG_BAD_RESOLUTION)
        self._say(f"Resolution set to {self.resolution}.")

    def _round(self, argument: str) -> None:
        try:
            policy = RoundingPolicy.from_tag(argument)
        except ValueError:
            raise BadArgumentsError(MSG_BAD_ROUNDING) from None
        self.matcher.set_policy(policy)

    def _output(self, argument: str) -> None:
        if argument not in OUTPUT_TYPES:
            raise BadArgumentsError(MSG_BAD_OUTPUT)
        self.output_type = argument

    def _ascii_art(self, _argument: str) -> None:
        if self.palette.size() < MIN_PALETTE_SIZE:
            raise CommandError(MSG_CHARSET_TOO_SMALL)
        try:
            grid = self.pipeline.render(self.image, self.resolution, self.matcher)
        except GlyphGridError as e:
            raise CommandError(f"Did not execute. {e}") from e
        self.outputs[self.output_type].out(grid)
