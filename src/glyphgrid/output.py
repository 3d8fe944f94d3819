import html
import logging
import sys
from pathlib import Path

from glyphgrid.config import DEFAULT_HTML_FONT, DEFAULT_HTML_PATH

logger = logging.getLogger(__name__)

_HTML_TEMPLATE = """<!DOCTYPE html>
<html>
<head>
<meta charset="utf-8">
<title>glyphgrid</title>
</head>
<body>
<pre style="font-family: '{font}', monospace; font-size: 8px; line-height: 1.0; letter-spacing: 0.25em;">
{body}
</pre>
</body>
</html>
"""


def format_console(grid: list[list[str]]) -> str:
    """One line per row, cells separated by a space so square regions look square."""
    return "\n".join(" ".join(row) for row in grid)


def format_html(grid: list[list[str]], font: str = DEFAULT_HTML_FONT) -> str:
    body = "\n".join(html.escape("".join(row)) for row in grid)
    return _HTML_TEMPLATE.format(font=html.escape(font, quote=True), body=body)


class ConsoleOutput:
    def __init__(self, stream=None):
        self.stream = stream

    def out(self, grid: list[list[str]]) -> None:
        print(format_console(grid), file=self.stream if self.stream is not None else sys.stdout)


class HtmlOutput:
    def __init__(self, path: str | Path = DEFAULT_HTML_PATH, font: str = DEFAULT_HTML_FONT):
        self.path = Path(path)
        self.font = font

    def out(self, grid: list[list[str]]) -> None:
        self.path.write_text(format_html(grid, self.font), encoding="utf-8")
        logger.info("Wrote %d rows to %s", len(grid), self.path)
