import os
from dataclasses import dataclass

DEFAULT_CHARSET = "0123456789"
DEFAULT_RESOLUTION = 2
DEFAULT_OUTPUT = "console"
DEFAULT_HTML_PATH = "out.html"
DEFAULT_HTML_FONT = "Courier New"

# Side of the square cell every glyph is rasterized into
GLYPH_SIZE = 16

# Perceptual luminance weights for (R, G, B)
LUMINANCE_WEIGHTS = (0.2126, 0.7152, 0.0722)
WHITE = (255, 255, 255)

ENV_PREFIX = "GLYPHGRID_"


@dataclass
class Settings:
    charset: str = DEFAULT_CHARSET
    resolution: int = DEFAULT_RESOLUTION
    output: str = DEFAULT_OUTPUT
    html_path: str = DEFAULT_HTML_PATH
    html_font: str = DEFAULT_HTML_FONT
    font_path: str | None = None
    log_level: str = "WARNING"

    @classmethod
    def from_env(cls, environ=None) -> "Settings":
        """Build settings from GLYPHGRID_* variables, falling back to the defaults."""
        env = os.environ if environ is None else environ

        def get(name, default):
            return env.get(ENV_PREFIX + name, default)

        resolution = get("RESOLUTION", None)
        try:
            resolution = int(resolution) if resolution is not None else DEFAULT_RESOLUTION
        except ValueError:
            raise ValueError(f"{ENV_PREFIX}RESOLUTION must be an integer, got {resolution!r}") from None

        return cls(
            charset=get("CHARSET", DEFAULT_CHARSET),
            resolution=resolution,
            output=get("OUTPUT", DEFAULT_OUTPUT),
            html_path=get("HTML_PATH", DEFAULT_HTML_PATH),
            html_font=get("HTML_FONT", DEFAULT_HTML_FONT),
            font_path=get("FONT_PATH", None),
            log_level=get("LOG_LEVEL", "WARNING").upper(),
        )
