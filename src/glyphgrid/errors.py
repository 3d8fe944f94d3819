class GlyphGridError(Exception):
    """Base class for errors raised by glyphgrid."""


class InvalidResolutionError(GlyphGridError, ValueError):
    pass


class RegionOutOfBoundsError(GlyphGridError, IndexError):
    pass


class PaletteTooSmallError(GlyphGridError, ValueError):
    pass


class DegeneratePaletteError(GlyphGridError, ValueError):
    """All palette entries share one raw brightness, so normalization is undefined."""


class NoMatchError(GlyphGridError, LookupError):
    """No palette entry satisfies the bound of a rounding policy."""


class CommandError(GlyphGridError):
    """A shell command was rejected. The message is shown to the user as-is."""


class UnknownCommandError(CommandError):
    pass


class BadArgumentsError(CommandError):
    pass
