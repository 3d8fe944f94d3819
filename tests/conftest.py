import shutil
import subprocess

import numpy as np
import pytest

from glyphgrid.glyphs import GlyphPalette

_FONT_CANDIDATES = [
    "/usr/share/fonts/truetype/dejavu/DejaVuSansMono.ttf",
    "/usr/share/fonts/truetype/liberation/LiberationMono-Regular.ttf",
    "/usr/share/fonts/TTF/DejaVuSansMono.ttf",
    "/usr/share/fonts/dejavu-sans-mono-fonts/DejaVuSansMono.ttf",
]

CELL = 16


def _find_monospace_font():
    """Find a monospace font on the system."""
    for path in _FONT_CANDIDATES:
        if shutil.os.path.exists(path):
            return path
    result = shutil.which("fc-match")
    if result:
        out = subprocess.run(["fc-match", "-f", "%{file}", "monospace"], capture_output=True, text=True)
        if out.returncode == 0 and out.stdout.strip():
            return out.stdout.strip()
    return None


FONT_PATH = _find_monospace_font()


def fake_bitmap(char):
    """16x16 bitmap with ord(char) - 32 ink cells: ' ' is blank and density rises with the code."""
    mask = np.zeros(CELL * CELL, dtype=bool)
    mask[: ord(char) - 32] = True
    return mask.reshape(CELL, CELL)


@pytest.fixture
def font_path():
    if FONT_PATH is None:
        pytest.skip("No monospace font found on system")
    return FONT_PATH


@pytest.fixture
def bitmap():
    return fake_bitmap


@pytest.fixture
def make_palette():
    def _make(chars):
        return GlyphPalette(chars, bitmap=fake_bitmap)

    return _make


@pytest.fixture
def digits(make_palette):
    return make_palette("0123456789")
