import numpy as np
import pytest

from glyphgrid.errors import DegeneratePaletteError, NoMatchError, PaletteTooSmallError
from glyphgrid.glyphs import GlyphPalette
from glyphgrid.matcher import Matcher, RoundingPolicy

# With the fake bitmap, "0".."9" normalize to 0, 1/9, ..., 1


def test_default_policy_is_nearest(digits):
    assert Matcher(digits).policy is RoundingPolicy.NEAREST


def test_nearest_exact(digits):
    matcher = Matcher(digits)
    assert matcher.match(0.0) == "0"
    assert matcher.match(1.0) == "9"
    assert matcher.match(4 / 9) == "4"


def test_nearest_closest(digits):
    matcher = Matcher(digits)
    assert matcher.match(0.05) == "0"
    assert matcher.match(0.07) == "1"
    assert matcher.match(0.97) == "9"


def test_nearest_tie_goes_to_smaller_code(make_palette):
    # " " -> 0.0, "0" -> 0.5, "@" -> 1.0
    palette = make_palette(" 0@")
    matcher = Matcher(palette)
    lo = palette.normalized_brightness(" ")
    hi = palette.normalized_brightness("0")
    assert matcher.match((lo + hi) / 2) == " "


def test_nearest_tie_independent_of_insertion_order(make_palette):
    # " " -> 0.0, "(" -> 0.25, "0" -> 0.5, "@" -> 1.0
    forward = make_palette("(0@ ")
    backward = make_palette(" @0(")
    assert Matcher(forward).match(0.375) == "("
    assert Matcher(backward).match(0.375) == "("


def test_at_least(digits):
    matcher = Matcher(digits, RoundingPolicy.AT_LEAST)
    assert matcher.match(0.0) == "0"
    assert matcher.match(0.01) == "1"
    assert matcher.match(4 / 9) == "4"
    assert matcher.match(0.99) == "9"


def test_at_most(digits):
    matcher = Matcher(digits, RoundingPolicy.AT_MOST)
    assert matcher.match(1.0) == "9"
    assert matcher.match(0.99) == "8"
    assert matcher.match(4 / 9) == "4"
    assert matcher.match(0.01) == "0"


def test_at_least_without_candidate_raises(digits):
    matcher = Matcher(digits, RoundingPolicy.AT_LEAST)
    with pytest.raises(NoMatchError):
        matcher.match(1.01)


def test_at_most_without_candidate_raises(digits):
    matcher = Matcher(digits, RoundingPolicy.AT_MOST)
    with pytest.raises(NoMatchError):
        matcher.match(-0.01)


def test_no_match_is_a_lookup_error(digits):
    with pytest.raises(LookupError):
        Matcher(digits).match(2.0, RoundingPolicy.AT_LEAST)


def test_policy_argument_overrides_matcher_policy(digits):
    matcher = Matcher(digits)
    assert matcher.match(0.01, RoundingPolicy.AT_LEAST) == "1"
    assert matcher.match(0.01) == "0"


def test_set_policy(digits):
    matcher = Matcher(digits)
    matcher.set_policy(RoundingPolicy.AT_MOST)
    assert matcher.policy is RoundingPolicy.AT_MOST
    assert matcher.match(0.99) == "8"


def test_match_follows_palette_changes(digits):
    matcher = Matcher(digits)
    digits.remove("0")
    assert matcher.match(0.0) == "1"


def test_match_rejects_small_palette(make_palette):
    with pytest.raises(PaletteTooSmallError):
        Matcher(make_palette("a")).match(0.5)


def test_match_rejects_degenerate_palette():
    palette = GlyphPalette("ab", bitmap=lambda c: np.zeros((2, 2), dtype=bool))
    with pytest.raises(DegeneratePaletteError):
        Matcher(palette).match(0.5)


@pytest.mark.parametrize(
    "tag, policy",
    [("abs", RoundingPolicy.NEAREST), ("up", RoundingPolicy.AT_LEAST), ("down", RoundingPolicy.AT_MOST)],
)
def test_policy_from_tag(tag, policy):
    assert RoundingPolicy.from_tag(tag) is policy


def test_policy_from_unknown_tag():
    with pytest.raises(ValueError, match="Unknown rounding policy"):
        RoundingPolicy.from_tag("sideways")
