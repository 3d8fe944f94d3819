import enum
import logging

from glyphgrid.errors import NoMatchError
from glyphgrid.glyphs import GlyphPalette

logger = logging.getLogger(__name__)


class RoundingPolicy(enum.Enum):
    NEAREST = "abs"
    AT_LEAST = "up"
    AT_MOST = "down"

    @classmethod
    def from_tag(cls, tag: str) -> "RoundingPolicy":
        try:
            return cls(tag)
        except ValueError:
            raise ValueError(f"Unknown rounding policy: {tag!r}") from None


class Matcher:
    """Picks the palette character whose normalized brightness best fits a target."""

    def __init__(self, palette: GlyphPalette, policy: RoundingPolicy = RoundingPolicy.NEAREST):
        self.palette = palette
        self.policy = policy

    def set_policy(self, policy: RoundingPolicy) -> None:
        self.policy = RoundingPolicy(policy)

    def match(self, target: float, policy: RoundingPolicy | None = None) -> str:
        """Return the best character for ``target`` under ``policy`` (default: the matcher's own).

        Ties go to the smaller character code. Raises NoMatchError when a
        one-sided policy has no candidate on the required side.
        """
        self.palette.check_usable()
        policy = self.policy if policy is None else policy

        # Entries iterate in character-code order, so strict comparisons keep the smaller code on ties
        best_char = None
        best_key = None
        for entry in self.palette.entries():
            value = entry.normalized
            if policy is RoundingPolicy.NEAREST:
                key = abs(value - target)
            elif policy is RoundingPolicy.AT_LEAST:
                if value < target:
                    continue
                key = value
            elif policy is RoundingPolicy.AT_MOST:
                if value > target:
                    continue
                key = -value
            else:
                raise ValueError(f"Unknown rounding policy: {policy!r}")
            if best_key is None or key < best_key:
                best_char = entry.char
                best_key = key

        if best_char is None:
            side = "at least" if policy is RoundingPolicy.AT_LEAST else "at most"
            raise NoMatchError(f"No character with brightness {side} {target:.4f}")
        return best_char
