"""
Game profile registry.

Static description of each supported game's numeric shape. Every other
module asks this registry for cardinalities and ranges instead of
hardcoding them.

    SSQ  : 6 of 1-33 (red) + 1 of 1-16 (blue)
    DLT  : 5 of 1-35 (front) + 2 of 1-12 (back)
    FC3D : three independent digits 0-9 (hundreds, tens, ones)
"""
from dataclasses import dataclass
from typing import Tuple

from .errors import UnknownGameError, UnknownZoneError

PRIMARY = "primary"
SECONDARY = "secondary"

ZONE_ALIASES = {
    "primary": PRIMARY,
    "red": PRIMARY,
    "front": PRIMARY,
    "secondary": SECONDARY,
    "blue": SECONDARY,
    "back": SECONDARY,
}


@dataclass(frozen=True)
class GameProfile:
    game_id: str
    display_name: str
    primary_count: int
    primary_range: Tuple[int, int]
    secondary_count: int = 0
    secondary_range: Tuple[int, int] = (0, 0)
    positions: Tuple[str, ...] = ()

    @property
    def is_positional(self) -> bool:
        return bool(self.positions)

    def selectors(self) -> Tuple[str, ...]:
        """Zone / position selectors valid for this game."""
        if self.is_positional:
            return self.positions
        if self.secondary_count:
            return (PRIMARY, SECONDARY)
        return (PRIMARY,)

    def resolve_zone(self, zone: str) -> str:
        """Normalise a selector ('red', 'back', 'tens', ...) to its canonical name."""
        key = str(zone).strip().lower()
        if self.is_positional:
            if key in self.positions:
                return key
        else:
            canonical = ZONE_ALIASES.get(key)
            if canonical == PRIMARY or (canonical == SECONDARY and self.secondary_count):
                return canonical
        raise UnknownZoneError(f"Zone '{zone}' is not defined for {self.game_id}")

    def zone_range(self, zone: str) -> Tuple[int, int]:
        """Inclusive (low, high) range of the selected zone."""
        canonical = self.resolve_zone(zone)
        if canonical == SECONDARY:
            return self.secondary_range
        return self.primary_range

    def zone_numbers(self, record, zone: str) -> list:
        """Numbers of `record` that belong to the selected zone or position."""
        canonical = self.resolve_zone(zone)
        if self.is_positional:
            return [record.primary[self.positions.index(canonical)]]
        if canonical == SECONDARY:
            return list(record.secondary)
        return list(record.primary)

    def is_valid(self, record) -> bool:
        """Check the DrawRecord invariant: cardinalities, ranges and a date."""
        if not record.date:
            return False
        if len(record.primary) != self.primary_count:
            return False
        if len(record.secondary) != self.secondary_count:
            return False
        lo, hi = self.primary_range
        if not all(_is_int(n) and lo <= n <= hi for n in record.primary):
            return False
        lo, hi = self.secondary_range
        return all(_is_int(n) and lo <= n <= hi for n in record.secondary)


def _is_int(value) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


PROFILES = {
    "SSQ": GameProfile(
        game_id="SSQ",
        display_name="Double Color Ball (双色球)",
        primary_count=6,
        primary_range=(1, 33),
        secondary_count=1,
        secondary_range=(1, 16),
    ),
    "DLT": GameProfile(
        game_id="DLT",
        display_name="Super Lotto (大乐透)",
        primary_count=5,
        primary_range=(1, 35),
        secondary_count=2,
        secondary_range=(1, 12),
    ),
    "FC3D": GameProfile(
        game_id="FC3D",
        display_name="Welfare 3D (福彩3D)",
        primary_count=3,
        primary_range=(0, 9),
        positions=("hundreds", "tens", "ones"),
    ),
}


def profile_for(game_id: str) -> GameProfile:
    """Return the profile for `game_id` (case-insensitive)."""
    key = str(game_id).strip().upper()
    try:
        return PROFILES[key]
    except KeyError:
        raise UnknownGameError(
            f"Unknown game '{game_id}'. Expected one of: {', '.join(PROFILES)}"
        ) from None
