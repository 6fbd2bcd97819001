"""Deterministic category colours.

A new category gets the first hue on a lattice anchored at its type's start
hue that keeps at least ``min_diff`` degrees (circular) away from every hue
already used by that type. The separation requirement is relaxed in steps of
10 degrees down to 10; past that a random hue is used.
"""
import math
import random
import re
from typing import Iterable

from utils.constants import (
    COLOR_LIGHTNESS,
    COLOR_SATURATION,
    HUE_DIFF_STEP,
    MIN_HUE_DIFF,
    MIN_HUE_DIFF_FLOOR,
    START_HUES,
)
from utils.logging_setup import get_logger

log = get_logger("tally.services.color")

_HEX_DIGITS = re.compile(r"[0-9a-fA-F]{3}|[0-9a-fA-F]{6}")


def _round_half_up(x: float) -> int:
    return int(math.floor(x + 0.5))


def hsl_to_hex(h: float, s: float, l: float) -> str:
    """HSL (degrees, percent, percent) to '#rrggbb'."""
    l /= 100
    a = s * min(l, 1 - l) / 100

    def channel(n: int) -> str:
        k = (n + h / 30) % 12
        value = l - a * max(min(k - 3, 9 - k, 1), -1)
        return f"{_round_half_up(255 * value):02x}"

    return f"#{channel(0)}{channel(8)}{channel(4)}"


def _parse_rgb(hex_str: str) -> tuple[int, int, int]:
    digits = hex_str.strip().lstrip("#")
    if not _HEX_DIGITS.fullmatch(digits):
        return 0, 0, 0
    if len(digits) == 3:
        digits = "".join(c * 2 for c in digits)
    return int(digits[0:2], 16), int(digits[2:4], 16), int(digits[4:6], 16)


def hex_to_hsl(hex_str: str) -> tuple[int, float, float]:
    """'#abc' or '#aabbcc' to (hue 0-359, saturation %, lightness %).

    Anything else is treated as black.
    """
    r, g, b = (c / 255 for c in _parse_rgb(hex_str))
    cmin, cmax = min(r, g, b), max(r, g, b)
    delta = cmax - cmin

    if delta == 0:
        h = 0.0
    elif cmax == r:
        h = math.fmod((g - b) / delta, 6)
    elif cmax == g:
        h = (b - r) / delta + 2
    else:
        h = (r - g) / delta + 4

    hue = _round_half_up(h * 60)
    if hue < 0:
        hue += 360

    l = (cmax + cmin) / 2
    s = 0.0 if delta == 0 else delta / (1 - abs(2 * l - 1))
    return hue, round(s * 100, 1), round(l * 100, 1)


def hue_distance(a: float, b: float) -> float:
    """Circular distance between two hues in degrees (0-180)."""
    diff = abs(a - b) % 360
    return min(diff, 360 - diff)


def _first_separated_hue(start: int, hues: list[int], min_diff: int) -> int | None:
    for k in range(360 // min_diff + 5):
        candidate = (start + k * min_diff) % 360
        if all(hue_distance(candidate, h) >= min_diff for h in hues):
            return candidate
    return None


def pick_hue(type_: str, existing_hues: Iterable[float], rng=None) -> float:
    """Choose a hue for a new category of ``type_`` given hues already in use."""
    hues = sorted(existing_hues)
    start = START_HUES.get(type_, START_HUES["expense"])

    min_diff = MIN_HUE_DIFF
    while min_diff >= MIN_HUE_DIFF_FLOOR:
        hue = _first_separated_hue(start, hues, min_diff)
        if hue is not None:
            if min_diff < MIN_HUE_DIFF:
                log.debug("relaxed hue separation to %d for %s", min_diff, type_)
            return hue
        min_diff -= HUE_DIFF_STEP

    log.warning(
        "no separated hue left for %s among %d colours, picking at random",
        type_, len(hues),
    )
    rng = rng or random
    return (start + rng.random() * 360) % 360


def assign_color(type_: str, existing_colors: Iterable[str], rng=None) -> str:
    """Return a '#rrggbb' colour for a new category of ``type_``.

    ``existing_colors`` are the colours of the other categories of the same
    type; only their hue is considered. ``rng`` (anything with ``random()``)
    drives the last-resort fallback and defaults to the ``random`` module.
    """
    hues = [hex_to_hsl(c)[0] for c in existing_colors]
    hue = pick_hue(type_, hues, rng=rng)
    return hsl_to_hex(hue, COLOR_SATURATION, COLOR_LIGHTNESS)
