"""
Color resolution for flowchart styling.

Canvas colors are either a palette index ("1".."6") or a literal color
string. Indices resolve through the default palette merged with caller
overrides; anything else passes through untouched.
"""

import math
import re
from typing import Dict, Mapping, Optional

# Default canvas palette
DEFAULT_COLORS: Dict[str, str] = {
    "1": "#fb464c",  # red
    "2": "#e9973f",  # orange
    "3": "#e0de71",  # yellow
    "4": "#44cf6e",  # green
    "5": "#53dfdd",  # cyan
    "6": "#a882ff",  # purple
}

# Outline colors are the fill darkened by this percentage
OUTLINE_DARKEN_PERCENT = -20

_HEX_RE = re.compile(r"#?([0-9A-Fa-f]{6}|[0-9A-Fa-f]{3})")


def adjust_brightness(hex_color: str, percent: float) -> str:
    """
    Shift every RGB channel of a hex color by a percentage of full scale.

    Each channel moves by ``2.55 * percent`` rounded half up and is clamped to
    0..255. Shorthand ``#abc`` is expanded first.

    Args:
        hex_color: Color such as "#44cf6e" (leading "#" optional).
        percent: Positive to brighten, negative to darken.

    Returns:
        The adjusted color as "#rrggbb", or ``hex_color`` unchanged if it is
        not a hex color (e.g. a CSS color name).
    """
    match = _HEX_RE.fullmatch(hex_color)
    if not match:
        return hex_color

    digits = match.group(1)
    if len(digits) == 3:
        digits = "".join(ch * 2 for ch in digits)

    # Half-way values round up, not to even
    amount = math.floor(2.55 * percent + 0.5)
    channels = []
    for i in range(0, 6, 2):
        value = int(digits[i : i + 2], 16) + amount
        channels.append(max(0, min(255, value)))

    return "#" + "".join(f"{value:02x}" for value in channels)


class ColorMap:
    """
    Default palette merged with caller overrides.

    Overrides are expected to be validated already (see
    ``validator.validate_custom_colors``); the merge is built once.
    """

    def __init__(self, overrides: Optional[Mapping[str, str]] = None):
        self.colors: Dict[str, str] = {**DEFAULT_COLORS, **(overrides or {})}

    def resolve(self, color: str) -> str:
        """Return the palette color for an index, else the value itself."""
        return self.colors.get(color, color)

    def outline(self, color: str) -> str:
        """Return the resolved color darkened for use as a stroke."""
        return adjust_brightness(self.resolve(color), OUTLINE_DARKEN_PERCENT)
