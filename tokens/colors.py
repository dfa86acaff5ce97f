"""
Color normalization for Figma variable values.

Figma stores colors as float components in [0, 1]. Tokens are exported as
8-digit lower-case hex strings (#rrggbbaa), alpha always included.
"""

import math
from dataclasses import dataclass
from typing import Any, Mapping

TRANSPARENT_BLACK = "#00000000"
VARIABLE_ALIAS = "VARIABLE_ALIAS"


def _channel(component: float) -> int:
    # Half-up rounding, clamped to a single byte
    return max(0, min(255, math.floor(component * 255 + 0.5)))


@dataclass(frozen=True)
class ColorComponents:
    """RGBA color with float components, as Figma stores them."""
    r: float = 0.0
    g: float = 0.0
    b: float = 0.0
    a: float = 1.0

    @classmethod
    def from_value(cls, value: Mapping[str, Any]) -> "ColorComponents":
        """Build from a Figma color mapping, filling in missing components."""
        r = value.get('r')
        g = value.get('g')
        b = value.get('b')
        a = value.get('a')
        return cls(
            r=0.0 if r is None else float(r),
            g=0.0 if g is None else float(g),
            b=0.0 if b is None else float(b),
            a=1.0 if a is None else float(a),
        )

    @property
    def hex(self) -> str:
        """#rrggbbaa string."""
        return "#" + "".join(f"{_channel(c):02x}" for c in (self.r, self.g, self.b, self.a))


def is_color_value(value: Any) -> bool:
    """True for an RGB/RGBA mapping."""
    return isinstance(value, Mapping) and 'r' in value


def is_alias_value(value: Any) -> bool:
    """True for a {"type": "VARIABLE_ALIAS", "id": ...} reference."""
    return isinstance(value, Mapping) and value.get('type') == VARIABLE_ALIAS


def normalize_color(value: Any) -> str:
    """
    Convert a color value to #rrggbbaa.

    Accepts a ColorComponents or a mapping with optional r/g/b/a keys.
    Anything else yields fully transparent black instead of raising.
    """
    if isinstance(value, ColorComponents):
        return value.hex
    if not isinstance(value, Mapping):
        return TRANSPARENT_BLACK
    try:
        return ColorComponents.from_value(value).hex
    except (TypeError, ValueError):
        return TRANSPARENT_BLACK
