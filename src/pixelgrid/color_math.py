"""
Small color utilities shared across the pixelgrid pipeline.

Provides:
    - hex string parsing and normalisation ('#rgb', '#rrggbb', any case)
    - RGB tuple to '#rrggbb' formatting
    - Rec. 601 luminance and Euclidean RGB distance
"""

from __future__ import annotations

import math
from typing import Sequence, Tuple

RGB = Tuple[int, int, int]

_HEX_DIGITS = set("0123456789abcdef")


def normalize_hex(value: str) -> str:
    """Return ``value`` as a lowercase '#rrggbb' string.

    Accepts '#rgb', '#rrggbb', 'rgb' and 'rrggbb' in any case.
    """
    if not isinstance(value, str):
        raise ValueError(f"Color must be a hex string, got {type(value).__name__}")
    s = value.strip().lower()
    if s.startswith("#"):
        s = s[1:]
    if len(s) == 3:
        s = "".join(ch * 2 for ch in s)
    if len(s) != 6 or not set(s) <= _HEX_DIGITS:
        raise ValueError(f"Invalid hex color: {value!r}")
    return f"#{s}"


def is_hex_color(value) -> bool:
    """True if ``value`` is a strict '#rrggbb' string (either case)."""
    if not isinstance(value, str) or len(value) != 7 or not value.startswith("#"):
        return False
    return set(value[1:].lower()) <= _HEX_DIGITS


def hex_to_rgb(value: str) -> RGB:
    """Parse a hex color into an (r, g, b) tuple."""
    s = normalize_hex(value)
    return (int(s[1:3], 16), int(s[3:5], 16), int(s[5:7], 16))


def rgb_to_hex(rgb: Sequence[int]) -> str:
    """Format an RGB triple as '#rrggbb', clamping channels to 0-255."""
    r, g, b = (min(255, max(0, int(c))) for c in rgb[:3])
    return f"#{r:02x}{g:02x}{b:02x}"


def luminance(r: float, g: float, b: float) -> float:
    """Rec. 601 luma in the 0-255 range."""
    return 0.299 * r + 0.587 * g + 0.114 * b


def rgb_distance(a: Sequence[float], b: Sequence[float]) -> float:
    """Euclidean distance between two RGB triples."""
    return math.sqrt(
        (a[0] - b[0]) ** 2 +
        (a[1] - b[1]) ** 2 +
        (a[2] - b[2]) ** 2
    )
