"""
Frequency + diversity palette extraction for small pixel art palettes.

A lightweight alternative to k-means or median cut: near-identical colors
are bucketed, counted, ordered by frequency (with mid-luminance colors
preferred among similar counts) and then picked greedily so that every new
palette entry is visibly different from the ones already chosen.
"""

import math
import logging
from dataclasses import dataclass
from functools import cmp_to_key
from typing import List, Optional, Tuple

import numpy as np

from .color_math import luminance, rgb_distance, rgb_to_hex
from .config import require_positive_int

logger = logging.getLogger(__name__)

# Pixels with alpha below this are transparent
ALPHA_THRESHOLD = 128
BUCKET_STEP = 8

# Counts closer than this fraction of the candidate count are "tied"
TIE_BAND = 0.1
MID_LUMINANCE = 128

# Minimum RGB distance to the palette while it is less than half full,
# and once it is at least half full
WIDE_SPACING = 30
NARROW_SPACING = 20
# Palettes smaller than this accept any candidate
DIVERSITY_FLOOR = 4


@dataclass(frozen=True)
class PaletteEntry:
    """A palette color with the number of pixels that fell in its bucket."""
    r: int
    g: int
    b: int
    count: int = 0

    @property
    def rgb(self) -> Tuple[int, int, int]:
        return (self.r, self.g, self.b)

    @property
    def hex(self) -> str:
        return rgb_to_hex(self.rgb)

    @property
    def luminance(self) -> float:
        return luminance(self.r, self.g, self.b)


def bucket_channel(value: float) -> int:
    """Round a channel to the nearest multiple of 8 (halves up), capped at 255."""
    return min(255, int(math.floor(value / BUCKET_STEP + 0.5)) * BUCKET_STEP)


def _as_pixel_rows(rgba: np.ndarray) -> np.ndarray:
    arr = np.asarray(rgba)
    if arr.shape[-1] != 4:
        raise ValueError(f"Expected RGBA pixels, got shape {arr.shape}")
    return arr.reshape(-1, 4)


def opaque_rgb(rgba: np.ndarray) -> np.ndarray:
    """(K, 3) int array of the RGB values of opaque pixels, in scan order."""
    rows = _as_pixel_rows(rgba)
    mask = rows[:, 3] >= ALPHA_THRESHOLD
    return rows[mask, :3].astype(np.int64)


def count_buckets(rgba: np.ndarray) -> List[PaletteEntry]:
    """
    Bucket opaque pixels and count them.

    Args:
        rgba: RGBA pixels, any shape ending in 4

    Returns:
        One entry per distinct bucketed color, in order of first appearance
        in a row-major scan.
    """
    rgb = opaque_rgb(rgba)
    if len(rgb) == 0:
        return []

    buckets = np.floor(rgb / BUCKET_STEP + 0.5).astype(np.int64) * BUCKET_STEP
    np.minimum(buckets, 255, out=buckets)

    keys = (buckets[:, 0] << 16) | (buckets[:, 1] << 8) | buckets[:, 2]
    unique_keys, first_index, counts = np.unique(keys, return_index=True, return_counts=True)

    entries = []
    for i in np.argsort(first_index, kind="stable"):
        key = int(unique_keys[i])
        entries.append(PaletteEntry(
            r=(key >> 16) & 0xFF,
            g=(key >> 8) & 0xFF,
            b=key & 0xFF,
            count=int(counts[i]),
        ))
    return entries


def prioritize(candidates: List[PaletteEntry]) -> List[PaletteEntry]:
    """
    Order candidates by frequency, preferring mid-luminance colors among
    candidates whose counts are within the tie band of each other.
    """
    band = len(candidates) * TIE_BAND

    def compare(a: PaletteEntry, b: PaletteEntry) -> int:
        if abs(a.count - b.count) > band:
            return b.count - a.count
        da = abs(a.luminance - MID_LUMINANCE)
        db = abs(b.luminance - MID_LUMINANCE)
        return (da > db) - (da < db)

    return sorted(candidates, key=cmp_to_key(compare))


def select_diverse(ordered: List[PaletteEntry], color_count: int) -> List[PaletteEntry]:
    """Greedy pick of well-spaced colors, then fill by priority."""
    palette = [ordered[0]]

    for candidate in ordered[1:]:
        if len(palette) >= color_count:
            break
        min_distance = min(rgb_distance(candidate.rgb, entry.rgb) for entry in palette)
        threshold = WIDE_SPACING if len(palette) < color_count / 2 else NARROW_SPACING
        if min_distance > threshold or len(palette) < DIVERSITY_FLOOR:
            palette.append(candidate)

    # Not enough spread: top up with the next best candidates regardless of
    # distance. This can reintroduce near-duplicates on low-diversity images.
    if len(palette) < color_count:
        chosen = {entry.rgb for entry in palette}
        for candidate in ordered:
            if len(palette) >= color_count:
                break
            if candidate.rgb not in chosen:
                palette.append(candidate)
                chosen.add(candidate.rgb)

    return palette


def quantize_colors(rgba: np.ndarray, color_count: int = 16) -> List[PaletteEntry]:
    """
    Extract a palette of at most ``color_count`` colors from RGBA pixels.

    Transparent pixels (alpha < 128) are ignored. A fully transparent input
    gives an empty palette.

    Returns:
        Palette in selection order, most representative first
    """
    require_positive_int("color_count", color_count)

    candidates = count_buckets(rgba)
    if len(candidates) <= color_count:
        return candidates

    return select_diverse(prioritize(candidates), color_count)


class ColorQuantizer:
    """Builds bounded palettes from resampled grid buffers."""

    def __init__(self, color_count: int = 16):
        require_positive_int("color_count", color_count)
        self.color_count = color_count

    def quantize(self, rgba: np.ndarray, color_count: Optional[int] = None) -> List[PaletteEntry]:
        """
        Quantize an RGBA buffer to a palette.

        Args:
            rgba: Resampled RGBA buffer
            color_count: Overrides the quantizer's palette cap for this call

        Returns:
            Ordered palette entries
        """
        cap = self.color_count if color_count is None else color_count
        palette = quantize_colors(rgba, cap)

        if not palette:
            logger.info("No opaque pixels, palette is empty")
        else:
            logger.info("Extracted %d of at most %d colors", len(palette), cap)
            logger.debug("Palette: %s", ", ".join(f"{e.hex}x{e.count}" for e in palette))
        return palette

    def get_color_statistics(self, palette: List[PaletteEntry]) -> List[dict]:
        """Per-entry share of the counted pixels, in palette order."""
        total = sum(entry.count for entry in palette)
        stats = []
        for entry in palette:
            stats.append({
                'hex': entry.hex,
                'rgb': entry.rgb,
                'count': entry.count,
                'percentage': (entry.count / total) * 100 if total else 0.0,
            })
        return stats
