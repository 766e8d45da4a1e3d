"""
Utility functions for game mechanics
"""

from __future__ import annotations

from typing import NamedTuple, Optional

import numpy as np


class Rect(NamedTuple):
    """Axis-aligned rectangle in canvas pixel space (y grows downwards)"""
    left: float
    top: float
    right: float
    bottom: float


def intersects(a: Rect, b: Rect) -> bool:
    """Check if two rectangles overlap; touching edges count as overlap"""
    return not (
        b.left > a.right
        or b.right < a.left
        or b.top > a.bottom
        or b.bottom < a.top
    )


def clamp(x: float, lo: float, hi: float) -> float:
    """Clamp value between low and high bounds"""
    return lo if x < lo else hi if x > hi else x


def make_rng(seed: Optional[int] = None) -> np.random.Generator:
    """Create the random generator used for spawn positions and drops"""
    return np.random.default_rng(seed)
