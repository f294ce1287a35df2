"""Shared constants and enumerations for the puzzle generator."""

from __future__ import annotations

from enum import Enum
from typing import Dict, Tuple


class Strategy(str, Enum):
    """Neighbor-ordering heuristics available to the path search."""

    RANDOM = "random"
    WARNSDORFF = "warnsdorff"
    PROBABILISTIC = "probabilistic"
    TEMPERATURE = "temperature"
    SMART_FALLBACK = "smart-fallback"
    ADAPTIVE = "adaptive"


class SessionState(str, Enum):
    """States of an interactive drawing session."""

    EMPTY = "EMPTY"
    DRAWING = "DRAWING"
    WON = "WON"


# (dx, dy) in up, right, down, left order.
ORTHOGONAL_STEPS: Tuple[Tuple[int, int], ...] = ((0, -1), (1, 0), (0, 1), (-1, 0))

MIN_GRID_SIZE = 2
SUPPORTED_GRID_SIZES: Tuple[int, ...] = (3, 4, 5, 6, 7, 8)
DEFAULT_GRID_SIZE = 4

DEFAULT_DOTS_PER_GRID_SIZE: Dict[int, int] = {
    3: 4,
    4: 6,
    5: 8,
    6: 10,
    7: 12,
    8: 15,
}

DEFAULT_MAX_ATTEMPTS = 5
DEFAULT_ATTEMPT_TIMEOUT = 5.0
FAST_MAX_ATTEMPTS = 3
FAST_ATTEMPT_TIMEOUT = 3.0

# Probabilistic Warnsdorff weighting.
WARNSDORFF_BASE = 0.4
WARNSDORFF_FLOOR = 0.2
WEIGHT_JITTER = 0.2

# Temperature schedule: probability of a purely random ordering.
TEMPERATURE_START = 0.9
TEMPERATURE_END = 0.2

# Smart fallback stays random while this many candidates remain.
SMART_FALLBACK_THRESHOLD = 3

MAX_CHECKPOINT_JITTER = 3

# Adaptive strategy weights; grids from ADAPTIVE_LARGE_GRID up lean on Warnsdorff.
ADAPTIVE_WEIGHTS: Tuple[Tuple[Strategy, float], ...] = (
    (Strategy.PROBABILISTIC, 0.5),
    (Strategy.TEMPERATURE, 0.3),
    (Strategy.SMART_FALLBACK, 0.2),
)
ADAPTIVE_WEIGHTS_LARGE: Tuple[Tuple[Strategy, float], ...] = (
    (Strategy.WARNSDORFF, 0.7),
    (Strategy.PROBABILISTIC, 0.2),
    (Strategy.SMART_FALLBACK, 0.1),
)
ADAPTIVE_LARGE_GRID = 7
