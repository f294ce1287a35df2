"""Placement of numbered checkpoints along a finished path."""

from __future__ import annotations

import math
import random
from typing import List, Optional, Sequence

from ..core.constants import DEFAULT_DOTS_PER_GRID_SIZE, MAX_CHECKPOINT_JITTER
from ..core.exceptions import InvalidDotCountError
from ..core.models import Checkpoint, Position
from ..utils.logger import get_logger


LOGGER = get_logger(__name__)


def default_dot_count(grid_size: int) -> int:
    """Checkpoint count used when the caller does not pick one."""

    count = DEFAULT_DOTS_PER_GRID_SIZE.get(grid_size, math.ceil(1.5 * grid_size))
    return max(2, min(count, grid_size * grid_size))


def validate_dot_count(dot_count: int, path_length: int) -> None:
    if dot_count < 2 or dot_count > path_length:
        raise InvalidDotCountError(
            f"Invalid dot count: {dot_count}. Must be between 2 and {path_length}"
        )


def base_indices(path_length: int, dot_count: int) -> List[int]:
    """Evenly spaced path indices, first and last pinned to the path ends."""

    validate_dot_count(dot_count, path_length)
    step = (path_length - 1) // (dot_count - 1)
    indices = [0]
    for i in range(1, dot_count - 1):
        indices.append(min(i * step, path_length - 2))
    indices.append(path_length - 1)
    return indices


def jitter_indices(indices: List[int], rng: random.Random) -> List[int]:
    """Nudge intermediate indices forward without reaching their neighbours.

    Works left to right so each index is bounded by its already-moved
    predecessor and its not-yet-moved successor.
    """

    result = list(indices)
    for i in range(1, len(result) - 1):
        low = result[i - 1] + 1
        high = result[i + 1] - 1
        width = high - low
        if width <= 0:
            continue
        max_offset = min(MAX_CHECKPOINT_JITTER, width // 3)
        offset = rng.randint(0, max_offset)
        result[i] = min(result[i] + offset, high)
    return result


def select_checkpoints(
    path: Sequence[Position],
    dot_count: int,
    rng: Optional[random.Random] = None,
) -> List[Checkpoint]:
    """Place ``dot_count`` checkpoints on ``path``.

    Checkpoint 1 sits on the first cell and checkpoint ``dot_count`` on the
    last. The intermediate ones are spread evenly and then jittered forward
    by a few steps so puzzles of the same size do not look alike.

    Raises:
        InvalidDotCountError: if ``dot_count`` is below 2 or exceeds the path
            length.
    """

    rng = rng or random.Random()
    indices = jitter_indices(base_indices(len(path), dot_count), rng)
    LOGGER.debug("Checkpoint path indices: %s", indices)
    return [
        Checkpoint(position=path[index], number=number)
        for number, index in enumerate(indices, start=1)
    ]


def evenly_spaced_checkpoints(path: Sequence[Position], dot_count: int) -> List[Checkpoint]:
    """Deterministic placement at ``floor(i * (len - 1) / (dot_count - 1))``."""

    validate_dot_count(dot_count, len(path))
    last = len(path) - 1
    return [
        Checkpoint(position=path[(i * last) // (dot_count - 1)], number=i + 1)
        for i in range(dot_count)
    ]
