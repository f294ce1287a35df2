"""Neighbor-ordering heuristics for the Hamiltonian path search.

Every strategy shares one signature, ``order(candidates, context)``, and
returns a new list holding the same positions in the order the search should
try them. Strategies never mutate their inputs and draw randomness only from
``context.rng``.
"""

from __future__ import annotations

import random
from dataclasses import dataclass
from typing import Callable, Dict, List, Sequence, Tuple

from ..core.constants import (
    ADAPTIVE_LARGE_GRID,
    ADAPTIVE_WEIGHTS,
    ADAPTIVE_WEIGHTS_LARGE,
    SMART_FALLBACK_THRESHOLD,
    TEMPERATURE_END,
    TEMPERATURE_START,
    WARNSDORFF_BASE,
    WARNSDORFF_FLOOR,
    WEIGHT_JITTER,
    Strategy,
)
from ..core.models import Position


@dataclass(frozen=True)
class OrderingContext:
    """Inputs a strategy may consult besides the candidate list.

    ``accessibility[i]`` is the number of still-unvisited orthogonal
    neighbours of ``candidates[i]``. ``filled_fraction`` is the share of grid
    cells already on the path.
    """

    accessibility: Sequence[int]
    filled_fraction: float
    rng: random.Random


OrderingFn = Callable[[Sequence[Position], OrderingContext], List[Position]]


def shuffle_order(candidates: Sequence[Position], context: OrderingContext) -> List[Position]:
    """Fisher-Yates shuffle."""

    result = list(candidates)
    for i in range(len(result) - 1, 0, -1):
        j = context.rng.randint(0, i)
        result[i], result[j] = result[j], result[i]
    return result


def warnsdorff_order(candidates: Sequence[Position], context: OrderingContext) -> List[Position]:
    """Most constrained candidate first, ties broken randomly."""

    scored = [
        (context.accessibility[i], context.rng.random(), i)
        for i in range(len(candidates))
    ]
    scored.sort()
    return [candidates[i] for _, _, i in scored]


def warnsdorff_weight(accessibility: int) -> float:
    return WARNSDORFF_BASE ** accessibility + WARNSDORFF_FLOOR


def probabilistic_order(candidates: Sequence[Position], context: OrderingContext) -> List[Position]:
    """Weighted draw without replacement biased towards low accessibility."""

    rng = context.rng
    remaining: List[Tuple[float, Position]] = []
    for i, candidate in enumerate(candidates):
        weight = warnsdorff_weight(context.accessibility[i])
        weight *= (1.0 - WEIGHT_JITTER) + rng.random() * (2 * WEIGHT_JITTER)
        remaining.append((weight, candidate))
    return weighted_draw(remaining, rng)


def weighted_draw(items: List[Tuple[float, Position]], rng: random.Random) -> List[Position]:
    remaining = list(items)
    result: List[Position] = []
    while remaining:
        total = sum(weight for weight, _ in remaining)
        threshold = rng.random() * total
        chosen = len(remaining) - 1  # float rounding can leave threshold > 0
        for index, (weight, _) in enumerate(remaining):
            threshold -= weight
            if threshold <= 0:
                chosen = index
                break
        result.append(remaining.pop(chosen)[1])
    return result


def temperature(filled_fraction: float) -> float:
    fraction = min(max(filled_fraction, 0.0), 1.0)
    return TEMPERATURE_START - fraction * (TEMPERATURE_START - TEMPERATURE_END)


def temperature_order(candidates: Sequence[Position], context: OrderingContext) -> List[Position]:
    """Random early in the path, probabilistic Warnsdorff as it fills up."""

    if context.rng.random() < temperature(context.filled_fraction):
        return shuffle_order(candidates, context)
    return probabilistic_order(candidates, context)


def smart_fallback_order(candidates: Sequence[Position], context: OrderingContext) -> List[Position]:
    """Random while unconstrained, probabilistic Warnsdorff otherwise."""

    if len(candidates) >= SMART_FALLBACK_THRESHOLD:
        return shuffle_order(candidates, context)
    return probabilistic_order(candidates, context)


STRATEGIES: Dict[Strategy, OrderingFn] = {
    Strategy.RANDOM: shuffle_order,
    Strategy.WARNSDORFF: warnsdorff_order,
    Strategy.PROBABILISTIC: probabilistic_order,
    Strategy.TEMPERATURE: temperature_order,
    Strategy.SMART_FALLBACK: smart_fallback_order,
}


def get_strategy(strategy: Strategy | str) -> OrderingFn:
    key = Strategy(strategy)
    if key not in STRATEGIES:
        raise ValueError(
            f"Strategy '{key.value}' has no ordering function; "
            "resolve it with choose_adaptive_strategy first"
        )
    return STRATEGIES[key]


def choose_adaptive_strategy(grid_size: int, rng: random.Random) -> Strategy:
    """Pick a concrete strategy with weights tuned by grid size."""

    weights = ADAPTIVE_WEIGHTS_LARGE if grid_size >= ADAPTIVE_LARGE_GRID else ADAPTIVE_WEIGHTS
    total = sum(weight for _, weight in weights)
    threshold = rng.random() * total
    for strategy, weight in weights:
        threshold -= weight
        if threshold <= 0:
            return strategy
    return weights[0][0]


def resolve_strategy(strategy: Strategy | str, grid_size: int, rng: random.Random) -> Strategy:
    key = Strategy(strategy)
    if key == Strategy.ADAPTIVE:
        return choose_adaptive_strategy(grid_size, rng)
    return key
