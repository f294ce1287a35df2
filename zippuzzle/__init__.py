"""Zip path puzzle generator and interactive path engine.

This package exposes the public API surface via:

- ``zippuzzle.engine.generator.PuzzleGenerator``: orchestrates puzzle generation.
- ``zippuzzle.engine.session.InteractiveSession``: drives a player's path.
- ``zippuzzle.engine.validator`` helpers: solution checks and hints.
"""

from .core.constants import SessionState, Strategy
from .core.exceptions import (
    GenerationExhaustedError,
    IllegalMoveError,
    InvalidDotCountError,
    ValidationError,
    ZipPuzzleError,
)
from .core.models import Checkpoint, Position, Puzzle
from .engine.generator import (
    GeneratorConfig,
    PuzzleGenerator,
    build_serpentine_puzzle,
    generate_puzzle,
    generate_with_fallback,
)
from .engine.session import InteractiveSession, MoveResult
from .engine.validator import (
    SolutionReport,
    completion_percentage,
    next_expected_checkpoint,
    validate_solution,
)

__all__ = [
    "Checkpoint",
    "GenerationExhaustedError",
    "GeneratorConfig",
    "IllegalMoveError",
    "InteractiveSession",
    "InvalidDotCountError",
    "MoveResult",
    "Position",
    "Puzzle",
    "PuzzleGenerator",
    "SessionState",
    "SolutionReport",
    "Strategy",
    "ValidationError",
    "ZipPuzzleError",
    "build_serpentine_puzzle",
    "completion_percentage",
    "generate_puzzle",
    "generate_with_fallback",
    "next_expected_checkpoint",
    "validate_solution",
]

__version__ = "0.1.0"
