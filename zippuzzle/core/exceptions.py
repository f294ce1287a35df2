"""Custom exception hierarchy for puzzle generation and play."""


class ZipPuzzleError(Exception):
    """Base exception for generator and session failures."""


class InvalidDotCountError(ZipPuzzleError):
    """Raised when a checkpoint count does not fit the path."""


class GenerationExhaustedError(ZipPuzzleError):
    """Raised when every generation attempt failed."""


class IllegalMoveError(ZipPuzzleError):
    """Raised on request when an interactive move breaks the drawing rules."""


class ValidationError(ZipPuzzleError):
    """Raised when a candidate puzzle fails its structural checks."""
