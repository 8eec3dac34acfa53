"""
bftape error hierarchy.

Every failure the engine can signal derives from BFError. None of them are
handled inside the lexer, parser or interpreter; they propagate to the
execution-unit boundary (bftape.core / bftape.cli), which decides whether to
abort or report and continue.
"""

from __future__ import annotations

from typing import Optional


class BFError(Exception):
    """Base class for all bftape errors."""


class ResourceExhaustedError(BFError):
    """Memory or stack ran out while building or walking the program."""

    def __init__(self, stage: str, cause: Optional[BaseException] = None):
        reason = f" ({type(cause).__name__})" if cause is not None else ""
        super().__init__(f"{stage}: out of resources{reason}")
        self.stage = stage


class SourceOpenError(BFError):
    """A character source could not be obtained."""

    def __init__(self, path: str, cause: OSError):
        super().__init__(f"can't open '{path}': {cause.strerror or cause}")
        self.path = path
        self.cause = cause


class UnmatchedBracketError(BFError):
    """A bracket has no partner."""

    def __init__(self, message: str, position: int):
        super().__init__(message)
        self.position = position


class UnmatchedOpenBracketError(UnmatchedBracketError):
    def __init__(self, position: int):
        super().__init__("Unmatched '['", position)


class UnmatchedCloseBracketError(UnmatchedBracketError):
    def __init__(self, position: int):
        super().__init__("Unmatched ']'", position)


class TapeBoundsError(BFError):
    """A move would take the cursor off either end of the tape."""

    def __init__(self, direction: str, cursor: int):
        edge = "first" if direction == "left" else "last"
        super().__init__(f"can't move {direction} on the tape when at the {edge} block")
        self.direction = direction
        self.cursor = cursor
