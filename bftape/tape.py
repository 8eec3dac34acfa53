"""
The bounded byte tape.

A Tape is a fixed number of byte cells plus a cursor. The cursor never leaves
[0, length - 1]: a move past either end raises TapeBoundsError instead of
wrapping. Cell arithmetic wraps modulo 256.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from bftape.errors import TapeBoundsError


DEFAULT_TAPE_SIZE = 100


@dataclass
class Tape:
    length: int = DEFAULT_TAPE_SIZE
    cells: bytearray = field(init=False, repr=False, default_factory=bytearray)
    cursor: int = field(init=False, default=0)

    def __post_init__(self) -> None:
        if self.length < 1:
            raise ValueError(f"tape length must be at least 1, got {self.length}")
        self.reset()

    def reset(self) -> None:
        """Zero every cell and put the cursor back on the first block."""
        self.cells = bytearray(self.length)
        self.cursor = 0

    # ------------------------------------------------------------------
    # Cell access
    # ------------------------------------------------------------------

    @property
    def current(self) -> int:
        return self.cells[self.cursor]

    @current.setter
    def current(self, value: int) -> None:
        self.cells[self.cursor] = value & 0xFF

    def increment(self) -> None:
        self.cells[self.cursor] = (self.cells[self.cursor] + 1) & 0xFF

    def decrement(self) -> None:
        self.cells[self.cursor] = (self.cells[self.cursor] - 1) & 0xFF

    # ------------------------------------------------------------------
    # Cursor movement
    # ------------------------------------------------------------------

    def move_left(self) -> None:
        if self.cursor == 0:
            raise TapeBoundsError("left", self.cursor)
        self.cursor -= 1

    def move_right(self) -> None:
        if self.cursor == self.length - 1:
            raise TapeBoundsError("right", self.cursor)
        self.cursor += 1

    def dump(self) -> str:
        """Render the non-zero cells and the cursor, e.g. `cursor=1 [0]=2 [1]=3`."""
        parts = [f"cursor={self.cursor}"]
        parts.extend(f"[{i}]={v}" for i, v in enumerate(self.cells) if v)
        return " ".join(parts)

    def __len__(self) -> int:
        return self.length
