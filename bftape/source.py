"""
Character sources for the lexer.

A CharSource produces a lazy, finite, non-restartable sequence of characters.
Three variants exist:

- StringSource: an in-memory string
- FileSource:   an open file handle, read to exhaustion
- LineSource:   one line of a stream, up to (not including) the newline

Binary handles are accepted as well as text ones; bytes are decoded as
latin-1 so that every byte maps to exactly one character.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import IO, Iterator, Optional, Union


def _as_text(chunk: Union[str, bytes]) -> str:
    if isinstance(chunk, bytes):
        return chunk.decode("latin-1")
    return chunk


class CharSource(ABC):
    """Base class for everything the lexer can read from."""

    @abstractmethod
    def next_char(self) -> Optional[str]:
        """Return the next character, or None once the source is exhausted."""
        ...

    def __iter__(self) -> Iterator[str]:
        while True:
            c = self.next_char()
            if c is None:
                return
            yield c


class StringSource(CharSource):
    def __init__(self, text: str) -> None:
        self._text = text
        self._idx = 0

    def next_char(self) -> Optional[str]:
        if self._idx >= len(self._text):
            return None
        c = self._text[self._idx]
        self._idx += 1
        return c

    def __repr__(self) -> str:
        return f"<StringSource len={len(self._text)} pos={self._idx}>"


class FileSource(CharSource):
    """Reads an already-open handle in chunks until it is exhausted.

    The handle is not closed; whoever opened it owns it.
    """

    CHUNK_SIZE = 4096

    def __init__(self, handle: IO, chunk_size: int = CHUNK_SIZE) -> None:
        self._handle = handle
        self._chunk_size = chunk_size
        self._buf = ""
        self._idx = 0
        self._eof = False

    def next_char(self) -> Optional[str]:
        if self._idx >= len(self._buf):
            if self._eof:
                return None
            self._buf = _as_text(self._handle.read(self._chunk_size))
            self._idx = 0
            if not self._buf:
                self._eof = True
                return None
        c = self._buf[self._idx]
        self._idx += 1
        return c

    def __repr__(self) -> str:
        name = getattr(self._handle, "name", "?")
        return f"<FileSource {name!r}>"


class LineSource(CharSource):
    """One line of interactive input.

    The line is terminated by a newline rather than true end-of-input; the
    newline itself (and a preceding carriage return) is not part of the source.
    `exhausted` is True when the stream had nothing left to read at all.
    """

    def __init__(self, stream: IO) -> None:
        line = _as_text(stream.readline())
        self.exhausted = line == ""
        self._line = line.rstrip("\r\n")
        self._idx = 0

    @property
    def text(self) -> str:
        return self._line

    def next_char(self) -> Optional[str]:
        if self._idx >= len(self._line):
            return None
        c = self._line[self._idx]
        self._idx += 1
        return c

    def __repr__(self) -> str:
        return f"<LineSource {self._line!r}>"
