"""
bftape Core: execution units

An execution unit is one complete tokenize → parse → execute cycle over one
source text: a file, a command-line string, or one interactive line. The
instruction tree never outlives its unit. The tape does, in interactive mode:

    # batch: fresh, zeroed tape per unit
    run_from_string("++++++++[>++++++++<-]>+.")

    # interactive: tape and cursor carry over between lines
    session = Session()
    session.run_line("+++")
    session.run_line(".")      # writes byte 3

Errors propagate out of every entry point; the caller decides whether a
failure ends the process or just the unit.
"""

from __future__ import annotations

import sys
from dataclasses import dataclass
from typing import IO, Optional

from bftape.compiler import compile_bf
from bftape.errors import SourceOpenError
from bftape.runtime import EofPolicy, Interpreter
from bftape.source import CharSource, FileSource, LineSource, StringSource
from bftape.tape import DEFAULT_TAPE_SIZE, Tape


@dataclass(frozen=True)
class EngineConfig:
    tape_size: int = DEFAULT_TAPE_SIZE
    eof_policy: EofPolicy = EofPolicy.MINUS_ONE

    def __post_init__(self) -> None:
        if self.tape_size < 1:
            raise ValueError(f"tape size must be at least 1, got {self.tape_size}")

    def new_tape(self) -> Tape:
        return Tape(self.tape_size)


@dataclass
class ExecutionResult:
    """The outcome of one execution unit."""
    tape: Tape
    steps: int = 0
    bytes_written: int = 0

    def summary(self) -> str:
        return (
            f"steps={self.steps} written={self.bytes_written} "
            f"{self.tape.dump()}"
        )

    def __repr__(self) -> str:
        return f"<ExecutionResult steps={self.steps} written={self.bytes_written} cursor={self.tape.cursor}>"


def _run_unit(
    source: CharSource,
    tape: Tape,
    config: EngineConfig,
    stdin: Optional[IO],
    stdout: Optional[IO],
) -> ExecutionResult:
    program = compile_bf(source)
    interp = Interpreter(stdin=stdin, stdout=stdout, eof_policy=config.eof_policy)
    interp.execute(program, tape)
    return ExecutionResult(tape=tape, steps=interp.steps, bytes_written=interp.bytes_written)


# ============================================================================
# Entry points
# ============================================================================

def open_source(path: str) -> IO:
    """Open a program file for run_from_file_handle.

    Raises SourceOpenError if the file can't be opened.
    """
    try:
        return open(path, "rb")
    except OSError as e:
        raise SourceOpenError(path, e) from e


def run_from_string(
    text: str,
    *,
    config: Optional[EngineConfig] = None,
    stdin: Optional[IO] = None,
    stdout: Optional[IO] = None,
) -> ExecutionResult:
    """Run program text on a freshly zeroed tape."""
    config = config or EngineConfig()
    return _run_unit(StringSource(text), config.new_tape(), config, stdin, stdout)


def run_from_file_handle(
    handle: IO,
    *,
    config: Optional[EngineConfig] = None,
    stdin: Optional[IO] = None,
    stdout: Optional[IO] = None,
) -> ExecutionResult:
    """Read an open handle to exhaustion and run it on a freshly zeroed tape.

    The handle is left open.
    """
    config = config or EngineConfig()
    return _run_unit(FileSource(handle), config.new_tape(), config, stdin, stdout)


def run_from_line(
    tape: Optional[Tape] = None,
    *,
    lines: Optional[IO] = None,
    config: Optional[EngineConfig] = None,
    stdin: Optional[IO] = None,
    stdout: Optional[IO] = None,
) -> ExecutionResult:
    """Read one line from `lines` (default: stdin) and run it on `tape`.

    `tape` is the state returned by the previous call (result.tape); pass None
    to start with a fresh one. Raises EOFError when `lines` is exhausted.
    """
    config = config or EngineConfig()
    if tape is None:
        tape = config.new_tape()
    source = LineSource(lines if lines is not None else sys.stdin.buffer)
    if source.exhausted:
        raise EOFError("no more input lines")
    return _run_unit(source, tape, config, stdin, stdout)


class Session:
    """An interactive session: one tape shared by every line run through it."""

    def __init__(
        self,
        config: Optional[EngineConfig] = None,
        stdin: Optional[IO] = None,
        stdout: Optional[IO] = None,
    ) -> None:
        self.config = config or EngineConfig()
        self.tape = self.config.new_tape()
        self._stdin = stdin
        self._stdout = stdout
        self.lines_run = 0

    def run_line(self, text: str) -> ExecutionResult:
        """Run one line of code on the shared tape."""
        self.lines_run += 1
        return _run_unit(StringSource(text), self.tape, self.config, self._stdin, self._stdout)

    def read_and_run(self, lines: Optional[IO] = None) -> ExecutionResult:
        """Read the next line from `lines` (default: stdin) and run it."""
        source = LineSource(lines if lines is not None else sys.stdin.buffer)
        if source.exhausted:
            raise EOFError("no more input lines")
        return self.run_line(source.text)

    def reset(self) -> None:
        self.tape.reset()
