"""
bftape Runtime Engine

Walks a compiled Program against a Tape:
1. Instructions run in sequence order, depth-first into Loop bodies
2. Loop bodies are re-walked from their start on every pass (no jump table),
   using an explicit frame stack rather than Python recursion
3. ReadByte / WriteByte move single bytes between the tape and the streams
4. Failures raise bftape.errors exceptions; nothing is caught here

An empty loop whose guard cell is non-zero never terminates. This is
inherited behaviour of the language and is not special-cased.
"""

from __future__ import annotations

import io
import sys
from enum import Enum
from typing import IO, Optional

from bftape.compiler import (
    Decrement,
    End,
    Increment,
    Instruction,
    Loop,
    MoveLeft,
    MoveRight,
    Program,
    ReadByte,
    WriteByte,
)
from bftape.errors import ResourceExhaustedError
from bftape.tape import Tape


class EofPolicy(Enum):
    """What ReadByte stores when the input stream is exhausted."""
    MINUS_ONE = "minus-one"   # 255, C's EOF truncated to a byte
    ZERO = "zero"
    UNCHANGED = "unchanged"


class Interpreter:
    """Tree-walking interpreter.

    Usage:
        interp = Interpreter(stdout=buf)
        tape = Tape(100)
        interp.execute(compile_bf("++."), tape)

    Streams default to the process's binary stdin/stdout, looked up at call
    time. Text streams are read and written through their binary buffer;
    a bufferless one (io.StringIO) gets one latin-1 character per byte.
    """

    def __init__(
        self,
        stdin: Optional[IO] = None,
        stdout: Optional[IO] = None,
        eof_policy: EofPolicy = EofPolicy.MINUS_ONE,
    ) -> None:
        self._stdin = stdin
        self._stdout = stdout
        self.eof_policy = eof_policy
        self.steps = 0
        self.bytes_written = 0
        self._handlers = {
            Increment: self._exec_increment,
            Decrement: self._exec_decrement,
            MoveLeft: self._exec_move_left,
            MoveRight: self._exec_move_right,
            ReadByte: self._exec_read_byte,
            WriteByte: self._exec_write_byte,
        }

    @property
    def stdin(self) -> IO:
        return self._stdin if self._stdin is not None else sys.stdin.buffer

    @property
    def stdout(self) -> IO:
        return self._stdout if self._stdout is not None else sys.stdout.buffer

    def execute(self, program: Program, tape: Tape) -> None:
        """Run a program to completion on the given tape."""
        try:
            self._run_sequence(program.instructions, tape)
        except MemoryError as e:
            raise ResourceExhaustedError("execute", e) from e

    def _run_sequence(self, instructions: list[Instruction], tape: Tape) -> None:
        """Walk the tree with an explicit stack, so depth is not capped by Python's."""
        # frames are [body, next index, owning Loop or None]
        stack: list[list] = [[instructions, 0, None]]
        while stack:
            frame = stack[-1]
            body, idx, loop = frame
            if idx >= len(body) or isinstance(body[idx], End):
                # end of a pass: re-check the guard of the owning loop
                if loop is not None and tape.current:
                    frame[1] = 0
                else:
                    stack.pop()
                continue
            op = body[idx]
            frame[1] = idx + 1
            if isinstance(op, Loop):
                self.steps += 1
                if tape.current:
                    stack.append([op.body, 0, op])
                continue
            self._execute_op(op, tape)

    def _execute_op(self, op: Instruction, tape: Tape) -> None:
        """Dispatch to the appropriate handler."""
        handler = self._handlers.get(type(op))
        if handler is None:
            raise TypeError(f"No handler for {type(op).__name__}")
        self.steps += 1
        handler(op, tape)

    # ------------------------------------------------------------------
    # Instruction Handlers
    # ------------------------------------------------------------------

    def _exec_increment(self, op: Increment, tape: Tape) -> None:
        tape.increment()

    def _exec_decrement(self, op: Decrement, tape: Tape) -> None:
        tape.decrement()

    def _exec_move_left(self, op: MoveLeft, tape: Tape) -> None:
        tape.move_left()

    def _exec_move_right(self, op: MoveRight, tape: Tape) -> None:
        tape.move_right()

    def _exec_read_byte(self, op: ReadByte, tape: Tape) -> None:
        data = _byte_layer(self.stdin).read(1)
        if not data:
            if self.eof_policy is EofPolicy.MINUS_ONE:
                tape.current = 0xFF
            elif self.eof_policy is EofPolicy.ZERO:
                tape.current = 0
            return
        if isinstance(data, str):
            tape.current = ord(data) & 0xFF
        else:
            tape.current = data[0]

    def _exec_write_byte(self, op: WriteByte, tape: Tape) -> None:
        out = _byte_layer(self.stdout)
        if isinstance(out, io.TextIOBase):
            out.write(chr(tape.current))
        else:
            out.write(bytes((tape.current,)))
        out.flush()
        self.bytes_written += 1


def _byte_layer(stream: IO) -> IO:
    """The binary buffer under a text stream, or the stream itself.

    Pending text is flushed first so output ordering is kept. Only text
    streams with no buffer (io.StringIO) are used as text.
    """
    if isinstance(stream, io.TextIOBase):
        raw = getattr(stream, "buffer", None)
        if raw is not None:
            stream.flush()
            return raw
    return stream
