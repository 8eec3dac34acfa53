"""
bftape Runtime Test Suite

1. Tape (wraparound arithmetic, bounds, reset, dump)
2. Interpreter instruction semantics
3. Loops
4. Byte I/O and end-of-input policies
5. Canonical programs
"""

import io
import sys
import os

sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

import pytest

from bftape.compiler import compile_bf, Program, Increment, WriteByte, End, Instruction
from bftape.errors import TapeBoundsError
from bftape.runtime import Interpreter, EofPolicy
from bftape.tape import Tape, DEFAULT_TAPE_SIZE


HELLO_WORLD = (
    "++++++++[>++++[>++>+++>+++>+<<<<-]>+>+>->>+[<]<-]>>.>---.+++++++..+++.>>."
    "<-.<.+++.------.--------.>>+.>++."
)


def run(code: str, stdin: bytes = b"", tape_size: int = DEFAULT_TAPE_SIZE,
        eof_policy: EofPolicy = EofPolicy.MINUS_ONE):
    out = io.BytesIO()
    interp = Interpreter(stdin=io.BytesIO(stdin), stdout=out, eof_policy=eof_policy)
    tape = Tape(tape_size)
    interp.execute(compile_bf(code), tape)
    return out.getvalue(), tape, interp


# ============================================================================
# 1. Tape
# ============================================================================

def test_tape_starts_zeroed_at_first_block():
    tape = Tape()
    assert len(tape) == 100
    assert tape.cursor == 0
    assert not any(tape.cells)


def test_tape_rejects_empty_length():
    with pytest.raises(ValueError):
        Tape(0)


def test_cells_wrap_modulo_256():
    tape = Tape(1)
    tape.decrement()
    assert tape.current == 255
    tape.increment()
    assert tape.current == 0
    tape.current = 300
    assert tape.current == 44


def test_tape_bounds_are_fatal_not_wraparound():
    tape = Tape(2)
    with pytest.raises(TapeBoundsError) as exc:
        tape.move_left()
    assert exc.value.direction == "left"
    assert tape.cursor == 0

    tape.move_right()
    with pytest.raises(TapeBoundsError) as exc:
        tape.move_right()
    assert exc.value.direction == "right"
    assert exc.value.cursor == 1
    assert tape.cursor == 1


def test_reset_and_dump():
    tape = Tape(4)
    tape.increment()
    tape.move_right()
    tape.increment()
    tape.increment()
    assert tape.dump() == "cursor=1 [0]=1 [1]=2"
    tape.reset()
    assert tape.dump() == "cursor=0"


# ============================================================================
# 2. Instruction semantics
# ============================================================================

def test_two_cells_two_writes():
    out, tape, _ = run("++>+++<.>.")
    assert out == bytes([2, 3])
    assert tape.cells[:2] == bytearray([2, 3])
    assert tape.cursor == 1


def test_decrement_wraps_below_zero():
    out, _, _ = run("-.")
    assert out == b"\xff"


def test_move_left_at_first_block():
    with pytest.raises(TapeBoundsError) as exc:
        run("<")
    assert str(exc.value) == "can't move left on the tape when at the first block"


def test_move_right_past_last_block():
    run(">" * (DEFAULT_TAPE_SIZE - 1))
    with pytest.raises(TapeBoundsError) as exc:
        run(">" * DEFAULT_TAPE_SIZE)
    assert str(exc.value) == "can't move right on the tape when at the last block"


def test_tape_size_is_configurable():
    _, tape, _ = run(">>", tape_size=3)
    assert tape.cursor == 2
    with pytest.raises(TapeBoundsError):
        run(">>>", tape_size=3)


def test_output_before_a_bounds_error_is_kept():
    out = io.BytesIO()
    interp = Interpreter(stdout=out)
    with pytest.raises(TapeBoundsError):
        interp.execute(compile_bf("+.<"), Tape())
    assert out.getvalue() == b"\x01"


def test_steps_and_bytes_written_are_counted():
    _, _, interp = run("++[-].")
    # + + loop (- twice) .
    assert interp.steps == 6
    assert interp.bytes_written == 1


def test_explicit_end_stops_a_sequence():
    out = io.BytesIO()
    program = Program([Increment(), WriteByte(), End(), WriteByte()])
    Interpreter(stdout=out).execute(program, Tape())
    assert out.getvalue() == b"\x01"


def test_unknown_instruction_is_rejected():
    class Bogus(Instruction):
        pass

    with pytest.raises(TypeError):
        Interpreter(stdout=io.BytesIO()).execute(Program([Bogus()]), Tape())


# ============================================================================
# 3. Loops
# ============================================================================

def test_loop_skipped_when_guard_is_zero():
    out, _, _ = run("[.]+.")
    assert out == b"\x01"


def test_loop_rechecks_guard_after_each_pass():
    # move 5 into cell 1, printing each step
    out, tape, _ = run("+++++[>+.<-]")
    assert out == bytes([1, 2, 3, 4, 5])
    assert tape.cells[:2] == bytearray([0, 5])


def test_nested_loops_multiply():
    _, tape, _ = run("+++[>++++[>+<-]<-]")
    assert tape.cells[2] == 12


def test_empty_loop_with_zero_guard_terminates():
    out, _, _ = run("[]+.")
    assert out == b"\x01"


def test_deeply_nested_loops_run_as_deep_as_they_parse():
    depth = sys.getrecursionlimit() // 2
    code = "+" + "[" * depth + "-" + "]" * depth + "+."
    out, tape, interp = run(code)
    assert out == b"\x01"
    assert tape.current == 1


def test_loop_body_reruns_from_its_start_on_each_pass():
    # inner loop drains cell 1 on each of the 3 outer passes
    out, tape, _ = run("+++[>++[.-]<-]")
    assert out == bytes([2, 1]) * 3
    assert tape.cells[:2] == bytearray([0, 0])


# ============================================================================
# 4. Byte I/O
# ============================================================================

def test_read_then_write_echoes():
    out, _, _ = run(",.,.", stdin=b"hi")
    assert out == b"hi"


def test_read_stores_raw_byte():
    out, _, _ = run(",+.", stdin=b"\xff")
    assert out == b"\x00"


@pytest.mark.parametrize("policy, expected", [
    (EofPolicy.MINUS_ONE, b"\xff"),
    (EofPolicy.ZERO, b"\x00"),
    (EofPolicy.UNCHANGED, b"\x03"),
])
def test_end_of_input_policy(policy, expected):
    out, _, _ = run("+++,.", eof_policy=policy)
    assert out == expected


def test_text_streams_are_accepted():
    out = io.StringIO()
    interp = Interpreter(stdin=io.StringIO("A"), stdout=out)
    interp.execute(compile_bf(",+."), Tape())
    assert out.getvalue() == "B"


def test_text_wrapper_output_is_one_raw_byte_per_write():
    out = io.TextIOWrapper(io.BytesIO(), encoding="utf-8")
    interp = Interpreter(stdout=out)
    interp.execute(compile_bf("-.+.+."), Tape())
    out.flush()
    assert out.buffer.getvalue() == b"\xff\x00\x01"
    assert interp.bytes_written == 3


def test_text_wrapper_input_is_read_as_raw_bytes():
    stdin = io.TextIOWrapper(io.BytesIO(b"\xff\x80"), encoding="utf-8")
    out = io.BytesIO()
    Interpreter(stdin=stdin, stdout=out).execute(compile_bf(",.,."), Tape())
    assert out.getvalue() == b"\xff\x80"


def test_cat_until_end_of_input_with_zero_policy():
    out, _, _ = run(",[.,]", stdin=b"echo", eof_policy=EofPolicy.ZERO)
    assert out == b"echo"


# ============================================================================
# 5. Canonical programs
# ============================================================================

def test_hello_world():
    out, _, _ = run(HELLO_WORLD)
    assert out == b"Hello World!\n"


def test_output_is_reproducible():
    assert run(HELLO_WORLD)[0] == run(HELLO_WORLD)[0]


if __name__ == "__main__":
    from harness import run_all
    sys.exit(run_all(globals()))
