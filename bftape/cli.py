#!/usr/bin/env python3
"""
bftape — run programs in the eight-symbol bracket language

Usage:
    bftape <file> [<file> ...]        Run each file on a fresh tape
    bftape -s <code> [<code> ...]     Run each string on a fresh tape
    bftape -i                         Interactive session; the tape persists between lines
"""

from __future__ import annotations

import argparse
import sys
import textwrap
from typing import Optional

from bftape import (
    BFError,
    EngineConfig,
    EofPolicy,
    ExecutionResult,
    Session,
    open_source,
    run_from_file_handle,
    run_from_string,
)
from bftape.tape import DEFAULT_TAPE_SIZE


PROMPT = "bf> "


# ============================================================================
# Formatting helpers
# ============================================================================

class C:
    """ANSI colors."""
    BOLD = "\033[1m"
    DIM = "\033[2m"
    RED = "\033[31m"
    GREEN = "\033[32m"
    CYAN = "\033[36m"
    RESET = "\033[0m"

    @staticmethod
    def off():
        C.BOLD = C.DIM = C.RED = C.GREEN = C.CYAN = C.RESET = ""


def ok(text: str) -> str:
    return f"  {C.GREEN}✓{C.RESET} {text}"


def fail(text: str) -> str:
    return f"{C.RED}✗{C.RESET} {text}"


def dim(text: str) -> str:
    return f"{C.DIM}{text}{C.RESET}"


def report(label: str, result: ExecutionResult) -> None:
    """Print the --verbose summary for one execution unit."""
    print(f"\n{ok(C.BOLD + label + C.RESET)} {dim(result.summary())}", file=sys.stderr)


# ============================================================================
# Commands
# ============================================================================

def cmd_strings(args, config: EngineConfig) -> int:
    """Run each -s argument as its own program."""
    if not args.inputs:
        print("expected a string of code after '-s'", file=sys.stderr)
        return 0
    for i, code in enumerate(args.inputs):
        result = run_from_string(code, config=config)
        if args.verbose:
            report(f"-s #{i + 1}", result)
    return 0


def cmd_files(args, config: EngineConfig) -> int:
    """Run each file as its own program."""
    for path in args.inputs:
        with open_source(path) as handle:
            result = run_from_file_handle(handle, config=config)
        if args.verbose:
            report(path, result)
    return 0


def cmd_interactive(args, config: EngineConfig) -> int:
    """Read-run loop over stdin lines; one tape for the whole session."""
    session = Session(config)
    prompt = sys.stdin.isatty()

    while True:
        if prompt:
            print(f"{C.CYAN}{PROMPT}{C.RESET}", end="", file=sys.stderr, flush=True)
        try:
            result = session.read_and_run()
        except EOFError:
            break
        except KeyboardInterrupt:
            print(file=sys.stderr)
            break
        except BFError as e:
            # the line is lost, the tape is not
            print(fail(str(e)), file=sys.stderr)
            continue
        if args.verbose:
            report(f"line {session.lines_run}", result)
    return 0


# ============================================================================
# CLI setup
# ============================================================================

def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="bftape",
        description="Tree-walking interpreter for the eight-symbol bracket language",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=textwrap.dedent("""
        examples:
          bftape hello.bf
          bftape -s '++++++++[>++++++++<-]>+.'
          bftape --tape-size 30000 mandelbrot.bf
          bftape -i -v
        """),
    )
    parser.add_argument("inputs", nargs="*", metavar="FILE|CODE",
                        help="Program files, or code strings with -s")
    mode = parser.add_mutually_exclusive_group()
    mode.add_argument("-s", "--string", action="store_true",
                      help="Treat the arguments as code instead of file names")
    mode.add_argument("-i", "--interactive", action="store_true",
                      help="Run stdin line by line, keeping the tape between lines")
    parser.add_argument("--tape-size", type=int, default=DEFAULT_TAPE_SIZE,
                        help=f"Number of tape cells (default: {DEFAULT_TAPE_SIZE})")
    parser.add_argument("--eof", default=EofPolicy.MINUS_ONE.value,
                        choices=[p.value for p in EofPolicy],
                        help="What ',' stores at end of input (default: minus-one, i.e. 255)")
    parser.add_argument("-v", "--verbose", action="store_true",
                        help="Print step count and tape contents after each run")
    parser.add_argument("--no-color", action="store_true", help="Disable colored output")
    return parser


def main(argv: Optional[list[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.no_color:
        C.off()

    if not (args.inputs or args.string or args.interactive):
        parser.print_help()
        return 0

    try:
        config = EngineConfig(tape_size=args.tape_size, eof_policy=EofPolicy(args.eof))
    except ValueError as e:
        parser.error(str(e))

    if args.interactive:
        if args.inputs:
            parser.error("-i reads code from stdin and takes no FILE|CODE arguments")
        return cmd_interactive(args, config)

    handler = cmd_strings if args.string else cmd_files
    try:
        return handler(args, config)
    except BFError as e:
        sys.stdout.flush()
        print(fail(str(e)), file=sys.stderr)
        return 1
    except BrokenPipeError:
        print(fail("output closed"), file=sys.stderr)
        return 1
    except KeyboardInterrupt:
        print(file=sys.stderr)
        print(fail("interrupted"), file=sys.stderr)
        return 130


if __name__ == "__main__":
    sys.exit(main())
