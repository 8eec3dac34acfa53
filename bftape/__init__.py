"""
bftape - a tokenizer, parser and tree-walking interpreter for the
eight-symbol bracket language on a bounded byte tape.

Pipeline: source → compiler.tokenize → compiler.Parser → runtime.Interpreter
"""

__version__ = "0.1.0"

from bftape.compiler import (
    TokenType,
    tokenize,
    Parser,
    Program,
    Instruction,
    Increment,
    Decrement,
    MoveLeft,
    MoveRight,
    ReadByte,
    WriteByte,
    Loop,
    End,
    compile_bf,
)
from bftape.core import (
    EngineConfig,
    ExecutionResult,
    Session,
    open_source,
    run_from_string,
    run_from_file_handle,
    run_from_line,
)
from bftape.errors import (
    BFError,
    ResourceExhaustedError,
    SourceOpenError,
    UnmatchedBracketError,
    UnmatchedOpenBracketError,
    UnmatchedCloseBracketError,
    TapeBoundsError,
)
from bftape.runtime import EofPolicy, Interpreter
from bftape.source import CharSource, StringSource, FileSource, LineSource
from bftape.tape import Tape

__all__ = [
    "TokenType",
    "tokenize",
    "Parser",
    "Program",
    "Instruction",
    "Increment",
    "Decrement",
    "MoveLeft",
    "MoveRight",
    "ReadByte",
    "WriteByte",
    "Loop",
    "End",
    "compile_bf",
    "EngineConfig",
    "ExecutionResult",
    "Session",
    "open_source",
    "run_from_string",
    "run_from_file_handle",
    "run_from_line",
    "BFError",
    "ResourceExhaustedError",
    "SourceOpenError",
    "UnmatchedBracketError",
    "UnmatchedOpenBracketError",
    "UnmatchedCloseBracketError",
    "TapeBoundsError",
    "EofPolicy",
    "Interpreter",
    "CharSource",
    "StringSource",
    "FileSource",
    "LineSource",
    "Tape",
]
