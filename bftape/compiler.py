"""
bftape compiler: source text → Token stream → instruction tree.

Compilation phases:
1. Lexical Analysis → list of TokenType, terminated by exactly one END
2. Parsing → Program (flat top-level list; Loop nodes own their body list)

The language has eight symbols:

    +  increment the current cell      -  decrement the current cell
    >  move the cursor right           <  move the cursor left
    .  write the current cell          ,  read a byte into the current cell
    [  loop while the cell is non-zero ]  end of loop

Every other character is a comment.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum, auto
from typing import Union

from bftape.errors import (
    ResourceExhaustedError,
    UnmatchedCloseBracketError,
    UnmatchedOpenBracketError,
)
from bftape.source import CharSource, StringSource


# ============================================================================
# Token Types
# ============================================================================

class TokenType(Enum):
    PLUS = auto()           # +
    MINUS = auto()          # -
    OPEN_BRACKET = auto()   # [
    CLOSE_BRACKET = auto()  # ]
    SHIFT_LEFT = auto()     # <
    SHIFT_RIGHT = auto()    # >
    DOT = auto()            # .
    COMMA = auto()          # ,
    END = auto()

    def __repr__(self) -> str:
        return f"<{self.name}>"


SYMBOLS = {
    "+": TokenType.PLUS,
    "-": TokenType.MINUS,
    "[": TokenType.OPEN_BRACKET,
    "]": TokenType.CLOSE_BRACKET,
    "<": TokenType.SHIFT_LEFT,
    ">": TokenType.SHIFT_RIGHT,
    ".": TokenType.DOT,
    ",": TokenType.COMMA,
}


# ============================================================================
# Lexer
# ============================================================================

def tokenize(source: Union[CharSource, str]) -> list[TokenType]:
    """Tokenize a character source into a token stream ending in END."""
    if isinstance(source, str):
        source = StringSource(source)

    tokens: list[TokenType] = []
    try:
        for c in source:
            tok = SYMBOLS.get(c)
            if tok is not None:
                tokens.append(tok)
        tokens.append(TokenType.END)
    except MemoryError as e:
        raise ResourceExhaustedError("tokenize", e) from e
    return tokens


# ============================================================================
# Instruction Nodes
# ============================================================================

class Instruction:
    """Base class for all instruction nodes."""


@dataclass(frozen=True)
class Increment(Instruction):
    pass

@dataclass(frozen=True)
class Decrement(Instruction):
    pass

@dataclass(frozen=True)
class MoveLeft(Instruction):
    pass

@dataclass(frozen=True)
class MoveRight(Instruction):
    pass

@dataclass(frozen=True)
class ReadByte(Instruction):
    pass

@dataclass(frozen=True)
class WriteByte(Instruction):
    pass

@dataclass(frozen=True)
class End(Instruction):
    """Sequence terminator. Returned by the parser at END, never stored or executed."""


@dataclass
class Loop(Instruction):
    """A bracketed body, re-run from its start while the current cell is non-zero."""
    body: list[Instruction] = field(default_factory=list)

    def __len__(self) -> int:
        return len(self.body)


@dataclass
class Program:
    """A complete parsed program: the top-level instruction sequence."""
    instructions: list[Instruction] = field(default_factory=list)

    def __len__(self) -> int:
        return len(self.instructions)

    def __iter__(self):
        return iter(self.instructions)


SIMPLE = {
    TokenType.PLUS: Increment,
    TokenType.MINUS: Decrement,
    TokenType.SHIFT_LEFT: MoveLeft,
    TokenType.SHIFT_RIGHT: MoveRight,
    TokenType.COMMA: ReadByte,
    TokenType.DOT: WriteByte,
}


# ============================================================================
# Parser
# ============================================================================

class Parser:
    """Recursive-descent parser over a token stream with one-token lookahead.

    The read cursor only moves forward. Loop nesting recurses once per level;
    nesting deeper than the interpreter stack is reported as
    ResourceExhaustedError.
    """

    def __init__(self, tokens: list[TokenType]):
        self._tokens = tokens
        self._pos = 0

    @property
    def position(self) -> int:
        return self._pos

    def _peek(self) -> TokenType:
        return self._tokens[self._pos]

    def _advance(self) -> TokenType:
        tok = self._tokens[self._pos]
        # END is sticky: every read past the end sees it again
        if tok is not TokenType.END:
            self._pos += 1
        return tok

    def parse_one(self) -> Instruction:
        """Parse a single instruction, or return End when the stream is done."""
        start = self._pos
        tok = self._advance()

        simple = SIMPLE.get(tok)
        if simple is not None:
            return simple()
        if tok is TokenType.END:
            return End()
        if tok is TokenType.CLOSE_BRACKET:
            raise UnmatchedCloseBracketError(start)

        # OPEN_BRACKET: collect the body up to the matching ]
        body: list[Instruction] = []
        while True:
            nxt = self._peek()
            if nxt is TokenType.CLOSE_BRACKET:
                self._advance()
                return Loop(body=body)
            if nxt is TokenType.END:
                raise UnmatchedOpenBracketError(start)
            body.append(self.parse_one())

    def parse_all(self) -> Program:
        """Parse instructions until End and return the program."""
        instructions: list[Instruction] = []
        try:
            while True:
                instr = self.parse_one()
                if isinstance(instr, End):
                    break
                instructions.append(instr)
        except (RecursionError, MemoryError) as e:
            raise ResourceExhaustedError("parse", e) from e
        return Program(instructions=instructions)


# ============================================================================
# Public API
# ============================================================================

def compile_bf(source: Union[CharSource, str]) -> Program:
    """Compile source into a Program.

    Args:
        source: program text or any CharSource

    Returns:
        Program containing the parsed instruction tree
    """
    tokens = tokenize(source)
    parser = Parser(tokens)
    return parser.parse_all()
