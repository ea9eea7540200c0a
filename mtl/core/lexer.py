"""
Tokenizer for the Meta-Theory of Links notation.

Multi-character operators are matched before their single-character
prefixes (!-> and != before !, -> before anything starting with -).
Every token carries its 1-based line/column and absolute offset.

    ->  !->  :  =  !=  ≠  ¬=  ♂  ♀  !  ¬  ^  ∞  ( ) { } [ ] , .
    0  1  <digits>  <identifier>  'c'  // comment
"""

import re
from dataclasses import dataclass
from enum import Enum, auto

from .errors import LexerError
from .nodes import Position, SourceLocation


class TokenType(Enum):
    ARROW = auto()       # ->
    NOT_ARROW = auto()   # !->
    DEFINE = auto()      # :
    EQUAL = auto()       # =
    NOT_EQUAL = auto()   # != ≠ ¬=
    MALE = auto()        # ♂
    FEMALE = auto()      # ♀
    NOT = auto()         # ! ¬
    POWER = auto()       # ^
    INFINITY = auto()    # ∞
    ZERO = auto()        # 0
    ONE = auto()         # 1
    LPAREN = auto()
    RPAREN = auto()
    LBRACE = auto()
    RBRACE = auto()
    LBRACKET = auto()
    RBRACKET = auto()
    COMMA = auto()
    DOT = auto()
    CHAR_LIT = auto()
    ID = auto()
    NAT = auto()
    EOF = auto()


@dataclass(frozen=True)
class Token:
    type: TokenType
    value: str
    loc: SourceLocation


MULTI_CHAR = (
    ("!->", TokenType.NOT_ARROW),
    ("!=", TokenType.NOT_EQUAL),
    ("->", TokenType.ARROW),
    ("¬=", TokenType.NOT_EQUAL),
)

SINGLE_CHAR = {
    ":": TokenType.DEFINE,
    "=": TokenType.EQUAL,
    "≠": TokenType.NOT_EQUAL,
    "♂": TokenType.MALE,
    "♀": TokenType.FEMALE,
    "!": TokenType.NOT,
    "¬": TokenType.NOT,
    "^": TokenType.POWER,
    "∞": TokenType.INFINITY,
    "(": TokenType.LPAREN,
    ")": TokenType.RPAREN,
    "{": TokenType.LBRACE,
    "}": TokenType.RBRACE,
    "[": TokenType.LBRACKET,
    "]": TokenType.RBRACKET,
    ",": TokenType.COMMA,
    ".": TokenType.DOT,
}

ID_START = re.compile(r"[a-zA-Zа-яА-ЯёЁ_]")
ID_CONTINUE = re.compile(r"[a-zA-Zа-яА-ЯёЁ0-9_]")
DIGIT = re.compile(r"[0-9]")


class Lexer:
    """Single pass over the input, one token per next_token() call."""

    def __init__(self, text: str):
        self.text = text
        self.pos = 0
        self.line = 1
        self.column = 1

    def current(self) -> str:
        return self.text[self.pos] if self.pos < len(self.text) else ""

    def peek(self, n: int = 1) -> str:
        i = self.pos + n
        return self.text[i] if i < len(self.text) else ""

    def at_end(self) -> bool:
        return self.pos >= len(self.text)

    def advance(self, n: int = 1):
        for _ in range(n):
            if self.current() == "\n":
                self.line += 1
                self.column = 1
            else:
                self.column += 1
            self.pos += 1

    def position(self) -> Position:
        return Position(self.line, self.column, self.pos)

    def skip_whitespace_and_comments(self):
        while not self.at_end():
            c = self.current()
            if c.isspace():
                self.advance()
            elif c == "/" and self.peek() == "/":
                while not self.at_end() and self.current() != "\n":
                    self.advance()
            else:
                break

    def read_while(self, pattern) -> str:
        start = self.pos
        while not self.at_end() and pattern.match(self.current()):
            self.advance()
        return self.text[start:self.pos]

    def read_char_lit(self) -> str:
        self.advance()  # opening '
        if self.at_end():
            raise LexerError("Unterminated character literal",
                             self.line, self.column, self.pos)
        char = self.current()
        self.advance()
        if self.at_end():
            raise LexerError("Unterminated character literal",
                             self.line, self.column, self.pos)
        if self.current() != "'":
            raise LexerError("Expected closing quote in character literal",
                             self.line, self.column, self.pos)
        self.advance()  # closing '
        return char

    def next_token(self) -> Token:
        self.skip_whitespace_and_comments()
        start = self.position()

        if self.at_end():
            return Token(TokenType.EOF, "", SourceLocation(start, start))

        c = self.current()

        for text, token_type in MULTI_CHAR:
            if self.text.startswith(text, self.pos):
                self.advance(len(text))
                return Token(token_type, text, SourceLocation(start, self.position()))

        if c in SINGLE_CHAR:
            self.advance()
            return Token(SINGLE_CHAR[c], c, SourceLocation(start, self.position()))

        if c == "'":
            char = self.read_char_lit()
            return Token(TokenType.CHAR_LIT, char, SourceLocation(start, self.position()))

        if DIGIT.match(c):
            digits = self.read_while(DIGIT)
            if digits == "0":
                token_type = TokenType.ZERO
            elif digits == "1":
                token_type = TokenType.ONE
            else:
                token_type = TokenType.NAT
            return Token(token_type, digits, SourceLocation(start, self.position()))

        if ID_START.match(c):
            name = self.read_while(ID_CONTINUE)
            return Token(TokenType.ID, name, SourceLocation(start, self.position()))

        raise LexerError(f"Unexpected character: {c}", self.line, self.column, self.pos)

    def tokenize(self) -> list:
        tokens = []
        while True:
            token = self.next_token()
            tokens.append(token)
            if token.type is TokenType.EOF:
                return tokens


def tokenize(text: str) -> list:
    """Token list for text, always ending in an EOF token."""
    return Lexer(text).tokenize()
