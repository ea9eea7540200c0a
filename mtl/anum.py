"""
String anumbers: text as data.

A string c1 c2 ... cn denotes the left-associative chain of character
links hanging off akoren:

    ""       ->  ∞
    "a"      ->  (∞ -> 'a')
    "abc"    ->  (((∞ -> 'a') -> 'b') -> 'c')

In an .astr file each line is one string. Lines starting with // are
comments. Characters are Python code points, so "связь" has five.
"""

from collections import Counter
from dataclasses import dataclass, field
from typing import Optional

from .core.nodes import (
    Node, Link, Infinity, CharLit, Statement, File,
    Position, SourceLocation,
)


def _loc(line: int, start_col: int, start_off: int, end_col: int, end_off: int) -> SourceLocation:
    return SourceLocation(Position(line, start_col, start_off), Position(line, end_col, end_off))


def parse_string_anum_line(line: str, line_number: int = 1, start_offset: int = 0) -> Node:
    """One string as its chain of character links."""
    result = Infinity(loc=_loc(line_number, 1, start_offset, 1, start_offset))
    offset = start_offset
    for column, char in enumerate(line, 1):
        char_loc = _loc(line_number, column, offset, column + 1, offset + 1)
        link_loc = SourceLocation(result.loc.start, char_loc.end)
        result = Link(result, CharLit(char, loc=char_loc), loc=link_loc)
        offset += 1
    return result


def parse_string_anum(content: str, line_as_statement: bool = True,
                      skip_empty_lines: bool = True, skip_comments: bool = True) -> File:
    """
    Parse .astr content into a File with one Statement per line.

    With line_as_statement the line is stripped before conversion;
    otherwise surrounding whitespace is part of the string.
    """
    statements = []
    offset = 0
    line_number = 0

    for line_number, line in enumerate(content.split("\n"), 1):
        stripped = line.strip()
        if (skip_comments and stripped.startswith("//")) or (skip_empty_lines and not stripped):
            offset += len(line) + 1
            continue

        text = stripped if line_as_statement else line
        expr = parse_string_anum_line(text, line_number, offset)
        loc = _loc(line_number, 1, offset, len(text) + 1, offset + len(text))
        statements.append(Statement(expr, loc=loc))
        offset += len(line) + 1

    end = Position(line_number + 1, 1, offset)
    return File(tuple(statements), loc=SourceLocation(Position(1, 1, 0), end))


def parse_string_anum_expr(content: str) -> Node:
    """The whole of content as a single string, newlines included."""
    return parse_string_anum_line(content, 1, 0)


def to_string_anum(node: Node) -> Optional[str]:
    """The string a chain denotes, or None if node is not a string chain."""
    chars = []
    while isinstance(node, Link):
        if not isinstance(node.right, CharLit):
            return None
        chars.append(node.right.char)
        node = node.left
    if isinstance(node, CharLit):
        chars.append(node.char)
    elif not isinstance(node, Infinity):
        return None
    return "".join(reversed(chars))


def is_string_anum_expr(node: Node) -> bool:
    return to_string_anum(node) is not None


def _char_lit(char: str) -> str:
    return f"'{char}'"


def string_anum_to_formal(s: str) -> str:
    """ "ab" -> ((∞ -> 'a') -> 'b'), in notation the parser accepts."""
    result = "∞"
    for char in s:
        result = f"({result} -> {_char_lit(char)})"
    return result


def string_anum_file_to_mtl(content: str, line_as_statement: bool = True,
                            skip_empty_lines: bool = True) -> str:
    """Rewrite .astr content as .mtl source, one statement per string."""
    out = [
        "// Generated from .astr file",
        "// Each line represents a string anumber (left-associative chain)",
        "",
    ]
    for line in content.split("\n"):
        stripped = line.strip()
        if stripped.startswith("//"):
            out.append(stripped)
            continue
        if skip_empty_lines and not stripped:
            continue
        out.append(string_anum_to_formal(stripped if line_as_statement else line) + ".")
    return "\n".join(out)


@dataclass
class ConversionStep:
    char: str
    index: int      # -1 for the starting ∞
    formal: str
    description: str


def visualize_conversion(s: str) -> list:
    """Each intermediate chain while s is built up character by character."""
    if not s:
        return [ConversionStep("", -1, "∞", "Empty string equals akoren (∞)")]

    formal = "∞"
    steps = [ConversionStep("", -1, formal, "Start from akoren (∞)")]
    for i, char in enumerate(s):
        formal = f"({formal} -> {_char_lit(char)})"
        steps.append(ConversionStep(char, i, formal, f"Link character '{char}' (index {i})"))
    return steps


@dataclass
class StringAnumStats:
    char_count: int
    unique_chars: int
    link_count: int
    byte_length: int
    char_frequency: dict = field(default_factory=dict)


def get_string_anum_stats(s: str) -> StringAnumStats:
    frequency = Counter(s)
    return StringAnumStats(
        char_count=len(s),
        unique_chars=len(frequency),
        link_count=len(s),
        byte_length=len(s.encode("utf-8")),
        char_frequency=dict(frequency),
    )
