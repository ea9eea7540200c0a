"""
Recursive-descent parser.

    File  = { Stmt }
    Stmt  = Expr "."
    Expr  = Term [ (":" | "=" | "!=") Term ]       non-associative
    Term  = Pref { ("->" | "!->") Pref }           left-associative
    Pref  = { "!" | "¬" | "♂" } Post               prefixes applied innermost-last
    Post  = Atom { "♀" | "^" Nat }                 left-associative
    Atom  = "∞" | "0" | "1" | "[" | "]" | Id | Nat | CharLit
          | "{" Expr { "," Expr } "}" | "(" Expr ")"

Every node's location spans its first and last consumed token.
"""

from dataclasses import dataclass, replace
from typing import Optional

from .errors import ParseError
from .lexer import Token, TokenType, tokenize
from .limits import Limits, default_limits
from .nodes import (
    Node, Link, NotLink, Definition, Equality, Inequality,
    Male, Female, Not, Power, Set, Infinity, Num, Identifier,
    CharLit, Bracket, Statement, File, SourceLocation, merge_loc,
)


RELATIONS = {
    TokenType.DEFINE: lambda left, right, loc: Definition(left, right, loc=loc),
    TokenType.EQUAL: lambda left, right, loc: Equality(left, right, loc=loc),
    TokenType.NOT_EQUAL: lambda left, right, loc: Inequality(left, right, loc=loc),
}


class Parser:
    def __init__(self, tokens: list, limits: Optional[Limits] = None):
        self.tokens = tokens
        self.pos = 0
        self.limits = limits or default_limits()
        self.nesting = 0

    @property
    def current(self) -> Token:
        return self.tokens[self.pos]

    def advance(self) -> Token:
        token = self.current
        if self.pos < len(self.tokens) - 1:
            self.pos += 1
        return token

    def check(self, *types) -> bool:
        return self.current.type in types

    def expect(self, token_type: TokenType) -> Token:
        if not self.check(token_type):
            raise ParseError(
                f"Expected {token_type.name}, got {self.current.type.name}", self.current)
        return self.advance()

    # ── Files and statements ────────────────────────────────────────────────

    def parse_file(self) -> File:
        start = self.current.loc
        statements = []
        while not self.check(TokenType.EOF):
            statements.append(self.parse_statement())
        return File(tuple(statements), loc=merge_loc(start, self.current.loc))

    def parse_statement(self) -> Statement:
        expr = self.parse_expr()
        dot = self.expect(TokenType.DOT)
        return Statement(expr, loc=merge_loc(expr.loc, dot.loc))

    # ── Expressions ─────────────────────────────────────────────────────────

    def parse_expr(self) -> Node:
        left = self.parse_term()
        if self.check(*RELATIONS):
            make = RELATIONS[self.advance().type]
            right = self.parse_term()
            return make(left, right, merge_loc(left.loc, right.loc))
        return left

    def parse_term(self) -> Node:
        left = self.parse_pref()
        while self.check(TokenType.ARROW, TokenType.NOT_ARROW):
            negated = self.advance().type is TokenType.NOT_ARROW
            right = self.parse_pref()
            loc = merge_loc(left.loc, right.loc)
            left = NotLink(left, right, loc=loc) if negated else Link(left, right, loc=loc)
        return left

    def parse_pref(self) -> Node:
        prefixes = []
        while self.check(TokenType.NOT, TokenType.MALE):
            prefixes.append(self.advance())

        node = self.parse_post()
        for prefix in reversed(prefixes):
            loc = merge_loc(prefix.loc, node.loc)
            if prefix.type is TokenType.NOT:
                node = Not(node, loc=loc)
            else:
                node = Male(node, loc=loc)
        return node

    def parse_post(self) -> Node:
        node = self.parse_atom()
        while self.check(TokenType.FEMALE, TokenType.POWER):
            if self.check(TokenType.FEMALE):
                female = self.advance()
                node = Female(node, loc=merge_loc(node.loc, female.loc))
                continue
            self.advance()
            if not self.check(TokenType.NAT, TokenType.ONE, TokenType.ZERO):
                raise ParseError("Expected number after ^", self.current)
            exponent = self.advance()
            node = Power(node, int(exponent.value), loc=merge_loc(node.loc, exponent.loc))
        return node

    def parse_atom(self) -> Node:
        token = self.current

        if self.check(TokenType.INFINITY):
            self.advance()
            return Infinity(loc=token.loc)
        if self.check(TokenType.ZERO, TokenType.ONE):
            self.advance()
            return Num(int(token.value), loc=token.loc)
        if self.check(TokenType.LBRACKET):
            self.advance()
            return Bracket("left", loc=token.loc)
        if self.check(TokenType.RBRACKET):
            self.advance()
            return Bracket("right", loc=token.loc)
        if self.check(TokenType.ID, TokenType.NAT):
            # Natural numbers other than 0 and 1 are plain names.
            self.advance()
            return Identifier(token.value, loc=token.loc)
        if self.check(TokenType.CHAR_LIT):
            self.advance()
            return CharLit(token.value, loc=token.loc)
        if self.check(TokenType.LBRACE):
            return self.parse_set()
        if self.check(TokenType.LPAREN):
            lparen = self.advance()
            self.enter_nesting()
            expr = self.parse_expr()
            rparen = self.expect(TokenType.RPAREN)
            self.nesting -= 1
            return replace(expr, loc=merge_loc(lparen.loc, rparen.loc))

        raise ParseError(f"Unexpected token: {token.type.name}", token)

    def parse_set(self) -> Set:
        lbrace = self.expect(TokenType.LBRACE)
        self.enter_nesting()
        elements = []
        if not self.check(TokenType.RBRACE):
            elements.append(self.parse_expr())
            while self.check(TokenType.COMMA):
                self.advance()
                elements.append(self.parse_expr())
        rbrace = self.expect(TokenType.RBRACE)
        self.nesting -= 1
        return Set(tuple(elements), loc=merge_loc(lbrace.loc, rbrace.loc))

    def enter_nesting(self):
        self.nesting += 1
        self.limits.check_nesting(self.nesting)


def parse(text: str, limits: Optional[Limits] = None) -> File:
    """Parse a whole file. Every statement must end in '.'."""
    return Parser(tokenize(text), limits).parse_file()


def parse_expr(text: str, limits: Optional[Limits] = None) -> Node:
    """Parse a single expression written without its trailing dot."""
    parser = Parser(tokenize(text), limits)
    expr = parser.parse_expr()
    parser.expect(TokenType.EOF)
    return expr


@dataclass
class RecoveryResult:
    """Outcome of parse_with_recovery: what parsed, and the first error if any."""
    file: Optional[File]
    error: Optional[ParseError] = None

    @property
    def error_location(self) -> Optional[SourceLocation]:
        return self.error.location if self.error else None


def parse_with_recovery(text: str, limits: Optional[Limits] = None) -> RecoveryResult:
    """
    Best-effort parse for editors.

    Statements may end in '.', or implicitly at a line break or at the end
    of input. Parsing stops at the first token that cannot continue; the
    statements parsed before it are returned together with that one error.
    file is None when not a single statement could be parsed.

    LexerError is not captured: the text must tokenize.
    """
    parser = Parser(tokenize(text), limits)
    statements = []
    error = None

    try:
        while not parser.check(TokenType.EOF):
            expr = parser.parse_expr()
            if parser.check(TokenType.DOT):
                dot = parser.advance()
                statements.append(Statement(expr, loc=merge_loc(expr.loc, dot.loc)))
                continue
            statements.append(Statement(expr, loc=expr.loc))
            next_token = parser.current
            on_new_line = next_token.loc.start.line > expr.loc.end.line
            if not (next_token.type is TokenType.EOF or on_new_line):
                raise ParseError(
                    f"Expected DOT, got {next_token.type.name}", next_token)
    except ParseError as err:
        error = err

    if not statements:
        return RecoveryResult(None, error)
    loc = merge_loc(statements[0].loc, statements[-1].loc)
    return RecoveryResult(File(tuple(statements), loc=loc), error)
