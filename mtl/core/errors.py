"""
Errors raised for malformed input.

Failing to prove a statement is not an error: the prover returns a
ProofResult with success=False. Only input that cannot be tokenized,
parsed, normalized, or processed within the configured limits raises.
"""


class MTLError(Exception):
    """Base class for every error raised by the checker."""


class LexerError(MTLError):
    """Unrecognized character or unterminated character literal."""

    def __init__(self, message: str, line: int, column: int, offset: int):
        self.line = line
        self.column = column
        self.offset = offset
        self.reason = message
        super().__init__(f"Lexer error at {line}:{column}: {message}")


class ParseError(MTLError):
    """Token stream does not match the grammar."""

    def __init__(self, message: str, token):
        self.token = token
        self.reason = message
        start = token.loc.start
        super().__init__(f"Parse error at {start.line}:{start.column}: {message}")

    @property
    def location(self):
        return self.token.loc


class NormalizationError(MTLError):
    """Invalid power exponent or unguarded recursive definition."""

    def __init__(self, message: str, node):
        self.node = node
        self.reason = message
        loc = getattr(node, "loc", None)
        where = f" at {loc.start.line}:{loc.start.column}" if loc else ""
        super().__init__(f"Normalization error{where}: {message}")


class ResourceLimitError(MTLError):
    """A traversal went deeper, or built more nodes, than the limits allow."""

    def __init__(self, message: str, limit: str):
        self.limit = limit
        super().__init__(message)
