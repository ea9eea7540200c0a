from .nodes import (
    Node, Position, SourceLocation,
    Link, NotLink, Definition, Equality, Inequality,
    Male, Female, Not, Power, Set, Infinity, Num, Identifier,
    CharLit, Bracket, Statement, File, ast_to_string,
)
from .errors import MTLError, LexerError, ParseError, NormalizationError, ResourceLimitError
from .limits import Limits, default_limits
from .lexer import Token, TokenType, Lexer, tokenize
from .parser import Parser, RecoveryResult, parse, parse_expr, parse_with_recovery
from .normalizer import (
    NormalizerOptions, normalize, normalize_file, to_canonical_string, ast_equal,
)
from .unification import is_variable, occurs_in, resolve_var, apply_substitution, unify
from .axioms import AxiomInfo, AXIOMS, get_axiom
from .state import ProofStep, VerificationHint, ProofResult, ProverState
from .prover import (
    create_prover_state, expand_definitions,
    check_equality, check_inequality, verify, verify_all, verify_statements,
)

__all__ = [
    "Node", "Position", "SourceLocation",
    "Link", "NotLink", "Definition", "Equality", "Inequality",
    "Male", "Female", "Not", "Power", "Set", "Infinity", "Num", "Identifier",
    "CharLit", "Bracket", "Statement", "File", "ast_to_string",
    "MTLError", "LexerError", "ParseError", "NormalizationError", "ResourceLimitError",
    "Limits", "default_limits",
    "Token", "TokenType", "Lexer", "tokenize",
    "Parser", "RecoveryResult", "parse", "parse_expr", "parse_with_recovery",
    "NormalizerOptions", "normalize", "normalize_file", "to_canonical_string", "ast_equal",
    "is_variable", "occurs_in", "resolve_var", "apply_substitution", "unify",
    "AxiomInfo", "AXIOMS", "get_axiom",
    "ProofStep", "VerificationHint", "ProofResult", "ProverState",
    "create_prover_state", "expand_definitions",
    "check_equality", "check_inequality", "verify", "verify_all", "verify_statements",
]
