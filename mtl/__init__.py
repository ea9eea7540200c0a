"""
MTL: a checker for the Meta-Theory of Links.

Source text is tokenized, parsed, normalized and handed to a small
prover kernel that decides equalities and inequalities from the
axioms A0..A11, definitions accumulating across a file.

Usage:
    python -m mtl examples.mtl
    python -m mtl --fixpoint --json examples.mtl
    python -m mtl --anum words.astr
"""

from .core import (
    parse, parse_expr, parse_with_recovery, tokenize,
    normalize, to_canonical_string, ast_equal, unify,
    ProverState, ProofResult, create_prover_state,
    check_equality, check_inequality, verify, verify_all,
    MTLError, LexerError, ParseError, NormalizationError, ResourceLimitError,
    Limits,
)
from .anum import (
    parse_string_anum, parse_string_anum_line, parse_string_anum_expr,
    to_string_anum, is_string_anum_expr, string_anum_to_formal,
    string_anum_file_to_mtl, visualize_conversion, get_string_anum_stats,
)

__all__ = [
    "parse", "parse_expr", "parse_with_recovery", "tokenize",
    "normalize", "to_canonical_string", "ast_equal", "unify",
    "ProverState", "ProofResult", "create_prover_state",
    "check_equality", "check_inequality", "verify", "verify_all",
    "MTLError", "LexerError", "ParseError", "NormalizationError", "ResourceLimitError",
    "Limits",
    "parse_string_anum", "parse_string_anum_line", "parse_string_anum_expr",
    "to_string_anum", "is_string_anum_expr", "string_anum_to_formal",
    "string_anum_file_to_mtl", "visualize_conversion", "get_string_anum_stats",
]
