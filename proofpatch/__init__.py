"""
LIA Entailment Triage for Proof Goals

Checks whether a proof assistant goal follows from its hypotheses under
linear integer/natural arithmetic, using an external SMT solver. Verdicts
are a ranking signal for candidate proof steps, not proofs.

The library is organized into logical modules:
- core: identifier, declaration, expression and comparison parsing
- encoding: z3 term translation
- solver: external SMT-LIB solver sessions
- checking: entailment pipeline and verdicts
- utils: JSON extraction from model output
"""

from proofpatch.core import (
    VarKind, LinearExpr, Relation, RelConstraint, Goal,
    sanitize_name, extract_decl_kind, parse_linear_expr, split_relation, parse_rel_constraint
)
from proofpatch.checking import Verdict, EntailmentResult, LiaEntailmentChecker, entails_from_pp_dump
from proofpatch.solver import Status, spawn_auto
from proofpatch.errors import (
    ProofpatchError, MalformedInputError, SolverError, SolverUnavailable,
    SolverProtocolError, ConfigError
)
from proofpatch.utils import extract_first_json_value

__version__ = "0.1.0"
__all__ = [
    # Parsing
    "VarKind", "LinearExpr", "Relation", "RelConstraint", "Goal",
    "sanitize_name", "extract_decl_kind", "parse_linear_expr", "split_relation",
    "parse_rel_constraint",
    # Checking
    "Verdict", "EntailmentResult", "LiaEntailmentChecker", "entails_from_pp_dump",
    "Status", "spawn_auto",
    # Errors
    "ProofpatchError", "MalformedInputError", "SolverError", "SolverUnavailable",
    "SolverProtocolError", "ConfigError",
    # Utilities
    "extract_first_json_value",
]
