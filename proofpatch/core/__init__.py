"""
Core parsing of proof-assistant text.

This module contains the fragment recognizers:
- Identifier sanitization
- Int/Nat declaration extraction
- Linear expression and comparison parsing
- Goal payload validation
"""

from proofpatch.core.names import sanitize_name
from proofpatch.core.declarations import VarKind, extract_decl_kind, collect_var_kinds
from proofpatch.core.linear import LinearExpr, parse_linear_expr
from proofpatch.core.relations import Relation, RelConstraint, split_relation, parse_rel_constraint
from proofpatch.core.goal import Goal
