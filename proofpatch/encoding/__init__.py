"""
Z3 encoding of parsed arithmetic.

Translates linear expressions into z3 terms that are later serialized as
SMT-LIB for an external solver process.
"""

from proofpatch.encoding.terms import int_symbol, linear_expr_to_term
