"""
Z3 term translation for linear expressions

Builds the canonical arithmetic term for a LinearExpr. Terms are created in
a caller-supplied z3.Context so that independent entailment checks never
share solver-library state.
"""

import z3
from typing import TYPE_CHECKING, List, Optional

if TYPE_CHECKING:
    from proofpatch.core.linear import LinearExpr


def int_symbol(name: str, ctx: Optional[z3.Context] = None) -> z3.ArithRef:
    """Integer-sorted constant for a sanitized variable name"""
    return z3.Int(name, ctx)


def linear_expr_to_term(expr: "LinearExpr", ctx: Optional[z3.Context] = None) -> z3.ArithRef:
    """
    Translate a LinearExpr into a z3 integer term.

    The constant comes first (only when nonzero), followed by the variables
    in sorted name order. Coefficient 1 is the bare symbol, -1 a unary negation,
    anything else `c * x`. No terms gives the literal 0 and a single term is
    returned without an addition wrapper.
    """
    terms: List[z3.ArithRef] = []
    if expr.c0 != 0:
        terms.append(z3.IntVal(expr.c0, ctx))

    for name, coeff in sorted(expr.coeffs.items()):
        if coeff == 0:
            continue
        sym = int_symbol(name, ctx)
        if coeff == 1:
            terms.append(sym)
        elif coeff == -1:
            terms.append(-sym)
        else:
            terms.append(z3.IntVal(coeff, ctx) * sym)

    if not terms:
        return z3.IntVal(0, ctx)
    if len(terms) == 1:
        return terms[0]
    return z3.Sum(terms)
