"""
Relational constraint parser

Splits a comparison statement such as `a + 2 ≤ b` into two linear
expressions and translates it into a z3 Boolean term.

Operator selection walks a fixed priority list and takes the first operator
that occurs *anywhere* in the statement, splitting at that operator's first
occurrence. This is not a leftmost scan: `a > b <= c` splits at `<=`
because `<=` precedes `>` in the list. Consumers rank candidates with the
resulting verdicts, so the split behaviour is kept stable.
"""

import z3
from dataclasses import dataclass
from enum import Enum
from typing import FrozenSet, Optional, Tuple

from proofpatch.core.linear import LinearExpr, parse_linear_expr
from proofpatch.encoding.terms import linear_expr_to_term


class Relation(Enum):
    """Comparison kinds understood by the parser"""
    LE = "<="
    GE = ">="
    LT = "<"
    GT = ">"
    EQ = "="


# Priority order, not position order
OPERATORS = ("<=", "≤", ">=", "≥", "<", ">", "=")

OPERATOR_RELATIONS = {
    "<=": Relation.LE,
    "≤": Relation.LE,
    ">=": Relation.GE,
    "≥": Relation.GE,
    "<": Relation.LT,
    ">": Relation.GT,
    "=": Relation.EQ,
}


@dataclass(frozen=True, eq=False)
class RelConstraint:
    """A parsed comparison together with its z3 term"""
    term: z3.BoolRef
    vars: FrozenSet[str]
    relation: Relation
    lhs: LinearExpr
    rhs: LinearExpr

    def __str__(self) -> str:
        return f"{self.lhs} {self.relation.value} {self.rhs}"


def split_relation(text: str) -> Optional[Tuple[str, str, str]]:
    """
    Split a statement at its relation operator.

    Returns (lhs, operator, rhs) as raw substrings of the trimmed text, or
    None if no operator occurs.

    Example:
        >>> split_relation("a > b <= c")
        ('a > b ', '<=', ' c')
    """
    text = text.strip()
    for op in OPERATORS:
        idx = text.find(op)
        if idx >= 0:
            return text[:idx], op, text[idx + len(op):]
    return None


def build_relation(relation: Relation, a: z3.ArithRef, b: z3.ArithRef) -> z3.BoolRef:
    """Apply a comparison to two integer terms, keeping `a` on the left"""
    # A literal `b` is an IntNumRef, a subclass of ArithRef, so the infix
    # operators would dispatch to its reflected method and swap the operands.
    if relation is Relation.LE:
        return a.__le__(b)
    if relation is Relation.GE:
        return a.__ge__(b)
    if relation is Relation.LT:
        return a.__lt__(b)
    if relation is Relation.GT:
        return a.__gt__(b)
    return a.__eq__(b)


def parse_rel_constraint(text: str, ctx: Optional[z3.Context] = None) -> Optional[RelConstraint]:
    """
    Parse a single comparison statement.

    Both sides must be linear expressions (see parse_linear_expr);
    otherwise None is returned. The variable set is the union of the names
    referenced on either side.
    """
    parts = split_relation(text)
    if parts is None:
        return None
    lhs_text, op, rhs_text = parts

    lhs = parse_linear_expr(lhs_text.strip())
    if lhs is None:
        return None
    rhs = parse_linear_expr(rhs_text.strip())
    if rhs is None:
        return None

    relation = OPERATOR_RELATIONS[op]
    a = linear_expr_to_term(lhs, ctx)
    b = linear_expr_to_term(rhs, ctx)
    term = build_relation(relation, a, b)
    names = frozenset(lhs.variables()) | frozenset(rhs.variables())
    return RelConstraint(term=term, vars=names, relation=relation, lhs=lhs, rhs=rhs)
