"""
Linear expression parser

Parses one side of an arithmetic comparison into a sum of signed variables
and an integer constant. The accepted fragment is deliberately tiny:
identifiers and decimal literals joined by `+` and `-`. Anything that hints
at a nonlinear term rejects the whole expression.
"""

from dataclasses import dataclass, field
from typing import Dict, Optional

from proofpatch.core.names import sanitize_name


INT64_MIN = -(2 ** 63)
INT64_MAX = 2 ** 63 - 1

# Operators outside linear integer arithmetic
NONLINEAR_CHARS = frozenset("*/^·↑∑∏")


def saturating_add(a: int, b: int) -> int:
    """Add two integers, clamping the result to the signed 64-bit range"""
    return max(INT64_MIN, min(INT64_MAX, a + b))


def _is_ascii_digit(ch: str) -> bool:
    return "0" <= ch <= "9"


def _is_ident_char(ch: str) -> bool:
    return ch.isalnum() or ch == "_" or ch == "."


@dataclass
class LinearExpr:
    """
    Linear combination `c0 + sum(coeff * var)`.

    `coeffs` keeps variables in the order they were first seen. Entries with
    a zero coefficient may exist (e.g. `n - n`); they still count as
    referenced variables but contribute nothing to the term.
    """
    coeffs: Dict[str, int] = field(default_factory=dict)
    c0: int = 0

    def variables(self):
        return self.coeffs.keys()

    def __str__(self) -> str:
        parts = []
        for name, coeff in self.coeffs.items():
            if coeff == 0:
                continue
            if coeff == 1:
                parts.append(f"+ {name}")
            elif coeff == -1:
                parts.append(f"- {name}")
            elif coeff < 0:
                parts.append(f"- {-coeff}*{name}")
            else:
                parts.append(f"+ {coeff}*{name}")
        if self.c0 or not parts:
            parts.append(f"- {-self.c0}" if self.c0 < 0 else f"+ {self.c0}")
        text = " ".join(parts)
        return text[2:] if text.startswith("+ ") else "-" + text[2:]


def parse_linear_expr(text: str) -> Optional[LinearExpr]:
    """
    Parse sums/differences of identifiers and integer literals.

    The sign register is set by `+`/`-` and applies to every following
    term until the next sign character. Repeating an identifier accumulates
    its coefficient, so `n + n - 3` yields {n: 2} with constant -3.

    Returns None if the text contains a nonlinear operator, an unexpected
    character, or a literal outside the signed 64-bit range.
    """
    if any(ch in NONLINEAR_CHARS for ch in text):
        return None

    expr = LinearExpr()
    sign = 1
    i = 0
    n = len(text)
    while i < n:
        ch = text[i]
        if ch.isspace():
            i += 1
            continue
        if ch == "+":
            sign = 1
            i += 1
            continue
        if ch == "-":
            sign = -1
            i += 1
            continue
        if _is_ascii_digit(ch):
            j = i + 1
            while j < n and _is_ascii_digit(text[j]):
                j += 1
            value = int(text[i:j])
            if value > INT64_MAX:
                return None
            expr.c0 = saturating_add(expr.c0, sign * value)
            i = j
            continue
        if _is_ident_char(ch):
            j = i + 1
            while j < n and _is_ident_char(text[j]):
                j += 1
            name = sanitize_name(text[i:j])
            expr.coeffs[name] = saturating_add(expr.coeffs.get(name, 0), sign)
            i = j
            continue
        return None

    return expr
