"""
Variable declarations from hypothesis text

Recognizes tiny declaration shapes such as `n : ℕ`, `n : Nat`,
`m : ℤ` or `m : Int` and classifies the declared variable's domain.
"""

from enum import Enum
from typing import Dict, Iterable, Optional, Tuple

from proofpatch.core.names import sanitize_name


class VarKind(Enum):
    """Numeric domain of a declared variable"""
    INT = "int"
    NAT = "nat"


NAT_MARKERS = ("ℕ", "Nat")
INT_MARKERS = ("ℤ", "Int")


def extract_decl_kind(hyp_text: str) -> Optional[Tuple[str, VarKind]]:
    """
    Classify a `name : type` hypothesis line.

    Returns (sanitized name, kind), or None when the line is not a
    declaration over a recognized numeric domain.
    """
    name, sep, ty = hyp_text.partition(":")
    if not sep:
        return None
    name = name.strip()
    ty = ty.strip()
    if not name or not ty:
        return None

    if any(marker in ty for marker in NAT_MARKERS):
        kind = VarKind.NAT
    elif any(marker in ty for marker in INT_MARKERS):
        kind = VarKind.INT
    else:
        return None
    return sanitize_name(name), kind


def collect_var_kinds(hyp_texts: Iterable[Optional[str]]) -> Dict[str, VarKind]:
    """Build the variable kind map; later declarations of a name win."""
    var_kinds: Dict[str, VarKind] = {}
    for text in hyp_texts:
        if text is None:
            continue
        decl = extract_decl_kind(text)
        if decl is not None:
            name, kind = decl
            var_kinds[name] = kind
    return var_kinds
