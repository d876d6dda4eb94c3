"""
Identifier sanitization

Maps arbitrary text fragments (Lean binder names such as `h.1` or `x'`)
onto names that are valid SMT-LIB symbols.
"""


def sanitize_name(text: str) -> str:
    """
    Normalize a text fragment into a symbol name.

    Every character that is not alphanumeric or `_` becomes `_`. An empty
    result becomes `x`, and a leading ASCII digit gets a `_` prefix.

    Examples:
        >>> sanitize_name("h.1")
        'h_1'
        >>> sanitize_name("2x")
        '_2x'
    """
    out = "".join(ch if ch.isalnum() or ch == "_" else "_" for ch in text)
    if not out:
        out = "x"
    if "0" <= out[0] <= "9":
        out = "_" + out
    return out
