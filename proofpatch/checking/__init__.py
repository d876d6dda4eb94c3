"""
Entailment checking.

Drives the parse -> encode -> solve pipeline and maps solver answers to
verdicts.
"""

from proofpatch.checking.entailment import (
    Verdict, EntailmentResult, LiaEntailmentChecker, entails_from_pp_dump
)
