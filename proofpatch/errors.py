"""
Exception hierarchy for proofpatch

Parsing stages never raise: an expression outside the linear fragment is
reported as None and degrades the verdict to UNKNOWN. Only structural input
problems and solver infrastructure faults surface as exceptions.
"""

from typing import List, Optional


class ProofpatchError(Exception):
    """Base exception for all proofpatch errors"""
    pass


class MalformedInputError(ProofpatchError):
    """Raised when a goal payload does not have the pp_dump shape"""
    pass


class SolverError(ProofpatchError):
    """Base exception for SMT solver problems"""
    pass


class SolverUnavailable(SolverError):
    """No SMT solver backend could be spawned"""
    pass


class SolverProtocolError(SolverError):
    """
    Communication or configuration failure with a running solver.

    Carries the tail of the SMT-LIB transcript so the failing command
    can be identified.
    """

    def __init__(self, message: str, transcript: Optional[List[str]] = None):
        super().__init__(message)
        self.transcript = list(transcript or [])[-10:]


class ConfigError(ProofpatchError):
    """Raised when proofpatch.toml cannot be read or does not validate"""
    pass
