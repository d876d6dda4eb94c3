"""
External SMT solver sessions.
"""

from proofpatch.solver.session import (
    Status, SolverBackend, SmtSession, ProcessSession, BACKENDS, spawn_auto
)
