"""
Test helpers for proofpatch

Z3ApiSession answers check-sat through the z3 Python API from the recorded
SMT-LIB transcript, so the entailment pipeline can be exercised without a
solver executable on PATH. This file is named to NOT match pytest's test
collection pattern.
"""

import shutil

import pytest
import z3

from proofpatch.errors import SolverProtocolError
from proofpatch.solver.session import BACKENDS, SmtSession, SolverBackend, Status


Z3_API_BACKEND = SolverBackend("z3-api", ("z3",), ":timeout", ":random-seed")

HAVE_SOLVER_BINARY = any(shutil.which(b.argv[0]) for b in BACKENDS)

requires_solver = pytest.mark.skipif(
    not HAVE_SOLVER_BINARY, reason="no SMT solver executable on PATH"
)


class Z3ApiSession(SmtSession):
    """Session double evaluating declarations and assertions in-process"""
    __test__ = False

    def __init__(self, backend: SolverBackend = Z3_API_BACKEND):
        super().__init__(backend)
        self.close_count = 0

    def _send(self, command: str) -> None:
        pass

    def check_sat(self) -> Status:
        self.command("(check-sat)")
        script = "\n".join(
            c for c in self.transcript
            if c.startswith("(declare-const") or c.startswith("(assert")
        )
        solver = z3.Solver()
        if self.timeout_ms:
            solver.set("timeout", self.timeout_ms)
        solver.from_string(script)
        result = solver.check()
        if result == z3.unsat:
            return Status.UNSAT
        if result == z3.sat:
            return Status.SAT
        return Status.UNKNOWN

    def close(self) -> None:
        self.close_count += 1
        super().close()


class FixedStatusSession(Z3ApiSession):
    """Session double that always answers the same status"""
    __test__ = False

    def __init__(self, status: Status):
        super().__init__()
        self.status = status

    def check_sat(self) -> Status:
        self.command("(check-sat)")
        return self.status


class RejectingSession(Z3ApiSession):
    """Session double whose solver rejects (set-logic ...)"""
    __test__ = False

    def _send(self, command: str) -> None:
        if command.startswith("(set-logic"):
            raise SolverProtocolError("solver reported (error \"unsupported logic\")", self.transcript)


class SpawnRecorder:
    """Session factory recording every session it hands out"""

    def __init__(self, factory):
        self.factory = factory
        self.sessions = []
        self.preferred = []

    def __call__(self, preferred=None):
        self.preferred.append(preferred)
        session = self.factory()
        self.sessions.append(session)
        return session, session.backend


def pp_dump(pretty: str, hyps=None) -> dict:
    """Build a pp_dump payload with a single goal"""
    return {"goals": [{"pretty": pretty, "hyps": [{"text": h} for h in (hyps or [])]}]}


def goal_dump(hyps, target: str) -> dict:
    """Build a pp_dump payload whose pretty text lists hyps then `⊢ target`"""
    pretty = "\n".join(list(hyps) + [f"⊢ {target}"])
    return pp_dump(pretty, hyps)
