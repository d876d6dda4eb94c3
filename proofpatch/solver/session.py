"""
SMT solver sessions over an external process

The solver is never linked in-process: each session spawns its own solver
executable and talks SMT-LIB 2 over stdin/stdout. A missing executable is a
normal degraded condition (SolverUnavailable); a solver that rejects a
command or stops answering is a protocol failure.

Typical use:
    session, backend = spawn_auto()
    with session:
        session.set_logic("QF_LIA")
        session.declare_const("n", "Int")
        session.assert_term(z3.Int("n") < 0)
        status = session.check_sat()
"""

import logging
import os
import re
import shutil
import subprocess
from dataclasses import dataclass
from enum import Enum
from typing import List, Optional, Tuple, Union

import z3

from proofpatch.errors import SolverProtocolError, SolverUnavailable

logger = logging.getLogger(__name__)


class Status(Enum):
    """Answer to a check-sat query"""
    SAT = "sat"
    UNSAT = "unsat"
    UNKNOWN = "unknown"


@dataclass(frozen=True)
class SolverBackend:
    """How to launch a solver and spell its non-standard options"""
    name: str
    argv: Tuple[str, ...]
    timeout_option: str
    seed_option: str


BACKENDS = (
    SolverBackend("z3", ("z3", "-in", "-smt2"), ":timeout", ":random-seed"),
    SolverBackend("cvc5", ("cvc5", "--lang=smt2", "--incremental"), ":tlimit-per", ":seed"),
)

SOLVER_ENV_VAR = "PROOFPATCH_SMT_SOLVER"

# Wall-clock slack on top of the solver's own timeout
GRACE_SECONDS = 5.0

_SIMPLE_SYMBOL = re.compile(r"^[A-Za-z~!@$%^&*_+=<>.?/\-][A-Za-z0-9~!@$%^&*_+=<>.?/\-]*$")


def quote_symbol(name: str) -> str:
    """Render a name as an SMT-LIB symbol, using |...| when needed"""
    if _SIMPLE_SYMBOL.match(name):
        return name
    return f"|{name}|"


def _smt_bool(value: bool) -> str:
    return "true" if value else "false"


def parse_check_sat_output(output: str, transcript: Optional[List[str]] = None) -> Status:
    """
    Interpret solver output collected after (check-sat).

    Raises:
        SolverProtocolError: on any `(error ...)` response, or when no
            sat/unsat/unknown answer is present
    """
    status = None
    for line in output.splitlines():
        line = line.strip()
        if line.startswith("(error"):
            raise SolverProtocolError(f"solver reported {line}", transcript)
        if status is None and line in ("sat", "unsat", "unknown"):
            status = Status(line)
    if status is None:
        raise SolverProtocolError("solver produced no check-sat answer", transcript)
    return status


class SmtSession:
    """
    SMT-LIB command protocol.

    Subclasses deliver commands (_send) and answer check_sat. Every command
    is recorded in `transcript`.
    """

    def __init__(self, backend: SolverBackend):
        self.backend = backend
        self.transcript: List[str] = []
        self.timeout_ms: Optional[int] = None
        self.closed = False

    def _send(self, command: str) -> None:
        raise NotImplementedError

    def command(self, command: str) -> None:
        if self.closed:
            raise SolverProtocolError("session is closed", self.transcript)
        self.transcript.append(command)
        logger.debug("smt> %s", command)
        self._send(command)

    def set_option(self, option: str, value) -> None:
        self.command(f"(set-option {option} {value})")

    def set_logic(self, logic: str) -> None:
        self.command(f"(set-logic {logic})")

    def set_print_success(self, enabled: bool) -> None:
        self.set_option(":print-success", _smt_bool(enabled))

    def set_produce_models(self, enabled: bool) -> None:
        self.set_option(":produce-models", _smt_bool(enabled))

    def set_timeout_ms(self, timeout_ms: int) -> None:
        if timeout_ms < 0:
            raise ValueError(f"timeout must be non-negative, got {timeout_ms}")
        self.timeout_ms = timeout_ms
        self.set_option(self.backend.timeout_option, timeout_ms)

    def set_random_seed(self, seed: int) -> None:
        self.set_option(self.backend.seed_option, seed)

    def declare_const(self, name: str, sort: str) -> None:
        self.command(f"(declare-const {quote_symbol(name)} {sort})")

    def assert_term(self, term: Union[z3.ExprRef, str]) -> None:
        text = term if isinstance(term, str) else term.sexpr()
        self.command(f"(assert {text})")

    def check_sat(self) -> Status:
        raise NotImplementedError

    def close(self) -> None:
        self.closed = True

    def __enter__(self) -> "SmtSession":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()


class ProcessSession(SmtSession):
    """
    Session backed by a solver subprocess.

    Commands are streamed to stdin as they are issued. check_sat ends the
    script with (exit) and collects the output, so a session answers exactly
    one query.
    """

    def __init__(self, backend: SolverBackend, process: subprocess.Popen):
        super().__init__(backend)
        self.process = process

    @classmethod
    def spawn(cls, backend: SolverBackend) -> "ProcessSession":
        """
        Start the backend's executable.

        Raises:
            SolverUnavailable: if the executable is missing or cannot start
        """
        executable = shutil.which(backend.argv[0])
        if executable is None:
            raise SolverUnavailable(f"{backend.name}: executable not found on PATH")
        try:
            process = subprocess.Popen(
                [executable, *backend.argv[1:]],
                stdin=subprocess.PIPE,
                stdout=subprocess.PIPE,
                stderr=subprocess.PIPE,
                text=True,
                encoding="utf-8",
            )
        except OSError as e:
            raise SolverUnavailable(f"{backend.name}: failed to start: {e}") from e
        return cls(backend, process)

    def _send(self, command: str) -> None:
        try:
            self.process.stdin.write(command + "\n")
            self.process.stdin.flush()
        except (OSError, ValueError) as e:
            raise SolverProtocolError(
                f"{self.backend.name}: failed to send command: {e}", self.transcript
            ) from e

    def check_sat(self) -> Status:
        self.command("(check-sat)")
        self.command("(exit)")

        guard = None
        if self.timeout_ms is not None:
            guard = self.timeout_ms / 1000.0 + GRACE_SECONDS
        try:
            stdout, stderr = self.process.communicate(timeout=guard)
        except subprocess.TimeoutExpired:
            logger.warning("%s did not answer within %.1fs; treating as unknown",
                           self.backend.name, guard)
            self.close()
            return Status.UNKNOWN
        self.closed = True

        if stderr.strip():
            logger.debug("%s stderr: %s", self.backend.name, stderr.strip())
        try:
            return parse_check_sat_output(stdout, self.transcript)
        except SolverProtocolError:
            if self.process.returncode:
                logger.debug("%s exited with status %d", self.backend.name, self.process.returncode)
            raise

    def close(self) -> None:
        self.closed = True
        if self.process.poll() is None:
            self.process.kill()
            self.process.communicate()


def spawn_auto(preferred: Optional[str] = None) -> Tuple[SmtSession, SolverBackend]:
    """
    Spawn the first available solver backend.

    Args:
        preferred: Backend name to use exclusively. Falls back to the
            PROOFPATCH_SMT_SOLVER environment variable, then to trying every
            built-in backend in order.

    Raises:
        SolverUnavailable: if no backend could be started
    """
    name = preferred or os.environ.get(SOLVER_ENV_VAR)
    if name:
        candidates = [b for b in BACKENDS if b.name == name]
        if not candidates:
            raise SolverUnavailable(f"unknown solver backend: {name}")
    else:
        candidates = list(BACKENDS)

    failures = []
    for backend in candidates:
        try:
            session = ProcessSession.spawn(backend)
        except SolverUnavailable as e:
            failures.append(str(e))
            continue
        logger.info("Using SMT solver %s", backend.name)
        return session, backend
    raise SolverUnavailable("no SMT solver available: " + "; ".join(failures))
