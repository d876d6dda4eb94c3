"""
LIA entailment checking for proof-assistant goals

Decides whether a goal's target follows from its hypotheses under linear
integer/natural arithmetic by asking an external SMT solver whether
`hyps ∧ ¬target` is unsatisfiable:

    UNSAT(hyps ∧ ¬target)   => ENTAILED
    SAT(hyps ∧ ¬target)     => NOT_ENTAILED
    UNKNOWN / not parsable  => UNKNOWN

Soundness posture: this is a heuristic signal for ranking candidate proof
steps. Only a conservative syntactic fragment is translated, so an ENTAILED
verdict must still be checked by the proof assistant before a goal is
treated as discharged.
"""

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, Dict, List, Optional, Sequence, Tuple

import z3

from proofpatch.core.declarations import VarKind, collect_var_kinds
from proofpatch.core.goal import Goal
from proofpatch.core.relations import RelConstraint, parse_rel_constraint
from proofpatch.encoding.terms import int_symbol
from proofpatch.errors import SolverUnavailable
from proofpatch.solver.session import SmtSession, SolverBackend, Status, spawn_auto

logger = logging.getLogger(__name__)

LOGIC = "QF_LIA"

DEFAULT_TIMEOUT_MS = 5000
DEFAULT_SEED = 0

SpawnFn = Callable[[Optional[str]], Tuple[SmtSession, SolverBackend]]


class Verdict(Enum):
    """Outcome of one entailment check"""
    ENTAILED = "entailed"
    NOT_ENTAILED = "not_entailed"
    UNKNOWN = "unknown"


@dataclass
class EntailmentResult:
    """Verdict of an entailment check plus the reason it was reached"""
    verdict: Verdict
    reason: str = ""
    solver: Optional[str] = None

    @property
    def entailed(self) -> bool:
        return self.verdict is Verdict.ENTAILED

    def __str__(self) -> str:
        msg = self.verdict.value
        if self.reason:
            msg += f": {self.reason}"
        return msg


_STATUS_VERDICTS = {
    Status.UNSAT: Verdict.ENTAILED,
    Status.SAT: Verdict.NOT_ENTAILED,
    Status.UNKNOWN: Verdict.UNKNOWN,
}


def _unknown(reason: str) -> EntailmentResult:
    logger.debug("Entailment unknown: %s", reason)
    return EntailmentResult(Verdict.UNKNOWN, reason)


def parse_hyp_constraints(hyp_texts: Sequence[str], ctx: Optional[z3.Context] = None) -> List[RelConstraint]:
    """
    Parse the statement part (after the first `:`) of each hypothesis.

    Hypotheses that are not arithmetic facts are skipped.
    """
    constraints = []
    for text in hyp_texts:
        _, sep, statement = text.partition(":")
        statement = statement.strip()
        if not sep or not statement:
            continue
        rel = parse_rel_constraint(statement, ctx)
        if rel is not None:
            constraints.append(rel)
        else:
            logger.debug("Skipping non-arithmetic hypothesis: %s", text)
    return constraints


def entails_from_pp_dump(pp_dump: Any, timeout_ms: int = DEFAULT_TIMEOUT_MS,
                         seed: int = DEFAULT_SEED, solver: Optional[str] = None,
                         spawn: SpawnFn = spawn_auto) -> EntailmentResult:
    """
    Check whether goals[0] of a pp_dump payload is entailed by its hypotheses.

    Args:
        pp_dump: Mapping with `goals[0].pretty` and `goals[0].hyps[*].text`
        timeout_ms: Solver timeout in milliseconds
        seed: Solver random seed
        solver: Backend name passed to `spawn` (None: first available)
        spawn: Session factory

    Returns:
        EntailmentResult; UNKNOWN whenever the goal is outside the supported
        fragment or no solver is available

    Raises:
        MalformedInputError: if the payload has no goals[0]
        ValueError: if timeout_ms is negative
        SolverProtocolError: if the solver rejects a command or stops responding
    """
    if timeout_ms < 0:
        raise ValueError(f"timeout must be non-negative, got {timeout_ms}")
    goal = Goal.from_pp_dump(pp_dump)

    target = goal.target()
    if not target:
        return _unknown("no ⊢ target line")

    hyp_texts = goal.hyp_texts()
    var_kinds = collect_var_kinds(hyp_texts)

    ctx = z3.Context()
    target_rel = parse_rel_constraint(target, ctx)
    if target_rel is None:
        return _unknown(f"target is not a linear comparison: {target}")

    hyp_rels = parse_hyp_constraints(hyp_texts, ctx)

    referenced = set(target_rel.vars)
    for rel in hyp_rels:
        referenced |= rel.vars
    missing = sorted(referenced - var_kinds.keys())
    if missing:
        return _unknown(f"no Int/Nat declaration for {', '.join(missing)}")

    try:
        session, backend = spawn(solver)
    except SolverUnavailable as e:
        return _unknown(str(e))

    with session:
        status = _run_query(session, var_kinds, hyp_rels, target_rel, timeout_ms, seed, ctx)

    verdict = _STATUS_VERDICTS[status]
    logger.debug("%s answered %s for target %s", backend.name, status.value, target)
    return EntailmentResult(verdict, f"solver answered {status.value}", backend.name)


def _run_query(session: SmtSession, var_kinds: Dict[str, VarKind],
               hyp_rels: List[RelConstraint], target_rel: RelConstraint,
               timeout_ms: int, seed: int, ctx: z3.Context) -> Status:
    session.set_print_success(False)
    session.set_produce_models(False)
    session.set_random_seed(seed)
    session.set_logic(LOGIC)
    session.set_timeout_ms(timeout_ms)

    for name, kind in var_kinds.items():
        session.declare_const(name, "Int")
        if kind is VarKind.NAT:
            session.assert_term(int_symbol(name, ctx) >= 0)

    for rel in hyp_rels:
        session.assert_term(rel.term)
    session.assert_term(z3.Not(target_rel.term))
    return session.check_sat()


class LiaEntailmentChecker:
    """
    Entailment checker with fixed solver settings.

    Example:
        >>> checker = LiaEntailmentChecker(timeout=2000)
        >>> checker.check_texts(["n : ℕ", "h : n ≤ 3"], "n < 4").verdict
        <Verdict.ENTAILED: 'entailed'>
    """

    def __init__(self, timeout: int = DEFAULT_TIMEOUT_MS, seed: int = DEFAULT_SEED,
                 solver: Optional[str] = None, spawn: SpawnFn = spawn_auto):
        """
        Args:
            timeout: Solver timeout in milliseconds
            seed: Solver random seed
            solver: Backend name (None: first available)
            spawn: Session factory
        """
        if timeout < 0:
            raise ValueError(f"timeout must be non-negative, got {timeout}")
        self.timeout = timeout
        self.seed = seed
        self.solver = solver
        self.spawn = spawn

    def check(self, pp_dump: Any) -> EntailmentResult:
        """Check goals[0] of a pp_dump payload"""
        return entails_from_pp_dump(pp_dump, self.timeout, self.seed, self.solver, self.spawn)

    def check_texts(self, hyps: Sequence[str], target: str) -> EntailmentResult:
        """Check a target given hypothesis lines such as `h : a ≤ b`"""
        pretty = "\n".join(list(hyps) + [f"⊢ {target}"])
        pp_dump = {"goals": [{"pretty": pretty, "hyps": [{"text": h} for h in hyps]}]}
        return self.check(pp_dump)
