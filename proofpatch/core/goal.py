"""
Goal payload validation

Validates the `pp_dump`-shaped payload produced by the proof assistant
bridge once, at the entry of the pipeline:

    {"goals": [{"pretty": "n : ℕ\\n⊢ n ≥ 0",
                "hyps": [{"text": "n : ℕ"}]}]}

Only `goals[0]` is consulted. Missing optional fields degrade to empty
values; a payload without a first goal is malformed.
"""

from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any, List, Optional

from proofpatch.errors import MalformedInputError


TURNSTILE = "⊢"


@dataclass
class Goal:
    """First goal of a pp_dump payload"""
    pretty: str = ""
    # One entry per hypothesis; None where the hypothesis has no text
    hyps: List[Optional[str]] = field(default_factory=list)

    @classmethod
    def from_pp_dump(cls, pp_dump: Any) -> "Goal":
        """
        Extract and validate goals[0].

        Raises:
            MalformedInputError: if the payload has no goals[0] object
        """
        if not isinstance(pp_dump, Mapping):
            raise MalformedInputError("pp_dump must be a JSON object")
        goals = pp_dump.get("goals")
        if not isinstance(goals, list) or not goals:
            raise MalformedInputError("pp_dump missing goals[0]")
        goal = goals[0]
        if not isinstance(goal, Mapping):
            raise MalformedInputError("pp_dump goals[0] must be a JSON object")

        pretty = goal.get("pretty")
        if not isinstance(pretty, str):
            pretty = ""

        hyps: List[Optional[str]] = []
        raw_hyps = goal.get("hyps")
        if isinstance(raw_hyps, list):
            for hyp in raw_hyps:
                text = hyp.get("text") if isinstance(hyp, Mapping) else None
                hyps.append(text if isinstance(text, str) else None)

        return cls(pretty=pretty, hyps=hyps)

    def target(self) -> str:
        """
        Text after the turnstile on the first `⊢` line, trimmed.

        Returns an empty string if the pretty text has no goal line.
        """
        for line in self.pretty.split("\n"):
            stripped = line.removesuffix("\r").lstrip()
            if stripped.startswith(TURNSTILE):
                return stripped[len(TURNSTILE):].strip()
        return ""

    def hyp_texts(self) -> List[str]:
        return [text for text in self.hyps if text is not None]
