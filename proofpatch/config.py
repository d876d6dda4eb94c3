"""
Repository configuration (proofpatch.toml)

Example:
    [research.presets.nat_sub]
    query = "Nat.sub_le lemma"
    must_include_any = ["Nat.sub"]
    max_results = 5

    [smt]
    timeout_ms = 2000
    seed = 7
    solver = "z3"

Unknown keys are rejected so that typos surface instead of being ignored.
"""

import tomllib
from collections.abc import Mapping
from dataclasses import dataclass, field, fields
from pathlib import Path
from typing import Any, Dict, List, Optional

from proofpatch.errors import ConfigError


CONFIG_FILENAME = "proofpatch.toml"


@dataclass
class ResearchPreset:
    """Named search preset used by research tooling"""
    query: str
    must_include_any: List[str] = field(default_factory=list)
    max_results: int = 8
    timeout_ms: int = 20_000
    llm_summary: bool = False
    llm_timeout_s: int = 20


@dataclass
class ResearchConfig:
    presets: Dict[str, ResearchPreset] = field(default_factory=dict)


@dataclass
class SmtConfig:
    """Defaults for entailment checks"""
    timeout_ms: int = 5000
    seed: int = 0
    solver: Optional[str] = None


@dataclass
class ProofpatchConfig:
    research: ResearchConfig = field(default_factory=ResearchConfig)
    smt: SmtConfig = field(default_factory=SmtConfig)


# Expected TOML types per field (bool is checked before int)
_FIELD_TYPES = {
    "query": str,
    "must_include_any": list,
    "max_results": int,
    "timeout_ms": int,
    "llm_summary": bool,
    "llm_timeout_s": int,
    "seed": int,
    "solver": str,
}


def _check_table(where: str, value: Any, cls) -> Dict[str, Any]:
    """Validate a TOML table against a dataclass: no unknown keys, right types"""
    if not isinstance(value, Mapping):
        raise ConfigError(f"{where}: expected a table")
    known = {f.name for f in fields(cls)}
    unknown = sorted(set(value) - known)
    if unknown:
        raise ConfigError(f"{where}: unknown field(s) {', '.join(unknown)}")

    for key, item in value.items():
        expected = _FIELD_TYPES.get(key)
        if expected is None:
            continue
        if expected is int and isinstance(item, bool):
            raise ConfigError(f"{where}.{key}: expected integer, got boolean")
        if not isinstance(item, expected):
            raise ConfigError(f"{where}.{key}: expected {expected.__name__}, got {type(item).__name__}")
    return dict(value)


def _parse_preset(name: str, value: Any) -> ResearchPreset:
    where = f"research.presets.{name}"
    table = _check_table(where, value, ResearchPreset)
    if "query" not in table:
        raise ConfigError(f"{where}: missing required field query")
    if not all(isinstance(s, str) for s in table.get("must_include_any", [])):
        raise ConfigError(f"{where}.must_include_any: expected a list of strings")
    return ResearchPreset(**table)


def parse_config(data: Mapping[str, Any]) -> ProofpatchConfig:
    """Build a ProofpatchConfig from a decoded TOML document"""
    top = _check_table("proofpatch.toml", data, ProofpatchConfig)

    research = ResearchConfig()
    if "research" in top:
        research_table = _check_table("research", top["research"], ResearchConfig)
        presets = research_table.get("presets", {})
        if not isinstance(presets, Mapping):
            raise ConfigError("research.presets: expected a table")
        research.presets = {name: _parse_preset(name, value) for name, value in presets.items()}

    smt = SmtConfig()
    if "smt" in top:
        smt = SmtConfig(**_check_table("smt", top["smt"], SmtConfig))
        if smt.timeout_ms < 0:
            raise ConfigError("smt.timeout_ms: must be non-negative")

    return ProofpatchConfig(research=research, smt=smt)


def config_path(repo_root: Path) -> Path:
    return Path(repo_root) / CONFIG_FILENAME


def load_from_repo_root(repo_root: Path) -> Optional[ProofpatchConfig]:
    """
    Load proofpatch.toml from a repository root.

    Returns:
        The parsed config, or None if the file does not exist

    Raises:
        ConfigError: if the file cannot be read, is not valid TOML, or does
            not match the schema
    """
    path = config_path(repo_root)
    if not path.exists():
        return None
    try:
        with path.open("rb") as f:
            data = tomllib.load(f)
    except OSError as e:
        raise ConfigError(f"read {path}: {e}") from e
    except tomllib.TOMLDecodeError as e:
        raise ConfigError(f"parse {path}: {e}") from e
    try:
        return parse_config(data)
    except ConfigError as e:
        raise ConfigError(f"parse {path}: {e}") from e
