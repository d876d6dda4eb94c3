#!/usr/bin/env python3
"""
proofpatch CLI - LIA entailment triage for proof goals.

A unified command-line interface:
- entails: Check a pp_dump goal payload for LIA entailment
- parse: Show how a comparison statement is parsed and encoded
- extract-json: Pull a JSON value out of model output
- presets: List research presets from proofpatch.toml

Usage:
    proofpatch entails pp_dump.json            # Check goals[0]
    proofpatch entails --format json < dump    # Read payload from stdin
    proofpatch parse "a + 1 ≤ b"               # Inspect parsing
    proofpatch extract-json reply.txt          # Extract JSON from text
    proofpatch presets                         # List configured presets
"""

import argparse
import json
import logging
import sys
import time
from pathlib import Path
from typing import List, Optional

# Import version from main package (single source of truth)
from proofpatch import __version__
from proofpatch.checking.entailment import LiaEntailmentChecker, Verdict
from proofpatch.config import ProofpatchConfig, load_from_repo_root
from proofpatch.core.linear import parse_linear_expr
from proofpatch.core.relations import parse_rel_constraint, split_relation
from proofpatch.errors import ConfigError, MalformedInputError, SolverProtocolError
from proofpatch.solver.session import BACKENDS, spawn_auto
from proofpatch.utils.json_extract import extract_first_json_value

EXIT_ERROR = 2


def create_parser() -> argparse.ArgumentParser:
    """Create the main argument parser"""
    parser = argparse.ArgumentParser(
        prog="proofpatch",
        description="proofpatch - LIA entailment triage for proof goals",
        epilog="Use 'proofpatch <command> --help' for more information on a specific command.",
    )

    parser.add_argument(
        "-V", "--version",
        action="version",
        version=f"%(prog)s {__version__}"
    )
    parser.add_argument(
        "--root",
        default=".",
        help="Repository root holding proofpatch.toml (default: .)"
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    # === ENTAILS command ===
    entails_parser = subparsers.add_parser(
        "entails",
        help="Check whether a goal follows by linear arithmetic",
        description="Check goals[0] of a pp_dump JSON payload: UNSAT(hyps & !target) means entailed."
    )
    entails_parser.add_argument(
        "file",
        nargs="?",
        help="pp_dump JSON file (default: stdin)"
    )
    entails_parser.add_argument(
        "--timeout",
        type=int,
        help="Solver timeout in ms (default: [smt].timeout_ms or 5000)"
    )
    entails_parser.add_argument(
        "--seed",
        type=int,
        help="Solver random seed (default: [smt].seed or 0)"
    )
    entails_parser.add_argument(
        "--solver",
        choices=[b.name for b in BACKENDS],
        help="Solver backend (default: first available)"
    )
    entails_parser.add_argument(
        "--format",
        default="text",
        choices=["text", "json"],
        help="Output format (default: text)"
    )
    entails_parser.add_argument(
        "-v", "--verbose",
        action="store_true",
        help="Log pipeline decisions and SMT commands"
    )

    # === PARSE command ===
    parse_parser = subparsers.add_parser(
        "parse",
        help="Parse a comparison statement",
        description="Show the operator split, linear expressions and SMT-LIB term of a statement."
    )
    parse_parser.add_argument(
        "statement",
        help="Statement to parse (e.g., 'n + n - 3 ≤ m')"
    )

    # === EXTRACT-JSON command ===
    extract_parser = subparsers.add_parser(
        "extract-json",
        help="Extract a JSON value from free-form text",
        description="Prefer a ```json fenced block, otherwise the first {...} span."
    )
    extract_parser.add_argument(
        "file",
        nargs="?",
        help="Text file (default: stdin)"
    )

    # === PRESETS command ===
    subparsers.add_parser(
        "presets",
        help="List research presets",
        description="List the research presets defined in proofpatch.toml."
    )

    return parser


def _read_input(path: Optional[str]) -> str:
    if path:
        return Path(path).read_text(encoding="utf-8")
    return sys.stdin.read()


def _load_config(args) -> ProofpatchConfig:
    return load_from_repo_root(Path(args.root)) or ProofpatchConfig()


# ============================================================================
# ENTAILS Command
# ============================================================================

def cmd_entails(args) -> int:
    """Execute entails command - check one pp_dump payload"""
    try:
        config = _load_config(args)
    except ConfigError as e:
        print(f"Config error: {e}", file=sys.stderr)
        return EXIT_ERROR

    try:
        pp_dump = json.loads(_read_input(args.file))
    except OSError as e:
        print(f"Error reading file: {e}", file=sys.stderr)
        return EXIT_ERROR
    except json.JSONDecodeError as e:
        print(f"Error: input is not JSON: {e}", file=sys.stderr)
        return EXIT_ERROR

    timeout = args.timeout if args.timeout is not None else config.smt.timeout_ms
    seed = args.seed if args.seed is not None else config.smt.seed
    solver = args.solver or config.smt.solver
    if timeout < 0:
        print("Error: --timeout must be non-negative", file=sys.stderr)
        return EXIT_ERROR

    checker = LiaEntailmentChecker(timeout=timeout, seed=seed, solver=solver, spawn=spawn_auto)

    start_time = time.time()
    try:
        result = checker.check(pp_dump)
    except (MalformedInputError, SolverProtocolError) as e:
        if args.format == "json":
            print(json.dumps({"verdict": None, "error": str(e)}, indent=2))
        else:
            print(f"Error: {e}", file=sys.stderr)
        return EXIT_ERROR
    elapsed_ms = (time.time() - start_time) * 1000

    if args.format == "json":
        print(json.dumps({
            "verdict": result.verdict.value,
            "reason": result.reason,
            "solver": result.solver,
            "time_ms": round(elapsed_ms, 2)
        }, indent=2))
    else:
        if result.verdict is Verdict.ENTAILED:
            print("✓ ENTAILED")
        elif result.verdict is Verdict.NOT_ENTAILED:
            print("✗ NOT ENTAILED")
        else:
            print("? UNKNOWN")
        if result.reason:
            print(f"  Reason: {result.reason}")
        if args.verbose:
            print(f"  Time: {elapsed_ms:.2f}ms")

    return 0 if result.verdict is Verdict.ENTAILED else 1


# ============================================================================
# PARSE Command
# ============================================================================

def cmd_parse(args) -> int:
    """Execute parse command - show how a statement is understood"""
    parts = split_relation(args.statement)
    if parts is None:
        print("No relation operator found", file=sys.stderr)
        return 1
    lhs_text, op, rhs_text = parts
    print(f"Operator: {op}")

    ok = True
    for label, text in (("Left", lhs_text), ("Right", rhs_text)):
        expr = parse_linear_expr(text.strip())
        if expr is None:
            print(f"{label}: {text.strip()!r} is not linear")
            ok = False
        else:
            print(f"{label}: {expr}")

    rel = parse_rel_constraint(args.statement)
    if not ok or rel is None:
        return 1
    print(f"Variables: {', '.join(sorted(rel.vars)) or '-'}")
    print(f"SMT-LIB: {rel.term.sexpr()}")
    return 0


# ============================================================================
# EXTRACT-JSON Command
# ============================================================================

def cmd_extract_json(args) -> int:
    """Execute extract-json command"""
    try:
        text = _read_input(args.file)
    except OSError as e:
        print(f"Error reading file: {e}", file=sys.stderr)
        return EXIT_ERROR

    value = extract_first_json_value(text)
    if value is None:
        print("No JSON value found", file=sys.stderr)
        return 1
    print(json.dumps(value, indent=2, ensure_ascii=False))
    return 0


# ============================================================================
# PRESETS Command
# ============================================================================

def cmd_presets(args) -> int:
    """Execute presets command"""
    try:
        config = load_from_repo_root(Path(args.root))
    except ConfigError as e:
        print(f"Config error: {e}", file=sys.stderr)
        return EXIT_ERROR
    if config is None:
        print(f"No proofpatch.toml in {args.root}")
        return 0

    presets = config.research.presets
    if not presets:
        print("No presets defined")
        return 0
    for name in sorted(presets):
        preset = presets[name]
        print(f"{name}: {preset.query!r} (max_results={preset.max_results}, "
              f"timeout_ms={preset.timeout_ms})")
    return 0


# ============================================================================
# Main Entry Point
# ============================================================================

def main(argv: List[str] = None) -> int:
    """Main CLI entry point"""
    parser = create_parser()
    args = parser.parse_args(argv)

    if not args.command:
        parser.print_help()
        return 0

    logging.basicConfig(
        level=logging.DEBUG if getattr(args, "verbose", False) else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    # Dispatch to command handler
    commands = {
        "entails": cmd_entails,
        "parse": cmd_parse,
        "extract-json": cmd_extract_json,
        "presets": cmd_presets,
    }

    handler = commands.get(args.command)
    if handler:
        return handler(args)
    else:
        parser.print_help()
        return 1


if __name__ == "__main__":
    sys.exit(main())
