"""
Shared fixtures for proofpatch tests
"""

import pytest

from helpers import SpawnRecorder, Z3ApiSession
from proofpatch.errors import SolverUnavailable


@pytest.fixture
def z3_spawn():
    """Spawn function backed by the z3 Python API"""
    return SpawnRecorder(Z3ApiSession)


@pytest.fixture
def unavailable_spawn():
    """Spawn function that never finds a solver"""
    calls = []

    def spawn(preferred=None):
        calls.append(preferred)
        raise SolverUnavailable("no SMT solver available: z3: executable not found on PATH")

    spawn.calls = calls
    return spawn
