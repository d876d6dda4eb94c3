#!/usr/bin/env python3
"""
proofpatch CLI entry point for `python -m proofpatch`.

Usage:
    python -m proofpatch entails pp_dump.json
    python -m proofpatch parse "a + 1 ≤ b"
    python -m proofpatch extract-json reply.txt
    python -m proofpatch presets
"""

import sys
from proofpatch.cli import main

if __name__ == "__main__":
    sys.exit(main())
