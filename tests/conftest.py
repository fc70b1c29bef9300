"""Shared pytest setup.

Puts the repository root on `sys.path` so the `src.*` namespace imports from a source checkout
even when `pip install -e .` has not been run.
"""

from __future__ import annotations

import sys
from pathlib import Path

REPO_ROOT = Path(__file__).resolve().parents[1]
if str(REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(REPO_ROOT))
