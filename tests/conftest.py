from __future__ import annotations

import sys
from pathlib import Path

import pytest

# Ensure "src" is on sys.path for imports in tests
PROJECT_ROOT = Path(__file__).resolve().parents[1]
SRC_DIR = PROJECT_ROOT / "src"
if str(SRC_DIR) not in sys.path:
    sys.path.insert(0, str(SRC_DIR))

from ironman_randomizer.core.models import RunState  # noqa: E402
from ironman_randomizer.features.run import RunManager  # noqa: E402


@pytest.fixture
def manager() -> RunManager:
    return RunManager()


@pytest.fixture
def active_run() -> RunState:
    return RunState(run_id=7, queue=("x", "y"), completed=(), failed=False, started_at_ms=1_000, updated_at_ms=1_000)
