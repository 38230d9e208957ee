"""Put ``src`` on the import path and share small-run fixtures."""

from __future__ import annotations

import sys
from pathlib import Path

import pytest

ROOT = Path(__file__).resolve().parents[1]
SRC = ROOT / "src"

src_path = str(SRC)
if src_path not in sys.path:
    sys.path.insert(0, src_path)


@pytest.fixture
def small_run(tmp_path: Path) -> dict:
    """Keyword arguments for a fast Monte Carlo run writing under ``tmp_path``."""

    return {
        "trials": 2,
        "prtp": [0.03],
        "eta": [0.0],
        "seed": 42,
        "output_root": tmp_path,
    }
