from __future__ import annotations

import sys
from pathlib import Path

import pytest

# Ensure project root is on sys.path for flat-module imports like `knapsack_solvers`
ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from knapsack_solvers import Item  # noqa: E402


@pytest.fixture
def scenario_one() -> list[Item]:
    return [Item(1, 1), Item(3, 4), Item(4, 5), Item(5, 7)]


@pytest.fixture
def scenario_two() -> list[Item]:
    return [Item(2, 3), Item(3, 4), Item(4, 5), Item(5, 6)]
