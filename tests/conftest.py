"""Pytest configuration and fixtures."""

import json
from pathlib import Path
from typing import Any

import pytest

from price_engine.constants import AMP_PRECISION, SCALE
from price_engine.math.fixed_point import Fixed
from price_engine.pools import PoolToken, StablePoolState, WeightedPoolState

FIXTURES_DIR = Path(__file__).parent / "fixtures"

# 100 * AMP_PRECISION
AMP_100 = 100 * AMP_PRECISION

# 0.3% fee as a fraction of SCALE
FEE_30_BPS = 3_000_000


def to_fixed(values: list[int]) -> list[Fixed]:
    """Wrap raw scaled ints as Fixed balances."""
    return [Fixed(v) for v in values]


def load_json_fixture(name: str) -> dict[str, Any]:
    """Load a JSON fixture by file name (without extension)."""
    with open(FIXTURES_DIR / f"{name}.json") as f:
        return json.load(f)


@pytest.fixture
def fixtures_dir() -> Path:
    """Return the fixtures directory path."""
    return FIXTURES_DIR


@pytest.fixture
def balanced_balances() -> list[Fixed]:
    """Two-token balance vector of 100 tokens each."""
    return to_fixed([100 * SCALE, 100 * SCALE])


@pytest.fixture
def weighted_pool() -> WeightedPoolState:
    """50/50 weighted pool pricing token A at 0.95 B, 0.3% fee."""
    return WeightedPoolState(
        tokens=[
            PoolToken(mint="A", balance=100 * SCALE, weight=SCALE // 2),
            PoolToken(mint="B", balance=95 * SCALE, weight=SCALE // 2),
        ],
        swap_fee=FEE_30_BPS,
    )


@pytest.fixture
def stable_pool() -> StablePoolState:
    """Balanced A/B stable pool with A = 100, 0.3% fee."""
    return StablePoolState(
        tokens=[
            PoolToken(mint="A", balance=100 * SCALE),
            PoolToken(mint="B", balance=100 * SCALE),
        ],
        swap_fee=FEE_30_BPS,
        amplification=100,
    )
