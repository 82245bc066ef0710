"""Tests for cross-model arbitrage detection."""

import math

import pytest
from structlog.testing import capture_logs

from price_engine.config import EngineConfig
from price_engine.constants import SCALE
from price_engine.errors import InvalidAmount
from price_engine.pools import PoolToken, StablePoolState, WeightedPoolState
from price_engine.pricing.arbitrage import (
    ArbitrageDirection,
    detect_arbitrage,
    detect_pool_arbitrage,
    fee_to_percent,
)
from tests.conftest import FEE_30_BPS


class TestFeeToPercent:
    def test_thirty_bps(self) -> None:
        assert fee_to_percent(FEE_30_BPS) == pytest.approx(0.3)

    def test_zero(self) -> None:
        assert fee_to_percent(0) == 0.0

    @pytest.mark.parametrize("fee", [-1, SCALE])
    def test_out_of_range_raises(self, fee: int) -> None:
        with pytest.raises(InvalidAmount):
            fee_to_percent(fee)


class TestDetectArbitrage:
    """Tests for detect_arbitrage."""

    def test_weighted_cheaper(self) -> None:
        """0.95 vs 1.00 with 0.3% + 0.3% fees nets about 4.66%."""
        opp = detect_arbitrage(0.95, FEE_30_BPS, 1.0, FEE_30_BPS, 0.1)

        assert opp is not None
        assert opp.price_a == 0.95
        assert opp.price_b == 1.0
        assert opp.price_diff_percent == pytest.approx(5.263157894736842)
        assert opp.total_fees_percent == pytest.approx(0.6)
        assert opp.net_profit_percent == pytest.approx(4.663157894736842)
        assert opp.direction is ArbitrageDirection.WEIGHTED_TO_STABLE
        assert opp.direction.buy_pool == "weighted"
        assert opp.direction.sell_pool == "stable"
        assert opp.profitable

    def test_stable_cheaper(self) -> None:
        opp = detect_arbitrage(1.05, FEE_30_BPS, 1.0, FEE_30_BPS)

        assert opp is not None
        assert opp.direction is ArbitrageDirection.STABLE_TO_WEIGHTED
        assert opp.direction.buy_pool == "stable"
        assert opp.net_profit_percent == pytest.approx(4.4)

    def test_fees_eat_the_spread(self) -> None:
        """0.5% spread minus 0.6% fees is a loss."""
        assert detect_arbitrage(0.995, FEE_30_BPS, 1.0, FEE_30_BPS) is None

    def test_below_min_profit(self) -> None:
        """Net 0.05% is below the 0.1% default threshold."""
        assert detect_arbitrage(1.0, 0, 1.0005, 0) is None

    def test_threshold_from_argument(self) -> None:
        opp = detect_arbitrage(1.0, 0, 1.02, 0, min_profit_percent=1.0)
        assert opp is not None
        assert detect_arbitrage(1.0, 0, 1.02, 0, min_profit_percent=2.5) is None

    def test_threshold_is_inclusive(self) -> None:
        """Equal prices net exactly zero, which meets a zero threshold."""
        assert detect_arbitrage(1.0, 0, 1.0, 0, min_profit_percent=0.0) is not None
        assert detect_arbitrage(1.0, 0, 1.0, 0) is None

    @pytest.mark.parametrize("price", [0.0, -1.0, math.inf, math.nan])
    def test_invalid_price_raises(self, price: float) -> None:
        with pytest.raises(InvalidAmount):
            detect_arbitrage(price, 0, 1.0, 0)
        with pytest.raises(InvalidAmount):
            detect_arbitrage(1.0, 0, price, 0)

    def test_logs_evaluation(self) -> None:
        with capture_logs() as logs:
            detect_arbitrage(0.95, FEE_30_BPS, 1.0, FEE_30_BPS)

        entries = [e for e in logs if e["event"] == "arbitrage_evaluated"]
        assert len(entries) == 1
        assert entries[0]["net_profit_percent"] == pytest.approx(4.663157894736842)


class TestDetectPoolArbitrage:
    """Pool-level detection from pool state."""

    def test_fixture_pools(self, weighted_pool, stable_pool) -> None:
        opp = detect_pool_arbitrage(weighted_pool, stable_pool)

        assert opp is not None
        assert opp.price_a == pytest.approx(0.95)
        assert 0.99 < opp.price_b < 1.0
        assert opp.direction is ArbitrageDirection.WEIGHTED_TO_STABLE
        assert opp.net_profit_percent == pytest.approx(4.66, abs=0.01)

    def test_min_profit_from_config(self, weighted_pool, stable_pool) -> None:
        config = EngineConfig(min_profit_percent=10.0)
        assert detect_pool_arbitrage(weighted_pool, stable_pool, config) is None

    def test_pair_mismatch_raises(self, weighted_pool) -> None:
        other = StablePoolState(
            tokens=[PoolToken(mint="B", balance=SCALE), PoolToken(mint="A", balance=SCALE)],
            amplification=100,
        )
        with pytest.raises(InvalidAmount, match="same pair"):
            detect_pool_arbitrage(weighted_pool, other)

    def test_three_token_pool_rejected(self, weighted_pool, stable_pool) -> None:
        """A third token is never silently ignored."""
        three_token = WeightedPoolState(
            tokens=[
                PoolToken(mint="A", balance=100 * SCALE, weight=400_000_000),
                PoolToken(mint="B", balance=95 * SCALE, weight=400_000_000),
                PoolToken(mint="C", balance=50 * SCALE, weight=200_000_000),
            ],
            swap_fee=FEE_30_BPS,
        )
        with pytest.raises(InvalidAmount, match="two-token weighted pool"):
            detect_pool_arbitrage(three_token, stable_pool)

        three_stable = StablePoolState(
            tokens=[
                PoolToken(mint="A", balance=100 * SCALE),
                PoolToken(mint="B", balance=100 * SCALE),
                PoolToken(mint="C", balance=100 * SCALE),
            ],
            amplification=100,
        )
        with pytest.raises(InvalidAmount, match="two-token stable pool"):
            detect_pool_arbitrage(weighted_pool, three_stable)


class TestFallbackPrices:
    """A dust stable pool only yields the naive ratio price."""

    @pytest.fixture
    def dust_stable_pool(self) -> StablePoolState:
        return StablePoolState(
            tokens=[PoolToken(mint="A", balance=1), PoolToken(mint="B", balance=1)],
            swap_fee=FEE_30_BPS,
            amplification=100,
        )

    def test_fallback_allowed(self, weighted_pool: WeightedPoolState, dust_stable_pool) -> None:
        opp = detect_pool_arbitrage(weighted_pool, dust_stable_pool)

        assert opp is not None
        assert opp.price_b == 1.0
        assert opp.direction is ArbitrageDirection.WEIGHTED_TO_STABLE

    def test_fallback_disallowed(self, weighted_pool: WeightedPoolState, dust_stable_pool) -> None:
        config = EngineConfig(allow_fallback_prices=False)

        with capture_logs() as logs:
            opp = detect_pool_arbitrage(weighted_pool, dust_stable_pool, config)

        assert opp is None
        skipped = [e for e in logs if e["event"] == "arbitrage_skipped_fallback_price"]
        assert len(skipped) == 1
        assert skipped[0]["reason"] == "zero_output"
