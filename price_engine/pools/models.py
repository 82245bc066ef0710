"""Pydantic models for pool state handed to the pricing core.

Callers (on-chain program glue or an off-chain client) build these from
their own account data; validation here rejects pool states the math would
otherwise trip over halfway through a solve.
"""

from __future__ import annotations

from typing import Annotated, Any

from pydantic import BaseModel, ConfigDict, Field, model_validator

from price_engine.constants import (
    AMP_PRECISION,
    MAX_AMP,
    MAX_TOKEN_DECIMALS,
    MIN_AMP,
    POOL_DECIMALS,
    SCALE,
    U64_MAX,
)
from price_engine.errors import InvalidAmount
from price_engine.math.fixed_point import Fixed

from .scaling import scale_down_down, scale_up, scales_up, scaling_factor_for

# Balance stored in pool units (9-decimal scaled), bounded by the on-chain u64 width
ScaledBalance = Annotated[int, Field(ge=0, le=U64_MAX)]

# Fee as a fraction of SCALE, strictly below 100%
SwapFee = Annotated[int, Field(ge=0, lt=SCALE)]


class PoolToken(BaseModel):
    """One token held by a pool.

    scaling_factor and scaling_up default to the values derived from
    decimals; if given explicitly they must agree with it.

    Attributes:
        mint: Token identifier (mint address or symbol)
        decimals: Native token decimals
        balance: Pool balance, already scaled into pool units
        weight: Normalized weight as a fraction of SCALE (weighted pools only)
        scaling_up: True if raw amounts are multiplied into pool units,
            False if they are divided (tokens with more than 9 decimals)
        scaling_factor: 10^|POOL_DECIMALS - decimals|
    """

    model_config = ConfigDict(frozen=True)

    mint: str = Field(min_length=1)
    decimals: int = Field(default=POOL_DECIMALS, ge=0, le=MAX_TOKEN_DECIMALS)
    balance: ScaledBalance
    weight: int = Field(default=0, ge=0, le=SCALE)
    scaling_up: bool = True
    scaling_factor: int = Field(default=1, ge=1)

    @model_validator(mode="before")
    @classmethod
    def _derive_scaling(cls, data: Any) -> Any:
        if not isinstance(data, dict):
            return data
        decimals = data.get("decimals", POOL_DECIMALS)
        if not isinstance(decimals, int) or not 0 <= decimals <= MAX_TOKEN_DECIMALS:
            return data
        return {
            "scaling_factor": scaling_factor_for(decimals),
            "scaling_up": scales_up(decimals),
            **data,
        }

    @model_validator(mode="after")
    def _check_scaling(self) -> PoolToken:
        expected_factor = scaling_factor_for(self.decimals)
        expected_up = scales_up(self.decimals)
        if self.scaling_factor != expected_factor or self.scaling_up != expected_up:
            raise ValueError(
                f"Token {self.mint} with {self.decimals} decimals needs "
                f"scaling_factor={expected_factor}, scaling_up={expected_up}; got "
                f"scaling_factor={self.scaling_factor}, scaling_up={self.scaling_up}"
            )
        return self

    def scale_amount_up(self, raw_amount: int) -> Fixed:
        return scale_up(raw_amount, self.scaling_factor, self.scaling_up)

    def scale_amount_down(self, scaled_amount: Fixed) -> int:
        return scale_down_down(scaled_amount, self.scaling_factor, self.scaling_up)


class _PoolState(BaseModel):
    model_config = ConfigDict(frozen=True)

    tokens: tuple[PoolToken, ...] = Field(min_length=2)
    swap_fee: SwapFee = 0

    @model_validator(mode="after")
    def _check_unique_mints(self) -> _PoolState:
        mints = [t.mint for t in self.tokens]
        if len(set(mints)) != len(mints):
            raise ValueError(f"Duplicate token mints in pool: {mints}")
        return self

    @property
    def balances(self) -> list[Fixed]:
        return [Fixed(t.balance) for t in self.tokens]

    def token_index(self, mint: str) -> int:
        """Index of a token in the pool.

        Raises:
            InvalidAmount: If the mint is not part of the pool
        """
        for i, token in enumerate(self.tokens):
            if token.mint == mint:
                return i
        raise InvalidAmount(f"Token {mint} is not part of the pool")


class WeightedPoolState(_PoolState):
    """Weighted product pool.

    Weights must be positive and sum to exactly SCALE.
    """

    @model_validator(mode="after")
    def _check_weights(self) -> WeightedPoolState:
        weights = [t.weight for t in self.tokens]
        if any(w == 0 for w in weights):
            raise ValueError("Weighted pool tokens must have a positive weight")
        if sum(weights) != SCALE:
            raise ValueError(f"Weights must sum to {SCALE}, got {sum(weights)}")
        return self

    @property
    def weights(self) -> list[Fixed]:
        return [Fixed(t.weight) for t in self.tokens]


class StablePoolState(_PoolState):
    """StableSwap pool.

    Attributes:
        amplification: Unscaled A (e.g. 100). The math functions take
            amp = amplification * AMP_PRECISION, exposed as the amp property.
    """

    amplification: int = Field(ge=MIN_AMP, le=MAX_AMP)

    @property
    def amp(self) -> int:
        return self.amplification * AMP_PRECISION
