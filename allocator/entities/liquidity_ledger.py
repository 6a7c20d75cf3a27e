import logging
from dataclasses import dataclass
from typing import Dict, Tuple

from fractal.core.base.entity import InternalState

from allocator.entities.pool_registry import PoolRegistry
from allocator.exceptions import InsufficientLiquidity, InvalidAmount, InvalidPool, UnverifiedPool
from allocator.utils.validate_actions import validate_amount, validate_transfer

logger = logging.getLogger(__name__)


@dataclass
class LiquidityLedgerInternalState(InternalState):
    liquidity_a: int = 0
    liquidity_b: int = 0


class LiquidityLedger:
    """
    Underlying capital attributed to each of the two verified pools.

    The ledger is bookkeeping only. It never moves funds itself, and a
    transfer between the pools never changes the total.
    """

    def __init__(self, registry: PoolRegistry):
        self._pool_a, self._pool_b = registry.verified_pools
        self._state = LiquidityLedgerInternalState()

    def credit(self, pool_id: str, amount: int) -> None:
        feedback = validate_amount(amount)
        if not feedback.passed:
            raise InvalidAmount(feedback.feedback)
        if pool_id not in (self._pool_a, self._pool_b):
            raise UnverifiedPool(f"Pool {pool_id} is not a verified pool")

        self._set(pool_id, self.balance_of(pool_id) + amount)
        logger.debug("Credit: %s, amount: %s, balances: %s", pool_id, amount, self.balances())

    def transfer(self, from_pool: str, to_pool: str, amount: int) -> None:
        feedback = validate_transfer(from_pool, to_pool, amount, self._as_dict())
        if not feedback.passed:
            if not validate_amount(amount).passed:
                raise InvalidAmount(feedback.feedback)
            if from_pool not in self._as_dict() or to_pool not in self._as_dict():
                raise UnverifiedPool(feedback.feedback)
            if from_pool == to_pool:
                raise InvalidPool(feedback.feedback)
            raise InsufficientLiquidity(feedback.feedback)

        # both balances are computed before either is written
        from_balance = self.balance_of(from_pool) - amount
        to_balance = self.balance_of(to_pool) + amount
        self._set(from_pool, from_balance)
        self._set(to_pool, to_balance)
        logger.debug("Transfer: %s -> %s, amount: %s, balances: %s", from_pool, to_pool, amount, self.balances())

    def write_off(self, pool_id: str, amount: int) -> None:
        # capital a pool failed to return; the only path that lowers the total
        feedback = validate_amount(amount)
        if not feedback.passed:
            raise InvalidAmount(feedback.feedback)
        balance = self.balance_of(pool_id)
        if amount > balance:
            raise InsufficientLiquidity(
                f"The write-off amount ({amount}) of {pool_id} cannot exceed the balance ({balance})")

        self._set(pool_id, balance - amount)
        logger.warning("Write-off: %s, amount: %s, balances: %s", pool_id, amount, self.balances())

    def balance_of(self, pool_id: str) -> int:
        if pool_id == self._pool_a:
            return self._state.liquidity_a
        if pool_id == self._pool_b:
            return self._state.liquidity_b
        raise UnverifiedPool(f"Pool {pool_id} is not a verified pool")

    def balances(self) -> Tuple[int, int]:
        return self._state.liquidity_a, self._state.liquidity_b

    @property
    def pool_ids(self) -> Tuple[str, str]:
        return self._pool_a, self._pool_b

    @property
    def total(self) -> int:
        return self._state.liquidity_a + self._state.liquidity_b

    @property
    def internal_state(self) -> LiquidityLedgerInternalState:
        return self._state

    def _as_dict(self) -> Dict[str, int]:
        return {self._pool_a: self._state.liquidity_a, self._pool_b: self._state.liquidity_b}

    def _set(self, pool_id: str, amount: int) -> None:
        if pool_id == self._pool_a:
            self._state.liquidity_a = amount
        else:
            self._state.liquidity_b = amount
