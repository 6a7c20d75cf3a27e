from dataclasses import dataclass
from typing import Optional

from fractal.core.base.entity import BaseEntity, GlobalState, InternalState

from allocator.constants import ALLOCATOR_ADDRESS
from allocator.custody import Custody
from allocator.exceptions import PoolServiceException


@dataclass
class SimulatedPoolGlobalState(GlobalState):
    deposits_enabled: bool = True
    withdrawals_enabled: bool = True


@dataclass
class SimulatedPoolInternalState(InternalState):
    pool_tokens: int = 0
    underlying: int = 0


class SimulatedPool(BaseEntity):
    """
    Represents a liquidity pool that accepts the underlying asset and mints pool tokens 1:1.

    When a custody layer is given, deposits pull the underlying from ``holder``
    into the pool's own address and withdrawals send it back.
    """

    def __init__(self, address: str, custody: Optional[Custody] = None, holder: str = ALLOCATOR_ADDRESS,
                 withdrawal_haircut: int = 0):
        if withdrawal_haircut < 0:
            raise PoolServiceException("Withdrawal haircut must be greater than 0")

        self._address = address
        self._custody = custody
        self._holder = holder
        self._withdrawal_haircut = withdrawal_haircut
        super().__init__()

    def _initialize_states(self):
        self._global_state: SimulatedPoolGlobalState = SimulatedPoolGlobalState()
        self._internal_state: SimulatedPoolInternalState = SimulatedPoolInternalState()

    def deposit(self, amount: int) -> int:
        # deposit the underlying asset, receive pool tokens in return
        if amount <= 0:
            raise PoolServiceException("Amount must be greater than 0")
        if not self._global_state.deposits_enabled:
            raise PoolServiceException(f"Deposits into {self._address} are disabled")

        if self._custody is not None:
            self._custody.transfer(self._holder, self._address, amount)
        self._internal_state.pool_tokens += amount
        self._internal_state.underlying += amount
        return amount

    def withdraw(self, amount: int) -> int:
        # withdraw an amount of the underlying asset, burning the matching pool tokens
        if amount <= 0:
            raise PoolServiceException("Amount must be greater than 0")
        if not self._global_state.withdrawals_enabled:
            raise PoolServiceException(f"Withdrawals from {self._address} are disabled")
        if amount > self._internal_state.pool_tokens:
            raise PoolServiceException("Not enough pool tokens to withdraw the requested amount")

        returned = amount - min(self._withdrawal_haircut, amount)
        self._internal_state.pool_tokens -= amount
        self._internal_state.underlying -= amount
        if self._custody is not None:
            self._custody.transfer(self._address, self._holder, returned)
        return returned

    def withdraw_one_asset(self, tokens: int) -> int:
        # redeem pool tokens for the single reference asset
        return self.withdraw(tokens)

    def action_deposit(self, amount: int) -> int:
        return self.deposit(amount)

    def action_withdraw(self, amount: int) -> int:
        return self.withdraw(amount)

    def update_state(self, state: SimulatedPoolGlobalState):
        self._global_state = state

    @property
    def balance(self) -> float:
        return float(self._internal_state.underlying)

    @property
    def pool_tokens(self) -> int:
        return self._internal_state.pool_tokens

    @property
    def address(self) -> str:
        return self._address
