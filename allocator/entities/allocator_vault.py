import functools
import logging
import threading
from dataclasses import dataclass
from typing import Dict, Iterable, List, Optional, Tuple

from fractal.core.base.entity import BaseEntity, GlobalState

from allocator.config import AllocatorConfig
from allocator.custody import Custody
from allocator.engine.allocation_engine import AllocationEngine, TransferInstruction
from allocator.engine.rebalance_executor import PoolService, RebalanceExecutor
from allocator.entities.liquidity_ledger import LiquidityLedger, LiquidityLedgerInternalState
from allocator.entities.pool_registry import PoolRegistry
from allocator.entities.weight_policy import WeightPolicy
from allocator.events import Deposited, Event, EventLog
from allocator.exceptions import (
    AllocatorEntityException, ConfigurationError, CustodyException, DepositFailed, InsufficientFunds,
    InvalidAmount, InvalidPool, PoolServiceException, StrandedFundsAfterPartialRebalance, Unauthorized)
from allocator.utils.validate_actions import validate_amount, validate_deposit

logger = logging.getLogger(__name__)


@dataclass
class AllocatorVaultGlobalState(GlobalState):
    deposits: int = 0
    rebalance: bool = False


def synchronized(method):
    @functools.wraps(method)
    def wrapper(self, *args, **kwargs):
        with self._lock:
            return method(self, *args, **kwargs)
    return wrapper


class AllocatorVault(BaseEntity):
    """
    Allocates deposited capital across two verified pools and rebalances it toward the target weights.

    One instance is one logical allocator. Every public operation runs under a
    single lock, so operations never interleave. Administrative operations take
    the calling principal explicitly and reject anyone but the configured owner.
    """

    def __init__(self, pools: Dict[str, PoolService], custody: Custody, config: Optional[AllocatorConfig] = None):
        self._config = config or AllocatorConfig()
        missing = [pool_id for pool_id in self._config.pool_ids if pool_id not in pools]
        if missing:
            raise ConfigurationError(f"No pool service for verified pools {missing}")

        self._lock = threading.RLock()
        self._events = EventLog()
        self._custody = custody
        self._pools = {pool_id: pools[pool_id] for pool_id in self._config.pool_ids}
        self._weights = WeightPolicy(*self._config.initial_weights, events=self._events)
        self._registry = PoolRegistry(self._config.pool_ids, events=self._events)
        self._ledger = LiquidityLedger(self._registry)
        self._engine = AllocationEngine(self._config.pool_ids)
        self._executor = RebalanceExecutor(
            self._engine, self._ledger, self._pools,
            events=self._events, use_one_asset_withdrawal=self._config.use_one_asset_withdrawal)
        super().__init__()

    def _initialize_states(self):
        self._global_state: AllocatorVaultGlobalState = AllocatorVaultGlobalState()
        self._internal_state: LiquidityLedgerInternalState = self._ledger.internal_state

    def _check_owner(self, caller: str) -> None:
        if caller != self._config.owner:
            raise Unauthorized(f"{caller} is not the owner of the allocator")

    # administrative surface

    @synchronized
    def set_weights(self, caller: str, weight_a: int, weight_b: int) -> None:
        self._check_owner(caller)
        self._weights.set_weights(weight_a, weight_b)

    @synchronized
    def whitelist_pools(self, caller: str, pool_ids: Iterable[str]) -> None:
        self._check_owner(caller)
        self._registry.whitelist_pools(pool_ids)

    @synchronized
    def recover_stranded(self, caller: str) -> List[StrandedFundsAfterPartialRebalance]:
        self._check_owner(caller)
        return self._executor.recover()

    # public surface

    @synchronized
    def add_liquidity(self, caller: str, pool_id: str, amount: int) -> None:
        if not self._registry.is_verified(pool_id):
            raise InvalidPool(f"Pool {pool_id} is not one of the verified pools {self._registry.verified_pools}")
        feedback = validate_amount(amount)
        if not feedback.passed:
            raise InvalidAmount(feedback.feedback)
        feedback = validate_deposit(
            amount, self._custody.balance_of(caller), self._custody.allowance(caller, self._config.address))
        if not feedback.passed:
            raise InsufficientFunds(feedback.feedback)

        try:
            self._custody.transfer_from(caller, self._config.address, amount)
        except CustodyException as exc:
            raise InsufficientFunds(f"Transfer of {amount} from {caller} failed: {exc}") from exc

        try:
            self._pools[pool_id].deposit(amount)
        except PoolServiceException as exc:
            # hand the funds back before surfacing the failure
            self._custody.transfer(self._config.address, caller, amount)
            raise DepositFailed(f"Deposit of {amount} into {pool_id} failed: {exc}") from exc

        self._ledger.credit(pool_id, amount)
        logger.info("Deposit: %s, pool: %s, amount: %s", caller, pool_id, amount)
        self._events.emit(Deposited(caller=caller, pool_id=pool_id, amount=amount))

    @synchronized
    def rebalance(self) -> List[TransferInstruction]:
        return self._executor.rebalance(self._weights.get_weights())

    @synchronized
    def get_weights(self) -> Tuple[int, int]:
        return self._weights.get_weights()

    @synchronized
    def get_ledger_balance(self, pool_id: str) -> int:
        return self._ledger.balance_of(pool_id)

    @synchronized
    def get_allocation(self) -> Tuple[int, int]:
        return self._engine.current_allocation(*self._ledger.balances())

    # fractal entity actions

    def action_add_liquidity(self, caller: str, pool_id: str, amount: int) -> None:
        self.add_liquidity(caller, pool_id, amount)

    def action_deposit(self, amount: int, pool_id: Optional[str] = None, caller: Optional[str] = None) -> None:
        self.add_liquidity(caller or self._config.owner, pool_id or self._config.pool_ids[0], amount)

    def action_withdraw(self, amount: int) -> None:
        raise AllocatorEntityException("Withdrawals are not supported by the allocator")

    def action_rebalance(self) -> List[TransferInstruction]:
        return self.rebalance()

    def action_set_weights(self, caller: str, weight_a: int, weight_b: int) -> None:
        self.set_weights(caller, weight_a, weight_b)

    def action_whitelist_pools(self, caller: str, pool_ids: List[str]) -> None:
        self.whitelist_pools(caller, pool_ids)

    def action_recover_stranded(self, caller: str) -> List[StrandedFundsAfterPartialRebalance]:
        return self.recover_stranded(caller)

    def update_state(self, state: AllocatorVaultGlobalState):
        if state.deposits < 0:
            raise AllocatorEntityException("Deposits must be greater than 0")

        self._global_state = state

    @property
    def balance(self) -> float:
        return float(self._ledger.total)

    @property
    def total_liquidity(self) -> int:
        return self._ledger.total

    @property
    def owner(self) -> str:
        return self._config.owner

    @property
    def address(self) -> str:
        return self._config.address

    @property
    def pool_ids(self) -> Tuple[str, str]:
        return self._config.pool_ids

    @property
    def whitelisted_pools(self) -> Tuple[str, ...]:
        return self._registry.whitelisted_pools

    @property
    def stranded(self) -> List[StrandedFundsAfterPartialRebalance]:
        return self._executor.stranded

    @property
    def events(self) -> List[Event]:
        return self._events.events
