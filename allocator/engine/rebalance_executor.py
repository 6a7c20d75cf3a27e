import logging
from typing import Dict, List, Optional, Protocol, Tuple

from allocator.engine.allocation_engine import AllocationEngine, TransferInstruction
from allocator.entities.liquidity_ledger import LiquidityLedger
from allocator.events import EventLog, Rebalanced
from allocator.exceptions import (
    DepositFailed, InsufficientLiquidity, PoolServiceException, StrandedFundsAfterPartialRebalance, WithdrawalFailed)

logger = logging.getLogger(__name__)


class PoolService(Protocol):
    def deposit(self, amount: int) -> int: ...

    def withdraw(self, amount: int) -> int: ...

    def withdraw_one_asset(self, tokens: int) -> int: ...


class RebalanceExecutor:
    """
    Moves the excess computed by the allocation engine between the pool services.

    The ledger is only updated after both the withdrawal and the deposit have
    succeeded. Funds withdrawn but not re-deposited are reported through
    ``StrandedFundsAfterPartialRebalance`` and kept in ``stranded``. No further
    rebalance runs until ``recover`` has resolved them.
    """

    def __init__(self, engine: AllocationEngine, ledger: LiquidityLedger, pools: Dict[str, PoolService],
                 events: Optional[EventLog] = None, use_one_asset_withdrawal: bool = True):
        self._engine = engine
        self._ledger = ledger
        self._pools = pools
        self._events = events
        self._use_one_asset_withdrawal = use_one_asset_withdrawal
        self._stranded: List[StrandedFundsAfterPartialRebalance] = []
        self._surplus = 0

    def rebalance(self, weights: Tuple[int, int]) -> List[TransferInstruction]:
        self._check_stranded()
        instructions = self._engine.compute(self._ledger.balances(), weights)
        for instruction in instructions:
            self.execute(instruction)
        return instructions

    def execute(self, instruction: TransferInstruction) -> None:
        self._check_stranded()
        amount = instruction.amount
        from_pool, to_pool = instruction.from_pool, instruction.to_pool
        if amount > self._ledger.balance_of(from_pool):
            raise InsufficientLiquidity(
                f"The transfer amount ({amount}) of {from_pool} cannot exceed the balance ({self._ledger.balance_of(from_pool)})")

        try:
            if self._use_one_asset_withdrawal:
                # pool tokens are valued 1:1 against the underlying
                withdrawn = self._pools[from_pool].withdraw_one_asset(amount)
            else:
                withdrawn = self._pools[from_pool].withdraw(amount)
        except PoolServiceException as exc:
            raise WithdrawalFailed(f"Withdrawal of {amount} from {from_pool} failed: {exc}") from exc

        if withdrawn < amount:
            self._strand(
                f"Withdrawal of {amount} from {from_pool} returned {withdrawn}", withdrawn, amount, from_pool, to_pool)
        if withdrawn > amount:
            # only the instructed amount is forwarded, the rest stays with the allocator
            self._surplus += withdrawn - amount
            logger.warning("Withdrawal of %s from %s returned %s, surplus: %s", amount, from_pool, withdrawn, self._surplus)

        try:
            self._pools[to_pool].deposit(amount)
        except PoolServiceException as exc:
            self._strand(f"Deposit of {amount} into {to_pool} failed: {exc}", amount, amount, from_pool, to_pool, exc)

        self._ledger.transfer(from_pool, to_pool, amount)
        logger.info("Rebalanced %s from %s to %s, balances: %s", amount, from_pool, to_pool, self._ledger.balances())
        if self._events is not None:
            self._events.emit(Rebalanced(amount=amount, from_pool=from_pool, to_pool=to_pool))

    def recover(self) -> List[StrandedFundsAfterPartialRebalance]:
        """
        Deposit stranded funds into the pool they were headed for and settle the ledger.

        Whatever the source pool failed to return is written off its ledger
        balance. A record is cleared only once its deposit succeeded.

        Returns:
            List[StrandedFundsAfterPartialRebalance]: The records that were resolved
        """
        recovered = []
        while self._stranded:
            stranded = self._stranded[0]
            if stranded.amount > 0:
                try:
                    self._pools[stranded.to_pool].deposit(stranded.amount)
                except PoolServiceException as exc:
                    raise DepositFailed(
                        f"Recovery deposit of {stranded.amount} into {stranded.to_pool} failed: {exc}") from exc
                self._ledger.transfer(stranded.from_pool, stranded.to_pool, stranded.amount)
            shortfall = stranded.requested - stranded.amount
            if shortfall > 0:
                self._ledger.write_off(stranded.from_pool, shortfall)

            self._stranded.pop(0)
            recovered.append(stranded)
            logger.info("Recovered %s from %s to %s, balances: %s",
                        stranded.amount, stranded.from_pool, stranded.to_pool, self._ledger.balances())
            if stranded.amount > 0 and self._events is not None:
                self._events.emit(Rebalanced(amount=stranded.amount, from_pool=stranded.from_pool, to_pool=stranded.to_pool))
        return recovered

    def _check_stranded(self) -> None:
        if not self._stranded:
            return
        stranded = self._stranded[0]
        raise StrandedFundsAfterPartialRebalance(
            f"{stranded.amount} withdrawn from {stranded.from_pool} for {stranded.to_pool} is still unresolved",
            stranded.amount, stranded.from_pool, stranded.to_pool, stranded.requested)

    def _strand(self, message: str, amount: int, requested: int, from_pool: str, to_pool: str,
                cause: Optional[Exception] = None):
        stranded = StrandedFundsAfterPartialRebalance(message, amount, from_pool, to_pool, requested)
        self._stranded.append(stranded)
        logger.error("Stranded funds after partial rebalance: %s", message)
        raise stranded from cause

    @property
    def stranded(self) -> List[StrandedFundsAfterPartialRebalance]:
        return list(self._stranded)

    @property
    def surplus(self) -> int:
        return self._surplus
