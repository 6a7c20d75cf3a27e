"""
Allocation Engine Module

Derives the ideal split of the ledger capital from the target weights and the
transfer needed to converge to it. All arithmetic is integer and truncating,
so the ideal amounts always add up to the ledger total.
"""
import logging
from typing import List, Tuple

from pydantic import BaseModel, Field

from allocator.constants import WEIGHT_SCALE
from allocator.utils.precision import share_of

logger = logging.getLogger(__name__)


class TransferInstruction(BaseModel):
    from_pool: str = Field(description="Over-allocated pool the excess is withdrawn from.")
    to_pool: str = Field(description="Under-allocated pool the excess is deposited into.")
    amount: int = Field(gt=0, description="Amount of the underlying asset to move.")

    model_config = {"frozen": True}


class AllocationEngine:
    """
    Rebalance decisions for a pair of pools.

    Pool A is the first of ``pool_ids``. Weights are ``(weight_a, weight_b)``
    in whole percent.
    """

    def __init__(self, pool_ids: Tuple[str, str]):
        self._pool_a, self._pool_b = pool_ids

    def ideal_allocation(self, total: int, weights: Tuple[int, int]) -> Tuple[int, int]:
        # pool B takes the remainder so no unit is lost to rounding
        ideal_a = share_of(total, weights[0])
        return ideal_a, total - ideal_a

    def current_allocation(self, balance_a: int, balance_b: int) -> Tuple[int, int]:
        total = balance_a + balance_b
        if total == 0:
            return 0, 0
        pct_a = balance_a * WEIGHT_SCALE // total
        return pct_a, WEIGHT_SCALE - pct_a

    def excess(self, balance_a: int, balance_b: int, weights: Tuple[int, int]) -> Tuple[int, int]:
        ideal_a, ideal_b = self.ideal_allocation(balance_a + balance_b, weights)
        return balance_a - ideal_a, balance_b - ideal_b

    def compute(self, balances: Tuple[int, int], weights: Tuple[int, int]) -> List[TransferInstruction]:
        """
        Compute the transfers that bring ``balances`` to the target weights.

        Args:
            balances (Tuple[int, int]): Ledger capital of pool A and pool B
            weights (Tuple[int, int]): Target weights of pool A and pool B

        Returns:
            List[TransferInstruction]: Empty when nothing is deposited or the pools are
                already balanced, otherwise a single transfer out of the over-allocated pool.
        """
        balance_a, balance_b = balances
        total = balance_a + balance_b
        if total == 0:
            logger.debug("Nothing to rebalance, ledger is empty")
            return []

        ideal_a, ideal_b = self.ideal_allocation(total, weights)
        if balance_a > ideal_a:
            instruction = TransferInstruction(from_pool=self._pool_a, to_pool=self._pool_b, amount=balance_a - ideal_a)
        elif balance_b > ideal_b:
            instruction = TransferInstruction(from_pool=self._pool_b, to_pool=self._pool_a, amount=balance_b - ideal_b)
        else:
            logger.debug("Already balanced, balances: %s, weights: %s", balances, weights)
            return []

        logger.debug("Instruction: %s, balances: %s, ideal: %s", instruction, balances, (ideal_a, ideal_b))
        return [instruction]
