"""
Rebalance Strategy Module

This module replays a simulated deposit flow against an allocator backed by two
simulated pools, rebalancing the pools toward the target weights on a fixed window.
"""
from dataclasses import dataclass
from typing import List
from fractal.core.base import (
    BaseStrategy, Action, BaseStrategyParams,
    ActionToTake, NamedEntity)
from fractal.core.base.observations import ObservationsStorage, SQLiteObservationsStorage
from allocator.config import AllocatorConfig
from allocator.constants import ALLOCATOR_ADDRESS, ALLOCATOR_NAME, DEFAULT_OWNER, POOL_NAMES, SUSD_POOL
from allocator.custody import InMemoryCustody
from allocator.entities.allocator_vault import AllocatorVault, AllocatorVaultGlobalState
from back_test.build_observations import build_observations
from back_test.entities.simulated_pool import SimulatedPool

DEPOSITOR = 'depositor'

@dataclass
class RebalanceStrategyParams(BaseStrategyParams):
    """
    Parameters for configuring the RebalanceStrategy.

    Attributes:
        INIT_BALANCE (int): Initial deposit, in units of the underlying asset (default: 100_000_000_000)
        WEIGHT_A (int): Target weight of the first pool, in percent (default: 50)
        WEIGHT_B (int): Target weight of the second pool, in percent (default: 50)
        WINDOW_SIZE (int): Number of observations between two rebalances (default: 7)
        DEPOSIT_POOL (str): Pool that receives the simulated deposits (default: 'susd')
    """
    INIT_BALANCE: int = 100_000_000_000
    WEIGHT_A: int = 50
    WEIGHT_B: int = 50
    WINDOW_SIZE: int = 7
    DEPOSIT_POOL: str = SUSD_POOL

class RebalanceStrategy(BaseStrategy):
    """
    Strategy implementation that deposits the observed inflows into one pool and
    periodically rebalances the allocator toward its target weights.
    """
    def __init__(self, debug: bool = False, params: RebalanceStrategyParams | None = None,
                 observations_storage: ObservationsStorage | None = None):
        """
        Initialize the RebalanceStrategy.

        Args:
            debug (bool): Enable debug mode
            params (RebalanceStrategyParams | None): Strategy parameters
            observations_storage (ObservationsStorage | None): Storage for observations
        """
        self._params: RebalanceStrategyParams = None  # set for type hinting
        super().__init__(params=params, debug=debug, observations_storage=observations_storage)
        self._window_size = params.WINDOW_SIZE

    def set_up(self):
        """
        Set up the initial state of the strategy by:
        1. Registering the simulated pools and the allocator
        2. Depositing the initial balance into the deposit pool
        """
        self._custody = InMemoryCustody()
        pools = {pool_name: SimulatedPool(pool_name, custody=self._custody, holder=ALLOCATOR_ADDRESS)
                 for pool_name in POOL_NAMES}
        for pool_name, pool in pools.items():
            self.register_entity(NamedEntity(entity_name=pool_name, entity=pool))
        config = AllocatorConfig(
            owner=DEFAULT_OWNER,
            pool_ids=tuple(POOL_NAMES),
            initial_weights=(self._params.WEIGHT_A, self._params.WEIGHT_B),
            address=ALLOCATOR_ADDRESS,
        )
        self.register_entity(NamedEntity(entity_name=ALLOCATOR_NAME, entity=AllocatorVault(pools, self._custody, config)))

        if self._params.INIT_BALANCE > 0:
            self._fund_depositor(self._params.INIT_BALANCE)
            allocator: AllocatorVault = self.get_entity(ALLOCATOR_NAME)
            allocator.add_liquidity(DEPOSITOR, self._params.DEPOSIT_POOL, self._params.INIT_BALANCE)

    def _fund_depositor(self, amount: int):
        self._custody.mint(DEPOSITOR, amount)
        self._custody.approve(DEPOSITOR, ALLOCATOR_ADDRESS, self._custody.allowance(DEPOSITOR, ALLOCATOR_ADDRESS) + amount)

    def _pools_available(self) -> bool:
        for pool_name in POOL_NAMES:
            state = self.get_entity(pool_name).global_state
            if not (state.deposits_enabled and state.withdrawals_enabled):
                return False
        return True

    def predict(self, *args, **kwargs) -> List[ActionToTake]:
        """
        Decide the allocator actions for the current observation.

        1. Deposit the observed inflow into the deposit pool
        2. Rebalance when the window elapses or the observation asks for it

        Returns:
            List[ActionToTake]: List of actions to take on the allocator
        """
        actions: List[ActionToTake] = []
        allocator: AllocatorVault = self.get_entity(ALLOCATOR_NAME)
        state: AllocatorVaultGlobalState = allocator.global_state

        if state.deposits > 0:
            if self.get_entity(self._params.DEPOSIT_POOL).global_state.deposits_enabled:
                self._fund_depositor(state.deposits)
                self._debug(f"Action: add_liquidity, pool: {self._params.DEPOSIT_POOL}, amount: {state.deposits}")
                actions.append(
                    ActionToTake(
                        entity_name=ALLOCATOR_NAME,
                        action=Action(
                            action="add_liquidity",
                            args={
                                'caller': DEPOSITOR,
                                'pool_id': self._params.DEPOSIT_POOL,
                                'amount': state.deposits,
                            }
                        )
                    )
                )
            else:
                self._debug(f"Action(Skipped): add_liquidity, pool: {self._params.DEPOSIT_POOL} is unavailable")

        if self._window_size > 0 and not state.rebalance:
            self._window_size -= 1
            return actions

        if self._pools_available():
            self._window_size = self._params.WINDOW_SIZE
            self._debug(f"Action: rebalance, allocation: {allocator.get_allocation()}")
            actions.append(ActionToTake(entity_name=ALLOCATOR_NAME, action=Action(action="rebalance", args={})))
        else:
            # retry on the next observation
            self._debug("Action(Skipped): rebalance, a pool is unavailable")

        return actions


if __name__ == "__main__":
    observations = build_observations()
    params: RebalanceStrategyParams = RebalanceStrategyParams()
    strategy = RebalanceStrategy(debug=True, params=params,
                                 observations_storage=SQLiteObservationsStorage())
    result = strategy.run(observations)
    print(result.get_default_metrics())  # show metrics
    result.to_dataframe().to_csv('result_rebalance.csv')  # save result to csv
