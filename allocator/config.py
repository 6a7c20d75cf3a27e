from dataclasses import dataclass, field
from typing import Tuple

from allocator.constants import ALLOCATOR_ADDRESS, DEFAULT_OWNER, DEFAULT_WEIGHTS, POOL_NAMES
from allocator.exceptions import ConfigurationError
from allocator.utils.validate_actions import validate_pool_ids, validate_weights


@dataclass
class AllocatorConfig:
    """
    Configuration of a single allocator instance.

    Attributes:
        owner (str): Principal allowed to call the administrative operations
        pool_ids (Tuple[str, str]): The two verified pools, pool A first
        initial_weights (Tuple[int, int]): Target weights of pool A and pool B at construction
        use_one_asset_withdrawal (bool): Withdraw from pools in single-asset mode during rebalances
        address (str): Custody address holding the allocator's funds
    """
    owner: str = DEFAULT_OWNER
    pool_ids: Tuple[str, str] = field(default_factory=lambda: tuple(POOL_NAMES))
    initial_weights: Tuple[int, int] = DEFAULT_WEIGHTS
    use_one_asset_withdrawal: bool = True
    address: str = ALLOCATOR_ADDRESS

    def __post_init__(self):
        self.pool_ids = tuple(self.pool_ids)
        self.initial_weights = tuple(self.initial_weights)
        if not self.owner:
            raise ConfigurationError("Owner must be set")
        if not self.address:
            raise ConfigurationError("Allocator address must be set")
        feedback = validate_pool_ids(self.pool_ids)
        if not feedback.passed:
            raise ConfigurationError(feedback.feedback)
        if len(self.initial_weights) != 2:
            raise ConfigurationError("Initial weights must be a pair")
        feedback = validate_weights(*self.initial_weights)
        if not feedback.passed:
            raise ConfigurationError(feedback.feedback)
