import pytest

from allocator.config import AllocatorConfig
from allocator.constants import ALLOCATOR_ADDRESS, SUSD_POOL, Y_POOL
from allocator.custody import InMemoryCustody
from allocator.entities.allocator_vault import AllocatorVault
from back_test.entities.simulated_pool import SimulatedPool
from tests.constants import OWNER


@pytest.fixture
def custody() -> InMemoryCustody:
    return InMemoryCustody()


@pytest.fixture
def pools(custody) -> dict:
    return {
        SUSD_POOL: SimulatedPool(SUSD_POOL, custody=custody, holder=ALLOCATOR_ADDRESS),
        Y_POOL: SimulatedPool(Y_POOL, custody=custody, holder=ALLOCATOR_ADDRESS),
    }


@pytest.fixture
def vault(pools, custody) -> AllocatorVault:
    config = AllocatorConfig(owner=OWNER, pool_ids=(SUSD_POOL, Y_POOL), initial_weights=(50, 50))
    return AllocatorVault(pools, custody, config)


@pytest.fixture
def fund(custody):
    """Mint and approve the underlying asset for a depositor."""

    def _fund(owner: str, amount: int) -> None:
        custody.mint(owner, amount)
        custody.approve(owner, ALLOCATOR_ADDRESS, custody.allowance(owner, ALLOCATOR_ADDRESS) + amount)

    return _fund
