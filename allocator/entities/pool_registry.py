import logging
from dataclasses import dataclass, field
from typing import Iterable, List, Optional, Tuple

from fractal.core.base.entity import InternalState

from allocator.events import EventLog, PoolWhitelisted
from allocator.exceptions import DuplicatePool, InvalidPool
from allocator.utils.validate_actions import validate_pool_ids

logger = logging.getLogger(__name__)


@dataclass
class PoolRegistryInternalState(InternalState):
    verified_pools: Tuple[str, ...] = ()
    whitelisted_pools: List[str] = field(default_factory=list)


class PoolRegistry:
    """
    The two verified pools, fixed at construction, and the admin-maintained whitelist.

    Whitelisting fails fast: the first duplicate raises ``DuplicatePool`` and
    the pools added before it in the same call stay whitelisted.
    """

    def __init__(self, verified_pools: Iterable[str], events: Optional[EventLog] = None):
        verified_pools = tuple(verified_pools)
        feedback = validate_pool_ids(verified_pools)
        if not feedback.passed:
            raise InvalidPool(feedback.feedback)
        self._state = PoolRegistryInternalState(verified_pools=verified_pools)
        self._events = events

    def whitelist_pools(self, pool_ids: Iterable[str]) -> None:
        if isinstance(pool_ids, str):
            raise InvalidPool(f"Pool identifiers should be given as a list, got the string {pool_ids!r}")
        for pool_id in pool_ids:
            self.add_if_absent(pool_id)

    def add_if_absent(self, pool_id: str) -> None:
        if not isinstance(pool_id, str) or not pool_id:
            raise InvalidPool(f"The pool identifier ({pool_id!r}) should be a non-empty string.")
        if pool_id in self._state.whitelisted_pools:
            raise DuplicatePool(f"Pool {pool_id} is already whitelisted")

        self._state.whitelisted_pools.append(pool_id)
        logger.info("Pool %s whitelisted", pool_id)
        if self._events is not None:
            self._events.emit(PoolWhitelisted(pool_id=pool_id))

    def is_verified(self, pool_id: str) -> bool:
        return pool_id in self._state.verified_pools

    def is_whitelisted(self, pool_id: str) -> bool:
        return pool_id in self._state.whitelisted_pools

    @property
    def verified_pools(self) -> Tuple[str, ...]:
        return self._state.verified_pools

    @property
    def whitelisted_pools(self) -> Tuple[str, ...]:
        return tuple(self._state.whitelisted_pools)

    @property
    def internal_state(self) -> PoolRegistryInternalState:
        return self._state
