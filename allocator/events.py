import logging
from typing import List, Literal, Union

from pydantic import BaseModel, Field

logger = logging.getLogger(__name__)


class WeightsChanged(BaseModel):
    kind: Literal['weights_changed'] = 'weights_changed'
    weight_a: int = Field(description="New target weight of pool A, in percent.")
    weight_b: int = Field(description="New target weight of pool B, in percent.")

    model_config = {"frozen": True}


class PoolWhitelisted(BaseModel):
    kind: Literal['pool_whitelisted'] = 'pool_whitelisted'
    pool_id: str = Field(description="Identifier of the pool added to the whitelist.")

    model_config = {"frozen": True}


class Deposited(BaseModel):
    kind: Literal['deposited'] = 'deposited'
    caller: str = Field(description="Principal that provided the underlying asset.")
    pool_id: str = Field(description="Verified pool the capital was attributed to.")
    amount: int = Field(gt=0, description="Deposited amount of the underlying asset.")

    model_config = {"frozen": True}


class Rebalanced(BaseModel):
    kind: Literal['rebalanced'] = 'rebalanced'
    amount: int = Field(gt=0, description="Amount of capital moved between the pools.")
    from_pool: str = Field(description="Over-allocated pool the capital was withdrawn from.")
    to_pool: str = Field(description="Under-allocated pool the capital was deposited into.")

    model_config = {"frozen": True}


Event = Union[WeightsChanged, PoolWhitelisted, Deposited, Rebalanced]


class EventLog:
    """
    Ordered in-memory record of the notifications emitted by an allocator.
    """

    def __init__(self):
        self._events: List[Event] = []

    def emit(self, event: Event) -> None:
        self._events.append(event)
        logger.info("Event: %s, %s", event.kind, event.model_dump(exclude={'kind'}))

    @property
    def events(self) -> List[Event]:
        return list(self._events)

    def of_kind(self, kind: str) -> List[Event]:
        return [event for event in self._events if event.kind == kind]

    def __len__(self) -> int:
        return len(self._events)
