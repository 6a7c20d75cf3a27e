import logging
from dataclasses import dataclass
from typing import Optional, Tuple

from fractal.core.base.entity import InternalState

from allocator.constants import DEFAULT_WEIGHTS
from allocator.events import EventLog, WeightsChanged
from allocator.exceptions import InvalidWeights, NoOpUpdate
from allocator.utils.validate_actions import validate_weights

logger = logging.getLogger(__name__)


@dataclass
class WeightPolicyInternalState(InternalState):
    weight_a: int = DEFAULT_WEIGHTS[0]
    weight_b: int = DEFAULT_WEIGHTS[1]


class WeightPolicy:
    """
    Target allocation weights of pool A and pool B, in whole percent.
    """

    def __init__(self, weight_a: int = DEFAULT_WEIGHTS[0], weight_b: int = DEFAULT_WEIGHTS[1],
                 events: Optional[EventLog] = None):
        feedback = validate_weights(weight_a, weight_b)
        if not feedback.passed:
            raise InvalidWeights(feedback.feedback)
        self._state = WeightPolicyInternalState(weight_a=weight_a, weight_b=weight_b)
        self._events = events

    def set_weights(self, weight_a: int, weight_b: int) -> None:
        feedback = validate_weights(weight_a, weight_b)
        if not feedback.passed:
            raise InvalidWeights(feedback.feedback)
        # only an identical pair is a no-op
        if (weight_a, weight_b) == self.get_weights():
            raise NoOpUpdate(f"Weights are already set to ({weight_a}, {weight_b})")

        self._state = WeightPolicyInternalState(weight_a=weight_a, weight_b=weight_b)
        logger.info("Weights updated to (%s, %s)", weight_a, weight_b)
        if self._events is not None:
            self._events.emit(WeightsChanged(weight_a=weight_a, weight_b=weight_b))

    def get_weights(self) -> Tuple[int, int]:
        return self._state.weight_a, self._state.weight_b

    @property
    def internal_state(self) -> WeightPolicyInternalState:
        return self._state
