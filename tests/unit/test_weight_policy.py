"""Tests for the target weight policy."""

import pytest

from allocator.entities.weight_policy import WeightPolicy
from allocator.events import EventLog, WeightsChanged
from allocator.exceptions import InvalidWeights, NoOpUpdate


class TestWeightPolicy:
    def test_default_weights(self):
        assert WeightPolicy().get_weights() == (50, 50)

    @pytest.mark.parametrize("weights", [(0, 100), (1, 99), (30, 70), (70, 30), (100, 0)])
    def test_set_then_get_round_trip(self, weights):
        policy = WeightPolicy()
        policy.set_weights(*weights)
        assert policy.get_weights() == weights

    @pytest.mark.parametrize("weights", [(60, 50), (40, 50), (0, 0), (101, -1), (-10, 110)])
    def test_rejects_invalid_weights(self, weights):
        policy = WeightPolicy()
        with pytest.raises(InvalidWeights):
            policy.set_weights(*weights)
        assert policy.get_weights() == (50, 50)

    def test_rejects_non_integer_weights(self):
        with pytest.raises(InvalidWeights):
            WeightPolicy().set_weights(50.0, 50.0)

    def test_rejects_identical_weights(self):
        policy = WeightPolicy(70, 30)
        with pytest.raises(NoOpUpdate):
            policy.set_weights(70, 30)

    def test_swapped_weights_are_an_update(self):
        policy = WeightPolicy(70, 30)
        policy.set_weights(30, 70)
        assert policy.get_weights() == (30, 70)

    def test_invalid_initial_weights(self):
        with pytest.raises(InvalidWeights):
            WeightPolicy(60, 60)

    def test_emits_weights_changed(self):
        events = EventLog()
        policy = WeightPolicy(events=events)
        policy.set_weights(80, 20)
        assert events.events == [WeightsChanged(weight_a=80, weight_b=20)]

    def test_failed_update_emits_nothing(self):
        events = EventLog()
        policy = WeightPolicy(events=events)
        with pytest.raises(NoOpUpdate):
            policy.set_weights(50, 50)
        assert len(events) == 0
