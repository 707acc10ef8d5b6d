"""
FoodHub Backend - Order Status Machine Unit Tests
==================================================

What:  Tests for OrderStatusMachine (pure logic, no database).

What we test:
    ✅ Every legal transition is accepted
    ✅ Every other (current, requested) pair is rejected, status unchanged
    ✅ Terminal states accept nothing
    ✅ Providers can never request cancellation
    ✅ Customers may cancel only while placed
"""

import itertools

import pytest

from foodhub.exceptions import InvalidCancellationError, InvalidTransitionError
from foodhub.models.order import OrderStatus
from foodhub.services.order_status import OrderStatusMachine

LEGAL = {
    (OrderStatus.PLACED, OrderStatus.PREPARING),
    (OrderStatus.PLACED, OrderStatus.CANCELLED),
    (OrderStatus.PREPARING, OrderStatus.READY),
    (OrderStatus.READY, OrderStatus.DELIVERED),
}


class TestTransitionTable:

    def setup_method(self):
        self.machine = OrderStatusMachine()

    @pytest.mark.parametrize("current,requested", sorted(LEGAL))
    def test_legal_transitions_accepted(self, current, requested):
        assert self.machine.can_transition(current, requested)
        assert self.machine.ensure_transition(current, requested) is requested

    @pytest.mark.parametrize(
        "current,requested",
        [pair for pair in itertools.product(OrderStatus, repeat=2) if pair not in LEGAL],
    )
    def test_every_other_pair_rejected(self, current, requested):
        assert not self.machine.can_transition(current, requested)
        with pytest.raises(InvalidTransitionError) as exc_info:
            self.machine.ensure_transition(current, requested)
        assert exc_info.value.context == {
            "current": current.value,
            "requested": requested.value,
        }

    def test_terminal_states(self):
        assert self.machine.is_terminal(OrderStatus.DELIVERED)
        assert self.machine.is_terminal(OrderStatus.CANCELLED)
        assert not self.machine.is_terminal(OrderStatus.PLACED)
        assert self.machine.allowed_targets(OrderStatus.DELIVERED) == frozenset()

    def test_accepts_raw_string_values(self):
        """Statuses read from the database are plain strings."""
        assert self.machine.ensure_transition("preparing", "ready") is OrderStatus.READY

    def test_invalid_transition_message_names_both_states(self):
        with pytest.raises(InvalidTransitionError) as exc_info:
            self.machine.ensure_transition(OrderStatus.PLACED, OrderStatus.READY)
        assert "placed" in exc_info.value.message
        assert "ready" in exc_info.value.message


class TestActorRules:

    def setup_method(self):
        self.machine = OrderStatusMachine()

    def test_provider_cannot_cancel_even_from_placed(self):
        with pytest.raises(InvalidTransitionError):
            self.machine.ensure_provider_transition(OrderStatus.PLACED, OrderStatus.CANCELLED)

    def test_provider_forward_step(self):
        assert (
            self.machine.ensure_provider_transition(OrderStatus.PLACED, OrderStatus.PREPARING)
            is OrderStatus.PREPARING
        )

    def test_cancel_from_placed(self):
        assert self.machine.ensure_cancellable(OrderStatus.PLACED) is OrderStatus.CANCELLED

    @pytest.mark.parametrize(
        "current",
        [s for s in OrderStatus if s is not OrderStatus.PLACED],
    )
    def test_cancel_rejected_after_placed(self, current):
        with pytest.raises(InvalidCancellationError):
            self.machine.ensure_cancellable(current)
