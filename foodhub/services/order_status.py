"""
FoodHub Backend - Order Status Machine
=======================================

What:  The single definition of order states, terminal states and legal
       transitions, plus the checks every status change goes through.
Who:   OrderService.set_order_status (provider) and OrderService.cancel_order
       (customer) both consult this machine.

State diagram:

    placed ──▶ preparing ──▶ ready ──▶ delivered
       │
       └──▶ cancelled

    delivered and cancelled are terminal. No self-loops.

Actors:
    - Provider: may request only preparing, ready, delivered.
    - Customer: may only cancel, and only while the order is `placed`.
"""

from typing import Dict, FrozenSet, Union

from foodhub.exceptions import InvalidCancellationError, InvalidTransitionError
from foodhub.models.order import OrderStatus

StatusLike = Union[OrderStatus, str]


class OrderStatusMachine:
    """Finite-state machine over OrderStatus."""

    TRANSITIONS: Dict[OrderStatus, FrozenSet[OrderStatus]] = {
        OrderStatus.PLACED: frozenset({OrderStatus.PREPARING, OrderStatus.CANCELLED}),
        OrderStatus.PREPARING: frozenset({OrderStatus.READY}),
        OrderStatus.READY: frozenset({OrderStatus.DELIVERED}),
        OrderStatus.DELIVERED: frozenset(),
        OrderStatus.CANCELLED: frozenset(),
    }

    TERMINAL: FrozenSet[OrderStatus] = frozenset(
        status for status, targets in TRANSITIONS.items() if not targets
    )

    # Targets a provider may request through set_order_status
    PROVIDER_TARGETS: FrozenSet[OrderStatus] = frozenset(
        {OrderStatus.PREPARING, OrderStatus.READY, OrderStatus.DELIVERED}
    )

    def allowed_targets(self, current: StatusLike) -> FrozenSet[OrderStatus]:
        return self.TRANSITIONS[OrderStatus(current)]

    def is_terminal(self, status: StatusLike) -> bool:
        return OrderStatus(status) in self.TERMINAL

    def can_transition(self, current: StatusLike, requested: StatusLike) -> bool:
        return OrderStatus(requested) in self.allowed_targets(current)

    def ensure_transition(self, current: StatusLike, requested: StatusLike) -> OrderStatus:
        """
        Validate a general transition and return the target status.

        Raises:
            InvalidTransitionError: `requested` is not in the allowed set of
                `current` (message names both statuses).
        """
        current_status = OrderStatus(current)
        requested_status = OrderStatus(requested)
        if requested_status not in self.TRANSITIONS[current_status]:
            raise InvalidTransitionError(current_status.value, requested_status.value)
        return requested_status

    def ensure_provider_transition(
        self, current: StatusLike, requested: StatusLike
    ) -> OrderStatus:
        """Provider-facing transition: cancellation is never a provider target."""
        if OrderStatus(requested) not in self.PROVIDER_TARGETS:
            raise InvalidTransitionError(OrderStatus(current).value, OrderStatus(requested).value)
        return self.ensure_transition(current, requested)

    def ensure_cancellable(self, current: StatusLike) -> OrderStatus:
        """
        Customer-facing cancellation.

        Raises:
            InvalidCancellationError: the order is not `placed`.
        """
        current_status = OrderStatus(current)
        if current_status is not OrderStatus.PLACED:
            raise InvalidCancellationError(current_status.value)
        return OrderStatus.CANCELLED


order_status_machine = OrderStatusMachine()
