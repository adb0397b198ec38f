"""Tests for the order and shipment state machines."""

import pytest

from app.constants.order_status import (
    ALLOWED_TRANSITIONS,
    OrderStatus,
    ShipmentStatus,
    TERMINAL_ORDER_STATUSES,
    can_transition,
    can_transition_shipment,
    ensure_shipment_transition,
    ensure_transition,
)
from app.errors import InvalidStatusTransition


class TestOrderTransitions:
    def test_forward_chain(self):
        chain = [
            OrderStatus.pending,
            OrderStatus.confirmed,
            OrderStatus.processing,
            OrderStatus.shipped,
            OrderStatus.delivered,
        ]
        for current, target in zip(chain, chain[1:]):
            assert can_transition(current, target)

    @pytest.mark.parametrize("status", [s for s in OrderStatus if s not in TERMINAL_ORDER_STATUSES])
    def test_cancel_from_non_terminal(self, status):
        assert can_transition(status, OrderStatus.cancelled)

    @pytest.mark.parametrize("status", sorted(TERMINAL_ORDER_STATUSES))
    def test_terminal_states_are_final(self, status):
        assert ALLOWED_TRANSITIONS[status] == []
        for target in OrderStatus:
            assert not can_transition(status, target)

    def test_no_skipping(self):
        assert not can_transition(OrderStatus.confirmed, OrderStatus.shipped)
        assert not can_transition(OrderStatus.shipped, OrderStatus.processing)

    def test_accepts_plain_strings(self):
        assert can_transition("confirmed", "processing")

    def test_ensure_transition_returns_target(self):
        assert ensure_transition("pending", "confirmed") is OrderStatus.confirmed

    def test_ensure_transition_raises(self):
        with pytest.raises(InvalidStatusTransition) as exc_info:
            ensure_transition(OrderStatus.delivered, OrderStatus.cancelled)
        assert exc_info.value.entity == "order"
        assert exc_info.value.current == "delivered"
        assert exc_info.value.target == "cancelled"

    def test_unknown_status_rejected(self):
        with pytest.raises(ValueError):
            can_transition("confirmed", "paid")


class TestShipmentTransitions:
    def test_forward_chain(self):
        assert can_transition_shipment(ShipmentStatus.processing, ShipmentStatus.shipped)
        assert can_transition_shipment(ShipmentStatus.shipped, ShipmentStatus.in_transit)
        assert can_transition_shipment(ShipmentStatus.in_transit, ShipmentStatus.delivered)

    @pytest.mark.parametrize(
        "status",
        [ShipmentStatus.shipped, ShipmentStatus.in_transit, ShipmentStatus.delivered],
    )
    def test_returned_reachable(self, status):
        assert can_transition_shipment(status, ShipmentStatus.returned)

    def test_returned_is_final(self):
        with pytest.raises(InvalidStatusTransition):
            ensure_shipment_transition(ShipmentStatus.returned, ShipmentStatus.shipped)

    def test_cannot_return_before_shipping(self):
        assert not can_transition_shipment(ShipmentStatus.processing, ShipmentStatus.returned)
