"""Tests for shipment status updates and their order sync."""

import pytest

from app.constants.order_status import OrderStatus, ShipmentStatus
from app.errors import InvalidStatusTransition
from app.models.order import Order
from app.schemas.checkout_schemas import ShippingDetails
from app.services.checkout_service import checkout_cart
from app.services.order_service import update_order_status
from app.services.shipment_service import (
    get_shipment_for_order,
    sync_shipment_with_order,
    update_shipment_status,
)


@pytest.fixture
def placed(session, user, make_product, add_to_cart):
    add_to_cart(user, make_product(stock=5), 1)
    result = checkout_cart(
        session,
        user_id=user.id,
        shipping=ShippingDetails(address="Calle 1", city="Cuenca"),
    )
    order = session.get(Order, result.order_id)
    return order, get_shipment_for_order(session, order.id)


class TestShipmentDrivesOrder:
    def test_shipped_walks_order_forward(self, session, placed):
        order, shipment = placed

        update_shipment_status(session, shipment, ShipmentStatus.shipped)

        session.refresh(order)
        assert order.status == OrderStatus.shipped

    def test_delivered_completes_order(self, session, placed):
        order, shipment = placed
        update_shipment_status(session, shipment, ShipmentStatus.shipped)
        update_shipment_status(session, shipment, ShipmentStatus.in_transit)
        update_shipment_status(session, shipment, ShipmentStatus.delivered)

        session.refresh(order)
        assert order.status == OrderStatus.delivered

    def test_in_transit_does_not_touch_order(self, session, placed):
        order, shipment = placed
        update_shipment_status(session, shipment, ShipmentStatus.shipped)
        update_shipment_status(session, shipment, ShipmentStatus.in_transit)

        session.refresh(order)
        assert order.status == OrderStatus.shipped

    def test_cancelled_order_is_left_alone(self, session, placed):
        order, shipment = placed
        update_order_status(session, order, OrderStatus.cancelled)

        update_shipment_status(session, shipment, ShipmentStatus.shipped)

        session.refresh(order)
        assert order.status == OrderStatus.cancelled

    def test_invalid_shipment_move(self, session, placed):
        _, shipment = placed
        with pytest.raises(InvalidStatusTransition):
            update_shipment_status(session, shipment, ShipmentStatus.delivered)


class TestOrderDrivesShipment:
    def test_order_shipped_ships_shipment(self, session, placed):
        order, shipment = placed
        order = update_order_status(session, order, OrderStatus.processing)
        order = update_order_status(session, order, OrderStatus.shipped)

        sync_shipment_with_order(session, order)

        session.refresh(shipment)
        assert shipment.status == ShipmentStatus.shipped

    def test_processing_needs_no_sync(self, session, placed):
        order, shipment = placed
        order = update_order_status(session, order, OrderStatus.processing)

        assert sync_shipment_with_order(session, order) is None
        session.refresh(shipment)
        assert shipment.status == ShipmentStatus.processing
