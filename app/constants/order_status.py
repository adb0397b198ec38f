from enum import Enum


class OrderStatus(str, Enum):
    pending = "pending"
    confirmed = "confirmed"
    processing = "processing"
    shipped = "shipped"
    delivered = "delivered"
    cancelled = "cancelled"


class ShipmentStatus(str, Enum):
    pending = "pending"
    processing = "processing"
    shipped = "shipped"
    in_transit = "in_transit"
    delivered = "delivered"
    returned = "returned"


class PaymentStatus(str, Enum):
    pending = "pending"
    completed = "completed"
    failed = "failed"
    refunded = "refunded"


class InvoiceStatus(str, Enum):
    issued = "issued"
    paid = "paid"
    void = "void"


class ReservationStatus(str, Enum):
    reserved = "reserved"
    released = "released"
    committed = "committed"


ALLOWED_TRANSITIONS = {
    OrderStatus.pending: [OrderStatus.confirmed, OrderStatus.cancelled],
    OrderStatus.confirmed: [OrderStatus.processing, OrderStatus.cancelled],
    OrderStatus.processing: [OrderStatus.shipped, OrderStatus.cancelled],
    OrderStatus.shipped: [OrderStatus.delivered, OrderStatus.cancelled],
    OrderStatus.delivered: [],
    OrderStatus.cancelled: [],
}

SHIPMENT_TRANSITIONS = {
    ShipmentStatus.pending: [ShipmentStatus.processing],
    ShipmentStatus.processing: [ShipmentStatus.shipped],
    ShipmentStatus.shipped: [ShipmentStatus.in_transit, ShipmentStatus.delivered, ShipmentStatus.returned],
    ShipmentStatus.in_transit: [ShipmentStatus.delivered, ShipmentStatus.returned],
    ShipmentStatus.delivered: [ShipmentStatus.returned],
    ShipmentStatus.returned: [],
}

TERMINAL_ORDER_STATUSES = {OrderStatus.delivered, OrderStatus.cancelled}

# shipment status -> order status it pulls the order towards
SHIPMENT_TO_ORDER_STATUS = {
    ShipmentStatus.shipped: OrderStatus.shipped,
    ShipmentStatus.delivered: OrderStatus.delivered,
}


def can_transition(current, target) -> bool:
    """Order status move check; a no-op move is not a transition."""
    current, target = OrderStatus(current), OrderStatus(target)
    return target in ALLOWED_TRANSITIONS[current]


def ensure_transition(current, target) -> OrderStatus:
    from app.errors import InvalidStatusTransition

    if not can_transition(current, target):
        raise InvalidStatusTransition("order", OrderStatus(current).value, OrderStatus(target).value)
    return OrderStatus(target)


def can_transition_shipment(current, target) -> bool:
    current, target = ShipmentStatus(current), ShipmentStatus(target)
    return target in SHIPMENT_TRANSITIONS[current]


def ensure_shipment_transition(current, target) -> ShipmentStatus:
    from app.errors import InvalidStatusTransition

    if not can_transition_shipment(current, target):
        raise InvalidStatusTransition("shipment", ShipmentStatus(current).value, ShipmentStatus(target).value)
    return ShipmentStatus(target)
